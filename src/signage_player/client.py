"""Client for the signage backend's RPC endpoints."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import requests  # type: ignore[import-untyped]
from requests import Response, Session

from .utils import logger, suppress_insecure_request_warning

PAIRED_STATUS = "paired"


class TransportError(RuntimeError):
    """Raised when the backend cannot be reached or answers with an error."""


def _screen_arg(screen_id: str) -> int | str:
    # The backend keys screens by integer id; keep other ids as-is.
    return int(screen_id) if screen_id.strip().isdigit() else screen_id


class SignageClient:
    """Minimal client for the PostgREST-style RPC API behind the CMS."""

    def __init__(
        self,
        base_url: str,
        *,
        api_key: str,
        verify_ssl: bool = True,
        timeout: float = 10,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.verify_ssl = verify_ssl
        self.timeout = timeout
        self._session: Session | None = None

    def establish_connection(self) -> Session:
        """Initialize (or reuse) a requests.Session configured for the API."""
        if self._session is not None:
            return self._session

        suppress_insecure_request_warning(self.verify_ssl)
        session = requests.Session()
        session.verify = self.verify_ssl
        session.headers.update(
            {
                "apikey": self.api_key,
                "Authorization": f"Bearer {self.api_key}",
                "Accept": "application/json",
                "Content-Type": "application/json",
            }
        )

        self._session = session
        return session

    def rpc(self, function: str, params: Mapping[str, Any] | None = None) -> Any:
        """Call a remote procedure and return its decoded JSON body."""
        session = self.establish_connection()
        url = f"{self.base_url}/rest/v1/rpc/{function}"

        try:
            response: Response = session.request(
                method="POST",
                url=url,
                json=dict(params or {}),
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise TransportError(f"Backend request failed ({function}): {exc}") from exc

        if not response.ok:
            raise TransportError(
                f"Backend request failed ({response.status_code}): {response.text}"
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise TransportError(f"Invalid JSON received from backend ({function})") from exc

    def fetch_status(self, screen_id: str) -> str:
        """Return the screen's pairing status, e.g. ``paired``."""
        data = self.rpc("get_screen_status", {"screen_id_to_check": _screen_arg(screen_id)})
        if isinstance(data, list):
            data = data[0] if data else None
        status = str(data) if data is not None else ""
        logger.bind(screen_id=screen_id, status=status).debug("Fetched screen status")
        return status

    def fetch_playlist(self, screen_id: str) -> list[dict[str, Any]]:
        """Return the raw playlist rows assigned to the screen."""
        data = self.rpc(
            "get_playlist_for_screen", {"screen_id_to_check": _screen_arg(screen_id)}
        )
        if data is None:
            return []
        if not isinstance(data, list):
            raise TransportError("Unexpected playlist payload from backend")
        rows = [row for row in data if isinstance(row, dict)]
        logger.bind(screen_id=screen_id, row_count=len(rows)).debug("Fetched playlist")
        return rows

    def pair_screen(self, code: str) -> str | None:
        """Redeem a pairing code; return the paired screen id or None if invalid."""
        data = self.rpc("pair_screen", {"code_to_check": code.strip().upper()})
        if isinstance(data, list):
            data = data[0] if data else None
        if not isinstance(data, dict) or data.get("id") is None:
            return None
        return str(data["id"])

    def close(self) -> None:
        """Close the underlying session if it was created."""
        if self._session is not None:
            self._session.close()
            self._session = None


__all__ = ["PAIRED_STATUS", "SignageClient", "TransportError"]
