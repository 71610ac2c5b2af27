"""Local HTTP API exposing playback state to the renderer and UI chrome."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any

from fastapi import APIRouter, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from .engine import PlayerEngine
from .models import PlaybackState, PlaylistItem, PlaylistSnapshot
from .utils import configure_logging

router = APIRouter(prefix="/api", tags=["playback"])


class MediaEndRequest(BaseModel):
    item_id: str | None = None


class MediaEndResponse(BaseModel):
    advanced: bool
    state: PlaybackState


class EventRecord(BaseModel):
    id: int | None = None
    timestamp: datetime
    action: str
    item_id: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class EventListResponse(BaseModel):
    events: list[EventRecord] = Field(default_factory=list)


def _engine(request: Request) -> PlayerEngine:
    return request.app.state.engine


@router.get("/playback", response_model=PlaybackState)
async def get_playback(request: Request) -> PlaybackState:
    """Top-level state the UI branches on."""
    return _engine(request).get_playback_state()


@router.get("/playback/item", response_model=PlaylistItem | None)
async def get_active_item(request: Request) -> PlaylistItem | None:
    return _engine(request).get_active_item()


@router.post("/playback/media-end", response_model=MediaEndResponse)
async def media_end(
    request: Request, body: MediaEndRequest | None = None
) -> MediaEndResponse:
    """Renderer callback: the active video finished one playthrough."""
    engine = _engine(request)
    advanced = engine.on_media_end(body.item_id if body else None)
    return MediaEndResponse(advanced=advanced, state=engine.get_playback_state())


@router.get("/playlist", response_model=PlaylistSnapshot)
async def get_playlist(request: Request) -> PlaylistSnapshot:
    return _engine(request).snapshot()


@router.get("/events", response_model=EventListResponse)
async def list_events(
    request: Request,
    limit: Annotated[int, Query(ge=1, le=500)] = 100,
) -> EventListResponse:
    events = _engine(request).events.list_recent(limit)
    return EventListResponse(
        events=[
            EventRecord(
                id=event.id,
                timestamp=event.timestamp,
                action=event.action,
                item_id=event.item_id,
                metadata=event.metadata,
            )
            for event in events
        ]
    )


def create_app(engine: PlayerEngine) -> FastAPI:
    """Build the API around an engine whose lifecycle is managed by the caller."""
    configure_logging()

    app = FastAPI(
        title="Signage Player API",
        version="1.0.0",
        description="Playback state and renderer callbacks for the signage player.",
    )
    app.state.engine = engine

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)

    @app.get("/health", tags=["health"])
    def health() -> dict[str, str]:
        """Simple readiness probe."""
        return {"status": "ok"}

    return app


__all__ = ["create_app", "router"]
