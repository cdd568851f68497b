from __future__ import annotations
import logging
from typing import List, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from .config import Settings, get_settings
from .editor import PlaylistEditor
from .errors import ErrorKind, GenericPlaylistError, PlaylistError
from .models import PlayListTrack, Playlist, Track
from .storage import InMemoryPlaylistStorage

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    level = logging.DEBUG if settings.DEBUG else getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


settings = get_settings()
configure_logging(settings)

app = FastAPI(title=settings.APP_NAME)

STORAGE = InMemoryPlaylistStorage()
editor = PlaylistEditor(STORAGE)

STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CAPACITY_EXCEEDED: 400,
    ErrorKind.INVALID_INDEX: 400,
    ErrorKind.GENERIC: 500,
}


@app.exception_handler(PlaylistError)
async def playlist_error_handler(request: Request, exc: PlaylistError):
    status = STATUS_BY_KIND.get(exc.kind, 500)
    logger.info(f"{request.method} {request.url.path} -> {status}: {exc.message}")
    return JSONResponse(status_code=status, content={"detail": exc.message})


@app.get("/health")
def health_check():
    return {"status": "healthy"}


class TrackIn(BaseModel):
    id: str = Field(..., min_length=1)
    title: str = ""
    duration: float = Field(0.0, ge=0)
    artist_id: Optional[str] = None

    def to_track(self) -> Track:
        return Track(id=self.id, title=self.title, duration=self.duration, artist_id=self.artist_id)


class CreatePlaylistRequest(BaseModel):
    name: str = ""


class AddTracksRequest(BaseModel):
    tracks: List[TrackIn]
    to_index: int


class RemoveTracksRequest(BaseModel):
    indices: List[int]


def _render_entry(entry: PlayListTrack) -> dict:
    return {
        "id": entry.id,
        "index": entry.index,
        "track_id": entry.track_id,
        "title": entry.track.title,
        "duration": entry.track.duration,
        "artist_id": entry.track.artist_id,
        "date_added": entry.date_added.isoformat(),
    }


def _render_playlist(playlist: Playlist, with_tracks: bool = True) -> dict:
    data = {
        "id": playlist.id,
        "name": playlist.name,
        "track_count": playlist.nr_of_tracks,
        "duration": playlist.duration,
        "last_updated": playlist.last_updated.isoformat() if playlist.last_updated else None,
    }
    if with_tracks:
        data["tracks"] = [_render_entry(t) for t in playlist.ordered_tracks()]
    return data


def _save_playlist(playlist_id: str) -> Playlist:
    """Persist the edited playlist, failing the same way the editor does."""
    try:
        playlist = STORAGE.get_playlist_by_id(playlist_id)
        STORAGE.save_playlist(playlist)
        return playlist
    except PlaylistError:
        raise
    except Exception as e:
        logger.exception(f"Unexpected error saving playlist {playlist_id}")
        raise GenericPlaylistError(cause=e) from e


@app.post("/api/playlists")
def create_playlist(body: CreatePlaylistRequest):
    playlist = STORAGE.create_playlist(body.name)
    return _render_playlist(playlist)


@app.get("/api/playlists/{playlist_id}")
def get_playlist(playlist_id: str):
    playlist = STORAGE.get_playlist_by_id(playlist_id)
    return _render_playlist(playlist)


@app.post("/api/playlists/{playlist_id}/tracks")
def add_tracks(playlist_id: str, body: AddTracksRequest):
    added = editor.add_tracks(playlist_id, [t.to_track() for t in body.tracks], body.to_index)
    playlist = _save_playlist(playlist_id)
    return {
        "added": [_render_entry(t) for t in added],
        "playlist": _render_playlist(playlist, with_tracks=False),
    }


@app.post("/api/playlists/{playlist_id}/remove_tracks")
def remove_tracks(playlist_id: str, body: RemoveTracksRequest):
    removed = editor.remove_tracks(playlist_id, body.indices)
    playlist = _save_playlist(playlist_id)
    return {
        "removed": [_render_entry(t) for t in removed],
        "playlist": _render_playlist(playlist, with_tracks=False),
    }
