from __future__ import annotations
import logging
import uuid
from typing import Dict, Protocol

from .errors import PlaylistNotFoundError
from .models import Playlist

logger = logging.getLogger(__name__)


class PlaylistStorage(Protocol):
    """Storage contract consumed by the editor.

    Implementations must guarantee at most one concurrent editor per
    playlist (a lock per id or optimistic versioning); the editor itself
    does no locking.
    """

    def get_playlist_by_id(self, playlist_id: str) -> Playlist:
        """Return the playlist or raise PlaylistNotFoundError."""


class InMemoryPlaylistStorage:
    """Keeps playlists in process memory.

    Does not serialize concurrent edits of the same playlist.
    """

    def __init__(self):
        self._playlists: Dict[str, Playlist] = {}

    def __contains__(self, playlist_id: str) -> bool:
        return playlist_id in self._playlists

    def __len__(self) -> int:
        return len(self._playlists)

    def create_playlist(self, name: str) -> Playlist:
        pid = str(uuid.uuid4())
        playlist = Playlist(id=pid, name=name)
        self._playlists[pid] = playlist
        logger.info(f"Playlist created: {pid}")
        return playlist

    def get_playlist_by_id(self, playlist_id: str) -> Playlist:
        playlist = self._playlists.get(playlist_id)
        if playlist is None:
            raise PlaylistNotFoundError(playlist_id)
        return playlist

    def save_playlist(self, playlist: Playlist) -> None:
        assigned = 0
        for entry in playlist.play_list_tracks:
            if entry.id is None:
                entry.id = str(uuid.uuid4())
                assigned += 1
        self._playlists[playlist.id] = playlist
        logger.debug(f"Playlist saved: {playlist.id} ({assigned} new entries)")
