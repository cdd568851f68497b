from __future__ import annotations
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    CAPACITY_EXCEEDED = "capacity_exceeded"
    INVALID_INDEX = "invalid_index"
    GENERIC = "generic"


class PlaylistError(Exception):
    """Base exception for playlist editing errors."""

    kind: ErrorKind = ErrorKind.GENERIC

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class PlaylistNotFoundError(PlaylistError):
    """Raised by storage when a playlist id does not resolve."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, playlist_id: str):
        super().__init__(f"Playlist {playlist_id} not found")
        self.playlist_id = playlist_id


class CapacityExceededError(PlaylistError):
    kind = ErrorKind.CAPACITY_EXCEEDED

    def __init__(self, max_tracks: int):
        super().__init__(f"Playlist cannot have more than {max_tracks} tracks")
        self.max_tracks = max_tracks


class InvalidIndexError(PlaylistError):
    kind = ErrorKind.INVALID_INDEX

    def __init__(self, index: int, nr_of_tracks: int):
        super().__init__(f"{index} in not valid index in a playlist of {nr_of_tracks} tracks.")
        self.index = index
        self.nr_of_tracks = nr_of_tracks


class GenericPlaylistError(PlaylistError):
    """Stands in for an unexpected failure.

    Only "Generic error" reaches the caller; the original exception stays on
    ``cause`` for diagnostics.
    """

    kind = ErrorKind.GENERIC

    def __init__(self, cause: Optional[BaseException] = None):
        super().__init__("Generic error")
        self.cause = cause
