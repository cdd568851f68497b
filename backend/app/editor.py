from __future__ import annotations
import logging
from datetime import datetime, timezone
from typing import Callable, Iterable, List, Optional, Sequence

from .errors import CapacityExceededError, GenericPlaylistError, InvalidIndexError, PlaylistError
from .models import PlayListTrack, Playlist, Track
from .storage import PlaylistStorage

logger = logging.getLogger(__name__)

MAX_NUMBER = 500


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PlaylistEditor:
    """Inserts and removes tracks in a stored playlist.

    Both operations mutate the fetched playlist in place and return the
    affected entries; persisting them is left to the caller.
    """

    def __init__(self, storage: PlaylistStorage, clock: Optional[Callable[[], datetime]] = None):
        self.storage = storage
        self.clock = clock or _utcnow

    def add_tracks(self, playlist_id: str, tracks_to_add: Sequence[Track], to_index: int) -> List[PlayListTrack]:
        """Insert ``tracks_to_add`` so the first one lands at ``to_index``.

        Raises:
            PlaylistNotFoundError: unknown playlist id (from storage)
            CapacityExceededError: the result would exceed MAX_NUMBER tracks
            InvalidIndexError: ``to_index`` outside ``[0, nr_of_tracks]``
            GenericPlaylistError: any other failure
        """
        try:
            playlist = self.storage.get_playlist_by_id(playlist_id)
            tracks_to_add = list(tracks_to_add)

            if playlist.nr_of_tracks + len(tracks_to_add) > MAX_NUMBER:
                logger.warning(f"Rejected add to {playlist_id}: would exceed {MAX_NUMBER} tracks")
                raise CapacityExceededError(MAX_NUMBER)

            if not self._valid_index(to_index, playlist.nr_of_tracks):
                logger.warning(f"Rejected add to {playlist_id}: index {to_index} out of range")
                raise InvalidIndexError(to_index, playlist.nr_of_tracks)

            # Nothing below may fail once the playlist starts changing.
            added_duration = float(sum(t.duration for t in tracks_to_add))
            now = self.clock()
            added = self._create_play_list_tracks(playlist, to_index, tracks_to_add, now)
            shifted = [t for t in playlist.play_list_tracks if t.index >= to_index]

            for entry in shifted:
                entry.index += len(added)
            playlist.play_list_tracks.update(added)
            playlist.nr_of_tracks = len(playlist.play_list_tracks)
            playlist.duration += added_duration
            playlist.last_updated = now

            logger.info(f"Added {len(added)} tracks to playlist {playlist_id} at index {to_index}")
            return added

        except PlaylistError:
            raise
        except Exception as e:
            logger.exception(f"Unexpected error adding tracks to playlist {playlist_id}")
            raise GenericPlaylistError(cause=e) from e

    def remove_tracks(self, playlist_id: str, indices_to_remove: Iterable[int]) -> List[PlayListTrack]:
        """Remove the entries at ``indices_to_remove`` and close the gaps.

        Indices that match no entry are ignored. Errors follow the same
        policy as ``add_tracks``.
        """
        try:
            playlist = self.storage.get_playlist_by_id(playlist_id)
            wanted = set(indices_to_remove)

            removed = sorted(
                (t for t in playlist.play_list_tracks if t.index in wanted),
                key=lambda t: t.index,
            )
            remaining = [t for t in playlist.play_list_tracks if t.index not in wanted]
            removed_indices = [t.index for t in removed]

            new_indices = [
                t.index - sum(1 for r in removed_indices if r < t.index)
                for t in remaining
            ]
            removed_duration = float(sum(t.track.duration for t in removed))
            now = self.clock()

            for entry, new_index in zip(remaining, new_indices):
                entry.index = new_index
            playlist.play_list_tracks.difference_update(removed)
            playlist.nr_of_tracks = len(playlist.play_list_tracks)
            if playlist.play_list_tracks:
                playlist.duration -= removed_duration
            else:
                playlist.duration = 0.0
            playlist.last_updated = now

            logger.info(f"Removed {len(removed)} tracks from playlist {playlist_id}")
            return removed

        except PlaylistError:
            raise
        except Exception as e:
            logger.exception(f"Unexpected error removing tracks from playlist {playlist_id}")
            raise GenericPlaylistError(cause=e) from e

    def _create_play_list_tracks(
        self,
        playlist: Playlist,
        start_index: int,
        tracks: List[Track],
        now: datetime,
    ) -> List[PlayListTrack]:
        return [
            PlayListTrack(playlist=playlist, track=track, index=i, date_added=now)
            for i, track in enumerate(tracks, start=start_index)
        ]

    @staticmethod
    def _valid_index(to_index: int, length: int) -> bool:
        if isinstance(to_index, bool) or not isinstance(to_index, int):
            return False
        return 0 <= to_index <= length
