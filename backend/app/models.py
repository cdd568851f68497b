
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Set


@dataclass(frozen=True)
class Track:
    id: str
    title: str = ""
    duration: float = 0.0
    artist_id: Optional[str] = None


@dataclass(eq=False)
class PlayListTrack:
    """Places a track at one position of a playlist.

    Entries are compared by identity so a playlist can hold them in a set
    while their index changes.
    """
    playlist: Playlist
    track: Track
    index: int
    date_added: datetime
    id: Optional[str] = None

    @property
    def track_id(self) -> str:
        return self.track.id

    def __repr__(self):
        return f"PlayListTrack(index={self.index}, track_id='{self.track_id}', id={self.id!r})"


@dataclass(eq=False)
class Playlist:
    id: str
    name: str = ""
    play_list_tracks: Set[PlayListTrack] = field(default_factory=set)
    nr_of_tracks: int = 0
    duration: float = 0.0
    last_updated: Optional[datetime] = None

    def ordered_tracks(self) -> List[PlayListTrack]:
        return sorted(self.play_list_tracks, key=lambda t: t.index)

    def __repr__(self):
        return f"Playlist(id='{self.id}', name='{self.name}', tracks={self.nr_of_tracks} tracks)"
