# reelorder/domain/entities/playlist.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Tuple

from reelorder.domain.entities.scored_entry import ScoredEntry


@dataclass(frozen=True)
class PlaylistTrack:
    location: str          # "file:///..." percent-encoded
    duration_ms: int
    track_id: int          # 0-based position in the final order


@dataclass(frozen=True)
class PlaylistDocument:
    """
    Ordered tracks of an XSPF playlist. Track ids are the positions 0..N-1;
    the playlist-level extension block is derived from the same ids, so the
    two lists cannot drift apart.
    """
    title: str = "Playlist"
    tracks: Tuple[PlaylistTrack, ...] = field(default_factory=tuple)

    @classmethod
    def from_entries(
        cls,
        entries: Iterable[ScoredEntry],
        *,
        encode: Callable[[str], str],
        title: str = "Playlist",
    ) -> "PlaylistDocument":
        tracks: List[PlaylistTrack] = [
            PlaylistTrack(location=encode(e.path), duration_ms=int(e.duration_ms), track_id=i)
            for i, e in enumerate(entries)
        ]
        return cls(title=title, tracks=tuple(tracks))

    @property
    def track_ids(self) -> List[int]:
        return [t.track_id for t in self.tracks]

    def __len__(self) -> int:
        return len(self.tracks)
