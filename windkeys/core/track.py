"""Decoded source material: tracks of notes plus song metadata."""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping

from .constants import DEFAULT_TEMPO
from .note import SourceNote


@dataclass
class TrackData:
    """One track of the source file."""

    index: int
    name: str
    notes: List[SourceNote] = field(default_factory=list)

    @property
    def note_count(self) -> int:
        return len(self.notes)

    @property
    def has_notes(self) -> bool:
        return bool(self.notes)


@dataclass
class SourceSong:
    """Everything the converter needs from a decoded file."""

    title: str
    bpm: int = DEFAULT_TEMPO
    tracks: List[TrackData] = field(default_factory=list)

    @property
    def tracks_with_notes(self) -> List[TrackData]:
        return [t for t in self.tracks if t.has_notes]

    @classmethod
    def from_note_list(
        cls,
        title: str,
        bpm: int,
        notes: Iterable[Mapping[str, Any]],
    ) -> "SourceSong":
        """
        Build tracks from a flat normalized note list.

        Args:
            title: Song title
            bpm: Tempo in beats per minute
            notes: Dicts with pitch, channel, start, length and track_name

        Returns:
            SourceSong with one track per distinct track name, in order of
            first appearance
        """
        tracks: Dict[str, TrackData] = {}
        for item in notes:
            name = str(item.get("track_name", ""))
            track = tracks.get(name)
            if track is None:
                track = TrackData(index=len(tracks), name=name or f"Track {len(tracks)}")
                tracks[name] = track
            track.notes.append(
                SourceNote(
                    pitch=int(item["pitch"]),
                    channel=int(item.get("channel", 0)),
                    start=float(item["start"]),
                    length=float(item["length"]),
                )
            )
        return cls(title=title, bpm=int(bpm), tracks=list(tracks.values()))
