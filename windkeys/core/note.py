"""Note and chord data classes - the units flowing through the converter."""

from dataclasses import dataclass
from typing import Tuple

from .constants import PERCUSSION_CHANNEL, PITCH_NAMES
from .keys import KeyIdentifier


def pitch_name(pitch: int) -> str:
    """Get note name (e.g., 'C4', 'A#3') for a MIDI pitch."""
    octave = (pitch // 12) - 1
    return f"{PITCH_NAMES[pitch % 12]}{octave}"


@dataclass(frozen=True)
class SourceNote:
    """A decoded note as delivered by the source decoder."""

    pitch: int  # MIDI pitch (0-127)
    channel: int
    start: float  # seconds
    length: float  # seconds

    @property
    def end(self) -> float:
        return self.start + self.length

    @property
    def is_percussion(self) -> bool:
        return self.channel == PERCUSSION_CHANNEL


@dataclass(frozen=True)
class RawNoteEvent:
    """A timed note of the selected track, before any pitch remapping."""

    pitch: int
    start: float  # seconds
    duration: float  # seconds


@dataclass(frozen=True)
class MappedNoteEvent:
    """A timed note snapped onto a playable key."""

    pitch: int  # post-snap pitch
    key: KeyIdentifier
    start: float
    duration: float


@dataclass(frozen=True)
class Chord:
    """Keys pressed together at one onset and held for one duration."""

    start: float
    keys: Tuple[KeyIdentifier, ...]
    duration: float

    @property
    def end(self) -> float:
        return self.start + self.duration

    @property
    def key_strings(self) -> Tuple[str, ...]:
        return tuple(str(k) for k in self.keys)
