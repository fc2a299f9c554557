"""Core types and constants for windkeys."""

from .note import SourceNote, RawNoteEvent, MappedNoteEvent, Chord, pitch_name
from .keys import KeyIdentifier, Modifier
from .config import ConverterConfig
from .track import TrackData, SourceSong
from .errors import (
    WindkeysError,
    MalformedSourceError,
    ConfigurationError,
    SongFormatError,
)
from .constants import (
    PITCH_NAMES,
    KEYBOARD_ROWS,
    PERCUSSION_CHANNEL,
    DEFAULT_TEMPO,
    MIN_NOTE_DURATION,
)

__all__ = [
    "SourceNote",
    "RawNoteEvent",
    "MappedNoteEvent",
    "Chord",
    "pitch_name",
    "KeyIdentifier",
    "Modifier",
    "ConverterConfig",
    "TrackData",
    "SourceSong",
    "WindkeysError",
    "MalformedSourceError",
    "ConfigurationError",
    "SongFormatError",
    "PITCH_NAMES",
    "KEYBOARD_ROWS",
    "PERCUSSION_CHANNEL",
    "DEFAULT_TEMPO",
    "MIN_NOTE_DURATION",
]
