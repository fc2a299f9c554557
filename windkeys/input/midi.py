"""MIDI loading - Decode a .mid file into tracks of notes."""

import logging
from pathlib import Path
from typing import List, Union

import pretty_midi

from ..core import (
    DEFAULT_TEMPO,
    PERCUSSION_CHANNEL,
    MalformedSourceError,
    SourceNote,
    SourceSong,
    TrackData,
)

logger = logging.getLogger(__name__)


class MidiLoader:
    """Handles MIDI file loading."""

    SUPPORTED_FORMATS = {".mid", ".midi"}

    def __init__(self, default_tempo: int = DEFAULT_TEMPO):
        """
        Initialize MidiLoader.

        Args:
            default_tempo: BPM reported when the file has no tempo event
        """
        self.default_tempo = default_tempo

    def load(self, path: Union[str, Path]) -> SourceSong:
        """
        Load a MIDI file.

        Args:
            path: Path to MIDI file

        Returns:
            SourceSong titled after the file name, one track per instrument

        Raises:
            FileNotFoundError: If file doesn't exist
            MalformedSourceError: If the file cannot be decoded
        """
        path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"MIDI file not found: {path}")

        if path.suffix.lower() not in self.SUPPORTED_FORMATS:
            raise MalformedSourceError(
                f"Unsupported format: {path.suffix}. "
                f"Supported: {self.SUPPORTED_FORMATS}"
            )

        try:
            midi = pretty_midi.PrettyMIDI(str(path))
        except Exception as e:
            raise MalformedSourceError(f"'{path.name}' is not a valid MIDI file: {e}") from e

        song = self.from_pretty_midi(midi, title=path.stem)
        logger.debug(
            "Loaded %s: %d tracks, %d BPM", path.name, len(song.tracks), song.bpm
        )
        return song

    def from_pretty_midi(self, midi: pretty_midi.PrettyMIDI, title: str) -> SourceSong:
        """Convert an in-memory PrettyMIDI object."""
        return SourceSong(
            title=title,
            bpm=self.get_bpm(midi),
            tracks=self._tracks(midi),
        )

    def get_bpm(self, midi: pretty_midi.PrettyMIDI) -> int:
        """Tempo at the start of the song, rounded to whole BPM."""
        _, tempi = midi.get_tempo_changes()
        if len(tempi) == 0 or tempi[0] <= 0:
            return self.default_tempo
        return int(round(float(tempi[0])))

    def _tracks(self, midi: pretty_midi.PrettyMIDI) -> List[TrackData]:
        tracks = []
        for i, instrument in enumerate(midi.instruments):
            channel = PERCUSSION_CHANNEL if instrument.is_drum else 0
            notes = [
                SourceNote(
                    pitch=note.pitch,
                    channel=channel,
                    start=float(note.start),
                    length=float(note.end - note.start),
                )
                for note in instrument.notes
            ]
            notes.sort(key=lambda n: (n.start, n.pitch))
            tracks.append(
                TrackData(index=i, name=instrument.name.strip() or f"Track {i}", notes=notes)
            )
        return tracks
