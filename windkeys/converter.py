"""Song conversion - Turn decoded tracks into a playable 36-key song.

Pipeline: Select Track -> Remap Pitch -> Quantize -> Merge Chords ->
Simplify Chords -> Normalize Speed
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .core import ConverterConfig, MIN_NOTE_DURATION, RawNoteEvent, SourceSong, TrackData
from .inference import TrackSelection, TrackSelector, TranspositionOptimizer
from .mapping import KeyMap
from .output import Song
from .processing import ChordMerger, ChordSimplifier, Quantizer, SpeedNormalizer

logger = logging.getLogger(__name__)


@dataclass
class ConversionStats:
    """Statistics from one conversion."""

    selected_track: Optional[int] = None
    track_name: str = ""
    source_notes: int = 0
    transpose_shift: int = 0
    in_range_notes: int = 0
    dropped_unmappable: int = 0
    merged_chords: int = 0
    dropped_keys: int = 0
    speed_scale: float = 1.0

    @property
    def in_range_ratio(self) -> float:
        if self.source_notes == 0:
            return 1.0
        return self.in_range_notes / self.source_notes


class SongConverter:
    """Convert source songs to the game's 36-key format."""

    def __init__(
        self,
        config: Optional[ConverterConfig] = None,
        selector: Optional[TrackSelector] = None,
    ):
        """
        Initialize SongConverter.

        Args:
            config: Converter settings (validated immediately)
            selector: Track selector, default scoring when None

        Raises:
            ConfigurationError: If the configuration is invalid
        """
        self.config = (config or ConverterConfig()).validate()
        self.keymap = KeyMap(self.config.base_octave)
        self.selector = selector or TrackSelector()

        self.transposer = TranspositionOptimizer(
            self.keymap, self.config.range_min, self.config.range_max
        )
        self.quantizer = Quantizer(self.config.quantization_grid)
        self.merger = ChordMerger(self.config.merge_tolerance)
        self.simplifier = ChordSimplifier(self.keymap, self.config.max_simultaneous_keys)
        self.normalizer = SpeedNormalizer(self.config.min_note_gap)

    def select_track(
        self, source: SourceSong, track_choice: Optional[int] = None
    ) -> TrackSelection:
        return self.selector.select(source.tracks, choice=track_choice)

    def convert(
        self,
        source: SourceSong,
        track_choice: Optional[int] = None,
        return_stats: bool = False,
    ) -> Song | Tuple[Song, ConversionStats]:
        """Convert a decoded source song.

        Args:
            source: Decoded tracks, title and tempo
            track_choice: 1-based rank of the track to use (default: best)
            return_stats: Whether to return conversion statistics

        Returns:
            Song, optionally with statistics
        """
        stats = ConversionStats()
        selection = self.select_track(source, track_choice)

        if selection.is_empty:
            logger.warning("No notes found in %r", source.title)
            song = Song(title=source.title, bpm=source.bpm)
            if return_stats:
                return song, stats
            return song

        track = selection.selected
        stats.selected_track = track.index
        stats.track_name = track.name
        song = self.convert_track(source.title, source.bpm, track, stats)

        if return_stats:
            return song, stats
        return song

    def convert_track(
        self,
        title: str,
        bpm: int,
        track: TrackData,
        stats: Optional[ConversionStats] = None,
    ) -> Song:
        """Run the conversion pipeline on one track."""
        stats = stats if stats is not None else ConversionStats()

        raw_events = self.to_raw_events(track)
        stats.source_notes = len(raw_events)

        mapped, transposition = self.transposer.transpose(raw_events)
        stats.transpose_shift = transposition.shift
        stats.in_range_notes = transposition.in_range
        stats.dropped_unmappable = len(raw_events) - len(mapped)

        quantized = self.quantizer.quantize(mapped)

        chords = self.merger.merge(quantized)
        stats.merged_chords = len(chords)

        chords, simplify_stats = self.simplifier.simplify(chords, return_stats=True)
        stats.dropped_keys = simplify_stats.total_dropped

        chords, scale = self.normalizer.normalize_with_scale(chords)
        stats.speed_scale = scale

        logger.info(
            "Converted %r: track %d, shift %+d, %d chords, speed x%.2f",
            title, track.index, transposition.shift, len(chords), scale,
        )
        return Song(title=title, bpm=bpm, notes=chords)

    @staticmethod
    def to_raw_events(track: TrackData) -> List[RawNoteEvent]:
        """Timed events sorted by start, each held long enough to register."""
        events = [
            RawNoteEvent(
                pitch=note.pitch,
                start=note.start,
                duration=max(note.length, MIN_NOTE_DURATION),
            )
            for note in track.notes
        ]
        events.sort(key=lambda e: e.start)
        return events
