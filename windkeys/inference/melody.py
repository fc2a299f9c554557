"""Melody track selection - Pick the track most likely to carry the tune.

Each candidate track is scored with a fixed point system:

- name keywords (+500 melody-like, -500 percussion-like)
- all notes on the percussion channel (-1000)
- share of notes inside the melodic band (up to +200)
- monophony ratio (up to +150)
- note count (-200 when tiny, +100 moderate, +50 very large)
- pitch variety (+80)
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import numpy as np

from ..core import PERCUSSION_CHANNEL, SourceNote, TrackData

logger = logging.getLogger(__name__)

MELODY_KEYWORDS = ("melody", "lead", "vocal", "voice", "solo", "main", "theme", "sing", "right")
PERCUSSION_KEYWORDS = ("drum", "perc", "kit", "snare", "cymbal", "hihat", "hi-hat", "kick", "tom")

# Melodic band: G3 up to (not including) G6, 36 semitones
MELODY_BAND = (55, 91)


@dataclass
class TrackScore:
    """A scored candidate track."""

    track: TrackData
    score: float
    breakdown: Dict[str, float] = field(default_factory=dict)

    @property
    def index(self) -> int:
        return self.track.index

    @property
    def name(self) -> str:
        return self.track.name

    @property
    def note_count(self) -> int:
        return self.track.note_count


@dataclass
class TrackSelection:
    """Result of track selection."""

    ranked: List[TrackScore] = field(default_factory=list)
    selected: Optional[TrackData] = None
    auto: bool = False  # True when only one track had notes

    @property
    def is_empty(self) -> bool:
        return self.selected is None

    @property
    def is_ambiguous(self) -> bool:
        return len(self.ranked) > 1


class MelodyScorer:
    """Score tracks by how melody-like they are."""

    def __init__(
        self,
        melody_band: tuple = MELODY_BAND,
        percussion_channel: int = PERCUSSION_CHANNEL,
    ):
        """
        Initialize MelodyScorer.

        Args:
            melody_band: Half-open pitch range (low, high) of typical melodies
            percussion_channel: Zero-based channel reserved for drums
        """
        self.melody_band = melody_band
        self.percussion_channel = percussion_channel

    def score(self, track: TrackData) -> TrackScore:
        """Score a single track; higher is more melody-like."""
        breakdown: Dict[str, float] = {}
        notes = track.notes
        name = track.name.lower()

        if any(word in name for word in MELODY_KEYWORDS):
            breakdown["melody_name"] = 500.0
        if any(word in name for word in PERCUSSION_KEYWORDS):
            breakdown["percussion_name"] = -500.0

        if not notes:
            return TrackScore(track=track, score=sum(breakdown.values()), breakdown=breakdown)

        if all(n.channel == self.percussion_channel for n in notes):
            breakdown["percussion_channel"] = -1000.0

        pitches = np.array([n.pitch for n in notes])
        low, high = self.melody_band
        in_band = np.count_nonzero((pitches >= low) & (pitches < high)) / len(notes)
        breakdown["melodic_range"] = 200.0 * in_band

        breakdown["monophony"] = 150.0 * self.monophony_ratio(notes)

        count = len(notes)
        if count < 10:
            breakdown["note_count"] = -200.0
        elif count > 2000:
            breakdown["note_count"] = 50.0
        elif count >= 50:
            breakdown["note_count"] = 100.0

        distinct = len(np.unique(pitches))
        if 8 <= distinct <= 30:
            breakdown["pitch_variety"] = 80.0

        return TrackScore(track=track, score=float(sum(breakdown.values())), breakdown=breakdown)

    @staticmethod
    def monophony_ratio(notes: Sequence[SourceNote]) -> float:
        """
        Fraction of notes that start after the previous note has ended.

        Notes are ordered by (start, pitch); a note counts as monophonic
        when its onset is outside the previous note's [start, end)
        interval. The first note always counts.
        """
        if not notes:
            return 0.0

        ordered = sorted(notes, key=lambda n: (n.start, n.pitch))
        monophonic = 1
        for prev, note in zip(ordered, ordered[1:]):
            if not prev.start <= note.start < prev.end:
                monophonic += 1
        return monophonic / len(ordered)


class TrackSelector:
    """Choose which track becomes the melody."""

    def __init__(self, scorer: Optional[MelodyScorer] = None):
        self.scorer = scorer or MelodyScorer()

    def rank(self, tracks: Sequence[TrackData]) -> List[TrackScore]:
        """
        Score every track with notes and sort best first.

        Ties keep the input track order.
        """
        scored = [self.scorer.score(t) for t in tracks if t.has_notes]
        # sorted() is stable, so equal scores stay in track order
        return sorted(scored, key=lambda s: -s.score)

    def select(
        self,
        tracks: Sequence[TrackData],
        choice: Optional[int] = None,
    ) -> TrackSelection:
        """
        Select the melody track.

        Args:
            tracks: All tracks of the source
            choice: 1-based rank picked by the caller; None means rank 1

        Returns:
            TrackSelection (empty when no track has notes)
        """
        candidates = [t for t in tracks if t.has_notes]

        if not candidates:
            logger.info("No track contains notes")
            return TrackSelection()

        if len(candidates) == 1:
            track = candidates[0]
            logger.debug("Auto-selected track %d (%s)", track.index, track.name)
            return TrackSelection(
                ranked=[TrackScore(track=track, score=0.0)],
                selected=track,
                auto=True,
            )

        ranked = self.rank(candidates)
        for position, entry in enumerate(ranked, start=1):
            logger.debug(
                "Rank %d: track %d %r, %d notes, score %.1f",
                position, entry.index, entry.name, entry.note_count, entry.score,
            )

        position = 1
        if choice is not None:
            if 1 <= choice <= len(ranked):
                position = choice
            else:
                logger.warning(
                    "Track choice %d out of range 1-%d, using rank 1", choice, len(ranked)
                )

        return TrackSelection(ranked=ranked, selected=ranked[position - 1].track)
