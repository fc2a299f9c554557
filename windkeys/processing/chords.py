"""Chord building - Group simultaneous notes and fit chords to the hands.

The game only accepts a few keys at once and cannot hold Shift and Ctrl
together, so every chord is reduced to:
- one modifier class (the larger one; Shift on a tie)
- at most ``max_keys`` keys, keeping the melody (highest) and the bass
  (lowest) before filling from the top down
"""

import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from ..core import Chord, KeyIdentifier, MappedNoteEvent, Modifier
from ..core.constants import DEFAULT_MAX_SIMULTANEOUS_KEYS, DEFAULT_MERGE_TOLERANCE
from ..mapping import KeyMap

logger = logging.getLogger(__name__)

# Modifier class kept when both classes have the same number of keys
TIE_MODIFIER = Modifier.RAISE


@dataclass
class SimplifyStats:
    """Statistics from chord simplification."""

    chords: int = 0
    modifier_conflicts: int = 0
    dropped_conflicting_keys: int = 0
    reduced_chords: int = 0
    dropped_excess_keys: int = 0

    @property
    def total_dropped(self) -> int:
        return self.dropped_conflicting_keys + self.dropped_excess_keys


class ChordMerger:
    """Group notes with (almost) the same onset into chords."""

    def __init__(self, tolerance: float = DEFAULT_MERGE_TOLERANCE):
        """
        Initialize ChordMerger.

        Args:
            tolerance: Onset window in seconds, measured from the first
                note of each group. Notes sharing the first note's onset
                always join, so 0 groups identical onsets only.
        """
        self.tolerance = tolerance

    def merge(self, events: Sequence[MappedNoteEvent]) -> List[Chord]:
        """
        Merge notes into chords.

        Args:
            events: Mapped notes in any order

        Returns:
            Chords sorted by start time
        """
        ordered = sorted(events, key=lambda e: e.start)
        chords: List[Chord] = []

        i = 0
        while i < len(ordered):
            anchor = ordered[i].start
            group = [ordered[i]]
            i += 1

            while i < len(ordered) and self._within(ordered[i].start, anchor):
                group.append(ordered[i])
                i += 1

            keys: List[KeyIdentifier] = []
            for event in group:
                if event.key not in keys:
                    keys.append(event.key)

            chords.append(
                Chord(
                    start=round(anchor, 3),
                    keys=tuple(keys),
                    duration=max(e.duration for e in group),
                )
            )

        return chords

    def _within(self, start: float, anchor: float) -> bool:
        return start == anchor or start - anchor < self.tolerance


class ChordSimplifier:
    """Enforce the per-chord key limit and modifier exclusivity."""

    def __init__(
        self,
        keymap: KeyMap,
        max_keys: int = DEFAULT_MAX_SIMULTANEOUS_KEYS,
    ):
        """
        Initialize ChordSimplifier.

        Args:
            keymap: Mapping used to rank keys by pitch
            max_keys: Maximum keys per chord (>= 1)
        """
        if max_keys < 1:
            raise ValueError(f"max_keys must be >= 1, got {max_keys}")
        self.keymap = keymap
        self.max_keys = max_keys

    def simplify(
        self,
        chords: Sequence[Chord],
        return_stats: bool = False,
    ) -> List[Chord] | Tuple[List[Chord], SimplifyStats]:
        """Simplify every chord.

        Args:
            chords: Chords to simplify
            return_stats: Whether to return simplification statistics

        Returns:
            Simplified chords, optionally with statistics
        """
        stats = SimplifyStats(chords=len(chords))
        result: List[Chord] = []

        for chord in chords:
            keys = self.resolve_modifiers(chord.keys)
            if len(keys) < len(chord.keys):
                stats.modifier_conflicts += 1
                stats.dropped_conflicting_keys += len(chord.keys) - len(keys)

            reduced = self.reduce(keys)
            if len(reduced) < len(keys):
                stats.reduced_chords += 1
                stats.dropped_excess_keys += len(keys) - len(reduced)

            if reduced == chord.keys:
                result.append(chord)
            else:
                result.append(Chord(start=chord.start, keys=reduced, duration=chord.duration))

        if stats.total_dropped:
            logger.debug(
                "Simplified chords: %d modifier conflicts, %d oversized chords, %d keys dropped",
                stats.modifier_conflicts, stats.reduced_chords, stats.total_dropped,
            )

        if return_stats:
            return result, stats
        return result

    def resolve_modifiers(self, keys: Sequence[KeyIdentifier]) -> Tuple[KeyIdentifier, ...]:
        """
        Drop the smaller modifier class when Shift and Ctrl keys are mixed.

        Natural keys are always kept. On a tie the Shift keys are kept.
        """
        raised = sum(1 for k in keys if k.modifier is Modifier.RAISE)
        lowered = sum(1 for k in keys if k.modifier is Modifier.LOWER)
        if not raised or not lowered:
            return tuple(keys)

        if raised == lowered:
            dropped = TIE_MODIFIER.opposite
        else:
            dropped = Modifier.LOWER if raised > lowered else Modifier.RAISE
        return tuple(k for k in keys if k.modifier is not dropped)

    def reduce(self, keys: Sequence[KeyIdentifier]) -> Tuple[KeyIdentifier, ...]:
        """
        Keep at most max_keys keys, ordered from highest to lowest pitch.

        The highest key (melody) is always kept; with room for two or more,
        the lowest key of a different pitch (bass) is kept too, and the
        remaining slots go to the next-highest keys.
        """
        if len(keys) <= 1:
            return tuple(keys)

        # Unknown keys sort below everything
        ranked = sorted(keys, key=lambda k: -self._pitch(k))
        if len(ranked) <= self.max_keys:
            return tuple(ranked)

        top_pitch = self._pitch(ranked[0])
        chosen = [ranked[0]]
        if self.max_keys >= 2:
            for key in reversed(ranked):
                if self._pitch(key) != top_pitch:
                    chosen.append(key)
                    break

        for key in ranked[1:]:
            if len(chosen) >= self.max_keys:
                break
            if key not in chosen:
                chosen.append(key)

        return tuple(sorted(chosen, key=lambda k: -self._pitch(k)))

    def _pitch(self, key: KeyIdentifier) -> int:
        pitch = self.keymap.pitch_of(key)
        return -1 if pitch is None else pitch
