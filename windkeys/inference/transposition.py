"""Transposition search - One global shift that fits the melody onto the keyboard."""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..core import MappedNoteEvent, RawNoteEvent
from ..mapping import KeyMap

logger = logging.getLogger(__name__)

SEMITONE_OFFSETS = tuple(range(12))
OCTAVE_OFFSETS = tuple(range(-60, 61, 12))


@dataclass(frozen=True)
class TranspositionResult:
    """Outcome of the transposition search."""

    shift: int
    in_range: int  # notes inside [range_min, range_max] after shifting
    total: int
    clamp_distance: int  # summed semitones out of range

    @property
    def fit_ratio(self) -> float:
        if self.total == 0:
            return 1.0
        return self.in_range / self.total


def candidate_shifts() -> List[int]:
    """
    All candidate shifts in tie-break order.

    Each shift is semitone_offset + octave_offset; candidates are ordered by
    absolute shift, then by semitone offset, then downward before upward
    (only -6 and +6 share both).
    """
    pairs = [(s + o, s) for o in OCTAVE_OFFSETS for s in SEMITONE_OFFSETS]
    pairs.sort(key=lambda pair: (abs(pair[0]), pair[1], pair[0]))
    return [shift for shift, _ in pairs]


class TranspositionOptimizer:
    """Find the shift that puts the most notes inside the playable range."""

    def __init__(
        self,
        keymap: KeyMap,
        range_min: Optional[int] = None,
        range_max: Optional[int] = None,
    ):
        """
        Initialize TranspositionOptimizer.

        Args:
            keymap: Keyboard mapping used for snapping
            range_min: Lowest playable pitch (default: keymap lowest)
            range_max: Highest playable pitch (default: keymap highest)
        """
        self.keymap = keymap
        self.range_min = keymap.lowest if range_min is None else range_min
        self.range_max = keymap.highest if range_max is None else range_max

    def evaluate(self, pitches: np.ndarray, shift: int) -> Tuple[int, int]:
        """Return (in-range count, total clamp distance) for one shift."""
        shifted = pitches + shift
        below = np.clip(self.range_min - shifted, 0, None)
        above = np.clip(shifted - self.range_max, 0, None)
        in_range = int(np.count_nonzero((below == 0) & (above == 0)))
        return in_range, int(below.sum() + above.sum())

    def optimize(self, events: Sequence[RawNoteEvent]) -> TranspositionResult:
        """
        Search every candidate shift.

        The winner maximizes (in-range count, -clamp distance); the earliest
        candidate wins ties, so small shifts are preferred.

        Args:
            events: Notes of the selected track

        Returns:
            TranspositionResult (shift 0 for empty input)
        """
        if not events:
            return TranspositionResult(shift=0, in_range=0, total=0, clamp_distance=0)

        pitches = np.array([e.pitch for e in events], dtype=np.int64)

        best: Optional[TranspositionResult] = None
        for shift in candidate_shifts():
            in_range, distance = self.evaluate(pitches, shift)
            if best is None or (in_range, -distance) > (best.in_range, -best.clamp_distance):
                best = TranspositionResult(
                    shift=shift,
                    in_range=in_range,
                    total=len(events),
                    clamp_distance=distance,
                )

        logger.debug(
            "Transposition %+d: %d/%d notes in range, clamp distance %d",
            best.shift, best.in_range, best.total, best.clamp_distance,
        )
        return best

    def apply(self, events: Sequence[RawNoteEvent], shift: int) -> List[MappedNoteEvent]:
        """
        Shift every note and snap it onto a key.

        Notes that still have no key after snapping are dropped.
        """
        mapped: List[MappedNoteEvent] = []
        for event in events:
            pitch = self.keymap.nearest_valid_pitch(event.pitch + shift)
            key = self.keymap.key_of(pitch)
            if key is None:
                logger.debug("Dropping unmappable note %d at %.3fs", event.pitch, event.start)
                continue
            mapped.append(
                MappedNoteEvent(pitch=pitch, key=key, start=event.start, duration=event.duration)
            )
        return mapped

    def transpose(
        self, events: Sequence[RawNoteEvent]
    ) -> Tuple[List[MappedNoteEvent], TranspositionResult]:
        """Optimize and apply in one step."""
        result = self.optimize(events)
        return self.apply(events, result.shift), result
