"""Speed normalization - Stretch the timeline so chords are never too close."""

import logging
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..core import Chord
from ..core.constants import DEFAULT_MIN_NOTE_GAP

logger = logging.getLogger(__name__)


class SpeedNormalizer:
    """Uniformly slow a song down until its tightest onset gap meets a floor."""

    def __init__(self, min_gap: float = DEFAULT_MIN_NOTE_GAP):
        """
        Initialize SpeedNormalizer.

        Args:
            min_gap: Minimum gap between consecutive chord onsets in seconds
        """
        self.min_gap = min_gap

    @staticmethod
    def min_positive_gap(chords: Sequence[Chord]) -> Optional[float]:
        """Smallest non-zero gap between consecutive onsets, or None."""
        if len(chords) < 2:
            return None
        gaps = np.diff([c.start for c in chords])
        positive = gaps[gaps > 0]
        if positive.size == 0:
            return None
        return float(positive.min())

    def normalize_with_scale(self, chords: Sequence[Chord]) -> Tuple[List[Chord], float]:
        """
        Stretch the timeline if needed.

        Args:
            chords: Time-sorted chords

        Returns:
            Tuple of (chords, scale factor applied; 1.0 when unchanged)
        """
        tightest = self.min_positive_gap(chords)
        if tightest is None or tightest >= self.min_gap:
            return list(chords), 1.0

        scale = self.min_gap / tightest
        logger.debug(
            "Tightest gap %.4fs below %.4fs, stretching timeline by %.3fx",
            tightest, self.min_gap, scale,
        )
        stretched = [
            Chord(start=c.start * scale, keys=c.keys, duration=c.duration * scale)
            for c in chords
        ]
        return stretched, scale

    def normalize(self, chords: Sequence[Chord]) -> List[Chord]:
        return self.normalize_with_scale(chords)[0]
