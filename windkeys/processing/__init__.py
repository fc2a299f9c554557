"""Processing layer - Timing and chord post-processing.

This layer turns mapped notes into playable chords:
- Quantization (snap to grid)
- Chord merging (group simultaneous notes)
- Chord simplification (key limit, modifier conflicts)
- Speed normalization (minimum onset gap)
"""

from .quantize import Quantizer
from .chords import ChordMerger, ChordSimplifier, SimplifyStats
from .speed import SpeedNormalizer

__all__ = [
    "Quantizer",
    "ChordMerger",
    "ChordSimplifier",
    "SimplifyStats",
    "SpeedNormalizer",
]
