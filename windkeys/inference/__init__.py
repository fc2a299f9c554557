"""Inference layer - Musical decisions about the source material.

This layer decides:
- Which track carries the melody
- How far to transpose it so it fits the keyboard
"""

from .melody import MelodyScorer, TrackScore, TrackSelection, TrackSelector
from .transposition import TranspositionOptimizer, TranspositionResult, candidate_shifts

__all__ = [
    "MelodyScorer",
    "TrackScore",
    "TrackSelection",
    "TrackSelector",
    "TranspositionOptimizer",
    "TranspositionResult",
    "candidate_shifts",
]
