"""windkeys - MIDI to 36-key keyboard song conversion.

Architecture Layers:
    1. core/       - Data types, configuration and errors
    2. input/      - MIDI decoding into tracks
    3. mapping/    - Pitch <-> keyboard key table
    4. inference/  - Melody track selection and transposition
    5. processing/ - Quantize, chord merging/simplification, speed normalization
    6. output/     - Song record and JSON persistence
"""

__version__ = "0.1.0"

# Core types
from .core import (
    Chord,
    ConverterConfig,
    KeyIdentifier,
    Modifier,
    SourceSong,
    TrackData,
)

# Input layer
from .input import MidiLoader

# Mapping layer
from .mapping import KeyMap

# Inference layer
from .inference import MelodyScorer, TrackSelector, TranspositionOptimizer

# Processing layer
from .processing import ChordMerger, ChordSimplifier, Quantizer, SpeedNormalizer

# Output layer
from .output import Song

# Pipeline
from .converter import ConversionStats, SongConverter

__all__ = [
    # Core
    "Chord",
    "ConverterConfig",
    "KeyIdentifier",
    "Modifier",
    "SourceSong",
    "TrackData",
    # Input
    "MidiLoader",
    # Mapping
    "KeyMap",
    # Inference
    "MelodyScorer",
    "TrackSelector",
    "TranspositionOptimizer",
    # Processing
    "Quantizer",
    "ChordMerger",
    "ChordSimplifier",
    "SpeedNormalizer",
    # Output
    "Song",
    # Pipeline
    "SongConverter",
    "ConversionStats",
]
