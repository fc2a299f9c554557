"""Input layer - Source file decoding."""

from .midi import MidiLoader

__all__ = ["MidiLoader"]
