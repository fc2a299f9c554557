"""Output layer - The converted song and its persisted form."""

from .song import Song

__all__ = [
    "Song",
]
