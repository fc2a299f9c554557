"""Mapping layer - Pitch to keyboard key translation."""

from .keymap import KeyMap

__all__ = ["KeyMap"]
