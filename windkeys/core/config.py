"""Converter configuration."""

import math
from dataclasses import dataclass
from typing import Optional

from .constants import (
    DEFAULT_BASE_OCTAVE,
    DEFAULT_MAX_SIMULTANEOUS_KEYS,
    DEFAULT_MERGE_TOLERANCE,
    DEFAULT_MIN_NOTE_GAP,
    DEFAULT_QUANTIZATION_GRID,
    MAX_BASE_OCTAVE,
    MIDI_MAX,
    MIDI_MIN,
    MIN_BASE_OCTAVE,
)
from .errors import ConfigurationError


@dataclass(frozen=True)
class ConverterConfig:
    """Configuration for song conversion.

    Attributes:
        base_octave: Octave of the lowest keyboard row (default: 4, C4 = 60)
        max_simultaneous_keys: Maximum keys per chord (default: 2)
        quantization_grid: Timing grid in seconds, 0 disables (default: 0.05)
        range_min: Lowest pitch counted as playable (default: keymap lowest)
        range_max: Highest pitch counted as playable (default: keymap highest)
        min_note_gap: Minimum gap between chord onsets in seconds (default: 0.1)
        merge_tolerance: Onset window for chord grouping in seconds (default: 0.01)
    """

    base_octave: int = DEFAULT_BASE_OCTAVE
    max_simultaneous_keys: int = DEFAULT_MAX_SIMULTANEOUS_KEYS
    quantization_grid: float = DEFAULT_QUANTIZATION_GRID
    range_min: Optional[int] = None
    range_max: Optional[int] = None
    min_note_gap: float = DEFAULT_MIN_NOTE_GAP
    merge_tolerance: float = DEFAULT_MERGE_TOLERANCE

    def validate(self) -> "ConverterConfig":
        """Reject out-of-range settings.

        Returns:
            self, so calls can be chained

        Raises:
            ConfigurationError: If any setting is invalid
        """
        if not MIN_BASE_OCTAVE <= self.base_octave <= MAX_BASE_OCTAVE:
            raise ConfigurationError(
                f"base_octave must be in [{MIN_BASE_OCTAVE}, {MAX_BASE_OCTAVE}], "
                f"got {self.base_octave}"
            )
        if self.max_simultaneous_keys < 1:
            raise ConfigurationError(
                f"max_simultaneous_keys must be >= 1, got {self.max_simultaneous_keys}"
            )
        for name in ("quantization_grid", "min_note_gap", "merge_tolerance"):
            value = getattr(self, name)
            # NaN fails both comparisons, so test finiteness first
            if not math.isfinite(value) or value < 0:
                raise ConfigurationError(
                    f"{name} must be a finite number >= 0, got {value}"
                )

        for name in ("range_min", "range_max"):
            value = getattr(self, name)
            if value is not None and not MIDI_MIN <= value <= MIDI_MAX:
                raise ConfigurationError(
                    f"{name} must be a MIDI pitch in [{MIDI_MIN}, {MIDI_MAX}], got {value}"
                )
        if (
            self.range_min is not None
            and self.range_max is not None
            and self.range_min > self.range_max
        ):
            raise ConfigurationError(
                f"range_min ({self.range_min}) is above range_max ({self.range_max})"
            )
        return self
