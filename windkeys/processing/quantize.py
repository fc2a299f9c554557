"""Note quantization - Snap note timings to a fixed grid."""

from dataclasses import replace
from typing import List, Sequence

from ..core import MappedNoteEvent
from ..core.constants import DEFAULT_QUANTIZATION_GRID


class Quantizer:
    """Quantize note timings to a grid measured in seconds."""

    def __init__(self, grid: float = DEFAULT_QUANTIZATION_GRID):
        """
        Initialize Quantizer.

        Args:
            grid: Grid size in seconds (0 disables quantization)
        """
        if grid < 0:
            raise ValueError(f"Grid must be >= 0, got {grid}")
        self.grid = grid

    @classmethod
    def from_tempo(cls, tempo: float, quantize_resolution: int = 16) -> "Quantizer":
        """
        Build a quantizer whose grid is a note value at a tempo.

        Args:
            tempo: Tempo in BPM
            quantize_resolution: Quantization grid (e.g., 16 for 16th notes)
        """
        beat_duration = 60.0 / tempo
        return cls(grid=beat_duration * (4 / quantize_resolution))

    @property
    def enabled(self) -> bool:
        return self.grid > 0

    def quantize(self, events: Sequence[MappedNoteEvent]) -> List[MappedNoteEvent]:
        """
        Quantize note onsets and durations to the grid.

        Durations never shrink below one grid step.

        Args:
            events: Notes to quantize

        Returns:
            New list of quantized notes
        """
        if not self.enabled:
            return list(events)

        return [
            replace(
                event,
                start=self._snap_to_grid(event.start),
                duration=max(self._snap_to_grid(event.duration), self.grid),
            )
            for event in events
        ]

    def _snap_to_grid(self, time: float) -> float:
        """Snap time to nearest grid position."""
        grid_units = round(time / self.grid)
        return grid_units * self.grid
