"""Key mapping - Translate MIDI pitches to the 36-key keyboard and back.

Layout (3 rows x 7 natural keys, Shift raises and Ctrl lowers a semitone):

    Row 2 (High):  Q  W  E  R  T  Y  U   ->  C6 .. B6
    Row 1 (Mid):   A  S  D  F  G  H  J   ->  C5 .. B5
    Row 0 (Low):   Z  X  C  V  B  N  M   ->  C4 .. B4

Every chromatic pitch has one canonical key (e.g. C# = Shift+Z) and usually
an enharmonic alias on the neighbouring key (Db = Ctrl+X). Aliases are only
accepted on lookup; the canonical form is always what gets emitted.
"""

from typing import Dict, List, Optional, Tuple, Union

from ..core.constants import (
    CHROMATIC_OFFSETS,
    DEFAULT_BASE_OCTAVE,
    KEYBOARD_ROWS,
    NATURAL_OFFSETS,
    ROW_LABELS,
)
from ..core.keys import KeyIdentifier, Modifier
from ..core.note import pitch_name


class KeyMap:
    """Bidirectional pitch <-> key table for one base octave."""

    def __init__(self, base_octave: int = DEFAULT_BASE_OCTAVE):
        """
        Initialize KeyMap.

        Args:
            base_octave: MIDI octave of the lowest row (4 -> C4 = 60)
        """
        self.base_octave = base_octave

        self._pitch_to_key: Dict[int, KeyIdentifier] = {}
        self._key_to_pitch: Dict[str, int] = {}
        self._aliases: Dict[str, str] = {}
        self._row_of: Dict[int, int] = {}

        for row, letters in enumerate(KEYBOARD_ROWS):
            octave_base = self._octave_base(row)

            for offset, letter in zip(NATURAL_OFFSETS, letters):
                self._register(octave_base + offset, KeyIdentifier(letter), row)

            for offset, (modifier_name, index) in sorted(CHROMATIC_OFFSETS.items()):
                modifier = Modifier(modifier_name)
                self._register(
                    octave_base + offset, KeyIdentifier(letters[index], modifier), row
                )

        # Aliases go in after every canonical key so none can shadow one
        for row, letters in enumerate(KEYBOARD_ROWS):
            octave_base = self._octave_base(row)
            for offset, (modifier_name, index) in sorted(CHROMATIC_OFFSETS.items()):
                modifier = Modifier(modifier_name)
                neighbour = index + 1 if modifier is Modifier.RAISE else index - 1
                if not 0 <= neighbour < len(letters):
                    continue
                alias = str(KeyIdentifier(letters[neighbour], modifier.opposite))
                if alias in self._key_to_pitch:
                    continue
                pitch = octave_base + offset
                self._key_to_pitch[alias] = pitch
                self._aliases[alias] = str(self._pitch_to_key[pitch])

        self._valid_pitches: Tuple[int, ...] = tuple(sorted(self._pitch_to_key))

    def _octave_base(self, row: int) -> int:
        # MIDI: C4 = 60 = (4 + 1) * 12
        return (self.base_octave + row + 1) * 12

    def _register(self, pitch: int, key: KeyIdentifier, row: int) -> None:
        self._pitch_to_key[pitch] = key
        self._key_to_pitch[str(key)] = pitch
        self._row_of[pitch] = row

    @property
    def valid_pitches(self) -> Tuple[int, ...]:
        """All playable pitches in ascending order."""
        return self._valid_pitches

    @property
    def lowest(self) -> int:
        return self._valid_pitches[0]

    @property
    def highest(self) -> int:
        return self._valid_pitches[-1]

    @property
    def aliases(self) -> Dict[str, str]:
        """Alias key string -> canonical key string."""
        return dict(self._aliases)

    def keys(self) -> List[KeyIdentifier]:
        """Canonical keys in ascending pitch order."""
        return [self._pitch_to_key[p] for p in self._valid_pitches]

    def row_of(self, pitch: int) -> Optional[int]:
        return self._row_of.get(pitch)

    def key_of(self, pitch: int) -> Optional[KeyIdentifier]:
        """
        Get the canonical key for a pitch.

        Returns None if the pitch is not on the keyboard.
        """
        return self._pitch_to_key.get(pitch)

    def pitch_of(self, key: Union[str, KeyIdentifier]) -> Optional[int]:
        """
        Get the pitch for a key, accepting canonical and alias forms.

        Args:
            key: KeyIdentifier or key string (case-insensitive)

        Returns:
            MIDI pitch, or None if the key is unknown
        """
        if not isinstance(key, KeyIdentifier):
            key = KeyIdentifier.parse(key)
            if key is None:
                return None
        return self._key_to_pitch.get(str(key))

    def is_exact_match(self, pitch: int) -> bool:
        return pitch in self._pitch_to_key

    def nearest_valid_pitch(self, pitch: int) -> int:
        """
        Find the nearest playable pitch.

        Keeps the pitch class and moves it to the closest row; ties go to
        the lowest row. Only if no row holds the pitch class does it fall
        back to the nearest playable pitch overall (ties to the lower one).

        Args:
            pitch: Any MIDI pitch

        Returns:
            A pitch that key_of() resolves
        """
        if pitch in self._pitch_to_key:
            return pitch

        pitch_class = pitch % 12
        best: Optional[int] = None
        best_distance = None
        for row in range(len(KEYBOARD_ROWS)):
            candidate = self._octave_base(row) + pitch_class
            if candidate not in self._pitch_to_key:
                continue
            distance = abs(candidate - pitch)
            if best_distance is None or distance < best_distance:
                best = candidate
                best_distance = distance

        if best is not None:
            return best

        nearest = self._valid_pitches[0]
        min_distance = abs(pitch - nearest)
        for valid in self._valid_pitches:
            distance = abs(pitch - valid)
            if distance < min_distance:
                nearest = valid
                min_distance = distance
        return nearest

    @staticmethod
    def name_of(pitch: int) -> str:
        """Convert a MIDI pitch to a note name (e.g., 60 -> "C4")."""
        return pitch_name(pitch)

    def display_table(self) -> str:
        """Get a printable key -> note table, highest row first."""
        lines = ["Key -> Note Mapping:", ""]
        for row in reversed(range(len(KEYBOARD_ROWS))):
            octave_base = self._octave_base(row)
            parts = []
            for offset in range(12):
                pitch = octave_base + offset
                key = self._pitch_to_key.get(pitch)
                if key is not None:
                    parts.append(f"{key}={self.name_of(pitch)}")
            lines.append(f"  {ROW_LABELS[row]:<4}: {'  '.join(parts)}")
        return "\n".join(lines)

    def __len__(self) -> int:
        return len(self._valid_pitches)

    def __repr__(self) -> str:
        return (
            f"KeyMap(base_octave={self.base_octave}, "
            f"range={self.name_of(self.lowest)}-{self.name_of(self.highest)})"
        )
