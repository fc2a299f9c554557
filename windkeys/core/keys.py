"""Key identifiers - the playable keys of the 36-key instrument."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .constants import KEYBOARD_ROWS

NATURAL_LETTERS = frozenset(letter for row in KEYBOARD_ROWS for letter in row)


class Modifier(Enum):
    """The two exclusive modifier classes."""

    RAISE = "Shift"
    LOWER = "Ctrl"

    @property
    def opposite(self) -> "Modifier":
        return Modifier.LOWER if self is Modifier.RAISE else Modifier.RAISE

    @classmethod
    def from_name(cls, name: str) -> Optional["Modifier"]:
        """Look up a modifier by name, ignoring case."""
        lowered = name.strip().lower()
        for modifier in cls:
            if modifier.value.lower() == lowered:
                return modifier
        return None


@dataclass(frozen=True)
class KeyIdentifier:
    """A natural key, optionally combined with one modifier.

    String form is ``<Letter>`` for natural keys and
    ``<ModifierName>+<Letter>`` for chromatic ones, e.g. ``"Shift+Z"``.
    """

    letter: str
    modifier: Optional[Modifier] = None

    @property
    def is_natural(self) -> bool:
        return self.modifier is None

    def __str__(self) -> str:
        if self.modifier is None:
            return self.letter
        return f"{self.modifier.value}+{self.letter}"

    @classmethod
    def parse(cls, text: str) -> Optional["KeyIdentifier"]:
        """
        Parse a key string, case-insensitively.

        Args:
            text: Key string such as "z", "Shift+Z" or "ctrl+c"

        Returns:
            KeyIdentifier in canonical case, or None if malformed
        """
        if not isinstance(text, str):
            return None

        parts = text.strip().split("+")
        if len(parts) == 1:
            modifier = None
            letter = parts[0]
        elif len(parts) == 2:
            modifier = Modifier.from_name(parts[0])
            if modifier is None:
                return None
            letter = parts[1]
        else:
            return None

        letter = letter.strip().upper()
        if letter not in NATURAL_LETTERS:
            return None
        return cls(letter=letter, modifier=modifier)
