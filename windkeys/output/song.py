"""Song record - The converted, playable song and its JSON form."""

import json
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Union

from ..core import Chord, KeyIdentifier, SongFormatError


@dataclass
class Song:
    """A converted song ready for playback."""

    title: str
    bpm: int
    notes: List[Chord] = field(default_factory=list)

    @property
    def duration(self) -> float:
        """Total duration of the song in seconds."""
        if not self.notes:
            return 0.0
        return max(c.end for c in self.notes)

    @property
    def key_presses(self) -> int:
        return sum(len(c.keys) for c in self.notes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the persisted record (keys in canonical case)."""
        return {
            "title": self.title,
            "bpm": self.bpm,
            "duration": self.duration,
            "notes": [
                {
                    "time": c.start,
                    "keys": [str(k) for k in c.keys],
                    "duration": c.duration,
                }
                for c in self.notes
            ],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Song":
        """
        Build a Song from its persisted record.

        The song-level "duration" is derived and ignored.

        Raises:
            SongFormatError: If the record breaks the song format
        """
        if not isinstance(data, dict):
            raise SongFormatError("Song record must be a JSON object")
        try:
            title = str(data["title"])
            bpm = int(data["bpm"])
            raw_notes = data.get("notes", [])
        except (KeyError, TypeError, ValueError) as e:
            raise SongFormatError(f"Invalid song header: {e}") from e

        notes: List[Chord] = []
        previous = 0.0
        for i, item in enumerate(raw_notes):
            try:
                time = float(item["time"])
                duration = float(item["duration"])
                key_strings = list(item["keys"])
            except (KeyError, TypeError, ValueError) as e:
                raise SongFormatError(f"Invalid note #{i}: {e}") from e

            if not (math.isfinite(time) and math.isfinite(duration)):
                raise SongFormatError(f"Note #{i} has a non-finite time or duration")
            if time < 0 or time < previous:
                raise SongFormatError(f"Note #{i} time {time} is negative or out of order")
            if duration <= 0:
                raise SongFormatError(f"Note #{i} has non-positive duration {duration}")
            if not key_strings:
                raise SongFormatError(f"Note #{i} has no keys")

            keys = []
            for text in key_strings:
                key = KeyIdentifier.parse(text)
                if key is None:
                    raise SongFormatError(f"Note #{i} has invalid key {text!r}")
                if key in keys:
                    raise SongFormatError(f"Note #{i} repeats key {text!r}")
                keys.append(key)

            notes.append(Chord(start=time, keys=tuple(keys), duration=duration))
            previous = time

        return cls(title=title, bpm=bpm, notes=notes)

    def save(self, output_path: Union[str, Path]) -> Path:
        """
        Save the song as indented JSON.

        Args:
            output_path: Path to output JSON file

        Returns:
            The path written
        """
        path = Path(output_path)

        # Ensure output directory exists
        path.parent.mkdir(parents=True, exist_ok=True)

        path.write_text(json.dumps(self.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8")
        return path

    @classmethod
    def load(cls, input_path: Union[str, Path]) -> "Song":
        """
        Load a song from a JSON file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            SongFormatError: If the file is not a valid song
        """
        path = Path(input_path)
        if not path.exists():
            raise FileNotFoundError(f"Song file not found: {path}")

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise SongFormatError(f"Failed to parse song from {path}: {e}") from e
        return cls.from_dict(data)
