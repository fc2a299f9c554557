"""Global constants for windkeys."""

# Pitch names
PITCH_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

# Keyboard layout: one row of natural keys per octave, lowest row first
KEYBOARD_ROWS = (
    ("Z", "X", "C", "V", "B", "N", "M"),  # Low octave
    ("A", "S", "D", "F", "G", "H", "J"),  # Mid octave
    ("Q", "W", "E", "R", "T", "Y", "U"),  # High octave
)
ROW_LABELS = ("Low", "Mid", "High")

# C-major diatonic scale intervals (semitones from root)
NATURAL_OFFSETS = (0, 2, 4, 5, 7, 9, 11)

# Chromatic offset -> (modifier name, natural key index within the row)
CHROMATIC_OFFSETS = {
    1: ("Shift", 0),   # C# = Shift + C
    3: ("Ctrl", 2),    # Eb = Ctrl + E
    6: ("Shift", 3),   # F# = Shift + F
    8: ("Shift", 4),   # G# = Shift + G
    10: ("Ctrl", 6),   # Bb = Ctrl + B
}

# MIDI ranges
MIDI_MIN = 0
MIDI_MAX = 127
PERCUSSION_CHANNEL = 9  # General MIDI channel 10, zero-based

# Converter defaults
DEFAULT_TEMPO = 120
DEFAULT_BASE_OCTAVE = 4
MIN_BASE_OCTAVE = -1
MAX_BASE_OCTAVE = 6
DEFAULT_MAX_SIMULTANEOUS_KEYS = 2
DEFAULT_QUANTIZATION_GRID = 0.05  # seconds, ~1/32 note at 150 BPM
DEFAULT_MIN_NOTE_GAP = 0.100  # seconds
DEFAULT_MERGE_TOLERANCE = 0.010  # seconds
MIN_NOTE_DURATION = 0.05  # seconds, shortest press the game registers
