#!/usr/bin/env python3
"""
CAGED Fretboard Engine - Constants and Definitions
==================================================

Constants and enums shared by the pitch, scale, tuning and voicing modules:
pitch-class names, CAGED shapes, chord qualities, fret limits and the
fixed tables the voicing search relies on.
"""

from enum import Enum
from typing import Dict, List, Tuple


# ============================================================================
# Pitch Classes
# ============================================================================

# Sharps-only spelling, C first. Index in this tuple is the pitch-class number.
NOTES: Tuple[str, ...] = ('C', 'C#', 'D', 'D#', 'E', 'F', 'F#', 'G', 'G#', 'A', 'A#', 'B')

OCTAVE = 12

INTERVAL_NAMES: Dict[int, str] = {
    0: 'R',
    1: 'b2',
    2: '2',
    3: 'b3',
    4: '3',
    5: '4',
    6: 'b5',
    7: '5',
    8: 'b6',
    9: '6',
    10: 'b7',
    11: '7',
}


# ============================================================================
# Chord Shape Constants
# ============================================================================

class CAGEDShape(Enum):
    """The five movable chord shapes, named after their open chords."""
    C = "C"
    A = "A"
    G = "G"
    E = "E"
    D = "D"

    def __str__(self):
        return self.value

CAGED_SHAPES: List[CAGEDShape] = [
    CAGEDShape.C, CAGEDShape.A, CAGEDShape.G, CAGEDShape.E, CAGEDShape.D
]

class ChordQuality(Enum):
    """Triad qualities supported by the voicing templates."""
    MAJOR = "major"
    MINOR = "minor"

    def __str__(self):
        return self.value

    @property
    def suffix(self) -> str:
        return "m" if self is ChordQuality.MINOR else ""

MAJOR_CHORD_INTERVALS: List[int] = [0, 4, 7]  # R, 3, 5
MINOR_CHORD_INTERVALS: List[int] = [0, 3, 7]  # R, b3, 5

# R-3-5 filter accepts both thirds
R35_INTERVALS: Tuple[int, ...] = (0, 3, 4, 7)

# Marker used in ChordVoicing.frets for a string that is not played
MUTED = "x"

# Fingering commonality rank used by the progression search (lower wins)
SHAPE_PREFERENCE: Dict[CAGEDShape, int] = {
    CAGEDShape.E: 1,  # full six-string barre
    CAGEDShape.A: 2,  # five-string barre
    CAGEDShape.G: 3,
    CAGEDShape.C: 4,
    CAGEDShape.D: 5,  # four strings only
}

# Distance band (in frets) inside which shape preference overrides distance
PREFERENCE_TOLERANCE = 2


# ============================================================================
# Fret Limits
# ============================================================================

DEFAULT_FRET_COUNT = 24
MAX_FRET = 24

# Fixed-shape search: positions below HIGH_POSITION_INDEX stay at or below fret 22
LOW_POSITION_MAX_FRET = 22
HIGH_POSITION_MAX_FRET = 24
HIGH_POSITION_INDEX = 3

PROGRESSION_MAX_FRET = 22

# Octave shifts tried for every anchor fret
OCTAVE_SHIFTS: Tuple[int, ...] = (0, 12, 24)

FRET_MARKERS: List[int] = [3, 5, 7, 9, 12, 15, 17, 19, 21, 24]
DOUBLE_MARKERS: List[int] = [12, 24]


# ============================================================================
# Catalog Defaults
# ============================================================================

DEFAULT_SCALE = "minorPentatonic"
DEFAULT_TUNING = "standard"
DEFAULT_POSITION_COUNT = 5
DEFAULT_ROOT_NOTE = "A"


# ============================================================================
# Instrument Constants
# ============================================================================

class InstrumentType(Enum):
    """Supported fretted instruments by string count."""
    FOUR_STRING = "4-string"
    SIX_STRING = "6-string"
    SEVEN_STRING = "7-string"
    EIGHT_STRING = "8-string"

    def __str__(self):
        return self.value

    @property
    def string_count(self) -> int:
        return int(self.value.split("-")[0])

INSTRUMENT_NAMES: Dict[InstrumentType, str] = {
    InstrumentType.FOUR_STRING: '4-String Bass',
    InstrumentType.SIX_STRING: '6-String Guitar',
    InstrumentType.SEVEN_STRING: '7-String Guitar',
    InstrumentType.EIGHT_STRING: '8-String Guitar',
}

SUPPORTED_STRING_COUNTS: List[int] = [inst.string_count for inst in InstrumentType]


# ============================================================================
# Display Constants
# ============================================================================

class DisplayMode(Enum):
    """What each fretboard cell is labelled with."""
    NOTES = "notes"
    INTERVALS = "intervals"
    DEGREES = "degrees"

    def __str__(self):
        return self.value

# Cycle order for the display-mode toggle
DISPLAY_MODE_ORDER: List[DisplayMode] = [
    DisplayMode.NOTES,
    DisplayMode.INTERVALS,
    DisplayMode.DEGREES,
]

class ProgressionViewMode(Enum):
    """Progression overlay: chord voicing or the scale re-rooted on the chord."""
    CHORD = "chord"
    SCALE = "scale"

    def __str__(self):
        return self.value


def is_valid_note(note: str) -> bool:
    """Check if a pitch-class name is in the sharps-only set."""
    return note in NOTES
