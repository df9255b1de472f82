#!/usr/bin/env python3
"""
Pitch Model
===========

12-tone pitch-class arithmetic used by every fretboard cell query:
which note sounds at a fret, its interval from a root, whether it belongs to a
scale, and which scale degree it is.

All functions are total over the twelve sharps-only pitch-class names in
NOTES. A name outside that set raises ValueError from NOTES.index.
"""

from typing import List, Sequence

from fret_constants import NOTES, OCTAVE, INTERVAL_NAMES
from tunings import STANDARD_TUNING


def note_index(note: str) -> int:
    """Pitch-class number (C=0 ... B=11) of a note name."""
    return NOTES.index(note)


def transpose_note(note: str, semitones: int) -> str:
    """Move a note up (or down, for negative values) by semitones."""
    return NOTES[(note_index(note) + semitones) % OCTAVE]


def get_note_at_fret(open_note: str, fret: int) -> str:
    """Note sounding at a fret on a string tuned to open_note."""
    return transpose_note(open_note, fret)


def get_interval(root_note: str, note: str) -> int:
    """Ascending interval in semitones (0-11) from root_note to note."""
    return (note_index(note) - note_index(root_note)) % OCTAVE


def is_note_in_scale(note: str, root_note: str, scale_formula: Sequence[int]) -> bool:
    return get_interval(root_note, note) in scale_formula


def get_scale_degree(note: str, root_note: str, scale_formula: Sequence[int]) -> int:
    """
    1-based position of the note's interval within the formula as stored.

    Returns 0 when the note is not in the scale.
    """
    interval = get_interval(root_note, note)
    if interval not in scale_formula:
        return 0
    return list(scale_formula).index(interval) + 1


def get_interval_name(root_note: str, note: str) -> str:
    """Short interval label (R, b3, 5, ...) for note relative to root_note."""
    return INTERVAL_NAMES.get(get_interval(root_note, note), '')


def get_fret_for_note(note: str, open_note: str) -> int:
    """Lowest fret (0-11) where note sounds on a string tuned to open_note."""
    return get_interval(open_note, note)


def get_root_fret(root_note: str, tuning: Sequence[str] = STANDARD_TUNING) -> int:
    """Fret where the root first appears on the lowest string (tuning[0])."""
    return get_fret_for_note(root_note, tuning[0])


def get_scale_notes(root_note: str, scale_formula: Sequence[int]) -> List[str]:
    """Pitch classes of a scale, in formula order."""
    return [transpose_note(root_note, interval) for interval in scale_formula]
