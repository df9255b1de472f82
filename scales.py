#!/usr/bin/env python3
"""
Scale Catalog and Position Mapping
==================================

Named interval formulas and, per scale, an ordered list of fret windows
("positions"). Pentatonic-style scales carry 5 windows, heptatonic scales 7
(three-notes-per-string layout).

Windows are offsets from the root's first fret on the lowest string, so the
same table serves every key and tuning:

    root_fret = get_root_fret("A", STANDARD_TUNING)        # 5
    window = SCALE_POSITIONS["minorPentatonic"][0]         # 0..3
    frets 5..8 (and 17..20 an octave up) are "in position"

Unknown scale keys fall back to minorPentatonic and the fallback is logged.
"""

import logging
from typing import Dict, List, Optional, Tuple

from fret_constants import (
    DEFAULT_SCALE, DEFAULT_POSITION_COUNT, DEFAULT_FRET_COUNT, OCTAVE
)
from voicing_models import ScalePosition

logger = logging.getLogger(__name__)

# ============================================================================
# Scale Formulas
# ============================================================================

SCALES: Dict[str, List[int]] = {
    "major": [0, 2, 4, 5, 7, 9, 11],
    "minor": [0, 2, 3, 5, 7, 8, 10],
    "majorPentatonic": [0, 2, 4, 7, 9],
    "minorPentatonic": [0, 3, 5, 7, 10],
    # Rectangle & Stack forms: same notes as minor pentatonic
    "pentatonicForms": [0, 3, 5, 7, 10],
    # Same physical forms heard in a major context: 1, 2, 3, 5, 6
    "pentatonicFormsMajor": [0, 2, 4, 7, 9],
    "blues": [0, 3, 5, 6, 7, 10],
    "dorian": [0, 2, 3, 5, 7, 9, 10],
    "phrygian": [0, 1, 3, 5, 7, 8, 10],
    "lydian": [0, 2, 4, 6, 7, 9, 11],
    "mixolydian": [0, 2, 4, 5, 7, 9, 10],
    "locrian": [0, 1, 3, 5, 6, 8, 10],
    "harmonicMinor": [0, 2, 3, 5, 7, 8, 11],
    "melodicMinor": [0, 2, 3, 5, 7, 9, 11],
}

SCALE_NAMES: Dict[str, str] = {
    "major": "Major",
    "minor": "Natural Minor",
    "majorPentatonic": "Major Pentatonic",
    "minorPentatonic": "Minor Pentatonic",
    "pentatonicForms": "Minor Pentatonic Forms (Fret Science)",
    "pentatonicFormsMajor": "Major Pentatonic Forms (Fret Science)",
    "blues": "Blues",
    "dorian": "Dorian",
    "phrygian": "Phrygian",
    "lydian": "Lydian",
    "mixolydian": "Mixolydian",
    "locrian": "Locrian",
    "harmonicMinor": "Harmonic Minor",
    "melodicMinor": "Melodic Minor",
}


def _windows(*spans: Tuple[int, int]) -> List[ScalePosition]:
    return [ScalePosition(start=start, end=end) for start, end in spans]


def _named_windows(*spans: Tuple[int, int, str]) -> List[ScalePosition]:
    return [ScalePosition(start=start, end=end, name=name) for start, end, name in spans]


# ============================================================================
# Scale Positions
# ============================================================================

SCALE_POSITIONS: Dict[str, List[ScalePosition]] = {
    # Five pentatonic boxes; box 5 leads back to box 1
    "minorPentatonic": _windows((0, 3), (3, 6), (5, 8), (7, 10), (10, 13)),
    "majorPentatonic": _windows((0, 4), (2, 5), (4, 7), (7, 10), (9, 12)),
    # Form order for horizontal movement is 1-4-2-5-3
    "pentatonicForms": _named_windows(
        (0, 3, "Form 1 (Box)"),
        (2, 5, "Form 2"),
        (4, 8, "Form 3"),
        (7, 10, "Form 4"),
        (9, 12, "Form 5"),
    ),
    # The major root sits 3 frets above its relative minor in the same form,
    # so every window is the minor form shifted -3 (C major Form 1 = frets 5-8)
    "pentatonicFormsMajor": _named_windows(
        (-3, 0, "Form 1"),
        (-1, 2, "Form 2"),
        (1, 5, "Form 3"),
        (4, 7, "Form 4"),
        (6, 9, "Form 5"),
    ),
    "blues": _windows((0, 3), (3, 6), (5, 8), (7, 10), (10, 13)),
    # Seven-note scales: one window per three-notes-per-string pattern
    "major": _windows((0, 4), (2, 6), (4, 8), (5, 9), (7, 11), (9, 13), (11, 15)),
    "minor": _windows((0, 4), (2, 6), (3, 7), (5, 9), (7, 11), (8, 12), (10, 14)),
    "dorian": _windows((0, 4), (2, 6), (3, 7), (5, 9), (7, 11), (9, 13), (10, 14)),
    "phrygian": _windows((0, 4), (1, 5), (3, 7), (5, 9), (7, 11), (8, 12), (10, 14)),
    "lydian": _windows((0, 4), (2, 6), (4, 8), (6, 10), (7, 11), (9, 13), (11, 15)),
    "mixolydian": _windows((0, 4), (2, 6), (4, 8), (5, 9), (7, 11), (9, 13), (10, 14)),
    "locrian": _windows((0, 4), (1, 5), (3, 7), (5, 9), (6, 10), (8, 12), (10, 14)),
    "harmonicMinor": _windows((0, 4), (2, 6), (3, 7), (5, 9), (7, 11), (8, 12), (11, 15)),
    "melodicMinor": _windows((0, 4), (2, 6), (3, 7), (5, 9), (7, 11), (9, 13), (11, 15)),
}


# ============================================================================
# Catalog Lookups
# ============================================================================

def resolve_scale(scale: str) -> str:
    """Return scale if it is in the catalog, otherwise the default scale key."""
    if scale in SCALES:
        return scale
    logger.warning(f"Unknown scale '{scale}', falling back to '{DEFAULT_SCALE}'")
    return DEFAULT_SCALE


def get_scale_formula(scale: str) -> List[int]:
    return list(SCALES[resolve_scale(scale)])


def get_scale_display_name(scale: str) -> str:
    return SCALE_NAMES[resolve_scale(scale)]


def get_scale_positions(scale: str) -> List[ScalePosition]:
    return list(SCALE_POSITIONS[resolve_scale(scale)])


def get_position_count(scale: str) -> int:
    """Number of position windows for a scale; 5 for unrecognized keys."""
    positions = SCALE_POSITIONS.get(scale)
    return len(positions) if positions else DEFAULT_POSITION_COUNT


def get_position_window(scale: str, position: Optional[int]) -> Optional[ScalePosition]:
    """The window for a position index, or None if the index has no window."""
    if position is None:
        return None
    positions = SCALE_POSITIONS[resolve_scale(scale)]
    if 0 <= position < len(positions):
        return positions[position]
    return None


def get_position_fret_range(root_fret: int, window: ScalePosition) -> Tuple[int, int]:
    """Absolute (start, end) frets of a window for a root on the lowest string."""
    return root_fret + window.start, root_fret + window.end


# ============================================================================
# Position Mapping
# ============================================================================

def is_in_position(
    fret: int,
    position: Optional[int],
    root_fret: int,
    max_fret: int = DEFAULT_FRET_COUNT,
    scale: str = DEFAULT_SCALE
) -> bool:
    """
    Check if a fret falls inside the selected position window.

    A fret qualifies when it is in any of:
    - the primary window, clamped below at the nut;
    - the same window an octave up, when that copy starts on the neck;
    - for windows starting below the nut, the copy starting at 12 + start
      (the form's upper end is taken from the raw window offset).

    No position (None) or an index without a window shows every fret.
    """
    if position is None:
        return True

    window = get_position_window(scale, position)
    if window is None:
        return True

    start_fret, end_fret = get_position_fret_range(root_fret, window)

    if max(0, start_fret) <= fret <= end_fret:
        return True

    if start_fret + OCTAVE <= max_fret and start_fret + OCTAVE <= fret <= end_fret + OCTAVE:
        return True

    if start_fret < 0:
        if OCTAVE + start_fret <= fret <= OCTAVE + window.end:
            return True

    return False
