#!/usr/bin/env python3
"""
Progression Resolver
====================

Maps a scale position to one chord of a progression and picks its voicing.

Position N of the scale plays chord N of the progression (looping when the
scale has more positions than the progression has chords). The chord is
voiced near the middle of the scale position, searching all five CAGED
shapes and letting the more common shapes win small distance ties:

    select_voicing_for_progression_step("C", "major", 1, "1-4-5")
    -> F major, E shape at fret 13
"""

import logging
from typing import Dict, List, Optional, Sequence

from fret_constants import (
    ChordQuality, ProgressionViewMode, PROGRESSION_MAX_FRET, SHAPE_PREFERENCE
)
from pitch import transpose_note
from scales import get_scale_formula, get_position_window, get_scale_positions
from tunings import STANDARD_TUNING
from voicing_models import ChordProgression, ChordVoicing
from voicing_selector import (
    SEARCH_ORDER, get_chord_quality, get_target_fret,
    collect_voicing_candidates, choose_voicing_candidate
)

logger = logging.getLogger(__name__)

CHORD_PROGRESSIONS: Dict[str, ChordProgression] = {
    "1-4-5": ChordProgression(
        name="I-IV-V",
        degrees_major=[1, 4, 5],
        degrees_minor=[1, 4, 5],
        description="Classic rock and blues progression",
    ),
    "1-5-6-4": ChordProgression(
        name="I-V-vi-IV",
        degrees_major=[1, 5, 6, 4],
        degrees_minor=[1, 5, 6, 4],
        description="Popular pop progression",
    ),
    "6-4-1-5": ChordProgression(
        name="vi-IV-I-V",
        degrees_major=[6, 4, 1, 5],
        degrees_minor=[6, 4, 1, 5],
        description="Emotional/sad progression",
    ),
    "2-5-1": ChordProgression(
        name="ii-V-I",
        degrees_major=[2, 5, 1],
        degrees_minor=[2, 5, 1],
        description="Jazz turnaround",
    ),
    "1-6-4-5": ChordProgression(
        name="I-vi-IV-V",
        degrees_major=[1, 6, 4, 5],
        degrees_minor=[1, 6, 4, 5],
        description="50s doo-wop progression",
    ),
    "1-4-1-5": ChordProgression(
        name="I-IV-I-V",
        degrees_major=[1, 4, 1, 5],
        degrees_minor=[1, 4, 1, 5],
        description="Simple blues progression",
    ),
}

# Degrees voiced as minor triads, by scale quality.
# Major keys: ii, iii, vi, vii. Minor keys: i, iv, v.
MINOR_DEGREES: Dict[ChordQuality, frozenset] = {
    ChordQuality.MAJOR: frozenset({2, 3, 6, 7}),
    ChordQuality.MINOR: frozenset({1, 4, 5}),
}


def get_progression(progression_key: Optional[str]) -> Optional[ChordProgression]:
    if progression_key is None:
        return None
    return CHORD_PROGRESSIONS.get(progression_key)


def get_progression_degree(scale: str, position: int, progression: ChordProgression) -> int:
    """Degree played at a position; the progression loops over positions."""
    if get_chord_quality(scale) is ChordQuality.MINOR:
        degrees = progression.degrees_minor
    else:
        degrees = progression.degrees_major
    return degrees[position % len(degrees)]


def get_chord_root_for_degree(root_note: str, scale: str, degree: int) -> str:
    """Scale note at a 1-based degree; the scale root if the degree is out of range."""
    formula = get_scale_formula(scale)
    if not 1 <= degree <= len(formula):
        return root_note
    return transpose_note(root_note, formula[degree - 1])


def get_degree_chord_quality(scale: str, degree: int) -> ChordQuality:
    """Diatonic triad quality of a degree in the scale's key."""
    if degree in MINOR_DEGREES[get_chord_quality(scale)]:
        return ChordQuality.MINOR
    return ChordQuality.MAJOR


def select_voicing_for_progression_step(
    root_note: str,
    scale: str,
    position: int,
    progression_key: str,
    tuning: Sequence[str] = STANDARD_TUNING
) -> Optional[ChordVoicing]:
    """
    Voicing of the progression chord at a scale position.

    All five shapes are searched up to fret 22. Among candidates within two
    frets of the closest one the most common shape wins (E, A, G, C, D).
    Returns None for an unknown progression or a position without a window.
    """
    progression = get_progression(progression_key)
    if progression is None:
        logger.debug(f"Unknown progression '{progression_key}'")
        return None

    window = get_position_window(scale, position)
    if window is None:
        logger.debug(f"No window for position {position} of '{scale}'")
        return None

    degree = get_progression_degree(scale, position, progression)
    chord_root = get_chord_root_for_degree(root_note, scale, degree)
    quality = get_degree_chord_quality(scale, degree)
    target_fret = get_target_fret(root_note, window, tuning)

    candidates = collect_voicing_candidates(
        chord_root, quality, tuning, target_fret,
        max_fret=PROGRESSION_MAX_FRET,
        shapes=SEARCH_ORDER
    )
    best = choose_voicing_candidate(candidates, shape_preference=SHAPE_PREFERENCE)
    if best is None:
        return None

    logger.debug(
        f"Progression {progression_key} position {position}: degree {degree} -> "
        f"{chord_root}{quality.suffix}, {best.shape} shape at fret {best.voicing.root_fret}"
    )
    return best.voicing


def get_all_progression_chord_voicings(
    root_note: str,
    scale: str,
    progression_key: str,
    tuning: Sequence[str] = STANDARD_TUNING
) -> List[ChordVoicing]:
    voicings = []
    for index in range(len(get_scale_positions(scale))):
        voicing = select_voicing_for_progression_step(root_note, scale, index, progression_key, tuning)
        if voicing is not None:
            voicings.append(voicing)
    return voicings


def get_progression_chord_name(
    root_note: str,
    scale: str,
    position: int,
    progression_key: str
) -> str:
    """Chord symbol such as 'Am' or 'F'; empty for an unknown progression."""
    progression = get_progression(progression_key)
    if progression is None:
        return ""

    degree = get_progression_degree(scale, position, progression)
    chord_root = get_chord_root_for_degree(root_note, scale, degree)
    return f"{chord_root}{get_degree_chord_quality(scale, degree).suffix}"


def get_effective_root_note(
    root_note: str,
    scale: str,
    position: Optional[int],
    progression_key: Optional[str],
    view_mode: ProgressionViewMode = ProgressionViewMode.CHORD
) -> str:
    """
    Root the fretboard is labelled against.

    In the progression scale view the scale is re-rooted on the current
    chord; every other view keeps the key's root.
    """
    if view_mode is not ProgressionViewMode.SCALE or position is None:
        return root_note

    progression = get_progression(progression_key)
    if progression is None:
        return root_note

    degree = get_progression_degree(scale, position, progression)
    return get_chord_root_for_degree(root_note, scale, degree)
