#!/usr/bin/env python3
"""
Voicing Selector
================

Picks one CAGED chord voicing for a scale position.

Both searches in this engine (the fixed-shape search here and the
progression search in progressions.py) share the same mechanics:

1. For each shape, find the chord root on the shape's anchor string.
2. Try that fret and its octaves (+12, +24) up to a maximum fret.
3. Build each candidate from the template and score it by the distance
   between its base fret and the middle of the scale position.
4. Choose a winner, optionally letting common shapes beat slightly closer
   ones (progression search only).

collect_voicing_candidates() and choose_voicing_candidate() implement steps
1-4 once; the callers differ only in which shapes they search and whether a
shape preference applies.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from fret_constants import (
    CAGEDShape, ChordQuality, DEFAULT_SCALE,
    MAJOR_CHORD_INTERVALS, MINOR_CHORD_INTERVALS,
    OCTAVE_SHIFTS, PREFERENCE_TOLERANCE,
    LOW_POSITION_MAX_FRET, HIGH_POSITION_MAX_FRET, HIGH_POSITION_INDEX
)
from pitch import get_fret_for_note, get_root_fret
from scales import (
    get_scale_formula, get_position_window, get_position_fret_range,
    get_scale_positions
)
from tunings import STANDARD_TUNING
from voicing_models import ChordVoicing, ScalePosition
from voicing_templates import (
    get_voicing_template, get_anchor_string, fit_voicing_to_tuning, is_playable
)

logger = logging.getLogger(__name__)

E, A, G, C, D = CAGEDShape.E, CAGEDShape.A, CAGEDShape.G, CAGEDShape.C, CAGEDShape.D

# Shape played at each scale position.
# Minor-family scales start from the E shape, major-family scales from C.
CAGED_POSITION_MAP: Dict[str, List[CAGEDShape]] = {
    "minorPentatonic": [E, D, C, A, G],
    "majorPentatonic": [C, A, G, E, D],
    "pentatonicForms": [E, D, C, A, G],
    "pentatonicFormsMajor": [C, A, G, E, D],
    "blues": [E, D, C, A, G],
    "major": [C, A, G, E, D, C, A],
    "minor": [E, D, C, A, G, E, D],
    "dorian": [E, D, C, A, G, E, D],
    "phrygian": [E, D, C, A, G, E, D],
    "lydian": [C, A, G, E, D, C, A],
    "mixolydian": [C, A, G, E, D, C, A],
    "locrian": [E, D, C, A, G, E, D],
    "harmonicMinor": [E, D, C, A, G, E, D],
    "melodicMinor": [E, D, C, A, G, E, D],
}

# Enumeration order of the all-shape search
SEARCH_ORDER: List[CAGEDShape] = [E, A, D, C, G]


# ============================================================================
# Scale-Level Queries
# ============================================================================

def get_chord_quality(scale: str) -> ChordQuality:
    """
    Triad quality implied by a scale: minor if it has a b3, major if it has a
    major 3rd. Scales with neither default to major.
    """
    formula = get_scale_formula(scale)
    if 3 in formula:
        return ChordQuality.MINOR
    if 4 in formula:
        return ChordQuality.MAJOR
    return ChordQuality.MAJOR


def get_chord_intervals(scale: str) -> List[int]:
    """Root, third and fifth of the scale's tonic triad."""
    if get_chord_quality(scale) is ChordQuality.MINOR:
        return list(MINOR_CHORD_INTERVALS)
    return list(MAJOR_CHORD_INTERVALS)


def get_caged_shape(scale: str, position: Optional[int]) -> CAGEDShape:
    """CAGED shape for a scale position; E when the index is out of range."""
    shapes = CAGED_POSITION_MAP.get(scale, CAGED_POSITION_MAP[DEFAULT_SCALE])
    if position is None or not 0 <= position < len(shapes):
        return CAGEDShape.E
    return shapes[position]


def get_chord_name_for_position(root_note: str, scale: str, position: Optional[int]) -> str:
    """Label such as 'Am (E shape)' for the chord shown at a position."""
    quality = get_chord_quality(scale)
    shape = get_caged_shape(scale, position)
    return f"{root_note}{quality.suffix} ({shape} shape)"


def get_target_fret(root_note: str, window: ScalePosition, tuning: Sequence[str]) -> int:
    """Middle fret of a position window, measured on the lowest string."""
    start_fret, end_fret = get_position_fret_range(get_root_fret(root_note, tuning), window)
    return (start_fret + end_fret) // 2


def get_max_playable_fret(position: int) -> int:
    """Highest anchor fret the fixed-shape search may use for a position."""
    return LOW_POSITION_MAX_FRET if position < HIGH_POSITION_INDEX else HIGH_POSITION_MAX_FRET


# ============================================================================
# Candidate Scoring
# ============================================================================

@dataclass(frozen=True)
class VoicingCandidate:
    """A fitted voicing and its distance (in frets) from the target fret."""
    voicing: ChordVoicing
    distance: int

    @property
    def shape(self) -> CAGEDShape:
        return self.voicing.shape


def collect_voicing_candidates(
    chord_root: str,
    quality: ChordQuality,
    tuning: Sequence[str],
    target_fret: int,
    max_fret: int,
    shapes: Sequence[CAGEDShape]
) -> List[VoicingCandidate]:
    """
    Every playable octave instance of each shape, in enumeration order.

    Anchor frets above max_fret are skipped, as are instances that would need
    a fret behind the nut (C and G shapes anchored at frets 1-2).
    """
    candidates = []
    string_count = len(tuning)

    for shape in shapes:
        template = get_voicing_template(shape, quality)
        anchor_string = get_anchor_string(shape, string_count)
        anchor_fret = get_fret_for_note(chord_root, tuning[anchor_string])

        for shift in OCTAVE_SHIFTS:
            fret = anchor_fret + shift
            if fret > max_fret:
                continue

            voicing = template(fret)
            if not is_playable(voicing):
                logger.debug(f"Skipping {shape} shape at fret {fret}: frets behind the nut")
                continue

            voicing = fit_voicing_to_tuning(voicing, string_count)
            distance = abs(voicing.base_fret - target_fret)
            candidates.append(VoicingCandidate(voicing=voicing, distance=distance))

    logger.debug(
        f"{len(candidates)} candidates for {chord_root} {quality} near fret {target_fret}: "
        f"{[(str(c.shape), c.voicing.root_fret, c.distance) for c in candidates]}"
    )
    return candidates


def choose_voicing_candidate(
    candidates: Sequence[VoicingCandidate],
    shape_preference: Optional[Dict[CAGEDShape, int]] = None,
    tolerance: int = PREFERENCE_TOLERANCE
) -> Optional[VoicingCandidate]:
    """
    Pick the winning candidate.

    Without a preference table the closest candidate wins and ties go to the
    earliest candidate. With one, every candidate within `tolerance` frets of
    the closest competes on shape rank first, then distance, then
    enumeration order.
    """
    if not candidates:
        return None

    closest = min(candidates, key=lambda c: c.distance)
    if shape_preference is None:
        return closest

    band = [c for c in candidates if c.distance - closest.distance <= tolerance]
    return min(band, key=lambda c: (shape_preference.get(c.shape, 99), c.distance))


# ============================================================================
# Fixed-Shape Selection
# ============================================================================

def select_voicing_for_position(
    root_note: str,
    scale: str,
    position: Optional[int],
    tuning: Sequence[str] = STANDARD_TUNING
) -> Optional[ChordVoicing]:
    """
    Voicing of the scale's tonic chord in the shape assigned to a position.

    The shape is fixed by CAGED_POSITION_MAP; only the octave is searched.
    Returns None when the position has no window or no octave is playable.
    """
    window = get_position_window(scale, position)
    if window is None:
        logger.debug(f"No window for position {position} of '{scale}'")
        return None

    quality = get_chord_quality(scale)
    shape = get_caged_shape(scale, position)
    target_fret = get_target_fret(root_note, window, tuning)

    candidates = collect_voicing_candidates(
        root_note, quality, tuning, target_fret,
        max_fret=get_max_playable_fret(position),
        shapes=[shape]
    )
    best = choose_voicing_candidate(candidates)
    if best is None:
        logger.debug(f"No playable {shape} shape for {root_note} {scale} position {position}")
        return None

    return best.voicing


def get_all_chord_voicings(
    root_note: str,
    scale: str,
    tuning: Sequence[str] = STANDARD_TUNING
) -> List[ChordVoicing]:
    """One voicing per scale position, skipping positions without one."""
    voicings = []
    for index in range(len(get_scale_positions(scale))):
        voicing = select_voicing_for_position(root_note, scale, index, tuning)
        if voicing is not None:
            voicings.append(voicing)
    return voicings
