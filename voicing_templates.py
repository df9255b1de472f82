#!/usr/bin/env python3
"""
CAGED Voicing Template Library
==============================

Five movable chord shapes (C, A, G, E, D) for major and minor triads. Each
template maps an anchor fret (where the shape's root sits on its anchor
string) to a full six-string ChordVoicing.

Every template is a fixed per-string offset pattern from the anchor fret, so
the interval pattern of the shape is preserved wherever it is moved:

    MAJOR_VOICINGS[CAGEDShape.E](5)   ->  frets 5 7 7 6 5 5, barre at 5
    MAJOR_VOICINGS[CAGEDShape.E](0)   ->  frets 0 2 2 1 0 0, open fingering

At the shape's natural open fret (0 for E/A/D, 3 for C/G) the template keeps
the traditional open-chord fingering; anywhere else the fingering switches to
the barre form (finger 1 across the barred strings, 2-4 for the rest).

Templates are written for six strings. fit_voicing_to_tuning() lays them onto
4, 7 and 8-string tunings.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from fret_constants import CAGEDShape, ChordQuality, MUTED
from voicing_models import ChordVoicing, FretValue

logger = logging.getLogger(__name__)

VoicingTemplate = Callable[[int], ChordVoicing]

TEMPLATE_STRING_COUNT = 6

# Shape -> string (0 = lowest) holding the root the shape is anchored on
ANCHOR_STRINGS: Dict[CAGEDShape, int] = {
    CAGEDShape.E: 0,
    CAGEDShape.G: 0,
    CAGEDShape.A: 1,
    CAGEDShape.C: 1,
    CAGEDShape.D: 2,
}

# Anchor fret at which each shape is the familiar open chord
OPEN_FRETS: Dict[CAGEDShape, int] = {
    CAGEDShape.E: 0,
    CAGEDShape.A: 0,
    CAGEDShape.D: 0,
    CAGEDShape.C: 3,
    CAGEDShape.G: 3,
}


# ============================================================================
# Voicing Construction
# ============================================================================

def get_base_fret(frets: Sequence[FretValue]) -> int:
    """Lowest numeric fret, 0 if every string is muted."""
    numeric = [fret for fret in frets if fret != MUTED]
    return min(numeric) if numeric else 0


def detect_barre(frets: Sequence[FretValue], fingers: Sequence[Optional[int]]) -> Optional[int]:
    """
    Fret held by one finger across two or more strings, or None.

    Fingers are checked from 1 upward so an index-finger barre wins over a
    partial barre played with another finger.
    """
    strings_at: Dict[Tuple[int, int], int] = defaultdict(int)
    for fret, finger in zip(frets, fingers):
        if finger is None or fret == MUTED:
            continue
        strings_at[(finger, fret)] += 1

    for finger, fret in sorted(strings_at):
        if strings_at[(finger, fret)] >= 2:
            return fret
    return None


def create_voicing(
    frets: Sequence[FretValue],
    fingers: Sequence[Optional[int]],
    shape: CAGEDShape,
    root_string: int,
    root_fret: int
) -> ChordVoicing:
    """Build a ChordVoicing, deriving base fret and barre from frets/fingers."""
    return ChordVoicing(
        frets=tuple(frets),
        fingers=tuple(fingers),
        base_fret=get_base_fret(frets),
        barre=detect_barre(frets, fingers),
        shape=shape,
        root_string=root_string,
        root_fret=root_fret,
    )


def is_playable(voicing: ChordVoicing) -> bool:
    """False when a shape moved below its open position lands behind the nut."""
    return all(fret >= 0 for fret in voicing.numeric_frets())


# ============================================================================
# Template Definitions
# ============================================================================

@dataclass(frozen=True)
class ShapeTemplate:
    """
    Fixed fret-offset pattern for one shape and quality.

    offsets[i] is the fret of string i relative to the anchor fret, or None
    for a muted string. open_fingers applies at the open fret, barre_fingers
    everywhere else.
    """
    shape: CAGEDShape
    quality: ChordQuality
    offsets: Tuple[Optional[int], ...]
    open_fingers: Tuple[Optional[int], ...]
    barre_fingers: Tuple[Optional[int], ...]

    @property
    def root_string(self) -> int:
        return ANCHOR_STRINGS[self.shape]

    @property
    def open_fret(self) -> int:
        return OPEN_FRETS[self.shape]

    def is_open(self, anchor_fret: int) -> bool:
        return anchor_fret == self.open_fret

    def frets_at(self, anchor_fret: int) -> List[FretValue]:
        return [MUTED if offset is None else anchor_fret + offset for offset in self.offsets]

    def __call__(self, anchor_fret: int) -> ChordVoicing:
        fingers = self.open_fingers if self.is_open(anchor_fret) else self.barre_fingers
        return create_voicing(
            self.frets_at(anchor_fret), fingers, self.shape, self.root_string, anchor_fret
        )


_ = None  # muted / open string

MAJOR_VOICINGS: Dict[CAGEDShape, ShapeTemplate] = {
    # E: root on the 6th string; open E = 0 2 2 1 0 0
    CAGEDShape.E: ShapeTemplate(
        CAGEDShape.E, ChordQuality.MAJOR,
        offsets=(0, 2, 2, 1, 0, 0),
        open_fingers=(_, 2, 3, 1, _, _),
        barre_fingers=(1, 3, 4, 2, 1, 1),
    ),
    # A: root on the 5th string; open A = x 0 2 2 2 0
    CAGEDShape.A: ShapeTemplate(
        CAGEDShape.A, ChordQuality.MAJOR,
        offsets=(_, 0, 2, 2, 2, 0),
        open_fingers=(_, _, 1, 2, 3, _),
        barre_fingers=(_, 1, 3, 3, 3, 1),
    ),
    # D: root on the 4th string; open D = x x 0 2 3 2
    CAGEDShape.D: ShapeTemplate(
        CAGEDShape.D, ChordQuality.MAJOR,
        offsets=(_, _, 0, 2, 3, 2),
        open_fingers=(_, _, _, 1, 3, 2),
        barre_fingers=(_, _, 1, 2, 4, 3),
    ),
    # C: root on the 5th string at fret 3; open C = x 3 2 0 1 0
    CAGEDShape.C: ShapeTemplate(
        CAGEDShape.C, ChordQuality.MAJOR,
        offsets=(_, 0, -1, -3, -2, -3),
        open_fingers=(_, 3, 2, _, 1, _),
        barre_fingers=(_, 4, 3, 1, 2, 1),
    ),
    # G: root on the 6th string at fret 3; open G = 3 2 0 0 0 3
    CAGEDShape.G: ShapeTemplate(
        CAGEDShape.G, ChordQuality.MAJOR,
        offsets=(0, -1, -3, -3, -3, 0),
        open_fingers=(2, 1, _, _, _, 3),
        barre_fingers=(3, 2, 1, 1, 1, 4),
    ),
}

MINOR_VOICINGS: Dict[CAGEDShape, ShapeTemplate] = {
    # Em = 0 2 2 0 0 0
    CAGEDShape.E: ShapeTemplate(
        CAGEDShape.E, ChordQuality.MINOR,
        offsets=(0, 2, 2, 0, 0, 0),
        open_fingers=(_, 2, 3, _, _, _),
        barre_fingers=(1, 3, 4, 1, 1, 1),
    ),
    # Am = x 0 2 2 1 0
    CAGEDShape.A: ShapeTemplate(
        CAGEDShape.A, ChordQuality.MINOR,
        offsets=(_, 0, 2, 2, 1, 0),
        open_fingers=(_, _, 2, 3, 1, _),
        barre_fingers=(_, 1, 3, 4, 2, 1),
    ),
    # Dm = x x 0 2 3 1
    CAGEDShape.D: ShapeTemplate(
        CAGEDShape.D, ChordQuality.MINOR,
        offsets=(_, _, 0, 2, 3, 1),
        open_fingers=(_, _, _, 2, 3, 1),
        barre_fingers=(_, _, 1, 3, 4, 2),
    ),
    # Cm = x 3 1 0 1 x (high string muted, its b3 is out of reach)
    CAGEDShape.C: ShapeTemplate(
        CAGEDShape.C, ChordQuality.MINOR,
        offsets=(_, 0, -2, -3, -2, _),
        open_fingers=(_, 3, 1, _, 2, _),
        barre_fingers=(_, 4, 2, 1, 3, _),
    ),
    # Gm = 3 1 0 0 3 3 (B string takes the 5th instead of the b3)
    CAGEDShape.G: ShapeTemplate(
        CAGEDShape.G, ChordQuality.MINOR,
        offsets=(0, -2, -3, -3, 0, 0),
        open_fingers=(2, 1, _, _, 3, 4),
        barre_fingers=(3, 2, 1, 1, 4, 4),
    ),
}


def get_voicing_templates(quality: ChordQuality) -> Dict[CAGEDShape, ShapeTemplate]:
    return MINOR_VOICINGS if quality is ChordQuality.MINOR else MAJOR_VOICINGS


def get_voicing_template(shape: CAGEDShape, quality: ChordQuality) -> ShapeTemplate:
    return get_voicing_templates(quality)[shape]


# ============================================================================
# Fitting to Tunings
# ============================================================================

def _string_offset(string_count: int) -> int:
    """Strings below the six-string pattern (7/8-string necks)."""
    return max(0, string_count - TEMPLATE_STRING_COUNT)


def get_anchor_string(shape: CAGEDShape, string_count: int = TEMPLATE_STRING_COUNT) -> int:
    """Tuning string index carrying the shape's root for a given string count."""
    return ANCHOR_STRINGS[shape] + _string_offset(string_count)


def fit_voicing_to_tuning(voicing: ChordVoicing, string_count: int) -> ChordVoicing:
    """
    Lay a six-string voicing onto a tuning with string_count strings.

    Extended-range necks keep the pattern on their top six strings and mute the
    extra low strings. Four-string necks keep the pattern's lowest four strings.
    Base fret and barre are recomputed on the fitted strings.
    """
    if string_count == voicing.string_count:
        return voicing

    if string_count > voicing.string_count:
        extra = string_count - voicing.string_count
        frets = [MUTED] * extra + list(voicing.frets)
        fingers = [None] * extra + list(voicing.fingers)
        root_string = voicing.root_string + extra
    else:
        frets = list(voicing.frets[:string_count])
        fingers = list(voicing.fingers[:string_count])
        root_string = voicing.root_string

    logger.debug(f"Fitted {voicing.shape} voicing from {voicing.string_count} to {string_count} strings")
    return create_voicing(frets, fingers, voicing.shape, root_string, voicing.root_fret)
