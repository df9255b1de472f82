#!/usr/bin/env python3
"""
Fretboard Map
=============

Per-cell fretboard data for a view state: which note sits at every
(string, fret), whether it is in the scale and the selected position, what
label it carries, and which chord fingering (if any) covers it.

FretboardState holds every user-facing toggle. Transitions return a new
state rather than mutating, so a front end can keep history or diff states:

    state = FretboardState().with_scale("major").with_position(2)
    view = build_fretboard(state)
    view.cells[0][5].label   # label of the 5th fret on the lowest string
"""

import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

from fret_constants import (
    DisplayMode, DISPLAY_MODE_ORDER, ProgressionViewMode, MUTED,
    R35_INTERVALS, FRET_MARKERS, DOUBLE_MARKERS, SUPPORTED_STRING_COUNTS,
    DEFAULT_ROOT_NOTE, DEFAULT_SCALE, DEFAULT_TUNING, DEFAULT_FRET_COUNT, MAX_FRET
)
from pitch import (
    get_note_at_fret, get_interval, get_interval_name, get_scale_degree,
    get_root_fret, get_scale_notes
)
from progressions import (
    get_effective_root_note, get_progression_chord_name,
    select_voicing_for_progression_step, get_all_progression_chord_voicings
)
from scales import get_scale_formula, get_scale_display_name, is_in_position
from tunings import get_default_tuning, get_tuning
from voicing_models import ChordVoicing
from voicing_selector import (
    get_chord_name_for_position, select_voicing_for_position, get_all_chord_voicings
)

logger = logging.getLogger(__name__)

OPEN_STRING_LABEL = "O"
MUTED_STRING_LABEL = "X"

_CAMEL_CONFIG = {
    "frozen": True,
    "alias_generator": to_camel,
    "populate_by_name": True,
}


# ============================================================================
# View State
# ============================================================================

class FretboardState(BaseModel):
    """All toggles that shape a fretboard view."""
    root_note: str = DEFAULT_ROOT_NOTE
    scale: str = DEFAULT_SCALE
    string_count: int = 6
    tuning: str = DEFAULT_TUNING
    display_mode: DisplayMode = DisplayMode.NOTES
    position: Optional[int] = Field(None, ge=0)
    show_only_chord_tones: bool = Field(False, description="R-3-5 filter")
    show_chords_mode: bool = False
    show_progression_mode: bool = False
    selected_progression: Optional[str] = None
    show_fingerings: bool = True
    progression_view_mode: ProgressionViewMode = ProgressionViewMode.CHORD
    frets: int = Field(DEFAULT_FRET_COUNT, ge=1, le=MAX_FRET)

    model_config = _CAMEL_CONFIG

    @field_validator('string_count')
    @classmethod
    def validate_string_count(cls, v):
        if v not in SUPPORTED_STRING_COUNTS:
            raise ValueError(f"string_count must be one of {SUPPORTED_STRING_COUNTS}")
        return v

    def _update(self, **changes) -> "FretboardState":
        return self.model_copy(update=changes)

    def with_scale(self, scale: str) -> "FretboardState":
        """Switch scale; the position resets because window counts differ."""
        return self._update(scale=scale, position=None)

    def with_root(self, root_note: str) -> "FretboardState":
        return self._update(root_note=root_note)

    def with_position(self, position: Optional[int]) -> "FretboardState":
        return self._update(position=position)

    def with_string_count(self, string_count: int) -> "FretboardState":
        """Switch instrument size and load its default tuning."""
        return self._update(string_count=string_count, tuning=get_default_tuning(string_count))

    def with_chords_mode(self, enabled: bool) -> "FretboardState":
        if enabled:
            return self._update(show_chords_mode=True, show_progression_mode=False)
        return self._update(show_chords_mode=False)

    def with_progression_mode(self, enabled: bool) -> "FretboardState":
        if enabled:
            return self._update(show_progression_mode=True, show_chords_mode=False)
        return self._update(show_progression_mode=False)

    def toggle_chords_mode(self) -> "FretboardState":
        return self.with_chords_mode(not self.show_chords_mode)

    def cycle_display_mode(self) -> "FretboardState":
        """notes -> intervals -> degrees -> notes"""
        index = DISPLAY_MODE_ORDER.index(self.display_mode)
        return self._update(display_mode=DISPLAY_MODE_ORDER[(index + 1) % len(DISPLAY_MODE_ORDER)])

    @property
    def is_progression_active(self) -> bool:
        return self.show_progression_mode and self.selected_progression is not None

    @property
    def is_chord_view(self) -> bool:
        """True when only chord voicing cells are shown."""
        if self.show_chords_mode:
            return True
        return self.show_progression_mode and self.progression_view_mode is ProgressionViewMode.CHORD


# ============================================================================
# Cells and View
# ============================================================================

class FretboardCell(BaseModel):
    string_index: int
    fret: int
    note: str
    interval: int
    interval_name: str
    degree: int
    in_scale: bool
    in_position: bool
    is_root: bool
    label: str
    finger: Optional[int] = None
    is_chord_tone: bool = False
    is_muted: bool = False
    visible: bool = False

    model_config = _CAMEL_CONFIG


class FretboardView(BaseModel):
    """
    Everything needed to draw one fretboard.

    cells[string_index][fret], lowest string first, frets 0..state.frets.
    """
    state: FretboardState
    tuning_notes: List[str]
    root_note: str
    scale_name: str
    scale_notes: List[str]
    chord_name: str = ""
    voicings: List[ChordVoicing] = []
    cells: List[List[FretboardCell]] = []
    fret_markers: Dict[int, str] = {}
    has_visible_notes: bool = True

    model_config = _CAMEL_CONFIG

    def visible_cells(self) -> List[FretboardCell]:
        return [cell for row in self.cells for cell in row if cell.visible]

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


def get_fret_marker(fret: int) -> Optional[str]:
    """Inlay marker at a fret: "double", "single" or None."""
    if fret in DOUBLE_MARKERS:
        return "double"
    if fret in FRET_MARKERS:
        return "single"
    return None


def get_active_voicings(state: FretboardState, tuning_notes: List[str]) -> List[ChordVoicing]:
    """Voicings drawn in chord view; empty outside it."""
    if not state.is_chord_view:
        return []

    if state.is_progression_active:
        if state.position is None:
            return get_all_progression_chord_voicings(
                state.root_note, state.scale, state.selected_progression, tuning_notes
            )
        voicing = select_voicing_for_progression_step(
            state.root_note, state.scale, state.position, state.selected_progression, tuning_notes
        )
    else:
        if state.position is None:
            return get_all_chord_voicings(state.root_note, state.scale, tuning_notes)
        voicing = select_voicing_for_position(state.root_note, state.scale, state.position, tuning_notes)

    return [voicing] if voicing is not None else []


def get_chord_label(state: FretboardState) -> str:
    if state.position is None:
        return ""
    if state.is_progression_active:
        return get_progression_chord_name(
            state.root_note, state.scale, state.position, state.selected_progression
        )
    if state.show_chords_mode:
        return get_chord_name_for_position(state.root_note, state.scale, state.position)
    return ""


def _chord_info(voicings: List[ChordVoicing], string_index: int, fret: int):
    """(is_chord_tone, finger, is_muted) for one cell across the active voicings."""
    muted = False
    for voicing in voicings:
        fret_value = voicing.frets[string_index]
        if fret_value == fret:
            return True, voicing.fingers[string_index], False
        if fret_value == MUTED:
            muted = True
    return False, None, muted and fret == 0


def _display_label(mode: DisplayMode, note: str, interval_name: str, degree: int) -> str:
    if mode is DisplayMode.INTERVALS:
        return interval_name
    if mode is DisplayMode.DEGREES:
        return str(degree) if degree > 0 else ""
    return note


def build_fretboard(state: FretboardState) -> FretboardView:
    """Compute every cell of the fretboard for a view state."""
    tuning_notes = get_tuning(state.tuning)
    formula = get_scale_formula(state.scale)
    root_note = get_effective_root_note(
        state.root_note, state.scale, state.position,
        state.selected_progression if state.show_progression_mode else None,
        state.progression_view_mode
    )
    root_fret = get_root_fret(root_note, tuning_notes)
    chord_view = state.is_chord_view
    voicings = get_active_voicings(state, tuning_notes)

    logger.debug(
        f"Building fretboard: {root_note} {state.scale}, position {state.position}, "
        f"{len(tuning_notes)} strings, {len(voicings)} voicing(s)"
    )

    cells = []
    for string_index, open_note in enumerate(tuning_notes):
        row = []
        for fret in range(state.frets + 1):
            note = get_note_at_fret(open_note, fret)
            interval = get_interval(root_note, note)
            interval_name = get_interval_name(root_note, note)
            degree = get_scale_degree(note, root_note, formula)
            in_scale = interval in formula
            in_position = is_in_position(fret, state.position, root_fret, state.frets, state.scale)
            is_chord_tone, finger, is_muted = _chord_info(voicings, string_index, fret)

            if chord_view:
                visible = (is_chord_tone and in_scale) or is_muted
            else:
                visible = in_scale and in_position and (
                    not state.show_only_chord_tones or interval in R35_INTERVALS
                )

            label = _display_label(state.display_mode, note, interval_name, degree)
            if chord_view and state.show_fingerings:
                if finger is not None:
                    label = str(finger)
                elif is_chord_tone and fret == 0:
                    label = OPEN_STRING_LABEL
                elif is_muted:
                    label = MUTED_STRING_LABEL

            row.append(FretboardCell(
                string_index=string_index,
                fret=fret,
                note=note,
                interval=interval,
                interval_name=interval_name,
                degree=degree,
                in_scale=in_scale,
                in_position=in_position,
                is_root=note == root_note,
                label=label,
                finger=finger,
                is_chord_tone=is_chord_tone,
                is_muted=is_muted,
                visible=visible,
            ))
        cells.append(row)

    view = FretboardView(
        state=state,
        tuning_notes=tuning_notes,
        root_note=root_note,
        scale_name=get_scale_display_name(state.scale),
        scale_notes=get_scale_notes(root_note, formula),
        chord_name=get_chord_label(state),
        voicings=voicings,
        cells=cells,
        fret_markers={fret: get_fret_marker(fret) for fret in range(state.frets + 1) if get_fret_marker(fret)},
    )
    return view.model_copy(update={"has_visible_notes": has_visible_notes(view)})


def has_visible_notes(view: FretboardView) -> bool:
    """
    False only when the R-3-5 filter hides every note of the scale view.

    Chord views always report True.
    """
    if not view.state.show_only_chord_tones or view.state.is_chord_view:
        return True
    return any(cell.visible for row in view.cells for cell in row)
