"""Tests for the fretboard view state and per-cell map."""

import pytest
from pydantic import ValidationError

from fret_constants import DisplayMode, ProgressionViewMode
from fretboard import FretboardState, build_fretboard, get_fret_marker


class TestStateTransitions:
    def test_defaults(self):
        state = FretboardState()
        assert state.root_note == "A"
        assert state.scale == "minorPentatonic"
        assert state.tuning == "standard"
        assert state.position is None
        assert state.frets == 24

    def test_scale_change_resets_position(self):
        state = FretboardState(position=3).with_scale("major")
        assert state.scale == "major"
        assert state.position is None

    def test_transitions_return_new_state(self):
        state = FretboardState()
        moved = state.with_position(2).with_root("E")
        assert state.position is None
        assert state.root_note == "A"
        assert moved.position == 2
        assert moved.root_note == "E"

    def test_string_count_loads_default_tuning(self):
        assert FretboardState().with_string_count(7).tuning == "standard7"
        assert FretboardState().with_string_count(4).tuning == "bassStandard"

    def test_chord_and_progression_modes_are_exclusive(self):
        state = FretboardState().with_chords_mode(True).with_progression_mode(True)
        assert state.show_progression_mode
        assert not state.show_chords_mode
        state = state.with_chords_mode(True)
        assert state.show_chords_mode
        assert not state.show_progression_mode

    def test_toggle_chords_mode(self):
        state = FretboardState().toggle_chords_mode()
        assert state.show_chords_mode
        assert not state.toggle_chords_mode().show_chords_mode

    def test_display_mode_cycle(self):
        state = FretboardState()
        modes = []
        for _ in range(3):
            state = state.cycle_display_mode()
            modes.append(state.display_mode)
        assert modes == [DisplayMode.INTERVALS, DisplayMode.DEGREES, DisplayMode.NOTES]

    def test_accepts_camel_case_keys(self):
        state = FretboardState(**{"rootNote": "C", "showOnlyChordTones": True, "progressionViewMode": "scale"})
        assert state.root_note == "C"
        assert state.show_only_chord_tones
        assert state.progression_view_mode is ProgressionViewMode.SCALE


def test_fret_markers():
    assert get_fret_marker(12) == "double"
    assert get_fret_marker(24) == "double"
    assert get_fret_marker(5) == "single"
    assert get_fret_marker(21) == "single"
    assert get_fret_marker(4) is None
    assert get_fret_marker(0) is None


class TestScaleView:
    def test_grid_dimensions(self):
        view = build_fretboard(FretboardState())
        assert len(view.cells) == 6
        assert all(len(row) == 25 for row in view.cells)
        assert view.tuning_notes == ["E", "A", "D", "G", "B", "E"]
        assert view.scale_notes == ["A", "C", "D", "E", "G"]

    def test_whole_neck_shows_scale_notes(self):
        view = build_fretboard(FretboardState())
        root = view.cells[0][5]
        assert root.note == "A"
        assert root.is_root
        assert root.interval_name == "R"
        assert root.visible
        assert not view.cells[0][6].visible

    def test_position_limits_visibility(self):
        view = build_fretboard(FretboardState(position=0))
        low_e = view.cells[0]
        assert not low_e[3].in_position
        assert low_e[5].in_position
        assert low_e[8].visible
        # D at fret 10 is in the scale but outside frets 5-8
        assert low_e[10].in_scale
        assert not low_e[10].visible
        assert low_e[17].visible

    def test_r35_filter(self):
        view = build_fretboard(FretboardState(position=0, show_only_chord_tones=True))
        assert view.cells[0][5].visible
        assert view.cells[0][8].visible
        # D on the A string is the 4th, filtered out
        assert view.cells[1][5].note == "D"
        assert not view.cells[1][5].visible
        assert view.has_visible_notes

    def test_r35_filter_with_nothing_visible(self):
        state = FretboardState(position=4, show_only_chord_tones=True, frets=1)
        assert not build_fretboard(state).has_visible_notes
        assert build_fretboard(state.model_copy(update={"show_only_chord_tones": False})).has_visible_notes

    def test_interval_and_degree_labels(self):
        view = build_fretboard(FretboardState(display_mode=DisplayMode.INTERVALS))
        assert view.cells[0][8].label == "b3"
        view = build_fretboard(FretboardState(display_mode=DisplayMode.DEGREES))
        assert view.cells[0][8].label == "2"
        assert view.cells[0][6].label == ""

    def test_seven_string_view(self):
        view = build_fretboard(FretboardState().with_string_count(7))
        assert len(view.cells) == 7
        assert view.cells[0][0].note == "B"


class TestChordView:
    def test_only_voicing_cells_visible(self):
        view = build_fretboard(FretboardState(position=0, show_chords_mode=True))
        assert view.chord_name == "Am (E shape)"
        assert len(view.voicings) == 1
        visible = {(cell.string_index, cell.fret) for cell in view.visible_cells()}
        assert visible == {(0, 5), (1, 7), (2, 7), (3, 5), (4, 5), (5, 5)}

    def test_finger_labels(self):
        view = build_fretboard(FretboardState(position=0, show_chords_mode=True))
        assert view.cells[0][5].finger == 1
        assert view.cells[0][5].label == "1"
        assert view.cells[2][7].label == "4"

    def test_note_labels_without_fingerings(self):
        state = FretboardState(position=0, show_chords_mode=True, show_fingerings=False)
        view = build_fretboard(state)
        assert view.cells[0][5].label == "A"

    def test_muted_strings_flagged_at_nut(self):
        view = build_fretboard(FretboardState(position=1, show_chords_mode=True))
        nut = view.cells[0][0]
        assert nut.is_muted
        assert nut.visible
        assert nut.label == "X"
        assert not view.cells[0][3].is_muted

    def test_whole_neck_shows_every_position(self):
        view = build_fretboard(FretboardState(show_chords_mode=True))
        assert len(view.voicings) == 5
        assert view.chord_name == ""

    def test_progression_chord_view(self):
        state = FretboardState(
            root_note="C", scale="major", position=1,
            show_progression_mode=True, selected_progression="1-4-5"
        )
        view = build_fretboard(state)
        assert view.chord_name == "F"
        assert view.voicings[0].frets == (13, 15, 15, 14, 13, 13)
        assert view.cells[0][13].visible
        assert all(cell.in_scale for cell in view.visible_cells() if not cell.is_muted)

    def test_progression_chord_hides_tones_outside_scale(self):
        state = FretboardState(
            root_note="A", scale="minorPentatonic", position=1,
            show_progression_mode=True, selected_progression="1-4-5"
        )
        view = build_fretboard(state)
        assert view.chord_name == "Em"
        outside = [
            (cell.string_index, cell.fret, cell.note)
            for row in view.cells for cell in row
            if cell.is_chord_tone and not cell.in_scale
        ]
        assert (2, 9, "B") in outside
        assert (5, 7, "B") in outside
        assert not view.cells[2][9].visible
        assert not view.cells[5][7].visible
        assert {cell.note for cell in view.visible_cells() if cell.is_chord_tone} <= {"E", "G"}


class TestProgressionScaleView:
    def test_scale_reroots_on_chord(self):
        state = FretboardState(
            root_note="C", scale="major", position=1,
            show_progression_mode=True, selected_progression="1-4-5",
            progression_view_mode=ProgressionViewMode.SCALE
        )
        view = build_fretboard(state)
        assert view.root_note == "F"
        assert view.scale_notes[0] == "F"
        assert view.chord_name == "F"
        assert view.voicings == []
        assert view.cells[0][1].is_root


def test_view_dumps_camel_case():
    data = build_fretboard(FretboardState(position=0, frets=5)).to_dict()
    assert data["rootNote"] == "A"
    assert data["hasVisibleNotes"] is True
    cell = data["cells"][0][5]
    assert cell["inScale"] is True
    assert cell["intervalName"] == "R"
    assert data["state"]["displayMode"] == "notes"


def test_view_lists_inlay_markers():
    view = build_fretboard(FretboardState(frets=12))
    assert view.fret_markers == {3: "single", 5: "single", 7: "single", 9: "single", 12: "double"}
    assert view.scale_name == "Minor Pentatonic"


def test_unsupported_string_count_rejected():
    with pytest.raises(ValidationError):
        FretboardState(string_count=5)
