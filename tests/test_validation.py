"""Tests for the request validation pipeline."""

import pytest

from validation import (
    validate_root_note, validate_scale, validate_tuning, validate_position,
    validate_progression, validate_fret_count, validate_request_data
)


def test_valid_request():
    result = validate_request_data({
        "rootNote": "A", "scale": "minorPentatonic", "tuning": "standard",
        "position": 0, "progression": "1-4-5"
    })
    assert result == {"isError": False, "warnings": []}


def test_empty_request_uses_defaults():
    assert validate_request_data({}) == {"isError": False, "warnings": []}


def test_non_object_request():
    result = validate_request_data(["A", "major"])
    assert result["isError"]
    assert result["errorType"] == "validation_error"


class TestRootNote:
    def test_invalid(self):
        result = validate_root_note({"rootNote": "H"})
        assert result["isError"]
        assert result["message"] == "Invalid root note: 'H'"

    def test_flat_spelling_suggests_sharp(self):
        result = validate_root_note({"rootNote": "Bb"})
        assert result["isError"]
        assert "A#" in result["suggestion"]

    def test_sharp(self):
        assert not validate_root_note({"rootNote": "F#"})["isError"]


class TestCatalogKeys:
    def test_unknown_scale_is_warning(self):
        result = validate_scale({"scale": "hungarianGypsy"})
        assert not result["isError"]
        assert result["warnings"][0]["warningType"] == "catalog_fallback"
        assert "minorPentatonic" in result["warnings"][0]["message"]

    def test_unknown_tuning_is_warning(self):
        result = validate_tuning({"tuning": "banjo"})
        assert not result["isError"]
        assert "standard" in result["warnings"][0]["message"]

    def test_pipeline_collects_warnings(self):
        result = validate_request_data({"scale": "nope", "tuning": "nope"})
        assert not result["isError"]
        assert len(result["warnings"]) == 2


class TestPosition:
    @pytest.mark.parametrize("position", ["2", 1.5, True])
    def test_non_integer(self, position):
        assert validate_position({"position": position})["isError"]

    def test_out_of_range_for_scale(self):
        result = validate_position({"scale": "minorPentatonic", "position": 5})
        assert result["isError"]
        assert result["suggestion"] == "Scale 'minorPentatonic' has positions 0-4"

    def test_seven_positions_for_major(self):
        assert not validate_position({"scale": "major", "position": 6})["isError"]

    def test_negative(self):
        assert validate_position({"position": -1})["isError"]

    def test_missing_means_whole_neck(self):
        assert not validate_position({})["isError"]


def test_unknown_progression():
    result = validate_progression({"progression": "9-9-9"})
    assert result["isError"]
    assert result["message"] == "Unknown progression '9-9-9'"


@pytest.mark.parametrize("frets,is_error", [(24, False), (12, False), (0, True), (30, True), ("24", True)])
def test_fret_count(frets, is_error):
    assert validate_fret_count({"frets": frets})["isError"] is is_error


def test_pipeline_stops_at_first_error():
    result = validate_request_data({"rootNote": "H", "progression": "9-9-9"})
    assert result["message"] == "Invalid root note: 'H'"
