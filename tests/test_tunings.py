"""Tests for the tuning catalog."""

import logging

from fret_constants import InstrumentType
from tunings import (
    TUNING_CONFIGS, STANDARD_TUNING, get_tuning, get_tuning_config,
    get_tunings_by_string_count, get_default_tuning
)


def test_catalog_string_counts():
    counts = sorted({config.string_count for config in TUNING_CONFIGS.values()})
    assert counts == [4, 6, 7, 8]
    assert len(TUNING_CONFIGS) == 15


def test_standard_tuning_lowest_first():
    assert STANDARD_TUNING == ["E", "A", "D", "G", "B", "E"]
    assert get_tuning("dropD")[0] == "D"


def test_unknown_tuning_falls_back_to_standard(caplog):
    with caplog.at_level(logging.WARNING):
        assert get_tuning("banjo") == STANDARD_TUNING
    assert "Unknown tuning 'banjo'" in caplog.text


def test_tunings_by_string_count():
    assert list(get_tunings_by_string_count(7)) == ["standard7", "dropA7", "aStandard7"]
    assert get_tunings_by_string_count(5) == {}


def test_default_tuning_per_string_count():
    assert get_default_tuning(4) == "bassStandard"
    assert get_default_tuning(6) == "standard"
    assert get_default_tuning(8) == "standard8"
    assert get_default_tuning(12) == "standard"


def test_instrument_type():
    config = get_tuning_config("standard8")
    assert config.instrument_type is InstrumentType.EIGHT_STRING
    assert config.instrument_name == "8-String Guitar"
