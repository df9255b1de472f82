#!/usr/bin/env python3
"""
Tuning Catalog
==============

Named open-string pitch sequences, lowest string first, grouped by
instrument string count (4-string bass, 6/7/8-string guitar).

Unknown tuning keys fall back to standard six-string tuning. The fallback is
logged so a caller typo does not go unnoticed.
"""

import logging
from typing import Dict, List

from fret_constants import (
    DEFAULT_TUNING, InstrumentType, INSTRUMENT_NAMES
)

logger = logging.getLogger(__name__)


class TuningConfig:
    """Configuration for one instrument tuning."""

    def __init__(self, name: str, notes: List[str]):
        self.name = name
        self.notes = tuple(notes)
        self.string_count = len(self.notes)

    @property
    def instrument_type(self) -> InstrumentType:
        return InstrumentType(f"{self.string_count}-string")

    @property
    def instrument_name(self) -> str:
        return INSTRUMENT_NAMES[self.instrument_type]

    def __repr__(self):
        return f"TuningConfig({self.name!r}, {list(self.notes)!r})"


# ============================================================================
# Tuning Definitions
# ============================================================================

TUNING_CONFIGS: Dict[str, TuningConfig] = {
    # 4-string bass
    "bassStandard": TuningConfig("Bass Standard (E-A-D-G)", ["E", "A", "D", "G"]),
    "bassDropD": TuningConfig("Bass Drop D (D-A-D-G)", ["D", "A", "D", "G"]),
    "bassDStandard": TuningConfig("Bass D Standard (D-G-C-F)", ["D", "G", "C", "F"]),

    # 6-string guitar
    "standard": TuningConfig("Standard (E-A-D-G-B-E)", ["E", "A", "D", "G", "B", "E"]),
    "dropD": TuningConfig("Drop D (D-A-D-G-B-E)", ["D", "A", "D", "G", "B", "E"]),
    "dStandard": TuningConfig("D Standard (D-G-C-F-A-D)", ["D", "G", "C", "F", "A", "D"]),
    "dropC": TuningConfig("Drop C (C-G-C-F-A-D)", ["C", "G", "C", "F", "A", "D"]),
    "openG": TuningConfig("Open G (D-G-D-G-B-D)", ["D", "G", "D", "G", "B", "D"]),
    "openD": TuningConfig("Open D (D-A-D-F#-A-D)", ["D", "A", "D", "F#", "A", "D"]),

    # 7-string guitar
    "standard7": TuningConfig("7-String Standard (B-E-A-D-G-B-E)", ["B", "E", "A", "D", "G", "B", "E"]),
    "dropA7": TuningConfig("7-String Drop A (A-E-A-D-G-B-E)", ["A", "E", "A", "D", "G", "B", "E"]),
    "aStandard7": TuningConfig("7-String A Standard (A-D-G-C-F-A-D)", ["A", "D", "G", "C", "F", "A", "D"]),

    # 8-string guitar
    "standard8": TuningConfig("8-String Standard (F#-B-E-A-D-G-B-E)", ["F#", "B", "E", "A", "D", "G", "B", "E"]),
    "dropE8": TuningConfig("8-String Drop E (E-B-E-A-D-G-B-E)", ["E", "B", "E", "A", "D", "G", "B", "E"]),
    "eStandard8": TuningConfig("8-String E Standard (E-A-D-G-C-F-A-D)", ["E", "A", "D", "G", "C", "F", "A", "D"]),
}

STANDARD_TUNING: List[str] = list(TUNING_CONFIGS["standard"].notes)

# Default tuning key per string count
DEFAULT_TUNINGS: Dict[int, str] = {
    4: "bassStandard",
    6: "standard",
    7: "standard7",
    8: "standard8",
}


def resolve_tuning(tuning_key: str) -> str:
    """Return tuning_key if it is in the catalog, otherwise the default key."""
    if tuning_key in TUNING_CONFIGS:
        return tuning_key
    logger.warning(f"Unknown tuning '{tuning_key}', falling back to '{DEFAULT_TUNING}'")
    return DEFAULT_TUNING


def get_tuning_config(tuning_key: str) -> TuningConfig:
    """Get configuration for a tuning key, substituting standard tuning for unknown keys."""
    return TUNING_CONFIGS[resolve_tuning(tuning_key)]


def get_tuning(tuning_key: str) -> List[str]:
    """Open-string notes for a tuning key, lowest string first."""
    return list(get_tuning_config(tuning_key).notes)


def get_tunings_by_string_count(string_count: int) -> Dict[str, TuningConfig]:
    """All catalog tunings for one string count, in catalog order."""
    return {
        key: config for key, config in TUNING_CONFIGS.items()
        if config.string_count == string_count
    }


def get_default_tuning(string_count: int) -> str:
    """Default tuning key for a string count ('standard' for unsupported counts)."""
    return DEFAULT_TUNINGS.get(string_count, DEFAULT_TUNING)
