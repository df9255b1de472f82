#!/usr/bin/env python3
"""
CAGED Fretboard Engine - Request Validation
===========================================

Staged validation for voicing and fretboard requests arriving over MCP or the
CLI. Each stage returns a structured dict:

    {"isError": True, "errorType": ..., "message": ..., "suggestion": ...}

or {"isError": False} (optionally with "warnings"). Unknown scale and tuning
keys are not errors: the engine substitutes its defaults, so those stages only
add a warning describing the substitution.
"""

import logging
from typing import Dict, List, Any

from fret_constants import (
    NOTES, DEFAULT_SCALE, DEFAULT_TUNING, DEFAULT_FRET_COUNT, MAX_FRET, is_valid_note
)
from progressions import CHORD_PROGRESSIONS
from scales import SCALES, get_position_count
from tunings import TUNING_CONFIGS

logger = logging.getLogger(__name__)

# Flat spellings users commonly send, mapped to the sharps-only names
FLAT_TO_SHARP: Dict[str, str] = {
    "Db": "C#",
    "Eb": "D#",
    "Gb": "F#",
    "Ab": "G#",
    "Bb": "A#",
}


# ============================================================================
#  Validation Stages
# ============================================================================

def validate_root_note(data: Dict[str, Any]) -> Dict[str, Any]:
    """rootNote must be one of the twelve sharps-only pitch classes."""
    root_note = data.get("rootNote", "A")

    if not isinstance(root_note, str) or not is_valid_note(root_note):
        suggestion = f"Use one of: {', '.join(NOTES)}"
        if root_note in FLAT_TO_SHARP:
            suggestion = f"Use the sharp spelling '{FLAT_TO_SHARP[root_note]}' instead of '{root_note}'"
        return {
            "isError": True,
            "errorType": "validation_error",
            "message": f"Invalid root note: {root_note!r}",
            "suggestion": suggestion
        }

    return {"isError": False}


def validate_scale(data: Dict[str, Any]) -> Dict[str, Any]:
    scale = data.get("scale", DEFAULT_SCALE)

    if scale not in SCALES:
        return {
            "isError": False,
            "warnings": [{
                "warningType": "catalog_fallback",
                "message": f"Unknown scale '{scale}', using '{DEFAULT_SCALE}'",
                "suggestion": f"Available scales: {list(SCALES.keys())}"
            }]
        }

    return {"isError": False}


def validate_tuning(data: Dict[str, Any]) -> Dict[str, Any]:
    tuning = data.get("tuning", DEFAULT_TUNING)

    if tuning not in TUNING_CONFIGS:
        return {
            "isError": False,
            "warnings": [{
                "warningType": "catalog_fallback",
                "message": f"Unknown tuning '{tuning}', using '{DEFAULT_TUNING}'",
                "suggestion": f"Available tunings: {list(TUNING_CONFIGS.keys())}"
            }]
        }

    return {"isError": False}


def validate_position(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    position is optional (None = whole neck). When given it must be an integer
    index into the scale's position list.
    """
    position = data.get("position")
    if position is None:
        return {"isError": False}

    # bool is an int subclass; reject it explicitly
    if isinstance(position, bool) or not isinstance(position, int):
        return {
            "isError": True,
            "errorType": "validation_error",
            "message": f"Position must be an integer, got {position!r}",
            "suggestion": "Use a 0-based position index, or omit position for the whole neck"
        }

    scale = data.get("scale", DEFAULT_SCALE)
    position_count = get_position_count(scale)
    if not 0 <= position < position_count:
        return {
            "isError": True,
            "errorType": "validation_error",
            "message": f"Position {position} out of range for scale '{scale}'",
            "suggestion": f"Scale '{scale}' has positions 0-{position_count - 1}"
        }

    return {"isError": False}


def validate_progression(data: Dict[str, Any]) -> Dict[str, Any]:
    progression = data.get("progression")
    if progression is None:
        return {"isError": False}

    if progression not in CHORD_PROGRESSIONS:
        return {
            "isError": True,
            "errorType": "validation_error",
            "message": f"Unknown progression '{progression}'",
            "suggestion": f"Available progressions: {list(CHORD_PROGRESSIONS.keys())}"
        }

    return {"isError": False}


def validate_fret_count(data: Dict[str, Any]) -> Dict[str, Any]:
    frets = data.get("frets", DEFAULT_FRET_COUNT)

    if isinstance(frets, bool) or not isinstance(frets, int) or not 1 <= frets <= MAX_FRET:
        return {
            "isError": True,
            "errorType": "validation_error",
            "message": f"Invalid fret count: {frets!r}",
            "suggestion": f"Fret count must be an integer between 1 and {MAX_FRET}"
        }

    return {"isError": False}


def validate_request_data(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validation pipeline.

    Stops at the first error. On success returns {"isError": False,
    "warnings": [...]} with the warnings of every stage.
    """
    if not isinstance(data, dict):
        return {
            "isError": True,
            "errorType": "validation_error",
            "message": "Request must be a JSON object",
            "suggestion": "Send an object like {\"rootNote\": \"A\", \"scale\": \"minorPentatonic\", \"position\": 0}"
        }

    stages = [
        ("root note", validate_root_note),
        ("scale", validate_scale),
        ("tuning", validate_tuning),
        ("position", validate_position),
        ("progression", validate_progression),
        ("fret count", validate_fret_count),
    ]

    warnings: List[Dict[str, Any]] = []
    for stage_name, stage in stages:
        result = stage(data)
        if result["isError"]:
            logger.warning(f"{stage_name.capitalize()} validation failed: {result['message']}")
            return result
        warnings.extend(result.get("warnings", []))

    logger.debug(f"All validation stages passed with {len(warnings)} warning(s)")
    return {"isError": False, "warnings": warnings}
