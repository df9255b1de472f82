#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CAGED Fretboard - MCP Server Implementation
===========================================

FastMCP server exposing the CAGED voicing engine:
- Chord voicing for a scale position (fixed CAGED shape per position)
- Progression voicing (all five shapes searched, common shapes preferred)
- Per-cell fretboard map for any view state
- Catalog listing (scales, tunings, progressions)
- JSON Schema for requests

Key MCP Implementation Details:
- stdio transport only (stdout for JSON-RPC, stderr for logging)
- Structured error dicts (errorType / message / suggestion) for LLM correction
- Unknown scale/tuning keys are answered with the default catalog entry and a
  warning, never an error
- Tools are registered with mcp.tool() after their definitions instead of as
  decorators, so the module-level names stay plain functions that
  run_tests.py and the unit tests call directly

Usage:
    python mcp_server.py

For Claude Desktop integration, add to config:
{
  "mcpServers": {
    "caged-fretboard": {
      "command": "python",
      "args": ["/path/to/mcp_server.py"]
    }
  }
}
"""

import sys
import logging
import json
from typing import Dict, Any

from fastmcp import FastMCP
from pydantic import ValidationError

from fret_constants import CAGED_SHAPES, DEFAULT_SCALE
from fretboard import FretboardState, build_fretboard
from progressions import (
    CHORD_PROGRESSIONS, select_voicing_for_progression_step,
    get_all_progression_chord_voicings, get_progression_chord_name
)
from scales import SCALES, SCALE_NAMES, get_position_count
from tunings import TUNING_CONFIGS, get_tuning
from validation import validate_request_data
from voicing_models import VoicingRequest, VoicingResponse, create_schema
from voicing_selector import (
    get_chord_quality, get_chord_name_for_position,
    select_voicing_for_position, get_all_chord_voicings
)

# Configure logging to stderr (stdout reserved for MCP JSON-RPC protocol)
logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s - MCP-CAGED - %(levelname)s - %(message)s',
    stream=sys.stderr
)
logger = logging.getLogger(__name__)

# ============================================================================
#  MCP Server Setup
# ============================================================================

mcp = FastMCP("CAGED Fretboard")


def _json_error(e: json.JSONDecodeError) -> Dict[str, Any]:
    return {
        "isError": True,
        "errorType": "json_error",
        "message": f"Invalid JSON format: {str(e)}",
        "suggestion": "Check JSON syntax - ensure proper quotes, brackets, and commas"
    }


def _processing_error(action: str, e: Exception) -> Dict[str, Any]:
    return {
        "isError": True,
        "errorType": "processing_error",
        "message": f"Unexpected error during {action}: {str(e)}",
        "suggestion": "Check input format and try again"
    }


def _model_error(e: ValidationError) -> Dict[str, Any]:
    first = e.errors()[0]
    field = ".".join(str(part) for part in first.get("loc", ()))
    return {
        "isError": True,
        "errorType": "validation_error",
        "message": f"Invalid field '{field}': {first.get('msg')}",
        "suggestion": "See get_json_schema for the accepted request format"
    }


def _parse_request(request_json: str):
    """
    Parse and validate a voicing request.

    Returns (request, warnings, error); error is None on success.
    """
    data = json.loads(request_json)
    validation_result = validate_request_data(data)
    if validation_result["isError"]:
        return None, [], validation_result

    try:
        request = VoicingRequest(**data)
    except ValidationError as e:
        logger.warning(f"Request model validation failed: {e}")
        return None, [], _model_error(e)

    return request, validation_result["warnings"], None


def _no_voicing_error(description: str) -> Dict[str, Any]:
    return {
        "isError": True,
        "errorType": "no_voicing",
        "message": f"No playable voicing for {description}",
        "suggestion": "Try another position or a tuning with more strings"
    }


def get_chord_voicing(request_json: str) -> VoicingResponse:
    """
    Get the CAGED chord voicing for a scale position.

    Each position of a scale is tied to one CAGED shape (for A minor
    pentatonic: E, D, C, A, G). The tonic chord (minor for minor scales,
    major otherwise) is voiced in that shape, in the octave closest to the
    middle of the position.

    Args:
        request_json: JSON object with rootNote, scale, tuning and position.
            Omit position to get one voicing per position in "voicings".

    Returns:
        VoicingResponse with chordName and the voicing (frets lowest string
        first, "x" = muted; fingers 1-4 or null; baseFret; barre; shape;
        rootString; rootFret)

    ## Example
    ```json
    {"rootNote": "A", "scale": "minorPentatonic", "tuning": "standard", "position": 0}
    ```
    Expected: "Am (E shape)", frets [5, 7, 7, 5, 5, 5], barre at 5
    """
    logger.info("Received chord voicing request")

    try:
        request, warnings, error = _parse_request(request_json)
        if error:
            return VoicingResponse(success=False, error=error)

        tuning = get_tuning(request.tuning)

        if request.position is None:
            voicings = get_all_chord_voicings(request.rootNote, request.scale, tuning)
            quality = get_chord_quality(request.scale)
            return VoicingResponse(
                success=True,
                chordName=f"{request.rootNote}{quality.suffix}",
                voicings=[v.to_dict() for v in voicings],
                warnings=warnings
            )

        voicing = select_voicing_for_position(request.rootNote, request.scale, request.position, tuning)
        chord_name = get_chord_name_for_position(request.rootNote, request.scale, request.position)
        if voicing is None:
            return VoicingResponse(
                success=False,
                chordName=chord_name,
                error=_no_voicing_error(chord_name),
                warnings=warnings
            )

        logger.info(f"Voiced {chord_name} at fret {voicing.root_fret}")
        return VoicingResponse(
            success=True,
            chordName=chord_name,
            voicing=voicing.to_dict(),
            warnings=warnings
        )

    except json.JSONDecodeError as e:
        logger.error(f"JSON parsing error: {e}")
        return VoicingResponse(success=False, error=_json_error(e))

    except Exception as e:
        logger.error(f"Unexpected error during chord voicing: {e}")
        return VoicingResponse(success=False, error=_processing_error("chord voicing", e))


def get_progression_voicing(request_json: str) -> VoicingResponse:
    """
    Get the voicing of a progression chord at a scale position.

    Position N plays chord N of the progression (looping). The chord is
    voiced near the middle of the scale position using whichever CAGED shape
    fits best; within 2 frets, E and A shapes are preferred over G, C and D.

    Args:
        request_json: JSON object with rootNote, scale, tuning, position and
            progression (one of "1-4-5", "1-5-6-4", "6-4-1-5", "2-5-1",
            "1-6-4-5", "1-4-1-5"). Omit position for every position.

    ## Example
    ```json
    {"rootNote": "C", "scale": "major", "position": 1, "progression": "1-4-5"}
    ```
    Expected: "F", E shape at fret 13
    """
    logger.info("Received progression voicing request")

    try:
        request, warnings, error = _parse_request(request_json)
        if error:
            return VoicingResponse(success=False, error=error)

        if request.progression is None:
            return VoicingResponse(
                success=False,
                error={
                    "isError": True,
                    "errorType": "validation_error",
                    "message": "Missing required field: progression",
                    "suggestion": f"Add 'progression', one of {list(CHORD_PROGRESSIONS.keys())}"
                }
            )

        tuning = get_tuning(request.tuning)

        if request.position is None:
            voicings = get_all_progression_chord_voicings(
                request.rootNote, request.scale, request.progression, tuning
            )
            return VoicingResponse(
                success=True,
                chordName=CHORD_PROGRESSIONS[request.progression].name,
                voicings=[v.to_dict() for v in voicings],
                warnings=warnings
            )

        voicing = select_voicing_for_progression_step(
            request.rootNote, request.scale, request.position, request.progression, tuning
        )
        chord_name = get_progression_chord_name(
            request.rootNote, request.scale, request.position, request.progression
        )
        if voicing is None:
            return VoicingResponse(
                success=False,
                chordName=chord_name,
                error=_no_voicing_error(chord_name),
                warnings=warnings
            )

        logger.info(f"Voiced progression chord {chord_name} ({voicing.shape} shape)")
        return VoicingResponse(
            success=True,
            chordName=chord_name,
            voicing=voicing.to_dict(),
            warnings=warnings
        )

    except json.JSONDecodeError as e:
        logger.error(f"JSON parsing error: {e}")
        return VoicingResponse(success=False, error=_json_error(e))

    except Exception as e:
        logger.error(f"Unexpected error during progression voicing: {e}")
        return VoicingResponse(success=False, error=_processing_error("progression voicing", e))


def get_fretboard_map(state_json: str) -> Dict[str, Any]:
    """
    Compute the per-cell fretboard map for a view state.

    Args:
        state_json: JSON object with any of rootNote, scale, stringCount,
            tuning, displayMode ("notes" | "intervals" | "degrees"), position,
            showOnlyChordTones, showChordsMode, showProgressionMode,
            selectedProgression, showFingerings, progressionViewMode
            ("chord" | "scale"), frets.

    Returns:
        Dictionary with success, warnings and the view: tuningNotes,
        rootNote, scaleNotes, chordName, voicings, hasVisibleNotes and
        cells[string][fret] (note, interval, label, visible, finger, ...).
    """
    logger.info("Received fretboard map request")

    try:
        data = json.loads(state_json)
        if isinstance(data, dict):
            request_view = dict(data, progression=data.get("selectedProgression"))
        else:
            request_view = data
        validation_result = validate_request_data(request_view)
        if validation_result["isError"]:
            return {"success": False, "error": validation_result}

        state = FretboardState(**data)
        if "stringCount" in data and "tuning" not in data:
            state = state.with_string_count(state.string_count)

        view = build_fretboard(state)
        logger.info(f"Built fretboard with {len(view.visible_cells())} visible cells")

        return {
            "success": True,
            "warnings": validation_result["warnings"],
            "fretboard": view.to_dict()
        }

    except json.JSONDecodeError as e:
        logger.error(f"JSON parsing error in fretboard map: {e}")
        return {"success": False, "error": _json_error(e)}
    except ValidationError as e:
        logger.warning(f"Fretboard state validation failed: {e}")
        return {"success": False, "error": _model_error(e)}
    except Exception as e:
        logger.error(f"Error building fretboard map: {e}")
        return {"success": False, "error": _processing_error("fretboard map", e)}


def list_catalogs() -> Dict[str, Any]:
    """
    List the available scales, tunings, progressions and CAGED shapes.

    Use the keys (e.g. "minorPentatonic", "dropD", "1-4-5") in requests.
    """
    logger.info("Received catalog listing request")

    return {
        "scales": {
            key: {
                "name": SCALE_NAMES[key],
                "formula": formula,
                "positionCount": get_position_count(key),
                "chordQuality": str(get_chord_quality(key)),
            }
            for key, formula in SCALES.items()
        },
        "tunings": {
            key: {
                "name": config.name,
                "notes": list(config.notes),
                "stringCount": config.string_count,
                "instrument": config.instrument_name,
            }
            for key, config in TUNING_CONFIGS.items()
        },
        "progressions": {
            key: {
                "name": progression.name,
                "degreesMajor": progression.degrees_major,
                "degreesMinor": progression.degrees_minor,
                "description": progression.description,
            }
            for key, progression in CHORD_PROGRESSIONS.items()
        },
        "shapes": [str(shape) for shape in CAGED_SHAPES],
        "defaultScale": DEFAULT_SCALE,
    }


def get_json_schema() -> Dict[str, Any]:
    """JSON Schema for get_chord_voicing / get_progression_voicing requests."""
    return create_schema()


for tool in (get_chord_voicing, get_progression_voicing, get_fretboard_map, list_catalogs, get_json_schema):
    mcp.tool()(tool)


# ============================================================================
#  MCP Server Startup
# ============================================================================

def main():
    """
    Start the MCP server.

    Runs FastMCP in stdio mode for Claude Desktop and other MCP clients.
    """
    logger.info("Starting CAGED Fretboard MCP Server")
    logger.info(f"  • {len(SCALES)} scales, {len(TUNING_CONFIGS)} tunings, "
                f"{len(CHORD_PROGRESSIONS)} progressions")
    mcp.run()


if __name__ == "__main__":
    main()
