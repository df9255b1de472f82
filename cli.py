#!/usr/bin/env python3
"""
CAGED Fretboard - Standalone Command Line Interface
===================================================

Command-line front end for the CAGED voicing engine. Queries come from
flags, a JSON request file, or both (flags override the file), and results
are printed as JSON or saved to a file.

Usage Examples:
    python cli.py --root A --scale minorPentatonic --position 0
    python cli.py --root C --scale major --position 1 --progression 1-4-5
    python cli.py --root A --all-positions               # One voicing per position
    python cli.py --root E --position 2 --fretboard      # Per-cell fretboard map
    python cli.py request.json output.json               # Request file in, JSON out
    python cli.py --validate request.json                # Validation only
"""

import sys
import json
import argparse
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from fretboard import FretboardState, build_fretboard
from progressions import (
    select_voicing_for_progression_step, get_progression_chord_name
)
from scales import get_position_count
from tunings import get_tuning
from validation import validate_request_data
from voicing_models import VoicingResponse
from voicing_selector import select_voicing_for_position, get_chord_name_for_position

EXIT_OK = 0
EXIT_IO_ERROR = 1
EXIT_VALIDATION_ERROR = 2
EXIT_PROCESSING_ERROR = 3

# ============================================================================
# Cross-Platform Compatibility Setup
# ============================================================================

def setup_cross_platform_environment():
    """Force UTF-8 console streams on Windows."""
    if sys.platform == "win32":
        sys.stdout.reconfigure(encoding='utf-8', errors='replace')
        sys.stderr.reconfigure(encoding='utf-8', errors='replace')

def setup_logging(verbose: bool = False) -> logging.Logger:
    """
    Configure logging for CLI usage.

    Logs go to stderr so stdout carries only the JSON result.
    Verbose mode shows the candidate search at DEBUG level.
    """
    level = logging.DEBUG if verbose else logging.WARNING

    logging.basicConfig(
        level=level,
        format='%(asctime)s - CAGED-CLI - %(levelname)s - %(message)s',
        stream=sys.stderr
    )

    logger = logging.getLogger(__name__)
    logger.info(f"CAGED Fretboard CLI starting (verbose={'on' if verbose else 'off'})")
    return logger

# ============================================================================
# File I/O Operations
# ============================================================================

def load_json_file(file_path: Path, logger: logging.Logger) -> Optional[dict]:
    """
    Load and parse a JSON request file.

    Parse errors are printed with the offending line and a column pointer.
    """
    logger.debug(f"Loading JSON file: {file_path}")

    if not file_path.exists():
        logger.error(f"Input file not found: {file_path}")
        print(f"Error: Input file '{file_path}' does not exist.", file=sys.stderr)
        return None

    if not file_path.is_file():
        logger.error(f"Path is not a file: {file_path}")
        print(f"Error: '{file_path}' is not a regular file.", file=sys.stderr)
        return None

    try:
        text = file_path.read_text(encoding='utf-8')
    except UnicodeDecodeError as e:
        logger.error(f"Unicode decoding failed: {e}")
        print(f"Error: Cannot read '{file_path}' - file encoding issue.", file=sys.stderr)
        print("  Try saving the file as UTF-8 encoding.", file=sys.stderr)
        return None
    except OSError as e:
        logger.error(f"Unexpected error loading file: {e}")
        print(f"Error: Cannot read '{file_path}': {e}", file=sys.stderr)
        return None

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        logger.error(f"JSON parsing failed: {e}")
        print(f"Error: Invalid JSON in '{file_path}':", file=sys.stderr)
        print(f"  Line {e.lineno}, Column {e.colno}: {e.msg}", file=sys.stderr)

        lines = text.splitlines()
        if e.lineno <= len(lines):
            print(f"  >>> {lines[e.lineno - 1].rstrip()}", file=sys.stderr)
            if e.colno > 0:
                print(" " * (e.colno - 1 + 6) + "^", file=sys.stderr)
        return None

    if not isinstance(data, dict):
        print(f"Error: '{file_path}' must contain a JSON object.", file=sys.stderr)
        return None

    logger.debug(f"Successfully loaded JSON with {len(data)} top-level keys")
    return data

def save_output_file(content: str, file_path: Path, logger: logging.Logger) -> bool:
    """Save output, creating parent directories if needed."""
    logger.debug(f"Saving output to: {file_path}")

    try:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content, encoding='utf-8')
        logger.info(f"Output saved to: {file_path}")
        return True

    except PermissionError:
        logger.error(f"Permission denied writing to: {file_path}")
        print(f"Error: Permission denied writing to '{file_path}'.", file=sys.stderr)
        print("  Check file permissions and try again.", file=sys.stderr)
        return False

    except OSError as e:
        logger.error(f"OS error writing file: {e}")
        print(f"Error: Cannot write to '{file_path}': {e}", file=sys.stderr)
        return False

# ============================================================================
# Request Processing Pipeline
# ============================================================================

def build_request_data(args: argparse.Namespace, file_data: Optional[dict]) -> Dict[str, Any]:
    """Merge a request file with command-line flags (flags win)."""
    data = dict(file_data or {})
    overrides = {
        "rootNote": args.root,
        "scale": args.scale,
        "tuning": args.tuning,
        "position": args.position,
        "progression": args.progression,
        "frets": args.frets,
    }
    data.update({key: value for key, value in overrides.items() if value is not None})
    return data

def run_validation(data: dict, logger: logging.Logger) -> Optional[List[Dict[str, Any]]]:
    """
    Validate a request, printing problems in human-readable form.

    Returns the warnings list, or None when validation failed.
    """
    logger.debug("Running validation pipeline")
    validation_result = validate_request_data(data)

    if validation_result["isError"]:
        error = validation_result
        print("Validation Error:", file=sys.stderr)
        print(f"  Type: {error.get('errorType', 'unknown')}", file=sys.stderr)
        print(f"  Problem: {error['message']}", file=sys.stderr)
        print(f"  Solution: {error['suggestion']}", file=sys.stderr)
        return None

    warnings = validation_result["warnings"]
    if warnings:
        print(f"Warnings ({len(warnings)}):", file=sys.stderr)
        for warning in warnings:
            print(f"  {warning['message']}", file=sys.stderr)

    return warnings

def voice_position(data: dict, position: int) -> VoicingResponse:
    """Voicing for one position, as a progression chord when a progression is set."""
    root_note = data.get("rootNote", "A")
    scale = data.get("scale", "minorPentatonic")
    tuning = get_tuning(data.get("tuning", "standard"))
    progression = data.get("progression")

    if progression:
        voicing = select_voicing_for_progression_step(root_note, scale, position, progression, tuning)
        chord_name = get_progression_chord_name(root_note, scale, position, progression)
    else:
        voicing = select_voicing_for_position(root_note, scale, position, tuning)
        chord_name = get_chord_name_for_position(root_note, scale, position)

    if voicing is None:
        return VoicingResponse(
            success=False,
            chordName=chord_name,
            error={
                "isError": True,
                "errorType": "no_voicing",
                "message": f"No playable voicing for {chord_name} at position {position}",
                "suggestion": "Try another position"
            }
        )
    return VoicingResponse(success=True, chordName=chord_name, voicing=voicing.to_dict())

def process_request(data: dict, args: argparse.Namespace, logger: logging.Logger,
                    warnings: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Run the query selected by the flags and return a JSON-ready dict."""
    if args.fretboard:
        state = FretboardState(
            root_note=data.get("rootNote", "A"),
            scale=data.get("scale", "minorPentatonic"),
            tuning=data.get("tuning", "standard"),
            position=data.get("position"),
            frets=data.get("frets", 24),
            show_chords_mode=args.chords and not data.get("progression"),
            show_progression_mode=bool(data.get("progression")),
            selected_progression=data.get("progression"),
        )
        logger.debug(f"Building fretboard for state: {state}")
        return {"success": True, "warnings": warnings, "fretboard": build_fretboard(state).to_dict()}

    if args.all_positions or data.get("position") is None:
        scale = data.get("scale", "minorPentatonic")
        results = []
        for position in range(get_position_count(scale)):
            response = voice_position(data, position)
            results.append({"position": position, **response.model_dump()})
        return {"success": True, "warnings": warnings, "positions": results}

    response = voice_position(data, data["position"])
    return response.model_copy(update={"warnings": warnings}).model_dump()

# ============================================================================
# Command Line Interface
# ============================================================================

def create_argument_parser() -> argparse.ArgumentParser:
    """Create command line argument parser."""
    parser = argparse.ArgumentParser(
        description="Find CAGED chord voicings and fretboard maps for scale positions",
        epilog="""
Examples:
  %(prog)s --root A --scale minorPentatonic --position 0
  %(prog)s --root C --scale major --position 1 --progression 1-4-5
  %(prog)s --root A --all-positions
  %(prog)s --root E --position 2 --fretboard
  %(prog)s request.json output.json
  %(prog)s --validate request.json

Request files use the same keys as the MCP tools:
  {"rootNote": "A", "scale": "minorPentatonic", "tuning": "standard", "position": 0}
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        'input_file',
        type=Path,
        nargs='?',
        help='JSON file containing a voicing request (optional)'
    )

    parser.add_argument(
        'output_file',
        type=Path,
        nargs='?',
        help='Output file for the JSON result (default: print to console)'
    )

    parser.add_argument('--root', help='Root note, sharps only (e.g. A, C#)')
    parser.add_argument('--scale', help='Scale key (e.g. minorPentatonic, major, dorian)')
    parser.add_argument('--tuning', help='Tuning key (e.g. standard, dropD, standard7)')
    parser.add_argument('--position', type=int, help='0-based scale position')
    parser.add_argument('--progression', help='Progression key (e.g. 1-4-5, 2-5-1)')
    parser.add_argument('--frets', type=int, help='Fret count for --fretboard (default 24)')

    parser.add_argument(
        '--all-positions',
        action='store_true',
        help='Voice every position of the scale'
    )

    parser.add_argument(
        '--fretboard',
        action='store_true',
        help='Output the per-cell fretboard map instead of a voicing'
    )

    parser.add_argument(
        '--chords',
        action='store_true',
        help='With --fretboard, show only the chord voicing cells'
    )

    parser.add_argument(
        '--validate',
        action='store_true',
        help='Validate the request without computing a result'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose logging for debugging'
    )

    parser.add_argument(
        '--version',
        action='version',
        version='CAGED Fretboard 0.1.0'
    )

    return parser

def main():
    """
    Main CLI entry point.

    Exit codes:
    - 0: Success
    - 1: Input/output errors
    - 2: Validation errors
    - 3: Processing errors
    """
    setup_cross_platform_environment()

    parser = create_argument_parser()
    args = parser.parse_args()

    logger = setup_logging(args.verbose)

    file_data = None
    if args.input_file:
        logger.info(f"Loading input file: {args.input_file}")
        file_data = load_json_file(args.input_file, logger)
        if file_data is None:
            sys.exit(EXIT_IO_ERROR)

    data = build_request_data(args, file_data)

    warnings = run_validation(data, logger)
    if warnings is None:
        sys.exit(EXIT_VALIDATION_ERROR)

    if args.validate:
        print("✓ Validation successful - request is valid", file=sys.stderr)
        sys.exit(EXIT_OK)

    try:
        result = process_request(data, args, logger, warnings)
    except Exception as e:
        logger.error(f"Processing failed: {e}")
        print(f"Error: Processing failed: {e}", file=sys.stderr)
        sys.exit(EXIT_PROCESSING_ERROR)

    output = json.dumps(result, indent=2)

    if args.output_file:
        if not save_output_file(output, args.output_file, logger):
            sys.exit(EXIT_IO_ERROR)
        print(f"✓ Result saved: {args.output_file}")
    else:
        print(output)

    sys.exit(EXIT_OK)

# ============================================================================
# Entry Point
# ============================================================================

if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("\nOperation cancelled by user", file=sys.stderr)
        sys.exit(EXIT_IO_ERROR)
    except Exception as e:
        print(f"Unexpected error: {e}", file=sys.stderr)
        sys.exit(EXIT_PROCESSING_ERROR)
