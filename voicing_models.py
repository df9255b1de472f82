#!/usr/bin/env python3
"""
Pydantic Data Models for the CAGED Fretboard Engine
===================================================

Immutable value types produced by the engine (scale windows, chord voicings,
progressions) and the request/response models used by the MCP server and CLI.

ChordVoicing dumps with camelCase aliases (baseFret, rootString, rootFret) so
the JSON shape matches what rendering front ends already consume.
"""

from typing import Dict, List, Any, Optional, Tuple, Union, Literal
from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

from fret_constants import (
    CAGEDShape, MUTED, NOTES, DEFAULT_SCALE, DEFAULT_TUNING, DEFAULT_FRET_COUNT,
    MAX_FRET
)


FretValue = Union[int, Literal["x"]]

# ============================================================================
# Engine Value Types
# ============================================================================

class ScalePosition(BaseModel):
    """
    A fret window relative to the root's first fret on the lowest string.

    start may be negative for forms that sit below the root (see the
    pentatonicFormsMajor catalog entry).
    """
    start: int
    end: int
    name: Optional[str] = None

    model_config = {"frozen": True}


class ChordVoicing(BaseModel):
    """
    One concrete fingering of a chord across every string of a tuning.

    frets holds a fret number or "x" (muted) per string, lowest string first.
    fingers holds 1-4 or None per string; muted strings never carry a finger.
    """
    frets: Tuple[FretValue, ...]
    fingers: Tuple[Optional[int], ...]
    base_fret: int = Field(..., description="Lowest fretted (non-muted) fret, 0 if all muted")
    barre: Optional[int] = Field(None, description="Fret held by a single finger across strings")
    shape: CAGEDShape
    root_string: int = Field(..., ge=0, description="String index (0 = lowest) holding the root")
    root_fret: int = Field(..., description="Anchor fret of the shape's root")

    model_config = {
        "frozen": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }

    @field_validator('fingers')
    @classmethod
    def validate_fingers(cls, v, info):
        frets = info.data.get('frets')
        if frets is None:
            return v
        if len(v) != len(frets):
            raise ValueError(f"fingers ({len(v)}) and frets ({len(frets)}) must cover the same strings")
        for string_index, (fret, finger) in enumerate(zip(frets, v)):
            if fret == MUTED and finger is not None:
                raise ValueError(f"Muted string {string_index} cannot carry finger {finger}")
            if finger is not None and not 1 <= finger <= 4:
                raise ValueError(f"Finger {finger} on string {string_index} must be between 1 and 4")
        return v

    @property
    def string_count(self) -> int:
        return len(self.frets)

    @property
    def muted_strings(self) -> List[int]:
        return [idx for idx, fret in enumerate(self.frets) if fret == MUTED]

    def numeric_frets(self) -> List[int]:
        return [fret for fret in self.frets if fret != MUTED]

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)


class ChordProgression(BaseModel):
    """A named progression: 1-based degree sequences for major and minor keys."""
    name: str
    degrees_major: List[int] = Field(..., min_length=1)
    degrees_minor: List[int] = Field(..., min_length=1)
    description: str = ""

    model_config = {"frozen": True}

    @field_validator('degrees_major', 'degrees_minor')
    @classmethod
    def validate_degrees(cls, v):
        for degree in v:
            if degree < 1 or degree > 7:
                raise ValueError(f"Scale degree {degree} must be between 1 and 7")
        return v

# ============================================================================
# Request / Response Models
# ============================================================================

class VoicingRequest(BaseModel):
    """
    Voicing or fretboard query.

    Catalog keys are not checked here: unknown scale and tuning keys are
    substituted by the engine and reported as warnings by validation.py.
    """
    rootNote: str = "A"
    scale: str = DEFAULT_SCALE
    tuning: str = DEFAULT_TUNING
    position: Optional[int] = Field(None, ge=0, description="Scale position index, None for the whole neck")
    progression: Optional[str] = Field(None, description="Progression key such as '1-4-5'")
    frets: int = Field(default=DEFAULT_FRET_COUNT, ge=1, le=MAX_FRET)

    model_config = {
        "title": "CAGED Fretboard Voicing Request",
        "description": "Schema for CAGED chord voicing and fretboard queries",
        "json_schema_extra": {
            "example": {
                "rootNote": "A",
                "scale": "minorPentatonic",
                "tuning": "standard",
                "position": 0,
                "progression": "1-4-5"
            }
        }
    }

    @field_validator('rootNote')
    @classmethod
    def validate_root_note(cls, v):
        if v not in NOTES:
            raise ValueError(f"rootNote must be one of {list(NOTES)}")
        return v


class VoicingResponse(BaseModel):
    """Response for voicing tools."""
    success: bool
    chordName: str = ""
    voicing: Optional[Dict[str, Any]] = None
    voicings: List[Dict[str, Any]] = []
    error: Optional[Dict[str, Any]] = None
    warnings: List[Dict[str, Any]] = []

    model_config = {
        "json_schema_extra": {
            "example": {
                "success": True,
                "chordName": "Am (E shape)",
                "voicing": {
                    "frets": [5, 7, 7, 5, 5, 5],
                    "fingers": [1, 3, 4, 1, 1, 1],
                    "baseFret": 5,
                    "barre": 5,
                    "shape": "E",
                    "rootString": 0,
                    "rootFret": 5
                },
                "warnings": []
            }
        }
    }


def create_schema() -> Dict[str, Any]:
    """Generate JSON Schema for voicing requests."""
    return VoicingRequest.model_json_schema()
