from __future__ import annotations

"""Pydantic models shared by the CLI and the HTTP service."""

from typing import List

from pydantic import BaseModel


class WavFormat(BaseModel):
    """Header of a decoded WAV file."""

    container: str  # "WAV" | "WAVEX"
    subtype: str  # libsndfile subtype, e.g. "PCM_16" or "FLOAT"
    sample_rate: int
    channels: int
    frames: int


class Segment(BaseModel):
    """Contiguous span of recognized speech."""

    start: float
    end: float
    text: str


class TranscribeResponse(BaseModel):
    text: str
    segments: List[Segment]
