"""
requests.py — HTTP request/response schemas for the /api/v1 routes.

Media travels as base64 inside JSON, the same way the web client produces it
with FileReader.readAsDataURL() (the "data:...;base64," prefix stripped).
"""

import base64
import binascii
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from fakey.models.analysis import AnalysisResult
from fakey.models.text_analysis import TextAnalysisMode

AspectRatio = Literal["1:1", "3:4", "4:3", "9:16", "16:9"]


def _check_b64(value: str) -> str:
    try:
        base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError("must be valid base64") from exc
    return value


# ── Analysis ──────────────────────────────────────────────────────────────────

class MediaAnalysisRequest(BaseModel):
    """Image, video or audio submitted for forensic analysis."""

    media_b64: str = Field(..., min_length=1, description="Base64-encoded media bytes")
    mime_type: Optional[str] = Field(default=None, description="Overrides the filename-derived MIME type")
    filename: str = Field(default="upload.jpg", description="Original filename (used for MIME hint)")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Echoed back as file_metadata")

    @field_validator("media_b64")
    @classmethod
    def check_base64(cls, value: str) -> str:
        return _check_b64(value)


class TextAnalysisRequest(BaseModel):
    text: str = Field(..., min_length=1, max_length=50_000)
    mode: TextAnalysisMode = TextAnalysisMode.AI_DETECT


class ReverseSearchRequest(BaseModel):
    image_b64: str = Field(..., min_length=1)
    mime_type: Optional[str] = None
    filename: str = "image.jpg"

    @field_validator("image_b64")
    @classmethod
    def check_base64(cls, value: str) -> str:
        return _check_b64(value)


class TranscriptionRequest(BaseModel):
    """WAV audio, typically a microphone recording from the browser."""

    audio_b64: str = Field(..., min_length=1)

    @field_validator("audio_b64")
    @classmethod
    def check_base64(cls, value: str) -> str:
        return _check_b64(value)


class TranscriptionResponse(BaseModel):
    text: str


class ReportRequest(BaseModel):
    result: AnalysisResult


# ── Generation ────────────────────────────────────────────────────────────────

class ImageGenerationRequest(BaseModel):
    prompt: str = Field(..., min_length=1, max_length=4000)
    aspect_ratio: AspectRatio = "1:1"


class ImageGenerationResponse(BaseModel):
    data_uri: str  # data:image/png;base64,...


class VideoGenerationRequest(BaseModel):
    prompt: str = Field(..., min_length=1, max_length=4000)


# ── Assistant chat ────────────────────────────────────────────────────────────

class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=8000)


class ChatResponse(BaseModel):
    reply: str
