"""
analysis.py — Pydantic models for media forensic results.

AnalysisResult is what analyze-media hands back to the caller. Every field
is always populated: the normalizer (ai/normalizer.py) fills gaps in the
model's JSON with the defaults declared here, so a caller never has to
check for missing keys.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class Verdict(str, Enum):
    REAL = "REAL"
    LIKELY_FAKE = "LIKELY_FAKE"


class ConfidenceLevel(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


# ── Sub-models ────────────────────────────────────────────────────────────────

class AnalysisStep(BaseModel):
    """One quadrant of the forensic breakdown."""

    score: int = 50  # 0 = clean, 100 = strongly manipulated
    explanation: str = "Analyzing..."
    confidence_qualifier: ConfidenceLevel = ConfidenceLevel.MEDIUM


class AnalysisSteps(BaseModel):
    integrity: AnalysisStep = Field(default_factory=AnalysisStep)
    consistency: AnalysisStep = Field(default_factory=AnalysisStep)
    ai_patterns: AnalysisStep = Field(default_factory=AnalysisStep)
    temporal: AnalysisStep = Field(default_factory=AnalysisStep)


class Explanation(BaseModel):
    """A single evidence point, with a plain-language variant for end users."""

    point: str = ""
    detail: str = ""
    simple_detail: str = ""
    category: str = "General"
    timestamp: Optional[str] = None  # e.g. "00:12" for video evidence


# ── Result ────────────────────────────────────────────────────────────────────

class AnalysisResult(BaseModel):
    """Final forensic outcome for one uploaded media file."""

    model_config = ConfigDict(frozen=True)

    id: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    verdict: Verdict
    confidence: int = 50
    confidence_level: ConfidenceLevel = ConfidenceLevel.MEDIUM
    deepfake_probability: int = 50
    summary: str = "Forensic analysis complete."
    user_recommendation: str = "Verify manually."
    analysis_steps: AnalysisSteps = Field(default_factory=AnalysisSteps)
    explanations: list[Explanation] = Field(default_factory=list)
    manipulation_type: str = "Digital Synthesis"
    guidance: str = "Caution advised."
    file_metadata: dict[str, Any] = Field(default_factory=dict)
