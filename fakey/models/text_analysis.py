"""
text_analysis.py — Pydantic models for text checks and reverse image search.

Two text modes share TextAnalysisResult:
  - AI_DETECT:  ai_probability, verdict_label, signals, linguistic markers
  - FACT_CHECK: claims + grounded sources (Google Search)

Fields that only one mode fills keep their empty defaults in the other.
"""

from enum import Enum
from typing import Union

from pydantic import BaseModel, Field


class TextAnalysisMode(str, Enum):
    AI_DETECT = "AI_DETECT"
    FACT_CHECK = "FACT_CHECK"


class Source(BaseModel):
    """A grounding citation returned alongside a search-backed answer."""

    title: str
    url: str = ""


class Claim(BaseModel):
    claim: str = ""
    status: str = "UNVERIFIED"
    source_url: str = ""
    category: str = "General"


class TextAnalysisResult(BaseModel):
    likelihood_range: str = "0%"
    ai_probability: int = 0
    verdict_label: str = "STRICT"
    ambiguity_note: str = ""
    ai_signals: list[str] = Field(default_factory=list)
    human_signals: list[str] = Field(default_factory=list)
    is_factual: Union[bool, str] = "STRICT"  # the model answers with a bool or a label
    summary: str = "Analysis complete."
    claims: list[Claim] = Field(default_factory=list)
    linguistic_markers: list[str] = Field(default_factory=list)
    sources: list[Source] = Field(default_factory=list)


# ── Reverse image search ──────────────────────────────────────────────────────

class Finding(BaseModel):
    type: str = "General"
    detail: str = ""


class ReverseSearchResult(BaseModel):
    """Provenance lookup for an image, grounded in Google Search."""

    summary: str = ""
    original_event: str = ""
    manipulation_detected: bool = False
    confidence: int = 50
    findings: list[Finding] = Field(default_factory=list)
    sources: list[Source] = Field(default_factory=list)
