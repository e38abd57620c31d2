"""
request_builder.py — Immutable request values for every Gemini task.

Each task type fixes its model, its generation parameters and, for JSON
tasks, the exact output shape it asks for. The output shape is declared
once as an OutputSchema and rendered into the instruction text; the
normalizer (normalizer.py) reads back exactly those field names. Gemini has
no enforced schema here, so the two sides stay aligned only through these
schema objects. Change a field name in one place and the prompt follows.

  Task             Model                          Extras
  ───────────────  ─────────────────────────────  ──────────────────────────────
  image-gen        gemini-2.5-flash-image         aspect ratio
  video-gen        veo-3.1-fast-generate-preview  1 video, 720p, 16:9
  report-gen       gemini-3-flash-preview         plain text
  media-analysis   gemini-3-pro-preview           JSON, thinking 32768
  reverse-search   gemini-3-pro-preview           JSON, Google Search, thinking 8000
  text AI_DETECT   gemini-3-flash-preview         JSON, system instruction
  text FACT_CHECK  gemini-3-pro-preview           JSON, Google Search, thinking 16000
  transcription    gemini-3-flash-preview         audio/wav inline
  chat-session     gemini-3-pro-preview           persona, Google Search, thinking 16000
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from fakey.models.analysis import AnalysisResult
from fakey.models.text_analysis import TextAnalysisMode


class GeminiModel(str, Enum):
    IMAGE = "gemini-2.5-flash-image"
    VIDEO = "veo-3.1-fast-generate-preview"
    FLASH = "gemini-3-flash-preview"
    PRO = "gemini-3-pro-preview"


# ── Request values ────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class TextPart:
    text: str


@dataclass(frozen=True)
class BlobPart:
    data: bytes
    mime_type: str


Part = Union[TextPart, BlobPart]


@dataclass(frozen=True)
class ModelRequest:
    model: GeminiModel
    contents: tuple[Part, ...] = ()
    system_instruction: Optional[str] = None
    response_mime_type: Optional[str] = None  # "application/json" for schema tasks
    use_search: bool = False
    thinking_budget: Optional[int] = None
    aspect_ratio: Optional[str] = None  # image generation only


@dataclass(frozen=True)
class VideoRequest:
    prompt: str
    model: GeminiModel = GeminiModel.VIDEO
    number_of_videos: int = 1
    resolution: str = "720p"
    aspect_ratio: str = "16:9"


# ── Output schemas ────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class SchemaField:
    name: str
    hint: str = ""
    shape: str = ""  # nested outline, e.g. "[{type, detail}]"

    def render(self) -> str:
        text = f"{self.name}: {self.shape}" if self.shape else self.name
        return f"{text} ({self.hint})" if self.hint else text


@dataclass(frozen=True)
class OutputSchema:
    fields: tuple[SchemaField, ...]

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields)

    def outline(self) -> str:
        return "{" + ", ".join(f.render() for f in self.fields) + "}"


MEDIA_ANALYSIS_SCHEMA = OutputSchema((
    SchemaField("verdict", "STRICTLY 'REAL' or 'LIKELY_FAKE'"),
    SchemaField("deepfakeProbability", "0-100 score where 100 means definitely AI"),
    SchemaField("confidence", "0-100 model certainty"),
    SchemaField("summary"),
    SchemaField("userRecommendation"),
    SchemaField(
        "analysisSteps",
        "each step has score 0-100, explanation, confidenceQualifier High|Medium|Low",
        "{integrity, consistency, aiPatterns, temporal}",
    ),
    SchemaField(
        "explanations",
        "timestamp only for video/audio evidence",
        "[{point, detail, simpleDetail, category, timestamp}]",
    ),
    SchemaField("manipulationType"),
    SchemaField("guidance"),
))

REVERSE_SEARCH_SCHEMA = OutputSchema((
    SchemaField("summary"),
    SchemaField("originalEvent"),
    SchemaField("manipulationDetected", "true or false"),
    SchemaField("confidence", "0-100"),
    SchemaField("findings", shape="[{type, detail}]"),
))

AI_DETECT_SCHEMA = OutputSchema((
    SchemaField("aiProbability", "0-100"),
    SchemaField("verdictLabel"),
    SchemaField("aiSignals", shape="[string]"),
    SchemaField("humanSignals", shape="[string]"),
    SchemaField("summary"),
    SchemaField("linguisticMarkers", shape="[string]"),
))

FACT_CHECK_SCHEMA = OutputSchema((
    SchemaField("claims", shape="[{claim, status, sourceUrl, category}]"),
    SchemaField("isFactual", "true, false or MIXED"),
    SchemaField("summary"),
))


# ── Fixed instruction text ────────────────────────────────────────────────────

_MEDIA_ANALYSIS_PROMPT = (
    "Perform an exhaustive forensic analysis of this media. "
    "Output a JSON object with: {schema}"
)

_REVERSE_SEARCH_PROMPT = (
    "Find the original source of this image using Google Search. Return JSON: {schema}"
)

_FACT_CHECK_INSTRUCTION = "Verify claims using Google Search. Return JSON: {schema}"

_AI_DETECT_INSTRUCTION = "Detect AI text. Return JSON: {schema}"

_REPORT_PROMPT = """\
Generate a detailed plain text forensic analysis report for a Notepad (.txt) file based on this data: {payload}
The report must be strictly text-only, formatted with ASCII dividers (e.g., ====================).
Include:
1. CASE FILE ID
2. FINAL VERDICT (REAL or FAKE)
3. AI-LIKELIHOOD SCORE
4. TECHNICAL EVIDENCE LOG (Metadata, Visual, Temporal findings)
5. INVESTIGATOR GUIDANCE
6. SYSTEM SIGNATURE

Ensure it looks like a professional command-line or system log output."""

_TRANSCRIBE_PROMPT = "Transcribe this audio accurately."

CHAT_PERSONA = (
    "You are the FAKEY.AI Forensic Assistant. "
    "Use Google Search for news/facts. Professional tone."
)

_JSON = "application/json"


# ── Builders ──────────────────────────────────────────────────────────────────

def build_image_request(prompt: str, aspect_ratio: str = "1:1") -> ModelRequest:
    return ModelRequest(
        model=GeminiModel.IMAGE,
        contents=(TextPart(prompt),),
        aspect_ratio=aspect_ratio,
    )


def build_video_request(prompt: str) -> VideoRequest:
    return VideoRequest(prompt=prompt)


def build_report_request(result: AnalysisResult) -> ModelRequest:
    """The full AnalysisResult is embedded as JSON so the report can quote it."""
    return ModelRequest(
        model=GeminiModel.FLASH,
        contents=(TextPart(_REPORT_PROMPT.format(payload=result.model_dump_json())),),
    )


def build_media_analysis_request(data: bytes, mime_type: str) -> ModelRequest:
    return ModelRequest(
        model=GeminiModel.PRO,
        contents=(
            BlobPart(data, mime_type),
            TextPart(_MEDIA_ANALYSIS_PROMPT.format(schema=MEDIA_ANALYSIS_SCHEMA.outline())),
        ),
        response_mime_type=_JSON,
        thinking_budget=32768,
    )


def build_reverse_search_request(data: bytes, mime_type: str) -> ModelRequest:
    return ModelRequest(
        model=GeminiModel.PRO,
        contents=(
            BlobPart(data, mime_type),
            TextPart(_REVERSE_SEARCH_PROMPT.format(schema=REVERSE_SEARCH_SCHEMA.outline())),
        ),
        response_mime_type=_JSON,
        use_search=True,
        thinking_budget=8000,
    )


def build_text_analysis_request(text: str, mode: TextAnalysisMode) -> ModelRequest:
    """FACT_CHECK runs on Pro with search grounding; AI_DETECT is a plain Flash call."""
    if mode == TextAnalysisMode.FACT_CHECK:
        return ModelRequest(
            model=GeminiModel.PRO,
            contents=(TextPart(text),),
            system_instruction=_FACT_CHECK_INSTRUCTION.format(schema=FACT_CHECK_SCHEMA.outline()),
            response_mime_type=_JSON,
            use_search=True,
            thinking_budget=16000,
        )
    return ModelRequest(
        model=GeminiModel.FLASH,
        contents=(TextPart(text),),
        system_instruction=_AI_DETECT_INSTRUCTION.format(schema=AI_DETECT_SCHEMA.outline()),
        response_mime_type=_JSON,
    )


def build_transcription_request(audio: bytes) -> ModelRequest:
    return ModelRequest(
        model=GeminiModel.FLASH,
        contents=(BlobPart(audio, "audio/wav"), TextPart(_TRANSCRIBE_PROMPT)),
    )


def build_chat_request() -> ModelRequest:
    """Session config only; turns are sent later through the chat handle."""
    return ModelRequest(
        model=GeminiModel.PRO,
        system_instruction=CHAT_PERSONA,
        use_search=True,
        thinking_budget=16000,
    )
