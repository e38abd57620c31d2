"""
normalizer.py — Turn Gemini's free-form JSON into fully-populated models.

Gemini is asked for JSON (see request_builder.py) but nothing enforces it:
fields go missing, numbers arrive as strings, lists arrive as null, and now
and then the payload is not JSON at all. Everything here treats the payload
as an untrusted record:

  - parse_payload() never raises; garbage and "" both become {}.
  - pick() / pick_path() are the only way fields are read, and return a
    default instead of raising on a missing key, attribute or index.
  - as_score() / as_text() / as_str_list() coerce one value each and fall
    back to the caller's default when the shape is wrong.

The normalize_*() functions apply those helpers field by field, so the
models they return never have a gap, whatever Gemini sent.
"""

import json
import logging
import math
import re
import uuid
from collections.abc import Mapping, Sequence
from typing import Any, Iterable, Optional

from fakey.ai.verdict_policy import resolve_verdict
from fakey.models.analysis import (
    AnalysisResult,
    AnalysisStep,
    AnalysisSteps,
    ConfidenceLevel,
    Explanation,
)
from fakey.models.text_analysis import (
    Claim,
    Finding,
    ReverseSearchResult,
    Source,
    TextAnalysisResult,
)

logger = logging.getLogger(__name__)

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


# ── Untrusted-record access ───────────────────────────────────────────────────

def parse_payload(raw: Optional[str]) -> dict:
    """Parse `raw` as a JSON object; anything unusable becomes {}."""
    text = (raw or "").strip()
    if not text:
        return {}
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, ValueError, RecursionError):
        # Tolerate ```json fences or a sentence wrapped around the object.
        m = _JSON_OBJECT.search(text)
        if not m:
            logger.warning("Model payload is not JSON (%d chars), using defaults", len(text))
            return {}
        try:
            data = json.loads(m.group())
        except (json.JSONDecodeError, ValueError, RecursionError):
            logger.warning("Model payload is not JSON (%d chars), using defaults", len(text))
            return {}
    return data if isinstance(data, dict) else {}


def pick(record: Any, name: str, default: Any = None) -> Any:
    """Read `name` from a mapping or an object; None counts as missing."""
    if record is None:
        return default
    if isinstance(record, Mapping):
        value = record.get(name)
    else:
        value = getattr(record, name, None)
    return default if value is None else value


def pick_path(record: Any, *path: Any, default: Any = None) -> Any:
    """Follow a path of keys/attributes and list indexes, e.g. ("candidates", 0, "content")."""
    for step in path:
        if isinstance(step, int):
            if isinstance(record, Sequence) and not isinstance(record, (str, bytes)) \
                    and -len(record) <= step < len(record):
                record = record[step]
            else:
                record = None
        else:
            record = pick(record, step)
        if record is None:
            return default
    return record


# ── Value coercion ────────────────────────────────────────────────────────────

def as_number(value: Any) -> Optional[float]:
    """Numbers and numeric strings → float; everything else (incl. bools) → None."""
    if isinstance(value, bool):
        return None
    try:
        if isinstance(value, (int, float)):
            number = float(value)
        elif isinstance(value, str):
            number = float(value.strip().rstrip("%"))
        else:
            return None
    except (ValueError, OverflowError):
        # ints beyond float range count as non-numeric, like "1e400"
        return None
    return None if math.isnan(number) or math.isinf(number) else number


def as_score(value: Any, default: int) -> int:
    """A 0–100 integer score, or `default` when `value` is not numeric."""
    number = as_number(value)
    if number is None:
        return default
    return max(0, min(100, int(round(number))))


def as_text(value: Any, default: Optional[str] = "") -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return default


def as_flag(value: Any, default: bool = False) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "yes"):
        return True
    if isinstance(value, str) and value.strip().lower() in ("false", "no"):
        return False
    return default


def as_list(value: Any) -> list:
    return list(value) if isinstance(value, (list, tuple)) else []


def as_str_list(value: Any) -> list[str]:
    return [text for text in (as_text(item, None) for item in as_list(value)) if text is not None]


def confidence_tier(score: float) -> ConfidenceLevel:
    if score > 85:
        return ConfidenceLevel.HIGH
    if score < 50:
        return ConfidenceLevel.LOW
    return ConfidenceLevel.MEDIUM


def new_case_id() -> str:
    """9-character upper-case case file ID, e.g. "4F1A9C0B2"."""
    return uuid.uuid4().hex[:9].upper()


# ── Media analysis ────────────────────────────────────────────────────────────

_STEP_KEYS = {
    "integrity": "integrity",
    "consistency": "consistency",
    "aiPatterns": "ai_patterns",
    "temporal": "temporal",
}


def _qualifier(value: Any, score: int) -> ConfidenceLevel:
    if isinstance(value, str):
        for level in ConfidenceLevel:
            if value.strip().lower() == level.value.lower():
                return level
    return confidence_tier(score)


def _normalize_step(raw: Any) -> AnalysisStep:
    if not isinstance(raw, Mapping):
        return AnalysisStep()
    score = as_score(raw.get("score"), 50)
    return AnalysisStep(
        score=score,
        explanation=as_text(raw.get("explanation"), "Analyzing..."),
        confidence_qualifier=_qualifier(raw.get("confidenceQualifier"), score),
    )


def _normalize_steps(raw: Any) -> AnalysisSteps:
    return AnalysisSteps(**{
        attr: _normalize_step(pick(raw, key)) for key, attr in _STEP_KEYS.items()
    }) if isinstance(raw, Mapping) else AnalysisSteps()


def _normalize_explanations(raw: Any) -> list[Explanation]:
    explanations = []
    for item in as_list(raw):
        if not isinstance(item, Mapping):
            continue
        detail = as_text(item.get("detail"), "")
        explanations.append(Explanation(
            point=as_text(item.get("point"), ""),
            detail=detail,
            simple_detail=as_text(item.get("simpleDetail"), detail),
            category=as_text(item.get("category"), "General"),
            timestamp=as_text(item.get("timestamp"), None),
        ))
    return explanations


def normalize_media_analysis(
    raw: Optional[str],
    file_metadata: Optional[Mapping[str, Any]] = None,
) -> AnalysisResult:
    """Build an AnalysisResult from the media-analysis payload; never raises on bad data."""
    data = parse_payload(raw)
    probability = as_number(data.get("deepfakeProbability"))
    confidence = as_score(data.get("confidence"), 50)

    return AnalysisResult(
        id=new_case_id(),
        verdict=resolve_verdict(data.get("verdict"), probability),
        confidence=confidence,
        confidence_level=confidence_tier(confidence),
        deepfake_probability=as_score(probability, 50),
        summary=as_text(data.get("summary"), "Forensic analysis complete."),
        user_recommendation=as_text(data.get("userRecommendation"), "Verify manually."),
        analysis_steps=_normalize_steps(data.get("analysisSteps")),
        explanations=_normalize_explanations(data.get("explanations")),
        manipulation_type=as_text(data.get("manipulationType"), "Digital Synthesis"),
        guidance=as_text(data.get("guidance"), "Caution advised."),
        file_metadata=dict(file_metadata or {}),
    )


# ── Text analysis ─────────────────────────────────────────────────────────────

def _normalize_claims(raw: Any) -> list[Claim]:
    return [
        Claim(
            claim=as_text(item.get("claim"), ""),
            status=as_text(item.get("status"), "UNVERIFIED"),
            source_url=as_text(item.get("sourceUrl"), ""),
            category=as_text(item.get("category"), "General"),
        )
        for item in as_list(raw)
        if isinstance(item, Mapping)
    ]


def normalize_text_analysis(raw: Optional[str], sources: Iterable[Source] = ()) -> TextAnalysisResult:
    data = parse_payload(raw)
    ai_probability = as_score(data.get("aiProbability"), 0)
    is_factual = data.get("isFactual")

    return TextAnalysisResult(
        likelihood_range=f"{ai_probability}%",
        ai_probability=ai_probability,
        verdict_label=as_text(data.get("verdictLabel"), "STRICT"),
        ambiguity_note="",
        ai_signals=as_str_list(data.get("aiSignals")),
        human_signals=as_str_list(data.get("humanSignals")),
        is_factual=is_factual if isinstance(is_factual, (bool, str)) else "STRICT",
        summary=as_text(data.get("summary"), "Analysis complete."),
        claims=_normalize_claims(data.get("claims")),
        linguistic_markers=as_str_list(data.get("linguisticMarkers")),
        sources=list(sources),
    )


# ── Reverse image search ──────────────────────────────────────────────────────

def normalize_reverse_search(raw: Optional[str], sources: Iterable[Source] = ()) -> ReverseSearchResult:
    data = parse_payload(raw)
    return ReverseSearchResult(
        summary=as_text(data.get("summary"), ""),
        original_event=as_text(data.get("originalEvent"), ""),
        manipulation_detected=as_flag(data.get("manipulationDetected")),
        confidence=as_score(data.get("confidence"), 50),
        findings=[
            Finding(
                type=as_text(item.get("type"), "General"),
                detail=as_text(item.get("detail"), ""),
            )
            for item in as_list(data.get("findings"))
            if isinstance(item, Mapping)
        ],
        sources=list(sources),
    )
