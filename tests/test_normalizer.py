"""
test_normalizer.py — Defaulting of untrusted Gemini payloads.

The normalizer must always return a fully-populated model: missing fields,
wrong types and non-JSON text all fall back to documented defaults.
"""

import json
from types import SimpleNamespace

import pytest
from pydantic import ValidationError

from fakey.ai.normalizer import (
    as_number,
    as_score,
    confidence_tier,
    new_case_id,
    normalize_media_analysis,
    normalize_reverse_search,
    normalize_text_analysis,
    parse_payload,
    pick,
    pick_path,
)
from fakey.models.analysis import ConfidenceLevel, Verdict
from fakey.models.text_analysis import Source, TextAnalysisResult


def _comparable(result):
    return result.model_dump(exclude={"id", "created_at"})


# ── parse_payload ─────────────────────────────────────────────────────────────

class TestParsePayload:

    @pytest.mark.parametrize("raw", [None, "", "   ", "not json at all", "[1, 2, 3]", "42", "null"])
    def test_unusable_payload_is_empty_object(self, raw):
        assert parse_payload(raw) == {}

    def test_whitespace_is_trimmed(self):
        assert parse_payload('\n  {"a": 1}  \n') == {"a": 1}

    def test_fenced_json_is_recovered(self):
        assert parse_payload('```json\n{"verdict": "REAL"}\n```') == {"verdict": "REAL"}

    def test_broken_braces_are_empty_object(self):
        assert parse_payload("{verdict: REAL") == {}

    def test_deeply_nested_payload_is_empty_object(self):
        nested = "[" * 100_000 + "]" * 100_000
        assert parse_payload(nested) == {}
        assert parse_payload('{"summary": ' + nested + "}") == {}


# ── Accessors ─────────────────────────────────────────────────────────────────

class TestAccessors:

    def test_pick_reads_mappings_and_objects(self):
        assert pick({"a": 1}, "a") == 1
        assert pick(SimpleNamespace(a=2), "a") == 2

    def test_pick_treats_none_as_missing(self):
        assert pick({"a": None}, "a", "x") == "x"
        assert pick(None, "a", "x") == "x"

    def test_pick_path_handles_out_of_range_index(self):
        assert pick_path({"items": []}, "items", 0, "name", default="none") == "none"
        assert pick_path({"items": [{"name": "n"}]}, "items", 0, "name") == "n"

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(70, 70), ("70", 70), ("70%", 70), (70.6, 71), (150, 100), (-3, 0), (True, 50), ("high", 50), (None, 50)],
    )
    def test_as_score(self, value, expected):
        assert as_score(value, 50) == expected

    @pytest.mark.parametrize("value", [10 ** 400, -(10 ** 400), "1e400", float("nan"), float("inf")])
    def test_out_of_range_numbers_are_not_numeric(self, value):
        assert as_number(value) is None
        assert as_score(value, 50) == 50

    @pytest.mark.parametrize(
        ("score", "tier"),
        [(100, ConfidenceLevel.HIGH), (86, ConfidenceLevel.HIGH), (85, ConfidenceLevel.MEDIUM),
         (50, ConfidenceLevel.MEDIUM), (49, ConfidenceLevel.LOW), (0, ConfidenceLevel.LOW)],
    )
    def test_confidence_tier(self, score, tier):
        assert confidence_tier(score) is tier

    def test_case_id_shape(self):
        case_id = new_case_id()
        assert len(case_id) == 9
        assert case_id == case_id.upper()
        assert case_id != new_case_id()


# ── Media analysis ────────────────────────────────────────────────────────────

class TestNormalizeMediaAnalysis:

    def test_empty_payload_gets_all_defaults(self):
        result = normalize_media_analysis("{}")
        assert result.verdict is Verdict.LIKELY_FAKE
        assert result.confidence == 50
        assert result.confidence_level is ConfidenceLevel.MEDIUM
        assert result.deepfake_probability == 50
        assert result.summary == "Forensic analysis complete."
        assert result.user_recommendation == "Verify manually."
        assert result.explanations == []
        assert result.manipulation_type == "Digital Synthesis"
        assert result.guidance == "Caution advised."
        assert result.file_metadata == {}
        for step in (result.analysis_steps.integrity, result.analysis_steps.consistency,
                     result.analysis_steps.ai_patterns, result.analysis_steps.temporal):
            assert step.score == 50
            assert step.explanation == "Analyzing..."
            assert step.confidence_qualifier is ConfidenceLevel.MEDIUM

    def test_parse_failure_equals_empty_object(self):
        assert _comparable(normalize_media_analysis("<html>oops</html>")) == \
            _comparable(normalize_media_analysis("{}"))
        assert _comparable(normalize_media_analysis("")) == \
            _comparable(normalize_media_analysis("{}"))

    def test_oversized_probability_falls_back_to_default(self):
        result = normalize_media_analysis('{"verdict": "REAL", "deepfakeProbability": 1' + "0" * 400 + "}")
        assert result.verdict is Verdict.REAL
        assert result.deepfake_probability == 50

    def test_deeply_nested_payload_gets_defaults(self):
        raw = '{"summary": ' + "[" * 100_000 + "]" * 100_000 + "}"
        assert _comparable(normalize_media_analysis(raw)) == _comparable(normalize_media_analysis("{}"))

    def test_full_payload_is_mapped(self):
        raw = json.dumps({
            "verdict": "REAL",
            "deepfakeProbability": 12,
            "confidence": 91,
            "summary": "Looks authentic.",
            "userRecommendation": "Share with care.",
            "analysisSteps": {
                "integrity": {"score": 10, "explanation": "Clean EXIF", "confidenceQualifier": "High"},
                "consistency": {"score": 15, "explanation": "Shadows agree", "confidenceQualifier": "low"},
                "aiPatterns": {"score": 5, "explanation": "None", "confidenceQualifier": "Medium"},
                "temporal": {"score": 0, "explanation": "n/a", "confidenceQualifier": "Low"},
            },
            "explanations": [
                {"point": "Lighting", "detail": "Consistent key light", "simpleDetail": "Light matches",
                 "category": "Visual", "timestamp": "00:03"},
            ],
            "manipulationType": "None",
            "guidance": "No action.",
        })
        result = normalize_media_analysis(raw, {"filename": "a.jpg", "size": 10})

        assert result.verdict is Verdict.REAL
        assert result.confidence == 91
        assert result.confidence_level is ConfidenceLevel.HIGH
        assert result.deepfake_probability == 12
        assert result.summary == "Looks authentic."
        assert result.analysis_steps.integrity.confidence_qualifier is ConfidenceLevel.HIGH
        assert result.analysis_steps.consistency.confidence_qualifier is ConfidenceLevel.LOW
        assert result.explanations[0].timestamp == "00:03"
        assert result.explanations[0].simple_detail == "Light matches"
        assert result.file_metadata == {"filename": "a.jpg", "size": 10}

    def test_probability_overrides_real_label(self):
        result = normalize_media_analysis('{"verdict": "REAL", "deepfakeProbability": "70"}')
        assert result.verdict is Verdict.LIKELY_FAKE
        assert result.deepfake_probability == 70

    def test_real_label_without_probability(self):
        result = normalize_media_analysis('{"verdict": "REAL"}')
        assert result.verdict is Verdict.REAL
        # the stored probability still gets its own default
        assert result.deepfake_probability == 50

    def test_low_confidence_tier(self):
        assert normalize_media_analysis('{"confidence": 20}').confidence_level is ConfidenceLevel.LOW

    def test_partial_steps_are_filled(self):
        result = normalize_media_analysis('{"analysisSteps": {"integrity": {"score": 90}}}')
        assert result.analysis_steps.integrity.score == 90
        assert result.analysis_steps.integrity.explanation == "Analyzing..."
        assert result.analysis_steps.integrity.confidence_qualifier is ConfidenceLevel.HIGH
        assert result.analysis_steps.temporal.score == 50

    def test_malformed_lists_are_cleaned(self):
        result = normalize_media_analysis(
            '{"explanations": ["stray string", {"point": "P", "detail": "D"}, null], '
            '"analysisSteps": "pending"}'
        )
        assert len(result.explanations) == 1
        assert result.explanations[0].simple_detail == "D"
        assert result.explanations[0].category == "General"
        assert result.explanations[0].timestamp is None
        assert result.analysis_steps.ai_patterns.score == 50

    def test_result_is_immutable(self):
        result = normalize_media_analysis("{}")
        with pytest.raises(Exception):
            result.verdict = Verdict.REAL


# ── Text analysis ─────────────────────────────────────────────────────────────

class TestNormalizeTextAnalysis:

    def test_empty_payload_gets_all_defaults(self):
        result = normalize_text_analysis("garbage")
        assert result.likelihood_range == "0%"
        assert result.ai_probability == 0
        assert result.verdict_label == "STRICT"
        assert result.ambiguity_note == ""
        assert result.ai_signals == []
        assert result.human_signals == []
        assert result.is_factual == "STRICT"
        assert result.summary == "Analysis complete."
        assert result.claims == []
        assert result.linguistic_markers == []
        assert result.sources == []

    def test_ai_detect_payload(self):
        result = normalize_text_analysis(json.dumps({
            "aiProbability": 72,
            "verdictLabel": "LIKELY AI",
            "aiSignals": ["Uniform cadence", None, 3],
            "humanSignals": "not a list",
            "linguisticMarkers": ["Low burstiness"],
        }))
        assert result.likelihood_range == "72%"
        assert result.verdict_label == "LIKELY AI"
        assert result.ai_signals == ["Uniform cadence", "3"]
        assert result.human_signals == []

    def test_fact_check_payload_with_sources(self):
        sources = [Source(title="Reuters", url="https://reuters.com")]
        result = normalize_text_analysis(
            '{"claims": [{"claim": "X happened", "status": "FALSE", "sourceUrl": "https://a"}, 7], '
            '"isFactual": false, "summary": "Mostly false."}',
            sources,
        )
        assert len(result.claims) == 1
        assert result.claims[0].source_url == "https://a"
        assert result.claims[0].category == "General"
        assert result.is_factual is False
        assert result.sources == sources

    def test_is_factual_is_a_flag_or_a_label(self):
        assert normalize_text_analysis('{"isFactual": "MIXED"}').is_factual == "MIXED"
        assert normalize_text_analysis('{"isFactual": ["x"]}').is_factual == "STRICT"
        with pytest.raises(ValidationError):
            TextAnalysisResult(is_factual=["x"])

    def test_oversized_ai_probability_falls_back_to_default(self):
        result = normalize_text_analysis('{"aiProbability": ' + "9" * 500 + "}")
        assert result.ai_probability == 0
        assert result.likelihood_range == "0%"


# ── Reverse search ────────────────────────────────────────────────────────────

class TestNormalizeReverseSearch:

    def test_defaults(self):
        result = normalize_reverse_search(None)
        assert result.summary == ""
        assert result.manipulation_detected is False
        assert result.confidence == 50
        assert result.findings == []

    def test_payload(self):
        result = normalize_reverse_search(
            '{"summary": "Found", "originalEvent": "2019 flood", "manipulationDetected": "true", '
            '"confidence": 80, "findings": [{"type": "Crop", "detail": "Cropped"}, "x"]}'
        )
        assert result.original_event == "2019 flood"
        assert result.manipulation_detected is True
        assert result.confidence == 80
        assert [f.type for f in result.findings] == ["Crop"]

    def test_oversized_confidence_falls_back_to_default(self):
        result = normalize_reverse_search('{"confidence": ' + "1" * 400 + "}")
        assert result.confidence == 50
