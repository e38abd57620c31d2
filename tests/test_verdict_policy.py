"""
test_verdict_policy.py — The REAL / LIKELY_FAKE reconciliation rule.

Every (label, probability) pair must land on exactly one verdict, and the
branch order decides ties.
"""

import pytest

from fakey.ai.verdict_policy import resolve_verdict
from fakey.models.analysis import Verdict


@pytest.mark.parametrize(
    ("label", "probability", "expected"),
    [
        ("REAL", 30, Verdict.REAL),
        ("REAL", 70, Verdict.LIKELY_FAKE),
        ("FAKE", 30, Verdict.LIKELY_FAKE),
        (None, None, Verdict.LIKELY_FAKE),
        # absent probability counts as 0 for the REAL branch
        ("REAL", None, Verdict.REAL),
        # exactly 50: not < 50, not > 50, label decides
        ("REAL", 50, Verdict.REAL),
        (None, 50, Verdict.LIKELY_FAKE),
        ("LIKELY_FAKE", 10, Verdict.LIKELY_FAKE),
        ("LIKELY_FAKE", None, Verdict.LIKELY_FAKE),
        (None, 51, Verdict.LIKELY_FAKE),
        ("REAL", 49.9, Verdict.REAL),
        ("REAL", 50.1, Verdict.LIKELY_FAKE),
    ],
)
def test_resolve_verdict(label, probability, expected):
    assert resolve_verdict(label, probability) is expected


def test_label_match_is_exact():
    """Lower-case 'real' is not the REAL label; with no number it is the cautious verdict."""
    assert resolve_verdict("real", None) is Verdict.LIKELY_FAKE


@pytest.mark.parametrize("label", ["REAL", "LIKELY_FAKE", "UNSURE", "", None, 42])
@pytest.mark.parametrize("probability", [None, 0, 25, 49, 50, 51, 75, 100])
def test_policy_is_total(label, probability):
    assert resolve_verdict(label, probability) in (Verdict.REAL, Verdict.LIKELY_FAKE)
