"""
verdict_policy.py — The one local decision rule.

Gemini reports both a categorical verdict and a 0–100 deepfake probability,
and the two do not always agree. resolve_verdict() reconciles them:

  1. label REAL and probability (absent → 0) below 50  → REAL
  2. probability above 50                              → LIKELY_FAKE
  3. label REAL                                        → REAL
  4. anything else                                     → LIKELY_FAKE

Branch order is the tie-break. A probability of exactly 50 with a REAL label
falls through to branch 3; a missing or unrecognised label with no number
lands on branch 4.
"""

from typing import Any, Optional

from fakey.models.analysis import Verdict

_REAL_LABEL = "REAL"
_MIDPOINT = 50


def resolve_verdict(label: Any, probability: Optional[float]) -> Verdict:
    is_real_label = label == _REAL_LABEL

    if is_real_label and (probability if probability is not None else 0) < _MIDPOINT:
        return Verdict.REAL
    if probability is not None and probability > _MIDPOINT:
        return Verdict.LIKELY_FAKE
    if is_real_label:
        return Verdict.REAL
    return Verdict.LIKELY_FAKE
