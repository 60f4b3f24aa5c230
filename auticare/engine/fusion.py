# auticare/engine/fusion.py
from __future__ import annotations

import math
from dataclasses import dataclass
from fractions import Fraction
from typing import Optional, Tuple

from ..errors import MalformedSecondaryPrediction, OutOfRangeError
from ..logging_config import log_failure
from .normalizer import exact, round_half_up

QUESTIONNAIRE_WEIGHT = 0.6
SECONDARY_WEIGHT = 0.4
DEFAULT_CONFIDENCE = 0.7


@dataclass(frozen=True)
class SecondaryPrediction:
    """Output of an external model. Untrusted: clamped before use."""
    score: float
    confidence: Optional[float] = None


def _clamp(value: Fraction, lo: int, hi: int) -> Fraction:
    return max(Fraction(lo), min(Fraction(hi), value))


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_finite(value) -> bool:
    # ints of any size are finite; math.isfinite would overflow converting them
    if not _is_number(value):
        return False
    return isinstance(value, int) or math.isfinite(value)


def _check(prediction: SecondaryPrediction) -> None:
    problems = []
    if not _is_finite(prediction.score):
        problems.append(f"score={prediction.score!r} is not a finite number")
    elif not 0 <= prediction.score <= 100:
        problems.append(f"score={prediction.score!r} outside [0, 100]")

    c = prediction.confidence
    if c is not None:
        if not _is_finite(c):
            problems.append(f"confidence={c!r} is not a finite number")
        elif not 0 <= c <= 1:
            problems.append(f"confidence={c!r} outside [0, 1]")

    if problems:
        raise MalformedSecondaryPrediction("; ".join(problems))


def sanitize_prediction(
    prediction: Optional[SecondaryPrediction],
    default_confidence: float = DEFAULT_CONFIDENCE,
) -> Optional[Tuple[Fraction, Fraction]]:
    """
    (score, confidence) clamped into range, or None when there is nothing usable.

    Soft boundary violations from the external model are logged and clamped;
    they never block the questionnaire result.
    """
    if prediction is None:
        return None

    score, confidence = prediction.score, prediction.confidence
    try:
        _check(prediction)
    except MalformedSecondaryPrediction as e:
        log_failure("MALFORMED_SECONDARY_PREDICTION", {"detail": str(e)})
        if not _is_finite(score):
            return None
        if confidence is not None and not _is_finite(confidence):
            confidence = None

    if confidence is None:
        confidence = default_confidence

    return _clamp(exact(score), 0, 100), _clamp(exact(confidence), 0, 1)


def blend(
    questionnaire_score: int,
    score: Fraction,
    confidence: Fraction,
    confidence_weighted: bool = False,
    questionnaire_weight: float = QUESTIONNAIRE_WEIGHT,
    secondary_weight: float = SECONDARY_WEIGHT,
) -> int:
    """Blend already-sanitized inputs; see fuse()."""
    sw = exact(secondary_weight)
    if confidence_weighted:
        sw = sw * confidence
        qw = 1 - sw
    else:
        qw = exact(questionnaire_weight)

    fused = qw * questionnaire_score + sw * score
    return round_half_up(_clamp(fused, 0, 100))


def fuse(
    questionnaire_score: int,
    secondary: Optional[SecondaryPrediction],
    default_confidence: float = DEFAULT_CONFIDENCE,
    confidence_weighted: bool = False,
    questionnaire_weight: float = QUESTIONNAIRE_WEIGHT,
    secondary_weight: float = SECONDARY_WEIGHT,
) -> int:
    """
    Fixed linear blend: round(0.6 * questionnaire + 0.4 * secondary).

    No prediction means no fusion: the questionnaire score comes back unchanged.
    Confidence only moves the split when the caller opts in with
    confidence_weighted=True, in which case the secondary weight becomes
    0.4 * confidence and the questionnaire takes the remainder.
    """
    if isinstance(questionnaire_score, bool) or not isinstance(questionnaire_score, int) \
            or not 0 <= questionnaire_score <= 100:
        raise OutOfRangeError(questionnaire_score)

    clean = sanitize_prediction(secondary, default_confidence)
    if clean is None:
        return questionnaire_score

    score, confidence = clean
    return blend(
        questionnaire_score, score, confidence,
        confidence_weighted, questionnaire_weight, secondary_weight,
    )
