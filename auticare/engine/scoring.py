# auticare/engine/scoring.py
from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction
from typing import Iterable, List, Mapping, Tuple

from ..errors import InsufficientDataError
from .config import RoleConfig, WeightEntry
from .normalizer import MAX_INTENSITY, Answer, exact, normalize, round_half_up


@dataclass(frozen=True)
class AdjustmentFlags:
    family_history: bool = False


def weighted_contributions(
    answers: Iterable[Answer], weights: Mapping[str, WeightEntry]
) -> List[Tuple[Answer, Fraction, Fraction]]:
    """
    (answer, weight, normalize(value) * weight) for every answer, in input order.

    Rejects the whole set when it is empty, repeats a question, or names a
    question the weight table does not know (wrong respondent role).
    """
    answers = list(answers)
    if not answers:
        raise InsufficientDataError("No answers to score")

    unknown = [a.question_id for a in answers if a.question_id not in weights]
    if unknown:
        raise InsufficientDataError(f"Answers do not match the respondent role: {unknown}")

    seen = set()
    out = []
    for a in answers:
        if a.question_id in seen:
            raise InsufficientDataError(f"Question {a.question_id!r} answered more than once")
        seen.add(a.question_id)
        w = exact(weights[a.question_id].weight)
        out.append((a, w, normalize(a.value) * w))
    return out


def aggregate(
    answers: Iterable[Answer],
    weights: Mapping[str, WeightEntry],
    adjustments: AdjustmentFlags | None = None,
    family_history_boost: int = 10,
) -> int:
    """
    Weighted mean of answered questions only, rescaled to 0..100.

    Unanswered questions drop out of the denominator instead of counting as
    "never". The family-history boost is additive and applied before the clamp;
    rounding (half-up) happens once, at the end.
    """
    rows = weighted_contributions(answers, weights)
    total = sum((c for _, _, c in rows), Fraction(0))
    weight_sum = sum((w for _, w, _ in rows), Fraction(0))

    score = total / weight_sum / MAX_INTENSITY * 100

    if adjustments and adjustments.family_history:
        score += family_history_boost

    score = max(Fraction(0), min(Fraction(100), score))
    return round_half_up(score)


def family_history_flag(role_cfg: RoleConfig, answers: Iterable[Answer]) -> bool:
    trigger = role_cfg.family_history
    if trigger is None:
        return False
    return any(
        a.question_id == trigger.question_id and a.value == trigger.value
        for a in answers
    )
