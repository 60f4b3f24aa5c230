# auticare/engine/normalizer.py
from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from fractions import Fraction

from ..errors import InvalidAnswerError


class AnswerValue(str, enum.Enum):
    NEVER = "never"
    RARELY = "rarely"
    SOMETIMES = "sometimes"
    OFTEN = "often"
    ALWAYS = "always"


SCALE = {
    AnswerValue.NEVER: 0,
    AnswerValue.RARELY: 1,
    AnswerValue.SOMETIMES: 2,
    AnswerValue.OFTEN: 3,
    AnswerValue.ALWAYS: 4,
}

MAX_INTENSITY = max(SCALE.values())


@dataclass(frozen=True)
class Answer:
    question_id: str
    value: AnswerValue


def parse_answer_value(value, question_id: str | None = None) -> AnswerValue:
    """Accepts the enum itself or its label ("Often", " often ")."""
    if isinstance(value, AnswerValue):
        return value
    if isinstance(value, str):
        try:
            return AnswerValue(value.strip().lower())
        except ValueError:
            pass
    raise InvalidAnswerError(value, question_id)


def normalize(value) -> int:
    return SCALE[parse_answer_value(value)]


def answers_from_mapping(raw: dict) -> list[Answer]:
    """
    {question_id: label} -> [Answer], preserving the mapping's order.
    A single bad label rejects the whole set; nothing is coerced.
    """
    return [Answer(str(qid), parse_answer_value(v, str(qid))) for qid, v in raw.items()]


def round_half_up(value) -> int:
    """Round to nearest integer, .5 going up. Callers pass exact values where ties matter."""
    return math.floor(exact(value) + Fraction(1, 2))


def exact(value) -> Fraction:
    # 0.1 -> 1/10, not the binary approximation
    if isinstance(value, float):
        return Fraction(repr(value))
    return Fraction(value)
