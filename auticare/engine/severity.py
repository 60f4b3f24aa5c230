# auticare/engine/severity.py
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Dict, Sequence

from ..errors import OutOfRangeError
from .config import SeverityBand


class SeverityLevel(str, enum.Enum):
    LOW = "low"
    MILD = "mild"
    MODERATE = "moderate"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return list(SeverityLevel).index(self)


@dataclass(frozen=True)
class Severity:
    level: SeverityLevel
    label: str
    # inclusive score range of the band this came from
    lower: int
    upper: int
    recommendations: tuple = ()
    schedule_tasks: int = 0

    def contains(self, score: int) -> bool:
        return self.lower <= score <= self.upper

    def to_dict(self) -> Dict[str, Any]:
        return {
            "severity": self.level.value,
            "severity_label": self.label,
            "recommendations": list(self.recommendations),
            "schedule_tasks": self.schedule_tasks,
        }


def classify(score: int, bands: Sequence[SeverityBand]) -> Severity:
    """
    Map a 0..100 score to its band. Lower bounds are inclusive, so 25 is "mild",
    never "low". Anything outside [0, 100] is an upstream bug and raises.
    """
    if isinstance(score, bool) or not isinstance(score, int) or not 0 <= score <= 100:
        raise OutOfRangeError(score)

    chosen, upper = bands[0], 100
    for i, band in enumerate(bands):
        if score < band.lower:
            break
        chosen = band
        upper = bands[i + 1].lower - 1 if i + 1 < len(bands) else 100

    return Severity(
        level=SeverityLevel(chosen.level),
        label=chosen.label,
        recommendations=tuple(chosen.recommendations),
        schedule_tasks=chosen.schedule_tasks,
        lower=chosen.lower,
        upper=upper,
    )
