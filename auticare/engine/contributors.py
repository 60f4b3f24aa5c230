# auticare/engine/contributors.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List

from .config import RoleConfig, ScoringConfig
from .normalizer import Answer
from .scoring import weighted_contributions


@dataclass(frozen=True)
class Contributor:
    question_id: str
    question: str
    category: str
    contribution: float
    action: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "question_id": self.question_id,
            "question": self.question,
            "category": self.category,
            "contribution": self.contribution,
            "action": self.action,
        }


def rank(
    answers: Iterable[Answer],
    role_cfg: RoleConfig,
    config: ScoringConfig,
    k: int | None = None,
) -> List[Contributor]:
    """
    Top-k answered questions by weighted contribution, highest first.

    Ties keep questionnaire order. "Never" answers contribute nothing and are
    not reported. Explanation only: the aggregate score never depends on this.
    """
    k = config.top_k if k is None else k
    order = role_cfg.order
    rows = [
        (a, c) for a, _, c in weighted_contributions(answers, role_cfg.weights) if c > 0
    ]
    rows.sort(key=lambda row: (-row[1], order.get(row[0].question_id, len(order))))

    out = []
    for a, c in rows[:k]:
        q = role_cfg.question(a.question_id)
        category = role_cfg.weights[a.question_id].category
        out.append(Contributor(
            question_id=a.question_id,
            question=q.text if q else a.question_id,
            category=category,
            contribution=round(float(c), 3),
            action=config.action_for(category),
        ))
    return out
