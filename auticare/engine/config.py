# auticare/engine/config.py
from __future__ import annotations

import json
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

from ..errors import InsufficientDataError
from ..settings import get_settings
from .question_bank import SCORING_CONFIG


ROLES = ("individual", "parent", "clinician")
LEVELS = ("low", "mild", "moderate", "high")


@dataclass(frozen=True)
class Question:
    id: str
    text: str
    category: str
    roles: Tuple[str, ...] = ()


@dataclass(frozen=True)
class WeightEntry:
    weight: float
    category: str


@dataclass(frozen=True)
class FamilyHistoryTrigger:
    question_id: str
    value: str


@dataclass(frozen=True)
class RoleConfig:
    role: str
    questions: Tuple[Question, ...]
    weights: Mapping[str, WeightEntry]
    family_history: Optional[FamilyHistoryTrigger] = None

    @property
    def order(self) -> Dict[str, int]:
        return {q.id: i for i, q in enumerate(self.questions)}

    def question(self, question_id: str) -> Optional[Question]:
        for q in self.questions:
            if q.id == question_id:
                return q
        return None


@dataclass(frozen=True)
class SeverityBand:
    level: str
    label: str
    lower: int
    recommendations: Tuple[str, ...] = ()
    schedule_tasks: int = 0


@dataclass(frozen=True)
class ScoringConfig:
    version: str
    roles: Mapping[str, RoleConfig]
    actions: Mapping[str, str]
    default_action: str
    bands: Tuple[SeverityBand, ...]
    top_k: int = 3
    family_history_boost: int = 10
    questionnaire_weight: float = 0.6
    secondary_weight: float = 0.4

    def role(self, role: str) -> RoleConfig:
        cfg = self.roles.get(role)
        if cfg is None:
            raise InsufficientDataError(f"Unknown respondent role {role!r}")
        return cfg

    def action_for(self, category: str) -> str:
        return self.actions.get(category, self.default_action)


def _build_role(role: str, raw: dict) -> RoleConfig:
    raw_questions = (raw.get("questions") or {}).get(role) or []
    raw_weights = (raw.get("weights") or {}).get(role) or {}
    if not raw_questions:
        raise ValueError(f"Role {role!r} has no questions")

    questions = []
    seen = set()
    for q in raw_questions:
        qid = str(q["id"])
        if qid in seen:
            raise ValueError(f"Duplicate question id {qid!r} for role {role!r}")
        seen.add(qid)
        questions.append(Question(
            id=qid,
            text=str(q["text"]),
            category=str(q["category"]),
            roles=tuple(q.get("roles") or (role,)),
        ))

    weights = {}
    for q in questions:
        if q.id not in raw_weights:
            raise ValueError(f"Question {q.id!r} has no weight for role {role!r}")
        w = float(raw_weights[q.id])
        if not w > 0:
            raise ValueError(f"Weight for {q.id!r} must be positive, got {w}")
        weights[q.id] = WeightEntry(weight=w, category=q.category)

    extra_ids = set(raw_weights) - seen
    if extra_ids:
        raise ValueError(f"Weights for unknown questions in role {role!r}: {sorted(extra_ids)}")

    trigger = None
    fh = ((raw.get("adjustments") or {}).get("family_history") or {}).get("triggers") or {}
    if role in fh:
        t = fh[role]
        if t["question_id"] not in weights:
            raise ValueError(f"Family-history trigger {t['question_id']!r} is not a {role!r} question")
        trigger = FamilyHistoryTrigger(question_id=str(t["question_id"]), value=str(t["value"]))

    return RoleConfig(
        role=role,
        questions=tuple(questions),
        weights=MappingProxyType(weights),
        family_history=trigger,
    )


def _build_bands(raw_bands: list) -> Tuple[SeverityBand, ...]:
    bands = tuple(
        SeverityBand(
            level=str(b["level"]),
            label=str(b["label"]),
            lower=int(b["min"]),
            recommendations=tuple(b.get("recommendations") or ()),
            schedule_tasks=int(b.get("schedule_tasks") or 0),
        )
        for b in raw_bands
    )
    if tuple(b.level for b in bands) != LEVELS:
        raise ValueError(f"Severity bands must be exactly {LEVELS} in order")
    if not bands or bands[0].lower != 0:
        raise ValueError("Severity bands must start at 0")
    lowers = [b.lower for b in bands]
    if any(a >= b for a, b in zip(lowers, lowers[1:])) or lowers[-1] > 100:
        raise ValueError(f"Severity band bounds must be strictly increasing within [0, 100]: {lowers}")
    return bands


def build_scoring_config(raw: dict) -> ScoringConfig:
    """
    Validate a raw scoring mapping and freeze it.

    Raises ValueError on any structural problem so a bad config fails at
    process start, not in the middle of a scoring run.
    """
    roles = {role: _build_role(role, raw) for role in ROLES if role in (raw.get("questions") or {})}
    if not roles:
        raise ValueError("Scoring config defines no roles")

    fusion = raw.get("fusion") or {}
    qw = float(fusion.get("questionnaire_weight", 0.6))
    sw = float(fusion.get("secondary_weight", 0.4))
    if qw < 0 or sw < 0 or abs(qw + sw - 1.0) > 1e-9:
        raise ValueError(f"Fusion weights must be non-negative and sum to 1, got {qw} + {sw}")

    top_k = int(raw.get("top_k", 3))
    if top_k < 1:
        raise ValueError("top_k must be at least 1")

    boost = ((raw.get("adjustments") or {}).get("family_history") or {}).get("boost", 10)

    return ScoringConfig(
        version=str(raw.get("version") or "unversioned"),
        roles=MappingProxyType(roles),
        actions=MappingProxyType(dict(raw.get("actions") or {})),
        default_action=str(raw.get("default_action") or "Discuss this area with a healthcare professional."),
        bands=_build_bands(raw.get("severity_bands") or []),
        top_k=top_k,
        family_history_boost=int(boost),
        questionnaire_weight=qw,
        secondary_weight=sw,
    )


def load_scoring_config(path: str | Path) -> ScoringConfig:
    with Path(path).open("r", encoding="utf-8") as f:
        return build_scoring_config(json.load(f))


@lru_cache(maxsize=1)
def get_scoring_config() -> ScoringConfig:
    path = get_settings().SCORING_CONFIG_PATH
    if path:
        return load_scoring_config(path)
    return build_scoring_config(SCORING_CONFIG)
