# auticare/engine/assessment.py
"""
Assessment results as an explicit state transition:

    QuestionnaireOnly --amend(prediction)--> Fused

Both states are frozen. Severity is computed when the record is built, from the
fused score if there is one, so it always reflects the most authoritative score
available. A Fused result cannot be amended again.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Iterable, Mapping, Optional, Tuple, Union

from ..errors import OutOfRangeError, ResultAlreadyFused
from ..logging_config import log_event
from ..settings import get_settings
from .config import ScoringConfig, get_scoring_config
from .contributors import Contributor, rank
from .fusion import SecondaryPrediction, blend, sanitize_prediction
from .normalizer import Answer, answers_from_mapping, round_half_up
from .scoring import AdjustmentFlags, aggregate, family_history_flag
from .severity import Severity, classify


def _check_score(value) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 100:
        raise OutOfRangeError(value)


@dataclass(frozen=True)
class _Result:
    role: str
    normalized_score: int
    severity: Severity
    top_contributors: Tuple[Contributor, ...]
    config_version: str

    kind: ClassVar[str] = ""

    def __post_init__(self):
        self._check_scores()
        if not self.severity.contains(self.final_score):
            raise ValueError(
                f"Severity {self.severity.level.value!r} covers "
                f"[{self.severity.lower}, {self.severity.upper}], not score {self.final_score}"
            )

    def _check_scores(self) -> None:
        _check_score(self.normalized_score)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "role": self.role,
            "normalized_score": self.normalized_score,
            "model_score": self.model_score,
            "fused_score": self.fused_score,
            **self.severity.to_dict(),
            "top_contributors": [c.to_dict() for c in self.top_contributors],
            "config_version": self.config_version,
        }


@dataclass(frozen=True)
class QuestionnaireOnly(_Result):
    kind: ClassVar[str] = "questionnaire_only"

    @property
    def fused_score(self) -> Optional[int]:
        return None

    @property
    def model_score(self) -> Optional[int]:
        return None

    @property
    def final_score(self) -> int:
        return self.normalized_score

    def amend(self, fused_score: int, model_score: Optional[int], config: ScoringConfig) -> "Fused":
        return Fused(
            role=self.role,
            normalized_score=self.normalized_score,
            severity=classify(fused_score, config.bands),
            top_contributors=self.top_contributors,
            config_version=self.config_version,
            fused_score=fused_score,
            model_score=model_score,
        )


@dataclass(frozen=True, kw_only=True)
class Fused(_Result):
    fused_score: int
    model_score: Optional[int] = None

    kind: ClassVar[str] = "fused"

    def _check_scores(self) -> None:
        super()._check_scores()
        _check_score(self.fused_score)
        if self.model_score is not None:
            _check_score(self.model_score)

    @property
    def final_score(self) -> int:
        return self.fused_score

    def amend(self, fused_score, model_score, config) -> "Fused":
        raise ResultAlreadyFused("Result already carries a fused score")


ScoringResult = Union[QuestionnaireOnly, Fused]


def _as_answers(answers: Union[Mapping[str, Any], Iterable[Answer]]) -> list[Answer]:
    if isinstance(answers, Mapping):
        return answers_from_mapping(answers)
    return list(answers)


def _questionnaire_result(answers: list[Answer], role: str, normalized: int, config: ScoringConfig) -> QuestionnaireOnly:
    role_cfg = config.role(role)
    return QuestionnaireOnly(
        role=role,
        normalized_score=normalized,
        severity=classify(normalized, config.bands),
        top_contributors=tuple(rank(answers, role_cfg, config)) if answers else (),
        config_version=config.version,
    )


def amend_with_prediction(
    result: ScoringResult,
    prediction: Optional[SecondaryPrediction],
    config: ScoringConfig | None = None,
    default_confidence: float | None = None,
    confidence_weighted: bool | None = None,
) -> ScoringResult:
    """
    Attach a late secondary prediction. Uses the stored normalized score; the
    questionnaire is not re-aggregated. An absent (or unusable) prediction leaves
    the result as it is.
    """
    if isinstance(result, Fused):
        raise ResultAlreadyFused("Result already carries a fused score")

    config = config or get_scoring_config()
    settings = get_settings()
    if default_confidence is None:
        default_confidence = settings.DEFAULT_MODEL_CONFIDENCE
    if confidence_weighted is None:
        confidence_weighted = settings.CONFIDENCE_WEIGHTED_FUSION

    clean = sanitize_prediction(prediction, default_confidence)
    if clean is None:
        return result

    score, confidence = clean
    fused = blend(
        result.normalized_score, score, confidence, confidence_weighted,
        config.questionnaire_weight, config.secondary_weight,
    )
    amended = result.amend(fused, round_half_up(score), config)
    log_event("ASSESSMENT_FUSED", "Secondary prediction fused", {
        "role": result.role,
        "normalized_score": result.normalized_score,
        "model_score": amended.model_score,
        "fused_score": fused,
        "severity": amended.severity.level.value,
    })
    return amended


def score_assessment(
    answers: Union[Mapping[str, Any], Iterable[Answer]],
    role: str,
    prediction: Optional[SecondaryPrediction] = None,
    family_history: bool | None = None,
    config: ScoringConfig | None = None,
    default_confidence: float | None = None,
    confidence_weighted: bool | None = None,
) -> ScoringResult:
    """
    Full scoring run: aggregate, rank, classify, then fuse if a prediction is given.

    `family_history` is the explicit adjustment flag; when the caller leaves it
    as None it is derived from the role's configured trigger answer.
    """
    config = config or get_scoring_config()
    role_cfg = config.role(role)
    answers = _as_answers(answers)

    if family_history is None:
        family_history = family_history_flag(role_cfg, answers)

    normalized = aggregate(
        answers,
        role_cfg.weights,
        AdjustmentFlags(family_history=family_history),
        family_history_boost=config.family_history_boost,
    )
    result = _questionnaire_result(answers, role, normalized, config)
    log_event("ASSESSMENT_SCORED", "Questionnaire scored", {
        "role": role,
        "answered": len(answers),
        "normalized_score": normalized,
        "family_history": family_history,
        "severity": result.severity.level.value,
        "config_version": config.version,
    })

    if prediction is None:
        return result
    return amend_with_prediction(result, prediction, config, default_confidence, confidence_weighted)


def reconstruct(
    answers: Union[Mapping[str, Any], Iterable[Answer]],
    role: str,
    questionnaire_score: int | None = None,
    model_score: int | None = None,
    fused_score: int | None = None,
    config: ScoringConfig | None = None,
) -> ScoringResult:
    """
    Rebuild a result from persisted fields only (resume after reload).

    Stored scores win over recomputation so a result stays stable even if the
    weight tables have moved on since it was saved. Contributors are re-ranked
    from the stored answers the current table still knows.
    """
    config = config or get_scoring_config()
    role_cfg = config.role(role)
    answers = _as_answers(answers)

    if questionnaire_score is not None:
        # questions retired from the table since the result was saved
        answers = [a for a in answers if a.question_id in role_cfg.weights]
    else:
        questionnaire_score = aggregate(
            answers,
            role_cfg.weights,
            AdjustmentFlags(family_history=family_history_flag(role_cfg, answers)),
            family_history_boost=config.family_history_boost,
        )

    result = _questionnaire_result(answers, role, questionnaire_score, config)
    if fused_score is None:
        return result
    return result.amend(fused_score, model_score, config)
