# auticare/schemas.py
from __future__ import annotations

from datetime import datetime
from typing import Optional, List, Dict, Annotated, Literal

from pydantic import BaseModel, Field, StringConstraints, ConfigDict

from .engine.normalizer import AnswerValue
from .engine.fusion import SecondaryPrediction


Role = Literal["individual", "parent", "clinician"]


class QuestionOut(BaseModel):
    id: str
    text: str
    category: str

    model_config = ConfigDict(from_attributes=True)


class QuestionnaireOut(BaseModel):
    role: Role
    version: str
    questions: List[QuestionOut]


class PredictionIn(BaseModel):
    """
    As delivered by the external model. Deliberately unconstrained:
    out-of-range values are clamped by the fusion engine, not rejected here.
    """
    prediction_score: float
    confidence: Optional[float] = None

    def to_engine(self) -> SecondaryPrediction:
        return SecondaryPrediction(score=self.prediction_score, confidence=self.confidence)


class AssessmentCreate(BaseModel):
    role: Role
    respondent_id: Optional[
        Annotated[str, StringConstraints(min_length=1, max_length=64, pattern=r"^[A-Za-z0-9_\-]+$")]
    ] = None
    # Labels are validated by the normalizer so a bad value surfaces as
    # "assessment could not be scored" rather than a schema error.
    answers: Dict[str, str] = Field(default_factory=dict)
    family_history: Optional[bool] = None
    prediction: Optional[PredictionIn] = None


class ContributorOut(BaseModel):
    question_id: str
    question: str
    category: str
    contribution: float
    action: str


class ScoringResultOut(BaseModel):
    kind: Literal["questionnaire_only", "fused"]
    role: Role
    normalized_score: int = Field(..., ge=0, le=100)
    model_score: Optional[int] = Field(None, ge=0, le=100)
    fused_score: Optional[int] = Field(None, ge=0, le=100)
    severity: Literal["low", "mild", "moderate", "high"]
    severity_label: str
    recommendations: List[str] = Field(default_factory=list)
    schedule_tasks: int = 0
    top_contributors: List[ContributorOut] = Field(default_factory=list)
    config_version: str


class AssessmentResponse(BaseModel):
    id: str
    role: Role
    respondent_id: Optional[str] = None
    answers: Dict[str, AnswerValue] = Field(default_factory=dict)
    created_at: Optional[datetime] = None
    result: ScoringResultOut
