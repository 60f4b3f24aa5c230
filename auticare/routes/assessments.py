# auticare/routes/assessments.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .. import models, schemas
from ..db import get_db
from ..errors import ResultAlreadyFused
from ..settings import get_settings
from ..engine.assessment import ScoringResult, amend_with_prediction, reconstruct, score_assessment
from ..engine.normalizer import answers_from_mapping

router = APIRouter(prefix="/assessments", tags=["assessments"])
settings = get_settings()


def _result_from_record(obj: models.Assessment) -> ScoringResult:
    return reconstruct(
        obj.answers or {},
        obj.role,
        questionnaire_score=obj.questionnaire_score,
        model_score=obj.model_score,
        fused_score=obj.fused_score,
    )


def _response(obj: models.Assessment, result: ScoringResult) -> schemas.AssessmentResponse:
    return schemas.AssessmentResponse(
        id=obj.id,
        role=obj.role,
        respondent_id=obj.respondent_id,
        answers=obj.answers or {},
        created_at=obj.created_at,
        result=schemas.ScoringResultOut(**result.to_dict()),
    )


def _get_or_404(db: Session, assessment_id: str) -> models.Assessment:
    obj = db.query(models.Assessment).filter(models.Assessment.id == assessment_id).first()
    if not obj:
        raise HTTPException(404, "Assessment not found")
    return obj


# -------------------------
# CREATE (score + persist)
# -------------------------
@router.post("/", response_model=schemas.AssessmentResponse, status_code=201)
def create_assessment(body: schemas.AssessmentCreate, response: Response, db: Session = Depends(get_db)):
    response.headers["X-App-Version"] = settings.APP_VERSION

    # Spreadsheet imports and the questionnaire UI both arrive as {question_id: label}
    answers = answers_from_mapping(body.answers)
    result = score_assessment(
        answers,
        body.role,
        prediction=body.prediction.to_engine() if body.prediction else None,
        family_history=body.family_history,
    )

    obj = models.Assessment(
        role=body.role,
        respondent_id=body.respondent_id,
        answers={a.question_id: a.value.value for a in answers},
        questionnaire_score=result.normalized_score,
        model_score=result.model_score,
        fused_score=result.fused_score,
        assessment_complete=True,
        config_version=result.config_version,
        app_version=settings.APP_VERSION,
        schema_version=settings.SCHEMA_VERSION,
    )

    try:
        db.add(obj)
        db.commit()
        db.refresh(obj)
    except IntegrityError:
        db.rollback()
        raise HTTPException(409, "Duplicate insert")

    return _response(obj, result)


# -------------------------
# GET (reconstruct after reload)
# -------------------------
@router.get("/{assessment_id}", response_model=schemas.AssessmentResponse)
def get_assessment(assessment_id: str, db: Session = Depends(get_db)):
    obj = _get_or_404(db, assessment_id)
    return _response(obj, _result_from_record(obj))


# -------------------------
# LATE PREDICTION (amend exactly once)
# -------------------------
@router.post("/{assessment_id}/prediction", response_model=schemas.AssessmentResponse)
def add_prediction(assessment_id: str, body: schemas.PredictionIn, db: Session = Depends(get_db)):
    obj = _get_or_404(db, assessment_id)
    current = _result_from_record(obj)

    amended = amend_with_prediction(current, body.to_engine())
    if amended is current:
        # Unusable prediction: the questionnaire-only result stands
        return _response(obj, current)

    # Conditional update so two late predictions racing each other cannot both land
    updated = (
        db.query(models.Assessment)
        .filter(models.Assessment.id == assessment_id, models.Assessment.fused_score.is_(None))
        .update(
            {"model_score": amended.model_score, "fused_score": amended.fused_score},
            synchronize_session=False,
        )
    )
    if not updated:
        db.rollback()
        raise ResultAlreadyFused("Result already carries a fused score")
    db.commit()
    db.refresh(obj)

    return _response(obj, amended)
