from fastapi import APIRouter

from .. import schemas
from ..engine.config import get_scoring_config

router = APIRouter(prefix="/questions", tags=["questions"])


@router.get("/{role}", response_model=schemas.QuestionnaireOut)
def list_questions(role: schemas.Role):
    cfg = get_scoring_config()
    role_cfg = cfg.role(role)
    return {
        "role": role,
        "version": cfg.version,
        "questions": [schemas.QuestionOut.model_validate(q) for q in role_cfg.questions],
    }
