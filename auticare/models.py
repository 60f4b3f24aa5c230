# auticare/models.py
from __future__ import annotations

import uuid
import json

from sqlalchemy import (
    Column,
    String,
    Boolean,
    Integer,
    DateTime,
)
from sqlalchemy.sql import func
from sqlalchemy.types import TypeDecorator, TEXT

from .db import Base


# -------------------------
# SQLite-safe JSON object
# -------------------------
class JsonDict(TypeDecorator):
    impl = TEXT
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return "{}"
        if isinstance(value, dict):
            return json.dumps(value, ensure_ascii=False)
        if isinstance(value, str):
            s = value.strip()
            return s if s else "{}"
        return "{}"

    def process_result_value(self, value, dialect):
        if not value:
            return {}
        try:
            parsed = json.loads(value)
            return parsed if isinstance(parsed, dict) else {}
        except ValueError:
            return {}


def _uuid() -> str:
    return str(uuid.uuid4())


class Assessment(Base):
    __tablename__ = "assessments"

    id = Column(String, primary_key=True, default=_uuid)

    role = Column(String, nullable=False)  # individual / parent / clinician
    respondent_id = Column(String, nullable=True, index=True)

    # Raw answers are the source of truth for reconstruction
    answers = Column(JsonDict, default=dict, nullable=False)

    # Three separate integer scores; model/fused stay NULL until a prediction arrives
    questionnaire_score = Column(Integer, nullable=False)
    model_score = Column(Integer, nullable=True)
    fused_score = Column(Integer, nullable=True)
    assessment_complete = Column(Boolean, default=False)

    # Provenance
    config_version = Column(String, nullable=True)
    app_version = Column(String, nullable=True)
    schema_version = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
