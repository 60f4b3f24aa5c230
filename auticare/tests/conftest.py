import os
from pathlib import Path

# Must be set before anything imports auticare.settings / auticare.db
TEST_DB = Path(__file__).resolve().parent / "auticare_test.db"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB}"
os.environ.pop("AUTICARE_SCORING_CONFIG", None)
os.environ.pop("CONFIDENCE_WEIGHTED_FUSION", None)
os.environ.pop("DEFAULT_MODEL_CONFIDENCE", None)

import pytest

from auticare.engine.config import build_scoring_config
from auticare.engine.question_bank import SCORING_CONFIG


def make_config(weights: dict, categories: dict | None = None, family: str | None = None, boost: int = 10, top_k: int = 3):
    """Small two-role config sharing one question list, for hand-checkable numbers."""
    categories = categories or {}
    questions = [
        {"id": qid, "text": f"Question {qid}", "category": categories.get(qid, "social_interaction")}
        for qid in weights
    ]
    triggers = {"parent": {"question_id": family, "value": "always"}} if family else {}
    return build_scoring_config({
        "version": "test-1",
        "top_k": top_k,
        "questions": {"individual": questions, "parent": questions},
        "weights": {"individual": dict(weights), "parent": dict(weights)},
        "adjustments": {"family_history": {"triggers": triggers, "boost": boost}},
        "actions": SCORING_CONFIG["actions"],
        "default_action": SCORING_CONFIG["default_action"],
        "severity_bands": SCORING_CONFIG["severity_bands"],
    })


@pytest.fixture
def config_factory():
    return make_config


@pytest.fixture
def two_question_config():
    return make_config({"q1": 1, "q2": 1})


def pytest_sessionfinish(session, exitstatus):
    try:
        from auticare.db import engine
        engine.dispose()
    except ImportError:
        pass
    if TEST_DB.exists():
        TEST_DB.unlink()
