import os
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings:
    APP_VERSION: str = "1.0.0"
    SCHEMA_VERSION: str = "v1-assessment-scores"

    # --- CONFIG ---
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./auticare.db")
    SQL_ECHO = _env_flag("SQL_ECHO")

    # Optional JSON file replacing the built-in question bank / weight tables
    SCORING_CONFIG_PATH = os.getenv("AUTICARE_SCORING_CONFIG") or None

    # --- FUSION POLICY ---
    DEFAULT_MODEL_CONFIDENCE = float(os.getenv("DEFAULT_MODEL_CONFIDENCE", "0.7"))
    CONFIDENCE_WEIGHTED_FUSION = _env_flag("CONFIDENCE_WEIGHTED_FUSION")

    # --- LOGGING ---
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


@lru_cache
def get_settings():
    return Settings()
