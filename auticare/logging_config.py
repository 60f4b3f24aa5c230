import json
import logging
from datetime import datetime, timezone

from .settings import get_settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

logger = logging.getLogger("auticare")


def configure_logging(level: str | None = None) -> logging.Logger:
    """Set the level and attach a single stream handler; safe to call twice."""
    logger.setLevel((level or get_settings().LOG_LEVEL).upper())
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger


configure_logging()


def _emit(level: int, payload: dict) -> dict:
    payload.setdefault("app_version", get_settings().APP_VERSION)
    logger.log(level, json.dumps(payload, default=str, sort_keys=True))
    return payload


def log_event(action: str, message: str, extra: dict | None = None) -> dict:
    """One JSON line per scoring step (scored, fused, startup)."""
    return _emit(logging.INFO, {"action": action, "message": message, **(extra or {})})


def log_failure(error_code: str, context: dict | None = None) -> dict:
    """
    Recoverable failures (e.g. a malformed secondary prediction that was clamped).
    Returns the payload so callers can attach it to their own records.
    """
    payload = {
        "error_code": error_code,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    if context:
        payload["context"] = context
    return _emit(logging.ERROR, payload)
