from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarHTTP
import logging

logger = logging.getLogger("auticare")


class ScoringError(Exception):
    """Base class for everything the scoring engine raises."""


class InvalidAnswerError(ScoringError):
    """An answer value outside the five-point ordinal vocabulary."""

    def __init__(self, value, question_id: str | None = None):
        self.value = value
        self.question_id = question_id
        where = f" for question {question_id!r}" if question_id else ""
        super().__init__(f"Invalid answer value {value!r}{where}")


class InsufficientDataError(ScoringError):
    """Empty or role-mismatched answer set; the whole run is rejected."""


class OutOfRangeError(ScoringError):
    """A score outside [0, 100] reached the classifier (upstream bug)."""

    def __init__(self, score):
        self.score = score
        super().__init__(f"Score {score!r} is outside [0, 100]")


class MalformedSecondaryPrediction(ScoringError):
    """
    Secondary score/confidence outside its numeric domain.
    Only used inside the fusion engine: it is clamped and logged, never surfaced.
    """


class ResultAlreadyFused(ScoringError):
    """A result may be amended with a fused score exactly once."""


def install_error_handlers(app):
    @app.exception_handler(StarHTTP)
    async def http_exc(_: Request, exc: StarHTTP):
        return JSONResponse({"error": f"HTTP_{exc.status_code}", "detail": exc.detail}, status_code=exc.status_code)

    @app.exception_handler(ResultAlreadyFused)
    async def already_fused(_: Request, exc: ResultAlreadyFused):
        return JSONResponse({"error": "ALREADY_FUSED", "detail": str(exc)}, status_code=409)

    @app.exception_handler(OutOfRangeError)
    async def out_of_range(_: Request, exc: OutOfRangeError):
        logger.error(f"Score out of range reached classifier: {exc}", exc_info=exc)
        return JSONResponse({"error": "INTERNAL_ERROR", "detail": "Assessment could not be scored"}, status_code=500)

    @app.exception_handler(ScoringError)
    async def not_scored(_: Request, exc: ScoringError):
        logger.warning(f"Assessment rejected: {exc}")
        return JSONResponse(
            {"error": "ASSESSMENT_NOT_SCORED", "detail": "Assessment could not be scored", "reason": str(exc)},
            status_code=422,
        )

    @app.exception_handler(Exception)
    async def unhandled(_: Request, exc: Exception):
        logger.exception(f"Unhandled exception: {exc}")
        return JSONResponse({"error": "INTERNAL_ERROR", "detail": "Unexpected error"}, status_code=500)
