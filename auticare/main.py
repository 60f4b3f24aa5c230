# auticare/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .db import init_db
from .engine.config import get_scoring_config
from .errors import install_error_handlers
from .logging_config import log_event
from .routes import assessments, questions
from .settings import get_settings


# Run schema init at import time so pytest cannot bypass it
init_db()


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    # Load and validate the scoring configuration once, before serving
    cfg = get_scoring_config()
    log_event("STARTUP", "Scoring configuration loaded", {
        "config_version": cfg.version,
        "roles": sorted(cfg.roles),
    })
    yield


app = FastAPI(title="AutiCare Scoring API", lifespan=lifespan)
install_error_handlers(app)

app.include_router(questions.router)
app.include_router(assessments.router)


@app.get("/")
def health():
    return {"status": "ok", "service": "auticare", "version": get_settings().APP_VERSION}
