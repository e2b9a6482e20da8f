import os

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from examprep.api.exams import router as exams_router
from examprep.logging_config import configure_logging

configure_logging(
    level=os.getenv("LOG_LEVEL", "INFO"),
    log_dir=os.getenv("LOG_DIR", "logs"),
)


app = FastAPI(title="Exam Import API")
app.include_router(exams_router)


@app.get("/", response_class=PlainTextResponse)
def read_root() -> str:
    """Healthcheck endpoint for the service."""
    return "ok"


@app.get("/healthz", response_class=PlainTextResponse)
def healthcheck() -> str:
    """Liveness probe used by container orchestrators."""
    return "ok"
