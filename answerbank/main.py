from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from datetime import datetime, timezone
from answerbank import __version__
from answerbank.logging_config import setup_logging
from answerbank.utils.logger import get_logger
from answerbank.middleware.logging_middleware import log_requests
from answerbank.database.connection import init_db, check_db_connection
from answerbank.dependencies import get_feedback_generator
from answerbank.exceptions import (
    AnswerbankException,
    ConflictError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from answerbank.routers import responses
from answerbank.services.feedback_generator import FeedbackGenerator
from answerbank.config import get_settings

# Setup logging configuration
setup_logging()

logger = get_logger(__name__)
settings = get_settings()

app = FastAPI(
    title="Answerbank API",
    description="""
    Response library for interview preparation.

    - **Versioned answers**: every edit of a prepared answer is kept as a version
    - **Feedback**: automated scoring of each revision and practice attempt
    - **Job relevance**: surface the answers that best match a job posting
    - **Coverage**: find question types and categories still missing
    """,
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_config["allow_origins"],
    allow_credentials=settings.cors_config["allow_credentials"],
    allow_methods=settings.cors_config["allow_methods"],
    allow_headers=settings.cors_config["allow_headers"],
)

app.middleware("http")(log_requests)

app.include_router(responses.router)

ERROR_STATUS_CODES = (
    (ValidationError, 400),
    (NotFoundError, 404),
    (ConflictError, 409),
    (PersistenceError, 500),
)


def status_code_for(exc: AnswerbankException) -> int:
    for exc_type, status_code in ERROR_STATUS_CODES:
        if isinstance(exc, exc_type):
            return status_code
    return 500


@app.exception_handler(AnswerbankException)
async def answerbank_exception_handler(request: Request, exc: AnswerbankException):
    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {status_code}: {exc.message}")
    return JSONResponse(status_code=status_code, content={"detail": exc.message})


@app.on_event("startup")
async def startup_event():
    """Create tables and report configuration problems."""
    for issue in settings.validate_configuration():
        logger.warning(f"Configuration issue: {issue}")
    init_db()
    logger.info("Answerbank API started")


@app.get("/")
async def root():
    return {
        "message": "Answerbank API",
        "version": __version__,
        "docs": "/docs",
    }


@app.get("/health")
async def health_check(feedback_generator: FeedbackGenerator = Depends(get_feedback_generator)):
    """Report database and feedback service connectivity."""
    database_ok = check_db_connection()
    feedback_ok = await feedback_generator.health_check()

    # Feedback falls back when unreachable, so it only degrades the service.
    if not database_ok:
        status = "unhealthy"
    elif not feedback_ok:
        status = "degraded"
    else:
        status = "healthy"

    return {
        "status": status,
        "database": "connected" if database_ok else "unavailable",
        "feedback_service": "reachable" if feedback_ok else "unavailable",
        "version": __version__,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
