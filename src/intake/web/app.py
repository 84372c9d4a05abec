"""
Intake Web - FastAPI application.

Serves the onboarding wizard and a health check.
"""

import logging
import sys

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from intake import __version__
from intake.config import get_settings
from onboarding.api import router as onboarding_router

logger = logging.getLogger(__name__)


def setup_logging(level: str | None = None) -> None:
    """Configure root logging from settings."""
    if level is None:
        level = get_settings().log_level

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    # Quiet down noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


app = FastAPI(title="Intake", version=__version__)


@app.on_event("startup")
async def startup_event():
    """Log configuration on startup."""
    setup_logging()
    settings = get_settings()
    logger.info("Intake starting up...")
    logger.info(f"  Environment: {settings.intake_env}")
    logger.info(f"  Projects table: {settings.projects_table}")
    logger.info(f"  Storage: {settings.storage_bucket}/{settings.upload_prefix}")
    logger.info(f"  Correlate submissions: {settings.correlate_submissions}")


app.include_router(onboarding_router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


@app.get("/", include_in_schema=False)
async def index():
    """The wizard is the whole site."""
    return RedirectResponse(url="/onboarding")
