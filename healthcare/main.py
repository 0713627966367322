"""FastAPI application entry point — wires everything together.

Usage:
    python -m healthcare.main
"""

from __future__ import annotations

import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI

from healthcare.admin.audit import audit_on_event
from healthcare.admin.web import router as admin_router
from healthcare.api.routes import router as appointments_router
from healthcare.config import settings
from healthcare.db.backend import backend_lifespan

# ── Logging setup ────────────────────────────────────────────────────

logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
    stream=sys.stdout,
)
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.JSONRenderer() if settings.is_production else structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
)

logger = logging.getLogger(__name__)

# ── FastAPI lifespan ─────────────────────────────────────────────────


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application startup and shutdown lifecycle."""
    logger.info("Starting HealthCare+ backend (env=%s)", settings.environment)

    # Appwrite + Redis clients, event emitter, appointment service
    async with backend_lifespan(settings) as backend:
        backend.events.subscribe(audit_on_event)
        app.state.backend = backend
        logger.info("Backend initialized (appwrite=%s)", settings.appwrite.appwrite_endpoint)

        yield
        logger.info("Shutting down HealthCare+ backend...")

    logger.info("HealthCare+ backend shutdown complete")


# ── FastAPI app ──────────────────────────────────────────────────────

app = FastAPI(
    title="HealthCare+ API",
    description="Appointment booking backend for HealthCare+",
    version="0.1.0",
    lifespan=lifespan,
)
app.include_router(appointments_router)
app.include_router(admin_router)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {
        "status": "ok",
        "environment": settings.environment,
        "clinic": settings.notifications.clinic_name,
    }


# ── Entry point ──────────────────────────────────────────────────────

if __name__ == "__main__":
    uvicorn.run(
        "healthcare.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.environment == "development",
        log_level=settings.log_level.lower(),
    )
