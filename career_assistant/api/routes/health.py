"""
Health Check Routes - System health and monitoring endpoints.

These endpoints are used for:
1. Load balancer health checks
2. Liveness/readiness probes
3. Seeing which providers are configured
"""
from datetime import datetime

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from career_assistant.core.config import get_settings
from career_assistant.core.logging_config import get_logger
from career_assistant.database.connection import get_database
from career_assistant.models.chat import HealthResponse

logger = get_logger(__name__)

router = APIRouter(
    prefix="/health",
    tags=["Health"],
)

APP_VERSION = "0.1.0"


@router.get(
    "",
    response_model=HealthResponse,
    summary="Health check endpoint",
)
async def health_check() -> HealthResponse:
    """
    Perform a basic health check.

    Verifies the API is running. Database and providers are covered by
    /health/ready.
    """
    logger.debug("Health check requested")

    return HealthResponse(
        status="healthy",
        version=APP_VERSION,
        timestamp=datetime.utcnow()
    )


@router.get(
    "/ready",
    response_model=HealthResponse,
    summary="Readiness check endpoint",
    description="""
    Returns whether the service is ready to accept requests.

    Checks database connectivity and lists the providers that have
    credentials. With no providers the service still answers, using
    offline templated replies.
    """,
    responses={503: {"model": HealthResponse, "description": "Database unreachable"}},
)
def readiness_check():
    """Verify the message store and report configured providers."""
    logger.debug("Readiness check requested")

    settings = get_settings()
    database_ok = get_database().check_connection()

    response = HealthResponse(
        status="ready" if database_ok else "unavailable",
        version=APP_VERSION,
        timestamp=datetime.utcnow(),
        database="connected" if database_ok else "unreachable",
        providers=settings.configured_providers(),
    )
    if not database_ok:
        return JSONResponse(status_code=503, content=response.model_dump(mode="json"))
    return response
