"""
FastAPI Application Entry Point.

This module creates and configures the FastAPI application instance.
It handles:
1. Application initialization
2. Router registration
3. CORS configuration
4. Exception handlers
5. Startup/shutdown events

Run with: uvicorn career_assistant.api.main:app --reload
"""
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from career_assistant.core.config import get_settings
from career_assistant.core.logging_config import setup_logging, get_logger
from career_assistant.core.exceptions import AssistantException
from career_assistant.api.routes import chat_router, health_router


# Initialize logging before anything else
settings = get_settings()
setup_logging(settings.log_level, log_to_file=settings.app_env.lower() != "testing")
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    - Startup: create the chat tables, report configured providers
    - Shutdown: dispose of the connection pool
    """
    logger.info(f"Starting {settings.app_name} in {settings.app_env} mode")

    providers = settings.configured_providers()
    if providers:
        logger.info(f"Configured providers (in order): {', '.join(providers)}")
    else:
        logger.warning("No provider credentials configured, replies will be offline templates")

    from career_assistant.database.init_db import init_conversation_tables
    try:
        init_conversation_tables()
    except Exception as e:
        logger.error(f"Failed to auto-init tables: {e}")

    yield  # Application runs here

    logger.info(f"Shutting down {settings.app_name}")

    from career_assistant.database.connection import reset_database
    reset_database()


# Create FastAPI application
app = FastAPI(
    title="Career Assistant API",
    description="""
    A conversational career guidance assistant.

    ## Features

    - **Personas**: mentor, coach, counselor or industry expert, picked per message
    - **Session memory**: topics, goals and recent turns carried between messages
    - **Provider fallback**: DeepSeek, GPT-OSS, OpenAI and Anthropic in priority order
    - **Offline replies**: templated answers when no provider is available
    """,
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)


# ============================================================
# Middleware Configuration
# ============================================================

if settings.is_development():
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    logger.warning("CORS configured for development (all origins allowed)")


# ============================================================
# Exception Handlers
# ============================================================

@app.exception_handler(AssistantException)
async def assistant_exception_handler(request: Request, exc: AssistantException):
    """Handle all custom assistant exceptions."""
    if exc.status_code >= 500:
        logger.error(f"{exc.error_code} on {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    Handle uncaught exceptions globally.

    Detailed error information is only included in development mode.
    """
    logger.exception(f"Unhandled exception: {exc}")

    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_error",
            "message": "An unexpected error occurred",
            "details": str(exc) if settings.is_development() else None,
            "timestamp": datetime.utcnow().isoformat()
        }
    )


# ============================================================
# Routers
# ============================================================

app.include_router(health_router)
app.include_router(chat_router)


@app.get("/", include_in_schema=False)
async def root():
    """Point the root at the API documentation."""
    return {
        "message": "Career Assistant API",
        "version": "0.1.0",
        "documentation": "/docs",
        "health": "/health"
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "career_assistant.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development()
    )
