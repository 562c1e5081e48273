"""
FitCoach - FastAPI Application

Main entry point for the backend API.
Provides endpoints for accounts, profiles, activity logs, AI plans and
the streaming chat coach.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from fitcoach.config.settings import settings
from fitcoach.infrastructure.exceptions import (
    FitCoachError,
    ValidationError,
    AuthError,
    ForbiddenError,
    NotFoundError,
    DuplicateError,
    RateLimitError,
)

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    from fitcoach.api.dependencies import get_session_store
    from fitcoach.infrastructure.ai.completion_client import get_completion_client

    # Startup
    logger.info(f"FitCoach Backend starting in {settings.environment} mode...")

    if settings.database_url:
        try:
            from fitcoach.infrastructure.db.database import init_db
            await init_db()
            logger.info("SQLModel database connection pool initialized")
        except Exception as e:
            logger.warning(f"SQLModel database initialization skipped: {e}")
    else:
        logger.warning("DATABASE_URL is not set; data endpoints will fail")

    session_store = get_session_store()
    await session_store.start()

    yield

    # Shutdown
    await session_store.close()

    if get_completion_client.cache_info().currsize:
        await get_completion_client().aclose()

    if settings.database_url:
        try:
            from fitcoach.infrastructure.db.database import close_db
            await close_db()
            logger.info("SQLModel database connection pool closed")
        except Exception as e:
            logger.warning(f"SQLModel database shutdown error: {e}")

    logger.info("FitCoach Backend shutting down...")


app = FastAPI(
    title="FitCoach",
    description="AI fitness coach: training plans, nutrition and a streaming chat coach",
    version="1.0.0",
    lifespan=lifespan,
    debug=settings.debug,
)

# CORS configuration from Settings
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# Exception Handlers
# ============================================================================

@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    """Report malformed request bodies in the same shape as ValidationError."""
    return JSONResponse(
        status_code=400,
        content={
            "error": "ValidationError",
            "message": "Invalid request data",
            "details": {"errors": jsonable_encoder(exc.errors())},
        },
    )


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    """Handle validation errors."""
    return JSONResponse(
        status_code=400,
        content=exc.to_dict(),
    )


@app.exception_handler(AuthError)
async def auth_error_handler(request: Request, exc: AuthError):
    """Handle missing or invalid sessions."""
    return JSONResponse(
        status_code=401,
        content=exc.to_dict(),
    )


@app.exception_handler(ForbiddenError)
async def forbidden_error_handler(request: Request, exc: ForbiddenError):
    """Handle access to resources owned by another user."""
    return JSONResponse(
        status_code=403,
        content=exc.to_dict(),
    )


@app.exception_handler(NotFoundError)
async def not_found_error_handler(request: Request, exc: NotFoundError):
    """Handle not found errors."""
    return JSONResponse(
        status_code=404,
        content=exc.to_dict(),
    )


@app.exception_handler(DuplicateError)
async def duplicate_error_handler(request: Request, exc: DuplicateError):
    return JSONResponse(
        status_code=409,
        content=exc.to_dict(),
    )


@app.exception_handler(RateLimitError)
async def rate_limit_error_handler(request: Request, exc: RateLimitError):
    """Handle rate limit errors."""
    return JSONResponse(
        status_code=429,
        content=exc.to_dict(),
    )


@app.exception_handler(FitCoachError)
async def general_error_handler(request: Request, exc: FitCoachError):
    """Handle all other application errors."""
    logger.error(f"{exc.__class__.__name__} on {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=500,
        content=exc.to_dict(),
    )


# ============================================================================
# Health Check
# ============================================================================

@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "fitcoach"}


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "FitCoach API",
        "version": "1.0.0",
        "docs": "/docs",
    }


# ============================================================================
# Import and register routers
# ============================================================================

from fitcoach.api.routes import auth, profiles, activity, plans, chats

app.include_router(auth.router, prefix="/api", tags=["Auth"])
app.include_router(profiles.router, prefix="/api", tags=["Profile & Coach"])
app.include_router(activity.router, prefix="/api", tags=["Workouts & Progress"])
app.include_router(plans.router, prefix="/api", tags=["Plans"])
app.include_router(chats.router, prefix="/api", tags=["Chat"])
