# finance_api/main.py
import uvicorn
import os
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from finance_api.core.config import settings
from finance_api.core.database import create_db_and_tables
from finance_api.core.auth import (
    fastapi_users,
    auth_backend,
    UserRead,
    UserCreate,
)
from finance_api.core.exceptions import (
    ConflictError,
    GoalReachedError,
    InsufficientFundsError,
    NotFoundError,
    RemoteWriteFailure,
    ValidationError,
)
from finance_api.api.v1.api import api_router

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create database tables on startup (use Alembic migrations for deployed databases)"""
    try:
        await create_db_and_tables()
        logger.info("✅ Database tables created successfully")
        logger.info(f"✅ Frontend URL: {settings.FRONTEND_URL}")
        logger.info(f"✅ Backend URL: {settings.BACKEND_BASE_URL}")

        if settings.OPENROUTER_API_KEY:
            logger.info("✅ OpenRouter API key configured for AI tips")
        else:
            logger.warning("⚠️ OpenRouter API key not configured - AI tips will be unavailable")
    except Exception as e:
        logger.error(f"❌ Startup error: {str(e)}")
    yield


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.VERSION,
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Authentication", "description": "Registration, login and logout"},
        {"name": "User Management", "description": "User profile and settings operations"},
        {"name": "goals", "description": "Savings goals, plans and contributions"},
        {"name": "notifications", "description": "Stored and real-time notifications"},
        {"name": "insights", "description": "AI-powered tips and category suggestions"},
    ],
)

# CORS Configuration
origins = [
    settings.FRONTEND_URL,
    "http://localhost:3000",  # Local development
    "http://localhost:3001",  # Backup local port
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ------------------------------------------------------------
# ERROR HANDLERS
# ------------------------------------------------------------
def _error_response(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": message, **extra})


@app.exception_handler(GoalReachedError)
async def goal_reached_handler(request: Request, exc: GoalReachedError):
    return _error_response(status.HTTP_409_CONFLICT, exc.message, field=exc.field)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return _error_response(status.HTTP_422_UNPROCESSABLE_ENTITY, exc.message, field=exc.field)


@app.exception_handler(InsufficientFundsError)
async def insufficient_funds_handler(request: Request, exc: InsufficientFundsError):
    return _error_response(status.HTTP_400_BAD_REQUEST, exc.message)


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return _error_response(status.HTTP_404_NOT_FOUND, exc.message)


@app.exception_handler(ConflictError)
async def conflict_handler(request: Request, exc: ConflictError):
    return _error_response(status.HTTP_409_CONFLICT, exc.message)


@app.exception_handler(RemoteWriteFailure)
async def remote_failure_handler(request: Request, exc: RemoteWriteFailure):
    return _error_response(status.HTTP_503_SERVICE_UNAVAILABLE, exc.message)


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for better error responses"""
    if isinstance(exc, HTTPException):
        return _error_response(exc.status_code, exc.detail)

    logger.exception(f"Unhandled exception on {request.method} {request.url.path}: {exc}")
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

# ------------------------------------------------------------
# AUTHENTICATION ROUTES
# ------------------------------------------------------------
# Business routers first: the custom logout must be matched before the fastapi-users one
app.include_router(api_router, prefix=API_PREFIX)

# JWT Login
app.include_router(
    fastapi_users.get_auth_router(auth_backend),
    prefix=f"{API_PREFIX}/auth/jwt",
    tags=["Authentication"],
)

# Registration
app.include_router(
    fastapi_users.get_register_router(UserRead, UserCreate),
    prefix=f"{API_PREFIX}/auth",
    tags=["Authentication"],
)

# Password reset
app.include_router(
    fastapi_users.get_reset_password_router(),
    prefix=f"{API_PREFIX}/auth",
    tags=["Authentication"],
)

# ------------------------------------------------------------
# ROOT / HEALTH
# ------------------------------------------------------------
@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information"""
    return {
        "message": f"{settings.APP_NAME} is running!",
        "version": settings.VERSION,
    }


@app.get("/health", tags=["Health"])
async def health_check():
    return {
        "status": "healthy",
        "version": settings.VERSION,
        "environment": settings.ENVIRONMENT,
    }


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8000))
    uvicorn.run("finance_api.main:app", host="0.0.0.0", port=port, reload=False)
