"""
TASKFLOW API - Main Application

Backend for the TaskFlow to-do clients: natural-language task commands,
Google Tasks connection and task CRUD.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.database import database
from app.errors import TaskFlowError, taskflow_error_handler
from app.auth import auth_router
from app.google.router import router as google_router
from app.tasks.router import router as tasks_router
from app.ai.router import router as ai_router
from app.security import validate_security_config

import logging

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    validate_security_config()
    # Stores stay in memory unless MongoDB is configured
    if settings.MONGODB_URI:
        await database.connect()
        logger.info(f"Connected to MongoDB database {settings.MONGODB_DATABASE}")

    yield

    await database.disconnect()


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Natural-language task management on top of Google Tasks",
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type"],
)

app.add_exception_handler(TaskFlowError, taskflow_error_handler)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render body/query validation failures as {"error": ...} with 400."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    else:
        message = "Invalid request"
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})


@app.get("/health", tags=["Health"])
async def health_check() -> dict:
    """
    Health check endpoint.

    Used by container health checks and load balancers.
    """
    return {
        "status": "ok",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
    }


@app.get("/status", tags=["Health"])
async def status_check() -> dict:
    """Which integrations are configured. Never reveals secret values."""
    return {
        "server": "ok",
        "db": {"configured": bool(settings.MONGODB_URI)},
        "google": {"clientIdConfigured": bool(settings.GOOGLE_CLIENT_ID)},
        "auth": {"supabaseConfigured": bool(settings.SUPABASE_JWT_SECRET)},
    }


app.include_router(auth_router)
app.include_router(google_router)
app.include_router(tasks_router)
app.include_router(ai_router)
