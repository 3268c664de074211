"""FastAPI application entry point."""

import logging
import os
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from athena.db.database import close_database, database_connected, init_database
from athena.errors import AthenaError
from athena.llm.chat.invoker import DEFAULT_TEXT_MODEL
from athena.llm.gemini_client import GeminiClient

# Configure logging
log_level = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stdout,
)

logger = logging.getLogger(__name__)

# Browser origins allowed to call the API with credentials
ALLOWED_ORIGINS = [
    origin
    for origin in (os.getenv("FRONTEND_URL"), "http://localhost:3000")
    if origin
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup and shutdown."""
    # Startup
    db_path = os.getenv("DATABASE_PATH", "./data/athena.db")
    await init_database(db_path)
    logger.info(f"Database ready at {db_path}")

    # One Gemini client for the whole process
    app.state.gemini_client = GeminiClient()

    yield

    # Shutdown
    await close_database()
    logger.info("Database closed")


app = FastAPI(
    title="Athena",
    description="Study assistant chat backend with per-user sessions and Gemini replies",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["*"],
)


@app.exception_handler(AthenaError)
async def athena_error_handler(request: Request, exc: AthenaError) -> JSONResponse:
    """Map handled errors to their status and an ``{"error": ...}`` body."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed request bodies are client errors."""
    errors = exc.errors()
    detail = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    return JSONResponse(status_code=400, content={"error": detail})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort for anything unexpected."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.get("/api/health")
async def health_check(request: Request) -> dict[str, Any]:
    """Report configuration state without calling the model."""
    gemini_client = getattr(request.app.state, "gemini_client", None)
    return {
        "ok": True,
        "geminiKeyPresent": bool(gemini_client and gemini_client.configured),
        "geminiModel": DEFAULT_TEXT_MODEL,
        "dbConnected": database_connected(),
    }


# Import and include routers after app is created to avoid circular imports
from athena.api import chat, users  # noqa: E402

app.include_router(users.router, prefix="/api", tags=["users"])
app.include_router(chat.router, prefix="/api", tags=["chat"])
