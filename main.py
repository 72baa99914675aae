"""
Backend entry point for the course platform API.

One Python process, one asyncio event loop: FastAPI served by uvicorn.
The lifespan owns the process-wide resources (database engine and object
store) and keeps them on app.state for the route dependencies.

Run with: python main.py [--port PORT]
"""

import logging
import os
import sys
from contextlib import asynccontextmanager
from pathlib import Path

# Set up import paths before any local imports
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from dotenv import load_dotenv

# Load .env.local first (if exists), then .env as fallback
# .env.local is gitignored and used for local dev overrides
load_dotenv(project_root / ".env.local")
load_dotenv()

import sentry_sdk
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.config import (
    StorageConfigError,
    check_required_env_vars,
    get_allowed_origins,
    get_api_port,
    is_production,
)
from core.database import Database, is_configured
from core.storage import ObjectStore
from web_api.routes.courses import router as courses_router
from web_api.routes.quizzes import router as quizzes_router
from web_api.routes.uploads import router as uploads_router

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

SENTRY_DSN = os.environ.get("SENTRY_DSN")
if SENTRY_DSN:
    sentry_sdk.init(
        dsn=SENTRY_DSN,
        environment="production" if is_production() else "development",
        traces_sample_rate=0.1,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    FastAPI lifespan context manager.

    Creates the database engine and object store on startup and releases
    them on shutdown.
    """
    ok, warnings = check_required_env_vars()
    for warning in warnings:
        print(warning)
    if not ok:
        raise RuntimeError("Missing required environment variables")

    app.state.database = Database.from_env() if is_configured() else None
    if app.state.database is None:
        print("Warning: DATABASE_URL not set, course routes will fail")

    try:
        app.state.object_store = ObjectStore.from_env()
    except StorageConfigError as e:
        print(f"Warning: object storage not configured ({e}), uploads will fail")
        app.state.object_store = None

    yield

    print("Shutting down...")
    if app.state.database is not None:
        await app.state.database.close()


app = FastAPI(
    title="Course Platform API",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(courses_router)
app.include_router(quizzes_router)
app.include_router(uploads_router)


@app.exception_handler(StorageConfigError)
async def storage_config_error_handler(request: Request, exc: StorageConfigError):
    logger.error(f"Object storage misconfigured: {exc}")
    return JSONResponse(status_code=500, content={"error": str(exc)})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(
        f"Unhandled error on {request.method} {request.url.path}: {exc}",
        exc_info=exc,
    )
    sentry_sdk.capture_exception(exc)
    return JSONResponse(status_code=500, content={"error": "Internal Error"})


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "database_configured": getattr(app.state, "database", None) is not None,
        "storage_configured": getattr(app.state, "object_store", None) is not None,
    }


if __name__ == "__main__":
    import argparse

    import uvicorn

    parser = argparse.ArgumentParser(description="Course Platform API Server")
    parser.add_argument(
        "--port",
        type=int,
        default=get_api_port(),
        help="Port to run the server on (default: API_PORT or 8000)",
    )
    args = parser.parse_args()

    # Pass app object directly (not string) to avoid module reimport issues
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=args.port,
    )
