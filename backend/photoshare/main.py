"""PhotoShare API - FastAPI Application"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.middleware.sessions import SessionMiddleware

from photoshare import __version__
from photoshare.api.v1 import router as api_router
from photoshare.core.config import settings
from photoshare.core.errors import PhotoShareError
from photoshare.core.logging import get_logger, setup_logging
from photoshare.db.session import init_db

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan - startup and shutdown."""
    setup_logging()
    await init_db()
    logger.info("PhotoShare API started", database_url=settings.database_url)

    yield


app = FastAPI(
    title="PhotoShare API",
    description="Photo sharing with per-photo visibility, comments, likes and tags",
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Signed cookie sessions
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.secret_key,
    session_cookie=settings.session_cookie,
    max_age=settings.session_max_age_seconds,
)


@app.exception_handler(PhotoShareError)
async def photoshare_error_handler(request: Request, exc: PhotoShareError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("Request failed", path=request.url.path, error=exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


# API routes
app.include_router(api_router, prefix="/api/v1")

# Static file serving for uploaded images
app.mount("/images", StaticFiles(directory=settings.images_dir), name="images")


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}
