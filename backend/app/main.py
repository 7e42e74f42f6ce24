"""Pronunciation API FastAPI application entry point."""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles

from app.config import Settings, settings as default_settings
from app.container import Services, build_services
from app.errors import PronunciationError
from app.models import HealthOut
from app.routes import data, pronunciation

logger = logging.getLogger(__name__)


def create_app(settings: Settings = default_settings, services: Services | None = None) -> FastAPI:
    """Build the application.

    When *services* is given it is used as-is and left open on shutdown
    (tests own it); otherwise real upstream clients are built at startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup / shutdown lifecycle."""
        owned = services is None
        app.state.services = build_services(settings) if owned else services
        yield
        if owned:
            await app.state.services.aclose()

    app = FastAPI(
        title="Pronunciation API",
        description="Word pronunciation audio, phonetics and definitions",
        version="0.1.0",
        lifespan=lifespan,
    )

    # ── Middleware ──────────────────────────────────────────
    app.add_middleware(GZipMiddleware, minimum_size=1024, compresslevel=6)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type", "Authorization", "If-None-Match"],
        expose_headers=["ETag", "Server-Timing"],
        max_age=86400,
    )

    @app.middleware("http")
    async def server_timing(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000
        response.headers["Server-Timing"] = f"total;dur={duration_ms:.0f}"
        response.headers["Timing-Allow-Origin"] = "*"
        if duration_ms > settings.SLOW_REQUEST_MS:
            logger.warning(
                "Slow request: %s %s took %.0fms", request.method, request.url.path, duration_ms
            )
        return response

    # ── Error handlers ──────────────────────────────────────
    @app.exception_handler(PronunciationError)
    async def pronunciation_error(request: Request, exc: PronunciationError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def body_validation_error(request: Request, exc: RequestValidationError):
        first = exc.errors()[0] if exc.errors() else {}
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = first.get("msg", "Invalid request")
        return JSONResponse(
            status_code=400,
            content={"error": f"{location}: {message}" if location else message},
        )

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    # ── Routes ──────────────────────────────────────────────
    app.include_router(pronunciation.router)
    app.include_router(data.router)

    @app.get("/health", response_model=HealthOut)
    async def health_check():
        return HealthOut(status="ok", timestamp=int(time.time() * 1000))

    # ── Serve frontend static files ─────────────────────────
    # Mount AFTER API routes so they take priority.
    static_dir = settings.STATIC_DIR
    if static_dir.is_dir() and (static_dir / "index.html").exists():
        app.mount("/", StaticFiles(directory=str(static_dir), html=True), name="frontend")
    else:
        @app.get("/", response_class=PlainTextResponse)
        async def root():
            return PlainTextResponse(
                "Pronunciation API", headers={"Cache-Control": "public, max-age=3600"}
            )

    return app


logging.basicConfig(
    level=default_settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host=default_settings.HOST, port=default_settings.PORT)
