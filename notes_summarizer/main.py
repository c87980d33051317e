"""FastAPI application factory and global exception handling."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional

import anyio
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request
from starlette.responses import JSONResponse

from notes_summarizer import __version__ as app_version
from notes_summarizer.api.routes import error_response, router
from notes_summarizer.config import Settings, get_settings
from notes_summarizer.mailer import SummaryMailer
from notes_summarizer.summarizer.service import build_summarization_service
from notes_summarizer.uploads import ensure_upload_dir

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(level=settings.log_level.upper(), format=LOG_FORMAT)


def _found(value: Optional[str]) -> str:
    return "found" if value else "missing"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings: Settings = app.state.settings
    ensure_upload_dir(settings)

    logger.info("Environment variables check:")
    logger.info(f"EMAIL_USER: {_found(settings.email_user)}")
    logger.info(f"EMAIL_APP_PASSWORD: {_found(settings.email_app_password)}")
    logger.info(f"HUGGING_FACE_TOKEN: {_found(settings.hugging_face_token)}")

    async with anyio.create_task_group() as task_group:
        mailer: Optional[SummaryMailer] = app.state.mailer
        if mailer is None:
            logger.info("Email credentials missing - email features will be disabled")
        else:
            # Startup does not wait on the SMTP handshake.
            task_group.start_soon(mailer.verify)

        logger.info(f"Server running on port {settings.port} ({settings.environment})")
        logger.info("Available routes:")
        for route in app.routes:
            methods = ",".join(sorted(getattr(route, "methods", None) or []))
            if methods and route.path.startswith("/api"):
                logger.info(f"  {methods:<5} {route.path}")
        yield
        task_group.cancel_scope.cancel()


def create_application(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure the FastAPI application instance."""
    settings = settings or get_settings()
    app = FastAPI(
        title=settings.app_name,
        description="Summarizes meeting notes with a hosted model and a local fallback.",
        version=app_version,
        lifespan=lifespan,
    )

    # Built once per process and shared by every request.
    app.state.settings = settings
    app.state.summarizer = build_summarization_service(settings)
    app.state.mailer = SummaryMailer.from_settings(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return error_response(400, "Invalid request", details=str(exc.errors()))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        detail = exc.detail
        if isinstance(detail, dict) and "error" in detail:
            return JSONResponse(status_code=exc.status_code, content=detail)
        if exc.status_code == 404:
            index_file = _spa_index(settings)
            if (
                index_file is not None
                and request.method == "GET"
                and not request.url.path.startswith("/api")
            ):
                return FileResponse(index_file)
            return error_response(404, "Route not found")
        if detail == "There was an error parsing the body":
            return error_response(exc.status_code, "Invalid JSON", details=detail)
        return error_response(exc.status_code, "Request failed", details=detail)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        logger.exception("Unhandled error")
        return error_response(500, "Something went wrong!", details=str(exc))

    app.include_router(router)

    if settings.static_dir:
        app.mount(
            "/",
            StaticFiles(directory=settings.static_dir, html=True, check_dir=False),
            name="frontend",
        )
    return app


def _spa_index(settings: Settings) -> Optional[Path]:
    if not settings.static_dir:
        return None
    index_file = Path(settings.static_dir) / "index.html"
    return index_file if index_file.is_file() else None


app = create_application()
