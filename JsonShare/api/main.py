from __future__ import annotations

import logging
from http import HTTPStatus
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from JsonShare.core.config import Settings, get_settings
from JsonShare.core.errors import JsonShareError, MissingField
from JsonShare.core.guards import BotFilter, RateLimiter
from JsonShare.core.models import HealthResponse
from JsonShare.core.service import FileService
from JsonShare.core.storage import FileStore, build_file_store

from . import routes
from .dependencies import SettingsDep
from .middleware import add_guards

log = logging.getLogger("jsonshare")


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level.upper(), format="%(asctime)s %(levelname)s %(message)s")


def create_app(settings: Optional[Settings] = None, store: Optional[FileStore] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(title=settings.APP_NAME, version=settings.VERSION)

    # ---- Shared state, built once per process ----
    file_store = store or build_file_store(settings)
    app.state.settings = settings
    app.state.file_service = FileService(file_store, max_upload_bytes=settings.MAX_UPLOAD_BYTES)
    app.state.rate_limiter = RateLimiter(settings.RATE_LIMIT, settings.RATE_WINDOW_SECONDS)
    app.state.bot_filter = BotFilter(settings.BOT_USER_AGENTS)
    log.info("Using %s storage backend", file_store.name)

    add_guards(app)

    @app.exception_handler(JsonShareError)
    async def jsonshare_error_handler(request: Request, exc: JsonShareError) -> JSONResponse:
        if exc.status_code >= 500:
            log.error("%s on %s %s: %s", exc.code, request.method, request.url.path, exc.detail)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        fields = sorted({str(err["loc"][-1]) for err in exc.errors() if err.get("loc")})
        error = MissingField(f"Missing or invalid field(s): {', '.join(fields)}" if fields else None)
        log.info("Rejected %s %s: %s", request.method, request.url.path, error.detail)
        return JSONResponse(status_code=error.status_code, content=error.to_dict())

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        try:
            kind = HTTPStatus(exc.status_code).phrase.title().replace(" ", "").replace("-", "")
        except ValueError:
            kind = "HTTPError"
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": kind, "detail": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        log.error("Unhandled error: %s", exc, exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "InternalError", "detail": "Internal server error"},
        )

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    def health(current: SettingsDep) -> HealthResponse:
        return HealthResponse(
            service=current.APP_NAME,
            version=current.VERSION,
            storage=app.state.file_service.store.name,
        )

    app.include_router(routes.router)

    if settings.STATIC_DIR:
        static_dir = Path(settings.STATIC_DIR)
        if static_dir.is_dir():
            app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")
        else:
            log.warning("STATIC_DIR %s does not exist; front end not served", static_dir)

    return app
