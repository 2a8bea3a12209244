"""
Guards for the file routes, run before routing so the request body is never
parsed for a client that is rate limited, a bot, or declaring an oversized
upload.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from JsonShare.core.errors import JsonShareError
from JsonShare.core.validation import check_content_length

UPLOAD_PATHS = frozenset({"/upload", "/api/upload"})


def is_guarded_path(path: str) -> bool:
    return (
        path in UPLOAD_PATHS
        or path == "/files"
        or path.startswith("/files/")
        or path.startswith("/api/")
    )


def client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def guard_request(request: Request) -> None:
    state = request.app.state
    # rate limiter first, then the bot filter
    state.rate_limiter.hit(client_ip(request))
    state.bot_filter.check(request.headers.get("user-agent"))
    if request.method == "POST" and request.url.path in UPLOAD_PATHS:
        settings = state.settings
        check_content_length(
            request.headers.get("content-length"),
            settings.MAX_UPLOAD_BYTES,
            settings.MULTIPART_OVERHEAD_BYTES,
        )


def add_guards(app: FastAPI) -> None:
    @app.middleware("http")
    async def guard_file_routes(request: Request, call_next):
        if is_guarded_path(request.url.path):
            try:
                guard_request(request)
            except JsonShareError as exc:
                return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=exc.headers)
        return await call_next(request)
