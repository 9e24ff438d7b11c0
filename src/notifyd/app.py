"""Application factory for the notification daemon."""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import LOCAL_TARGET, Settings, get_settings
from .errors import CastUnavailableError, NotifydError
from .routers.actions import router as actions_router
from .routers.static import router as static_router
from .services.artifacts import ScratchDirectory, sweep_stale_scratch_dirs
from .services.cast import CastController
from .services.engines import resolve_engine, resolve_locale
from .services.notifier import NotificationService, build_base_url
from .services.player import build_player
from .services.synthesizer import SpeechSynthesizer
from .utils.network import detect_local_address

logger = logging.getLogger(__name__)


def _configure_logging(level: str | None = None) -> None:
    """Configure logging based on LOG_LEVEL environment variable."""
    # Load .env file first to ensure LOG_FILE is available
    load_dotenv()

    log_level_str = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    log_level = getattr(logging, log_level_str, logging.INFO)

    formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handlers: list[logging.Handler] = []

    log_file = os.getenv("LOG_FILE")
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    # Always add console handler
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    handlers.append(console_handler)

    logging.basicConfig(level=log_level, handlers=handlers, force=True)

    logging.getLogger("notifyd").setLevel(log_level)
    logging.getLogger("uvicorn").setLevel(log_level)
    logging.getLogger("uvicorn.error").setLevel(log_level)
    # Cast devices poll /static; keep access logs out of INFO output
    logging.getLogger("uvicorn.access").setLevel(max(log_level, logging.WARNING))


def _envelope(status_code: int, reason: str, err: str = "") -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "reason": reason, "err": err},
    )


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()) if item != "body")
        message = error.get("msg", "invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts)


def _install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(NotifydError)
    async def _notifyd_error(request: Request, exc: NotifydError) -> JSONResponse:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
        return _envelope(exc.status_code, exc.reason, exc.detail)

    @app.exception_handler(RequestValidationError)
    async def _validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return _envelope(400, "Bad arguments", _format_validation_errors(exc))

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == 404:
            return _envelope(404, f"Unknown path {request.url.path}", str(exc.detail))
        return _envelope(exc.status_code, str(exc.detail))

    # An exception_handler(Exception) still re-raises to the server after
    # responding; a middleware answers without letting the error escape.
    @app.middleware("http")
    async def _unexpected_error(request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            logger.exception("Unhandled error on %s %s", request.method, request.url.path)
            return _envelope(500, "Internal error", str(exc))


def create_app(settings: Settings | None = None, *, log_level: str | None = None) -> FastAPI:
    # Configure logging first thing
    _configure_logging(log_level)

    settings = settings or get_settings()

    # Missing engine (or cast tool when casting is the default) aborts startup
    engine = resolve_engine(settings.engine)
    locale = resolve_locale(override=settings.locale)
    logger.info("Speaking with locale %s", locale)

    cast_controller: CastController | None = None
    cast_unavailable_reason = ""
    try:
        cast_controller = CastController(settings.cast_tool)
    except CastUnavailableError as exc:
        if settings.casts_by_default:
            raise
        cast_unavailable_reason = str(exc)
        logger.warning("%s; /action/cast is disabled", exc)

    player = build_player(settings.playback, poll_interval=settings.poll_interval)
    advertise_host = settings.advertise_host or detect_local_address()
    base_url = build_base_url(advertise_host, settings.port)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        sweep_stale_scratch_dirs(settings.scratch_parent)
        with ScratchDirectory(parent=settings.scratch_parent) as scratch:
            synthesizer = SpeechSynthesizer(engine, locale, scratch)
            app.state.notification_service = NotificationService(
                synthesizer,
                player,
                cast_controller=cast_controller,
                base_url=base_url,
                target=settings.target,
                local_target=LOCAL_TARGET,
                cast_unavailable_reason=cast_unavailable_reason,
            )
            logger.info("Serving generated audio from %s/static", base_url)
            try:
                yield
            finally:
                app.state.notification_service = None

    app = FastAPI(
        title="notifyd",
        version="0.1.0",
        description="Speak short notifications locally or on cast devices.",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.notification_service = None

    _install_error_handlers(app)
    app.include_router(actions_router)
    app.include_router(static_router)

    @app.get("/health", tags=["health"])
    async def healthcheck() -> dict[str, Any]:
        return {
            "status": "ok",
            "engine": engine.engine.value,
            "locale": locale,
            "target": settings.target,
            "playback": player.strategy,
            "cast_available": cast_controller is not None,
        }

    return app


__all__ = ["create_app"]
