# pitchlytics/app/main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .. import __version__
from ..config.config_manager import Settings, load_settings
from ..core.cache import ScoreCache, build_cache
from ..core.errors import ValidationEngineError
from ..core.service import ValidationService
from ..routers.validation import router as validation_router
from ..utils.logging_utils import log_api_response, setup_logging

logger = logging.getLogger(__name__)


def create_app(cache: Optional[ScoreCache] = None, settings: Optional[Settings] = None) -> FastAPI:
    """Build the API. Tests pass an ``InMemoryScoreCache``."""
    settings = settings or load_settings()
    setup_logging(settings.log_level, settings.log_file, settings.log_json)
    if cache is None:
        cache = build_cache(settings.cache_backend, settings.redis_url, settings.cache_key_prefix)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Pitch validation service starting (cache={cache.backend})")
        yield
        await cache.close()

    app = FastAPI(
        title="Pitchlytics - Pitch Validation",
        version=__version__,
        description="Multi-category pitch scoring, recommendations and benchmarks.",
        lifespan=lifespan,
    )
    app.state.service = ValidationService(
        cache,
        ttl_seconds=settings.cache_ttl_seconds,
        max_batch=settings.batch_max_items,
    )
    app.include_router(validation_router)

    # ---------- Exception Handlers ----------
    @app.exception_handler(ValidationEngineError)
    async def _engine_error(request: Request, exc: ValidationEngineError):
        log_api_response(f"{request.method} {request.url.path} failed", {
            "status_code": exc.status_code,
            "error": exc.message,
        })
        return JSONResponse({"success": False, "error": exc.message}, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def _validation(request: Request, exc: RequestValidationError):
        return JSONResponse(
            {"success": False, "error": "Invalid request body", "details": jsonable_encoder(exc.errors())},
            status_code=422,
        )

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception):
        logger.exception(f"[unhandled] {type(exc).__name__}: {exc}")
        return JSONResponse(
            {"success": False, "error": f"Server error: {type(exc).__name__}: {exc}"},
            status_code=500,
        )

    @app.get("/healthz")
    def healthz():
        return {"ok": True, "cache": cache.backend}

    return app


app = create_app()
