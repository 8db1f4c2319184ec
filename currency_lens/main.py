import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import get_settings, Settings
from .core.errors import CurrencyLensError
from .core.logging import init_logging, request_context_middleware
from .core import errors
from .db.dal import Database
from .routers import health, detect, rates, settings as settings_router, messages
from .services.rates.cache_service import RateCache
from .services.rates.providers import make_rate_source

logger = logging.getLogger("currency_lens")


def build_rate_cache(settings: Settings, db: Database) -> RateCache:
    source = make_rate_source(settings.rate_source, settings)
    return RateCache(source, db, ttl_seconds=settings.rates_cache_ttl_seconds)


def create_app(settings_override: Settings | None = None) -> FastAPI:
    """Application factory.

    settings_override: pass an already constructed Settings instance for tests
    to isolate environment (e.g., temp DB). Falls back to cached get_settings().
    """
    settings = settings_override or get_settings()
    # idempotent; overrides built directly in tests have not run it yet
    settings.init_post_load()
    init_logging(debug=settings.debug)

    db = Database(settings.db_path)  # type: ignore[arg-type]
    try:
        db.initialize()
    except CurrencyLensError:
        logger.exception("failed to initialize database on startup")
        raise

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.prefetch_rates_on_startup:
            try:
                await app.state.rate_cache.get_rates()
                logger.info("initial rates loaded")
            except CurrencyLensError as e:
                logger.warning("initial rate prefetch failed: %s", e)
        yield

    app = FastAPI(
        title=settings.app_name,
        debug=settings.debug,
        version=settings.version,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.db = db
    app.state.rate_cache = build_rate_cache(settings, db)

    # Middleware (request id / structured logging)
    app.middleware("http")(request_context_middleware)

    # Error handlers
    app.add_exception_handler(StarletteHTTPException, errors.not_found_handler)
    app.add_exception_handler(RequestValidationError, errors.validation_error_handler)
    app.add_exception_handler(Exception, errors.server_error_handler)

    # Routers
    app.include_router(health.router)
    app.include_router(detect.router)
    app.include_router(rates.router)
    app.include_router(settings_router.router)
    app.include_router(messages.router)

    @app.get("/")
    async def root():
        return {"message": "Currency Lens API", "version": settings.version}

    return app
