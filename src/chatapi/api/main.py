import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncEngine

from chatapi import __version__
from chatapi.core.auth import CredentialStore
from chatapi.core.config import Settings, get_settings
from chatapi.core.errors import ChatApiError
from chatapi.core.logging import configure_logging
from chatapi.db.session import build_engine, build_sessionmaker
from chatapi.api.routers import health, threads

logger = logging.getLogger(__name__)


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "path", "query")]
    if not loc:
        return "Request body is missing or not valid JSON"
    return f"Invalid value for '{'.'.join(loc)}': {first.get('msg', 'invalid')}"


def _install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ChatApiError)
    async def chatapi_error_handler(request: Request, exc: ChatApiError):
        if exc.status_code >= 500:
            logger.error(
                "%s", exc.message,
                exc_info=exc.__cause__ or exc,
                extra={"path": request.url.path, "method": request.method},
            )
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": _describe_validation_error(exc)})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(
            "unhandled error",
            exc_info=exc,
            extra={"path": request.url.path, "method": request.method},
        )
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app(
    settings: Optional[Settings] = None,
    *,
    engine: Optional[AsyncEngine] = None,
    credential_store: Optional[CredentialStore] = None,
) -> FastAPI:
    """Build the API with its store handles constructed here and injected via ``app.state``.

    ``settings`` defaults to the environment; a missing ``DATABASE_URL`` or
    credential store setting fails here, before the server binds.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level, service=settings.app_name)

    engine = engine or build_engine(settings)
    credential_store = credential_store or CredentialStore(
        settings.auth_base_url,
        settings.auth_public_key.get_secret_value(),
        timeout=settings.auth_timeout_seconds,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("chatapi started", extra={"environment": settings.environment})
        yield
        await app.state.credential_store.aclose()
        await app.state.engine.dispose()

    app = FastAPI(title=settings.app_name, version=__version__, lifespan=lifespan)
    app.state.settings = settings
    app.state.engine = engine
    app.state.sessionmaker = build_sessionmaker(engine)
    app.state.credential_store = credential_store

    if settings.enable_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origin_list,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    _install_error_handlers(app)

    app.include_router(health.router, prefix=settings.api_prefix)
    app.include_router(threads.router, prefix=settings.api_prefix)

    @app.get("/")
    async def root():
        return {"service": settings.app_name, "status": "ok", "version": __version__}

    return app
