"""
Application factory for the Ashpaz HTTP API.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ashpaz import __version__
from ashpaz.config import Settings, load_settings
from ashpaz.controller import RecipeAssistant
from ashpaz.database import Database
from ashpaz.errors import AshpazError, MalformedResponse, ProviderError, SchemaViolation
from ashpaz.llm_backends import CompletionBackend, select_backend
from ashpaz.logging_utils import setup_logging
from ashpaz.routers import api_router

logger = logging.getLogger(__name__)


def _register_exception_handlers(app: FastAPI):

    @app.exception_handler(AshpazError)
    async def ashpaz_error_handler(request: Request, exc: AshpazError):
        if isinstance(exc, (MalformedResponse, SchemaViolation)):
            logger.error(f"{request.method} {request.url.path}: {exc.message}. Raw completion: {exc.raw[:500]!r}")
        elif isinstance(exc, ProviderError):
            logger.error(f"{request.method} {request.url.path}: {exc.message} "
                         f"(provider status {exc.provider_status}) {exc.details}")
        elif exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        details = [{"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")} for e in exc.errors()]
        return JSONResponse(status_code=400, content={"error": "Validation failed", "details": details})

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    backend: Optional[CompletionBackend] = None,
) -> FastAPI:
    """
    Build the API. Everything the handlers need (settings, database, the
    recipe assistant) lives on app.state; tests pass their own pieces in.
    """
    settings = settings or load_settings()
    setup_logging(settings.log_level)
    database = database or Database.from_settings(settings)
    backend = backend or select_backend(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database.init_db()
        logger.info("Database tables ready")
        yield
        database.dispose()

    app = FastAPI(
        title="Ashpaz API",
        description="Bilingual AI recipe assistant",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database
    app.state.assistant = RecipeAssistant(backend)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    _register_exception_handlers(app)
    app.include_router(api_router)

    @app.get("/")
    def root():
        return {"name": "Ashpaz API", "version": __version__, "docs": "/docs"}

    @app.get("/health")
    def health_check():
        return {"status": "healthy", "mock": not backend.available}

    return app
