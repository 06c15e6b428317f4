"""
FastAPI Application Factory.
Creates and configures the FastAPI application with all routers, middleware, and DI.

Endpoints:
- GET  /                 liveness text
- GET  /health           health check
- POST /api/auth/login   secret phrase → token
- GET  /metrics          Prometheus metrics
- WS   /ws               chat events
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from dishka import AsyncContainer
from dishka.integrations.fastapi import setup_dishka
from sqlalchemy.ext.asyncio import AsyncEngine

from pairchat.config.logging_config import (
    NO_CORRELATION_ID,
    setup_logging,
    correlation_id_var,
)
from pairchat.config.settings import Config
from pairchat.infrastructure.persistence import init_models
from pairchat.setup.ioc.container import create_container
from pairchat.presentation.api import auth_router, metrics_router
from pairchat.presentation.realtime import chat_socket_router

setup_logging(Config.LOG_LEVEL, Config.LOG_PATH or None)

logger = logging.getLogger(__name__)


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Middleware to extract and set correlation ID from request headers."""

    async def dispatch(self, request: Request, call_next):
        correlation_id = request.headers.get("X-Correlation-ID", NO_CORRELATION_ID)
        correlation_id_var.set(correlation_id)
        response = await call_next(request)
        response.headers["X-Correlation-ID"] = correlation_id
        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup: create the schema. The app refuses to serve without a working store.
    Shutdown: close the DI container (disposes the engine).
    """
    container: AsyncContainer = app.state.dishka_container
    try:
        engine = await container.get(AsyncEngine)
        await init_models(engine)
    except Exception:
        logger.critical("Database initialization failed, refusing to start", exc_info=True)
        await container.close()
        raise
    logger.info("Chat server started. DI container initialized.")
    yield
    await container.close()
    logger.info("Chat server shutdown. DI container closed.")


def create_fastapi_app(container: Optional[AsyncContainer] = None) -> FastAPI:
    """
    Application factory for creating FastAPI app.

    Args:
        container: DI container to use; defaults to one built from Config

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="Pairchat",
        description="Two-party realtime chat server",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Dishka adds middleware, so it must be set up before the app starts
    setup_dishka(container or create_container(Config), app)

    app.add_middleware(CorrelationIdMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=Config.CORS_ORIGINS,
        allow_credentials="*" not in Config.CORS_ORIGINS,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = jsonable_encoder(exc.errors())
        logger.info("Validation error on %s: %s", request.url.path, errors)
        return JSONResponse(
            status_code=400,
            content={"success": False, "message": "Invalid request", "details": errors},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        logger.info("HTTP %s on %s: %s", exc.status_code, request.url.path, exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "message": exc.detail},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s", request.url.path)
        return JSONResponse(
            status_code=500,
            content={"success": False, "message": "Internal server error"},
        )

    # Health check routes
    @app.get("/", tags=["health"], response_class=PlainTextResponse)
    async def root():
        return "Chat server is running."

    @app.get("/health", tags=["health"])
    async def health():
        return {"status": "healthy"}

    app.include_router(auth_router)  # POST /api/auth/login
    app.include_router(metrics_router)  # GET /metrics
    app.include_router(chat_socket_router)  # WS /ws

    return app


# Create the app instance
app = create_fastapi_app()
