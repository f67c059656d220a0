"""FastAPI application factory and process entry point."""

from __future__ import annotations

import time
from contextlib import asynccontextmanager

import httpx
import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.routes import router
from app.config.logging import configure_logging
from app.config.settings import Settings, settings as default_settings
from app.providers.client import ProviderClient
from app.schemas.metrics import ErrorEnvelope

_USER_AGENT = "stockdash/0.1.0"


def create_app(
    settings: Settings | None = None, http_client: httpx.AsyncClient | None = None
) -> FastAPI:
    """Build the API.

    ``http_client`` is the shared upstream connection pool; tests inject one
    backed by ``httpx.MockTransport``.
    """
    settings = settings or default_settings
    configure_logging(settings)
    if http_client is None:
        http_client = httpx.AsyncClient(
            timeout=httpx.Timeout(settings.providers.timeout_seconds),
            headers={"User-Agent": _USER_AGENT},
        )
    provider_client = ProviderClient(settings, http_client)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await provider_client.aclose()

    app = FastAPI(title="stockdash", lifespan=lifespan)
    app.state.settings = settings
    app.state.provider_client = provider_client

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def access_log(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "{} {} {} {:.1f}ms",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorEnvelope(message=str(exc.detail)).model_dump(),
            headers=exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ErrorEnvelope(message="Invalid request.").model_dump(),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on {} {}", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": f"Internal server error: {type(exc).__name__}"},
        )

    app.include_router(router, prefix="/api")
    return app


def run() -> None:
    uvicorn.run(
        create_app(default_settings),
        host=default_settings.host,
        port=default_settings.port,
        log_level=default_settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
