from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api import ENDPOINTS, SERVICE_VERSION, get_relay, router
from app.web import router as web_router
from logging_config import configure_logging
from services.relay import RelayService, UnauthorizedError, build_default_relay
from settings import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    logger.info(
        "Sensor relay starting",
        extra={"host": settings.host, "port": settings.port},
    )
    for name, route in ENDPOINTS.items():
        logger.info("Endpoint %s: %s", name, route)
    build_default_relay()
    try:
        yield
    finally:
        build_default_relay.cache_clear()
        logger.info("Sensor relay stopped")


async def _unauthorized_handler(_request: Request, exc: UnauthorizedError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"error": exc.message},
    )


async def _malformed_body_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "Malformed request body",
            "detail": jsonable_encoder(exc.errors()),
        },
    )


def create_app(relay: Optional[RelayService] = None) -> FastAPI:
    configure_logging()
    app = FastAPI(
        title="Sensor Relay",
        description="Relays IR and RFID state from a sensor device to a dashboard.",
        version=SERVICE_VERSION,
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(UnauthorizedError, _unauthorized_handler)
    app.add_exception_handler(RequestValidationError, _malformed_body_handler)
    if relay is not None:
        app.dependency_overrides[get_relay] = lambda: relay
    app.include_router(router)
    app.include_router(web_router)
    return app


def run() -> None:
    """Console entry point: serve the relay with uvicorn."""
    settings = get_settings()
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


app = create_app()
