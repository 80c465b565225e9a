"""FastAPI application factory for the hookgate webhook receiver."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.exceptions import HTTPException, RequestValidationError
from starlette.requests import Request
from starlette.responses import JSONResponse

from hookgate import __version__
from hookgate.protocol.gate import WebhookGate
from hookgate.receiver.config import Settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Report the verification posture once at startup."""
    settings = app.state.settings
    if settings.secret_config.is_configured:
        logger.info(
            "Signature verification enabled (header=%s)", settings.signature_header
        )
    else:
        logger.warning(
            "No signing secret configured: verification handshakes are accepted, "
            "all signed events will be rejected until HOOKGATE_SIGNING_SECRET is set"
        )
    yield
    logger.info("Webhook receiver shutting down")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the webhook receiver FastAPI application.

    *settings* defaults to a fresh :class:`Settings` read from the
    environment.  The gate is built once here; it is immutable and shared by
    all requests.
    """
    settings = settings or Settings()

    # Configure logging from settings
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if settings.debug:
        logging.getLogger("hookgate").setLevel(logging.DEBUG)

    app = FastAPI(
        title="hookgate",
        version=__version__,
        lifespan=lifespan,
    )

    # Store settings and gate on app.state so lifespan and routes can access them
    app.state.settings = settings
    app.state.gate = WebhookGate(
        settings.secret_config,
        signature_header=settings.signature_header,
        token_headers=settings.token_headers,
    )

    # Consistent JSON error shape: {"error": "<code>", "detail": "<message>"}
    _STATUS_TO_ERROR = {
        400: "bad_request",
        401: "unauthorized",
        404: "not_found",
        405: "method_not_allowed",
        408: "request_timeout",
        413: "payload_too_large",
        422: "validation_error",
    }

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": _STATUS_TO_ERROR.get(exc.status_code, "error"),
                "detail": exc.detail,
            },
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={
                "error": "validation_error",
                "detail": str(exc),
            },
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={"error": "internal_error", "detail": "Internal server error"},
        )

    from hookgate.receiver.routes.health import router as health_router
    from hookgate.receiver.routes.webhooks import router as webhooks_router

    app.include_router(webhooks_router)
    app.include_router(health_router)

    return app
