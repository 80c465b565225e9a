"""Health check endpoint for the webhook receiver.

- ``GET /health`` -- Simple liveness check (no auth).
"""

from __future__ import annotations

from fastapi import APIRouter, Request

from hookgate import __version__
from hookgate.receiver.models import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(request: Request) -> HealthResponse:
    """Return receiver status. Reports whether a secret is set, never its value."""
    settings = request.app.state.settings
    configured = settings.secret_config.is_configured

    return HealthResponse(
        status="ok" if configured else "degraded",
        version=__version__,
        secret_configured=configured,
    )
