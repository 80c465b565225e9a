"""Inbound Notion webhook endpoint.

Reads the raw body exactly once, hands it to the :class:`WebhookGate`, and
maps the decision onto an HTTP response.  Rejections carry a generic detail
string; the specific reason only goes to the server log.
"""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, HTTPException, Request
from starlette.requests import ClientDisconnect

from hookgate.protocol.types import (
    EventAccept,
    GateDecision,
    HandshakeAccept,
    Reject,
    RejectReason,
)
from hookgate.receiver.models import WebhookAckResponse

logger = logging.getLogger(__name__)

router = APIRouter()


class BodyTooLarge(Exception):
    """Raised when a request body exceeds the configured limit."""


async def read_raw_body(request: Request, max_bytes: int, timeout: float) -> bytes:
    """Buffer the full request body, enforcing a size limit and read timeout.

    Raises ``BodyTooLarge``, ``asyncio.TimeoutError``, or
    ``ClientDisconnect`` -- never returns a partial body.
    """
    declared = request.headers.get("content-length")
    if declared is not None and declared.isdigit() and int(declared) > max_bytes:
        raise BodyTooLarge(declared)

    async def _collect() -> bytes:
        chunks: list[bytes] = []
        size = 0
        async for chunk in request.stream():
            size += len(chunk)
            if size > max_bytes:
                raise BodyTooLarge(str(size))
            chunks.append(chunk)
        return b"".join(chunks)

    return await asyncio.wait_for(_collect(), timeout=timeout)


def decision_response(decision: GateDecision, echo_token: bool = False) -> WebhookAckResponse:
    """Translate a gate decision into a 200 response body or an HTTPException."""
    if isinstance(decision, HandshakeAccept):
        return WebhookAckResponse(
            kind="handshake",
            verification_token=decision.token if echo_token else None,
        )
    if isinstance(decision, EventAccept):
        return WebhookAckResponse(kind="event", event_type=decision.event_type)
    if isinstance(decision, Reject) and decision.reason.is_malformed:
        raise HTTPException(status_code=400, detail="Malformed request")
    raise HTTPException(status_code=401, detail="Unauthorized")


@router.post(
    "/webhooks/notion",
    response_model=WebhookAckResponse,
    response_model_exclude_none=True,
)
async def receive_notion_webhook(request: Request) -> WebhookAckResponse:
    """Verify and acknowledge one Notion webhook delivery."""
    settings = request.app.state.settings
    gate = request.app.state.gate

    try:
        raw_body = await read_raw_body(
            request, settings.max_body_bytes, settings.body_read_timeout
        )
    except BodyTooLarge:
        logger.warning("Rejected webhook body over %d bytes", settings.max_body_bytes)
        raise HTTPException(status_code=413, detail="Request body too large")
    except asyncio.TimeoutError:
        logger.warning("Timed out reading webhook body after %.1fs", settings.body_read_timeout)
        raise HTTPException(status_code=408, detail="Request body read timed out")
    except ClientDisconnect:
        logger.info("Client disconnected before webhook body was read")
        return decision_response(Reject(RejectReason.MALFORMED_REQUEST))

    decision = gate.evaluate(request.headers, raw_body)
    return decision_response(decision, settings.echo_verification_token)
