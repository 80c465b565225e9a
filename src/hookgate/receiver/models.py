"""Pydantic response models for the receiver REST API."""

from __future__ import annotations

from pydantic import BaseModel


class WebhookAckResponse(BaseModel):
    status: str = "ok"
    kind: str
    event_type: str | None = None
    verification_token: str | None = None


class HealthResponse(BaseModel):
    status: str
    version: str
    secret_configured: bool


class ErrorResponse(BaseModel):
    error: str
    detail: str
