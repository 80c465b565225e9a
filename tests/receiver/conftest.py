"""Shared fixtures for receiver tests."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from hookgate.protocol import SecretConfig
from hookgate.receiver.app import create_app
from hookgate.receiver.config import Settings

WEBHOOK_PATH = "/webhooks/notion"

_ENV_VARS = (
    "HOOKGATE_SIGNING_SECRET",
    "NOTION_SIGNING_SECRET",
    "HOOKGATE_ECHO_VERIFICATION_TOKEN",
    "HOOKGATE_MAX_BODY_BYTES",
    "HOOKGATE_SIGNATURE_HEADER",
    "HOOKGATE_TOKEN_HEADERS",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Start every receiver test from an empty hookgate environment."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def app(monkeypatch, secret):
    """Create a receiver app with the signing secret configured."""
    monkeypatch.setenv("HOOKGATE_SIGNING_SECRET", secret)
    return create_app()


@pytest.fixture()
def client(app):
    """Return a TestClient for the receiver app with lifespan triggered."""
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def unconfigured_client():
    """TestClient for a receiver with no signing secret (bootstrap phase).

    Builds settings explicitly so a secret set by another fixture in the
    same test cannot leak in.
    """
    settings = Settings()
    settings.secret_config = SecretConfig()
    with TestClient(create_app(settings)) as c:
        yield c
