"""Shared test fixtures for hookgate protocol tests."""

from __future__ import annotations

import json

import pytest

from hookgate.protocol import SecretConfig, WebhookGate, sign_body


@pytest.fixture()
def secret() -> str:
    return "shh"


@pytest.fixture()
def secret_config(secret) -> SecretConfig:
    return SecretConfig.from_value(secret)


@pytest.fixture()
def gate(secret_config) -> WebhookGate:
    """A gate configured with the default Notion header names."""
    return WebhookGate(secret_config)


@pytest.fixture()
def unconfigured_gate() -> WebhookGate:
    """A gate with no signing secret (bootstrap phase)."""
    return WebhookGate(SecretConfig())


@pytest.fixture()
def page_updated_body() -> bytes:
    return json.dumps({"type": "page.updated"}).encode()


@pytest.fixture()
def signed_headers(secret):
    """Return a function building signature headers for a body."""

    def _build(body: bytes, key: str | None = None) -> dict[str, str]:
        return {"X-Notion-Signature": sign_body(body, key or secret)}

    return _build
