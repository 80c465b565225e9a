"""Receiver configuration from environment variables."""

from __future__ import annotations

import os

from hookgate.protocol.config import SecretConfig
from hookgate.protocol.types import DEFAULT_SIGNATURE_HEADER, DEFAULT_TOKEN_HEADERS


def _env_bool(name: str, default: str = "") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class Settings:
    """Receiver settings, read from environment variables with defaults."""

    def __init__(self) -> None:
        self.host: str = os.getenv("HOOKGATE_HOST", "0.0.0.0")
        self.port: int = int(os.getenv("HOOKGATE_PORT", "8000"))
        self.log_level: str = os.getenv("HOOKGATE_LOG_LEVEL", "INFO").upper()
        self.debug: bool = _env_bool("HOOKGATE_DEBUG")
        # Shared secret, read once (HOOKGATE_SIGNING_SECRET / NOTION_SIGNING_SECRET)
        self.secret_config: SecretConfig = SecretConfig.from_env()
        self.signature_header: str = os.getenv(
            "HOOKGATE_SIGNATURE_HEADER", DEFAULT_SIGNATURE_HEADER
        ).lower()
        self.token_headers: list[str] = [
            h.strip().lower()
            for h in os.getenv(
                "HOOKGATE_TOKEN_HEADERS", ",".join(DEFAULT_TOKEN_HEADERS)
            ).split(",")
            if h.strip()
        ]
        self.echo_verification_token: bool = _env_bool(
            "HOOKGATE_ECHO_VERIFICATION_TOKEN"
        )
        # Request body limits
        self.max_body_bytes: int = int(
            os.getenv("HOOKGATE_MAX_BODY_BYTES", str(1024 * 1024))
        )
        self.body_read_timeout: float = float(
            os.getenv("HOOKGATE_BODY_READ_TIMEOUT", "10.0")
        )
