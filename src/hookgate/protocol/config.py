"""Shared-secret configuration for signature verification.

The secret is read once and carried as an immutable value.  Verification
code receives it by injection; nothing below this module reads the process
environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping

# Checked in order; the first non-empty value wins
SECRET_ENV_VARS: tuple[str, ...] = ("HOOKGATE_SIGNING_SECRET", "NOTION_SIGNING_SECRET")


@dataclass(frozen=True)
class SecretConfig:
    """Optional HMAC signing secret shared with the webhook sender."""

    secret: bytes | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        # Empty secrets count as "not configured"
        if self.secret is not None and len(self.secret) == 0:
            object.__setattr__(self, "secret", None)

    @property
    def is_configured(self) -> bool:
        return self.secret is not None

    def __repr__(self) -> str:
        return f"SecretConfig(configured={self.is_configured})"

    @classmethod
    def from_value(cls, value: str | bytes | None) -> SecretConfig:
        """Build from a string or bytes secret (``None``/empty = unset)."""
        if isinstance(value, str):
            value = value.encode("utf-8")
        return cls(secret=value or None)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> SecretConfig:
        """Read the secret from ``HOOKGATE_SIGNING_SECRET``.

        Falls back to ``NOTION_SIGNING_SECRET`` for deployments that set the
        provider's variable name directly.
        """
        env = os.environ if environ is None else environ
        for name in SECRET_ENV_VARS:
            value = env.get(name, "").strip()
            if value:
                return cls.from_value(value)
        return cls()
