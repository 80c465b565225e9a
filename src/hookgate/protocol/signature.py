"""HMAC-SHA256 signature verification for inbound webhook events.

The sender signs the exact request body bytes with the shared secret and
puts the hex digest in a header.  We recompute it over the raw body (never
a re-serialized form) and compare in constant time.

Missing secret is a configuration error, not a silent pass: signed-event
traffic is always rejected until a secret is provisioned.
"""

from __future__ import annotations

import hashlib
import hmac
import re

from hookgate.protocol.config import SecretConfig
from hookgate.protocol.errors import AuthenticationFailure, ConfigurationError
from hookgate.protocol.types import RejectReason

# Optional prefix some senders put in front of the hex digest
_SIGNATURE_PREFIX = "sha256="

_HEX_DIGITS = re.compile(r"[0-9a-f]+")


def sign_body(raw_body: bytes, secret: str | bytes) -> str:
    """Return the lower-case hex HMAC-SHA256 of *raw_body* keyed by *secret*."""
    if isinstance(secret, str):
        secret = secret.encode("utf-8")
    return hmac.new(secret, raw_body, hashlib.sha256).hexdigest()


def _decode_signature(signature_header: str) -> bytes | None:
    """Normalize a received header value and decode it from hex.

    Returns ``None`` unless the remainder is an unbroken run of hex digits.
    """
    value = signature_header.strip().lower()
    if value.startswith(_SIGNATURE_PREFIX):
        value = value[len(_SIGNATURE_PREFIX):]
    if _HEX_DIGITS.fullmatch(value) is None or len(value) % 2:
        return None
    return bytes.fromhex(value)


def constant_time_equal(expected: bytes, received: bytes) -> bool:
    """Compare two digests without leaking where they first differ.

    Length is checked first and may short-circuit; digest length is public.
    """
    if len(expected) != len(received):
        return False
    return hmac.compare_digest(expected, received)


def verify_signature(
    raw_body: bytes,
    signature_header: str | None,
    secret: bytes | None,
) -> bool:
    """Return True if *signature_header* is the HMAC of *raw_body*.

    Raises :class:`ConfigurationError` when *secret* is missing.  A missing,
    empty, or non-hex header returns False and never raises.
    """
    if not secret:
        raise ConfigurationError("Signing secret is not configured")
    if not signature_header:
        return False

    received = _decode_signature(signature_header)
    if received is None:
        return False

    expected = hmac.new(secret, raw_body, hashlib.sha256).digest()
    return constant_time_equal(expected, received)


class SignatureVerifier:
    """Verifies event signatures against an injected :class:`SecretConfig`."""

    def __init__(self, config: SecretConfig) -> None:
        self._config = config

    @property
    def config(self) -> SecretConfig:
        return self._config

    def verify(self, raw_body: bytes, signature_header: str | None) -> bool:
        """See :func:`verify_signature`."""
        return verify_signature(raw_body, signature_header, self._config.secret)

    def authenticate(self, raw_body: bytes, signature_header: str | None) -> None:
        """Raise unless *signature_header* authenticates *raw_body*.

        Raises :class:`ConfigurationError` when no secret is configured and
        :class:`AuthenticationFailure` (with a log-only reason code) when the
        signature is missing or does not match.
        """
        if not self.verify(raw_body, signature_header):
            if not signature_header:
                raise AuthenticationFailure(RejectReason.MISSING_SIGNATURE.value)
            raise AuthenticationFailure(RejectReason.INVALID_SIGNATURE.value)
