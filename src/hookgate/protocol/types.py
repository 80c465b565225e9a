"""Core types and constants for the webhook gate."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


# Header names as sent by Notion (matched case-insensitively)
DEFAULT_SIGNATURE_HEADER = "x-notion-signature"
DEFAULT_TOKEN_HEADERS: tuple[str, ...] = ("x-notion-verification-token",)

# Event type reported when the payload has no usable discriminator
UNKNOWN_EVENT_TYPE = "unknown"


class RejectReason(str, Enum):
    """Why a request was rejected.

    Using ``str, Enum`` so that ``RejectReason.MISSING_SIGNATURE ==
    "missing_signature"`` is True.  These values go to logs only.
    """

    MISSING_SIGNATURE = "missing_signature"
    INVALID_SIGNATURE = "invalid_signature"
    SECRET_NOT_CONFIGURED = "secret_not_configured"
    MALFORMED_REQUEST = "malformed_request"

    @property
    def is_malformed(self) -> bool:
        return self is RejectReason.MALFORMED_REQUEST


@dataclass(frozen=True)
class HandshakeAccept:
    """Verification-token handshake; no signature was checked."""

    token: str

    def __repr__(self) -> str:
        return f"HandshakeAccept(token=<{len(self.token)} chars>)"


@dataclass(frozen=True)
class EventAccept:
    """Signed event whose HMAC matched the configured secret."""

    event_type: str


@dataclass(frozen=True)
class Reject:
    """Request refused.  ``reason`` is for server-side logging."""

    reason: RejectReason


GateDecision = Union[HandshakeAccept, EventAccept, Reject]
