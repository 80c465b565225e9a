"""hookgate protocol -- webhook signature and handshake verification.

Public API re-exports for ``hookgate.protocol``.
"""

from hookgate.protocol.types import (
    DEFAULT_SIGNATURE_HEADER,
    DEFAULT_TOKEN_HEADERS,
    UNKNOWN_EVENT_TYPE,
    EventAccept,
    GateDecision,
    HandshakeAccept,
    Reject,
    RejectReason,
)

from hookgate.protocol.errors import (
    HookGateError,
    ConfigurationError,
    MalformedPayloadError,
    AuthenticationFailure,
)

from hookgate.protocol.config import SecretConfig

from hookgate.protocol.signature import (
    SignatureVerifier,
    constant_time_equal,
    sign_body,
    verify_signature,
)

from hookgate.protocol.tokens import TokenExtractor, extract_verification_token

from hookgate.protocol.gate import WebhookGate, event_type_of

__all__ = [
    # Types
    "DEFAULT_SIGNATURE_HEADER",
    "DEFAULT_TOKEN_HEADERS",
    "UNKNOWN_EVENT_TYPE",
    "EventAccept",
    "GateDecision",
    "HandshakeAccept",
    "Reject",
    "RejectReason",
    # Errors
    "HookGateError",
    "ConfigurationError",
    "MalformedPayloadError",
    "AuthenticationFailure",
    # Config
    "SecretConfig",
    # Signature
    "SignatureVerifier",
    "constant_time_equal",
    "sign_body",
    "verify_signature",
    # Tokens
    "TokenExtractor",
    "extract_verification_token",
    # Gate
    "WebhookGate",
    "event_type_of",
]
