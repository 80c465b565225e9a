"""WebhookGate -- decides what to do with one inbound webhook request.

    Start
      |-- verification token found --> HandshakeAccept(token)
      `-- otherwise --> AwaitingSignatureCheck
                          |-- signature ok  --> EventAccept(event_type)
                          `-- anything else --> Reject(reason)

The handshake path performs no signature check: verification tokens are a
lower-trust bootstrap exchange, not authenticated events.  The gate holds no
per-request state, so evaluating the same request twice gives the same
decision.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from hookgate.protocol.config import SecretConfig
from hookgate.protocol.errors import (
    AuthenticationFailure,
    ConfigurationError,
    MalformedPayloadError,
)
from hookgate.protocol.signature import SignatureVerifier
from hookgate.protocol.tokens import TokenExtractor, load_json, lower_headers
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

logger = logging.getLogger(__name__)


def event_type_of(raw_body: bytes) -> str:
    """Best-effort event type: ``event.type``, then ``type``, else ``"unknown"``.

    Advisory only; a body that is not a JSON object yields ``"unknown"``.
    """
    try:
        payload: Any = load_json(raw_body)
    except MalformedPayloadError:
        return UNKNOWN_EVENT_TYPE
    if not isinstance(payload, dict):
        return UNKNOWN_EVENT_TYPE

    event = payload.get("event")
    if isinstance(event, dict):
        nested = event.get("type")
        if isinstance(nested, str) and nested:
            return nested
    top = payload.get("type")
    if isinstance(top, str) and top:
        return top
    return UNKNOWN_EVENT_TYPE


class WebhookGate:
    """Classifies a raw request as handshake, authenticated event, or reject."""

    def __init__(
        self,
        config: SecretConfig,
        signature_header: str = DEFAULT_SIGNATURE_HEADER,
        token_headers: Iterable[str] = DEFAULT_TOKEN_HEADERS,
    ) -> None:
        self.signature_header = signature_header.lower()
        self.extractor = TokenExtractor(token_headers)
        self.verifier = SignatureVerifier(config)

    def evaluate(self, headers: Mapping[str, str], raw_body: bytes) -> GateDecision:
        """Return the :data:`GateDecision` for one captured request.

        *raw_body* must be the exact bytes received; it is never re-encoded.
        """
        raw_body = bytes(raw_body)

        token = self.extractor.extract(headers, raw_body)
        if token is not None:
            logger.info("Verification handshake received: token=%s", token)
            return HandshakeAccept(token)

        signature = lower_headers(headers).get(self.signature_header)
        try:
            self.verifier.authenticate(raw_body, signature)
        except ConfigurationError:
            logger.error(
                "Rejecting signed event: no signing secret configured "
                "(set HOOKGATE_SIGNING_SECRET)"
            )
            return Reject(RejectReason.SECRET_NOT_CONFIGURED)
        except AuthenticationFailure as exc:
            logger.warning(
                "Rejecting event: reason=%s signature_header_present=%s body_bytes=%d",
                exc.reason,
                bool(signature),
                len(raw_body),
            )
            return Reject(RejectReason(exc.reason))

        event_type = event_type_of(raw_body)
        logger.info("Accepted signed event: type=%s", event_type)
        return EventAccept(event_type)
