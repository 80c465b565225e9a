"""hookgate -- Notion webhook receiver with signature and handshake verification.

Top-level convenience re-exports::

    from hookgate import SecretConfig, WebhookGate
    from hookgate.receiver.app import create_app  # HTTP receiver
"""

__version__ = "0.1.0"

from hookgate.protocol import (
    EventAccept,
    HandshakeAccept,
    Reject,
    SecretConfig,
    WebhookGate,
)

__all__ = [
    "__version__",
    "EventAccept",
    "HandshakeAccept",
    "Reject",
    "SecretConfig",
    "WebhookGate",
]
