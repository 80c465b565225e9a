"""hookgate exception hierarchy.

All gate-specific exceptions inherit from :class:`HookGateError`.
"""

from __future__ import annotations


class HookGateError(Exception):
    """Base exception for all hookgate errors."""


class ConfigurationError(HookGateError):
    """Raised when the shared signing secret is not configured."""


class MalformedPayloadError(HookGateError):
    """Raised when a body is not valid JSON, form data, or UTF-8.

    Always recovered inside the gate -- extraction strategies treat it as
    "no match" and move on.
    """


class AuthenticationFailure(HookGateError):
    """Raised when an event's signature is absent, malformed, or wrong.

    ``reason`` is a short code for server-side logs only.  It must never be
    echoed to the sender.
    """

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason
