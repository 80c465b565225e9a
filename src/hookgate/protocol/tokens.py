"""Verification-token extraction for the setup handshake.

Before a signing secret exists, the sender proves endpoint ownership by
posting a one-time verification token.  Where it puts the token has varied
(header, JSON body, form body), so extraction is an ordered tuple of pure
strategies folded first-match-wins.  Every strategy fails soft: malformed
input means "no match", never an exception.

The last strategy, :func:`_pattern_token`, is a compatibility shim for
payload-shape drift and is not part of the trusted contract.
"""

from __future__ import annotations

import json
import re
import urllib.parse
from decimal import Decimal
from typing import Any, Callable, Iterable, Mapping, Optional

from hookgate.protocol.errors import MalformedPayloadError
from hookgate.protocol.types import DEFAULT_TOKEN_HEADERS

TokenStrategy = Callable[[Mapping[str, str], bytes], Optional[str]]

# Body keys that carry the token directly, in priority order
_TOKEN_FIELDS: tuple[str, ...] = ("verificationToken", "token")

_VERIFICATION_DISCRIMINATOR = "verification"

_TOKEN_PATTERN = re.compile(
    r"""["']?verificationToken["']?\s*[:=]\s*"""
    r"""(?:"([^"]+)"|'([^']+)'|([A-Za-z0-9_.~\-]+))"""
)


def _nonempty_str(value: Any) -> str | None:
    if isinstance(value, str) and value:
        return value
    return None


def decode_body(raw_body: bytes) -> str:
    """Decode *raw_body* as UTF-8 or raise :class:`MalformedPayloadError`."""
    try:
        return raw_body.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise MalformedPayloadError("Body is not valid UTF-8") from exc


def load_json(raw_body: bytes) -> Any:
    """Parse *raw_body* as JSON or raise :class:`MalformedPayloadError`."""
    try:
        # Decimal sidesteps the int digit limit; only str fields are ever read
        return json.loads(decode_body(raw_body), parse_int=Decimal)
    except (ValueError, RecursionError) as exc:
        raise MalformedPayloadError("Body is not valid JSON") from exc


def _is_json(raw_body: bytes) -> bool:
    try:
        load_json(raw_body)
    except MalformedPayloadError:
        return False
    return True


def lower_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Return a copy of *headers* with lower-cased names."""
    return {name.lower(): value for name, value in headers.items()}


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------


def header_strategy(header_names: Iterable[str] = DEFAULT_TOKEN_HEADERS) -> TokenStrategy:
    """Build a strategy that reads the token from any of *header_names*."""
    names = tuple(name.lower() for name in header_names)

    def _header_token(headers: Mapping[str, str], raw_body: bytes) -> str | None:
        lowered = lower_headers(headers)
        for name in names:
            token = _nonempty_str(lowered.get(name, "").strip())
            if token:
                return token
        return None

    return _header_token


def _json_token(headers: Mapping[str, str], raw_body: bytes) -> str | None:
    """``verificationToken`` / ``token`` fields of a JSON object body.

    Also accepts a verification-typed event object nested under ``event``,
    e.g. ``{"event": {"type": "verification", "verificationToken": "..."}}``.
    """
    try:
        payload = load_json(raw_body)
    except MalformedPayloadError:
        return None
    if not isinstance(payload, dict):
        return None

    for key in _TOKEN_FIELDS:
        token = _nonempty_str(payload.get(key))
        if token:
            return token

    event = payload.get("event")
    if isinstance(event, dict) and event.get("type") == _VERIFICATION_DISCRIMINATOR:
        return _nonempty_str(event.get("verificationToken"))
    if event == _VERIFICATION_DISCRIMINATOR or payload.get("type") == _VERIFICATION_DISCRIMINATOR:
        return _nonempty_str(payload.get("verificationToken"))
    return None


def _form_token(headers: Mapping[str, str], raw_body: bytes) -> str | None:
    """``verificationToken`` / ``token`` pairs of a form-encoded body.

    Skipped for JSON bodies so string values inside a document are never
    read as form fields.
    """
    try:
        text = decode_body(raw_body)
    except MalformedPayloadError:
        return None
    if "=" not in text or _is_json(raw_body):
        return None
    try:
        pairs = urllib.parse.parse_qsl(text, strict_parsing=True)
    except ValueError:
        return None

    fields: dict[str, str] = {}
    for key, value in pairs:
        fields.setdefault(key, value)
    for key in _TOKEN_FIELDS:
        token = _nonempty_str(fields.get(key))
        if token:
            return token
    return None


def _pattern_token(headers: Mapping[str, str], raw_body: bytes) -> str | None:
    """Compatibility shim: regex scan for ``verificationToken`` in the body.

    Only runs when the body is not parseable JSON -- a well-formed document
    that lacks the field is a definite "no".
    """
    if _is_json(raw_body):
        return None

    text = raw_body.decode("utf-8", errors="replace")
    match = _TOKEN_PATTERN.search(text)
    if match is None:
        return None
    return _nonempty_str(next((group for group in match.groups() if group), None))


# ---------------------------------------------------------------------------
# Extractor
# ---------------------------------------------------------------------------


class TokenExtractor:
    """First-match-wins fold over an ordered tuple of token strategies."""

    def __init__(self, header_names: Iterable[str] = DEFAULT_TOKEN_HEADERS) -> None:
        self.strategies: tuple[TokenStrategy, ...] = (
            header_strategy(header_names),
            _json_token,
            _form_token,
            _pattern_token,
        )

    def extract(self, headers: Mapping[str, str], raw_body: bytes) -> str | None:
        """Return the verification token carried by the request, if any."""
        for strategy in self.strategies:
            token = strategy(headers, raw_body)
            if token is not None:
                return token
        return None


def extract_verification_token(
    headers: Mapping[str, str],
    raw_body: bytes,
    header_names: Iterable[str] = DEFAULT_TOKEN_HEADERS,
) -> str | None:
    """Convenience wrapper around :meth:`TokenExtractor.extract`."""
    return TokenExtractor(header_names).extract(headers, raw_body)
