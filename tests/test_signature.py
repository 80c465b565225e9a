"""Tests for HMAC-SHA256 signature verification.

Covers:
- sign_body() output format
- verify_signature() accept/reject paths, including bit flips and
  length mismatches
- strict missing-secret policy (ConfigurationError)
- SignatureVerifier.authenticate() reason codes
"""

from __future__ import annotations

import hashlib
import hmac

import pytest

from hookgate.protocol.config import SecretConfig
from hookgate.protocol.errors import AuthenticationFailure, ConfigurationError
from hookgate.protocol.signature import (
    SignatureVerifier,
    constant_time_equal,
    sign_body,
    verify_signature,
)

BODY = b'{"type":"page.updated","entity":{"id":"abc"}}'
SECRET = b"shh"


def _flip_bit(data: bytes, index: int = 0, bit: int = 0) -> bytes:
    mutable = bytearray(data)
    mutable[index] ^= 1 << bit
    return bytes(mutable)


class TestSignBody:
    def test_matches_hmac_sha256_hex(self):
        expected = hmac.new(SECRET, BODY, hashlib.sha256).hexdigest()
        assert sign_body(BODY, "shh") == expected

    def test_lower_case_hex(self):
        sig = sign_body(BODY, SECRET)
        assert sig == sig.lower()
        assert len(sig) == 64

    def test_str_and_bytes_secret_agree(self):
        assert sign_body(BODY, "shh") == sign_body(BODY, b"shh")


class TestVerifySignature:
    def test_valid_signature_accepted(self):
        assert verify_signature(BODY, sign_body(BODY, SECRET), SECRET) is True

    @pytest.mark.parametrize("index", [0, 10, len(BODY) - 1])
    def test_single_bit_flip_in_body_rejected(self, index):
        sig = sign_body(BODY, SECRET)
        assert verify_signature(_flip_bit(BODY, index), sig, SECRET) is False

    def test_empty_body_signs_and_verifies(self):
        assert verify_signature(b"", sign_body(b"", SECRET), SECRET) is True

    def test_wrong_secret_rejected(self):
        sig = sign_body(BODY, b"other-secret")
        assert verify_signature(BODY, sig, SECRET) is False

    def test_upper_case_header_accepted(self):
        sig = sign_body(BODY, SECRET).upper()
        assert verify_signature(BODY, sig, SECRET) is True

    def test_surrounding_whitespace_trimmed(self):
        sig = f"  {sign_body(BODY, SECRET)}\n"
        assert verify_signature(BODY, sig, SECRET) is True

    def test_sha256_prefix_accepted(self):
        sig = "sha256=" + sign_body(BODY, SECRET)
        assert verify_signature(BODY, sig, SECRET) is True

    @pytest.mark.parametrize("signature", [None, ""])
    def test_missing_signature_rejected(self, signature):
        assert verify_signature(BODY, signature, SECRET) is False

    @pytest.mark.parametrize(
        "signature",
        ["abcd", "00" * 31, "00" * 33, sign_body(BODY, SECRET)[:-2]],
    )
    def test_length_mismatch_rejected_without_raising(self, signature):
        assert verify_signature(BODY, signature, SECRET) is False

    @pytest.mark.parametrize("signature", ["not-hex-at-all", "zz" * 32, "abc"])
    def test_non_hex_rejected_without_raising(self, signature):
        assert verify_signature(BODY, signature, SECRET) is False

    def test_internal_whitespace_rejected(self):
        """fromhex would skip spaces between pairs; the header must be unbroken hex."""
        digest = sign_body(BODY, SECRET)
        spaced = " ".join(digest[i:i + 2] for i in range(0, len(digest), 2))
        assert verify_signature(BODY, spaced, SECRET) is False

    def test_prefix_with_internal_whitespace_rejected(self):
        digest = sign_body(BODY, SECRET)
        assert verify_signature(BODY, "sha256=" + digest[:32] + " " + digest[32:], SECRET) is False

    @pytest.mark.parametrize("secret", [None, b""])
    def test_missing_secret_raises_configuration_error(self, secret):
        with pytest.raises(ConfigurationError):
            verify_signature(BODY, sign_body(BODY, b"anything"), secret)

    def test_missing_secret_and_signature_still_raises(self):
        """No secret means no verification at all -- never a silent pass."""
        with pytest.raises(ConfigurationError):
            verify_signature(BODY, None, None)


class TestConstantTimeEqual:
    def test_equal(self):
        assert constant_time_equal(b"\x01\x02", b"\x01\x02") is True

    def test_different_content(self):
        assert constant_time_equal(b"\x01\x02", b"\x01\x03") is False

    def test_different_length(self):
        assert constant_time_equal(b"\x01\x02", b"\x01\x02\x03") is False


class TestSignatureVerifier:
    def test_uses_injected_secret(self):
        verifier = SignatureVerifier(SecretConfig.from_value("shh"))
        assert verifier.verify(BODY, sign_body(BODY, "shh")) is True
        assert verifier.verify(BODY, sign_body(BODY, "nope")) is False

    def test_config_exposed(self):
        cfg = SecretConfig.from_value("shh")
        assert SignatureVerifier(cfg).config is cfg

    def test_authenticate_passes_for_valid_signature(self):
        verifier = SignatureVerifier(SecretConfig.from_value("shh"))
        verifier.authenticate(BODY, sign_body(BODY, "shh"))

    def test_authenticate_missing_signature_reason(self):
        verifier = SignatureVerifier(SecretConfig.from_value("shh"))
        with pytest.raises(AuthenticationFailure) as exc_info:
            verifier.authenticate(BODY, None)
        assert exc_info.value.reason == "missing_signature"

    def test_authenticate_bad_signature_reason(self):
        verifier = SignatureVerifier(SecretConfig.from_value("shh"))
        with pytest.raises(AuthenticationFailure) as exc_info:
            verifier.authenticate(BODY, "00" * 32)
        assert exc_info.value.reason == "invalid_signature"

    def test_authenticate_without_secret_raises_configuration_error(self):
        verifier = SignatureVerifier(SecretConfig())
        with pytest.raises(ConfigurationError):
            verifier.authenticate(BODY, sign_body(BODY, "shh"))
