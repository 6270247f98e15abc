"""TEOS Error Taxonomy.

This module defines the error hierarchy for TEOS envelope creation,
verification and extraction. Every failure mode surfaces as a distinct
exception class carrying a stable error code and context details; none
of them is recovered or retried by the library itself.
"""

from __future__ import annotations

from typing import Any


class TEOSError(Exception):
    """Base exception for all TEOS errors.

    Attributes:
        code: Error code following the teos:<area>/<reason> pattern
        message: Human-readable error message
        details: Optional additional error context
    """

    def __init__(self, code: str, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Serialize to ``{code, message, details}`` dict."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ConstructionError(TEOSError):
    """Raised when an envelope cannot be built.

    Covers AEAD backend failures (e.g. invalid key length), signing failures,
    malformed externally encrypted input and a failed self-verification of a
    freshly assembled envelope. Construction errors are fatal for the call.
    """

    def __init__(self, reason: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            code="teos:construction/failed",
            message=f"TEOS construction failed: {reason}",
            details=details or {},
        )
        self.reason = reason


class MalformedSignatureError(TEOSError):
    """Raised when a signature is not exactly 64 bytes.

    Detected before the Ed25519 primitive is invoked.

    Attributes:
        signature_length: Length of the rejected signature buffer
    """

    def __init__(self, signature_length: int, details: dict[str, Any] | None = None) -> None:
        message = (
            f"Invalid signature length. Expected 64 bytes, got {signature_length} bytes."
        )
        super().__init__(
            code="teos:signature/malformed",
            message=message,
            details={"signature_length": signature_length, **(details or {})},
        )
        self.signature_length = signature_length


class InvalidSignatureError(TEOSError):
    """Signature does not match the authentication hash; treat as tampering."""

    def __init__(
        self,
        message: str = "Invalid TEOS signature",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code="teos:signature/invalid",
            message=message,
            details=details or {},
        )


class AuthenticationFailureError(TEOSError):
    """Raised when AEAD decryption fails (tag mismatch or unusable key)."""

    def __init__(
        self,
        message: str = "AEAD authentication failed",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code="teos:aead/authentication_failed",
            message=message,
            details=details or {},
        )


class MalformedPlaintextError(TEOSError):
    """Raised when a decrypted payload cannot be decoded."""

    def __init__(self, reason: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            code="teos:payload/malformed",
            message=f"Malformed plaintext: {reason}",
            details=details or {},
        )
        self.reason = reason


class UnrecognizedFormatError(TEOSError):
    """Raised when serialized bytes are not a TEOS structure.

    This covers undecodable input, a missing or unexpected top-level type
    tag, and structures that fail schema validation.
    """

    def __init__(self, reason: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            code="teos:format/unrecognized",
            message=f"Invalid TEOS format: {reason}",
            details=details or {},
        )
        self.reason = reason
