"""Extraction pipeline: the inverse of envelope creation.

    bytes -> deserialize -> verify signature -> decrypt -> decode -> value

Each step runs only if the previous one succeeded and the first failure is
raised to the caller. The signature is checked before any decryption is
attempted, so a tampered envelope never yields plaintext, not even garbage.
"""

from __future__ import annotations

from typing import Any

from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey

from teos.crypto import aead
from teos.crypto.hashing import generate_base_teos_hash
from teos.crypto.signing import verify_signature
from teos.errors import InvalidSignatureError, TEOSError
from teos.models.teos import MlsTEOS, PskTEOS
from teos.observability import get_logger, is_debug_mode
from teos.serialization import decode_payload, deserialize_teos

logger = get_logger(__name__)

TEOSInput = PskTEOS | MlsTEOS | bytes | bytearray | memoryview


def load_teos(payload: TEOSInput) -> PskTEOS | MlsTEOS:
    """Return ``payload`` as a TEOS, deserializing wire bytes if needed."""
    if isinstance(payload, (bytes, bytearray, memoryview)):
        return deserialize_teos(payload)
    return payload


def check_teos_signature(teos: PskTEOS | MlsTEOS, public_key: Ed25519PublicKey) -> None:
    """Raise unless the envelope signature matches its base fields under ``public_key``."""
    digest = generate_base_teos_hash(teos)
    if not verify_signature(public_key, digest, teos.envelope.auth.signature):
        raise InvalidSignatureError(
            "Invalid TEOS signature",
            details={"identifier": teos.aad.identifier, "mode": teos.mode},
        )


def open_teos(teos: PskTEOS | MlsTEOS, key: bytes, public_key: Ed25519PublicKey) -> bytes:
    """Verify and decrypt an already parsed TEOS; returns the raw plaintext.

    Raises:
        MalformedSignatureError: Signature is not 64 bytes.
        InvalidSignatureError: Signature does not match the base fields.
        AuthenticationFailureError: AEAD tag mismatch or unusable key.
    """
    check_teos_signature(teos, public_key)
    return aead.decrypt(teos.algorithm, key, teos.nonce, teos.ciphertext, teos.tag)


def extract_teos(
    payload: TEOSInput,
    key: bytes,
    public_key: Ed25519PublicKey,
    *,
    decode: bool = True,
) -> Any:
    """Verify, decrypt and decode a TEOS.

    Args:
        payload: A TEOS or its serialized bytes
        key: Symmetric key the payload was sealed under
        public_key: Sender's Ed25519 public key
        decode: Decode the plaintext as MessagePack (default); when False the
            raw plaintext bytes are returned

    Raises:
        UnrecognizedFormatError: ``payload`` bytes are not a TEOS.
        MalformedSignatureError: Signature is not 64 bytes.
        InvalidSignatureError: Signature does not match the base fields.
        AuthenticationFailureError: AEAD tag mismatch or unusable key.
        MalformedPlaintextError: Decrypted bytes are not valid MessagePack.
    """
    teos: PskTEOS | MlsTEOS | None = None
    try:
        teos = load_teos(payload)
        plaintext = open_teos(teos, key, public_key)
        result = decode_payload(plaintext) if decode else plaintext
    except TEOSError as e:
        logger.warning(
            "teos.extract.rejected",
            code=e.code,
            identifier=teos.aad.identifier if teos is not None else None,
            exc_info=is_debug_mode(),
        )
        raise
    logger.debug(
        "teos.extract.completed",
        identifier=teos.aad.identifier,
        mode=teos.mode,
        plaintext_length=len(plaintext),
    )
    return result
