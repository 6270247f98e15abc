"""AEAD codec: AES-256-GCM and ChaCha20-Poly1305 over raw byte payloads.

Ciphertext and tag are stored separately in a TEOS; the primitives produce
and consume ``ciphertext || tag``, so this module also splits and joins the
combined form. The context metadata is not passed to the cipher as
associated data: it is bound to the ciphertext by the envelope signature.
"""

from __future__ import annotations

import os
from collections.abc import Callable

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM, ChaCha20Poly1305

from teos.errors import AuthenticationFailureError, ConstructionError
from teos.models.constants import (
    ALGORITHM_AES_GCM,
    ALGORITHM_CHACHA20_POLY1305,
    NONCE_LENGTH,
    SYMMETRIC_KEY_LENGTH,
    TAG_LENGTH,
)


def generate_nonce(random_bytes: Callable[[int], bytes] = os.urandom) -> bytes:
    """Fresh random 12-byte nonce."""
    nonce = random_bytes(NONCE_LENGTH)
    if len(nonce) != NONCE_LENGTH:
        raise ConstructionError(
            "random source returned a nonce of the wrong length",
            details={"nonce_length": len(nonce)},
        )
    return bytes(nonce)


def split_ciphertext(payload: bytes) -> tuple[bytes, bytes]:
    """Split ``ciphertext || tag`` into ``(ciphertext, tag)``.

    Raises:
        ValueError: If the payload is shorter than the 16-byte tag.
    """
    if len(payload) < TAG_LENGTH:
        raise ValueError(
            f"AEAD payload must be at least {TAG_LENGTH} bytes, got {len(payload)}"
        )
    cut = len(payload) - TAG_LENGTH
    return bytes(payload[:cut]), bytes(payload[cut:])


def join_ciphertext(ciphertext: bytes, tag: bytes) -> bytes:
    return bytes(ciphertext) + bytes(tag)


def _cipher(algorithm: str, key: bytes) -> AESGCM | ChaCha20Poly1305:
    if len(key) != SYMMETRIC_KEY_LENGTH:
        raise ValueError(
            f"{algorithm} key must be {SYMMETRIC_KEY_LENGTH} bytes, got {len(key)}"
        )
    if algorithm == ALGORITHM_AES_GCM:
        return AESGCM(key)
    if algorithm == ALGORITHM_CHACHA20_POLY1305:
        return ChaCha20Poly1305(key)
    raise ValueError(f"Unsupported AEAD algorithm: {algorithm}")


def encrypt(algorithm: str, key: bytes, nonce: bytes, plaintext: bytes) -> tuple[bytes, bytes]:
    """Encrypt ``plaintext`` and return ``(ciphertext, tag)``.

    Raises:
        ConstructionError: On an unsupported algorithm, a key that is not
            256 bits, a nonce that is not 12 bytes, or a backend failure.
    """
    if len(nonce) != NONCE_LENGTH:
        raise ConstructionError(
            f"nonce must be {NONCE_LENGTH} bytes",
            details={"nonce_length": len(nonce)},
        )
    try:
        combined = _cipher(algorithm, key).encrypt(nonce, plaintext, None)
    except (ValueError, OverflowError) as e:
        raise ConstructionError(
            f"AEAD encryption failed: {e}",
            details={"algorithm": algorithm},
        ) from e
    return split_ciphertext(combined)


def decrypt(algorithm: str, key: bytes, nonce: bytes, ciphertext: bytes, tag: bytes) -> bytes:
    """Decrypt and authenticate; returns the plaintext.

    Raises:
        AuthenticationFailureError: On tag mismatch, or when the key or nonce
            cannot be used with ``algorithm``.
    """
    try:
        cipher = _cipher(algorithm, key)
        return cipher.decrypt(nonce, join_ciphertext(ciphertext, tag), None)
    except InvalidTag as e:
        raise AuthenticationFailureError(
            "AEAD tag mismatch: ciphertext or key does not match",
            details={"algorithm": algorithm},
        ) from e
    except ValueError as e:
        raise AuthenticationFailureError(
            f"AEAD decryption rejected its inputs: {e}",
            details={"algorithm": algorithm},
        ) from e
