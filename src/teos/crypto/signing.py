"""Ed25519 signing and verification over raw bytes.

TEOS signs the 32-byte authentication hash of an envelope; these helpers do
no hashing of their own.
"""

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)

from teos.errors import ConstructionError, MalformedSignatureError
from teos.models.constants import SIGNATURE_LENGTH


def generate_signature(private_key: Ed25519PrivateKey, data: bytes) -> bytes:
    """Sign ``data``; returns the 64-byte Ed25519 signature.

    Raises:
        ConstructionError: If ``private_key`` is not an Ed25519 private key.
    """
    if not isinstance(private_key, Ed25519PrivateKey):
        raise ConstructionError(
            "signing key is not an Ed25519 private key",
            details={"key_type": type(private_key).__name__},
        )
    signature = private_key.sign(data)
    assert len(signature) == SIGNATURE_LENGTH, "Ed25519 signature must be 64 bytes"
    return signature


def verify_signature(public_key: Ed25519PublicKey, data: bytes, signature: bytes) -> bool:
    """Return True if ``signature`` is a valid Ed25519 signature of ``data``.

    Raises:
        MalformedSignatureError: If ``signature`` is not exactly 64 bytes; the
            primitive is not invoked in that case.
    """
    if len(signature) != SIGNATURE_LENGTH:
        raise MalformedSignatureError(len(signature))
    try:
        public_key.verify(bytes(signature), data)
    except InvalidSignature:
        return False
    return True
