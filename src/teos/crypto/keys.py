"""Ed25519 key generation, export and loading for TEOS senders.

Public keys travel inside an envelope as a JWK (RFC 8037 OKP key) so a
receiver can import them without knowing the sender's storage format. Raw
base64 and PEM helpers cover the other common interchange forms.
"""

from __future__ import annotations

import base64
import os
from pathlib import Path
from typing import Any

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)
from cryptography.hazmat.primitives.serialization import load_pem_private_key
from joserfc.errors import JoseError
from joserfc.jwk import OKPKey

from teos.observability import get_logger

logger = get_logger(__name__)

# Recommended mode for private key files (owner read/write only).
KEY_FILE_RECOMMENDED_MODE = 0o600

# Public members of an Ed25519 JWK (RFC 8037 section 2).
_JWK_PUBLIC_MEMBERS = ("kty", "crv", "x")


def generate_keypair() -> tuple[Ed25519PrivateKey, Ed25519PublicKey]:
    private_key = Ed25519PrivateKey.generate()
    public_key = private_key.public_key()
    return (private_key, public_key)


def serialize_private_key(key: Ed25519PrivateKey) -> bytes:
    """PEM (PKCS#8, unencrypted)."""
    pem: bytes = key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )
    return pem


def public_key_to_base64(key: Ed25519PublicKey) -> str:
    raw = key.public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw,
    )
    return base64.b64encode(raw).decode("ascii")


def load_public_key_from_base64(b64: str) -> Ed25519PublicKey:
    """From base64 raw 32 bytes. Raises ValueError if not 32 bytes."""
    raw = base64.b64decode(b64)
    if len(raw) != 32:
        raise ValueError(f"Ed25519 public key must be 32 bytes, got {len(raw)}")
    return Ed25519PublicKey.from_public_bytes(raw)


def public_key_to_jwk(key: Ed25519PublicKey) -> dict[str, str]:
    """Export as a public JWK: ``{"kty": "OKP", "crv": "Ed25519", "x": ...}``."""
    pem = key.public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    exported: dict[str, Any] = OKPKey.import_key(pem).as_dict(private=False)
    return {name: str(exported[name]) for name in _JWK_PUBLIC_MEMBERS}


def load_public_key_from_jwk(jwk: dict[str, Any]) -> Ed25519PublicKey:
    """From a public JWK. Raises ValueError if invalid or not Ed25519."""
    if jwk.get("kty") != "OKP" or jwk.get("crv") != "Ed25519":
        raise ValueError("JWK is not an Ed25519 OKP key")
    try:
        imported = OKPKey.import_key({name: jwk[name] for name in _JWK_PUBLIC_MEMBERS})
    except (JoseError, KeyError, ValueError) as e:
        raise ValueError(f"Invalid Ed25519 JWK: {e}") from e
    key = imported.public_key
    if not isinstance(key, Ed25519PublicKey):
        raise ValueError("JWK is not an Ed25519 public key")
    return key


def load_private_key_from_pem(pem: bytes) -> Ed25519PrivateKey:
    """From PEM. Raises ValueError if invalid or not Ed25519."""
    key = load_pem_private_key(pem, password=None)
    if not isinstance(key, Ed25519PrivateKey):
        raise ValueError("Key is not an Ed25519 private key")
    return key


def warn_if_key_file_permissions_loose(path: Path) -> None:
    """Warn when key file is group/other readable (recommend chmod 0600)."""
    try:
        mode = path.stat().st_mode
    except OSError:
        return
    if (mode & 0o77) != 0:
        logger.warning(
            "teos.keys.file_permissions_loose",
            path=str(path),
            mode=oct(mode),
            recommended=oct(KEY_FILE_RECOMMENDED_MODE),
        )


def load_private_key_from_file(path: str | Path) -> Ed25519PrivateKey:
    """Load an Ed25519 signing key from a PEM file (blocking I/O).

    Logs a warning if the file is readable by group or others.
    """
    path = Path(path)
    warn_if_key_file_permissions_loose(path)
    return load_private_key_from_pem(path.read_bytes())


def load_private_key_from_env(var_name: str) -> Ed25519PrivateKey:
    """From env var (PEM string). Raises ValueError if unset or invalid."""
    value = os.environ.get(var_name)
    if not value:
        raise ValueError(f"Environment variable {var_name!r} is not set or empty")
    return load_private_key_from_pem(value.encode("utf-8"))
