"""MLS mode envelopes.

The symmetric key is a secret exported from an MLS group. Encryption happens
in the MLS collaborator, which hands over ``ciphertext || tag`` and the nonce
it used; TEOS only wraps and signs the result. Nonce uniqueness per exported
secret is the collaborator's responsibility.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)

from teos.assembler import assemble_teos
from teos.builder import Entropy, create_base_mls_teos
from teos.extraction import TEOSInput, extract_teos
from teos.models.teos import AADPayload, MlsTEOS
from teos.observability import get_logger

logger = get_logger(__name__)


def create_mls_teos(
    aad: AADPayload | Mapping[str, Any],
    signing_key: Ed25519PrivateKey,
    encrypted: bytes,
    nonce: bytes,
    *,
    entropy: Entropy | None = None,
    include_public_key: bool = True,
) -> MlsTEOS:
    """Wrap an MLS-encrypted payload and sign the envelope.

    Args:
        aad: Context metadata (identifier and timestamp are generated)
        signing_key: Sender's Ed25519 private key
        encrypted: ChaCha20-Poly1305 output (ciphertext followed by tag)
        nonce: 12-byte nonce used for ``encrypted``
        entropy: Identifier/time sources; system sources by default
        include_public_key: Embed the sender's public JWK in the envelope

    Raises:
        ConstructionError: On a malformed nonce or payload, or a signing failure.
    """
    base = create_base_mls_teos(aad, encrypted, nonce, entropy=entropy)
    teos = assemble_teos(base, "mls", signing_key, include_public_key=include_public_key)
    logger.info(
        "teos.mls.created",
        identifier=teos.aad.identifier,
        context_id=teos.aad.context_id,
        epoch_id=teos.aad.epoch_id,
    )
    return teos


def extract_mls_teos(
    payload: TEOSInput,
    exported_secret: bytes,
    public_key: Ed25519PublicKey,
    *,
    decode: bool = True,
) -> Any:
    """Verify and decrypt an envelope with a secret exported from the group."""
    return extract_teos(payload, exported_secret, public_key, decode=decode)
