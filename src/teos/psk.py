"""Pre-shared-key (PSK) mode envelopes.

The AES-256-GCM key is derived by a key schedule from a pre-shared secret
and a generation counter. Creation consumes the derived key; extraction uses
a ``PskKeyring`` to derive the key for the generation recorded in the
envelope.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)

from teos.assembler import assemble_teos
from teos.builder import Entropy, create_base_psk_teos
from teos.crypto import aead
from teos.crypto.keyschedule import PskKeyring
from teos.errors import AuthenticationFailureError, TEOSError
from teos.extraction import TEOSInput, check_teos_signature, load_teos
from teos.models.constants import DEFAULT_PSK_GENERATION
from teos.models.teos import AADPayload, PskTEOS
from teos.observability import get_logger
from teos.serialization import decode_payload

logger = get_logger(__name__)


def create_psk_teos(
    aad: AADPayload | Mapping[str, Any],
    key: bytes,
    signing_key: Ed25519PrivateKey,
    data: bytes,
    *,
    psk_id: str,
    psk_generation: int = DEFAULT_PSK_GENERATION,
    entropy: Entropy | None = None,
    include_public_key: bool = True,
) -> PskTEOS:
    """Encrypt ``data`` under a derived PSK key and sign the envelope.

    Args:
        aad: Context metadata (identifier and timestamp are generated)
        key: 32-byte key derived for ``psk_generation``
        signing_key: Sender's Ed25519 private key
        data: Plaintext bytes (see ``encode_payload``)
        psk_id: Identifier of the pre-shared secret
        psk_generation: Generation the key was derived for
        entropy: Randomness/time sources; system sources by default
        include_public_key: Embed the sender's public JWK in the envelope

    Raises:
        ConstructionError: If encryption, signing or self-verification fails.
    """
    base = create_base_psk_teos(aad, key, data, entropy=entropy)
    teos = assemble_teos(
        base,
        "psk",
        signing_key,
        psk_id=psk_id,
        psk_generation=psk_generation,
        include_public_key=include_public_key,
    )
    logger.info(
        "teos.psk.created",
        identifier=teos.aad.identifier,
        context_id=teos.aad.context_id,
        psk_generation=psk_generation,
    )
    return teos


def extract_psk_teos(
    payload: TEOSInput,
    keyring: PskKeyring,
    public_key: Ed25519PublicKey,
    *,
    decode: bool = True,
) -> Any:
    """Verify and decrypt a PSK envelope with a key from ``keyring``.

    ``pskId`` and ``pskGeneration`` are not covered by the signature; they
    only select the key, after the signature has been checked. A forged
    generation yields a key that fails AEAD authentication.

    Raises:
        UnrecognizedFormatError: ``payload`` bytes are not a TEOS.
        AuthenticationFailureError: The envelope is not a PSK envelope for
            this keyring, or AEAD authentication fails.
        MalformedSignatureError, InvalidSignatureError: Signature checks fail.
        MalformedPlaintextError: Decrypted bytes are not valid MessagePack.
    """
    teos = load_teos(payload)
    try:
        check_teos_signature(teos, public_key)
        if not isinstance(teos, PskTEOS):
            raise AuthenticationFailureError(
                "envelope is not a PSK envelope",
                details={"mode": teos.mode},
            )
        if teos.envelope.psk_id != keyring.psk_id:
            raise AuthenticationFailureError(
                "envelope was sealed under a different pre-shared key",
                details={"psk_id": teos.envelope.psk_id, "expected_psk_id": keyring.psk_id},
            )
        try:
            key = keyring.key_for(teos.envelope.psk_generation)
        except (ValueError, OverflowError) as e:
            raise AuthenticationFailureError(
                f"cannot derive key for generation {teos.envelope.psk_generation}: {e}",
            ) from e
        plaintext = aead.decrypt(teos.algorithm, key, teos.nonce, teos.ciphertext, teos.tag)
        return decode_payload(plaintext) if decode else plaintext
    except TEOSError as e:
        logger.warning("teos.psk.rejected", code=e.code, identifier=teos.aad.identifier)
        raise
