"""Envelope assembler: signs a base envelope and attaches its mode envelope.

This is the only place where PSK and MLS envelopes differ. Both branches sign
the authentication hash of the base fields, wrap the signature (and
optionally the sender's public JWK) in an ``EnvelopeAuth`` and attach the
mode's suite and fields. Every assembled envelope is verified against the
signer's own public key before it is returned.
"""

from __future__ import annotations

from typing import Literal, overload

from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)
from pydantic import ValidationError

from teos.crypto.hashing import generate_base_teos_hash
from teos.crypto.keys import load_public_key_from_jwk, public_key_to_jwk
from teos.crypto.signing import generate_signature, verify_signature
from teos.errors import ConstructionError, InvalidSignatureError
from teos.models.teos import (
    BaseTEOS,
    EnvelopeAuth,
    MLSEnvelope,
    MlsTEOS,
    Mode,
    PSKEnvelope,
    PskTEOS,
)
from teos.observability import get_logger

logger = get_logger(__name__)


@overload
def assemble_teos(
    base: BaseTEOS,
    mode: Literal["psk"],
    signing_key: Ed25519PrivateKey,
    *,
    psk_id: str | None = ...,
    psk_generation: int | None = ...,
    include_public_key: bool = ...,
) -> PskTEOS: ...


@overload
def assemble_teos(
    base: BaseTEOS,
    mode: Literal["mls"],
    signing_key: Ed25519PrivateKey,
    *,
    psk_id: str | None = ...,
    psk_generation: int | None = ...,
    include_public_key: bool = ...,
) -> MlsTEOS: ...


def assemble_teos(
    base: BaseTEOS,
    mode: Mode,
    signing_key: Ed25519PrivateKey,
    *,
    psk_id: str | None = None,
    psk_generation: int | None = None,
    include_public_key: bool = True,
) -> PskTEOS | MlsTEOS:
    """Sign ``base`` and wrap it in the envelope for ``mode``.

    Args:
        base: Unsigned base envelope
        mode: "psk" or "mls"
        signing_key: Sender's Ed25519 private key
        psk_id: Pre-shared key identifier (PSK mode only, required)
        psk_generation: Derived key generation used (PSK mode only, required)
        include_public_key: Embed the sender's public key as a JWK

    Raises:
        ConstructionError: On missing PSK fields, an unknown mode, a signing
            failure or a failed self-verification.
    """
    digest = generate_base_teos_hash(base)
    signature = generate_signature(signing_key, digest)
    public_key = signing_key.public_key()
    auth = EnvelopeAuth(
        signature=signature,
        public_key=public_key_to_jwk(public_key) if include_public_key else None,
    )
    fields = base.base_fields()

    teos: PskTEOS | MlsTEOS
    try:
        if mode == "psk":
            if psk_id is None or psk_generation is None:
                raise ConstructionError(
                    "PSK envelopes require psk_id and psk_generation",
                    details={"psk_id_set": psk_id is not None},
                )
            teos = PskTEOS(
                **fields,
                envelope=PSKEnvelope(auth=auth, psk_id=psk_id, psk_generation=psk_generation),
            )
        elif mode == "mls":
            teos = MlsTEOS(**fields, envelope=MLSEnvelope(auth=auth))
        else:
            raise ConstructionError(f"unknown envelope mode {mode!r}", details={"mode": mode})
    except ValidationError as e:
        raise ConstructionError(
            "envelope fields are invalid",
            details={"errors": e.errors(include_url=False, include_input=False)},
        ) from e

    if not verify_teos(teos, public_key):
        raise ConstructionError(
            "assembled envelope failed self-verification",
            details={"identifier": teos.aad.identifier, "mode": mode},
        )
    logger.debug(
        "teos.envelope.assembled",
        identifier=teos.aad.identifier,
        mode=teos.mode,
        suite=teos.envelope.suite,
        ciphertext_length=len(teos.ciphertext),
    )
    return teos


def verify_teos(teos: PskTEOS | MlsTEOS, public_key: Ed25519PublicKey | None = None) -> bool:
    """Check the envelope signature against its base fields.

    Uses ``public_key`` when given, otherwise the JWK embedded in the
    envelope. The embedded key is not authenticated by the signature: it only
    proves that whoever holds the matching private key signed the envelope.

    Raises:
        InvalidSignatureError: If no key is given and none is embedded, or the
            embedded JWK cannot be imported.
        MalformedSignatureError: If the signature is not 64 bytes.
    """
    if public_key is None:
        jwk = teos.envelope.auth.public_key
        if not jwk:
            raise InvalidSignatureError(
                "Cannot verify: no public key provided and envelope has no public key.",
            )
        try:
            public_key = load_public_key_from_jwk(jwk)
        except ValueError as e:
            raise InvalidSignatureError(
                f"Invalid public key in envelope: {e}.",
            ) from e
    digest = generate_base_teos_hash(teos)
    return verify_signature(public_key, digest, teos.envelope.auth.signature)
