"""TEOS envelope models.

A TEOS is a BaseTEOS (encrypted payload plus its authenticated context)
extended with a mode-specific, signed envelope. The two modes form a tagged
union discriminated on ``mode``; mode-agnostic code only ever touches the
shared base fields.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import Field, TypeAdapter

from teos.models.base import TEOSBaseModel
from teos.models.constants import (
    ALGORITHM_AES_GCM,
    ALGORITHM_CHACHA20_POLY1305,
    MAX_SAFE_INTEGER,
    MLS_SUITE,
    NONCE_LENGTH,
    PSK_SUITE,
    TAG_LENGTH,
    TEOS_TYPE,
)

Mode = Literal["psk", "mls"]
Algorithm = Literal["AES-GCM", "ChaCha20-Poly1305"]

# Wire buffers must arrive as real binary values, never as text.
NonceBytes = Annotated[
    bytes, Field(strict=True, min_length=NONCE_LENGTH, max_length=NONCE_LENGTH)
]
TagBytes = Annotated[bytes, Field(strict=True, min_length=TAG_LENGTH, max_length=TAG_LENGTH)]
Buffer = Annotated[bytes, Field(strict=True)]

# Non-negative and exactly representable in the canonical JSON form.
Counter = Annotated[int, Field(ge=0, le=MAX_SAFE_INTEGER)]

BASE_FIELDS = ("type", "version", "algorithm", "aad", "nonce", "tag", "ciphertext")
"""Fields covered by the authentication hash, in declaration order."""

ALGORITHMS: tuple[str, ...] = (ALGORITHM_AES_GCM, ALGORITHM_CHACHA20_POLY1305)


class AADPayload(TEOSBaseModel):
    """Caller-supplied context metadata bound to an envelope.

    Attributes:
        context_id: Group or conversation identifier
        epoch_id: Group epoch the message belongs to
        sender_client_id: Sending client identifier
        message_sequence: Per-sender message counter
        scopes: Ordered scope labels; order is significant
    """

    context_id: str = Field(..., description="Group/context identifier")
    epoch_id: Counter = Field(..., description="Group epoch")
    sender_client_id: str = Field(..., description="Sender client identifier")
    message_sequence: Counter = Field(..., description="Per-sender sequence number")
    scopes: tuple[str, ...] = Field(default=(), description="Ordered scope list")


class AAD(AADPayload):
    """Context metadata as attached to an envelope.

    ``identifier`` and ``timestamp`` are generated by the base envelope
    builder and never supplied by callers of the creation functions.
    """

    identifier: str = Field(..., description="UUID generated at creation")
    timestamp: Counter = Field(..., description="Creation time, ms since the Unix epoch")


class BaseTEOS(TEOSBaseModel):
    """Unsigned encrypted record: the part of a TEOS covered by the signature."""

    type: Literal["torln.teos.v1"] = TEOS_TYPE
    version: str = Field(..., description="Library version that built the envelope")
    algorithm: Algorithm = Field(..., description="AEAD algorithm label")
    aad: AAD
    nonce: NonceBytes
    tag: TagBytes
    ciphertext: Buffer

    def base_fields(self) -> dict[str, Any]:
        """Return the authenticated fields as attribute values (no envelope)."""
        return {name: getattr(self, name) for name in BASE_FIELDS}


class EnvelopeAuth(TEOSBaseModel):
    """Signature over the authentication hash plus an optional key reference.

    The signature length is deliberately not constrained here: a wrong length
    is reported by the verifier as a malformed signature.
    """

    signature: Buffer
    public_key: dict[str, str] | None = Field(
        default=None,
        description="Sender Ed25519 public key as a JWK (RFC 8037 OKP).",
    )


class PSKEnvelope(TEOSBaseModel):
    suite: Literal["PSK+AES-256-GCM"] = PSK_SUITE
    auth: EnvelopeAuth
    psk_id: str = Field(..., description="Identifier of the pre-shared key")
    psk_generation: Counter = Field(..., description="Derived key generation used")


class MLSEnvelope(TEOSBaseModel):
    suite: Literal["MLS_128_DHKEMX25519_CHACHA20POLY1305_SHA256_Ed25519"] = MLS_SUITE
    auth: EnvelopeAuth


class PskTEOS(BaseTEOS):
    """TEOS sealed under a key derived from a pre-shared secret."""

    mode: Literal["psk"] = "psk"
    envelope: PSKEnvelope


class MlsTEOS(BaseTEOS):
    """TEOS sealed under a secret exported from an MLS group."""

    mode: Literal["mls"] = "mls"
    envelope: MLSEnvelope


TEOS = Annotated[Union[PskTEOS, MlsTEOS], Field(discriminator="mode")]

teos_adapter: TypeAdapter[PskTEOS | MlsTEOS] = TypeAdapter(TEOS)
