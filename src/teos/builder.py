"""Base envelope builder.

Turns caller context metadata plus a payload into an unsigned ``BaseTEOS``.
PSK mode encrypts here under a fresh random nonce; MLS mode receives a
payload already encrypted by the MLS collaborator and only splits the tag
from the ciphertext.

Randomness and time come from an injected ``Entropy`` capability so that
construction is reproducible in tests.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from teos.crypto import aead
from teos.errors import ConstructionError
from teos.models.constants import (
    ALGORITHM_AES_GCM,
    ALGORITHM_CHACHA20_POLY1305,
    NONCE_LENGTH,
    TEOS_VERSION,
)
from teos.models.ids import current_timestamp_ms, generate_identifier
from teos.models.teos import AAD, AADPayload, BaseTEOS


@dataclass(frozen=True)
class Entropy:
    """Sources of randomness and time used while building an envelope.

    Attributes:
        random_bytes: Returns ``n`` cryptographically random bytes
        new_identifier: Returns a fresh envelope identifier (UUID string)
        now_ms: Returns the current time in milliseconds since the Unix epoch
    """

    random_bytes: Callable[[int], bytes] = os.urandom
    new_identifier: Callable[[], str] = generate_identifier
    now_ms: Callable[[], int] = current_timestamp_ms


SYSTEM_ENTROPY = Entropy()


def _attach_aad(aad: AADPayload | Mapping[str, Any], entropy: Entropy) -> AAD:
    try:
        if not isinstance(aad, AADPayload):
            aad = AADPayload.model_validate(aad)
        # identifier/timestamp of an already attached AAD are always replaced
        fields = aad.model_dump(include=set(AADPayload.model_fields))
        return AAD(**fields, identifier=entropy.new_identifier(), timestamp=entropy.now_ms())
    except ValidationError as e:
        raise ConstructionError(
            "context metadata is invalid",
            details={"errors": e.errors(include_url=False, include_input=False)},
        ) from e


def _assemble_base(
    algorithm: str,
    aad: AAD,
    nonce: bytes,
    tag: bytes,
    ciphertext: bytes,
) -> BaseTEOS:
    try:
        return BaseTEOS(
            version=TEOS_VERSION,
            algorithm=algorithm,
            aad=aad,
            nonce=nonce,
            tag=tag,
            ciphertext=ciphertext,
        )
    except ValidationError as e:
        raise ConstructionError(
            "base envelope fields are invalid",
            details={"errors": e.errors(include_url=False, include_input=False)},
        ) from e


def create_base_psk_teos(
    aad: AADPayload | Mapping[str, Any],
    key: bytes,
    data: bytes,
    *,
    entropy: Entropy | None = None,
) -> BaseTEOS:
    """Encrypt ``data`` with AES-256-GCM under ``key`` and a fresh nonce.

    Raises:
        ConstructionError: If the key is not 256 bits or encryption fails.
    """
    entropy = entropy or SYSTEM_ENTROPY
    nonce = aead.generate_nonce(entropy.random_bytes)
    ciphertext, tag = aead.encrypt(ALGORITHM_AES_GCM, key, nonce, bytes(data))
    return _assemble_base(ALGORITHM_AES_GCM, _attach_aad(aad, entropy), nonce, tag, ciphertext)


def create_base_mls_teos(
    aad: AADPayload | Mapping[str, Any],
    encrypted: bytes,
    nonce: bytes,
    *,
    entropy: Entropy | None = None,
) -> BaseTEOS:
    """Wrap an externally encrypted ``ciphertext || tag`` buffer.

    Raises:
        ConstructionError: If ``nonce`` is not 12 bytes or ``encrypted`` is
            shorter than the 16-byte tag.
    """
    entropy = entropy or SYSTEM_ENTROPY
    if len(nonce) != NONCE_LENGTH:
        raise ConstructionError(
            f"MLS nonce must be {NONCE_LENGTH} bytes",
            details={"nonce_length": len(nonce)},
        )
    try:
        ciphertext, tag = aead.split_ciphertext(bytes(encrypted))
    except ValueError as e:
        raise ConstructionError(str(e), details={"payload_length": len(encrypted)}) from e
    return _assemble_base(
        ALGORITHM_CHACHA20_POLY1305,
        _attach_aad(aad, entropy),
        bytes(nonce),
        tag,
        ciphertext,
    )
