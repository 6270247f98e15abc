"""TEOS: signed, encrypted envelopes bound to group messaging context.

A TEOS carries an AEAD-encrypted payload together with its context metadata
(context, epoch, sender, sequence, scopes). The metadata and ciphertext are
bound by an Ed25519 signature over a canonical SHA-256 hash, and the whole
structure serializes to MessagePack.

Example:
    >>> from teos import create_psk_teos, extract_teos, encode_payload
    >>> from teos.crypto.keys import generate_keypair
    >>> private_key, public_key = generate_keypair()
    >>> key = bytes(32)
    >>> aad = {"contextId": "group-123", "epochId": 42, "senderClientId": "client-7",
    ...        "messageSequence": 3, "scopes": ["chat"]}
    >>> envelope = create_psk_teos(aad, key, private_key, encode_payload({"hi": 1}),
    ...                            psk_id="team-psk")
    >>> extract_teos(envelope, key, public_key)
    {'hi': 1}
"""

from teos.assembler import assemble_teos, verify_teos
from teos.builder import SYSTEM_ENTROPY, Entropy, create_base_mls_teos, create_base_psk_teos
from teos.crypto.hashing import generate_base_teos_hash
from teos.crypto.keyschedule import HkdfKeySchedule, KeySchedule, PskKeyring
from teos.errors import (
    AuthenticationFailureError,
    ConstructionError,
    InvalidSignatureError,
    MalformedPlaintextError,
    MalformedSignatureError,
    TEOSError,
    UnrecognizedFormatError,
)
from teos.extraction import check_teos_signature, extract_teos, open_teos
from teos.mls import create_mls_teos, extract_mls_teos
from teos.models import (
    AAD,
    AADPayload,
    BaseTEOS,
    EnvelopeAuth,
    MLSEnvelope,
    MlsTEOS,
    PSKEnvelope,
    PskTEOS,
    TEOS,
    TEOSDto,
)
from teos.models.constants import TEOS_VERSION
from teos.psk import create_psk_teos, extract_psk_teos
from teos.serialization import (
    decode_payload,
    deserialize_teos,
    encode_payload,
    get_teos_dto,
    serialize_teos,
)

__version__ = TEOS_VERSION

__all__ = [
    "AAD",
    "AADPayload",
    "AuthenticationFailureError",
    "BaseTEOS",
    "ConstructionError",
    "Entropy",
    "EnvelopeAuth",
    "HkdfKeySchedule",
    "InvalidSignatureError",
    "KeySchedule",
    "MLSEnvelope",
    "MalformedPlaintextError",
    "MalformedSignatureError",
    "MlsTEOS",
    "PSKEnvelope",
    "PskKeyring",
    "PskTEOS",
    "SYSTEM_ENTROPY",
    "TEOS",
    "TEOSDto",
    "TEOSError",
    "UnrecognizedFormatError",
    "__version__",
    "assemble_teos",
    "check_teos_signature",
    "create_base_mls_teos",
    "create_base_psk_teos",
    "create_mls_teos",
    "create_psk_teos",
    "decode_payload",
    "deserialize_teos",
    "encode_payload",
    "extract_mls_teos",
    "extract_psk_teos",
    "extract_teos",
    "generate_base_teos_hash",
    "get_teos_dto",
    "open_teos",
    "serialize_teos",
    "verify_teos",
]
