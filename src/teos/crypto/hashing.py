"""Authentication hash: SHA-256 over the canonical form of a base envelope.

The canonical view holds exactly the seven base fields (type, version,
algorithm, aad, nonce, tag, ciphertext) under their wire names. Each binary
field is rendered as an object mapping the decimal byte index to the byte
value (``{"0": 1, "1": 2, ...}``), the shape a JavaScript ``Uint8Array``
takes under RFC 8785 canonicalization, so hashes interoperate with the
TypeScript implementation. The view is canonicalized with JCS (RFC 8785),
which sorts the index keys as strings ("0", "1", "10", "11", ..., "2").
The canonical text is packed as a MessagePack string and that packing is
digested.

``mode`` and ``envelope`` are never part of the view: the suite string, PSK
generation and key reference are not covered by the signature. Anything
security relevant derived from them must be validated separately.
"""

from __future__ import annotations

import hashlib
from typing import Any, cast

import jcs
import msgpack

from teos.models.constants import TEOS_TYPE
from teos.models.teos import BaseTEOS


def _indexed(value: bytes) -> dict[str, int]:
    return {str(index): byte for index, byte in enumerate(value)}


def canonical_view(teos: BaseTEOS) -> dict[str, Any]:
    """The hashed fields of ``teos`` as a JSON-compatible dict."""
    return {
        "type": TEOS_TYPE,
        "version": teos.version,
        "algorithm": teos.algorithm,
        "aad": teos.aad.model_dump(by_alias=True, mode="json"),
        "nonce": _indexed(teos.nonce),
        "tag": _indexed(teos.tag),
        "ciphertext": _indexed(teos.ciphertext),
    }


def canonicalize(teos: BaseTEOS) -> bytes:
    return cast(bytes, jcs.canonicalize(canonical_view(teos)))


def generate_base_teos_hash(teos: BaseTEOS) -> bytes:
    """32-byte digest signed by the sender; accepts a BaseTEOS or a full TEOS."""
    canonical_text = canonicalize(teos).decode("utf-8")
    packed = msgpack.packb(canonical_text, use_bin_type=True)
    return hashlib.sha256(packed).digest()
