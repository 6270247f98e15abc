"""MessagePack wire codec for TEOS envelopes and application payloads.

The wire form is a MessagePack map keyed by the camelCase field names, with
every buffer encoded as native ``bin``. It is unrelated to the canonical form
used for the authentication hash: wire bytes are never hashed.
"""

from __future__ import annotations

from typing import Any

import msgpack
from pydantic import ValidationError

from teos.errors import MalformedPlaintextError, UnrecognizedFormatError
from teos.models.constants import TEOS_TYPE
from teos.models.dto import TEOSDto
from teos.models.ids import timestamp_to_datetime
from teos.models.teos import MlsTEOS, PskTEOS, teos_adapter


def serialize_teos(teos: PskTEOS | MlsTEOS) -> bytes:
    payload = teos.model_dump(by_alias=True, exclude_none=True)
    return msgpack.packb(payload, use_bin_type=True)


def to_tight_bytes(value: Any) -> Any:
    """Return ``value`` with every binary buffer replaced by an owned ``bytes``.

    Walks dicts, lists and tuples recursively. ``bytearray`` and
    ``memoryview`` values (which may be views into a larger decode buffer)
    are copied into new ``bytes`` objects sized to their content.
    """
    if isinstance(value, (memoryview, bytearray)):
        return bytes(value)
    if isinstance(value, dict):
        return {k: to_tight_bytes(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_tight_bytes(item) for item in value]
    return value


def deserialize_teos(buffer: bytes | bytearray | memoryview) -> PskTEOS | MlsTEOS:
    """Decode wire bytes into a validated TEOS.

    Raises:
        UnrecognizedFormatError: If the bytes are not MessagePack, the top-level
            ``type`` tag is not ``torln.teos.v1``, or the structure does not
            match either envelope mode.
    """
    try:
        decoded = msgpack.unpackb(buffer, raw=False)
    except (ValueError, TypeError) as e:
        raise UnrecognizedFormatError(
            f"not a MessagePack document ({type(e).__name__})",
            details={"length": len(buffer)},
        ) from e

    data = to_tight_bytes(decoded)
    if not isinstance(data, dict):
        raise UnrecognizedFormatError(
            "top-level value is not a map",
            details={"found": type(data).__name__},
        )
    found_type = data.get("type")
    if found_type != TEOS_TYPE:
        raise UnrecognizedFormatError(
            f"expected type tag {TEOS_TYPE!r}",
            details={"type": found_type if isinstance(found_type, str) else repr(found_type)},
        )

    try:
        return teos_adapter.validate_python(data)
    except ValidationError as e:
        raise UnrecognizedFormatError(
            "structure does not match a TEOS envelope",
            details={"errors": e.errors(include_url=False, include_input=False)},
        ) from e


def get_teos_dto(teos: PskTEOS | MlsTEOS) -> TEOSDto:
    return TEOSDto(
        id=teos.aad.identifier,
        mode=teos.mode,
        ciphersuite=teos.envelope.suite,
        blob=serialize_teos(teos),
        timestamp=timestamp_to_datetime(teos.aad.timestamp),
    )


def encode_payload(value: Any) -> bytes:
    """Encode an application value as MessagePack, ready to be sealed."""
    return msgpack.packb(value, use_bin_type=True)


def decode_payload(data: bytes) -> Any:
    """Decode a decrypted MessagePack payload.

    Raises:
        MalformedPlaintextError: If ``data`` is not a single MessagePack value.
    """
    try:
        return msgpack.unpackb(data, raw=False, strict_map_key=False)
    except (ValueError, TypeError) as e:
        raise MalformedPlaintextError(
            f"payload is not valid MessagePack ({type(e).__name__})",
            details={"length": len(data)},
        ) from e
