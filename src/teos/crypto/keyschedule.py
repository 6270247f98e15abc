"""PSK key schedule contract and a reference HKDF schedule.

The envelope engine never derives PSK keys itself: a PSK envelope only
records which generation was used. Any object with a
``derive_key(psk_secret, generation)`` method can be plugged in, provided it
is deterministic, indexed by generation and yields unrelated keys for
different generations. ``HkdfKeySchedule`` is one such schedule, offered as
a default for deployments that do not bring their own.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from teos.models.constants import SYMMETRIC_KEY_LENGTH


@runtime_checkable
class KeySchedule(Protocol):
    """Maps a pre-shared secret and a generation counter to a 256-bit key."""

    def derive_key(self, psk_secret: bytes, generation: int) -> bytes: ...


@dataclass(frozen=True)
class HkdfKeySchedule:
    """HKDF-SHA256 with ``info = label || generation (8-byte big-endian)``.

    Example:
        >>> schedule = HkdfKeySchedule()
        >>> len(schedule.derive_key(b"s" * 32, 1))
        32
    """

    label: bytes = b"torln.teos.psk.generation"
    salt: bytes | None = None

    def derive_key(self, psk_secret: bytes, generation: int) -> bytes:
        if not 0 <= generation < 2**64:
            raise ValueError(f"PSK generation must fit in 64 unsigned bits, got {generation}")
        if not psk_secret:
            raise ValueError("PSK secret must not be empty")
        hkdf = HKDF(
            algorithm=hashes.SHA256(),
            length=SYMMETRIC_KEY_LENGTH,
            salt=self.salt,
            info=self.label + generation.to_bytes(8, "big"),
        )
        return hkdf.derive(psk_secret)


@dataclass(frozen=True)
class PskKeyring:
    """A pre-shared secret, its identifier and the schedule that derives from it."""

    psk_id: str
    secret: bytes = field(repr=False)
    schedule: KeySchedule = field(default_factory=HkdfKeySchedule)

    def key_for(self, generation: int) -> bytes:
        key = self.schedule.derive_key(self.secret, generation)
        if len(key) != SYMMETRIC_KEY_LENGTH:
            raise ValueError(
                f"Key schedule returned {len(key)} bytes, expected {SYMMETRIC_KEY_LENGTH}"
            )
        return key
