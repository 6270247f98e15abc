"""TEOS cryptographic layer.

- AEAD codec (AES-256-GCM, ChaCha20-Poly1305) with ciphertext/tag splitting
- Ed25519 signing and length-checked verification
- Authentication hash (JCS canonical form, SHA-256)
- Key export/import (JWK, base64, PEM) and the pluggable PSK key schedule

Public exports:
    aead, hashing, keys, keyschedule, signing: submodules
    KeySchedule, HkdfKeySchedule, PskKeyring: PSK key derivation
"""

from teos.crypto import aead
from teos.crypto import hashing
from teos.crypto import keys
from teos.crypto import keyschedule
from teos.crypto import signing
from teos.crypto.keyschedule import HkdfKeySchedule, KeySchedule, PskKeyring

__all__ = [
    "aead",
    "hashing",
    "keys",
    "keyschedule",
    "signing",
    "HkdfKeySchedule",
    "KeySchedule",
    "PskKeyring",
]
