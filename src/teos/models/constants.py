"""Constants for the TEOS envelope format.

This module defines format-wide constants used across the codebase.
"""

# Format identifiers
TEOS_TYPE = "torln.teos.v1"
TEOS_DTO_TYPE = "torln.teos.dto.v1"
TEOS_VERSION = "0.3.0"
"""Library version recorded in every envelope's ``version`` field."""

# AEAD algorithm labels carried in BaseTEOS.algorithm
ALGORITHM_AES_GCM = "AES-GCM"
ALGORITHM_CHACHA20_POLY1305 = "ChaCha20-Poly1305"

# Envelope suites
PSK_SUITE = "PSK+AES-256-GCM"
MLS_SUITE = "MLS_128_DHKEMX25519_CHACHA20POLY1305_SHA256_Ed25519"

# Buffer sizes
NONCE_LENGTH = 12
TAG_LENGTH = 16
SIGNATURE_LENGTH = 64
SYMMETRIC_KEY_LENGTH = 32
"""Both AES-256-GCM and ChaCha20-Poly1305 take 256-bit keys."""

DEFAULT_PSK_GENERATION = 1

# Integer fields stay within the IEEE-754 exact range so the canonical JSON
# form renders them exactly.
MAX_SAFE_INTEGER = 2**53 - 1
