"""Shared pytest fixtures for TEOS tests.

Provides sender key pairs, context metadata, PSK keyrings and MLS secrets,
plus ready-made PSK and MLS envelopes built from them.
"""

from __future__ import annotations

import os

import pytest
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)

from teos.crypto.keys import generate_keypair
from teos.crypto.keyschedule import PskKeyring
from teos.models import AADPayload, MlsTEOS, PskTEOS
from teos.mls import create_mls_teos
from teos.psk import create_psk_teos
from teos.serialization import encode_payload

from tests.factories import (
    TEST_PSK_ID,
    TEST_PSK_SECRET,
    create_test_aad,
    encrypt_for_mls,
)


@pytest.fixture
def sender_keypair() -> tuple[Ed25519PrivateKey, Ed25519PublicKey]:
    """Fresh Ed25519 key pair for the sending client."""
    return generate_keypair()


@pytest.fixture
def private_key(sender_keypair: tuple[Ed25519PrivateKey, Ed25519PublicKey]) -> Ed25519PrivateKey:
    return sender_keypair[0]


@pytest.fixture
def public_key(sender_keypair: tuple[Ed25519PrivateKey, Ed25519PublicKey]) -> Ed25519PublicKey:
    return sender_keypair[1]


@pytest.fixture
def aad() -> AADPayload:
    return create_test_aad()


@pytest.fixture
def psk_keyring() -> PskKeyring:
    return PskKeyring(psk_id=TEST_PSK_ID, secret=TEST_PSK_SECRET)


@pytest.fixture
def psk_key(psk_keyring: PskKeyring) -> bytes:
    """Key derived for PSK generation 1."""
    return psk_keyring.key_for(1)


@pytest.fixture
def mls_secret() -> bytes:
    """Stand-in for a 32-byte secret exported from an MLS group."""
    return os.urandom(32)


@pytest.fixture
def psk_teos(
    aad: AADPayload, psk_key: bytes, private_key: Ed25519PrivateKey
) -> PskTEOS:
    return create_psk_teos(
        aad,
        psk_key,
        private_key,
        encode_payload({"payload": "data"}),
        psk_id=TEST_PSK_ID,
    )


@pytest.fixture
def mls_teos(aad: AADPayload, mls_secret: bytes, private_key: Ed25519PrivateKey) -> MlsTEOS:
    nonce = os.urandom(12)
    encrypted = encrypt_for_mls(mls_secret, encode_payload({"status": "ok"}), nonce)
    return create_mls_teos(aad, private_key, encrypted, nonce)
