"""End-to-end PSK and MLS envelope flows through the mode facades."""

from __future__ import annotations

import os

import msgpack
import pytest
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)

from teos import (
    AuthenticationFailureError,
    ConstructionError,
    InvalidSignatureError,
    PskKeyring,
    UnrecognizedFormatError,
    create_mls_teos,
    create_psk_teos,
    deserialize_teos,
    encode_payload,
    extract_mls_teos,
    extract_psk_teos,
    extract_teos,
    serialize_teos,
)
from teos.crypto.keys import generate_keypair
from teos.models import AADPayload, MlsTEOS, PskTEOS
from teos.models.constants import MAX_SAFE_INTEGER
from tests.factories import TEST_PSK_ID, TEST_PSK_SECRET, encrypt_for_mls, fixed_entropy


class TestPskFlow:
    def test_hello_world(
        self,
        aad: AADPayload,
        psk_keyring: PskKeyring,
        private_key: Ed25519PrivateKey,
        public_key: Ed25519PublicKey,
    ) -> None:
        teos = create_psk_teos(
            aad,
            psk_keyring.key_for(1),
            private_key,
            encode_payload("hello world"),
            psk_id=TEST_PSK_ID,
            psk_generation=1,
        )
        raw = serialize_teos(teos)
        assert extract_psk_teos(raw, psk_keyring, public_key) == "hello world"

    def test_envelope_shape(self, psk_teos: PskTEOS, aad: AADPayload) -> None:
        assert psk_teos.mode == "psk"
        assert psk_teos.algorithm == "AES-GCM"
        assert psk_teos.envelope.psk_id == TEST_PSK_ID
        assert psk_teos.envelope.psk_generation == 1
        assert psk_teos.aad.context_id == aad.context_id

    def test_later_generation(
        self,
        aad: AADPayload,
        psk_keyring: PskKeyring,
        private_key: Ed25519PrivateKey,
        public_key: Ed25519PublicKey,
    ) -> None:
        teos = create_psk_teos(
            aad,
            psk_keyring.key_for(5),
            private_key,
            encode_payload({"n": 5}),
            psk_id=TEST_PSK_ID,
            psk_generation=5,
        )
        assert extract_psk_teos(teos, psk_keyring, public_key) == {"n": 5}

    def test_forged_generation_fails_aead(
        self,
        psk_teos: PskTEOS,
        psk_keyring: PskKeyring,
        public_key: Ed25519PublicKey,
    ) -> None:
        envelope = psk_teos.envelope.model_copy(update={"psk_generation": 2})
        forged = psk_teos.model_copy(update={"envelope": envelope})
        with pytest.raises(AuthenticationFailureError):
            extract_psk_teos(forged, psk_keyring, public_key)

    def test_other_psk_id_rejected(
        self, psk_teos: PskTEOS, public_key: Ed25519PublicKey
    ) -> None:
        keyring = PskKeyring(psk_id="other-psk", secret=TEST_PSK_SECRET)
        with pytest.raises(AuthenticationFailureError) as exc_info:
            extract_psk_teos(psk_teos, keyring, public_key)
        assert exc_info.value.details["expected_psk_id"] == "other-psk"

    def test_other_secret_fails_aead(
        self, psk_teos: PskTEOS, public_key: Ed25519PublicKey
    ) -> None:
        keyring = PskKeyring(psk_id=TEST_PSK_ID, secret=b"\x01" * 32)
        with pytest.raises(AuthenticationFailureError):
            extract_psk_teos(psk_teos, keyring, public_key)

    def test_mls_envelope_rejected_by_keyring(
        self, mls_teos: MlsTEOS, psk_keyring: PskKeyring, public_key: Ed25519PublicKey
    ) -> None:
        with pytest.raises(AuthenticationFailureError, match="not a PSK envelope"):
            extract_psk_teos(mls_teos, psk_keyring, public_key)

    def test_signature_checked_before_key_use(
        self, psk_teos: PskTEOS, psk_keyring: PskKeyring
    ) -> None:
        _, other = generate_keypair()
        with pytest.raises(InvalidSignatureError):
            extract_psk_teos(psk_teos, psk_keyring, other)

    def test_forged_signature_reported_before_psk_mismatch(
        self, psk_teos: PskTEOS, public_key: Ed25519PublicKey
    ) -> None:
        auth = psk_teos.envelope.auth.model_copy(update={"signature": b"\x00" * 64})
        envelope = psk_teos.envelope.model_copy(update={"auth": auth, "psk_id": "foreign"})
        forged = psk_teos.model_copy(update={"envelope": envelope})
        keyring = PskKeyring(psk_id=TEST_PSK_ID, secret=TEST_PSK_SECRET)
        with pytest.raises(InvalidSignatureError):
            extract_psk_teos(forged, keyring, public_key)

    def test_mls_envelope_with_bad_signature_is_invalid_signature(
        self, mls_teos: MlsTEOS, psk_keyring: PskKeyring
    ) -> None:
        _, other = generate_keypair()
        with pytest.raises(InvalidSignatureError):
            extract_psk_teos(mls_teos, psk_keyring, other)

    def test_oversized_generation_fails_authentication(
        self, psk_teos: PskTEOS, psk_keyring: PskKeyring, public_key: Ed25519PublicKey
    ) -> None:
        envelope = psk_teos.envelope.model_copy(update={"psk_generation": 2**64})
        oversized = psk_teos.model_copy(update={"envelope": envelope})
        with pytest.raises(AuthenticationFailureError, match="cannot derive key"):
            extract_psk_teos(oversized, psk_keyring, public_key)

    def test_sequence_rewritten_past_safe_range_is_rejected(
        self,
        aad: AADPayload,
        psk_keyring: PskKeyring,
        private_key: Ed25519PrivateKey,
        public_key: Ed25519PublicKey,
    ) -> None:
        top = aad.model_copy(update={"message_sequence": MAX_SAFE_INTEGER})
        teos = create_psk_teos(
            top, psk_keyring.key_for(1), private_key, encode_payload("hi"), psk_id=TEST_PSK_ID
        )
        data = msgpack.unpackb(serialize_teos(teos), raw=False)
        data["aad"]["messageSequence"] = MAX_SAFE_INTEGER + 1
        with pytest.raises(UnrecognizedFormatError):
            extract_psk_teos(msgpack.packb(data, use_bin_type=True), psk_keyring, public_key)
        data["aad"]["messageSequence"] = MAX_SAFE_INTEGER - 1
        with pytest.raises(InvalidSignatureError):
            extract_psk_teos(msgpack.packb(data, use_bin_type=True), psk_keyring, public_key)

    def test_integer_keyed_payload(
        self,
        aad: AADPayload,
        psk_keyring: PskKeyring,
        private_key: Ed25519PrivateKey,
        public_key: Ed25519PublicKey,
    ) -> None:
        teos = create_psk_teos(
            aad, psk_keyring.key_for(1), private_key, encode_payload({1: "a"}), psk_id=TEST_PSK_ID
        )
        assert extract_psk_teos(teos, psk_keyring, public_key) == {1: "a"}

    def test_generic_extraction_with_derived_key(
        self, psk_teos: PskTEOS, psk_key: bytes, public_key: Ed25519PublicKey
    ) -> None:
        assert extract_teos(serialize_teos(psk_teos), psk_key, public_key) == {"payload": "data"}

    def test_empty_payload(
        self,
        aad: AADPayload,
        psk_keyring: PskKeyring,
        private_key: Ed25519PrivateKey,
        public_key: Ed25519PublicKey,
    ) -> None:
        teos = create_psk_teos(
            aad, psk_keyring.key_for(1), private_key, b"", psk_id=TEST_PSK_ID
        )
        assert teos.ciphertext == b""
        assert extract_psk_teos(teos, psk_keyring, public_key, decode=False) == b""

    def test_same_input_distinct_envelopes(
        self, aad: AADPayload, psk_key: bytes, private_key: Ed25519PrivateKey
    ) -> None:
        data = encode_payload("same")
        first = create_psk_teos(aad, psk_key, private_key, data, psk_id=TEST_PSK_ID)
        second = create_psk_teos(aad, psk_key, private_key, data, psk_id=TEST_PSK_ID)
        assert first.nonce != second.nonce
        assert first.aad.identifier != second.aad.identifier
        assert first.envelope.auth.signature != second.envelope.auth.signature

    def test_reproducible_with_fixed_entropy(
        self, aad: AADPayload, psk_key: bytes, private_key: Ed25519PrivateKey
    ) -> None:
        data = encode_payload("same")
        first = create_psk_teos(
            aad, psk_key, private_key, data, psk_id=TEST_PSK_ID, entropy=fixed_entropy()
        )
        second = create_psk_teos(
            aad, psk_key, private_key, data, psk_id=TEST_PSK_ID, entropy=fixed_entropy()
        )
        # Ed25519 signatures are deterministic
        assert serialize_teos(first) == serialize_teos(second)

    def test_bad_key_raises_construction_error(
        self, aad: AADPayload, private_key: Ed25519PrivateKey
    ) -> None:
        with pytest.raises(ConstructionError):
            create_psk_teos(aad, b"short", private_key, b"x", psk_id=TEST_PSK_ID)


class TestMlsFlow:
    def test_round_trip(
        self,
        aad: AADPayload,
        private_key: Ed25519PrivateKey,
        public_key: Ed25519PublicKey,
    ) -> None:
        secret = os.urandom(32)
        nonce = os.urandom(12)
        encrypted = encrypt_for_mls(secret, encode_payload({"text": "hi group"}), nonce)
        teos = create_mls_teos(aad, private_key, encrypted, nonce)
        raw = serialize_teos(teos)
        assert isinstance(deserialize_teos(raw), MlsTEOS)
        assert extract_mls_teos(raw, secret, public_key) == {"text": "hi group"}

    def test_envelope_shape(self, mls_teos: MlsTEOS) -> None:
        assert mls_teos.mode == "mls"
        assert mls_teos.algorithm == "ChaCha20-Poly1305"
        assert mls_teos.envelope.suite == "MLS_128_DHKEMX25519_CHACHA20POLY1305_SHA256_Ed25519"

    def test_wrong_exported_secret(
        self, mls_teos: MlsTEOS, public_key: Ed25519PublicKey
    ) -> None:
        with pytest.raises(AuthenticationFailureError):
            extract_mls_teos(mls_teos, os.urandom(32), public_key)

    def test_raw_plaintext(
        self, mls_teos: MlsTEOS, mls_secret: bytes, public_key: Ed25519PublicKey
    ) -> None:
        plaintext = extract_mls_teos(mls_teos, mls_secret, public_key, decode=False)
        assert plaintext == encode_payload({"status": "ok"})

    def test_short_payload_raises(self, aad: AADPayload, private_key: Ed25519PrivateKey) -> None:
        with pytest.raises(ConstructionError):
            create_mls_teos(aad, private_key, b"\x00" * 10, os.urandom(12))

    def test_without_public_key(
        self,
        aad: AADPayload,
        mls_secret: bytes,
        private_key: Ed25519PrivateKey,
        public_key: Ed25519PublicKey,
    ) -> None:
        nonce = os.urandom(12)
        encrypted = encrypt_for_mls(mls_secret, encode_payload(1), nonce)
        teos = create_mls_teos(aad, private_key, encrypted, nonce, include_public_key=False)
        assert teos.envelope.auth.public_key is None
        assert extract_mls_teos(teos, mls_secret, public_key) == 1
