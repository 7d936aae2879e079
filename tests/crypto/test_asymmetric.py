"""Tests for RSA-OAEP transport encryption (hybrid_envelope/crypto/asymmetric.py)."""

from __future__ import annotations

import base64
import os

import pytest
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding

from hybrid_envelope.crypto import (
    OAEP_SHA256,
    OAEP_SHA256_MGF1_SHA1,
    AsymmetricCipher,
    decrypt_text,
    encrypt_text,
)
from hybrid_envelope.errors import CipherError, CodecError

WIRE_PADDING = padding.OAEP(
    mgf=padding.MGF1(algorithm=hashes.SHA1()),
    algorithm=hashes.SHA256(),
    label=None,
)


class TestAsymmetricCipher:
    def test_default_parameters_are_sha256_with_sha1_mgf(self) -> None:
        cipher = AsymmetricCipher()
        assert cipher == OAEP_SHA256_MGF1_SHA1
        assert cipher.digest is hashes.SHA256
        assert cipher.mgf_digest is hashes.SHA1

    def test_roundtrip_symmetric_key(self, rsa_keys) -> None:
        key = os.urandom(32)
        encrypted = OAEP_SHA256_MGF1_SHA1.encrypt(key, rsa_keys.public_key)
        assert len(encrypted) == 256
        assert OAEP_SHA256_MGF1_SHA1.decrypt(encrypted, rsa_keys.private_key) == key

    def test_encryption_is_randomized(self, rsa_keys) -> None:
        key = os.urandom(32)
        first = OAEP_SHA256_MGF1_SHA1.encrypt(key, rsa_keys.public_key)
        second = OAEP_SHA256_MGF1_SHA1.encrypt(key, rsa_keys.public_key)
        assert first != second

    def test_interoperates_with_direct_oaep_calls(self, rsa_keys) -> None:
        key = os.urandom(32)
        produced_elsewhere = rsa_keys.public_key.encrypt(key, WIRE_PADDING)
        assert OAEP_SHA256_MGF1_SHA1.decrypt(produced_elsewhere, rsa_keys.private_key) == key

        produced_here = OAEP_SHA256_MGF1_SHA1.encrypt(key, rsa_keys.public_key)
        assert rsa_keys.private_key.decrypt(produced_here, WIRE_PADDING) == key

    def test_mismatched_mgf_digest_fails(self, rsa_keys) -> None:
        encrypted = OAEP_SHA256_MGF1_SHA1.encrypt(os.urandom(32), rsa_keys.public_key)
        with pytest.raises(CipherError, match="asymmetric decryption failed"):
            OAEP_SHA256.decrypt(encrypted, rsa_keys.private_key)

    def test_wrong_private_key_fails(self, rsa_keys, other_rsa_keys) -> None:
        encrypted = OAEP_SHA256_MGF1_SHA1.encrypt(os.urandom(32), rsa_keys.public_key)
        with pytest.raises(CipherError, match="asymmetric decryption failed"):
            OAEP_SHA256_MGF1_SHA1.decrypt(encrypted, other_rsa_keys.private_key)

    def test_corrupted_ciphertext_fails_with_same_message(self, rsa_keys) -> None:
        encrypted = bytearray(OAEP_SHA256_MGF1_SHA1.encrypt(os.urandom(32), rsa_keys.public_key))
        encrypted[10] ^= 0x01
        with pytest.raises(CipherError, match="asymmetric decryption failed"):
            OAEP_SHA256_MGF1_SHA1.decrypt(bytes(encrypted), rsa_keys.private_key)

    def test_capacity_for_2048_bit_key(self, rsa_keys) -> None:
        assert OAEP_SHA256_MGF1_SHA1.max_payload_size(rsa_keys.public_key) == 190

    def test_payload_over_capacity_rejected(self, rsa_keys) -> None:
        with pytest.raises(CipherError, match="capacity"):
            OAEP_SHA256_MGF1_SHA1.encrypt(b"x" * 191, rsa_keys.public_key)

    def test_payload_at_capacity_accepted(self, rsa_keys) -> None:
        payload = b"y" * 190
        encrypted = OAEP_SHA256_MGF1_SHA1.encrypt(payload, rsa_keys.public_key)
        assert OAEP_SHA256_MGF1_SHA1.decrypt(encrypted, rsa_keys.private_key) == payload

    def test_rejects_non_rsa_keys(self, rsa_keys) -> None:
        with pytest.raises(CipherError):
            OAEP_SHA256_MGF1_SHA1.encrypt(b"key", rsa_keys.private_key)
        with pytest.raises(CipherError):
            OAEP_SHA256_MGF1_SHA1.decrypt(b"key", rsa_keys.public_key)


class TestTextHelpers:
    def test_roundtrip(self, rsa_keys) -> None:
        token = encrypt_text("short secret ✓", rsa_keys.public_key)
        assert base64.b64decode(token)
        assert decrypt_text(token, rsa_keys.private_key) == "short secret ✓"

    def test_default_is_sha256_for_both_digests(self, rsa_keys) -> None:
        token = encrypt_text("hello", rsa_keys.public_key)
        sha256_only = padding.OAEP(
            mgf=padding.MGF1(algorithm=hashes.SHA256()),
            algorithm=hashes.SHA256(),
            label=None,
        )
        assert rsa_keys.private_key.decrypt(base64.b64decode(token), sha256_only) == b"hello"

    def test_explicit_cipher_choice(self, rsa_keys) -> None:
        token = encrypt_text("hello", rsa_keys.public_key, cipher=OAEP_SHA256_MGF1_SHA1)
        assert decrypt_text(token, rsa_keys.private_key, cipher=OAEP_SHA256_MGF1_SHA1) == "hello"
        with pytest.raises(CipherError):
            decrypt_text(token, rsa_keys.private_key)

    def test_invalid_base64_token(self, rsa_keys) -> None:
        with pytest.raises(CodecError):
            decrypt_text("not base64!", rsa_keys.private_key)
