"""Shared fixtures for the envelope test suite.

RSA key generation is slow, so key pairs are created once per session and
handed to tests both as key objects and as base64-encoded PEM text.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from hybrid_envelope import EnvelopeService, KeyMaterial


@dataclass(frozen=True)
class EncodedKeys:
    private_key: rsa.RSAPrivateKey
    public_key: rsa.RSAPublicKey
    public_b64: str
    private_b64: str
    public_pem: str
    private_pem: str


def _encode(private_key: rsa.RSAPrivateKey) -> EncodedKeys:
    public_key = private_key.public_key()
    public_pem = public_key.public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )
    return EncodedKeys(
        private_key=private_key,
        public_key=public_key,
        public_b64=base64.b64encode(public_pem).decode(),
        private_b64=base64.b64encode(private_pem).decode(),
        public_pem=public_pem.decode(),
        private_pem=private_pem.decode(),
    )


@pytest.fixture(scope="session")
def rsa_keys() -> EncodedKeys:
    return _encode(rsa.generate_private_key(public_exponent=65537, key_size=2048))


@pytest.fixture(scope="session")
def other_rsa_keys() -> EncodedKeys:
    return _encode(rsa.generate_private_key(public_exponent=65537, key_size=2048))


@pytest.fixture
def key_material(rsa_keys: EncodedKeys) -> KeyMaterial:
    return KeyMaterial(public_key=rsa_keys.public_b64, private_key=rsa_keys.private_b64)


@pytest.fixture
def service(key_material: KeyMaterial) -> EnvelopeService:
    return EnvelopeService(key_material)
