"""Load RSA key pairs from base64-encoded PEM text."""

from __future__ import annotations

from dataclasses import dataclass

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from hybrid_envelope.crypto import codec
from hybrid_envelope.errors import CodecError, ConfigError

MIN_KEY_SIZE = 2048

_PEM_MARKER = b"-----BEGIN"


def _pem_bytes(encoded: str, label: str) -> bytes:
    """Accept base64 of a PEM document, or the PEM document itself.

    Base64 input may be line-wrapped, as ``base64`` writes it by default.
    """
    raw = encoded.strip().encode("utf-8")
    if raw.startswith(_PEM_MARKER):
        return raw
    try:
        pem = codec.decode_b64("".join(encoded.split()))
    except CodecError as exc:
        raise ConfigError(f"{label} is not valid base64") from exc
    if not pem.lstrip().startswith(_PEM_MARKER):
        raise ConfigError(f"{label} does not decode to a PEM document")
    return pem


def _check_size(key_size: int, label: str, min_key_size: int) -> None:
    if key_size < min_key_size:
        raise ConfigError(f"{label} must be at least {min_key_size} bits")


def load_public_key(encoded: str, *, min_key_size: int = MIN_KEY_SIZE) -> rsa.RSAPublicKey:
    pem = _pem_bytes(encoded, "public key")
    try:
        key = serialization.load_pem_public_key(pem)
    except (ValueError, UnsupportedAlgorithm) as exc:
        raise ConfigError("public key could not be parsed") from exc
    if not isinstance(key, rsa.RSAPublicKey):
        raise ConfigError("public key is not an RSA key")
    _check_size(key.key_size, "public key", min_key_size)
    return key


def load_private_key(
    encoded: str,
    *,
    password: str | None = None,
    min_key_size: int = MIN_KEY_SIZE,
) -> rsa.RSAPrivateKey:
    pem = _pem_bytes(encoded, "private key")
    secret = password.encode("utf-8") if password is not None else None
    try:
        key = serialization.load_pem_private_key(pem, password=secret)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise ConfigError("private key could not be parsed") from exc
    if not isinstance(key, rsa.RSAPrivateKey):
        raise ConfigError("private key is not an RSA key")
    _check_size(key.key_size, "private key", min_key_size)
    return key


@dataclass(frozen=True, slots=True)
class KeyPair:
    """Immutable RSA key pair; either side may be absent for one-way use."""

    public_key: rsa.RSAPublicKey | None
    private_key: rsa.RSAPrivateKey | None

    @classmethod
    def from_encoded(
        cls,
        *,
        public_key: str | None,
        private_key: str | None,
        private_key_password: str | None = None,
        min_key_size: int = MIN_KEY_SIZE,
    ) -> "KeyPair":
        public = load_public_key(public_key, min_key_size=min_key_size) if public_key else None
        private = (
            load_private_key(private_key, password=private_key_password, min_key_size=min_key_size)
            if private_key
            else None
        )
        return cls(public_key=public, private_key=private)

    @property
    def is_complete(self) -> bool:
        return self.public_key is not None and self.private_key is not None

    def matches(self) -> bool:
        """Return True when the public key belongs to the private key."""
        if not self.is_complete:
            return False
        return self.private_key.public_key().public_numbers() == self.public_key.public_numbers()

    def __repr__(self) -> str:
        key = self.public_key or self.private_key
        size = key.key_size if key is not None else None
        return (
            f"KeyPair(key_size={size}, public={self.public_key is not None}, "
            f"private={self.private_key is not None})"
        )
