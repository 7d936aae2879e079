"""AES-256-CBC helper producing a one-time key and IV per call."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Callable

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from hybrid_envelope.errors import CipherError

logger = logging.getLogger(__name__)

BLOCK_SIZE_BITS = algorithms.AES.block_size


@dataclass(frozen=True, slots=True)
class SymmetricSecret:
    """Key and IV used for exactly one encryption."""

    key: bytes
    iv: bytes

    def __repr__(self) -> str:
        return "SymmetricSecret(key=<redacted>, iv=<redacted>)"


@dataclass
class SymmetricCipher:
    """Encrypt arbitrary payloads with AES-256-CBC and PKCS#7 padding.

    ``entropy`` must be a cryptographically secure source; it is only
    replaced in tests that pin known-answer vectors.
    """

    entropy: Callable[[int], bytes] = field(default=os.urandom, repr=False)

    KEY_SIZE = 32
    IV_SIZE = 16

    def generate_secret(self) -> SymmetricSecret:
        try:
            key = self.entropy(self.KEY_SIZE)
            iv = self.entropy(self.IV_SIZE)
        except (OSError, NotImplementedError) as exc:
            raise CipherError("random source unavailable") from exc
        if len(key) != self.KEY_SIZE or len(iv) != self.IV_SIZE:
            raise CipherError("random source returned short output")
        return SymmetricSecret(key=bytes(key), iv=bytes(iv))

    def encrypt(self, plaintext: bytes) -> tuple[SymmetricSecret, bytes]:
        secret = self.generate_secret()
        try:
            padder = padding.PKCS7(BLOCK_SIZE_BITS).padder()
            padded = padder.update(plaintext) + padder.finalize()
            encryptor = Cipher(algorithms.AES(secret.key), modes.CBC(secret.iv)).encryptor()
            ciphertext = encryptor.update(padded) + encryptor.finalize()
        except (TypeError, ValueError) as exc:
            logger.debug("symmetric_encrypt_failed", extra={"error": type(exc).__name__})
            raise CipherError("symmetric encryption failed") from exc
        return secret, ciphertext

    def decrypt(self, key: bytes, iv: bytes, ciphertext: bytes) -> bytes:
        # One message for every failure so callers cannot tell padding errors apart.
        if len(key) != self.KEY_SIZE or len(iv) != self.IV_SIZE:
            logger.debug("symmetric_decrypt_failed", extra={"error": "length"})
            raise CipherError("symmetric decryption failed")
        try:
            decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
            padded = decryptor.update(ciphertext) + decryptor.finalize()
            unpadder = padding.PKCS7(BLOCK_SIZE_BITS).unpadder()
            return unpadder.update(padded) + unpadder.finalize()
        except (TypeError, ValueError) as exc:
            logger.debug("symmetric_decrypt_failed", extra={"error": type(exc).__name__})
            raise CipherError("symmetric decryption failed") from exc
