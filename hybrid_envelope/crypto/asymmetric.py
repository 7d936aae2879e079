"""RSA-OAEP transport encryption for symmetric keys."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from hybrid_envelope.crypto import codec
from hybrid_envelope.errors import CipherError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AsymmetricCipher:
    """RSA-OAEP with a configurable main digest and MGF1 digest.

    Both sides of an exchange must agree on the two digests; a mismatch
    surfaces as a decryption failure.
    """

    digest: type[hashes.HashAlgorithm] = hashes.SHA256
    mgf_digest: type[hashes.HashAlgorithm] = hashes.SHA1

    def _padding(self) -> padding.OAEP:
        return padding.OAEP(
            mgf=padding.MGF1(algorithm=self.mgf_digest()),
            algorithm=self.digest(),
            label=None,
        )

    def max_payload_size(self, public_key: rsa.RSAPublicKey) -> int:
        return public_key.key_size // 8 - 2 * self.digest.digest_size - 2

    def encrypt(self, payload: bytes, public_key: rsa.RSAPublicKey) -> bytes:
        if not isinstance(public_key, rsa.RSAPublicKey):
            raise CipherError("an RSA public key is required")
        if len(payload) > self.max_payload_size(public_key):
            raise CipherError("payload exceeds key capacity")
        try:
            return public_key.encrypt(payload, self._padding())
        except (TypeError, ValueError) as exc:
            logger.debug("asymmetric_encrypt_failed", extra={"error": type(exc).__name__})
            raise CipherError("asymmetric encryption failed") from exc

    def decrypt(self, encrypted: bytes, private_key: rsa.RSAPrivateKey) -> bytes:
        if not isinstance(private_key, rsa.RSAPrivateKey):
            raise CipherError("an RSA private key is required")
        try:
            return private_key.decrypt(encrypted, self._padding())
        except (TypeError, ValueError) as exc:
            logger.debug("asymmetric_decrypt_failed", extra={"error": type(exc).__name__})
            raise CipherError("asymmetric decryption failed") from exc


# SHA-1 here is an interoperability constraint of the envelope wire format,
# not a recommendation. Changing it breaks every existing peer.
OAEP_SHA256_MGF1_SHA1 = AsymmetricCipher(digest=hashes.SHA256, mgf_digest=hashes.SHA1)
OAEP_SHA256 = AsymmetricCipher(digest=hashes.SHA256, mgf_digest=hashes.SHA256)


def encrypt_text(
    message: str,
    public_key: rsa.RSAPublicKey,
    cipher: AsymmetricCipher = OAEP_SHA256,
) -> str:
    """Encrypt a short string directly with RSA and return base64 text."""
    return codec.encode_b64(cipher.encrypt(message.encode("utf-8"), public_key))


def decrypt_text(
    token: str,
    private_key: rsa.RSAPrivateKey,
    cipher: AsymmetricCipher = OAEP_SHA256,
) -> str:
    """Reverse :func:`encrypt_text`."""
    return codec.decode_utf8(cipher.decrypt(codec.decode_b64(token), private_key))
