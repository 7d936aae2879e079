"""Hybrid RSA-OAEP / AES-CBC envelope service."""

from __future__ import annotations

import dataclasses
import logging
from contextlib import contextmanager
from typing import Any, Iterator, Mapping, TypeVar

from cryptography.hazmat.primitives.asymmetric import rsa
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from hybrid_envelope.config import Settings, get_settings
from hybrid_envelope.crypto import OAEP_SHA256_MGF1_SHA1, AsymmetricCipher, KeyPair, SymmetricCipher, codec
from hybrid_envelope.crypto.keys import MIN_KEY_SIZE
from hybrid_envelope.errors import ConfigError, CryptoError, EnvelopeError, ValidationError
from hybrid_envelope.schemas import KeyMaterial, MessageEnvelope, ObjectEnvelope

logger = logging.getLogger("hybrid_envelope.audit")

ModelT = TypeVar("ModelT", bound=BaseModel)

_BYTES_LIKE = (bytes, bytearray, memoryview)


def _is_structured(value: Any) -> bool:
    if isinstance(value, (Mapping, list, tuple, BaseModel)):
        return True
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


def _require_text(value: Any, field: str) -> str:
    if value is None or value == "":
        raise ValidationError("required", field)
    if not isinstance(value, str):
        raise ValidationError("type", field)
    return value


def _require_binary(value: Any, field: str) -> bytes | str:
    if value is None or (isinstance(value, (str, *_BYTES_LIKE)) and len(value) == 0):
        raise ValidationError("required", field)
    if isinstance(value, str):
        return value
    if not isinstance(value, _BYTES_LIKE):
        raise ValidationError("type", field)
    return bytes(value)


def _require_model(model: Any) -> None:
    if model is not None and not (isinstance(model, type) and issubclass(model, BaseModel)):
        raise ValidationError("type", "model")


class EnvelopeService:
    """Encrypt and decrypt payloads for a single RSA key pair.

    The object path returns raw bytes for same-ecosystem round trips. The
    message path base64-encodes every part and is the interoperable wire
    form: RSA-OAEP(SHA-256, MGF1 SHA-1) over a fresh AES-256 key, a fresh
    16-byte IV, and AES-256-CBC/PKCS#7 ciphertext.

    CBC carries no MAC. Most bit flips in an IV or ciphertext surface as a
    padding or decoding failure, but some decrypt to altered plaintext
    without any error.
    """

    def __init__(
        self,
        keys: KeyMaterial | KeyPair | Mapping[str, Any] | None,
        *,
        allow_partial: bool = False,
        min_key_size: int = MIN_KEY_SIZE,
        symmetric: SymmetricCipher | None = None,
        asymmetric: AsymmetricCipher | None = None,
    ) -> None:
        self._keys = self._load_keys(keys, allow_partial=allow_partial, min_key_size=min_key_size)
        self._symmetric = symmetric or SymmetricCipher()
        self._asymmetric = asymmetric or OAEP_SHA256_MGF1_SHA1

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "EnvelopeService":
        try:
            settings = settings or get_settings()
        except PydanticValidationError as exc:
            raise ConfigError("invalid envelope settings") from exc
        return cls(
            settings.key_material(),
            allow_partial=settings.allow_partial_keys,
            min_key_size=settings.min_key_size,
        )

    @staticmethod
    def _load_keys(
        keys: KeyMaterial | KeyPair | Mapping[str, Any] | None,
        *,
        allow_partial: bool,
        min_key_size: int,
    ) -> KeyPair:
        if keys is None:
            raise ConfigError("key material is required")

        if isinstance(keys, KeyPair):
            has_public, has_private = keys.public_key is not None, keys.private_key is not None
        else:
            if isinstance(keys, Mapping):
                try:
                    keys = KeyMaterial.model_validate(keys)
                except PydanticValidationError as exc:
                    raise ConfigError("invalid key material") from exc
            if not isinstance(keys, KeyMaterial):
                raise ConfigError("unsupported key material")
            has_public, has_private = bool(keys.public_key), bool(keys.private_key)

        if allow_partial:
            if not (has_public or has_private):
                raise ConfigError("publicKey or privateKey is required")
        elif not has_public:
            raise ConfigError("publicKey is required")
        elif not has_private:
            raise ConfigError("privateKey is required")

        if isinstance(keys, KeyPair):
            pair = keys
        else:
            pair = KeyPair.from_encoded(
                public_key=keys.public_key,
                private_key=keys.private_key,
                private_key_password=keys.private_key_password,
                min_key_size=min_key_size,
            )

        if pair.is_complete and not pair.matches():
            logger.warning("key_pair_mismatch", extra={"key_size": pair.public_key.key_size})
        return pair

    @property
    def can_encrypt(self) -> bool:
        return self._keys.public_key is not None

    @property
    def can_decrypt(self) -> bool:
        return self._keys.private_key is not None

    def _public_key(self) -> rsa.RSAPublicKey:
        if self._keys.public_key is None:
            raise ConfigError("service has no public key configured")
        return self._keys.public_key

    def _private_key(self) -> rsa.RSAPrivateKey:
        if self._keys.private_key is None:
            raise ConfigError("service has no private key configured")
        return self._keys.private_key

    @contextmanager
    def _failure_domain(self, operation: str, message: str) -> Iterator[None]:
        try:
            yield
        except (EnvelopeError, ValueError) as exc:
            logger.warning("envelope_operation_failed", extra={"operation": operation, "error": type(exc).__name__})
            raise CryptoError(message) from exc

    def encrypt_object(self, value: Any) -> ObjectEnvelope:
        """Serialize ``value`` as JSON and seal it in a raw-bytes envelope."""
        if value is None:
            raise ValidationError("required", "value")
        if not _is_structured(value):
            raise ValidationError("type", "value")
        public_key = self._public_key()

        with self._failure_domain("encrypt_object", "unable to encrypt object"):
            secret, ciphertext = self._symmetric.encrypt(codec.serialize(value))
            encrypted_key = self._asymmetric.encrypt(secret.key, public_key)

        logger.debug("object_encrypted", extra={"ciphertext_size": len(ciphertext)})
        return ObjectEnvelope(encrypted_key=encrypted_key, iv=secret.iv, ciphertext=ciphertext)

    def decrypt_object(
        self,
        encrypted_key: bytes | str,
        iv: bytes | str,
        ciphertext: bytes | str,
        *,
        model: type[ModelT] | None = None,
    ) -> Any:
        """Open an object envelope.

        Fields may be raw bytes or their base64 text. When ``model`` is a
        pydantic model class the decoded JSON is validated into it.
        """
        parts = {
            "encrypted_key": _require_binary(encrypted_key, "encrypted_key"),
            "iv": _require_binary(iv, "iv"),
            "ciphertext": _require_binary(ciphertext, "ciphertext"),
        }
        _require_model(model)
        private_key = self._private_key()

        with self._failure_domain("decrypt_object", "unable to decrypt object"):
            raw = {name: codec.decode_b64(part) if isinstance(part, str) else part for name, part in parts.items()}
            key = self._asymmetric.decrypt(raw["encrypted_key"], private_key)
            value = codec.deserialize(self._symmetric.decrypt(key, raw["iv"], raw["ciphertext"]))
            if model is not None:
                value = model.model_validate(value)

        logger.debug("object_decrypted", extra={"ciphertext_size": len(raw["ciphertext"])})
        return value

    def open_object(self, envelope: ObjectEnvelope, *, model: type[ModelT] | None = None) -> Any:
        if envelope is None:
            raise ValidationError("required", "envelope")
        if not isinstance(envelope, ObjectEnvelope):
            raise ValidationError("type", "envelope")
        return self.decrypt_object(envelope.encrypted_key, envelope.iv, envelope.ciphertext, model=model)

    def encrypt_message(self, message: str) -> MessageEnvelope:
        """Encrypt a string into the base64 wire envelope."""
        if message is None:
            raise ValidationError("required", "message")
        if not isinstance(message, str):
            raise ValidationError("type", "message")
        public_key = self._public_key()

        with self._failure_domain("encrypt_message", "unable to encrypt message"):
            secret, ciphertext = self._symmetric.encrypt(message.encode("utf-8"))
            encrypted_key = self._asymmetric.encrypt(secret.key, public_key)

        logger.debug("message_encrypted", extra={"ciphertext_size": len(ciphertext)})
        return MessageEnvelope(
            encrypted_key=codec.encode_b64(encrypted_key),
            iv=codec.encode_b64(secret.iv),
            message=codec.encode_b64(ciphertext),
        )

    def decrypt_message(self, encrypted_key: str, iv: str, message: str) -> str:
        """Open a base64 wire envelope and return the plaintext string."""
        encrypted_key = _require_text(encrypted_key, "encrypted_key")
        iv = _require_text(iv, "iv")
        message = _require_text(message, "message")
        private_key = self._private_key()

        with self._failure_domain("decrypt_message", "unable to decrypt message"):
            key = self._asymmetric.decrypt(codec.decode_b64(encrypted_key), private_key)
            plaintext = self._symmetric.decrypt(key, codec.decode_b64(iv), codec.decode_b64(message))
            text = codec.decode_utf8(plaintext)

        logger.debug("message_decrypted", extra={"plaintext_size": len(plaintext)})
        return text

    def open_message(self, envelope: MessageEnvelope) -> str:
        if envelope is None:
            raise ValidationError("required", "envelope")
        if not isinstance(envelope, MessageEnvelope):
            raise ValidationError("type", "envelope")
        return self.decrypt_message(envelope.encrypted_key, envelope.iv, envelope.message)
