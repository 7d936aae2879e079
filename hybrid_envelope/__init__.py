"""Hybrid RSA / AES envelope encryption."""

from importlib import metadata

from .errors import CipherError, CodecError, ConfigError, CryptoError, EnvelopeError, ValidationError
from .schemas import KeyMaterial, MessageEnvelope, ObjectEnvelope
from .services import EnvelopeService


def get_version() -> str:
    """Return package version, defaulting to dev if unavailable."""
    try:
        return metadata.version("hybrid-envelope")
    except metadata.PackageNotFoundError:  # pragma: no cover - running from a checkout
        return "0.0.0-dev"


__all__ = [
    "get_version",
    "EnvelopeService",
    "KeyMaterial",
    "MessageEnvelope",
    "ObjectEnvelope",
    "EnvelopeError",
    "ConfigError",
    "ValidationError",
    "CipherError",
    "CodecError",
    "CryptoError",
]
