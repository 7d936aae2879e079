"""Exception hierarchy for envelope encryption."""

from __future__ import annotations


class EnvelopeError(Exception):
    """Base class for every error raised by this package."""


class ConfigError(EnvelopeError):
    """Raised when key material is missing or cannot be loaded."""


class ValidationError(EnvelopeError, ValueError):
    """Raised when an operation receives a missing or mistyped argument.

    ``reason`` is ``"required"`` for missing values and ``"type"`` for values
    of the wrong type. ``field`` names the offending argument.
    """

    def __init__(self, reason: str, field: str | None = None) -> None:
        self.reason = reason
        self.field = field
        message = reason if field is None else f"{field}: {reason}"
        super().__init__(message)


class CipherError(EnvelopeError):
    """Raised when a symmetric or asymmetric primitive fails."""


class CodecError(EnvelopeError):
    """Raised when base64, JSON or UTF-8 transcoding fails."""


class CryptoError(EnvelopeError):
    """Raised at the service boundary when an encrypt or decrypt pipeline fails.

    The lower-level exception is chained as ``__cause__``.
    """


__all__ = [
    "EnvelopeError",
    "ConfigError",
    "ValidationError",
    "CipherError",
    "CodecError",
    "CryptoError",
]
