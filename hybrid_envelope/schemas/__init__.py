"""Pydantic schema exports."""

from .envelope import KeyMaterial, MessageEnvelope, ObjectEnvelope

__all__ = [
    "KeyMaterial",
    "MessageEnvelope",
    "ObjectEnvelope",
]
