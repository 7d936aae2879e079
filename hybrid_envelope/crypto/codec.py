"""Base64 and JSON transcoding used by the envelope formats."""

from __future__ import annotations

import base64
import binascii
import json
from collections.abc import Mapping
from typing import Any

from pydantic_core import PydanticSerializationError, to_jsonable_python

from hybrid_envelope.errors import CodecError


def encode_b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def decode_b64(text: str) -> bytes:
    try:
        return base64.b64decode(text.encode("ascii"), validate=True)
    except (UnicodeEncodeError, binascii.Error) as exc:
        raise CodecError("invalid base64 input") from exc


def decode_utf8(data: bytes) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise CodecError("payload is not valid UTF-8") from exc


def to_jsonable(value: Any) -> Any:
    """Reduce values ``json`` cannot encode, at any nesting depth.

    Non-dict mappings become dicts; pydantic models, dataclasses and the
    other types pydantic knows are handed to its encoder.
    """
    if isinstance(value, Mapping):
        return dict(value)
    return to_jsonable_python(value)


def serialize(value: Any) -> bytes:
    """Serialize a structured value the way ``JSON.stringify`` does."""
    try:
        text = json.dumps(
            value,
            default=to_jsonable,
            separators=(",", ":"),
            ensure_ascii=False,
            allow_nan=False,
        )
    except (TypeError, ValueError, PydanticSerializationError) as exc:
        raise CodecError("value is not JSON serializable") from exc
    return text.encode("utf-8")


def deserialize(data: bytes) -> Any:
    try:
        return json.loads(decode_utf8(data))
    except json.JSONDecodeError as exc:
        raise CodecError("payload is not valid JSON") from exc
