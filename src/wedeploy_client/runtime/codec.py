"""
JSON encoding and decoding for request and response bodies.

Query documents are encoded compactly and without key sorting: the key order
built by the query builder is part of the wire format.
"""

from __future__ import annotations
import json
from typing import Any, Optional, Type, Union

from pydantic import TypeAdapter, ValidationError

from .errors import DecodeError, EncodingError


def encode_json(obj: Any) -> bytes:
    """
    Encode an object as compact UTF-8 JSON.

    Raises:
        EncodingError: If the object is not JSON serializable
    """
    try:
        return json.dumps(obj, separators=(',', ':'), ensure_ascii=False, allow_nan=False).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise EncodingError(f"Failed to encode JSON: {e}") from e


def decode_json(data: Union[bytes, str], cls: Optional[Type[Any]] = None) -> Any:
    """
    Decode a JSON document, optionally validating it into ``cls``.

    ``cls`` can be anything pydantic understands: a model, a dataclass, a
    TypedDict or a plain container type such as ``dict[str, int]``.

    Raises:
        DecodeError: If the payload is not JSON or does not fit ``cls``
    """
    try:
        value = json.loads(data)
    except (TypeError, ValueError) as e:
        raise DecodeError(f"Invalid JSON: {e}") from e

    if cls is None:
        return value

    try:
        return TypeAdapter(cls).validate_python(value)
    except ValidationError as e:
        raise DecodeError(f"JSON does not match {getattr(cls, '__name__', cls)}") from e


__all__ = ["encode_json", "decode_json"]
