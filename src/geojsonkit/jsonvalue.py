# src/geojsonkit/jsonvalue.py

"""
This module is the boundary between geojsonkit and the JSON codec.

Text is tokenized by msgspec into plain Python values: dict (insertion ordered),
list, str, int, float, bool and None. The rest of the package only ever sees
that value tree.
"""

import logging
from typing import Any, Dict, List, Union

import msgspec

from .errors import MalformedJsonError

log = logging.getLogger(__name__)

__all__ = [
    "JsonValue",
    "JsonObject",
    "decode",
    "encode",
    "encode_bytes",
    "json_type_name",
    "is_number"
]

JsonValue = Union[Dict[str, Any], List[Any], str, int, float, bool, None]
JsonObject = Dict[str, JsonValue]

_decoder = msgspec.json.Decoder()
_encoder = msgspec.json.Encoder()

def decode(data: Union[str, bytes, bytearray, memoryview]) -> JsonValue:
    """
    Parse JSON text into a value tree.

    Raises:
        MalformedJsonError: If msgspec rejects the input or a string is not
            valid UTF-8. The message carries the byte offset reported by the decoder.
    """
    try:
        return _decoder.decode(data)
    except (msgspec.DecodeError, UnicodeDecodeError) as e:
        raise MalformedJsonError(f"Error while deserializing JSON: {e}") from e

def encode(value: JsonValue, pretty: bool = False) -> str:
    """
    Serialize a value tree to JSON text.

    NaN and infinite floats have no JSON form; msgspec writes them as null
    rather than raising, so such a value does not survive the round trip.

    Args:
        value: The tree to serialize.
        pretty: Indent the output with two spaces per level.
    """
    raw = _encoder.encode(value)
    if pretty:
        raw = msgspec.json.format(raw, indent=2)
    return raw.decode("utf-8")

def encode_bytes(value: JsonValue) -> bytes:
    return _encoder.encode(value)

def is_number(value: Any) -> bool:
    # bool is an int subclass but a distinct JSON type
    return isinstance(value, (int, float)) and not isinstance(value, bool)

def json_type_name(value: Any) -> str:
    """Name the JSON type of a value, as used in error messages."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if is_number(value):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__
