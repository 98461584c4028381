# src/geojsonkit/parsing.py

"""
This module provides the member-level helpers shared by every GeoJSON object parser.

Parsers work on a private copy of the JSON object and consume it: each helper
pops the member it is responsible for, so whatever is left at the end is, by
construction, the set of foreign members.
"""

import copy
import logging
from typing import Any, Dict, Optional, Tuple, Union

from .errors import (
    InvalidIdentifierError,
    MissingMemberError,
    MissingTypeError,
    StructuralMismatchError,
)
from .jsonvalue import JsonObject, JsonValue, is_number, json_type_name

log = logging.getLogger(__name__)

__all__ = [
    "expect_object",
    "expect_array",
    "expect_type",
    "expect_member",
    "normalize_bbox",
    "get_bbox",
    "get_id",
    "normalize_id",
    "get_properties",
    "get_foreign_members",
    "normalize_foreign_members"
]

Bbox = Tuple[float, ...]
Identifier = Union[str, int, float]

def expect_object(value: JsonValue, member: str = "GeoJSON") -> JsonObject:
    if not isinstance(value, dict):
        raise StructuralMismatchError(member, "object", json_type_name(value))
    return value

def expect_array(value: JsonValue, member: str) -> Union[list, tuple]:
    if not isinstance(value, (list, tuple)):
        raise StructuralMismatchError(member, "array", json_type_name(value))
    return value

def expect_type(obj: JsonObject) -> str:
    """Pop the 'type' discriminator, which must be present and a string."""
    if "type" not in obj:
        raise MissingTypeError()
    type_name = obj.pop("type")
    if not isinstance(type_name, str):
        raise StructuralMismatchError("type", "string", json_type_name(type_name))
    return type_name

def expect_member(obj: JsonObject, member: str, owner: Optional[str] = None) -> JsonValue:
    if member not in obj:
        raise MissingMemberError(member, owner)
    return obj.pop(member)

def normalize_bbox(value: Any) -> Optional[Bbox]:
    """Validate a bbox as an array of numbers. Its length is not checked."""
    if value is None:
        return None
    expect_array(value, "bbox")
    items = []
    for item in value:
        if not is_number(item):
            raise StructuralMismatchError("bbox", "array of numbers", f"{json_type_name(item)} element")
        items.append(float(item))
    return tuple(items)

def get_bbox(obj: JsonObject) -> Optional[Bbox]:
    if "bbox" not in obj:
        return None
    value = obj.pop("bbox")
    if value is None:
        raise StructuralMismatchError("bbox", "array", "null")
    return normalize_bbox(value)

def normalize_id(value: Any) -> Optional[Identifier]:
    if value is None:
        return None
    if isinstance(value, str) or is_number(value):
        return value
    raise InvalidIdentifierError(value, json_type_name(value))

def get_id(obj: JsonObject) -> Optional[Identifier]:
    """
    Pop the Feature 'id'. Only JSON strings and numbers are identifiers; an
    explicit null is rejected like any other type.
    """
    if "id" not in obj:
        return None
    value = obj.pop("id")
    if value is None:
        raise InvalidIdentifierError(value, "null")
    return normalize_id(value)

def get_properties(obj: JsonObject) -> Optional[JsonObject]:
    """Pop 'properties'. Missing and null both mean "no properties"."""
    value = obj.pop("properties", None)
    if value is None:
        return None
    if not isinstance(value, dict):
        raise StructuralMismatchError("properties", "object or null", json_type_name(value))
    return value

def get_foreign_members(obj: JsonObject) -> Optional[JsonObject]:
    """Whatever is left in a consumed object. Empty means None."""
    if not obj:
        return None
    log.debug(f"Preserving foreign members: {list(obj.keys())}")
    return dict(obj)

def normalize_foreign_members(
    members: Optional[Dict[str, JsonValue]],
    reserved: Tuple[str, ...]
) -> Optional[JsonObject]:
    if not members:
        return None
    clashes = [key for key in members if key in reserved]
    if clashes:
        raise ValueError(f"Foreign members may not reuse reserved member names: {clashes}")
    return copy.deepcopy(dict(members))
