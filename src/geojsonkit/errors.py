# src/geojsonkit/errors.py

"""
This module defines the exception hierarchy raised while parsing, converting,
streaming and (de)serializing GeoJSON.

Two families hang off the common base:
- GeoJsonParseError: the input was not valid GeoJSON.
- GeometryConversionError: the input was valid GeoJSON, but its geometry cannot
  be turned into the requested shapely type.
"""

from typing import Any, Optional

__all__ = [
    "GeoJsonError",
    "GeoJsonParseError",
    "MalformedJsonError",
    "StructuralMismatchError",
    "MissingTypeError",
    "UnknownTypeError",
    "ExpectedTypeError",
    "MissingMemberError",
    "CoordinateShapeError",
    "InvalidIdentifierError",
    "GeometryConversionError",
    "GeometryKindMismatchError",
    "DegenerateGeometryError",
    "FeatureHasNoGeometryError",
    "CollectionMemberError",
    "FeatureDecodeError",
    "InvalidWriterStateError",
    "RecordError",
    "RecordDecodeError",
    "RecordEncodeError",
]

class GeoJsonError(ValueError):
    """Base class for every error raised by geojsonkit."""

# --- Parse family ---

class GeoJsonParseError(GeoJsonError):
    """The input could not be read as GeoJSON."""

class MalformedJsonError(GeoJsonParseError):
    """The JSON adapter rejected the text (syntax error, truncated input...)."""

class StructuralMismatchError(GeoJsonParseError):
    """A member holds a JSON value of the wrong JSON type."""

    def __init__(self, member: str, expected: str, actual: str):
        self.member = member
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Expected {expected} for '{member}', but found {actual}"
        )

class MissingTypeError(GeoJsonParseError):
    def __init__(self):
        super().__init__(
            "Expected a Feature, FeatureCollection, or Geometry, but the object has no 'type' member"
        )

class UnknownTypeError(GeoJsonParseError):
    """The 'type' member is a string, but not one of the nine GeoJSON types."""

    def __init__(self, type_name: str):
        self.type_name = type_name
        super().__init__(f"'{type_name}' is not recognized as a GeoJSON type")

class ExpectedTypeError(GeoJsonParseError):
    """The document is GeoJSON, but not the variant the caller asked for."""

    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Expected GeoJSON type '{expected}', found '{actual}'")

class MissingMemberError(GeoJsonParseError):
    def __init__(self, member: str, owner: Optional[str] = None):
        self.member = member
        self.owner = owner
        where = f" on '{owner}' object" if owner else ""
        super().__init__(f"Missing mandatory member '{member}'{where}")

class CoordinateShapeError(GeoJsonParseError):
    """Coordinates have the wrong arity or nesting for their geometry kind."""

    def __init__(self, kind: Optional[str], detail: str):
        self.kind = kind
        self.detail = detail
        prefix = f"Invalid coordinates for {kind}" if kind else "Invalid position"
        super().__init__(f"{prefix}: {detail}")

class InvalidIdentifierError(StructuralMismatchError):
    """A Feature 'id' that is neither a JSON string nor a JSON number."""

    def __init__(self, value: Any, actual: str):
        self.value = value
        super().__init__("id", "string or number", actual)

# --- Conversion family ---

class GeometryConversionError(GeoJsonError):
    """Valid GeoJSON that cannot be expressed as the requested shapely geometry."""

class GeometryKindMismatchError(GeometryConversionError):
    def __init__(self, expected: str, found: str):
        self.expected = expected
        self.found = found
        super().__init__(f"Expected type: '{expected}', but found '{found}'")

class DegenerateGeometryError(GeometryConversionError):
    def __init__(self, kind: str, detail: str):
        self.kind = kind
        self.detail = detail
        super().__init__(f"Cannot convert {kind}: {detail}")

class FeatureHasNoGeometryError(GeometryConversionError):
    def __init__(self, feature: Any):
        self.feature = feature
        super().__init__("Attempted to convert a Feature without a geometry")

class CollectionMemberError(GeometryConversionError):
    """Wraps the failure of one member of a GeometryCollection."""

    def __init__(self, index: int, cause: Exception):
        self.index = index
        self.cause = cause
        super().__init__(f"GeometryCollection member {index} failed to convert: {cause}")

# --- Streaming ---

class FeatureDecodeError(GeoJsonError):
    """One element of a streamed 'features' array failed to decode."""

    def __init__(self, index: int, cause: Exception):
        self.index = index
        self.cause = cause
        super().__init__(f"Feature at index {index} could not be decoded: {cause}")

class InvalidWriterStateError(GeoJsonError):
    pass

# --- Records ---

class RecordError(GeoJsonError):
    """Base class for failures mapping caller-defined records to or from Features."""

class RecordDecodeError(RecordError):
    pass

class RecordEncodeError(RecordError, TypeError):
    pass
