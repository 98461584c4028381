# src/geojsonkit/geometry.py

"""
This module defines the GeoJSON geometry model.

Each of the seven geometry kinds is a small immutable value class tagged with a
GeometryKind. A Geometry wraps one of those values together with the optional
bounding box and any foreign members found next to it in the document.
"""

import copy
import logging
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Sequence, Tuple, Type, Union

from .errors import CoordinateShapeError, ExpectedTypeError, UnknownTypeError
from .jsonvalue import JsonObject, JsonValue, decode, encode
from .parsing import (
    Bbox,
    expect_array,
    expect_member,
    expect_object,
    expect_type,
    get_bbox,
    get_foreign_members,
    normalize_bbox,
    normalize_foreign_members,
)
from .position import Position, coerce_positions

log = logging.getLogger(__name__)

__all__ = [
    "GeometryKind",
    "GeometryValue",
    "Point",
    "MultiPoint",
    "LineString",
    "MultiLineString",
    "Polygon",
    "MultiPolygon",
    "GeometryCollection",
    "Geometry"
]

class GeometryKind(Enum):
    """The seven geometry discriminators, valued by their wire names."""
    POINT = "Point"
    MULTI_POINT = "MultiPoint"
    LINE_STRING = "LineString"
    MULTI_LINE_STRING = "MultiLineString"
    POLYGON = "Polygon"
    MULTI_POLYGON = "MultiPolygon"
    GEOMETRY_COLLECTION = "GeometryCollection"

OBJECT_TYPES = ("Feature", "FeatureCollection")

class GeometryValue:
    """Base of the closed set of geometry value kinds."""
    __slots__ = ()
    kind: GeometryKind

    def payload(self) -> JsonObject:
        raise NotImplementedError

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self

class _CoordinateValue(GeometryValue):
    __slots__ = ("_coordinates",)
    depth: int

    def __init__(self, coordinates: Any):
        coords = coerce_positions(coordinates, self.depth, self.kind.value)
        self._check(coords)
        object.__setattr__(self, "_coordinates", coords)

    def _check(self, coords):
        pass

    @property
    def coordinates(self):
        return self._coordinates

    def payload(self) -> JsonObject:
        return {"coordinates": _to_lists(self._coordinates)}

    def __eq__(self, other):
        if not isinstance(other, _CoordinateValue):
            return NotImplemented
        return self.kind is other.kind and self._coordinates == other._coordinates

    def __hash__(self):
        return hash((self.kind, self._coordinates))

    def __reduce__(self):
        return (type(self), (_to_lists(self._coordinates),))

    def __repr__(self):
        return f"{type(self).__name__}({_to_lists(self._coordinates)!r})"

def _to_lists(nested):
    if isinstance(nested, Position):
        return list(nested)
    return [_to_lists(item) for item in nested]

def _check_rings(kind: str, rings: Sequence[Sequence[Position]], label: str = ""):
    for i, ring in enumerate(rings):
        if len(ring) == 0:
            raise CoordinateShapeError(kind, f"{label}ring {i} has no positions")

class Point(_CoordinateValue):
    __slots__ = ()
    kind = GeometryKind.POINT
    depth = 0

class MultiPoint(_CoordinateValue):
    __slots__ = ()
    kind = GeometryKind.MULTI_POINT
    depth = 1

class LineString(_CoordinateValue):
    """Any number of positions is accepted here; shapely conversion requires two."""
    __slots__ = ()
    kind = GeometryKind.LINE_STRING
    depth = 1

class MultiLineString(_CoordinateValue):
    __slots__ = ()
    kind = GeometryKind.MULTI_LINE_STRING
    depth = 2

class Polygon(_CoordinateValue):
    """
    A sequence of linear rings: the exterior first, then any holes.

    Rings are kept as given. Closure and winding order are not enforced.
    """
    __slots__ = ()
    kind = GeometryKind.POLYGON
    depth = 2

    def _check(self, coords):
        _check_rings(self.kind.value, coords)

    @property
    def exterior(self) -> Optional[Tuple[Position, ...]]:
        return self._coordinates[0] if self._coordinates else None

    @property
    def interiors(self) -> Tuple[Tuple[Position, ...], ...]:
        return self._coordinates[1:]

class MultiPolygon(_CoordinateValue):
    __slots__ = ()
    kind = GeometryKind.MULTI_POLYGON
    depth = 3

    def _check(self, coords):
        for i, polygon in enumerate(coords):
            _check_rings(self.kind.value, polygon, label=f"polygon {i} ")

class GeometryCollection(GeometryValue):
    """An ordered, possibly heterogeneous sequence of Geometry objects."""
    __slots__ = ("_geometries",)
    kind = GeometryKind.GEOMETRY_COLLECTION

    def __init__(self, geometries: Iterable[Union["Geometry", GeometryValue]] = ()):
        items = tuple(
            g if isinstance(g, Geometry) else Geometry(g)
            for g in geometries
        )
        object.__setattr__(self, "_geometries", items)

    @property
    def geometries(self) -> Tuple["Geometry", ...]:
        return self._geometries

    def payload(self) -> JsonObject:
        return {"geometries": [g.to_json_value() for g in self._geometries]}

    def __len__(self) -> int:
        return len(self._geometries)

    def __iter__(self):
        return iter(self._geometries)

    def __eq__(self, other):
        if not isinstance(other, GeometryCollection):
            return NotImplemented
        return self._geometries == other._geometries

    def __hash__(self):
        return hash((self.kind, len(self._geometries)))

    def __reduce__(self):
        return (GeometryCollection, (self._geometries,))

    def __repr__(self):
        return f"GeometryCollection({list(self._geometries)!r})"

VALUE_TYPES: Dict[GeometryKind, Type[GeometryValue]] = {
    GeometryKind.POINT: Point,
    GeometryKind.MULTI_POINT: MultiPoint,
    GeometryKind.LINE_STRING: LineString,
    GeometryKind.MULTI_LINE_STRING: MultiLineString,
    GeometryKind.POLYGON: Polygon,
    GeometryKind.MULTI_POLYGON: MultiPolygon,
    GeometryKind.GEOMETRY_COLLECTION: GeometryCollection,
}

_KINDS_BY_NAME = {kind.value: kind for kind in GeometryKind}

def kind_from_name(type_name: str) -> GeometryKind:
    """Resolve a wire discriminator to a GeometryKind."""
    kind = _KINDS_BY_NAME.get(type_name)
    if kind is not None:
        return kind
    if type_name in OBJECT_TYPES:
        raise ExpectedTypeError("Geometry", type_name)
    raise UnknownTypeError(type_name)

class Geometry:
    """
    A GeoJSON Geometry object.

    Attributes:
        value (GeometryValue): One of the seven geometry kinds.
        bbox (tuple | None): Bounding box, carried as given.
        foreign_members (dict | None): Unrecognized members, in document order.
    """
    __slots__ = ("_value", "_bbox", "_foreign_members")

    def __init__(
        self,
        value: GeometryValue,
        bbox: Optional[Sequence[float]] = None,
        foreign_members: Optional[Dict[str, JsonValue]] = None
    ):
        if not isinstance(value, GeometryValue):
            raise TypeError(f"Expected a GeometryValue, got {type(value)}")
        self._value = value
        self._bbox = normalize_bbox(bbox)
        reserved = ("type", "bbox", "geometries" if value.kind is GeometryKind.GEOMETRY_COLLECTION else "coordinates")
        self._foreign_members = normalize_foreign_members(foreign_members, reserved)

    @property
    def value(self) -> GeometryValue:
        return self._value

    @property
    def bbox(self) -> Optional[Bbox]:
        return self._bbox

    @property
    def foreign_members(self) -> Optional[JsonObject]:
        return self._foreign_members

    @property
    def kind(self) -> GeometryKind:
        return self._value.kind

    @property
    def type(self) -> str:
        return self._value.kind.value

    # --- Parsing ---

    @classmethod
    def from_json_value(cls, value: JsonValue) -> "Geometry":
        """Build a Geometry from a JSON value tree. The tree is copied, never shared."""
        return cls._from_object(copy.deepcopy(expect_object(value)))

    @classmethod
    def from_json(cls, text: Union[str, bytes]) -> "Geometry":
        return cls._from_object(expect_object(decode(text)))

    @classmethod
    def _from_object(cls, obj: JsonObject) -> "Geometry":
        kind = kind_from_name(expect_type(obj))
        bbox = get_bbox(obj)

        if kind is GeometryKind.GEOMETRY_COLLECTION:
            members = expect_array(expect_member(obj, "geometries", kind.value), "geometries")
            value = GeometryCollection(
                cls._from_object(expect_object(item, "geometries"))
                for item in members
            )
        else:
            value = VALUE_TYPES[kind](expect_member(obj, "coordinates", kind.value))

        geometry = cls.__new__(cls)
        geometry._value = value
        geometry._bbox = bbox
        geometry._foreign_members = get_foreign_members(obj)
        return geometry

    # --- Serialization ---

    def to_json_value(self) -> JsonObject:
        out: JsonObject = {"type": self.type}
        if self._bbox is not None:
            out["bbox"] = list(self._bbox)
        out.update(self._value.payload())
        if self._foreign_members:
            out.update(copy.deepcopy(self._foreign_members))
        return out

    def to_json(self, pretty: bool = False) -> str:
        return encode(self.to_json_value(), pretty=pretty)

    @property
    def __geo_interface__(self) -> JsonObject:
        return self.to_json_value()

    def __eq__(self, other):
        if not isinstance(other, Geometry):
            return NotImplemented
        return (
            self._value == other._value
            and self._bbox == other._bbox
            and self._foreign_members == other._foreign_members
        )

    __hash__ = None

    def __str__(self) -> str:
        return self.to_json()

    def __repr__(self) -> str:
        extras = ""
        if self._bbox is not None:
            extras += f", bbox={list(self._bbox)!r}"
        if self._foreign_members:
            extras += f", foreign_members={self._foreign_members!r}"
        return f"Geometry({self._value!r}{extras})"
