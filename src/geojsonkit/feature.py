# src/geojsonkit/feature.py

"""
This module defines the Feature and FeatureCollection objects.

Absent and null 'geometry' / 'properties' members are both read as None and
written back as an explicit null, so the two spellings parse to equal Features.
"""

import copy
import logging
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from .errors import ExpectedTypeError, StructuralMismatchError
from .geometry import Geometry, GeometryValue, kind_from_name
from .jsonvalue import JsonObject, JsonValue, decode, encode, json_type_name
from .parsing import (
    Bbox,
    Identifier,
    expect_array,
    expect_member,
    expect_object,
    expect_type,
    get_bbox,
    get_foreign_members,
    get_id,
    get_properties,
    normalize_bbox,
    normalize_foreign_members,
    normalize_id,
)

log = logging.getLogger(__name__)

__all__ = [
    "Feature",
    "FeatureCollection"
]

FEATURE_MEMBERS = ("type", "id", "bbox", "geometry", "properties")
COLLECTION_MEMBERS = ("type", "bbox", "features")

def _check_type(obj: JsonObject, expected: str) -> None:
    type_name = expect_type(obj)
    if type_name == expected:
        return
    if type_name in ("Feature", "FeatureCollection"):
        raise ExpectedTypeError(expected, type_name)
    # raises UnknownTypeError for anything that is not a geometry kind either
    kind_from_name(type_name)
    raise ExpectedTypeError(expected, type_name)

def get_geometry(obj: JsonObject) -> Optional[Geometry]:
    """Pop a Feature's 'geometry'. Missing and null both mean "no geometry"."""
    value = obj.pop("geometry", None)
    if value is None:
        return None
    if not isinstance(value, dict):
        raise StructuralMismatchError("geometry", "object or null", json_type_name(value))
    return Geometry._from_object(value)

class Feature:
    """
    A GeoJSON Feature: an optional geometry with an optional identifier and
    an optional property map.

    Attributes:
        geometry (Geometry | None): The feature's geometry.
        properties (dict | None): Arbitrary JSON object, None when absent or null.
        id (str | int | float | None): Identifier, None when absent.
        bbox (tuple | None): Bounding box, carried as given.
        foreign_members (dict | None): Unrecognized members, in document order.
    """
    __slots__ = ("_geometry", "_properties", "_id", "_bbox", "_foreign_members")

    def __init__(
        self,
        geometry: Optional[Union[Geometry, GeometryValue]] = None,
        properties: Optional[Dict[str, JsonValue]] = None,
        id: Optional[Identifier] = None,
        bbox: Optional[Sequence[float]] = None,
        foreign_members: Optional[Dict[str, JsonValue]] = None
    ):
        if isinstance(geometry, GeometryValue):
            geometry = Geometry(geometry)
        elif geometry is not None and not isinstance(geometry, Geometry):
            raise TypeError(f"Expected Geometry or GeometryValue, got {type(geometry)}")
        if properties is not None and not isinstance(properties, dict):
            raise StructuralMismatchError("properties", "object or null", json_type_name(properties))

        self._geometry = geometry
        self._properties = copy.deepcopy(properties)
        self._id = normalize_id(id)
        self._bbox = normalize_bbox(bbox)
        self._foreign_members = normalize_foreign_members(foreign_members, FEATURE_MEMBERS)

    @property
    def geometry(self) -> Optional[Geometry]:
        return self._geometry

    @property
    def properties(self) -> Optional[JsonObject]:
        return self._properties

    @property
    def id(self) -> Optional[Identifier]:
        return self._id

    @property
    def bbox(self) -> Optional[Bbox]:
        return self._bbox

    @property
    def foreign_members(self) -> Optional[JsonObject]:
        return self._foreign_members

    # --- Property accessors ---

    def get_property(self, key: str, default: Any = None) -> Any:
        if self._properties is None:
            return default
        return self._properties.get(key, default)

    def contains_property(self, key: str) -> bool:
        return self._properties is not None and key in self._properties

    def properties_iter(self) -> Iterator[Tuple[str, JsonValue]]:
        if self._properties is None:
            return iter(())
        return iter(self._properties.items())

    def len_properties(self) -> int:
        return len(self._properties) if self._properties is not None else 0

    # --- Parsing ---

    @classmethod
    def from_json_value(cls, value: JsonValue) -> "Feature":
        """Build a Feature from a JSON value tree. The tree is copied, never shared."""
        return cls._from_object(copy.deepcopy(expect_object(value)))

    @classmethod
    def from_json(cls, text: Union[str, bytes]) -> "Feature":
        return cls._from_object(expect_object(decode(text)))

    @classmethod
    def _from_object(cls, obj: JsonObject) -> "Feature":
        _check_type(obj, "Feature")
        feature = cls.__new__(cls)
        feature._id = get_id(obj)
        feature._bbox = get_bbox(obj)
        feature._geometry = get_geometry(obj)
        feature._properties = get_properties(obj)
        feature._foreign_members = get_foreign_members(obj)
        return feature

    # --- Serialization ---

    def to_json_value(self) -> JsonObject:
        out: JsonObject = {"type": "Feature"}
        if self._id is not None:
            out["id"] = self._id
        if self._bbox is not None:
            out["bbox"] = list(self._bbox)
        out["geometry"] = self._geometry.to_json_value() if self._geometry is not None else None
        out["properties"] = copy.deepcopy(self._properties)
        if self._foreign_members:
            out.update(copy.deepcopy(self._foreign_members))
        return out

    def to_json(self, pretty: bool = False) -> str:
        return encode(self.to_json_value(), pretty=pretty)

    @property
    def __geo_interface__(self) -> JsonObject:
        return self.to_json_value()

    def __eq__(self, other):
        if not isinstance(other, Feature):
            return NotImplemented
        return (
            self._geometry == other._geometry
            and self._properties == other._properties
            and self._id == other._id
            and type(self._id) is type(other._id)
            and self._bbox == other._bbox
            and self._foreign_members == other._foreign_members
        )

    __hash__ = None

    def __str__(self) -> str:
        return self.to_json()

    def __repr__(self) -> str:
        return (
            f"Feature(geometry={self._geometry!r}, properties={self._properties!r}, "
            f"id={self._id!r})"
        )

class FeatureCollection:
    """
    An ordered sequence of Features. Behaves as a read-only sequence.

    Attributes:
        features (tuple[Feature, ...]): Features in document order.
        bbox (tuple | None): Bounding box, carried as given.
        foreign_members (dict | None): Unrecognized members, in document order.
    """
    __slots__ = ("_features", "_bbox", "_foreign_members")

    def __init__(
        self,
        features: Iterable[Feature] = (),
        bbox: Optional[Sequence[float]] = None,
        foreign_members: Optional[Dict[str, JsonValue]] = None
    ):
        items = tuple(features)
        for f in items:
            if not isinstance(f, Feature):
                raise TypeError(f"Expected Feature, got {type(f)}")
        self._features = items
        self._bbox = normalize_bbox(bbox)
        self._foreign_members = normalize_foreign_members(foreign_members, COLLECTION_MEMBERS)

    @property
    def features(self) -> Tuple[Feature, ...]:
        return self._features

    @property
    def bbox(self) -> Optional[Bbox]:
        return self._bbox

    @property
    def foreign_members(self) -> Optional[JsonObject]:
        return self._foreign_members

    def __len__(self) -> int:
        return len(self._features)

    def __iter__(self) -> Iterator[Feature]:
        return iter(self._features)

    def __getitem__(self, index):
        return self._features[index]

    # --- Parsing ---

    @classmethod
    def from_json_value(cls, value: JsonValue) -> "FeatureCollection":
        """Build a FeatureCollection from a JSON value tree. The tree is copied, never shared."""
        return cls._from_object(copy.deepcopy(expect_object(value)))

    @classmethod
    def from_json(cls, text: Union[str, bytes]) -> "FeatureCollection":
        return cls._from_object(expect_object(decode(text)))

    @classmethod
    def _from_object(cls, obj: JsonObject) -> "FeatureCollection":
        _check_type(obj, "FeatureCollection")
        bbox = get_bbox(obj)
        members = expect_array(expect_member(obj, "features", "FeatureCollection"), "features")
        features: List[Feature] = [
            Feature._from_object(expect_object(item, "features"))
            for item in members
        ]
        collection = cls.__new__(cls)
        collection._features = tuple(features)
        collection._bbox = bbox
        collection._foreign_members = get_foreign_members(obj)
        return collection

    # --- Serialization ---

    def to_json_value(self) -> JsonObject:
        out: JsonObject = {"type": "FeatureCollection"}
        if self._bbox is not None:
            out["bbox"] = list(self._bbox)
        out["features"] = [f.to_json_value() for f in self._features]
        if self._foreign_members:
            out.update(copy.deepcopy(self._foreign_members))
        return out

    def to_json(self, pretty: bool = False) -> str:
        return encode(self.to_json_value(), pretty=pretty)

    @property
    def __geo_interface__(self) -> JsonObject:
        return self.to_json_value()

    def __eq__(self, other):
        if not isinstance(other, FeatureCollection):
            return NotImplemented
        return (
            self._features == other._features
            and self._bbox == other._bbox
            and self._foreign_members == other._foreign_members
        )

    __hash__ = None

    def __str__(self) -> str:
        return self.to_json()

    def __repr__(self) -> str:
        return f"<FeatureCollection features={len(self._features)}>"
