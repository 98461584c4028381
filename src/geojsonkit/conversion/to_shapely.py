# src/geojsonkit/conversion/to_shapely.py

"""
This module converts GeoJSON geometries into shapely geometries.

Converting to shapely's generic geometry (BaseGeometry) always succeeds for a
parsed Geometry, apart from semantic minimums the GeoJSON model does not enforce
(a LineString needs two positions, a polygon ring needs enough positions to close).
Asking for one specific shapely type is partial and fails with a kind mismatch.
"""

import logging
from typing import Dict, Optional, Sequence, Type, Union

import numpy as np
import shapely
from shapely.errors import GEOSException
from shapely.geometry.base import BaseGeometry

from ..errors import (
    CollectionMemberError,
    DegenerateGeometryError,
    FeatureHasNoGeometryError,
    GeometryConversionError,
    GeometryKindMismatchError,
)
from ..feature import Feature, FeatureCollection
from ..geometry import Geometry, GeometryKind, GeometryValue, kind_from_name
from ..position import Position

log = logging.getLogger(__name__)

__all__ = [
    "SHAPELY_TYPES",
    "to_shapely",
    "quick_collection"
]

SHAPELY_TYPES: Dict[GeometryKind, Type[BaseGeometry]] = {
    GeometryKind.POINT: shapely.Point,
    GeometryKind.MULTI_POINT: shapely.MultiPoint,
    GeometryKind.LINE_STRING: shapely.LineString,
    GeometryKind.MULTI_LINE_STRING: shapely.MultiLineString,
    GeometryKind.POLYGON: shapely.Polygon,
    GeometryKind.MULTI_POLYGON: shapely.MultiPolygon,
    GeometryKind.GEOMETRY_COLLECTION: shapely.GeometryCollection,
}

_KINDS_BY_SHAPELY_TYPE = {cls: kind for kind, cls in SHAPELY_TYPES.items()}

Convertible = Union[Geometry, GeometryValue, Feature, FeatureCollection]

def _coord_array(positions: Sequence[Position]) -> np.ndarray:
    """Stack positions into an (n, 2) or (n, 3) array. z survives only if every position has one."""
    if not positions:
        return np.empty((0, 2), dtype=float)
    if all(p.has_z for p in positions):
        return np.array(positions, dtype=float)
    if any(p.has_z for p in positions):
        log.debug("Mixed 2D/3D positions in one coordinate array; dropping z")
    return np.array([p[:2] for p in positions], dtype=float)

def _line_string(positions: Sequence[Position], kind: str = "LineString") -> shapely.LineString:
    if len(positions) < 2:
        raise DegenerateGeometryError(
            kind, f"a LineString needs at least 2 positions, got {len(positions)}"
        )
    return shapely.LineString(_coord_array(positions))

def _polygon(rings: Sequence[Sequence[Position]], kind: str = "Polygon") -> shapely.Polygon:
    if not rings:
        return shapely.Polygon()
    try:
        return shapely.Polygon(
            _coord_array(rings[0]),
            [_coord_array(ring) for ring in rings[1:]]
        )
    except (ValueError, GEOSException) as e:
        raise DegenerateGeometryError(kind, str(e)) from e

def _convert_value(value: GeometryValue) -> BaseGeometry:
    kind = value.kind

    if kind is GeometryKind.POINT:
        return shapely.Point(*value.coordinates)

    if kind is GeometryKind.MULTI_POINT:
        if not value.coordinates:
            return shapely.MultiPoint()
        return shapely.MultiPoint(_coord_array(value.coordinates))

    if kind is GeometryKind.LINE_STRING:
        return _line_string(value.coordinates)

    if kind is GeometryKind.MULTI_LINE_STRING:
        return shapely.MultiLineString(
            [_line_string(line, kind.value) for line in value.coordinates]
        )

    if kind is GeometryKind.POLYGON:
        return _polygon(value.coordinates)

    if kind is GeometryKind.MULTI_POLYGON:
        # shapely drops empty members, which would lose a polygon
        if any(not rings for rings in value.coordinates):
            raise DegenerateGeometryError(kind.value, "a member polygon has no rings")
        return shapely.MultiPolygon(
            [_polygon(rings, kind.value) for rings in value.coordinates]
        )

    if kind is GeometryKind.GEOMETRY_COLLECTION:
        members = []
        for i, member in enumerate(value.geometries):
            try:
                members.append(_convert_value(member.value))
            except GeometryConversionError as e:
                raise CollectionMemberError(i, e) from e
        return shapely.GeometryCollection(members)

    raise GeometryConversionError(f"Unhandled geometry kind: {kind}")

def _expected_kind(target: Union[Type[BaseGeometry], GeometryKind, str]) -> Optional[GeometryKind]:
    if target is None or target is BaseGeometry:
        return None
    if isinstance(target, GeometryKind):
        return target
    if isinstance(target, str):
        return kind_from_name(target)
    kind = _KINDS_BY_SHAPELY_TYPE.get(target)
    if kind is None:
        raise TypeError(f"Unsupported shapely target type: {target}")
    return kind

def to_shapely(
    obj: Convertible,
    kind: Optional[Union[Type[BaseGeometry], GeometryKind, str]] = None
) -> BaseGeometry:
    """
    Convert a GeoJSON object into a shapely geometry.

    Args:
        obj: A Geometry or bare geometry value, a Feature (its geometry is
             converted), or a FeatureCollection (see quick_collection).
        kind: Optional expected result, as a shapely class (shapely.Polygon),
              a GeometryKind or a wire name ("Polygon"). None or BaseGeometry
              accept any kind.

    Returns:
        BaseGeometry: An independent shapely geometry. The input is not modified.

    Raises:
        GeometryKindMismatchError: The geometry is not of the requested kind.
        FeatureHasNoGeometryError: A Feature without geometry was given.
        DegenerateGeometryError: The coordinates break a shapely minimum.
        CollectionMemberError: A GeometryCollection member failed to convert.
    """
    if isinstance(obj, FeatureCollection):
        result = quick_collection(obj)
    else:
        if isinstance(obj, Feature):
            if obj.geometry is None:
                raise FeatureHasNoGeometryError(obj)
            value = obj.geometry.value
        elif isinstance(obj, Geometry):
            value = obj.value
        elif isinstance(obj, GeometryValue):
            value = obj
        else:
            raise TypeError(f"Expected Geometry, Feature or FeatureCollection, got {type(obj)}")

        expected = _expected_kind(kind)
        if expected is not None and expected is not value.kind:
            raise GeometryKindMismatchError(expected.value, value.kind.value)
        return _convert_value(value)

    expected = _expected_kind(kind)
    if expected is not None and expected is not GeometryKind.GEOMETRY_COLLECTION:
        raise GeometryKindMismatchError(expected.value, GeometryKind.GEOMETRY_COLLECTION.value)
    return result

def quick_collection(obj: Convertible) -> shapely.GeometryCollection:
    """
    Collapse any GeoJSON object into a single shapely GeometryCollection.

    Features without a geometry are skipped.
    """
    if isinstance(obj, FeatureCollection):
        geometries = [f.geometry for f in obj if f.geometry is not None]
    elif isinstance(obj, Feature):
        geometries = [obj.geometry] if obj.geometry is not None else []
    elif isinstance(obj, Geometry):
        geometries = [obj]
    elif isinstance(obj, GeometryValue):
        geometries = [Geometry(obj)]
    else:
        raise TypeError(f"Expected Geometry, Feature or FeatureCollection, got {type(obj)}")

    members = []
    for i, geometry in enumerate(geometries):
        try:
            members.append(_convert_value(geometry.value))
        except GeometryConversionError as e:
            raise CollectionMemberError(i, e) from e
    return shapely.GeometryCollection(members)
