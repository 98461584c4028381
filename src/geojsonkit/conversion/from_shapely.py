# src/geojsonkit/conversion/from_shapely.py

"""
This module converts shapely geometries into GeoJSON geometries.

Every shapely geometry GeoJSON can express converts; LinearRing becomes a
LineString. A polygon is written as [exterior, *interiors], so a polygon
without holes produces a single ring.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

import shapely
from shapely.geometry.base import BaseGeometry

from ..errors import (
    CollectionMemberError,
    CoordinateShapeError,
    DegenerateGeometryError,
    GeometryConversionError,
)
from ..feature import Feature
from ..geometry import (
    Geometry,
    GeometryCollection,
    GeometryValue,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
)
from ..parsing import Identifier

log = logging.getLogger(__name__)

__all__ = [
    "from_shapely",
    "value_from_shapely",
    "feature_from_shapely",
    "from_line",
    "from_triangle",
    "from_rect"
]

def _positions(geom: BaseGeometry) -> List[List[float]]:
    return shapely.get_coordinates(geom, include_z=geom.has_z).tolist()

def _rings(polygon: shapely.Polygon) -> List[List[List[float]]]:
    if polygon.is_empty:
        return []
    return [_positions(polygon.exterior)] + [_positions(ring) for ring in polygon.interiors]

def value_from_shapely(geom: BaseGeometry) -> GeometryValue:
    """
    Convert a shapely geometry into the matching bare geometry value.

    Raises:
        DegenerateGeometryError: The geometry has no GeoJSON counterpart
            (an empty Point) or carries non-finite coordinates.
        CollectionMemberError: A GeometryCollection member failed to convert.
    """
    if not isinstance(geom, BaseGeometry):
        raise TypeError(f"Expected a shapely geometry, got {type(geom)}")

    geom_type = geom.geom_type
    try:
        if geom_type == "Point":
            if geom.is_empty:
                raise DegenerateGeometryError("Point", "an empty point has no GeoJSON representation")
            return Point(_positions(geom)[0])

        if geom_type in ("LineString", "LinearRing"):
            return LineString(_positions(geom))

        if geom_type == "Polygon":
            return Polygon(_rings(geom))

        if geom_type == "MultiPoint":
            return MultiPoint([_positions(p)[0] for p in geom.geoms])

        if geom_type == "MultiLineString":
            return MultiLineString([_positions(line) for line in geom.geoms])

        if geom_type == "MultiPolygon":
            return MultiPolygon([_rings(p) for p in geom.geoms])
    except CoordinateShapeError as e:
        raise DegenerateGeometryError(geom_type, e.detail) from e

    if geom_type == "GeometryCollection":
        members = []
        for i, member in enumerate(geom.geoms):
            try:
                members.append(Geometry(value_from_shapely(member)))
            except GeometryConversionError as e:
                raise CollectionMemberError(i, e) from e
        return GeometryCollection(members)

    raise DegenerateGeometryError(geom_type, "unsupported shapely geometry type")

def from_shapely(geom: Any) -> Geometry:
    """
    Wrap a shapely geometry, or any object exposing __geo_interface__, as a Geometry.

    Args:
        geom: shapely geometry or geo-interface object.

    Returns:
        Geometry: A new Geometry without bbox or foreign members.
    """
    if isinstance(geom, BaseGeometry):
        return Geometry(value_from_shapely(geom))
    if hasattr(geom, "__geo_interface__"):
        log.debug(f"Converting {type(geom).__name__} through __geo_interface__")
        return Geometry.from_json_value(geom.__geo_interface__)
    raise TypeError(f"Expected a shapely geometry, got {type(geom)}")

def feature_from_shapely(
    geom: Optional[BaseGeometry],
    properties: Optional[Dict[str, Any]] = None,
    id: Optional[Identifier] = None
) -> Feature:
    """Build a Feature around a shapely geometry. None gives a Feature without geometry."""
    geometry = from_shapely(geom) if geom is not None else None
    return Feature(geometry=geometry, properties=properties, id=id)

def from_line(start: Sequence[float], end: Sequence[float]) -> Geometry:
    """A two-position LineString from a line segment."""
    return Geometry(LineString([start, end]))

def from_triangle(a: Sequence[float], b: Sequence[float], c: Sequence[float]) -> Geometry:
    """A single-ring Polygon [a, b, c, a] from a triangle."""
    return Geometry(Polygon([[a, b, c, a]]))

def from_rect(min_xy: Sequence[float], max_xy: Sequence[float]) -> Geometry:
    """
    A single-ring counter-clockwise Polygon from an axis-aligned rectangle,
    starting at (max_x, min_y).
    """
    min_x, min_y = min_xy[0], min_xy[1]
    max_x, max_y = max_xy[0], max_xy[1]
    if min_x > max_x or min_y > max_y:
        raise ValueError(f"Rectangle minimum {tuple(min_xy)} exceeds maximum {tuple(max_xy)}")
    return from_shapely(shapely.box(min_x, min_y, max_x, max_y, ccw=True))
