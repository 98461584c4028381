# tests/unit/test_conversion.py

import pytest
import shapely
from shapely.geometry import box

from geojsonkit import (
    CollectionMemberError,
    DegenerateGeometryError,
    Feature,
    FeatureCollection,
    FeatureHasNoGeometryError,
    Geometry,
    GeometryCollection,
    GeometryConversionError,
    GeometryKind,
    GeometryKindMismatchError,
    LineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
    UnknownTypeError,
    feature_from_shapely,
    from_line,
    from_rect,
    from_shapely,
    from_triangle,
    quick_collection,
    to_shapely,
)

from helpers import assert_coords_match

# --- GeoJSON -> shapely ---

def test_point_to_shapely(point_json):
    geom = to_shapely(Geometry.from_json_value(point_json))
    assert isinstance(geom, shapely.Point)
    assert (geom.x, geom.y) == (102.0, 0.5)

def test_point_z_carried():
    geom = to_shapely(Point([1, 2, 3]))
    assert geom.has_z
    assert geom.z == 3.0

def test_polygon_with_hole(polygon_json):
    geom = to_shapely(Geometry.from_json_value(polygon_json))
    assert isinstance(geom, shapely.Polygon)
    assert len(geom.interiors) == 1
    assert geom.area == pytest.approx(100.0 - 4.0)

def test_open_ring_is_closed_by_conversion():
    geom = to_shapely(Polygon([[[0, 0], [1, 0], [1, 1], [0, 1]]]))
    coords = list(geom.exterior.coords)
    assert coords[0] == coords[-1]

def test_mixed_dimensions_drop_z():
    geom = to_shapely(LineString([[0, 0, 5], [1, 1]]))
    assert not geom.has_z
    assert_coords_match(geom, [[0, 0], [1, 1]])

def test_all_3d_keeps_z():
    geom = to_shapely(LineString([[0, 0, 5], [1, 1, 6]]))
    assert geom.has_z
    assert_coords_match(geom, [[0, 0, 5], [1, 1, 6]])

def test_line_string_needs_two_positions():
    with pytest.raises(DegenerateGeometryError) as rec:
        to_shapely(LineString([[0, 0]]))
    assert rec.value.kind == "LineString"

def test_ring_too_short():
    with pytest.raises(DegenerateGeometryError):
        to_shapely(Polygon([[[0, 0], [1, 1]]]))

def test_empty_geometries():
    assert to_shapely(MultiPoint([])).is_empty
    assert to_shapely(Polygon([])).is_empty
    assert to_shapely(GeometryCollection([])).is_empty

def test_geometry_collection_members():
    gc = GeometryCollection([Point([0, 0]), LineString([[0, 0], [1, 1]])])
    geom = to_shapely(gc)
    assert isinstance(geom, shapely.GeometryCollection)
    assert [g.geom_type for g in geom.geoms] == ["Point", "LineString"]

def test_geometry_collection_member_failure_reports_index():
    gc = GeometryCollection([Point([0, 0]), LineString([[0, 0]])])
    with pytest.raises(CollectionMemberError) as rec:
        to_shapely(gc)
    assert rec.value.index == 1
    assert isinstance(rec.value.cause, DegenerateGeometryError)

def test_kind_mismatch():
    with pytest.raises(GeometryKindMismatchError) as rec:
        to_shapely(Point([0, 0]), kind=shapely.Polygon)
    assert rec.value.expected == "Polygon"
    assert rec.value.found == "Point"

def test_kind_accepted_as_enum_or_name(polygon_json):
    g = Geometry.from_json_value(polygon_json)
    assert isinstance(to_shapely(g, kind=GeometryKind.POLYGON), shapely.Polygon)
    assert isinstance(to_shapely(g, kind="Polygon"), shapely.Polygon)

def test_unknown_kind_name():
    with pytest.raises(UnknownTypeError):
        to_shapely(Point([0, 0]), kind="Wat")

def test_multipolygon_member_without_rings():
    square = [[[0, 0], [1, 0], [1, 1], [0, 1], [0, 0]]]
    with pytest.raises(DegenerateGeometryError):
        to_shapely(MultiPolygon([square, []]))

def test_conversion_errors_are_separate_from_parse_errors():
    with pytest.raises(GeometryConversionError):
        to_shapely(Point([0, 0]), kind=shapely.LineString)

def test_feature_without_geometry():
    with pytest.raises(FeatureHasNoGeometryError):
        to_shapely(Feature())

def test_feature_converts_its_geometry(feature_json):
    geom = to_shapely(Feature.from_json_value(feature_json))
    assert isinstance(geom, shapely.Point)

def test_quick_collection_skips_missing_geometry(collection_json):
    fc = FeatureCollection.from_json_value(collection_json)
    gc = quick_collection(fc)
    assert isinstance(gc, shapely.GeometryCollection)
    assert len(gc.geoms) == 2
    assert to_shapely(fc) == gc

def test_quick_collection_of_single_geometry(point_json):
    gc = quick_collection(Geometry.from_json_value(point_json))
    assert len(gc.geoms) == 1

def test_to_shapely_does_not_modify_input(polygon_json):
    g = Geometry.from_json_value(polygon_json)
    before = g.to_json_value()
    to_shapely(g)
    assert g.to_json_value() == before

# --- shapely -> GeoJSON ---

def test_point_from_shapely():
    g = from_shapely(shapely.Point(1, 2))
    assert g.value == Point([1, 2])
    assert g.bbox is None and g.foreign_members is None

def test_polygon_without_holes_has_one_ring():
    g = from_shapely(box(0, 0, 1, 1))
    assert g.kind is GeometryKind.POLYGON
    assert len(g.value.coordinates) == 1

def test_polygon_round_trip_adds_closure():
    """An open ring comes back closed; the ring count is unchanged."""
    src = Polygon([[[0, 0], [1, 0], [1, 1], [0, 1]]])
    back = from_shapely(to_shapely(src)).value
    assert len(back.coordinates) == 1
    assert len(back.exterior) == 5
    assert back.exterior[0] == back.exterior[-1]

def test_polygon_round_trip_closed(polygon_json):
    g = Geometry.from_json_value(polygon_json)
    assert from_shapely(to_shapely(g)) == g

def test_linear_ring_becomes_line_string():
    ring = shapely.LinearRing([(0, 0), (1, 0), (1, 1)])
    g = from_shapely(ring)
    assert g.kind is GeometryKind.LINE_STRING
    assert len(g.value.coordinates) == 4

def test_3d_from_shapely():
    g = from_shapely(shapely.LineString([(0, 0, 1), (1, 1, 2)]))
    assert g.value.coordinates[1] == (1.0, 1.0, 2.0)

def test_multi_kinds_from_shapely():
    mp = from_shapely(shapely.MultiPoint([(0, 0), (1, 1)]))
    ml = from_shapely(shapely.MultiLineString([[(0, 0), (1, 1)], [(2, 2), (3, 3)]]))
    mpoly = from_shapely(shapely.MultiPolygon([box(0, 0, 1, 1), box(2, 2, 3, 3)]))
    assert mp.type == "MultiPoint" and len(mp.value.coordinates) == 2
    assert ml.type == "MultiLineString" and len(ml.value.coordinates) == 2
    assert mpoly.type == "MultiPolygon" and len(mpoly.value.coordinates) == 2

def test_geometry_collection_from_shapely():
    gc = shapely.GeometryCollection([shapely.Point(0, 0), box(0, 0, 1, 1)])
    g = from_shapely(gc)
    assert [m.type for m in g.value.geometries] == ["Point", "Polygon"]

def test_empty_point_has_no_geojson_form():
    with pytest.raises(DegenerateGeometryError):
        from_shapely(shapely.Point())

def test_from_shapely_rejects_other_objects():
    with pytest.raises(TypeError):
        from_shapely("POINT (0 0)")

def test_from_shapely_accepts_geo_interface(point_json):
    class Site:
        __geo_interface__ = point_json

    assert from_shapely(Site()).type == "Point"

def test_feature_from_shapely():
    f = feature_from_shapely(shapely.Point(1, 1), properties={"a": 1}, id="x")
    assert f.id == "x"
    assert f.geometry.type == "Point"
    assert feature_from_shapely(None).geometry is None

# --- Convenience shapes ---

def test_from_line():
    g = from_line((0, 0), (3, 4))
    assert g.value == LineString([[0, 0], [3, 4]])

def test_from_triangle_is_closed():
    g = from_triangle((0, 0), (1, 0), (0, 1))
    assert g.value.coordinates == ((
        (0.0, 0.0), (1.0, 0.0), (0.0, 1.0), (0.0, 0.0)
    ),)

def test_from_rect_ring_order():
    g = from_rect((0, 0), (2, 1))
    assert g.value.exterior == (
        (2.0, 0.0), (2.0, 1.0), (0.0, 1.0), (0.0, 0.0), (2.0, 0.0)
    )

def test_from_rect_rejects_inverted_bounds():
    with pytest.raises(ValueError):
        from_rect((2, 2), (0, 0))
