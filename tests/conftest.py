# tests/conftest.py

import io
import json

import pytest

@pytest.fixture
def point_json():
    """A 2D Point geometry document."""
    return {"type": "Point", "coordinates": [102.0, 0.5]}

@pytest.fixture
def polygon_json():
    """A square Polygon with one square hole."""
    return {
        "type": "Polygon",
        "coordinates": [
            [[0.0, 0.0], [10.0, 0.0], [10.0, 10.0], [0.0, 10.0], [0.0, 0.0]],
            [[2.0, 2.0], [4.0, 2.0], [4.0, 4.0], [2.0, 4.0], [2.0, 2.0]]
        ]
    }

@pytest.fixture
def feature_json(point_json):
    """A Feature with an id, properties and one foreign member."""
    return {
        "type": "Feature",
        "id": "tree-1",
        "geometry": point_json,
        "properties": {"species": "Abies", "height": 12.5},
        "surveyed_by": "field-team-3"
    }

@pytest.fixture
def collection_json(feature_json, polygon_json):
    """A FeatureCollection with three features, one without geometry."""
    return {
        "type": "FeatureCollection",
        "features": [
            feature_json,
            {
                "type": "Feature",
                "id": 2,
                "geometry": polygon_json,
                "properties": {"species": "Picea", "height": 8.0}
            },
            {"type": "Feature", "geometry": None, "properties": None}
        ]
    }

@pytest.fixture
def collection_bytes(collection_json):
    return json.dumps(collection_json).encode("utf-8")

@pytest.fixture
def collection_stream(collection_bytes):
    """Binary stream over a FeatureCollection document."""
    return io.BytesIO(collection_bytes)

@pytest.fixture
def collection_factory(tmp_path):
    """
    Factory fixture: writes a FeatureCollection of n point features to disk.
    Feature i sits at (i, -i) and carries {"index": i, "name": "site-i"}.
    """
    def _create(filename="points.geojson", n=10, leading_members=None):
        doc = dict(leading_members or {})
        doc["type"] = "FeatureCollection"
        doc["features"] = [
            {
                "type": "Feature",
                "id": i,
                "geometry": {"type": "Point", "coordinates": [float(i), float(-i)]},
                "properties": {"index": i, "name": f"site-{i}"}
            }
            for i in range(n)
        ]
        path = tmp_path / filename
        path.write_text(json.dumps(doc), encoding="utf-8")
        return path

    return _create
