# tests/helpers.py

import json

import numpy as np
import shapely

def assert_same_json(text_a, text_b):
    """Check that two JSON documents decode to the same value tree, member order included."""
    a = json.loads(text_a)
    b = json.loads(text_b)
    assert a == b, f"JSON mismatch:\n{a}\n!=\n{b}"
    if isinstance(a, dict):
        assert list(a) == list(b), f"Member order mismatch: {list(a)} != {list(b)}"

def assert_coords_match(geom, expected, atol: float = 1e-12):
    """Compare a shapely geometry's coordinates against a nested list of positions."""
    actual = shapely.get_coordinates(geom, include_z=geom.has_z)
    assert np.allclose(actual, np.asarray(expected, dtype=float), atol=atol), \
        f"Coordinate mismatch: {actual.tolist()} != {expected}"

def point_feature(i: int) -> dict:
    return {
        "type": "Feature",
        "geometry": {"type": "Point", "coordinates": [float(i), float(i)]},
        "properties": {"index": i}
    }
