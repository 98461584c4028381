# tests/integration/test_stream_pipeline.py

import json

import msgspec
import shapely

from geojsonkit import (
    Feature,
    FeatureReader,
    FeatureWriter,
    ReaderConfig,
    deserialize_feature_collection,
    feature_from_shapely,
    read_file,
    to_feature_collection_writer,
    to_geodataframe,
    to_shapely,
)

class Parcel(msgspec.Struct):
    geometry: shapely.Polygon
    owner: str
    zone: str

def test_filter_and_buffer_pipeline(tmp_path, collection_factory):
    """
    Simulates a standard streaming workflow:
    1. Read a FeatureCollection from disk one feature at a time.
    2. Keep every other site and buffer it with shapely.
    3. Stream the results to a new FeatureCollection file.
    4. Read the whole output back as a document.
    """
    src = collection_factory(
        "sites.geojson",
        n=50,
        leading_members={"name": "sites", "crs": {"type": "name", "properties": {"name": "CRS84"}}}
    )
    dst = tmp_path / "buffered.geojson"

    with FeatureReader.from_path(src, ReaderConfig(chunk_size=256)) as reader:
        with FeatureWriter.from_path(dst) as writer:
            for feature in reader:
                if feature.get_property("index") % 2:
                    continue
                buffered = to_shapely(feature).buffer(0.5)
                writer.write_feature(
                    feature_from_shapely(buffered, properties=feature.properties, id=feature.id)
                )

    assert writer.count == 25
    result = read_file(dst)
    assert [f.id for f in result] == list(range(0, 50, 2))
    assert all(f.geometry.type == "Polygon" for f in result)
    assert to_shapely(result[1]).contains(shapely.Point(2, -2))

def test_corrupt_feature_does_not_stop_the_stream(tmp_path):
    """One bad element surfaces as an error while its neighbours still decode."""
    path = tmp_path / "mixed.geojson"
    good = {"type": "Feature", "geometry": {"type": "Point", "coordinates": [0, 0]}, "properties": {}}
    bad = {"type": "Feature", "geometry": {"type": "Point", "coordinates": [0, 0, 0, 0]}, "properties": {}}
    path.write_text(json.dumps({"type": "FeatureCollection", "features": [good, bad, good]}))

    with FeatureReader.from_path(path) as reader:
        items = list(reader)

    assert [isinstance(item, Feature) for item in items] == [True, False, True]
    assert items[1].index == 1

def test_records_pipeline(tmp_path):
    """
    Records written with the collection helpers come back as records,
    and convert to a GeoDataFrame for tabular analysis.
    """
    parcels = [
        Parcel(geometry=shapely.box(i, 0, i + 1, 2), owner=f"owner-{i}", zone="A" if i < 3 else "B")
        for i in range(5)
    ]
    path = tmp_path / "parcels.geojson"
    with open(path, "wb") as fh:
        assert to_feature_collection_writer(fh, parcels) == 5

    with open(path, "rb") as fh:
        loaded = list(deserialize_feature_collection(fh, Parcel))

    assert [p.owner for p in loaded] == [p.owner for p in parcels]
    assert all(p.geometry.area == 2.0 for p in loaded)

    gdf = to_geodataframe(read_file(path))
    assert gdf.groupby("zone").geometry.count().to_dict() == {"A": 3, "B": 2}
