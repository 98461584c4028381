# tests/unit/test_records.py

import io
import json
from dataclasses import dataclass
from typing import Optional

import msgspec
import pytest
import shapely

from geojsonkit import (
    Feature,
    FeatureDecodeError,
    Geometry,
    MsgspecRecordCodec,
    Point,
    ReaderConfig,
    RecordDecodeError,
    RecordEncodeError,
    deserialize_feature_collection,
    deserialize_feature_collection_str_to_list,
    deserialize_feature_collection_to_list,
    deserialize_features_from_feature_collection,
    deserialize_single_feature,
    from_feature,
    to_feature,
    to_feature_collection_string,
    to_feature_collection_writer,
    to_feature_string,
    to_feature_writer,
)
from geojsonkit.records import RecordCodec

class Site(msgspec.Struct):
    geometry: shapely.Point
    name: str
    population: int

class MaybeSite(msgspec.Struct):
    name: str
    geometry: Optional[shapely.Point] = None

@dataclass
class Plot:
    geometry: Geometry
    label: str

class Keyed(msgspec.Struct):
    key: str
    geometry: Point
    kind: str

def _site_feature(name="Quebec", population=550000, coords=(-71.2, 46.8)):
    return Feature(
        geometry=Point(list(coords)),
        properties={"name": name, "population": population}
    )

# --- Decoding ---

def test_decode_struct_with_shapely_geometry():
    site = from_feature(_site_feature(), Site)
    assert isinstance(site.geometry, shapely.Point)
    assert (site.geometry.x, site.geometry.y) == (-71.2, 46.8)
    assert site.name == "Quebec"
    assert site.population == 550000

def test_decode_dataclass_with_geometry_field():
    feature = Feature(geometry=Point([1, 2]), properties={"label": "A"})
    plot = from_feature(feature, Plot)
    assert plot.geometry == Geometry(Point([1, 2]))
    assert plot.label == "A"

def test_decode_optional_geometry_missing():
    record = from_feature(Feature(properties={"name": "nowhere"}), MaybeSite)
    assert record.geometry is None

def test_decode_required_geometry_missing():
    with pytest.raises(RecordDecodeError):
        from_feature(Feature(properties={"name": "x", "population": 1}), Site)

def test_decode_wrong_geometry_kind():
    feature = Feature(
        geometry=Geometry.from_json_value({"type": "LineString", "coordinates": [[0, 0], [1, 1]]}),
        properties={"name": "road", "population": 0}
    )
    with pytest.raises(RecordDecodeError, match="Point"):
        from_feature(feature, Site)

def test_decode_missing_property():
    feature = Feature(geometry=Point([0, 0]), properties={"name": "x"})
    with pytest.raises(RecordDecodeError, match="population"):
        from_feature(feature, Site)

def test_decode_validation_error_is_chained():
    feature = Feature(geometry=Point([0, 0]), properties={"name": "x", "population": "many"})
    with pytest.raises(RecordDecodeError) as rec:
        from_feature(feature, Site)
    assert isinstance(rec.value.__cause__, msgspec.ValidationError)

def test_lax_codec_coerces_strings():
    feature = Feature(geometry=Point([0, 0]), properties={"name": "x", "population": "12"})
    site = from_feature(feature, Site, codec=MsgspecRecordCodec(strict=False))
    assert site.population == 12

def test_custom_fields_and_id():
    codec = MsgspecRecordCodec(geometry_field="geometry", id_field="key")
    feature = Feature(geometry=Point([3, 4]), properties={"kind": "well"}, id="w-1")
    record = codec.decode(feature, Keyed)
    assert record.key == "w-1"
    assert record.geometry == Point([3, 4])

def test_id_field_must_differ():
    with pytest.raises(ValueError):
        MsgspecRecordCodec(geometry_field="geom", id_field="geom")

# --- Encoding ---

def test_encode_struct():
    site = Site(geometry=shapely.Point(1, 2), name="A", population=3)
    feature = to_feature(site)
    assert feature.geometry == Geometry(Point([1, 2]))
    assert feature.properties == {"name": "A", "population": 3}
    assert feature.id is None

def test_encode_dataclass():
    feature = to_feature(Plot(geometry=Geometry(Point([5, 6])), label="B"))
    assert feature.geometry.value == Point([5, 6])
    assert feature.properties == {"label": "B"}

def test_encode_with_id_field():
    codec = MsgspecRecordCodec(id_field="key")
    feature = codec.encode(Keyed(key="k9", geometry=Point([0, 0]), kind="x"))
    assert feature.id == "k9"
    assert "key" not in feature.properties

def test_encode_optional_geometry_none():
    feature = to_feature(MaybeSite(name="nowhere"))
    assert feature.geometry is None
    assert feature.properties == {"name": "nowhere"}

def test_encode_unsupported_field():
    class Opaque:
        pass

    @dataclass
    class Bad:
        geometry: Geometry
        blob: Opaque

    with pytest.raises(RecordEncodeError):
        to_feature(Bad(geometry=Geometry(Point([0, 0])), blob=Opaque()))

def test_encode_error_is_a_type_error():
    with pytest.raises(TypeError):
        to_feature([1, 2, 3])

def test_encode_non_geometry_field():
    @dataclass
    class Wrong:
        geometry: str

    with pytest.raises(RecordEncodeError):
        to_feature(Wrong(geometry="POINT (0 0)"))

def test_record_round_trip():
    site = Site(geometry=shapely.Point(10, 20), name="Montreal", population=1_700_000)
    again = from_feature(to_feature(site), Site)
    assert again.name == site.name
    assert again.population == site.population
    assert again.geometry.equals(site.geometry)

# --- Single Feature Helpers ---

def test_to_feature_string():
    text = to_feature_string(Site(geometry=shapely.Point(1, 1), name="x", population=1))
    out = json.loads(text)
    assert list(out) == ["type", "geometry", "properties"]

def test_deserialize_single_feature_from_text_and_stream():
    text = _site_feature().to_json()
    assert deserialize_single_feature(text, Site).name == "Quebec"
    assert deserialize_single_feature(io.BytesIO(text.encode()), Site).population == 550000

def test_to_feature_writer():
    stream = io.StringIO()
    to_feature_writer(stream, Site(geometry=shapely.Point(1, 1), name="x", population=1))
    assert Feature.from_json(stream.getvalue()).get_property("name") == "x"

# --- Collection Helpers ---

def _collection_text(n=3):
    sites = [Site(geometry=shapely.Point(i, i), name=f"s{i}", population=i) for i in range(n)]
    return to_feature_collection_string(sites)

def test_collection_string_round_trip():
    sites = deserialize_feature_collection_str_to_list(_collection_text(3), Site)
    assert [s.name for s in sites] == ["s0", "s1", "s2"]

def test_deserialize_feature_collection_is_lazy():
    records = deserialize_feature_collection(io.BytesIO(_collection_text(5).encode()), Site)
    assert next(records).name == "s0"
    assert len(list(records)) == 4

def test_to_list_raises_on_first_bad_record():
    text = (
        '{"type":"FeatureCollection","features":['
        '{"type":"Feature","geometry":{"type":"Point","coordinates":[0,0]},'
        '"properties":{"name":"a","population":1}},'
        '{"type":"Feature","geometry":null,"properties":{"name":"b","population":2}}]}'
    )
    with pytest.raises(FeatureDecodeError) as rec:
        deserialize_feature_collection_to_list(io.BytesIO(text.encode()), Site)
    assert rec.value.index == 1
    assert isinstance(rec.value.cause, RecordDecodeError)

def test_lazy_records_follow_error_policy():
    text = (
        '{"type":"FeatureCollection","features":['
        '{"type":"Feature","geometry":null,"properties":{"name":"b","population":2}},'
        '{"type":"Feature","geometry":{"type":"Point","coordinates":[0,0]},'
        '"properties":{"name":"a","population":1}}]}'
    )
    items = list(deserialize_feature_collection(
        io.BytesIO(text.encode()), Site, config=ReaderConfig(on_error="skip")
    ))
    assert [s.name for s in items] == ["a"]

def test_deserialize_features_without_records():
    features = list(deserialize_features_from_feature_collection(io.BytesIO(_collection_text(2).encode())))
    assert [f.get_property("name") for f in features] == ["s0", "s1"]

def test_collection_writer_returns_count():
    stream = io.BytesIO()
    sites = [Site(geometry=shapely.Point(0, 0), name="a", population=1)] * 3
    assert to_feature_collection_writer(stream, sites) == 3
    assert len(json.loads(stream.getvalue())["features"]) == 3

def test_reader_deserialize_and_writer_serialize():
    from geojsonkit import FeatureReader, FeatureWriter

    stream = io.BytesIO()
    with FeatureWriter(stream) as writer:
        writer.serialize(Site(geometry=shapely.Point(7, 8), name="z", population=9))
    stream.seek(0)
    sites = list(FeatureReader(stream).deserialize(Site))
    assert sites[0].geometry.equals(shapely.Point(7, 8))

# --- Custom Codecs ---

def test_custom_codec():
    class UpperCodec(RecordCodec):
        def decode(self, feature, record_type):
            return record_type(feature.get_property("name").upper())

        def encode(self, record):
            return Feature(properties={"name": record})

    assert from_feature(_site_feature(), str, codec=UpperCodec()) == "QUEBEC"
    assert to_feature("x", codec=UpperCodec()).properties == {"name": "x"}

def test_codec_is_abstract():
    with pytest.raises(TypeError):
        RecordCodec()
