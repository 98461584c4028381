# src/geojsonkit/records.py

"""
This module maps caller-defined record types to and from Features.

A record is any type msgspec can convert: msgspec.Struct, dataclasses, attrs
classes and TypedDict. One field (default 'geometry') holds the Feature's
geometry; the remaining fields are the Feature's properties. Geometry fields may
be annotated with a shapely type (shapely.Point, BaseGeometry...), with Geometry
or a bare geometry value class, or left as a plain JSON mapping.

    class Place(msgspec.Struct):
        geometry: shapely.Point
        name: str
        population: int

    places = list(deserialize_feature_collection(open("places.geojson", "rb"), Place))
"""

import io
import logging
import dataclasses
from abc import ABC, abstractmethod
from typing import IO, Any, Iterable, Iterator, List, Optional, Type, Union

import msgspec
from shapely.geometry.base import BaseGeometry

from .conversion import from_shapely, to_shapely
from .errors import (
    FeatureHasNoGeometryError,
    GeoJsonError,
    GeometryKindMismatchError,
    RecordDecodeError,
    RecordEncodeError,
)
from .feature import Feature, FeatureCollection
from .geometry import Geometry, GeometryValue
from .stream import FeatureReader, FeatureWriter, ReaderConfig

log = logging.getLogger(__name__)

__all__ = [
    "RecordCodec",
    "MsgspecRecordCodec",
    "decode_geometry_hook",
    "encode_geometry_hook",
    "from_feature",
    "to_feature",
    "deserialize_feature_collection",
    "deserialize_feature_collection_to_list",
    "deserialize_feature_collection_str_to_list",
    "deserialize_single_feature",
    "deserialize_features_from_feature_collection",
    "to_feature_string",
    "to_feature_collection_string",
    "to_feature_writer",
    "to_feature_collection_writer"
]

# --- Geometry hooks ---

def decode_geometry_hook(type_: Type, obj: Any) -> Any:
    """
    msgspec dec_hook turning a GeoJSON geometry mapping into the annotated type.

    Supports shapely geometry classes, Geometry and the geometry value classes.
    """
    if not isinstance(type_, type):
        raise NotImplementedError(f"Objects of type {type_} are not supported")

    if issubclass(type_, (BaseGeometry, Geometry, GeometryValue)) and obj is None:
        raise FeatureHasNoGeometryError(None)

    if issubclass(type_, BaseGeometry):
        return to_shapely(Geometry.from_json_value(obj), kind=type_)

    if issubclass(type_, Geometry):
        return Geometry.from_json_value(obj)

    if issubclass(type_, GeometryValue):
        geometry = Geometry.from_json_value(obj)
        if type_ is not GeometryValue and geometry.kind is not type_.kind:
            raise GeometryKindMismatchError(type_.kind.value, geometry.type)
        return geometry.value

    raise NotImplementedError(f"Objects of type {type_} are not supported")

def encode_geometry_hook(obj: Any) -> Any:
    """msgspec enc_hook writing shapely and geojsonkit objects as GeoJSON mappings."""
    if isinstance(obj, BaseGeometry):
        return from_shapely(obj).to_json_value()
    if isinstance(obj, (Geometry, Feature, FeatureCollection)):
        return obj.to_json_value()
    if isinstance(obj, GeometryValue):
        return Geometry(obj).to_json_value()
    raise NotImplementedError(f"Objects of type {type(obj)} are not supported")

# --- Codecs ---

class RecordCodec(ABC):
    """Maps between Features and one family of record types."""

    @abstractmethod
    def decode(self, feature: Feature, record_type: Type) -> Any:
        """Build a record of record_type from a Feature."""

    @abstractmethod
    def encode(self, record: Any) -> Feature:
        """Build a Feature from a record."""

class MsgspecRecordCodec(RecordCodec):
    """
    Record codec backed by msgspec.convert / msgspec.to_builtins.

    Args:
        geometry_field (str): Record field holding the geometry. Default='geometry'.
        id_field (str): Optional record field mapped to the Feature 'id'.
        strict (bool): Passed to msgspec.convert. When False, strings are
            coerced to numbers and the like.
    """

    def __init__(
        self,
        geometry_field: str = "geometry",
        id_field: Optional[str] = None,
        strict: bool = True
    ):
        if id_field is not None and id_field == geometry_field:
            raise ValueError("id_field and geometry_field must be different record fields")
        self.geometry_field = geometry_field
        self.id_field = id_field
        self.strict = strict

    def decode(self, feature: Feature, record_type: Type) -> Any:
        """
        Raises:
            RecordDecodeError: The Feature does not fit record_type. The msgspec
                ValidationError (with the offending field path) is chained.
        """
        data = dict(feature.properties) if feature.properties is not None else {}
        if self.geometry_field in data:
            log.debug(f"Property '{self.geometry_field}' is shadowed by the feature geometry")
        data[self.geometry_field] = (
            feature.geometry.to_json_value() if feature.geometry is not None else None
        )
        if self.id_field is not None and feature.id is not None:
            data[self.id_field] = feature.id

        try:
            return msgspec.convert(
                data,
                record_type,
                strict=self.strict,
                dec_hook=decode_geometry_hook
            )
        except msgspec.ValidationError as e:
            raise RecordDecodeError(f"Cannot build {record_type.__name__} from feature: {e}") from e

    def encode(self, record: Any) -> Feature:
        """
        Raises:
            RecordEncodeError: A field cannot be represented in JSON, the record
                is not a mapping-like type, or its geometry field is not a geometry.
        """
        try:
            data = msgspec.to_builtins(record, enc_hook=encode_geometry_hook)
        except (TypeError, NotImplementedError, GeoJsonError) as e:
            raise RecordEncodeError(f"Cannot serialize {type(record).__name__}: {e}") from e

        if not isinstance(data, dict):
            raise RecordEncodeError(
                f"Records must serialize to a JSON object, {type(record).__name__} does not"
            )

        raw_geometry = data.pop(self.geometry_field, None)
        identifier = data.pop(self.id_field, None) if self.id_field is not None else None
        try:
            geometry = Geometry.from_json_value(raw_geometry) if raw_geometry is not None else None
            return Feature(geometry=geometry, properties=data, id=identifier)
        except GeoJsonError as e:
            raise RecordEncodeError(f"Cannot serialize {type(record).__name__}: {e}") from e

_default_codec = MsgspecRecordCodec()

# --- Single feature helpers ---

def from_feature(feature: Feature, record_type: Type, codec: Optional[RecordCodec] = None) -> Any:
    return (codec or _default_codec).decode(feature, record_type)

def to_feature(record: Any, codec: Optional[RecordCodec] = None) -> Feature:
    return (codec or _default_codec).encode(record)

def deserialize_single_feature(
    source: Union[str, bytes, IO],
    record_type: Type,
    codec: Optional[RecordCodec] = None
) -> Any:
    """
    Parse one Feature document and convert it to record_type.

    Args:
        source: GeoJSON text, bytes, or a readable stream.
        record_type: Target record type.
        codec: Defaults to MsgspecRecordCodec().
    """
    if hasattr(source, "read"):
        source = source.read()
    return from_feature(Feature.from_json(source), record_type, codec)

def to_feature_string(record: Any, codec: Optional[RecordCodec] = None, pretty: bool = False) -> str:
    return to_feature(record, codec).to_json(pretty=pretty)

def to_feature_writer(stream: IO, record: Any, codec: Optional[RecordCodec] = None) -> None:
    """Write one record as a standalone Feature document."""
    text = to_feature_string(record, codec)
    stream.write(text if isinstance(stream, io.TextIOBase) else text.encode("utf-8"))

# --- Collection helpers ---

def deserialize_features_from_feature_collection(
    stream: IO,
    config: Optional[ReaderConfig] = None
) -> Iterator[Any]:
    """Lazily yield the Features of a FeatureCollection, without record conversion."""
    return FeatureReader(stream, config).features()

def deserialize_feature_collection(
    stream: IO,
    record_type: Type,
    codec: Optional[RecordCodec] = None,
    config: Optional[ReaderConfig] = None
) -> Iterator[Any]:
    """
    Lazily yield one record per Feature of a FeatureCollection.

    Elements that fail to decode follow config.on_error, exactly as with
    FeatureReader.features().
    """
    return FeatureReader(stream, config).deserialize(record_type, codec or _default_codec)

def deserialize_feature_collection_to_list(
    stream: IO,
    record_type: Type,
    codec: Optional[RecordCodec] = None,
    config: Optional[ReaderConfig] = None
) -> List[Any]:
    """
    Read every record of a FeatureCollection into a list.

    Raises:
        FeatureDecodeError: On the first element that fails to decode.
    """
    config = dataclasses.replace(config or ReaderConfig(), on_error="raise")
    return list(deserialize_feature_collection(stream, record_type, codec, config))

def deserialize_feature_collection_str_to_list(
    text: Union[str, bytes],
    record_type: Type,
    codec: Optional[RecordCodec] = None
) -> List[Any]:
    if isinstance(text, str):
        text = text.encode("utf-8")
    return deserialize_feature_collection_to_list(io.BytesIO(text), record_type, codec)

def to_feature_collection_writer(
    stream: IO,
    records: Iterable[Any],
    codec: Optional[RecordCodec] = None,
    pretty: bool = False
) -> int:
    """
    Stream records to a FeatureCollection document.

    Returns:
        int: Number of features written.
    """
    with FeatureWriter(stream, codec=codec or _default_codec, pretty=pretty) as writer:
        for record in records:
            writer.serialize(record)
    return writer.count

def to_feature_collection_string(
    records: Iterable[Any],
    codec: Optional[RecordCodec] = None,
    pretty: bool = False
) -> str:
    buffer = io.StringIO()
    to_feature_collection_writer(buffer, records, codec, pretty=pretty)
    return buffer.getvalue()
