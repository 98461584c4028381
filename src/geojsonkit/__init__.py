# src/geojsonkit/__init__.py
#
# Copyright (c) The geojsonkit project contributors
# This software is distributed under the Apache-2.0 license.
# See the NOTICE file for more information

"""
geojsonkit reads and writes GeoJSON (RFC 7946): a validated object model,
conversion to and from shapely, streaming FeatureCollection I/O and record
(de)serialization on top of msgspec.
"""
# Errors
from .errors import (
    GeoJsonError,
    GeoJsonParseError,
    MalformedJsonError,
    StructuralMismatchError,
    MissingTypeError,
    UnknownTypeError,
    ExpectedTypeError,
    MissingMemberError,
    CoordinateShapeError,
    InvalidIdentifierError,
    GeometryConversionError,
    GeometryKindMismatchError,
    DegenerateGeometryError,
    FeatureHasNoGeometryError,
    CollectionMemberError,
    FeatureDecodeError,
    InvalidWriterStateError,
    RecordError,
    RecordDecodeError,
    RecordEncodeError
)

# Object model
from .position import (
    Position
)

from .geometry import (
    GeometryKind,
    GeometryValue,
    Point,
    MultiPoint,
    LineString,
    MultiLineString,
    Polygon,
    MultiPolygon,
    GeometryCollection,
    Geometry
)

from .feature import (
    Feature,
    FeatureCollection
)

# Documents
from .geojson import (
    GeoJson,
    from_json_value,
    loads,
    load,
    dumps,
    dump,
    read_file
)

# shapely conversion
from .conversion import (
    to_shapely,
    quick_collection,
    from_shapely,
    feature_from_shapely,
    from_line,
    from_triangle,
    from_rect
)

# Streaming
from .stream import (
    ReaderConfig,
    FeatureReader,
    FeatureWriter
)

# Records
from .records import (
    RecordCodec,
    MsgspecRecordCodec,
    from_feature,
    to_feature,
    deserialize_feature_collection,
    deserialize_feature_collection_to_list,
    deserialize_feature_collection_str_to_list,
    deserialize_single_feature,
    deserialize_features_from_feature_collection,
    to_feature_string,
    to_feature_collection_string,
    to_feature_writer,
    to_feature_collection_writer
)

# Tabular interop
from .frame import (
    to_geodataframe,
    from_geodataframe
)

__all__ = [
    # Errors
    "GeoJsonError",
    "GeoJsonParseError",
    "MalformedJsonError",
    "StructuralMismatchError",
    "MissingTypeError",
    "UnknownTypeError",
    "ExpectedTypeError",
    "MissingMemberError",
    "CoordinateShapeError",
    "InvalidIdentifierError",
    "GeometryConversionError",
    "GeometryKindMismatchError",
    "DegenerateGeometryError",
    "FeatureHasNoGeometryError",
    "CollectionMemberError",
    "FeatureDecodeError",
    "InvalidWriterStateError",
    "RecordError",
    "RecordDecodeError",
    "RecordEncodeError",

    # Object model
    "Position",
    "GeometryKind",
    "GeometryValue",
    "Point",
    "MultiPoint",
    "LineString",
    "MultiLineString",
    "Polygon",
    "MultiPolygon",
    "GeometryCollection",
    "Geometry",
    "Feature",
    "FeatureCollection",

    # Documents
    "GeoJson",
    "from_json_value",
    "loads",
    "load",
    "dumps",
    "dump",
    "read_file",

    # shapely conversion
    "to_shapely",
    "quick_collection",
    "from_shapely",
    "feature_from_shapely",
    "from_line",
    "from_triangle",
    "from_rect",

    # Streaming
    "ReaderConfig",
    "FeatureReader",
    "FeatureWriter",

    # Records
    "RecordCodec",
    "MsgspecRecordCodec",
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
    "to_feature_collection_writer",

    # Tabular interop
    "to_geodataframe",
    "from_geodataframe"
]
