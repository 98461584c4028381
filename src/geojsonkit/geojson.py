# src/geojsonkit/geojson.py

"""
This module is the whole-document entry point: it reads any GeoJSON object and
dispatches on its 'type' member to a Geometry, a Feature or a FeatureCollection.
"""

import io
import copy
import logging
from pathlib import Path
from typing import IO, Union

from .errors import MissingTypeError, StructuralMismatchError
from .feature import Feature, FeatureCollection
from .geometry import Geometry, kind_from_name
from .jsonvalue import JsonObject, JsonValue, decode, encode, json_type_name
from .parsing import expect_object

log = logging.getLogger(__name__)

__all__ = [
    "GeoJson",
    "from_json_value",
    "loads",
    "load",
    "dumps",
    "dump",
    "read_file"
]

GeoJson = Union[Geometry, Feature, FeatureCollection]

def _from_object(obj: JsonObject) -> GeoJson:
    if "type" not in obj:
        raise MissingTypeError()
    type_name = obj["type"]
    if not isinstance(type_name, str):
        raise StructuralMismatchError("type", "string", json_type_name(type_name))

    if type_name == "Feature":
        return Feature._from_object(obj)
    if type_name == "FeatureCollection":
        return FeatureCollection._from_object(obj)
    # UnknownTypeError unless it is one of the seven geometry kinds
    kind_from_name(type_name)
    return Geometry._from_object(obj)

def from_json_value(value: JsonValue) -> GeoJson:
    """Build the GeoJSON object described by a JSON value tree. The tree is copied."""
    return _from_object(copy.deepcopy(expect_object(value)))

def loads(text: Union[str, bytes]) -> GeoJson:
    """
    Parse GeoJSON text.

    Returns:
        Geometry | Feature | FeatureCollection, according to the 'type' member.

    Raises:
        MalformedJsonError: The text is not JSON.
        GeoJsonParseError: The JSON is not valid GeoJSON.
    """
    return _from_object(expect_object(decode(text)))

def load(stream: IO) -> GeoJson:
    """Read a whole GeoJSON document from a text or binary stream."""
    return loads(stream.read())

def read_file(path: Union[str, Path]) -> GeoJson:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"GeoJSON file not found: {path}")
    log.debug(f"Reading GeoJSON document: {path.name}")
    return loads(path.read_bytes())

def dumps(obj: GeoJson, pretty: bool = False) -> str:
    """Serialize a Geometry, Feature or FeatureCollection to GeoJSON text."""
    if not isinstance(obj, (Geometry, Feature, FeatureCollection)):
        raise TypeError(f"Expected Geometry, Feature or FeatureCollection, got {type(obj)}")
    return encode(obj.to_json_value(), pretty=pretty)

def dump(obj: GeoJson, stream: IO, pretty: bool = False) -> None:
    text = dumps(obj, pretty=pretty)
    if isinstance(stream, io.TextIOBase):
        stream.write(text)
    else:
        stream.write(text.encode("utf-8"))
