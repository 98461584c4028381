# src/geojsonkit/stream/__init__.py
#
# Copyright (c) The geojsonkit project contributors
# This software is distributed under the Apache-2.0 license.
# See the NOTICE file for more information

"""
The stream subpackage reads and writes FeatureCollections incrementally,
one Feature at a time, against byte or text streams.
"""
# Reader
from .reader import (
    DEFAULT_CHUNK_SIZE,
    ON_ERROR_MODES,
    ReaderConfig,
    FeatureReader
)

# Writer
from .writer import (
    WriterState,
    FeatureWriter
)

__all__ = [
    # Reader
    "DEFAULT_CHUNK_SIZE",
    "ON_ERROR_MODES",
    "ReaderConfig",
    "FeatureReader",

    # Writer
    "WriterState",
    "FeatureWriter"
]
