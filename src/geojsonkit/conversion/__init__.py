# src/geojsonkit/conversion/__init__.py
#
# Copyright (c) The geojsonkit project contributors
# This software is distributed under the Apache-2.0 license.
# See the NOTICE file for more information

"""
The conversion subpackage moves geometries between the GeoJSON model and
shapely, in both directions.
"""
# GeoJSON -> shapely
from .to_shapely import (
    SHAPELY_TYPES,
    to_shapely,
    quick_collection
)

# shapely -> GeoJSON
from .from_shapely import (
    from_shapely,
    value_from_shapely,
    feature_from_shapely,
    from_line,
    from_triangle,
    from_rect
)

__all__ = [
    # GeoJSON -> shapely
    "SHAPELY_TYPES",
    "to_shapely",
    "quick_collection",

    # shapely -> GeoJSON
    "from_shapely",
    "value_from_shapely",
    "feature_from_shapely",
    "from_line",
    "from_triangle",
    "from_rect"
]
