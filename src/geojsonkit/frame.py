# src/geojsonkit/frame.py

"""
This module moves FeatureCollections in and out of geopandas GeoDataFrames for
tabular workflows.
"""

import logging
from typing import Any, Optional, Union

import geopandas as gpd
import pandas as pd

from .conversion import to_shapely
from .feature import Feature, FeatureCollection
from .jsonvalue import is_number

log = logging.getLogger(__name__)

__all__ = [
    "to_geodataframe",
    "from_geodataframe"
]

def to_geodataframe(
    collection: Union[FeatureCollection, Feature],
    crs: Optional[Any] = "EPSG:4326"
) -> gpd.GeoDataFrame:
    """
    Build a GeoDataFrame with one row per Feature.

    Properties become columns and geometries are converted to shapely. When every
    feature carries an id, the ids become the index.

    Args:
        collection (FeatureCollection | Feature): Source features.
        crs: CRS assigned to the geometry column. GeoJSON coordinates are WGS84 longitude/latitude.

    Returns:
        gpd.GeoDataFrame: The tabular view of the collection.
    """
    if isinstance(collection, Feature):
        collection = FeatureCollection([collection])
    if not isinstance(collection, FeatureCollection):
        raise TypeError(f"Expected FeatureCollection or Feature, got {type(collection)}")

    if len(collection) == 0:
        return gpd.GeoDataFrame(geometry=gpd.GeoSeries([], crs=crs))

    rows = []
    for feature in collection:
        row = dict(feature.properties) if feature.properties is not None else {}
        if "geometry" in row:
            log.debug("Property 'geometry' is shadowed by the feature geometry column")
        row["geometry"] = to_shapely(feature) if feature.geometry is not None else None
        rows.append(row)

    ids = [feature.id for feature in collection]
    index = ids if all(i is not None for i in ids) else None

    gdf = gpd.GeoDataFrame(rows, geometry="geometry", crs=crs, index=index)
    log.debug(f"Built GeoDataFrame with {len(gdf)} rows and {len(gdf.columns)} columns")
    return gdf

def _index_identifier(value: Any) -> Union[str, int, float]:
    if hasattr(value, "item"):
        value = value.item()
    if isinstance(value, str) or is_number(value):
        return value
    return str(value)

def from_geodataframe(gdf: gpd.GeoDataFrame, to_wgs84: bool = False) -> FeatureCollection:
    """
    Build a FeatureCollection from a GeoDataFrame.

    Non-geometry columns become properties (missing values become null). A
    non-default index is carried over as the feature ids.

    Args:
        gdf (gpd.GeoDataFrame): Source frame.
        to_wgs84 (bool): Reproject to EPSG:4326 before export.
    """
    if not isinstance(gdf, gpd.GeoDataFrame):
        raise TypeError(f"Expected GeoDataFrame, got {type(gdf)}")
    if not to_wgs84 and gdf.crs is not None and gdf.crs.to_epsg() != 4326:
        log.warning(f"GeoDataFrame CRS is {gdf.crs}; GeoJSON coordinates are expected in WGS84")

    parsed = FeatureCollection.from_json(gdf.to_json(na="null", drop_id=True, to_wgs84=to_wgs84))
    if gdf.index.equals(pd.RangeIndex(len(gdf))):
        return parsed

    return FeatureCollection(
        Feature(
            geometry=feature.geometry,
            properties=feature.properties,
            id=_index_identifier(value)
        )
        for feature, value in zip(parsed, gdf.index)
    )
