"""Loading the tract dataset and converting between geometry representations.

The app keeps one GeoDataFrame in memory. Maps need the same data as a GeoJSON
FeatureCollection, so conversion helpers for both directions live here too.
"""

import io
import json
import sys

import geopandas as gpd
import requests

from census_dashboard.config import (
    DATA_URL,
    DEFAULT_CENTER,
    REQUEST_TIMEOUT,
    SOURCE_CRS_FALLBACK,
    TARGET_CRS,
)


class DataLoadError(Exception):
    pass


def _is_remote(source):
    return str(source).startswith(("http://", "https://"))


def fetch_geodata(source, timeout=REQUEST_TIMEOUT):
    """Read a vector dataset from a URL or a local path."""
    if _is_remote(source):
        try:
            response = requests.get(source, timeout=timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise DataLoadError(f"Could not download {source}: {e}") from e
        payload = io.BytesIO(response.content)
    else:
        payload = source

    try:
        return gpd.read_file(payload)
    except Exception as e:
        raise DataLoadError(f"Could not read {source}: {e}") from e


def reproject(gdf, crs=TARGET_CRS):
    # Files without .prj / crs member are taken as-is in the fallback CRS
    if gdf.crs is None:
        gdf = gdf.set_crs(SOURCE_CRS_FALLBACK)
    if gdf.crs != crs:
        gdf = gdf.to_crs(crs)
    return gdf


def to_feature_collection(gdf):
    """GeoDataFrame -> GeoJSON FeatureCollection dict (NaN values become null)."""
    return json.loads(gdf.to_json(na="null"))


def from_feature_collection(fc, crs=TARGET_CRS):
    """GeoJSON FeatureCollection dict -> GeoDataFrame."""
    return gpd.GeoDataFrame.from_features(fc["features"], crs=crs)


def load_data(source=DATA_URL, timeout=REQUEST_TIMEOUT):
    try:
        print(f"Loading {source}...", flush=True)
        gdf = fetch_geodata(source, timeout=timeout)

        # Features without a shape cannot be drawn
        gdf = gdf[gdf.geometry.notna() & ~gdf.geometry.is_empty].copy()

        # Ensure correct projection for web maps
        gdf = reproject(gdf)

        print(f"Loaded {len(gdf)} features, {len(gdf.columns) - 1} attributes", flush=True)
        return gdf
    except DataLoadError as e:
        print(f"CRITICAL ERROR: {e}", file=sys.stderr)
        return gpd.GeoDataFrame(geometry=[], crs=TARGET_CRS)


def map_center(gdf):
    if gdf.empty:
        return list(DEFAULT_CENTER)
    minx, miny, maxx, maxy = gdf.total_bounds
    return [(miny + maxy) / 2, (minx + maxx) / 2]
