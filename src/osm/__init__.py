"""
OSM module.

Overpass source adapter and GeoJSON export around the boundary core.
"""

from src.osm.export import summarize, to_feature_collection, to_geodataframe, write_geojson
from src.osm.overpass import (
    OverpassClient,
    SourceError,
    load_overpass_json,
    parse_relations,
    save_overpass_json,
)

__all__ = [
    "OverpassClient",
    "SourceError",
    "load_overpass_json",
    "parse_relations",
    "save_overpass_json",
    "summarize",
    "to_feature_collection",
    "to_geodataframe",
    "write_geojson",
]
