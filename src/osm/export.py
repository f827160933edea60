"""
GeoJSON export.

Writes extracted boundaries as one FeatureCollection, one feature per
relation. Geometry winding is applied by BoundaryMultiPolygon when the
shapely geometry is produced; nothing here reorients rings.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import geopandas as gpd
import pandas as pd

from config.logging_config import get_logger
from config.settings import settings
from src.boundaries.models import BoundaryMultiPolygon

logger = get_logger(__name__)

COLUMNS = ["relation_id", "name", "admin_level", "num_polygons", "num_holes", "geometry"]


def to_geodataframe(
    boundaries: Sequence[BoundaryMultiPolygon],
    exterior_winding: Optional[str] = None,
    with_metrics: bool = True,
) -> gpd.GeoDataFrame:
    """
    Convert boundaries to a GeoDataFrame in WGS84.

    Args:
        boundaries: Extracted boundaries
        exterior_winding: "ccw" or "cw" (defaults to settings)
        with_metrics: Add area_km2 and centroid columns

    Returns:
        GeoDataFrame with one row per boundary
    """
    winding = exterior_winding or settings.boundaries.exterior_winding
    records: List[Dict[str, Any]] = [
        {
            "relation_id": b.relation_id,
            "name": b.name,
            "admin_level": b.admin_level,
            "num_polygons": len(b.polygons),
            "num_holes": b.hole_count,
            "geometry": b.to_shapely(winding),
        }
        for b in boundaries
    ]

    gdf = gpd.GeoDataFrame(
        pd.DataFrame(records, columns=COLUMNS),
        geometry="geometry",
        crs=settings.boundaries.crs_geographic,
    )

    if with_metrics and not gdf.empty:
        # Area and centroids in a local metric CRS
        gdf_metric = gdf.to_crs(gdf.estimate_utm_crs())
        gdf["area_km2"] = (gdf_metric.geometry.area / 1_000_000).round(3)
        centroids = gdf_metric.geometry.centroid.to_crs(settings.boundaries.crs_geographic)
        gdf["centroid_lat"] = centroids.y
        gdf["centroid_lon"] = centroids.x

    return gdf


def to_feature_collection(
    boundaries: Sequence[BoundaryMultiPolygon], exterior_winding: Optional[str] = None
) -> Dict[str, Any]:
    """Plain GeoJSON FeatureCollection mapping."""
    winding = exterior_winding or settings.boundaries.exterior_winding
    return {
        "type": "FeatureCollection",
        "features": [b.to_feature(winding) for b in boundaries],
    }


def write_geojson(
    boundaries: Sequence[BoundaryMultiPolygon],
    path: Optional[Path] = None,
    exterior_winding: Optional[str] = None,
) -> Path:
    """
    Write boundaries to a GeoJSON file in one go.

    Args:
        boundaries: Extracted boundaries
        path: Output file (defaults to settings.output_path)
        exterior_winding: "ccw" or "cw" (defaults to settings)

    Returns:
        Path to saved file
    """
    path = path or settings.output_path
    path.parent.mkdir(parents=True, exist_ok=True)

    gdf = to_geodataframe(boundaries, exterior_winding)
    if gdf.empty:
        text = json.dumps(to_feature_collection([]))
    else:
        text = gdf.to_json(drop_id=True)

    path.write_text(text, encoding="utf-8")
    logger.info(f"Saved {len(gdf)} boundaries to: {path}")

    return path


def summarize(gdf: gpd.GeoDataFrame) -> str:
    """
    Text summary of exported boundaries.

    Args:
        gdf: Output of to_geodataframe(with_metrics=True)

    Returns:
        Formatted summary string
    """
    if gdf.empty:
        return "No boundaries extracted."

    lines = [
        "=" * 60,
        "ADMINISTRATIVE BOUNDARIES",
        "=" * 60,
        f"Total boundaries: {len(gdf)}",
        f"Total area: {gdf['area_km2'].sum():.1f} km²",
        f"With exclaves: {int((gdf['num_polygons'] > 1).sum())}",
        f"With holes: {int((gdf['num_holes'] > 0).sum())}",
        "",
        "Boundaries by area:",
        "-" * 40,
    ]

    for _, row in gdf.sort_values("area_km2", ascending=False).iterrows():
        lines.append(f"  {row['name']:<30} {row['area_km2']:>9.2f} km²")

    return "\n".join(lines)
