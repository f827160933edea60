#!/usr/bin/env python3
"""
Administrative Boundary Extraction - Main Execution Script

This script runs the complete pipeline:
1. Load boundary relations (saved Overpass JSON or live Overpass query)
2. Assemble one multi-polygon per relation
3. Write a GeoJSON FeatureCollection
4. Optionally locate a point among the extracted boundaries
"""

from __future__ import annotations

import argparse
import logging
import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple

from config.logging_config import (
    get_logger,
    setup_debug,
    setup_logging,
    setup_quiet,
    setup_verbose,
)
from config.settings import settings
from src.boundaries import BoundaryExtractor, BoundaryMultiPolygon, BoundaryRelation
from src.osm import (
    OverpassClient,
    load_overpass_json,
    parse_relations,
    save_overpass_json,
    summarize,
    to_geodataframe,
    write_geojson,
)
from src.spatial import BoundaryLocator


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Extract administrative boundary polygons from OpenStreetMap relations",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("--input", "-i", type=Path, default=None, help="Saved Overpass JSON response (skips the API)")
    parser.add_argument("--area", type=str, default=settings.overpass.default_area, help="Area name to query on Overpass")
    parser.add_argument("--admin-level", type=str, default=settings.boundaries.admin_level, help="OSM admin_level to extract")
    parser.add_argument("--output", "-o", type=Path, default=settings.output_path, help="Output GeoJSON path")
    parser.add_argument("--save-raw", type=Path, default=None, help="Where to save the raw Overpass response (default: data/raw/)")
    parser.add_argument("--winding", choices=["ccw", "cw"], default=settings.boundaries.exterior_winding, help="Exterior ring winding in the output")
    parser.add_argument("--locate", type=float, nargs=2, metavar=("LON", "LAT"), default=None, help="Report which boundary contains this point")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    parser.add_argument("--debug", "-d", action="store_true", help="Enable debug logging (very detailed)")
    parser.add_argument("--quiet", "-q", action="store_true", help="Only log warnings and errors")
    parser.add_argument("--log-file", type=Path, default=None, help="Also write log records to this file")

    return parser.parse_args(argv)


def load_relations(
    input_path: Optional[Path],
    area: str,
    admin_level: str,
    save_raw: Optional[Path] = None,
    logger: Optional[logging.Logger] = None,
) -> List[BoundaryRelation]:
    """Load boundary relations from a file or the Overpass API."""
    if logger is None:
        logger = get_logger(__name__)

    logger.info("=" * 60)
    logger.info("PHASE 1: SOURCE RELATIONS")
    logger.info("=" * 60)

    if input_path is not None:
        data = load_overpass_json(input_path)
    else:
        data = OverpassClient().fetch_relations(area, admin_level=admin_level)
        save_overpass_json(data, save_raw or settings.raw_response_path(area, admin_level))

    relations = list(parse_relations(data, admin_level=admin_level))
    logger.info(f"Found {len(relations)} named admin_level={admin_level} relations")
    return relations


def extract_boundaries(
    relations: List[BoundaryRelation], logger: Optional[logging.Logger] = None
) -> Tuple[BoundaryExtractor, List[BoundaryMultiPolygon]]:
    """Assemble multi-polygons for every relation."""
    if logger is None:
        logger = get_logger(__name__)

    logger.info("=" * 60)
    logger.info("PHASE 2: BOUNDARY ASSEMBLY")
    logger.info("=" * 60)

    extractor = BoundaryExtractor()
    boundaries = extractor.extract(relations)

    if extractor.skipped:
        logger.warning(extractor.get_summary())

    return extractor, boundaries


def export_boundaries(
    boundaries: List[BoundaryMultiPolygon],
    output: Path,
    winding: str,
    logger: Optional[logging.Logger] = None,
) -> Path:
    """Write the feature collection and log a summary."""
    if logger is None:
        logger = get_logger(__name__)

    logger.info("=" * 60)
    logger.info("PHASE 3: EXPORT")
    logger.info("=" * 60)

    path = write_geojson(boundaries, output, exterior_winding=winding)
    logger.info(summarize(to_geodataframe(boundaries, winding)))
    return path


def locate_point(
    boundaries: List[BoundaryMultiPolygon],
    lon: float,
    lat: float,
    logger: Optional[logging.Logger] = None,
) -> List[BoundaryMultiPolygon]:
    """Log which boundaries contain the point, or the nearest one."""
    if logger is None:
        logger = get_logger(__name__)

    locator = BoundaryLocator(boundaries)
    matches = locator.locate(lon, lat)

    if matches:
        for boundary in matches:
            logger.info(f"({lon}, {lat}) is inside {boundary.name} (relation {boundary.relation_id})")
    else:
        nearest = locator.nearest(lon, lat)
        if nearest is None:
            logger.info(f"({lon}, {lat}): no boundaries loaded")
        else:
            logger.info(f"({lon}, {lat}) is outside all boundaries; nearest box: {nearest.name}")

    return matches


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_arguments(argv)

    if args.debug:
        setup_debug(args.log_file)
    elif args.verbose:
        setup_verbose(args.log_file)
    elif args.quiet:
        setup_quiet(args.log_file)
    else:
        setup_logging(log_file=args.log_file)

    logger = get_logger("admin_boundaries")

    logger.info("=" * 60)
    logger.info("ADMINISTRATIVE BOUNDARY EXTRACTION")
    logger.info(f"Started at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    logger.info("=" * 60)

    try:
        settings.ensure_dirs()

        relations = load_relations(
            args.input, args.area, args.admin_level, save_raw=args.save_raw, logger=logger
        )

        _, boundaries = extract_boundaries(relations, logger=logger)

        output = export_boundaries(boundaries, args.output, args.winding, logger=logger)
        logger.info(f"Output: {output}")

        if args.locate is not None:
            lon, lat = args.locate
            locate_point(boundaries, lon, lat, logger=logger)

        logger.info("\n✅ Extraction completed successfully!")
        return 0

    except Exception as e:
        logger.error("=" * 60)
        logger.error("ERROR")
        logger.error("=" * 60)
        logger.error(f"Exception: {type(e).__name__}")
        logger.error(f"Message: {str(e)}")
        logger.debug(traceback.format_exc())
        return 1


if __name__ == "__main__":
    sys.exit(main())
