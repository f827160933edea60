"""
Boundaries module.

Assembles administrative boundary multi-polygons from the member ways of
OpenStreetMap relations.
"""

from src.boundaries.exceptions import (
    BoundaryError,
    EmptyBoundaryError,
    MalformedBoundaryError,
    UnassignableHoleError,
)
from src.boundaries.extractor import BoundaryExtractor
from src.boundaries.models import (
    BoundaryMultiPolygon,
    BoundaryPolygon,
    BoundaryRelation,
    Ring,
    Role,
    Segment,
)
from src.boundaries.multipolygon import build, build_boundary
from src.boundaries.polygon_assembler import PolygonAssembler, assemble_polygons
from src.boundaries.ring_builder import assemble_rings

__all__ = [
    "BoundaryError",
    "EmptyBoundaryError",
    "MalformedBoundaryError",
    "UnassignableHoleError",
    "BoundaryExtractor",
    "BoundaryMultiPolygon",
    "BoundaryPolygon",
    "BoundaryRelation",
    "Ring",
    "Role",
    "Segment",
    "build",
    "build_boundary",
    "PolygonAssembler",
    "assemble_polygons",
    "assemble_rings",
]
