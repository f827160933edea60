"""
Spatial module.

Bulk-loaded bounding-box index and point lookups over boundaries.
"""

from src.spatial.index import (
    IndexedPrimitive,
    SpatialIndex,
    bulk_load,
    primitives_from_tuples,
)
from src.spatial.locator import BoundaryLocator

__all__ = [
    "IndexedPrimitive",
    "SpatialIndex",
    "bulk_load",
    "primitives_from_tuples",
    "BoundaryLocator",
]
