"""
Pytest configuration and fixtures for boundary extraction tests.

Usage:
    pytest                     # Run everything
    pytest tests/test_spatial_index.py
"""

import sys
from pathlib import Path
from typing import Any, Dict, List

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.boundaries.models import BoundaryRelation, Role, Segment  # noqa: E402


def square(x0: float, y0: float, size: float) -> List[tuple]:
    """Closed counter-clockwise square starting at its lower-left corner."""
    return [
        (x0, y0),
        (x0 + size, y0),
        (x0 + size, y0 + size),
        (x0, y0 + size),
        (x0, y0),
    ]


def overpass_way(ref: int, role: str, coords: List[tuple]) -> Dict[str, Any]:
    return {
        "type": "way",
        "ref": ref,
        "role": role,
        "geometry": [{"lon": x, "lat": y} for x, y in coords],
    }


@pytest.fixture
def split_square_segments() -> List[Segment]:
    """Unit square split into two open ways."""
    return [
        Segment.from_coords([(0, 0), (1, 0), (1, 1)], role=Role.OUTER, way_id=1),
        Segment.from_coords([(1, 1), (0, 1), (0, 0)], role=Role.OUTER, way_id=2),
    ]


@pytest.fixture
def relation_with_hole() -> BoundaryRelation:
    """10x10 outer square made of two ways with a closed 2x2 inner way."""
    return BoundaryRelation(
        relation_id=100,
        name="Mitte",
        admin_level="9",
        segments=[
            Segment.from_coords([(0, 0), (10, 0), (10, 10)], role=Role.OUTER, way_id=1),
            Segment.from_coords([(0, 0), (0, 10), (10, 10)], role=Role.OUTER, way_id=2),
            Segment.from_coords(square(4, 4, 2), role=Role.INNER, way_id=3),
        ],
    )


@pytest.fixture
def overpass_document() -> Dict[str, Any]:
    """Small Overpass response: two valid districts, one broken, one unnamed, one other level."""
    return {
        "version": 0.6,
        "elements": [
            {
                "type": "relation",
                "id": 1,
                "tags": {"boundary": "administrative", "admin_level": "9", "name": "Mitte"},
                "members": [
                    overpass_way(11, "outer", [(0, 0), (2, 0), (2, 2)]),
                    overpass_way(12, "", [(0, 0), (0, 2), (2, 2)]),
                    {"type": "node", "ref": 5, "role": "admin_centre", "lat": 1, "lon": 1},
                ],
            },
            {
                "type": "relation",
                "id": 2,
                "tags": {"boundary": "administrative", "admin_level": "9", "name": "Nord"},
                "members": [
                    overpass_way(21, "outer", square(2, 0, 2)),
                    overpass_way(22, "outer", square(10, 10, 1)),
                    overpass_way(23, "inner", square(2.5, 0.5, 1)),
                ],
            },
            {
                "type": "relation",
                "id": 3,
                "tags": {"boundary": "administrative", "admin_level": "9", "name": "Broken"},
                "members": [overpass_way(31, "outer", [(5, 5), (6, 5), (6, 6)])],
            },
            {
                "type": "relation",
                "id": 4,
                "tags": {"boundary": "administrative", "admin_level": "9"},
                "members": [overpass_way(41, "outer", square(20, 20, 1))],
            },
            {
                "type": "relation",
                "id": 5,
                "tags": {"boundary": "administrative", "admin_level": "4", "name": "State"},
                "members": [overpass_way(51, "outer", square(0, 0, 50))],
            },
            {"type": "way", "id": 99, "tags": {"boundary": "administrative"}},
        ],
    }
