"""
Boundary data model.

Plain immutable value types shared by the ring builder, the polygon
assembler and the multi-polygon constructor. Roles are decided once by the
source adapter; nothing in here looks at raw OSM tags.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from shapely.geometry import MultiPolygon, Polygon
from shapely.geometry.polygon import orient

Coordinate = Tuple[float, float]
Bounds = Tuple[float, float, float, float]


class Role(str, Enum):
    """Role of a way (or of the ring built from it) inside a relation."""

    OUTER = "outer"
    INNER = "inner"
    UNKNOWN = "unknown"

    @classmethod
    def from_osm(
        cls,
        role: Optional[str],
        outer_roles: Iterable[str] = ("outer", ""),
        inner_roles: Iterable[str] = ("inner",),
    ) -> "Role":
        """Map a raw OSM member role string to a Role."""
        value = (role or "").strip().lower()
        if value in outer_roles:
            return cls.OUTER
        if value in inner_roles:
            return cls.INNER
        return cls.UNKNOWN


@dataclass(frozen=True)
class Segment:
    """An ordered run of coordinates taken from one member way."""

    coords: Tuple[Coordinate, ...]
    role: Role = Role.UNKNOWN
    way_id: Optional[int] = None

    @classmethod
    def from_coords(
        cls, coords: Iterable[Iterable[float]], role: Role = Role.UNKNOWN, way_id: Optional[int] = None
    ) -> "Segment":
        points = tuple((float(x), float(y)) for x, y in coords)
        return cls(coords=points, role=role, way_id=way_id)

    @property
    def first(self) -> Coordinate:
        return self.coords[0]

    @property
    def last(self) -> Coordinate:
        return self.coords[-1]

    @property
    def is_closed(self) -> bool:
        return len(self.coords) > 1 and self.coords[0] == self.coords[-1]

    def reversed(self) -> "Segment":
        return Segment(coords=self.coords[::-1], role=self.role, way_id=self.way_id)


@dataclass(frozen=True)
class Ring:
    """A closed coordinate loop: first == last and at least four points."""

    coords: Tuple[Coordinate, ...]
    role: Role = Role.UNKNOWN

    @property
    def first_vertex(self) -> Coordinate:
        return self.coords[0]

    @property
    def bounds(self) -> Bounds:
        xs = [c[0] for c in self.coords]
        ys = [c[1] for c in self.coords]
        return (min(xs), min(ys), max(xs), max(ys))

    @property
    def area(self) -> float:
        return Polygon(self.coords).area

    def __len__(self) -> int:
        return len(self.coords)


@dataclass
class BoundaryPolygon:
    """One outer ring plus zero or more holes."""

    outer: Ring
    holes: List[Ring] = field(default_factory=list)

    @property
    def bounds(self) -> Bounds:
        return self.outer.bounds

    def to_shapely(self) -> Polygon:
        """Polygon in the ring order it was assembled with (no reorientation)."""
        return Polygon(self.outer.coords, [hole.coords for hole in self.holes])


@dataclass
class BoundaryMultiPolygon:
    """
    All polygons of one relation, the unit handed to serialization.

    Output winding is applied here, once, when converting to shapely.
    """

    relation_id: int
    name: str
    polygons: List[BoundaryPolygon]
    admin_level: Optional[str] = None

    @property
    def bounds(self) -> Bounds:
        boxes = [polygon.bounds for polygon in self.polygons]
        return (
            min(b[0] for b in boxes),
            min(b[1] for b in boxes),
            max(b[2] for b in boxes),
            max(b[3] for b in boxes),
        )

    @property
    def hole_count(self) -> int:
        return sum(len(polygon.holes) for polygon in self.polygons)

    def to_shapely(self, exterior_winding: str = "ccw") -> MultiPolygon:
        """
        Convert to a shapely MultiPolygon with the requested winding.

        Args:
            exterior_winding: "ccw" for counter-clockwise exteriors and
                clockwise holes (RFC 7946), "cw" for the opposite

        Returns:
            Oriented MultiPolygon
        """
        if exterior_winding not in ("ccw", "cw"):
            raise ValueError(f"Unknown winding: {exterior_winding}")
        sign = 1.0 if exterior_winding == "ccw" else -1.0
        return MultiPolygon([orient(p.to_shapely(), sign=sign) for p in self.polygons])

    def properties(self) -> Dict[str, Any]:
        return {
            "relation_id": self.relation_id,
            "name": self.name,
            "admin_level": self.admin_level,
        }

    def to_feature(self, exterior_winding: str = "ccw") -> Dict[str, Any]:
        """GeoJSON-like feature mapping for this boundary."""
        return {
            "type": "Feature",
            "id": self.relation_id,
            "properties": self.properties(),
            "geometry": self.to_shapely(exterior_winding).__geo_interface__,
        }


@dataclass
class BoundaryRelation:
    """A relation with its member ways already resolved to segments."""

    relation_id: int
    name: str
    segments: List[Segment]
    admin_level: Optional[str] = None
