"""
Polygon assembler.

Splits the rings of one relation into shells and holes and nests every hole
into the shell that contains it. Rings keep the winding they were built
with; output orientation is applied later by BoundaryMultiPolygon.
"""

from typing import List, Mapping, Optional, Sequence

from shapely.geometry import Point, Polygon
from shapely.prepared import prep

from config.logging_config import get_logger
from src.boundaries.exceptions import MalformedBoundaryError, UnassignableHoleError
from src.boundaries.models import BoundaryPolygon, Ring, Role

logger = get_logger(__name__)


class PolygonAssembler:
    """
    Builds polygons (shell + holes) from closed rings.

    Policy:
    - OUTER rings are always shells, one polygon each
    - UNKNOWN rings are classified largest first by how many already
      classified rings (shells and holes) enclose them: an odd count
      means hole, an even count means shell
    - INNER rings go to the smallest shell covering their first vertex;
      holes no shell covers are dropped and recorded in ``dropped_holes``

    Example:
        >>> assembler = PolygonAssembler(relation_id=42)
        >>> polygons = assembler.assemble(rings)
        >>> assembler.dropped_holes
        []
    """

    def __init__(self, relation_id: Optional[int] = None):
        self.relation_id = relation_id
        self.dropped_holes: List[UnassignableHoleError] = []

        self._shells: List[Ring] = []
        self._shell_areas: List[float] = []
        self._shell_tests: list = []
        self._hole_tests: list = []

    def _add_shell(self, ring: Ring) -> None:
        self._shells.append(ring)
        self._shell_areas.append(ring.area)
        self._shell_tests.append(prep(Polygon(ring.coords)))

    def _find_shell(self, ring: Ring) -> Optional[int]:
        """Index of the smallest shell covering the ring's first vertex."""
        point = Point(ring.first_vertex)
        matches = [
            i for i, shell in enumerate(self._shell_tests) if shell.covers(point)
        ]
        if not matches:
            return None
        return min(matches, key=lambda i: self._shell_areas[i])

    def _depth(self, ring: Ring) -> int:
        """Number of classified rings (shells and holes) covering the first vertex."""
        point = Point(ring.first_vertex)
        return sum(
            1 for test in self._shell_tests + self._hole_tests if test.covers(point)
        )

    def _resolve_roles(
        self, rings: Sequence[Ring], ring_roles: Optional[Mapping[Ring, Role]]
    ) -> List[Role]:
        roles = [
            ring_roles.get(ring, ring.role) if ring_roles is not None else ring.role
            for ring in rings
        ]

        for i, role in enumerate(roles):
            if role is Role.OUTER:
                self._add_shell(rings[i])
            elif role is Role.INNER:
                self._hole_tests.append(prep(Polygon(rings[i].coords)))

        unknown = [i for i, role in enumerate(roles) if role is Role.UNKNOWN]
        for i in sorted(unknown, key=lambda i: rings[i].area, reverse=True):
            # Even nesting depth: land; odd: water
            if self._depth(rings[i]) % 2 == 0:
                roles[i] = Role.OUTER
                self._add_shell(rings[i])
            else:
                roles[i] = Role.INNER
                self._hole_tests.append(prep(Polygon(rings[i].coords)))

        return roles

    def assemble(
        self, rings: Sequence[Ring], ring_roles: Optional[Mapping[Ring, Role]] = None
    ) -> List[BoundaryPolygon]:
        """
        Assemble polygons from rings.

        Args:
            rings: Closed rings of one relation
            ring_roles: Optional role override per ring (defaults to ring.role)

        Returns:
            One polygon per shell, in input order of the shells

        Raises:
            MalformedBoundaryError: If no ring ends up as a shell
        """
        rings = list(rings)
        self._shells, self._shell_areas, self._shell_tests = [], [], []
        self._hole_tests = []
        self.dropped_holes = []

        roles = self._resolve_roles(rings, ring_roles)
        if not self._shells:
            raise MalformedBoundaryError("no outer ring", self.relation_id)

        # Shells were registered explicit-first; polygons follow input order
        order = [i for i, role in enumerate(roles) if role is Role.OUTER]
        polygon_for_shell = {}
        polygons: List[BoundaryPolygon] = []
        for i in order:
            polygon_for_shell[id(rings[i])] = len(polygons)
            polygons.append(BoundaryPolygon(outer=rings[i]))

        for i, role in enumerate(roles):
            if role is not Role.INNER:
                continue
            hole = rings[i]
            shell_index = self._find_shell(hole)
            if shell_index is None:
                error = UnassignableHoleError(
                    f"inner ring starting at {hole.first_vertex} lies outside every outer ring",
                    self.relation_id,
                )
                logger.warning(f"Dropping hole: {error}")
                self.dropped_holes.append(error)
                continue
            shell = self._shells[shell_index]
            polygons[polygon_for_shell[id(shell)]].holes.append(hole)

        logger.debug(
            f"Assembled {len(polygons)} polygon(s) with "
            f"{sum(len(p.holes) for p in polygons)} hole(s) from {len(rings)} ring(s)"
        )
        return polygons


def assemble_polygons(
    rings: Sequence[Ring],
    ring_roles: Optional[Mapping[Ring, Role]] = None,
    relation_id: Optional[int] = None,
) -> List[BoundaryPolygon]:
    """
    Convenience wrapper around PolygonAssembler.

    Dropped holes are logged; use PolygonAssembler directly to inspect them.
    """
    return PolygonAssembler(relation_id=relation_id).assemble(rings, ring_roles)
