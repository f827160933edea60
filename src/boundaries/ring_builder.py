"""
Ring builder.

Stitches the member ways of one relation into closed rings. Ways arrive in
arbitrary order and direction; each one is used exactly once.

Algorithm:
- Index every open segment by both of its endpoints
- Start a ring at the first unused segment
- At the open end, take an unused segment touching that coordinate
  (as-is when it starts there, reversed when it ends there) and append
  its points without the shared coordinate
- Stop when the open end is back at the start

Endpoints must match exactly. Near misses are reported as malformed
boundaries instead of being snapped together.

Example:
    >>> a = Segment.from_coords([(0, 0), (1, 0), (1, 1)])
    >>> b = Segment.from_coords([(1, 1), (0, 1), (0, 0)])
    >>> [ring.coords for ring in assemble_rings([a, b])]
    [((0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0), (0.0, 0.0))]
"""

import math
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from config.logging_config import get_logger
from src.boundaries.exceptions import MalformedBoundaryError
from src.boundaries.models import Coordinate, Ring, Role, Segment

logger = get_logger(__name__)

MIN_RING_POINTS = 4


def _validate_segment(segment: Segment, relation_id: Optional[int]) -> None:
    if len(segment.coords) < 2:
        raise MalformedBoundaryError(
            f"way {segment.way_id} has fewer than 2 coordinates", relation_id
        )
    for x, y in segment.coords:
        if not (math.isfinite(x) and math.isfinite(y)):
            raise MalformedBoundaryError(
                f"way {segment.way_id} has a non-finite coordinate ({x}, {y})",
                relation_id,
            )


def _ring_role(roles: Sequence[Role]) -> Role:
    """Single known role of the ring's segments, UNKNOWN if none or mixed."""
    known = {role for role in roles if role is not Role.UNKNOWN}
    if len(known) == 1:
        return known.pop()
    return Role.UNKNOWN


def _make_ring(
    coords: List[Coordinate], roles: Sequence[Role], relation_id: Optional[int]
) -> Ring:
    if len(coords) < MIN_RING_POINTS:
        raise MalformedBoundaryError(
            f"closed ring has only {len(coords)} points", relation_id
        )
    return Ring(coords=tuple(coords), role=_ring_role(roles))


def _index_endpoints(segments: Sequence[Segment]) -> Dict[Coordinate, List[int]]:
    endpoints: Dict[Coordinate, List[int]] = defaultdict(list)
    for i, segment in enumerate(segments):
        # Self-closed ways form their own ring and never join another one
        if segment.is_closed:
            continue
        endpoints[segment.first].append(i)
        endpoints[segment.last].append(i)
    return endpoints


def _next_segment(
    segments: Sequence[Segment],
    endpoints: Dict[Coordinate, List[int]],
    used: List[bool],
    end: Coordinate,
    preferred_role: Role,
) -> Optional[Tuple[int, Segment]]:
    """
    Find an unused segment continuing the walk at ``end``.

    Segments sharing the ring's starting role win over others, then input
    order decides.

    Returns:
        (index, segment oriented to start at ``end``) or None
    """
    candidates = [i for i in endpoints.get(end, ()) if not used[i]]
    if not candidates:
        return None

    candidates.sort(key=lambda i: segments[i].role is not preferred_role)
    index = candidates[0]
    segment = segments[index]

    if segment.first == end:
        return index, segment
    return index, segment.reversed()


def assemble_rings(
    segments: Iterable[Segment], relation_id: Optional[int] = None
) -> List[Ring]:
    """
    Stitch segments into closed rings.

    Args:
        segments: Member ways of one relation, any order and direction
        relation_id: Owning relation, used in error messages

    Returns:
        Every closed ring, in the order they were discovered

    Raises:
        MalformedBoundaryError: No segments, invalid coordinates, a dangling
            end that no unused segment continues, or a degenerate ring
    """
    pool = list(segments)
    if not pool:
        raise MalformedBoundaryError("no segments supplied", relation_id)

    for segment in pool:
        _validate_segment(segment, relation_id)

    endpoints = _index_endpoints(pool)
    used = [False] * len(pool)
    rings: List[Ring] = []

    for start_index, start in enumerate(pool):
        if used[start_index]:
            continue
        used[start_index] = True

        if start.is_closed:
            rings.append(_make_ring(list(start.coords), [start.role], relation_id))
            continue

        path: List[Coordinate] = list(start.coords)
        roles: List[Role] = [start.role]

        while path[-1] != path[0]:
            found = _next_segment(pool, endpoints, used, path[-1], start.role)
            if found is None:
                raise MalformedBoundaryError(
                    f"dangling end at {path[-1]} (ring started by way {start.way_id})",
                    relation_id,
                )
            index, segment = found
            used[index] = True
            path.extend(segment.coords[1:])
            roles.append(segment.role)

        rings.append(_make_ring(path, roles, relation_id))

    logger.debug(f"Assembled {len(rings)} ring(s) from {len(pool)} segment(s)")
    return rings
