"""Multi-polygon constructor: one boundary value per relation."""

from typing import List, Optional, Sequence

from config.logging_config import get_logger
from src.boundaries.exceptions import EmptyBoundaryError, UnassignableHoleError
from src.boundaries.models import BoundaryMultiPolygon, BoundaryPolygon, BoundaryRelation
from src.boundaries.polygon_assembler import PolygonAssembler
from src.boundaries.ring_builder import assemble_rings

logger = get_logger(__name__)


def build(
    relation_id: int,
    name: str,
    polygons: Sequence[BoundaryPolygon],
    admin_level: Optional[str] = None,
) -> BoundaryMultiPolygon:
    """
    Aggregate the polygons of one relation.

    Raises:
        EmptyBoundaryError: If ``polygons`` is empty
    """
    if not polygons:
        raise EmptyBoundaryError(f"'{name}' produced no usable polygons", relation_id)
    return BoundaryMultiPolygon(
        relation_id=relation_id,
        name=name,
        polygons=list(polygons),
        admin_level=admin_level,
    )


def build_boundary(
    relation: BoundaryRelation,
    dropped_holes: Optional[List[UnassignableHoleError]] = None,
) -> BoundaryMultiPolygon:
    """
    Run ring building, polygon assembly and aggregation for one relation.

    Args:
        relation: Relation with resolved member segments
        dropped_holes: Optional list that receives holes the assembler dropped

    Returns:
        Boundary multi-polygon

    Raises:
        MalformedBoundaryError: Segments cannot be closed or no outer ring
        EmptyBoundaryError: No polygons were produced
    """
    rings = assemble_rings(relation.segments, relation_id=relation.relation_id)

    assembler = PolygonAssembler(relation_id=relation.relation_id)
    polygons = assembler.assemble(rings)
    if dropped_holes is not None:
        dropped_holes.extend(assembler.dropped_holes)

    return build(relation.relation_id, relation.name, polygons, relation.admin_level)
