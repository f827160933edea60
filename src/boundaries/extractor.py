"""
Boundary extractor.

Runs the assembly pipeline over every relation delivered by the source
adapter. A relation that fails is skipped, logged and remembered; the run
continues with the others.

Example:
    >>> extractor = BoundaryExtractor()
    >>> boundaries = extractor.extract(relations)
    >>> print(extractor.get_summary())
"""

from typing import Dict, Iterable, List

from config.logging_config import get_logger
from src.boundaries.exceptions import BoundaryError, UnassignableHoleError
from src.boundaries.models import BoundaryMultiPolygon, BoundaryRelation
from src.boundaries.multipolygon import build_boundary

logger = get_logger(__name__)


class BoundaryExtractor:
    """
    Turns resolved relations into boundary multi-polygons.

    Attributes:
        boundaries: Successfully built boundaries, in input order
        skipped: Relation id -> error for every relation that was excluded
        dropped_holes: Holes dropped across all relations
    """

    def __init__(self):
        self.boundaries: List[BoundaryMultiPolygon] = []
        self.skipped: Dict[int, BoundaryError] = {}
        self.dropped_holes: List[UnassignableHoleError] = []

    def extract(self, relations: Iterable[BoundaryRelation]) -> List[BoundaryMultiPolygon]:
        """
        Build boundaries for all relations.

        Args:
            relations: Resolved relations

        Returns:
            Boundaries that could be built
        """
        self.boundaries, self.skipped, self.dropped_holes = [], {}, []

        for relation in relations:
            try:
                boundary = build_boundary(relation, dropped_holes=self.dropped_holes)
            except BoundaryError as e:
                logger.warning(f"Skipping {relation.name} ({type(e).__name__}): {e}")
                self.skipped[relation.relation_id] = e
                continue

            self.boundaries.append(boundary)
            logger.debug(
                f"  ✓ {boundary.name}: {len(boundary.polygons)} polygon(s), "
                f"{boundary.hole_count} hole(s), {len(relation.segments)} segments"
            )

        logger.info(
            f"Extracted {len(self.boundaries)} boundaries "
            f"({len(self.skipped)} skipped, {len(self.dropped_holes)} holes dropped)"
        )
        return self.boundaries

    def get_summary(self) -> str:
        """Text summary of the last extraction."""
        lines = [
            "=" * 60,
            "BOUNDARY EXTRACTION SUMMARY",
            "=" * 60,
            f"Boundaries: {len(self.boundaries)}",
            f"Skipped relations: {len(self.skipped)}",
            f"Dropped holes: {len(self.dropped_holes)}",
        ]

        if self.skipped:
            lines += ["", "Skipped:", "-" * 40]
            for relation_id, error in self.skipped.items():
                lines.append(f"  {relation_id:<12} {type(error).__name__}: {error.message}")

        return "\n".join(lines)
