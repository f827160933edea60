"""Errors raised while turning relations into boundary polygons."""

from typing import Optional


class BoundaryError(Exception):
    """Base class for boundary assembly errors."""

    def __init__(self, message: str, relation_id: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.relation_id = relation_id

    def __str__(self) -> str:
        if self.relation_id is None:
            return self.message
        return f"relation {self.relation_id}: {self.message}"


class MalformedBoundaryError(BoundaryError):
    """Segments cannot be closed into valid rings, or no outer ring exists."""


class UnassignableHoleError(BoundaryError):
    """An inner ring lies outside every outer ring. Recorded, never raised by the assembler."""


class EmptyBoundaryError(BoundaryError):
    """A relation produced zero usable polygons."""
