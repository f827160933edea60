"""
Tests for the ring builder.

Covers stitching in arbitrary order and direction, self-closed ways,
disjoint rings and the malformed-boundary failures.
"""

import math

import pytest
from conftest import square

from src.boundaries.exceptions import MalformedBoundaryError
from src.boundaries.models import Role, Segment
from src.boundaries.ring_builder import assemble_rings


def seg(coords, role=Role.OUTER, way_id=None):
    return Segment.from_coords(coords, role=role, way_id=way_id)


class TestAssembleRings:
    """Tests for assemble_rings()."""

    def test_two_segments_form_one_ring(self, split_square_segments):
        """Two halves of a square join end to start."""
        rings = assemble_rings(split_square_segments)

        assert len(rings) == 1
        assert rings[0].coords == ((0, 0), (1, 0), (1, 1), (0, 1), (0, 0))

    def test_self_closed_segment_is_returned_unmodified(self):
        """A way that is already closed becomes a ring as-is."""
        closed = seg(square(0, 0, 1))
        rings = assemble_rings([closed])

        assert len(rings) == 1
        assert rings[0].coords == closed.coords

    def test_reversed_segment_is_flipped(self):
        """The second way runs the wrong way and gets reversed."""
        a = seg([(0, 0), (1, 0), (1, 1)])
        b = seg([(0, 0), (0, 1), (1, 1)])

        rings = assemble_rings([a, b])

        assert rings[0].coords == ((0, 0), (1, 0), (1, 1), (0, 1), (0, 0))

    def test_shuffled_segments(self):
        """Four sides given out of order and mixed directions."""
        segments = [
            seg([(1, 1), (0, 1)]),
            seg([(0, 0), (1, 0)]),
            seg([(0, 0), (0, 1)]),
            seg([(1, 1), (1, 0)]),
        ]

        rings = assemble_rings(segments)

        assert len(rings) == 1
        ring = rings[0]
        assert ring.coords[0] == ring.coords[-1]
        assert len(ring) == 5
        assert set(ring.coords) == {(0, 0), (1, 0), (1, 1), (0, 1)}

    def test_disjoint_rings_are_all_returned(self):
        """Main area plus an exclave gives two rings."""
        segments = [
            seg([(0, 0), (1, 0), (1, 1)]),
            seg(square(5, 5, 1)),
            seg([(1, 1), (0, 1), (0, 0)]),
        ]

        rings = assemble_rings(segments)

        assert len(rings) == 2
        assert rings[0].coords[0] == (0, 0)
        assert rings[1].coords == tuple(square(5, 5, 1))

    def test_every_ring_is_closed_with_four_points(self):
        """Closure and minimum length hold for all rings."""
        segments = [
            seg([(0, 0), (3, 0)]),
            seg([(3, 0), (3, 3), (0, 3)]),
            seg([(0, 3), (0, 0)]),
            seg([(10, 10), (11, 10), (10, 11), (10, 10)]),
        ]

        for ring in assemble_rings(segments):
            assert ring.coords[0] == ring.coords[-1]
            assert len(ring) >= 4

    def test_touching_closed_way_does_not_join_open_walk(self):
        """A closed way sharing a vertex with open ways stays its own ring."""
        segments = [
            seg([(0, 0), (2, 0), (2, 2)]),
            seg(square(2, 2, 1)),
            seg([(2, 2), (0, 2), (0, 0)]),
        ]

        rings = assemble_rings(segments)

        assert len(rings) == 2
        assert rings[0].coords == ((0, 0), (2, 0), (2, 2), (0, 2), (0, 0))


class TestRingRoles:
    """Tests for the role carried by assembled rings."""

    def test_single_role(self):
        rings = assemble_rings([seg(square(0, 0, 1), role=Role.INNER)])
        assert rings[0].role is Role.INNER

    def test_unknown_segments_take_known_role(self):
        segments = [
            seg([(0, 0), (1, 0), (1, 1)], role=Role.OUTER),
            seg([(1, 1), (0, 1), (0, 0)], role=Role.UNKNOWN),
        ]
        assert assemble_rings(segments)[0].role is Role.OUTER

    def test_mixed_roles_are_unknown(self):
        segments = [
            seg([(0, 0), (1, 0), (1, 1)], role=Role.OUTER),
            seg([(1, 1), (0, 1), (0, 0)], role=Role.INNER),
        ]
        assert assemble_rings(segments)[0].role is Role.UNKNOWN

    def test_same_role_candidate_preferred(self):
        """At a shared node the walk continues with the ring's own role."""
        segments = [
            seg([(0, 0), (1, 0)], role=Role.INNER),
            seg([(1, 0), (5, 0), (5, 5), (0, 0)], role=Role.OUTER),
            seg([(1, 0), (1, 1), (0, 0)], role=Role.INNER),
            seg([(0, 0), (-5, -5), (1, 0)], role=Role.OUTER),
        ]

        rings = assemble_rings(segments)

        assert [ring.role for ring in rings] == [Role.INNER, Role.OUTER]


class TestMalformedInput:
    """Tests for MalformedBoundaryError cases."""

    def test_no_segments(self):
        with pytest.raises(MalformedBoundaryError, match="no segments"):
            assemble_rings([])

    def test_dangling_end(self):
        segments = [seg([(0, 0), (1, 0), (1, 1)]), seg([(1, 1), (0, 1)])]
        with pytest.raises(MalformedBoundaryError, match="dangling end"):
            assemble_rings(segments, relation_id=7)

    def test_error_carries_relation_id(self):
        with pytest.raises(MalformedBoundaryError) as exc_info:
            assemble_rings([seg([(0, 0), (1, 0)])], relation_id=7)
        assert exc_info.value.relation_id == 7
        assert str(exc_info.value).startswith("relation 7:")

    def test_near_miss_is_not_snapped(self):
        """Endpoints that differ slightly are not joined."""
        segments = [
            seg([(0, 0), (1, 0), (1, 1)]),
            seg([(1, 1.0000001), (0, 1), (0, 0)]),
        ]
        with pytest.raises(MalformedBoundaryError):
            assemble_rings(segments)

    def test_segment_used_only_once(self):
        """A spur way cannot be walked out and back again."""
        segments = [seg([(0, 0), (1, 0)]), seg([(1, 0), (2, 0)])]
        with pytest.raises(MalformedBoundaryError):
            assemble_rings(segments)

    def test_degenerate_ring(self):
        """Out-and-back over one edge closes with only three points."""
        segments = [seg([(0, 0), (1, 0)]), seg([(1, 0), (0, 0)])]
        with pytest.raises(MalformedBoundaryError, match="only 3 points"):
            assemble_rings(segments)

    def test_single_point_segment(self):
        with pytest.raises(MalformedBoundaryError, match="fewer than 2"):
            assemble_rings([Segment(coords=((0.0, 0.0),), role=Role.OUTER)])

    @pytest.mark.parametrize("bad", [math.nan, math.inf])
    def test_non_finite_coordinate(self, bad):
        segments = [seg([(0, 0), (1, 0), (bad, 1), (0, 0)])]
        with pytest.raises(MalformedBoundaryError, match="non-finite"):
            assemble_rings(segments)
