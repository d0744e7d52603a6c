"""Tests for vector helpers."""

import math

from .geometry import (
    cell_center,
    cell_of,
    distance_to_segment,
    normalize,
    perpendicular,
    segments_intersect,
    side_of_line,
)
from .types import Position


def P(x, y):
    return Position(float(x), float(y))


class TestCellHelpers:
    def test_cell_center(self):
        assert cell_center(P(2, 3)) == P(2.5, 3.5)

    def test_cell_of_floors(self):
        assert cell_of(P(2.5, 3.99)) == (2, 3)
        assert cell_of(P(-0.5, 0.0)) == (-1, 0)


class TestNormalize:
    def test_unit_length(self):
        d = normalize(P(0, 0), P(3, 4))
        assert abs(d.x - 0.6) < 1e-9
        assert abs(d.y - 0.8) < 1e-9

    def test_coincident_points(self):
        assert normalize(P(1, 1), P(1, 1)) == P(0, 0)


class TestPerpendicular:
    def test_rotates_90_degrees(self):
        assert perpendicular(P(1, 0)) == P(0, 1)
        assert perpendicular(P(0, 1)) == P(-1, 0)


class TestDistanceToSegment:
    def test_perpendicular_projection(self):
        assert abs(distance_to_segment(P(1, 1), P(0, 0), P(2, 0)) - 1) < 1e-9

    def test_clamped_to_start(self):
        d = distance_to_segment(P(-3, 4), P(0, 0), P(2, 0))
        assert abs(d - 5.0) < 1e-9

    def test_clamped_to_end(self):
        d = distance_to_segment(P(5, 4), P(0, 0), P(2, 0))
        assert abs(d - 5.0) < 1e-9

    def test_zero_length_segment(self):
        d = distance_to_segment(P(1, 1), P(0, 0), P(0, 0))
        assert abs(d - math.sqrt(2)) < 1e-9


class TestSideOfLine:
    def test_left_and_right(self):
        assert side_of_line(P(1, 1), P(0, 0), P(2, 0)) == 1
        assert side_of_line(P(1, -1), P(0, 0), P(2, 0)) == -1

    def test_collinear(self):
        assert side_of_line(P(5, 0), P(0, 0), P(2, 0)) == 0

    def test_within_epsilon_is_collinear(self):
        assert side_of_line(P(1, 1e-12), P(0, 0), P(2, 0)) == 0

    def test_reversed_line_flips_side(self):
        assert side_of_line(P(1, 1), P(2, 0), P(0, 0)) == -1


class TestSegmentsIntersect:
    def test_crossing(self):
        hit = segments_intersect(P(0, 0), P(2, 2), P(0, 2), P(2, 0))
        assert hit is not None
        assert abs(hit.x - 1) < 1e-9
        assert abs(hit.y - 1) < 1e-9

    def test_no_crossing(self):
        assert segments_intersect(P(0, 0), P(1, 0), P(2, -1), P(2, 1)) is None

    def test_parallel(self):
        assert segments_intersect(P(0, 0), P(2, 0), P(0, 1), P(2, 1)) is None

    def test_collinear_overlap_not_detected(self):
        """Overlapping collinear segments report no intersection."""
        assert segments_intersect(P(0, 0), P(4, 0), P(1, 0), P(3, 0)) is None

    def test_endpoint_touch_is_inclusive(self):
        hit = segments_intersect(P(0, 0), P(2, 0), P(2, -1), P(2, 1))
        assert hit is not None
        assert abs(hit.x - 2) < 1e-9
        assert abs(hit.y) < 1e-9

    def test_t_intersection(self):
        hit = segments_intersect(P(0, 5), P(10, 5), P(5, 0), P(5, 5))
        assert hit is not None
        assert abs(hit.x - 5) < 1e-9
