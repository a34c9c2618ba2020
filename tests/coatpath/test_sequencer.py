"""Tests for the nearest-neighbor segment sequencer."""
import random

from coatpath.models import PathSegment, Point
from coatpath.sequencer import order_segments


def seg(x1, y1, x2, y2):
    return PathSegment(Point(x1, y1), Point(x2, y2))


class TestOrderSegments:
    """Tests for order_segments."""

    def test_empty(self):
        assert order_segments([], Point(0, 0)) == []

    def test_picks_nearest_first(self):
        far = seg(100, 0, 110, 0)
        near = seg(10, 0, 20, 0)
        ordered = order_segments([far, near], Point(0, 0))
        assert ordered == [near, far]

    def test_reverses_when_end_is_nearer(self):
        ordered = order_segments([seg(50, 0, 5, 0)], Point(0, 0))
        assert ordered == [seg(5, 0, 50, 0)]

    def test_tie_keeps_input_order(self):
        a = seg(10, 0, 20, 0)
        b = seg(-10, 0, -20, 0)
        assert order_segments([a, b], Point(0, 0))[0] == a
        assert order_segments([b, a], Point(0, 0))[0] == b

    def test_start_wins_start_end_tie(self):
        # Both endpoints equidistant from the origin
        segment = seg(10, 0, -10, 0)
        assert order_segments([segment], Point(0, 0)) == [segment]

    def test_boustrophedon_is_preserved(self):
        lines = [seg(0, 0, 100, 0), seg(100, 10, 0, 10), seg(0, 20, 100, 20)]
        assert order_segments(lines, Point(0, 0)) == lines

    def test_input_not_modified(self):
        lines = [seg(50, 0, 5, 0), seg(0, 0, 1, 0)]
        snapshot = list(lines)
        order_segments(lines, Point(0, 0))
        assert lines == snapshot

    def test_each_pick_is_nearest_remaining_endpoint(self):
        rng = random.Random(42)
        segments = [
            seg(rng.uniform(0, 500), rng.uniform(0, 500), rng.uniform(0, 500), rng.uniform(0, 500))
            for _ in range(40)
        ]
        start = Point(0, 0)
        ordered = order_segments(segments, start)

        assert len(ordered) == len(segments)
        remaining = list(segments)
        current = start
        for chosen in ordered:
            nearest = min(
                min(current.distance_to(s.start), current.distance_to(s.end)) for s in remaining
            )
            assert current.distance_to(chosen.start) == nearest
            match = next(s for s in remaining if s == chosen or s.reversed() == chosen)
            remaining.remove(match)
            current = chosen.end
