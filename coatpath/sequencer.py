"""Greedy nearest-neighbor ordering of path segments."""
import math
from typing import List, Sequence

from .models import PathSegment, Point


def order_segments(segments: Sequence[PathSegment], start_point: Point) -> List[PathSegment]:
    """
    Order segments into a single traversal by repeatedly taking the nearest one.

    From the current location every remaining segment is scored by the
    distance to its start and to its end. The closest endpoint wins; when it
    is the end, the segment is reversed so traversal always flows away from
    the nearer point. Ties keep the first segment in input order, and a
    start/end tie on the same segment keeps it unreversed.

    Args:
        segments: Segments in generation order (not modified)
        start_point: Current tool location

    Returns:
        New list of directed segments in traversal order
    """
    remaining = list(segments)
    ordered: List[PathSegment] = []
    current = start_point

    while remaining:
        best_index = -1
        best_distance = math.inf
        best_reversed = False

        for i, segment in enumerate(remaining):
            distance = current.distance_to(segment.start)
            if distance < best_distance:
                best_distance = distance
                best_index = i
                best_reversed = False

            distance = current.distance_to(segment.end)
            if distance < best_distance:
                best_distance = distance
                best_index = i
                best_reversed = True

        chosen = remaining.pop(best_index)
        if best_reversed:
            chosen = chosen.reversed()
        ordered.append(chosen)
        current = chosen.end

    return ordered
