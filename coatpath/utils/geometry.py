"""Planar geometry helpers for segment clipping and rotation."""
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..models import Point, ShapeDescriptor, ShapeKind


Interval = Tuple[float, float]


def point_at(start: Point, end: Point, t: float) -> Point:
    """Return the point at parameter t along start->end."""
    return Point(start.x + (end.x - start.x) * t, start.y + (end.y - start.y) * t)


def rotate_point(point: Point, origin: Point, degrees: float) -> Point:
    """
    Rotate a point about an origin.

    Args:
        point: Point to rotate
        origin: Center of rotation
        degrees: Angle in degrees (canvas orientation, clockwise on screen)

    Returns:
        Rotated point
    """
    if not degrees:
        return point
    rad = math.radians(degrees)
    cos_a = math.cos(rad)
    sin_a = math.sin(rad)
    dx = point.x - origin.x
    dy = point.y - origin.y
    return Point(
        origin.x + dx * cos_a - dy * sin_a,
        origin.y + dx * sin_a + dy * cos_a
    )


def clip_segment_to_rect(
    start: Point,
    end: Point,
    left: float,
    top: float,
    right: float,
    bottom: float
) -> Optional[Interval]:
    """
    Find the parameter interval of a segment that lies inside a rectangle.

    Liang-Barsky clipping; boundaries are inclusive and a segment wholly
    inside yields (0, 1).

    Returns:
        (t_enter, t_exit) with t_enter < t_exit, or None when the segment
        misses the rectangle or only touches it at a point
    """
    dx = end.x - start.x
    dy = end.y - start.y
    t0, t1 = 0.0, 1.0

    for p, q in ((-dx, start.x - left), (dx, right - start.x),
                 (-dy, start.y - top), (dy, bottom - start.y)):
        if p == 0:
            if q < 0:
                return None
            continue
        r = q / p
        if p < 0:
            if r > t1:
                return None
            t0 = max(t0, r)
        else:
            if r < t0:
                return None
            t1 = min(t1, r)

    if t1 <= t0:
        return None
    return t0, t1


def clip_segment_to_circle(
    start: Point,
    end: Point,
    center: Point,
    radius: float
) -> Optional[Interval]:
    """
    Find the parameter interval of a segment that lies inside a circle.

    Returns:
        (t_enter, t_exit) clamped to [0, 1], or None when the segment misses
    """
    dx = end.x - start.x
    dy = end.y - start.y
    fx = start.x - center.x
    fy = start.y - center.y

    a = dx * dx + dy * dy
    if a == 0:
        return None
    b = 2 * (fx * dx + fy * dy)
    c = fx * fx + fy * fy - radius * radius

    discriminant = b * b - 4 * a * c
    if discriminant <= 0:
        return None

    root = math.sqrt(discriminant)
    t0 = max(0.0, (-b - root) / (2 * a))
    t1 = min(1.0, (-b + root) / (2 * a))
    if t1 <= t0:
        return None
    return t0, t1


def merge_intervals(intervals: Sequence[Interval]) -> List[Interval]:
    """Merge overlapping or touching parameter intervals."""
    merged: List[Interval] = []
    for t0, t1 in sorted(intervals):
        if merged and t0 <= merged[-1][1]:
            merged[-1] = (merged[-1][0], max(merged[-1][1], t1))
        else:
            merged.append((t0, t1))
    return merged


def polyline_length(points: Sequence[Point]) -> float:
    """Total length of a polyline."""
    return sum(a.distance_to(b) for a, b in zip(points, points[1:]))


@dataclass(frozen=True)
class Bounds:
    left: float
    top: float
    right: float
    bottom: float


def shape_bounds(shape: ShapeDescriptor) -> Bounds:
    """Axis-aligned bounds of a shape, including its rotation."""
    if shape.type == ShapeKind.CIRCLE:
        return Bounds(shape.x - shape.radius, shape.y - shape.radius,
                      shape.x + shape.radius, shape.y + shape.radius)

    origin = Point(shape.x, shape.y)
    corners = [
        rotate_point(Point(shape.x + dx, shape.y + dy), origin, shape.rotation)
        for dx, dy in ((0, 0), (shape.width, 0), (shape.width, shape.height), (0, shape.height))
    ]
    xs = [c.x for c in corners]
    ys = [c.y for c in corners]
    return Bounds(min(xs), min(ys), max(xs), max(ys))

