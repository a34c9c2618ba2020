"""Masking: keep the coating head off exclusion regions.

Every shape flagged as a mask becomes a region expanded by its clearance
plus half the coating width.
Coating segments are clipped against the union of all regions, and travel
moves between coating runs are planned here so that callers only have to
execute the returned plan.
"""
import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .models import (
    CoatingSettings,
    MIN_SEGMENT_LENGTH,
    PathSegment,
    Point,
    SegmentKind,
    ShapeDescriptor,
    ShapeKind,
)
from .utils.geometry import (
    Bounds,
    Interval,
    clip_segment_to_circle,
    clip_segment_to_rect,
    merge_intervals,
    point_at,
    polyline_length,
    shape_bounds,
)

logger = logging.getLogger(__name__)

# Strict containment margin, so segments running along a region edge stay legal
_EDGE_EPSILON = 1e-9

CONTOUR_POLYGON_SIDES = 16

DIRECT = 'direct'
LIFT = 'lift'
CONTOUR = 'contour'


class MaskRegion:
    """A mask shape grown by its clearance."""

    def __init__(self, shape: ShapeDescriptor, clearance: float, strategy: str):
        self.shape = shape
        self.clearance = clearance
        self.strategy = strategy

    @property
    def name(self) -> str:
        return self.shape.name or self.shape.id

    def clip(self, start: Point, end: Point) -> Optional[Interval]:
        raise NotImplementedError

    def contains(self, point: Point, strict: bool = False) -> bool:
        raise NotImplementedError

    def contains_bounds(self, bounds: Bounds) -> bool:
        raise NotImplementedError

    def detour_vertices(self) -> List[Point]:
        """Polygon around the region, in walking order."""
        raise NotImplementedError

    def excluded_interval(self, start: Point, end: Point) -> Optional[Interval]:
        """
        Parameter interval of start->end that passes through the region interior.

        Segments that only touch the region, or run along its edge, are not
        excluded.
        """
        interval = self.clip(start, end)
        if interval is None:
            return None
        t0, t1 = interval
        if (t1 - t0) * start.distance_to(end) < MIN_SEGMENT_LENGTH:
            return None
        if not self.contains(point_at(start, end, (t0 + t1) / 2), strict=True):
            return None
        return interval


class RectMaskRegion(MaskRegion):
    """Rectangle (or image bounds) mask; rotation is taken as its bounding box."""

    def __init__(self, shape: ShapeDescriptor, clearance: float, strategy: str):
        super().__init__(shape, clearance, strategy)
        bounds = shape_bounds(shape)
        self.left = bounds.left - clearance
        self.top = bounds.top - clearance
        self.right = bounds.right + clearance
        self.bottom = bounds.bottom + clearance

    def clip(self, start, end):
        return clip_segment_to_rect(start, end, self.left, self.top, self.right, self.bottom)

    def contains(self, point, strict=False):
        if strict:
            return (self.left + _EDGE_EPSILON < point.x < self.right - _EDGE_EPSILON
                    and self.top + _EDGE_EPSILON < point.y < self.bottom - _EDGE_EPSILON)
        return self.left <= point.x <= self.right and self.top <= point.y <= self.bottom

    def contains_bounds(self, bounds):
        return (bounds.left >= self.left and bounds.right <= self.right
                and bounds.top >= self.top and bounds.bottom <= self.bottom)

    def detour_vertices(self):
        return [
            Point(self.left, self.top),
            Point(self.right, self.top),
            Point(self.right, self.bottom),
            Point(self.left, self.bottom),
        ]


class CircleMaskRegion(MaskRegion):

    def __init__(self, shape: ShapeDescriptor, clearance: float, strategy: str):
        super().__init__(shape, clearance, strategy)
        self.center = Point(shape.x, shape.y)
        self.radius = shape.radius + clearance

    def clip(self, start, end):
        return clip_segment_to_circle(start, end, self.center, self.radius)

    def contains(self, point, strict=False):
        distance = point.distance_to(self.center)
        if strict:
            return distance < self.radius - _EDGE_EPSILON
        return distance <= self.radius

    def contains_bounds(self, bounds):
        corners = (
            Point(bounds.left, bounds.top), Point(bounds.right, bounds.top),
            Point(bounds.right, bounds.bottom), Point(bounds.left, bounds.bottom),
        )
        return all(self.contains(c) for c in corners)

    def detour_vertices(self):
        # Circumscribed polygon: every edge stays on or outside the circle
        outer = self.radius / math.cos(math.pi / CONTOUR_POLYGON_SIDES)
        step = 2 * math.pi / CONTOUR_POLYGON_SIDES
        return [
            Point(self.center.x + outer * math.cos(i * step),
                  self.center.y + outer * math.sin(i * step))
            for i in range(CONTOUR_POLYGON_SIDES)
        ]


_REGION_TYPES = {
    ShapeKind.RECTANGLE: RectMaskRegion,
    ShapeKind.IMAGE: RectMaskRegion,
    ShapeKind.CIRCLE: CircleMaskRegion,
}


@dataclass
class TravelPlan:
    """How to get from one coating run to the next.

    Attributes:
        strategy: 'direct', 'lift' or 'contour'
        segments: Bridging segments to execute in order
    """
    strategy: str
    segments: List[PathSegment]


def _nearest_index(points: Sequence[Point], target: Point) -> int:
    best_index = 0
    best_distance = math.inf
    for i, point in enumerate(points):
        distance = point.distance_to(target)
        if distance < best_distance:
            best_distance = distance
            best_index = i
    return best_index


def _walk_polygon(vertices: Sequence[Point], start: Point, end: Point) -> List[Point]:
    """Shorter of the two walks around a polygon between the vertices nearest start and end."""
    first = _nearest_index(vertices, start)
    last = _nearest_index(vertices, end)
    count = len(vertices)

    forward = [vertices[first]]
    i = first
    while i != last:
        i = (i + 1) % count
        forward.append(vertices[i])

    backward = [vertices[first]]
    i = first
    while i != last:
        i = (i - 1) % count
        backward.append(vertices[i])

    forward_length = polyline_length([start] + forward + [end])
    backward_length = polyline_length([start] + backward + [end])
    return forward if forward_length <= backward_length else backward


class MaskingManager:
    """Clips coating segments and plans travel moves around mask shapes."""

    def __init__(self, settings: CoatingSettings, mask_shapes: Sequence[ShapeDescriptor]):
        self.settings = settings
        self.regions: List[MaskRegion] = []
        for shape in mask_shapes:
            region_type = _REGION_TYPES.get(shape.type)
            if region_type is None:
                continue
            clearance = (shape.masking_clearance if shape.masking_clearance is not None
                         else settings.masking_clearance)
            # Region edge sits half a bead width beyond the clearance
            clearance += settings.coating_width / 2
            strategy = shape.avoidance_strategy or settings.travel_avoidance_strategy
            self.regions.append(region_type(shape, clearance, strategy))

    def has_masks(self) -> bool:
        return self.settings.enable_masking and len(self.regions) > 0

    def apply_masking_to_segments(
        self,
        segments: List[PathSegment],
        shape: ShapeDescriptor
    ) -> List[PathSegment]:
        """
        Remove the parts of a shape's segments that fall inside any mask.

        Args:
            segments: Raw segments for the shape
            shape: The shape being coated

        Returns:
            The same list when masking is off, otherwise the surviving pieces
        """
        if not self.has_masks():
            return segments

        bounds = shape_bounds(shape)
        if any(region.contains_bounds(bounds) for region in self.regions):
            logger.debug("Shape %s lies inside a mask, skipping", shape.id)
            return []

        result: List[PathSegment] = []
        for segment in segments:
            result.extend(self.split_segment(segment))
        return result

    def split_segment(self, segment: PathSegment) -> List[PathSegment]:
        """Split a segment into the pieces outside the union of mask regions."""
        intervals = []
        for region in self.regions:
            interval = region.excluded_interval(segment.start, segment.end)
            if interval is not None:
                intervals.append(interval)

        if not intervals:
            return [segment]

        pieces: List[PathSegment] = []
        cursor = 0.0
        for t0, t1 in merge_intervals(intervals) + [(1.0, 1.0)]:
            if t0 > cursor:
                piece = PathSegment(
                    point_at(segment.start, segment.end, cursor),
                    point_at(segment.start, segment.end, t0),
                    segment.kind
                )
                if not piece.is_degenerate():
                    pieces.append(piece)
            cursor = max(cursor, t1)
        return pieces

    def find_intersecting_masks(self, start: Point, end: Point) -> List[MaskRegion]:
        if not self.has_masks():
            return []
        return [r for r in self.regions if r.excluded_interval(start, end) is not None]

    def is_point_in_mask_area(self, point: Point) -> bool:
        return self.has_masks() and any(r.contains(point) for r in self.regions)

    def plan_travel(self, start: Point, end: Point) -> TravelPlan:
        """
        Decide how the head travels between two coating runs.

        Args:
            start: Current head position (canvas units)
            end: Start of the next coating run

        Returns:
            TravelPlan with 'direct', 'lift' or 'contour' strategy
        """
        crossed = self.find_intersecting_masks(start, end)
        if not crossed:
            return TravelPlan(DIRECT, [PathSegment(start, end, SegmentKind.TRAVEL)])

        if len(crossed) == 1 and crossed[0].strategy == CONTOUR:
            legs = self._contour_legs(crossed[0], start, end)
            if legs is not None:
                logger.debug("Travel detours around mask %s via %d legs", crossed[0].name, len(legs))
                return TravelPlan(CONTOUR, legs)

        logger.debug("Travel crosses %d mask(s), lifting", len(crossed))
        return TravelPlan(LIFT, [PathSegment(start, end, SegmentKind.RAPID)])

    def _contour_legs(self, region: MaskRegion, start: Point,
                      end: Point) -> Optional[List[PathSegment]]:
        waypoints = [start] + _walk_polygon(region.detour_vertices(), start, end) + [end]
        legs = []
        for a, b in zip(waypoints, waypoints[1:]):
            leg = PathSegment(a, b, SegmentKind.TRAVEL)
            if leg.is_degenerate():
                continue
            if self.find_intersecting_masks(a, b):
                return None
            legs.append(leg)
        return legs
