"""Decompose shapes into coating path segments.

All coordinates are canvas pixels. Each shape kind has its own generator,
selected from a dispatch table; unsupported combinations of shape kind and
coating type produce an empty list rather than an error.
"""
import math
from typing import Callable, Dict, List, Sequence

from .models import (
    ArcSegment,
    CoatingSettings,
    CoatingType,
    MIN_SEGMENT_LENGTH,
    PathGroup,
    PathSegment,
    Point,
    ShapeDescriptor,
    ShapeKind,
)
from .utils.geometry import rotate_point


CIRCLE_SEGMENT_COUNT = 16

SHAPE_COLORS = {
    ShapeKind.RECTANGLE: '#3b82f6',
    ShapeKind.CIRCLE: '#10b981',
    ShapeKind.IMAGE: '#f59e0b',
}
DEFAULT_SHAPE_COLOR = '#6b7280'

# Outward offset of the first outline ring, in units of line spacing
OUTLINE_START_OFFSETS = {
    'outside': 1.0,
    'center': 0.0,
    'inside': -1.0,
}


def _add_segment(segments: List[PathSegment], start: Point, end: Point) -> None:
    segment = PathSegment(start, end)
    if not segment.is_degenerate():
        segments.append(segment)


def _rect_ring(left: float, top: float, width: float, height: float) -> List[PathSegment]:
    """Four boundary segments, clockwise on screen from the top-left corner."""
    top_left = Point(left, top)
    top_right = Point(left + width, top)
    bottom_right = Point(left + width, top + height)
    bottom_left = Point(left, top + height)

    segments: List[PathSegment] = []
    _add_segment(segments, top_left, top_right)
    _add_segment(segments, top_right, bottom_right)
    _add_segment(segments, bottom_right, bottom_left)
    _add_segment(segments, bottom_left, top_left)
    return segments


class ShapeToPathConverter:
    """Generates raw coating segments for one shape at a time."""

    def __init__(self, settings: CoatingSettings):
        self.settings = settings
        self._generators: Dict[ShapeKind, Callable[[ShapeDescriptor], List[PathSegment]]] = {
            ShapeKind.RECTANGLE: self._rectangle_segments,
            ShapeKind.IMAGE: self._rectangle_segments,
            ShapeKind.CIRCLE: self._circle_segments,
        }
        self._fill_patterns: Dict[str, Callable[..., List[PathSegment]]] = {
            'horizontal': self._horizontal_fill,
            'vertical': self._vertical_fill,
            'concentric': self._concentric_fill,
        }

    def convert(self, shape: ShapeDescriptor) -> List[PathSegment]:
        """
        Generate segments for a shape in absolute canvas coordinates.

        Args:
            shape: Shape snapshot

        Returns:
            List of PathSegments (empty when there is nothing to coat)
        """
        if shape.skip_coating or not shape.is_coatable:
            return []

        generator = self._generators.get(shape.type)
        if generator is None:
            return []

        segments = generator(shape)
        if shape.rotation:
            origin = Point(shape.x, shape.y)
            segments = [
                PathSegment(
                    rotate_point(s.start, origin, shape.rotation),
                    rotate_point(s.end, origin, shape.rotation),
                    s.kind
                )
                for s in segments
            ]
        return segments

    def line_spacing_for(self, shape: ShapeDescriptor) -> float:
        if shape.line_spacing is not None and shape.line_spacing > 0:
            return shape.line_spacing
        return self.settings.line_spacing

    def fill_pattern_for(self, shape: ShapeDescriptor) -> str:
        pattern = shape.fill_pattern or self.settings.fill_pattern
        if pattern == 'auto':
            return 'horizontal' if shape.width >= shape.height else 'vertical'
        return pattern

    # --- Rectangles and image bounds ---

    def _rectangle_segments(self, shape: ShapeDescriptor) -> List[PathSegment]:
        if shape.width <= 0 or shape.height <= 0:
            return []

        if shape.coating_type == CoatingType.OUTLINE:
            return self._rectangle_outline(shape)

        spacing = self.line_spacing_for(shape)
        if spacing <= 0:
            return []
        fill = self._fill_patterns.get(self.fill_pattern_for(shape), self._horizontal_fill)
        return fill(shape.x, shape.y, shape.width, shape.height, spacing)

    def _rectangle_outline(self, shape: ShapeDescriptor) -> List[PathSegment]:
        segments: List[PathSegment] = []
        for offset in self._outline_offsets(shape):
            width = shape.width + 2 * offset
            height = shape.height + 2 * offset
            if width < MIN_SEGMENT_LENGTH or height < MIN_SEGMENT_LENGTH:
                continue
            segments.extend(_rect_ring(shape.x - offset, shape.y - offset, width, height))
        return segments

    def _outline_offsets(self, shape: ShapeDescriptor) -> List[float]:
        """Outward ring offsets, one per pass; later passes grow away from the shape."""
        spacing = self.line_spacing_for(shape)
        first = OUTLINE_START_OFFSETS.get(shape.outline_start, 0.0) * spacing
        passes = max(1, shape.outline_passes)
        return [first + i * spacing for i in range(passes)]

    @staticmethod
    def _horizontal_fill(x: float, y: float, width: float, height: float,
                         spacing: float) -> List[PathSegment]:
        segments: List[PathSegment] = []
        num_lines = math.floor(height / spacing)
        for i in range(num_lines + 1):
            line_y = y + i * spacing
            if line_y > y + height:
                break
            start, end = Point(x, line_y), Point(x + width, line_y)
            if i % 2 == 1:
                start, end = end, start
            _add_segment(segments, start, end)
        return segments

    @staticmethod
    def _vertical_fill(x: float, y: float, width: float, height: float,
                       spacing: float) -> List[PathSegment]:
        segments: List[PathSegment] = []
        num_lines = math.floor(width / spacing)
        for i in range(num_lines + 1):
            line_x = x + i * spacing
            if line_x > x + width:
                break
            start, end = Point(line_x, y), Point(line_x, y + height)
            if i % 2 == 1:
                start, end = end, start
            _add_segment(segments, start, end)
        return segments

    @staticmethod
    def _concentric_fill(x: float, y: float, width: float, height: float,
                         spacing: float) -> List[PathSegment]:
        segments: List[PathSegment] = []
        inset = 0.0
        while width - 2 * inset >= MIN_SEGMENT_LENGTH and height - 2 * inset >= MIN_SEGMENT_LENGTH:
            segments.extend(_rect_ring(x + inset, y + inset, width - 2 * inset, height - 2 * inset))
            inset += spacing
        return segments

    # --- Circles ---

    def _circle_segments(self, shape: ShapeDescriptor) -> List[PathSegment]:
        # Circle fill has no generator
        if shape.coating_type != CoatingType.OUTLINE or shape.radius <= 0:
            return []

        center = Point(shape.x, shape.y)
        segments: List[PathSegment] = []
        for offset in self._outline_offsets(shape):
            radius = shape.radius + offset
            if radius < MIN_SEGMENT_LENGTH:
                continue
            arc = ArcSegment(
                start=Point(center.x + radius, center.y),
                center=center,
                radius=radius,
            )
            segments.extend(arc.to_chords(CIRCLE_SEGMENT_COUNT))
        return segments


def shape_display_name(shape: ShapeDescriptor, index: int) -> str:
    return shape.name or f"{shape.type.value.upper()} {index + 1}"


def convert_shapes_to_path_groups(
    shapes: Sequence[ShapeDescriptor],
    settings: CoatingSettings
) -> List[PathGroup]:
    """
    Build one PathGroup per shape that produces segments.

    Args:
        shapes: Shapes in editor order
        settings: Coating settings

    Returns:
        List of PathGroups keyed by shape id
    """
    converter = ShapeToPathConverter(settings)
    groups = []
    for index, shape in enumerate(shapes):
        segments = converter.convert(shape)
        if not segments:
            continue
        groups.append(PathGroup(
            id=shape.id,
            name=shape_display_name(shape, index),
            segments=segments,
            color=SHAPE_COLORS.get(shape.type, DEFAULT_SHAPE_COLOR),
            order=shape.coating_order if shape.coating_order else index,
        ))
    return groups
