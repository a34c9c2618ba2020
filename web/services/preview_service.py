"""SVG preview generation service for coating toolpath visualization."""
from typing import List, Sequence, Tuple

from coatpath.models import PathSegment, ShapeDescriptor, ShapeKind, WorkArea
from coatpath.shape_paths import SHAPE_COLORS, DEFAULT_SHAPE_COLOR
from coatpath.utils.geometry import shape_bounds
from coatpath.utils.units import pixels_to_mm


class Colors:
    """SVG color constants for preview elements."""
    TRAVEL = '#adb5bd'       # Gray
    MASK_FILL = '#f1c0c0'    # Light red
    MASK_STROKE = '#c0392b'  # Red
    START = '#2f9e44'        # Green
    SEQUENCE_LABEL = '#212529'

    # Background/grid colors
    BACKGROUND = '#f8f9fa'   # Off-white
    GRID = '#e9ecef'         # Light gray
    WORK_AREA_OUTLINE = '#dee2e6'  # Gray
    AXIS_LABEL = '#6c757d'   # Dark gray


class PreviewService:
    """Service for generating SVG previews of coating toolpaths."""

    # SVG rendering constants (canvas units map 1:1 to SVG units)
    PADDING = 40
    SCALE = 1.0
    GRID_INTERVAL = 100  # canvas units

    @staticmethod
    def generate_svg(
        work_area: WorkArea,
        ordered_paths: Sequence[Tuple[ShapeDescriptor, List[PathSegment]]],
        masks: Sequence[ShapeDescriptor] = (),
        pixels_per_mm: float = 10.0
    ) -> str:
        """
        Generate SVG markup for a coating toolpath preview.

        Args:
            work_area: Work area in canvas units
            ordered_paths: (shape, ordered segments) pairs in coating order
            masks: Mask shapes to shade
            pixels_per_mm: Scale for the millimeter axis labels

        Returns:
            Complete SVG markup string
        """
        padding = PreviewService.PADDING
        scale = PreviewService.SCALE

        svg_width = work_area.width * scale + padding * 2
        svg_height = work_area.height * scale + padding * 2

        svg_parts = [
            f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 {svg_width:g} {svg_height:g}" '
            f'width="{svg_width:g}" height="{svg_height:g}" style="background: {Colors.BACKGROUND};">'
        ]

        PreviewService._draw_work_area(svg_parts, work_area, padding, scale)
        PreviewService._draw_grid(svg_parts, work_area, padding, scale)
        PreviewService._draw_axis_labels(svg_parts, work_area, padding, scale, pixels_per_mm)
        PreviewService._draw_masks(svg_parts, masks, padding, scale)
        PreviewService._draw_paths(svg_parts, ordered_paths, padding, scale)

        svg_parts.append('</svg>')
        return ''.join(svg_parts)

    @staticmethod
    def _draw_work_area(svg_parts: List[str], work_area: WorkArea, padding: float, scale: float) -> None:
        """Draw work area outline rectangle."""
        svg_parts.append(
            f'<rect x="{padding}" y="{padding}" width="{work_area.width * scale:g}" '
            f'height="{work_area.height * scale:g}" '
            f'fill="none" stroke="{Colors.WORK_AREA_OUTLINE}" stroke-width="2"/>'
        )

    @staticmethod
    def _draw_grid(svg_parts: List[str], work_area: WorkArea, padding: float, scale: float) -> None:
        """Draw grid lines every GRID_INTERVAL canvas units."""
        interval = PreviewService.GRID_INTERVAL
        for x in range(0, int(work_area.width) + 1, interval):
            px = padding + x * scale
            svg_parts.append(
                f'<line x1="{px:g}" y1="{padding}" x2="{px:g}" y2="{padding + work_area.height * scale:g}" '
                f'stroke="{Colors.GRID}" stroke-width="1"/>'
            )
        for y in range(0, int(work_area.height) + 1, interval):
            py = padding + y * scale
            svg_parts.append(
                f'<line x1="{padding}" y1="{py:g}" x2="{padding + work_area.width * scale:g}" y2="{py:g}" '
                f'stroke="{Colors.GRID}" stroke-width="1"/>'
            )

    @staticmethod
    def _draw_axis_labels(
        svg_parts: List[str],
        work_area: WorkArea,
        padding: float,
        scale: float,
        pixels_per_mm: float
    ) -> None:
        """Label grid lines in millimeters."""
        interval = PreviewService.GRID_INTERVAL
        for x in range(0, int(work_area.width) + 1, interval):
            px = padding + x * scale
            svg_parts.append(
                f'<text x="{px:g}" y="{padding - 8}" font-size="13" '
                f'fill="{Colors.AXIS_LABEL}" text-anchor="middle" font-family="Arial, sans-serif">'
                f'{pixels_to_mm(x, pixels_per_mm):g}</text>'
            )
        for y in range(0, int(work_area.height) + 1, interval):
            py = padding + y * scale
            svg_parts.append(
                f'<text x="{padding - 5}" y="{py + 4:g}" font-size="13" '
                f'fill="{Colors.AXIS_LABEL}" text-anchor="end" font-family="Arial, sans-serif">'
                f'{pixels_to_mm(y, pixels_per_mm):g}</text>'
            )

    @staticmethod
    def _draw_masks(
        svg_parts: List[str],
        masks: Sequence[ShapeDescriptor],
        padding: float,
        scale: float
    ) -> None:
        """Shade masked regions."""
        for mask in masks:
            if mask.type == ShapeKind.CIRCLE:
                svg_parts.append(
                    f'<circle cx="{padding + mask.x * scale:g}" cy="{padding + mask.y * scale:g}" '
                    f'r="{mask.radius * scale:g}" fill="{Colors.MASK_FILL}" fill-opacity="0.6" '
                    f'stroke="{Colors.MASK_STROKE}" stroke-width="1" stroke-dasharray="4,4"/>'
                )
            else:
                bounds = shape_bounds(mask)
                svg_parts.append(
                    f'<rect x="{padding + bounds.left * scale:g}" y="{padding + bounds.top * scale:g}" '
                    f'width="{(bounds.right - bounds.left) * scale:g}" '
                    f'height="{(bounds.bottom - bounds.top) * scale:g}" '
                    f'fill="{Colors.MASK_FILL}" fill-opacity="0.6" '
                    f'stroke="{Colors.MASK_STROKE}" stroke-width="1" stroke-dasharray="4,4"/>'
                )

    @staticmethod
    def _draw_paths(
        svg_parts: List[str],
        ordered_paths: Sequence[Tuple[ShapeDescriptor, List[PathSegment]]],
        padding: float,
        scale: float
    ) -> None:
        """Draw coating segments, travel gaps and the coating sequence number of each shape."""
        previous_end = None
        for seq_num, (shape, segments) in enumerate(ordered_paths, 1):
            color = SHAPE_COLORS.get(shape.type, DEFAULT_SHAPE_COLOR)
            for segment in segments:
                if previous_end is not None and not previous_end.is_close(segment.start):
                    svg_parts.append(
                        f'<line x1="{padding + previous_end.x * scale:g}" y1="{padding + previous_end.y * scale:g}" '
                        f'x2="{padding + segment.start.x * scale:g}" y2="{padding + segment.start.y * scale:g}" '
                        f'stroke="{Colors.TRAVEL}" stroke-width="1" stroke-dasharray="3,3"/>'
                    )
                svg_parts.append(
                    f'<line x1="{padding + segment.start.x * scale:g}" y1="{padding + segment.start.y * scale:g}" '
                    f'x2="{padding + segment.end.x * scale:g}" y2="{padding + segment.end.y * scale:g}" '
                    f'stroke="{color}" stroke-width="2" stroke-linecap="round"/>'
                )
                previous_end = segment.end

            if segments:
                start = segments[0].start
                svg_parts.append(
                    f'<circle cx="{padding + start.x * scale:g}" cy="{padding + start.y * scale:g}" r="4" '
                    f'fill="{Colors.START}"/>'
                )
                svg_parts.append(
                    f'<text x="{padding + start.x * scale + 6:g}" y="{padding + start.y * scale - 6:g}" '
                    f'font-size="12" fill="{Colors.SEQUENCE_LABEL}" '
                    f'font-family="Arial, sans-serif">{seq_num}</text>'
                )
