"""Shared utility modules for coating G-code generation."""

from .units import effective_pixels_per_mm, pixels_to_mm, mm_to_pixels
from .gcode_format import format_coordinate, generate_move, sanitize_project_name
from .geometry import (
    Bounds,
    clip_segment_to_circle,
    clip_segment_to_rect,
    merge_intervals,
    rotate_point,
    shape_bounds
)
from .validators import validate_settings, validate_shapes_in_work_area, validate_shape_overrides
