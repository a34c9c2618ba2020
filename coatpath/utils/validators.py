"""Settings and shape validation utilities."""
from typing import List, Sequence

from ..models import (
    AVOIDANCE_STRATEGIES,
    FILL_PATTERNS,
    OUTPUT_FORMATS,
    CoatingSettings,
    ShapeDescriptor,
    WorkArea,
)
from .geometry import shape_bounds


def validate_bounds(
    x: float,
    y: float,
    max_x: float,
    max_y: float
) -> bool:
    """
    Check if a point is within the work area.

    Args:
        x: X coordinate
        y: Y coordinate
        max_x: Work area width
        max_y: Work area height

    Returns:
        True if point is within bounds
    """
    return 0 <= x <= max_x and 0 <= y <= max_y


def validate_settings(settings: CoatingSettings) -> List[str]:
    """
    Validate coating process parameters.

    Args:
        settings: CoatingSettings to check

    Returns:
        List of error messages (empty if valid)
    """
    errors = []

    if settings.coating_speed <= 0:
        errors.append("Coating speed must be greater than 0")
    if settings.move_speed <= 0:
        errors.append("Move speed must be greater than 0")
    if settings.line_spacing <= 0:
        errors.append("Line spacing must be greater than 0")
    if settings.safe_height < settings.coating_height:
        errors.append(
            f"Safe height ({settings.safe_height}) is below coating height ({settings.coating_height})"
        )
    if settings.masking_clearance < 0:
        errors.append("Masking clearance cannot be negative")
    if settings.fill_pattern not in FILL_PATTERNS:
        errors.append(f"Unknown fill pattern: {settings.fill_pattern}")
    if settings.travel_avoidance_strategy not in AVOIDANCE_STRATEGIES:
        errors.append(f"Unknown travel avoidance strategy: {settings.travel_avoidance_strategy}")
    if settings.output_format not in OUTPUT_FORMATS:
        errors.append(f"Unknown output format: {settings.output_format}")
    if settings.unit not in ('mm', 'inch'):
        errors.append(f"Unknown unit: {settings.unit}")

    return errors


def validate_shapes_in_work_area(
    shapes: Sequence[ShapeDescriptor],
    work_area: WorkArea
) -> List[str]:
    """
    Check that every coatable or masking shape lies inside the work area.

    Args:
        shapes: Shape descriptors in canvas units
        work_area: Work area in canvas units

    Returns:
        List of error messages for shapes extending past the work area
    """
    errors = []
    for shape in shapes:
        if shape.skip_coating or shape.coating_type is None:
            continue
        bounds = shape_bounds(shape)
        label = shape.name or shape.id
        if not (validate_bounds(bounds.left, bounds.top, work_area.width, work_area.height)
                and validate_bounds(bounds.right, bounds.bottom, work_area.width, work_area.height)):
            errors.append(
                f"Shape '{label}' extends past the work area ({work_area.width:g} x {work_area.height:g})"
            )
    return errors


def validate_shape_overrides(shapes: Sequence[ShapeDescriptor]) -> List[str]:
    """Check per-shape pattern and strategy overrides."""
    errors = []
    for shape in shapes:
        label = shape.name or shape.id
        if shape.fill_pattern and shape.fill_pattern not in FILL_PATTERNS:
            errors.append(f"Shape '{label}' has unknown fill pattern: {shape.fill_pattern}")
        if shape.avoidance_strategy and shape.avoidance_strategy not in AVOIDANCE_STRATEGIES:
            errors.append(
                f"Shape '{label}' has unknown travel avoidance strategy: {shape.avoidance_strategy}"
            )
        if shape.coating_speed is not None and shape.coating_speed <= 0:
            errors.append(f"Shape '{label}' coating speed must be greater than 0")
    return errors
