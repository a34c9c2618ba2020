"""Unit conversion utilities."""

DEFAULT_PIXELS_PER_MM = 10.0


def effective_pixels_per_mm(pixels_per_mm: float) -> float:
    """Return the configured scale, falling back to the default when not positive."""
    return pixels_per_mm if pixels_per_mm > 0 else DEFAULT_PIXELS_PER_MM


def pixels_to_mm(value: float, pixels_per_mm: float) -> float:
    """Convert canvas pixels to millimeters."""
    return value / effective_pixels_per_mm(pixels_per_mm)


def mm_to_pixels(value: float, pixels_per_mm: float) -> float:
    """Convert millimeters to canvas pixels."""
    return value * effective_pixels_per_mm(pixels_per_mm)
