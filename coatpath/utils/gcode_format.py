"""G-code formatting utilities.

All moves share one grammar:
    <G0|G1> F<int> X<mm> Y<mm>[ Z<mm>]
Nozzle commands are bare M-codes with no trailing comments.
"""
import re
from typing import Optional


RAPID = "G0"
LINEAR = "G1"
NOZZLE_ON = "M503"
NOZZLE_OFF = "M504"


def format_coordinate(value: float, precision: int = 3) -> str:
    """
    Format a coordinate value with a fixed number of decimal places.

    Negative zero is normalized so "-0.000" never appears.

    Args:
        value: The coordinate value
        precision: Number of decimal places (default 3)

    Returns:
        Formatted string representation
    """
    text = f"{value:.{precision}f}"
    if text.startswith('-') and float(text) == 0:
        text = text[1:]
    return text


def format_feed(speed: float) -> str:
    """Format a feed rate as an integer."""
    return str(int(round(speed)))


def generate_move(
    command: str,
    speed: float,
    x: float,
    y: float,
    z: Optional[float] = None
) -> str:
    """
    Generate a G0/G1 move line.

    Args:
        command: "G0" or "G1"
        speed: Feed rate in mm/min
        x: X coordinate in mm
        y: Y coordinate in mm
        z: Z coordinate in mm (optional, omitted when None)

    Returns:
        Move command string
    """
    parts = [
        command,
        f"F{format_feed(speed)}",
        f"X{format_coordinate(x)}",
        f"Y{format_coordinate(y)}",
    ]
    if z is not None:
        parts.append(f"Z{format_coordinate(z)}")
    return " ".join(parts)


def sanitize_project_name(name: str) -> str:
    """
    Clean project name for filesystem use.

    - Replace spaces with underscores
    - Remove special characters except underscores and hyphens
    - Truncate to 50 characters max

    Args:
        name: Original project name

    Returns:
        Sanitized name safe for filesystem, 'untitled' when nothing is left
    """
    sanitized = name.replace(" ", "_")
    sanitized = re.sub(r'[^a-zA-Z0-9_-]', '', sanitized)
    return sanitized[:50] or 'untitled'
