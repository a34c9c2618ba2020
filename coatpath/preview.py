"""Re-parse generated G-code into a 3D preview path."""
import re
from typing import List, Tuple

PathPoint = Tuple[float, float, float]

MOVE_PATTERN = re.compile(r'^G0?[01](?![0-9])')
AXIS_PATTERNS = {
    axis: re.compile(rf'{axis}([+-]?\d*\.?\d+)')
    for axis in ('X', 'Y', 'Z')
}

DEFAULT_START = (0.0, 0.0, 5.0)


def parse_gcode_to_path(gcode: str, start: PathPoint = DEFAULT_START) -> List[PathPoint]:
    """
    Extract the tool path from G0/G1 lines.

    Comments after ';' are ignored. An axis missing from a line keeps its
    previous value; the first line inherits from `start`.

    Args:
        gcode: Program text
        start: Position assumed before the first move (x, y, z)

    Returns:
        One (x, y, z) point per move line
    """
    x, y, z = start
    path: List[PathPoint] = []

    for raw_line in gcode.splitlines():
        line = raw_line.split(';', 1)[0].strip().upper()
        if not MOVE_PATTERN.match(line):
            continue

        match = AXIS_PATTERNS['X'].search(line)
        if match:
            x = float(match.group(1))
        match = AXIS_PATTERNS['Y'].search(line)
        if match:
            y = float(match.group(1))
        match = AXIS_PATTERNS['Z'].search(line)
        if match:
            z = float(match.group(1))
        path.append((x, y, z))

    return path
