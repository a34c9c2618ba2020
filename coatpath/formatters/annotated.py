"""Annotated output: a move table header ahead of the plain body.

The header is a block of comment lines between two sentinel markers so
that controllers and the preview parser both skip it:

    ;@MOVE_TABLE_BEGIN
    ; moves=3 pixels_per_mm=10 total_distance=125.000
    ; 0001 G0 F2000 X0.000 Y0.000 Z20.000 nozzle=off distance=60.000
    ...
    ;@MOVE_TABLE_END
"""
from typing import List

from ..models import CoatingSettings, MoveRecord
from ..utils.gcode_format import format_coordinate, generate_move
from ..utils.units import effective_pixels_per_mm

HEADER_BEGIN = ";@MOVE_TABLE_BEGIN"
HEADER_END = ";@MOVE_TABLE_END"


class AnnotatedHeaderFormatter:
    """Formatter that prepends a table of every accepted move."""

    def __init__(self, settings: CoatingSettings):
        self.settings = settings

    def format_move(self, move: MoveRecord) -> str:
        return generate_move(move.command, move.speed, move.x, move.y, move.z)

    def render(self, lines: List[str], moves: List[MoveRecord]) -> str:
        if not lines:
            return ""
        return "\n".join(self.header(moves) + lines) + "\n"

    def header(self, moves: List[MoveRecord]) -> List[str]:
        """
        Build the sentinel-delimited move table.

        Args:
            moves: Accepted moves in emission order

        Returns:
            Header lines including both sentinels
        """
        total = sum(move.distance for move in moves)
        pixels_per_mm = effective_pixels_per_mm(self.settings.pixels_per_mm)
        header = [
            HEADER_BEGIN,
            f"; moves={len(moves)} pixels_per_mm={pixels_per_mm:g} "
            f"total_distance={format_coordinate(total)}",
        ]
        for number, move in enumerate(moves, 1):
            nozzle = 'on' if move.nozzle_on else 'off'
            header.append(
                f"; {number:04d} {self.format_move(move)} "
                f"nozzle={nozzle} distance={format_coordinate(move.distance)}"
            )
        header.append(HEADER_END)
        return header
