"""Plain output: the body is exactly the emitted lines."""
from typing import List

from ..models import CoatingSettings, MoveRecord
from ..utils.gcode_format import generate_move


class PlainFormatter:
    """Default formatter with no header."""

    def __init__(self, settings: CoatingSettings):
        self.settings = settings

    def format_move(self, move: MoveRecord) -> str:
        return generate_move(move.command, move.speed, move.x, move.y, move.z)

    def render(self, lines: List[str], moves: List[MoveRecord]) -> str:
        if not lines:
            return ""
        return "\n".join(lines) + "\n"
