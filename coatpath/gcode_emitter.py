"""Stateful G-code emitter.

The emitter is the only place where canvas pixels become millimeters. It
tracks the last position in both units so repeated conversion never drifts,
and it drops any move that would not change the encoded position.
"""
import math
from typing import Optional

from .formatters import MoveFormatter, create_formatter
from .models import CoatingSettings, EmitterState, MoveRecord, Position
from .utils.gcode_format import LINEAR, NOZZLE_OFF, NOZZLE_ON, RAPID, format_coordinate
from .utils.units import effective_pixels_per_mm

# Moves closer than this (mm) on every specified axis are suppressed
POSITION_TOLERANCE = 0.001


class GCodeEmitter:
    """Accumulates G-code for one generation run."""

    def __init__(self, settings: CoatingSettings, formatter: Optional[MoveFormatter] = None):
        self.settings = settings
        self.pixels_per_mm = effective_pixels_per_mm(settings.pixels_per_mm)
        self.formatter = formatter or create_formatter(settings)
        self.state = EmitterState(
            last_pixel=Position(0.0, 0.0, settings.safe_height),
            last_mm=Position(0.0, 0.0, settings.safe_height),
        )

    def _to_mm(self, pixel: float) -> float:
        return pixel / self.pixels_per_mm

    def add_line(self, line: str) -> None:
        """Append a raw line to the body."""
        self.state.lines.append(line)

    @staticmethod
    def _same_axis(last: float, new: float) -> bool:
        return (abs(last - new) < POSITION_TOLERANCE
                or format_coordinate(last) == format_coordinate(new))

    def _is_redundant(self, mm_x: float, mm_y: float, z: Optional[float]) -> bool:
        last = self.state.last_mm
        if not (self._same_axis(last.x, mm_x) and self._same_axis(last.y, mm_y)):
            return False
        return z is None or self._same_axis(last.z, z)

    def _move_to(self, x: float, y: float, z: Optional[float], speed: float, rapid: bool) -> bool:
        """
        Emit one move; the single point where position state changes.

        Args:
            x: Target X in canvas pixels
            y: Target Y in canvas pixels
            z: Target Z in mm, or None to hold Z and omit it from the line
            speed: Feed rate in mm/min
            rapid: True for G0, False for G1

        Returns:
            True if a line was emitted, False if the move was redundant
        """
        mm_x = self._to_mm(x)
        mm_y = self._to_mm(y)
        if self._is_redundant(mm_x, mm_y, z):
            return False

        last = self.state.last_mm
        new_z = z if z is not None else last.z
        move = MoveRecord(
            command=RAPID if rapid else LINEAR,
            speed=speed,
            x=mm_x,
            y=mm_y,
            z=z,
            nozzle_on=self.state.nozzle_on,
            distance=math.sqrt((mm_x - last.x) ** 2 + (mm_y - last.y) ** 2 + (new_z - last.z) ** 2),
        )
        self.state.lines.append(self.formatter.format_move(move))
        self.state.moves.append(move)

        self.state.last_pixel = Position(x, y, new_z)
        self.state.last_mm = Position(mm_x, mm_y, new_z)
        return True

    def travel_to(self, x: float, y: float, z: Optional[float] = None) -> bool:
        """Rapid (G0) move at move speed."""
        return self._move_to(x, y, z, self.settings.move_speed, True)

    def coat_to(self, x: float, y: float) -> bool:
        """Coating (G1) move at the current Z and the configured coating speed."""
        return self.coat_to_with_speed(x, y, self.settings.coating_speed)

    def coat_to_with_speed(self, x: float, y: float, speed: float) -> bool:
        """Coating (G1) move at the current Z and an explicit speed."""
        return self._move_to(x, y, self.state.last_mm.z, speed, False)

    def travel_at_coating_height(self, x: float, y: float, z: Optional[float] = None) -> bool:
        """Controlled (G1) move at move speed with Z forced to coating height."""
        height = z if z is not None else self.settings.coating_height
        return self._move_to(x, y, height, self.settings.move_speed, False)

    def set_z(self, z: float) -> bool:
        """Rapid Z change holding the current X/Y."""
        last = self.state.last_pixel
        return self._move_to(last.x, last.y, z, self.settings.move_speed, True)

    def set_coating_z(self, z: float) -> bool:
        """Rapid Z change to a coating height, holding X/Y."""
        return self.set_z(z)

    def nozzle_on(self) -> None:
        self.add_line(NOZZLE_ON)
        self.state.nozzle_on = True

    def nozzle_off(self) -> None:
        self.add_line(NOZZLE_OFF)
        self.state.nozzle_on = False

    @property
    def is_nozzle_on(self) -> bool:
        return self.state.nozzle_on

    @property
    def move_count(self) -> int:
        return len(self.state.moves)

    def current_position(self) -> Position:
        """Current X/Y in canvas pixels with Z in mm."""
        return Position(self.state.last_pixel.x, self.state.last_pixel.y, self.state.last_mm.z)

    def get_gcode(self) -> str:
        return self.formatter.render(self.state.lines, self.state.moves)
