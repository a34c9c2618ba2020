"""Per-shape sequencing and emission."""
import asyncio
from typing import Callable, List, Optional, Sequence

from .gcode_emitter import GCodeEmitter
from .masking import CONTOUR, LIFT, MaskingManager
from .models import CoatingSettings, PathSegment, Point, ShapeDescriptor
from .sequencer import order_segments


ProgressCallback = Callable[[float, str], None]

# Yield to the event loop after this many coated segments
YIELD_INTERVAL = 500


class PathOptimizer:
    """Orders a shape's segments and drives the emitter through them."""

    def __init__(self, settings: CoatingSettings, masking_manager: MaskingManager):
        self.settings = settings
        self.masking_manager = masking_manager

    def get_optimized_path_for_visualization(
        self,
        segments: Sequence[PathSegment],
        start_point: Point
    ) -> List[PathSegment]:
        """Traversal order used for emission, without emitting anything."""
        return order_segments(segments, start_point)

    async def optimize_and_emit(
        self,
        segments: Sequence[PathSegment],
        emitter: GCodeEmitter,
        shape: ShapeDescriptor,
        on_progress: Optional[ProgressCallback] = None
    ) -> List[PathSegment]:
        """
        Sequence a shape's segments from the head's position and emit them.

        Each run of connected segments is coated with the nozzle on. Gaps
        between runs are bridged according to the masking manager's travel
        plan. The head enters the shape from safe height and returns to safe
        height afterwards.

        Args:
            segments: Masked segments for the shape
            emitter: Emitter carrying the current head position
            shape: Shape being coated (for per-shape height and speed)
            on_progress: Optional callback receiving (percent, message)

        Returns:
            The ordered segments that were emitted
        """
        if not segments:
            return []

        start = emitter.current_position().as_point()
        ordered = self.get_optimized_path_for_visualization(segments, start)

        coating_z = shape.coating_height if shape.coating_height is not None else self.settings.coating_height
        speed = shape.coating_speed if shape.coating_speed else self.settings.coating_speed

        previous_end: Optional[Point] = None
        for index, segment in enumerate(ordered):
            if previous_end is None or not previous_end.is_close(segment.start):
                if emitter.is_nozzle_on:
                    emitter.nozzle_off()
                if previous_end is None:
                    emitter.travel_to(segment.start.x, segment.start.y)
                else:
                    self._travel(emitter, previous_end, segment.start, coating_z)
                emitter.set_coating_z(coating_z)
                emitter.nozzle_on()

            emitter.coat_to_with_speed(segment.end.x, segment.end.y, speed)
            previous_end = segment.end

            if (index + 1) % YIELD_INTERVAL == 0:
                await asyncio.sleep(0)

        if emitter.is_nozzle_on:
            emitter.nozzle_off()
        emitter.set_z(self.settings.safe_height)

        if on_progress:
            on_progress(100, f"{len(ordered)} segments emitted")
        return ordered

    def _travel(self, emitter: GCodeEmitter, start: Point, end: Point, coating_z: float) -> None:
        plan = self.masking_manager.plan_travel(start, end)
        if plan.strategy == LIFT:
            emitter.set_z(self.settings.safe_height)
            for segment in plan.segments:
                emitter.travel_to(segment.end.x, segment.end.y)
        elif plan.strategy == CONTOUR:
            for segment in plan.segments:
                emitter.travel_at_coating_height(segment.end.x, segment.end.y, coating_z)
        else:
            for segment in plan.segments:
                emitter.travel_to(segment.end.x, segment.end.y)
