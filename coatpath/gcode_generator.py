"""Coating G-code generation.

Runs the whole pipeline for a set of shapes: path generation, masking,
sequencing, emission and snippet assembly. The run is a coroutine that
yields to the event loop between shapes; synchronous callers drive it with
asyncio.run().
"""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Sequence

from .gcode_emitter import GCodeEmitter
from .masking import MaskingManager
from .models import CoatingSettings, PathSegment, Point, ShapeDescriptor, WorkArea
from .path_optimizer import PathOptimizer
from .preview import PathPoint, parse_gcode_to_path
from .shape_paths import ShapeToPathConverter
from .snippets import GCodeSnippet, assemble_program, build_context

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float, str], None]

NOTHING_TO_COAT_MESSAGE = "Nothing to coat: no shapes with a fill or outline coating type"
ALL_SKIPPED_MESSAGE = "Every fill or outline shape is marked to skip coating"


class GenerationError(Exception):
    """Raised when a run cannot produce a complete program.

    Attributes:
        reason: EMPTY_BODY or SHAPE_FAILED
        shape_id: Shape being processed when the run failed, if any
    """
    EMPTY_BODY = 'empty_body'
    SHAPE_FAILED = 'shape_failed'

    def __init__(self, message: str, reason: str, shape_id: Optional[str] = None):
        super().__init__(message)
        self.reason = reason
        self.shape_id = shape_id


@dataclass
class GenerationResult:
    """Result of a generation run."""
    gcode: str
    preview_path: List[PathPoint] = field(default_factory=list)
    coated_shape_count: int = 0
    message: str = ''

    @property
    def is_empty(self) -> bool:
        return not self.gcode


@dataclass(frozen=True)
class SequenceEndpoint:
    """Where the head enters and leaves one shape in coating order."""
    shape_id: str
    start: Point
    end: Point
    order: int


def _ignore_progress(percent: float, message: str) -> None:
    pass


class CoatingPathGenerator:
    """Builds and emits coating paths for every eligible shape."""

    def __init__(self, settings: CoatingSettings, shapes: Sequence[ShapeDescriptor]):
        self.settings = settings
        self.has_coatable_types = any(s.is_coatable for s in shapes)
        active = [s for s in shapes if not s.skip_coating]
        self.coating_shapes = [s for s in active if s.is_coatable]
        self.mask_shapes = [s for s in active if s.is_mask] if settings.enable_masking else []

        self.converter = ShapeToPathConverter(settings)
        self.masking_manager = MaskingManager(settings, self.mask_shapes)
        self.optimizer = PathOptimizer(settings, self.masking_manager)

    def ordered_shapes(self) -> List[ShapeDescriptor]:
        """Coating shapes by coating order, then x, then y."""
        return sorted(self.coating_shapes, key=lambda s: (s.sort_order, s.x, s.y))

    def segments_for_shape(self, shape: ShapeDescriptor) -> List[PathSegment]:
        return self.masking_manager.apply_masking_to_segments(self.converter.convert(shape), shape)

    def get_optimized_path_for_shape(
        self,
        shape: ShapeDescriptor,
        start_point: Point
    ) -> Optional[List[PathSegment]]:
        """Ordered segments for one shape, or None when it has nothing to coat."""
        if shape.skip_coating or not shape.is_coatable:
            return None
        segments = self.segments_for_shape(shape)
        if not segments:
            return None
        return self.optimizer.get_optimized_path_for_visualization(segments, start_point)

    async def generate_paths(
        self,
        emitter: GCodeEmitter,
        on_progress: Optional[ProgressCallback] = None
    ) -> int:
        """
        Emit coating moves for every shape into the emitter.

        Args:
            emitter: Emitter for this run
            on_progress: Optional callback receiving (percent, message)

        Returns:
            Number of shapes that produced coating moves

        Raises:
            GenerationError: If processing any shape fails
        """
        report = on_progress or _ignore_progress

        emitter.set_z(self.settings.safe_height)
        report(5, "Starting coating path generation")

        shapes = self.ordered_shapes()
        if not shapes:
            report(100, ALL_SKIPPED_MESSAGE if self.has_coatable_types else NOTHING_TO_COAT_MESSAGE)
            return 0

        total = len(shapes)
        span = 90 / total
        coated = 0
        for index, shape in enumerate(shapes):
            base = 5 + index * span
            report(base, f"{shape.type.value.upper()} {index + 1}/{total}: computing paths")

            try:
                segments = self.segments_for_shape(shape)
                if segments:
                    await self.optimizer.optimize_and_emit(
                        segments, emitter, shape,
                        lambda percent, message, base=base: report(base + span * percent / 100, message)
                    )
                    coated += 1
                else:
                    logger.debug("Shape %s produced no coating segments", shape.id)
            except Exception as e:
                logger.exception("Path generation failed for shape %s (%s)", shape.id, shape.type.value)
                report(0, f"Generation failed on shape {shape.id}: {e}")
                raise GenerationError(
                    f"Generation failed on shape {shape.id}: {e}",
                    GenerationError.SHAPE_FAILED,
                    shape.id
                ) from e

            await asyncio.sleep(0)

        report(100, f"Coating paths generated for {coated} shape(s)")
        return coated

    def coating_sequence_endpoints(self, start: Point = Point(0.0, 0.0)) -> List[SequenceEndpoint]:
        """
        Entry and exit points of each explicitly ordered shape.

        Only shapes with a positive coating order take part, visited in that
        order from `start`, with each exit feeding the next entry.
        """
        ordered = sorted(
            (s for s in self.coating_shapes if s.coating_order and s.coating_order > 0),
            key=lambda s: s.coating_order
        )
        endpoints = []
        current = start
        for shape in ordered:
            path = self.get_optimized_path_for_shape(shape, current)
            if not path:
                continue
            endpoints.append(SequenceEndpoint(shape.id, path[0].start, path[-1].end, shape.coating_order))
            current = path[-1].end
        return endpoints


async def generate_coating_gcode(
    shapes: Sequence[ShapeDescriptor],
    settings: CoatingSettings,
    on_progress: Optional[ProgressCallback] = None
) -> str:
    """Generate the coating body only, without snippets."""
    emitter = GCodeEmitter(settings)
    await CoatingPathGenerator(settings, shapes).generate_paths(emitter, on_progress)
    return emitter.get_gcode()


async def generate_gcode(
    shapes: Sequence[ShapeDescriptor],
    settings: CoatingSettings,
    work_area: WorkArea,
    snippets: Iterable[GCodeSnippet] = (),
    on_progress: Optional[ProgressCallback] = None,
    timestamp: Optional[str] = None
) -> GenerationResult:
    """
    Generate the complete program and its preview path.

    Args:
        shapes: Shapes from the editor
        settings: Coating settings for this run
        work_area: Work area passed to snippet templates
        snippets: Hook snippets to wrap the body with
        on_progress: Optional callback receiving (percent, message)
        timestamp: Value for the {{time}} variable (defaults to now, UTC)

    Returns:
        GenerationResult; an empty result when there is nothing to coat

    Raises:
        GenerationError: If the body is empty or a shape fails
    """
    generator = CoatingPathGenerator(settings, shapes)
    if not generator.has_coatable_types:
        if on_progress:
            on_progress(100, NOTHING_TO_COAT_MESSAGE)
        logger.info(NOTHING_TO_COAT_MESSAGE)
        return GenerationResult(gcode='', message=NOTHING_TO_COAT_MESSAGE)

    logger.info("Generating coating program for %d shape(s)", len(generator.coating_shapes))
    emitter = GCodeEmitter(settings)
    coated = await generator.generate_paths(emitter, on_progress)

    if emitter.move_count == 0:
        raise GenerationError(
            "Generated G-code body is empty: no shape produced a coating path",
            GenerationError.EMPTY_BODY
        )

    program = assemble_program(
        emitter.get_gcode(),
        snippets,
        build_context(settings, work_area, timestamp)
    )
    message = f"Coating paths generated for {coated} shape(s)"
    logger.info(message)
    return GenerationResult(
        gcode=program,
        preview_path=parse_gcode_to_path(program),
        coated_shape_count=coated,
        message=message,
    )


def coating_sequence_endpoints(
    shapes: Sequence[ShapeDescriptor],
    settings: CoatingSettings,
    start: Point = Point(0.0, 0.0)
) -> List[SequenceEndpoint]:
    """Entry and exit points of the explicitly ordered shapes."""
    return CoatingPathGenerator(settings, shapes).coating_sequence_endpoints(start)
