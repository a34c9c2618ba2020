"""Coating toolpath generation and G-code emission."""

from .models import (
    Point,
    Position,
    PathSegment,
    ArcSegment,
    SegmentKind,
    ShapeKind,
    CoatingType,
    ShapeDescriptor,
    CoatingSettings,
    WorkArea,
    PathGroup
)
from .shape_paths import ShapeToPathConverter, convert_shapes_to_path_groups
from .masking import MaskingManager, TravelPlan
from .sequencer import order_segments
from .path_optimizer import PathOptimizer
from .gcode_emitter import GCodeEmitter
from .snippets import GCodeHook, GCodeSnippet, DEFAULT_SNIPPETS, assemble_program, render_template
from .preview import parse_gcode_to_path
from .gcode_generator import (
    CoatingPathGenerator,
    GenerationError,
    GenerationResult,
    SequenceEndpoint,
    coating_sequence_endpoints,
    generate_coating_gcode,
    generate_gcode
)
from .project_loader import ParseError, ProjectData, parse_project_file, parse_project_data

__all__ = [
    # Models
    'Point',
    'Position',
    'PathSegment',
    'ArcSegment',
    'SegmentKind',
    'ShapeKind',
    'CoatingType',
    'ShapeDescriptor',
    'CoatingSettings',
    'WorkArea',
    'PathGroup',
    # Pipeline stages
    'ShapeToPathConverter',
    'convert_shapes_to_path_groups',
    'MaskingManager',
    'TravelPlan',
    'order_segments',
    'PathOptimizer',
    'GCodeEmitter',
    # Snippets
    'GCodeHook',
    'GCodeSnippet',
    'DEFAULT_SNIPPETS',
    'assemble_program',
    'render_template',
    # Generation
    'CoatingPathGenerator',
    'GenerationError',
    'GenerationResult',
    'SequenceEndpoint',
    'coating_sequence_endpoints',
    'generate_coating_gcode',
    'generate_gcode',
    'parse_gcode_to_path',
    # Project files
    'ParseError',
    'ProjectData',
    'parse_project_file',
    'parse_project_data',
]
