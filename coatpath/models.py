"""Shared dataclasses for coating toolpath generation."""
import math
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Dict, List, Optional


# Segments shorter than this are degenerate and never emitted
MIN_SEGMENT_LENGTH = 1e-3

DEFAULT_COATING_ORDER = 999


@dataclass(frozen=True)
class Point:
    """A 2D coordinate point."""
    x: float
    y: float

    def distance_to(self, other: 'Point') -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def is_close(self, other: 'Point', tolerance: float = MIN_SEGMENT_LENGTH) -> bool:
        return self.distance_to(other) <= tolerance


@dataclass(frozen=True)
class Position:
    """A 3D tool position (X/Y in canvas pixels or mm, Z always in mm)."""
    x: float
    y: float
    z: float

    def as_point(self) -> Point:
        return Point(self.x, self.y)


class SegmentKind(str, Enum):
    """Machine semantics of a path segment."""
    RAPID = 'rapid'      # lifted to safe height
    COAT = 'coat'        # nozzle on, coating height
    TRAVEL = 'travel'    # nozzle off, held at coating height


@dataclass(frozen=True)
class PathSegment:
    """A directed straight segment."""
    start: Point
    end: Point
    kind: SegmentKind = SegmentKind.COAT

    @property
    def length(self) -> float:
        return self.start.distance_to(self.end)

    def is_degenerate(self) -> bool:
        return self.length < MIN_SEGMENT_LENGTH

    def reversed(self) -> 'PathSegment':
        return PathSegment(start=self.end, end=self.start, kind=self.kind)

    def to_dict(self) -> Dict:
        return {
            'start': {'x': self.start.x, 'y': self.start.y},
            'end': {'x': self.end.x, 'y': self.end.y},
            'kind': self.kind.value,
        }


@dataclass(frozen=True)
class ArcSegment:
    """A circular arc, flattened to chords before emission.

    Attributes:
        start: Arc start point
        center: Arc center
        radius: Arc radius
        direction: 'cw' or 'ccw' (math orientation, y axis up)
        sweep: Swept angle in degrees (360 for a full circle)
    """
    start: Point
    center: Point
    radius: float
    direction: str = 'ccw'
    sweep: float = 360.0
    kind: SegmentKind = SegmentKind.COAT

    def to_chords(self, count: int) -> List[PathSegment]:
        """
        Approximate the arc with straight chords.

        Args:
            count: Number of chords

        Returns:
            List of PathSegments (degenerate chords dropped)
        """
        if count <= 0 or self.radius <= 0:
            return []

        start_angle = math.atan2(self.start.y - self.center.y, self.start.x - self.center.x)
        step = math.radians(self.sweep) / count
        if self.direction == 'cw':
            step = -step

        points = []
        for i in range(count + 1):
            angle = start_angle + i * step
            points.append(Point(
                self.center.x + self.radius * math.cos(angle),
                self.center.y + self.radius * math.sin(angle)
            ))

        chords = []
        for a, b in zip(points, points[1:]):
            segment = PathSegment(a, b, self.kind)
            if not segment.is_degenerate():
                chords.append(segment)
        return chords


class ShapeKind(str, Enum):
    """Shape types the converter knows how to decompose."""
    RECTANGLE = 'rectangle'
    CIRCLE = 'circle'
    IMAGE = 'image'

    @classmethod
    def parse(cls, value: str) -> 'ShapeKind':
        if value == 'image-bbox':
            return cls.IMAGE
        return cls(value)


class CoatingType(str, Enum):
    FILL = 'fill'
    OUTLINE = 'outline'
    MASKING = 'masking'


FILL_PATTERNS = ('horizontal', 'vertical', 'concentric', 'auto')
OUTLINE_STARTS = ('outside', 'center', 'inside')
AVOIDANCE_STRATEGIES = ('lift', 'contour')
OUTPUT_FORMATS = ('plain', 'annotated')


def _number(data: Dict, key: str, default: float = 0.0) -> float:
    """Read a numeric field, treating missing or null values as the default."""
    value = data.get(key)
    if value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _optional_number(data: Dict, key: str) -> Optional[float]:
    value = data.get(key)
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class ShapeDescriptor:
    """A shape snapshot supplied by the editor, in canvas pixels."""
    id: str
    type: ShapeKind
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    radius: float = 0.0
    rotation: float = 0.0
    name: Optional[str] = None
    coating_type: Optional[CoatingType] = None
    coating_order: Optional[int] = None
    skip_coating: bool = False
    fill_pattern: Optional[str] = None
    line_spacing: Optional[float] = None
    outline_passes: int = 1
    outline_start: str = 'center'

    # Per-shape overrides of CoatingSettings
    coating_height: Optional[float] = None
    coating_speed: Optional[float] = None
    masking_clearance: Optional[float] = None
    avoidance_strategy: Optional[str] = None

    @property
    def is_coatable(self) -> bool:
        return self.coating_type in (CoatingType.FILL, CoatingType.OUTLINE)

    @property
    def is_mask(self) -> bool:
        return self.coating_type == CoatingType.MASKING

    @property
    def sort_order(self) -> int:
        return self.coating_order if self.coating_order is not None else DEFAULT_COATING_ORDER

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ShapeDescriptor':
        """
        Build a descriptor from the editor's JSON shape config.

        Missing numeric fields are read as 0. Raises ValueError for an
        unknown shape type.
        """
        coating_type = data.get('coatingType')
        coating_order = data.get('coatingOrder')
        return cls(
            id=str(data.get('id', '')),
            type=ShapeKind.parse(data.get('type')),
            x=_number(data, 'x'),
            y=_number(data, 'y'),
            width=_number(data, 'width'),
            height=_number(data, 'height'),
            radius=_number(data, 'radius'),
            rotation=_number(data, 'rotation'),
            name=data.get('name'),
            coating_type=CoatingType(coating_type) if coating_type else None,
            coating_order=int(coating_order) if coating_order is not None else None,
            skip_coating=bool(data.get('skipCoating', False)),
            fill_pattern=data.get('fillPattern'),
            line_spacing=_optional_number(data, 'lineSpacing'),
            outline_passes=int(_number(data, 'outlinePasses', 1)),
            outline_start=data.get('outlineStartPoint') or 'center',
            coating_height=_optional_number(data, 'coatingHeight'),
            coating_speed=_optional_number(data, 'coatingSpeed'),
            masking_clearance=_optional_number(data, 'maskingClearance'),
            avoidance_strategy=data.get('travelAvoidanceStrategy'),
        )


@dataclass(frozen=True)
class CoatingSettings:
    """Process parameters for one generation run.

    Speeds are mm/min and Z heights are mm. Coating width, line spacing and
    masking clearance are canvas units, like shape geometry.
    """
    coating_width: float = 10.0
    line_spacing: float = 10.0
    coating_speed: float = 1000.0
    move_speed: float = 2000.0
    safe_height: float = 80.0
    coating_height: float = 20.0
    fill_pattern: str = 'horizontal'
    enable_masking: bool = True
    masking_clearance: float = 0.0
    travel_avoidance_strategy: str = 'contour'
    unit: str = 'mm'
    pixels_per_mm: float = 10.0
    output_format: str = 'plain'

    _KEYS = {
        'coating_width': 'coatingWidth',
        'line_spacing': 'lineSpacing',
        'coating_speed': 'coatingSpeed',
        'move_speed': 'moveSpeed',
        'safe_height': 'safeHeight',
        'coating_height': 'coatingHeight',
        'fill_pattern': 'fillPattern',
        'enable_masking': 'enableMasking',
        'masking_clearance': 'maskingClearance',
        'travel_avoidance_strategy': 'travelAvoidanceStrategy',
        'unit': 'unit',
        'pixels_per_mm': 'pixelsPerMm',
        'output_format': 'outputFormat',
    }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'CoatingSettings':
        """Build settings from camelCase JSON, keeping defaults for missing keys."""
        values = {}
        for attr, key in cls._KEYS.items():
            if data and data.get(key) is not None:
                values[attr] = data[key]
        for attr in ('coating_width', 'line_spacing', 'coating_speed', 'move_speed',
                     'safe_height', 'coating_height', 'masking_clearance', 'pixels_per_mm'):
            if attr in values:
                values[attr] = float(values[attr])
        if 'enable_masking' in values:
            values['enable_masking'] = bool(values['enable_masking'])
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        return {key: getattr(self, attr) for attr, key in self._KEYS.items()}


@dataclass(frozen=True)
class WorkArea:
    """Machine work area in canvas units."""
    width: float = 1000.0
    height: float = 1000.0

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'WorkArea':
        if not data:
            return cls()
        return cls(width=_number(data, 'width', 1000.0), height=_number(data, 'height', 1000.0))

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass
class PathGroup:
    """Ordered segments generated for one source shape."""
    id: str
    name: str
    segments: List[PathSegment]
    visible: bool = True
    locked: bool = False
    color: str = '#6b7280'
    order: int = 0

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'name': self.name,
            'segments': [
                dict(segment.to_dict(), id=f"{self.id}-seg-{i}")
                for i, segment in enumerate(self.segments)
            ],
            'visible': self.visible,
            'locked': self.locked,
            'color': self.color,
            'order': self.order,
        }


@dataclass
class MoveRecord:
    """One accepted move, kept for annotated output."""
    command: str            # 'G0' or 'G1'
    speed: float
    x: float                # mm
    y: float                # mm
    z: Optional[float]      # mm, None when the line carries no Z
    nozzle_on: bool
    distance: float         # mm travelled by this move


@dataclass
class EmitterState:
    """Mutable emitter state for a single generation run."""
    last_pixel: Position
    last_mm: Position
    lines: List[str] = field(default_factory=list)
    moves: List[MoveRecord] = field(default_factory=list)
    nozzle_on: bool = False
