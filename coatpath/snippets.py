"""User snippet templates wrapped around the coating body."""
import re
from dataclasses import dataclass
from datetime import datetime, UTC
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .models import CoatingSettings, WorkArea


class GCodeHook(str, Enum):
    """Lifecycle points where snippets are injected."""
    BEFORE_ALL = 'beforeAll'
    BEFORE_JOB = 'beforeJob'
    BEFORE_PATH = 'beforePath'
    AFTER_PATH = 'afterPath'
    AFTER_JOB = 'afterJob'
    AFTER_ALL = 'afterAll'


@dataclass(frozen=True)
class GCodeSnippet:
    """A user-authored text block bound to a hook."""
    id: str
    name: str
    hook: GCodeHook
    template: str
    enabled: bool = True
    order: int = 0
    description: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GCodeSnippet':
        return cls(
            id=str(data.get('id', '')),
            name=data.get('name') or '',
            hook=GCodeHook(data.get('hook')),
            template=data.get('template') or '',
            enabled=bool(data.get('enabled', True)),
            order=int(data.get('order') or 0),
            description=data.get('description'),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'hook': self.hook.value,
            'template': self.template,
            'enabled': self.enabled,
            'order': self.order,
            'description': self.description,
        }


DEFAULT_SNIPPETS = [
    GCodeSnippet(
        id='default-header',
        name='Header',
        hook=GCodeHook.BEFORE_ALL,
        template="G21 ; mm\nG90 ; absolute\nG0 Z{{safeHeight}}\n",
        description='Units, absolute positioning, safe height',
    ),
    GCodeSnippet(
        id='default-footer',
        name='Footer',
        hook=GCodeHook.AFTER_ALL,
        template="M5 ; spindle/laser off\nG0 Z{{safeHeight}}\nG0 X0 Y0\n",
        description='Stop, raise, return home',
    ),
]

PLACEHOLDER_PATTERN = re.compile(r'\{\{\s*([a-zA-Z0-9_.]+)\s*\}\}')

_MISSING = object()


def _lookup(context: Any, path: str) -> Any:
    value = context
    for key in path.split('.'):
        if isinstance(value, Mapping):
            value = value.get(key, _MISSING)
        else:
            value = getattr(value, key, _MISSING)
        if value is _MISSING or value is None:
            return None
    return value


def _stringify(value: Any) -> str:
    if value is None:
        return ''
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def render_template(template: str, context: Any) -> str:
    """
    Substitute {{dotted.path}} placeholders from a context.

    Paths are resolved through mappings and attributes. Unresolved paths
    and None values render as an empty string.

    Args:
        template: Snippet template text
        context: Mapping or object supplying values

    Returns:
        Rendered text
    """
    if not template:
        return ''
    return PLACEHOLDER_PATTERN.sub(lambda m: _stringify(_lookup(context, m.group(1))), template)


def emit_hook(snippets: Iterable[GCodeSnippet], hook: GCodeHook, context: Any) -> str:
    """Render every enabled snippet on a hook, ordered by `order`, one block per snippet."""
    selected = sorted(
        (s for s in snippets if s.enabled and s.hook == hook),
        key=lambda s: s.order
    )
    rendered = [render_template(s.template, context).strip() for s in selected]
    return "\n".join(text for text in rendered if text)


def build_context(
    settings: CoatingSettings,
    work_area: WorkArea,
    timestamp: Optional[str] = None
) -> Dict[str, Any]:
    """Variables available to every snippet."""
    return {
        'unit': settings.unit,
        'workArea': work_area.to_dict(),
        'safeHeight': settings.safe_height,
        'coatingHeight': settings.coating_height,
        'time': timestamp or datetime.now(UTC).isoformat(),
    }


def assemble_program(
    body: str,
    snippets: Iterable[GCodeSnippet],
    context: Dict[str, Any]
) -> str:
    """
    Wrap the coating body with hook snippets.

    Order: beforeAll, beforePath, body, afterPath, afterAll. The beforeJob
    and afterJob hooks are accepted but not placed.

    Args:
        body: Emitted coating body
        snippets: Snippets in any order
        context: Base template variables (see build_context)

    Returns:
        Full program, ending with exactly one newline
    """
    snippets = list(snippets)
    path_context = dict(context, pathIndex=1, pathCount=1, shapeName='Coating', shapeType='coating')

    blocks: List[str] = [
        emit_hook(snippets, GCodeHook.BEFORE_ALL, context),
        emit_hook(snippets, GCodeHook.BEFORE_PATH, path_context),
        body.strip(),
        emit_hook(snippets, GCodeHook.AFTER_PATH, path_context),
        emit_hook(snippets, GCodeHook.AFTER_ALL, context),
    ]
    return "\n".join(block for block in blocks if block).rstrip() + "\n"
