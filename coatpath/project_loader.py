"""Load coating projects saved by the editor."""
import json
import os
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from .models import CoatingSettings, ShapeDescriptor, WorkArea
from .snippets import DEFAULT_SNIPPETS, GCodeSnippet

logger = logging.getLogger(__name__)

PROJECT_FILE_VERSION = 1


class ParseError(Exception):
    """Custom exception for project file errors."""
    pass


@dataclass
class ProjectData:
    name: str
    shapes: List[ShapeDescriptor]
    settings: CoatingSettings = field(default_factory=CoatingSettings)
    work_area: WorkArea = field(default_factory=WorkArea)
    snippets: List[GCodeSnippet] = field(default_factory=lambda: list(DEFAULT_SNIPPETS))
    version: int = PROJECT_FILE_VERSION
    skipped: List[str] = field(default_factory=list)


def parse_shapes(raw_shapes: Any) -> Tuple[List[ShapeDescriptor], List[str]]:
    """
    Convert raw shape dicts into descriptors.

    Shapes of unknown type are skipped rather than failing the project.

    Args:
        raw_shapes: List of shape dicts in the editor's format

    Returns:
        Tuple of (descriptors, messages describing skipped shapes)

    Raises:
        ParseError: If raw_shapes is not a list
    """
    if not isinstance(raw_shapes, list):
        raise ParseError("'shapes' must be a list")

    shapes = []
    skipped = []
    for index, raw in enumerate(raw_shapes):
        if not isinstance(raw, dict):
            skipped.append(f"Shape {index + 1} is not an object")
            continue
        try:
            shapes.append(ShapeDescriptor.from_dict(raw))
        except (ValueError, TypeError) as e:
            message = f"Shape {index + 1} ({raw.get('type')}) skipped: {e}"
            logger.warning(message)
            skipped.append(message)
    return shapes, skipped


def parse_snippets(raw_snippets: Any) -> List[GCodeSnippet]:
    if raw_snippets is None:
        return list(DEFAULT_SNIPPETS)
    if not isinstance(raw_snippets, list):
        raise ParseError("'gcodeSnippets' must be a list")
    try:
        return [GCodeSnippet.from_dict(raw) for raw in raw_snippets]
    except (ValueError, TypeError) as e:
        raise ParseError(f"Invalid G-code snippet: {e}")


def parse_project_data(data: Dict[str, Any], name: str = 'untitled') -> ProjectData:
    """Build ProjectData from a decoded project document."""
    if not isinstance(data, dict):
        raise ParseError("Project file must contain a JSON object")

    shapes, skipped = parse_shapes(data.get('shapes', []))
    try:
        settings = CoatingSettings.from_dict(data.get('coatingSettings'))
    except (TypeError, ValueError) as e:
        raise ParseError(f"Invalid coating settings: {e}")

    return ProjectData(
        name=data.get('name') or name,
        shapes=shapes,
        settings=settings,
        work_area=WorkArea.from_dict(data.get('workArea')),
        snippets=parse_snippets(data.get('gcodeSnippets')),
        version=int(data.get('version') or PROJECT_FILE_VERSION),
        skipped=skipped,
    )


def parse_project_file(file_path: str) -> ProjectData:
    """Parse a project JSON file."""
    try:
        with open(file_path, 'r') as f:
            content = f.read()
    except FileNotFoundError:
        raise ParseError(f"Project file not found: {file_path}")
    except OSError as e:
        raise ParseError(f"Error reading file {file_path}: {str(e)}")

    if not content.strip():
        raise ParseError("Project file is empty")

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON in {file_path}: {e}")

    name = os.path.splitext(os.path.basename(file_path))[0]
    return parse_project_data(data, name)
