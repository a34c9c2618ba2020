"""G-code generation service."""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from flask import current_app

from web.services.settings_service import SettingsService
from web.services.preview_service import PreviewService

from coatpath.models import CoatingSettings, PathSegment, Point, ShapeDescriptor, WorkArea
from coatpath.gcode_generator import (
    ALL_SKIPPED_MESSAGE,
    CoatingPathGenerator,
    GenerationResult,
    generate_gcode,
)
from coatpath.project_loader import parse_shapes, parse_snippets
from coatpath.shape_paths import convert_shapes_to_path_groups
from coatpath.snippets import DEFAULT_SNIPPETS, GCodeSnippet
from coatpath.utils.gcode_format import sanitize_project_name
from coatpath.utils.file_manager import (
    create_output_directory,
    write_gcode_file,
    package_for_download
)
from coatpath.utils.validators import (
    validate_settings,
    validate_shape_overrides,
    validate_shapes_in_work_area
)

logger = logging.getLogger(__name__)


@dataclass
class GenerationInputs:
    """Everything one generation run needs, resolved from a project or payload."""
    name: str
    shapes: List[ShapeDescriptor]
    settings: CoatingSettings
    work_area: WorkArea
    snippets: List[GCodeSnippet]
    skipped: List[str] = field(default_factory=list)


class GCodeService:
    """Service for G-code generation and validation."""

    @staticmethod
    def build_inputs(data: Dict) -> GenerationInputs:
        """
        Resolve generation inputs from a project dict or request payload.

        Coating settings start from the machine profile and are overridden
        key by key by the project's `coatingSettings`. The work area falls
        back to the machine profile. Snippets come from the payload when it
        carries `gcodeSnippets`, otherwise from the stored snippets.

        Raises:
            ParseError: If shapes or snippets are malformed
            ValueError: If coating settings contain invalid values
        """
        shapes, skipped = parse_shapes(data.get('shapes') or [])

        merged = SettingsService.get_coating_settings().to_dict()
        merged.update(data.get('coatingSettings') or {})
        try:
            settings = CoatingSettings.from_dict(merged)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid coating settings: {e}")

        if data.get('workArea'):
            work_area = WorkArea.from_dict(data['workArea'])
        else:
            work_area = SettingsService.get_work_area()

        if 'gcodeSnippets' in data:
            snippets = parse_snippets(data['gcodeSnippets'])
        else:
            snippets = SettingsService.get_snippet_templates() or list(DEFAULT_SNIPPETS)

        return GenerationInputs(
            name=data.get('name') or 'untitled',
            shapes=shapes,
            settings=settings,
            work_area=work_area,
            snippets=snippets,
            skipped=skipped
        )

    @staticmethod
    def validate(inputs: GenerationInputs) -> List[str]:
        """
        Validate inputs before generating G-code.

        Returns list of error messages (empty if valid).
        """
        errors = []
        errors.extend(validate_settings(inputs.settings))
        errors.extend(validate_shape_overrides(inputs.shapes))
        errors.extend(validate_shapes_in_work_area(inputs.shapes, inputs.work_area))
        return errors

    @staticmethod
    def get_validation_warnings(inputs: GenerationInputs) -> List[str]:
        """Non-blocking warnings: skipped shapes and an empty coating set."""
        warnings = list(inputs.skipped)
        coatable = [s for s in inputs.shapes if s.is_coatable]
        if not coatable:
            warnings.append("No shapes have a fill or outline coating type")
        elif all(s.skip_coating for s in coatable):
            warnings.append(ALL_SKIPPED_MESSAGE)
        return warnings

    @staticmethod
    def run_generation(
        inputs: GenerationInputs,
        timestamp: Optional[str] = None
    ) -> Tuple[GenerationResult, List[Dict]]:
        """
        Run the coating pipeline to completion.

        Returns:
            Tuple of (GenerationResult, progress events in order)

        Raises:
            ValueError: If inputs fail validation
            GenerationError: If the pipeline cannot produce a program
        """
        errors = GCodeService.validate(inputs)
        if errors:
            raise ValueError(f"Project validation failed: {'; '.join(errors)}")

        progress = []

        def on_progress(percent: float, message: str) -> None:
            progress.append({'percent': round(percent, 1), 'message': message})

        result = asyncio.run(generate_gcode(
            inputs.shapes,
            inputs.settings,
            inputs.work_area,
            inputs.snippets,
            on_progress=on_progress,
            timestamp=timestamp
        ))
        return result, progress

    @staticmethod
    def generate(inputs: GenerationInputs, timestamp: Optional[str] = None) -> Dict:
        """
        Generate G-code and return it with its preview path.

        Returns dict with gcode, previewPath, message and warnings.
        """
        result, progress = GCodeService.run_generation(inputs, timestamp)
        return {
            'gcode': result.gcode,
            'previewPath': [list(point) for point in result.preview_path],
            'coatedShapeCount': result.coated_shape_count,
            'message': result.message,
            'isEmpty': result.is_empty,
            'progress': progress,
            'warnings': GCodeService.get_validation_warnings(inputs)
        }

    @staticmethod
    def get_path_groups(inputs: GenerationInputs) -> List[Dict]:
        """Unmasked path groups per shape for the editor's path panel."""
        groups = convert_shapes_to_path_groups(inputs.shapes, inputs.settings)
        return [group.to_dict() for group in groups]

    @staticmethod
    def get_sequence(inputs: GenerationInputs) -> List[Dict]:
        """Entry and exit points of explicitly ordered shapes."""
        generator = CoatingPathGenerator(inputs.settings, inputs.shapes)
        return [
            {
                'shapeId': endpoint.shape_id,
                'order': endpoint.order,
                'start': {'x': endpoint.start.x, 'y': endpoint.start.y},
                'end': {'x': endpoint.end.x, 'y': endpoint.end.y}
            }
            for endpoint in generator.coating_sequence_endpoints()
        ]

    @staticmethod
    def get_ordered_paths(inputs: GenerationInputs) -> List[Tuple[ShapeDescriptor, List[PathSegment]]]:
        """
        Masked and sequenced segments per shape, in coating order.

        Each shape is sequenced from where the previous one ended, the same
        way generation walks them.
        """
        generator = CoatingPathGenerator(inputs.settings, inputs.shapes)
        ordered = []
        current = Point(0.0, 0.0)
        for shape in generator.ordered_shapes():
            path = generator.get_optimized_path_for_shape(shape, current)
            if not path:
                continue
            ordered.append((shape, path))
            current = path[-1].end
        return ordered

    @staticmethod
    def generate_preview_svg(inputs: GenerationInputs) -> str:
        """Generate an SVG preview of the ordered toolpath."""
        generator = CoatingPathGenerator(inputs.settings, inputs.shapes)
        return PreviewService.generate_svg(
            inputs.work_area,
            GCodeService.get_ordered_paths(inputs),
            generator.mask_shapes,
            inputs.settings.pixels_per_mm
        )

    @staticmethod
    def generate_and_save(inputs: GenerationInputs, timestamp: Optional[str] = None) -> Dict:
        """
        Generate G-code and save it under GCODE_OUTPUT_DIR.

        Returns dict with the written file path and generation message.
        """
        result, _ = GCodeService.run_generation(inputs, timestamp)
        if result.is_empty:
            raise ValueError(result.message)
        project_name = sanitize_project_name(inputs.name)

        directory = create_output_directory(current_app.config['GCODE_OUTPUT_DIR'], project_name)
        path = write_gcode_file(directory, project_name, result.gcode)
        logger.info("Wrote %s", path)

        return {
            'directory': directory,
            'file': path,
            'project_name': project_name,
            'message': result.message
        }

    @staticmethod
    def generate_download(inputs: GenerationInputs, timestamp: Optional[str] = None) -> Tuple[bytes, str]:
        """
        Generate G-code and package it with its SVG preview for download.

        Returns tuple of (zip_bytes, filename).
        """
        result, _ = GCodeService.run_generation(inputs, timestamp)
        if result.is_empty:
            raise ValueError(result.message)
        project_name = sanitize_project_name(inputs.name)

        zip_bytes = package_for_download({
            f"{project_name}.gcode": result.gcode,
            f"{project_name}_preview.svg": GCodeService.generate_preview_svg(inputs)
        })
        return zip_bytes, f"{project_name}.zip"
