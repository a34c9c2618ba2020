"""API routes - JSON endpoints for the coating editor."""
from flask import Blueprint, request, send_file
import io

from web.services.project_service import ProjectService
from web.services.gcode_service import GCodeService
from web.utils.responses import success_response, error_response, validation_response, generation_error_response

from coatpath.gcode_generator import GenerationError
from coatpath.project_loader import ParseError

api_bp = Blueprint('api', __name__)


def _project_data(project_id, overrides=None):
    """Saved project dict, with unsaved editor fields from the request body applied."""
    data = ProjectService.get_as_dict(project_id)
    if data is None:
        return None
    for key in ('shapes', 'coatingSettings', 'workArea', 'gcodeSnippets'):
        if overrides and key in overrides:
            data[key] = overrides[key]
    return data


# --- Projects ---

@api_bp.route('/projects', methods=['GET'])
def list_projects():
    """List all projects, most recently modified first."""
    projects = [ProjectService.to_dict(p) for p in ProjectService.get_all()]
    return success_response(data=projects)


@api_bp.route('/projects', methods=['POST'])
def create_project():
    """Create a project, optionally from an exported project file."""
    data = request.get_json(silent=True) or {}
    project = ProjectService.create(data)
    return success_response(data=ProjectService.to_dict(project), message='Project created')


@api_bp.route('/projects/<project_id>', methods=['GET'])
def get_project(project_id):
    data = ProjectService.get_as_dict(project_id)
    if data is None:
        return error_response('Project not found', 404)
    return success_response(data=data)


@api_bp.route('/projects/<project_id>', methods=['DELETE'])
def delete_project(project_id):
    if not ProjectService.delete(project_id):
        return error_response('Project not found', 404)
    return success_response(message='Project deleted')


@api_bp.route('/projects/<project_id>/save', methods=['POST'])
def save_project(project_id):
    """Save project data from the editor."""
    data = request.get_json(silent=True)
    if not data:
        return error_response('No data provided')

    project = ProjectService.save(project_id, data)
    if not project:
        return error_response('Project not found', 404)

    return success_response(data={'modified_at': project.modified_at.isoformat()})


@api_bp.route('/projects/<project_id>/duplicate', methods=['POST'])
def duplicate_project(project_id):
    data = request.get_json(silent=True) or {}
    project = ProjectService.duplicate(project_id, data.get('name'))
    if not project:
        return error_response('Project not found', 404)
    return success_response(data=ProjectService.to_dict(project), message='Project duplicated')


# --- Generation ---

@api_bp.route('/projects/<project_id>/validate', methods=['POST'])
def validate_project(project_id):
    """Validate project configuration before generating G-code."""
    data = _project_data(project_id, request.get_json(silent=True))
    if data is None:
        return error_response('Project not found', 404)

    try:
        inputs = GCodeService.build_inputs(data)
    except (ParseError, ValueError) as e:
        return validation_response([str(e)])

    return validation_response(GCodeService.validate(inputs))


@api_bp.route('/projects/<project_id>/generate', methods=['POST'])
def generate_project(project_id):
    """Generate G-code. Unsaved shapes or settings may be passed in the body."""
    data = _project_data(project_id, request.get_json(silent=True))
    if data is None:
        return error_response('Project not found', 404)

    try:
        inputs = GCodeService.build_inputs(data)
        result = GCodeService.generate(inputs, request.args.get('timestamp'))
    except GenerationError as e:
        return generation_error_response(e)
    except (ParseError, ValueError) as e:
        return error_response(str(e))

    return success_response(data=result, message=result['message'])


@api_bp.route('/projects/<project_id>/preview', methods=['POST'])
def preview_project(project_id):
    """Generate SVG preview. Can preview unsaved changes by passing shapes in body."""
    data = _project_data(project_id, request.get_json(silent=True))
    if data is None:
        return error_response('Project not found', 404)

    try:
        inputs = GCodeService.build_inputs(data)
        svg = GCodeService.generate_preview_svg(inputs)
    except (ParseError, ValueError) as e:
        return error_response(str(e))

    return success_response(data={'svg': svg})


@api_bp.route('/projects/<project_id>/paths')
def project_paths(project_id):
    """Path groups per shape."""
    data = _project_data(project_id)
    if data is None:
        return error_response('Project not found', 404)

    try:
        inputs = GCodeService.build_inputs(data)
    except (ParseError, ValueError) as e:
        return error_response(str(e))

    return success_response(data=GCodeService.get_path_groups(inputs))


@api_bp.route('/projects/<project_id>/sequence')
def project_sequence(project_id):
    """Entry and exit points of explicitly ordered shapes."""
    data = _project_data(project_id)
    if data is None:
        return error_response('Project not found', 404)

    try:
        inputs = GCodeService.build_inputs(data)
    except (ParseError, ValueError) as e:
        return error_response(str(e))

    return success_response(data=GCodeService.get_sequence(inputs))


@api_bp.route('/projects/<project_id>/download')
def download_gcode(project_id):
    """Download generated G-code and its SVG preview as a zip."""
    data = _project_data(project_id)
    if data is None:
        return error_response('Project not found', 404)

    try:
        inputs = GCodeService.build_inputs(data)
        zip_bytes, filename = GCodeService.generate_download(inputs)
    except GenerationError as e:
        return generation_error_response(e)
    except (ParseError, ValueError) as e:
        return error_response(str(e))

    buffer = io.BytesIO(zip_bytes)
    buffer.seek(0)

    return send_file(
        buffer,
        mimetype='application/zip',
        as_attachment=True,
        download_name=filename
    )


@api_bp.route('/generate', methods=['POST'])
def generate_stateless():
    """Generate G-code from a full project payload without storing it."""
    data = request.get_json(silent=True)
    if not data:
        return error_response('No data provided')

    try:
        inputs = GCodeService.build_inputs(data)
        result = GCodeService.generate(inputs, data.get('timestamp'))
    except GenerationError as e:
        return generation_error_response(e)
    except (ParseError, ValueError) as e:
        return error_response(str(e))

    return success_response(data=result, message=result['message'])
