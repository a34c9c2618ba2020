"""Settings routes - machine profile defaults and G-code snippets."""
from flask import Blueprint, request

from web.services.settings_service import SettingsService
from web.utils.responses import success_response, error_response

settings_bp = Blueprint('settings', __name__)


# --- Machine Profile ---

@settings_bp.route('/machine', methods=['GET'])
def machine():
    """Coating defaults and work area."""
    return success_response(data=SettingsService.get_machine_profile_dict())


@settings_bp.route('/machine', methods=['PUT'])
def machine_save():
    """Update coating defaults and work area."""
    data = request.get_json(silent=True)
    if not data:
        return error_response('No data provided')

    try:
        SettingsService.update_machine_profile(data)
    except (TypeError, ValueError) as e:
        return error_response(f'Invalid machine settings: {e}')

    return success_response(data=SettingsService.get_machine_profile_dict(), message='Machine settings saved')


# --- Snippets ---

@settings_bp.route('/snippets', methods=['GET'])
def snippets():
    """List all snippets."""
    return success_response(data=SettingsService.get_snippets_as_list())


@settings_bp.route('/snippets', methods=['POST'])
def create_snippet():
    """Create a new snippet."""
    data = request.get_json(silent=True) or {}
    errors = SettingsService.validate_snippet(data)
    if errors:
        return error_response('; '.join(errors))

    snippet = SettingsService.create_snippet(data)
    return success_response(data=SettingsService.snippet_to_dict(snippet), message='Snippet created')


@settings_bp.route('/snippets/<snippet_id>', methods=['PUT'])
def update_snippet(snippet_id):
    """Update a snippet."""
    data = request.get_json(silent=True) or {}
    errors = SettingsService.validate_snippet(data, partial=True)
    if errors:
        return error_response('; '.join(errors))

    snippet = SettingsService.update_snippet(snippet_id, data)
    if not snippet:
        return error_response('Snippet not found', 404)
    return success_response(data=SettingsService.snippet_to_dict(snippet), message='Snippet updated')


@settings_bp.route('/snippets/<snippet_id>', methods=['DELETE'])
def delete_snippet(snippet_id):
    """Delete a snippet."""
    if not SettingsService.delete_snippet(snippet_id):
        return error_response('Snippet not found', 404)
    return success_response(message='Snippet deleted')
