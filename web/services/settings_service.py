"""Settings management service."""
from typing import Dict, List, Optional
import uuid

from flask import current_app

from web.extensions import db
from web.models import MachineProfile, GCodeSnippet

from coatpath.models import CoatingSettings, WorkArea
from coatpath.snippets import DEFAULT_SNIPPETS, GCodeHook, GCodeSnippet as SnippetTemplate


VALID_HOOKS = [hook.value for hook in GCodeHook]


class SettingsService:
    """Service for managing the machine profile and G-code snippets."""

    # --- Machine Profile Methods ---

    @staticmethod
    def get_machine_profile() -> MachineProfile:
        """Get machine profile singleton, creating with defaults if missing."""
        profile = db.session.get(MachineProfile, 1)
        if not profile:
            defaults = CoatingSettings.from_dict({
                'pixelsPerMm': current_app.config.get('DEFAULT_PIXELS_PER_MM', 10.0)
            })
            work_area = WorkArea()
            profile = MachineProfile(
                id=1,
                name='Default Coater',
                work_area_width=work_area.width,
                work_area_height=work_area.height,
                coating_settings=defaults.to_dict()
            )
            db.session.add(profile)
            db.session.commit()
        return profile

    @staticmethod
    def get_coating_settings() -> CoatingSettings:
        """Default coating settings from the machine profile."""
        profile = SettingsService.get_machine_profile()
        return CoatingSettings.from_dict(profile.coating_settings)

    @staticmethod
    def get_work_area() -> WorkArea:
        profile = SettingsService.get_machine_profile()
        return WorkArea.from_dict({'width': profile.work_area_width, 'height': profile.work_area_height})

    @staticmethod
    def get_machine_profile_dict() -> Dict:
        """Get machine profile as dict for JSON."""
        profile = SettingsService.get_machine_profile()
        return {
            'name': profile.name,
            'workArea': {
                'width': profile.work_area_width,
                'height': profile.work_area_height
            },
            'coatingSettings': CoatingSettings.from_dict(profile.coating_settings).to_dict()
        }

    @staticmethod
    def update_machine_profile(data: Dict) -> MachineProfile:
        """Update machine profile from dict.

        Raises:
            ValueError: If coating settings contain values of the wrong type
        """
        profile = SettingsService.get_machine_profile()

        if 'name' in data:
            profile.name = data['name']
        if 'workArea' in data:
            work_area = WorkArea.from_dict(data['workArea'])
            profile.work_area_width = work_area.width
            profile.work_area_height = work_area.height
        if 'coatingSettings' in data:
            merged = dict(profile.coating_settings or {})
            merged.update(data['coatingSettings'] or {})
            profile.coating_settings = CoatingSettings.from_dict(merged).to_dict()

        db.session.commit()
        return profile

    # --- Snippet Methods ---

    @staticmethod
    def get_all_snippets() -> List[GCodeSnippet]:
        """Get all snippets, ordered by hook then order."""
        return GCodeSnippet.query.order_by(GCodeSnippet.hook, GCodeSnippet.order).all()

    @staticmethod
    def get_snippet(snippet_id: str) -> Optional[GCodeSnippet]:
        """Get a single snippet by ID."""
        return db.session.get(GCodeSnippet, snippet_id)

    @staticmethod
    def snippet_to_dict(snippet: GCodeSnippet) -> Dict:
        return {
            'id': snippet.id,
            'name': snippet.name,
            'hook': snippet.hook,
            'enabled': snippet.enabled,
            'order': snippet.order,
            'template': snippet.template,
            'description': snippet.description
        }

    @staticmethod
    def get_snippets_as_list() -> List[Dict]:
        return [SettingsService.snippet_to_dict(s) for s in SettingsService.get_all_snippets()]

    @staticmethod
    def get_snippet_templates() -> List[SnippetTemplate]:
        """Stored snippets as generator input."""
        return [SnippetTemplate.from_dict(SettingsService.snippet_to_dict(s))
                for s in SettingsService.get_all_snippets()]

    @staticmethod
    def validate_snippet(data: Dict, partial: bool = False) -> List[str]:
        """Validate snippet fields, returning error messages."""
        errors = []
        if not partial or 'name' in data:
            if not data.get('name'):
                errors.append("Snippet name is required")
        if not partial or 'hook' in data:
            if data.get('hook') not in VALID_HOOKS:
                errors.append(f"Hook must be one of: {', '.join(VALID_HOOKS)}")
        if 'order' in data:
            try:
                int(data['order'])
            except (TypeError, ValueError):
                errors.append("Snippet order must be an integer")
        return errors

    @staticmethod
    def create_snippet(data: Dict) -> GCodeSnippet:
        """Create a new snippet from dict."""
        snippet = GCodeSnippet(
            id=data.get('id') or str(uuid.uuid4()),
            name=data['name'],
            hook=data['hook'],
            enabled=bool(data.get('enabled', True)),
            order=int(data.get('order', 0)),
            template=data.get('template', ''),
            description=data.get('description')
        )
        db.session.add(snippet)
        db.session.commit()
        return snippet

    @staticmethod
    def update_snippet(snippet_id: str, data: Dict) -> Optional[GCodeSnippet]:
        """Update an existing snippet."""
        snippet = db.session.get(GCodeSnippet, snippet_id)
        if not snippet:
            return None

        if 'name' in data:
            snippet.name = data['name']
        if 'hook' in data:
            snippet.hook = data['hook']
        if 'enabled' in data:
            snippet.enabled = bool(data['enabled'])
        if 'order' in data:
            snippet.order = int(data['order'])
        if 'template' in data:
            snippet.template = data['template']
        if 'description' in data:
            snippet.description = data['description']

        db.session.commit()
        return snippet

    @staticmethod
    def delete_snippet(snippet_id: str) -> bool:
        """Delete a snippet."""
        snippet = db.session.get(GCodeSnippet, snippet_id)
        if not snippet:
            return False

        db.session.delete(snippet)
        db.session.commit()
        return True

    @staticmethod
    def seed_default_snippets() -> int:
        """Add the default header and footer snippets when none exist."""
        if GCodeSnippet.query.first():
            return 0
        for template in DEFAULT_SNIPPETS:
            SettingsService.create_snippet(template.to_dict())
        return len(DEFAULT_SNIPPETS)
