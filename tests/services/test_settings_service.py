"""Tests for SettingsService."""
from web.services.settings_service import SettingsService
from web.models import GCodeSnippet

from coatpath.snippets import GCodeHook


class TestMachineProfile:
    """Tests for machine profile operations."""

    def test_created_with_defaults(self, app):
        """Test the profile singleton is created on first access."""
        with app.app_context():
            profile = SettingsService.get_machine_profile()

            assert profile.id == 1
            assert profile.name == 'Default Coater'
            assert profile.coating_settings['pixelsPerMm'] == 10.0
            assert profile.coating_settings['safeHeight'] == 80

    def test_existing_profile(self, app, machine_profile):
        with app.app_context():
            assert SettingsService.get_machine_profile().name == 'Test Coater'

    def test_profile_dict(self, app, machine_profile):
        with app.app_context():
            data = SettingsService.get_machine_profile_dict()

            assert data['workArea'] == {'width': 1000.0, 'height': 1000.0}
            assert data['coatingSettings']['coatingSpeed'] == 1000

    def test_update_merges_settings(self, app, machine_profile):
        """Test updates only replace the keys provided."""
        with app.app_context():
            SettingsService.update_machine_profile({
                'name': 'Booth 2',
                'workArea': {'width': 1500, 'height': 900},
                'coatingSettings': {'coatingSpeed': 750},
            })
            settings = SettingsService.get_coating_settings()
            work_area = SettingsService.get_work_area()

            assert SettingsService.get_machine_profile().name == 'Booth 2'
            assert settings.coating_speed == 750
            assert settings.move_speed == 2000
            assert (work_area.width, work_area.height) == (1500, 900)


class TestSnippets:
    """Tests for snippet CRUD."""

    def test_create_and_list(self, app):
        with app.app_context():
            SettingsService.create_snippet({'name': 'Purge', 'hook': 'beforePath', 'template': 'G4 P1'})
            snippets = SettingsService.get_snippets_as_list()

            assert len(snippets) == 1
            assert snippets[0]['name'] == 'Purge'
            assert snippets[0]['enabled'] is True
            assert snippets[0]['order'] == 0

    def test_templates_for_generation(self, app, sample_snippets):
        with app.app_context():
            templates = SettingsService.get_snippet_templates()
            hooks = {t.id: t.hook for t in templates}

            assert hooks == {'header': GCodeHook.BEFORE_ALL, 'footer': GCodeHook.AFTER_ALL}

    def test_update(self, app, sample_snippets):
        with app.app_context():
            snippet = SettingsService.update_snippet('footer', {'enabled': False, 'order': '3'})

            assert snippet.enabled is False
            assert snippet.order == 3

    def test_update_missing(self, app):
        with app.app_context():
            assert SettingsService.update_snippet('missing', {'name': 'x'}) is None

    def test_delete(self, app, sample_snippets):
        with app.app_context():
            assert SettingsService.delete_snippet('header')
            assert not SettingsService.delete_snippet('header')
            assert GCodeSnippet.query.count() == 1

    def test_validate(self):
        assert SettingsService.validate_snippet({'name': 'A', 'hook': 'afterAll'}) == []
        errors = SettingsService.validate_snippet({'hook': 'sometimes', 'order': 'first'})
        assert len(errors) == 3

    def test_validate_partial(self):
        assert SettingsService.validate_snippet({'template': 'M5'}, partial=True) == []
        assert SettingsService.validate_snippet({'name': ''}, partial=True) == ['Snippet name is required']

    def test_seed_defaults_once(self, app):
        with app.app_context():
            assert SettingsService.seed_default_snippets() == 2
            assert SettingsService.seed_default_snippets() == 0
            assert {s['hook'] for s in SettingsService.get_snippets_as_list()} == {'beforeAll', 'afterAll'}
