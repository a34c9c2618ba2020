"""Tests for ProjectService."""
from web.services.project_service import ProjectService
from web.models import Project


class TestProjectCRUD:
    """Tests for project CRUD operations."""

    def test_get_all_empty(self, app):
        """Test getting projects when none exist."""
        with app.app_context():
            assert ProjectService.get_all() == []

    def test_get_all_ordered_by_modified(self, app):
        """Test projects are ordered by modified_at descending."""
        with app.app_context():
            from web.extensions import db
            from datetime import datetime, UTC, timedelta

            now = datetime.now(UTC)
            db.session.add(Project(name='Older', shapes=[], modified_at=now - timedelta(hours=1)))
            db.session.add(Project(name='Newer', shapes=[], modified_at=now))
            db.session.commit()

            assert [p.name for p in ProjectService.get_all()] == ['Newer', 'Older']

    def test_get_as_dict(self, app, sample_project):
        """Test getting project as dict for JSON."""
        with app.app_context():
            project_dict = ProjectService.get_as_dict(sample_project.id)

            assert project_dict['name'] == 'Test Project'
            assert len(project_dict['shapes']) == 2
            assert project_dict['coatingSettings'] is None
            assert project_dict['workArea'] is None
            assert 'created_at' in project_dict

    def test_get_not_found(self, app):
        with app.app_context():
            assert ProjectService.get('nonexistent-uuid') is None
            assert ProjectService.get_as_dict('nonexistent-uuid') is None

    def test_create_from_export(self, app, outline_rect_data):
        """Test creating a project from an exported project file."""
        with app.app_context():
            project = ProjectService.create({
                'name': 'Imported',
                'version': 1,
                'shapes': [outline_rect_data],
                'coatingSettings': {'lineSpacing': 5},
                'workArea': {'width': 600, 'height': 400},
            })
            data = ProjectService.to_dict(project)

            assert data['shapes'] == [outline_rect_data]
            assert data['coatingSettings'] == {'lineSpacing': 5}
            assert data['workArea'] == {'width': 600, 'height': 400}

    def test_create_defaults(self, app):
        with app.app_context():
            project = ProjectService.create({})
            assert project.name == 'Untitled Project'
            assert project.shapes == []

    def test_save(self, app, sample_project):
        with app.app_context():
            project = ProjectService.save(sample_project.id, {
                'name': 'Renamed',
                'shapes': [],
                'workArea': None,
            })

            assert project.name == 'Renamed'
            assert project.shapes == []
            assert project.work_area_width is None

    def test_save_not_found(self, app):
        with app.app_context():
            assert ProjectService.save('nonexistent-uuid', {'name': 'x'}) is None

    def test_delete(self, app, sample_project):
        with app.app_context():
            project_id = sample_project.id
            assert ProjectService.delete(project_id)
            assert ProjectService.get(project_id) is None
            assert not ProjectService.delete(project_id)


class TestProjectDuplicate:
    """Tests for project duplication."""

    def test_duplicate(self, app, sample_project):
        """Test duplicate gets a new id and an independent copy of the shapes."""
        with app.app_context():
            copy = ProjectService.duplicate(sample_project.id)

            assert copy.id != sample_project.id
            assert copy.name == 'Test Project (Copy)'
            assert copy.shapes == sample_project.shapes
            assert copy.shapes is not sample_project.shapes

    def test_duplicate_with_name(self, app, sample_project):
        with app.app_context():
            assert ProjectService.duplicate(sample_project.id, 'Second Coat').name == 'Second Coat'

    def test_duplicate_not_found(self, app):
        with app.app_context():
            assert ProjectService.duplicate('nonexistent-uuid') is None
