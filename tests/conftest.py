"""Test configuration and fixtures."""
import pytest

from app import create_app
from web.extensions import db
from web.models import MachineProfile, GCodeSnippet, Project

from coatpath.models import CoatingSettings, WorkArea


class TestConfig:
    """Test configuration."""
    TESTING = True
    SECRET_KEY = 'test-secret-key'
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    LOG_LEVEL = 'DEBUG'
    GCODE_OUTPUT_DIR = 'output'
    DEFAULT_PIXELS_PER_MM = 10.0


@pytest.fixture
def timestamp():
    """Fixed {{time}} value so generated programs are byte-stable."""
    return '2024-01-01T00:00:00+00:00'


@pytest.fixture
def app():
    """Create and configure a test application instance."""
    app = create_app(TestConfig)

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Create a test client."""
    return app.test_client()


@pytest.fixture
def settings():
    """Default coating settings (10 px/mm, safe 80, coating 20)."""
    return CoatingSettings()


@pytest.fixture
def work_area():
    return WorkArea()


@pytest.fixture
def outline_rect_data():
    """Editor JSON for a 10mm x 5mm outline rectangle at the origin."""
    return {
        'id': 'rect-1',
        'type': 'rectangle',
        'x': 0,
        'y': 0,
        'width': 100,
        'height': 50,
        'coatingType': 'outline',
    }


@pytest.fixture
def machine_profile(app):
    """Create the machine profile singleton."""
    with app.app_context():
        profile = MachineProfile(
            id=1,
            name='Test Coater',
            work_area_width=1000.0,
            work_area_height=1000.0,
            coating_settings=CoatingSettings().to_dict()
        )
        db.session.add(profile)
        db.session.commit()
        yield profile


@pytest.fixture
def sample_snippets(app):
    """Header and footer snippets."""
    with app.app_context():
        header = GCodeSnippet(
            id='header',
            name='Header',
            hook='beforeAll',
            enabled=True,
            order=0,
            template='G21\nG90'
        )
        footer = GCodeSnippet(
            id='footer',
            name='Footer',
            hook='afterAll',
            enabled=True,
            order=0,
            template='G0 Z{{safeHeight}}'
        )
        db.session.add_all([header, footer])
        db.session.commit()
        yield [header, footer]


@pytest.fixture
def sample_project(app, outline_rect_data):
    """Create a sample project with one outline rectangle and one mask."""
    with app.app_context():
        project = Project(
            name='Test Project',
            shapes=[
                outline_rect_data,
                {
                    'id': 'mask-1',
                    'type': 'circle',
                    'x': 500,
                    'y': 500,
                    'radius': 40,
                    'coatingType': 'masking',
                },
            ]
        )
        db.session.add(project)
        db.session.commit()
        yield project
