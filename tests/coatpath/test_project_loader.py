"""Tests for project file loading."""
import json

import pytest

from coatpath.models import CoatingType, ShapeKind
from coatpath.project_loader import (
    ParseError,
    parse_project_data,
    parse_project_file,
    parse_shapes,
    parse_snippets,
)
from coatpath.snippets import DEFAULT_SNIPPETS, GCodeHook


@pytest.fixture
def project_file(tmp_path, outline_rect_data):
    path = tmp_path / "door_panel.json"
    path.write_text(json.dumps({
        'version': 1,
        'shapes': [outline_rect_data],
        'coatingSettings': {'coatingSpeed': 750, 'pixelsPerMm': 4, 'enableMasking': False},
        'workArea': {'width': 1200, 'height': 800},
        'gcodeSnippets': [
            {'id': 'h', 'name': 'Header', 'hook': 'beforeAll', 'template': 'G21', 'order': 0},
        ],
    }))
    return path


class TestParseProjectFile:
    """Tests for parse_project_file."""

    def test_reads_project(self, project_file):
        project = parse_project_file(str(project_file))

        assert project.name == 'door_panel'
        assert len(project.shapes) == 1
        assert project.shapes[0].coating_type == CoatingType.OUTLINE
        assert project.settings.coating_speed == 750
        assert project.settings.pixels_per_mm == 4
        assert project.settings.enable_masking is False
        assert project.work_area.width == 1200
        assert [s.hook for s in project.snippets] == [GCodeHook.BEFORE_ALL]
        assert project.skipped == []

    def test_missing_file(self, tmp_path):
        with pytest.raises(ParseError, match="not found"):
            parse_project_file(str(tmp_path / "missing.json"))

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.json"
        path.write_text("   \n")
        with pytest.raises(ParseError, match="empty"):
            parse_project_file(str(path))

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{shapes: [")
        with pytest.raises(ParseError, match="Invalid JSON"):
            parse_project_file(str(path))


class TestParseProjectData:
    """Tests for parse_project_data."""

    def test_defaults(self):
        project = parse_project_data({})
        assert project.name == 'untitled'
        assert project.shapes == []
        assert project.settings.safe_height == 80
        assert project.snippets == list(DEFAULT_SNIPPETS)

    def test_name_from_document(self):
        assert parse_project_data({'name': 'Hood'}, 'file-name').name == 'Hood'

    def test_not_an_object(self):
        with pytest.raises(ParseError):
            parse_project_data([])

    def test_bad_settings(self):
        with pytest.raises(ParseError, match="Invalid coating settings"):
            parse_project_data({'coatingSettings': {'coatingSpeed': 'fast'}})

    def test_bad_snippet(self):
        with pytest.raises(ParseError, match="Invalid G-code snippet"):
            parse_snippets([{'id': 'x', 'hook': 'never'}])

    def test_snippets_must_be_list(self):
        with pytest.raises(ParseError):
            parse_snippets({'hook': 'beforeAll'})


class TestParseShapes:
    """Tests for parse_shapes."""

    def test_unknown_types_are_skipped(self):
        shapes, skipped = parse_shapes([
            {'id': 'a', 'type': 'rectangle', 'width': 10, 'height': 10},
            {'id': 'b', 'type': 'polygon'},
            'not a shape',
        ])
        assert [s.id for s in shapes] == ['a']
        assert len(skipped) == 2
        assert 'polygon' in skipped[0]

    def test_image_bbox_alias(self):
        shapes, _ = parse_shapes([{'id': 'i', 'type': 'image-bbox', 'coatingType': 'fill'}])
        assert shapes[0].type == ShapeKind.IMAGE

    def test_must_be_list(self):
        with pytest.raises(ParseError):
            parse_shapes({'id': 'a'})
