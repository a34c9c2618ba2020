"""Tests for GCodeService."""
import io
import os
import zipfile

import pytest

from web.services.gcode_service import GCodeService
from web.services.project_service import ProjectService

from coatpath.gcode_generator import GenerationError


def inputs_for(project_id, **overrides):
    data = ProjectService.get_as_dict(project_id)
    data.update(overrides)
    return GCodeService.build_inputs(data)


class TestBuildInputs:
    """Tests for resolving generation inputs."""

    def test_profile_defaults(self, app, sample_project, machine_profile):
        """Test settings and work area fall back to the machine profile."""
        with app.app_context():
            inputs = inputs_for(sample_project.id)

            assert inputs.name == 'Test Project'
            assert len(inputs.shapes) == 2
            assert inputs.settings.safe_height == 80
            assert inputs.work_area.width == 1000
            assert [s.id for s in inputs.snippets] == ['default-header', 'default-footer']

    def test_project_settings_override_profile(self, app, sample_project, machine_profile):
        """Test per-project coating settings override individual profile keys."""
        with app.app_context():
            inputs = inputs_for(sample_project.id, coatingSettings={'coatingSpeed': 600})

            assert inputs.settings.coating_speed == 600
            assert inputs.settings.move_speed == 2000

    def test_stored_snippets(self, app, sample_project, sample_snippets):
        """Test stored snippets replace the defaults."""
        with app.app_context():
            inputs = inputs_for(sample_project.id)
            assert sorted(s.id for s in inputs.snippets) == ['footer', 'header']

    def test_payload_snippets(self, app, sample_project, sample_snippets):
        """Test snippets in the payload win over stored ones."""
        with app.app_context():
            inputs = inputs_for(sample_project.id, gcodeSnippets=[])
            assert inputs.snippets == []

    def test_invalid_settings(self, app, sample_project):
        """Test wrongly typed settings raise ValueError."""
        with app.app_context():
            with pytest.raises(ValueError, match='Invalid coating settings'):
                inputs_for(sample_project.id, coatingSettings={'safeHeight': 'high'})

    def test_skipped_shapes_become_warnings(self, app, sample_project):
        with app.app_context():
            inputs = inputs_for(sample_project.id, shapes=[{'id': 'x', 'type': 'star'}])
            warnings = GCodeService.get_validation_warnings(inputs)

            assert len(warnings) == 2
            assert 'star' in warnings[0]
            assert warnings[1] == 'No shapes have a fill or outline coating type'

    def test_all_skipped_warning(self, app, sample_project):
        with app.app_context():
            inputs = inputs_for(sample_project.id, shapes=[
                {'id': 'p', 'type': 'rectangle', 'width': 20, 'height': 20,
                 'coatingType': 'fill', 'skipCoating': True},
            ])
            warnings = GCodeService.get_validation_warnings(inputs)

            assert warnings == ['Every fill or outline shape is marked to skip coating']


class TestValidate:
    """Tests for GCodeService.validate."""

    def test_valid_project(self, app, sample_project, machine_profile):
        with app.app_context():
            assert GCodeService.validate(inputs_for(sample_project.id)) == []

    def test_shape_outside_work_area(self, app, sample_project, machine_profile):
        with app.app_context():
            inputs = inputs_for(sample_project.id, workArea={'width': 300, 'height': 300})
            errors = GCodeService.validate(inputs)

            assert len(errors) == 1
            assert "mask-1" in errors[0]

    def test_bad_settings(self, app, sample_project):
        with app.app_context():
            inputs = inputs_for(sample_project.id, coatingSettings={'coatingSpeed': 0})
            assert 'Coating speed must be greater than 0' in GCodeService.validate(inputs)


class TestGenerate:
    """Tests for G-code generation."""

    def test_generate(self, app, sample_project, machine_profile, timestamp):
        """Test generating the default-wrapped outline program."""
        with app.app_context():
            result = GCodeService.generate(inputs_for(sample_project.id), timestamp)

            lines = result['gcode'].splitlines()
            assert lines[:3] == ['G21 ; mm', 'G90 ; absolute', 'G0 Z80']
            assert lines[-3:] == ['M5 ; spindle/laser off', 'G0 Z80', 'G0 X0 Y0']
            assert len([line for line in lines if line.startswith('G1')]) == 4
            assert result['coatedShapeCount'] == 1
            assert not result['isEmpty']
            assert result['previewPath'][0] == [0.0, 0.0, 80.0]
            assert result['progress'][0] == {'percent': 5, 'message': 'Starting coating path generation'}
            assert result['progress'][-1]['percent'] == 100
            assert result['warnings'] == []

    def test_generate_with_stored_snippets(self, app, sample_project, sample_snippets, timestamp):
        with app.app_context():
            gcode = GCodeService.generate(inputs_for(sample_project.id), timestamp)['gcode']

            assert gcode.startswith('G21\nG90\n')
            assert gcode.endswith('\nG0 Z80\n')

    def test_nothing_to_coat(self, app, sample_project):
        """Test a project with only masks returns an empty result, not an error."""
        with app.app_context():
            result = GCodeService.generate(inputs_for(sample_project.id, shapes=[
                {'id': 'm', 'type': 'circle', 'x': 100, 'y': 100, 'radius': 10, 'coatingType': 'masking'}
            ]))

            assert result['isEmpty']
            assert result['gcode'] == ''
            assert result['progress'] == [{'percent': 100, 'message': result['message']}]

    def test_validation_failure_blocks_generation(self, app, sample_project):
        with app.app_context():
            inputs = inputs_for(sample_project.id, coatingSettings={'lineSpacing': -1})
            with pytest.raises(ValueError, match='Project validation failed'):
                GCodeService.generate(inputs)

    def test_empty_body(self, app, sample_project):
        with app.app_context():
            inputs = inputs_for(sample_project.id, shapes=[
                {'id': 'p', 'type': 'rectangle', 'x': 100, 'y': 100, 'width': 20, 'height': 20,
                 'coatingType': 'fill'},
                {'id': 'm', 'type': 'rectangle', 'x': 50, 'y': 50, 'width': 200, 'height': 200,
                 'coatingType': 'masking'},
            ])
            with pytest.raises(GenerationError) as exc_info:
                GCodeService.generate(inputs)
            assert exc_info.value.reason == GenerationError.EMPTY_BODY


class TestPathsAndSequence:
    """Tests for path groups, sequence endpoints and the SVG preview."""

    def test_path_groups(self, app, sample_project):
        with app.app_context():
            groups = GCodeService.get_path_groups(inputs_for(sample_project.id))

            assert len(groups) == 1
            assert groups[0]['id'] == 'rect-1'
            assert groups[0]['name'] == 'RECTANGLE 1'
            assert len(groups[0]['segments']) == 4
            assert groups[0]['segments'][0]['id'] == 'rect-1-seg-0'

    def test_sequence(self, app, sample_project, outline_rect_data):
        with app.app_context():
            ordered = dict(outline_rect_data, coatingOrder=1)
            sequence = GCodeService.get_sequence(inputs_for(sample_project.id, shapes=[ordered]))

            assert sequence == [{
                'shapeId': 'rect-1',
                'order': 1,
                'start': {'x': 0, 'y': 0},
                'end': {'x': 0, 'y': 0},
            }]

    def test_ordered_paths(self, app, sample_project):
        with app.app_context():
            ordered = GCodeService.get_ordered_paths(inputs_for(sample_project.id))

            assert len(ordered) == 1
            shape, path = ordered[0]
            assert shape.id == 'rect-1'
            assert len(path) == 4

    def test_preview_svg(self, app, sample_project):
        with app.app_context():
            svg = GCodeService.generate_preview_svg(inputs_for(sample_project.id))

            assert svg.startswith('<svg')
            assert svg.endswith('</svg>')
            assert '<circle cx="540" cy="540" r="40"' in svg
            assert '>1</text>' in svg


class TestOutputFiles:
    """Tests for saving and downloading programs."""

    def test_generate_and_save(self, app, sample_project, tmp_path, timestamp):
        with app.app_context():
            app.config['GCODE_OUTPUT_DIR'] = str(tmp_path)
            saved = GCodeService.generate_and_save(inputs_for(sample_project.id), timestamp)

            assert saved['project_name'] == 'Test_Project'
            assert saved['file'] == os.path.join(str(tmp_path), 'Test_Project', 'Test_Project.gcode')
            with open(saved['file']) as f:
                assert f.read().startswith('G21 ; mm')

    def test_download(self, app, sample_project):
        with app.app_context():
            zip_bytes, filename = GCodeService.generate_download(inputs_for(sample_project.id))

            assert filename == 'Test_Project.zip'
            with zipfile.ZipFile(io.BytesIO(zip_bytes)) as zf:
                assert sorted(zf.namelist()) == ['Test_Project.gcode', 'Test_Project_preview.svg']
                assert zf.read('Test_Project.gcode').decode().endswith('G0 X0 Y0\n')

    def test_download_nothing_to_coat(self, app, sample_project):
        with app.app_context():
            with pytest.raises(ValueError, match='Nothing to coat'):
                GCodeService.generate_download(inputs_for(sample_project.id, shapes=[]))
