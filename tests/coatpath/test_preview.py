"""Tests for parse_gcode_to_path."""
from coatpath.preview import parse_gcode_to_path


class TestParseGcodeToPath:
    """Tests for preview path extraction."""

    def test_missing_axes_keep_previous_values(self):
        gcode = "G0 X1 Y2\nG1 Z3\nG1 X4.5"
        assert parse_gcode_to_path(gcode) == [(1, 2, 5), (1, 2, 3), (4.5, 2, 3)]

    def test_ignores_other_commands(self):
        gcode = "G21\nG90\nM503\nM5\nG28\nG0 X1"
        assert parse_gcode_to_path(gcode) == [(1, 0, 5)]

    def test_comments_stripped(self):
        gcode = "; G1 X99\nG0 Z80 ; raise X50"
        assert parse_gcode_to_path(gcode) == [(0, 0, 80)]

    def test_zero_padded_and_lowercase(self):
        gcode = "g01 x1 y1\nG00 X-2.5 Y.5"
        assert parse_gcode_to_path(gcode) == [(1, 1, 5), (-2.5, 0.5, 5)]

    def test_custom_start(self):
        assert parse_gcode_to_path("G1 X1", start=(0, 0, 80)) == [(1, 0, 80)]

    def test_empty(self):
        assert parse_gcode_to_path('') == []
