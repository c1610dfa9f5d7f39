"""
Tests for the mat3d command-line interface.
"""

import os
import logging
import pytest
import tempfile
from numpy.testing import assert_allclose

from mat3d import Mat3D, Rect
from mat3d.cli import main


@pytest.fixture
def recipe_file():
    """A small recipe on disk."""
    content = """rect: [0, 0, 100, 100]
steps:
  - op: scale_x
    args: [2]
  - op: translate_y
    args: [5]
"""
    with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
        f.write(content)
        return f.name


class TestApply:
    """Tests for `mat3d apply`."""

    def test_apply_prints_state(self, recipe_file, capsys):
        assert main(['apply', recipe_file]) == 0

        out = capsys.readouterr().out
        line = [l for l in out.splitlines() if l.startswith('Mat3D[')][0]
        state = Mat3D.parse(line)
        assert state.rect == Rect(0, 0, 100, 100)
        assert state.matrix[1, 3] == pytest.approx(5.0)

    def test_apply_writes_output(self, recipe_file):
        with tempfile.TemporaryDirectory() as tmp:
            output = os.path.join(tmp, 'nested', 'state.txt')
            assert main(['apply', recipe_file, '--output', output]) == 0

            with open(output) as f:
                state = Mat3D.parse(f.read())

        expected = Mat3D(rect=Rect(0, 0, 100, 100)).scale_x(2).translate_y(5)
        assert_allclose(state.matrix, expected.matrix, atol=1e-9)

    def test_apply_missing_file(self):
        assert main(['apply', '/nonexistent/recipe.yaml']) == 1

    def test_apply_invalid_recipe(self):
        with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
            f.write("steps:\n  - op: explode\n")
            path = f.name

        assert main(['apply', path]) == 1


class TestParseAndLerp:
    """Tests for `mat3d parse` and `mat3d lerp`."""

    def test_parse(self, capsys):
        source = "Mat3D[1,0,0,0,0,1,0,0,0,0,1,0,0,0,0,1](0, 0, 100, 100)"
        assert main(['parse', source]) == 0

        out = capsys.readouterr().out
        assert "Matrix:" in out
        assert "right=100.0" in out
        assert "Center: (50.0, 50.0)" in out

    def test_parse_garbage_still_succeeds(self, capsys):
        assert main(['parse', 'garbage']) == 0
        assert "left=0.0" in capsys.readouterr().out

    @pytest.mark.parametrize("source", ["garbage", "Mat3D(oops)", "Mat3D[1,0,0,1]"])
    def test_parse_warns_on_unrecognised_input(self, source, caplog):
        """Input that does not have the Mat3D shape is reported, even with the prefix."""
        with caplog.at_level(logging.WARNING):
            assert main(['parse', source]) == 0
        assert "not a Mat3D string" in caplog.text

    def test_parse_does_not_warn_on_valid_input(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert main(['parse', "Mat3D(0, 0, 10, 10)"]) == 0
        assert "not a Mat3D string" not in caplog.text

    def test_lerp(self, capsys):
        begin = str(Mat3D().translate_x(10))
        end = str(Mat3D().translate_x(30))

        assert main(['lerp', begin, end, '0.5']) == 0

        out = capsys.readouterr().out
        line = [l for l in out.splitlines() if l.startswith('Mat3D[')][0]
        assert Mat3D.parse(line).matrix[0, 3] == pytest.approx(20.0)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
