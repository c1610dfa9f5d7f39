"""
Tests for the Mat3D string codec.
"""

import pytest
import numpy as np
from numpy.testing import assert_allclose

from mat3d import Mat3D, Mat3DBase, Offset, Rect
from mat3d.codec import (
    Mat3DCodec,
    ParsedMat3D,
    format_mat3d,
    parse_mat3d,
)

IDENTITY_STRING = (
    "Mat3D[1.0,0.0,0.0,0.0,0.0,1.0,0.0,0.0,0.0,0.0,1.0,0.0,0.0,0.0,0.0,1.0]"
    "(0.0, 0.0, 0.0, 0.0)"
)


class TestFormat:
    """Tests for formatting states to strings."""

    def test_identity(self):
        """The default state has a fixed canonical form."""
        assert str(Mat3D()) == IDENTITY_STRING

    def test_repr_matches_str(self):
        """repr and str are the same string."""
        state = Mat3D(rect=Rect(1, 2, 3, 4))
        assert repr(state) == str(state)

    def test_rect_bounds(self):
        """Bounds are rendered as decimals separated by ', '."""
        text = format_mat3d(np.eye(4), Rect(0, 0, 100, 50.5))
        assert text.endswith("(0.0, 0.0, 100.0, 50.5)")

    def test_values_are_column_major(self):
        """Values are listed column by column, so translation comes last."""
        text = str(Mat3D().translate_x(10))
        assert text.startswith(
            "Mat3D[1.0,0.0,0.0,0.0,0.0,1.0,0.0,0.0,0.0,0.0,1.0,0.0,10.0,0.0,0.0,1.0]"
        )

    def test_negative_values(self):
        """Negative values are written with their sign."""
        text = str(Mat3D(rect=Rect(-5, -5, 5, 5)).translate_y(-2))
        assert "-2.0" in text
        assert text.endswith("(-5.0, -5.0, 5.0, 5.0)")


class TestParse:
    """Tests for parsing strings, including fallbacks."""

    def test_identity_example(self):
        """Integer values and bounds parse exactly."""
        state = Mat3D.parse("Mat3D[1,0,0,0,0,1,0,0,0,0,1,0,0,0,0,1](0, 0, 100, 100)")

        assert_allclose(state.matrix, np.eye(4))
        assert state.rect == Rect(0, 0, 100, 100)

    def test_existing_translate_string(self):
        """Strings written for translate(10) place the translation in the last column."""
        state = Mat3D.parse("Mat3D[1,0,0,0, 0,1,0,0, 0,0,1,0, 10,10,0,1](0,0,0,0)")

        assert_allclose(state.map_point(0, 0), (10, 10, 0))
        assert_allclose(state.matrix[:3, 3], [10, 10, 0])
        assert_allclose(state.matrix[3], [0, 0, 0, 1])

    def test_format_matches_existing_strings(self):
        """translate(10) formats to the same value order it parses from."""
        text = str(Mat3D().translate(10))
        assert text.startswith(
            "Mat3D[1.0,0.0,0.0,0.0,0.0,1.0,0.0,0.0,0.0,0.0,1.0,0.0,10.0,10.0,0.0,1.0]"
        )

    def test_garbage(self):
        """Unrecognised text gives identity and the empty rect."""
        state = Mat3D.parse("garbage")

        assert_allclose(state.matrix, np.eye(4))
        assert state.rect == Rect.zero()

    def test_garbage_is_reported(self):
        """parse_mat3d flags a failed match."""
        parsed = parse_mat3d("garbage")

        assert isinstance(parsed, ParsedMat3D)
        assert parsed.matched is False

    def test_empty_string(self):
        """An empty string is just another fallback."""
        state = Mat3D.parse("")
        assert_allclose(state.matrix, np.eye(4))

    def test_non_string(self):
        """Non-string input falls back instead of raising."""
        parsed = Mat3DCodec().parse(None)
        assert parsed.matched is False
        assert_allclose(parsed.matrix, np.eye(4))

    def test_missing_array(self):
        """Without a value array the matrix is identity, the rect is kept."""
        parsed = parse_mat3d("Mat3D(1, 2, 30, 40)")

        assert parsed.matched is True
        assert parsed.matrix_recovered is True
        assert_allclose(parsed.matrix, np.eye(4))
        assert parsed.rect == Rect(1, 2, 30, 40)

    def test_short_array(self):
        """An array that is not 16 values is replaced by identity."""
        state = Mat3D.parse("Mat3D[1,2,3](1, 2, 3, 4)")

        assert_allclose(state.matrix, np.eye(4))
        assert state.rect == Rect(1, 2, 3, 4)

    def test_undecodable_array(self):
        """An array that is not valid JSON is replaced by identity."""
        state = Mat3D.parse("Mat3D[1,,2](1, 2, 3, 4)")

        assert_allclose(state.matrix, np.eye(4))
        assert state.rect == Rect(1, 2, 3, 4)

    def test_bad_bounds_default_to_zero(self):
        """Bounds that are not numbers become 0."""
        text = "Mat3D[1,0,0,0,0,1,0,0,0,0,1,0,0,0,0,1](1.2.3, 5, -, 7)"
        state = Mat3D.parse(text)

        assert state.rect == Rect(0, 5, 0, 7)

    def test_empty_bound_defaults_to_zero(self):
        """A missing bound becomes 0."""
        state = Mat3D.parse("Mat3D[1,0,0,0,0,1,0,0,0,0,1,0,0,0,0,1](, 5, 6, 7)")
        assert state.rect == Rect(0, 5, 6, 7)

    def test_trailing_comma(self):
        """A trailing comma inside the parentheses is accepted."""
        state = Mat3D.parse("Mat3D[1,0,0,0,0,1,0,0,0,0,1,0,0,0,0,1](0, 0, 10, 10,)")
        assert state.rect == Rect(0, 0, 10, 10)

    def test_no_spaces(self):
        """Spaces after the commas are optional."""
        state = Mat3D.parse("Mat3D[1,0,0,0,0,1,0,0,0,0,1,0,0,0,0,1](0,0,10,10)")
        assert state.rect == Rect(0, 0, 10, 10)

    def test_prefix_match(self):
        """The shape must start the string; trailing text is ignored."""
        good = Mat3D.parse(IDENTITY_STRING + " trailing")
        bad = parse_mat3d(" " + IDENTITY_STRING)

        assert good.rect == Rect.zero()
        assert bad.matched is False

    def test_parsed_states_are_independent(self):
        """Each parse builds a new matrix."""
        a = Mat3D.parse(IDENTITY_STRING)
        b = Mat3D.parse(IDENTITY_STRING)

        a.translate_x(3)
        assert b.matrix[0, 3] == 0.0


class TestRoundTrip:
    """parse(format(state)) reproduces the state."""

    def assert_round_trip(self, state):
        restored = Mat3D.parse(str(state))
        assert_allclose(restored.matrix, state.matrix, atol=1e-9)
        assert restored.rect == state.rect

    def test_identity(self):
        self.assert_round_trip(Mat3D())

    def test_transformed_state(self):
        """Rotations, negative values and fractions survive."""
        state = Mat3D(rect=Rect(-10, -5, 90, 45))
        state.rotate(33).translate(-12.5).scale_y(0.25).tilt_x(-71)
        self.assert_round_trip(state)

    def test_tiny_values(self):
        """Exponent notation survives."""
        state = Mat3D().rotate(180)  # leaves ~1e-16 entries
        state.matrix[2, 3] = 1e-17
        self.assert_round_trip(state)

    def test_large_values(self):
        """Large values survive."""
        state = Mat3D(rect=Rect(0, 0, 1e20, 3e21)).translate(1e18)
        self.assert_round_trip(state)

    def test_raw_state(self):
        """Aliasing states format the shared matrix."""
        matrix = np.eye(4, order='F')
        state = Mat3D.raw(matrix, Rect(0, 0, 64, 32)).scale(1.5)
        self.assert_round_trip(state)

    def test_combined_state(self):
        """Combined states round-trip with their grown rect."""
        state = Mat3D.combine([
            Mat3D(rect=Rect(0, 0, 100, 100)).rotate(15),
            Mat3D(rect=Rect(50, 50, 100, 100)).shift(Offset(3, 4)),
        ])
        self.assert_round_trip(state)

    def test_mixin_implementor(self):
        """Mat3DBase implementors format the same way."""
        base = Mat3DBase(np.eye(4, order='F'), Rect(0, 0, 10, 10)).rotate(45)
        restored = Mat3D.parse(str(base))
        assert_allclose(restored.matrix, base.matrix, atol=1e-9)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
