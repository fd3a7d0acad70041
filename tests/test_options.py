"""Tests for heading depth remapping."""

import pytest

from md2hatena.converter.options import HeadingDepth


class TestHeadingDepth:
    def test_minimum_one_is_identity(self):
        depth = HeadingDepth(1)
        assert [depth.apply(level) for level in range(1, 7)] == [1, 2, 3, 4, 5, 6]

    def test_offset(self):
        depth = HeadingDepth(3)
        assert depth.apply(1) == 3
        assert depth.apply(2) == 4

    def test_saturates_at_six(self):
        assert HeadingDepth(3).apply(4) == 6
        assert HeadingDepth(6).apply(6) == 6

    @pytest.mark.parametrize("minimum", range(1, 7))
    @pytest.mark.parametrize("level", range(1, 7))
    def test_always_valid(self, minimum, level):
        assert 1 <= HeadingDepth(minimum).apply(level) <= 6

    @pytest.mark.parametrize("minimum", [0, 7])
    def test_invalid_minimum(self, minimum):
        with pytest.raises(ValueError):
            HeadingDepth(minimum)

    def test_default_is_one(self):
        assert HeadingDepth() == HeadingDepth(1)
