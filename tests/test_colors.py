"""Tests for generators/colors.py"""

import pytest

from generators.colors import (
    contrast_ratio,
    hex_to_rgb,
    lighten,
    normalize_hex,
    pick_darkest,
    relative_luminance,
    rgb_to_hex,
)


class TestNormalizeHex:
    @pytest.mark.parametrize("value,expected", [
        ("#AABBCC", "#aabbcc"),
        ("aabbcc", "#aabbcc"),
        ("#abc", "#aabbcc"),
        ("  #1A365D ", "#1a365d"),
    ])
    def test_accepted_forms(self, value, expected):
        assert normalize_hex(value, "#000000") == expected

    @pytest.mark.parametrize("value", ["red", "#12345", "#ggggggg", None, 123, ["#fff"]])
    def test_rejected_forms_use_default(self, value):
        assert normalize_hex(value, "#010203") == "#010203"


class TestChannelConversion:
    def test_hex_to_rgb(self):
        assert hex_to_rgb("#1a365d") == (0x1A, 0x36, 0x5D)

    def test_rgb_to_hex(self):
        assert rgb_to_hex(255, 0, 16) == "#ff0010"


class TestLighten:
    def test_factor_zero_is_identity(self):
        assert lighten("#1a365d", 0) == "#1a365d"

    def test_factor_one_is_white(self):
        assert lighten("#1a365d", 1) == "#ffffff"

    def test_factor_is_clamped(self):
        assert lighten("#000000", 2.5) == "#ffffff"
        assert lighten("#336699", -1) == "#336699"

    def test_white_background_stays_white(self):
        assert lighten("#ffffff", 0.95) == "#ffffff"

    def test_halfway(self):
        # 0 + 255 * 0.5 = 127.5 rounds up
        assert lighten("#000000", 0.5) == "#808080"


class TestLuminance:
    def test_extremes(self):
        assert relative_luminance("#000000") == 0.0
        assert relative_luminance("#ffffff") == pytest.approx(1.0)

    def test_green_weighs_most(self):
        assert relative_luminance("#00ff00") > relative_luminance("#ff0000") > relative_luminance("#0000ff")

    def test_contrast_ratio_black_white(self):
        assert contrast_ratio("#000000", "#ffffff") == pytest.approx(21.0)
        assert contrast_ratio("#ffffff", "#000000") == pytest.approx(21.0)


class TestPickDarkest:
    def test_picks_lowest_luminance(self):
        assert pick_darkest(["#ffffff", "#3182ce", "#1a202c", "#2d3748"]) == "#1a202c"

    def test_tie_goes_to_first(self):
        assert pick_darkest(["#AABBCC", "#aabbcc"]) == "#AABBCC"
        assert pick_darkest(["#ffffff", "#1A202C", "#1a202c"]) == "#1A202C"

    def test_single_element(self):
        assert pick_darkest(["#abcdef"]) == "#abcdef"

    def test_empty_raises(self):
        with pytest.raises(ValueError):
            pick_darkest([])
