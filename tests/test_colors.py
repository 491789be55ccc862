import numpy as np
import pytest

from voxelterm.colors import (
    ANSI_BLACK,
    ANSI_WHITE,
    COLOR_MAPS,
    ColorMode,
    Rgb,
    ansi256_from_rgb,
    calc_termcolor,
    calc_termcolor_max_contrast,
    color_map_by_name,
    luma,
    next_color_map,
    reduce_colors,
)

GRAY = color_map_by_name("Gray")


def test_color_map_lookup_is_case_insensitive():
    assert color_map_by_name("viridis").name == "Viridis"
    with pytest.raises(ValueError, match="Unknown color map"):
        color_map_by_name("rainbow-unicorn")


def test_next_color_map_wraps_around():
    assert next_color_map(COLOR_MAPS[0]) == COLOR_MAPS[1]
    assert next_color_map(COLOR_MAPS[-1]) == COLOR_MAPS[0]


def test_values_are_clipped():
    cmap = color_map_by_name("Inferno")
    assert np.array_equal(cmap.rgb(-3.0), cmap.rgb(0.0))
    assert np.array_equal(cmap.rgb(7.0), cmap.rgb(1.0))
    assert np.array_equal(cmap.rgb(np.nan), cmap.rgb(0.0))


def test_rgb_shape_and_dtype():
    out = GRAY.rgb(np.zeros((3, 5)))
    assert out.shape == (3, 5, 3)
    assert out.dtype == np.uint8


def test_gray_endpoints_and_inverted_greys():
    assert GRAY.rgb(0.0).tolist() == [0, 0, 0]
    assert GRAY.rgb(1.0).tolist() == [255, 255, 255]
    greys = color_map_by_name("Greys")
    assert greys.rgb(0.0).tolist() == [255, 255, 255]


def test_truecolor_returns_rgb():
    assert calc_termcolor(ColorMode.TRUECOLOR, GRAY, 1.0) == Rgb(255, 255, 255)


def test_ansi256_picks_nearest_palette_entry():
    rgb = np.array([[0, 0, 0], [255, 255, 255], [255, 0, 0], [128, 128, 128]])
    assert ansi256_from_rgb(rgb).tolist() == [16, 231, 196, 244]


def test_ansi256_preserves_shape():
    rgb = np.zeros((2, 3, 3), dtype=np.uint8)
    out = reduce_colors(rgb, ColorMode.ANSI256)
    assert out.shape == (2, 3)
    assert np.all(out == 16)


def test_black_and_white_threshold():
    assert calc_termcolor(ColorMode.BW, GRAY, 0.0) == ANSI_BLACK
    assert calc_termcolor(ColorMode.BW, GRAY, 1.0) == ANSI_WHITE
    assert luma([255, 255, 255]) == pytest.approx(255.0)


def test_max_contrast_is_opposite_of_background():
    assert calc_termcolor_max_contrast(ColorMode.TRUECOLOR, GRAY, 0.0) == Rgb(255, 255, 255)
    assert calc_termcolor_max_contrast(ColorMode.TRUECOLOR, GRAY, 1.0) == Rgb(0, 0, 0)
    assert calc_termcolor_max_contrast(ColorMode.ANSI256, GRAY, 0.0) == 231
    assert calc_termcolor_max_contrast(ColorMode.ANSI256, GRAY, 1.0) == 16
    assert calc_termcolor_max_contrast(ColorMode.BW, GRAY, 0.0) == ANSI_WHITE
    assert calc_termcolor_max_contrast(ColorMode.BW, GRAY, 1.0) == ANSI_BLACK


def test_color_mode_from_name():
    assert ColorMode.from_name("ANSI256") is ColorMode.ANSI256
    with pytest.raises(ValueError):
        ColorMode.from_name("sepia")
