from voxelterm.colors import ColorMode, Rgb, color_map_by_name
from voxelterm.visualization.cells import CYAN, CellBuffer, Rect
from voxelterm.visualization.widgets import (
    draw_border,
    draw_color_bar,
    draw_key_value_list,
    draw_title_bar,
    split_path,
)


def test_rect_edges_and_inner():
    rect = Rect(2, 3, 10, 5)
    assert (rect.left, rect.top, rect.right, rect.bottom) == (2, 3, 12, 8)
    assert rect.inner() == Rect(3, 4, 8, 3)
    assert Rect(0, 0, 1, 1).inner() == Rect(1, 1, 0, 0)


def test_set_ignores_out_of_bounds():
    buffer = CellBuffer(3, 2)
    buffer.set(5, 0, "x")
    buffer.set(-1, 0, "x")
    buffer.set(1, 1, "y")
    assert buffer.text() == "   \n y "


def test_set_string_truncates():
    buffer = CellBuffer(10, 1)
    assert buffer.set_string(1, 0, "hello world", max_width=4) == 4
    assert buffer.text() == " hell     "


def test_ansi_output_uses_sgr_colors():
    buffer = CellBuffer(2, 1)
    buffer.set(0, 0, "a", fg=Rgb(1, 2, 3), bg=196, bold=True)
    buffer.set(1, 0, "b")
    out = buffer.to_ansi()
    assert "\x1b[0;1;38;2;1;2;3;48;5;196ma" in out
    assert "\x1b[0;39;49mb" in out
    assert out.endswith("\x1b[0m")


def test_border_draws_rounded_corners_and_title():
    buffer = CellBuffer(8, 4)
    inner = draw_border(buffer, buffer.area, "Title")
    assert inner == Rect(1, 1, 6, 2)
    lines = buffer.text().split("\n")
    assert lines[0] == "╭Title─╮"
    assert lines[1] == "│      │"
    assert lines[3] == "╰──────╯"


def test_border_title_is_clipped():
    buffer = CellBuffer(6, 3)
    draw_border(buffer, buffer.area, "A long title")
    assert buffer.text().split("\n")[0] == "╭A lo╮"


def test_split_path():
    assert split_path("data/sub-01_T1w.nii.gz") == ("data/", "sub-01_T1w", ".nii.gz")
    assert split_path("brain.nii") == ("", "brain", ".nii")
    assert split_path("noext") == ("", "noext", "")


def test_title_bar_layout():
    buffer = CellBuffer(40, 1)
    draw_title_bar(buffer, buffer.area, "data/brain.nii.gz", ("Voxel", "Metadata"), 0)
    text = buffer.text()
    assert text.startswith("data/brain.nii.gz")
    assert text.endswith("Voxel Metadata")
    assert buffer[0, 0].fg != CYAN
    assert buffer[5, 0].fg == CYAN and buffer[5, 0].bold
    active = buffer[26, 0]
    assert active.char == "V" and active.bg == CYAN


def test_title_bar_drops_directory_when_narrow():
    buffer = CellBuffer(30, 1)
    draw_title_bar(buffer, buffer.area, "data/brain.nii.gz", ("Voxel", "Metadata"), 1)
    assert buffer.text().startswith("brain.nii.gz ")
    assert buffer[22, 0].bg == CYAN


def test_color_bar_labels():
    buffer = CellBuffer(30, 1)
    draw_color_bar(
        buffer, buffer.area, color_map_by_name("Gray"), ColorMode.BW, (0.0, 10.0)
    )
    text = buffer.text()
    assert text.startswith("0.00")
    assert text.endswith("10.00")
    assert "Gray" in text
    assert buffer[0, 0].bg == 0
    assert buffer[29, 0].bg == 15


def test_key_value_list_truncates_with_marker():
    entries = [(f"key{i}", f"value{i}") for i in range(5)]
    buffer = CellBuffer(20, 3)
    draw_key_value_list(buffer, buffer.area, entries)
    lines = buffer.text().split("\n")
    assert lines[0].startswith("key0 value0")
    assert lines[1].startswith("key1 value1")
    assert lines[2].strip() == "[...]"
    assert buffer[0, 0].fg == CYAN


def test_key_value_list_scrolls():
    entries = [("a", "1"), ("long", "2"), ("b", "3")]
    buffer = CellBuffer(20, 3)
    draw_key_value_list(buffer, buffer.area, entries, start=1)
    lines = buffer.text().split("\n")
    assert lines[0].startswith("long 2")
    assert lines[1].startswith("b    3")
    assert lines[2].strip() == ""
