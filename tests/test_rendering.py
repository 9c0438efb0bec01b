"""Tests for CLI table rendering."""

from cmsctl.rendering import MAX_CELL_WIDTH, render_table


def test_columns_are_padded():
    out = render_table(["ID", "NAME"], [(1, "alpha"), (22, "b")])
    lines = out.splitlines()
    assert lines[0] == "ID  NAME"
    assert lines[1] == "--  -----"
    assert lines[2] == "1   alpha"
    assert lines[3] == "22  b"


def test_cells_are_flattened_and_truncated():
    out = render_table(["V"], [("line1\nline2",), ("x" * 100,), (True,), ({"a": 1},)])
    lines = out.splitlines()
    assert lines[2] == "line1 line2"
    assert len(lines[3]) == MAX_CELL_WIDTH
    assert lines[4] == "yes"
    assert lines[5] == '{"a": 1}'
