import pytest

from reportsheet.cellrange import MAX_COLUMN, MAX_ROW
from reportsheet.layout import SheetLayout


def _ranges(layout):
    return [(i.first_column, i.last_column) for _, i in sorted(layout.columns.items())]


def test_column_width_defaults_to_sheet_default():
    layout = SheetLayout()
    assert layout.column_width(3) == layout.format_props.default_col_width


def test_set_column_width_covers_range_only():
    layout = SheetLayout()
    layout.set_column_width(2, 5, 20)
    assert [layout.column_width(c) for c in range(2, 6)] == [20, 20, 20, 20]
    assert layout.column_width(6) == layout.format_props.default_col_width
    assert layout.column_width(1) == layout.format_props.default_col_width


def test_setting_inner_range_splits_run():
    layout = SheetLayout()
    layout.set_column_width(2, 8, 10)
    layout.set_column_width(4, 5, 30)
    assert _ranges(layout) == [(2, 3), (4, 5), (6, 8)]
    assert [layout.column_width(c) for c in range(2, 9)] == [10, 10, 30, 30, 10, 10, 10]


def test_column_infos_cover_requested_range_contiguously():
    layout = SheetLayout()
    layout.set_column_hidden(3, 4, True)
    infos = layout.column_infos(1, 6)
    assert infos[0].first_column == 1
    assert infos[-1].last_column == 6
    for left, right in zip(infos, infos[1:]):
        assert left.last_column + 1 == right.first_column


def test_invalid_column_ranges_raise():
    layout = SheetLayout()
    with pytest.raises(ValueError):
        layout.set_column_width(5, 2, 10)
    with pytest.raises(ValueError):
        layout.set_column_width(0, 2, 10)
    with pytest.raises(ValueError):
        layout.set_column_width(1, MAX_COLUMN + 1, 10)


def test_column_settings_extend_dimension_columns_only():
    layout = SheetLayout()
    layout.set_column_width(2, 5, 20)
    assert layout.dimension.first_column == 2
    assert layout.dimension.last_column == 5
    assert layout.dimension.first_row == -1


def test_column_hidden_and_style():
    layout = SheetLayout()
    layout.set_column_hidden(2, 3, True)
    layout.set_column_style(1, 2, "bold")
    assert layout.is_column_hidden(2) and layout.is_column_hidden(3)
    assert not layout.is_column_hidden(4)
    assert layout.column_lookup[1].style == "bold"
    assert layout.column_lookup[2].style == "bold"
    assert layout.column_lookup[3].style is None


def test_row_height_and_dimension():
    layout = SheetLayout()
    layout.set_row_height(1, 3, 80)
    assert layout.row_height(2) == 80
    assert layout.row_height(10) == layout.format_props.default_row_height
    assert (layout.dimension.first_row, layout.dimension.last_row) == (1, 3)


def test_invalid_rows_are_skipped():
    layout = SheetLayout()
    infos = layout.row_infos(MAX_ROW, MAX_ROW + 2)
    assert len(infos) == 1
    assert MAX_ROW in layout.rows
    with pytest.raises(ValueError):
        layout.set_row_height(0, 0, 20)


def test_row_hidden_and_style():
    layout = SheetLayout()
    layout.set_row_hidden(4, 4, True)
    layout.set_row_style(5, 6, "header")
    assert layout.is_row_hidden(4)
    assert not layout.is_row_hidden(5)
    assert layout.rows[6].style == "header"


def test_group_rows_collapsed():
    layout = SheetLayout()
    layout.group_rows(2, 4)
    assert all(layout.rows[r].hidden and layout.rows[r].outline_level == 1 for r in (2, 3, 4))
    assert layout.rows[5].collapsed
    layout.group_rows(2, 4, collapsed=False)
    assert layout.rows[3].outline_level == 2


def test_group_columns_collapsed():
    layout = SheetLayout()
    layout.group_columns(2, 4)
    assert layout.column_lookup[3].outline_level == 1
    assert layout.is_column_hidden(2) and layout.is_column_hidden(4)
    assert layout.column_lookup[5].collapsed
    assert not layout.is_column_hidden(5)


def test_group_columns_splits_existing_run():
    layout = SheetLayout()
    layout.set_column_width(1, 10, 12)
    layout.group_columns(3, 4, collapsed=False)
    assert layout.column_lookup[3] is not layout.column_lookup[1]
    assert layout.column_lookup[3].outline_level == 1
    assert layout.column_lookup[1].outline_level == 0
    assert layout.column_width(3) == 12
    assert layout.column_width(9) == 12


def test_pixel_sizes():
    layout = SheetLayout()
    assert layout.column_pixels(1) == 64
    layout.set_column_width(2, 2, 10)
    layout.set_column_width(3, 3, 0.5)
    assert layout.column_pixels(2) == 75
    assert layout.column_pixels(3) == 6
    assert layout.row_pixels(1) == 20
    layout.set_row_height(2, 2, layout.format_props.default_row_height * 2)
    assert layout.row_pixels(2) == 2 * layout.row_pixels(1)