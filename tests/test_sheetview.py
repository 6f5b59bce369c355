import pytest

from reportsheet.cellrange import MAX_COLUMN, MAX_ROW, CellRange
from reportsheet.sheetview import (
    HeaderFooter,
    PageMargins,
    PageSetup,
    SheetFormatProps,
    SheetView,
    calculate_col_width,
    dimension_string,
    extend_dimension,
)


def test_default_view_attributes():
    assert SheetView().xml_attributes() == {"showRuler": "0", "workbookViewId": "0"}


def test_view_round_trip_all_toggled():
    view = SheetView(
        window_protection=True,
        show_formulas=True,
        show_grid_lines=False,
        show_row_col_headers=False,
        show_zeros=False,
        right_to_left=True,
        tab_selected=True,
        show_ruler=True,
        show_outline_symbols=False,
        show_white_space=False,
    )
    assert SheetView.from_attributes(view.xml_attributes()) == view


def test_view_round_trip_default():
    view = SheetView()
    assert SheetView.from_attributes(view.xml_attributes()) == view


def test_view_from_empty_attributes_shows_ruler():
    view = SheetView.from_attributes({})
    assert view.show_ruler is True
    assert view.show_grid_lines is True
    assert view.tab_selected is False


def test_format_props_default_attributes():
    attrs = SheetFormatProps().xml_attributes()
    assert attrs["defaultRowHeight"] == "15"
    assert attrs["customHeight"] == "0"
    assert attrs["zeroHeight"] == "0"
    assert list(attrs) == [
        "defaultRowHeight",
        "customHeight",
        "zeroHeight",
        "outlineLevelRow",
        "outlineLevelCol",
    ]


def test_format_props_width_from_base():
    props = SheetFormatProps.from_attributes({"baseColWidth": "10"})
    assert props.base_col_width == 10
    assert props.default_col_width == calculate_col_width(10)


def test_format_props_explicit_width_kept():
    props = SheetFormatProps.from_attributes({"baseColWidth": "10", "defaultColWidth": "12.5"})
    assert props.default_col_width == 12.5


def test_format_props_round_trip_written_fields():
    props = SheetFormatProps(
        custom_height=True, default_row_height=20.25, outline_level_row=2, outline_level_col=1
    )
    back = SheetFormatProps.from_attributes(props.xml_attributes())
    assert back.custom_height is True
    assert back.default_row_height == 20.25
    assert back.outline_level_row == 2
    assert back.outline_level_col == 1


def test_calculate_col_width_is_characters():
    assert calculate_col_width(8) == 8


def test_page_margins_complete():
    assert PageMargins().is_complete() is False
    assert PageMargins("0.7", "0.7", "0.75", "0.75", "0.3", "0.3").is_complete() is True
    assert PageMargins("0.7", "0.7", "0.75", "0.75", "0.3", "").is_complete() is False


def test_page_setup_and_header_footer_defaults():
    assert PageSetup().rid == ""
    hf = HeaderFooter()
    assert hf.odd_header is None and hf.odd_footer is None


def test_extend_dimension_from_empty():
    dim = extend_dimension(CellRange(), 3, 4)
    assert dim == CellRange(3, 4, 3, 4)


def test_extend_dimension_grows():
    dim = extend_dimension(CellRange(), 3, 4)
    dim = extend_dimension(dim, 1, 7)
    assert dim == CellRange(1, 4, 3, 7)


def test_extend_dimension_ignore_flags():
    start = CellRange(2, 2, 2, 2)
    assert extend_dimension(start, 9, 9, ignore_row=True) == CellRange(2, 2, 2, 9)
    assert extend_dimension(start, 9, 9, ignore_column=True) == CellRange(2, 2, 9, 2)


@pytest.mark.parametrize(
    "row,column", [(0, 1), (1, 0), (MAX_ROW + 1, 1), (1, MAX_COLUMN + 1), (-1, -1)]
)
def test_extend_dimension_rejects_outside(row, column):
    with pytest.raises(ValueError):
        extend_dimension(CellRange(), row, column)


def test_dimension_string():
    assert dimension_string(CellRange()) == "A1"
    assert dimension_string(CellRange(1, 1, 9, 7)) == "A1:G9"