import pytest

from reportsheet.cell import CellType
from reportsheet.cellrange import CellRange
from reportsheet.hyperlinks import LinkType
from reportsheet.sheetreader import load_worksheet
from reportsheet.sheetwriter import save_worksheet
from reportsheet.worksheet import Worksheet

NS = "http://schemas.openxmlformats.org/spreadsheetml/2006/main"


def _reload(sheet):
    data = save_worksheet(sheet)
    loaded = Worksheet(shared_strings=list(sheet.shared_strings))
    load_worksheet(loaded, data, sheet.relationships)
    return loaded


def _doc(body):
    return f'<worksheet xmlns="{NS}">{body}</worksheet>'.encode("utf-8")


def test_values_round_trip():
    sheet = Worksheet()
    sheet.write_string(1, 1, "alpha")
    sheet.write_number(2, 2, 3.5)
    sheet.write_bool(3, 1, True)
    loaded = _reload(sheet)
    assert loaded.read(1, 1) == "alpha"
    assert loaded.read(2, 2) == 3.5
    assert loaded.read(3, 1) is True
    assert loaded.dimension == sheet.dimension


def test_formula_round_trip():
    sheet = Worksheet()
    sheet.write_formula(1, 1, "=B1*2")
    loaded = _reload(sheet)
    assert loaded.read(1, 1) == "=B1*2"
    assert loaded.cell_at(1, 1).formula.calculate is True


def test_blank_and_inline_string():
    sheet = Worksheet()
    sheet.write_blank(4, 4)
    sheet.write_inline_string(1, 1, "  padded ")
    loaded = _reload(sheet)
    blank = loaded.cell_at(4, 4)
    assert blank.value is None
    assert blank.type is CellType.NUMBER
    assert loaded.read(1, 1) == "  padded "


def test_merges_round_trip():
    sheet = Worksheet()
    sheet.write(1, 1, "head")
    sheet.merge_cells("A1:C2")
    loaded = _reload(sheet)
    assert loaded.merged_cells() == sheet.merged_cells()
    assert loaded.read(1, 1) == "head"


def test_layout_round_trip():
    sheet = Worksheet()
    sheet.write(1, 1, "x")
    sheet.layout.set_row_height(2, 2, 30)
    sheet.layout.set_column_width(3, 4, 12.5)
    sheet.layout.set_column_hidden(5, 5, True)
    loaded = _reload(sheet)
    assert loaded.layout.row_height(2) == 30
    assert loaded.layout.column_width(4) == 12.5
    assert loaded.layout.is_column_hidden(5) is True
    assert loaded.layout.is_column_hidden(3) is False


def test_hyperlink_round_trip():
    sheet = Worksheet()
    sheet.write_hyperlink(3, 1, "https://example.com/page#top")
    loaded = _reload(sheet)
    link = loaded.hyperlinks[(3, 1)]
    assert link.link_type is LinkType.EXTERNAL
    assert link.target == "https://example.com/page"
    assert link.location == "top"
    assert loaded.read(3, 1) == "https://example.com/page#top"


def test_view_and_page_settings_round_trip():
    sheet = Worksheet()
    sheet.write(1, 1, 1)
    sheet.view.show_grid_lines = False
    sheet.view.right_to_left = True
    for name in ("left", "right", "top", "bottom", "header", "footer"):
        setattr(sheet.page_margins, name, "0.7")
    sheet.header_footer.odd_header = "&CTitle"
    loaded = _reload(sheet)
    assert loaded.view == sheet.view
    assert loaded.page_margins == sheet.page_margins
    assert loaded.header_footer.odd_header == "&CTitle"


def test_positions_without_references():
    data = _doc(
        "<sheetData>"
        "<row><c><v>7</v></c><c t=\"b\"><v>1</v></c></row>"
        '<row r="4"><c r="C4" t="inlineStr"><is><t>hi</t></is></c></row>'
        "</sheetData>"
    )
    sheet = load_worksheet(Worksheet(), data)
    assert sheet.cell_at(1, 1).value == "7"
    assert sheet.cell_at(1, 1).type is CellType.CUSTOM
    assert sheet.read(1, 2) is True
    assert sheet.read(4, 3) == "hi"
    assert sheet.dimension == CellRange(1, 1, 4, 3)


def test_style_index_is_kept():
    data = _doc('<sheetData><row r="1"><c r="A1" s="2" t="n"><v>1</v></c></row></sheetData>')
    sheet = load_worksheet(Worksheet(), data)
    assert sheet.cell_at(1, 1).style_index == 2
    assert b's="2"' in save_worksheet(sheet)


def test_internal_hyperlink():
    data = _doc('<hyperlinks><hyperlink ref="B2" location="Sheet2!A1"/></hyperlinks>')
    sheet = load_worksheet(Worksheet(), data)
    link = sheet.hyperlinks[(2, 2)]
    assert link.link_type is LinkType.INTERNAL
    assert link.location == "Sheet2!A1"


def test_format_props_default_width_from_base():
    data = _doc('<sheetFormatPr baseColWidth="10" defaultRowHeight="15"/>')
    sheet = load_worksheet(Worksheet(), data)
    assert sheet.layout.format_props.default_col_width == 10.0
    assert sheet.layout.column_width(7) == 10.0


def test_malformed_xml_raises():
    with pytest.raises(ValueError):
        load_worksheet(Worksheet(), b"<worksheet><sheetData>")


def test_shared_string_index_out_of_range():
    data = _doc('<sheetData><row r="1"><c r="A1" t="s"><v>3</v></c></row></sheetData>')
    with pytest.raises(ValueError):
        load_worksheet(Worksheet(shared_strings=["only"]), data)