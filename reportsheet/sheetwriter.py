"""Serialisation of a worksheet into its SpreadsheetML part."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from collections.abc import Mapping
from typing import Any

from reportsheet.cell import Cell, CellFormula, CellType, FormulaType
from reportsheet.cellrange import MAX_COLUMN, column_to_letters
from reportsheet.hyperlinks import LinkType
from reportsheet.sheetview import dimension_string
from reportsheet.worksheet import Worksheet

MAIN_NAMESPACE = "http://schemas.openxmlformats.org/spreadsheetml/2006/main"
RELATIONSHIP_NAMESPACE = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"

_XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
_SPACES = " \t\n\r"

_FORMULA_TYPE_NAMES = {
    FormulaType.ARRAY: "array",
    FormulaType.DATA_TABLE: "dataTable",
    FormulaType.SHARED: "shared",
}


def _number15(value: float) -> str:
    return format(float(value), ".15g")


def _number6(value: float) -> str:
    return format(float(value), ".6g")


def _plain(value: Any) -> str:
    """Text of a value as it appears in a <v> element."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else repr(value)
    return "" if value is None else str(value)


def _style_index(style: Any) -> int:
    """The xf index a style refers to, or -1 when it carries none."""
    if isinstance(style, int) and not isinstance(style, bool):
        return style
    if isinstance(style, Mapping):
        index = style.get("xf_index")
        if isinstance(index, int) and not isinstance(index, bool):
            return index
    return -1


def _cell_style_index(cell: Cell) -> int:
    return cell.style_index if cell.style_index >= 0 else _style_index(cell.style)


def _space_preserve_needed(text: str) -> bool:
    return bool(text) and (text[0] in _SPACES or text[-1] in _SPACES)


def calculate_spans(sheet: Worksheet) -> dict[int, str]:
    """Return the "spans" text of each block of 16 rows, keyed by (row - 1) // 16."""
    spans: dict[int, str] = {}
    dimension = sheet.dimension
    if not dimension.is_valid():
        return spans
    columns_by_row: dict[int, list[int]] = {}
    for row, column in sheet.cells:
        if dimension.first_column <= column <= dimension.last_column:
            columns_by_row.setdefault(row, []).append(column)

    span_min = MAX_COLUMN + 1
    span_max = -1
    for row in range(dimension.first_row, dimension.last_row + 1):
        columns = columns_by_row.get(row)
        if columns:
            span_min = min(span_min, min(columns))
            span_max = max(span_max, max(columns))
        if row % 16 == 0 or row == dimension.last_row:
            if span_max != -1:
                spans[(row - 1) // 16] = f"{span_min}:{span_max}"
                span_min = MAX_COLUMN + 1
                span_max = -1
    return spans


def _formula_element(parent: ET.Element, formula: CellFormula) -> None:
    element = ET.SubElement(parent, "f")
    type_name = _FORMULA_TYPE_NAMES.get(formula.type)
    if type_name is not None:
        element.set("t", type_name)
    if formula.type in (FormulaType.ARRAY, FormulaType.SHARED, FormulaType.DATA_TABLE):
        if formula.reference.is_valid():
            element.set("ref", formula.reference.to_string())
    if formula.type is FormulaType.SHARED:
        element.set("si", str(formula.shared_index))
    if formula.calculate:
        element.set("ca", "1")
    if formula.text:
        element.text = formula.text


def _value_element(parent: ET.Element, text: str) -> None:
    ET.SubElement(parent, "v").text = text


def _cell_element(sheet: Worksheet, parent: ET.Element, row: int, column: int, cell: Cell) -> None:
    element = ET.SubElement(parent, "c")
    element.set("r", f"{column_to_letters(column)}{row}")

    index = _cell_style_index(cell)
    if index < 0:
        row_info = sheet.layout.rows.get(row)
        if row_info is not None:
            index = _style_index(row_info.style)
    if index < 0:
        column_info = sheet.layout.column_lookup.get(column)
        if column_info is not None:
            index = _style_index(column_info.style)
    if index >= 0:
        element.set("s", str(index))

    kind = cell.type
    if kind is CellType.SHARED_STRING:
        text = _plain(cell.value)
        if text not in sheet.shared_strings:
            sheet.shared_strings.append(text)
        element.set("t", "s")
        _value_element(element, str(sheet.shared_strings.index(text)))
    elif kind is CellType.INLINE_STRING:
        element.set("t", "inlineStr")
        inline = ET.SubElement(element, "is")
        text_element = ET.SubElement(inline, "t")
        text = _plain(cell.value)
        if _space_preserve_needed(text):
            text_element.set("xml:space", "preserve")
        text_element.text = text
    elif kind is CellType.NUMBER:
        element.set("t", "n")
        if cell.formula is not None:
            _formula_element(element, cell.formula)
        if cell.value is not None:
            _value_element(element, _number15(cell.value))
    elif kind is CellType.STRING:
        element.set("t", "str")
        if cell.formula is not None:
            _formula_element(element, cell.formula)
        _value_element(element, _plain(cell.value))
    elif kind is CellType.BOOLEAN:
        element.set("t", "b")
        if cell.formula is not None:
            _formula_element(element, cell.formula)
        _value_element(element, "1" if cell.value else "0")
    elif kind is CellType.DATE:
        element.set("t", "n")
        _value_element(element, _plain(cell.value))
    elif kind is CellType.ERROR:
        element.set("t", "e")
        _value_element(element, _plain(cell.value))
    else:
        if cell.formula is not None:
            _formula_element(element, cell.formula)
        if cell.value is not None:
            _value_element(element, _number15(cell.value))


def _sheet_data(sheet: Worksheet, parent: ET.Element) -> None:
    spans = calculate_spans(sheet)
    dimension = sheet.dimension
    columns_by_row: dict[int, list[int]] = {}
    for row, column in sheet.cells:
        columns_by_row.setdefault(row, []).append(column)

    for row in range(dimension.first_row, dimension.last_row + 1):
        columns = columns_by_row.get(row)
        row_info = sheet.layout.rows.get(row)
        if columns is None and row_info is None:
            continue
        element = ET.SubElement(parent, "row")
        element.set("r", str(row))
        span = spans.get((row - 1) // 16)
        if span:
            element.set("spans", span)
        if row_info is not None:
            index = _style_index(row_info.style)
            if index >= 0:
                element.set("s", str(index))
                element.set("customFormat", "1")
            if row_info.custom_height:
                element.set("ht", _number6(row_info.height))
                element.set("customHeight", "1")
            else:
                element.set("customHeight", "0")
            if row_info.hidden:
                element.set("hidden", "1")
            if row_info.outline_level > 0:
                element.set("outlineLevel", str(row_info.outline_level))
            if row_info.collapsed:
                element.set("collapsed", "1")
        if columns:
            for column in sorted(columns):
                if dimension.first_column <= column <= dimension.last_column:
                    _cell_element(sheet, element, row, column, sheet.cells[(row, column)])


def _columns(sheet: Worksheet, root: ET.Element) -> None:
    if not sheet.layout.columns:
        return
    cols = ET.SubElement(root, "cols")
    for key in sorted(sheet.layout.columns):
        info = sheet.layout.columns[key]
        col = ET.SubElement(cols, "col")
        col.set("min", str(info.first_column))
        col.set("max", str(info.last_column))
        if info.width:
            col.set("width", _number15(info.width))
        index = _style_index(info.style)
        if index >= 0:
            col.set("style", str(index))
        if info.hidden:
            col.set("hidden", "1")
        if info.width:
            col.set("customWidth", "1")
        if info.outline_level:
            col.set("outlineLevel", str(info.outline_level))
        if info.collapsed:
            col.set("collapsed", "1")


def _page_settings(sheet: Worksheet, root: ET.Element) -> None:
    margins = sheet.page_margins
    if margins.is_complete():
        element = ET.SubElement(root, "pageMargins")
        element.set("left", margins.left)
        element.set("right", margins.right)
        element.set("top", margins.top)
        element.set("bottom", margins.bottom)
        element.set("header", margins.header)
        element.set("footer", margins.footer)

    setup = sheet.page_setup
    if setup.rid:
        element = ET.SubElement(root, "pageSetup")
        element.set("r:id", setup.rid)
        for attr, value in (
            ("verticalDpi", setup.vertical_dpi),
            ("horizontalDpi", setup.horizontal_dpi),
            ("useFirstPageNumber", setup.use_first_page_number),
            ("firstPageNumber", setup.first_page_number),
            ("scale", setup.scale),
            ("paperSize", setup.paper_size),
            ("orientation", setup.orientation),
            ("copies", setup.copies),
        ):
            if value:
                element.set(attr, value)

    header_footer = sheet.header_footer
    if header_footer.odd_header is not None or header_footer.odd_footer is not None:
        element = ET.SubElement(root, "headerFooter")
        if header_footer.align_with_margins:
            element.set("alignWithMargins", header_footer.align_with_margins)
        if header_footer.odd_header is not None:
            ET.SubElement(element, "oddHeader").text = header_footer.odd_header
        if header_footer.odd_footer is not None:
            ET.SubElement(element, "oddFooter").text = header_footer.odd_footer


def _hyperlinks(sheet: Worksheet, root: ET.Element) -> None:
    if not sheet.hyperlinks:
        return
    links = ET.SubElement(root, "hyperlinks")
    for row, column in sorted(sheet.hyperlinks):
        link = sheet.hyperlinks[(row, column)]
        element = ET.SubElement(links, "hyperlink")
        element.set("ref", f"{column_to_letters(column)}{row}")
        if link.link_type is LinkType.EXTERNAL:
            relationship = sheet.relationships.add_worksheet_relationship(
                "/hyperlink", link.target, "External"
            )
            element.set("r:id", relationship.id)
        if link.location:
            element.set("location", link.location)
        if link.display:
            element.set("display", link.display)
        if link.tooltip:
            element.set("tooltip", link.tooltip)


def save_worksheet(sheet: Worksheet) -> bytes:
    """Return the worksheet part as UTF-8 XML.

    The sheet's relationships are rebuilt along the way; shared strings a
    cell needs are added to the sheet's shared-string list.
    """
    sheet.relationships.clear()

    root = ET.Element("worksheet")
    root.set("xmlns", MAIN_NAMESPACE)
    root.set("xmlns:r", RELATIONSHIP_NAMESPACE)

    ET.SubElement(root, "dimension").set("ref", dimension_string(sheet.dimension))

    views = ET.SubElement(root, "sheetViews")
    view = ET.SubElement(views, "sheetView")
    for attr, value in sheet.view.xml_attributes().items():
        view.set(attr, value)

    format_pr = ET.SubElement(root, "sheetFormatPr")
    for attr, value in sheet.format_props.xml_attributes().items():
        format_pr.set(attr, value)

    _columns(sheet, root)

    data = ET.SubElement(root, "sheetData")
    if sheet.dimension.is_valid():
        _sheet_data(sheet, data)

    if sheet.merges:
        merges = ET.SubElement(root, "mergeCells")
        merges.set("count", str(len(sheet.merges)))
        for cell_range in sheet.merges:
            ET.SubElement(merges, "mergeCell").set("ref", cell_range.to_string())

    _page_settings(sheet, root)
    _hyperlinks(sheet, root)

    body = ET.tostring(root, encoding="unicode")
    return (_XML_DECLARATION + body).encode("utf-8")