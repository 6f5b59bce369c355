"""Loading a worksheet from its SpreadsheetML part.

Data validations, conditional formatting, drawings and extension lists are
skipped; everything else the worksheet keeps is read back.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from collections.abc import Callable, Mapping

from reportsheet.cell import Cell, CellFormula, CellType, FormulaType
from reportsheet.cellrange import CellRange
from reportsheet.hyperlinks import Hyperlink, LinkType
from reportsheet.layout import ColumnInfo, RowInfo
from reportsheet.relationships import Relationships
from reportsheet.sheetview import SheetFormatProps, SheetView
from reportsheet.worksheet import Worksheet

logger = logging.getLogger(__name__)

RELATIONSHIP_NAMESPACE = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
_RID_KEYS = (f"{{{RELATIONSHIP_NAMESPACE}}}id", "r:id")

_ROW_INFO_ATTRS = ("customFormat", "customHeight", "hidden", "outlineLevel", "collapsed")

_CELL_TYPES = {
    "s": CellType.SHARED_STRING,
    "inlineStr": CellType.INLINE_STRING,
    "str": CellType.STRING,
    "b": CellType.BOOLEAN,
    "e": CellType.ERROR,
    "d": CellType.DATE,
    "n": CellType.NUMBER,
}

_FORMULA_TYPES = {
    "shared": FormulaType.SHARED,
    "array": FormulaType.ARRAY,
    "dataTable": FormulaType.DATA_TABLE,
}


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _children(element: ET.Element, name: str):
    return (child for child in element if _local(child.tag) == name)


def _relationship_id(attrs: Mapping[str, str]) -> str | None:
    for key in _RID_KEYS:
        if key in attrs:
            return attrs[key]
    return None


def _parse_range(text: str) -> CellRange | None:
    try:
        return CellRange.from_string(text)
    except ValueError:
        return None


def _load_dimension(sheet: Worksheet, element: ET.Element, rels: Relationships) -> None:
    parsed = _parse_range(element.get("ref", ""))
    sheet.dimension = parsed if parsed is not None else CellRange()


def _load_sheet_views(sheet: Worksheet, element: ET.Element, rels: Relationships) -> None:
    for view in _children(element, "sheetView"):
        sheet.view = SheetView.from_attributes(view.attrib)


def _load_format_props(sheet: Worksheet, element: ET.Element, rels: Relationships) -> None:
    sheet.layout.format_props = SheetFormatProps.from_attributes(element.attrib)


def _load_columns(sheet: Worksheet, element: ET.Element, rels: Relationships) -> None:
    layout = sheet.layout
    for col in _children(element, "col"):
        attrs = col.attrib
        first = int(attrs.get("min", "0"))
        last = int(attrs.get("max", "0"))
        info = ColumnInfo(first, last)
        if "customWidth" in attrs:
            info.custom_width = attrs["customWidth"] == "1"
        if "width" in attrs:
            info.width = float(attrs["width"])
            info.is_set_width = True
        info.hidden = attrs.get("hidden") == "1"
        info.collapsed = attrs.get("collapsed") == "1"
        if "style" in attrs:
            info.style = int(attrs["style"])
        if "outlineLevel" in attrs:
            info.outline_level = int(attrs["outlineLevel"])
        layout.columns[first] = info
        for column in range(first, last + 1):
            layout.column_lookup[column] = info


def _load_formula(element: ET.Element) -> CellFormula:
    attrs = element.attrib
    formula = CellFormula(
        element.text or "",
        _FORMULA_TYPES.get(attrs.get("t", ""), FormulaType.NORMAL),
    )
    if "ref" in attrs:
        parsed = _parse_range(attrs["ref"])
        if parsed is not None:
            formula.reference = parsed
    if "si" in attrs:
        formula.shared_index = int(attrs["si"])
    formula.calculate = attrs.get("ca") == "1"
    return formula


def _load_row_info(sheet: Worksheet, attrs: Mapping[str, str]) -> None:
    if not any(key in attrs for key in _ROW_INFO_ATTRS):
        return
    info = RowInfo()
    if "customFormat" in attrs and "s" in attrs:
        info.style = int(attrs["s"])
    if "customHeight" in attrs:
        info.custom_height = attrs["customHeight"] == "1"
        if "ht" in attrs:
            info.height = float(attrs["ht"])
    info.hidden = attrs.get("hidden") == "1"
    info.collapsed = attrs.get("collapsed") == "1"
    if "outlineLevel" in attrs:
        info.outline_level = int(attrs["outlineLevel"])
    if "r" in attrs:
        sheet.layout.rows[int(attrs["r"])] = info


def _cell_value(sheet: Worksheet, cell_type: CellType, text: str):
    if cell_type is CellType.SHARED_STRING:
        index = int(text)
        if not 0 <= index < len(sheet.shared_strings):
            raise ValueError(f"shared string index {index} out of range")
        return sheet.shared_strings[index]
    if cell_type in (CellType.NUMBER, CellType.DATE):
        return float(text)
    if cell_type is CellType.BOOLEAN:
        return bool(int(text))
    return text


def _load_cell(sheet: Worksheet, element: ET.Element, position: tuple[int, int]) -> None:
    attrs = element.attrib
    style_index = int(attrs["s"]) if "s" in attrs else -1
    cell_type = _CELL_TYPES.get(attrs.get("t", ""), CellType.CUSTOM)
    cell = Cell(
        None,
        cell_type,
        style_index if style_index >= 0 else None,
        style_index,
    )
    for child in element:
        name = _local(child.tag)
        if name == "f":
            formula = _load_formula(child)
            cell.formula = formula
            if formula.type is FormulaType.SHARED and formula.text:
                sheet.shared_formulas[formula.shared_index] = formula
        elif name == "v":
            cell.value = _cell_value(sheet, cell_type, child.text or "")
        elif name == "is":
            for text in child.iter():
                if _local(text.tag) == "t":
                    cell.value = text.text or ""
    sheet.cells[position] = cell


def _load_sheet_data(sheet: Worksheet, element: ET.Element, rels: Relationships) -> None:
    row_num = 0
    col_num = 0
    for row in _children(element, "row"):
        attrs = row.attrib
        _load_row_info(sheet, attrs)
        row_num = int(attrs["r"]) if "r" in attrs else row_num + 1
        col_num = 0
        for cell in _children(row, "c"):
            reference = cell.get("r", "")
            if reference:
                parsed = CellRange.from_string(reference)
                position = parsed.top_left()
            else:
                col_num += 1
                position = (row_num, col_num)
            _load_cell(sheet, cell, position)

    dimension = sheet.dimension
    if dimension.last_row < row_num:
        dimension = CellRange(
            dimension.first_row, dimension.first_column, row_num, dimension.last_column
        )
    if dimension.last_column < col_num:
        dimension = CellRange(
            dimension.first_row, dimension.first_column, dimension.last_row, col_num
        )
    sheet.dimension = dimension


def _load_merge_cells(sheet: Worksheet, element: ET.Element, rels: Relationships) -> None:
    count_text = element.get("count")
    if count_text is None:
        logger.warning("mergeCells element has no count")
    before = len(sheet.merges)
    for merge in _children(element, "mergeCell"):
        sheet.merges.append(CellRange.from_string(merge.get("ref", "")))
    if count_text is not None and len(sheet.merges) - before != int(count_text):
        logger.warning("merge cell count does not match the mergeCells count")


def _load_hyperlinks(sheet: Worksheet, element: ET.Element, rels: Relationships) -> None:
    for link in _children(element, "hyperlink"):
        attrs = link.attrib
        parsed = _parse_range(attrs.get("ref", ""))
        if parsed is None or not parsed.is_valid():
            continue
        hyperlink = Hyperlink(
            display=attrs.get("display", ""),
            tooltip=attrs.get("tooltip", ""),
            location=attrs.get("location", ""),
        )
        rel_id = _relationship_id(attrs)
        if rel_id is not None:
            hyperlink.link_type = LinkType.EXTERNAL
            relationship = rels.get_by_id(rel_id)
            hyperlink.target = relationship.target if relationship is not None else ""
        else:
            hyperlink.link_type = LinkType.INTERNAL
        sheet.hyperlinks[parsed.top_left()] = hyperlink


def _load_page_setup(sheet: Worksheet, element: ET.Element, rels: Relationships) -> None:
    attrs = element.attrib
    setup = sheet.page_setup
    setup.paper_size = attrs.get("paperSize", "").strip()
    setup.scale = attrs.get("scale", "").strip()
    setup.first_page_number = attrs.get("firstPageNumber", "").strip()
    setup.orientation = attrs.get("orientation", "").strip()
    setup.use_first_page_number = attrs.get("useFirstPageNumber", "").strip()
    setup.horizontal_dpi = attrs.get("horizontalDpi", "").strip()
    setup.vertical_dpi = attrs.get("verticalDpi", "").strip()
    setup.rid = (_relationship_id(attrs) or "").strip()
    setup.copies = attrs.get("copies", "").strip()


def _load_page_margins(sheet: Worksheet, element: ET.Element, rels: Relationships) -> None:
    attrs = element.attrib
    margins = sheet.page_margins
    margins.footer = attrs.get("footer", "").strip()
    margins.header = attrs.get("header", "").strip()
    margins.bottom = attrs.get("bottom", "").strip()
    margins.top = attrs.get("top", "").strip()
    margins.right = attrs.get("right", "").strip()
    margins.left = attrs.get("left", "").strip()


def _load_header_footer(sheet: Worksheet, element: ET.Element, rels: Relationships) -> None:
    for child in element:
        name = _local(child.tag)
        if name == "oddHeader":
            sheet.header_footer.odd_header = child.text or ""
        elif name == "oddFooter":
            sheet.header_footer.odd_footer = child.text or ""


_Handler = Callable[[Worksheet, ET.Element, Relationships], None]

_HANDLERS: dict[str, _Handler] = {
    "dimension": _load_dimension,
    "sheetViews": _load_sheet_views,
    "sheetFormatPr": _load_format_props,
    "cols": _load_columns,
    "sheetData": _load_sheet_data,
    "mergeCells": _load_merge_cells,
    "hyperlinks": _load_hyperlinks,
    "pageSetup": _load_page_setup,
    "pageMargins": _load_page_margins,
    "headerFooter": _load_header_footer,
}


def load_worksheet(
    sheet: Worksheet, data: bytes | str, relationships: Relationships | None = None
) -> Worksheet:
    """Fill a sheet from worksheet XML and return it.

    Shared-string cells are resolved against ``sheet.shared_strings``;
    hyperlink targets come from ``relationships`` (the sheet's own by
    default). Raises ValueError for malformed XML or a bad string index.
    """
    rels = relationships if relationships is not None else sheet.relationships
    try:
        root = ET.fromstring(data)
    except ET.ParseError as exc:
        raise ValueError(f"invalid worksheet document: {exc}") from exc
    for element in root:
        handler = _HANDLERS.get(_local(element.tag))
        if handler is not None:
            handler(sheet, element, rels)
    sheet.validate_dimension()
    return sheet