"""Worksheet view settings, format properties, page settings and dimension helpers."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace

from reportsheet.cellrange import MAX_COLUMN, MAX_ROW, CellRange

# (field name, XML attribute, shown-by-default)
_VIEW_FLAGS = (
    ("window_protection", "windowProtection", False),
    ("show_formulas", "showFormulas", False),
    ("show_grid_lines", "showGridLines", True),
    ("show_row_col_headers", "showRowColHeaders", True),
    ("show_zeros", "showZeros", True),
    ("right_to_left", "rightToLeft", False),
    ("tab_selected", "tabSelected", False),
    ("show_ruler", "showRuler", True),
    ("show_outline_symbols", "showOutlineSymbols", True),
    ("show_white_space", "showWhiteSpace", True),
)


def _number(value: float) -> str:
    return format(value, ".6g")


def _xsd_boolean(value: bool) -> str:
    return "1" if value else "0"


@dataclass
class SheetView:
    """Display options of a worksheet's single sheet view."""

    window_protection: bool = False
    show_formulas: bool = False
    show_grid_lines: bool = True
    show_row_col_headers: bool = True
    show_zeros: bool = True
    right_to_left: bool = False
    tab_selected: bool = False
    show_ruler: bool = False
    show_outline_symbols: bool = True
    show_white_space: bool = True

    def xml_attributes(self) -> dict[str, str]:
        """Return the sheetView attributes that differ from the XML defaults."""
        attrs: dict[str, str] = {}
        for name, attr, on_by_default in _VIEW_FLAGS:
            value = getattr(self, name)
            if on_by_default and not value:
                attrs[attr] = "0"
            elif not on_by_default and value:
                attrs[attr] = "1"
        attrs["workbookViewId"] = "0"
        return attrs

    @classmethod
    def from_attributes(cls, attrs: Mapping[str, str]) -> SheetView:
        values = {
            name: (attrs.get(attr) != "0") if on_by_default else (attrs.get(attr) == "1")
            for name, attr, on_by_default in _VIEW_FLAGS
        }
        return cls(**values)


@dataclass
class SheetFormatProps:
    """Sheet-wide default row and column sizing."""

    base_col_width: int = 8
    custom_height: bool = False
    default_col_width: float = 8.43
    default_row_height: float = 15.0
    outline_level_col: int = 0
    outline_level_row: int = 0
    thick_bottom: bool = False
    thick_top: bool = False
    zero_height: bool = False

    def xml_attributes(self) -> dict[str, str]:
        return {
            "defaultRowHeight": _number(self.default_row_height),
            "customHeight": _xsd_boolean(self.custom_height),
            "zeroHeight": _xsd_boolean(self.zero_height),
            "outlineLevelRow": str(self.outline_level_row),
            "outlineLevelCol": str(self.outline_level_col),
        }

    @classmethod
    def from_attributes(cls, attrs: Mapping[str, str]) -> SheetFormatProps:
        props = cls()
        width_set = False
        for key, value in attrs.items():
            if key == "baseColWidth":
                props.base_col_width = int(value)
            elif key == "customHeight":
                props.custom_height = value == "1"
            elif key == "defaultColWidth":
                props.default_col_width = float(value)
                width_set = True
            elif key == "defaultRowHeight":
                props.default_row_height = float(value)
            elif key == "outlineLevelCol":
                props.outline_level_col = int(value)
            elif key == "outlineLevelRow":
                props.outline_level_row = int(value)
            elif key == "thickBottom":
                props.thick_bottom = value == "1"
            elif key == "thickTop":
                props.thick_top = value == "1"
            elif key == "zeroHeight":
                props.zero_height = value == "1"
        if not width_set:
            props.default_col_width = calculate_col_width(props.base_col_width)
        return props


@dataclass
class PageSetup:
    """Page setup attributes kept as their XML text."""

    paper_size: str = ""
    scale: str = ""
    first_page_number: str = ""
    orientation: str = ""
    use_first_page_number: str = ""
    horizontal_dpi: str = ""
    vertical_dpi: str = ""
    rid: str = ""
    copies: str = ""


@dataclass
class PageMargins:
    """Page margins kept as their XML text."""

    left: str = ""
    right: str = ""
    top: str = ""
    bottom: str = ""
    header: str = ""
    footer: str = ""

    def is_complete(self) -> bool:
        """True when every margin is set; only then are margins written."""
        return all((self.left, self.right, self.top, self.bottom, self.header, self.footer))


@dataclass
class HeaderFooter:
    odd_header: str | None = None
    odd_footer: str | None = None
    align_with_margins: str = ""


def extend_dimension(
    dimension: CellRange,
    row: int,
    column: int,
    ignore_row: bool = False,
    ignore_column: bool = False,
) -> CellRange:
    """Check a cell position and return the dimension grown to include it.

    Raises ValueError when the position lies outside the sheet.
    """
    if not (1 <= row <= MAX_ROW and 1 <= column <= MAX_COLUMN):
        raise ValueError(f"cell ({row}, {column}) is outside the worksheet")
    result = dimension
    if not ignore_row:
        if row < result.first_row or result.first_row == -1:
            result = replace(result, first_row=row)
        if row > result.last_row:
            result = replace(result, last_row=row)
    if not ignore_column:
        if column < result.first_column or result.first_column == -1:
            result = replace(result, first_column=column)
        if column > result.last_column:
            result = replace(result, last_column=column)
    return result


def dimension_string(dimension: CellRange) -> str:
    """Return the text of the dimension element; "A1" for an empty sheet."""
    return dimension.to_string() if dimension.is_valid() else "A1"


def calculate_col_width(characters: int) -> float:
    """Default column width derived from the base width in characters."""
    return float(characters)