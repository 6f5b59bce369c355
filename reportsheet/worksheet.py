"""A worksheet: cell storage, typed writes and reads, merges and sheet settings."""

from __future__ import annotations

import datetime as _dt
import re
from collections.abc import Mapping
from dataclasses import replace
from enum import Enum, auto
from typing import Any

from reportsheet.cell import Cell, CellFormula, CellType, FormulaType
from reportsheet.cellrange import CellRange, column_to_letters, letters_to_column
from reportsheet.hyperlinks import (
    STRING_MAX,
    Hyperlink,
    LinkType,
    display_text,
    looks_like_url,
    split_fragment,
)
from reportsheet.layout import SheetLayout
from reportsheet.relationships import Relationships
from reportsheet.sheetview import (
    HeaderFooter,
    PageMargins,
    PageSetup,
    SheetView,
    extend_dimension,
)

_SECONDS_PER_DAY = 86400.0
_EPOCH_1900 = _dt.datetime(1899, 12, 31)
_EPOCH_1904 = _dt.datetime(1904, 1, 1)

_HYPERLINK_STYLE = {
    "vertical_alignment": "center",
    "font_color": "blue",
    "font_underline": "single",
}

_QUOTED = re.compile(r'"[^"]*"|\[[^\]]*\]')
_DATE_TOKENS = re.compile(r"[dmyhs]")
_REFERENCE = re.compile(r"(?<![A-Za-z0-9_])(\$?)([A-Z]{1,3})(\$?)(\d+)(?![A-Za-z0-9_(])")


class SheetType(Enum):
    WORKSHEET = auto()
    CHARTSHEET = auto()
    DIALOGSHEET = auto()
    MACROSHEET = auto()


class SheetState(Enum):
    VISIBLE = auto()
    HIDDEN = auto()
    VERY_HIDDEN = auto()


def _is_datetime_format(style: Any) -> bool:
    if not isinstance(style, Mapping):
        return False
    number_format = style.get("number_format")
    if not isinstance(number_format, str) or not number_format:
        return False
    bare = _QUOTED.sub("", number_format).lower()
    return _DATE_TOKENS.search(bare) is not None


def _with_date_format(style: Any, number_format: str) -> Any:
    if style is not None and _is_datetime_format(style):
        return style
    base = dict(style) if isinstance(style, Mapping) else {}
    base["number_format"] = number_format
    return base


def _datetime_to_number(value: _dt.datetime, date1904: bool) -> float:
    epoch = _EPOCH_1904 if date1904 else _EPOCH_1900
    days = (value.replace(tzinfo=None) - epoch).total_seconds() / _SECONDS_PER_DAY
    if not date1904 and days > 59:
        days += 1
    return days


def _time_to_number(value: _dt.time) -> float:
    seconds = value.hour * 3600 + value.minute * 60 + value.second + value.microsecond / 1e6
    return seconds / _SECONDS_PER_DAY


def _number_to_datetime(number: float, date1904: bool) -> _dt.datetime | _dt.date | _dt.time:
    if number < 1:
        moment = _dt.datetime(2000, 1, 1) + _dt.timedelta(days=number)
        return moment.time()
    epoch = _EPOCH_1904 if date1904 else _EPOCH_1900
    days = number
    if not date1904 and days > 60:
        days -= 1
    moment = epoch + _dt.timedelta(days=days)
    moment = moment.replace(microsecond=round(moment.microsecond / 1000) * 1000 % 1000000)
    if float(number).is_integer():
        return moment.date()
    return moment


def _shift_shared_formula(text: str, origin: tuple[int, int], target: tuple[int, int]) -> str:
    row_offset = target[0] - origin[0]
    column_offset = target[1] - origin[1]

    def shift(match: re.Match[str]) -> str:
        col_abs, letters, row_abs, digits = match.groups()
        column = letters_to_column(letters)
        row = int(digits)
        if not col_abs:
            column += column_offset
        if not row_abs:
            row += row_offset
        if column < 1 or row < 1:
            return "#REF!"
        return f"{col_abs}{column_to_letters(column)}{row_abs}{row}"

    return _REFERENCE.sub(shift, text)


class Worksheet:
    """One worksheet of a workbook.

    Cells live in ``cells`` keyed by (row, column), both 1-based. Every write
    raises ValueError when the position lies outside the sheet.
    """

    def __init__(
        self,
        name: str = "Sheet1",
        sheet_id: int = 1,
        *,
        sheet_type: SheetType = SheetType.WORKSHEET,
        shared_strings: list[str] | None = None,
        date1904: bool = False,
        strings_to_numbers: bool = False,
        strings_to_hyperlinks: bool = True,
        default_date_format: str = "yyyy-mm-dd",
    ) -> None:
        self.name = name
        self.sheet_id = sheet_id
        self.sheet_type = sheet_type
        self.state = SheetState.VISIBLE
        self.file_path = ""
        self.relationships = Relationships()
        self.shared_strings = shared_strings if shared_strings is not None else []
        self.date1904 = date1904
        self.strings_to_numbers = strings_to_numbers
        self.strings_to_hyperlinks = strings_to_hyperlinks
        self.default_date_format = default_date_format

        self.layout = SheetLayout()
        self.view = SheetView()
        self.page_setup = PageSetup()
        self.page_margins = PageMargins()
        self.header_footer = HeaderFooter()

        self.cells: dict[tuple[int, int], Cell] = {}
        self.hyperlinks: dict[tuple[int, int], Hyperlink] = {}
        self.shared_formulas: dict[int, CellFormula] = {}
        self.merges: list[CellRange] = []
        self.data_validations: list[Any] = []
        self.conditional_formattings: list[Any] = []

    # -- dimension -------------------------------------------------------

    @property
    def dimension(self) -> CellRange:
        """The range that contains cell data."""
        return self.layout.dimension

    @dimension.setter
    def dimension(self, value: CellRange) -> None:
        self.layout.dimension = value

    @property
    def format_props(self):
        return self.layout.format_props

    def _check(self, row: int, column: int) -> None:
        self.dimension = extend_dimension(self.dimension, row, column)

    def _style_for(self, row: int, column: int, style: Any) -> Any:
        if style is not None:
            return style
        existing = self.cells.get((row, column))
        return existing.style if existing is not None else None

    def _add_shared_string(self, text: str) -> None:
        if text not in self.shared_strings:
            self.shared_strings.append(text)

    # -- writing ---------------------------------------------------------

    def write(self, row: int, column: int, value: Any, style: Any = None) -> None:
        """Write a value, choosing the cell kind from its Python type."""
        self._check(row, column)
        if value is None:
            self.write_blank(row, column, style)
        elif isinstance(value, str):
            if value.startswith("="):
                self.write_formula(row, column, CellFormula(value), style)
            elif self.strings_to_hyperlinks and looks_like_url(value):
                self.write_hyperlink(row, column, value)
            elif self.strings_to_numbers and self._parses_as_number(value):
                self.write_number(row, column, float(value), style)
            else:
                self.write_string(row, column, value, style)
        elif isinstance(value, bool):
            self.write_bool(row, column, value, style)
        elif isinstance(value, (int, float)):
            self.write_number(row, column, value, style)
        elif isinstance(value, _dt.datetime):
            self.write_datetime(row, column, value, style)
        elif isinstance(value, _dt.date):
            self.write_date(row, column, value, style)
        elif isinstance(value, _dt.time):
            self.write_time(row, column, value, style)
        else:
            raise TypeError(f"cannot write a value of type {type(value).__name__}")

    @staticmethod
    def _parses_as_number(text: str) -> bool:
        try:
            float(text)
        except ValueError:
            return False
        return True

    def write_string(self, row: int, column: int, value: str, style: Any = None) -> None:
        self._check(row, column)
        self._add_shared_string(value)
        fmt = self._style_for(row, column, style)
        self.cells[(row, column)] = Cell(value, CellType.SHARED_STRING, fmt)

    def write_inline_string(self, row: int, column: int, value: str, style: Any = None) -> None:
        self._check(row, column)
        fmt = self._style_for(row, column, style)
        self.cells[(row, column)] = Cell(value[:STRING_MAX], CellType.INLINE_STRING, fmt)

    def write_number(self, row: int, column: int, value: float, style: Any = None) -> None:
        self._check(row, column)
        fmt = self._style_for(row, column, style)
        self.cells[(row, column)] = Cell(float(value), CellType.NUMBER, fmt)

    def write_formula(
        self,
        row: int,
        column: int,
        formula: CellFormula | str,
        style: Any = None,
        result: float = 0.0,
    ) -> None:
        """Write a formula; a shared formula also marks the other cells of its range."""
        self._check(row, column)
        fmt = self._style_for(row, column, style)
        if isinstance(formula, str):
            formula = CellFormula(formula)
        formula = replace(formula, calculate=True)
        if formula.type is FormulaType.SHARED:
            index = 0
            while index in self.shared_formulas:
                index += 1
            formula.shared_index = index
            self.shared_formulas[index] = formula

        self.cells[(row, column)] = Cell(result, CellType.NUMBER, fmt, formula=formula)

        if formula.type is FormulaType.SHARED:
            area = formula.reference
            for r in range(area.first_row, area.last_row + 1):
                for c in range(area.first_column, area.last_column + 1):
                    if (r, c) == (row, column):
                        continue
                    member = CellFormula("", FormulaType.SHARED, shared_index=formula.shared_index)
                    existing = self.cells.get((r, c))
                    if existing is not None:
                        existing.formula = member
                    else:
                        self.cells[(r, c)] = Cell(result, CellType.NUMBER, fmt, formula=member)

    def write_blank(self, row: int, column: int, style: Any = None) -> None:
        self._check(row, column)
        fmt = self._style_for(row, column, style)
        self.cells[(row, column)] = Cell(None, CellType.NUMBER, fmt)

    def write_bool(self, row: int, column: int, value: bool, style: Any = None) -> None:
        self._check(row, column)
        fmt = self._style_for(row, column, style)
        self.cells[(row, column)] = Cell(bool(value), CellType.BOOLEAN, fmt)

    def write_datetime(
        self, row: int, column: int, value: _dt.datetime, style: Any = None
    ) -> None:
        self._check(row, column)
        fmt = _with_date_format(self._style_for(row, column, style), self.default_date_format)
        number = _datetime_to_number(value, self.date1904)
        self.cells[(row, column)] = Cell(number, CellType.NUMBER, fmt)

    def write_date(self, row: int, column: int, value: _dt.date, style: Any = None) -> None:
        self._check(row, column)
        fmt = _with_date_format(self._style_for(row, column, style), self.default_date_format)
        moment = _dt.datetime(value.year, value.month, value.day)
        number = _datetime_to_number(moment, self.date1904)
        self.cells[(row, column)] = Cell(number, CellType.NUMBER, fmt)

    def write_time(self, row: int, column: int, value: _dt.time, style: Any = None) -> None:
        self._check(row, column)
        fmt = _with_date_format(self._style_for(row, column, style), "hh:mm:ss")
        self.cells[(row, column)] = Cell(_time_to_number(value), CellType.NUMBER, fmt)

    def write_hyperlink(
        self,
        row: int,
        column: int,
        url: str,
        style: Any = None,
        display: str = "",
        tip: str = "",
    ) -> None:
        """Write a link cell; the link itself is kept in ``hyperlinks``."""
        self._check(row, column)
        shown = display_text(url, display)
        target, location = split_fragment(url) if "#" in url else (url, "")
        fmt = self._style_for(row, column, style)
        if fmt is None:
            fmt = dict(_HYPERLINK_STYLE)
        self._add_shared_string(shown)
        self.cells[(row, column)] = Cell(shown, CellType.SHARED_STRING, fmt)
        self.hyperlinks[(row, column)] = Hyperlink(
            LinkType.EXTERNAL, target, location, "", tip
        )

    # -- reading ---------------------------------------------------------

    def cell_at(self, row: int, column: int) -> Cell | None:
        return self.cells.get((row, column))

    def read(self, row: int, column: int) -> Any:
        """Return the cell's content: formula text, date/time, or plain value."""
        cell = self.cells.get((row, column))
        if cell is None:
            return None
        formula = cell.formula
        if formula is not None:
            if formula.type is FormulaType.NORMAL:
                return "=" + formula.text
            if formula.type is FormulaType.SHARED:
                if formula.text:
                    return "=" + formula.text
                root = self.shared_formulas.get(formula.shared_index)
                if root is not None:
                    text = _shift_shared_formula(
                        root.text, root.reference.top_left(), (row, column)
                    )
                    return "=" + text
        if self._is_datetime(cell):
            return _number_to_datetime(float(cell.value), self.date1904)
        return cell.value

    @staticmethod
    def _is_datetime(cell: Cell) -> bool:
        if not isinstance(cell.value, (int, float)) or isinstance(cell.value, bool):
            return False
        if cell.type is CellType.DATE:
            return True
        return cell.type in (CellType.NUMBER, CellType.CUSTOM) and _is_datetime_format(
            cell.style
        )

    # -- merges ----------------------------------------------------------

    def merge_cells(self, cell_range: CellRange | str, style: Any = None) -> None:
        """Merge a range; every cell but the top-left one is cleared."""
        if isinstance(cell_range, str):
            cell_range = CellRange.from_string(cell_range)
        if cell_range.row_count() < 2 and cell_range.column_count() < 2:
            raise ValueError(f"range {cell_range} covers fewer than two cells")
        self._check(cell_range.first_row, cell_range.first_column)
        for row in range(cell_range.first_row, cell_range.last_row + 1):
            for column in range(cell_range.first_column, cell_range.last_column + 1):
                existing = self.cells.get((row, column))
                if (row, column) == cell_range.top_left() and existing is not None:
                    if style is not None:
                        existing.style = style
                else:
                    self.write_blank(row, column, style)
        self.merges.append(cell_range)

    def unmerge_cells(self, cell_range: CellRange | str) -> None:
        """Forget a merged range; ValueError when it was not merged."""
        if isinstance(cell_range, str):
            cell_range = CellRange.from_string(cell_range)
        try:
            self.merges.remove(cell_range)
        except ValueError:
            raise ValueError(f"range {cell_range} is not merged") from None

    def merged_cells(self) -> list[CellRange]:
        if self.sheet_type is SheetType.WORKSHEET:
            return list(self.merges)
        return []

    # -- whole-sheet operations -----------------------------------------

    def copy(self, name: str, sheet_id: int) -> Worksheet:
        """Return a new sheet with copies of this sheet's cells and merges."""
        sheet = Worksheet(
            name,
            sheet_id,
            sheet_type=self.sheet_type,
            shared_strings=self.shared_strings,
            date1904=self.date1904,
            strings_to_numbers=self.strings_to_numbers,
            strings_to_hyperlinks=self.strings_to_hyperlinks,
            default_date_format=self.default_date_format,
        )
        sheet.dimension = self.dimension
        for position, cell in self.cells.items():
            duplicate = cell.copy()
            if duplicate.type is CellType.SHARED_STRING:
                sheet._add_shared_string(duplicate.value)
            sheet.cells[position] = duplicate
        sheet.merges = list(self.merges)
        return sheet

    def full_cells(self) -> tuple[list[tuple[int, int, Cell]], int, int]:
        """Return (row, column, cell) triples in row order, the largest row and column.

        A sheet without cells, or one that is not a worksheet, gives -1 for both.
        """
        if self.sheet_type is not SheetType.WORKSHEET:
            return [], -1, -1
        locations = [(row, column, self.cells[(row, column)]) for row, column in sorted(self.cells)]
        max_row = max((row for row, _, _ in locations), default=-1)
        max_column = max((column for _, column, _ in locations), default=-1)
        return locations, max_row, max_column

    def validate_dimension(self) -> None:
        """Derive the dimension from the cells when it is missing."""
        if self.dimension.is_valid() or not self.cells:
            return
        rows = [row for row, _ in self.cells]
        columns = [column for _, column in self.cells]
        candidate = CellRange(min(rows), min(columns), max(rows), max(columns))
        if candidate.is_valid():
            self.dimension = candidate