"""Row and column sizing, visibility, styles and outline grouping of a worksheet."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from reportsheet.cellrange import MAX_ROW, CellRange
from reportsheet.sheetview import SheetFormatProps, extend_dimension

_MAX_DIGIT_WIDTH = 7.0
_PADDING = 5.0
_DEFAULT_COLUMN_PIXELS = 64


@dataclass
class ColumnInfo:
    """Settings shared by a run of adjacent columns."""

    first_column: int
    last_column: int
    width: float = 0.0
    style: Any = None
    hidden: bool = False
    outline_level: int = 0
    collapsed: bool = False
    custom_width: bool = False
    is_set_width: bool = False


@dataclass
class RowInfo:
    """Settings of one row."""

    height: float = 0.0
    style: Any = None
    hidden: bool = False
    custom_height: bool = False
    outline_level: int = 0
    collapsed: bool = False


class SheetLayout:
    """Column runs and row settings of one worksheet.

    ``columns`` maps the first column of each run to its ColumnInfo,
    ``column_lookup`` maps every covered column to its run and ``rows``
    maps row numbers to their RowInfo.
    """

    def __init__(
        self,
        format_props: SheetFormatProps | None = None,
        dimension: CellRange | None = None,
    ) -> None:
        self.format_props = format_props if format_props is not None else SheetFormatProps()
        self.dimension = dimension if dimension is not None else CellRange()
        self.columns: dict[int, ColumnInfo] = {}
        self.column_lookup: dict[int, ColumnInfo] = {}
        self.rows: dict[int, RowInfo] = {}

    # -- columns ---------------------------------------------------------

    def _register(self, info: ColumnInfo) -> None:
        self.columns[info.first_column] = info
        for column in range(info.first_column, info.last_column + 1):
            self.column_lookup[column] = info

    def _split(self, first: int, last: int) -> None:
        """Split existing runs so that first and last fall on run boundaries."""
        for key in sorted(self.columns):
            info = self.columns[key]
            if info.first_column < first <= info.last_column:
                tail = replace(info, first_column=first)
                info.last_column = first - 1
                self._register(tail)
                break
        for key in sorted(self.columns):
            info = self.columns[key]
            if info.first_column <= last < info.last_column:
                tail = replace(info, first_column=last + 1)
                info.last_column = last
                self._register(tail)
                break

    def _column_nodes(self, first: int, last: int) -> list[int]:
        self._split(first, last)
        nodes = [first]
        for column in range(first, last + 1):
            info = self.columns.get(column)
            if info is None:
                continue
            if nodes[-1] != column:
                nodes.append(column)
            following = info.last_column + 1
            if following <= last:
                nodes.append(following)
        return nodes

    def _check_column_range(self, first: int, last: int) -> None:
        if first > last:
            raise ValueError(f"invalid column range {first}..{last}")
        dimension = extend_dimension(self.dimension, 1, last, ignore_row=True)
        self.dimension = extend_dimension(dimension, 1, first, ignore_row=True)

    def column_infos(self, first: int, last: int) -> list[ColumnInfo]:
        """Return the runs exactly covering columns first..last, creating missing ones.

        Raises ValueError for an invalid column range.
        """
        self._check_column_range(first, last)
        nodes = self._column_nodes(first, last)
        infos = []
        for index, start in enumerate(nodes):
            info = self.columns.get(start)
            if info is None:
                end = last if index == len(nodes) - 1 else nodes[index + 1] - 1
                info = ColumnInfo(start, end)
                self._register(info)
            infos.append(info)
        return infos

    def set_column_width(self, first: int, last: int, width: float) -> None:
        for info in self.column_infos(first, last):
            info.width = width
            info.is_set_width = True

    def set_column_hidden(self, first: int, last: int, hidden: bool) -> None:
        for info in self.column_infos(first, last):
            info.hidden = hidden

    def set_column_style(self, first: int, last: int, style: Any) -> None:
        for info in self.column_infos(first, last):
            info.style = style

    def column_width(self, column: int) -> float:
        """Width of a column in characters; the sheet default when never set."""
        info = self.column_lookup.get(column)
        if info is not None and info.is_set_width:
            return info.width
        return self.format_props.default_col_width

    def is_column_hidden(self, column: int) -> bool:
        info = self.column_lookup.get(column)
        return info.hidden if info is not None else False

    def group_columns(self, first: int, last: int, collapsed: bool = True) -> None:
        """Raise the outline level of columns first..last, hiding them when collapsed."""
        if first > last:
            raise ValueError(f"invalid column range {first}..{last}")
        nodes = self._column_nodes(first, last)
        for index, start in enumerate(nodes):
            info = self.columns.get(start)
            if info is None:
                end = last if index == len(nodes) - 1 else nodes[index + 1] - 1
                info = ColumnInfo(start, end)
                self._register(info)
            info.outline_level += 1
            if collapsed:
                info.hidden = True
        if collapsed:
            marker = last + 1
            self._split(marker, marker)
            info = self.columns.get(marker)
            if info is None:
                info = ColumnInfo(marker, marker)
                self._register(info)
            info.collapsed = True

    # -- rows ------------------------------------------------------------

    def row_infos(self, first: int, last: int) -> list[RowInfo]:
        """Return the infos of the valid rows in first..last, creating missing ones."""
        min_column = max(1, self.dimension.first_column)
        infos = []
        for row in range(first, last + 1):
            try:
                self.dimension = extend_dimension(
                    self.dimension, row, min_column, ignore_column=True
                )
            except ValueError:
                continue
            infos.append(self.rows.setdefault(row, RowInfo()))
        return infos

    def _require_rows(self, first: int, last: int) -> list[RowInfo]:
        infos = self.row_infos(first, last)
        if not infos:
            raise ValueError(f"no valid rows in {first}..{last}")
        return infos

    def set_row_height(self, first: int, last: int, height: float) -> None:
        for info in self._require_rows(first, last):
            info.height = height
            info.custom_height = True

    def set_row_hidden(self, first: int, last: int, hidden: bool) -> None:
        for info in self._require_rows(first, last):
            info.hidden = hidden

    def set_row_style(self, first: int, last: int, style: Any) -> None:
        for info in self._require_rows(first, last):
            info.style = style

    def _row(self, row: int) -> RowInfo | None:
        if not 1 <= row <= MAX_ROW:
            return None
        return self.rows.get(row)

    def row_height(self, row: int) -> float:
        """Height of a row in points; the sheet default when never set."""
        info = self._row(row)
        if info is None or not info.custom_height:
            return self.format_props.default_row_height
        return info.height

    def is_row_hidden(self, row: int) -> bool:
        info = self._row(row)
        return info.hidden if info is not None else False

    def group_rows(self, first: int, last: int, collapsed: bool = True) -> None:
        """Raise the outline level of rows first..last, hiding them when collapsed."""
        for row in range(first, last + 1):
            info = self.rows.setdefault(row, RowInfo())
            info.outline_level += 1
            if collapsed:
                info.hidden = True
        if collapsed:
            self.rows.setdefault(last + 1, RowInfo()).collapsed = True

    # -- pixel sizes -----------------------------------------------------

    def row_pixels(self, row: int) -> int:
        """Height of a row in pixels."""
        return int(4.0 / 3.0 * self.row_height(row))

    def column_pixels(self, column: int) -> int:
        """Width of a column in pixels, rounded as the spreadsheet does."""
        info = self.column_lookup.get(column)
        if info is None or not info.is_set_width:
            return _DEFAULT_COLUMN_PIXELS
        width = info.width
        if width < 1:
            return int(width * (_MAX_DIGIT_WIDTH + _PADDING) + 0.5)
        return int(width * _MAX_DIGIT_WIDTH + 0.5) + int(_PADDING)