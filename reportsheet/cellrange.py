"""Rectangular cell ranges and A1-style cell references."""

from __future__ import annotations

import re
from dataclasses import dataclass

MAX_ROW = 1048576
MAX_COLUMN = 16384

_LETTERS = re.compile(r"[A-Z]+")
_REFERENCE = re.compile(r"\$?([A-Z]{1,3})\$?(\d+)")


def column_to_letters(column: int) -> str:
    """Return the column letters for a 1-based column number."""
    if column < 1:
        raise ValueError(f"column must be at least 1, got {column}")
    letters = []
    while column:
        column, remainder = divmod(column - 1, 26)
        letters.append(chr(ord("A") + remainder))
    return "".join(reversed(letters))


def letters_to_column(letters: str) -> int:
    """Return the 1-based column number for upper-case column letters."""
    if not _LETTERS.fullmatch(letters):
        raise ValueError(f"invalid column letters: {letters!r}")
    column = 0
    for char in letters:
        column = column * 26 + ord(char) - ord("A") + 1
    return column


def _parse_reference(text: str) -> tuple[int, int]:
    match = _REFERENCE.fullmatch(text.strip())
    if match is None:
        raise ValueError(f"invalid cell reference: {text!r}")
    return int(match.group(2)), letters_to_column(match.group(1))


def _format_reference(row: int, column: int, row_abs: bool, col_abs: bool) -> str:
    col_part = ("$" if col_abs else "") + column_to_letters(column)
    row_part = ("$" if row_abs else "") + str(row)
    return col_part + row_part


@dataclass(frozen=True)
class CellRange:
    """A block of cells given by its first and last row and column (1-based)."""

    first_row: int = -1
    first_column: int = -1
    last_row: int = -2
    last_column: int = -2

    @classmethod
    def from_string(cls, text: str) -> CellRange:
        """Parse "A1:B2" or a single reference such as "C3"."""
        parts = text.split(":")
        if len(parts) == 1:
            top, left = _parse_reference(parts[0])
            return cls(top, left, top, left)
        if len(parts) == 2:
            top, left = _parse_reference(parts[0])
            bottom, right = _parse_reference(parts[1])
            return cls(top, left, bottom, right)
        raise ValueError(f"invalid cell range: {text!r}")

    def to_string(self, row_abs: bool = False, col_abs: bool = False) -> str:
        """Return the A1-style text; a single cell has no colon, an invalid range is empty."""
        if not self.is_valid():
            return ""
        start = _format_reference(self.first_row, self.first_column, row_abs, col_abs)
        if self.first_row == self.last_row and self.first_column == self.last_column:
            return start
        end = _format_reference(self.last_row, self.last_column, row_abs, col_abs)
        return f"{start}:{end}"

    def is_valid(self) -> bool:
        return (
            self.first_row > 0
            and self.first_column > 0
            and self.first_row <= self.last_row
            and self.first_column <= self.last_column
        )

    def row_count(self) -> int:
        return self.last_row - self.first_row + 1

    def column_count(self) -> int:
        return self.last_column - self.first_column + 1

    def top_left(self) -> tuple[int, int]:
        """Return (row, column) of the top-left corner."""
        return self.first_row, self.first_column

    def bottom_right(self) -> tuple[int, int]:
        """Return (row, column) of the bottom-right corner."""
        return self.last_row, self.last_column

    def __str__(self) -> str:
        return self.to_string()