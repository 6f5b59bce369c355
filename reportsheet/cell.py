"""Cell values and cell formulas."""

from __future__ import annotations

import copy as _copy
from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import Any

from reportsheet.cellrange import CellRange


class CellType(Enum):
    """Kind of value a cell stores (ECMA-376 ST_CellType plus a custom kind)."""

    BOOLEAN = auto()
    DATE = auto()
    ERROR = auto()
    INLINE_STRING = auto()
    NUMBER = auto()
    SHARED_STRING = auto()
    STRING = auto()
    CUSTOM = auto()


class FormulaType(Enum):
    NORMAL = auto()
    ARRAY = auto()
    DATA_TABLE = auto()
    SHARED = auto()


@dataclass
class CellFormula:
    """A formula; a leading '=' in the text is dropped."""

    text: str = ""
    type: FormulaType = FormulaType.NORMAL
    reference: CellRange = field(default_factory=CellRange)
    calculate: bool = False
    shared_index: int = 0

    def __post_init__(self) -> None:
        if self.text.startswith("="):
            self.text = self.text[1:]


@dataclass
class Cell:
    """One cell: its value, type, style and optional formula.

    A NUMBER cell whose value is None is a blank cell.
    """

    value: Any = None
    type: CellType = CellType.NUMBER
    style: Any = None
    style_index: int = -1
    formula: CellFormula | None = None

    def has_formula(self) -> bool:
        return self.formula is not None

    def copy(self) -> Cell:
        """Return an independent copy of this cell."""
        formula = replace(self.formula) if self.formula is not None else None
        return replace(self, style=_copy.copy(self.style), formula=formula)