# reportsheet

`reportsheet` writes the controller production tracking record as an
`.xlsx` workbook. Underneath it is a small worksheet model in plain Python:
cell ranges and A1 references, cells and formulas, row and column layout,
merged cells, hyperlinks, relationship parts, the worksheet XML part and
the ZIP container. It has no third-party dependencies.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Command line

```
reportsheet
```

This writes `Exxx.xlsx` to the current directory, then prints
`success to write xlsx file` and the current directory. If the file cannot
be written it prints an error and exits with status 1.

Options:

- `-o`, `--output PATH`: the workbook to write (default `Exxx.xlsx`).
- `--date YYYY-MM-DD`: the record date (default: today).
- `--photo-link URL`: the link placed in every step row (default a
  `file:///` link to a screenshot).

The sheet has a merged title row (`控制器生产跟踪记录单`), two header rows with
product model, hardware and software versions, record date and recorder,
a row of column headings, and one row for each production step. Each
step row holds the photo link as a hyperlink cell and the operator's
requirement.

## Library use

```python
import datetime

from reportsheet.cellrange import CellRange
from reportsheet.report import build_report, default_steps, write_report
from reportsheet.sheetwriter import save_worksheet
from reportsheet.worksheet import Worksheet

# Build the report in memory, or write it straight to a file.
steps = default_steps("file:///photos/step.png")
sheet = build_report(datetime.date(2024, 12, 16), steps)
write_report("Exxx.xlsx", datetime.date(2024, 12, 16), steps)

# Work with a worksheet directly.
ws = Worksheet("Sheet1")
ws.write(1, 1, "Title")
ws.write(2, 1, 42)
ws.write(2, 2, "=A2*2")
ws.merge_cells(CellRange.from_string("A1:C1"))
print(ws.read(2, 2))        # "=A2*2"
print(ws.merged_cells())    # [CellRange(first_row=1, first_column=1, last_row=1, last_column=3)]
xml = save_worksheet(ws)    # the worksheet part as UTF-8 bytes
```

Rows and columns are numbered from 1. `Worksheet.write` picks the cell kind
from the value: `None` gives a blank cell, a string starting with `=` a
formula, a string starting with `http://`, `https://`, `ftp://`,
`mailto:` or `file://` a hyperlink, other strings a shared string, and
`bool`, numbers, `datetime`, `date` and `time` their own kinds. A write
outside the sheet's limits raises `ValueError` and changes nothing; a value
of another type raises `TypeError`.

Modules:

- `reportsheet.cellrange`: `CellRange`, `column_to_letters`, `letters_to_column`.
- `reportsheet.cell`: `Cell`, `CellFormula`, `CellType`, `FormulaType`.
- `reportsheet.layout`: `SheetLayout` with column widths, row heights,
  hidden rows and columns, styles and outline grouping.
- `reportsheet.sheetview`: sheet view flags, default sizes, page setup,
  margins and header/footer.
- `reportsheet.hyperlinks`: `Hyperlink` and the rules for link text.
- `reportsheet.relationships`: `Relationships`, read from and written to `.rels` XML.
- `reportsheet.worksheet`: `Worksheet`.
- `reportsheet.sheetwriter`: `save_worksheet` and `calculate_spans`.
- `reportsheet.sheetreader`: `load_worksheet`, which fills a `Worksheet`
  from a worksheet XML part.
- `reportsheet.ziparchive`: `ZipReader` and `ZipWriter`.
- `reportsheet.report`: `ReportStep`, `default_steps`, `build_report`,
  `write_report`, `main`.

## What it does not do

- There is no workbook model: a package holds one worksheet, and
  `write_report` assembles the workbook, styles and shared-string parts
  itself with a fixed stylesheet. Opening an arbitrary `.xlsx` file as a
  whole is not supported; `load_worksheet` reads a single worksheet part.
- Styles are not turned into XML. A cell's style is stored as given; only
  an integer, or a mapping with an `xf_index` key, is written as a style
  index.
- Data validations, conditional formatting, images, charts and drawings
  are neither written nor read.
- There is no window or dialog for choosing folders; the command takes its
  settings from the options above.