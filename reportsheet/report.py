"""The controller production tracking record sheet and its workbook file."""

from __future__ import annotations

import argparse
import datetime as _dt
import os
import sys
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from xml.sax.saxutils import escape, quoteattr

from reportsheet.relationships import Relationships
from reportsheet.sheetwriter import MAIN_NAMESPACE, RELATIONSHIP_NAMESPACE, save_worksheet
from reportsheet.worksheet import Worksheet
from reportsheet.ziparchive import ZipWriter

TITLE = "控制器生产跟踪记录单"
DEFAULT_OUTPUT = "Exxx.xlsx"
DEFAULT_PHOTO_LINK = "file:///D:/Desktop/微信截图_20241216170518.png"
SHEET_NAME = "Sheet1"

_QR_PHOTO = "操作员只取有二维码面照片"
_PHOTO = "操作员拍照"

_COLUMN_WIDTHS = (20, 20, 40, 20, 20, 20, 40)

_HEADER_XF = 1
_BODY_XF = 2
_DATE_XF = 3
_LINK_XF = 4

HEADER_STYLE = {
    "xf_index": _HEADER_XF,
    "font_size": 48,
    "font_color": "darkBlue",
    "horizontal_alignment": "center",
    "vertical_alignment": "center",
    "right_border": "thin",
    "bottom_border": "thin",
}
BODY_STYLE = {
    "xf_index": _BODY_XF,
    "font_size": 15,
    "horizontal_alignment": "center",
    "vertical_alignment": "top",
    "right_border": "thin",
    "bottom_border": "thin",
}
DATE_STYLE = {**BODY_STYLE, "xf_index": _DATE_XF, "number_format": "yyyy-mm-dd"}

_INFO_ROWS = (
    ("产品型号", "NDC9-2", "硬件版本", "V1.2.1", "记录日期"),
    ("出厂编号", "Exxx", "软件版本", "boot V1.2", "记录人"),
)
_COLUMN_HEADINGS = ("序号", "要素", "记录形式", "操作人员", "日期", "确认人", "操作要求")

_CONTENT_TYPES = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    '<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">'
    '<Default Extension="rels" '
    'ContentType="application/vnd.openxmlformats-package.relationships+xml"/>'
    '<Default Extension="xml" ContentType="application/xml"/>'
    '<Override PartName="/xl/workbook.xml" '
    'ContentType="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet.main+xml"/>'
    '<Override PartName="/xl/worksheets/sheet1.xml" '
    'ContentType="application/vnd.openxmlformats-officedocument.spreadsheetml.worksheet+xml"/>'
    '<Override PartName="/xl/styles.xml" '
    'ContentType="application/vnd.openxmlformats-officedocument.spreadsheetml.styles+xml"/>'
    '<Override PartName="/xl/sharedStrings.xml" '
    'ContentType="application/vnd.openxmlformats-officedocument.spreadsheetml.sharedStrings+xml"/>'
    "</Types>"
)

_FONT_TAIL = '<name val="Calibri"/><family val="2"/><scheme val="minor"/></font>'
_STYLES = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    f'<styleSheet xmlns="{MAIN_NAMESPACE}">'
    '<numFmts count="1"><numFmt numFmtId="164" formatCode="yyyy-mm-dd"/></numFmts>'
    '<fonts count="4">'
    f'<font><sz val="11"/>{_FONT_TAIL}'
    f'<font><sz val="48"/><color rgb="FF000080"/>{_FONT_TAIL}'
    f'<font><sz val="15"/>{_FONT_TAIL}'
    f'<font><u/><sz val="11"/><color rgb="FF0000FF"/>{_FONT_TAIL}'
    "</fonts>"
    '<fills count="2"><fill><patternFill patternType="none"/></fill>'
    '<fill><patternFill patternType="gray125"/></fill></fills>'
    '<borders count="2">'
    "<border><left/><right/><top/><bottom/><diagonal/></border>"
    '<border><left/><right style="thin"><color auto="1"/></right><top/>'
    '<bottom style="thin"><color auto="1"/></bottom><diagonal/></border>'
    "</borders>"
    '<cellStyleXfs count="1"><xf numFmtId="0" fontId="0" fillId="0" borderId="0"/></cellStyleXfs>'
    '<cellXfs count="5">'
    '<xf numFmtId="0" fontId="0" fillId="0" borderId="0" xfId="0"/>'
    '<xf numFmtId="0" fontId="1" fillId="0" borderId="1" xfId="0" applyFont="1" '
    'applyBorder="1" applyAlignment="1"><alignment horizontal="center" vertical="center"/></xf>'
    '<xf numFmtId="0" fontId="2" fillId="0" borderId="1" xfId="0" applyFont="1" '
    'applyBorder="1" applyAlignment="1"><alignment horizontal="center" vertical="top"/></xf>'
    '<xf numFmtId="164" fontId="2" fillId="0" borderId="1" xfId="0" applyNumberFormat="1" '
    'applyFont="1" applyBorder="1" applyAlignment="1">'
    '<alignment horizontal="center" vertical="top"/></xf>'
    '<xf numFmtId="0" fontId="3" fillId="0" borderId="0" xfId="0" applyFont="1" '
    'applyAlignment="1"><alignment vertical="center"/></xf>'
    "</cellXfs>"
    '<cellStyles count="1"><cellStyle name="Normal" xfId="0" builtinId="0"/></cellStyles>'
    "</styleSheet>"
)


@dataclass(frozen=True)
class ReportStep:
    """One production step row: its number, element, photo link and requirement."""

    number: str
    element: str
    photo_link: str
    requirement: str


def default_steps(photo_link: str = DEFAULT_PHOTO_LINK) -> list[ReportStep]:
    """The five standard steps, each pointing at the same photo."""
    rows = (
        ("1", "锡膏印刷", _QR_PHOTO),
        ("2", "三防检测", _QR_PHOTO),
        ("3", "散热胶", _PHOTO),
        ("4", "锡膏印刷", _PHOTO),
        ("5", "锡膏印刷", _QR_PHOTO),
    )
    return [ReportStep(number, element, photo_link, req) for number, element, req in rows]


def build_report(
    record_date: _dt.date | None = None, steps: Iterable[ReportStep] | None = None
) -> Worksheet:
    """Lay out the tracking record on a new worksheet."""
    if record_date is None:
        record_date = _dt.date.today()
    if steps is None:
        steps = default_steps()

    sheet = Worksheet(SHEET_NAME, 1)
    sheet.layout.set_row_height(1, 1, 80)
    sheet.write(1, 1, TITLE)
    sheet.merge_cells("A1:G1", HEADER_STYLE)

    for column, width in enumerate(_COLUMN_WIDTHS, start=1):
        sheet.layout.set_column_width(column, column, width)

    for row, labels in enumerate(_INFO_ROWS, start=2):
        for column, text in enumerate(labels, start=1):
            sheet.write(row, column, text, BODY_STYLE)
    sheet.write(2, 6, record_date, DATE_STYLE)
    sheet.write(2, 7, "", BODY_STYLE)
    sheet.write(3, 6, "", BODY_STYLE)
    sheet.write(3, 7, "", BODY_STYLE)

    for column, heading in enumerate(_COLUMN_HEADINGS, start=1):
        sheet.write(4, column, heading, BODY_STYLE)

    for row, step in enumerate(steps, start=5):
        sheet.write(row, 1, step.number, BODY_STYLE)
        sheet.write(row, 2, step.element, BODY_STYLE)
        sheet.write(row, 3, step.photo_link)
        if (row, 3) in sheet.hyperlinks:
            sheet.cells[(row, 3)].style_index = _LINK_XF
        for column in (4, 5, 6):
            sheet.write(row, column, "", BODY_STYLE)
        sheet.write(row, 7, step.requirement, BODY_STYLE)
    return sheet


def _shared_strings_xml(strings: list[str]) -> bytes:
    items = []
    for text in strings:
        preserve = ' xml:space="preserve"' if text != text.strip() else ""
        items.append(f"<si><t{preserve}>{escape(text)}</t></si>")
    count = len(strings)
    body = (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        f'<sst xmlns="{MAIN_NAMESPACE}" count="{count}" uniqueCount="{count}">'
        + "".join(items)
        + "</sst>"
    )
    return body.encode("utf-8")


def _workbook_xml(sheet: Worksheet) -> bytes:
    body = (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        f'<workbook xmlns="{MAIN_NAMESPACE}" xmlns:r="{RELATIONSHIP_NAMESPACE}">'
        "<sheets>"
        f'<sheet name={quoteattr(sheet.name)} sheetId="{sheet.sheet_id}" r:id="rId1"/>'
        "</sheets></workbook>"
    )
    return body.encode("utf-8")


def _package_parts(sheet: Worksheet) -> dict[str, bytes]:
    sheet_xml = save_worksheet(sheet)

    package_rels = Relationships()
    package_rels.add_document_relationship("/officeDocument", "xl/workbook.xml")

    workbook_rels = Relationships()
    workbook_rels.add_document_relationship("/worksheet", "worksheets/sheet1.xml")
    workbook_rels.add_document_relationship("/styles", "styles.xml")
    workbook_rels.add_document_relationship("/sharedStrings", "sharedStrings.xml")

    parts = {
        "[Content_Types].xml": _CONTENT_TYPES.encode("utf-8"),
        "_rels/.rels": package_rels.to_xml(),
        "xl/workbook.xml": _workbook_xml(sheet),
        "xl/_rels/workbook.xml.rels": workbook_rels.to_xml(),
        "xl/worksheets/sheet1.xml": sheet_xml,
        "xl/styles.xml": _STYLES.encode("utf-8"),
        "xl/sharedStrings.xml": _shared_strings_xml(sheet.shared_strings),
    }
    if len(sheet.relationships):
        parts["xl/worksheets/_rels/sheet1.xml.rels"] = sheet.relationships.to_xml()
    return parts


def write_report(
    path: str | os.PathLike[str],
    record_date: _dt.date | None = None,
    steps: Iterable[ReportStep] | None = None,
) -> Path:
    """Build the record and save it as an .xlsx file; OSError when it cannot be written."""
    sheet = build_report(record_date, steps)
    target = Path(path)
    with ZipWriter(target) as archive:
        for name, data in _package_parts(sheet).items():
            archive.add_file(name, data)
    return target


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="reportsheet", description="Write the controller production tracking record."
    )
    parser.add_argument("-o", "--output", default=DEFAULT_OUTPUT, help="workbook to write")
    parser.add_argument(
        "--date", type=_dt.date.fromisoformat, default=None, help="record date, YYYY-MM-DD"
    )
    parser.add_argument("--photo-link", default=DEFAULT_PHOTO_LINK, help="link to the photos")
    args = parser.parse_args(argv)
    try:
        write_report(args.output, args.date, default_steps(args.photo_link))
    except OSError as exc:
        print(f"failed to write xlsx file: {exc}", file=sys.stderr)
        return 1
    print("success to write xlsx file")
    print(f"current directory is {os.getcwd()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())