"""Worksheet model and XLSX writer for production tracking reports."""

__version__ = "0.1.0"

__all__ = [
    "cell",
    "cellrange",
    "hyperlinks",
    "layout",
    "relationships",
    "report",
    "sheetreader",
    "sheetview",
    "sheetwriter",
    "worksheet",
    "ziparchive",
]