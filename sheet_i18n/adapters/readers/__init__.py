# sheet_i18n/adapters/readers/__init__.py
"""
Source Reader Adapters.

Concrete implementations of the `ISourceReader` port. Each format module
turns raw bytes into a grid of cells; `SpreadsheetSourceReader` picks the
right one from the file extension and maps the grid onto row records.
"""

from .csv_grid import read_csv_grid
from .excel_grid import read_xls_grid, read_xlsx_grid
from .spreadsheet_reader import SpreadsheetSourceReader

__all__ = [
    "SpreadsheetSourceReader",
    "read_csv_grid",
    "read_xlsx_grid",
    "read_xls_grid",
]
