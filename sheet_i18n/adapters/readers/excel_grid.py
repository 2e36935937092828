# sheet_i18n/adapters/readers/excel_grid.py
import io
from typing import Any, List, Optional

import openpyxl
import xlrd

def read_xlsx_grid(raw: bytes, sheet_name: Optional[str] = None) -> List[List[Any]]:
    """
    Reads one worksheet of an .xlsx/.xlsm workbook.
    Formula cells yield their cached values; the first sheet is used unless
    `sheet_name` is given.

    Raises:
        KeyError: `sheet_name` does not exist.
        ValueError: the workbook has no worksheet.
    """
    workbook = openpyxl.load_workbook(io.BytesIO(raw), read_only=True, data_only=True)
    try:
        if sheet_name:
            if sheet_name not in workbook.sheetnames:
                raise KeyError(f"sheet '{sheet_name}' not found")
            sheet = workbook[sheet_name]
        else:
            if not workbook.worksheets:
                raise ValueError("workbook contains no sheets")
            sheet = workbook.worksheets[0]
        return [list(row) for row in sheet.iter_rows(values_only=True)]
    finally:
        workbook.close()

def read_xls_grid(raw: bytes, sheet_name: Optional[str] = None) -> List[List[Any]]:
    """Reads one worksheet of a legacy .xls workbook."""
    book = xlrd.open_workbook(file_contents=raw)
    if sheet_name:
        if sheet_name not in book.sheet_names():
            raise KeyError(f"sheet '{sheet_name}' not found")
        sheet = book.sheet_by_name(sheet_name)
    else:
        if book.nsheets == 0:
            raise ValueError("workbook contains no sheets")
        sheet = book.sheet_by_index(0)
    return [sheet.row_values(idx) for idx in range(sheet.nrows)]
