# sheet_i18n/adapters/readers/csv_grid.py
import csv
import io
from typing import List

import structlog

logger = structlog.get_logger()

CANDIDATE_DELIMITERS = ",;\t"

def _dialect(sample: str):
    try:
        return csv.Sniffer().sniff(sample, delimiters=CANDIDATE_DELIMITERS)
    except csv.Error:
        return csv.excel

def read_csv_grid(raw: bytes) -> List[List[str]]:
    """
    Decodes a CSV export into rows of cells.
    Handles the UTF-8 BOM that spreadsheet editors prepend and sniffs
    ',', ';' or tab delimiters.

    Raises:
        UnicodeDecodeError: content is not UTF-8.
        csv.Error: malformed quoting.
    """
    text = raw.decode("utf-8-sig")
    dialect = _dialect(text[:4096])
    reader = csv.reader(io.StringIO(text, newline=""), dialect)
    rows = [list(row) for row in reader]
    logger.debug("csv_grid_read", rows=len(rows), delimiter=getattr(dialect, "delimiter", ","))
    return rows
