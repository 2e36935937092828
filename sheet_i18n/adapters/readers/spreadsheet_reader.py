# sheet_i18n/adapters/readers/spreadsheet_reader.py
from pathlib import Path
from typing import Any, List

import structlog

from sheet_i18n.adapters.readers.csv_grid import read_csv_grid
from sheet_i18n.adapters.readers.excel_grid import read_xls_grid, read_xlsx_grid
from sheet_i18n.core.domain.exceptions import DomainError, ParseError, SourceNotFound
from sheet_i18n.core.domain.models import PluginOptions, RowRecord, SourceFormat
from sheet_i18n.core.domain.sheet_layout import rows_from_grid
from sheet_i18n.core.ports.source_reader import ISourceReader
from sheet_i18n.shared.resilience import retry_transient_read

logger = structlog.get_logger()

@retry_transient_read
def _read_file(path: Path) -> bytes:
    with open(path, "rb") as f:
        return f.read()

class SpreadsheetSourceReader(ISourceReader):
    """
    Reads .xlsx/.xlsm (openpyxl), .xls (xlrd) and .csv (stdlib csv) sources.
    All third-party failures are reported as ParseError.
    """

    def read_bytes(self, path: Path) -> bytes:
        path = Path(path)
        if not path.is_file():
            raise SourceNotFound(str(path))
        try:
            return _read_file(path)
        except FileNotFoundError:
            # Removed between the check and the read
            raise SourceNotFound(str(path))
        except OSError as e:
            raise ParseError(str(path), f"could not read file: {e}")

    def read(self, path: Path, options: PluginOptions) -> List[RowRecord]:
        path = Path(path)
        source_format = self.detect_format(path)
        raw = self.read_bytes(path)
        grid = self.parse_grid(raw, source_format, path, options.sheet_name)
        rows = rows_from_grid(grid, options, source=str(path))
        logger.debug("source_rows_read", path=str(path), format=source_format.value, rows=len(rows))
        return rows

    def detect_format(self, path: Path) -> SourceFormat:
        source_format = SourceFormat.from_path(str(path))
        if source_format is None:
            raise ParseError(str(path), f"unsupported file extension '{Path(path).suffix}'")
        return source_format

    def parse_grid(self, raw: bytes, source_format: SourceFormat, path: Path, sheet_name: str = None) -> List[List[Any]]:
        try:
            if source_format == SourceFormat.CSV:
                return read_csv_grid(raw)
            if source_format == SourceFormat.XLS:
                return read_xls_grid(raw, sheet_name)
            return read_xlsx_grid(raw, sheet_name)
        except DomainError:
            raise
        except KeyError as e:
            raise ParseError(str(path), str(e.args[0]) if e.args else "sheet not found")
        except Exception as e:
            logger.error("source_parse_failed", path=str(path), format=source_format.value, error=str(e))
            raise ParseError(str(path), str(e))
