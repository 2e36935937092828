# sheet_i18n/core/ports/source_reader.py
from pathlib import Path
from typing import List, Protocol

from sheet_i18n.core.domain.models import PluginOptions, RowRecord


class ISourceReader(Protocol):
    """
    Port for turning a localization sheet into ordered row records.
    Implementations: CSV (stdlib csv), XLSX (openpyxl), XLS (xlrd).
    """

    def read_bytes(self, path: Path) -> bytes:
        """
        Returns the raw content of the source file.

        Raises:
            SourceNotFound: If the file does not exist.
            ParseError: If the file cannot be read.
        """
        ...

    def read(self, path: Path, options: PluginOptions) -> List[RowRecord]:
        """
        Parses the source file into rows, in sheet order.

        Raises:
            SourceNotFound: If the file does not exist.
            ParseError: If the file is malformed or the layout cannot be resolved.
        """
        ...
