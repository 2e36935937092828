# sheet_i18n/core/domain/sheet_layout.py
"""
Maps a raw grid of cells (as read from a workbook or CSV) onto RowRecords.

Two layouts are supported:
- Header mode (default): columns are found by header names `category`,
  `key` and each language code.
- Index mode: any of the column indices is configured. Category and key
  come from fixed columns; language columns start at `value_start`, and are
  matched by the header cells in that range (or by position when the header
  names none of the supported languages).
"""
from typing import Any, Dict, Iterator, List, Optional, Sequence

from sheet_i18n.core.domain.exceptions import ParseError
from sheet_i18n.core.domain.models import PluginOptions, RowRecord
from sheet_i18n.core.domain.translation_tree import cell_text

Grid = Sequence[Sequence[Any]]

CATEGORY_HEADER = "category"
KEY_HEADER = "key"


def _cell(row: Sequence[Any], index: Optional[int]) -> Any:
    if index is None or index >= len(row):
        return None
    return row[index]


def _is_blank(row: Sequence[Any]) -> bool:
    return all(not cell_text(cell).strip() for cell in row)


def _header_positions(header: Sequence[Any]) -> Dict[str, int]:
    positions: Dict[str, int] = {}
    for idx, cell in enumerate(header):
        name = cell_text(cell).strip()
        if name and name not in positions:
            positions[name] = idx
    return positions


class SheetLayout:
    """Resolved column positions for one grid."""

    def __init__(self, category: Optional[int], key: int, languages: Dict[str, Optional[int]]):
        self.category = category
        self.key = key
        self.languages = languages

    @classmethod
    def resolve(cls, header: Sequence[Any], options: PluginOptions, source: str) -> "SheetLayout":
        positions = _header_positions(header)

        if not options.uses_column_indices:
            lowered: Dict[str, int] = {}
            for name, idx in positions.items():
                # positions are in column order; the leftmost spelling wins
                lowered.setdefault(name.lower(), idx)
            if KEY_HEADER not in lowered:
                raise ParseError(source, f"no '{KEY_HEADER}' column in header row {options.header_row_index}")
            languages = {lang: positions.get(lang) for lang in options.supported_languages}
            return cls(lowered.get(CATEGORY_HEADER), lowered[KEY_HEADER], languages)

        category_idx, key_idx, value_start = options.column_indices()
        value_headers = {
            name: idx for name, idx in positions.items() if idx >= value_start
        }
        if any(lang in value_headers for lang in options.supported_languages):
            languages = {lang: value_headers.get(lang) for lang in options.supported_languages}
        else:
            languages = {
                lang: value_start + offset for offset, lang in enumerate(options.supported_languages)
            }
        return cls(category_idx, key_idx, languages)


def extract_rows(grid: Grid, options: PluginOptions, source: str = "<memory>") -> Iterator[RowRecord]:
    """
    Yields one RowRecord per non-blank data row.
    `row_index` is the 1-based row number as shown by spreadsheet editors.
    """
    if len(grid) <= options.header_row_index:
        raise ParseError(source, f"header row {options.header_row_index} not found")

    layout = SheetLayout.resolve(grid[options.header_row_index], options, source)

    for idx in range(options.effective_data_start_row, len(grid)):
        row = grid[idx]
        if _is_blank(row):
            continue
        yield RowRecord(
            key=_cell(row, layout.key),
            category=_cell(row, layout.category),
            values={lang: _cell(row, col) for lang, col in layout.languages.items()},
            row_index=idx + 1,
        )


def rows_from_grid(grid: Grid, options: PluginOptions, source: str = "<memory>") -> List[RowRecord]:
    return list(extract_rows(grid, options, source))
