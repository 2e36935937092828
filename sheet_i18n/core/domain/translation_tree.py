# sheet_i18n/core/domain/translation_tree.py
"""
Row normalization and per-language translation trees.

A row `(category="common/button", key="reset", en="Reset")` becomes the key
path ("common", "button", "reset") and is inserted into every language tree:

    {"en": {"common": {"button": {"reset": "Reset"}}}}

Dicts preserve insertion order, so the JSON written later keeps the order in
which keys first appeared in the sheet.
"""
import re
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from sheet_i18n.core.domain.exceptions import StructuralConflict
from sheet_i18n.core.domain.models import NormalizedRow, RowRecord

Tree = Dict[str, Union[str, "Tree"]]

CATEGORY_SEPARATORS = re.compile(r"[/.]")
FLAT_KEY_SEPARATOR = "/"

_LEAF = "leaf"
_BRANCH = "branch"


def cell_text(value: Any) -> str:
    """Renders a raw cell as text. Missing cells are the empty string."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        # Spreadsheets store 3 as 3.0
        return str(int(value))
    return str(value)


def category_path(category: Any) -> List[str]:
    """Splits 'common/button' or 'common.button' into path segments."""
    text = cell_text(category)
    if not text.strip():
        return []
    return [segment.strip() for segment in CATEGORY_SEPARATORS.split(text) if segment.strip()]


def normalize(row: RowRecord, supported_languages: Sequence[str]) -> Optional[NormalizedRow]:
    """
    Reduces a row to its key path and one value per supported language.
    Returns None for rows without a key; those rows are skipped.
    """
    key = cell_text(row.key).strip()
    if not key:
        return None

    key_path = tuple(category_path(row.category) + [key])
    values = {lang: cell_text(row.values.get(lang)) for lang in supported_languages}
    return NormalizedRow(key_path=key_path, values=values, row_index=row.row_index)


def insert(
    trees: Dict[str, Tree],
    key_path: Sequence[str],
    language: str,
    value: str,
    row_index: Optional[int] = None,
) -> None:
    """
    Sets `trees[language][p0][p1]...[pn] = value`, creating branches on the way.

    Raises:
        StructuralConflict: a segment on the way is a leaf, or the final
            segment is already a branch.
    """
    if not key_path:
        raise ValueError("key_path must contain at least one segment")

    node = trees[language]
    for depth, segment in enumerate(key_path[:-1]):
        child = node.get(segment)
        if child is None:
            child = {}
            node[segment] = child
        elif not isinstance(child, dict):
            raise StructuralConflict(
                tuple(key_path[: depth + 1]), [language], offending_row=row_index, existing_kind=_LEAF
            )
        node = child

    leaf = key_path[-1]
    if isinstance(node.get(leaf), dict):
        raise StructuralConflict(tuple(key_path), [language], offending_row=row_index, existing_kind=_BRANCH)
    node[leaf] = value


def flatten(tree: Tree, separator: str = FLAT_KEY_SEPARATOR) -> Dict[str, str]:
    """Inverse of nesting: {'a': {'b': 'x'}} -> {'a/b': 'x'}."""
    flat: Dict[str, str] = {}

    def _walk(node: Tree, prefix: Tuple[str, ...]):
        for segment, child in node.items():
            path = prefix + (segment,)
            if isinstance(child, dict):
                _walk(child, path)
            else:
                flat[separator.join(path)] = child

    _walk(tree, ())
    return flat


class TranslationTreeBuilder:
    """
    Accumulates normalized rows into one tree per language.

    Paths are shared by all languages, so the shape of every path is tracked
    once. A conflicting row is rejected before any language tree is touched.
    """

    def __init__(self, supported_languages: Sequence[str], nested: bool = True):
        self.languages = list(supported_languages)
        self.nested = nested
        self.trees: Dict[str, Tree] = {lang: {} for lang in self.languages}
        self.row_count = 0
        # path -> (kind, row that introduced it)
        self._shape: Dict[Tuple[str, ...], Tuple[str, Optional[int]]] = {}

    def add(self, row: NormalizedRow) -> None:
        if self.nested:
            self._check_shape(row)
            for lang in self.languages:
                insert(self.trees, row.key_path, lang, row.values.get(lang, ""), row.row_index)
        else:
            flat_key = FLAT_KEY_SEPARATOR.join(row.key_path)
            for lang in self.languages:
                self.trees[lang][flat_key] = row.values.get(lang, "")
        self.row_count += 1

    def add_rows(self, rows: Iterable[RowRecord]) -> "TranslationTreeBuilder":
        for record in rows:
            normalized = normalize(record, self.languages)
            if normalized is None:
                continue
            self.add(normalized)
        return self

    def build(self) -> Dict[str, Tree]:
        return self.trees

    def _check_shape(self, row: NormalizedRow) -> None:
        path = row.key_path
        for depth in range(1, len(path)):
            prefix = path[:depth]
            seen = self._shape.get(prefix)
            if seen and seen[0] == _LEAF:
                raise StructuralConflict(
                    prefix, self.languages, existing_row=seen[1], offending_row=row.row_index, existing_kind=_LEAF
                )

        seen = self._shape.get(path)
        if seen and seen[0] == _BRANCH:
            raise StructuralConflict(
                path, self.languages, existing_row=seen[1], offending_row=row.row_index, existing_kind=_BRANCH
            )

        for depth in range(1, len(path)):
            self._shape.setdefault(path[:depth], (_BRANCH, row.row_index))
        # Last write wins for leaves, but the first row stays the reported origin
        self._shape.setdefault(path, (_LEAF, row.row_index))


def build_trees(
    rows: Iterable[RowRecord], supported_languages: Sequence[str], nested: bool = True
) -> Dict[str, Tree]:
    """Shortcut: normalize + build in one call."""
    return TranslationTreeBuilder(supported_languages, nested=nested).add_rows(rows).build()
