# sheet_i18n/core/domain/models.py
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

# --- Enums ---

class SourceFormat(str, Enum):
    """File formats the source readers understand."""
    XLSX = "xlsx"
    XLS = "xls"
    CSV = "csv"

    @classmethod
    def from_path(cls, path: str) -> Optional["SourceFormat"]:
        suffix = Path(path).suffix.lower()
        if suffix in (".xlsx", ".xlsm"):
            return cls.XLSX
        if suffix == ".xls":
            return cls.XLS
        if suffix in (".csv", ".txt"):
            return cls.CSV
        return None

class AccelerationState(str, Enum):
    """Lifecycle of the compiled conversion module."""
    UNLOADED = "unloaded"
    PROBING = "probing"
    LOADED = "loaded"
    UNAVAILABLE = "unavailable"  # Terminal for the loader

class ConversionEngine(str, Enum):
    """Which pipeline produced the output of a run."""
    STANDARD = "standard"
    ACCELERATED = "accelerated"

# --- Value Objects ---

@dataclass(frozen=True)
class RowRecord:
    """
    One source row as produced by a SourceReader.
    `values` maps language code -> raw cell content (possibly None).
    """
    key: Any
    category: Any = None
    values: Dict[str, Any] = field(default_factory=dict)
    row_index: Optional[int] = None

@dataclass(frozen=True)
class NormalizedRow:
    """A row reduced to its key path and one string value per language."""
    key_path: Tuple[str, ...]
    values: Dict[str, str]
    row_index: Optional[int] = None

@dataclass
class AccelerationResult:
    """
    Outcome of AccelerationLoader.initialize().
    Stored by the caller; a loaded result carries the module handle.
    """
    state: AccelerationState
    strategy: Optional[str] = None
    handle: Any = None
    source: Optional[str] = None
    reasons: List[str] = field(default_factory=list)

    @property
    def available(self) -> bool:
        return self.state == AccelerationState.LOADED and self.handle is not None

@dataclass
class ConversionReport:
    """Summary of one successful conversion run."""
    source_path: str
    output_files: List[Path]
    engine: ConversionEngine
    languages: List[str]
    row_count: int = 0

# --- Configuration Entity ---

def _has_path_parts(value: str) -> bool:
    return any(sep in value for sep in {"/", "\\", os.sep})

class PluginOptions(BaseModel):
    """
    Per-project options of the plugin.
    Accepts snake_case or camelCase keys (e.g. `outputDir`) so configs written
    for the JavaScript build tools load unchanged.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    source_path: str = Field(
        ...,
        validation_alias=AliasChoices("source_path", "sourcePath", "excelPath", "excel_path"),
        description="Spreadsheet or CSV file, relative to root_dir",
    )
    output_dir: str = Field(..., description="Directory receiving the generated JSON files")
    supported_languages: List[str] = Field(
        ...,
        validation_alias=AliasChoices(
            "supported_languages", "supportedLanguages", "supportLanguages", "support_languages"
        ),
    )

    # Column mapping (index mode). When all are unset, columns are found by header name.
    category_column_index: Optional[int] = Field(None, ge=0)
    key_column_index: Optional[int] = Field(None, ge=0)
    value_start_column_index: Optional[int] = Field(None, ge=0)

    # Row mapping
    header_row_index: int = Field(0, ge=0)
    data_start_row_index: Optional[int] = Field(None, ge=0)
    sheet_name: Optional[str] = None

    use_nested_keys: bool = True
    use_acceleration: bool = False
    acceleration_module: Optional[str] = None

    output_filename_template: str = "translation.{lang}.json"
    debounce_ms: int = Field(300, ge=0)
    root_dir: Optional[str] = None

    @field_validator("supported_languages")
    @classmethod
    def _clean_languages(cls, value: List[str]) -> List[str]:
        cleaned: List[str] = []
        for lang in value:
            code = str(lang).strip()
            if not code:
                continue
            # Codes end up in output file names
            if _has_path_parts(code) or ".." in code:
                raise ValueError(f"language code '{code}' must not contain path separators or '..'")
            if code not in cleaned:
                cleaned.append(code)
        if not cleaned:
            raise ValueError("at least one supported language is required")
        return cleaned

    @field_validator("output_filename_template")
    @classmethod
    def _check_template(cls, value: str) -> str:
        if "{lang}" not in value:
            raise ValueError("output_filename_template must contain '{lang}'")
        if _has_path_parts(value):
            raise ValueError("output_filename_template must be a bare file name")
        try:
            value.format(lang="xx")
        except (KeyError, IndexError, ValueError) as e:
            raise ValueError(f"output_filename_template may only use the '{{lang}}' placeholder ({e})")
        return value

    @model_validator(mode="after")
    def _check_rows(self) -> "PluginOptions":
        if self.data_start_row_index is not None and self.data_start_row_index <= self.header_row_index:
            raise ValueError("data_start_row_index must come after header_row_index")
        return self

    # --- Derived values ---

    @property
    def uses_column_indices(self) -> bool:
        return any(
            idx is not None
            for idx in (self.category_column_index, self.key_column_index, self.value_start_column_index)
        )

    @property
    def effective_data_start_row(self) -> int:
        if self.data_start_row_index is None:
            return self.header_row_index + 1
        return self.data_start_row_index

    def column_indices(self) -> Tuple[int, int, int]:
        """(category, key, value_start) with the defaults of the compiled module."""
        return (
            0 if self.category_column_index is None else self.category_column_index,
            1 if self.key_column_index is None else self.key_column_index,
            2 if self.value_start_column_index is None else self.value_start_column_index,
        )

    @property
    def base_dir(self) -> Path:
        return Path(self.root_dir) if self.root_dir else Path.cwd()

    def resolved_source(self) -> Path:
        path = Path(self.source_path)
        return path if path.is_absolute() else (self.base_dir / path)

    def resolved_output_dir(self) -> Path:
        path = Path(self.output_dir)
        return path if path.is_absolute() else (self.base_dir / path)

    def output_filename(self, lang: str) -> str:
        return self.output_filename_template.format(lang=lang)

    def acceleration_options(self, source_format: SourceFormat) -> Dict[str, Any]:
        """Options record handed to the compiled module's `convert`."""
        category_idx, key_idx, value_idx = self.column_indices()
        return {
            "supported_languages": list(self.supported_languages),
            "category_column_index": category_idx,
            "key_column_index": key_idx,
            "value_start_column_index": value_idx,
            "header_row_index": self.header_row_index,
            "data_start_row_index": self.effective_data_start_row,
            "sheet_name": self.sheet_name,
            "use_nested_keys": self.use_nested_keys,
            "source_format": source_format.value,
        }
