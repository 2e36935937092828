# tests/conftest.py
import csv
import pytest
from unittest.mock import MagicMock

import openpyxl

from sheet_i18n.shared.container import Container
from sheet_i18n.core.domain.models import AccelerationResult, AccelerationState, PluginOptions
from sheet_i18n.core.ports.accelerator import IAccelerationLoader
from sheet_i18n.core.ports.source_reader import ISourceReader
from sheet_i18n.core.ports.translation_writer import ITranslationWriter
from sheet_i18n.adapters.engines.acceleration_loader import AccelerationLoader

SAMPLE_ROWS = [
    ["category", "key", "en", "ko"],
    ["common/button", "reset", "Reset", "초기화"],
    ["common.button", "save", "Save", "저장"],
    ["", "title", "Title", "제목"],
    ["common/label", "", "ignored", "무시"],
]

def write_csv(path, rows, delimiter=","):
    with open(path, "w", encoding="utf-8", newline="") as f:
        csv.writer(f, delimiter=delimiter).writerows(rows)
    return path

def write_xlsx(path, rows, sheet_title="Sheet1", extra_sheets=None):
    workbook = openpyxl.Workbook()
    sheet = workbook.active
    sheet.title = sheet_title
    for row in rows:
        sheet.append(row)
    for title, extra_rows in (extra_sheets or {}).items():
        extra = workbook.create_sheet(title)
        for row in extra_rows:
            extra.append(row)
    workbook.save(path)
    return path

@pytest.fixture
def sample_csv(tmp_path):
    """The sample sheet as CSV in a temp project root."""
    return write_csv(tmp_path / "locales.csv", SAMPLE_ROWS)

@pytest.fixture
def sample_xlsx(tmp_path):
    """The sample sheet as XLSX in a temp project root."""
    return write_xlsx(tmp_path / "locales.xlsx", SAMPLE_ROWS)

@pytest.fixture
def make_options(tmp_path):
    """Factory for PluginOptions rooted in tmp_path."""
    def _make(**overrides):
        values = {
            "source_path": "locales.csv",
            "output_dir": "out/locales",
            "supported_languages": ["en", "ko"],
            "root_dir": str(tmp_path),
        }
        values.update(overrides)
        return PluginOptions.model_validate(values)
    return _make

@pytest.fixture
def absent_loader(tmp_path):
    """A real loader that cannot find any compiled module."""
    return AccelerationLoader(
        default_module="sheet_i18n_absent_native",
        search_dirs=[tmp_path / "no-native-here"],
    )

@pytest.fixture(scope="function")
def mock_reader():
    return MagicMock(spec=ISourceReader)

@pytest.fixture(scope="function")
def mock_writer():
    writer = MagicMock(spec=ITranslationWriter)
    writer.write.return_value = []
    return writer

@pytest.fixture(scope="function")
def mock_loader():
    """A loader whose probe always comes back empty."""
    loader = MagicMock(spec=IAccelerationLoader)
    loader.initialize.return_value = AccelerationResult(state=AccelerationState.UNAVAILABLE)
    return loader

@pytest.fixture(scope="function")
def container(absent_loader):
    """
    Dependency Injection Container with the real readers and writer,
    and an acceleration loader that never finds anything.
    """
    container = Container()
    container.acceleration_loader.override(absent_loader)

    yield container

    container.acceleration_loader.reset_override()
