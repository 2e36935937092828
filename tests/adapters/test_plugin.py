# tests/adapters/test_plugin.py
import asyncio
import os

import pytest
from unittest.mock import MagicMock
from watchfiles import Change

from sheet_i18n.adapters.plugin import SheetI18nPlugin, normalize_path
from sheet_i18n.core.domain.exceptions import ParseError
from sheet_i18n.core.domain.models import ConversionEngine, ConversionReport


@pytest.fixture
def report(tmp_path):
    return ConversionReport(
        source_path=str(tmp_path / "locales.csv"),
        output_files=[],
        engine=ConversionEngine.STANDARD,
        languages=["en", "ko"],
        row_count=3,
    )


@pytest.fixture
def use_case(report):
    mock = MagicMock()
    mock.execute.return_value = report
    return mock


@pytest.fixture
def plugin(make_options, use_case):
    return SheetI18nPlugin(make_options(), use_case)


class FakeWatcher:
    """Host watcher exposing `on(event, callback)`."""

    def __init__(self):
        self.callbacks = {}

    def on(self, event, callback):
        self.callbacks.setdefault(event, []).append(callback)

    def emit(self, event, path):
        return [callback(path) for callback in self.callbacks.get(event, [])]


class TestEventFiltering:

    def test_matches_source_regardless_of_spelling(self, plugin, tmp_path):
        assert plugin.matches(str(tmp_path / "locales.csv"))
        assert plugin.matches(str(tmp_path / "sub" / ".." / "locales.csv"))
        assert not plugin.matches(str(tmp_path / "other.csv"))
        assert not plugin.matches("")

    def test_relative_path_is_resolved_from_cwd(self, plugin, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert plugin.matches("./locales.csv")

    @pytest.mark.parametrize("change, relevant", [
        (Change.added, True),
        (Change.modified, True),
        (Change.deleted, False),
    ])
    def test_only_add_and_modify_are_relevant(self, plugin, tmp_path, change, relevant):
        assert plugin.is_relevant(change, str(tmp_path / "locales.csv")) is relevant

    def test_normalize_path_is_absolute(self):
        assert os.path.isabs(normalize_path("relative/file.csv"))


class TestRunOnce:

    def test_success_records_report(self, plugin, use_case, report):
        assert plugin.run_once() is report
        assert plugin.last_report is report
        assert plugin.last_error is None
        use_case.execute.assert_called_once_with(plugin.options)

    def test_domain_error_is_contained(self, plugin, use_case):
        use_case.execute.side_effect = ParseError("locales.csv", "bad row")

        assert plugin.run_once() is None
        assert "bad row" in plugin.last_error

    def test_unexpected_error_is_contained(self, plugin, use_case):
        use_case.execute.side_effect = RuntimeError("disk on fire")

        assert plugin.run_once() is None
        assert plugin.last_error == "disk on fire"

    def test_failed_run_does_not_block_the_next(self, plugin, use_case, report):
        use_case.execute.side_effect = [ParseError("locales.csv", "bad row"), report]

        assert plugin.run_once() is None
        assert plugin.run_once() is report
        assert plugin.last_error is None


@pytest.mark.asyncio
class TestAsyncLifecycle:

    async def test_build_start_runs_once(self, plugin, use_case, report):
        assert await plugin.build_start() is report
        assert use_case.execute.call_count == 1

    async def test_batch_of_events_triggers_a_single_run(self, plugin, use_case, tmp_path):
        source = str(tmp_path / "locales.csv")
        await plugin.handle_changes([
            (Change.modified, source),
            (Change.added, source),
            (Change.modified, source),
        ])
        assert use_case.execute.call_count == 1

    async def test_unrelated_events_are_ignored(self, plugin, use_case, tmp_path):
        result = await plugin.handle_changes([
            (Change.modified, str(tmp_path / "other.csv")),
            (Change.deleted, str(tmp_path / "locales.csv")),
        ])
        assert result is None
        use_case.execute.assert_not_called()

    async def test_watch_returns_when_directory_missing(self, make_options, use_case):
        plugin = SheetI18nPlugin(make_options(source_path="missing/dir/locales.csv"), use_case)
        await asyncio.wait_for(plugin.watch(), timeout=5)
        use_case.execute.assert_not_called()

    async def test_watch_reconverts_when_source_changes_on_disk(self, make_options, use_case, sample_csv, tmp_path):
        """
        Scenario: The watcher runs; the source sheet is saved and an unrelated file is touched.
        Expected: Exactly one conversion, for the source change only.
        """
        # Arrange
        plugin = SheetI18nPlugin(make_options(debounce_ms=200), use_case)
        stop = asyncio.Event()
        task = asyncio.create_task(plugin.watch(stop_event=stop))
        await asyncio.sleep(1.0)  # let the OS watcher start

        # Act
        sample_csv.write_text("category,key,en,ko\ncommon,ok,OK,확인\n", encoding="utf-8")
        (tmp_path / "notes.txt").write_text("unrelated", encoding="utf-8")

        for _ in range(100):
            if use_case.execute.call_count:
                break
            await asyncio.sleep(0.1)
        await asyncio.sleep(0.5)  # a second batch would have arrived by now

        stop.set()
        await asyncio.wait_for(task, timeout=10)

        # Assert
        assert use_case.execute.call_count == 1
        use_case.execute.assert_called_with(plugin.options)

    async def test_watch_stops_on_event(self, plugin, sample_csv):
        stop = asyncio.Event()
        stop.set()
        await asyncio.wait_for(plugin.watch(stop_event=stop), timeout=10)


class TestHostIntegration:

    def test_configure_server_registers_add_and_change(self, plugin):
        watcher = FakeWatcher()
        assert plugin.configure_server(watcher) == {"add", "change"}
        assert set(watcher.callbacks) == {"add", "change"}

    def test_host_events_for_source_rebuild(self, plugin, use_case, report, tmp_path):
        watcher = FakeWatcher()
        plugin.configure_server(watcher)

        assert watcher.emit("change", str(tmp_path / "locales.csv")) == [report]
        assert watcher.emit("add", str(tmp_path / "locales.csv")) == [report]
        assert use_case.execute.call_count == 2

    def test_host_events_for_other_files_are_ignored(self, plugin, use_case, tmp_path):
        assert plugin.listener(str(tmp_path / "other.csv"), "change") is None
        assert plugin.listener(str(tmp_path / "locales.csv"), "unlink") is None
        use_case.execute.assert_not_called()
