# sheet_i18n/adapters/plugin.py
"""
Host build-tool glue.

The plugin runs the conversion once when the build starts and again every
time the source sheet is added or modified. Events for any other path are
ignored. A failed run is logged and never stops the watcher.
"""
import asyncio
import os
from typing import Any, Callable, Iterable, Optional, Set, Tuple

import structlog
from watchfiles import Change, awatch

from sheet_i18n.core.domain.exceptions import DomainError
from sheet_i18n.core.domain.models import ConversionReport, PluginOptions
from sheet_i18n.core.use_cases.convert_translations import ConvertTranslations

logger = structlog.get_logger()

RELEVANT_CHANGES = (Change.added, Change.modified)
# Event names used by chokidar-style host watchers
HOST_EVENTS = {"add": Change.added, "change": Change.modified}


def normalize_path(path: str) -> str:
    return os.path.normcase(os.path.realpath(os.path.abspath(str(path))))


class SheetI18nPlugin:
    """
    Lifecycle adapter: `build_start` for the initial build,
    `watch` / `configure_server` for change-driven rebuilds.
    """
    name = "sheet-to-i18n"

    def __init__(self, options: PluginOptions, use_case: ConvertTranslations):
        self.options = options
        self.use_case = use_case
        self._source = normalize_path(options.resolved_source())
        self.last_report: Optional[ConversionReport] = None
        self.last_error: Optional[str] = None

    # --- Event filtering ---

    def matches(self, file_path: str) -> bool:
        return bool(file_path) and normalize_path(file_path) == self._source

    def is_relevant(self, change: Change, file_path: str) -> bool:
        return change in RELEVANT_CHANGES and self.matches(file_path)

    # --- Running ---

    def run_once(self) -> Optional[ConversionReport]:
        """Runs one conversion; errors are logged and contained."""
        try:
            report = self.use_case.execute(self.options)
        except DomainError as e:
            self.last_error = e.message
            logger.error("plugin_run_failed", plugin=self.name, error=e.message)
            return None
        except Exception as e:
            self.last_error = str(e)
            logger.error("plugin_run_crashed", plugin=self.name, error=str(e), exc_info=True)
            return None

        self.last_error = None
        self.last_report = report
        return report

    async def build_start(self) -> Optional[ConversionReport]:
        """Lifecycle Hook: initial build."""
        return await asyncio.to_thread(self.run_once)

    async def handle_changes(self, changes: Iterable[Tuple[Change, str]]) -> Optional[ConversionReport]:
        """
        Handles one debounced batch of file events.
        Several relevant events in the same batch trigger a single run.
        """
        relevant = [(change, path) for change, path in changes if self.is_relevant(change, path)]
        if not relevant:
            return None
        logger.info("source_changed", plugin=self.name, events=[c.name for c, _ in relevant])
        return await asyncio.to_thread(self.run_once)

    async def watch(self, stop_event: Optional[asyncio.Event] = None):
        """
        Background Task: re-converts whenever the source file changes.
        The parent directory is watched so editors that save by replacing the
        file are still seen.
        """
        source_dir = os.path.dirname(self._source)
        if not os.path.isdir(source_dir):
            logger.warning("watcher_dir_missing", path=source_dir)
            return

        logger.info("watcher_started", path=self._source, debounce_ms=self.options.debounce_ms)
        try:
            async for changes in awatch(
                source_dir,
                watch_filter=self.is_relevant,
                debounce=self.options.debounce_ms,
                stop_event=stop_event,
                recursive=False,
            ):
                await self.handle_changes(changes)
        except asyncio.CancelledError:
            logger.info("watcher_stopped", path=self._source)
            raise
        logger.info("watcher_stopped", path=self._source)

    async def serve(self, stop_event: Optional[asyncio.Event] = None):
        """Initial build, then watch until stopped."""
        await self.build_start()
        await self.watch(stop_event)

    # --- Host integration ---

    def listener(self, file_path: str = "", event: str = "change") -> Optional[ConversionReport]:
        """Synchronous callback for hosts that push their own watcher events."""
        change = HOST_EVENTS.get(event)
        if change is None or not self.is_relevant(change, file_path):
            return None
        return self.run_once()

    def configure_server(self, watcher: Any) -> Set[str]:
        """
        Registers listeners on a host watcher exposing `on(event, callback)`.
        Returns the event names registered.
        """
        registered: Set[str] = set()
        for event in HOST_EVENTS:
            callback: Callable[[str], Optional[ConversionReport]] = (
                lambda file_path="", _event=event: self.listener(file_path, _event)
            )
            watcher.on(event, callback)
            registered.add(event)
        return registered
