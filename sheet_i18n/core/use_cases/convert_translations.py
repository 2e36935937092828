# sheet_i18n/core/use_cases/convert_translations.py
import structlog
from pathlib import Path
from typing import Dict, Optional, Tuple

from sheet_i18n.core.domain.exceptions import AccelerationUnavailable, DomainError
from sheet_i18n.core.domain.models import (
    ConversionEngine,
    ConversionReport,
    PluginOptions,
    SourceFormat,
)
from sheet_i18n.core.domain.translation_tree import TranslationTreeBuilder
from sheet_i18n.core.ports.accelerator import IAccelerationLoader
from sheet_i18n.core.ports.source_reader import ISourceReader
from sheet_i18n.core.ports.translation_writer import ITranslationWriter
from sheet_i18n.shared.observability import get_tracer

logger = structlog.get_logger()
tracer = get_tracer(__name__)

class ConvertTranslations:
    """
    Use Case: Converts a localization sheet into one JSON file per language.

    Responsibilities:
    1. Tries the compiled converter first when acceleration is enabled.
    2. Otherwise reads rows, normalizes them and builds the language trees.
    3. Writes every language document through the writer port.
    4. Keeps failures inside the run: outputs are only written once the
       whole sheet converted cleanly.
    """

    def __init__(
        self,
        reader: ISourceReader,
        writer: ITranslationWriter,
        loader: Optional[IAccelerationLoader] = None,
    ):
        # We inject the interfaces (Ports), not the concrete implementations
        self.reader = reader
        self.writer = writer
        self.loader = loader

    def execute(self, options: PluginOptions) -> ConversionReport:
        """
        Runs one conversion.

        Args:
            options: The project's plugin options.

        Returns:
            ConversionReport: files written and which engine produced them.

        Raises:
            SourceNotFound, ParseError, StructuralConflict, WriteFailure.
        """
        source = options.resolved_source()

        with tracer.start_as_current_span("use_case.convert_translations") as span:
            span.set_attribute("app.source", str(source))
            span.set_attribute("app.languages", ",".join(options.supported_languages))

            logger.info("conversion_started", source=str(source), languages=options.supported_languages)

            try:
                trees, engine, row_count = self._build(source, options)
                files = self.writer.write(
                    options.resolved_output_dir(), trees, options.output_filename_template
                )
            except DomainError as e:
                logger.error("conversion_failed", source=str(source), error=e.message)
                raise
            except Exception as e:
                logger.error("conversion_failed", source=str(source), error=str(e), exc_info=True)
                raise DomainError(f"Unexpected conversion failure: {str(e)}")

            span.set_attribute("app.engine", engine.value)
            logger.info(
                "conversion_succeeded",
                source=str(source),
                engine=engine.value,
                files=len(files),
                rows=row_count,
            )
            return ConversionReport(
                source_path=str(source),
                output_files=files,
                engine=engine,
                languages=list(options.supported_languages),
                row_count=row_count,
            )

    def _build(self, source: Path, options: PluginOptions) -> Tuple[Dict[str, dict], ConversionEngine, int]:
        if options.use_acceleration and self.loader is not None:
            trees = self._convert_accelerated(source, options)
            if trees is not None:
                return trees, ConversionEngine.ACCELERATED, 0

        rows = self.reader.read(source, options)
        builder = TranslationTreeBuilder(options.supported_languages, nested=options.use_nested_keys)
        builder.add_rows(rows)
        return builder.build(), ConversionEngine.STANDARD, builder.row_count

    def _convert_accelerated(self, source: Path, options: PluginOptions) -> Optional[Dict[str, dict]]:
        """Returns None whenever the standard pipeline should take over."""
        result = self.loader.initialize(options.acceleration_module)
        if not result.available:
            return None

        source_format = SourceFormat.from_path(str(source))
        if source_format is None:
            # Let the standard reader report the unsupported extension
            return None

        raw = self.reader.read_bytes(source)
        try:
            return result.handle.convert(raw, options.acceleration_options(source_format))
        except AccelerationUnavailable as e:
            logger.info("acceleration_call_failed", reason=e.reason, fallback=ConversionEngine.STANDARD.value)
            return None
