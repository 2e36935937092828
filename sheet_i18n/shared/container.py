# sheet_i18n/shared/container.py
from dependency_injector import containers, providers

from sheet_i18n.shared.config import settings
from sheet_i18n.adapters.readers.spreadsheet_reader import SpreadsheetSourceReader
from sheet_i18n.adapters.persistence.json_writer import JsonTranslationWriter
from sheet_i18n.adapters.engines.acceleration_loader import AccelerationLoader
from sheet_i18n.adapters.plugin import SheetI18nPlugin
from sheet_i18n.core.use_cases.convert_translations import ConvertTranslations
from sheet_i18n.core.domain.models import PluginOptions

class Container(containers.DeclarativeContainer):
    """
    Dependency Injection Container.

    This declarative container defines the assembly instructions for the plugin.
    """

    # 1. Configuration
    config = providers.Configuration(pydantic_settings=[settings])

    # 2. Gateways (Infrastructure Adapters)

    source_reader = providers.Singleton(
        SpreadsheetSourceReader
    )

    translation_writer = providers.Singleton(
        JsonTranslationWriter
    )

    # Singleton: the compiled module is probed at most once per container
    acceleration_loader = providers.Singleton(
        AccelerationLoader,
        default_module=config.ACCELERATION_MODULE,
    )

    # 3. Use Cases (Application Logic)

    convert_translations_use_case = providers.Factory(
        ConvertTranslations,
        reader=source_reader,
        writer=translation_writer,
        loader=acceleration_loader,
    )

    # 4. Driving adapter, built per project options
    plugin = providers.Factory(
        SheetI18nPlugin,
        use_case=convert_translations_use_case,
    )

container = Container()

def create_plugin(options=None, **overrides) -> SheetI18nPlugin:
    """
    Builds a ready-to-use plugin, e.g.

        plugin = create_plugin(sourcePath="locales.xlsx", outputDir="public/locales",
                               supportedLanguages=["en", "ko"])
    """
    if isinstance(options, PluginOptions):
        options = options.model_dump()
    resolved = PluginOptions.model_validate({**(options or {}), **overrides})
    return container.plugin(options=resolved)
