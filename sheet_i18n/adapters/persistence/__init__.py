# sheet_i18n/adapters/persistence/__init__.py
from .json_writer import JsonTranslationWriter, render_json

__all__ = ["JsonTranslationWriter", "render_json"]
