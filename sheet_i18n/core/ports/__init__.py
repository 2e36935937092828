# sheet_i18n/core/ports/__init__.py
"""
Core Ports (Interfaces).

This package defines the Protocols that the Infrastructure Adapters must
implement. The conversion use case talks to spreadsheet readers, the JSON
writer and the compiled acceleration module only through these interfaces.
"""

from .source_reader import ISourceReader
from .translation_writer import ITranslationWriter
from .accelerator import IAccelerator, IAccelerationLoader

__all__ = [
    "ISourceReader",
    "ITranslationWriter",
    "IAccelerator",
    "IAccelerationLoader",
]
