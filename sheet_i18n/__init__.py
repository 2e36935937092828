# sheet_i18n/__init__.py
"""
Sheet-to-i18n: turns a localization spreadsheet or CSV into one JSON
translation file per language, and keeps them in sync while developing.

Structured as a Hexagonal Architecture (Ports & Adapters) package.
"""

__version__ = "1.0.0"
