# sheet_i18n/core/domain/__init__.py
"""
Domain Entities and Value Objects.

This package defines the core data structures of the conversion pipeline:
row records read from a sheet, normalized key paths, and the per-language
translation trees. Nothing in here touches the filesystem.
"""
