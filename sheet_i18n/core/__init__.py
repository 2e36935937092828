# sheet_i18n/core/__init__.py
"""
Core Domain Layer.

This package contains the pure conversion logic and entities of the system.
It follows the Hexagonal Architecture (Ports & Adapters) pattern:
- No dependencies on the host build tool or the CLI.
- No direct filesystem or spreadsheet-library access.
- Defines Interfaces (Ports) that the Infrastructure layer must implement.
"""
