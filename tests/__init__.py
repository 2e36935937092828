# tests/__init__.py
"""
Test Suite for sheet-i18n.

Organization:
- `core`: Domain logic and use cases, with mocked ports.
- `adapters`: Readers, writer, acceleration loader and plugin against the real filesystem.
- top level: End-to-end conversions through the container and the CLI.
"""
