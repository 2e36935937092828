# sheet_i18n/adapters/__init__.py
"""
Infrastructure Adapters.

This package contains the concrete implementations of the Ports defined in
`sheet_i18n.core.ports`:
- `readers`: Secondary Adapter (Driven) - CSV / XLSX / XLS parsing.
- `persistence`: Secondary Adapter (Driven) - JSON translation files.
- `engines`: Secondary Adapter (Driven) - the optional compiled converter.
- `plugin`: Primary Adapter (Driving) - build-tool hooks and file watcher.

In Hexagonal Architecture, dependencies point INWARD. These modules depend on
`sheet_i18n.core`, but `sheet_i18n.core` never imports from here.
"""
