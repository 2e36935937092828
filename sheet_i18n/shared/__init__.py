# sheet_i18n/shared/__init__.py
"""
Shared utilities package.

This module contains cross-cutting concerns used by both the Core Domain
and Infrastructure Adapters, including:
- Configuration management
- Structured logging
- Tracing (Observability)
- Retry policies
- Dependency Injection wiring
"""
