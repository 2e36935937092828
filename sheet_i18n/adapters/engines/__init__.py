# sheet_i18n/adapters/engines/__init__.py
"""
Conversion Engine Adapters.

This package provides the optional compiled conversion path:

1. AccelerationLoader: probes for the compiled module (embedded runtime,
   installed package, wrapper file, raw extension binary).
2. AcceleratedConverter: the loaded handle, implementing `IAccelerator`.

When neither is usable the use case runs the pure Python pipeline.
"""

from .acceleration_loader import AcceleratedConverter, AccelerationLoader
from .strategies import (
    EmbeddedRuntimeStrategy,
    ExtensionBinaryStrategy,
    PackagedModuleStrategy,
    WrapperFileStrategy,
    default_strategies,
)

__all__ = [
    "AccelerationLoader",
    "AcceleratedConverter",
    "EmbeddedRuntimeStrategy",
    "PackagedModuleStrategy",
    "WrapperFileStrategy",
    "ExtensionBinaryStrategy",
    "default_strategies",
]
