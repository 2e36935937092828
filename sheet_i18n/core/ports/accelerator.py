# sheet_i18n/core/ports/accelerator.py
from typing import Any, Dict, Optional, Protocol

from sheet_i18n.core.domain.models import AccelerationResult


class IAccelerator(Protocol):
    """
    Port for a compiled conversion module.

    `convert` receives the raw source bytes and the options record built by
    `PluginOptions.acceleration_options()` and returns:

        {"success": bool, "translations": {lang: {key: value}}, "error": str | None}
    """

    def convert(self, raw: bytes, options: Dict[str, Any]) -> Dict[str, Any]:
        ...


class IAccelerationLoader(Protocol):
    """Port for locating and initializing an IAccelerator."""

    def initialize(self, module_path: Optional[str] = None) -> AccelerationResult:
        """
        Probes for the compiled module once and caches the outcome.
        Never raises: failures produce an UNAVAILABLE result.
        """
        ...
