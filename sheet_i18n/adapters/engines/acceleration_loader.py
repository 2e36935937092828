# sheet_i18n/adapters/engines/acceleration_loader.py
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Set

import structlog

from sheet_i18n.adapters.engines.strategies import (
    ModuleStrategy,
    StrategyNotApplicable,
    WRAPPER_MODULE_PREFIX,
    default_strategies,
    is_dotted_name,
    module_stem,
)
from sheet_i18n.core.domain.exceptions import AccelerationUnavailable
from sheet_i18n.core.domain.models import AccelerationResult, AccelerationState
from sheet_i18n.core.ports.accelerator import IAccelerationLoader, IAccelerator
from sheet_i18n.shared.config import settings
from sheet_i18n.shared.observability import get_tracer

logger = structlog.get_logger()
tracer = get_tracer(__name__)

ENTRY_POINT = "convert"
INIT_HOOKS = ("init", "initialize")


class AcceleratedConverter(IAccelerator):
    """
    Wraps a loaded compiled module and normalizes its result.

    The module reports failure through {"success": False, "error": ...}.
    That, a malformed result, or an exception raised by the module all become
    AccelerationUnavailable for this call only; the handle stays usable.
    """

    def __init__(self, module: Any, source: str = ""):
        self.module = module
        self.source = source

    def convert(self, raw: bytes, options: Dict[str, Any]) -> Dict[str, dict]:
        try:
            result = getattr(self.module, ENTRY_POINT)(raw, options)
        except Exception as e:
            raise AccelerationUnavailable(f"{ENTRY_POINT}() raised {type(e).__name__}: {e}")

        if not isinstance(result, Mapping):
            raise AccelerationUnavailable(f"{ENTRY_POINT}() returned {type(result).__name__}, expected a mapping")
        if not result.get("success"):
            raise AccelerationUnavailable(result.get("error") or "conversion reported failure")

        translations = result.get("translations")
        if not isinstance(translations, Mapping):
            raise AccelerationUnavailable("result has no translations mapping")

        # Every supported language gets a document, even if the module skipped it
        return {
            lang: dict(translations.get(lang) or {})
            for lang in options.get("supported_languages", list(translations))
        }


class AccelerationLoader(IAccelerationLoader):
    """
    Probes for the compiled conversion module with a fixed list of strategies.

    States: UNLOADED -> PROBING -> LOADED | UNAVAILABLE.
    The first resolution is cached: later calls return the same result, and
    UNAVAILABLE is never retried for the lifetime of this loader.
    """

    def __init__(
        self,
        default_module: str = settings.ACCELERATION_MODULE,
        search_dirs: Optional[Sequence[Path]] = None,
        strategies: Optional[List[ModuleStrategy]] = None,
    ):
        self.default_module = default_module
        self.search_dirs = [Path(d) for d in search_dirs] if search_dirs is not None else self._default_search_dirs()
        self.strategies = strategies if strategies is not None else default_strategies()
        self.state = AccelerationState.UNLOADED
        self._result: Optional[AccelerationResult] = None

    @staticmethod
    def _default_search_dirs() -> List[Path]:
        package_dir = Path(__file__).resolve().parents[2]
        cwd = Path.cwd()
        return [package_dir / "_native", cwd / "dist", cwd / "dist" / "native", cwd]

    @property
    def result(self) -> Optional[AccelerationResult]:
        return self._result

    def initialize(self, module_path: Optional[str] = None) -> AccelerationResult:
        if self._result is not None:
            return self._result

        module_ref = module_path or self.default_module
        self.state = AccelerationState.PROBING
        reasons: List[str] = []

        with tracer.start_as_current_span("acceleration.probe") as span:
            span.set_attribute("app.acceleration_module", module_ref)

            for strategy in self.strategies:
                outcome = self._try(strategy, module_ref, reasons)
                if outcome is not None:
                    span.set_attribute("app.acceleration_strategy", strategy.name)
                    return self._resolve(outcome)

            logger.info("acceleration_unavailable", module=module_ref, reasons=reasons)
            return self._resolve(AccelerationResult(
                state=AccelerationState.UNAVAILABLE,
                reasons=reasons,
            ))

    def _try(self, strategy: ModuleStrategy, module_ref: str, reasons: List[str]) -> Optional[AccelerationResult]:
        before = set(sys.modules)
        try:
            module, source = strategy.load(module_ref, self.search_dirs)
            self._verify(module)
        except StrategyNotApplicable as e:
            reasons.append(f"{strategy.name}: skipped ({e})")
            return None
        except Exception as e:
            # Only the candidate module itself is forgotten; its own imports stay
            owned = self._candidate_names(module_ref)
            for name in set(sys.modules) - before:
                if name in owned or name.startswith(WRAPPER_MODULE_PREFIX):
                    sys.modules.pop(name, None)
            reasons.append(f"{strategy.name}: {type(e).__name__}: {e}")
            logger.debug("acceleration_strategy_failed", strategy=strategy.name, error=str(e))
            return None

        logger.info("acceleration_loaded", strategy=strategy.name, source=source)
        return AccelerationResult(
            state=AccelerationState.LOADED,
            strategy=strategy.name,
            handle=AcceleratedConverter(module, source),
            source=source,
            reasons=reasons,
        )

    @staticmethod
    def _candidate_names(module_ref: str) -> Set[str]:
        names = {module_stem(module_ref)}
        if is_dotted_name(module_ref):
            names.add(module_ref)
        return names

    def _verify(self, module: Any):
        if not callable(getattr(module, ENTRY_POINT, None)):
            raise AttributeError(f"module has no callable '{ENTRY_POINT}'")

        for hook_name in INIT_HOOKS:
            hook = getattr(module, hook_name, None)
            if callable(hook):
                if hook() is False:
                    raise RuntimeError(f"{hook_name}() returned False")
                break

    def _resolve(self, result: AccelerationResult) -> AccelerationResult:
        self._result = result
        self.state = result.state
        return result
