# sheet_i18n/adapters/engines/strategies.py
"""
Probe strategies for the compiled conversion module.

Each strategy knows one way of getting hold of the module and either returns
it or raises. The loader drops whatever a rejected attempt added to
`sys.modules`.
"""
import importlib
import importlib.machinery
import importlib.util
import re
import sys
from pathlib import Path
from typing import Any, List, Optional, Protocol, Sequence, Tuple

_DOTTED_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$")
WRAPPER_SUFFIX = "_wrapper"
_FILE_SUFFIXES = (".py", ".so", ".pyd")
WRAPPER_MODULE_PREFIX = "_sheet_i18n_accel_"


class StrategyNotApplicable(Exception):
    """The strategy cannot run in this environment or for this reference."""


class ModuleStrategy(Protocol):
    name: str

    def load(self, module_ref: str, search_dirs: Sequence[Path]) -> Tuple[Any, str]:
        """
        Returns (module, source description).

        Raises:
            StrategyNotApplicable: Nothing to try for this reference/environment.
            Exception: Any import or initialization failure.
        """
        ...


def is_dotted_name(module_ref: str) -> bool:
    if module_ref.endswith(_FILE_SUFFIXES):
        return False
    return bool(_DOTTED_NAME.match(module_ref))


def module_stem(module_ref: str) -> str:
    """'pkg.sheet_native' -> 'sheet_native'; '/x/sheet_native.cpython-312.so' -> 'sheet_native'."""
    if is_dotted_name(module_ref):
        return module_ref.rsplit(".", 1)[-1]
    return Path(module_ref).name.split(".", 1)[0]


def _exec_from_spec(name: str, spec) -> Any:
    if spec is None or spec.loader is None:
        raise ImportError(f"no loader for {name}")
    module = importlib.util.module_from_spec(spec)
    sys.modules[name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(name, None)
        raise
    return module


class EmbeddedRuntimeStrategy:
    """
    Browser-hosted interpreters (Pyodide) run under sys.platform 'emscripten'.
    There the module ships preloaded and is imported by name.
    """
    name = "embedded_runtime"

    def __init__(self, platform: Optional[str] = None):
        self.platform = platform

    def load(self, module_ref: str, search_dirs: Sequence[Path]) -> Tuple[Any, str]:
        if (self.platform or sys.platform) != "emscripten":
            raise StrategyNotApplicable("not running in a browser-hosted interpreter")
        if not is_dotted_name(module_ref):
            raise StrategyNotApplicable("embedded runtime only imports by module name")
        module = importlib.import_module(module_ref)
        return module, f"import:{module_ref}"


class PackagedModuleStrategy:
    """Imports an installed wrapper package by its dotted name."""
    name = "packaged_module"

    def load(self, module_ref: str, search_dirs: Sequence[Path]) -> Tuple[Any, str]:
        if not is_dotted_name(module_ref):
            raise StrategyNotApplicable("reference is a path, not a module name")
        module = importlib.import_module(module_ref)
        return module, f"import:{module_ref}"


class WrapperFileStrategy:
    """
    Loads a Python wrapper file around the compiled module.
    Tries the reference itself when it is a .py path, then
    `<stem>.py` / `<stem>_wrapper.py` in each search directory.
    """
    name = "wrapper_file"

    def candidates(self, module_ref: str, search_dirs: Sequence[Path]) -> List[Path]:
        found: List[Path] = []
        ref_path = Path(module_ref)
        stem = module_stem(module_ref)

        if ref_path.suffix == ".py":
            found.append(ref_path)
            found.append(ref_path.with_name(f"{ref_path.stem}{WRAPPER_SUFFIX}.py"))
        elif not is_dotted_name(module_ref):
            found.append(ref_path.parent / f"{stem}{WRAPPER_SUFFIX}.py")

        for directory in search_dirs:
            found.append(Path(directory) / f"{stem}{WRAPPER_SUFFIX}.py")
            found.append(Path(directory) / f"{stem}.py")

        unique: List[Path] = []
        for path in found:
            if path not in unique:
                unique.append(path)
        return unique

    def load(self, module_ref: str, search_dirs: Sequence[Path]) -> Tuple[Any, str]:
        for path in self.candidates(module_ref, search_dirs):
            if path.is_file():
                name = f"{WRAPPER_MODULE_PREFIX}{path.stem}"
                spec = importlib.util.spec_from_file_location(name, path)
                return _exec_from_spec(name, spec), str(path)
        raise FileNotFoundError(f"no wrapper file found for '{module_ref}'")


class ExtensionBinaryStrategy:
    """
    Loads the compiled extension (.so/.pyd) directly, bypassing any wrapper.
    The module name must match the binary's init symbol, i.e. the file stem.
    """
    name = "extension_binary"

    def __init__(self, suffixes: Optional[Sequence[str]] = None):
        self.suffixes = list(suffixes or importlib.machinery.EXTENSION_SUFFIXES)

    def candidates(self, module_ref: str, search_dirs: Sequence[Path]) -> List[Path]:
        found: List[Path] = []
        ref_path = Path(module_ref)
        if any(module_ref.endswith(suffix) for suffix in self.suffixes):
            found.append(ref_path)

        stem = module_stem(module_ref)
        for directory in search_dirs:
            for suffix in self.suffixes:
                found.append(Path(directory) / f"{stem}{suffix}")
        return found

    def load(self, module_ref: str, search_dirs: Sequence[Path]) -> Tuple[Any, str]:
        for path in self.candidates(module_ref, search_dirs):
            if path.is_file():
                name = module_stem(str(path))
                loader = importlib.machinery.ExtensionFileLoader(name, str(path))
                spec = importlib.util.spec_from_file_location(name, path, loader=loader)
                return _exec_from_spec(name, spec), str(path)
        raise FileNotFoundError(f"no compiled extension found for '{module_ref}'")


def default_strategies() -> List[ModuleStrategy]:
    """Fixed probe order."""
    return [
        EmbeddedRuntimeStrategy(),
        PackagedModuleStrategy(),
        WrapperFileStrategy(),
        ExtensionBinaryStrategy(),
    ]
