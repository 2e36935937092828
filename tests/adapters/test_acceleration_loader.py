# tests/adapters/test_acceleration_loader.py
import sys
import textwrap

import pytest

from sheet_i18n.adapters.engines import (
    AcceleratedConverter,
    AccelerationLoader,
    EmbeddedRuntimeStrategy,
    ExtensionBinaryStrategy,
    PackagedModuleStrategy,
    WrapperFileStrategy,
)
from sheet_i18n.adapters.engines.strategies import is_dotted_name, module_stem
from sheet_i18n.core.domain.exceptions import AccelerationUnavailable
from sheet_i18n.core.domain.models import AccelerationState

GOOD_MODULE = """
CALLS = []

def convert(raw, options):
    CALLS.append(len(raw))
    if raw == b"boom":
        raise ValueError("cannot parse")
    if raw == b"soft-fail":
        return {"success": False, "translations": {}, "error": "bad header"}
    return {
        "success": True,
        "translations": {"en": {"hello": "Hello"}},
        "error": None,
    }
"""


def write_module(directory, name, source):
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / name
    path.write_text(textwrap.dedent(source), encoding="utf-8")
    return path


class CountingStrategy:
    name = "counting"

    def __init__(self):
        self.calls = 0

    def load(self, module_ref, search_dirs):
        self.calls += 1
        raise ImportError("nothing here")


class TestAccelerationLoader:

    def test_nothing_resolvable_is_unavailable(self, tmp_path):
        loader = AccelerationLoader(default_module="sheet_i18n_absent_native", search_dirs=[tmp_path])

        result = loader.initialize()

        assert result.state == AccelerationState.UNAVAILABLE
        assert not result.available
        assert loader.state == AccelerationState.UNAVAILABLE
        assert [r.split(":")[0] for r in result.reasons] == [
            "embedded_runtime", "packaged_module", "wrapper_file", "extension_binary",
        ]

    def test_unavailable_is_never_retried(self, tmp_path):
        strategy = CountingStrategy()
        loader = AccelerationLoader(default_module="x", search_dirs=[tmp_path], strategies=[strategy])

        first = loader.initialize()
        # A module appearing later does not change the cached outcome
        write_module(tmp_path, "x_wrapper.py", GOOD_MODULE)
        second = loader.initialize("x")

        assert first is second
        assert strategy.calls == 1

    def test_wrapper_file_found_in_search_dir(self, tmp_path):
        native_dir = tmp_path / "dist"
        write_module(native_dir, "fake_native_wrapper.py", GOOD_MODULE)
        loader = AccelerationLoader(default_module="fake_native", search_dirs=[native_dir])

        result = loader.initialize()

        assert result.available
        assert result.strategy == "wrapper_file"
        assert result.source == str(native_dir / "fake_native_wrapper.py")
        assert isinstance(result.handle, AcceleratedConverter)

    def test_wrapper_file_by_explicit_path(self, tmp_path):
        path = write_module(tmp_path / "native", "conv.py", GOOD_MODULE)
        loader = AccelerationLoader(search_dirs=[])

        result = loader.initialize(str(path))

        assert result.strategy == "wrapper_file"

    def test_packaged_module_import(self, tmp_path, monkeypatch):
        write_module(tmp_path / "site", "pkg_fake_native.py", GOOD_MODULE)
        monkeypatch.syspath_prepend(str(tmp_path / "site"))
        loader = AccelerationLoader(search_dirs=[])

        try:
            result = loader.initialize("pkg_fake_native")
            assert result.strategy == "packaged_module"
            assert result.source == "import:pkg_fake_native"
        finally:
            sys.modules.pop("pkg_fake_native", None)

    def test_module_without_convert_is_rejected(self, tmp_path):
        write_module(tmp_path, "no_convert_wrapper.py", "def transform(raw, options):\n    return {}\n")
        loader = AccelerationLoader(default_module="no_convert", search_dirs=[tmp_path])

        result = loader.initialize()

        assert result.state == AccelerationState.UNAVAILABLE
        assert any("no callable 'convert'" in reason for reason in result.reasons)
        assert "_sheet_i18n_accel_no_convert_wrapper" not in sys.modules

    def test_rejected_module_keeps_its_dependencies_imported(self, tmp_path, monkeypatch):
        write_module(tmp_path / "site", "accel_shared_dep.py", "VALUE = 1\n")
        monkeypatch.syspath_prepend(str(tmp_path / "site"))
        write_module(tmp_path, "dep_native_wrapper.py", "import accel_shared_dep\n\ndef transform(raw, options):\n    return {}\n")
        loader = AccelerationLoader(
            default_module="dep_native",
            search_dirs=[tmp_path],
            strategies=[WrapperFileStrategy()],
        )

        try:
            result = loader.initialize()
            assert not result.available
            assert "_sheet_i18n_accel_dep_native_wrapper" not in sys.modules
            assert "accel_shared_dep" in sys.modules
        finally:
            sys.modules.pop("accel_shared_dep", None)

    def test_init_hook_returning_false_rejects_module(self, tmp_path):
        source = GOOD_MODULE + "\n\ndef init():\n    return False\n"
        write_module(tmp_path, "lazy_native_wrapper.py", source)
        loader = AccelerationLoader(default_module="lazy_native", search_dirs=[tmp_path])

        assert not loader.initialize().available

    def test_init_hook_runs_once(self, tmp_path):
        source = GOOD_MODULE + "\n\nINITS = []\n\ndef initialize():\n    INITS.append(1)\n"
        write_module(tmp_path, "hooked_native_wrapper.py", source)
        loader = AccelerationLoader(default_module="hooked_native", search_dirs=[tmp_path])

        loader.initialize()
        result = loader.initialize()

        assert result.handle.module.INITS == [1]

    def test_broken_wrapper_falls_through_to_next_strategy(self, tmp_path):
        write_module(tmp_path, "broken_native_wrapper.py", "raise ImportError('missing shared library')\n")
        (tmp_path / "broken_native.so").write_bytes(b"\x00not an elf file")
        loader = AccelerationLoader(
            default_module="broken_native",
            search_dirs=[tmp_path],
            strategies=[WrapperFileStrategy(), ExtensionBinaryStrategy(suffixes=[".so"])],
        )

        result = loader.initialize()

        assert result.state == AccelerationState.UNAVAILABLE
        assert result.reasons[0].startswith("wrapper_file: ImportError")
        assert result.reasons[1].startswith("extension_binary:")


class TestStrategies:

    def test_embedded_runtime_only_in_browser_interpreter(self, tmp_path):
        from sheet_i18n.adapters.engines.strategies import StrategyNotApplicable

        with pytest.raises(StrategyNotApplicable):
            EmbeddedRuntimeStrategy(platform="linux").load("json", [])

        module, source = EmbeddedRuntimeStrategy(platform="emscripten").load("json", [])
        assert module is sys.modules["json"]
        assert source == "import:json"

    def test_packaged_module_rejects_paths(self):
        from sheet_i18n.adapters.engines.strategies import StrategyNotApplicable

        with pytest.raises(StrategyNotApplicable):
            PackagedModuleStrategy().load("/opt/native/conv.py", [])

    def test_wrapper_candidates(self, tmp_path):
        candidates = WrapperFileStrategy().candidates("pkg.sheet_native", [tmp_path])
        assert candidates == [tmp_path / "sheet_native_wrapper.py", tmp_path / "sheet_native.py"]

    def test_extension_candidates(self, tmp_path):
        strategy = ExtensionBinaryStrategy(suffixes=[".so", ".pyd"])
        explicit = str(tmp_path / "conv.so")
        candidates = strategy.candidates(explicit, [tmp_path / "dist"])
        assert candidates[0] == tmp_path / "conv.so"
        assert tmp_path / "dist" / "conv.pyd" in candidates

    @pytest.mark.parametrize("ref, dotted, stem", [
        ("sheet_native", True, "sheet_native"),
        ("pkg.sheet_native", True, "sheet_native"),
        ("conv.py", False, "conv"),
        ("/x/sheet_native.cpython-312-x86_64-linux-gnu.so", False, "sheet_native"),
    ])
    def test_reference_parsing(self, ref, dotted, stem):
        assert is_dotted_name(ref) is dotted
        assert module_stem(ref) == stem


class TestAcceleratedConverter:

    @pytest.fixture
    def converter(self, tmp_path):
        write_module(tmp_path, "conv_native_wrapper.py", GOOD_MODULE)
        loader = AccelerationLoader(default_module="conv_native", search_dirs=[tmp_path])
        return loader.initialize().handle

    def test_success_fills_every_language(self, converter):
        result = converter.convert(b"ok", {"supported_languages": ["en", "ko"]})
        assert result == {"en": {"hello": "Hello"}, "ko": {}}

    def test_reported_failure(self, converter):
        with pytest.raises(AccelerationUnavailable) as excinfo:
            converter.convert(b"soft-fail", {"supported_languages": ["en"]})
        assert excinfo.value.reason == "bad header"

    def test_exception_is_a_single_call_failure(self, converter):
        with pytest.raises(AccelerationUnavailable):
            converter.convert(b"boom", {"supported_languages": ["en"]})

        # The handle keeps working afterwards
        assert converter.convert(b"ok", {"supported_languages": ["en"]}) == {"en": {"hello": "Hello"}}
        assert converter.module.CALLS == [4, 2]

    def test_non_mapping_result(self):
        class Module:
            @staticmethod
            def convert(raw, options):
                return "not a dict"

        with pytest.raises(AccelerationUnavailable):
            AcceleratedConverter(Module()).convert(b"", {})
