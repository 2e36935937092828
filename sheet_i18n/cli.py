#!/usr/bin/env python3
"""
=============================================================================
SHEET-TO-I18N - COMMAND LINE
=============================================================================
Usage:
    sheet-i18n build  --source locales.xlsx --output public/locales --languages en,ko
    sheet-i18n watch  --config i18n.json          # Build, then rebuild on change
    sheet-i18n doctor --config i18n.json          # Reader / acceleration checks

Options given on the command line override the ones from --config.
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from sheet_i18n import __version__
from sheet_i18n.core.domain.models import PluginOptions
from sheet_i18n.shared.config import settings
from sheet_i18n.shared.container import container
from sheet_i18n.shared.logging_config import configure_logging
from sheet_i18n.shared.observability import setup_telemetry

# Colors for terminal output
class Colors:
    HEADER = '\033[95m'
    GREEN = '\033[92m'
    WARNING = '\033[93m'
    FAIL = '\033[91m'
    ENDC = '\033[0m'

def log(msg, color=Colors.ENDC):
    print(f"{color}{msg}{Colors.ENDC}")

# --- OPTIONS ---

# argparse dest -> PluginOptions field
FLAG_FIELDS = {
    "source": "source_path",
    "output": "output_dir",
    "category_column": "category_column_index",
    "key_column": "key_column_index",
    "value_start_column": "value_start_column_index",
    "header_row": "header_row_index",
    "data_start_row": "data_start_row_index",
    "sheet": "sheet_name",
    "nested": "use_nested_keys",
    "accelerate": "use_acceleration",
    "acceleration_module": "acceleration_module",
    "filename_template": "output_filename_template",
    "debounce_ms": "debounce_ms",
    "root": "root_dir",
}

def load_config_file(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a JSON object")
    if "root_dir" not in data and "rootDir" not in data:
        # Relative paths in a config file are relative to the file itself
        data["root_dir"] = str(Path(path).resolve().parent)
    return data

def build_options(args: argparse.Namespace) -> PluginOptions:
    raw: Dict[str, Any] = load_config_file(args.config) if args.config else {}

    for dest, field in FLAG_FIELDS.items():
        value = getattr(args, dest, None)
        if value is not None:
            # Drop the camelCase spelling so the flag wins
            alias = PluginOptions.model_fields[field].alias
            if alias and alias != field:
                raw.pop(alias, None)
            raw[field] = value

    if args.languages:
        for key in ("supportedLanguages", "supportLanguages", "support_languages"):
            raw.pop(key, None)
        raw["supported_languages"] = [lang for lang in args.languages.split(",") if lang.strip()]

    raw.setdefault("use_acceleration", settings.USE_ACCELERATION)
    raw.setdefault("debounce_ms", settings.WATCH_DEBOUNCE_MS)
    return PluginOptions.model_validate(raw)

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="sheet-i18n", description="Spreadsheet/CSV to i18n JSON converter")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", "-c", help="JSON file with plugin options")
    common.add_argument("--source", "-s", help="Spreadsheet or CSV file")
    common.add_argument("--output", "-o", help="Output directory for JSON files")
    common.add_argument("--languages", "-l", help="Comma separated language codes, e.g. en,ko")
    common.add_argument("--category-column", type=int)
    common.add_argument("--key-column", type=int)
    common.add_argument("--value-start-column", type=int)
    common.add_argument("--header-row", type=int)
    common.add_argument("--data-start-row", type=int)
    common.add_argument("--sheet", help="Worksheet name (default: first sheet)")
    common.add_argument("--flat", dest="nested", action="store_false", default=None,
                        help="Write flat 'category/key' keys instead of nested objects")
    common.add_argument("--accelerate", dest="accelerate", action="store_true", default=None)
    common.add_argument("--no-accelerate", dest="accelerate", action="store_false", default=None)
    common.add_argument("--acceleration-module", help="Module name or path of the compiled converter")
    common.add_argument("--filename-template", help="Output file name, must contain {lang}")
    common.add_argument("--debounce-ms", type=int)
    common.add_argument("--root", help="Base directory for relative paths")
    common.add_argument("--log-format", choices=["json", "console"])
    common.add_argument("--log-level")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("build", parents=[common], help="Convert once")
    sub.add_parser("watch", parents=[common], help="Convert, then re-convert on change")
    sub.add_parser("doctor", parents=[common], help="Check readers and acceleration")
    return parser

# --- COMMANDS ---

def cmd_build(options: PluginOptions) -> int:
    plugin = container.plugin(options=options)
    report = plugin.run_once()
    if report is None:
        log(f"❌ Conversion failed: {plugin.last_error}", Colors.FAIL)
        return 1
    log(f"✅ {len(report.output_files)} file(s) written ({report.engine.value} engine).", Colors.GREEN)
    return 0

def cmd_watch(options: PluginOptions) -> int:
    plugin = container.plugin(options=options)
    log(f"👀 Watching {options.resolved_source()} (Ctrl+C to stop)", Colors.HEADER)
    try:
        asyncio.run(plugin.serve())
    except KeyboardInterrupt:
        log("Stopped.", Colors.WARNING)
    return 0

def _module_version(name: str) -> Optional[str]:
    try:
        module = __import__(name)
    except ImportError:
        return None
    return getattr(module, "__version__", "installed")

def cmd_doctor(options: PluginOptions) -> int:
    log("\n🏥 Health Check", Colors.HEADER)
    ok = True

    source = options.resolved_source()
    if source.is_file():
        log(f"   ✅ Source found: {source}", Colors.GREEN)
    else:
        log(f"   ❌ Source missing: {source}", Colors.FAIL)
        ok = False

    for name in ("openpyxl", "xlrd"):
        version = _module_version(name)
        if version:
            log(f"   ✅ {name} {version}", Colors.GREEN)
        else:
            log(f"   ❌ {name} not installed", Colors.FAIL)
            ok = False

    result = container.acceleration_loader().initialize(options.acceleration_module)
    if result.available:
        log(f"   ✅ Acceleration: {result.strategy} ({result.source})", Colors.GREEN)
    else:
        log("   ⚠️  Acceleration unavailable, the Python pipeline will be used.", Colors.WARNING)
        for reason in result.reasons:
            log(f"      - {reason}", Colors.WARNING)

    return 0 if ok else 1

COMMANDS = {
    "build": cmd_build,
    "watch": cmd_watch,
    "doctor": cmd_doctor,
}

def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(log_format=args.log_format, level=args.log_level)
    setup_telemetry()

    try:
        options = build_options(args)
    except (OSError, ValueError) as e:
        # pydantic's ValidationError is a ValueError
        log(f"❌ Invalid options: {e}", Colors.FAIL)
        return 2

    return COMMANDS[args.command](options)

if __name__ == "__main__":
    sys.exit(main())
