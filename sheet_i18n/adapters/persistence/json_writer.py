# sheet_i18n/adapters/persistence/json_writer.py
import json
import os
import tempfile
from pathlib import Path
from typing import Dict, List

import structlog

from sheet_i18n.core.domain.exceptions import WriteFailure
from sheet_i18n.core.ports.translation_writer import ITranslationWriter

logger = structlog.get_logger()

def render_json(tree: dict) -> str:
    """Pretty JSON, 2-space indent, UTF-8 text kept verbatim, insertion order."""
    return json.dumps(tree, ensure_ascii=False, indent=2) + "\n"

class JsonTranslationWriter(ITranslationWriter):
    """
    Filesystem adapter writing `translation.<lang>.json` style files.
    Each file is written to a temp file in the same directory and moved into
    place, so readers never observe a half-written document.
    """

    def write(self, output_dir: Path, trees: Dict[str, dict], filename_template: str) -> List[Path]:
        output_dir = Path(output_dir)
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise WriteFailure(str(output_dir), {lang: str(e) for lang in trees})

        written: List[Path] = []
        failed: Dict[str, str] = {}

        for lang, tree in trees.items():
            target = output_dir / filename_template.format(lang=lang)
            try:
                self._atomic_write(target, render_json(tree))
                written.append(target)
            except OSError as e:
                logger.error("translation_write_failed", lang=lang, path=str(target), error=str(e))
                failed[lang] = str(e)

        if failed:
            raise WriteFailure(str(output_dir), failed)

        logger.debug("translations_written", output_dir=str(output_dir), files=len(written))
        return written

    def _atomic_write(self, target: Path, content: str):
        fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=str(target.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
                f.write(content)
            # mkstemp creates 0600 files
            os.chmod(tmp_name, 0o644)
            os.replace(tmp_name, target)
        except OSError:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
