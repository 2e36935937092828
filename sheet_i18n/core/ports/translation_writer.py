# sheet_i18n/core/ports/translation_writer.py
from pathlib import Path
from typing import Dict, List, Protocol


class ITranslationWriter(Protocol):
    """Port for persisting one translation document per language."""

    def write(self, output_dir: Path, trees: Dict[str, dict], filename_template: str) -> List[Path]:
        """
        Writes `trees[lang]` to `output_dir / filename_template.format(lang=lang)`.

        Returns:
            The paths written, in language order.

        Raises:
            WriteFailure: If any language could not be written. Languages
                written before and after the failing one are kept.
        """
        ...
