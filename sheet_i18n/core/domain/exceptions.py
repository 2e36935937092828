# sheet_i18n/core/domain/exceptions.py
from typing import Optional, Sequence, Tuple


class DomainError(Exception):
    """Base class for all domain-level exceptions."""
    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)

# --- Source Errors ---

class SourceNotFound(DomainError):
    """Raised when the configured source spreadsheet/CSV does not exist."""
    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Source file '{path}' was not found.")

class ParseError(DomainError):
    """Raised when the source reader cannot turn the file into rows."""
    def __init__(self, path: str, details: str):
        self.path = path
        self.details = details
        super().__init__(f"Failed to parse '{path}': {details}")

# --- Tree Errors ---

class StructuralConflict(DomainError):
    """
    Raised when one row uses a path segment as a leaf and another row uses
    the same segment as a branch.
    """
    def __init__(
        self,
        path: Tuple[str, ...],
        languages: Sequence[str],
        existing_row: Optional[int] = None,
        offending_row: Optional[int] = None,
        existing_kind: str = "leaf",
    ):
        self.path = tuple(path)
        self.languages = list(languages)
        self.existing_row = existing_row
        self.offending_row = offending_row
        self.existing_kind = existing_kind

        wanted = "branch" if existing_kind == "leaf" else "leaf"
        rows = f"row {_fmt_row(existing_row)} vs row {_fmt_row(offending_row)}"
        super().__init__(
            f"Structural conflict at '{'/'.join(self.path)}': already a {existing_kind}, "
            f"cannot become a {wanted} ({rows}; languages: {', '.join(self.languages)})."
        )

def _fmt_row(index: Optional[int]) -> str:
    return "?" if index is None else str(index)

# --- Acceleration ---

class AccelerationUnavailable(DomainError):
    """
    Internal signal: the compiled conversion module could not be used.
    Never surfaced to the user, the standard pipeline takes over.
    """
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Acceleration unavailable: {reason}")

# --- Output Errors ---

class WriteFailure(DomainError):
    """Raised when one or more translation files could not be written."""
    def __init__(self, output_dir: str, failed: dict):
        self.output_dir = output_dir
        self.failed = dict(failed)
        details = "; ".join(f"{lang}: {err}" for lang, err in self.failed.items())
        super().__init__(f"Failed to write translations into '{output_dir}' ({details})")
