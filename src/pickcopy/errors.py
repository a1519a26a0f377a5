"""
Exception types used across pickcopy.

The CLI maps each of these to an exit status; anything else reaching
``main`` is reported as an unexpected error.
"""

from __future__ import annotations

from typing import Dict, List


class PickcopyError(Exception):
    """Base exception for pickcopy errors."""


class UsageError(PickcopyError):
    """Raised for malformed flags, unknown flags, or missing flag values."""


class DependencyError(PickcopyError):
    """Raised when required external tools are not on ``PATH``."""

    def __init__(self, missing: List[str], hints: Dict[str, str]):
        self.missing = list(missing)
        self.hints = dict(hints)
        lines = ["Missing required tools:"]
        for name in self.missing:
            hint = self.hints.get(name)
            lines.append(f"  - {name}" + (f" (install: {hint})" if hint else ""))
        super().__init__("\n".join(lines))


class SearchPathError(PickcopyError):
    """Raised when the search directory does not exist."""


class ConfigFileError(PickcopyError):
    """Raised when the ignore-pattern file cannot be used."""


class SelectionCancelled(PickcopyError):
    """Raised when the user leaves the picker without confirming."""


class EmptySelectionError(PickcopyError):
    """Raised when there are no files to format."""


class SubprocessError(PickcopyError):
    """Raised when an external tool fails."""


class PickerError(SubprocessError):
    """Raised when the fuzzy picker fails to run or exits abnormally."""


class FormatterError(SubprocessError):
    """Raised when the formatter exits with a non-zero status."""


class OutputError(PickcopyError):
    """Raised when writing the output file fails."""
