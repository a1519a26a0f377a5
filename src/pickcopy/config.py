"""
Configuration model for pickcopy.

The CLI builds one frozen ``Config`` and hands it to every stage, so no
stage reads global state.
"""

from __future__ import annotations

import argparse
import enum
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

import pathspec

from .errors import ConfigFileError, UsageError

LOG = logging.getLogger(__name__)


class OutputFormat(str, enum.Enum):
    CXML = "cxml"
    MARKDOWN = "markdown"
    PLAIN = "plain"

    @classmethod
    def parse(cls, value: str) -> "OutputFormat":
        """Return the matching format, or PLAIN with a warning."""
        try:
            return cls(value.strip().lower())
        except ValueError:
            LOG.warning("Unknown format '%s', falling back to plain", value)
            return cls.PLAIN


@dataclass(frozen=True)
class Config:
    output_format: OutputFormat = OutputFormat.CXML
    extensions: Tuple[str, ...] = ()
    respect_gitignore: bool = True
    include_hidden: bool = False
    line_numbers: bool = False
    preview: bool = True
    output_path: Optional[Path] = None
    no_copy: bool = False
    ignore_patterns: Tuple[str, ...] = ()
    root: Path = Path(".")
    verbose: bool = False

    @classmethod
    def from_namespace(cls, ns: argparse.Namespace) -> "Config":
        patterns = list(ns.ignore or [])
        validate_patterns(patterns)
        if ns.config is not None:
            patterns.extend(load_extra_patterns(ns.config))

        return cls(
            output_format=OutputFormat.parse(ns.format),
            extensions=tuple(normalize_extension(e) for e in ns.extension or []),
            respect_gitignore=not ns.ignore_gitignore,
            include_hidden=ns.include_hidden,
            line_numbers=ns.line_numbers,
            preview=not ns.no_preview,
            output_path=ns.output,
            no_copy=ns.no_copy,
            ignore_patterns=tuple(patterns),
            root=Path(ns.directory[0]) if ns.directory else Path("."),
            verbose=ns.verbose,
        )


def normalize_extension(ext: str) -> str:
    return ext[1:] if ext.startswith(".") else ext


def compile_patterns(patterns: Iterable[str]) -> "pathspec.GitIgnoreSpec":
    return pathspec.GitIgnoreSpec.from_lines(patterns)


def validate_patterns(patterns: List[str]) -> None:
    """Reject ``--ignore`` values that are not valid gitignore-style globs."""
    try:
        compile_patterns(patterns)
    except ValueError as e:
        raise UsageError(f"Invalid ignore pattern (checked as gitignore syntax): {e}")


def load_extra_patterns(config_path: Path) -> List[str]:
    """Read newline-separated ignore patterns from *config_path*."""
    if not config_path.exists():
        raise ConfigFileError(f"Config file '{config_path}' does not exist")

    if not config_path.is_file():
        raise ConfigFileError(f"'{config_path}' is not a file")

    try:
        with config_path.open("r", encoding="utf-8") as fh:
            lines = [ln.strip() for ln in fh if ln.strip() and not ln.lstrip().startswith("#")]
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigFileError(f"Could not read config file '{config_path}': {e}")

    try:
        compile_patterns(lines)
    except ValueError as e:
        raise ConfigFileError(
            f"Invalid pattern in '{config_path}' (checked as gitignore syntax): {e}"
        )

    LOG.debug("Loaded %d ignore patterns from %s", len(lines), config_path)
    return lines
