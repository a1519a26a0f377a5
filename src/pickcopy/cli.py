"""
CLI entrypoint for pickcopy.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, NoReturn, Optional

from . import __version__
from .config import Config
from .console import configure_logging
from .core import check_dependencies, format_selection, pick_files
from .errors import EmptySelectionError, PickcopyError, SelectionCancelled, UsageError
from .output import deliver

LOG = logging.getLogger(__name__)


class _Parser(argparse.ArgumentParser):
    """ArgumentParser that raises ``UsageError`` instead of exiting with 2."""

    def error(self, message: str) -> NoReturn:
        if "expected one argument" in message:
            flag = message.split(":", 1)[0].replace("argument ", "")
            message = f"missing argument for {flag}"
        raise UsageError(message)


def build_arg_parser() -> argparse.ArgumentParser:
    p = _Parser(
        prog="pickcopy",
        description=(
            "Pick files with fzf and copy their contents, formatted for an "
            "LLM prompt, to the clipboard."
        ),
    )
    p.add_argument(
        "directory",
        nargs="*",
        help="Directory to search (default: current directory). "
        "Only the first one is used.",
    )
    p.add_argument(
        "-f",
        "--format",
        default="cxml",
        metavar="{cxml,markdown,plain}",
        help="Output format (default: cxml)",
    )
    p.add_argument(
        "-e",
        "--extension",
        action="append",
        metavar="EXT",
        help="Only list files with this extension (repeatable)",
    )
    p.add_argument("-i", "--include-hidden", action="store_true", help="Include hidden files")
    p.add_argument(
        "-g", "--ignore-gitignore", action="store_true", help="Do not respect .gitignore"
    )
    p.add_argument("-o", "--output", type=Path, metavar="FILE", help="Write to FILE instead")
    p.add_argument("-n", "--no-copy", action="store_true", help="Print to stdout instead")
    p.add_argument("-l", "--line-numbers", action="store_true", help="Add line numbers")
    p.add_argument("-p", "--no-preview", action="store_true", help="Disable the preview pane")
    p.add_argument(
        "--ignore",
        action="append",
        metavar="PATTERN",
        help="Exclude paths matching PATTERN (repeatable). Checked as a "
        "gitignore-style pattern before being passed to fd --exclude",
    )
    p.add_argument(
        "-c",
        "--config",
        type=Path,
        metavar="FILE",
        help="Path to a file with extra ignore patterns (one per line, "
        "gitignore syntax)",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    p.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")
    return p


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    return build_arg_parser().parse_intermixed_args(argv)


def run(config: Config) -> int:
    """Run pick -> format -> deliver for an already-built *config*."""
    tools = check_dependencies()
    LOG.debug("Using tools: %s", tools)

    selection = pick_files(config, tools)
    content = format_selection(config, tools, selection)
    deliver(content, config)
    LOG.debug("%d files processed, %d bytes produced", len(selection), len(content))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    try:
        ns = parser.parse_intermixed_args(argv)
    except UsageError as e:
        parser.print_usage(sys.stderr)
        print(f"{parser.prog}: error: {e}", file=sys.stderr)
        return 1
    except SystemExit as e:
        # --help and --version
        return e.code if isinstance(e.code, int) else 0

    configure_logging(verbose=ns.verbose)
    if len(ns.directory) > 1:
        LOG.debug("Ignoring extra positional arguments: %s", ", ".join(ns.directory[1:]))

    try:
        config = Config.from_namespace(ns)
        return run(config)
    except SelectionCancelled as e:
        LOG.warning("%s", e)
        return 0
    except EmptySelectionError as e:
        LOG.warning("%s", e)
        return 1
    except UsageError as e:
        parser.print_usage(sys.stderr)
        LOG.error("%s", e)
        return 1
    except PickcopyError as e:
        LOG.error("%s", e)
        return 1
    except KeyboardInterrupt:
        print("\nCancelled.", file=sys.stderr)
        return 130
    except Exception as e:  # noqa: BLE001
        LOG.error("Unexpected error: %s", e)
        return 1


if __name__ == "__main__":  # pragma: no cover - manual invocation
    raise SystemExit(main())
