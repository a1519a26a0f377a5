"""
Output routing: file, standard output, or the system clipboard.
"""

from __future__ import annotations

import enum
import logging
import shlex
import shutil
import subprocess
import sys
from pathlib import Path
from typing import BinaryIO, List, Optional

from .config import Config
from .console import success
from .errors import OutputError

LOG = logging.getLogger(__name__)

# Probed in order; the first one on PATH wins.
CLIPBOARD_CANDIDATES: List[List[str]] = [
    ["pbcopy"],
    ["wl-copy"],
    ["xclip", "-selection", "clipboard"],
    ["xsel", "--clipboard", "--input"],
    ["clip.exe"],
]


class Delivery(enum.Enum):
    FILE = "file"
    STDOUT = "stdout"
    CLIPBOARD = "clipboard"


def is_interactive() -> bool:
    """True only when stdin, stdout and stderr are all terminals."""
    for stream in (sys.stdin, sys.stdout, sys.stderr):
        try:
            if stream is None or not stream.isatty():
                return False
        except (AttributeError, ValueError):
            return False
    return True


def find_clipboard_command() -> Optional[List[str]]:
    for cmd in CLIPBOARD_CANDIDATES:
        if shutil.which(cmd[0]):
            return list(cmd)
    return None


def write_file(content: bytes, path: Path) -> None:
    try:
        path = path.resolve()
    except (OSError, RuntimeError) as e:
        raise OutputError(f"Could not resolve output path '{path}': {e}")

    out_dir = path.parent
    if not out_dir.exists():
        try:
            out_dir.mkdir(parents=True, exist_ok=True)
        except (OSError, PermissionError) as e:
            raise OutputError(f"Could not create output directory '{out_dir}': {e}")

    try:
        path.write_bytes(content)
    except (OSError, PermissionError) as e:
        raise OutputError(f"Could not write to output file '{path}': {e}")


def copy_to_clipboard(content: bytes, cmd: List[str]) -> bool:
    """Pipe *content* into *cmd*; return False if the tool could not take it."""
    LOG.debug("Running clipboard command: %s", shlex.join(cmd))
    try:
        completed = subprocess.run(cmd, input=content, check=False)
    except OSError as e:
        LOG.warning("Failed to execute %s: %s", cmd[0], e)
        return False
    if completed.returncode != 0:
        LOG.warning("%s exited with status %d", cmd[0], completed.returncode)
        return False
    return True


def deliver(
    content: bytes,
    config: Config,
    *,
    interactive: Optional[bool] = None,
    stdout: Optional[BinaryIO] = None,
) -> Delivery:
    """
    Send *content* to its destination and return where it went.

    The formatter's bytes pass through untouched, whatever the locale.
    Priority: ``config.output_path``, then stdout when ``no_copy`` is set or
    the process is not attached to a terminal, then the first clipboard
    tool found. A missing or failing clipboard tool falls back to stdout.
    """
    if stdout is None:
        sys.stdout.flush()
        stdout = sys.stdout.buffer
    if interactive is None:
        interactive = is_interactive()

    if config.output_path is not None:
        write_file(content, config.output_path)
        success(LOG, "Wrote %d bytes to %s", len(content), config.output_path)
        return Delivery.FILE

    if config.no_copy or not interactive:
        return _to_stdout(content, stdout)

    cmd = find_clipboard_command()
    if cmd is None:
        names = ", ".join(c[0] for c in CLIPBOARD_CANDIDATES)
        LOG.warning("No clipboard utility found (tried %s), printing to stdout", names)
        return _to_stdout(content, stdout)

    if not copy_to_clipboard(content, cmd):
        LOG.warning("Clipboard copy failed, printing to stdout")
        return _to_stdout(content, stdout)

    success(LOG, "Copied %d bytes to clipboard via %s", len(content), cmd[0])
    return Delivery.CLIPBOARD


def _to_stdout(content: bytes, stdout: BinaryIO) -> Delivery:
    stdout.write(content)
    stdout.flush()
    return Delivery.STDOUT
