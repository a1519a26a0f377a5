"""
Core logic for pickcopy: building and running the external tools.

Commands are argument vectors handed straight to ``subprocess``; the only
shell strings are the ones ``fzf`` itself runs for reload and preview.
"""

from __future__ import annotations

import logging
import shlex
import shutil
import subprocess
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Union

from .config import Config, OutputFormat
from .errors import (
    DependencyError,
    EmptySelectionError,
    FormatterError,
    PickerError,
    SearchPathError,
    SelectionCancelled,
)

LOG = logging.getLogger(__name__)

# Tool lookup. Each required tool lists the executable names to try, in order.
_REQUIRED_TOOLS: Dict[str, List[str]] = {
    "fd": ["fd", "fdfind"],
    "fzf": ["fzf"],
    "files-to-prompt": ["files-to-prompt"],
}
_HIGHLIGHTERS: List[str] = ["bat", "batcat"]

INSTALL_HINTS: Dict[str, str] = {
    "fd": "brew install fd | apt install fd-find | cargo install fd-find",
    "fzf": "brew install fzf | apt install fzf",
    "files-to-prompt": "pipx install files-to-prompt | pip install files-to-prompt",
}

_FORMAT_FLAGS: Dict[OutputFormat, Optional[str]] = {
    OutputFormat.CXML: "--cxml",
    OutputFormat.MARKDOWN: "--markdown",
    OutputFormat.PLAIN: None,
}

PREVIEW_LINES = 50
PICKER_HEADER = (
    "TAB: toggle | CTRL-A: select all | CTRL-D: deselect all | "
    "CTRL-/: toggle preview | CTRL-R: reload"
)
_FZF_ERROR_STATUS = 2


@dataclass(frozen=True)
class Tools:
    """Executable names resolved on ``PATH``."""

    finder: str = "fd"
    picker: str = "fzf"
    formatter: str = "files-to-prompt"
    highlighter: Optional[str] = None


def _first_available(names: Sequence[str]) -> Optional[str]:
    for name in names:
        if shutil.which(name):
            return name
    return None


def check_dependencies() -> Tools:
    """Resolve every required tool or raise one error listing all missing ones."""
    found: Dict[str, str] = {}
    missing: List[str] = []
    for tool, names in _REQUIRED_TOOLS.items():
        name = _first_available(names)
        if name is None:
            missing.append(tool)
        else:
            found[tool] = name

    if missing:
        raise DependencyError(missing, {m: INSTALL_HINTS[m] for m in missing})

    highlighter = _first_available(_HIGHLIGHTERS)
    if highlighter is None:
        LOG.debug("No highlighter found, preview will use plain text")

    return Tools(
        finder=found["fd"],
        picker=found["fzf"],
        formatter=found["files-to-prompt"],
        highlighter=highlighter,
    )


# Discovery

def build_discovery_command(config: Config, tools: Tools) -> List[str]:
    cmd = [tools.finder, "--type", "f", "--color", "never", "--exclude", ".git"]
    if not config.respect_gitignore:
        cmd.append("--no-ignore")
    if config.include_hidden:
        cmd.append("--hidden")
    for ext in config.extensions:
        cmd.extend(["--extension", ext])
    for pattern in config.ignore_patterns:
        cmd.extend(["--exclude", pattern])
    # Match everything; the root must come last.
    cmd.extend([".", str(config.root)])
    return cmd


# Picker

def build_preview_command(tools: Tools) -> str:
    plain = f"head -n {PREVIEW_LINES} {{}}"
    if tools.highlighter is None:
        return plain
    return (
        f"{tools.highlighter} --color=always --style=numbers "
        f"--line-range=:{PREVIEW_LINES} {{}} 2>/dev/null || {plain}"
    )


def build_picker_command(config: Config, tools: Tools, discovery: List[str]) -> List[str]:
    cmd = [
        tools.picker,
        "--multi",
        "--height=80%",
        "--layout=reverse",
        "--border",
        "--info=inline",
        f"--header={PICKER_HEADER}",
        "--bind=ctrl-a:select-all",
        "--bind=ctrl-d:deselect-all",
        "--bind=ctrl-/:toggle-preview",
        # fzf runs this through $SHELL; the colon form takes the rest verbatim.
        f"--bind=ctrl-r:reload:{shlex.join(discovery)}",
    ]
    if config.preview:
        cmd.append(f"--preview={build_preview_command(tools)}")
        cmd.append("--preview-window=right:60%:wrap")
    return cmd


def pick_files(config: Config, tools: Tools) -> List[str]:
    """
    Run ``fd | fzf`` and return the confirmed selection, one path per entry.

    Leaving the picker without a selection raises ``SelectionCancelled``.
    """
    if not config.root.is_dir():
        raise SearchPathError(f"Search directory '{config.root}' does not exist")

    discovery = build_discovery_command(config, tools)
    picker_cmd = build_picker_command(config, tools, discovery)
    LOG.debug("Running discovery: %s", shlex.join(discovery))
    LOG.debug("Running picker: %s", shlex.join(picker_cmd))

    try:
        finder = subprocess.Popen(discovery, stdout=subprocess.PIPE)
    except OSError as e:
        raise PickerError(f"Failed to execute {tools.finder}: {e}") from e

    try:
        try:
            picker = subprocess.Popen(
                picker_cmd,
                stdin=finder.stdout,
                stdout=subprocess.PIPE,
                text=True,
            )
        except OSError as e:
            finder.kill()
            raise PickerError(f"Failed to execute {tools.picker}: {e}") from e
        # Let the finder see SIGPIPE if the picker exits first.
        finder.stdout.close()
        output, _ = picker.communicate()
    finally:
        finder_status = finder.wait()

    if finder_status not in (0, -13):
        LOG.warning("%s exited with status %d", tools.finder, finder_status)

    selection = [line for line in output.splitlines() if line.strip()]
    if picker.returncode != 0:
        if picker.returncode == _FZF_ERROR_STATUS or selection:
            raise PickerError(f"{tools.picker} exited with status {picker.returncode}")
        raise SelectionCancelled("Selection cancelled, nothing copied")

    LOG.debug("Selected %d files", len(selection))
    return selection


# Formatter

def build_formatter_command(
    config: Config,
    tools: Tools,
    selection: Sequence[str],
    output_format: Union[OutputFormat, str, None] = None,
) -> List[str]:
    fmt = config.output_format if output_format is None else output_format
    if not isinstance(fmt, OutputFormat):
        fmt = OutputFormat.parse(fmt)

    cmd = [tools.formatter]
    flag = _FORMAT_FLAGS.get(fmt)
    if flag:
        cmd.append(flag)
    if config.line_numbers:
        cmd.append("--line-numbers")
    cmd.append("--")
    cmd.extend(selection)
    return cmd


def format_selection(config: Config, tools: Tools, selection: Sequence[str]) -> bytes:
    """Run the formatter over *selection* and return its raw stdout."""
    if not selection:
        raise EmptySelectionError("No files selected")

    cmd = build_formatter_command(config, tools, selection)
    LOG.debug("Running formatter: %s", shlex.join(cmd))
    try:
        completed = subprocess.run(cmd, stdout=subprocess.PIPE, check=False)
    except OSError as e:
        raise FormatterError(f"Failed to execute {tools.formatter}: {e}") from e

    if completed.returncode != 0:
        raise FormatterError(
            f"{tools.formatter} failed with exit status {completed.returncode}"
        )
    return completed.stdout
