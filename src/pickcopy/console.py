"""
Diagnostic output for pickcopy.

Everything here goes to stderr so the content payload on stdout stays
clean when it is piped or redirected.
"""

from __future__ import annotations

import logging
import sys
from typing import Dict, Optional, TextIO

from colorama import Fore, Style, just_fix_windows_console

SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")

LOG = logging.getLogger("pickcopy")

_LABELS: Dict[int, str] = {
    logging.DEBUG: "debug",
    logging.INFO: "info",
    SUCCESS: "ok",
    logging.WARNING: "warn",
    logging.ERROR: "error",
    logging.CRITICAL: "error",
}

_COLORS: Dict[int, str] = {
    logging.DEBUG: Style.DIM,
    logging.INFO: Fore.CYAN,
    SUCCESS: Fore.GREEN,
    logging.WARNING: Fore.YELLOW,
    logging.ERROR: Fore.RED,
    logging.CRITICAL: Fore.RED + Style.BRIGHT,
}


class LabelFormatter(logging.Formatter):
    """Prefix each message with ``[label]``, coloured when *color* is set."""

    def __init__(self, color: bool = False):
        super().__init__("%(message)s")
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        label = f"[{_LABELS.get(record.levelno, record.levelname.lower())}]"
        if self.color:
            label = _COLORS.get(record.levelno, "") + label + Style.RESET_ALL
        return f"{label} {message}"


def configure_logging(verbose: bool = False, stream: Optional[TextIO] = None) -> None:
    """
    Attach a single stderr handler to the ``pickcopy`` logger.

    verbose == False -> INFO
    verbose == True  -> DEBUG (subprocess command lines are shown)
    """

    stream = stream if stream is not None else sys.stderr
    just_fix_windows_console()

    for handler in list(LOG.handlers):
        LOG.removeHandler(handler)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(LabelFormatter(color=_isatty(stream)))
    LOG.addHandler(handler)
    LOG.setLevel(logging.DEBUG if verbose else logging.INFO)


def success(logger: logging.Logger, msg: str, *args) -> None:
    logger.log(SUCCESS, msg, *args)


def _isatty(stream: TextIO) -> bool:
    try:
        return stream.isatty()
    except (AttributeError, ValueError):
        return False
