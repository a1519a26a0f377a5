import logging
from typing import List, Optional

import pytest

from pickcopy.core import Tools


@pytest.fixture(autouse=True)
def _reset_pickcopy_logger():
    yield
    logger = logging.getLogger("pickcopy")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def tools() -> Tools:
    return Tools(finder="fd", picker="fzf", formatter="files-to-prompt", highlighter="bat")


class FakeStream:
    def __init__(self):
        self.closed = False

    def close(self):
        self.closed = True


class FakeFinder:
    def __init__(self, status: int = 0):
        self.stdout = FakeStream()
        self.status = status
        self.killed = False

    def wait(self):
        return self.status

    def kill(self):
        self.killed = True


class FakePicker:
    def __init__(self, output: str, returncode: int):
        self.output = output
        self.returncode = returncode

    def communicate(self):
        return self.output, None


class FakePopen:
    """Stands in for ``subprocess.Popen``: first call is fd, second is fzf."""

    def __init__(self, output: str = "", returncode: int = 0, finder_status: int = 0):
        self.calls: List[dict] = []
        self.finder = FakeFinder(finder_status)
        self.picker = FakePicker(output, returncode)

    def __call__(self, cmd, stdin=None, stdout=None, text: Optional[bool] = None):
        self.calls.append({"cmd": list(cmd), "stdin": stdin})
        return self.finder if len(self.calls) == 1 else self.picker


@pytest.fixture
def fake_popen():
    return FakePopen
