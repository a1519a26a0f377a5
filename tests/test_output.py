import io
import subprocess

import pytest

from pickcopy.config import Config
from pickcopy.errors import OutputError
from pickcopy.output import (
    CLIPBOARD_CANDIDATES,
    Delivery,
    deliver,
    find_clipboard_command,
)


def _no_clipboard(*args, **kwargs):
    raise AssertionError("clipboard must not be used")


def test_output_file_written_verbatim(tmp_path, monkeypatch):
    monkeypatch.setattr("pickcopy.output.subprocess.run", _no_clipboard)
    out = tmp_path / "nested" / "out.md"
    out.parent.mkdir()
    out.write_text("old content that is longer", encoding="utf-8")
    content = "line one\r\nünïcode\n\tlast".encode("utf-8")
    stdout = io.BytesIO()

    result = deliver(content, Config(output_path=out), interactive=True, stdout=stdout)

    assert result is Delivery.FILE
    assert out.read_bytes() == content
    assert stdout.getvalue() == b""


def test_output_file_keeps_non_utf8_bytes(tmp_path):
    content = "café\n".encode("latin-1") + b"\xff\xfe raw\n"
    out = tmp_path / "out.txt"

    deliver(content, Config(output_path=out), interactive=False, stdout=io.BytesIO())

    assert out.read_bytes() == content


def test_stdout_keeps_non_utf8_bytes():
    content = "naïve\n".encode("cp1252") + b"\x80\x81"
    stdout = io.BytesIO()

    deliver(content, Config(no_copy=True), interactive=True, stdout=stdout)

    assert stdout.getvalue() == content


def test_output_file_creates_parent_directories(tmp_path):
    out = tmp_path / "a" / "b" / "out.txt"

    deliver(b"x", Config(output_path=out), interactive=False, stdout=io.BytesIO())

    assert out.read_bytes() == b"x"


def test_output_file_write_failure(tmp_path):
    with pytest.raises(OutputError):
        deliver(b"x", Config(output_path=tmp_path), interactive=False, stdout=io.BytesIO())


@pytest.mark.parametrize("interactive", [True, False])
def test_no_copy_never_touches_clipboard(monkeypatch, interactive):
    monkeypatch.setattr("pickcopy.output.subprocess.run", _no_clipboard)
    monkeypatch.setattr("pickcopy.output.shutil.which", _no_clipboard)
    stdout = io.BytesIO()

    result = deliver(b"payload", Config(no_copy=True), interactive=interactive, stdout=stdout)

    assert result is Delivery.STDOUT
    assert stdout.getvalue() == b"payload"


def test_non_interactive_goes_to_stdout(monkeypatch):
    monkeypatch.setattr("pickcopy.output.subprocess.run", _no_clipboard)
    monkeypatch.setattr("pickcopy.output.shutil.which", lambda name: f"/usr/bin/{name}")
    stdout = io.BytesIO()

    assert deliver(b"payload", Config(), interactive=False, stdout=stdout) is Delivery.STDOUT
    assert stdout.getvalue() == b"payload"


def test_clipboard_first_candidate_wins(monkeypatch):
    available = {"xclip", "xsel"}
    monkeypatch.setattr(
        "pickcopy.output.shutil.which",
        lambda name: f"/usr/bin/{name}" if name in available else None,
    )
    calls = []

    def fake_run(cmd, input=None, check=None):
        calls.append((cmd, input))
        return subprocess.CompletedProcess(args=cmd, returncode=0)

    monkeypatch.setattr("pickcopy.output.subprocess.run", fake_run)
    stdout = io.BytesIO()

    result = deliver(b"payload", Config(), interactive=True, stdout=stdout)

    assert result is Delivery.CLIPBOARD
    assert calls == [(["xclip", "-selection", "clipboard"], b"payload")]
    assert stdout.getvalue() == b""


def test_missing_clipboard_falls_back_to_stdout(monkeypatch, caplog):
    monkeypatch.setattr("pickcopy.output.shutil.which", lambda name: None)
    stdout = io.BytesIO()

    result = deliver(b"payload", Config(), interactive=True, stdout=stdout)

    assert result is Delivery.STDOUT
    assert stdout.getvalue() == b"payload"
    assert "No clipboard utility found" in caplog.text


def test_failing_clipboard_falls_back_to_stdout(monkeypatch):
    monkeypatch.setattr("pickcopy.output.shutil.which", lambda name: f"/usr/bin/{name}")
    monkeypatch.setattr(
        "pickcopy.output.subprocess.run",
        lambda cmd, **kwargs: subprocess.CompletedProcess(args=cmd, returncode=1),
    )
    stdout = io.BytesIO()

    assert deliver(b"payload", Config(), interactive=True, stdout=stdout) is Delivery.STDOUT
    assert stdout.getvalue() == b"payload"


def test_find_clipboard_command_order(monkeypatch):
    monkeypatch.setattr("pickcopy.output.shutil.which", lambda name: f"/usr/bin/{name}")

    assert find_clipboard_command() == CLIPBOARD_CANDIDATES[0]
    assert [c[0] for c in CLIPBOARD_CANDIDATES] == [
        "pbcopy",
        "wl-copy",
        "xclip",
        "xsel",
        "clip.exe",
    ]
