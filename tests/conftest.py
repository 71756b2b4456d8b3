"""Shared fixtures for gluon_autobuild tests."""

import io
import os
import stat
from collections.abc import Callable
from pathlib import Path

import pytest
from rich.console import Console

from gluon_autobuild.config import Settings
from gluon_autobuild.runlog import RunLog


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Isolate tests from GLUON_AUTOBUILD_* variables and stray .env files."""
    for key in list(os.environ):
        if key.startswith("GLUON_AUTOBUILD_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def make_script(tmp_path: Path) -> Callable[[str], Path]:
    """Write an executable stand-in for build.sh.

    Every invocation appends its arguments to ``calls.txt`` next to the
    script before running the given body.
    """

    def _make(body: str = "") -> Path:
        script = tmp_path / "build.sh"
        calls = tmp_path / "calls.txt"
        script.write_text(
            "#!/bin/sh\n"
            f'echo "$*" >> "{calls}"\n'
            'echo "build.sh $*"\n'
            f"{body}\n"
            "exit 0\n"
        )
        script.chmod(script.stat().st_mode | stat.S_IXUSR)
        return script

    return _make


@pytest.fixture
def read_calls(tmp_path: Path) -> Callable[[], list[str]]:
    """Return the recorded build.sh invocations, one string per call."""

    def _read() -> list[str]:
        calls = tmp_path / "calls.txt"
        if not calls.exists():
            return []
        return calls.read_text().splitlines()

    return _read


@pytest.fixture
def settings(tmp_path: Path, make_script: Callable[[str], Path]) -> Settings:
    """Settings pointing at a temporary site tree with a passing build.sh."""
    script = make_script("")
    return Settings(
        root_dir=tmp_path,
        build_script=script,
        log_file=tmp_path / "output" / "build.log",
    )


@pytest.fixture
def console_buffer() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def run_log(tmp_path: Path, console_buffer: io.StringIO) -> RunLog:
    """Unstarted run log writing to a temp file and a captured console."""
    console = Console(file=console_buffer, width=200)
    return RunLog(tmp_path / "output" / "build.log", console=console)
