"""Run log for a single orchestration run.

The run log is an append-only text file holding timestamped section banners
and the combined output of every external command. Everything written to it
is mirrored to the console.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from types import TracebackType
from typing import TextIO

from rich.console import Console

logger = logging.getLogger(__name__)


def format_timestamp(moment: datetime | None = None) -> str:
    """Format a moment as local time with UTC offset.

    Args:
        moment: Time to format; defaults to now.

    Returns:
        String like ``2024-03-01 12:00:00+01:00``.
    """
    if moment is None:
        moment = datetime.now()
    return moment.astimezone().isoformat(sep=" ", timespec="seconds")


class RunLog:
    """Log sink shared by every step of a run.

    The file is not touched until :meth:`start` is called, so runs rejected
    during argument validation leave no log behind.
    """

    def __init__(self, path: Path, console: Console | None = None) -> None:
        self.path = path
        self.console = console or Console()
        self._file: TextIO | None = None

    @property
    def is_open(self) -> bool:
        return self._file is not None

    def start(self, moment: datetime | None = None) -> None:
        """Create (or truncate) the log file and write the start banner."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._file = self.path.open("w", encoding="utf-8")
        logger.debug("Run log: %s", self.path)
        self.log(f"--- Start: {format_timestamp(moment)} ---")

    def finish(self, moment: datetime | None = None) -> None:
        """Write the end banner and close the file."""
        self.log(f"--- End: {format_timestamp(moment)} ---")
        self.close()

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    def log(self, message: str) -> None:
        """Append a message line to the log and echo it to the console."""
        self.write_line(message)

    def write_line(self, line: str) -> None:
        """Append one line of text, with or without trailing newline."""
        if self._file is None:
            raise RuntimeError("Run log has not been started")
        text = line.rstrip("\n")
        self.console.print(
            text, markup=False, highlight=False, emoji=False, soft_wrap=True
        )
        self._file.write(text + "\n")
        self._file.flush()

    def __enter__(self) -> RunLog:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


__all__ = ["RunLog", "format_timestamp"]
