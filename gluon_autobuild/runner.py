"""Phase runner for executing build.sh invocations.

This module handles:
- Composing build.sh arguments for a (site, phase) pair
- Executing commands with stdout/stderr merged
- Streaming command output to the run log and console
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

from gluon_autobuild.errors import E_COMMAND_NOT_FOUND, PhaseFailedError
from gluon_autobuild.types import BranchClass, Phase

if TYPE_CHECKING:
    from gluon_autobuild.runlog import RunLog

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildRequest:
    """A single build.sh invocation.

    Attributes:
        site: Site the phase runs for.
        release: Release identifier passed with ``-r``.
        branch: Branch class, forwarded for sign and deploy only.
        phase: Lifecycle phase passed with ``-c``.
        debug: Forward ``-d`` to build.sh.
        passthrough: Extra arguments forwarded verbatim.
    """

    site: str
    release: str
    branch: BranchClass
    phase: Phase
    debug: bool = False
    passthrough: tuple[str, ...] = field(default_factory=tuple)

    def to_command(self, script: Path) -> list[str]:
        """Compose the build.sh argument vector.

        Args:
            script: Path to build.sh.

        Returns:
            Command as list of strings suitable for subprocess.
        """
        cmd = [str(script), "-s", self.site, "-r", self.release]

        if self.phase.forwards_branch:
            cmd.extend(["-b", self.branch.value])

        if self.debug:
            cmd.append("-d")

        cmd.extend(self.passthrough)
        cmd.extend(["-c", self.phase.value])
        return cmd


@dataclass
class PhaseResult:
    """Result of a successful phase execution.

    Attributes:
        request: The executed request.
        command: Shell-quoted command line.
        exit_code: Process exit code.
        started_at: Start time.
        finished_at: Finish time.
    """

    request: BuildRequest
    command: str
    exit_code: int
    started_at: datetime
    finished_at: datetime

    @property
    def duration(self) -> float:
        return (self.finished_at - self.started_at).total_seconds()


def stream_command(
    cmd: list[str],
    run_log: RunLog,
    cwd: Path | None = None,
) -> int:
    """Run a command, streaming its combined output into the run log.

    Args:
        cmd: Command to execute.
        run_log: Sink receiving every output line.
        cwd: Working directory.

    Returns:
        Process exit code. Termination by signal N is reported as 128 + N,
        like the shell does.

    Raises:
        OSError: If the command cannot be started.
    """
    logger.debug("Executing: %s", shlex.join(cmd))
    logger.debug("Working directory: %s", cwd or Path.cwd())

    with subprocess.Popen(
        cmd,
        cwd=cwd,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
        errors="replace",
        bufsize=1,
    ) as proc:
        assert proc.stdout is not None
        for line in proc.stdout:
            run_log.write_line(line)
        exit_code = proc.wait()

    if exit_code < 0:
        exit_code = 128 - exit_code
    return exit_code


def run_phase(
    request: BuildRequest,
    script: Path,
    run_log: RunLog,
    cwd: Path | None = None,
) -> PhaseResult:
    """Execute one phase of the build lifecycle.

    Args:
        request: Phase invocation to run.
        script: Path to build.sh.
        run_log: Run log receiving the banner and command output.
        cwd: Working directory for build.sh.

    Returns:
        PhaseResult for the successful invocation.

    Raises:
        PhaseFailedError: If build.sh exits non-zero or cannot be started.
    """
    cmd = request.to_command(script)
    cmd_str = shlex.join(cmd)

    run_log.log(
        f"--- Building Firmware for {request.site} / {request.phase.value} ---"
    )

    started_at = datetime.now(timezone.utc)
    try:
        exit_code = stream_command(cmd, run_log, cwd=cwd)
    except OSError as e:
        error_message = f"Failed to execute {script}: {e}"
        run_log.log(error_message)
        raise PhaseFailedError(request, E_COMMAND_NOT_FOUND, detail=str(e)) from e
    finished_at = datetime.now(timezone.utc)

    if exit_code != 0:
        logger.error(
            "%s for %s failed with exit code %d",
            request.phase.value,
            request.site,
            exit_code,
        )
        raise PhaseFailedError(request, exit_code)

    result = PhaseResult(
        request=request,
        command=cmd_str,
        exit_code=exit_code,
        started_at=started_at,
        finished_at=finished_at,
    )
    logger.debug("Phase %s finished in %.1fs", request.phase.value, result.duration)
    return result


__all__ = [
    "BuildRequest",
    "PhaseResult",
    "run_phase",
    "stream_command",
]
