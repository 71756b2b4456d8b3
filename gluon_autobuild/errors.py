"""Error definitions for gluon_autobuild.

Every failure is fatal to the run. Each exception carries a stable code for
programmatic handling and the process exit code the CLI terminates with.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gluon_autobuild.runner import BuildRequest

# Exit codes of the wrapper itself
E_ILLEGAL_ARGS = 126
E_ILLEGAL_TAG = 127
# Reserved: enforced by build.sh when the output directory is not empty
E_DIR_NOT_EMPTY = 128

# Exit code used when a command cannot be started at all
E_COMMAND_NOT_FOUND = 127

# Error code constants
ILLEGAL_ARGS = "illegal_args"
ILLEGAL_TAG = "illegal_tag"
SUBMODULE_UPDATE_FAILED = "submodule_update_failed"
PHASE_FAILED = "phase_failed"


class AutobuildError(Exception):
    """Base class for all orchestration failures."""

    def __init__(self, message: str, exit_code: int, code: str) -> None:
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code
        self.code = code
        # Set once the message has been written to the run log
        self.reported = False


class InvalidBranchError(AutobuildError):
    """Raised when the branch class is missing or not recognized."""

    def __init__(self, value: str | None) -> None:
        super().__init__(
            "Error: Invalid branch set.", exit_code=E_ILLEGAL_ARGS, code=ILLEGAL_ARGS
        )
        self.value = value


class ReleaseTagError(AutobuildError):
    """Raised when the Gluon tree is not checked out at an exact tag."""

    hint = (
        "Please use `git checkout <tagname>` to use an official gluon release\n"
        "or build it as experimental."
    )

    def __init__(
        self, message: str = "Error: The gluon tree is not checked out at a tag."
    ) -> None:
        super().__init__(message, exit_code=E_ILLEGAL_TAG, code=ILLEGAL_TAG)


class InvalidSuffixError(AutobuildError):
    """Raised when the release suffix is not a non-negative number."""

    def __init__(self, value: str) -> None:
        super().__init__(
            f"Error: Invalid release suffix '{value}'.",
            exit_code=E_ILLEGAL_ARGS,
            code=ILLEGAL_ARGS,
        )
        self.value = value


class SubmoduleUpdateError(AutobuildError):
    """Raised when refreshing the Gluon submodule fails."""

    def __init__(self, command: str, exit_code: int) -> None:
        super().__init__(
            f"Submodule update failed: {command} exited with {exit_code}",
            exit_code=exit_code,
            code=SUBMODULE_UPDATE_FAILED,
        )
        self.command = command


class PhaseFailedError(AutobuildError):
    """Raised when a build.sh invocation exits non-zero."""

    def __init__(
        self,
        request: BuildRequest,
        exit_code: int,
        detail: str | None = None,
    ) -> None:
        message = (
            f"Phase {request.phase.value} failed for site {request.site} "
            f"with exit code {exit_code}"
        )
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message, exit_code=exit_code, code=PHASE_FAILED)
        self.request = request


__all__ = [
    "E_COMMAND_NOT_FOUND",
    "E_DIR_NOT_EMPTY",
    "E_ILLEGAL_ARGS",
    "E_ILLEGAL_TAG",
    "AutobuildError",
    "InvalidBranchError",
    "InvalidSuffixError",
    "PhaseFailedError",
    "ReleaseTagError",
    "SubmoduleUpdateError",
]
