"""Shared type definitions for gluon_autobuild.

This module contains enums and dataclasses shared across modules to avoid
circular imports.
"""

from dataclasses import dataclass
from enum import Enum

from gluon_autobuild.errors import InvalidBranchError


class BranchClass(str, Enum):
    """Firmware branch a release is built for."""

    STABLE = "stable"
    TESTING = "testing"
    EXPERIMENTAL = "experimental"

    @classmethod
    def parse(cls, value: str | None) -> "BranchClass":
        """Parse a branch name given on the command line.

        Args:
            value: Raw branch name, or None when the flag was omitted.

        Returns:
            Matching BranchClass.

        Raises:
            InvalidBranchError: If value is missing or unknown.
        """
        try:
            return cls(value)
        except ValueError:
            raise InvalidBranchError(value) from None

    @property
    def is_experimental(self) -> bool:
        return self is BranchClass.EXPERIMENTAL


class Phase(str, Enum):
    """Build lifecycle phase handled by build.sh.

    Declaration order is execution order.
    """

    DIRCLEAN = "dirclean"
    UPDATE = "update"
    CLEAN = "clean"
    BUILD = "build"
    SIGN = "sign"
    DEPLOY = "deploy"

    @property
    def forwards_branch(self) -> bool:
        """Whether build.sh needs the branch class for this phase."""
        return self in (Phase.SIGN, Phase.DEPLOY)

    @property
    def once_per_run(self) -> bool:
        """Whether the phase resets shared build-tree state."""
        return self is Phase.DIRCLEAN

    @classmethod
    def site_phases(cls) -> list["Phase"]:
        """Phases executed for every site, in order."""
        return [phase for phase in cls if not phase.once_per_run]


@dataclass(frozen=True)
class ReleaseInfo:
    """Derived release identifier.

    Attributes:
        branch: Branch class the release was computed for.
        base_version: Gluon tag (without leading ``v``) or experimental override.
        suffix: Suffix appended after the release label.
        label: Community label between ``+`` and the suffix.
    """

    branch: BranchClass
    base_version: str
    suffix: str
    label: str = "mwu"

    @property
    def name(self) -> str:
        """Full release identifier, e.g. ``2020.1+mwu1``."""
        return f"{self.base_version}+{self.label}{self.suffix}"

    def __str__(self) -> str:
        return self.name


__all__ = [
    "BranchClass",
    "Phase",
    "ReleaseInfo",
]
