"""Release identifier derivation.

This module handles:
- Refreshing the gluon submodule to its latest upstream revision
- Reading the exact tag the gluon tree is checked out at
- Composing the release identifier for a branch class

Release identifiers have the form ``<base_version>+<label><suffix>``:
stable and testing builds use the gluon tag and the plain suffix number,
experimental builds use a fixed base version and a dated suffix.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from datetime import date
from pathlib import Path
from typing import TYPE_CHECKING

from gluon_autobuild.errors import (
    E_COMMAND_NOT_FOUND,
    InvalidSuffixError,
    ReleaseTagError,
    SubmoduleUpdateError,
)
from gluon_autobuild.runner import stream_command
from gluon_autobuild.types import BranchClass, ReleaseInfo

if TYPE_CHECKING:
    from gluon_autobuild.runlog import RunLog

logger = logging.getLogger(__name__)

SUBMODULE_COMMANDS: tuple[tuple[str, ...], ...] = (
    ("git", "submodule", "init"),
    ("git", "submodule", "update", "--remote", "--init", "--force"),
)


def update_submodule(root_dir: Path, run_log: RunLog) -> None:
    """Check out the latest upstream gluon revision.

    Args:
        root_dir: Site repository root containing the submodule.
        run_log: Run log receiving git output.

    Raises:
        SubmoduleUpdateError: If a git command fails.
    """
    run_log.log("--- Init & Checkout Latest Gluon Master ---")

    for args in SUBMODULE_COMMANDS:
        cmd = list(args)
        try:
            exit_code = stream_command(cmd, run_log, cwd=root_dir)
        except OSError as e:
            logger.error("Failed to run git: %s", e)
            raise SubmoduleUpdateError(shlex.join(cmd), E_COMMAND_NOT_FOUND) from e
        if exit_code != 0:
            raise SubmoduleUpdateError(shlex.join(cmd), exit_code)


def read_exact_tag(gluon_dir: Path) -> str:
    """Return the tag the gluon tree is checked out at.

    Args:
        gluon_dir: Gluon checkout directory.

    Returns:
        Tag name exactly as reported by git.

    Raises:
        ReleaseTagError: If HEAD is not at a tag or git cannot be run.
    """
    cmd = ["git", f"--git-dir={gluon_dir / '.git'}", "describe", "--exact-match"]
    logger.debug("Executing: %s", shlex.join(cmd))

    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            check=True,
        )
    except subprocess.CalledProcessError as e:
        logger.debug("git describe failed: %s", (e.stderr or "").strip())
        raise ReleaseTagError() from e
    except OSError as e:
        logger.debug("Failed to run git: %s", e)
        raise ReleaseTagError() from e

    tag = result.stdout.strip()
    if not tag:
        raise ReleaseTagError()
    return tag


def strip_version_prefix(tag: str) -> str:
    """Strip a single leading ``v`` from a tag (``v2020.1`` -> ``2020.1``)."""
    return tag[1:] if tag.startswith("v") else tag


def validate_suffix_number(value: str) -> str:
    """Check a release suffix number given on the command line.

    The value is returned unchanged, so leading zeros survive in stable and
    testing release names (``-r 01`` gives ``+mwu01``).

    Raises:
        InvalidSuffixError: If value is not made of ASCII digits only.
    """
    if not (value.isascii() and value.isdigit()):
        raise InvalidSuffixError(value)
    return value


def experimental_suffix(number: int, today: date | None = None) -> str:
    """Compose the dated suffix of an experimental release.

    Args:
        number: Release suffix number, zero-padded to two digits.
        today: Build date; defaults to the current local date.

    Returns:
        Suffix like ``~exp2024030101``.
    """
    if today is None:
        today = date.today()
    return f"~exp{today:%Y%m%d}{number:02d}"


def compute_release(
    branch: BranchClass,
    number: str,
    gluon_dir: Path,
    experimental_base_version: str,
    label: str = "mwu",
    today: date | None = None,
) -> ReleaseInfo:
    """Derive the release identifier for a run.

    Args:
        branch: Branch class being built.
        number: Release suffix number as given on the command line; used
            verbatim for stable and testing.
        gluon_dir: Gluon checkout, consulted for stable and testing.
        experimental_base_version: Base version for experimental builds.
        label: Community label between ``+`` and the suffix.
        today: Build date for experimental suffixes.

    Returns:
        ReleaseInfo describing the release.

    Raises:
        ReleaseTagError: If a non-experimental build is not at an exact tag.
    """
    if branch.is_experimental:
        base_version = experimental_base_version
        suffix = experimental_suffix(int(number), today)
    else:
        base_version = strip_version_prefix(read_exact_tag(gluon_dir))
        suffix = number

    release = ReleaseInfo(
        branch=branch,
        base_version=base_version,
        suffix=suffix,
        label=label,
    )
    logger.info("Release: %s (%s)", release.name, branch.value)
    return release


__all__ = [
    "SUBMODULE_COMMANDS",
    "compute_release",
    "experimental_suffix",
    "read_exact_tag",
    "strip_version_prefix",
    "update_submodule",
    "validate_suffix_number",
]
