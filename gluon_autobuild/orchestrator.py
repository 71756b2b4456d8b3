"""Release orchestration.

Drives one run: optional submodule refresh, release identifier derivation,
then every site through the build lifecycle. Sites and phases run strictly
sequentially because build.sh mutates a shared build tree. The first failure
aborts the run; nothing is retried or rolled back.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path

from gluon_autobuild.config import Settings
from gluon_autobuild.errors import ReleaseTagError
from gluon_autobuild.release import (
    compute_release,
    update_submodule,
    validate_suffix_number,
)
from gluon_autobuild.runlog import RunLog
from gluon_autobuild.runner import BuildRequest, PhaseResult, run_phase
from gluon_autobuild.types import BranchClass, Phase, ReleaseInfo

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    """Outcome of a completed run.

    Attributes:
        release: Release the sites were built for.
        sites: Sites in build order.
        phases: Results of every executed phase, in execution order.
        log_path: Path of the run log.
    """

    release: ReleaseInfo
    sites: list[str]
    log_path: Path
    phases: list[PhaseResult] = field(default_factory=list)


def plan_requests(
    release: ReleaseInfo,
    sites: Iterable[str],
    clean: bool = False,
    debug: bool = False,
    passthrough: Sequence[str] = (),
) -> list[BuildRequest]:
    """List every build.sh invocation of a run, in execution order.

    Dirclean resets the shared build tree, so it is scheduled once, for the
    first site only.

    Args:
        release: Release identifier.
        sites: Sites to build.
        clean: Schedule the dirclean phase.
        debug: Forward ``-d`` to build.sh.
        passthrough: Extra build.sh arguments.

    Returns:
        Ordered list of BuildRequest.
    """
    requests: list[BuildRequest] = []
    dirclean_pending = clean
    extra = tuple(passthrough)

    for site in sites:
        phases = Phase.site_phases()
        if dirclean_pending:
            phases.insert(0, Phase.DIRCLEAN)
            dirclean_pending = False

        requests.extend(
            BuildRequest(
                site=site,
                release=release.name,
                branch=release.branch,
                phase=phase,
                debug=debug,
                passthrough=extra,
            )
            for phase in phases
        )

    return requests


def run_release(
    settings: Settings,
    branch: BranchClass,
    run_log: RunLog,
    sites: Sequence[str] | None = None,
    number: str = "1",
    clean: bool = False,
    debug: bool = False,
    update: bool = False,
    passthrough: Sequence[str] = (),
    today: date | None = None,
) -> RunResult:
    """Build, sign and deploy a release for every site.

    Args:
        settings: Effective settings (paths, defaults, naming).
        branch: Validated branch class.
        run_log: Unstarted run log; started here and closed on return.
        sites: Sites to build; defaults to ``settings.site_list``.
        number: Release suffix number, kept verbatim for stable and testing.
        clean: Run dirclean before the first site.
        debug: Forward ``-d`` to build.sh.
        update: Refresh the gluon submodule first (experimental only).
        passthrough: Extra arguments forwarded to every build.sh call.
        today: Build date for experimental suffixes.

    Returns:
        RunResult describing the completed run.

    Raises:
        InvalidSuffixError: If number is not a non-negative integer; raised
            before the run log is touched.
        SubmoduleUpdateError: If the submodule refresh fails.
        ReleaseTagError: If a non-experimental build is not at an exact tag.
        PhaseFailedError: On the first failing build.sh invocation.
    """
    site_list = list(sites) if sites is not None else settings.site_list
    script = settings.resolved_build_script

    validate_suffix_number(number)

    run_log.start()
    try:
        if update and branch.is_experimental:
            update_submodule(settings.root_dir, run_log)
        elif update:
            logger.warning("Ignoring submodule update for %s builds", branch.value)

        try:
            release = compute_release(
                branch,
                number,
                gluon_dir=settings.resolved_gluon_dir,
                experimental_base_version=settings.experimental_base_version,
                label=settings.release_label,
                today=today,
            )
        except ReleaseTagError as e:
            run_log.log(e.message)
            run_log.log(e.hint)
            e.reported = True
            raise

        result = RunResult(
            release=release,
            sites=site_list,
            log_path=run_log.path,
        )
        requests = plan_requests(
            release, site_list, clean=clean, debug=debug, passthrough=passthrough
        )

        current_site: str | None = None
        for request in requests:
            if request.site != current_site:
                current_site = request.site
                run_log.log(
                    f"--- Building Firmware for {request.site} / "
                    f"{release.name} ({branch.value}) ---"
                )
            result.phases.append(
                run_phase(request, script, run_log, cwd=settings.root_dir)
            )

        run_log.finish()
        return result
    finally:
        run_log.close()


__all__ = ["RunResult", "plan_requests", "run_release"]
