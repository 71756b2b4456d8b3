"""Thin CLI wrapper for gluon_autobuild.

This module provides the command-line interface using Typer.
All business logic is delegated to core modules.
"""

import logging
import sys
from typing import Annotated

import click
import typer
from rich.console import Console
from rich.logging import RichHandler

from gluon_autobuild import __version__
from gluon_autobuild.config import get_settings, print_settings_json
from gluon_autobuild.errors import (
    E_ILLEGAL_ARGS,
    AutobuildError,
    InvalidBranchError,
    InvalidSuffixError,
)
from gluon_autobuild.orchestrator import run_release
from gluon_autobuild.release import validate_suffix_number
from gluon_autobuild.runlog import RunLog
from gluon_autobuild.types import BranchClass

app = typer.Typer(
    name="gluon-autobuild",
    help="Autobuild script for Freifunk MWU Gluon firmware.",
    context_settings={"help_option_names": ["-h", "--help"]},
    add_completion=False,
)
console = Console()
err_console = Console(stderr=True)


def configure_logging(level: str) -> None:
    """Route library logging through rich at the given level."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"gluon-autobuild version {__version__}")
        raise typer.Exit()


def show_config_callback(value: bool) -> None:
    """Print effective settings as JSON and exit."""
    if value:
        console.print(
            print_settings_json(get_settings()), markup=False, soft_wrap=True
        )
        raise typer.Exit()


@app.command(
    epilog="Use the separator -- to pass options directly to build.sh",
)
def main(
    ctx: typer.Context,
    branch: Annotated[
        str | None,
        typer.Option(
            "--branch",
            "-b",
            help="Firmware branch name: stable | testing | experimental",
            show_default=False,
        ),
    ] = None,
    clean: Annotated[
        bool,
        typer.Option("--clean", "-c", help="Run dirclean"),
    ] = False,
    debug: Annotated[
        bool,
        typer.Option("--debug", "-d", help="Enable debug output"),
    ] = False,
    release: Annotated[
        str,
        typer.Option("--release", "-r", help="Release suffix number"),
    ] = "1",
    sites: Annotated[
        str | None,
        typer.Option(
            "--sites",
            "-s",
            help="Gluon sites to build, space separated (default from settings)",
            show_default=False,
        ),
    ] = None,
    update: Annotated[
        bool,
        typer.Option(
            "--update",
            "-u",
            help="Update Gluon to latest origin/master (experimental only)",
        ),
    ] = False,
    build_args: Annotated[
        list[str] | None,
        typer.Argument(help="Options passed directly to build.sh", show_default=False),
    ] = None,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    show_config: Annotated[
        bool | None,
        typer.Option(
            "--show-config",
            help="Show effective configuration as JSON and exit",
            callback=show_config_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Autobuild script for Freifunk MWU Gluon firmware.

    Builds, signs and deploys a release of every site with build.sh.
    """
    try:
        branch_class = BranchClass.parse(branch)
        validate_suffix_number(release)
    except (InvalidBranchError, InvalidSuffixError) as e:
        console.print(e.message, markup=False)
        console.print(ctx.get_help(), markup=False)
        raise typer.Exit(code=e.exit_code) from None

    settings = get_settings()
    configure_logging("DEBUG" if debug else settings.log_level)

    site_list = sites.split() if sites is not None else settings.site_list
    run_log = RunLog(settings.resolved_log_file, console=console)

    try:
        run_release(
            settings,
            branch_class,
            run_log,
            sites=site_list,
            number=release,
            clean=clean,
            debug=debug,
            update=update,
            passthrough=build_args or [],
        )
    except AutobuildError as e:
        if not e.reported:
            err_console.print(e.message, style="red", markup=False, highlight=False)
        raise typer.Exit(code=e.exit_code) from None


def run() -> None:
    """Console script entry point.

    Command line usage errors exit with the wrapper's illegal-arguments
    code instead of Click's default.
    """
    try:
        exit_code = app(standalone_mode=False)
    except click.UsageError as e:
        e.show()
        sys.exit(E_ILLEGAL_ARGS)
    except click.ClickException as e:
        e.show()
        sys.exit(e.exit_code)
    except click.Abort:
        err_console.print("Aborted!", style="red")
        sys.exit(130)
    sys.exit(exit_code or 0)


__all__ = ["app", "configure_logging", "run"]
