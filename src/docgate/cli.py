"""docgate CLI - check that user-facing changes ship with documentation."""

import json
import logging
from pathlib import Path

import typer
from rich.logging import RichHandler

from docgate import __version__
from docgate.report import exit_code_for, make_console, render_verdict, verdict_to_dict
from docgate.rules import DEFAULT_RULES
from docgate.validate import validate_documentation

cli = typer.Typer(
    name="docgate",
    help="Warn when user-facing code changes without documentation updates.",
    add_completion=False,
)


def _configure_logging(verbose: bool) -> None:
    handler = RichHandler(console=make_console(stderr=True), show_path=False, show_time=False)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[handler],
        force=True,
    )


def _version_option_callback(value: bool) -> None:
    """Handle eager --version option."""
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@cli.command()
def check(
    base: str | None = typer.Option(
        None,
        "--base",
        "-b",
        envvar="DOCGATE_BASE_BRANCH",
        help="Base branch to compare against (auto-detected when omitted)",
    ),
    repo: Path = typer.Option(
        Path("."),
        "--repo",
        help="Repository root to inspect",
        file_okay=False,
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Print the verdict as JSON instead of the console report",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log git invocations and detection decisions to stderr",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show docgate version and exit.",
        is_eager=True,
        callback=_version_option_callback,
    ),
) -> None:
    """
    Validate documentation updates for the current branch.

    Exit codes: 0 skipped/passed/warning, 1 error.
    """
    _ = version
    _configure_logging(verbose)

    verdict = validate_documentation(base, repo_root=repo, rules=DEFAULT_RULES)

    if json_output:
        typer.echo(json.dumps(verdict_to_dict(verdict), indent=2, sort_keys=True))
    else:
        render_verdict(verdict, console=make_console(), rules=DEFAULT_RULES)

    raise typer.Exit(exit_code_for(verdict))


def main() -> None:
    """Entry point for the installed ``docgate`` script."""
    cli()


if __name__ == "__main__":
    main()
