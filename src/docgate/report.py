"""Console rendering and exit codes for validation verdicts."""

from __future__ import annotations

import os
from typing import Any

from rich.console import Console
from rich.markup import escape

from docgate.git.diff import ChangeStatus, Diff, FileChange
from docgate.git.exec import display_text
from docgate.rules import DEFAULT_RULES, RuleTable
from docgate.validate import (
    ErrorVerdict,
    PassedVerdict,
    SkippedVerdict,
    Verdict,
    WarningVerdict,
)

GUIDELINES_PATH = "docs/development/documentation.md"

_STATUS_MARKS: dict[ChangeStatus, tuple[str, str]] = {
    ChangeStatus.ADDED: ("+", "green"),
    ChangeStatus.MODIFIED: ("~", "yellow"),
    ChangeStatus.DELETED: ("-", "red"),
    ChangeStatus.RENAMED: (">", "blue"),
}


def color_enabled() -> bool:
    return os.getenv("DOCGATE_COLOR", "1") == "1"


def make_console(*, stderr: bool = False) -> Console:
    if color_enabled():
        return Console(stderr=stderr, highlight=False)
    return Console(stderr=stderr, highlight=False, no_color=True, emoji=False)


def _icon(symbol: str) -> str:
    return f"{symbol} " if color_enabled() else ""


def exit_code_for(verdict: Verdict) -> int:
    """0 for skipped/passed/warning (warnings are advisory), 1 for errors."""
    if isinstance(verdict, ErrorVerdict):
        return 1
    if isinstance(verdict, (SkippedVerdict, PassedVerdict, WarningVerdict)):
        return 0
    raise TypeError(f"Unknown verdict type: {type(verdict).__name__}")


def _print_file(console: Console, change: FileChange) -> None:
    mark, style = _STATUS_MARKS[change.status]
    if change.old_path:
        label = f"{escape(display_text(change.old_path))} -> {escape(display_text(change.path))}"
    else:
        label = escape(display_text(change.path))
    console.print(f"  [{style}]{mark}[/{style}] {label}")


def _print_branch(console: Console, branch: str | None) -> None:
    if not branch:
        return
    console.print(f"Base branch detected: [cyan]{escape(branch)}[/cyan]")
    console.print(f"Comparing: [cyan]{escape(branch)}...HEAD[/cyan]")
    console.print()


def _print_user_facing(console: Console, diff: Diff, rules: RuleTable) -> None:
    console.print("Changes detected in user-facing code:")
    for change in diff.files:
        if rules.matching_gates(change.path):
            _print_file(console, change)
    console.print()


def render_verdict(
    verdict: Verdict,
    console: Console | None = None,
    rules: RuleTable = DEFAULT_RULES,
) -> None:
    """Print a human-readable report for one verdict."""
    if console is None:
        console = make_console()

    console.print(f"{_icon('🔍')}Validating documentation updates...")
    console.print()

    if isinstance(verdict, ErrorVerdict):
        console.print(f"[bold red]{_icon('❌')}Error:[/bold red] {escape(str(verdict.cause) or type(verdict.cause).__name__)}")
        console.print()
        return

    if isinstance(verdict, SkippedVerdict):
        console.print(f"[yellow]{_icon('⚠️ ')}{escape(verdict.reason)}[/yellow]")
        _print_branch(console, verdict.branch)
        if verdict.diff is not None and verdict.diff.files:
            console.print("Changes detected:")
            for change in verdict.diff.files:
                _print_file(console, change)
            console.print()
        console.print("Validation skipped.")
        console.print()
        return

    if isinstance(verdict, PassedVerdict):
        _print_branch(console, verdict.branch)
        _print_user_facing(console, verdict.diff, rules)
        console.print(f"[bold green]{_icon('✅')}Documentation validation passed[/bold green]")
        console.print()
        console.print("Documentation updated:")
        for change in verdict.diff.files:
            if rules.is_docs_path(change.path):
                _print_file(console, change)
        console.print()
        console.print("All checks passed!")
        console.print()
        return

    if isinstance(verdict, WarningVerdict):
        _print_branch(console, verdict.branch)
        _print_user_facing(console, verdict.diff, rules)
        console.print(f"[bold yellow]{_icon('⚠️ ')}Documentation update recommended but not found[/bold yellow]")
        console.print()
        console.print(escape(verdict.requirement.reason))
        console.print("Documentation updated: [red]NO[/red]")
        console.print()
        if verdict.requirement.suggestions:
            console.print(f"[cyan]{_icon('💡')}Suggestions:[/cyan]")
            for suggestion in verdict.requirement.suggestions:
                console.print(f"  - Update {escape(suggestion)}")
            console.print()
        console.print("Consider updating the relevant documentation.")
        console.print(f"See {GUIDELINES_PATH} for guidelines.")
        console.print()
        return

    raise TypeError(f"Unknown verdict type: {type(verdict).__name__}")


def _diff_to_dict(diff: Diff | None) -> dict[str, Any] | None:
    if diff is None:
        return None
    return {
        "files": [
            {
                "path": display_text(c.path),
                "status": c.status.value,
                "old_path": display_text(c.old_path) if c.old_path else None,
            }
            for c in diff.files
        ],
        "stats": {
            "added": diff.stats.added,
            "modified": diff.stats.modified,
            "deleted": diff.stats.deleted,
        },
    }


def verdict_to_dict(verdict: Verdict) -> dict[str, Any]:
    """JSON-safe summary of a verdict."""
    if isinstance(verdict, ErrorVerdict):
        return {
            "status": verdict.status,
            "error": str(verdict.cause),
            "error_type": type(verdict.cause).__name__,
        }
    if not isinstance(verdict, (SkippedVerdict, PassedVerdict, WarningVerdict)):
        raise TypeError(f"Unknown verdict type: {type(verdict).__name__}")

    requirement = verdict.requirement
    payload: dict[str, Any] = {
        "status": verdict.status,
        "base_branch": verdict.branch,
        "diff": _diff_to_dict(verdict.diff),
        "requirement": None,
    }
    if requirement is not None:
        payload["requirement"] = {
            "required": requirement.required,
            "reason": requirement.reason,
            "affected_paths": list(requirement.affected_paths),
            "suggestions": list(requirement.suggestions),
        }
    if isinstance(verdict, SkippedVerdict):
        payload["skip_reason"] = verdict.reason
    else:
        payload["docs_updated"] = isinstance(verdict, PassedVerdict)
    return payload
