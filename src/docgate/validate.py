"""Documentation validation - turns a git diff into a single verdict.

No printing and no exit codes here; see ``docgate.report`` for presentation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar, Literal, Protocol

from docgate.git.diff import BaseBranchError, Diff, GitDiffProvider
from docgate.rules import DEFAULT_RULES, RequirementResult, RuleTable, has_docs_changes, requires_docs_update

logger = logging.getLogger(__name__)

NO_CHANGES_REASON = "No changes detected"
NOT_REQUIRED_SKIP_REASON = "Documentation update not required for these changes"

VerdictStatus = Literal["skipped", "passed", "warning", "error"]


class DiffProvider(Protocol):
    """Source of the base branch and the changed files against it."""

    def detect_base_branch(self) -> str: ...

    def get_changed_files(self, base_branch: str) -> Diff: ...


@dataclass(frozen=True)
class SkippedVerdict:
    """Validation could not or need not run."""

    status: ClassVar[VerdictStatus] = "skipped"

    reason: str
    branch: str | None = None
    diff: Diff | None = None
    requirement: RequirementResult | None = None


@dataclass(frozen=True)
class PassedVerdict:
    """User-facing code changed and documentation changed with it."""

    status: ClassVar[VerdictStatus] = "passed"

    branch: str
    diff: Diff
    requirement: RequirementResult


@dataclass(frozen=True)
class WarningVerdict:
    """User-facing code changed without any documentation change."""

    status: ClassVar[VerdictStatus] = "warning"

    branch: str
    diff: Diff
    requirement: RequirementResult


@dataclass(frozen=True)
class ErrorVerdict:
    """Validation failed unexpectedly."""

    status: ClassVar[VerdictStatus] = "error"

    cause: BaseException


Verdict = SkippedVerdict | PassedVerdict | WarningVerdict | ErrorVerdict


def validate_documentation(
    base_branch: str | None = None,
    *,
    repo_root: Path | None = None,
    rules: RuleTable = DEFAULT_RULES,
    provider: DiffProvider | None = None,
) -> Verdict:
    """Validate that user-facing changes ship with documentation updates.

    Args:
        base_branch: Branch to compare against (auto-detected when omitted)
        repo_root: Repository to inspect (default: current directory)
        rules: Gate table used for the requirement check
        provider: Diff source (default: git in ``repo_root``)

    Returns:
        Exactly one verdict. Failures are returned as ``ErrorVerdict``,
        never raised.
    """
    if provider is None:
        provider = GitDiffProvider(repo_root or Path.cwd())

    try:
        if base_branch:
            branch = base_branch
        else:
            try:
                branch = provider.detect_base_branch()
            except BaseBranchError as exc:
                logger.info("validation skipped: %s", exc)
                return SkippedVerdict(reason=str(exc))

        diff = provider.get_changed_files(branch)
        if not diff.files:
            return SkippedVerdict(reason=NO_CHANGES_REASON, branch=branch, diff=diff)

        changed_paths = diff.paths
        requirement = requires_docs_update(changed_paths, rules)
        if not requirement.required:
            return SkippedVerdict(
                reason=NOT_REQUIRED_SKIP_REASON,
                branch=branch,
                diff=diff,
                requirement=requirement,
            )

        if has_docs_changes(changed_paths, rules):
            logger.info("documentation updated alongside %s", ", ".join(requirement.affected_paths))
            return PassedVerdict(branch=branch, diff=diff, requirement=requirement)

        logger.info("documentation missing for %s", ", ".join(requirement.affected_paths))
        return WarningVerdict(branch=branch, diff=diff, requirement=requirement)
    except Exception as exc:
        logger.debug("validation failed", exc_info=True)
        return ErrorVerdict(cause=exc)
