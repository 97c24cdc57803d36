"""Changed-file retrieval and base branch detection."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from docgate.git.exec import ExecError, display_text, run_git

logger = logging.getLogger(__name__)

FALLBACK_BASE_BRANCHES: tuple[str, ...] = ("origin/main", "origin/master", "main", "master")


class BaseBranchError(RuntimeError):
    """Raised when no base branch can be inferred for the working tree."""


class GitDiffError(RuntimeError):
    """Raised when the changed-file list cannot be retrieved."""


class ChangeStatus(str, Enum):
    """Per-file change status reported by git."""

    ADDED = "A"
    MODIFIED = "M"
    DELETED = "D"
    RENAMED = "R"


@dataclass(frozen=True)
class FileChange:
    """Single changed path, repository-relative and POSIX-normalized."""

    path: str
    status: ChangeStatus
    old_path: str | None = None


@dataclass(frozen=True)
class DiffStats:
    added: int = 0
    modified: int = 0
    deleted: int = 0


@dataclass(frozen=True)
class Diff:
    """Changed files between a base branch and HEAD, in git report order."""

    files: tuple[FileChange, ...] = ()
    stats: DiffStats = field(default_factory=DiffStats)

    @property
    def paths(self) -> list[str]:
        return [change.path for change in self.files]

    @classmethod
    def from_changes(cls, changes: list[FileChange]) -> Diff:
        """Build a diff and its stats; renames count as modifications."""
        added = sum(1 for c in changes if c.status is ChangeStatus.ADDED)
        deleted = sum(1 for c in changes if c.status is ChangeStatus.DELETED)
        modified = len(changes) - added - deleted
        return cls(
            files=tuple(changes),
            stats=DiffStats(added=added, modified=modified, deleted=deleted),
        )


# git --name-status letters folded onto ChangeStatus. Copies are new files.
_STATUS_LETTERS: dict[str, ChangeStatus] = {
    "A": ChangeStatus.ADDED,
    "C": ChangeStatus.ADDED,
    "M": ChangeStatus.MODIFIED,
    "T": ChangeStatus.MODIFIED,
    "D": ChangeStatus.DELETED,
    "R": ChangeStatus.RENAMED,
}


def _ref_exists(repo_root: Path, ref: str) -> bool:
    verified = run_git(["rev-parse", "--verify", "--quiet", f"{ref}^{{commit}}"], repo_root=repo_root, check=False)
    return verified.ok


def detect_base_branch(repo_root: Path) -> str:
    """Infer the branch the current work should be compared against.

    Order of preference:
    1. ``GITHUB_BASE_REF`` (pull request builds), as ``origin/<ref>`` when fetched
    2. ``origin/HEAD`` symbolic ref
    3. First existing of ``origin/main``, ``origin/master``, ``main``, ``master``

    Raises:
        BaseBranchError: If none of the above resolves
    """
    resolved = repo_root.resolve()
    try:
        inside = run_git(["rev-parse", "--is-inside-work-tree"], repo_root=resolved, check=False)
    except OSError as exc:
        raise BaseBranchError(f"Could not detect base branch: git is not available ({exc}).") from exc

    if inside.returncode != 0 or inside.stdout.strip() != "true":
        raise BaseBranchError(f"Could not detect base branch: {resolved} is not a git work tree.")

    ci_ref = os.getenv("GITHUB_BASE_REF", "").strip()
    if ci_ref:
        remote_ref = f"origin/{ci_ref}"
        if _ref_exists(resolved, remote_ref):
            logger.debug("base branch from GITHUB_BASE_REF: %s", remote_ref)
            return remote_ref
        logger.debug("base branch from GITHUB_BASE_REF (no remote ref): %s", ci_ref)
        return ci_ref

    origin_head = run_git(
        ["symbolic-ref", "--quiet", "--short", "refs/remotes/origin/HEAD"],
        repo_root=resolved,
        check=False,
    )
    branch = origin_head.stdout.strip()
    if origin_head.returncode == 0 and branch:
        logger.debug("base branch from origin/HEAD: %s", branch)
        return branch

    for candidate in FALLBACK_BASE_BRANCHES:
        if _ref_exists(resolved, candidate):
            logger.debug("base branch from fallback list: %s", candidate)
            return candidate

    raise BaseBranchError(
        "Could not detect base branch: no origin/HEAD and none of "
        f"{', '.join(FALLBACK_BASE_BRANCHES)} exist (shallow clone or missing remote?)."
    )


def parse_name_status(output: str) -> list[FileChange]:
    """Parse NUL-delimited ``git diff --name-status -z`` output."""
    tokens = output.split("\0")
    # git terminates the last record with NUL as well.
    if tokens and tokens[-1] == "":
        tokens.pop()

    changes: list[FileChange] = []
    i = 0

    def take_path(code: str) -> str:
        nonlocal i
        if i >= len(tokens) or not tokens[i]:
            raise GitDiffError(f"Truncated entry in git output: {code!r}")
        path = Path(tokens[i]).as_posix()
        i += 1
        return path

    while i < len(tokens):
        code = tokens[i].strip()
        i += 1
        if not code:
            continue
        letter = code[0]
        status = _STATUS_LETTERS.get(letter, ChangeStatus.MODIFIED)
        if letter in ("R", "C"):
            old_path = take_path(code)
            new_path = take_path(code)
            changes.append(
                FileChange(
                    path=new_path,
                    status=status,
                    old_path=old_path if letter == "R" else None,
                )
            )
            continue
        changes.append(FileChange(path=take_path(code), status=status))
    return changes


def get_changed_files(base_branch: str, repo_root: Path) -> Diff:
    """Return files changed on HEAD since it diverged from ``base_branch``.

    Raises:
        GitDiffError: If git is unavailable or the comparison fails
    """
    resolved = repo_root.resolve()
    try:
        result = run_git(
            ["diff", "--name-status", "-M", "-z", f"{base_branch}...HEAD"],
            repo_root=resolved,
            check=True,
        )
    except ExecError as exc:
        detail = display_text(exc.result.stderr.strip()) or str(exc)
        raise GitDiffError(f"Failed to diff {base_branch}...HEAD: {detail}") from exc
    except OSError as exc:
        raise GitDiffError(f"git is not available: {exc}") from exc

    diff = Diff.from_changes(parse_name_status(result.stdout))
    logger.debug(
        "diff %s...HEAD: %d file(s) (+%d ~%d -%d)",
        base_branch,
        len(diff.files),
        diff.stats.added,
        diff.stats.modified,
        diff.stats.deleted,
    )
    return diff


@dataclass(frozen=True)
class GitDiffProvider:
    """Diff provider bound to one repository."""

    repo_root: Path

    def detect_base_branch(self) -> str:
        return detect_base_branch(self.repo_root)

    def get_changed_files(self, base_branch: str) -> Diff:
        return get_changed_files(base_branch, self.repo_root)
