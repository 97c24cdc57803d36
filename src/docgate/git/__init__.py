"""Git access for docgate: base branch detection and changed files."""

from docgate.git.diff import (
    BaseBranchError,
    ChangeStatus,
    Diff,
    DiffStats,
    FileChange,
    GitDiffError,
    GitDiffProvider,
    detect_base_branch,
    get_changed_files,
)
from docgate.git.exec import ExecError, ExecResult, run_git

__all__ = [
    "BaseBranchError",
    "ChangeStatus",
    "Diff",
    "DiffStats",
    "ExecError",
    "ExecResult",
    "FileChange",
    "GitDiffError",
    "GitDiffProvider",
    "detect_base_branch",
    "get_changed_files",
    "run_git",
]
