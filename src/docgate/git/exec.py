"""Read-only git runner used by the diff provider."""

from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

# Filenames are bytes; undecodable ones round-trip as lone surrogates.
OUTPUT_ENCODING = "utf-8"
OUTPUT_ERRORS = "surrogateescape"


@dataclass(frozen=True)
class ExecResult:
    """Captured git invocation."""

    argv: tuple[str, ...]
    cwd: Path
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class ExecError(RuntimeError):
    """Raised when git exits non-zero in check mode."""

    def __init__(self, result: ExecResult):
        rendered = " ".join(result.argv)
        detail = display_text((result.stderr or result.stdout).strip())
        super().__init__(f"command failed ({result.returncode}): {rendered}\n{detail}")
        self.result = result


def decode_output(raw: bytes) -> str:
    return raw.decode(OUTPUT_ENCODING, errors=OUTPUT_ERRORS)


def display_text(text: str) -> str:
    """Make surrogate-escaped text printable by swapping bad bytes for U+FFFD."""
    return text.encode(OUTPUT_ENCODING, errors=OUTPUT_ERRORS).decode(OUTPUT_ENCODING, errors="replace")


def run_git(
    args: list[str],
    *,
    repo_root: Path,
    check: bool = True,
) -> ExecResult:
    """Run a read-only git command in ``repo_root``.

    Raises:
        ExecError: If ``check`` is set and git exits non-zero
        OSError: If git cannot be started
    """
    argv = ["git", *args]
    # Inspection only; never take the index lock another CI step may hold.
    env = {**os.environ, "GIT_OPTIONAL_LOCKS": "0"}
    logger.debug("git %s (cwd=%s)", " ".join(args), repo_root)
    completed = subprocess.run(argv, cwd=repo_root, env=env, capture_output=True, check=False)
    result = ExecResult(
        argv=tuple(argv),
        cwd=repo_root.resolve(),
        returncode=completed.returncode,
        stdout=decode_output(completed.stdout),
        stderr=decode_output(completed.stderr),
    )
    if check and not result.ok:
        raise ExecError(result)
    return result
