"""Documentation requirement rules.

Maps "gate" paths (user-facing code) to the documentation files that should
change alongside them. Gate paths ending in ``/`` are directory prefixes;
anything else must match a changed path exactly.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

DOCS_ROOT = "docs/"


@dataclass(frozen=True)
class RuleTable:
    """Immutable gate path -> suggested documentation mapping."""

    rules: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    docs_root: str = DOCS_ROOT

    def __post_init__(self) -> None:
        frozen = {gate: tuple(suggestions) for gate, suggestions in self.rules.items()}
        object.__setattr__(self, "rules", MappingProxyType(frozen))

    def __hash__(self) -> int:
        return hash((tuple(self.rules.items()), self.docs_root))

    @property
    def gate_paths(self) -> tuple[str, ...]:
        return tuple(self.rules)

    def matching_gates(self, path: str) -> list[str]:
        """Return gate paths that ``path`` falls under, in table order."""
        return [gate for gate in self.rules if gate_matches(gate, path)]

    def is_docs_path(self, path: str) -> bool:
        return path.startswith(self.docs_root)


DEFAULT_RULES = RuleTable(
    rules={
        "src/cli/": ("docs/user-guide/cli-usage.md",),
        "src/index.ts": ("docs/user-guide/", "docs/architecture/overview.md"),
        "bin/": ("docs/user-guide/installation.md",),
        "src/core/": ("docs/architecture/overview.md",),
    },
)


@dataclass(frozen=True)
class RequirementResult:
    """Outcome of checking changed paths against a rule table."""

    required: bool
    reason: str
    affected_paths: tuple[str, ...] = ()
    suggestions: tuple[str, ...] = ()


NOT_REQUIRED_REASON = "No user-facing code changes detected"


def gate_matches(gate: str, path: str) -> bool:
    if gate.endswith("/"):
        return path.startswith(gate)
    return path == gate


def _collect(changed_paths: Iterable[str], rules: RuleTable) -> tuple[list[str], list[str]]:
    affected: list[str] = []
    suggestions: list[str] = []
    for path in changed_paths:
        for gate in rules.matching_gates(path):
            if gate in affected:
                continue
            affected.append(gate)
            for suggestion in rules.rules[gate]:
                if suggestion not in suggestions:
                    suggestions.append(suggestion)
    return affected, suggestions


def requires_docs_update(
    changed_paths: Iterable[str],
    rules: RuleTable = DEFAULT_RULES,
) -> RequirementResult:
    """Check whether changed paths touch user-facing code.

    Args:
        changed_paths: Repository-relative POSIX paths
        rules: Gate table to match against

    Returns:
        RequirementResult; ``affected_paths`` and ``suggestions`` are empty
        when no gate matched
    """
    affected, suggestions = _collect(changed_paths, rules)
    if not affected:
        return RequirementResult(required=False, reason=NOT_REQUIRED_REASON)

    # Reason lists gates in table order, independent of which path hit first.
    ordered = [gate for gate in rules.gate_paths if gate in affected]
    return RequirementResult(
        required=True,
        reason=f"Changes detected in: {', '.join(ordered)}",
        affected_paths=tuple(affected),
        suggestions=tuple(suggestions),
    )


def has_docs_changes(changed_paths: Iterable[str], rules: RuleTable = DEFAULT_RULES) -> bool:
    """Return True if any changed path lives under the docs root."""
    return any(rules.is_docs_path(path) for path in changed_paths)


def suggest_docs_to_update(changed_paths: Iterable[str], rules: RuleTable = DEFAULT_RULES) -> list[str]:
    """Return deduplicated documentation suggestions for the changed paths."""
    _, suggestions = _collect(changed_paths, rules)
    return suggestions
