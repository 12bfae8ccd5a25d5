"""Allowlist of dependency updates and the updates a single PR proposes."""

from __future__ import annotations

from dataclasses import dataclass

from dependabot_merger.helpers import classify_bump


@dataclass(frozen=True)
class AllowlistEntry:
    name: str
    allowed_semver_bumps: frozenset[str]


@dataclass(frozen=True)
class ProposedChange:
    name: str
    previous_version: str
    next_version: str


class DependencyManager:
    """Holds what a repository allows and what one PR proposes. Not shared across PRs."""

    def __init__(self) -> None:
        self.allowed_dependency_updates: dict[str, AllowlistEntry] = {}
        self.proposed_dependency_updates: list[ProposedChange] = []

    def allow_dependency_update(self, name: str, allowed_semver_bumps: list[str] | set[str]) -> None:
        """Register (or overwrite) the bump labels allowed for a dependency."""
        self.allowed_dependency_updates[name] = AllowlistEntry(
            name=name,
            allowed_semver_bumps=frozenset(str(bump) for bump in allowed_semver_bumps),
        )

    def propose_dependency_update(self, name: str, previous_version: str, next_version: str) -> None:
        self.proposed_dependency_updates.append(
            ProposedChange(name=name, previous_version=previous_version, next_version=next_version)
        )

    def all_proposed_dependencies_on_allowlist(self) -> bool:
        for proposed in self.proposed_dependency_updates:
            if proposed.name not in self.allowed_dependency_updates:
                return False
        return True

    def all_proposed_updates_semver_allowed(self) -> bool:
        """True if every allowlisted proposal is within its allowed bumps.

        Proposals for dependencies not on the allowlist are skipped here; that is
        reported by all_proposed_dependencies_on_allowlist. Raises
        VersionFormatError if a version cannot be classified.
        """
        for proposed in self.proposed_dependency_updates:
            entry = self.allowed_dependency_updates.get(proposed.name)
            if entry is None:
                continue

            update_type = classify_bump(proposed.previous_version, proposed.next_version)
            if update_type.value not in entry.allowed_semver_bumps:
                return False
        return True
