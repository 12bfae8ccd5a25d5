"""Work out which dependency versions a Dependabot commit changes.

The commit message says what Dependabot meant to bump; the lock file patch
says what actually moved. A change is only reported when both agree, so
transitive churn in the lock file is never mistaken for the bump itself.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from dependabot_merger.policy.dependency_manager import ProposedChange

COMMIT_MESSAGE_PATTERN = re.compile(r"(?:Bump|Updates) (.+) from (\d+\.\d+\.\d+) to (\d+\.\d+\.\d+)")


@dataclass(frozen=True)
class LockfileGrammar:
    """Lock file name plus the patterns for removed and added dependency lines."""

    filename: str
    removed: re.Pattern[str]
    added: re.Pattern[str]


BUNDLER = LockfileGrammar(
    filename="Gemfile.lock",
    removed=re.compile(r"^-\s+([a-z\-_]+) \(([0-9.]+)\)$", re.MULTILINE),
    added=re.compile(r"^\+\s+([a-z\-_]+) \(([0-9.]+)\)$", re.MULTILINE),
)


def mentioned_dependencies(commit_message: str) -> dict[str, tuple[str, str]]:
    """Map dependency name -> (from_version, to_version). A repeated name keeps its last mention."""
    mentioned: dict[str, tuple[str, str]] = {}
    for name, from_version, to_version in COMMIT_MESSAGE_PATTERN.findall(commit_message):
        mentioned[name.replace("`", "")] = (from_version, to_version)
    return mentioned


def extract_proposed_changes(
    commit_message: str,
    lockfile_diff: str,
    grammar: LockfileGrammar = BUNDLER,
) -> list[ProposedChange]:
    """ProposedChanges confirmed by both the commit message and the lock file patch."""
    mentioned = mentioned_dependencies(commit_message)

    removed: dict[str, str] = {}
    for name, version in grammar.removed.findall(lockfile_diff):
        if name in mentioned and mentioned[name][0] == version:
            removed[name] = version

    added: dict[str, str] = {}
    for name, version in grammar.added.findall(lockfile_diff):
        if name in mentioned and mentioned[name][1] == version:
            added[name] = version

    return [
        ProposedChange(name=name, previous_version=removed[name], next_version=added[name])
        for name in mentioned
        if name in removed and name in added
    ]
