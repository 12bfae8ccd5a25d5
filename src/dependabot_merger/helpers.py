"""Shared helpers for dependabot_merger (semver classification, parsing, YAML).

Used by policy, merger, and cli modules.
"""

from __future__ import annotations

import re
from enum import Enum
from pathlib import Path
from typing import Any, NamedTuple

import yaml

SEMVER_PATTERN = re.compile(r"^\d+\.\d+\.\d+$")


class VersionFormatError(ValueError):
    """Raised when a version string is not a plain MAJOR.MINOR.PATCH triple."""


class BumpType(str, Enum):
    """Magnitude of a version change. Values match the labels used in config files."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"
    UNCHANGED = "unchanged"


class Version(NamedTuple):
    major: int
    minor: int
    patch: int


# --- Version ---


def parse_version(v: str) -> Version:
    """Parse "X.Y.Z" into a Version. Raises VersionFormatError on anything else (e.g. "1.2", "v1.2.3")."""
    if not isinstance(v, str) or not SEMVER_PATTERN.fullmatch(v):
        msg = "Invalid version format: " + str(v)
        raise VersionFormatError(msg)
    major, minor, patch = (int(part) for part in v.split("."))
    return Version(major, minor, patch)


def classify_bump(previous_version: str, next_version: str) -> BumpType:
    """Classify the change from previous_version to next_version.

    Returns the first component (major, minor, patch) that moved forward, or
    UNCHANGED. Only forward movement is measured: 2.0.0 -> 1.0.1 reports PATCH,
    because the major regression is never looked at once no positive delta is
    found there.
    """
    prev = parse_version(previous_version)
    nxt = parse_version(next_version)

    if nxt.major - prev.major > 0:
        return BumpType.MAJOR
    if nxt.minor - prev.minor > 0:
        return BumpType.MINOR
    if nxt.patch - prev.patch > 0:
        return BumpType.PATCH
    return BumpType.UNCHANGED


# --- YAML ---


def load_yaml_file(p: Path) -> Any:
    """Load YAML from path."""
    with p.open() as f:
        return yaml.safe_load(f)
