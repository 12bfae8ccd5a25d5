"""Per-repository .dependabot_merger.yml: parsing and structure checks.

Expected format:
- api_version: must equal dependabot_merger.version.API_VERSION
- auto_merge: list of { dependency, allowed_semver_bumps: [major|minor|patch|unchanged, ...] }
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

import yaml

from dependabot_merger.helpers import BumpType
from dependabot_merger.version import API_VERSION

CONFIG_FILENAME = ".dependabot_merger.yml"


@dataclass(frozen=True)
class ConfigFound:
    data: Any


@dataclass(frozen=True)
class ConfigNotFound:
    pass


@dataclass(frozen=True)
class ConfigParseError:
    message: str = field(default="")


RemoteConfig = Union[ConfigFound, ConfigNotFound, ConfigParseError]


def parse_remote_config(text: str) -> RemoteConfig:
    """Parse raw YAML text into ConfigFound or ConfigParseError."""
    try:
        return ConfigFound(yaml.safe_load(text))
    except yaml.YAMLError as e:
        return ConfigParseError(str(e))


def structure_errors(data: Any) -> list[str]:
    """Problems with a parsed config document. Empty list means the structure is valid."""
    if not isinstance(data, dict):
        return ["config is not a mapping"]

    errors: list[str] = []
    if data.get("api_version") != API_VERSION:
        errors.append(f"api_version is {data.get('api_version')!r}, expected {API_VERSION!r}")

    entries = data.get("auto_merge")
    if not isinstance(entries, list):
        errors.append("auto_merge must be a list")
        return errors

    labels = {b.value for b in BumpType}
    for i, entry in enumerate(entries):
        if not isinstance(entry, dict) or not entry.get("dependency"):
            errors.append(f"auto_merge[{i}] has no dependency name")
            continue
        bumps = entry.get("allowed_semver_bumps")
        if not isinstance(bumps, list):
            errors.append(f"auto_merge[{i}] ({entry['dependency']}) allowed_semver_bumps must be a list")
            continue
        unknown = sorted(str(b) for b in bumps if str(b) not in labels)
        if unknown:
            errors.append(f"auto_merge[{i}] ({entry['dependency']}) has unknown bumps: {', '.join(unknown)}")
    return errors


def allow_entries(config: ConfigFound) -> list[tuple[str, list[str]]]:
    """(dependency, allowed_semver_bumps) pairs from a config with no structure_errors."""
    return [
        (str(entry["dependency"]), [str(b) for b in entry["allowed_semver_bumps"]])
        for entry in config.data["auto_merge"]
    ]
