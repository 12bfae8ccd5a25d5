"""Shared CLI argument parsing: --flag value options, bare switches, positionals."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

FlagSpec = tuple[str, str, Any, Callable[[str], Any] | None]


def parse_flags(
    argv: list[str],
    *specs: FlagSpec,
    switches: tuple[str, ...] = (),
) -> tuple[dict[str, Any], list[str]]:
    """Parse argv in one pass.

    specs are (key, flag_str, default, converter), e.g.
    ("repos", "--repos", None, path_resolver); converter None keeps the string.
    switches are bare flags such as "--dry-run"; each becomes a bool under its
    name without dashes ("dry_run").
    Returns (dict of key -> value, positional args).
    """
    by_flag = {flag: (key, converter) for key, flag, _default, converter in specs}
    result: dict[str, Any] = {key: default() if callable(default) else default for key, _f, default, _c in specs}
    for switch in switches:
        result[switch_key(switch)] = False

    positionals: list[str] = []
    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg in switches:
            result[switch_key(arg)] = True
            i += 1
        elif arg in by_flag and i + 1 < len(argv):
            key, converter = by_flag[arg]
            result[key] = converter(argv[i + 1]) if converter else argv[i + 1]
            i += 2
        else:
            positionals.append(arg)
            i += 1
    return result, positionals


def switch_key(switch: str) -> str:
    return switch.lstrip("-").replace("-", "_")


def path_resolver(s: str) -> Path:
    """Resolve a path argument to absolute Path (e.g. --repos)."""
    return Path(s).resolve()
