#!/usr/bin/env python3
"""
agent-environment Version Comparison
Semantic-version-ish parsing of tool `--version` banners
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

_SEMVER_RE = re.compile(r'(\d+)\.(\d+)\.(\d+)')


class Ordering(Enum):
    LESS = -1
    EQUAL = 0
    GREATER = 1


@dataclass(frozen=True, order=True)
class SemVer:
    """major.minor.patch; pre-release and build suffixes are never kept"""
    major: int = 0
    minor: int = 0
    patch: int = 0

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


def parse(text: Optional[str]) -> Optional[SemVer]:
    """
    Extract the first major.minor.patch found anywhere in text.

    Banners differ per tool ("uv 0.7.1 (abc 2024-01-01)", "v20.11.0",
    "fnm 1.38.1"), so no anchoring is done.

    Args:
        text: Raw output of a version command

    Returns:
        SemVer, or None when the text holds no x.y.z pattern
    """
    if not text:
        return None
    match = _SEMVER_RE.search(text)
    if not match:
        return None
    return SemVer(*(int(group) for group in match.groups()))


def _component(value: str) -> int:
    try:
        return max(0, int(value))
    except ValueError:
        return 0


def parse_loose(text: str) -> SemVer:
    """
    Tolerant parse for configured floors and pins ("20", "3.12", "v1.2.3-rc.1").

    Missing components default to 0 and a component that is not an integer
    counts as 0 for that position only.
    """
    text = text.strip().lstrip('vV')
    core = re.split(r'[-+]', text, maxsplit=1)[0]
    parts = core.split('.')
    values = [_component(part) for part in parts[:3]]
    while len(values) < 3:
        values.append(0)
    return SemVer(*values)


def compare(a: SemVer, b: SemVer) -> Ordering:
    """Total order on (major, minor, patch)"""
    if a < b:
        return Ordering.LESS
    if a > b:
        return Ordering.GREATER
    return Ordering.EQUAL


def at_least(version: SemVer, minimum: SemVer) -> bool:
    """True when version >= minimum (inclusive floor)"""
    return compare(version, minimum) != Ordering.LESS
