"""Path-based role permissions.

Patterns are plain paths with ``*`` wildcards:

- ``*`` alone matches every path
- a trailing ``/*`` matches the base path and anything below it
- any other ``*`` matches exactly one path segment
"""

import re
from collections.abc import Iterable, Mapping
from functools import lru_cache


@lru_cache(maxsize=256)
def _segment_regex(pattern: str) -> re.Pattern[str]:
    parts = (re.escape(part) for part in pattern.split("*"))
    return re.compile("^" + "[^/]*".join(parts) + "$")


def path_matches_pattern(path: str, pattern: str) -> bool:
    if path == pattern or pattern == "*":
        return True

    wildcards = pattern.count("*")
    if wildcards == 0:
        return False

    if wildcards == 1 and pattern.endswith("/*"):
        base = pattern[:-2]
        return path == base or path.startswith(base + "/")

    return _segment_regex(pattern).match(path) is not None


def has_permission(
    role: str,
    path: str,
    permissions: Mapping[str, Iterable[str]],
) -> bool:
    """Check whether ``role`` may access ``path``.

    With no permissions configured at all, everything is denied.
    """
    if not permissions:
        return False
    patterns = permissions.get(role)
    if not patterns:
        return False
    return any(path_matches_pattern(path, pattern) for pattern in patterns)


def is_whitelisted(path: str, whitelist: Iterable[str]) -> bool:
    """Check whether ``path`` is reachable without authentication."""
    return any(path_matches_pattern(path, pattern) for pattern in whitelist)
