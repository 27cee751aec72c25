"""
Location resolver.

Extracts the file identity of an issue and strips the per-run temporary
checkout prefix so hot spots stay comparable across scans: every scan
clones the repository into a freshly randomized directory such as
``/tmp/tmpc5si/``.
"""

import re
from functools import lru_cache
from typing import Iterable, Optional

from scan_summary.models import UNKNOWN_FILE, RawIssue

DEFAULT_TEMP_ROOTS: tuple[str, ...] = ("/tmp",)


@lru_cache(maxsize=32)
def _temp_prefix_pattern(temp_roots: tuple[str, ...]) -> re.Pattern:
    roots = "|".join(re.escape(root.rstrip("/")) for root in temp_roots if root.rstrip("/"))
    return re.compile(rf"^(?:{roots})/[^/]+/")


def strip_temp_prefix(path: str, temp_roots: Iterable[str] = DEFAULT_TEMP_ROOTS) -> str:
    """Remove ``<temp root>/<one opaque dir>/``, keeping the rest rooted at ``/``.

    >>> strip_temp_prefix("/tmp/tmpabc123/src/app.py")
    '/src/app.py'
    """
    roots = tuple(temp_roots)
    if not path or not any(root.rstrip("/") for root in roots):
        return path
    return _temp_prefix_pattern(roots).sub("/", path, count=1)


def resolve_file(issue: RawIssue, temp_roots: Iterable[str] = DEFAULT_TEMP_ROOTS) -> str:
    """File of the first location, cleaned; 'unknown' when there is none"""
    if not issue.locations or not issue.locations[0].file:
        return UNKNOWN_FILE
    return strip_temp_prefix(issue.locations[0].file, temp_roots)


def resolve_line_range(issue: RawIssue) -> tuple[Optional[int], Optional[int]]:
    """Start and end line of the first location"""
    if not issue.locations:
        return None, None
    first = issue.locations[0]
    return first.start_line, first.end_line


__all__ = ["DEFAULT_TEMP_ROOTS", "resolve_file", "resolve_line_range", "strip_temp_prefix"]
