"""
Severity normalization.

Maps every tool's severity vocabulary onto the fixed four-level scale
``critical / high / medium / low``. All functions are total and pure.
"""

from typing import Iterable, Optional, TypeVar

from scan_summary.models import RawIssue, ToolSource


DEFAULT_SEVERITY = "low"

# Dynamic-scan risk codes. 'info' is folded into 'low' for aggregation.
RISK_CODE_MAP: dict[str, str] = {
    "4": "critical",
    "3": "high",
    "2": "medium",
    "1": "low",
    "0": "info",
}

# Container scanners already report a word; only exact matches count.
SEVERITY_WORD_MAP: dict[str, str] = {
    "critical": "critical",
    "high": "high",
    "medium": "medium",
    "moderate": "medium",
    "low": "low",
}

_TAG_KEYWORDS = ("critical", "high", "medium", "low")

# Most severe first; used for sorting findings for display.
SEVERITY_ORDER: dict[str, int] = {
    "critical": 5,
    "high": 4,
    "medium": 3,
    "low": 2,
    "info": 1,
    "unknown": 0,
}


def extract_severity_token(issue: RawIssue) -> str:
    """Pick the severity token of an interchange issue.

    Sources are tried in order: level, security-severity score, rank,
    generic severity, then a severity keyword inside the tag list.
    The first non-empty one wins; with none present the token is 'low'.
    """
    for candidate in (issue.level, issue.security_severity, issue.rank, issue.severity):
        if candidate:
            return candidate
    for tag in issue.tags:
        if any(keyword in tag for keyword in _TAG_KEYWORDS):
            return tag
    return DEFAULT_SEVERITY


def map_severity(token: Optional[str]) -> str:
    """Map a free-form severity token onto the four canonical levels"""
    value = (token or "").lower()
    if value == "error" or "critical" in value:
        return "critical"
    if value == "warning" or "high" in value:
        return "high"
    if value in ("note", "moderate") or "medium" in value:
        return "medium"
    return "low"


def map_risk_code(code: object) -> str:
    """Map a 0-4 dynamic-scan risk code; anything unrecognised is 'low'.

    Returns 'info' for code 0; use :func:`fold_info` before counting.
    """
    key = str(code).strip() if code is not None else ""
    return RISK_CODE_MAP.get(key, DEFAULT_SEVERITY)


def fold_info(severity: str) -> str:
    """Fold the informational level into 'low'"""
    return "low" if severity == "info" else severity


def map_severity_word(word: Optional[str]) -> str:
    """Map a container-scan severity word, case-insensitively"""
    return SEVERITY_WORD_MAP.get((word or "").strip().lower(), DEFAULT_SEVERITY)


def normalize_severity(issue: RawIssue) -> str:
    """Return the canonical severity of *issue* according to its tool family"""
    if issue.source == ToolSource.DYNAMIC_SCAN:
        return fold_info(map_risk_code(issue.risk_code))
    if issue.source == ToolSource.CONTAINER_SCAN:
        return map_severity_word(issue.severity)
    return map_severity(extract_severity_token(issue))


# ---------------------------------------------------------------------------
# Ordering helpers
# ---------------------------------------------------------------------------


def severity_rank(severity: Optional[str]) -> int:
    """Sort weight of a severity label, unknown labels last"""
    return SEVERITY_ORDER.get((severity or "").lower(), 0)


T = TypeVar("T")


def sort_by_severity(items: Iterable[T]) -> list[T]:
    """Return *items* most severe first; equal severities keep their order.

    Items may be objects with a ``severity`` attribute or mappings with a
    ``severity`` key.
    """

    def _severity_of(item: T) -> Optional[str]:
        if isinstance(item, dict):
            return item.get("severity")
        return getattr(item, "severity", None)

    return sorted(items, key=lambda item: -severity_rank(_severity_of(item)))


__all__ = [
    "DEFAULT_SEVERITY",
    "RISK_CODE_MAP",
    "SEVERITY_ORDER",
    "SEVERITY_WORD_MAP",
    "extract_severity_token",
    "fold_info",
    "map_risk_code",
    "map_severity",
    "map_severity_word",
    "normalize_severity",
    "severity_rank",
    "sort_by_severity",
]
