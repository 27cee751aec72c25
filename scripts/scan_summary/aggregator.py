"""
Finding normalization and aggregation.

Functions:
    normalize_issue: RawIssue -> NormalizedFinding
    normalize_issues: batch form of normalize_issue
    count_by_severity: Count findings by severity level
    count_by_source: Count findings by source tool family
    rank_hot_spots: Turn per-file counts into ranked hot spots
    aggregate: Fold findings into severity/category/file counts
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from scan_summary.categories import MIN_CANDIDATE_LENGTH, classify_issue
from scan_summary.locations import DEFAULT_TEMP_ROOTS, resolve_file, resolve_line_range
from scan_summary.models import SEVERITY_LEVELS, HotSpot, NormalizedFinding, RawIssue
from scan_summary.severity import normalize_severity

DEFAULT_HOT_SPOT_LIMIT = 5
UNCATEGORIZED = "Uncategorized"


@dataclass(frozen=True)
class Aggregation:
    """Counts folded from one scan's findings"""

    severity_counts: dict[str, int]
    category_counts: dict[str, int]
    hot_spots: tuple[HotSpot, ...]
    total: int


def _display_cwe(issue: RawIssue) -> Optional[str]:
    if issue.cwe_id:
        return issue.cwe_id
    for tag in issue.tags:
        if tag.upper().startswith("CWE"):
            return tag
    return None


def normalize_issue(
    issue: RawIssue,
    temp_roots: Iterable[str] = DEFAULT_TEMP_ROOTS,
    min_candidate_length: int = MIN_CANDIDATE_LENGTH,
) -> NormalizedFinding:
    """Derive the canonical finding for exactly one raw issue"""
    categories = tuple(classify_issue(issue, min_candidate_length))
    start_line, end_line = resolve_line_range(issue)
    return NormalizedFinding(
        severity=normalize_severity(issue),
        category=categories[0] if categories else (issue.rule_id or UNCATEGORIZED),
        file=resolve_file(issue, temp_roots),
        rule_id=issue.rule_id,
        categories=categories,
        source=issue.source,
        message=issue.message,
        start_line=start_line,
        end_line=end_line,
        cwe_id=_display_cwe(issue),
        fix=issue.fix,
        security_severity=issue.security_severity,
    )


def normalize_issues(
    issues: Iterable[RawIssue],
    temp_roots: Iterable[str] = DEFAULT_TEMP_ROOTS,
    min_candidate_length: int = MIN_CANDIDATE_LENGTH,
) -> list[NormalizedFinding]:
    roots = tuple(temp_roots)
    return [normalize_issue(issue, roots, min_candidate_length) for issue in issues]


def count_by_severity(findings: Iterable[NormalizedFinding]) -> dict[str, int]:
    """Count findings by severity level"""
    counts = {level: 0 for level in SEVERITY_LEVELS}
    for finding in findings:
        counts[finding.severity] += 1
    return counts


def count_by_source(findings: Iterable[NormalizedFinding]) -> dict[str, int]:
    """Count findings by source tool family"""
    counts: dict[str, int] = {}
    for finding in findings:
        source = finding.source.value
        counts[source] = counts.get(source, 0) + 1
    return counts


def rank_hot_spots(file_counts: dict[str, int], limit: int = DEFAULT_HOT_SPOT_LIMIT) -> tuple[HotSpot, ...]:
    """Top *limit* files by count; ties keep first-encounter order.

    ``sorted`` is stable and dicts keep insertion order, so equal counts
    stay in the order the files were first seen.
    """
    ordered = sorted(file_counts.items(), key=lambda item: item[1], reverse=True)
    return tuple(
        HotSpot(file=file, count=count, rank=index + 1)
        for index, (file, count) in enumerate(ordered[: max(limit, 0)])
    )


def aggregate(findings: Sequence[NormalizedFinding], hot_spot_limit: int = DEFAULT_HOT_SPOT_LIMIT) -> Aggregation:
    """Fold normalized findings into severity, category and per-file counts"""
    severity_counts = {level: 0 for level in SEVERITY_LEVELS}
    category_counts: dict[str, int] = {}
    file_counts: dict[str, int] = {}

    for finding in findings:
        severity_counts[finding.severity] += 1
        for category in finding.categories:
            category_counts[category] = category_counts.get(category, 0) + 1
        file_counts[finding.file] = file_counts.get(finding.file, 0) + 1

    return Aggregation(
        severity_counts=severity_counts,
        category_counts=category_counts,
        hot_spots=rank_hot_spots(file_counts, hot_spot_limit),
        total=sum(severity_counts.values()),
    )


__all__ = [
    "Aggregation",
    "DEFAULT_HOT_SPOT_LIMIT",
    "UNCATEGORIZED",
    "aggregate",
    "count_by_severity",
    "count_by_source",
    "normalize_issue",
    "normalize_issues",
    "rank_hot_spots",
]
