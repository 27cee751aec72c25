"""
Best-effort vulnerability category classifier.

Every classification hint an issue carries (rule id, tags, kind, problem
category, CWE id) is a candidate. Each candidate is matched on its own
against ordered substring rules, so a single issue may contribute to
several categories: a finding tagged both ``sql-injection`` and
``CWE-89`` shows up under both names.
"""

from typing import Optional

from scan_summary.models import RawIssue

MIN_CANDIDATE_LENGTH = 2

# (category, any-of substrings), checked in order, first match wins.
CATEGORY_RULES: list[tuple[str, tuple[str, ...]]] = [
    ("SQL Injection", ("sql", "sqli")),
    ("XSS", ("xss", "cross-site")),
    ("Authentication/Authorization", ("auth", "access", "authorization")),
    ("Hardcoded Secrets", ("secret", "credential", "token", "hardcoded")),
    ("Injection", ("injection",)),
    ("CSRF", ("csrf", "cross-site-request")),
    ("Cryptography", ("crypto", "encryption")),
]

_GENERIC_MARKERS = ("security", "vulnerability")


def collect_candidates(issue: RawIssue) -> list[str]:
    """Gather category candidates in their fixed order"""
    candidates: list[str] = []
    if issue.rule_id:
        candidates.append(issue.rule_id)
    candidates.extend(issue.tags)
    for hint in (issue.kind, issue.problem_category, issue.cwe_id):
        if hint:
            candidates.append(hint)
    return candidates


def classify_candidate(
    candidate: str,
    rule_id: Optional[str] = None,
    min_length: int = MIN_CANDIDATE_LENGTH,
) -> Optional[str]:
    """Map one candidate to a category name, or None when it is too short"""
    key = candidate.lower()
    if len(key) < min_length:
        return None

    for category, needles in CATEGORY_RULES:
        if any(needle in key for needle in needles):
            return category
    if "path" in key and "traversal" in key:
        return "Path Traversal"
    if key.startswith("cwe"):
        return candidate.upper()
    if any(marker in key for marker in _GENERIC_MARKERS):
        # Generic marker: report the rule id instead
        return rule_id or candidate
    return candidate


def classify_issue(issue: RawIssue, min_length: int = MIN_CANDIDATE_LENGTH) -> list[str]:
    """Return one category per accepted candidate, duplicates kept"""
    categories = []
    for candidate in collect_candidates(issue):
        category = classify_candidate(candidate, issue.rule_id, min_length)
        if category is not None:
            categories.append(category)
    return categories


__all__ = [
    "CATEGORY_RULES",
    "MIN_CANDIDATE_LENGTH",
    "classify_candidate",
    "classify_issue",
    "collect_candidates",
]
