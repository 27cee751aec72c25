"""
Scan Summary Data Models.

Core dataclass definitions shared by every stage of the summary engine.

Classes:
    ToolSource: Scanner family a raw issue came from
    IssueLocation: One file/line reference inside a raw issue
    RawIssue: One entry from a scanner's native output
    NormalizedFinding: Canonical finding derived from exactly one RawIssue
    HotSpot: A file ranked by number of findings
    HistoryEntry: One historical security score snapshot
    AggregateSnapshot: The engine's output value
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class ToolSource(str, Enum):
    """Scanner families the engine understands"""

    SAST_INTERCHANGE = "sast-interchange"
    CONTAINER_SCAN = "container-scan"
    DYNAMIC_SCAN = "dynamic-scan"


SEVERITY_LEVELS: tuple[str, ...] = ("critical", "high", "medium", "low")

UNKNOWN_FILE = "unknown"
TREND_UNAVAILABLE = "N/A"


@dataclass(frozen=True)
class IssueLocation:
    """File path and line range of a single location reference"""

    file: Optional[str] = None
    start_line: Optional[int] = None
    end_line: Optional[int] = None


@dataclass(frozen=True)
class RawIssue:
    """One issue as reported by a scanner, before normalization.

    Severity-bearing fields keep the tool's own vocabulary; the severity
    normalizer decides which one wins.
    """

    source: ToolSource
    rule_id: Optional[str] = None
    message: str = ""
    level: Optional[str] = None
    security_severity: Optional[str] = None
    rank: Optional[str] = None
    severity: Optional[str] = None
    risk_code: Optional[str] = None
    locations: tuple[IssueLocation, ...] = ()
    tags: tuple[str, ...] = ()
    kind: Optional[str] = None
    problem_category: Optional[str] = None
    cwe_id: Optional[str] = None
    precision: Optional[str] = None
    fix: Optional[str] = None


@dataclass(frozen=True)
class NormalizedFinding:
    """Canonical finding: one severity bucket, one primary category, one file"""

    severity: str  # 'critical', 'high', 'medium', 'low'
    category: str
    file: str
    rule_id: Optional[str] = None
    categories: tuple[str, ...] = ()  # every category contribution, may be empty
    source: ToolSource = ToolSource.SAST_INTERCHANGE
    message: str = ""
    start_line: Optional[int] = None
    end_line: Optional[int] = None
    cwe_id: Optional[str] = None
    fix: Optional[str] = None
    security_severity: Optional[str] = None


@dataclass(frozen=True)
class HotSpot:
    """A file (or package, or URL) ranked by how many findings it holds"""

    file: str
    count: int
    rank: int

    def to_dict(self) -> dict[str, Any]:
        return {"file": self.file, "count": self.count, "rank": self.rank}


@dataclass(frozen=True)
class HistoryEntry:
    """Historical score snapshot, most recent first in any sequence"""

    timestamp: str = ""
    security_score: float = 0.0


@dataclass(frozen=True)
class AggregateSnapshot:
    """Normalized summary of one scan.

    ``category_counts`` may sum to more or less than ``total``: a finding
    contributes once per category candidate it carries, which can be zero
    or several.
    """

    severity_counts: dict[str, int]
    category_counts: dict[str, int]
    hot_spots: tuple[HotSpot, ...]
    total: int
    score_raw: int
    grade: str
    trend: str = TREND_UNAVAILABLE
    origin: str = "local"  # 'backend' or 'local'
    findings: tuple[NormalizedFinding, ...] = field(default=(), compare=False, repr=False)

    def to_dict(self) -> dict[str, Any]:
        """Return the externally consumed camelCase shape"""
        return {
            "severityCounts": {level: self.severity_counts.get(level, 0) for level in SEVERITY_LEVELS},
            "categoryCounts": dict(self.category_counts),
            "hotSpots": [spot.to_dict() for spot in self.hot_spots],
            "total": self.total,
            "scoreRaw": self.score_raw,
            "grade": self.grade,
            "trend": self.trend,
        }

    def to_json(self) -> str:
        """Serialize deterministically; equal snapshots give equal bytes"""
        return json.dumps(self.to_dict(), sort_keys=True, separators=(",", ":"), ensure_ascii=False)


__all__ = [
    "AggregateSnapshot",
    "HistoryEntry",
    "HotSpot",
    "IssueLocation",
    "NormalizedFinding",
    "RawIssue",
    "SEVERITY_LEVELS",
    "TREND_UNAVAILABLE",
    "ToolSource",
    "UNKNOWN_FILE",
]
