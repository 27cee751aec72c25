"""Scan summary engine - normalizes multi-tool security findings into one snapshot."""

from scan_summary.aggregator import aggregate, count_by_severity, count_by_source, normalize_issue
from scan_summary.config_loader import build_config, configure_logging
from scan_summary.exceptions import ConfigurationError, PayloadParseError, ScanSummaryError
from scan_summary.models import (
    AggregateSnapshot,
    HistoryEntry,
    HotSpot,
    NormalizedFinding,
    RawIssue,
    ToolSource,
)
from scan_summary.resolver import RawPayloads, SummaryStrategy, select_strategy, summarize
from scan_summary.scoring import compute_score, grade_for_score
from scan_summary.severity import normalize_severity
from scan_summary.trend import analyze_trend

__all__ = [
    "AggregateSnapshot",
    "ConfigurationError",
    "HistoryEntry",
    "HotSpot",
    "NormalizedFinding",
    "PayloadParseError",
    "RawIssue",
    "RawPayloads",
    "ScanSummaryError",
    "SummaryStrategy",
    "ToolSource",
    "aggregate",
    "analyze_trend",
    "build_config",
    "compute_score",
    "configure_logging",
    "count_by_severity",
    "count_by_source",
    "grade_for_score",
    "normalize_issue",
    "normalize_severity",
    "select_strategy",
    "summarize",
]
