"""
Trend analysis over stored security scores.

The label names the direction of *risk*, not of the score: a higher
latest score means fewer or less severe findings, which reads as
``"decreasing"``.
"""

from typing import Any, Mapping, Sequence, Union

from scan_summary.models import TREND_UNAVAILABLE, HistoryEntry

TREND_DECREASING = "decreasing"
TREND_INCREASING = "increasing"
TREND_FLAT = "flat"


def _score_of(entry: Union[HistoryEntry, Mapping[str, Any], Any]) -> float:
    if isinstance(entry, HistoryEntry):
        return float(entry.security_score)
    if isinstance(entry, Mapping):
        raw = entry.get("securityScore", entry.get("security_score"))
    else:
        raw = getattr(entry, "security_score", None)
    try:
        return float(raw or 0)
    except (TypeError, ValueError):
        return 0.0


def analyze_trend(history: Sequence[Union[HistoryEntry, Mapping[str, Any]]]) -> str:
    """Compare the two most recent scores (index 0 is the latest)"""
    if history is None or len(history) < 2:
        return TREND_UNAVAILABLE
    latest, previous = _score_of(history[0]), _score_of(history[1])
    if latest > previous:
        return TREND_DECREASING
    if latest < previous:
        return TREND_INCREASING
    return TREND_FLAT


__all__ = ["TREND_DECREASING", "TREND_FLAT", "TREND_INCREASING", "analyze_trend"]
