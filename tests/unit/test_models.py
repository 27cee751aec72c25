"""Tests for the snapshot output shape."""

import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent / "scripts"))

from scan_summary.models import AggregateSnapshot, HotSpot, NormalizedFinding


def _snapshot(**overrides):
    values = dict(
        severity_counts={"critical": 1, "high": 0, "medium": 0, "low": 2},
        category_counts={"XSS": 1},
        hot_spots=(HotSpot("/app.py", 3, 1),),
        total=3,
        score_raw=82,
        grade="B",
    )
    values.update(overrides)
    return AggregateSnapshot(**values)


class TestAggregateSnapshot:
    def test_to_dict_shape(self):
        assert _snapshot().to_dict() == {
            "severityCounts": {"critical": 1, "high": 0, "medium": 0, "low": 2},
            "categoryCounts": {"XSS": 1},
            "hotSpots": [{"file": "/app.py", "count": 3, "rank": 1}],
            "total": 3,
            "scoreRaw": 82,
            "grade": "B",
            "trend": "N/A",
        }

    def test_missing_severity_keys_are_zero(self):
        snapshot = _snapshot(severity_counts={"low": 3})
        assert snapshot.to_dict()["severityCounts"] == {"critical": 0, "high": 0, "medium": 0, "low": 3}

    def test_to_json_is_canonical(self):
        a = _snapshot(category_counts={"XSS": 1, "CSRF": 2})
        b = _snapshot(category_counts={"CSRF": 2, "XSS": 1})
        assert a.to_json() == b.to_json()
        assert json.loads(a.to_json())["categoryCounts"] == {"CSRF": 2, "XSS": 1}

    def test_findings_do_not_affect_equality(self):
        finding = NormalizedFinding(severity="low", category="XSS", file="/app.py")
        assert _snapshot(findings=(finding,)) == _snapshot()
