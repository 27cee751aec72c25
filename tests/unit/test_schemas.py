"""
Tests for the pydantic input schemas.

Covers alias handling between backend and native tool field names,
None/number coercion, extra field preservation, and the nested backend
summary shape.
"""

import sys
from pathlib import Path

import pytest
from pydantic import ValidationError

sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent / "scripts"))

from scan_summary.schemas import (
    BackendHistoryEntry,
    BackendHotSpot,
    BackendSummary,
    ContainerVulnerability,
    DynamicAlert,
)


# ============================================================================
# Scanner items
# ============================================================================


class TestContainerVulnerability:
    def test_native_field_names(self):
        vuln = ContainerVulnerability.model_validate(
            {"PkgName": "openssl", "Severity": "HIGH", "VulnerabilityID": "CVE-1", "CweIDs": ["CWE-295"]}
        )
        assert vuln.pkg_name == "openssl"
        assert vuln.severity == "HIGH"
        assert vuln.vulnerability_id == "CVE-1"
        assert vuln.cwe_ids == ["CWE-295"]

    def test_backend_field_names(self):
        vuln = ContainerVulnerability.model_validate({"name": "lodash", "cve": "CVE-2", "fixed_version": "4.17.21"})
        assert vuln.pkg_name == "lodash"
        assert vuln.vulnerability_id == "CVE-2"
        assert vuln.fixed_version == "4.17.21"

    def test_none_and_numbers_coerced(self):
        vuln = ContainerVulnerability.model_validate({"PkgName": None, "InstalledVersion": 2, "CweIDs": "CWE-1"})
        assert vuln.pkg_name == ""
        assert vuln.installed_version == "2"
        assert vuln.cwe_ids == ["CWE-1"]

    def test_extra_fields_preserved(self):
        vuln = ContainerVulnerability.model_validate({"PkgName": "x", "PrimaryURL": "https://avd.example/x"})
        assert vuln.PrimaryURL == "https://avd.example/x"

    def test_invalid_cwe_list_rejected(self):
        with pytest.raises(ValidationError):
            ContainerVulnerability.model_validate({"CweIDs": 5})


class TestDynamicAlert:
    def test_native_aliases(self):
        alert = DynamicAlert.model_validate({"alert": "XSS", "desc": "reflected", "riskcode": 3})
        assert alert.name == "XSS"
        assert alert.description == "reflected"
        assert alert.riskcode == "3"

    def test_defaults(self):
        alert = DynamicAlert.model_validate({})
        assert alert.name == ""
        assert alert.instances == []

    def test_non_list_instances_become_empty(self):
        assert DynamicAlert.model_validate({"instances": "nope"}).instances == []


# ============================================================================
# Backend summary
# ============================================================================


class TestBackendSummary:
    def test_nested_summary_is_lifted(self, complete_backend_summary):
        summary = BackendSummary.model_validate(complete_backend_summary)
        assert summary.severity_counts == {"critical": 0, "high": 2, "medium": 1, "low": 0}
        assert summary.security_score == 85
        assert summary.grade == "B"
        assert [c.name for c in summary.categories] == ["XSS", "CSRF"]
        assert len(summary.hot_spots) == 2
        assert len(summary.history) == 2

    def test_presentation_layer_names(self):
        summary = BackendSummary.model_validate(
            {
                "severityCounts": {"high": 1},
                "categoryList": [{"name": "XSS", "count": 1}],
                "hotSpotList": [{"file": "a.py", "count": 1, "rank": 1}],
                "historyList": [{"timestamp": "t", "securityScore": 90}],
                "scoreRaw": 97,
            }
        )
        assert summary.severity_counts == {"high": 1}
        assert summary.hot_spots[0].finding_count == 1
        assert summary.hot_spots[0].model_extra == {"rank": 1}
        assert summary.history[0].security_score == 90
        assert summary.security_score == 97

    def test_top_level_value_wins_over_nested(self):
        summary = BackendSummary.model_validate({"grade": "A", "summary": {"grade": "D"}})
        assert summary.grade == "A"

    def test_none_collections_become_empty(self):
        summary = BackendSummary.model_validate(
            {"severity_counts": None, "categories": None, "hot_spots": None, "history": None}
        )
        assert summary.severity_counts == {}
        assert summary.categories == []
        assert summary.hot_spots == []
        assert summary.history == []

    def test_malformed_categories_rejected(self):
        with pytest.raises(ValidationError):
            BackendSummary.model_validate({"categories": "XSS"})

    def test_hot_spot_requires_file(self):
        with pytest.raises(ValidationError):
            BackendHotSpot.model_validate({"finding_count": 3})

    @pytest.mark.parametrize("score", [None, ""])
    def test_missing_history_score_is_zero(self, score):
        assert BackendHistoryEntry.model_validate({"security_score": score}).security_score == 0.0

    def test_null_counts_become_zero(self):
        summary = BackendSummary.model_validate(
            {
                "severity_counts": {"critical": None, "high": 2},
                "categories": [{"name": "XSS", "count": None}],
                "hot_spots": [{"file": "a.py", "finding_count": None}],
            }
        )
        assert summary.severity_counts == {"critical": 0, "high": 2}
        assert summary.categories[0].count == 0
        assert summary.hot_spots[0].finding_count == 0
