"""
Tests for the container-scan and dynamic-scan adapters.

Covers every accepted envelope, JSON text input, fail-soft handling of
malformed payloads and items, and the fields lifted onto RawIssue.
"""

import json
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent / "scripts"))

from scan_summary.adapters import parse_container_report, parse_dynamic_report
from scan_summary.models import IssueLocation, ToolSource


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _vuln(pkg="openssl", severity="HIGH", vuln_id="CVE-2021-3450", fixed="1.1.1k"):
    return {
        "PkgName": pkg,
        "Severity": severity,
        "VulnerabilityID": vuln_id,
        "FixedVersion": fixed,
        "InstalledVersion": "1.1.1d",
        "Title": f"{pkg} issue",
    }


def _alert(name="SQL Injection", riskcode="3", cweid="89", uri="http://app.local/login"):
    return {
        "alert": name,
        "riskcode": riskcode,
        "cweid": cweid,
        "desc": "Parameter is injectable",
        "solution": "Use prepared statements",
        "instances": [{"uri": uri, "method": "POST"}],
    }


# ---------------------------------------------------------------------------
# Container scan
# ---------------------------------------------------------------------------

class TestParseContainerReport:
    def test_native_results_envelope(self, trivy_report):
        issues = parse_container_report(trivy_report)
        assert len(issues) == 1
        issue = issues[0]
        assert issue.source == ToolSource.CONTAINER_SCAN
        assert issue.rule_id == "CVE-2021-3450"
        assert issue.severity == "HIGH"
        assert issue.locations == (IssueLocation(file="openssl"),)
        assert issue.message == "openssl: CA certificate check bypass"
        assert issue.fix == "Upgrade openssl to 1.1.1k"

    def test_plain_list(self):
        issues = parse_container_report([_vuln("zlib"), _vuln("curl")])
        assert [i.locations[0].file for i in issues] == ["zlib", "curl"]

    @pytest.mark.parametrize("key", ["vulnerabilities", "Vulnerabilities"])
    def test_direct_vulnerability_list(self, key):
        assert len(parse_container_report({key: [_vuln()]})) == 1

    @pytest.mark.parametrize("wrapper", ["result", "scan_result"])
    def test_backend_wrapper(self, wrapper):
        payload = {wrapper: {"results": [{"vulnerabilities": [_vuln(), _vuln("zlib")]}]}}
        assert len(parse_container_report(payload)) == 2

    def test_snake_case_items(self):
        item = {"pkg_name": "lodash", "severity": "moderate", "vulnerability_id": "GHSA-1", "cwe_ids": ["CWE-1321"]}
        issue = parse_container_report([item])[0]
        assert issue.severity == "moderate"
        assert issue.cwe_id == "CWE-1321"
        assert issue.fix is None

    def test_json_text_input(self, trivy_report):
        assert len(parse_container_report(json.dumps(trivy_report))) == 1

    @pytest.mark.parametrize("payload", ["{bad json", 42, None, "\"text\""])
    def test_malformed_payload_yields_nothing(self, payload):
        assert parse_container_report(payload) == []

    def test_deeply_nested_payload_yields_nothing(self):
        assert parse_container_report("[" * 100000 + "]" * 100000) == []

    def test_deeply_wrapped_report(self):
        report = {"Vulnerabilities": [_vuln("deep")]}
        for _ in range(5000):
            report = {"result": report}
        assert [i.locations[0].file for i in parse_container_report(report)] == ["deep"]

    def test_invalid_items_are_skipped(self):
        issues = parse_container_report(["junk", {"PkgName": "x", "CweIDs": 5}, _vuln("ok")])
        assert [i.locations[0].file for i in issues] == ["ok"]

    def test_missing_package_name_has_no_file(self):
        issue = parse_container_report([{"Severity": "LOW"}])[0]
        assert issue.locations == (IssueLocation(),)


# ---------------------------------------------------------------------------
# Dynamic scan
# ---------------------------------------------------------------------------

class TestParseDynamicReport:
    def test_native_site_report(self, zap_report):
        issues = parse_dynamic_report(zap_report)
        assert len(issues) == 2
        first = issues[0]
        assert first.source == ToolSource.DYNAMIC_SCAN
        assert first.rule_id == "Cross Site Scripting (Reflected)"
        assert first.risk_code == "3"
        assert first.cwe_id == "CWE-79"
        assert first.locations == (IssueLocation(file="http://localhost:8080/search"),)
        assert first.message == "Reflected input in search results"
        assert first.fix == "Encode output"

    def test_alerts_envelope(self):
        assert len(parse_dynamic_report({"alerts": [_alert(), _alert("XSS")]})) == 2

    def test_plain_list(self):
        assert parse_dynamic_report([_alert()])[0].rule_id == "SQL Injection"

    def test_single_site_object(self):
        assert len(parse_dynamic_report({"site": {"alerts": [_alert()]}})) == 1

    def test_numeric_fields_are_coerced(self):
        issue = parse_dynamic_report([{"name": "Weak TLS", "riskcode": 2, "cweid": 326}])[0]
        assert issue.risk_code == "2"
        assert issue.cwe_id == "CWE-326"

    @pytest.mark.parametrize("cweid", ["-1", "0", ""])
    def test_placeholder_cwe_is_dropped(self, cweid):
        assert parse_dynamic_report([_alert(cweid=cweid)])[0].cwe_id is None

    def test_alert_without_instances_has_no_file(self):
        alert = _alert()
        del alert["instances"]
        assert parse_dynamic_report([alert])[0].locations == (IssueLocation(),)

    def test_malformed_instances_are_ignored(self):
        alert = _alert()
        alert["instances"] = ["junk", {"uri": "http://app.local/x"}]
        assert parse_dynamic_report([alert])[0].locations[0].file == "http://app.local/x"

    @pytest.mark.parametrize("payload", ["not json", 3.5, None])
    def test_malformed_payload_yields_nothing(self, payload):
        assert parse_dynamic_report(payload) == []

    def test_deeply_nested_payload_yields_nothing(self):
        assert parse_dynamic_report('{"alerts": ' + "[" * 100000 + "]" * 100000 + "}") == []

    def test_non_object_alerts_are_skipped(self):
        assert len(parse_dynamic_report([1, "two", _alert()])) == 1
