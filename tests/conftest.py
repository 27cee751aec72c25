"""Shared fixtures for the scan summary test suite."""

import json

import pytest


def sarif_result(rule_id, level=None, uri=None, line=None, **properties):
    """Build one standard interchange result."""
    result = {"ruleId": rule_id, "message": {"text": f"{rule_id} detected"}}
    if level is not None:
        result["level"] = level
    if uri is not None:
        region = {"startLine": line} if line is not None else {}
        result["locations"] = [
            {"physicalLocation": {"artifactLocation": {"uri": uri}, "region": region}}
        ]
    if properties:
        result["properties"] = properties
    return result


def sarif_document(results):
    """Wrap results into a single-run interchange document string."""
    return json.dumps(
        {
            "version": "2.1.0",
            "runs": [{"tool": {"driver": {"name": "semgrep"}}, "results": results}],
        }
    )


@pytest.fixture
def make_sarif():
    return lambda results: sarif_document(results)


@pytest.fixture
def two_finding_sarif():
    """One SQL injection and one XSS finding in the same checked-out file."""
    return sarif_document(
        [
            sarif_result("sql-injection-1", level="error", uri="/tmp/tmpX/app.py", line=10),
            sarif_result("xss-check", level="warning", uri="/tmp/tmpX/app.py", line=20),
        ]
    )


@pytest.fixture
def trivy_report():
    return {
        "SchemaVersion": 2,
        "ArtifactName": "registry.local/web:1.4",
        "Results": [
            {
                "Target": "registry.local/web:1.4 (debian 11.6)",
                "Vulnerabilities": [
                    {
                        "VulnerabilityID": "CVE-2021-3450",
                        "PkgName": "openssl",
                        "InstalledVersion": "1.1.1d",
                        "FixedVersion": "1.1.1k",
                        "Severity": "HIGH",
                        "Title": "openssl: CA certificate check bypass",
                    }
                ],
            }
        ],
    }


@pytest.fixture
def zap_report():
    return {
        "@version": "2.14.0",
        "site": [
            {
                "@name": "http://localhost:8080",
                "alerts": [
                    {
                        "alert": "Cross Site Scripting (Reflected)",
                        "riskcode": "3",
                        "cweid": "79",
                        "wascid": "8",
                        "desc": "Reflected input in search results",
                        "solution": "Encode output",
                        "instances": [{"uri": "http://localhost:8080/search", "method": "GET"}],
                    },
                    {
                        "alert": "X-Content-Type-Options Header Missing",
                        "riskcode": "1",
                        "cweid": "693",
                        "instances": [{"uri": "http://localhost:8080/", "method": "GET"}],
                    },
                ],
            }
        ],
    }


@pytest.fixture
def complete_backend_summary():
    return {
        "summary": {
            "severity_counts": {"critical": 0, "high": 2, "medium": 1, "low": 0},
            "security_score": 85,
            "grade": "B",
        },
        "categories": [{"name": "XSS", "count": 2}, {"name": "CSRF", "count": 1}],
        "hot_spots": [
            {"file": "/web/views.py", "finding_count": 1, "priority": 2},
            {"file": "/web/forms.py", "finding_count": 2, "priority": 1},
        ],
        "history": [
            {"created_at": "2024-05-02T10:00:00Z", "security_score": 85},
            {"created_at": "2024-05-01T10:00:00Z", "security_score": 70},
        ],
    }
