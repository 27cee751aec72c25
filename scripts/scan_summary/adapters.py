"""
Per-family adapters for container-image and dynamic web-scan payloads.

Each adapter unwraps its family's envelope, validates items against the
schemas in :mod:`scan_summary.schemas` and lifts them into ``RawIssue``.
Shape sniffing stops here; nothing downstream looks at raw payloads.

Functions:
    parse_container_report: container vulnerability report -> RawIssues
    parse_dynamic_report: dynamic-scan alert list -> RawIssues
"""

import logging
from typing import Any, Iterator, Optional

from pydantic import ValidationError

from scan_summary.exceptions import PayloadParseError
from scan_summary.interchange import load_payload
from scan_summary.models import IssueLocation, RawIssue, ToolSource
from scan_summary.schemas import ContainerVulnerability, DynamicAlert

logger = logging.getLogger(__name__)

# Wrapper keys the backend nests a container report under
_CONTAINER_WRAPPERS = ("result", "scan_result")


# ---------------------------------------------------------------------------
# Container scan
# ---------------------------------------------------------------------------


def _unwrap(data: dict) -> dict:
    """Descend through backend wrapper keys until the report itself"""
    while True:
        for wrapper in _CONTAINER_WRAPPERS:
            inner = data.get(wrapper)
            if isinstance(inner, dict):
                data = inner
                break
        else:
            return data


def _container_items(data: Any) -> Iterator[Any]:
    if isinstance(data, list):
        yield from data
        return
    if not isinstance(data, dict):
        raise PayloadParseError("container report is neither a list nor an object")

    data = _unwrap(data)
    direct = data.get("vulnerabilities") or data.get("Vulnerabilities")
    if isinstance(direct, list):
        yield from direct

    results = data.get("results") or data.get("Results")
    if isinstance(results, list):
        for target in results:
            if not isinstance(target, dict):
                continue
            vulns = target.get("vulnerabilities") or target.get("Vulnerabilities")
            if isinstance(vulns, list):
                yield from vulns


def _container_issue(vuln: ContainerVulnerability) -> RawIssue:
    cwe_id = vuln.cwe_ids[0] if vuln.cwe_ids else None
    fix = f"Upgrade {vuln.pkg_name} to {vuln.fixed_version}" if vuln.fixed_version else None
    return RawIssue(
        source=ToolSource.CONTAINER_SCAN,
        rule_id=vuln.vulnerability_id or None,
        message=vuln.title,
        severity=vuln.severity or None,
        locations=(IssueLocation(file=vuln.pkg_name or None),),
        cwe_id=cwe_id,
        fix=fix,
    )


def parse_container_report(payload: Any) -> list[RawIssue]:
    """Parse a container-image vulnerability report.

    Accepts JSON text or decoded data: a list of items, or an envelope holding
    ``vulnerabilities`` or ``results[].vulnerabilities``. Fails soft.
    """
    try:
        items = list(_container_items(load_payload(payload)))
    except PayloadParseError as e:
        logger.warning("Discarding container report: %s", e)
        return []

    issues = []
    for item in items:
        if not isinstance(item, dict):
            logger.warning("Skipping container item of type %s", type(item).__name__)
            continue
        try:
            vuln = ContainerVulnerability.model_validate(item)
        except ValidationError as e:
            logger.warning("Skipping invalid container item: %s", e.errors()[0].get("msg", e))
            continue
        issues.append(_container_issue(vuln))

    logger.debug("Parsed %d container vulnerability item(s)", len(issues))
    return issues


# ---------------------------------------------------------------------------
# Dynamic scan
# ---------------------------------------------------------------------------


def _dynamic_items(data: Any) -> Iterator[Any]:
    if isinstance(data, list):
        yield from data
        return
    if not isinstance(data, dict):
        raise PayloadParseError("dynamic report is neither a list nor an object")

    alerts = data.get("alerts")
    if isinstance(alerts, list):
        yield from alerts

    # ZAP native format: {"site": [{"alerts": [...]}, ...]}
    sites = data.get("site")
    if isinstance(sites, dict):
        sites = [sites]
    if isinstance(sites, list):
        for site in sites:
            if isinstance(site, dict) and isinstance(site.get("alerts"), list):
                yield from site["alerts"]


def _cwe_label(cweid: str) -> Optional[str]:
    cweid = cweid.strip()
    # ZAP reports -1 (or 0) when no CWE applies
    if cweid.lstrip("-").isdigit():
        return f"CWE-{int(cweid)}" if int(cweid) > 0 else None
    return cweid or None


def _dynamic_issue(alert: DynamicAlert) -> RawIssue:
    uri = alert.instances[0].uri if alert.instances else ""
    return RawIssue(
        source=ToolSource.DYNAMIC_SCAN,
        rule_id=alert.name or None,
        message=alert.description,
        risk_code=alert.riskcode.strip() or None,
        locations=(IssueLocation(file=uri or None),),
        cwe_id=_cwe_label(alert.cweid),
        fix=alert.solution or None,
    )


def parse_dynamic_report(payload: Any) -> list[RawIssue]:
    """Parse a dynamic web-scan alert list.

    Accepts JSON text, a list of alerts, ``{"alerts": [...]}`` or the
    native ``{"site": [{"alerts": [...]}]}`` report. Fails soft.
    """
    try:
        items = list(_dynamic_items(load_payload(payload)))
    except PayloadParseError as e:
        logger.warning("Discarding dynamic report: %s", e)
        return []

    issues = []
    for item in items:
        if not isinstance(item, dict):
            logger.warning("Skipping dynamic alert of type %s", type(item).__name__)
            continue
        try:
            alert = DynamicAlert.model_validate(item)
        except ValidationError as e:
            logger.warning("Skipping invalid dynamic alert: %s", e.errors()[0].get("msg", e))
            continue
        issues.append(_dynamic_issue(alert))

    logger.debug("Parsed %d dynamic alert(s)", len(issues))
    return issues


__all__ = ["parse_container_report", "parse_dynamic_report"]
