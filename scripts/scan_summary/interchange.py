"""
Interchange (SARIF-like) document parser.

Decodes a static-analysis interchange document (JSON text, or an already
decoded object), reads ``runs[0].results`` and rewrites the non-standard
rule-nested result shape into the standard one before lifting every
result into a :class:`RawIssue`.

The public functions never raise on bad input: malformed JSON or an
unexpected top-level shape produce an empty list.
"""

import json
import logging
from typing import Any, Optional, Union

from scan_summary.exceptions import PayloadParseError
from scan_summary.models import IssueLocation, RawIssue, ToolSource

logger = logging.getLogger(__name__)

Document = Union[str, bytes, bytearray, dict, list, None]


# ---------------------------------------------------------------------------
# Loose value helpers (shared with the other adapters)
# ---------------------------------------------------------------------------


def as_text(value: Any) -> Optional[str]:
    """Return *value* as a non-empty string, or None.

    Numbers are accepted because several tools emit severity scores and
    ids as bare numbers.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str) and value:
        return value
    return None


def as_line(value: Any) -> Optional[int]:
    """Return a positive line number, or None"""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, str) and value.strip().isdigit():
        number = int(value.strip())
        return number if number > 0 else None
    return None


def flatten_tags(tags: Any) -> tuple[str, ...]:
    """Flatten a tag list; a single string is treated as comma separated"""
    if isinstance(tags, str):
        return tuple(part.strip() for part in tags.split(",") if part.strip())
    if isinstance(tags, (list, tuple)):
        return tuple(tag for tag in tags if isinstance(tag, str) and tag)
    return ()


def decode_json(document: Document) -> Any:
    """Strict JSON decode; raises PayloadParseError on any failure"""
    if document is None:
        raise PayloadParseError("no document supplied")
    if isinstance(document, (bytes, bytearray)):
        try:
            document = document.decode("utf-8")
        except UnicodeDecodeError as e:
            raise PayloadParseError(f"document is not UTF-8: {e}") from e
    if not isinstance(document, str):
        raise PayloadParseError(f"unsupported document type {type(document).__name__}")
    try:
        return json.loads(document)
    except ValueError as e:
        raise PayloadParseError(f"malformed JSON: {e}") from e
    except RecursionError as e:
        raise PayloadParseError("JSON nested too deeply") from e


def load_payload(payload: Any) -> Any:
    """Decode text payloads; pass already-decoded objects and lists through"""
    if isinstance(payload, (dict, list)):
        return payload
    return decode_json(payload)


# ---------------------------------------------------------------------------
# Shape normalization
# ---------------------------------------------------------------------------


def _is_standard(result: dict) -> bool:
    return bool(result.get("ruleId")) and isinstance(result.get("message"), dict)


def _rule_message_text(message: Any) -> str:
    if isinstance(message, str):
        return message
    if isinstance(message, dict) and message.get("text"):
        return message["text"]
    return "No description"


def _merged_properties(rule: dict, result: dict) -> dict:
    """Rule properties underneath the result's own; the result wins per key"""
    merged: dict = {}
    for source in (rule.get("properties"), result.get("properties")):
        if isinstance(source, dict):
            merged.update(source)
    return merged


def normalize_result(result: Any) -> Any:
    """Rewrite a rule-nested result into the standard shape.

    Values from ``rule`` only fill gaps: any non-empty top-level field the
    result already carries is kept as is. Standard results (``ruleId`` plus
    a structured ``message``) and unrecognized shapes are returned unchanged.
    """
    if not isinstance(result, dict) or _is_standard(result):
        return result

    rule = result.get("rule")
    if not isinstance(rule, dict) or not rule:
        return result

    normalized = {
        "ruleId": rule.get("id") or rule.get("name") or "unknown",
        "level": rule.get("level") or "note",
        "message": {"text": _rule_message_text(rule.get("message"))},
        "locations": [],
    }
    for key, value in result.items():
        if value is not None and value != "":
            normalized[key] = value
    normalized["properties"] = _merged_properties(rule, result)
    return normalized


def extract_results(payload: Any) -> list:
    """Return ``runs[0].results`` of a decoded document.

    Raises:
        PayloadParseError: when the document does not have that shape
    """
    if not isinstance(payload, dict):
        raise PayloadParseError("top-level value is not an object")
    runs = payload.get("runs")
    if not isinstance(runs, list) or not runs:
        return []
    first_run = runs[0]
    if not isinstance(first_run, dict):
        return []
    results = first_run.get("results")
    if not isinstance(results, list):
        return []
    return results


def parse_interchange(document: Document) -> list:
    """Parse an interchange document into normalized result dicts.

    Fails soft: any decoding or shape problem yields an empty list.
    """
    try:
        results = extract_results(load_payload(document))
    except PayloadParseError as e:
        logger.warning("Discarding interchange document: %s", e)
        return []
    return [normalize_result(result) for result in results]


# ---------------------------------------------------------------------------
# RawIssue adapter
# ---------------------------------------------------------------------------


def _locations(raw_locations: Any) -> tuple[IssueLocation, ...]:
    if not isinstance(raw_locations, list):
        return ()
    locations = []
    for entry in raw_locations:
        physical = entry.get("physicalLocation") if isinstance(entry, dict) else None
        if not isinstance(physical, dict):
            locations.append(IssueLocation())
            continue
        artifact = physical.get("artifactLocation")
        region = physical.get("region")
        uri = as_text(artifact.get("uri")) if isinstance(artifact, dict) else None
        start = as_line(region.get("startLine")) if isinstance(region, dict) else None
        end = as_line(region.get("endLine")) if isinstance(region, dict) else None
        locations.append(IssueLocation(file=uri, start_line=start, end_line=end))
    return tuple(locations)


def _nested_text(container: dict, outer: str, inner: str) -> Optional[str]:
    value = container.get(outer)
    if isinstance(value, dict):
        return as_text(value.get(inner))
    return None


def _fix_text(result: dict, properties: dict) -> Optional[str]:
    fixes = result.get("fixes")
    if isinstance(fixes, list) and fixes and isinstance(fixes[0], dict):
        text = _nested_text(fixes[0], "description", "text")
        if text:
            return text
    return as_text(properties.get("fix"))


def to_raw_issue(result: Any, source: ToolSource = ToolSource.SAST_INTERCHANGE) -> RawIssue:
    """Lift one normalized interchange result into a RawIssue.

    Non-object results become an empty issue so they are still counted.
    """
    if not isinstance(result, dict):
        return RawIssue(source=source)

    properties = result.get("properties")
    if not isinstance(properties, dict):
        properties = {}

    message = result.get("message")
    if isinstance(message, dict):
        message_text = message.get("text") or message.get("markdown") or ""
    else:
        message_text = message if isinstance(message, str) else ""

    return RawIssue(
        source=source,
        rule_id=result.get("ruleId") if isinstance(result.get("ruleId"), str) else None,
        message=message_text if isinstance(message_text, str) else "",
        level=result.get("level") if isinstance(result.get("level"), str) and result.get("level") else None,
        security_severity=as_text(properties.get("securitySeverity"))
        or as_text(properties.get("security-severity")),
        rank=as_text(result.get("rank")),
        severity=as_text(properties.get("severity")),
        locations=_locations(result.get("locations")),
        tags=flatten_tags(properties.get("tags")),
        kind=as_text(properties.get("kind")),
        problem_category=_nested_text(properties, "problem", "category"),
        cwe_id=_nested_text(properties, "cwe", "id"),
        precision=as_text(properties.get("precision")),
        fix=_fix_text(result, properties),
    )


def parse_sarif_issues(
    document: Document, source: ToolSource = ToolSource.SAST_INTERCHANGE
) -> list[RawIssue]:
    """Parse an interchange document straight into RawIssues, order preserved"""
    issues = [to_raw_issue(result, source) for result in parse_interchange(document)]
    logger.debug("Parsed %d interchange result(s)", len(issues))
    return issues


__all__ = [
    "as_line",
    "as_text",
    "decode_json",
    "extract_results",
    "flatten_tags",
    "load_payload",
    "normalize_result",
    "parse_interchange",
    "parse_sarif_issues",
    "to_raw_issue",
]
