"""
Precedence resolver - the single entry point callers use.

Decides per invocation whether to trust a backend-computed summary or to
run the local pipeline (parse -> normalize -> aggregate -> score) over the
raw scanner payloads. The rule is all-or-nothing: the backend summary is
used only when its severity counts, category list and hot-spot list are
all present and non-empty; a partial summary is discarded entirely, never
patched field by field.

Usage:
    from scan_summary import summarize
    snapshot = summarize(
        backend_summary=response.get("summary_block"),
        payloads={"semgrep": semgrep_sarif, "trivy": trivy_report},
    )
    snapshot.to_dict()
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union

from pydantic import ValidationError

from scan_summary.adapters import parse_container_report, parse_dynamic_report
from scan_summary.aggregator import aggregate, count_by_source, normalize_issues
from scan_summary.config_loader import get_default_config, validate_config
from scan_summary.interchange import parse_sarif_issues
from scan_summary.models import (
    SEVERITY_LEVELS,
    TREND_UNAVAILABLE,
    AggregateSnapshot,
    HotSpot,
    RawIssue,
    ToolSource,
)
from scan_summary.schemas import BackendSummary
from scan_summary.scoring import GRADES, clamp_score, compute_score, grade_for_score
from scan_summary.trend import analyze_trend

logger = logging.getLogger(__name__)


class SummaryStrategy(str, Enum):
    """Which pipeline variant produces the snapshot"""

    BACKEND = "backend"
    LOCAL = "local"


# Tool names the backend uses for each payload, mapped to their family
TOOL_FAMILIES: dict[str, ToolSource] = {
    "semgrep": ToolSource.SAST_INTERCHANGE,
    "codeql": ToolSource.SAST_INTERCHANGE,
    "sarif": ToolSource.SAST_INTERCHANGE,
    "sast": ToolSource.SAST_INTERCHANGE,
    "trivy": ToolSource.CONTAINER_SCAN,
    "sca": ToolSource.CONTAINER_SCAN,
    "container": ToolSource.CONTAINER_SCAN,
    "zap": ToolSource.DYNAMIC_SCAN,
    "dast": ToolSource.DYNAMIC_SCAN,
    "dynamic": ToolSource.DYNAMIC_SCAN,
}


@dataclass
class RawPayloads:
    """Raw scanner outputs for one scan, grouped by tool family"""

    sast_documents: list[Any] = field(default_factory=list)
    container_reports: list[Any] = field(default_factory=list)
    dynamic_reports: list[Any] = field(default_factory=list)

    @classmethod
    def from_tool_map(cls, payloads: Mapping[str, Any]) -> "RawPayloads":
        """Route ``{"semgrep": ..., "trivy": ..., "zap": ...}`` by tool family.

        Unknown tool names and ``None`` payloads are skipped.
        """
        grouped = cls()
        for tool, payload in payloads.items():
            if payload is None:
                continue
            family = TOOL_FAMILIES.get(str(tool).lower())
            if family is None:
                logger.warning("Skipping payload from unknown tool '%s'", tool)
                continue
            if family == ToolSource.SAST_INTERCHANGE:
                grouped.sast_documents.append(payload)
            elif family == ToolSource.CONTAINER_SCAN:
                grouped.container_reports.append(payload)
            else:
                grouped.dynamic_reports.append(payload)
        return grouped

    def is_empty(self) -> bool:
        return not (self.sast_documents or self.container_reports or self.dynamic_reports)


# ---------------------------------------------------------------------------
# Strategy selection
# ---------------------------------------------------------------------------


def parse_backend_summary(summary: Any) -> Optional[BackendSummary]:
    """Validate a backend summary; anything invalid counts as absent"""
    if summary is None:
        return None
    if isinstance(summary, BackendSummary):
        return summary
    if not isinstance(summary, Mapping):
        logger.warning("Ignoring backend summary of type %s", type(summary).__name__)
        return None
    try:
        return BackendSummary.model_validate(dict(summary))
    except ValidationError as e:
        logger.warning("Ignoring invalid backend summary: %d validation error(s)", e.error_count())
        return None


def is_backend_summary_complete(summary: Optional[BackendSummary]) -> bool:
    """True only when severity counts, categories and hot spots are all non-empty"""
    return bool(
        summary is not None
        and summary.severity_counts
        and summary.categories
        and summary.hot_spots
    )


def select_strategy(summary: Optional[BackendSummary]) -> SummaryStrategy:
    if is_backend_summary_complete(summary):
        return SummaryStrategy.BACKEND
    return SummaryStrategy.LOCAL


# ---------------------------------------------------------------------------
# Pipeline variants
# ---------------------------------------------------------------------------


def _effective_config(config: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    merged = get_default_config()
    if config:
        merged.update({key: value for key, value in config.items() if value is not None})
    return validate_config(merged)


def summarize_backend(summary: BackendSummary, config: Optional[Dict[str, Any]] = None) -> AggregateSnapshot:
    """Reshape a complete backend summary; trend is computed from its history"""
    config = _effective_config(config)

    severity_counts = {
        level: max(0, int(summary.severity_counts.get(level, 0) or 0)) for level in SEVERITY_LEVELS
    }
    category_counts = {category.name: category.count for category in summary.categories}

    ordered = sorted(summary.hot_spots, key=lambda spot: spot.finding_count, reverse=True)
    hot_spots = tuple(
        HotSpot(
            file=spot.file,
            count=spot.finding_count,
            rank=index + 1,
        )
        for index, spot in enumerate(ordered[: config["hot_spot_limit"]])
    )

    if summary.security_score is not None:
        score = clamp_score(summary.security_score)
    else:
        score = compute_score(severity_counts)
    grade = summary.grade if summary.grade in GRADES else grade_for_score(score)

    return AggregateSnapshot(
        severity_counts=severity_counts,
        category_counts=category_counts,
        hot_spots=hot_spots,
        total=sum(severity_counts.values()),
        score_raw=score,
        grade=grade,
        trend=analyze_trend(summary.history),
        origin=SummaryStrategy.BACKEND.value,
    )


def collect_issues(payloads: RawPayloads) -> list[RawIssue]:
    """Run every family adapter; static analysis first, then container, then dynamic"""
    issues: list[RawIssue] = []
    for document in payloads.sast_documents:
        issues.extend(parse_sarif_issues(document))
    for report in payloads.container_reports:
        issues.extend(parse_container_report(report))
    for report in payloads.dynamic_reports:
        issues.extend(parse_dynamic_report(report))
    return issues


def summarize_local(payloads: RawPayloads, config: Optional[Dict[str, Any]] = None) -> AggregateSnapshot:
    """Compute the snapshot from raw payloads; no history is assumed here"""
    config = _effective_config(config)

    findings = normalize_issues(
        collect_issues(payloads),
        temp_roots=config["temp_roots"],
        min_candidate_length=config["min_candidate_length"],
    )
    logger.debug("Findings by source: %s", count_by_source(findings))

    aggregation = aggregate(findings, hot_spot_limit=config["hot_spot_limit"])
    score = compute_score(aggregation.severity_counts)

    return AggregateSnapshot(
        severity_counts=aggregation.severity_counts,
        category_counts=aggregation.category_counts,
        hot_spots=aggregation.hot_spots,
        total=aggregation.total,
        score_raw=score,
        grade=grade_for_score(score),
        trend=TREND_UNAVAILABLE,
        origin=SummaryStrategy.LOCAL.value,
        findings=tuple(findings),
    )


def summarize(
    backend_summary: Any = None,
    payloads: Union[RawPayloads, Mapping[str, Any], None] = None,
    config: Optional[Dict[str, Any]] = None,
) -> AggregateSnapshot:
    """Produce the normalized snapshot for one scan.

    Args:
        backend_summary: Backend-computed summary (mapping or BackendSummary), optional
        payloads: RawPayloads, or a ``{tool_name: payload}`` mapping
        config: Config dict (see config_loader); defaults when omitted

    Returns:
        AggregateSnapshot; never raises on malformed scan data
    """
    summary = parse_backend_summary(backend_summary)
    strategy = select_strategy(summary)

    if strategy == SummaryStrategy.BACKEND:
        logger.info("Using backend-computed summary")
        return summarize_backend(summary, config)

    if summary is not None:
        logger.info("Backend summary incomplete; recomputing from raw payloads")

    if payloads is None:
        payloads = RawPayloads()
    elif not isinstance(payloads, RawPayloads):
        payloads = RawPayloads.from_tool_map(payloads)

    snapshot = summarize_local(payloads, config)
    logger.info(
        "Local summary: %d finding(s), score %d (%s)",
        snapshot.total, snapshot.score_raw, snapshot.grade,
    )
    return snapshot


__all__ = [
    "RawPayloads",
    "SummaryStrategy",
    "TOOL_FAMILIES",
    "collect_issues",
    "is_backend_summary_complete",
    "parse_backend_summary",
    "select_strategy",
    "summarize",
    "summarize_backend",
    "summarize_local",
]
