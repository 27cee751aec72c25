"""
Input Schemas - typed models for the loosely shaped payloads the engine reads.

These models sit at the parsing boundary only. Container and dynamic scan
items are validated here before their adapters lift them into
``RawIssue``; the backend-supplied summary is validated here before the
precedence resolver decides whether to trust it.

Every model uses ``extra = "allow"`` so unknown tool fields never break
validation, and accepts both the backend's snake_case names and the
camelCase names used by the presentation layer.

Hierarchy:
    ContainerVulnerability  - one container-image vulnerability item
    DynamicInstance         - one affected request of a dynamic-scan alert
    DynamicAlert            - one dynamic web-scan alert
    BackendCategory         - backend category bucket
    BackendHotSpot          - backend hot-spot entry
    BackendHistoryEntry     - backend history snapshot
    BackendSummary          - backend-computed summary envelope
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator


def _text_or_blank(value: Any) -> Any:
    """Coerce None to "" and bare numbers to strings; leave the rest to pydantic."""
    if value is None:
        return ""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


# ---------------------------------------------------------------------------
# Scanner item models
# ---------------------------------------------------------------------------


class ContainerVulnerability(BaseModel):
    """A container-image vulnerability, in either the backend's snake_case
    shape or the scanner's native PascalCase shape."""

    pkg_name: str = Field("", validation_alias=AliasChoices("pkg_name", "name", "PkgName"))
    installed_version: str = Field(
        "", validation_alias=AliasChoices("installed_version", "version", "InstalledVersion")
    )
    severity: str = Field("", validation_alias=AliasChoices("severity", "Severity"))
    vulnerability_id: str = Field(
        "", validation_alias=AliasChoices("vulnerability_id", "cve", "VulnerabilityID")
    )
    fixed_version: Optional[str] = Field(
        None, validation_alias=AliasChoices("fixed_version", "FixedVersion")
    )
    title: str = Field("", validation_alias=AliasChoices("title", "Title", "description", "Description"))
    cwe_ids: List[str] = Field(default_factory=list, validation_alias=AliasChoices("cwe_ids", "CweIDs"))

    model_config = {"extra": "allow", "populate_by_name": True}

    @field_validator("pkg_name", "installed_version", "severity", "vulnerability_id", "title", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Any:
        return _text_or_blank(v)

    @field_validator("cwe_ids", mode="before")
    @classmethod
    def coerce_cwe_ids(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return v


class DynamicInstance(BaseModel):
    """One request that triggered a dynamic-scan alert."""

    method: str = ""
    uri: str = ""

    model_config = {"extra": "allow"}

    @field_validator("method", "uri", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Any:
        return _text_or_blank(v)


class DynamicAlert(BaseModel):
    """A dynamic web-scan alert. ``riskcode`` is its only severity source."""

    name: str = Field("", validation_alias=AliasChoices("name", "alert"))
    riskcode: str = ""
    cweid: str = ""
    wascid: str = ""
    description: str = Field("", validation_alias=AliasChoices("description", "desc"))
    solution: str = ""
    instances: List[DynamicInstance] = Field(default_factory=list)

    model_config = {"extra": "allow", "populate_by_name": True}

    @field_validator("name", "riskcode", "cweid", "wascid", "description", "solution", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Any:
        return _text_or_blank(v)

    @field_validator("instances", mode="before")
    @classmethod
    def drop_malformed_instances(cls, v: Any) -> Any:
        if not isinstance(v, list):
            return []
        return [item for item in v if isinstance(item, dict)]


# ---------------------------------------------------------------------------
# Backend summary models
# ---------------------------------------------------------------------------


class BackendCategory(BaseModel):
    """A category bucket computed by the backend."""

    name: str
    count: int = 0

    model_config = {"extra": "allow"}

    @field_validator("count", mode="before")
    @classmethod
    def coerce_count(cls, v: Any) -> Any:
        return 0 if v is None or v == "" else v


class BackendHotSpot(BaseModel):
    """A hot-spot entry computed by the backend.

    Any backend ``priority``/``rank`` is kept as an extra field only; ranks
    are re-derived from the count order.
    """

    file: str
    finding_count: int = Field(
        0, validation_alias=AliasChoices("finding_count", "count", "findingCount")
    )

    model_config = {"extra": "allow", "populate_by_name": True}

    @field_validator("finding_count", mode="before")
    @classmethod
    def coerce_count(cls, v: Any) -> Any:
        return 0 if v is None or v == "" else v


class BackendHistoryEntry(BaseModel):
    """A stored historical score; a missing score counts as 0."""

    created_at: str = Field("", validation_alias=AliasChoices("created_at", "timestamp", "createdAt"))
    security_score: float = Field(
        0.0, validation_alias=AliasChoices("security_score", "securityScore")
    )

    model_config = {"extra": "allow", "populate_by_name": True}

    @field_validator("created_at", mode="before")
    @classmethod
    def coerce_timestamp(cls, v: Any) -> Any:
        return _text_or_blank(v)

    @field_validator("security_score", mode="before")
    @classmethod
    def coerce_score(cls, v: Any) -> Any:
        return 0.0 if v is None or v == "" else v


class BackendSummary(BaseModel):
    """Summary the backend may have computed already.

    Severity counts, score and grade may arrive nested under ``summary``
    (the backend's own shape) or at the top level.
    """

    severity_counts: Dict[str, int] = Field(
        default_factory=dict, validation_alias=AliasChoices("severity_counts", "severityCounts")
    )
    categories: List[BackendCategory] = Field(
        default_factory=list, validation_alias=AliasChoices("categories", "categoryList")
    )
    hot_spots: List[BackendHotSpot] = Field(
        default_factory=list, validation_alias=AliasChoices("hot_spots", "hotSpotList", "hotSpots")
    )
    history: List[BackendHistoryEntry] = Field(
        default_factory=list, validation_alias=AliasChoices("history", "historyList")
    )
    security_score: Optional[float] = Field(
        None, validation_alias=AliasChoices("security_score", "securityScore", "scoreRaw")
    )
    grade: Optional[str] = None

    model_config = {"extra": "allow", "populate_by_name": True}

    @model_validator(mode="before")
    @classmethod
    def lift_nested_summary(cls, data: Any) -> Any:
        """Hoist ``summary.severity_counts`` / ``security_score`` / ``grade``."""
        if not isinstance(data, dict):
            return data
        nested = data.get("summary")
        if not isinstance(nested, dict):
            return data
        lifted = dict(data)
        for key in ("severity_counts", "severityCounts", "security_score", "securityScore", "grade"):
            if key in nested and lifted.get(key) is None:
                lifted[key] = nested[key]
        return lifted

    @field_validator("severity_counts", mode="before")
    @classmethod
    def none_to_empty_map(cls, v: Any) -> Any:
        if v is None:
            return {}
        if isinstance(v, dict):
            # a null count means zero findings at that level
            return {level: 0 if count is None or count == "" else count for level, count in v.items()}
        return v

    @field_validator("categories", "hot_spots", "history", mode="before")
    @classmethod
    def none_to_empty_list(cls, v: Any) -> Any:
        return [] if v is None else v


__all__ = [
    "BackendCategory",
    "BackendHistoryEntry",
    "BackendHotSpot",
    "BackendSummary",
    "ContainerVulnerability",
    "DynamicAlert",
    "DynamicInstance",
]
