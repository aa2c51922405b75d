"""Shared data structures used across modules."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from pydantic import (
    AnyHttpUrl,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
    model_validator,
)

HEADING_LEVELS = ("h1", "h2", "h3", "h4", "h5", "h6")

_HTTP_URL = TypeAdapter(AnyHttpUrl)


@dataclass(frozen=True, slots=True)
class LinkSummary:
    external_count: int
    internal_count: int
    external_links: List[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class AnalysisResult:
    """Signals extracted from a single page.

    Results carry no identifier; the store assigns one when the result is
    persisted.
    """

    url: str
    page_title: str
    html_version: str
    heading_counts: Dict[str, int]
    external_link_count: int
    internal_link_count: int
    inaccessible_link_count: int
    is_login: bool


def _check_heading_counts(value: Optional[Dict[str, int]]) -> Optional[Dict[str, int]]:
    if value is None:
        return value
    for level, count in value.items():
        if level not in HEADING_LEVELS:
            raise ValueError(f"Unknown heading level {level!r}")
        if count < 0:
            raise ValueError(f"Heading count for {level} must be non-negative")
    return value


class AnalyzeRequest(BaseModel):
    url: str

    @field_validator("url")
    @classmethod
    def _require_http_url(cls, value: str) -> str:
        value = value.strip()
        try:
            _HTTP_URL.validate_python(value)
        except ValidationError as exc:
            raise ValueError("url must be an absolute http(s) URL") from exc
        # The stored url is the one requested, not pydantic's normalised form.
        return value


class AnalysisRecordOut(BaseModel):
    """Wire representation of a stored analysis."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    url: str
    page_title: str = Field(alias="htmltitle")
    html_version: str = Field(alias="htmlversion")
    heading_counts: Dict[str, int] = Field(alias="headingcount")
    external_link_count: int = Field(alias="externallink")
    internal_link_count: int = Field(alias="internalink")
    inaccessible_link_count: int = Field(alias="inaccessible")
    is_login: bool = Field(alias="islogin")

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: object) -> str:
        return str(value)


class AnalysisRecordUpdate(BaseModel):
    """Partial update of a stored record; ``id`` and ``url`` cannot change."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    page_title: Optional[str] = Field(default=None, alias="htmltitle")
    html_version: Optional[str] = Field(default=None, alias="htmlversion")
    heading_counts: Optional[Dict[str, int]] = Field(default=None, alias="headingcount")
    external_link_count: Optional[int] = Field(default=None, ge=0, alias="externallink")
    internal_link_count: Optional[int] = Field(default=None, ge=0, alias="internalink")
    inaccessible_link_count: Optional[int] = Field(default=None, ge=0, alias="inaccessible")
    is_login: Optional[bool] = Field(default=None, alias="islogin")

    @field_validator("heading_counts")
    @classmethod
    def _validate_heading_counts(cls, value: Optional[Dict[str, int]]) -> Optional[Dict[str, int]]:
        return _check_heading_counts(value)

    @model_validator(mode="after")
    def _inaccessible_within_external(self) -> "AnalysisRecordUpdate":
        if (
            self.inaccessible_link_count is not None
            and self.external_link_count is not None
            and self.inaccessible_link_count > self.external_link_count
        ):
            raise ValueError("inaccessible cannot exceed externallink")
        return self

    def changes(self) -> Dict[str, object]:
        return self.model_dump(exclude_unset=True, by_alias=False)
