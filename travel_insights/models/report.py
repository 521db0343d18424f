"""
Report models: request, period, per-category result, composite document.

``ReportRequest`` is validated at construction: the category set must be
non-empty and a custom report must carry both dates.  ``CategoryResult``
is the explicit success/failure union each statistic source returns;
build it through ``CategoryResult.ok`` / ``CategoryResult.failure``.

``ReportDocument`` is frozen.  Once persisted it is never updated; a
second generation for the same period inserts a new row.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from travel_insights.taxonomy.content_taxonomy import ReportCategory, ReportType


class ReportPeriod(BaseModel):
    """Inclusive time window covered by a report."""

    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime

    @model_validator(mode="after")
    def validate_order(self) -> "ReportPeriod":
        if self.end < self.start:
            raise ValueError(
                f"Period end ({self.end.isoformat()}) is before start "
                f"({self.start.isoformat()})."
            )
        return self


class ReportRequest(BaseModel):
    """Inputs to one report generation.

    Attributes:
        report_type: Cadence; ``custom`` requires ``start_date`` and ``end_date``.
        categories: Statistic categories to include (at least one).
        start_date: First day of a custom period.
        end_date: Last day of a custom period (inclusive).
    """

    model_config = ConfigDict(frozen=True)

    report_type: ReportType
    categories: list[ReportCategory]
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @field_validator("categories")
    @classmethod
    def validate_categories(cls, v: list[ReportCategory]) -> list[ReportCategory]:
        if not v:
            raise ValueError("At least one report category must be requested.")
        # Deduplicate, keep first occurrence order.
        return list(dict.fromkeys(v))

    @model_validator(mode="after")
    def validate_custom_dates(self) -> "ReportRequest":
        if self.report_type == ReportType.CUSTOM:
            if self.start_date is None or self.end_date is None:
                raise ValueError("A custom report requires both start_date and end_date.")
            if self.end_date < self.start_date:
                raise ValueError(
                    f"end_date ({self.end_date}) must be >= start_date ({self.start_date})."
                )
        return self


class CategoryResult(BaseModel):
    """Outcome of one statistic source for one period."""

    model_config = ConfigDict(frozen=True)

    category: ReportCategory
    success: bool
    payload: Optional[dict[str, Any]] = None
    reason: Optional[str] = None

    @classmethod
    def ok(cls, category: ReportCategory, payload: dict[str, Any]) -> "CategoryResult":
        return cls(category=category, success=True, payload=payload)

    @classmethod
    def failure(cls, category: ReportCategory, reason: str) -> "CategoryResult":
        return cls(category=category, success=False, reason=reason)

    @model_validator(mode="after")
    def validate_shape(self) -> "CategoryResult":
        if self.success and self.payload is None:
            raise ValueError("A successful CategoryResult needs a payload.")
        if not self.success and self.payload is not None:
            raise ValueError("A failed CategoryResult must not carry a payload.")
        return self


class ReportDocument(BaseModel):
    """Composite report assembled from successful category results.

    Attributes:
        report_id: Store-assigned id; ``None`` before persistence.
        report_type: Report cadence.
        title: Human-readable title, e.g. ``"Weekly Report - 2025-01-01 ~ 2025-01-07"``.
        period: Covered time window.
        generated_at: UTC time of generation.
        requested_categories: Categories asked for, in request order.
        metrics_by_category: Payload per SUCCESSFUL category only.
    """

    model_config = ConfigDict(frozen=True)

    report_id: Optional[int] = None
    report_type: ReportType
    title: str
    period: ReportPeriod
    generated_at: datetime
    requested_categories: list[ReportCategory]
    metrics_by_category: dict[str, dict[str, Any]] = Field(default_factory=dict)

    @property
    def omitted_categories(self) -> list[ReportCategory]:
        """Requested categories that did not make it into the report."""
        return [c for c in self.requested_categories if c not in self.metrics_by_category]
