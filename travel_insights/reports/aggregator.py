"""
Report aggregator: runs the requested statistic sources for one period and
persists the merged result as a single immutable report.

Flow of one ``generate()`` call:

  Step 1 — Period:   resolve the window from the report type.
  Step 2 — Collect:  call each requested category's source, in request order.
  Step 3 — Assemble: keep successful payloads, build the title.
  Step 4 — Persist:  insert through the injected ``ReportStore``.

Failure isolation
-----------------
- Source returns ``success=False``:  category omitted, WARNING logged.
- Source raises:                     category omitted, WARNING logged.
- No source registered:              category omitted, WARNING logged.
- Source returns a non-result, or a
  result for another category:       category omitted, WARNING logged.
- Store insert raises:               ``ReportPersistenceError``; no document.

Sources run one after another on the caller's thread; a SQLite connection
is never shared across threads.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Mapping, Optional, Protocol

from travel_insights.config import ReportConfig
from travel_insights.errors import ReportPersistenceError
from travel_insights.models.report import (
    CategoryResult,
    ReportDocument,
    ReportPeriod,
    ReportRequest,
)
from travel_insights.reports.period import build_title, resolve_period
from travel_insights.taxonomy.content_taxonomy import ReportCategory
from travel_insights.utils.time_utils import as_utc, utcnow

logger = logging.getLogger(__name__)


class StatisticSource(Protocol):
    """One statistic subsystem.  Must not raise for data problems."""

    def fetch(self, period: ReportPeriod) -> CategoryResult:
        ...


class ReportStore(Protocol):
    """Persistence for generated reports."""

    def insert_report(self, document: ReportDocument) -> int:
        ...


class ReportAggregator:
    """Builds and persists composite reports.

    Args:
        sources: Statistic source per category.  Categories without a source
            are omitted from every report.
        store:   Report persistence.
        config:  Report window settings.
        clock:   Returns the current UTC time (injectable for tests).
    """

    def __init__(
        self,
        sources: Mapping[ReportCategory, StatisticSource],
        store: ReportStore,
        config: ReportConfig,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.sources = dict(sources)
        self.store = store
        self.config = config
        self.clock = clock or utcnow

    def generate(self, request: ReportRequest) -> ReportDocument:
        """Generate, persist and return one report.

        Args:
            request: Validated report request.

        Returns:
            The persisted ``ReportDocument`` carrying its new ``report_id``.

        Raises:
            ReportPersistenceError: If the store insert fails.
        """
        now = as_utc(self.clock())
        period = resolve_period(request, now, self.config)
        logger.info(
            "Generating %s report | %s → %s | categories=%s",
            request.report_type.value,
            period.start.isoformat(),
            period.end.isoformat(),
            [c.value for c in request.categories],
        )

        metrics: dict[str, dict[str, Any]] = {}
        for category in request.categories:
            result = self._collect(category, period)
            if result.success and result.payload is not None:
                metrics[category.value] = result.payload
            else:
                logger.warning(
                    "Category %s omitted from report: %s", category.value, result.reason
                )

        document = ReportDocument(
            report_type=request.report_type,
            title=build_title(request.report_type, period),
            period=period,
            generated_at=now,
            requested_categories=list(request.categories),
            metrics_by_category=metrics,
        )

        try:
            report_id = self.store.insert_report(document)
        except Exception as exc:
            logger.error("Report persistence failed: %s", exc)
            raise ReportPersistenceError(request.report_type.value, exc) from exc

        logger.info(
            "Report %d saved | %d/%d categories",
            report_id,
            len(metrics),
            len(request.categories),
        )
        return document.model_copy(update={"report_id": report_id})

    def _collect(self, category: ReportCategory, period: ReportPeriod) -> CategoryResult:
        source = self.sources.get(category)
        if source is None:
            return CategoryResult.failure(category, "no statistic source registered")
        try:
            result = source.fetch(period)
        except Exception as exc:
            return CategoryResult.failure(category, f"{type(exc).__name__}: {exc}")
        if not isinstance(result, CategoryResult):
            return CategoryResult.failure(
                category, f"source returned {type(result).__name__}, not a CategoryResult"
            )
        if result.category != category:
            return CategoryResult.failure(
                category, f"source returned a result for {result.category.value}"
            )
        return result
