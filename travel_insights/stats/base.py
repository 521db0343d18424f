"""
Base class for statistic sources.

Subclasses set ``category`` and implement ``_collect(period) -> dict``.
``fetch()`` never raises: any exception from ``_collect`` becomes a
``CategoryResult.failure`` carrying the exception text, so one broken
subsystem cannot abort a report.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, ClassVar

from travel_insights.models.report import CategoryResult, ReportPeriod
from travel_insights.taxonomy.content_taxonomy import ReportCategory

logger = logging.getLogger(__name__)


class StatisticUnavailable(Exception):
    """Raised by ``_collect`` when the data cannot support the statistic."""


class StatisticSource(ABC):
    """One report category's data collector."""

    category: ClassVar[ReportCategory]

    def fetch(self, period: ReportPeriod) -> CategoryResult:
        """Collect this category's payload for ``period``.

        Returns:
            ``CategoryResult.ok`` with the payload, or ``CategoryResult.failure``
            if collection raised.
        """
        try:
            payload = self._collect(period)
        except StatisticUnavailable as exc:
            logger.info("%s unavailable: %s", self.category.value, exc)
            return CategoryResult.failure(self.category, str(exc))
        except Exception as exc:
            logger.warning("%s collection failed: %s", self.category.value, exc, exc_info=True)
            return CategoryResult.failure(self.category, f"{type(exc).__name__}: {exc}")
        return CategoryResult.ok(self.category, payload)

    @abstractmethod
    def _collect(self, period: ReportPeriod) -> dict[str, Any]:
        ...
