"""
Exceptions raised across package boundaries.

Statistic-source and recommendation-fetch failures are NOT exceptions at
the public surface: they are captured as ``CategoryResult.failure`` or as
empty lists.  Only the errors below escape to callers.
"""

from __future__ import annotations


class TravelInsightsError(RuntimeError):
    """Base class for travel-insights errors."""


class ReportPersistenceError(TravelInsightsError):
    """Raised when a generated report could not be written to the store.

    No report document is returned to the caller in this case.

    Attributes:
        report_type: The report type being persisted.
    """

    def __init__(self, report_type: str, cause: BaseException) -> None:
        self.report_type = report_type
        super().__init__(f"Failed to persist {report_type} report: {cause}")


class ReportNotFoundError(TravelInsightsError):
    """Raised when a stored report id does not exist.

    Attributes:
        report_id: The id that was looked up.
    """

    def __init__(self, report_id: int) -> None:
        self.report_id = report_id
        super().__init__(f"Report {report_id} not found.")
