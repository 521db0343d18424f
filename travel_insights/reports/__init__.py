"""
travel_insights.reports — Composite report generation, storage and export.

Modules:
  period     — Report window resolution and titles.
  aggregator — ReportAggregator: runs statistic sources, persists the result.
  export     — JSON and flat CSV export of stored reports.
"""
