"""
Sign-up growth prediction.

Fits an ordinary least-squares line to daily sign-up counts over the
``prediction_history_days`` ending at the period end (starting no earlier
than the first registered user), then extrapolates
``prediction_horizon_days`` ahead.  The fit's R² (clamped to [0, 1]) is the
confidence; each prediction carries a band of
``predicted * (1 - confidence) * 0.3`` either side.

Fewer than ``min_prediction_history_days`` days of history is reported as
unavailable, not as an error.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from travel_insights.config import ReportConfig
from travel_insights.db.repositories.activity_repo import ActivityRepository
from travel_insights.models.report import ReportPeriod
from travel_insights.stats.base import StatisticSource, StatisticUnavailable
from travel_insights.taxonomy.content_taxonomy import ReportCategory
from travel_insights.utils.time_utils import date_range, parse_db_timestamp, start_of_day

BAND_RATIO = 0.3
NEXT_MONTH_DAYS = 30


@dataclass(frozen=True)
class LinearFit:
    slope:     float
    intercept: float
    r2:        float

    def at(self, x: float) -> float:
        return self.slope * x + self.intercept


def linear_regression(ys: list[float]) -> LinearFit:
    """Least-squares fit of ``ys`` against their indices ``0..n-1``.

    A flat series (zero variance) has R² 1.0 when fitted exactly.
    """
    n = len(ys)
    if n == 0:
        raise ValueError("linear_regression needs at least one value.")
    xs = range(n)
    sum_x = sum(xs)
    sum_y = sum(ys)
    sum_xy = sum(x * y for x, y in zip(xs, ys))
    sum_xx = sum(x * x for x in xs)

    denom = n * sum_xx - sum_x * sum_x
    slope = (n * sum_xy - sum_x * sum_y) / denom if denom else 0.0
    intercept = (sum_y - slope * sum_x) / n

    mean_y = sum_y / n
    ss_res = sum((y - (slope * x + intercept)) ** 2 for x, y in zip(xs, ys))
    ss_tot = sum((y - mean_y) ** 2 for y in ys)
    if ss_tot == 0:
        r2 = 1.0 if ss_res < 1e-12 else 0.0
    else:
        r2 = 1 - ss_res / ss_tot
    return LinearFit(slope=slope, intercept=intercept, r2=r2)


def _round(x: float) -> int:
    """Half-up rounding to an integer."""
    return int(math.floor(x + 0.5))


class PredictionSource(StatisticSource):
    category = ReportCategory.PREDICTIONS

    def __init__(self, repo: ActivityRepository, config: ReportConfig) -> None:
        self.repo = repo
        self.config = config

    def _collect(self, period: ReportPeriod) -> dict[str, Any]:
        end = period.end
        window_start = start_of_day(end - timedelta(days=self.config.prediction_history_days - 1))

        first = self.repo.first_user_created_at()
        if first is None:
            raise StatisticUnavailable("no registered users to predict from")
        start = max(window_start, start_of_day(parse_db_timestamp(first)))
        if start > end:
            raise StatisticUnavailable("no registered users before the period end")

        days = date_range(start.date(), end.date())
        if len(days) < self.config.min_prediction_history_days:
            raise StatisticUnavailable(
                f"need at least {self.config.min_prediction_history_days} days of history, "
                f"have {len(days)}"
            )

        counts = self.repo.daily_counts("users", start, end)
        history = [{"date": d.isoformat(), "users": counts.get(d.isoformat(), 0)} for d in days]
        fit = linear_regression([float(h["users"]) for h in history])

        avg = sum(h["users"] for h in history) / len(history)
        confidence = min(1.0, max(0.0, fit.r2))
        last_index = len(history) - 1

        predictions: list[dict[str, Any]] = []
        for i in range(1, self.config.prediction_horizon_days + 1):
            value = fit.at(last_index + i)
            margin = value * (1 - confidence) * BAND_RATIO
            predictions.append(
                {
                    "date":        (days[-1] + timedelta(days=i)).isoformat(),
                    "predicted":   max(0, _round(value)),
                    "lower_bound": max(0, _round(value - margin)),
                    "upper_bound": max(0, _round(value + margin)),
                }
            )

        return {
            "historical_data":       history,
            "growth_rate":           fit.slope / avg * 100 if avg > 0 else 0.0,
            "next_month_prediction": max(0, _round(fit.at(last_index + NEXT_MONTH_DAYS))),
            "r2":                    fit.r2,
            "predictions":           predictions,
        }
