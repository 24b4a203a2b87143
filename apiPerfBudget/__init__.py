from __future__ import annotations

"""Measure HTTP route latency and enforce percentile budgets."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("apiPerfBudget")
except PackageNotFoundError:  # pragma: no cover - package not installed
    __version__ = "0.1.0"

from apiPerfBudget.analytics.reports import RouteResult, format_results
from apiPerfBudget.observability.budget_check import (
    BudgetCheckResult,
    Violation,
    check_budget,
)
from apiPerfBudget.perf.measure import MeasureOptions, measure_route
from apiPerfBudget.utils.budget import define_budget
from apiPerfBudget.utils.perf_report import LatencyStats, percentile, summarize

__all__ = [
    "__version__",
    "BudgetCheckResult",
    "LatencyStats",
    "MeasureOptions",
    "RouteResult",
    "Violation",
    "check_budget",
    "define_budget",
    "format_results",
    "measure_route",
    "percentile",
    "summarize",
]
