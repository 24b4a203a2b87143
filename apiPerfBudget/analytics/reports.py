"""Human-readable rendering of budget check results."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Mapping

from tabulate import tabulate

from apiPerfBudget.observability.budget_check import BudgetCheckResult
from apiPerfBudget.utils.perf_report import PERCENTILES, LatencyStats

TITLE = "API Performance Budget Report"
RULE_WIDTH = 70


@dataclass(frozen=True)
class RouteResult:
    measurements: LatencyStats
    budget: Mapping[str, float]
    result: BudgetCheckResult


def _to_fixed1(value: float) -> str:
    """One decimal place, exact halves rounded up (as JavaScript toFixed does)."""
    return str(Decimal(value).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def _format_limit(value: float) -> str:
    """Render a limit the way it was written: ``200`` rather than ``200.0``."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_results(route_results: Mapping[str, RouteResult]) -> str:
    """Render ``route_results`` as a fixed-width text report."""
    lines: List[str] = [TITLE, "=" * RULE_WIDTH, ""]
    for route, entry in route_results.items():
        stats = entry.measurements
        status = "PASS" if entry.result.passed else "FAIL"
        lines.append(f"[{status}] {route}")
        lines.append(
            "  "
            + "  ".join(f"{name}={_to_fixed1(getattr(stats, name))}ms" for name in PERCENTILES)
        )
        for violation in entry.result.violations:
            lines.append(
                f"  VIOLATION: {violation.metric} = {_to_fixed1(violation.actual)}ms"
                f" (limit: {_format_limit(violation.limit)}ms)"
            )
        lines.append("")
    return "\n".join(lines)


def format_table(route_results: Mapping[str, RouteResult]) -> str:
    """Render ``route_results`` as a compact table, one row per route."""
    headers = ["Route", "Status", *PERCENTILES, "Count", "Violations"]
    rows = []
    for route, entry in route_results.items():
        stats = entry.measurements
        rows.append(
            [
                route,
                entry.result.status.upper(),
                *(round(getattr(stats, name), 1) for name in PERCENTILES),
                stats.count,
                ", ".join(v.metric for v in entry.result.violations) or "-",
            ]
        )
    return tabulate(rows, headers=headers, floatfmt=".1f")


def stats_table(stats: LatencyStats) -> str:
    rows: Dict[str, float] = stats.as_dict()
    return tabulate(
        [(name, value) for name, value in rows.items()],
        headers=["Metric", "Value (ms)"],
        floatfmt=".1f",
    )


__all__ = ["RULE_WIDTH", "RouteResult", "TITLE", "format_results", "format_table", "stats_table"]
