from __future__ import annotations

"""Measure every configured route and check it against its budget."""

import json
from pathlib import Path
from typing import Any, Callable, Dict, Mapping

from apiPerfBudget.analytics.reports import RouteResult
from apiPerfBudget.config import RunConfig
from apiPerfBudget.observability.budget_check import check_budget
from apiPerfBudget.perf.measure import MeasureOptions, measure_route
from apiPerfBudget.utils.log_json import JsonLogger
from apiPerfBudget.utils.perf_report import LatencyStats

Measure = Callable[[str, MeasureOptions], LatencyStats]

_logger = JsonLogger("runner")


def run_budgets(config: RunConfig, *, measure: Measure = measure_route) -> Dict[str, RouteResult]:
    results: Dict[str, RouteResult] = {}
    for route, route_cfg in config.routes.items():
        url = config.url_for(route)
        stats = measure(url, config.options_for(route))
        budget = dict(route_cfg.budget)
        result = check_budget(stats, budget)
        _logger.emit(
            "INFO" if result.passed else "WARNING",
            "budget.checked",
            route=route,
            status=result.status,
            latency_ms=round(stats.p95, 3),
            violations=[v.metric for v in result.violations],
        )
        results[route] = RouteResult(measurements=stats, budget=budget, result=result)
    return results


def all_passed(results: Mapping[str, RouteResult]) -> bool:
    return all(entry.result.passed for entry in results.values())


def results_to_json(results: Mapping[str, RouteResult]) -> Dict[str, Any]:
    routes: Dict[str, Any] = {}
    for route, entry in results.items():
        routes[route] = {
            "measurements": entry.measurements.as_dict(),
            "budget": dict(entry.budget),
            "passed": entry.result.passed,
            "violations": [
                {"metric": v.metric, "actual": v.actual, "limit": v.limit}
                for v in entry.result.violations
            ],
        }
    return {"passed": all_passed(results), "routes": routes}


def write_report(results: Mapping[str, RouteResult], path: Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(results_to_json(results), indent=2), encoding="utf-8")
    return path


__all__ = ["all_passed", "results_to_json", "run_budgets", "write_report"]
