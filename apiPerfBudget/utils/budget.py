"""Latency budget registry helpers."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Mapping

import yaml

from apiPerfBudget.utils.log_json import JsonLogger
from apiPerfBudget.utils.perf_report import PERCENTILES

Budget = Mapping[str, float]

METRICS = tuple(PERCENTILES)

_logger = JsonLogger("budget")


class BudgetConfigError(ValueError):
    """Raised when a budget file cannot be interpreted."""


def define_budget(budgets: Mapping[str, Budget]) -> Dict[str, Dict[str, float]]:
    """Return an independent copy of ``budgets`` keyed by route.

    Both the outer mapping and each route's budget are copied, so callers may
    keep a central registry without sharing mutable state.
    """

    return {route: dict(budget) for route, budget in budgets.items()}


def _coerce_limit(route: str, metric: str, value: Any) -> float:
    if isinstance(value, bool):
        raise BudgetConfigError(f"{route}: limit for {metric} must be a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise BudgetConfigError(
            f"{route}: limit for {metric} must be a number, got {value!r}"
        ) from None


def parse_budget(route: str, raw: Mapping[str, Any] | None) -> Dict[str, float]:
    """Validate a single route budget, warning about unknown metric names."""

    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise BudgetConfigError(f"{route}: budget must be a mapping of metric to limit")
    budget: Dict[str, float] = {}
    for metric, value in raw.items():
        metric = str(metric)
        if metric not in METRICS:
            _logger.warning(
                "budget.unknown_metric",
                route=route,
                metric=metric,
                known=list(METRICS),
            )
        budget[metric] = _coerce_limit(route, metric, value)
    return budget


def load_budgets(path: Path) -> Dict[str, Dict[str, float]]:
    """Load route budgets from a YAML or JSON file.

    The document is either a mapping of route to budget or has such a mapping
    under a ``routes`` key.
    """

    path = Path(path)
    if not path.exists():
        raise BudgetConfigError(f"Budget file not found: {path}")
    text = path.read_text(encoding="utf-8")
    try:
        data = yaml.safe_load(text) if path.suffix in {".yml", ".yaml"} else json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise BudgetConfigError(f"Failed to parse {path}: {exc}") from exc
    data = data or {}
    if not isinstance(data, Mapping):
        raise BudgetConfigError(f"{path}: expected a mapping of routes to budgets")
    routes = data.get("routes", data)
    budgets: Dict[str, Dict[str, float]] = {}
    for route, entry in (routes or {}).items():
        raw = entry.get("budget", entry) if isinstance(entry, Mapping) else entry
        budgets[str(route)] = parse_budget(str(route), raw)
    return define_budget(budgets)


__all__ = [
    "Budget",
    "BudgetConfigError",
    "METRICS",
    "define_budget",
    "load_budgets",
    "parse_budget",
]
