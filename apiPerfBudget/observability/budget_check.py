from __future__ import annotations

"""Compare latency statistics against per-route budgets."""

from dataclasses import dataclass
from typing import Mapping, Tuple, Union

from apiPerfBudget.utils.perf_report import LatencyStats

Measurements = Union[LatencyStats, Mapping[str, float]]


@dataclass(frozen=True, slots=True)
class Violation:
    """A single metric whose measured value exceeded its limit."""

    metric: str
    actual: float
    limit: float

    @property
    def message(self) -> str:
        return f"{self.metric} {self.actual:.2f}ms > {self.limit}ms budget"


@dataclass(frozen=True, slots=True)
class BudgetCheckResult:
    passed: bool
    violations: Tuple[Violation, ...] = ()

    @property
    def status(self) -> str:
        return "pass" if self.passed else "fail"


def check_budget(measurements: Measurements, budget: Mapping[str, float]) -> BudgetCheckResult:
    """Return a verdict for ``measurements`` against ``budget``.

    Budget entries are visited in insertion order. A metric fails only when its
    measured value is strictly greater than the limit. Metric names with no
    measured value are skipped, so an empty budget always passes.
    """

    values = measurements.as_dict() if isinstance(measurements, LatencyStats) else measurements
    violations: list[Violation] = []
    for metric, limit in budget.items():
        actual = values.get(metric)
        if actual is not None and actual > limit:
            violations.append(Violation(metric=metric, actual=actual, limit=limit))
    return BudgetCheckResult(passed=not violations, violations=tuple(violations))


__all__ = ["BudgetCheckResult", "Measurements", "Violation", "check_budget"]
