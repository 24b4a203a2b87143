from __future__ import annotations

"""Percentile math and latency sample reduction."""

import math
from dataclasses import asdict, dataclass
from typing import Dict, Iterable, Sequence

PERCENTILES: Dict[str, float] = {
    "p50": 50,
    "p75": 75,
    "p90": 90,
    "p95": 95,
    "p99": 99,
}


def percentile(sorted_values: Sequence[float], p: float) -> float:
    """Return the ``p``-th percentile of ``sorted_values``.

    Values between two order statistics are linearly interpolated. The input
    must already be sorted ascending; it is neither sorted nor checked here.
    An empty sequence yields ``0``. Callers must keep ``p`` within [0, 100];
    values outside that range are not validated and give undefined results.
    """

    if not sorted_values:
        return 0
    k = (p / 100) * (len(sorted_values) - 1)
    f = math.floor(k)
    c = math.ceil(k)
    if f == c:
        return sorted_values[f]
    lower = sorted_values[f]
    return lower + (k - f) * (sorted_values[c] - lower)


@dataclass(frozen=True, slots=True)
class LatencyStats:
    """Latency statistics in milliseconds for one measurement run."""

    p50: float
    p75: float
    p90: float
    p95: float
    p99: float
    min: float
    max: float
    mean: float
    median: float
    count: int

    @classmethod
    def empty(cls) -> "LatencyStats":
        return cls(
            p50=0, p75=0, p90=0, p95=0, p99=0, min=0, max=0, mean=0, median=0, count=0
        )

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)


def summarize(latencies: Iterable[float]) -> LatencyStats:
    """Reduce raw latency observations (any order) into :class:`LatencyStats`.

    ``latencies`` is copied before sorting. The mean is a plain ``sum / n``;
    compensated summation is not needed for millisecond-scale samples of a few
    thousand values.
    """

    data = sorted(latencies)
    if not data:
        return LatencyStats.empty()
    points = {name: percentile(data, pct) for name, pct in PERCENTILES.items()}
    return LatencyStats(
        **points,
        min=data[0],
        max=data[-1],
        mean=sum(data) / len(data),
        median=points["p50"],
        count=len(data),
    )


__all__ = ["PERCENTILES", "LatencyStats", "percentile", "summarize"]
