from __future__ import annotations

"""Issue HTTP requests in concurrency-bounded batches and time each one."""

import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, replace
from typing import Any, List, Mapping, Optional

import requests
from requests.adapters import HTTPAdapter

from apiPerfBudget.utils.log_json import JsonLogger
from apiPerfBudget.utils.perf_report import LatencyStats, summarize

_BODYLESS_METHODS = {"GET", "HEAD"}

_logger = JsonLogger("measure")


@dataclass(frozen=True)
class MeasureOptions:
    requests: int = 100
    concurrency: int = 10
    method: str = "GET"
    headers: Optional[Mapping[str, str]] = None
    body: Optional[str] = None
    timeout_s: Optional[float] = 30.0

    def validate(self) -> None:
        if self.requests < 0:
            raise ValueError(f"requests must be >= 0, got {self.requests}")
        if self.concurrency < 1:
            raise ValueError(f"concurrency must be >= 1, got {self.concurrency}")


@dataclass(frozen=True, slots=True)
class _Timing:
    elapsed_ms: float
    error: Optional[str] = None


def _build_session(concurrency: int) -> requests.Session:
    session = requests.Session()
    adapter = HTTPAdapter(pool_connections=1, pool_maxsize=concurrency)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session


def _measure_single_request(
    session: requests.Session, url: str, options: MeasureOptions
) -> _Timing:
    method = options.method.upper()
    body = None if method in _BODYLESS_METHODS else options.body
    headers = dict(options.headers) if options.headers else None
    start = time.perf_counter()
    try:
        resp = session.request(
            method, url, headers=headers, data=body, timeout=options.timeout_s
        )
        resp.close()
    except Exception as exc:  # noqa: BLE001 - any failure is one timing observation
        # Failures still count as one observation: time until the failure.
        return _Timing((time.perf_counter() - start) * 1000.0, error=type(exc).__name__)
    return _Timing((time.perf_counter() - start) * 1000.0)


def batch_sizes(total: int, concurrency: int) -> List[int]:
    """Return the size of each sequential batch for ``total`` requests."""

    return [min(concurrency, total - start) for start in range(0, total, concurrency)]


def measure_route(url: str, options: MeasureOptions | None = None, **overrides: Any) -> LatencyStats:
    """Measure ``url`` and return latency statistics in milliseconds.

    Requests run in sequential batches of at most ``concurrency`` concurrent
    calls; each batch completes before the next starts. Transport errors are
    not raised, the elapsed time up to the failure is recorded instead, so the
    result always holds exactly ``requests`` observations.
    """

    opts = replace(options or MeasureOptions(), **overrides)
    opts.validate()
    latencies: List[float] = []
    failures = 0
    _logger.info(
        "measure.start",
        url=url,
        method=opts.method.upper(),
        requests=opts.requests,
        concurrency=opts.concurrency,
    )
    if opts.requests == 0:
        return LatencyStats.empty()
    with _build_session(opts.concurrency) as session, ThreadPoolExecutor(
        max_workers=opts.concurrency, thread_name_prefix="apiperfbudget"
    ) as pool:
        for size in batch_sizes(opts.requests, opts.concurrency):
            futures = [
                pool.submit(_measure_single_request, session, url, opts) for _ in range(size)
            ]
            for future in futures:
                timing = future.result()
                latencies.append(timing.elapsed_ms)
                if timing.error is not None:
                    failures += 1
    stats = summarize(latencies)
    if failures:
        _logger.warning(
            "measure.transport_errors",
            url=url,
            failures=failures,
            requests=opts.requests,
        )
    _logger.info(
        "measure.complete",
        url=url,
        latency_ms=round(stats.p95, 3),
        count=stats.count,
        p50_ms=round(stats.p50, 3),
        p99_ms=round(stats.p99, 3),
    )
    return stats


__all__ = ["MeasureOptions", "batch_sizes", "measure_route"]
