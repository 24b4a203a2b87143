from __future__ import annotations

import json
from pathlib import Path

import click
from tabulate import tabulate

from apiPerfBudget.analytics.reports import format_results, format_table, stats_table
from apiPerfBudget.config import ConfigError, load_config
from apiPerfBudget.perf import runner
from apiPerfBudget.perf.measure import MeasureOptions, measure_route


def _parse_headers(values: tuple[str, ...]) -> dict[str, str]:
    headers: dict[str, str] = {}
    for raw in values:
        name, sep, value = raw.partition(":")
        if not sep or not name.strip():
            raise click.BadParameter(f"expected NAME:VALUE, got {raw!r}", param_hint="--header")
        headers[name.strip()] = value.strip()
    return headers


def _load(config_file: Path | None, base_url: str | None):
    try:
        cfg = load_config(config_file)
    except ConfigError as exc:
        raise click.ClickException(str(exc))
    if base_url:
        cfg.base_url = base_url
    return cfg


@click.command()
@click.argument("url")
@click.option("--requests", "request_count", type=int, default=100, show_default=True)
@click.option("--concurrency", type=int, default=10, show_default=True)
@click.option("--method", default="GET", show_default=True)
@click.option("--header", "headers", multiple=True, help="Repeatable NAME:VALUE header.")
@click.option("--body", default=None, help="Request body (ignored for GET/HEAD).")
@click.option("--timeout", "timeout_s", type=float, default=30.0, show_default=True)
@click.option("--json", "as_json", is_flag=True, default=False, help="Print JSON instead of a table.")
def measure(
    url: str,
    request_count: int,
    concurrency: int,
    method: str,
    headers: tuple[str, ...],
    body: str | None,
    timeout_s: float,
    as_json: bool,
) -> None:
    """Measure latency of URL and print the statistics."""
    options = MeasureOptions(
        requests=request_count,
        concurrency=concurrency,
        method=method,
        headers=_parse_headers(headers) or None,
        body=body,
        timeout_s=timeout_s,
    )
    try:
        stats = measure_route(url, options)
    except ValueError as exc:
        raise click.BadParameter(str(exc))
    if as_json:
        click.echo(json.dumps(stats.as_dict(), indent=2))
    else:
        click.echo(stats_table(stats))


@click.command()
@click.option("--config", "config_file", type=click.Path(path_type=Path), default=None)
@click.option("--base-url", default=None, help="Override the configured base URL.")
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["text", "table"]),
    default="text",
    show_default=True,
)
@click.option("--out", type=click.Path(path_type=Path), default=None, help="Write a JSON report.")
def check(config_file: Path | None, base_url: str | None, fmt: str, out: Path | None) -> None:
    """Measure every configured route and enforce its budget."""
    cfg = _load(config_file, base_url)
    try:
        results = runner.run_budgets(cfg)
    except ValueError as exc:
        raise click.ClickException(str(exc))
    click.echo(format_table(results) if fmt == "table" else format_results(results))
    if out is not None:
        runner.write_report(results, out)
        click.echo(f"Wrote {out}")
    if not runner.all_passed(results):
        raise click.ClickException("performance budget failed")


@click.command()
@click.option("--config", "config_file", type=click.Path(path_type=Path), default=None)
def budgets(config_file: Path | None) -> None:
    """List configured routes and their budgets."""
    cfg = _load(config_file, None)
    rows = [
        (route, cfg.url_for(route), ", ".join(f"{k}<={v:g}ms" for k, v in budget.items()) or "-")
        for route, budget in cfg.budgets().items()
    ]
    click.echo(tabulate(rows, headers=["Route", "URL", "Budget"]))


__all__ = ["budgets", "check", "measure"]
