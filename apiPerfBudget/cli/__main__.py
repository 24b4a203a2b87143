from __future__ import annotations

"""Top-level CLI for measuring routes and enforcing latency budgets."""

import click

from apiPerfBudget import __version__
from apiPerfBudget.cli import perf


@click.group()
@click.version_option(__version__)
def cli() -> None:  # pragma: no cover - simple wrapper
    """apiPerfBudget command line."""


cli.add_command(perf.measure)
cli.add_command(perf.check)
cli.add_command(perf.budgets)


def main() -> None:  # pragma: no cover - CLI entrypoint
    cli()


if __name__ == "__main__":  # pragma: no cover
    main()
