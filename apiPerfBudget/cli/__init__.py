"""Command line interface; run with ``python -m apiPerfBudget.cli``."""
