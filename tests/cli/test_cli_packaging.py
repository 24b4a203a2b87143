from __future__ import annotations

import subprocess
import sys

from apiPerfBudget import __version__


def test_python_module_version():
    out = subprocess.check_output([sys.executable, "-m", "apiPerfBudget.cli", "--version"], text=True)
    assert __version__ in out.strip()


def test_python_module_help_lists_commands():
    out = subprocess.check_output([sys.executable, "-m", "apiPerfBudget.cli", "--help"], text=True)
    for command in ("measure", "check", "budgets"):
        assert command in out
