from __future__ import annotations

import os

import pytest
from pytest_socket import disable_socket, enable_socket


@pytest.fixture(autouse=True)
def _disable_network(request: pytest.FixtureRequest):
    """Restrict network access while allowing opt-in socket usage."""

    if os.getenv("PYTEST_ALLOW_NETWORK", "0") == "1":
        yield
        return

    if request.node.get_closest_marker("enable_socket"):
        enable_socket()
        try:
            yield
        finally:
            disable_socket()
    else:
        disable_socket()
        try:
            yield
        finally:
            enable_socket()
