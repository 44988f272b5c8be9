"""Pytest configuration for qwalk tests."""

import sys
from pathlib import Path

import networkx as nx
import pytest

# This file is in tests/qwalk/; root is ../../
packages_dir = Path(__file__).parents[2] / "packages"
sys.path.insert(0, str(packages_dir / "qwalk"))

from qwalk.core.config import set_config  # noqa: E402


@pytest.fixture(autouse=True)
def reset_config():
    """Make every test start from the built-in default configuration."""
    set_config(None)
    yield
    set_config(None)


@pytest.fixture
def k4():
    return nx.complete_graph(4)


@pytest.fixture
def k5():
    return nx.complete_graph(5)


@pytest.fixture
def path3():
    return nx.path_graph(3)


@pytest.fixture
def cycle6():
    return nx.cycle_graph(6)
