"""Dynamics protocol, parameter bags and search results."""

from .base import QSearchState, QWDynamics, QWEvolution, QWSearch
from .parameters import HamiltonianParameters, OperatorParameters

__all__ = [
    "QWDynamics",
    "QWEvolution",
    "QWSearch",
    "QSearchState",
    "OperatorParameters",
    "HamiltonianParameters",
]
