"""qwalk: Parameter Bags
---------------------

Typed containers for the derived, expensive-to-recompute data a dynamics
instance carries next to its model. Each model family uses exactly one of
them; the bag is built once at construction and treated as read-only.
"""

from dataclasses import dataclass
from typing import Any

__all__ = ["OperatorParameters", "HamiltonianParameters"]


@dataclass(frozen=True, eq=False)
class OperatorParameters:
    """Precomputed step operators, applied in order for one discrete step.

    Attributes
    ----------
    operators : tuple
        Sparse matrices; the random walk holds one, Szegedy holds two.

    """

    operators: tuple[Any, ...]


@dataclass(frozen=True, eq=False)
class HamiltonianParameters:
    """Hamiltonian of a continuous-time walk.

    Attributes
    ----------
    hamiltonian : ndarray or scipy.sparse matrix
        Hermitian generator, already scaled by ``jumping_rate`` and including
        any oracle term.
    jumping_rate : float
        Scalar the graph matrix was multiplied by.

    """

    hamiltonian: Any
    jumping_rate: float = 1.0
