"""qwalk: Szegedy Walk
-------------------

Discrete bipartite quantum walk built from a graph's stochastic matrix, on a
state space of dimension ``order**2``. Search operators follow the
two-oracle construction of https://arxiv.org/abs/1611.02238.

Public API
----------
``Szegedy`` : Model holding the element-wise square root of a stochastic matrix
``SzegedyEvolution`` : Plain evolution, one step = ``R2 @ R1``
``SzegedySearch`` : Search, one step = ``(R2 Q2) @ (R1 Q1)``
``szegedy_initial_state`` : ``vec(sqrtstochastic) / sqrt(order)``
"""

from collections.abc import Iterable
from typing import Any, ClassVar

import networkx as nx
import numpy as np
import scipy.sparse as sp

from ..core.errors import QWConfigError, get_logger
from ..core.registry import register
from ..dynamics.base import QWEvolution, QWSearch, select_vertices
from ..dynamics.parameters import OperatorParameters
from .base import graph_order
from .stochastic import as_sparse, default_stochastic
from .stochastic import check_stochastic as _check_stochastic
from .szegedy_operators import szegedy_oracle_operators, szegedy_walk_operators

__all__ = [
    "Szegedy",
    "SzegedyEvolution",
    "SzegedySearch",
    "szegedy_initial_state",
]

logger = get_logger()


@register("model", "szegedy")
class Szegedy:
    """Szegedy walk model.

    Parameters
    ----------
    graph : networkx.Graph
        Underlying graph.
    stochastic : array-like or sparse matrix, optional
        Column-stochastic matrix of order ``graph.number_of_nodes()``.
        Defaults to the uniform random walk of ``graph``.
    check_stochastic : bool, optional
        Whether to validate ``stochastic``. Defaults to True for a
        user-supplied matrix and False for the default one, whose
        construction already guarantees the property.

    Raises
    ------
    QWConfigError
        If the matrix has the wrong order or, when checked, is not
        column-stochastic.

    """

    name: ClassVar[str] = "szegedy"
    description: ClassVar[str] = "Szegedy discrete quantum walk"
    continuous: ClassVar[bool] = False

    def __init__(
        self,
        graph: nx.Graph,
        stochastic: Any | None = None,
        check_stochastic: bool | None = None,
    ) -> None:
        order = graph_order(graph)
        if stochastic is None:
            stochastic = default_stochastic(graph)
            if check_stochastic is None:
                check_stochastic = False
        else:
            stochastic = as_sparse(stochastic)
            if check_stochastic is None:
                check_stochastic = True

        if check_stochastic:
            _check_stochastic(graph, stochastic)
        elif stochastic.shape != (order, order):
            raise QWConfigError(
                f"Stochastic matrix shape {stochastic.shape} does not match "
                f"graph order {order}"
            )

        self._graph = graph
        self._order = order
        self._sqrtstochastic = abs(stochastic).sqrt().tocsr()

    @property
    def graph(self) -> nx.Graph:
        return self._graph

    @property
    def order(self) -> int:
        return self._order

    @property
    def state_dim(self) -> int:
        return self._order**2

    @property
    def sqrtstochastic(self) -> sp.csr_matrix:
        """Element-wise square root of the stochastic matrix."""
        return self._sqrtstochastic


def szegedy_initial_state(model: Szegedy) -> np.ndarray:
    """Uniform superposition of the edge states: block ``x`` holds column ``x`` of
    ``sqrtstochastic``, scaled by ``1/sqrt(order)``."""
    return model.sqrtstochastic.T.toarray().reshape(-1) / np.sqrt(model.order)


def _require_szegedy(model: Any) -> None:
    if not isinstance(model, Szegedy):
        raise QWConfigError(
            f"Szegedy dynamics require a Szegedy model, got {type(model).__name__}"
        )


def _check_szegedy(model: Any, parameters: Any) -> None:
    """Check that ``parameters`` holds two sparse operators of size ``order**2``."""
    _require_szegedy(model)
    if not isinstance(parameters, OperatorParameters):
        raise QWConfigError("Parameters should be OperatorParameters with key operators")
    operators = parameters.operators
    if len(operators) != 2:
        raise QWConfigError(f"Expected 2 operators, got {len(operators)}")
    if not all(sp.issparse(op) for op in operators):
        raise QWConfigError("Operators should be scipy.sparse matrices")
    dim = model.order**2
    if any(op.shape != (dim, dim) for op in operators):
        raise QWConfigError(
            f"Operators sizes mismatch: expected {(dim, dim)}, "
            f"got {[op.shape for op in operators]}"
        )


def _evolve(parameters: OperatorParameters, state: Any) -> np.ndarray:
    out = np.asarray(state)
    for op in parameters.operators:
        out = op @ out
    return out


def _measure(model: Szegedy, state: Any, vertices: Iterable[int] | None) -> np.ndarray:
    order = model.order
    probabilities = (np.abs(np.asarray(state)) ** 2).reshape(order, order).sum(axis=1)
    return select_vertices(probabilities, vertices, order)


class SzegedyEvolution(QWEvolution):
    """Plain Szegedy evolution.

    Parameters
    ----------
    model : Szegedy
        Walk model.
    parameters : OperatorParameters, optional
        Precomputed ``(R1, R2)``; built from ``model`` when omitted.

    """

    def __init__(self, model: Szegedy, parameters: OperatorParameters | None = None):
        if parameters is None:
            _require_szegedy(model)
            parameters = OperatorParameters(szegedy_walk_operators(model))
        super().__init__(model, parameters)

    @classmethod
    def validate(cls, model: Any, parameters: Any) -> None:
        _check_szegedy(model, parameters)

    def initial_state(self) -> np.ndarray:
        return szegedy_initial_state(self.model)

    def evolve(self, state: Any) -> np.ndarray:
        return _evolve(self.parameters, state)

    def measure(self, state: Any, vertices: Iterable[int] | None = None) -> np.ndarray:
        """Probability of each vertex: squared moduli summed over its block."""
        return _measure(self.model, state, vertices)


class SzegedySearch(QWSearch):
    """Quantum search driven by the Szegedy walk.

    Parameters
    ----------
    model : Szegedy
        Walk model.
    marked : iterable of int
        Marked vertices.
    penalty : float, default 0.0
        Cost of state preparation and measurement in steps.
    parameters : OperatorParameters, optional
        Precomputed ``(R1 Q1, R2 Q2)``; built from ``model`` and ``marked``
        when omitted.

    """

    def __init__(
        self,
        model: Szegedy,
        marked: Iterable[int],
        penalty: float = 0.0,
        parameters: OperatorParameters | None = None,
    ) -> None:
        if parameters is None:
            _require_szegedy(model)
            marked = self.normalize_marked(model, marked)
            r1, r2 = szegedy_walk_operators(model)
            q1, q2 = szegedy_oracle_operators(model, marked)
            parameters = OperatorParameters(((r1 @ q1).tocsr(), (r2 @ q2).tocsr()))
        super().__init__(model, parameters, marked, penalty)

    @classmethod
    def validate(cls, model: Any, parameters: Any, marked: tuple[int, ...]) -> None:
        _check_szegedy(model, parameters)

    def initial_state(self) -> np.ndarray:
        return szegedy_initial_state(self.model)

    def evolve(self, state: Any) -> np.ndarray:
        return _evolve(self.parameters, state)

    def measure(self, state: Any, vertices: Iterable[int] | None = None) -> np.ndarray:
        return _measure(self.model, state, vertices)

    def with_marked(
        self, marked: Iterable[int] | None = None, penalty: float | None = None
    ) -> "SzegedySearch":
        """Return the search for a new marked set and/or penalty.

        The walk operators are not rebuilt: when the marked set changes, the
        stored step operators are right-multiplied by the difference oracles
        ``Q_old @ Q_new``; when it does not, they are reused as-is.
        """
        model = self.model
        marked = self.marked if marked is None else self.normalize_marked(model, marked)
        penalty = self.penalty if penalty is None else penalty

        operators = self.parameters.operators
        if set(marked) != set(self.marked):
            old = szegedy_oracle_operators(model, self.marked)
            new = szegedy_oracle_operators(model, marked)
            operators = tuple(
                (op @ (q_old @ q_new)).tocsr()
                for op, q_old, q_new in zip(operators, old, new)
            )
            logger.debug(f"Patched Szegedy oracle: {self.marked} -> {marked}")

        return SzegedySearch(
            model, marked, penalty, parameters=OperatorParameters(operators)
        )
