"""qwalk: Classical Random Walk
----------------------------

Discrete stochastic walk used as a classical baseline. The state is a
probability vector over the vertices and one step applies the
column-stochastic matrix.
"""

from collections.abc import Iterable
from typing import Any, ClassVar

import networkx as nx
import numpy as np
import scipy.sparse as sp

from ..core.errors import QWConfigError
from ..core.registry import register
from ..dynamics.base import QWEvolution, select_vertices
from ..dynamics.parameters import OperatorParameters
from .base import graph_order
from .stochastic import as_sparse, default_stochastic
from .stochastic import check_stochastic as _check_stochastic

__all__ = ["RandomWalk", "RandomWalkEvolution"]


@register("model", "random_walk")
class RandomWalk:
    """Classical random walk model.

    Parameters
    ----------
    graph : networkx.Graph
        Underlying graph.
    stochastic : array-like or sparse matrix, optional
        Column-stochastic transition matrix; defaults to the uniform walk.
    check_stochastic : bool, optional
        Validate ``stochastic``; defaults to True only for a user-supplied matrix.

    """

    name: ClassVar[str] = "random_walk"
    description: ClassVar[str] = "Classical discrete random walk"
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
            check_stochastic = bool(check_stochastic)
        else:
            stochastic = as_sparse(stochastic)
            check_stochastic = True if check_stochastic is None else check_stochastic

        if check_stochastic:
            _check_stochastic(graph, stochastic)
        elif stochastic.shape != (order, order):
            raise QWConfigError(
                f"Stochastic matrix shape {stochastic.shape} does not match "
                f"graph order {order}"
            )

        self._graph = graph
        self._order = order
        self._stochastic = stochastic

    @property
    def graph(self) -> nx.Graph:
        return self._graph

    @property
    def order(self) -> int:
        return self._order

    @property
    def state_dim(self) -> int:
        return self._order

    @property
    def stochastic(self) -> sp.csr_matrix:
        return self._stochastic


class RandomWalkEvolution(QWEvolution):
    """Evolution of a probability vector under the model's stochastic matrix."""

    def __init__(
        self, model: RandomWalk, parameters: OperatorParameters | None = None
    ) -> None:
        if parameters is None:
            if not isinstance(model, RandomWalk):
                raise QWConfigError(
                    f"RandomWalkEvolution requires a RandomWalk model, "
                    f"got {type(model).__name__}"
                )
            parameters = OperatorParameters((model.stochastic,))
        super().__init__(model, parameters)

    @classmethod
    def validate(cls, model: Any, parameters: Any) -> None:
        if not isinstance(model, RandomWalk):
            raise QWConfigError(
                f"RandomWalkEvolution requires a RandomWalk model, "
                f"got {type(model).__name__}"
            )
        if not isinstance(parameters, OperatorParameters) or len(parameters.operators) != 1:
            raise QWConfigError("Parameters should hold exactly one operator")
        (op,) = parameters.operators
        if not sp.issparse(op) or op.shape != (model.order, model.order):
            raise QWConfigError(
                f"Operator must be a sparse {model.order}x{model.order} matrix"
            )

    def evolve(self, state: Any) -> np.ndarray:
        (op,) = self.parameters.operators
        return op @ np.asarray(state, dtype=float)

    def measure(self, state: Any, vertices: Iterable[int] | None = None) -> np.ndarray:
        """The state already is the distribution; a copy is returned."""
        probabilities = np.array(state, dtype=float)
        return select_vertices(probabilities, vertices, self.model.order)
