"""qwalk: Continuous-Time Quantum Walk
-----------------------------------

Continuous-time walk generated by the adjacency or Laplacian matrix of an
undirected graph. States evolve as ``exp(iHt) v``; dense Hamiltonians are
exponentiated directly, sparse ones via a Krylov approximation of the action.

Public API
----------
``CTQW`` : Model with a Hamiltonian mode (``"adjacency"`` / ``"laplacian"``)
``CTQWEvolution`` : Plain evolution under ``jumping_rate * G``
``CTQWSearch`` : Search under ``jumping_rate * A + Σ_m |m><m|`` (adjacency)
    or ``-jumping_rate * L + Σ_m |m><m|`` (Laplacian)
``graph_hamiltonian`` : Adjacency or Laplacian matrix in the model's storage form
``default_jumping_rate`` : ``1 / |lambda_max(A)|``
"""

from collections.abc import Iterable
from typing import Any, ClassVar

import networkx as nx
import numpy as np
import scipy.sparse as sp

from ..core.config import QWalkConfig, get_config
from ..core.errors import QWConfigError, get_logger
from ..core.registry import register
from ..dynamics.base import QWEvolution, QWSearch, select_vertices
from ..dynamics.parameters import HamiltonianParameters
from ..linalg import (
    hamiltonian_evolution,
    largest_eigenvalues,
    largest_magnitude_eigenvalue,
)
from .base import adjacency_matrix, graph_order, laplacian_matrix

__all__ = [
    "CTQW",
    "CTQWEvolution",
    "CTQWSearch",
    "HAMILTONIAN_MODES",
    "graph_hamiltonian",
    "default_jumping_rate",
]

logger = get_logger()

HAMILTONIAN_MODES = ("adjacency", "laplacian")


@register("model", "ctqw")
class CTQW:
    """Continuous-time quantum walk model.

    Parameters
    ----------
    graph : networkx.Graph
        Undirected graph.
    matrix : str, default "adjacency"
        Hamiltonian mode, one of ``HAMILTONIAN_MODES``.
    dense : bool, default False
        Store the Hamiltonian as a dense ndarray instead of a sparse matrix.

    Raises
    ------
    QWConfigError
        If the graph is directed or ``matrix`` is not a supported mode.

    """

    name: ClassVar[str] = "ctqw"
    description: ClassVar[str] = "Continuous-time quantum walk"
    continuous: ClassVar[bool] = True

    def __init__(
        self, graph: nx.Graph, matrix: str = "adjacency", dense: bool = False
    ) -> None:
        order = graph_order(graph)
        if graph.is_directed():
            raise QWConfigError("CTQW requires an undirected graph")
        if matrix not in HAMILTONIAN_MODES:
            raise QWConfigError(
                f"Unsupported Hamiltonian mode {matrix!r}; "
                f"expected one of {HAMILTONIAN_MODES}"
            )
        self._graph = graph
        self._order = order
        self._matrix = matrix
        self._dense = bool(dense)

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
    def matrix(self) -> str:
        return self._matrix

    @property
    def dense(self) -> bool:
        return self._dense

    def __repr__(self) -> str:
        return f"CTQW(order={self._order}, matrix={self._matrix!r}, dense={self._dense})"


def graph_hamiltonian(model: CTQW) -> Any:
    """Adjacency or Laplacian matrix of ``model.graph``, dense or sparse per ``model.dense``."""
    if model.matrix == "adjacency":
        h = adjacency_matrix(model.graph)
    elif model.matrix == "laplacian":
        h = laplacian_matrix(model.graph)
    else:
        raise QWConfigError(f"Model {model} poorly parametrized")
    return h.toarray() if model.dense else h


def default_jumping_rate(model: CTQW, config: QWalkConfig | None = None) -> float:
    """Reciprocal of the largest-magnitude adjacency eigenvalue.

    Only defined for the adjacency mode. An edgeless graph has no meaningful
    rate and gets 1.0.

    Raises
    ------
    QWConfigError
        For the Laplacian mode.
    QWNumericalError
        If the eigenvalue iteration fails.

    """
    if model.matrix != "adjacency":
        raise QWConfigError("Default jumping rate known for adjacency matrix only")
    if model.graph.number_of_edges() == 0:
        logger.debug("Edgeless graph: jumping rate set to 1.0")
        return 1.0
    config = config or get_config()
    return 1.0 / abs(largest_magnitude_eigenvalue(graph_hamiltonian(model), config.eigen))


def _marked_projector(model: CTQW, marked: Iterable[int]) -> Any:
    diag = np.zeros(model.order)
    diag[list(marked)] = 1.0
    return np.diag(diag) if model.dense else sp.diags(diag, format="csr")


def _search_hamiltonian(model: CTQW, marked: tuple[int, ...], rate: float) -> Any:
    h = graph_hamiltonian(model)
    # negated Laplacian: uniform state and marked projector share the top of the spectrum
    h = rate * h if model.matrix == "adjacency" else -rate * h
    h = h + _marked_projector(model, marked)
    return h if model.dense else sp.csr_matrix(h)


def _require_ctqw(model: Any) -> None:
    if not isinstance(model, CTQW):
        raise QWConfigError(
            f"CTQW dynamics require a CTQW model, got {type(model).__name__}"
        )


def _check_ctqw(model: Any, parameters: Any) -> None:
    _require_ctqw(model)
    if not isinstance(parameters, HamiltonianParameters):
        raise QWConfigError("Parameters should be HamiltonianParameters")
    h = parameters.hamiltonian
    if not (sp.issparse(h) or isinstance(h, np.ndarray)):
        raise QWConfigError("Hamiltonian should be an ndarray or scipy.sparse matrix")
    if h.shape != (model.order, model.order):
        raise QWConfigError(
            f"Hamiltonian size mismatch: expected {(model.order, model.order)}, "
            f"got {h.shape}"
        )


class _CTQWDynamicsMixin:
    """Shared evolution and measurement of CTQW dynamics."""

    _config: QWalkConfig | None

    def evolve(self, state: Any, time: float) -> np.ndarray:
        """Return ``exp(i H time) state`` (a jump, not an increment)."""
        config = self._config or get_config()
        return hamiltonian_evolution(
            self.parameters.hamiltonian, state, time, config.krylov
        )

    def initial_state(self) -> np.ndarray:
        """Uniform superposition over all vertices."""
        n = self.model.order
        return np.full(n, 1.0 / np.sqrt(n), dtype=complex)

    def measure(self, state: Any, vertices: Iterable[int] | None = None) -> np.ndarray:
        probabilities = np.abs(np.asarray(state)) ** 2
        return select_vertices(probabilities, vertices, self.model.order)


class CTQWEvolution(_CTQWDynamicsMixin, QWEvolution):
    """Plain CTQW evolution under ``jumping_rate * G``.

    Parameters
    ----------
    model : CTQW
        Walk model.
    parameters : HamiltonianParameters, optional
        Precomputed Hamiltonian; built from ``model`` when omitted.
    jumping_rate : float, default 1.0
        Scale of the graph matrix when ``parameters`` is omitted.
    config : QWalkConfig, optional
        Numerical limits; the global configuration is used when omitted.

    """

    def __init__(
        self,
        model: CTQW,
        parameters: HamiltonianParameters | None = None,
        jumping_rate: float = 1.0,
        config: QWalkConfig | None = None,
    ) -> None:
        if parameters is None:
            _require_ctqw(model)
            parameters = HamiltonianParameters(
                jumping_rate * graph_hamiltonian(model), float(jumping_rate)
            )
        self._config = config
        super().__init__(model, parameters)

    @classmethod
    def validate(cls, model: Any, parameters: Any) -> None:
        _check_ctqw(model, parameters)


class CTQWSearch(_CTQWDynamicsMixin, QWSearch):
    """Quantum search by continuous-time walk.

    Parameters
    ----------
    model : CTQW
        Walk model.
    marked : iterable of int
        Marked vertices.
    penalty : float, default 0.0
        Cost of state preparation and measurement in units of time.
    jumping_rate : float, optional
        Scale of the graph matrix; defaults to :func:`default_jumping_rate`,
        which only exists for the adjacency mode.
    parameters : HamiltonianParameters, optional
        Precomputed search Hamiltonian.
    config : QWalkConfig, optional
        Numerical limits; the global configuration is used when omitted.

    """

    def __init__(
        self,
        model: CTQW,
        marked: Iterable[int],
        penalty: float = 0.0,
        jumping_rate: float | None = None,
        parameters: HamiltonianParameters | None = None,
        config: QWalkConfig | None = None,
    ) -> None:
        self._config = config
        if parameters is None:
            _require_ctqw(model)
            marked = self.normalize_marked(model, marked)
            if jumping_rate is None:
                jumping_rate = default_jumping_rate(model, config)
            parameters = HamiltonianParameters(
                _search_hamiltonian(model, marked, jumping_rate), float(jumping_rate)
            )
        super().__init__(model, parameters, marked, penalty)

    @classmethod
    def validate(cls, model: Any, parameters: Any, marked: tuple[int, ...]) -> None:
        _check_ctqw(model, parameters)

    @property
    def jumping_rate(self) -> float:
        return self.parameters.jumping_rate

    def spectral_gap(self) -> float:
        """Gap between the two largest eigenvalues of the search Hamiltonian."""
        config = self._config or get_config()
        values = largest_eigenvalues(self.parameters.hamiltonian, 2, config.eigen)
        return float(values[0] - values[1])

    def with_marked(
        self, marked: Iterable[int] | None = None, penalty: float | None = None
    ) -> "CTQWSearch":
        """Return the search for a new marked set and/or penalty.

        The Hamiltonian is patched by swapping the oracle projectors; the
        jumping rate is kept.
        """
        model = self.model
        marked = self.marked if marked is None else self.normalize_marked(model, marked)
        penalty = self.penalty if penalty is None else penalty

        h = self.parameters.hamiltonian
        if set(marked) != set(self.marked):
            h = h - _marked_projector(model, self.marked) + _marked_projector(model, marked)
            if not model.dense:
                h = sp.csr_matrix(h)
            logger.debug(f"Patched CTQW oracle: {self.marked} -> {marked}")

        return CTQWSearch(
            model,
            marked,
            penalty,
            parameters=HamiltonianParameters(h, self.jumping_rate),
            config=self._config,
        )
