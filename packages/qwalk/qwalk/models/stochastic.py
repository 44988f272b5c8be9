"""qwalk: Stochastic Matrices
--------------------------

Construction and validation of column-stochastic matrices on graphs. Column
``x`` holds the transition distribution out of vertex ``x``.
"""

from typing import Any

import networkx as nx
import numpy as np
import scipy.sparse as sp

from ..core.config import get_config
from ..core.errors import QWConfigError
from .base import adjacency_matrix, graph_order

__all__ = ["default_stochastic", "check_stochastic", "as_sparse"]


def as_sparse(matrix: Any) -> sp.csr_matrix:
    """Convert an array-like or sparse matrix to float CSR."""
    if sp.issparse(matrix):
        return sp.csr_matrix(matrix, dtype=float)
    arr = np.asarray(matrix, dtype=float)
    if arr.ndim != 2:
        raise QWConfigError(f"Expected a 2-D matrix, got shape {arr.shape}")
    return sp.csr_matrix(arr)


def default_stochastic(graph: nx.Graph) -> sp.csr_matrix:
    """Uniform random-walk matrix of ``graph``.

    Column ``x`` is ``1/outdeg(x)`` on every out-neighbour of ``x``.

    Raises
    ------
    QWConfigError
        If some vertex has no outgoing edge.

    """
    graph_order(graph)
    adj = adjacency_matrix(graph)
    out_degrees = np.asarray(adj.sum(axis=1)).ravel()
    if np.any(out_degrees == 0):
        isolated = [v for v, d in zip(graph, out_degrees) if d == 0]
        raise QWConfigError(
            f"Graph cannot have vertices with 0 outdegree: {isolated}"
        )
    return (adj.T @ sp.diags(1.0 / out_degrees)).tocsr()


def check_stochastic(
    graph: nx.Graph, stochastic: Any, atol: float | None = None
) -> None:
    """Validate ``stochastic`` as a column-stochastic matrix on ``graph``.

    Checks that the matrix is square of order equal to the graph's vertex
    count, non-negative, and that every column sums to 1 within ``atol``.

    Raises
    ------
    QWConfigError
        Listing the violated condition.

    """
    if atol is None:
        atol = get_config().stochastic_atol

    n = graph_order(graph)
    mat = as_sparse(stochastic)
    shape = mat.shape
    if len(shape) != 2 or shape[0] != shape[1]:
        raise QWConfigError(f"Stochastic matrix must be square, got shape {shape}")
    if shape[0] != n:
        raise QWConfigError(
            f"Stochastic matrix order {shape[0]} does not match graph order {n}"
        )

    if mat.nnz and mat.data.min() < 0:
        raise QWConfigError("Stochastic matrix must be non-negative")

    col_sums = np.asarray(mat.sum(axis=0)).ravel()
    if not np.allclose(col_sums, 1.0, rtol=0.0, atol=atol):
        bad = np.flatnonzero(~np.isclose(col_sums, 1.0, rtol=0.0, atol=atol))
        raise QWConfigError(
            f"Stochastic matrix columns must sum to 1; offending columns: {bad.tolist()}"
        )
