"""qwalk: Graph Helpers
--------------------

Read-only queries against the external graph collaborator (networkx) shared
by the concrete models. Vertices are addressed by their position in
``graph.nodes()``.
"""

from typing import Any

import networkx as nx
import scipy.sparse as sp

from ..core.errors import QWConfigError

__all__ = [
    "graph_order",
    "adjacency_matrix",
    "laplacian_matrix",
]


def graph_order(graph: Any) -> int:
    """Return the vertex count of ``graph``, rejecting non-graphs and empty graphs."""
    if not isinstance(graph, nx.Graph):
        raise QWConfigError(f"Expected a networkx graph, got {type(graph).__name__}")
    n = graph.number_of_nodes()
    if n == 0:
        raise QWConfigError("Graph must have at least one vertex")
    return n


def adjacency_matrix(graph: nx.Graph, dtype: Any = float) -> sp.csr_matrix:
    """Unweighted adjacency matrix in ``graph.nodes()`` order.

    Entry ``[x, y]`` is 1 when there is an edge from ``x`` to ``y``.
    """
    return sp.csr_matrix(
        nx.to_scipy_sparse_array(graph, nodelist=list(graph), dtype=dtype, weight=None)
    )


def laplacian_matrix(graph: nx.Graph, dtype: Any = float) -> sp.csr_matrix:
    """Unweighted Laplacian ``D - A`` in ``graph.nodes()`` order."""
    adj = adjacency_matrix(graph, dtype)
    degrees = adj.sum(axis=1).A1
    return (sp.diags(degrees) - adj).tocsr()
