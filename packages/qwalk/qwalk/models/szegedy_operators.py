"""qwalk: Szegedy Operators
------------------------

Sparse reflection and oracle operators of the Szegedy walk on the doubled
space ``C^n ⊗ C^n``. The basis state ``|x, y>`` sits at index ``x * n + y``.

- ``R1 = Σ_x |x><x| ⊗ 2|s_x><s_x| - I``: block diagonal, block ``x`` acts on
  the second register.
- ``R2 = Σ_x 2|s_x><s_x| ⊗ |x><x| - I``: the same projectors scattered onto
  the stride-``n`` positions ``x, x + n, x + 2n, ...``.
- ``Q1 = D ⊗ I`` and ``Q2 = I ⊗ D`` where ``D`` is the identity with ``-1`` at
  the marked vertices.

Here ``s_x`` is column ``x`` of the model's ``sqrtstochastic`` matrix.
"""

from collections.abc import Iterable

import numpy as np
import scipy.sparse as sp

from ..core.errors import get_logger

__all__ = [
    "szegedy_walk_operators",
    "szegedy_oracle_operators",
    "szegedy_projectors",
]

logger = get_logger()


def szegedy_projectors(sqrtstochastic: sp.spmatrix) -> list[sp.csr_matrix]:
    """Return ``2 |s_x><s_x|`` for every column ``s_x`` of ``sqrtstochastic``."""
    cols = sp.csc_matrix(sqrtstochastic)
    return [
        (2 * (cols[:, [x]] @ cols[:, [x]].T)).tocsr()
        for x in range(cols.shape[1])
    ]


def szegedy_walk_operators(model) -> tuple[sp.csr_matrix, sp.csr_matrix]:
    """Build the two reflection operators ``(R1, R2)`` of a Szegedy model.

    Both are real, symmetric and involutory when every column of
    ``model.sqrtstochastic`` has unit norm, i.e. when the underlying matrix is
    column-stochastic.

    Parameters
    ----------
    model : Szegedy
        Model providing ``order`` and ``sqrtstochastic``.

    Returns
    -------
    tuple of csr_matrix
        ``(R1, R2)``, each of shape ``(n**2, n**2)``.

    """
    order = model.order
    projectors = szegedy_projectors(model.sqrtstochastic)
    identity = sp.identity(order**2, format="csr")

    r1 = sp.block_diag(projectors, format="csr") - identity

    rows, cols, vals = [], [], []
    for x, proj in enumerate(projectors):
        coo = proj.tocoo()
        rows.append(coo.row * order + x)
        cols.append(coo.col * order + x)
        vals.append(coo.data)
    r2 = sp.coo_matrix(
        (np.concatenate(vals), (np.concatenate(rows), np.concatenate(cols))),
        shape=(order**2, order**2),
    ).tocsr() - identity

    logger.debug(
        f"Built Szegedy walk operators of dimension {order**2} "
        f"(nnz {r1.nnz} / {r2.nnz})"
    )
    return r1.tocsr(), r2.tocsr()


def szegedy_oracle_operators(
    model, marked: Iterable[int]
) -> tuple[sp.csr_matrix, sp.csr_matrix]:
    """Build the oracle operators ``(Q1, Q2)`` marking ``marked`` vertices.

    ``Q1`` flips the sign of ``|x, y>`` when ``x`` is marked, ``Q2`` when ``y``
    is marked.
    """
    order = model.order
    diag = np.ones(order)
    diag[list(marked)] = -1.0
    marked_identity = sp.diags(diag, format="csr")
    identity = sp.identity(order, format="csr")

    q1 = sp.kron(marked_identity, identity, format="csr")
    q2 = sp.kron(identity, marked_identity, format="csr")
    return q1, q2
