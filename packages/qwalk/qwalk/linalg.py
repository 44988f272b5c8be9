"""qwalk: Linear-Algebra Primitives
--------------------------------

Thin wrappers around NumPy/SciPy routines used by the continuous-time models.

Public API
----------
``hamiltonian_evolution`` : ``exp(iHt) v`` via dense exponentiation or a
    Lanczos approximation of the action for sparse ``H``
``expm_multiply_lanczos`` : Krylov approximation of ``exp(i t H) v``
``largest_magnitude_eigenvalue`` : ARPACK estimate of ``max |lambda|``
``largest_eigenvalues`` : The ``k`` largest algebraic eigenvalues

Notes
-----
- Hamiltonians are assumed Hermitian (real symmetric for graph matrices).
- ARPACK failures surface as ``QWNumericalError`` with the cause chained.

"""

import math
from typing import Any

import numpy as np
import scipy.linalg
import scipy.sparse as sp
from scipy.sparse.linalg import ArpackError, ArpackNoConvergence, eigsh

from .core.config import EigenConfig, KrylovConfig, get_config
from .core.errors import QWNumericalError

__all__ = [
    "hamiltonian_evolution",
    "expm_multiply_lanczos",
    "largest_magnitude_eigenvalue",
    "largest_eigenvalues",
]


def hamiltonian_evolution(
    hamiltonian: Any,
    state: Any,
    runtime: float,
    config: KrylovConfig | None = None,
) -> np.ndarray:
    """Evolve ``state`` for ``runtime`` under the Schrödinger evolution ``exp(iHt)``.

    Dense Hamiltonians are exponentiated directly and multiplied; sparse ones
    go through :func:`expm_multiply_lanczos`, so the exponential is never
    materialized.

    Parameters
    ----------
    hamiltonian : ndarray or scipy.sparse matrix
        Hermitian matrix of shape ``(n, n)``.
    state : array-like
        Vector of length ``n``. Not modified.
    runtime : float
        Elapsed time.
    config : KrylovConfig, optional
        Limits for the sparse path; defaults to the global configuration.

    Returns
    -------
    ndarray
        Complex evolved state.

    """
    v = np.asarray(state, dtype=complex)
    if sp.issparse(hamiltonian):
        return expm_multiply_lanczos(hamiltonian, v, runtime, config)
    h = np.asarray(hamiltonian)
    return scipy.linalg.expm(1j * runtime * h) @ v


def expm_multiply_lanczos(
    hamiltonian: Any,
    state: np.ndarray,
    runtime: float,
    config: KrylovConfig | None = None,
) -> np.ndarray:
    """Lanczos approximation of ``exp(i * runtime * H) @ state``.

    The time interval is split into sub-steps with ``|dt| * ||H||_1`` bounded
    by ``config.max_step_norm``; each sub-step projects ``H`` onto a Krylov
    subspace of dimension at most ``config.krylov_dim`` (fully
    re-orthogonalized), exponentiates the small tridiagonal matrix and maps
    the result back.
    """
    if config is None:
        config = get_config().krylov

    v = np.array(state, dtype=complex)
    n = v.shape[0]
    if runtime == 0 or n == 0:
        return v

    h_norm = float(abs(hamiltonian).sum(axis=0).max()) if hamiltonian.nnz else 0.0
    if h_norm == 0.0:
        return v

    n_steps = max(1, math.ceil(abs(runtime) * h_norm / config.max_step_norm))
    dt = runtime / n_steps
    m = min(config.krylov_dim, n)

    for _ in range(n_steps):
        v = _lanczos_step(hamiltonian, v, dt, m, config.tol)
    return v


def _lanczos_step(
    hamiltonian: Any, v: np.ndarray, dt: float, m: int, tol: float
) -> np.ndarray:
    """Single Krylov sub-step of :func:`expm_multiply_lanczos`."""
    n = v.shape[0]
    beta0 = float(np.linalg.norm(v))
    if beta0 < tol:
        return np.zeros_like(v)

    V = np.zeros((n, m + 1), dtype=complex)
    alpha = np.zeros(m)
    beta = np.zeros(m + 1)
    V[:, 0] = v / beta0

    dim = m
    for j in range(m):
        w = hamiltonian @ V[:, j]
        alpha[j] = np.vdot(V[:, j], w).real
        w = w - alpha[j] * V[:, j]
        if j > 0:
            w = w - beta[j] * V[:, j - 1]
        # full re-orthogonalization
        w = w - V[:, : j + 1] @ (V[:, : j + 1].conj().T @ w)

        beta[j + 1] = float(np.linalg.norm(w))
        if beta[j + 1] < tol:
            dim = j + 1
            break
        V[:, j + 1] = w / beta[j + 1]

    T = np.diag(alpha[:dim]) + np.diag(beta[1:dim], 1) + np.diag(beta[1:dim], -1)
    expT = scipy.linalg.expm(1j * dt * T)
    return beta0 * (V[:, :dim] @ expT[:, 0])


def largest_magnitude_eigenvalue(
    matrix: Any, config: EigenConfig | None = None
) -> float:
    """Return the eigenvalue of largest magnitude of a symmetric matrix.

    Sparse matrices use ARPACK (``eigsh``, ``which="LM"``); dense matrices and
    matrices too small for ARPACK use a full symmetric eigendecomposition.

    Raises
    ------
    QWNumericalError
        If ARPACK does not converge within ``config.maxiter`` iterations.

    """
    if config is None:
        config = get_config().eigen

    n = matrix.shape[0]
    if not sp.issparse(matrix) or n < 3:
        dense = matrix.toarray() if sp.issparse(matrix) else np.asarray(matrix)
        values = np.linalg.eigvalsh(dense.astype(float))
        return float(values[np.argmax(np.abs(values))])

    try:
        values = eigsh(
            matrix.astype(float),
            k=1,
            which="LM",
            tol=config.tol,
            maxiter=config.maxiter,
            return_eigenvectors=False,
        )
    except (ArpackNoConvergence, ArpackError) as e:
        raise QWNumericalError(f"Largest eigenvalue estimation failed: {e}") from e
    return float(values[0])


def largest_eigenvalues(
    matrix: Any, k: int = 2, config: EigenConfig | None = None
) -> np.ndarray:
    """Return the ``k`` largest algebraic eigenvalues in descending order."""
    if config is None:
        config = get_config().eigen

    n = matrix.shape[0]
    if not sp.issparse(matrix) or k >= n - 1:
        dense = matrix.toarray() if sp.issparse(matrix) else np.asarray(matrix)
        values = np.linalg.eigvalsh(dense)
    else:
        try:
            values = eigsh(
                matrix,
                k=k,
                which="LA",
                tol=config.tol,
                maxiter=config.maxiter,
                return_eigenvectors=False,
            )
        except (ArpackNoConvergence, ArpackError) as e:
            raise QWNumericalError(f"Eigenvalue estimation failed: {e}") from e
    return np.sort(np.real(values))[::-1][:k]
