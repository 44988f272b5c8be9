"""qwalk: Execution Functions
--------------------------

Pure functions that run any dynamics instance through its
``evolve`` / ``measure`` contract. They hold no state and never mutate the
initial state.

Public API
----------
``execute_single`` : Terminal state after ``runtime`` steps / elapsed time
``execute_single_measured`` : Distribution of the terminal state
``execute_all`` : Every state at steps ``0..runtime`` (discrete only)
``execute_all_measured`` : Distributions of ``execute_all``, one row per step
``execute`` : Dispatch to one of the above by explicit flags
"""

import math
import numbers
from typing import Any

import numpy as np
import scipy.sparse as sp

from .core.errors import QWConfigError, QWUnsupportedError
from .dynamics.base import QWDynamics

__all__ = [
    "execute",
    "execute_single",
    "execute_single_measured",
    "execute_all",
    "execute_all_measured",
]


def _check_state(dynamics: QWDynamics, state: Any) -> np.ndarray:
    """Return a dense copy of ``state`` after checking its length."""
    if sp.issparse(state):
        if state.ndim == 2 and 1 not in state.shape:
            raise QWConfigError(f"Sparse state must be a vector, got shape {state.shape}")
        state = state.toarray().ravel()
    else:
        state = np.array(state)
    dim = dynamics.model.state_dim
    if state.shape != (dim,):
        raise QWConfigError(
            f"State must be a vector of length {dim}, got shape {state.shape}"
        )
    return state


def _check_runtime(dynamics: QWDynamics, runtime: Any) -> Any:
    if dynamics.continuous:
        if not isinstance(runtime, numbers.Real) or not runtime >= 0 or not math.isfinite(runtime):
            raise QWConfigError(
                f"Runtime needs to be a finite nonnegative real, got {runtime!r}"
            )
        return float(runtime)
    if isinstance(runtime, bool) or not isinstance(runtime, numbers.Integral) or runtime < 0:
        raise QWConfigError(
            f"Runtime of a discrete walk needs to be a nonnegative integer, got {runtime!r}"
        )
    return int(runtime)


def execute_single(dynamics: QWDynamics, initial_state: Any, runtime: Any) -> Any:
    """Evolve ``initial_state`` for ``runtime`` and return the terminal state.

    Parameters
    ----------
    dynamics : QWDynamics
        Validated evolution or search instance.
    initial_state : array-like or sparse vector
        Vector of length ``dynamics.model.state_dim``.
    runtime : int or float
        Number of steps for discrete models; elapsed time for continuous ones,
        reached in a single jump.

    Returns
    -------
    ndarray
        Terminal state.

    """
    state = _check_state(dynamics, initial_state)
    runtime = _check_runtime(dynamics, runtime)
    if dynamics.continuous:
        return dynamics.evolve(state, runtime)

    for _ in range(runtime):
        state = dynamics.evolve(state)
    return state


def execute_single_measured(
    dynamics: QWDynamics, initial_state: Any, runtime: Any
) -> np.ndarray:
    """Measure the result of :func:`execute_single` over all vertices."""
    return dynamics.measure(execute_single(dynamics, initial_state, runtime))


def execute_all(dynamics: QWDynamics, initial_state: Any, runtime: Any) -> list[Any]:
    """Return the states at steps ``0..runtime`` (``runtime + 1`` entries).

    Entry ``k + 1`` is ``dynamics.evolve`` applied to entry ``k``; entry 0 is
    a copy of ``initial_state``.

    Raises
    ------
    QWUnsupportedError
        For continuous models, whose intermediate times are not enumerable.

    """
    if dynamics.continuous:
        raise QWUnsupportedError(
            f"execute_all is not defined for continuous model {dynamics.model.name!r}"
        )
    state = _check_state(dynamics, initial_state)
    runtime = _check_runtime(dynamics, runtime)

    states = [state]
    for _ in range(runtime):
        state = dynamics.evolve(state)
        states.append(state)
    return states


def execute_all_measured(
    dynamics: QWDynamics, initial_state: Any, runtime: Any
) -> np.ndarray:
    """Measure every state of :func:`execute_all`; row ``k`` belongs to step ``k``."""
    states = execute_all(dynamics, initial_state, runtime)
    return np.vstack([dynamics.measure(s) for s in states])


def execute(
    dynamics: QWDynamics,
    initial_state: Any,
    runtime: Any,
    *,
    measured: bool | None = None,
    all_steps: bool | None = None,
) -> Any:
    """Dispatch to one of the four execution functions.

    Parameters
    ----------
    measured : bool, optional
        Return distributions instead of states.
    all_steps : bool, optional
        Return every intermediate step instead of the terminal one.

    Raises
    ------
    QWConfigError
        If neither flag is given; the variant has to be chosen explicitly.

    """
    if measured is None and all_steps is None:
        raise QWConfigError(
            "execute needs an explicit variant: pass measured= and/or all_steps="
        )
    if all_steps:
        if measured:
            return execute_all_measured(dynamics, initial_state, runtime)
        return execute_all(dynamics, initial_state, runtime)
    if measured:
        return execute_single_measured(dynamics, initial_state, runtime)
    return execute_single(dynamics, initial_state, runtime)
