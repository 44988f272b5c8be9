"""qwalk: Quantum Search Maximization
----------------------------------

Find the runtime that maximizes the success probability of a search
dynamics instance, optionally normalized by the runtime plus the search's
penalty.

Modes
-----
- Exact, discrete: every step ``1..max_runtime`` is simulated sequentially.
- Exact, continuous: a uniform time grid on ``(0, max_runtime]`` (optionally
  evaluated by a thread pool), followed by bounded golden-section/Brent
  refinement around the best grid point.
- Heuristic, continuous only: the success probability is taken to be
  ``sin^2(gap * t / 2)`` and its first peak ``t = pi / gap`` is evaluated.
  Only reliable on graph families where the approximation holds (e.g.
  complete graphs).
"""

import math
import numbers
import warnings
from concurrent.futures import ThreadPoolExecutor
from typing import Any

import numpy as np
from scipy.optimize import minimize_scalar

from .core.config import QWalkConfig, get_config
from .core.errors import (
    QWConfigError,
    QWNumericalError,
    QWUnsupportedError,
    QWWarning,
    get_logger,
)
from .dynamics.base import QSearchState, QWSearch
from .engine import _check_state, execute_single

__all__ = ["maximize_search", "search_objective"]

logger = get_logger()

OBJECTIVES = ("efficiency", "probability")


def search_objective(
    result: QSearchState, penalty: float, objective: str = "efficiency"
) -> float:
    """Score of a candidate: ``p / (runtime + penalty)`` or plain ``p``."""
    if objective == "probability":
        return result.total_probability
    return result.total_probability / (result.runtime + penalty)


def maximize_search(
    search: QWSearch,
    initial_state: Any | None = None,
    max_runtime: float | None = None,
    *,
    use_exact: bool = True,
    objective: str | None = None,
    config: QWalkConfig | None = None,
) -> QSearchState:
    """Return the best ``(state, probability, runtime)`` record of ``search``.

    Parameters
    ----------
    search : QWSearch
        Validated search instance.
    initial_state : array-like or sparse vector, optional
        Defaults to ``search.initial_state()``.
    max_runtime : int or float, optional
        Upper bound of the searched runtimes; defaults to the vertex count.
        Must be an integer for discrete models.
    use_exact : bool, default True
        Simulate candidates instead of using the sinusoidal heuristic.
    objective : {"efficiency", "probability"}, optional
        Ranking of candidates; defaults to ``config.search.objective``. Ties
        go to the earliest runtime.
    config : QWalkConfig, optional
        Search settings; the global configuration is used when omitted.

    Raises
    ------
    QWConfigError
        If ``max_runtime`` is not a finite positive number or the objective
        is unknown.
    QWUnsupportedError
        For heuristic mode on a discrete model.

    """
    config = config or get_config()
    objective = objective or config.search.objective
    if objective not in OBJECTIVES:
        raise QWConfigError(f"Unknown objective {objective!r}; expected one of {OBJECTIVES}")

    if max_runtime is None:
        max_runtime = search.model.order
    if isinstance(max_runtime, bool) or not isinstance(max_runtime, numbers.Real):
        raise QWConfigError(f"max_runtime must be a number, got {max_runtime!r}")
    if not max_runtime > 0 or not math.isfinite(max_runtime):
        raise QWConfigError(
            f"max_runtime needs to be a finite positive number, got {max_runtime}"
        )

    if initial_state is None:
        initial_state = search.initial_state()
    initial_state = _check_state(search, initial_state)

    if not search.continuous:
        if not use_exact:
            raise QWUnsupportedError("Heuristic search is defined for continuous models only")
        if not isinstance(max_runtime, numbers.Integral):
            raise QWConfigError(
                f"max_runtime of a discrete walk needs to be an integer, got {max_runtime!r}"
            )
        result = _maximize_discrete(search, initial_state, int(max_runtime), objective)
    elif use_exact:
        result = _maximize_continuous(
            search, initial_state, float(max_runtime), objective, config
        )
    else:
        result = _maximize_heuristic(search, initial_state, float(max_runtime))

    logger.info(
        f"Search on {search.model.name!r} marked={list(search.marked)}: "
        f"runtime={result.runtime:.6g}, probability={result.total_probability:.6g}"
    )
    return result


def _maximize_discrete(
    search: QWSearch, initial_state: Any, max_runtime: int, objective: str
) -> QSearchState:
    state = initial_state
    best: QSearchState | None = None
    best_score = -math.inf
    for runtime in range(1, max_runtime + 1):
        state = search.evolve(state)
        candidate = QSearchState.measured(search, state, runtime)
        score = search_objective(candidate, search.penalty, objective)
        if score > best_score:
            best, best_score = candidate, score
    return best


def _maximize_continuous(
    search: QWSearch,
    initial_state: Any,
    max_runtime: float,
    objective: str,
    config: QWalkConfig,
) -> QSearchState:
    settings = config.search

    def trial(runtime: float) -> QSearchState:
        runtime = float(runtime)
        return QSearchState.measured(
            search, execute_single(search, initial_state, runtime), runtime
        )

    def score(candidate: QSearchState) -> float:
        return search_objective(candidate, search.penalty, objective)

    n = settings.grid_points
    times = np.linspace(max_runtime / n, max_runtime, n)
    if settings.workers > 1:
        with ThreadPoolExecutor(max_workers=settings.workers) as pool:
            candidates = list(pool.map(trial, times))
    else:
        candidates = [trial(t) for t in times]

    scores = [score(c) for c in candidates]
    i = int(np.argmax(scores))  # first maximum, i.e. earliest runtime
    best, best_score = candidates[i], scores[i]

    lo = times[i - 1] if i > 0 else times[i]
    hi = times[i + 1] if i < n - 1 else times[i]
    if hi > lo:
        res = minimize_scalar(
            lambda t: -score(trial(t)),
            bounds=(lo, hi),
            method="bounded",
            options={"xatol": settings.xatol},
        )
        refined = trial(res.x)
        refined_score = score(refined)
        if refined_score > best_score:
            best = refined
        logger.debug(
            f"Refined search runtime {times[i]:.6g} -> {refined.runtime:.6g} "
            f"(score {best_score:.6g} -> {refined_score:.6g})"
        )
    return best


def _maximize_heuristic(
    search: QWSearch, initial_state: Any, max_runtime: float
) -> QSearchState:
    gap = search.spectral_gap()
    if not gap > 0:
        raise QWNumericalError(f"Spectral gap must be positive, got {gap}")

    runtime = math.pi / gap
    if runtime > max_runtime:
        msg = (
            f"Estimated optimal runtime {runtime:.6g} exceeds max_runtime "
            f"{max_runtime:.6g}; clamping"
        )
        warnings.warn(msg, QWWarning, stacklevel=3)
        logger.warning(msg)
        runtime = max_runtime

    return QSearchState.measured(
        search, execute_single(search, initial_state, runtime), runtime
    )
