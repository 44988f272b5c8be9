"""qwalk: Dynamics Base Classes
----------------------------

Generic contract every model + parameter-bag combination satisfies, and the
search-result container.

Contract
--------
- ``validate(model, parameters[, marked])`` (classmethod): raise
  ``QWConfigError`` on any inconsistency; called exactly once, from the
  constructor, so an invalid instance never exists.
- ``evolve(state)`` for discrete models advances one step;
  ``evolve(state, time)`` for continuous models jumps straight from ``state``
  to elapsed time ``time``.
- ``measure(state, vertices=None)``: non-negative probabilities over all
  vertices, or over ``vertices`` in the given order. Never mutates ``state``.

The execution functions in :mod:`qwalk.engine` are written once against this
contract.
"""

import math
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

import numpy as np

from ..core.errors import QWConfigError, QWUnsupportedError
from ..core.protocols import QWModel

__all__ = [
    "QWDynamics",
    "QWEvolution",
    "QWSearch",
    "QSearchState",
    "select_vertices",
]


def select_vertices(
    probabilities: np.ndarray, vertices: Iterable[int] | None, order: int
) -> np.ndarray:
    """Restrict a per-vertex distribution to ``vertices`` (in the given order)."""
    if vertices is None:
        return probabilities
    items = list(vertices)
    for v in items:
        if isinstance(v, bool) or not isinstance(v, (int, np.integer)):
            raise QWConfigError(f"Vertex {v!r} is not an integer index")
    idx = np.asarray(items, dtype=int)
    if idx.size and (idx.min() < 0 or idx.max() >= order):
        raise QWConfigError(f"Vertices must lie in [0, {order}), got {idx.tolist()}")
    return probabilities[idx]


class QWDynamics(ABC):
    """Model plus its parameter bag, validated as a coherent unit."""

    def __init__(self, model: QWModel, parameters: Any) -> None:
        self._model = model
        self._parameters = parameters

    @property
    def model(self) -> QWModel:
        return self._model

    @property
    def parameters(self) -> Any:
        return self._parameters

    @property
    def continuous(self) -> bool:
        return self._model.continuous

    @abstractmethod
    def evolve(self, state: Any, *time: float) -> Any:
        """Return the next state (one step, or the state at elapsed ``time``)."""
        ...

    @abstractmethod
    def measure(self, state: Any, vertices: Iterable[int] | None = None) -> np.ndarray:
        """Return the probability distribution over all or selected vertices."""
        ...


class QWEvolution(QWDynamics):
    """Plain evolution of a walk model."""

    def __init__(self, model: QWModel, parameters: Any) -> None:
        type(self).validate(model, parameters)
        super().__init__(model, parameters)

    @classmethod
    @abstractmethod
    def validate(cls, model: QWModel, parameters: Any) -> None:
        """Raise ``QWConfigError`` unless ``model`` and ``parameters`` fit."""
        ...


class QWSearch(QWDynamics):
    """Quantum search on a walk model.

    Parameters
    ----------
    model : QWModel
        Walk model.
    parameters : Any
        Model-specific parameter bag including the oracle.
    marked : iterable of int
        Non-empty set of distinct vertex indices in ``[0, order)``. Iteration
        order is kept and defines the order of measured probabilities.
    penalty : float, default 0.0
        Non-negative cost of state preparation and measurement, in units of
        one evolution step (or unit time).

    """

    def __init__(
        self,
        model: QWModel,
        parameters: Any,
        marked: Iterable[int],
        penalty: float = 0.0,
    ) -> None:
        marked = self.normalize_marked(model, marked)
        penalty = self.normalize_penalty(penalty)
        type(self).validate(model, parameters, marked)
        super().__init__(model, parameters)
        self._marked = marked
        self._penalty = penalty

    @staticmethod
    def normalize_marked(model: QWModel, marked: Iterable[int]) -> tuple[int, ...]:
        """Return ``marked`` as a tuple of ints after range and uniqueness checks."""
        try:
            items = tuple(marked)
        except TypeError as e:
            raise QWConfigError(f"Marked vertices must be iterable: {e}") from e
        if not items:
            raise QWConfigError("Marked vertices needs to be a non-empty set")

        order = model.order
        result = []
        for v in items:
            if isinstance(v, bool) or not isinstance(v, (int, np.integer)):
                raise QWConfigError(f"Marked vertex {v!r} is not an integer index")
            if not 0 <= v < order:
                raise QWConfigError(
                    f"Marked vertex {v} outside vertex range [0, {order})"
                )
            result.append(int(v))
        if len(set(result)) != len(result):
            raise QWConfigError(f"Marked vertices must be distinct: {result}")
        return tuple(result)

    @staticmethod
    def normalize_penalty(penalty: float) -> float:
        try:
            penalty = float(penalty)
        except (TypeError, ValueError) as e:
            raise QWConfigError(f"Penalty must be a number, got {penalty!r}") from e
        if not penalty >= 0 or not math.isfinite(penalty):
            raise QWConfigError(f"Penalty needs to be finite and nonnegative, got {penalty}")
        return penalty

    @property
    def marked(self) -> tuple[int, ...]:
        return self._marked

    @property
    def penalty(self) -> float:
        return self._penalty

    @classmethod
    @abstractmethod
    def validate(
        cls, model: QWModel, parameters: Any, marked: tuple[int, ...]
    ) -> None:
        """Raise ``QWConfigError`` unless model, parameters and marked set fit."""
        ...

    @abstractmethod
    def initial_state(self) -> Any:
        """Default initial state of the search."""
        ...

    def spectral_gap(self) -> float:
        """Gap driving the sinusoidal success-probability approximation.

        Only continuous models with an analytic estimate implement it.
        """
        raise QWUnsupportedError(
            f"{type(self).__name__} has no spectral-gap estimate"
        )

    @abstractmethod
    def with_marked(
        self, marked: Iterable[int] | None = None, penalty: float | None = None
    ) -> "QWSearch":
        """Return a search on the same model with new marked set and/or penalty."""
        ...


@dataclass(frozen=True, eq=False)
class QSearchState:
    """Terminal state of a search run with its success probabilities.

    Attributes
    ----------
    state : Any
        Evolved state.
    probability : ndarray
        Probability of each marked vertex, in ``search.marked`` order.
    runtime : float
        Number of steps (discrete) or elapsed time (continuous).

    """

    state: Any
    probability: np.ndarray
    runtime: float

    @classmethod
    def measured(cls, search: QWSearch, state: Any, runtime: float) -> "QSearchState":
        """Build the record by measuring ``state`` on ``search.marked``."""
        return cls(state, search.measure(state, search.marked), runtime)

    @property
    def total_probability(self) -> float:
        return float(np.sum(self.probability))
