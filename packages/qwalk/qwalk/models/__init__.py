"""Walk models and their dynamics.

Importing this package registers the built-in models under the ``"model"``
registry namespace.
"""

from typing import Any

from ..core.errors import QWConfigError
from ..core.registry import get_loader, list_loaders
from .ctqw import (
    CTQW,
    CTQWEvolution,
    CTQWSearch,
    default_jumping_rate,
    graph_hamiltonian,
)
from .random_walk import RandomWalk, RandomWalkEvolution
from .stochastic import check_stochastic, default_stochastic
from .szegedy import Szegedy, SzegedyEvolution, SzegedySearch, szegedy_initial_state
from .szegedy_operators import szegedy_oracle_operators, szegedy_walk_operators

__all__ = [
    "create_model",
    "RandomWalk",
    "RandomWalkEvolution",
    "Szegedy",
    "SzegedyEvolution",
    "SzegedySearch",
    "szegedy_initial_state",
    "szegedy_walk_operators",
    "szegedy_oracle_operators",
    "CTQW",
    "CTQWEvolution",
    "CTQWSearch",
    "graph_hamiltonian",
    "default_jumping_rate",
    "default_stochastic",
    "check_stochastic",
]


def create_model(name: str, graph: Any, **kwargs: Any) -> Any:
    """Instantiate a registered model by name.

    Parameters
    ----------
    name : str
        Registry key, e.g. ``"szegedy"``.
    graph : networkx.Graph
        Underlying graph.
    **kwargs
        Model-specific options (``stochastic``, ``matrix``, ...).

    Raises
    ------
    QWConfigError
        If no model is registered under ``name``.

    """
    builder = get_loader("model", name)
    if builder is None:
        known = sorted(list_loaders("model")["model"])
        raise QWConfigError(f"Unknown model {name!r}; registered models: {known}")
    return builder(graph, **kwargs)
