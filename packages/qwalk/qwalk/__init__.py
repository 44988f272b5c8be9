"""Quantum Walk Dynamics
=====================

Simulation of classical random walks, Szegedy walks and continuous-time
quantum walks on graphs, with quantum spatial search and runtime
maximization.

Public API
----------
RandomWalk, Szegedy, CTQW
    Walk models built on a networkx graph.
RandomWalkEvolution, SzegedyEvolution, CTQWEvolution
    Plain evolution of a model.
SzegedySearch, CTQWSearch
    Quantum search for marked vertices.
execute
    Run dynamics for a given runtime (single/all steps, measured or not).
maximize_search
    Runtime maximizing the (penalized) success probability of a search.
QWalkConfig
    Numerical configuration (Krylov, eigensolver, search grid).
"""

# Importing models triggers registration of the built-in walks.
from . import models as _qw_models  # noqa: F401
from .core.config import (
    EigenConfig,
    KrylovConfig,
    QWalkConfig,
    SearchConfig,
    get_config,
    load_config,
    set_config,
)
from .core.errors import (
    QWConfigError,
    QWError,
    QWNumericalError,
    QWUnsupportedError,
    QWWarning,
    configure_logging,
    get_logger,
)
from .dynamics import (
    HamiltonianParameters,
    OperatorParameters,
    QSearchState,
    QWDynamics,
    QWEvolution,
    QWSearch,
)
from .engine import (
    execute,
    execute_all,
    execute_all_measured,
    execute_single,
    execute_single_measured,
)
from .models import (
    CTQW,
    CTQWEvolution,
    CTQWSearch,
    RandomWalk,
    RandomWalkEvolution,
    Szegedy,
    SzegedyEvolution,
    SzegedySearch,
    check_stochastic,
    create_model,
    default_jumping_rate,
    default_stochastic,
    graph_hamiltonian,
    szegedy_initial_state,
    szegedy_oracle_operators,
    szegedy_walk_operators,
)
from .search import maximize_search, search_objective

# Public version string
__version__ = "0.3.0"

__all__ = [
    # models
    "create_model",
    "RandomWalk",
    "Szegedy",
    "CTQW",
    "RandomWalkEvolution",
    "SzegedyEvolution",
    "SzegedySearch",
    "CTQWEvolution",
    "CTQWSearch",
    "default_stochastic",
    "check_stochastic",
    "szegedy_initial_state",
    "szegedy_walk_operators",
    "szegedy_oracle_operators",
    "graph_hamiltonian",
    "default_jumping_rate",
    # dynamics
    "QWDynamics",
    "QWEvolution",
    "QWSearch",
    "QSearchState",
    "OperatorParameters",
    "HamiltonianParameters",
    # execution
    "execute",
    "execute_single",
    "execute_single_measured",
    "execute_all",
    "execute_all_measured",
    "maximize_search",
    "search_objective",
    # configuration and errors
    "QWalkConfig",
    "KrylovConfig",
    "EigenConfig",
    "SearchConfig",
    "get_config",
    "set_config",
    "load_config",
    "QWError",
    "QWConfigError",
    "QWUnsupportedError",
    "QWNumericalError",
    "QWWarning",
    "get_logger",
    "configure_logging",
    "__version__",
]
