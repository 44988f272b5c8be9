"""qwalk: Core Protocols
---------------------

Protocol definitions shared by models and dynamics. Protocols use duck
typing, so any object with the listed members can serve as a walk model.

This module is dependency-light and safe to import in any environment.
"""

from typing import Any, ClassVar, Protocol, runtime_checkable

__all__ = [
    "QWModel",
]


@runtime_checkable
class QWModel(Protocol):
    """Protocol for walk models consumed by the dynamics classes.

    A model is the fixed structural description of a walk: a graph (owned by
    the caller, read-only here) plus model-specific matrices. Models are never
    mutated after construction.

    Attributes
    ----------
    name : str
        Registry name of the model.
    continuous : bool
        True when evolution is parametrized by a real elapsed time, False when
        it proceeds in integer steps.
    graph : networkx.Graph
        Underlying graph; vertices are addressed by their position in
        ``graph.nodes()``.
    order : int
        Number of vertices.
    state_dim : int
        Dimension of the state space.

    """

    name: ClassVar[str]
    continuous: ClassVar[bool]

    @property
    def graph(self) -> Any: ...

    @property
    def order(self) -> int: ...

    @property
    def state_dim(self) -> int: ...
