"""qwalk: Lightweight Registry System
-----------------------------------

Minimal registration mechanism for walk models and other pluggable pieces.

Registry Structure
------------------
The registry is organized by namespaces and keys:

    registry.register(namespace, key)(builder)
    registry.get_loader(namespace, key)(*args, **kwargs)

Example:
-------
    from qwalk.core.registry import register

    @register("model", "lazy_walk")
    class LazyWalk:
        ...

"""

from collections.abc import Callable
from typing import Any

# Global registry instance
_registry: dict[str, dict[str, Callable[..., Any]]] = {}


def register_loader(
    namespace: str, key: str
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Register a builder under ``namespace``/``key``.

    Parameters
    ----------
    namespace : str
        Namespace for the builder (e.g., "model").
    key : str
        Key within the namespace (e.g., "szegedy").

    Returns
    -------
    Callable
        Decorator function that registers the builder and returns it unchanged.

    Examples
    --------
    >>> @register_loader("model", "my_walk")
    ... class MyWalk:
    ...     pass

    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        _registry.setdefault(namespace, {})[key] = func
        return func

    return decorator


def get_loader(namespace: str, key: str) -> Callable[..., Any] | None:
    """Get a registered builder.

    Parameters
    ----------
    namespace : str
        Namespace to search in.
    key : str
        Key to look up.

    Returns
    -------
    Callable | None
        Registered builder if found, None otherwise.

    """
    return _registry.get(namespace, {}).get(key)


def list_loaders(
    namespace: str | None = None,
) -> dict[str, dict[str, Callable[..., Any]]]:
    """List all registered builders.

    Parameters
    ----------
    namespace : str | None, optional
        If provided, only list builders in this namespace.
        If None, list all builders across all namespaces.

    Returns
    -------
    dict
        Dictionary of {namespace: {key: builder}} entries.

    """
    if namespace is None:
        return {ns: dict(entries) for ns, entries in _registry.items()}
    return {namespace: dict(_registry.get(namespace, {}))}


def register(
    namespace: str, key: str
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Alias of :func:`register_loader` for decorator use."""
    return register_loader(namespace, key)


__all__ = [
    "register_loader",
    "get_loader",
    "list_loaders",
    "register",
]
