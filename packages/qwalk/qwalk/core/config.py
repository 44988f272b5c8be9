"""qwalk: Configuration Models
----------------------------

Pydantic models for the numerical knobs of the dynamics engine, plus YAML
loading and a process-wide default.

Public API
----------
``QWalkConfig`` : Root configuration (stochastic tolerance, Krylov, eigen, search)
``KrylovConfig`` : Lanczos exponential-action limits
``EigenConfig`` : ARPACK iteration limits
``SearchConfig`` : Search-maximization grid, refinement and parallelism
``load_config`` : Build a ``QWalkConfig`` from a YAML file
``get_config`` / ``set_config`` : Process-wide default configuration

Notes
-----
- Every numerical primitive also accepts an explicit config, so the global
  default only matters for callers that do not pass one.

"""

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import QWConfigError, get_logger

__all__ = [
    "QWalkConfig",
    "KrylovConfig",
    "EigenConfig",
    "SearchConfig",
    "load_config",
    "get_config",
    "set_config",
]

logger = get_logger()


class KrylovConfig(BaseModel):
    """Limits for the Lanczos approximation of ``exp(iHt) v``."""

    krylov_dim: int = Field(
        30,
        ge=1,
        description="Maximum Krylov subspace dimension per sub-step.",
    )
    tol: float = Field(
        1e-12,
        gt=0.0,
        description="Breakdown tolerance; an invariant subspace is assumed "
        "once the next Lanczos residual norm drops below it.",
    )
    max_step_norm: float = Field(
        5.0,
        gt=0.0,
        description="Upper bound on |dt| * ||H||_1 for a single sub-step.",
    )


class EigenConfig(BaseModel):
    """Limits for the iterative largest-eigenvalue estimator (ARPACK)."""

    tol: float = Field(
        0.0,
        ge=0.0,
        description="Relative accuracy for eigenvalues; 0 means machine precision.",
    )
    maxiter: int | None = Field(
        None,
        description="Maximum number of Arnoldi update iterations; None uses "
        "the ARPACK default.",
    )

    @field_validator("maxiter")
    @classmethod
    def validate_maxiter(cls, v: int | None) -> int | None:
        """Reject non-positive iteration limits."""
        if v is not None and v <= 0:
            raise ValueError("maxiter must be positive")
        return v


class SearchConfig(BaseModel):
    """Settings for quantum-search time maximization."""

    grid_points: int = Field(
        200,
        ge=2,
        description="Number of uniformly spaced trial times for continuous "
        "exact search.",
    )
    xatol: float = Field(
        1e-8,
        gt=0.0,
        description="Absolute time tolerance of the bounded refinement.",
    )
    workers: int = Field(
        1,
        ge=1,
        description="Thread-pool size for evaluating independent trial times.",
    )
    objective: Literal["efficiency", "probability"] = Field(
        "efficiency",
        description="'efficiency' ranks candidates by p / (t + penalty); "
        "'probability' by p alone.",
    )


class QWalkConfig(BaseModel):
    """Root configuration for the qwalk dynamics engine."""

    stochastic_atol: float = Field(
        1e-8,
        gt=0.0,
        description="Absolute tolerance for stochastic column sums.",
    )
    krylov: KrylovConfig = Field(default_factory=KrylovConfig)
    eigen: EigenConfig = Field(default_factory=EigenConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)


_CONFIG: QWalkConfig | None = None


def get_config() -> QWalkConfig:
    """Return the process-wide default configuration, creating it lazily."""
    global _CONFIG
    if _CONFIG is None:
        _CONFIG = QWalkConfig()
    return _CONFIG


def set_config(config: QWalkConfig | None) -> None:
    """Replace the process-wide default; ``None`` restores built-in defaults."""
    global _CONFIG
    _CONFIG = config


def load_config(path: str | Path, *, install: bool = False) -> QWalkConfig:
    """Load a configuration from a YAML file.

    Parameters
    ----------
    path : str or Path
        YAML file whose top-level mapping matches ``QWalkConfig``.
    install : bool, default False
        When True, also make the loaded configuration the process default.

    Returns
    -------
    QWalkConfig
        Validated configuration.

    Raises
    ------
    QWConfigError
        If the file is missing, is not valid YAML, or fails validation.

    """
    path = Path(path)
    if not path.exists():
        raise QWConfigError(f"Config file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            data: Any = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise QWConfigError(f"Failed to parse YAML file {path}: {e}") from e

    if not isinstance(data, dict):
        raise QWConfigError(f"Config file {path} must contain a mapping")

    try:
        config = QWalkConfig(**data)
    except ValidationError as e:
        raise QWConfigError(f"Invalid configuration in {path}: {e}") from e

    logger.debug(f"Loaded configuration from {path}")
    if install:
        set_config(config)
    return config
