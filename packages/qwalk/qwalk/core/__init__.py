"""qwalk: Core Subpackage
----------------------
Lightweight core containing the error taxonomy, logging, configuration and
registry shared by every model.
"""

from .config import QWalkConfig, get_config, load_config, set_config
from .errors import (
    QWConfigError,
    QWError,
    QWNumericalError,
    QWUnsupportedError,
    QWWarning,
    configure_logging,
    get_logger,
)

__all__ = [
    "QWalkConfig",
    "get_config",
    "load_config",
    "set_config",
    "QWError",
    "QWConfigError",
    "QWUnsupportedError",
    "QWNumericalError",
    "QWWarning",
    "configure_logging",
    "get_logger",
]
