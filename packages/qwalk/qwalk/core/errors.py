"""qwalk: Error Taxonomy and Logging
---------------------------------

Self-contained error hierarchy and shared logger for the qwalk package.

Error Hierarchy
---------------
- QWError: Base exception for all qwalk errors
- QWConfigError: Malformed model / parameter / search combinations
- QWUnsupportedError: Well-formed requests that do not apply to a model
- QWNumericalError: Failures propagated from linear-algebra primitives

Warning Hierarchy
-----------------
- QWWarning: Base warning for all qwalk warnings

Logging
-------
The shared logger is named "qwalk" and can be configured for console and
file output with optional JSON formatting. Python warnings are captured into
logging with adjustable levels.
"""

import logging
import os


__all__ = [
    "QWError",
    "QWConfigError",
    "QWUnsupportedError",
    "QWNumericalError",
    "QWWarning",
    "get_logger",
    "configure_logging",
]


# =============================================================================
# Exception Hierarchy
# =============================================================================


class QWError(Exception):
    """Base exception for all qwalk errors.

    All errors raised by the qwalk package inherit from this class, so callers
    can guard a whole experiment with a single ``except QWError``.

    Examples
    --------
    >>> try:
    ...     CTQW(graph, matrix="incidence")
    ... except QWError as e:
    ...     print(f"walk error occurred: {e}")  # doctest: +SKIP

    """

    pass


class QWConfigError(QWError):
    """Configuration errors.

    Raised when a model, parameter bag, marked set or search bound is
    malformed. Always raised synchronously at construction time, before any
    state is evolved.
    Examples: wrong operator shape, non-stochastic matrix, unknown
    Hamiltonian mode, empty marked set, ``max_runtime <= 0``.
    """

    pass


class QWUnsupportedError(QWError):
    """Unsupported operation errors.

    Raised for well-formed requests whose semantics do not apply to the chosen
    model variant.
    Examples: enumerating every intermediate state of a continuous-time walk,
    heuristic search on a discrete walk.
    """

    pass


class QWNumericalError(QWError):
    """Numerical failures.

    Raised when a linear-algebra primitive fails (e.g. the eigenvalue
    iteration does not converge). The underlying exception is always chained;
    qwalk never retries.
    """

    pass


# =============================================================================
# Warning Hierarchy
# =============================================================================


class QWWarning(Warning):
    """Base warning for all qwalk warnings."""

    pass


# =============================================================================
# Logger Configuration
# =============================================================================

_logger: logging.Logger | None = None


def get_logger() -> logging.Logger:
    """Get the shared qwalk logger instance.

    Returns
    -------
    logging.Logger
        The singleton logger named "qwalk" configured at INFO level by
        default with a console handler. Handlers are created lazily on first use.

    Examples
    --------
    >>> logger = get_logger()
    >>> logger.name
    'qwalk'

    """
    global _logger
    if _logger is None:
        _logger = logging.getLogger("qwalk")
        _logger.setLevel(logging.INFO)
        if not _logger.handlers:
            h = logging.StreamHandler()
            fmt = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
            h.setFormatter(fmt)
            _logger.addHandler(h)
    return _logger


def configure_logging(
    verbose: bool = False,
    log_file: str | None = None,
    as_json: bool = False,
    suppress_warnings: bool = False,
) -> None:
    """Configure the shared logger outputs and warning capture.

    Parameters
    ----------
    verbose : bool, default False
        When True, set logger level to DEBUG; otherwise INFO.
    log_file : str or None, default None
        Optional file path to append logs.
    as_json : bool, default False
        Emit logs in a compact JSON line format when True; otherwise plain text.
    suppress_warnings : bool, default False
        Route Python warnings into logging and raise their level to ERROR when
        True; otherwise capture warnings at WARNING level.

    Raises
    ------
    QWConfigError
        If ``log_file`` cannot be opened for appending.

    """
    logger = get_logger()
    for h in list(logger.handlers):
        logger.removeHandler(h)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    ch = logging.StreamHandler()
    if as_json:
        fmt = logging.Formatter(
            '{"time":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","msg":"%(message)s"}'
        )
    else:
        fmt = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    if log_file:
        try:
            fh = logging.FileHandler(os.fspath(log_file), encoding="utf-8")
        except OSError as e:
            raise QWConfigError(f"Cannot open log file {log_file}: {e}") from e
        fh.setFormatter(fmt)
        logger.addHandler(fh)

    logging.captureWarnings(True)
    logging.getLogger("py.warnings").setLevel(
        logging.ERROR if suppress_warnings else logging.WARNING
    )
