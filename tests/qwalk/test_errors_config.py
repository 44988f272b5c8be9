"""Tests for the error taxonomy, logging and configuration loading."""

import logging

import pytest
from qwalk.core.config import (
    QWalkConfig,
    SearchConfig,
    get_config,
    load_config,
    set_config,
)
from qwalk.core.errors import (
    QWConfigError,
    QWError,
    QWNumericalError,
    QWUnsupportedError,
    QWWarning,
    configure_logging,
    get_logger,
)


def test_error_hierarchy():
    for cls in (QWConfigError, QWUnsupportedError, QWNumericalError):
        assert issubclass(cls, QWError)
    assert issubclass(QWWarning, Warning)
    assert not issubclass(QWWarning, QWError)


def test_logger_is_shared():
    logger = get_logger()
    assert logger.name == "qwalk"
    assert get_logger() is logger


def test_configure_logging_levels(tmp_path):
    log_file = tmp_path / "qwalk.log"
    configure_logging(verbose=True, log_file=str(log_file))
    try:
        logger = get_logger()
        assert logger.level == logging.DEBUG
        logger.info("hello from qwalk")
        for h in logger.handlers:
            h.flush()
        assert "hello from qwalk" in log_file.read_text(encoding="utf-8")
    finally:
        for h in list(get_logger().handlers):
            if isinstance(h, logging.FileHandler):
                h.close()
        configure_logging()
    assert get_logger().level == logging.INFO


def test_configure_logging_unwritable_file(tmp_path):
    bad = tmp_path / "missing_dir" / "qwalk.log"
    with pytest.raises(QWConfigError):
        configure_logging(log_file=str(bad))
    configure_logging()


def test_default_config_values():
    config = get_config()
    assert isinstance(config, QWalkConfig)
    assert config.krylov.krylov_dim == 30
    assert config.search.grid_points == 200
    assert config.search.workers == 1
    assert config.search.objective == "efficiency"
    assert config.eigen.maxiter is None


def test_set_config_roundtrip():
    custom = QWalkConfig(search=SearchConfig(grid_points=10))
    set_config(custom)
    assert get_config() is custom
    set_config(None)
    assert get_config().search.grid_points == 200


def test_load_config_from_yaml(tmp_path):
    path = tmp_path / "qwalk.yaml"
    path.write_text(
        "stochastic_atol: 1.0e-6\n"
        "krylov:\n"
        "  krylov_dim: 12\n"
        "search:\n"
        "  grid_points: 50\n"
        "  objective: probability\n",
        encoding="utf-8",
    )
    config = load_config(path)
    assert config.stochastic_atol == pytest.approx(1e-6)
    assert config.krylov.krylov_dim == 12
    assert config.krylov.max_step_norm == pytest.approx(5.0)
    assert config.search.grid_points == 50
    assert config.search.objective == "probability"
    # not installed unless asked
    assert get_config() is not config

    installed = load_config(path, install=True)
    assert get_config() is installed


def test_load_config_empty_file(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(path).search.grid_points == 200


@pytest.mark.parametrize(
    "content",
    [
        "krylov:\n  krylov_dim: 0\n",
        "search:\n  objective: speed\n",
        "eigen:\n  maxiter: -3\n",
        "- just\n- a list\n",
        "krylov: [unclosed\n",
    ],
)
def test_load_config_rejects_invalid(tmp_path, content):
    path = tmp_path / "bad.yaml"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(QWConfigError):
        load_config(path)


def test_load_config_missing_file(tmp_path):
    with pytest.raises(QWConfigError, match="not found"):
        load_config(tmp_path / "nope.yaml")
