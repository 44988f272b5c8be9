"""Tests for the execution functions."""

import math

import networkx as nx
import numpy as np
import pytest
import scipy.sparse as sp
from qwalk import (
    CTQW,
    CTQWEvolution,
    RandomWalk,
    RandomWalkEvolution,
    Szegedy,
    SzegedySearch,
)
from qwalk.core.errors import QWConfigError, QWUnsupportedError
from qwalk.engine import (
    execute,
    execute_all,
    execute_all_measured,
    execute_single,
    execute_single_measured,
)


@pytest.fixture
def szegedy_search(k4):
    return SzegedySearch(Szegedy(k4), [0])


@pytest.fixture
def ctqw_evolution(k4):
    return CTQWEvolution(CTQW(k4))


def test_execute_all_recurrence(szegedy_search):
    psi0 = szegedy_search.initial_state()
    states = execute_all(szegedy_search, psi0, 5)
    assert len(states) == 6
    np.testing.assert_array_equal(states[0], psi0)
    for prev, nxt in zip(states, states[1:]):
        np.testing.assert_allclose(nxt, szegedy_search.evolve(prev))


def test_execute_all_zero_runtime(szegedy_search):
    psi0 = szegedy_search.initial_state()
    states = execute_all(szegedy_search, psi0, 0)
    assert len(states) == 1
    assert states[0] is not psi0


def test_execute_single_matches_last_of_all(szegedy_search):
    psi0 = szegedy_search.initial_state()
    states = execute_all(szegedy_search, psi0, 3)
    np.testing.assert_allclose(execute_single(szegedy_search, psi0, 3), states[-1])


def test_execute_single_zero_runtime_is_copy(szegedy_search):
    psi0 = szegedy_search.initial_state()
    out = execute_single(szegedy_search, psi0, 0)
    np.testing.assert_array_equal(out, psi0)
    out[0] = 99.0
    assert psi0[0] != 99.0


def test_execute_all_measured_rows(szegedy_search):
    psi0 = szegedy_search.initial_state()
    rows = execute_all_measured(szegedy_search, psi0, 3)
    assert rows.shape == (4, 4)
    for k, state in enumerate(execute_all(szegedy_search, psi0, 3)):
        np.testing.assert_allclose(rows[k], szegedy_search.measure(state))


def test_initial_state_not_mutated(szegedy_search):
    psi0 = szegedy_search.initial_state()
    before = psi0.copy()
    execute_all(szegedy_search, psi0, 4)
    execute_single_measured(szegedy_search, psi0, 4)
    np.testing.assert_array_equal(psi0, before)


def test_execute_dispatch(szegedy_search):
    psi0 = szegedy_search.initial_state()
    single = execute(szegedy_search, psi0, 2, measured=False)
    np.testing.assert_allclose(single, execute_single(szegedy_search, psi0, 2))

    measured = execute(szegedy_search, psi0, 2, measured=True)
    np.testing.assert_allclose(measured, execute_single_measured(szegedy_search, psi0, 2))

    all_states = execute(szegedy_search, psi0, 2, all_steps=True)
    assert len(all_states) == 3

    all_measured = execute(szegedy_search, psi0, 2, measured=True, all_steps=True)
    assert all_measured.shape == (3, 4)


def test_execute_requires_explicit_variant(szegedy_search):
    with pytest.raises(QWConfigError):
        execute(szegedy_search, szegedy_search.initial_state(), 2)


@pytest.mark.parametrize("runtime", [-1, 1.5, "3", True, None])
def test_discrete_runtime_validation(szegedy_search, runtime):
    with pytest.raises(QWConfigError):
        execute_single(szegedy_search, szegedy_search.initial_state(), runtime)


def test_discrete_accepts_numpy_integer(szegedy_search):
    out = execute_single(szegedy_search, szegedy_search.initial_state(), np.int64(2))
    assert out.shape == (16,)


def test_state_shape_validation(szegedy_search):
    with pytest.raises(QWConfigError):
        execute_single(szegedy_search, np.ones(4), 1)
    with pytest.raises(QWConfigError):
        execute_single(szegedy_search, np.ones((4, 4)), 1)


@pytest.mark.parametrize(
    "to_sparse",
    [lambda v: sp.csr_matrix(v).T, lambda v: sp.csr_matrix(v), sp.coo_array],
)
def test_sparse_initial_state(szegedy_search, to_sparse):
    psi0 = szegedy_search.initial_state()
    dense = execute_single(szegedy_search, psi0, 2)
    np.testing.assert_allclose(execute_single(szegedy_search, to_sparse(psi0), 2), dense)
    np.testing.assert_allclose(
        execute_all_measured(szegedy_search, to_sparse(psi0), 2),
        execute_all_measured(szegedy_search, psi0, 2),
    )


def test_sparse_state_must_be_vector(szegedy_search):
    with pytest.raises(QWConfigError):
        execute_single(szegedy_search, sp.identity(16, format="csr"), 1)
    with pytest.raises(QWConfigError):
        execute_single(szegedy_search, sp.csr_matrix(np.ones(4)), 1)


def test_continuous_execute_all_unsupported(ctqw_evolution):
    psi0 = np.eye(4)[0]
    with pytest.raises(QWUnsupportedError):
        execute_all(ctqw_evolution, psi0, 2.0)
    with pytest.raises(QWUnsupportedError):
        execute_all_measured(ctqw_evolution, psi0, 2.0)
    with pytest.raises(QWUnsupportedError):
        execute(ctqw_evolution, psi0, 2.0, all_steps=True)


@pytest.mark.parametrize("runtime", [-0.5, 1j, math.inf, -math.inf, math.nan])
def test_continuous_runtime_validation(ctqw_evolution, runtime):
    psi0 = np.eye(4)[0]
    with pytest.raises(QWConfigError):
        execute_single(ctqw_evolution, psi0, runtime)


def test_continuous_single_is_one_jump(ctqw_evolution):
    psi0 = np.eye(4, dtype=complex)[0]
    out = execute_single(ctqw_evolution, psi0, 0.7)
    np.testing.assert_allclose(out, ctqw_evolution.evolve(psi0, 0.7))
    np.testing.assert_allclose(execute_single(ctqw_evolution, psi0, 0), psi0)


def test_random_walk_through_execute():
    evolution = RandomWalkEvolution(RandomWalk(nx.path_graph(3)))
    rows = execute(evolution, [1.0, 0.0, 0.0], 2, measured=True, all_steps=True)
    np.testing.assert_allclose(
        rows,
        [
            [1.0, 0.0, 0.0],
            [0.0, 1.0, 0.0],
            [0.5, 0.0, 0.5],
        ],
    )
