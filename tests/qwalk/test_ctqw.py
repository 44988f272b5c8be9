"""Tests for the continuous-time quantum walk."""

import networkx as nx
import numpy as np
import pytest
import scipy.linalg
import scipy.sparse as sp
from qwalk import (
    CTQW,
    CTQWEvolution,
    CTQWSearch,
    HamiltonianParameters,
    Szegedy,
    default_jumping_rate,
    execute_single,
    execute_single_measured,
    graph_hamiltonian,
)
from qwalk.core.errors import QWConfigError


def test_model_rejects_directed_graph():
    with pytest.raises(QWConfigError, match="undirected"):
        CTQW(nx.DiGraph([(0, 1), (1, 0)]))


def test_model_rejects_unknown_mode(k4):
    with pytest.raises(QWConfigError, match="Unsupported Hamiltonian mode"):
        CTQW(k4, matrix="incidence")


def test_model_properties(k4):
    model = CTQW(k4, matrix="laplacian", dense=True)
    assert model.order == model.state_dim == 4
    assert model.continuous
    assert model.matrix == "laplacian"
    assert model.dense
    assert "laplacian" in repr(model)


def test_graph_hamiltonian_modes(path3):
    adj = graph_hamiltonian(CTQW(path3))
    assert sp.issparse(adj)
    np.testing.assert_allclose(
        adj.toarray(), [[0, 1, 0], [1, 0, 1], [0, 1, 0]]
    )

    lap = graph_hamiltonian(CTQW(path3, matrix="laplacian", dense=True))
    assert isinstance(lap, np.ndarray)
    np.testing.assert_allclose(lap, [[1, -1, 0], [-1, 2, -1], [0, -1, 1]])


@pytest.mark.parametrize("n", [4, 9, 16])
def test_default_jumping_rate_complete_graph(n):
    model = CTQW(nx.complete_graph(n))
    assert default_jumping_rate(model) == pytest.approx(1.0 / (n - 1))


def test_default_jumping_rate_bipartite():
    # star eigenvalues are +-sqrt(3) and 0
    model = CTQW(nx.star_graph(3))
    assert default_jumping_rate(model) == pytest.approx(1.0 / np.sqrt(3))


def test_default_jumping_rate_edgeless():
    g = nx.empty_graph(5)
    assert default_jumping_rate(CTQW(g)) == 1.0


def test_default_jumping_rate_laplacian_unsupported(k4):
    with pytest.raises(QWConfigError):
        default_jumping_rate(CTQW(k4, matrix="laplacian"))
    with pytest.raises(QWConfigError):
        CTQWSearch(CTQW(k4, matrix="laplacian"), [0])


def test_evolution_matches_matrix_exponential(cycle6):
    model = CTQW(cycle6)
    evolution = CTQWEvolution(model, jumping_rate=0.5)
    psi0 = np.eye(6, dtype=complex)[2]
    expected = scipy.linalg.expm(1j * 1.3 * 0.5 * graph_hamiltonian(model).toarray()) @ psi0
    np.testing.assert_allclose(evolution.evolve(psi0, 1.3), expected, atol=1e-10)
    assert evolution.parameters.jumping_rate == 0.5


def test_evolve_is_a_jump(cycle6):
    evolution = CTQWEvolution(CTQW(cycle6))
    psi0 = np.eye(6, dtype=complex)[0]
    once = evolution.evolve(psi0, 2.0)
    twice = evolution.evolve(evolution.evolve(psi0, 1.0), 1.0)
    np.testing.assert_allclose(once, twice, atol=1e-10)


@pytest.mark.parametrize("matrix", ["adjacency", "laplacian"])
def test_dense_and_sparse_agree(matrix):
    g = nx.petersen_graph()
    sparse_search = CTQWSearch(CTQW(g, matrix=matrix), [3], jumping_rate=0.4)
    dense_search = CTQWSearch(CTQW(g, matrix=matrix, dense=True), [3], jumping_rate=0.4)
    assert isinstance(dense_search.parameters.hamiltonian, np.ndarray)
    assert sp.issparse(sparse_search.parameters.hamiltonian)

    psi0 = sparse_search.initial_state()
    for t in (0.5, 3.0, 7.5):
        np.testing.assert_allclose(
            execute_single(sparse_search, psi0, t),
            execute_single(dense_search, psi0, t),
            atol=1e-9,
        )


def test_search_hamiltonian_structure(k4):
    search = CTQWSearch(CTQW(k4, dense=True), [1])
    gamma = search.jumping_rate
    assert gamma == pytest.approx(1.0 / 3.0)
    expected = gamma * (np.ones((4, 4)) - np.eye(4))
    expected[1, 1] += 1.0
    np.testing.assert_allclose(search.parameters.hamiltonian, expected)


def test_laplacian_search_hamiltonian_sign(k4):
    search = CTQWSearch(CTQW(k4, matrix="laplacian", dense=True), [0], jumping_rate=0.25)
    lap = 3 * np.eye(4) - (np.ones((4, 4)) - np.eye(4))
    expected = -0.25 * lap
    expected[0, 0] += 1.0
    np.testing.assert_allclose(search.parameters.hamiltonian, expected)


def test_search_initial_state_uniform():
    search = CTQWSearch(CTQW(nx.complete_graph(9)), [0])
    psi0 = search.initial_state()
    assert psi0.dtype == complex
    np.testing.assert_allclose(np.abs(psi0) ** 2, 1.0 / 9.0)


def test_probability_conserved():
    search = CTQWSearch(CTQW(nx.cycle_graph(12)), [0, 6])
    p = execute_single_measured(search, search.initial_state(), 4.2)
    assert p.sum() == pytest.approx(1.0)
    assert search.measure(search.initial_state(), [6, 0]).shape == (2,)


def test_with_marked_matches_fresh_build():
    model = CTQW(nx.complete_graph(6))
    patched = CTQWSearch(model, [0]).with_marked([2, 5], penalty=1.0)
    fresh = CTQWSearch(model, [2, 5])
    assert patched.marked == (2, 5)
    assert patched.penalty == 1.0
    assert patched.jumping_rate == pytest.approx(fresh.jumping_rate)
    np.testing.assert_allclose(
        patched.parameters.hamiltonian.toarray(),
        fresh.parameters.hamiltonian.toarray(),
    )


def test_with_marked_same_set_keeps_hamiltonian(k4):
    search = CTQWSearch(CTQW(k4), [0, 1])
    other = search.with_marked([1, 0])
    assert other.parameters.hamiltonian is search.parameters.hamiltonian


def test_spectral_gap_complete_graph():
    search = CTQWSearch(CTQW(nx.complete_graph(16)), [0])
    gap = search.spectral_gap()
    dense = search.parameters.hamiltonian.toarray()
    values = np.sort(np.linalg.eigvalsh(dense))[::-1]
    assert gap == pytest.approx(values[0] - values[1], rel=1e-8)
    assert 0.4 < gap < 0.6


def test_parameters_validated(k4):
    model = CTQW(k4)
    CTQWEvolution(model, HamiltonianParameters(np.eye(4)))
    with pytest.raises(QWConfigError):
        CTQWEvolution(model, HamiltonianParameters(np.eye(3)))
    with pytest.raises(QWConfigError):
        CTQWEvolution(model, HamiltonianParameters([[1, 0], [0, 1]]))
    with pytest.raises(QWConfigError):
        CTQWSearch(model, [0], parameters=np.eye(4))
    with pytest.raises(QWConfigError):
        CTQWEvolution(Szegedy(k4))


def test_evolution_initial_state_uniform(cycle6):
    evolution = CTQWEvolution(CTQW(cycle6))
    psi0 = evolution.initial_state()
    np.testing.assert_allclose(np.abs(psi0) ** 2, 1.0 / 6.0)
    # uniform state is an eigenvector of a regular graph
    p = execute_single_measured(evolution, psi0, 2.5)
    np.testing.assert_allclose(p, 1.0 / 6.0, atol=1e-10)
