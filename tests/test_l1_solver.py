import numpy as np
import pytest
import scipy.sparse

from glomap.l1_solver import L1Solver, L1SolverOptions

TIGHT = L1SolverOptions(max_num_iterations=5000, absolute_tolerance=1e-9, relative_tolerance=1e-9)


def test_single_column_gives_median():
    a = np.ones((5, 1))
    b = np.array([1.0, 2.0, 3.0, 4.0, 100.0])
    x = L1Solver(TIGHT, a).solve(b)
    assert x[0] == pytest.approx(3.0, abs=1e-2)


def test_consistent_system_recovered():
    rng = np.random.default_rng(0)
    a = scipy.sparse.csr_matrix(rng.normal(size=(30, 3)))
    x_true = np.array([1.0, -2.0, 0.5])
    x = L1Solver(TIGHT, a).solve(a @ x_true)
    np.testing.assert_allclose(x, x_true, atol=1e-3)


def test_robust_to_single_outlier():
    rng = np.random.default_rng(1)
    dense = rng.normal(size=(40, 2))
    x_true = np.array([0.7, -1.3])
    b = dense @ x_true
    b[5] += 50.0
    x = L1Solver(TIGHT, dense).solve(b)
    np.testing.assert_allclose(x, x_true, atol=1e-2)


def test_zero_iterations_returns_initial():
    options = L1SolverOptions(max_num_iterations=0)
    x = L1Solver(options, np.eye(2)).solve([1.0, 2.0], initial=[5.0, 6.0])
    np.testing.assert_allclose(x, [5.0, 6.0])


def test_wrong_rhs_length_raises():
    with pytest.raises(ValueError):
        L1Solver(L1SolverOptions(), np.eye(3)).solve([1.0, 2.0])


def test_singular_matrix_raises():
    a = np.array([[1.0, 0.0], [2.0, 0.0], [3.0, 0.0]])
    with pytest.raises(np.linalg.LinAlgError):
        L1Solver(L1SolverOptions(), a)