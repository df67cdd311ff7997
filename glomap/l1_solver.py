"""ADMM solver for min ||A x - b||_1 with a sparse A."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
import scipy.sparse
from scipy.sparse.linalg import splu


@dataclass
class L1SolverOptions:
    max_num_iterations: int = 1000
    # Augmented Lagrangian parameter.
    rho: float = 1.0
    # Over-relaxation parameter, typically between 1.0 and 1.8.
    alpha: float = 1.0
    absolute_tolerance: float = 1e-4
    relative_tolerance: float = 1e-2


def _shrinkage(vec: np.ndarray, kappa: float) -> np.ndarray:
    return np.maximum(0.0, vec - kappa) - np.maximum(0.0, -vec - kappa)


class L1Solver:
    """Solves the L1 regression problem by ADMM, reusing one factorization."""

    def __init__(self, options: L1SolverOptions, matrix) -> None:
        self.options = options
        self._a = scipy.sparse.csc_matrix(matrix, dtype=float)
        normal = (self._a.T @ self._a).tocsc()
        try:
            self._factor = splu(normal)
        except RuntimeError as error:
            raise np.linalg.LinAlgError(
                "could not factor the normal equations of the L1 problem"
            ) from error

    def solve(self, rhs, initial=None) -> np.ndarray:
        """Return x minimising ||A x - rhs||_1."""
        a = self._a
        rows, cols = a.shape
        rhs = np.asarray(rhs, dtype=float).reshape(-1)
        if rhs.size != rows:
            raise ValueError(f"right-hand side has {rhs.size} entries, expected {rows}")
        options = self.options
        x = np.zeros(cols) if initial is None else np.asarray(initial, dtype=float).copy()

        z = np.zeros(rows)
        u = np.zeros(rows)
        rhs_norm = np.linalg.norm(rhs)
        primal_abs_eps = math.sqrt(rows) * options.absolute_tolerance
        dual_abs_eps = math.sqrt(cols) * options.absolute_tolerance

        for _ in range(options.max_num_iterations):
            x = self._factor.solve(a.T @ (rhs + z - u))
            if not np.all(np.isfinite(x)):
                raise np.linalg.LinAlgError("L1 minimization produced a non-finite solution")

            a_times_x = a @ x
            ax_hat = options.alpha * a_times_x + (1.0 - options.alpha) * (z + rhs)

            z_old = z
            z = _shrinkage(ax_hat - rhs + u, 1.0 / options.rho)
            u = u + ax_hat - z - rhs

            r_norm = np.linalg.norm(a_times_x - z - rhs)
            s_norm = np.linalg.norm(-options.rho * (a.T @ (z - z_old)))
            max_norm = max(np.linalg.norm(a_times_x), np.linalg.norm(z), rhs_norm)
            primal_eps = primal_abs_eps + options.relative_tolerance * max_norm
            dual_eps = dual_abs_eps + options.relative_tolerance * np.linalg.norm(
                options.rho * (a.T @ u)
            )
            if r_norm < primal_eps and s_norm < dual_eps:
                break
        return x