"""
Dense direct solve with Tikhonov regularization.
"""

import warnings
import numpy as np
from numpy.typing import NDArray
from scipy import linalg

from core.errors import SingularSystemError


def solve_regularized(A: NDArray[np.float64],
                      b: NDArray[np.float64],
                      regularization: float = 1e-12,
                      pivot_tolerance: float = 1e-14) -> NDArray[np.float64]:
    """
    Solve (A + λI) x = b by LU factorization with partial pivoting.

    Args:
        A: (N, N) system matrix (not modified)
        b: (N,) right-hand side
        regularization: λ added to every diagonal entry
        pivot_tolerance: Smallest acceptable |pivot|

    Returns:
        x: (N,) solution

    Raises:
        SingularSystemError: a pivot of U falls below pivot_tolerance
    """
    A_reg = np.array(A, dtype=np.float64, copy=True)
    A_reg[np.diag_indices_from(A_reg)] += regularization

    with warnings.catch_warnings():
        # Exactly-zero pivots are reported below as SingularSystemError
        warnings.simplefilter("ignore", linalg.LinAlgWarning)
        lu, piv = linalg.lu_factor(A_reg)

    pivots = np.abs(np.diag(lu))
    row = int(np.argmin(pivots))
    if not pivots[row] >= pivot_tolerance:
        raise SingularSystemError(row, float(np.diag(lu)[row]))

    return linalg.lu_solve((lu, piv), b)


def residual_norm(A: NDArray[np.float64],
                  x: NDArray[np.float64],
                  b: NDArray[np.float64]) -> float:
    """‖A·x - b‖₂"""
    return float(np.linalg.norm(A @ x - b))
