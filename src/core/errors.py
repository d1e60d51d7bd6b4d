"""
Error types raised by the panel method core.

Geometry problems are rejected before any computation; a collapsed pivot
during the solve is fatal for that solve only. Solution quality issues are
not errors - see postprocessing.validation.
"""

from typing import Optional

import numpy as np


class InvalidSpecError(ValueError):
    """Malformed NACA designation or out-of-range geometric input."""


class SingularSystemError(np.linalg.LinAlgError):
    """
    Linear system could not be factorized.

    Raised when a pivot falls below the pivot tolerance after partial
    pivoting. The caller has to change the geometry (panel count, chord,
    thickness) or the regularization and solve again.
    """

    def __init__(self, row: int, pivot: float, message: Optional[str] = None):
        self.row = row
        self.pivot = pivot
        if message is None:
            message = f"Singular matrix at row {row} (pivot {pivot:.3e})"
        super().__init__(message)
