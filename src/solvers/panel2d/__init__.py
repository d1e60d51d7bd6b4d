"""2D panel method: influence kernels, linear solve, Hess-Smith solver."""

from .influence import (
    InfluenceMatrices,
    influence_matrices,
    source_velocity,
    vortex_velocity,
    source_influence,
    vortex_influence,
    source_influence_normal,
    source_influence_tangent,
    vortex_influence_normal,
    vortex_influence_tangent,
    total_velocity,
)
from .linear import solve_regularized, residual_norm
from .hess_smith import HessSmithSolver, PanelSolution, solve_panel_method

__all__ = [
    "InfluenceMatrices",
    "influence_matrices",
    "source_velocity",
    "vortex_velocity",
    "source_influence",
    "vortex_influence",
    "source_influence_normal",
    "source_influence_tangent",
    "vortex_influence_normal",
    "vortex_influence_tangent",
    "total_velocity",
    "solve_regularized",
    "residual_norm",
    "HessSmithSolver",
    "PanelSolution",
    "solve_panel_method",
]
