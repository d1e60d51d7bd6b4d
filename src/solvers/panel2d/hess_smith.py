"""
2D Hess-Smith panel method.

Constant-strength source panels plus a single circulation Γ distributed as a
uniform vortex sheet over the whole contour. The n + 1 unknowns are fixed by

    rows 0..n-1   zero normal velocity at every control point
    row  n        Kutta condition: V·t_upper + V·t_lower = 0 at the two
                  trailing edge panels (equal speeds, flow leaving the edge)

The system is solved directly with a small diagonal regularization.
"""

from dataclasses import dataclass
from typing import Optional, Tuple
import numpy as np
from numpy.typing import NDArray

from core.config.schemas import FlowConditions, PanelMethodParameters
from core.geometry.airfoil import AirfoilGeometry
from postprocessing.aerodynamics import (
    surface_tangential_velocity,
    pressure_coefficient,
    lift_coefficient_circulation,
    lift_coefficient_pressure,
)
from .influence import InfluenceMatrices, influence_matrices
from .linear import solve_regularized, residual_norm


@dataclass(frozen=True)
class PanelSolution:
    """
    Result of one panel solve.

    Attributes:
        sigma: Source strength per panel (n,)
        gamma: Total circulation, clockwise positive
        vt: Tangential surface velocity at the control points (n,)
        cp: Pressure coefficient at the control points (n,)
        cl_gamma: Lift coefficient from Kutta-Joukowski
        cl_pressure: Lift coefficient from integrated surface pressure
        residual: ‖A·x - b‖₂ of the unregularized system
        iterations: Always 1 (direct solve)
    """
    sigma: NDArray[np.float64]
    gamma: float
    vt: NDArray[np.float64]
    cp: NDArray[np.float64]
    cl_gamma: float
    cl_pressure: float
    residual: float
    iterations: int = 1

    @property
    def n_panels(self) -> int:
        return self.sigma.shape[0]

    @property
    def cl_gap(self) -> float:
        """|CL_Γ - CL_p|"""
        return abs(self.cl_gamma - self.cl_pressure)


class HessSmithSolver:
    """
    Source + uniform vortex panel solver with a Kutta condition.

    Usage:
        geometry = create_airfoil_geometry("2412")
        flow = FlowConditions.from_degrees(velocity=10.0, alpha_deg=4.0)
        solver = HessSmithSolver(geometry, flow)
        solution = solver.solve()
    """

    def __init__(self,
                 geometry: AirfoilGeometry,
                 flow: FlowConditions,
                 params: Optional[PanelMethodParameters] = None,
                 verbose: bool = False):
        """
        Args:
            geometry: Panelled airfoil
            flow: Freestream conditions (angle in radians)
            params: Solver settings; defaults if None
            verbose: Print progress
        """
        self.geometry = geometry
        self.flow = flow
        self.params = params if params is not None else PanelMethodParameters()
        self.verbose = verbose

        self.matrices: Optional[InfluenceMatrices] = None

    @property
    def n_panels(self) -> int:
        return self.geometry.n_panels

    def assemble(self) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
        """
        Build the (n+1) x (n+1) system.

        Returns:
            A: System matrix
            b: Right-hand side
        """
        mesh = self.geometry.mesh
        n = len(mesh)
        iu = self.geometry.te_upper_index
        il = self.geometry.te_lower_index
        v_inf = self.flow.freestream

        self.matrices = influence_matrices(mesh)
        M = self.matrices
        perimeter = mesh.perimeter

        A = np.zeros((n + 1, n + 1))
        b = np.zeros(n + 1)

        # Flow tangency
        A[:n, :n] = M.source_normal
        A[:n, n] = np.sum(M.vortex_normal, axis=1) / perimeter
        b[:n] = -(mesh.normals @ v_inf)

        # Kutta condition
        A[n, :n] = M.source_tangent[iu] + M.source_tangent[il]
        A[n, n] = (np.sum(M.vortex_tangent[iu]) + np.sum(M.vortex_tangent[il])) / perimeter
        b[n] = -(mesh.tangents[iu] @ v_inf + mesh.tangents[il] @ v_inf)

        if self.verbose:
            print(f"  Assembled {n + 1}x{n + 1} system "
                  f"(perimeter {perimeter:.4f}, TE panels {iu}/{il})")

        return A, b

    def solve(self) -> PanelSolution:
        """
        Assemble, solve and post-process.

        Raises:
            SingularSystemError: pivot collapse during factorization
        """
        A, b = self.assemble()

        x = solve_regularized(A, b,
                              regularization=self.params.regularization,
                              pivot_tolerance=self.params.pivot_tolerance)
        residual = residual_norm(A, x, b)

        n = self.n_panels
        sigma = x[:n]
        gamma = float(x[n])

        mesh = self.geometry.mesh
        velocity = self.flow.velocity
        chord = self.geometry.chord

        vt = surface_tangential_velocity(mesh,
                                         self.matrices.source_tangent,
                                         self.matrices.vortex_tangent,
                                         sigma, gamma, self.flow.freestream)
        cp = pressure_coefficient(vt, velocity)

        solution = PanelSolution(
            sigma=sigma,
            gamma=gamma,
            vt=vt,
            cp=cp,
            cl_gamma=lift_coefficient_circulation(gamma, velocity, chord),
            cl_pressure=lift_coefficient_pressure(cp, mesh, self.flow.angle_of_attack, chord),
            residual=residual,
            iterations=1,
        )

        if self.verbose:
            print(f"  Γ = {gamma:.6f}, CL_Γ = {solution.cl_gamma:.4f}, "
                  f"CL_p = {solution.cl_pressure:.4f}, residual = {residual:.2e}")

        return solution


def solve_panel_method(geometry: AirfoilGeometry,
                       flow: FlowConditions,
                       params: Optional[PanelMethodParameters] = None) -> PanelSolution:
    """Solve the panel method for one geometry and flow condition."""
    return HessSmithSolver(geometry, flow, params).solve()
