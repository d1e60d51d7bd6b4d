"""
Test the linear solve and the Hess-Smith solver end to end.
"""

import pytest
import numpy as np
from pathlib import Path

# Add src to path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import FlowConditions, NacaParameters, PanelMethodParameters
from core.errors import SingularSystemError
from core.geometry import create_airfoil_geometry
from solvers.panel2d import (
    HessSmithSolver,
    solve_panel_method,
    solve_regularized,
    residual_norm,
    total_velocity,
)


@pytest.fixture(scope="module")
def symmetric_zero_alpha():
    """NACA 0012 at zero incidence, default panels."""
    geometry = create_airfoil_geometry("0012")
    flow = FlowConditions.from_degrees(velocity=10.0, alpha_deg=0.0)
    return geometry, solve_panel_method(geometry, flow)


@pytest.fixture(scope="module")
def naca0012_alpha5():
    """NACA 0012, 120 panels, 5 degrees."""
    geometry = create_airfoil_geometry("0012", PanelMethodParameters(n_panels=120))
    flow = FlowConditions.from_degrees(velocity=10.0, alpha_deg=5.0)
    return geometry, flow, solve_panel_method(geometry, flow)


class TestLinearSolve:
    """Test the regularized direct solve."""

    def test_well_posed(self):
        A = np.array([[4.0, 1.0], [2.0, 3.0]])
        b = np.array([1.0, 2.0])
        x = solve_regularized(A, b, regularization=0.0)
        np.testing.assert_allclose(A @ x, b)
        assert residual_norm(A, x, b) < 1e-14

    def test_input_not_modified(self):
        A = np.eye(3)
        solve_regularized(A, np.ones(3), regularization=0.5)
        np.testing.assert_array_equal(A, np.eye(3))

    def test_regularization_shifts_diagonal(self):
        x = solve_regularized(np.eye(2), np.array([2.0, 4.0]), regularization=1.0)
        np.testing.assert_allclose(x, [1.0, 2.0])

    def test_singular_raises(self):
        with pytest.raises(SingularSystemError) as exc_info:
            solve_regularized(np.zeros((3, 3)), np.ones(3), regularization=0.0)
        assert 0 <= exc_info.value.row < 3
        assert exc_info.value.pivot == 0.0
        assert "Singular matrix" in str(exc_info.value)

    def test_singular_is_linalg_error(self):
        A = np.array([[1.0, 2.0], [2.0, 4.0]])
        with pytest.raises(np.linalg.LinAlgError):
            solve_regularized(A, np.ones(2), regularization=0.0)

    def test_pivot_tolerance(self):
        A = np.diag([1.0, 1e-10])
        with pytest.raises(SingularSystemError) as exc_info:
            solve_regularized(A, np.ones(2), regularization=0.0, pivot_tolerance=1e-8)
        assert exc_info.value.row == 1


class TestAssembly:
    """Test the assembled system."""

    @pytest.fixture
    def solver(self):
        geometry = create_airfoil_geometry("2412", PanelMethodParameters(n_panels=60))
        flow = FlowConditions.from_degrees(velocity=10.0, alpha_deg=3.0)
        return HessSmithSolver(geometry, flow)

    def test_shape(self, solver):
        A, b = solver.assemble()
        n = solver.n_panels
        assert A.shape == (n + 1, n + 1)
        assert b.shape == (n + 1,)

    def test_tangency_rhs(self, solver):
        _, b = solver.assemble()
        mesh = solver.geometry.mesh
        np.testing.assert_allclose(b[:-1], -(mesh.normals @ solver.flow.freestream))

    def test_kutta_row(self, solver):
        A, b = solver.assemble()
        M = solver.matrices
        n = solver.n_panels
        np.testing.assert_allclose(A[n, :n], M.source_tangent[0] + M.source_tangent[n - 1])
        mesh = solver.geometry.mesh
        expected = -(mesh.tangents[0] + mesh.tangents[n - 1]) @ solver.flow.freestream
        assert b[n] == pytest.approx(expected)

    def test_circulation_column(self, solver):
        A, _ = solver.assemble()
        M = solver.matrices
        perimeter = solver.geometry.mesh.perimeter
        np.testing.assert_allclose(A[:-1, -1], M.vortex_normal.sum(axis=1) / perimeter)


class TestSymmetricSection:
    """NACA 0012 at zero incidence carries no load."""

    def test_zero_circulation(self, symmetric_zero_alpha):
        _, solution = symmetric_zero_alpha
        assert abs(solution.gamma) < 1e-8
        assert abs(solution.cl_gamma) < 1e-3
        assert abs(solution.cl_pressure) < 1e-3

    def test_symmetric_pressure(self, symmetric_zero_alpha):
        _, solution = symmetric_zero_alpha
        np.testing.assert_allclose(solution.cp[::-1], solution.cp, atol=1e-8)

    def test_stagnation_and_suction(self, symmetric_zero_alpha):
        _, solution = symmetric_zero_alpha
        assert solution.cp.max() <= 1.0 + 1e-9
        assert solution.cp.max() > 0.9
        # Thickness-induced suction peak of a 12% section
        assert -0.5 < solution.cp.min() < -0.3


class TestNaca0012Alpha5:
    """Reference scenario: NACA 0012, 120 panels, 5 degrees."""

    def test_lift(self, naca0012_alpha5):
        _, _, solution = naca0012_alpha5
        assert 0.45 < solution.cl_gamma < 0.70
        assert abs(solution.cl_gamma - solution.cl_pressure) < 0.05

    def test_residual(self, naca0012_alpha5):
        _, _, solution = naca0012_alpha5
        assert solution.residual < 1e-6
        assert solution.iterations == 1

    def test_shapes(self, naca0012_alpha5):
        geometry, _, solution = naca0012_alpha5
        n = geometry.n_panels
        assert solution.sigma.shape == (n,)
        assert solution.vt.shape == (n,)
        assert solution.cp.shape == (n,)

    def test_flow_tangency(self, naca0012_alpha5):
        geometry, flow, solution = naca0012_alpha5
        mesh = geometry.mesh
        v = total_velocity(mesh.control_points, mesh, solution.sigma, solution.gamma,
                           flow.freestream)
        vn = np.sum(v * mesh.normals, axis=1)
        assert np.max(np.abs(vn)) < 1e-8 * flow.velocity

    def test_surface_velocity_matches_field(self, naca0012_alpha5):
        geometry, flow, solution = naca0012_alpha5
        mesh = geometry.mesh
        v = total_velocity(mesh.control_points, mesh, solution.sigma, solution.gamma,
                           flow.freestream)
        np.testing.assert_allclose(np.sum(v * mesh.tangents, axis=1), solution.vt, atol=1e-9)

    def test_kutta_condition(self, naca0012_alpha5):
        geometry, flow, solution = naca0012_alpha5
        # Equal speeds leaving the trailing edge on both sides
        vt_upper = solution.vt[geometry.te_upper_index]
        vt_lower = solution.vt[geometry.te_lower_index]
        assert vt_upper + vt_lower == pytest.approx(0.0, abs=1e-8 * flow.velocity)
        # Upper tangent points forward, so the flow leaving the TE gives Vt < 0
        assert vt_upper < 0.0

    def test_suction_on_upper_surface(self, naca0012_alpha5):
        geometry, _, solution = naca0012_alpha5
        le = int(np.argmin(geometry.mesh.midpoints[:, 0]))
        assert solution.cp[:le].min() < solution.cp[le:].min()

    def test_deterministic(self, naca0012_alpha5):
        geometry, flow, solution = naca0012_alpha5
        again = solve_panel_method(geometry, flow)
        np.testing.assert_allclose(again.sigma, solution.sigma, rtol=1e-12)
        assert again.gamma == pytest.approx(solution.gamma, rel=1e-12)


class TestCamber:
    """Positive and negative camber."""

    def test_inverted_section_flips_lift(self):
        flow = FlowConditions.from_degrees(velocity=10.0, alpha_deg=0.0)
        params = PanelMethodParameters(n_panels=100)
        upright = solve_panel_method(create_airfoil_geometry("2412", params), flow, params)
        inverted = solve_panel_method(
            create_airfoil_geometry(NacaParameters(digits="2412", inverted=True), params),
            flow, params)

        assert upright.gamma > 0.0
        assert upright.cl_gamma > 0.15
        assert inverted.gamma == pytest.approx(-upright.gamma, rel=1e-6)
        assert inverted.cl_pressure == pytest.approx(-upright.cl_pressure, rel=1e-6)

    def test_lift_grows_with_alpha(self):
        geometry = create_airfoil_geometry("2412", PanelMethodParameters(n_panels=100))
        cl = [solve_panel_method(geometry, FlowConditions.from_degrees(10.0, a)).cl_gamma
              for a in (-2.0, 2.0, 6.0)]
        assert cl[0] < cl[1] < cl[2]
        # Lift slope near 2π per radian (slightly above for a 12% section)
        slope = (cl[2] - cl[0]) / np.radians(8.0)
        assert 2 * np.pi * 0.95 < slope < 2 * np.pi * 1.2

    def test_chord_scaling(self):
        flow = FlowConditions.from_degrees(velocity=10.0, alpha_deg=4.0)
        params = PanelMethodParameters(n_panels=80)
        small = solve_panel_method(create_airfoil_geometry(NacaParameters(digits="2412"), params), flow, params)
        large = solve_panel_method(
            create_airfoil_geometry(NacaParameters(digits="2412", chord=3.0), params), flow, params)
        assert large.cl_gamma == pytest.approx(small.cl_gamma, rel=1e-6)
        assert large.gamma == pytest.approx(3.0 * small.gamma, rel=1e-6)


class TestConvergence:
    """Refining the panels tightens the two lift estimates."""

    def test_panel_refinement(self):
        flow = FlowConditions.from_degrees(velocity=10.0, alpha_deg=5.0)
        gaps = []
        for n in (80, 240):
            params = PanelMethodParameters(n_panels=n)
            solution = solve_panel_method(create_airfoil_geometry("0012", params), flow, params)
            assert solution.residual < 1e-6
            gaps.append(solution.cl_gap)
        assert gaps[1] <= gaps[0] + 2e-3


class TestFailure:
    """Singular systems surface as SingularSystemError."""

    def test_pivot_tolerance_propagates(self):
        params = PanelMethodParameters(n_panels=40, pivot_tolerance=1e6)
        geometry = create_airfoil_geometry("0012", params)
        flow = FlowConditions.from_degrees(velocity=10.0, alpha_deg=2.0)
        with pytest.raises(SingularSystemError):
            solve_panel_method(geometry, flow, params)
