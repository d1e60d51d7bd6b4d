"""
Test source/vortex panel kernels: near field, far field, matrices.
"""

import pytest
import numpy as np
from pathlib import Path

# Add src to path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import PanelMethodParameters
from core.geometry import Panel, Point2D, Vector2D, create_airfoil_geometry
from solvers.panel2d import (
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


UNIT_PANEL = Panel(0.0, 0.0, 1.0, 0.0)


class TestNearField:
    """Behaviour on and just off a panel."""

    @pytest.mark.parametrize("x", [0.0, 0.25, 0.5, 1.0])
    def test_on_panel_is_zero(self, x):
        p = Point2D(x, 0.0)
        assert source_influence(p, UNIT_PANEL) == Vector2D(0.0, 0.0)
        assert vortex_influence(p, UNIT_PANEL) == Vector2D(0.0, 0.0)

    def test_within_tolerance_is_zero(self):
        v = source_influence(Point2D(0.5, 1e-12), UNIT_PANEL)
        assert v == Vector2D(0.0, 0.0)

    def test_source_jump_across_sheet(self):
        above = source_influence(Point2D(0.5, 1e-6), UNIT_PANEL)
        below = source_influence(Point2D(0.5, -1e-6), UNIT_PANEL)
        assert above.y == pytest.approx(0.5, abs=1e-5)
        assert below.y == pytest.approx(-0.5, abs=1e-5)
        # Symmetric about the midpoint
        assert above.x == pytest.approx(0.0, abs=1e-12)

    def test_vortex_jump_across_sheet(self):
        above = vortex_influence(Point2D(0.5, 1e-6), UNIT_PANEL)
        below = vortex_influence(Point2D(0.5, -1e-6), UNIT_PANEL)
        # Clockwise sheet: flow runs +x above, -x below
        assert above.x == pytest.approx(0.5, abs=1e-5)
        assert below.x == pytest.approx(-0.5, abs=1e-5)
        assert above.y == pytest.approx(0.0, abs=1e-12)

    def test_on_panel_extension_is_finite(self):
        v = source_influence(Point2D(2.0, 0.0), UNIT_PANEL)
        # ln(r1²/r2²)/(4π) = ln(4)/(4π) along the panel line
        assert v.x == pytest.approx(np.log(4.0) / (4 * np.pi))
        assert v.y == pytest.approx(0.0, abs=1e-15)


class TestFarField:
    """Far from the panel the kernels reduce to point singularities."""

    def test_point_source_limit(self):
        r = 100.0
        v = source_influence(Point2D(0.5, r), UNIT_PANEL)
        assert v.y == pytest.approx(1.0 / (2 * np.pi * r), rel=1e-3)
        assert abs(v.x) < 1e-8

    def test_point_vortex_limit(self):
        r = 100.0
        v = vortex_influence(Point2D(0.5, r), UNIT_PANEL)
        # Clockwise vortex: +x above the panel
        assert v.x == pytest.approx(1.0 / (2 * np.pi * r), rel=1e-3)
        assert abs(v.y) < 1e-8

    def test_strength_scales_linearly(self):
        p = Point2D(0.3, 0.7)
        v1 = source_influence(p, UNIT_PANEL)
        v3 = source_influence(p, UNIT_PANEL, strength=3.0)
        np.testing.assert_allclose(v3.to_array(), 3.0 * v1.to_array())


class TestKernelRelations:
    """Relations between the source and vortex kernels."""

    def test_vortex_is_rotated_source(self):
        panel = Panel(0.2, -0.1, 0.9, 0.4)
        rng = np.random.default_rng(0)
        for x, y in rng.uniform(-2.0, 2.0, size=(20, 2)):
            s = source_influence(Point2D(x, y), panel)
            v = vortex_influence(Point2D(x, y), panel)
            np.testing.assert_allclose(v.to_array(), [s.y, -s.x], atol=1e-15)

    def test_rotation_invariance(self):
        # Same configuration rotated by 90 degrees
        panel = Panel(0.0, 0.0, 0.0, 1.0)
        v = source_influence(Point2D(-0.3, 0.5), panel)
        v_ref = source_influence(Point2D(0.5, 0.3), UNIT_PANEL)
        np.testing.assert_allclose(v.to_array(), v_ref.rotate(np.pi / 2).to_array(), atol=1e-14)

    def test_component_helpers(self):
        p = Point2D(0.4, 0.3)
        n = Vector2D(0.0, 1.0)
        t = Vector2D(1.0, 0.0)
        s = source_influence(p, UNIT_PANEL)
        v = vortex_influence(p, UNIT_PANEL)
        assert source_influence_normal(p, UNIT_PANEL, n) == pytest.approx(s.y)
        assert source_influence_tangent(p, UNIT_PANEL, t) == pytest.approx(s.x)
        assert vortex_influence_normal(p, UNIT_PANEL, n) == pytest.approx(v.y)
        assert vortex_influence_tangent(p, UNIT_PANEL, t, strength=2.0) == pytest.approx(2.0 * v.x)


class TestMatrices:
    """Vectorized kernels and influence matrices on an airfoil."""

    @pytest.fixture
    def geometry(self):
        return create_airfoil_geometry("2412", PanelMethodParameters(n_panels=60))

    def test_vectorized_matches_scalar(self, geometry):
        mesh = geometry.mesh
        pts = np.array([[0.5, 0.3], [-0.2, -0.1], [1.3, 0.05]])
        sx, sy = source_velocity(pts, mesh)
        gx, gy = vortex_velocity(pts, mesh)
        assert sx.shape == (3, len(mesh))

        for j in (0, 17, len(mesh) - 1):
            panel = mesh.panel(j)
            for i, (x, y) in enumerate(pts):
                s = source_influence(Point2D(x, y), panel, reference_length=mesh.reference_length)
                g = vortex_influence(Point2D(x, y), panel, reference_length=mesh.reference_length)
                np.testing.assert_allclose([sx[i, j], sy[i, j]], s.to_array(), atol=1e-14)
                np.testing.assert_allclose([gx[i, j], gy[i, j]], g.to_array(), atol=1e-14)

    def test_self_influence(self, geometry):
        M = influence_matrices(geometry.mesh)
        n = len(geometry.mesh)
        assert M.source_normal.shape == (n, n)
        # Control points sit on the fluid side of each sheet
        np.testing.assert_allclose(np.diag(M.source_normal), 0.5, atol=1e-5)
        np.testing.assert_allclose(np.diag(M.vortex_tangent), -0.5, atol=1e-5)
        np.testing.assert_allclose(np.diag(M.source_tangent), 0.0, atol=1e-5)

    def test_closed_body_source_flux(self, geometry):
        # A unit source sheet on the whole body pushes equal flux out everywhere
        mesh = geometry.mesh
        M = influence_matrices(mesh)
        flux = M.source_normal @ np.ones(len(mesh)) * mesh.lengths
        assert np.sum(flux) == pytest.approx(mesh.perimeter, rel=0.05)

    def test_total_velocity_far_field(self, geometry):
        mesh = geometry.mesh
        n = len(mesh)
        freestream = np.array([10.0, 1.0])
        v = total_velocity(np.array([[200.0, 200.0]]), mesh, 0.1 * np.ones(n), 0.5, freestream)
        np.testing.assert_allclose(v[0], freestream, atol=1e-2)

    def test_total_velocity_circulation_only(self, geometry):
        mesh = geometry.mesh
        n = len(mesh)
        gamma = 2.0
        r = 50.0
        center = np.array([0.5, 0.0])
        # Far away, a uniform sheet of total strength Γ looks like a point vortex
        v = total_velocity(center + np.array([[0.0, r]]), mesh, np.zeros(n), gamma, np.zeros(2))
        assert v[0, 0] == pytest.approx(gamma / (2 * np.pi * r), rel=2e-2)
