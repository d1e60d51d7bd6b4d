"""
Test configuration models, case loading, result export and plotting.
"""

import json
import argparse
import pytest
import numpy as np
from pathlib import Path
from pydantic import ValidationError

import matplotlib
matplotlib.use("Agg")

# Add src to path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import (
    CaseConfig,
    FlowConditions,
    FlowConfig,
    NacaParameters,
    PanelMethodParameters,
    StreamlineParameters,
)
from core.io import Case, CaseLoader, ResultExporter
from solvers.panel2d import solve_panel_method
from postprocessing import validate_solution, surface_pressure
from visualization import (
    generate_streamline_field,
    plot_cp_distribution,
    plot_streamlines,
    save_figure,
)

# Repository root for the command line script
sys.path.insert(0, str(Path(__file__).parent.parent.parent))
from run_case import parse_panel_counts


CASES_DIR = Path(__file__).parent.parent.parent / "cases"


@pytest.fixture(scope="module")
def solved_case():
    case = CaseLoader.load_case(CASES_DIR / "naca0012")
    geometry = case.geometry
    flow = case.flow
    solution = solve_panel_method(geometry, flow, case.panel_params)
    return case, geometry, flow, solution


class TestParameterModels:
    """Defaults and validation of the parameter structs."""

    def test_defaults(self):
        params = PanelMethodParameters()
        assert params.n_panels == 120
        assert params.epsilon == 1e-9
        assert params.regularization == 1e-12

        stream = StreamlineParameters()
        assert stream.n_streamlines == 15
        assert stream.step_size == 0.01
        assert stream.max_steps == 1000
        assert stream.min_points == 6

    @pytest.mark.parametrize("digits, expected", [
        ("2412", "2412"),
        ("NACA 0012", "0012"),
        ("naca4415", "4415"),
        (12, "0012"),
    ])
    def test_digits_normalized(self, digits, expected):
        assert NacaParameters(digits=digits).digits == expected

    @pytest.mark.parametrize("digits", ["241", "24120", "24a2", ""])
    def test_bad_digits(self, digits):
        with pytest.raises(ValidationError):
            NacaParameters(digits=digits)

    def test_panel_range(self):
        with pytest.raises(ValidationError):
            PanelMethodParameters(n_panels=10)
        with pytest.raises(ValidationError):
            PanelMethodParameters(n_panels=1000)

    def test_frozen(self):
        params = PanelMethodParameters()
        with pytest.raises(ValidationError):
            params.n_panels = 60

    def test_flow_conditions(self):
        flow = FlowConditions.from_degrees(velocity=20.0, alpha_deg=30.0, density=1.0)
        assert flow.angle_of_attack == pytest.approx(np.pi / 6)
        assert flow.alpha_deg == pytest.approx(30.0)
        np.testing.assert_allclose(flow.freestream, [20.0 * np.sqrt(3) / 2, 10.0])
        assert flow.dynamic_pressure == pytest.approx(200.0)

    def test_flow_config(self):
        flow = FlowConfig(velocity=5.0, alpha_deg=-4.0).to_conditions()
        assert flow.velocity == 5.0
        assert flow.angle_of_attack == pytest.approx(np.radians(-4.0))
        with pytest.raises(ValidationError):
            FlowConfig(alpha_deg=95.0)


class TestCaseConfig:
    """Top-level case file schema."""

    def test_minimal(self):
        config = CaseConfig(name="  minimal  ")
        assert config.name == "minimal"
        assert config.airfoil.digits == "0012"
        assert config.streamlines is None
        assert config.convergence is None

    def test_blank_name(self):
        with pytest.raises(ValidationError):
            CaseConfig(name="   ")

    def test_unknown_key(self):
        with pytest.raises(ValidationError):
            CaseConfig(name="x", solver={"type": "vortex"})

    def test_convergence_sorted(self):
        config = CaseConfig(name="x", convergence=[240, 60, 120])
        assert config.convergence == [60, 120, 240]

    @pytest.mark.parametrize("counts", [[60], [60, 60], [10, 60], [60, 600]])
    def test_convergence_rejected(self, counts):
        with pytest.raises(ValidationError):
            CaseConfig(name="x", convergence=counts)


class TestCaseLoader:
    """YAML case files."""

    @pytest.mark.parametrize("case", ["naca0012", "naca2412"])
    def test_bundled_cases(self, case):
        assert CaseLoader.validate(CASES_DIR / case / "case.yaml")
        loaded = CaseLoader.load_case(CASES_DIR / case)
        assert isinstance(loaded, Case)
        assert loaded.case_dir == CASES_DIR / case

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            CaseLoader.load(tmp_path / "nope.yaml")
        with pytest.raises(FileNotFoundError):
            CaseLoader.load_case(tmp_path)

    def test_invalid_file(self, tmp_path):
        path = tmp_path / "case.yaml"
        path.write_text("name: bad\nflow:\n  velocity: -3.0\n")
        with pytest.raises(ValidationError):
            CaseLoader.load(path)

    def test_save_and_load(self, tmp_path):
        config = CaseConfig(
            name="roundtrip",
            airfoil=NacaParameters(digits="4412", chord=0.5, inverted=True),
            panels=PanelMethodParameters(n_panels=80),
            flow=FlowConfig(velocity=12.0, alpha_deg=3.0),
            streamlines=StreamlineParameters(n_streamlines=5),
            convergence=[40, 80],
        )
        path = CaseLoader.save(config, tmp_path / "sub" / "case.yaml")
        assert CaseLoader.load(path) == config

    def test_case_properties(self, tmp_path):
        path = tmp_path / "case.yaml"
        path.write_text(
            "name: props\n"
            "airfoil:\n  digits: '2412'\n"
            "panels:\n  n_panels: 60\n"
            "flow:\n  velocity: 15.0\n  alpha_deg: 2.0\n"
            "output:\n  directory: results\n"
        )
        case = CaseLoader.load_case(tmp_path)
        assert case.name == "props"
        assert case.v_inf == 15.0
        assert case.alpha_deg == 2.0
        assert case.flow.angle_of_attack == pytest.approx(np.radians(2.0))
        assert case.reference_pressure == 101325.0
        assert case.panel_params.n_panels == 60
        assert case.streamline_params is None
        assert case.output_dir == tmp_path / "results"
        assert case.num_panels == 60
        # Geometry is built once
        assert case.geometry is case.geometry
        assert "2412" in repr(case)


class TestExportAndPlots:
    """Result files and figures for a solved case."""

    def test_surface_csv(self, solved_case, tmp_path):
        _, geometry, _, solution = solved_case
        path = ResultExporter(tmp_path).export_surface(geometry, solution)
        with open(path) as f:
            assert f.readline().strip() == "x1,y1,x2,y2,xc,yc,cp,vt,sigma"
        table = np.loadtxt(path, delimiter=",", skiprows=1)
        assert table.shape == (geometry.n_panels, 9)
        np.testing.assert_allclose(table[:, 6], solution.cp, rtol=1e-9, atol=1e-12)

    def test_surface_csv_with_pressure(self, solved_case, tmp_path):
        case, geometry, flow, solution = solved_case
        pressure = surface_pressure(solution.cp, solution.vt, flow.density, flow.velocity,
                                    case.reference_pressure)
        path = ResultExporter(tmp_path).export_surface(geometry, solution, pressure)
        with open(path) as f:
            assert f.readline().strip() == "x1,y1,x2,y2,xc,yc,cp,vt,sigma,p,p_gauge"
        table = np.loadtxt(path, delimiter=",", skiprows=1)
        assert table.shape == (geometry.n_panels, 11)
        expected = 101325.0 + flow.dynamic_pressure * solution.cp
        np.testing.assert_allclose(table[:, 9], expected, rtol=1e-9)
        np.testing.assert_allclose(table[:, 10], table[:, 9] - 101325.0, atol=1e-4)

    def test_summary_json(self, solved_case, tmp_path):
        case, geometry, flow, solution = solved_case
        report = validate_solution(solution, geometry, flow)
        path = ResultExporter(tmp_path / "out").export_summary(
            case.name, geometry, flow, solution, report, loads={"kutta_joukowski": 1.0})
        data = json.loads(path.read_text())
        assert data["name"] == "naca0012_alpha5"
        assert data["airfoil"]["n_panels"] == geometry.n_panels
        assert data["solution"]["cl_gamma"] == pytest.approx(solution.cl_gamma)
        assert data["validation"]["is_valid"] is True
        assert data["lift_per_span"]["kutta_joukowski"] == 1.0

    def test_streamlines_json(self, solved_case, tmp_path):
        _, geometry, flow, solution = solved_case
        params = StreamlineParameters(n_streamlines=3, step_size=0.05, max_steps=200)
        field = generate_streamline_field(geometry, solution, flow, params)
        path = ResultExporter(tmp_path).export_streamlines(field)
        data = json.loads(path.read_text())
        assert len(data["streamlines"]) == len(field)
        assert set(data["bounds"]) == {"x_min", "x_max", "y_min", "y_max"}
        for entry, line in zip(data["streamlines"], field.streamlines):
            assert entry["termination"] == line.termination.value
            assert len(entry["points"]) == len(line)

    def test_convergence_json(self, tmp_path):
        results = [{"n_panels": 60, "success": True, "cl_gamma": np.float64(0.5)}]
        path = ResultExporter(tmp_path).export_convergence(results, {"reference_panels": 60})
        data = json.loads(path.read_text())
        assert data["results"][0]["cl_gamma"] == 0.5
        assert data["comparison"]["reference_panels"] == 60

    def test_plots_saved(self, solved_case, tmp_path):
        _, geometry, flow, solution = solved_case
        fig = plot_cp_distribution(geometry, solution, show_normals=True)
        cp_path = save_figure(fig, tmp_path / "plots" / "cp.png", dpi=50)
        assert cp_path.exists()

        params = StreamlineParameters(n_streamlines=3, step_size=0.05, max_steps=200)
        field = generate_streamline_field(geometry, solution, flow, params)
        fig = plot_streamlines(geometry, field)
        sl_path = save_figure(fig, tmp_path / "streamlines.png", dpi=50)
        assert sl_path.exists()


class TestPanelCountArgument:
    """--convergence command line option."""

    def test_parsed(self):
        assert parse_panel_counts("60,120, 240") == [60, 120, 240]

    @pytest.mark.parametrize("text", ["2,3", "60,600", "60", "60,abc"])
    def test_rejected(self, text):
        with pytest.raises(argparse.ArgumentTypeError):
            parse_panel_counts(text)
