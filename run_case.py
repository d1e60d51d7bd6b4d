"""
Run an airfoil case defined by a YAML config file.

Usage:
    python run_case.py cases/naca2412/case.yaml
    python run_case.py cases/naca0012 --convergence 60,120,240
"""

import sys
import argparse
from pathlib import Path
import numpy as np

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from pydantic import ValidationError

from core.errors import InvalidSpecError, SingularSystemError
from core.io import CaseLoader, ResultExporter
from solvers.panel2d import HessSmithSolver
from postprocessing import validate_solution, lift_per_span, surface_pressure
from postprocessing.convergence import run_panel_convergence, compare_panel_resolutions
from visualization import (
    generate_streamline_field,
    velocity_magnitude_field,
    plot_cp_distribution,
    plot_streamlines,
    save_figure,
)


def parse_panel_counts(text: str):
    try:
        counts = [int(s) for s in text.split(",") if s.strip()]
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected comma-separated integers, got '{text}'")
    if len(counts) < 2:
        raise argparse.ArgumentTypeError("Need at least 2 panel counts")
    bad = [n for n in counts if n < 20 or n > 500]
    if bad:
        raise argparse.ArgumentTypeError(f"Panel counts out of range [20, 500]: {bad}")
    return counts


def main():
    parser = argparse.ArgumentParser(description="Run Hess-Smith Airfoil Panel Case")
    parser.add_argument("case_file", type=str, help="Path to YAML case file or case directory")
    parser.add_argument("--convergence", type=parse_panel_counts, default=None,
                        help="Panel count study, e.g. 60,120,240")
    parser.add_argument("--no-plots", action="store_true", help="Skip plot output")
    parser.add_argument("-v", "--verbose", action="store_true", help="Print solver details")
    args = parser.parse_args()

    case_path = Path(args.case_file).resolve()
    if not case_path.exists():
        print(f"Error: Case file not found: {case_path}")
        sys.exit(1)

    print(f"Loading case: {case_path.name}")
    try:
        case = CaseLoader.load_case(case_path)
    except (FileNotFoundError, ValidationError) as e:
        print(f"Error loading case: {e}")
        sys.exit(1)

    print(f"Case '{case.name}' loaded successfully.")
    config = case.config

    print("=" * 60)
    print("Building geometry...")
    try:
        geometry = case.geometry
    except InvalidSpecError as e:
        print(f"Error building geometry: {e}")
        sys.exit(1)
    print(f"  {geometry}")
    print(f"  Thin-airfoil zero-lift angle: {np.degrees(geometry.zero_lift_angle):.3f} deg")

    flow = case.flow
    print(f"Flow: V_inf = {flow.velocity:.4f} m/s, AoA = {case.alpha_deg:.2f} deg, "
          f"rho = {flow.density:.4f} kg/m³")

    print("Solving system...")
    try:
        solution = HessSmithSolver(geometry, flow, case.panel_params, verbose=args.verbose).solve()
    except SingularSystemError as e:
        print(f"Error: {e}")
        print("Change the panel count or regularization and run again.")
        sys.exit(1)

    print(f"  ✓ Γ = {solution.gamma:.6f} m²/s")
    print(f"  ✓ CL (circulation) = {solution.cl_gamma:.5f}")
    print(f"  ✓ CL (pressure)    = {solution.cl_pressure:.5f}")
    print(f"  ✓ Residual = {solution.residual:.2e}")

    report = validate_solution(solution, geometry, flow)
    print(report)

    loads = lift_per_span(solution.gamma, solution.cl_pressure,
                          flow.density, flow.velocity, geometry.chord)
    print(f"Lift per span: {loads['kutta_joukowski']:.4f} N/m (Kutta-Joukowski), "
          f"{loads['pressure']:.4f} N/m (pressure)")

    pressure = surface_pressure(solution.cp, solution.vt, flow.density, flow.velocity,
                                case.reference_pressure)
    print(f"Surface pressure: {pressure.pressure.min():.1f} to {pressure.pressure.max():.1f} Pa "
          f"(P_inf = {pressure.p_inf:.1f} Pa, q = {pressure.q_inf:.2f} Pa)")

    exporter = ResultExporter(case.output_dir)
    if config.output.save_surface:
        path = exporter.export_surface(geometry, solution, pressure)
        print(f"Surface data saved to {path}")
    if config.output.save_summary:
        path = exporter.export_summary(case.name, geometry, flow, solution, report, loads)
        print(f"Summary saved to {path}")

    # Streamlines
    field = None
    if case.streamline_params is not None:
        print("=" * 60)
        print("Tracing streamlines...")
        field = generate_streamline_field(geometry, solution, flow, case.streamline_params,
                                          verbose=True)
        if config.output.save_streamlines:
            path = exporter.export_streamlines(field)
            print(f"Streamlines saved to {path}")

    # Convergence study
    panel_counts = args.convergence or config.convergence
    if panel_counts:
        results = run_panel_convergence(config.airfoil, flow, panel_counts, case.panel_params)
        comparison = compare_panel_resolutions(results)
        print("\nRelative change against finest run "
              f"({comparison['reference_panels']} panels):")
        for n, d_cl in zip(comparison["n_panels"], comparison["cl_gamma_change"]):
            print(f"  {n:4d} panels: ΔCL_Γ = {d_cl:.3e}")
        path = exporter.export_convergence(results, comparison)
        print(f"Convergence data saved to {path}")

    # Visualization
    viz = config.visualization
    if viz.enabled and not args.no_plots:
        print("=" * 60)
        print("Generating visualization...")
        fig = plot_cp_distribution(geometry, solution, title=f"{case.name} - Cp Distribution",
                                   show_panels=viz.show_panels, show_normals=viz.show_normals,
                                   figsize=viz.figsize)
        path = save_figure(fig, case.output_dir / f"{case_path.stem}_cp.png", dpi=viz.dpi)
        print(f"Result plot saved to {path}")

        if field is not None:
            speed = velocity_magnitude_field(geometry, solution, flow, field.bounds, resolution=80)
            fig = plot_streamlines(geometry, field, speed=speed, figsize=viz.figsize)
            path = save_figure(fig, case.output_dir / f"{case_path.stem}_streamlines.png",
                               dpi=viz.dpi)
            print(f"Streamline plot saved to {path}")

    print("Done.")


if __name__ == "__main__":
    main()
