"""
Demo: Streamlines around a NACA 2412 at 6 degrees.
"""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from core.config import FlowConditions, PanelMethodParameters, StreamlineParameters
from core.geometry import create_airfoil_geometry
from solvers.panel2d import solve_panel_method
from visualization import (
    generate_streamline_field,
    velocity_magnitude_field,
    find_stagnation_points,
    plot_streamlines,
    save_figure,
)


def main():
    print("Running Streamline Demo: NACA 2412...")

    # 1. Geometry and flow
    geometry = create_airfoil_geometry("2412", PanelMethodParameters(n_panels=120))
    flow = FlowConditions.from_degrees(velocity=10.0, alpha_deg=6.0)

    # 2. Solve
    solution = solve_panel_method(geometry, flow)
    print(f"Solved. CL_Γ = {solution.cl_gamma:.4f}, residual = {solution.residual:.2e}")

    # 3. Trace
    params = StreamlineParameters(n_streamlines=25, step_size=0.01, max_steps=1500)
    field = generate_streamline_field(geometry, solution, flow, params, verbose=True)

    for line in field.streamlines:
        if not line.complete:
            print(f"  Streamline from y = {line.points[0, 1]:+.3f} stopped: "
                  f"{line.termination.value} after {len(line)} points")

    stagnation = find_stagnation_points(geometry, solution, flow,
                                        (-0.05, 1.05, -0.1, 0.1), tolerance=0.05 * flow.velocity)
    print(f"  {len(stagnation)} near-stagnation grid points found")

    # 4. Plot
    speed = velocity_magnitude_field(geometry, solution, flow, field.bounds, resolution=100)
    fig = plot_streamlines(geometry, field, speed=speed)
    path = save_figure(fig, Path(__file__).parent / "out/demo_naca2412_streamlines.png")
    print(f"Streamline plot saved to {path}")


if __name__ == "__main__":
    main()
