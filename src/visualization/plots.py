"""
Matplotlib plots for airfoil panel solutions.
"""

from pathlib import Path
from typing import Optional, Tuple, Union
import numpy as np
import matplotlib.pyplot as plt
from matplotlib.figure import Figure

from core.geometry.airfoil import AirfoilGeometry
from solvers.panel2d.hess_smith import PanelSolution
from .streamlines import StreamlineField


def plot_cp_distribution(geometry: AirfoilGeometry,
                         solution: PanelSolution,
                         title: Optional[str] = None,
                         show_panels: bool = True,
                         show_normals: bool = False,
                         figsize: Tuple[float, float] = (12.0, 8.0)) -> Figure:
    """
    Two-panel figure: airfoil coloured by Cp, and Cp against x/c.

    Cp is plotted with the y-axis inverted (suction up).
    """
    mesh = geometry.mesh
    xc = mesh.midpoints[:, 0]
    yc = mesh.midpoints[:, 1]
    cp = solution.cp

    fig, (ax_geom, ax_cp) = plt.subplots(2, 1, figsize=figsize)

    # Geometry coloured by Cp
    sc = ax_geom.scatter(xc, yc, c=cp, cmap='jet', s=20)
    fig.colorbar(sc, ax=ax_geom, label='Cp')
    if show_panels:
        loop = np.vstack([mesh.starts, mesh.ends[-1:]])
        ax_geom.plot(loop[:, 0], loop[:, 1], 'k-', lw=0.5, alpha=0.5)
    if show_normals:
        scale = 0.03 * geometry.chord
        ax_geom.quiver(xc, yc, mesh.normals[:, 0], mesh.normals[:, 1],
                       angles='xy', scale_units='xy', scale=1.0 / scale,
                       width=0.002, color='gray')
    ax_geom.set_aspect('equal')
    ax_geom.set_title(title or f"NACA {geometry.designation} - Cp Distribution")

    # Upper surface runs TE -> LE, lower LE -> TE; split at the leading edge
    le = int(np.argmin(xc))
    x_over_c = xc / geometry.chord
    ax_cp.plot(x_over_c[:le + 1], cp[:le + 1], 'b.-', ms=3, lw=0.8, label='Upper')
    ax_cp.plot(x_over_c[le:], cp[le:], 'r.-', ms=3, lw=0.8, label='Lower')
    ax_cp.invert_yaxis()
    ax_cp.set_xlabel('x/c')
    ax_cp.set_ylabel('Cp (Inverted)')
    ax_cp.set_title(f"CL_Γ = {solution.cl_gamma:.4f}, CL_p = {solution.cl_pressure:.4f}")
    ax_cp.grid(True)
    ax_cp.legend()

    fig.tight_layout()
    return fig


def plot_streamlines(geometry: AirfoilGeometry,
                     field: StreamlineField,
                     speed: Optional[Tuple[np.ndarray, np.ndarray, np.ndarray]] = None,
                     title: Optional[str] = None,
                     figsize: Tuple[float, float] = (12.0, 8.0)) -> Figure:
    """
    Streamlines around the airfoil.

    Args:
        geometry: Airfoil geometry
        field: Traced streamlines
        speed: Optional (x, y, |V|) grid from velocity_magnitude_field, drawn
            as a filled contour underneath
        title: Plot title
        figsize: Figure size
    """
    fig, ax = plt.subplots(figsize=figsize)

    if speed is not None:
        x, y, mag = speed
        cf = ax.contourf(x, y, mag, levels=30, cmap='viridis')
        fig.colorbar(cf, ax=ax, label='|V| [m/s]')

    for line in field.streamlines:
        color = 'b' if line.complete else 'orange'
        ax.plot(line.points[:, 0], line.points[:, 1], '-', color=color, lw=0.8)

    ax.fill(geometry.points[:, 0], geometry.points[:, 1], color='lightgray',
            edgecolor='k', lw=1.0)

    x_min, x_max, y_min, y_max = field.bounds
    ax.set_xlim(x_min, x_max)
    ax.set_ylim(y_min, y_max)
    ax.set_aspect('equal')
    ax.set_xlabel('x [m]')
    ax.set_ylabel('y [m]')
    ax.set_title(title or f"NACA {geometry.designation} - Streamlines "
                          f"({field.n_complete}/{len(field)} complete)")

    fig.tight_layout()
    return fig


def save_figure(fig: Figure, path: Union[str, Path], dpi: int = 150) -> Path:
    """Save and close a figure, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path, dpi=dpi)
    plt.close(fig)
    return path
