"""
Streamline tracing for 2D panel method solutions.

Streamlines are integrated with a midpoint (RK2) scheme on the normalized
velocity direction, so every step advances a fixed arc length. Tracing stops
at the domain boundary, on entering the body, near a stagnation point or when
the step budget runs out; the reason is recorded on the streamline.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple
import numpy as np
from numpy.typing import NDArray

from core.config.schemas import FlowConditions, StreamlineParameters
from core.geometry.airfoil import AirfoilGeometry
from solvers.panel2d.hess_smith import PanelSolution
from solvers.panel2d.influence import total_velocity


Bounds = Tuple[float, float, float, float]      # (x_min, x_max, y_min, y_max)


class TerminationReason(Enum):
    """Why a streamline stopped."""
    BOUNDARY = "boundary"
    BODY = "body"
    STAGNATION = "stagnation"
    MAX_STEPS = "max_steps"
    SEED_INSIDE = "seed_inside"


@dataclass(frozen=True)
class Streamline:
    """
    One traced streamline.

    Attributes:
        points: Ordered positions (N, 2), starting at the seed
        complete: True only when the domain boundary was reached
        termination: Reason the integration stopped
    """
    points: NDArray[np.float64]
    complete: bool
    termination: TerminationReason

    def __len__(self) -> int:
        return self.points.shape[0]


@dataclass(frozen=True)
class StreamlineField:
    """Streamlines plus the box used for seeding and termination."""
    streamlines: List[Streamline]
    bounds: Bounds

    def __len__(self) -> int:
        return len(self.streamlines)

    @property
    def n_complete(self) -> int:
        return sum(1 for s in self.streamlines if s.complete)


def field_velocity(points: NDArray[np.float64],
                   geometry: AirfoilGeometry,
                   solution: PanelSolution,
                   flow: FlowConditions) -> NDArray[np.float64]:
    """
    Velocity at arbitrary field point(s).

    Args:
        points: (2,) point or (M, 2) points

    Returns:
        (2,) or (M, 2) velocity, matching the input
    """
    pts = np.asarray(points, dtype=np.float64)
    vel = total_velocity(pts, geometry.mesh, solution.sigma, solution.gamma,
                         flow.freestream)
    return vel[0] if pts.ndim == 1 else vel


def _outside(p: NDArray[np.float64], bounds: Bounds) -> bool:
    x_min, x_max, y_min, y_max = bounds
    return p[0] < x_min or p[0] > x_max or p[1] < y_min or p[1] > y_max


def trace_streamline(start: NDArray[np.float64],
                     geometry: AirfoilGeometry,
                     solution: PanelSolution,
                     flow: FlowConditions,
                     step_size: float,
                     max_steps: int,
                     bounds: Bounds,
                     min_velocity: float) -> Streamline:
    """
    Trace one streamline from `start` with fixed-length RK2 steps.

    A step is rejected (and tracing stops) when its midpoint or end point
    leaves `bounds` (complete) or falls inside the body. Speed below
    `min_velocity` at either evaluation, or a midpoint velocity pointing
    against the current one, stops with STAGNATION.

    Args:
        start: (2,) seed point
        geometry: Airfoil geometry
        solution: Panel solution
        flow: Flow conditions
        step_size: Arc length per step
        max_steps: Step budget
        bounds: (x_min, x_max, y_min, y_max)
        min_velocity: Stagnation speed threshold

    Returns:
        Streamline
    """
    current = np.asarray(start, dtype=np.float64).copy()
    points = [current.copy()]

    if geometry.contains(current)[0]:
        return Streamline(np.array(points), False, TerminationReason.SEED_INSIDE)

    reason = TerminationReason.MAX_STEPS

    for _ in range(max_steps):
        v1 = field_velocity(current, geometry, solution, flow)
        speed1 = np.hypot(v1[0], v1[1])
        if speed1 < min_velocity:
            reason = TerminationReason.STAGNATION
            break

        mid = current + 0.5 * step_size * v1 / speed1
        if _outside(mid, bounds):
            reason = TerminationReason.BOUNDARY
            break
        if geometry.contains(mid)[0]:
            reason = TerminationReason.BODY
            break

        v2 = field_velocity(mid, geometry, solution, flow)
        speed2 = np.hypot(v2[0], v2[1])
        if speed2 < min_velocity or np.dot(v1, v2) <= 0.0:
            reason = TerminationReason.STAGNATION
            break

        nxt = current + step_size * v2 / speed2
        if _outside(nxt, bounds):
            reason = TerminationReason.BOUNDARY
            break
        if geometry.contains(nxt)[0]:
            reason = TerminationReason.BODY
            break

        points.append(nxt)
        current = nxt

    return Streamline(np.array(points), reason == TerminationReason.BOUNDARY, reason)


def field_bounds(geometry: AirfoilGeometry, seed_distance: float, y_range: float) -> Bounds:
    """Airfoil extent grown by seed_distance in x and y_range in y."""
    x_min, x_max, y_min, y_max = geometry.bounds
    return (x_min - seed_distance, x_max + seed_distance,
            y_min - y_range, y_max + y_range)


def generate_streamline_field(geometry: AirfoilGeometry,
                              solution: PanelSolution,
                              flow: FlowConditions,
                              params: Optional[StreamlineParameters] = None,
                              verbose: bool = False) -> StreamlineField:
    """
    Seed a vertical rake upstream of the airfoil and trace every seed.

    Seeds sit at x_min + 0.1*seed_distance, evenly spaced over the full
    height of the box (a single seed sits at mid-height). Seeds inside the
    body and streamlines shorter than params.min_points are dropped.
    """
    if params is None:
        params = StreamlineParameters()

    bounds = field_bounds(geometry, params.seed_distance, params.y_range)
    x_min, _, y_min, y_max = bounds

    seed_x = x_min + 0.1 * params.seed_distance
    if params.n_streamlines == 1:
        seed_y = np.array([0.5 * (y_min + y_max)])
    else:
        seed_y = np.linspace(y_min, y_max, params.n_streamlines)

    seeds = np.column_stack([np.full_like(seed_y, seed_x), seed_y])
    inside = geometry.contains(seeds)
    min_velocity = params.min_velocity_fraction * flow.velocity

    streamlines = []
    for seed, is_inside in zip(seeds, inside):
        if is_inside:
            continue
        line = trace_streamline(seed, geometry, solution, flow,
                                params.step_size, params.max_steps,
                                bounds, min_velocity)
        if len(line) >= params.min_points:
            streamlines.append(line)

    if verbose:
        n_complete = sum(1 for s in streamlines if s.complete)
        print(f"  Traced {len(streamlines)}/{len(seeds)} streamlines "
              f"({n_complete} reached the boundary)")

    return StreamlineField(streamlines=streamlines, bounds=bounds)


def _grid(bounds: Bounds, resolution: int) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
    x_min, x_max, y_min, y_max = bounds
    return np.linspace(x_min, x_max, resolution), np.linspace(y_min, y_max, resolution)


def velocity_magnitude_field(geometry: AirfoilGeometry,
                             solution: PanelSolution,
                             flow: FlowConditions,
                             bounds: Bounds,
                             resolution: int = 50):
    """
    Speed on a regular grid, zero inside the body.

    Returns:
        x: (resolution,) grid x-coordinates
        y: (resolution,) grid y-coordinates
        speed: (resolution, resolution), indexed [j, i] = (y[j], x[i])
    """
    x, y = _grid(bounds, resolution)
    XX, YY = np.meshgrid(x, y)
    pts = np.column_stack([XX.ravel(), YY.ravel()])

    inside = geometry.contains(pts)
    speed = np.zeros(pts.shape[0])
    if np.any(~inside):
        vel = field_velocity(pts[~inside], geometry, solution, flow)
        speed[~inside] = np.hypot(vel[:, 0], vel[:, 1])

    return x, y, speed.reshape(XX.shape)


def streamline_density(field: StreamlineField, resolution: int = 50) -> NDArray[np.float64]:
    """
    Streamline point count per grid cell, normalized to a maximum of 1.

    Returns:
        (resolution, resolution) array indexed [j, i]
    """
    x_min, x_max, y_min, y_max = field.bounds
    dx = (x_max - x_min) / (resolution - 1)
    dy = (y_max - y_min) / (resolution - 1)

    density = np.zeros((resolution, resolution))
    if not field.streamlines:
        return density

    pts = np.vstack([s.points for s in field.streamlines])
    i = np.floor((pts[:, 0] - x_min) / dx).astype(int)
    j = np.floor((pts[:, 1] - y_min) / dy).astype(int)
    keep = (i >= 0) & (i < resolution) & (j >= 0) & (j < resolution)
    np.add.at(density, (j[keep], i[keep]), 1.0)

    peak = density.max()
    if peak > 0:
        density /= peak
    return density


def find_stagnation_points(geometry: AirfoilGeometry,
                           solution: PanelSolution,
                           flow: FlowConditions,
                           bounds: Bounds,
                           tolerance: float = 1e-6,
                           grid_size: int = 20) -> NDArray[np.float64]:
    """
    Coarse grid search for near-zero speed outside the body.

    Only grid nodes are tested, so a stagnation point is reported only when
    it falls (within `tolerance`) on a node.

    Returns:
        (K, 2) grid points with speed below tolerance
    """
    x, y = _grid(bounds, grid_size + 1)
    XX, YY = np.meshgrid(x, y, indexing='ij')
    pts = np.column_stack([XX.ravel(), YY.ravel()])
    pts = pts[~geometry.contains(pts)]
    if pts.shape[0] == 0:
        return np.zeros((0, 2))

    vel = field_velocity(pts, geometry, solution, flow)
    speed = np.hypot(vel[:, 0], vel[:, 1])
    return pts[speed < tolerance]
