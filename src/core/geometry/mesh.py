"""
Panel discretization of a closed 2D boundary loop.

Panel j runs from point j to point j+1 (index wrapping). For a loop that
goes upper trailing edge -> leading edge -> lower trailing edge the normal
(sin beta, -cos beta) points into the fluid.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List
import numpy as np
from numpy.typing import NDArray

from ..errors import InvalidSpecError
from .primitives import Point2D, Vector2D, rotation_matrix


@dataclass(frozen=True)
class Panel:
    """
    Straight constant-strength panel (x1, y1) -> (x2, y2).

    The control point sits at the midpoint, pushed off the surface along the
    outward normal by `offset` so that it lies on the fluid side of the sheet.
    """
    x1: float
    y1: float
    x2: float
    y2: float
    offset: float = 0.0

    @property
    def length(self) -> float:
        return float(np.hypot(self.x2 - self.x1, self.y2 - self.y1))

    @property
    def angle(self) -> float:
        """Heading beta from +x axis [rad]."""
        return float(np.arctan2(self.y2 - self.y1, self.x2 - self.x1))

    @property
    def tangent(self) -> Vector2D:
        return Vector2D(float(np.cos(self.angle)), float(np.sin(self.angle)))

    @property
    def normal(self) -> Vector2D:
        return Vector2D(float(np.sin(self.angle)), float(-np.cos(self.angle)))

    @property
    def midpoint(self) -> Point2D:
        return Point2D(0.5 * (self.x1 + self.x2), 0.5 * (self.y1 + self.y2))

    @property
    def control_point(self) -> Point2D:
        return self.midpoint + self.normal * self.offset

    @property
    def start(self) -> Point2D:
        return Point2D(self.x1, self.y1)

    @property
    def end(self) -> Point2D:
        return Point2D(self.x2, self.y2)


@dataclass(frozen=True)
class PanelMesh:
    """
    Array view of all panels in one loop.

    Attributes:
        starts: Panel start points (n, 2)
        ends: Panel end points (n, 2)
        lengths: Panel lengths (n,)
        angles: Panel headings beta (n,)
        tangents: Unit tangents (n, 2)
        normals: Unit outward normals (n, 2)
        midpoints: Panel midpoints (n, 2)
        control_points: Offset collocation points (n, 2)
        reference_length: x-extent of the loop (scales epsilon and kernel tolerances)
        epsilon: Control point offset as a fraction of reference_length
    """
    starts: NDArray[np.float64]
    ends: NDArray[np.float64]
    lengths: NDArray[np.float64]
    angles: NDArray[np.float64]
    tangents: NDArray[np.float64]
    normals: NDArray[np.float64]
    midpoints: NDArray[np.float64]
    control_points: NDArray[np.float64]
    reference_length: float
    epsilon: float

    def __len__(self) -> int:
        return self.lengths.shape[0]

    @property
    def num_panels(self) -> int:
        return len(self)

    @property
    def perimeter(self) -> float:
        """Total panel length."""
        return float(np.sum(self.lengths))

    def panel(self, i: int) -> Panel:
        """Scalar Panel view of panel i."""
        (x1, y1), (x2, y2) = self.starts[i], self.ends[i]
        return Panel(float(x1), float(y1), float(x2), float(y2),
                     offset=self.epsilon * self.reference_length)

    def panels(self) -> List[Panel]:
        return [self.panel(i) for i in range(len(self))]

    def __repr__(self) -> str:
        return (
            f"PanelMesh(panels={len(self)}, "
            f"perimeter={self.perimeter:.6f}, "
            f"reference_length={self.reference_length:.6f})"
        )


def panelize(points: NDArray[np.float64], n_panels: int, epsilon: float = 1e-9) -> PanelMesh:
    """
    Join consecutive loop points into panels.

    Args:
        points: (N, 2) boundary loop
        n_panels: Requested panel count (clamped to N - 1)
        epsilon: Control point offset as a fraction of the loop's x-extent

    Returns:
        PanelMesh with min(n_panels, N - 1) panels
    """
    points = np.asarray(points, dtype=np.float64)
    if points.ndim != 2 or points.shape[1] != 2:
        raise InvalidSpecError(f"points must have shape (N, 2), got {points.shape}")
    if points.shape[0] < 3:
        raise InvalidSpecError(f"Need at least 3 points, got {points.shape[0]}")
    if n_panels < 1:
        raise InvalidSpecError(f"n_panels must be positive, got {n_panels}")

    n = min(n_panels, points.shape[0] - 1)
    idx = np.arange(n)
    starts = points[idx]
    ends = points[(idx + 1) % points.shape[0]]

    d = ends - starts
    lengths = np.hypot(d[:, 0], d[:, 1])
    if np.any(lengths < 1e-14):
        bad = int(np.argmin(lengths))
        raise InvalidSpecError(f"Panel {bad} has zero length")

    angles = np.arctan2(d[:, 1], d[:, 0])
    tangents = np.column_stack([np.cos(angles), np.sin(angles)])
    normals = np.column_stack([np.sin(angles), -np.cos(angles)])

    reference_length = float(np.ptp(points[:, 0]))
    if reference_length <= 0.0:
        raise InvalidSpecError("Loop has zero x-extent")

    midpoints = 0.5 * (starts + ends)
    control_points = midpoints + epsilon * reference_length * normals

    return PanelMesh(
        starts=starts,
        ends=ends,
        lengths=lengths,
        angles=angles,
        tangents=tangents,
        normals=normals,
        midpoints=midpoints,
        control_points=control_points,
        reference_length=reference_length,
        epsilon=epsilon,
    )


def global_to_local(point: Point2D, panel: Panel) -> Point2D:
    """
    Express a point in the panel frame.

    Origin at the panel start, X along the panel, Y to the left of the
    panel direction.
    """
    offset = (point - panel.start).to_array()
    return Point2D.from_array(rotation_matrix(-panel.angle) @ offset)


def local_to_global(vector: Vector2D, panel: Panel) -> Vector2D:
    """Rotate a panel-frame vector back to global axes."""
    return Vector2D.from_array(rotation_matrix(panel.angle) @ vector.to_array())
