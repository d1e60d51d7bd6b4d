"""
Point-in-polygon test for boundary loops.

The polygon is given as an (N, 2) vertex loop; the closing edge from the
last vertex back to the first is implied. Containment uses matplotlib's
crossing-number test, the same one used to mask grid points inside bodies.
"""

import numpy as np
from numpy.typing import NDArray
from matplotlib import path


def points_in_polygon(points: NDArray[np.float64],
                      polygon: NDArray[np.float64]) -> NDArray[np.bool_]:
    """
    Vectorized containment test.

    Points exactly on an edge or vertex may be classified either way.

    Args:
        points: (M, 2) query points (a single (2,) point is accepted)
        polygon: (N, 2) vertex loop

    Returns:
        (M,) boolean mask, True where the point is inside
    """
    pts = np.atleast_2d(np.asarray(points, dtype=np.float64))
    boundary = path.Path(np.asarray(polygon, dtype=np.float64))
    return np.asarray(boundary.contains_points(pts), dtype=bool)


def point_in_polygon(x: float, y: float, polygon: NDArray[np.float64]) -> bool:
    """Scalar wrapper around points_in_polygon."""
    return bool(points_in_polygon(np.array([[x, y]]), polygon)[0])
