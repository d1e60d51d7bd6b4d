"""
Geometric primitives: Point2D and Vector2D.

Immutable value objects for single-point work (control points, seeds,
frame transforms). Bulk geometry lives in NumPy arrays - see mesh.py.
"""

from __future__ import annotations
from dataclasses import dataclass
import numpy as np
from numpy.typing import NDArray


@dataclass(frozen=True)
class Point2D:
    """2D point."""
    x: float
    y: float

    def to_array(self) -> NDArray[np.float64]:
        """Convert to NumPy array (2,)."""
        return np.array([self.x, self.y], dtype=np.float64)

    @classmethod
    def from_array(cls, arr: NDArray[np.float64]) -> Point2D:
        """Create from NumPy array."""
        arr = np.asarray(arr, dtype=np.float64)
        if arr.shape != (2,):
            raise ValueError(f"Expected array of shape (2,), got {arr.shape}")
        return cls(x=float(arr[0]), y=float(arr[1]))

    def distance_to(self, other: Point2D) -> float:
        """Euclidean distance to another point."""
        return float(np.hypot(self.x - other.x, self.y - other.y))

    def __add__(self, vector: Vector2D) -> Point2D:
        """Point + Vector = Point."""
        return Point2D(self.x + vector.x, self.y + vector.y)

    def __sub__(self, other: Point2D) -> Vector2D:
        """Point - Point = Vector."""
        return Vector2D(self.x - other.x, self.y - other.y)

    def __repr__(self) -> str:
        return f"Point2D({self.x:.6f}, {self.y:.6f})"


@dataclass(frozen=True)
class Vector2D:
    """2D vector."""
    x: float
    y: float

    def to_array(self) -> NDArray[np.float64]:
        """Convert to NumPy array (2,)."""
        return np.array([self.x, self.y], dtype=np.float64)

    @classmethod
    def from_array(cls, arr: NDArray[np.float64]) -> Vector2D:
        """Create from NumPy array."""
        arr = np.asarray(arr, dtype=np.float64)
        if arr.shape != (2,):
            raise ValueError(f"Expected array of shape (2,), got {arr.shape}")
        return cls(x=float(arr[0]), y=float(arr[1]))

    def magnitude(self) -> float:
        """Vector magnitude (L2 norm)."""
        return float(np.hypot(self.x, self.y))

    def normalize(self) -> Vector2D:
        """
        Return unit vector in same direction.

        A (near-)zero vector normalizes to the zero vector; callers treat
        that as "no direction" rather than an error.
        """
        mag = self.magnitude()
        if mag < 1e-14:
            return Vector2D(0.0, 0.0)
        return Vector2D(self.x / mag, self.y / mag)

    def dot(self, other: Vector2D) -> float:
        """Dot product."""
        return self.x * other.x + self.y * other.y

    def cross(self, other: Vector2D) -> float:
        """z-component of the 3D cross product."""
        return self.x * other.y - self.y * other.x

    def rotate(self, angle_rad: float) -> Vector2D:
        """Rotate counter-clockwise by angle_rad."""
        c, s = np.cos(angle_rad), np.sin(angle_rad)
        return Vector2D(float(c * self.x - s * self.y), float(s * self.x + c * self.y))

    def __add__(self, other: Vector2D) -> Vector2D:
        """Vector addition."""
        return Vector2D(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector2D) -> Vector2D:
        """Vector subtraction."""
        return Vector2D(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> Vector2D:
        """Scalar multiplication."""
        return Vector2D(self.x * scalar, self.y * scalar)

    def __rmul__(self, scalar: float) -> Vector2D:
        """Scalar multiplication (reversed)."""
        return self.__mul__(scalar)

    def __neg__(self) -> Vector2D:
        """Negation."""
        return Vector2D(-self.x, -self.y)

    def __repr__(self) -> str:
        return f"Vector2D({self.x:.6f}, {self.y:.6f})"


def rotation_matrix(angle_rad: float) -> NDArray[np.float64]:
    """
    2D rotation matrix.

    Args:
        angle_rad: Rotation angle in radians (positive = CCW)

    Returns:
        2x2 rotation matrix
    """
    c = np.cos(angle_rad)
    s = np.sin(angle_rad)
    return np.array([
        [c, -s],
        [s,  c],
    ], dtype=np.float64)
