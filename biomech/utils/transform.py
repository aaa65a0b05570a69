"""3D rigid transformation utilities."""

import numpy as np
from dataclasses import dataclass, field
from scipy.linalg import polar


def axis_angle_matrix(axis: np.ndarray, angle: float) -> np.ndarray:
    """Rodrigues rotation matrix about a (not necessarily unit) axis."""
    axis = np.asarray(axis, dtype=np.float64)
    norm = np.linalg.norm(axis)
    if norm == 0.0:
        return np.eye(3)
    k = axis / norm
    c, s = np.cos(angle), np.sin(angle)
    K = np.array([
        [0.0, -k[2], k[1]],
        [k[2], 0.0, -k[0]],
        [-k[1], k[0], 0.0],
    ])
    return np.eye(3) + s * K + (1.0 - c) * (K @ K)


def z_rotation(theta: float) -> np.ndarray:
    """Rotation about z by theta [rad]."""
    c, s = np.cos(theta), np.sin(theta)
    return np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]])


def rotation_taking(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Minimal rotation mapping unit direction a onto unit direction b."""
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    a = a / np.linalg.norm(a)
    b = b / np.linalg.norm(b)
    axis = np.cross(a, b)
    s = np.linalg.norm(axis)
    c = float(np.dot(a, b))
    if s < 1e-15:
        if c > 0.0:
            return np.eye(3)
        # antiparallel: half turn about any axis perpendicular to a
        perp = np.cross(a, [1.0, 0.0, 0.0])
        if np.linalg.norm(perp) < 1e-8:
            perp = np.cross(a, [0.0, 1.0, 0.0])
        return axis_angle_matrix(perp, np.pi)
    return axis_angle_matrix(axis, np.arctan2(s, c))


def orthonormalize(M: np.ndarray) -> np.ndarray:
    """Nearest proper rotation (det = +1) to a 3x3 basis."""
    M = np.asarray(M, dtype=np.float64)
    U, _ = polar(M)
    if np.linalg.det(U) < 0:
        # reflect through the weakest singular direction
        u, _, vt = np.linalg.svd(M)
        d = np.diag([1.0, 1.0, -1.0])
        U = u @ d @ vt
    return U


@dataclass
class RigidTransform:
    """3D rigid body transformation.

    Maps points from a source frame to a target frame: x' = R x + p.
    """
    R: np.ndarray = field(default_factory=lambda: np.eye(3))
    p: np.ndarray = field(default_factory=lambda: np.zeros(3))

    def __post_init__(self):
        self.R = np.array(self.R, dtype=np.float64).reshape(3, 3)
        self.p = np.array(self.p, dtype=np.float64).reshape(3)

    @classmethod
    def identity(cls) -> "RigidTransform":
        return cls()

    @classmethod
    def from_axis_angle(cls, axis, angle: float, p=None) -> "RigidTransform":
        """Create transform from a rotation axis, angle [rad] and translation."""
        return cls(axis_angle_matrix(axis, angle), np.zeros(3) if p is None else p)

    @staticmethod
    def from_euler(rx: float, ry: float, rz: float, degrees: bool = True) -> "RigidTransform":
        """Create transform from Euler angles (XYZ order)."""
        if degrees:
            rx, ry, rz = np.radians([rx, ry, rz])

        cx, sx = np.cos(rx), np.sin(rx)
        cy, sy = np.cos(ry), np.sin(ry)
        cz, sz = np.cos(rz), np.sin(rz)

        Rx = np.array([[1, 0, 0], [0, cx, -sx], [0, sx, cx]])
        Ry = np.array([[cy, 0, sy], [0, 1, 0], [-sy, 0, cy]])
        Rz = np.array([[cz, -sz, 0], [sz, cz, 0], [0, 0, 1]])

        return RigidTransform(R=Rz @ Ry @ Rx)

    def get_matrix(self) -> np.ndarray:
        """Get 4x4 homogeneous matrix."""
        mat = np.eye(4)
        mat[:3, :3] = self.R
        mat[:3, 3] = self.p
        return mat

    def copy(self) -> "RigidTransform":
        return RigidTransform(self.R.copy(), self.p.copy())

    def compose(self, other: "RigidTransform") -> "RigidTransform":
        """Return self * other (apply other first)."""
        return RigidTransform(self.R @ other.R, self.R @ other.p + self.p)

    def __matmul__(self, other: "RigidTransform") -> "RigidTransform":
        return self.compose(other)

    def inverse(self) -> "RigidTransform":
        Rt = self.R.T
        return RigidTransform(Rt, -Rt @ self.p)

    def apply(self, points: np.ndarray) -> np.ndarray:
        """Apply transformation to points.

        Args:
            points: (3,) point or (N, 3) array of points

        Returns:
            Transformed points with the same shape
        """
        points = np.asarray(points, dtype=np.float64)
        return points @ self.R.T + self.p

    def apply_direction(self, directions: np.ndarray) -> np.ndarray:
        """Apply rotation to direction vectors (no translation)."""
        return np.asarray(directions, dtype=np.float64) @ self.R.T

    def translate(self, delta: np.ndarray) -> "RigidTransform":
        """Return new transform with added translation."""
        new = self.copy()
        new.p += np.asarray(delta, dtype=np.float64)
        return new

    def rotate_local(self, axis: np.ndarray, angle: float, degrees: bool = True) -> "RigidTransform":
        """Rotate around an axis expressed in the local frame."""
        if degrees:
            angle = np.radians(angle)
        new = self.copy()
        new.R = self.R @ axis_angle_matrix(axis, angle)
        return new

    def allclose(self, other: "RigidTransform", atol: float = 1e-12) -> bool:
        return bool(
            np.allclose(self.R, other.R, rtol=0.0, atol=atol)
            and np.allclose(self.p, other.p, rtol=0.0, atol=atol)
        )
