from dataclasses import dataclass
import math
import numpy as np

from ..errors import DegenerateInputError


def quat_wxyz_to_rotmat(q):
    q = np.asarray(q, dtype=float).reshape(4)
    norm = np.linalg.norm(q)
    if norm == 0:
        raise ValueError("zero-norm quaternion")
    w, x, y, z = q / norm
    R = np.array([
        [1 - 2 * (y * y + z * z), 2 * (x * y - w * z), 2 * (x * z + w * y)],
        [2 * (x * y + w * z), 1 - 2 * (x * x + z * z), 2 * (y * z - w * x)],
        [2 * (x * z - w * y), 2 * (y * z + w * x), 1 - 2 * (x * x + y * y)],
    ], dtype=float)
    return R


def euler_to_rotmat(roll: float, pitch: float, yaw: float) -> np.ndarray:
    """Rz(yaw) @ Ry(pitch) @ Rx(roll)."""
    cr, sr = math.cos(roll), math.sin(roll)
    cp, sp = math.cos(pitch), math.sin(pitch)
    cy, sy = math.cos(yaw), math.sin(yaw)
    return np.array([
        [cy * cp, cy * sp * sr - sy * cr, cy * sp * cr + sy * sr],
        [sy * cp, sy * sp * sr + cy * cr, sy * sp * cr - cy * sr],
        [-sp, cp * sr, cp * cr],
    ], dtype=float)


def rotation_from_flat(values) -> np.ndarray:
    """Row-major 3x3 rotation from 9 numbers (a 3x3 array is accepted as is)."""
    R = np.asarray(values, dtype=float)
    if R.size != 9:
        raise ValueError(f"rotation needs 9 values, got {R.size}")
    return R.reshape(3, 3).copy()


@dataclass(frozen=True)
class RigidPlacement:
    """Rotation + translation applied to a mesh at query time.

    The rotation is expected to be orthonormal; this is not checked.
    """
    rotation: np.ndarray
    translation: np.ndarray

    def __post_init__(self):
        R = rotation_from_flat(self.rotation)
        t = np.asarray(self.translation, dtype=float).reshape(-1).copy()
        if t.size != 3:
            raise ValueError(f"translation needs 3 values, got {t.size}")
        if not (np.all(np.isfinite(R)) and np.all(np.isfinite(t))):
            raise DegenerateInputError("placement contains non-finite values")
        R.flags.writeable = False
        t.flags.writeable = False
        object.__setattr__(self, "rotation", R)
        object.__setattr__(self, "translation", t)

    @classmethod
    def identity(cls) -> "RigidPlacement":
        return cls(np.eye(3), np.zeros(3))

    @classmethod
    def from_flat(cls, rotation, translation) -> "RigidPlacement":
        return cls(rotation_from_flat(rotation), translation)

    @classmethod
    def from_quaternion(cls, origin, quat_wxyz) -> "RigidPlacement":
        return cls(quat_wxyz_to_rotmat(quat_wxyz), origin)

    @classmethod
    def from_euler(cls, roll: float, pitch: float, yaw: float, translation=(0.0, 0.0, 0.0)) -> "RigidPlacement":
        return cls(euler_to_rotmat(roll, pitch, yaw), translation)

    def apply(self, points) -> np.ndarray:
        P = np.asarray(points, dtype=float)
        return P @ self.rotation.T + self.translation

    def apply_direction(self, vectors) -> np.ndarray:
        return np.asarray(vectors, dtype=float) @ self.rotation.T

    def is_identity(self) -> bool:
        return bool(np.array_equal(self.rotation, np.eye(3)) and not np.any(self.translation))
