import numpy as np

from ..errors import DegenerateInputError
from .transforms import RigidPlacement


def ensure_point(p) -> np.ndarray:
    v = np.asarray(p, dtype=float).reshape(-1)
    if v.size != 3:
        raise DegenerateInputError(f"point needs 3 coordinates, got {v.size}")
    if not np.all(np.isfinite(v)):
        raise DegenerateInputError(f"non-finite coordinate in {v.tolist()}")
    return v


def ensure_triangles(triangles) -> np.ndarray:
    T = np.asarray(triangles, dtype=float)
    if T.size == 0:
        return T.reshape(0, 3, 3)
    if T.ndim != 3 or T.shape[1:] != (3, 3):
        raise DegenerateInputError(f"triangles must be (n,3,3), got {T.shape}")
    if not np.all(np.isfinite(T)):
        raise DegenerateInputError("triangles contain non-finite coordinates")
    return T


def ensure_placement(placement) -> RigidPlacement:
    if placement is None:
        return RigidPlacement.identity()
    if isinstance(placement, RigidPlacement):
        return placement
    if isinstance(placement, (tuple, list)) and len(placement) == 2:
        rotation, translation = placement
        return RigidPlacement.from_flat(rotation, translation)
    raise TypeError("placement must be a RigidPlacement or a (rotation, translation) pair")
