"""Integer-handle interface for callers that cannot hold Python objects.

Meshes live in a process-wide registry: ``create_mesh`` inserts, ``destroy_mesh``
disposes and removes, and any later use of the handle raises
``InvalidHandleError``. Rotations are 9 numbers in row-major order on every
entry point.
"""
from dataclasses import dataclass
import itertools
import logging
import threading
import numpy as np
from typing import Dict

from ..config import DistanceOptions
from ..core.mesh import Mesh
from ..detection import collision as _collision
from ..detection import distance as _distance
from ..errors import InvalidHandleError
from ..utils.transforms import RigidPlacement

logger = logging.getLogger(__name__)


@dataclass
class DistanceOutcome:
    success: bool
    distance: float
    nearest_point_a: np.ndarray
    nearest_point_b: np.ndarray


def _key(handle):
    if isinstance(handle, bool) or not isinstance(handle, (int, np.integer)):
        return None
    return int(handle)


class MeshRegistry:
    def __init__(self):
        self._meshes: Dict[int, Mesh] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._meshes)

    def insert(self, mesh: Mesh) -> int:
        with self._lock:
            handle = next(self._ids)
            self._meshes[handle] = mesh
        return handle

    def get(self, handle) -> Mesh:
        with self._lock:
            mesh = self._meshes.get(_key(handle))
        if mesh is None:
            raise InvalidHandleError(f"unknown or destroyed mesh handle {handle!r}")
        return mesh

    def remove(self, handle) -> Mesh:
        with self._lock:
            mesh = self._meshes.pop(_key(handle), None)
        if mesh is None:
            raise InvalidHandleError(f"unknown or destroyed mesh handle {handle!r}")
        return mesh


registry = MeshRegistry()


def create_mesh() -> int:
    handle = registry.insert(Mesh())
    logger.debug("created mesh handle %d", handle)
    return handle


def destroy_mesh(handle: int) -> None:
    registry.remove(handle).dispose()
    logger.debug("destroyed mesh handle %d", handle)


def begin(handle: int) -> None:
    registry.get(handle).begin()


def add_triangle(handle: int, p0, p1, p2) -> None:
    registry.get(handle).add_triangle(p0, p1, p2)


def end(handle: int) -> None:
    registry.get(handle).end()


def collide(handle_a: int, rotation_a, translation_a,
            handle_b: int, rotation_b, translation_b) -> bool:
    mesh_a = registry.get(handle_a)
    mesh_b = registry.get(handle_b)
    return _collision.collide(mesh_a, RigidPlacement.from_flat(rotation_a, translation_a),
                              mesh_b, RigidPlacement.from_flat(rotation_b, translation_b))


def distance(handle_a: int, rotation_a, translation_a,
             handle_b: int, rotation_b, translation_b,
             want_nearest_points: bool = False,
             relative_error: float = 0.0,
             absolute_error: float = 0.0) -> DistanceOutcome:
    mesh_a = registry.get(handle_a)
    mesh_b = registry.get(handle_b)
    opts = DistanceOptions(relative_error=relative_error, absolute_error=absolute_error,
                           enable_nearest_points=bool(want_nearest_points))
    res = _distance.distance(mesh_a, RigidPlacement.from_flat(rotation_a, translation_a),
                             mesh_b, RigidPlacement.from_flat(rotation_b, translation_b), opts)
    return DistanceOutcome(success=res.success, distance=res.distance,
                           nearest_point_a=res.nearest_point_a, nearest_point_b=res.nearest_point_b)
