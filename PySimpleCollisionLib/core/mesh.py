from enum import Enum
import logging
import numpy as np
from typing import List, Optional

from .bvh import BVH, BVHBuilder, MedianSplitBVHBuilder
from .geometry import triangle_area
from ..errors import DegenerateInputError, InvalidHandleError, InvalidStateError
from ..utils.transforms import RigidPlacement
from ..utils.validation import ensure_point, ensure_triangles

logger = logging.getLogger(__name__)


class MeshState(Enum):
    BUILDING = "building"
    FINALIZED = "finalized"
    DISPOSED = "disposed"


class Mesh:
    """Triangle soup of one rigid solid plus the BVH compiled over it.

    ``begin`` / ``add_triangle`` / ``end`` fill the mesh; after ``end`` the
    triangles and BVH are read-only and may be shared by concurrent queries.
    """

    def __init__(self, bvh_builder: Optional[BVHBuilder] = None):
        self.bvh_builder = bvh_builder or MedianSplitBVHBuilder()
        self.state = MeshState.BUILDING
        self._pending: List[np.ndarray] = []
        self._triangles: Optional[np.ndarray] = None
        self._bvh: Optional[BVH] = None

    def _check_alive(self) -> None:
        if self.state is MeshState.DISPOSED:
            raise InvalidHandleError("mesh has been disposed")

    def _check_building(self, op: str) -> None:
        self._check_alive()
        if self.state is not MeshState.BUILDING:
            raise InvalidStateError(f"{op}() requires a mesh in building state, mesh is {self.state.value}")

    def require_finalized(self) -> None:
        self._check_alive()
        if self.state is not MeshState.FINALIZED:
            raise InvalidStateError("mesh must be finalized with end() before it can be queried")

    def begin(self) -> "Mesh":
        self._check_building("begin")
        self._pending = []
        return self

    def add_triangle(self, p0, p1, p2) -> None:
        self._check_building("add_triangle")
        tri = np.stack([ensure_point(p0), ensure_point(p1), ensure_point(p2)])
        self._pending.append(tri)

    def add_triangles(self, triangles) -> None:
        self._check_building("add_triangles")
        T = ensure_triangles(triangles)
        self._pending.extend(T[i].copy() for i in range(T.shape[0]))

    def end(self) -> "Mesh":
        self._check_building("end")
        if not self._pending:
            raise DegenerateInputError("cannot finalize a mesh without triangles")
        tris = np.stack(self._pending)
        tris.flags.writeable = False
        self._bvh = self.bvh_builder.build(tris)
        self._triangles = tris
        self._pending = []
        self.state = MeshState.FINALIZED
        zero_area = int(np.count_nonzero(triangle_area(tris[:, 0], tris[:, 1], tris[:, 2]) == 0.0))
        logger.debug("mesh finalized with %d triangles (%d zero-area)", tris.shape[0], zero_area)
        return self

    def dispose(self) -> None:
        self._check_alive()
        self._pending = []
        self._triangles = None
        self._bvh = None
        self.state = MeshState.DISPOSED

    @property
    def triangles(self) -> np.ndarray:
        self.require_finalized()
        return self._triangles

    @property
    def bvh(self) -> BVH:
        self.require_finalized()
        return self._bvh

    @property
    def num_triangles(self) -> int:
        self._check_alive()
        if self.state is MeshState.BUILDING:
            return len(self._pending)
        return int(self._triangles.shape[0])

    def __len__(self) -> int:
        return self.num_triangles

    def world_triangle(self, i: int, placement: RigidPlacement) -> np.ndarray:
        if placement.is_identity():
            return self.triangles[i].copy()
        return placement.apply(self.triangles[i])

    @classmethod
    def from_triangles(cls, triangles, bvh_builder: Optional[BVHBuilder] = None) -> "Mesh":
        mesh = cls(bvh_builder)
        mesh.begin()
        mesh.add_triangles(triangles)
        return mesh.end()

    @classmethod
    def from_indexed(cls, V, F, bvh_builder: Optional[BVHBuilder] = None) -> "Mesh":
        V = np.asarray(V, float)
        F = np.asarray(F, int)
        return cls.from_triangles(V[F].reshape(-1, 3, 3), bvh_builder)
