import logging

from .errors import CollisionLibError, InvalidStateError, InvalidHandleError, DegenerateInputError
from .config import BVHConfig, DistanceOptions, CollisionRequest
from .utils.transforms import RigidPlacement
from .core.mesh import Mesh, MeshState
from .core.bvh import BVH, BVHBuilder, MedianSplitBVHBuilder, MeanSplitBVHBuilder
from .core.shapes import make_box, make_icosphere
from .detection.collision import collide, collide_meshes, CollisionResult
from .detection.distance import distance, DistanceResult
from .io.obj_loader import load_obj

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "CollisionLibError", "InvalidStateError", "InvalidHandleError", "DegenerateInputError",
    "BVHConfig", "DistanceOptions", "CollisionRequest",
    "RigidPlacement",
    "Mesh", "MeshState",
    "BVH", "BVHBuilder", "MedianSplitBVHBuilder", "MeanSplitBVHBuilder",
    "make_box", "make_icosphere",
    "collide", "collide_meshes", "CollisionResult",
    "distance", "DistanceResult",
    "load_obj",
]
