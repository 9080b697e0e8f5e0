from typing import Dict, Iterator, List, Optional, Tuple
import numpy as np

from ..core.bvh import BVH, BVHNode
from ..core.mesh import Mesh
from ..core.obb import OBB, obb_overlap
from ..utils.transforms import RigidPlacement
from ..utils.validation import ensure_placement


class PlacedBVH:
    """A BVH seen through a placement. World boxes are cached here, per query, never on the BVH."""

    def __init__(self, bvh: BVH, placement: RigidPlacement):
        self.bvh = bvh
        self.placement = placement
        self._world: Dict[int, OBB] = {}

    def node(self, i: int) -> BVHNode:
        return self.bvh.nodes[i]

    def world_obb(self, i: int) -> OBB:
        box = self._world.get(i)
        if box is None:
            box = self.bvh.nodes[i].obb.transformed(self.placement)
            self._world[i] = box
        return box


class WorldTriangles:
    """Lazily placed copies of the triangles a query actually visits."""

    def __init__(self, mesh: Mesh, placement: RigidPlacement):
        self.mesh = mesh
        self.placement = placement
        self._cache: Dict[int, np.ndarray] = {}

    def __getitem__(self, i: int) -> np.ndarray:
        tri = self._cache.get(i)
        if tri is None:
            tri = self.mesh.world_triangle(i, self.placement)
            self._cache[i] = tri
        return tri


def split_first(a: PlacedBVH, ia: int, b: PlacedBVH, ib: int) -> bool:
    """True when the pair should be expanded on the ``a`` side."""
    na, nb = a.node(ia), b.node(ib)
    if nb.is_leaf:
        return True
    if na.is_leaf:
        return False
    return na.obb.radius > nb.obb.radius


def child_pairs(a: PlacedBVH, ia: int, b: PlacedBVH, ib: int) -> List[Tuple[int, int]]:
    if split_first(a, ia, b, ib):
        na = a.node(ia)
        return [(na.left, ib), (na.right, ib)]
    nb = b.node(ib)
    return [(ia, nb.left), (ia, nb.right)]


def traverse_overlapping_leaves(a: PlacedBVH, b: PlacedBVH, stats: Optional[Dict[str, int]] = None) -> Iterator[Tuple[int, int]]:
    """Lazily yield leaf node pairs whose world boxes overlap.

    Consumers may stop iterating at any time; nothing is computed ahead.
    """
    stack = [(a.bvh.root, b.bvh.root)]
    while stack:
        ia, ib = stack.pop()
        if stats is not None:
            stats["pairs_tested"] = stats.get("pairs_tested", 0) + 1
        if not obb_overlap(a.world_obb(ia), b.world_obb(ib)):
            continue
        if a.node(ia).is_leaf and b.node(ib).is_leaf:
            yield ia, ib
            continue
        pairs = child_pairs(a, ia, b, ib)
        # reversed so the left child pair is popped first
        stack += pairs[::-1]


def find_candidates_with_placement(mesh_a: Mesh, placement_a, mesh_b: Mesh, placement_b) -> List[Tuple[int, int]]:
    a = PlacedBVH(mesh_a.bvh, ensure_placement(placement_a))
    b = PlacedBVH(mesh_b.bvh, ensure_placement(placement_b))
    out = []
    for ia, ib in traverse_overlapping_leaves(a, b):
        for ta in a.node(ia).tri_ids:
            for tb in b.node(ib).tri_ids:
                out.append((ta, tb))
    return out


class BroadPhaseDetector:
    def find_candidates(self, mesh_a: Mesh, placement_a, mesh_b: Mesh, placement_b) -> List[Tuple[int, int]]:
        mesh_a.require_finalized()
        mesh_b.require_finalized()
        return find_candidates_with_placement(mesh_a, placement_a, mesh_b, placement_b)
