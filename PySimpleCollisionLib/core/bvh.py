from dataclasses import dataclass
import logging
import numpy as np
from typing import Iterator, List, Optional, Tuple

from .obb import OBB
from .geometry import triangle_centroids
from ..config import BVHConfig
from ..io.perf import perf

logger = logging.getLogger(__name__)


@dataclass
class BVHNode:
    obb: OBB
    left: int = -1
    right: int = -1
    tri_ids: Tuple[int, ...] = ()

    @property
    def is_leaf(self) -> bool:
        return self.left < 0


class BVH:
    def __init__(self, nodes: List[BVHNode], root: int):
        self.nodes = nodes
        self.root = root

    def __len__(self) -> int:
        return len(self.nodes)

    def leaves(self) -> Iterator[BVHNode]:
        return (n for n in self.nodes if n.is_leaf)

    def triangles_under(self, i: int) -> List[int]:
        out: List[int] = []
        stack = [i]
        while stack:
            n = self.nodes[stack.pop()]
            if n.is_leaf:
                out.extend(n.tri_ids)
            else:
                stack += [n.right, n.left]
        return out

    def depth(self) -> int:
        best = 0
        stack = [(self.root, 1)]
        while stack:
            i, d = stack.pop()
            n = self.nodes[i]
            best = max(best, d)
            if not n.is_leaf:
                stack += [(n.left, d + 1), (n.right, d + 1)]
        return best


def _split_count(proj: np.ndarray, method: str) -> int:
    n = proj.size
    if method == "mean":
        n_left = int(np.count_nonzero(proj <= proj.mean()))
        if 0 < n_left < n:
            return n_left
    return n // 2


def build_bvh(triangles: np.ndarray, config: Optional[BVHConfig] = None) -> Tuple[List[BVHNode], int]:
    cfg = config or BVHConfig()
    cfg.validate()
    tris = np.asarray(triangles, float)
    cents = triangle_centroids(tris)
    leaf_size = int(cfg.leaf_size)
    nodes: List[BVHNode] = []

    def make(ids: List[int]) -> int:
        obb = OBB.from_points(tris[ids].reshape(-1, 3), cfg.margin)
        if len(ids) <= leaf_size:
            nodes.append(BVHNode(obb, tri_ids=tuple(ids)))
            return len(nodes) - 1
        axis = obb.longest_axis()
        proj = cents[ids] @ axis
        order = sorted(range(len(ids)), key=lambda k: (proj[k], ids[k]))
        ss = [ids[k] for k in order]
        mid = _split_count(proj[order], cfg.split_method)
        L = make(ss[:mid])
        R = make(ss[mid:])
        nodes.append(BVHNode(obb, L, R))
        return len(nodes) - 1

    root = make(list(range(tris.shape[0])))
    return nodes, root


class BVHBuilder:
    def __init__(self, config: Optional[BVHConfig] = None):
        self.config = config or BVHConfig()
        self.config.validate()

    def build(self, triangles: np.ndarray) -> BVH:
        with perf.section("bvh.build"):
            nodes, root = build_bvh(triangles, self.config)
        bvh = BVH(nodes, root)
        logger.debug("built BVH over %d triangles: %d nodes, depth %d, split=%s",
                     len(triangles), len(nodes), bvh.depth(), self.config.split_method)
        return bvh


class MedianSplitBVHBuilder(BVHBuilder):
    def __init__(self, leaf_size: int = 1, margin: float = 1e-9):
        super().__init__(BVHConfig(leaf_size=leaf_size, split_method="median", margin=margin))


class MeanSplitBVHBuilder(BVHBuilder):
    def __init__(self, leaf_size: int = 1, margin: float = 1e-9):
        super().__init__(BVHConfig(leaf_size=leaf_size, split_method="mean", margin=margin))
