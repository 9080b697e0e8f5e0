from dataclasses import dataclass, field
import heapq
import itertools
import logging
import numpy as np
from typing import Dict, Optional

from ..config import DistanceOptions
from ..core.mesh import Mesh
from ..core.obb import obb_distance_lower_bound
from ..io.perf import perf
from ..utils.validation import ensure_placement
from .broad_phase import PlacedBVH, WorldTriangles, child_pairs
from .narrow_phase import triangle_distance

logger = logging.getLogger(__name__)


@dataclass
class DistanceResult:
    distance: float
    success: bool
    nearest_point_a: np.ndarray
    nearest_point_b: np.ndarray
    tri_a: int = -1
    tri_b: int = -1
    stats: Dict[str, int] = field(default_factory=dict)


def distance(mesh_a: Mesh, placement_a, mesh_b: Mesh, placement_b,
             options: Optional[DistanceOptions] = None) -> DistanceResult:
    """Minimum distance between the two placed surfaces.

    Node pairs are opened in order of their box lower bound. The search stops
    once no open pair can improve the best distance by more than
    ``max(relative_error * best, absolute_error)``, so zero tolerances give
    the exact minimum.

    ``success`` is ``distance > 0``. Meshes whose surfaces intersect report 0
    and a common point of both surfaces as the nearest points. Triangles closer
    than ``1e-10`` times their largest coordinate magnitude count as touching,
    so such meshes also report exactly 0 and ``success`` False, whatever the
    error bounds. When nearest points are not requested they are zero vectors.
    """
    opts = options or DistanceOptions()
    opts.validate()
    mesh_a.require_finalized()
    mesh_b.require_finalized()
    a = PlacedBVH(mesh_a.bvh, ensure_placement(placement_a))
    b = PlacedBVH(mesh_b.bvh, ensure_placement(placement_b))
    world_a = WorldTriangles(mesh_a, a.placement)
    world_b = WorldTriangles(mesh_b, b.placement)
    stats = {"pairs_tested": 0, "leaf_tests": 0}
    best = np.inf
    best_pa = np.zeros(3)
    best_pb = np.zeros(3)
    best_tris = (-1, -1)
    tie = itertools.count()

    def lower_bound(ia: int, ib: int) -> float:
        stats["pairs_tested"] += 1
        return obb_distance_lower_bound(a.world_obb(ia), b.world_obb(ib))

    with perf.section("distance"):
        heap = [(lower_bound(a.bvh.root, b.bvh.root), next(tie), a.bvh.root, b.bvh.root)]
        while heap:
            lb, _, ia, ib = heapq.heappop(heap)
            if lb >= best - opts.tolerance(best):
                break
            na, nb = a.node(ia), b.node(ib)
            if na.is_leaf and nb.is_leaf:
                for ta in na.tri_ids:
                    for tb in nb.tri_ids:
                        stats["leaf_tests"] += 1
                        d, pa, pb = triangle_distance(world_a[ta], world_b[tb])
                        if d < best:
                            best, best_pa, best_pb, best_tris = d, pa, pb, (ta, tb)
                continue
            for ca, cb in child_pairs(a, ia, b, ib):
                clb = lower_bound(ca, cb)
                if clb < best - opts.tolerance(best):
                    heapq.heappush(heap, (clb, next(tie), ca, cb))
    stats["open_pairs_left"] = len(heap)
    logger.debug("distance: %.9g between triangles %s, %d node pairs, %d triangle tests",
                 best, best_tris, stats["pairs_tested"], stats["leaf_tests"])
    if not opts.enable_nearest_points:
        best_pa = np.zeros(3)
        best_pb = np.zeros(3)
    return DistanceResult(
        distance=float(best),
        success=bool(best > 0.0),
        nearest_point_a=np.asarray(best_pa, float),
        nearest_point_b=np.asarray(best_pb, float),
        tri_a=best_tris[0],
        tri_b=best_tris[1],
        stats=stats,
    )
