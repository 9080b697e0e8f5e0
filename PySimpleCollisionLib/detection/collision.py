from dataclasses import dataclass, field
import logging
from typing import Dict, Iterator, List, Optional, Tuple

from ..config import CollisionRequest
from ..core.mesh import Mesh
from ..io.perf import perf
from ..utils.validation import ensure_placement
from .broad_phase import PlacedBVH, WorldTriangles, traverse_overlapping_leaves
from .narrow_phase import triangles_intersect

logger = logging.getLogger(__name__)


@dataclass
class CollisionResult:
    pairs: List[Tuple[int, int]] = field(default_factory=list)
    stats: Dict[str, int] = field(default_factory=dict)

    @property
    def is_collision(self) -> bool:
        return len(self.pairs) > 0


def _leaf_triangle_pairs(a: PlacedBVH, b: PlacedBVH, stats: Dict[str, int]) -> Iterator[Tuple[int, int]]:
    for ia, ib in traverse_overlapping_leaves(a, b, stats):
        for ta in a.node(ia).tri_ids:
            for tb in b.node(ib).tri_ids:
                yield ta, tb


def collide_meshes(mesh_a: Mesh, placement_a, mesh_b: Mesh, placement_b,
                   request: Optional[CollisionRequest] = None) -> CollisionResult:
    """Colliding triangle pairs ``(index in a, index in b)``, at most ``request.max_contacts``."""
    req = request or CollisionRequest()
    req.validate()
    mesh_a.require_finalized()
    mesh_b.require_finalized()
    a = PlacedBVH(mesh_a.bvh, ensure_placement(placement_a))
    b = PlacedBVH(mesh_b.bvh, ensure_placement(placement_b))
    result = CollisionResult(stats={"pairs_tested": 0, "leaf_tests": 0})
    world_a = WorldTriangles(mesh_a, a.placement)
    world_b = WorldTriangles(mesh_b, b.placement)
    with perf.section("collide"):
        for ta, tb in _leaf_triangle_pairs(a, b, result.stats):
            result.stats["leaf_tests"] += 1
            if triangles_intersect(world_a[ta], world_b[tb]):
                result.pairs.append((ta, tb))
                if len(result.pairs) >= req.max_contacts:
                    break
    logger.debug("collide: %d contact(s), %d node pairs, %d triangle tests",
                 len(result.pairs), result.stats["pairs_tested"], result.stats["leaf_tests"])
    return result


def collide(mesh_a: Mesh, placement_a, mesh_b: Mesh, placement_b) -> bool:
    """True as soon as one triangle of ``a`` touches one triangle of ``b``."""
    return collide_meshes(mesh_a, placement_a, mesh_b, placement_b).is_collision
