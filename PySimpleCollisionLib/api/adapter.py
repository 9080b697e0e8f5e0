from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..config import CollisionRequest, DistanceOptions
from ..core.mesh import Mesh
from ..detection.broad_phase import find_candidates_with_placement
from ..detection.collision import collide_meshes
from ..detection.distance import DistanceResult, distance
from ..utils.validation import ensure_placement


@dataclass
class PairQueryResult:
    colliding: bool
    distance: DistanceResult
    candidates: List[Tuple[int, int]]
    contact_pairs: List[Tuple[int, int]]


@dataclass
class MeshPairAdapter:
    """Two finalized meshes queried together at a sequence of placements."""
    meshA: Mesh
    meshB: Mesh
    max_contacts: int = 1

    @staticmethod
    def from_meshes(meshA: Mesh, meshB: Mesh, max_contacts: int = 1) -> "MeshPairAdapter":
        meshA.require_finalized()
        meshB.require_finalized()
        return MeshPairAdapter(meshA, meshB, max_contacts)

    def step(self, placementA, placementB, options: Optional[DistanceOptions] = None) -> PairQueryResult:
        pA = ensure_placement(placementA)
        pB = ensure_placement(placementB)
        cand = find_candidates_with_placement(self.meshA, pA, self.meshB, pB)
        col = collide_meshes(self.meshA, pA, self.meshB, pB, CollisionRequest(max_contacts=self.max_contacts))
        dist = distance(self.meshA, pA, self.meshB, pB, options)
        return PairQueryResult(
            colliding=col.is_collision,
            distance=dist,
            candidates=cand,
            contact_pairs=col.pairs,
        )
