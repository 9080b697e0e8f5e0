from ..config import DistanceOptions
from ..io.obj_loader import load_obj
from .adapter import MeshPairAdapter


def run_obj_demo(pathA: str, pathB: str, placementA=None, placementB=None):
    meshA = load_obj(pathA)
    meshB = load_obj(pathB)
    adapter = MeshPairAdapter.from_meshes(meshA, meshB)
    return adapter.step(placementA, placementB, DistanceOptions(enable_nearest_points=True))
