import os
import numpy as np
from typing import Optional

from ..core.bvh import BVHBuilder
from ..core.mesh import Mesh
from ..errors import DegenerateInputError


def read_obj(path: str):
    """Vertices ``(n,3)`` and triangle indices ``(m,3)``; polygons are fan-triangulated."""
    if not os.path.isfile(path):
        raise FileNotFoundError(path)
    vertices = []
    faces = []
    with open(path, "r", encoding="utf-8", errors="ignore") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if line.startswith("v "):
                parts = line.split()
                if len(parts) < 4:
                    continue
                x, y, z = map(float, parts[1:4])
                vertices.append((x, y, z))
            elif line.startswith("f "):
                parts = line.split()[1:]
                if len(parts) < 3:
                    continue

                def parse_index(tok):
                    i = int(tok.split("/")[0])
                    # negative indices count back from the latest vertex
                    return i - 1 if i > 0 else len(vertices) + i
                idx = [parse_index(t) for t in parts]
                for i in range(1, len(idx) - 1):
                    faces.append((idx[0], idx[i], idx[i + 1]))
    if not vertices or not faces:
        raise DegenerateInputError(f"OBJ '{path}' has no usable vertices or faces")
    V = np.asarray(vertices, dtype=float)
    F = np.asarray(faces, dtype=int)
    if F.min() < 0 or F.max() >= V.shape[0]:
        raise DegenerateInputError(f"OBJ '{path}' references a vertex that does not exist")
    return V, F


def load_obj(path: str, bvh_builder: Optional[BVHBuilder] = None) -> Mesh:
    V, F = read_obj(path)
    return Mesh.from_indexed(V, F, bvh_builder)
