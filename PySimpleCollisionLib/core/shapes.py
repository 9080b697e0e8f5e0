import numpy as np
import math
from typing import Optional

from .mesh import Mesh
from .bvh import BVHBuilder


_BOX_FACES = np.array([
    [0, 1, 2], [1, 3, 2],  # -x
    [4, 6, 5], [5, 6, 7],  # +x
    [0, 4, 1], [1, 4, 5],  # -y
    [2, 3, 6], [3, 7, 6],  # +y
    [0, 2, 4], [2, 6, 4],  # -z
    [1, 5, 3], [3, 5, 7],  # +z
], int)


def box_triangles(size=(1.0, 1.0, 1.0), center=(0, 0, 0)) -> np.ndarray:
    half = 0.5 * np.asarray(size, float).reshape(3)
    c = np.asarray(center, float).reshape(3)
    V = np.array([[sx, sy, sz] for sx in (-1, 1) for sy in (-1, 1) for sz in (-1, 1)], float)
    V = c + V * half
    return V[_BOX_FACES]


def make_box(size=(1.0, 1.0, 1.0), center=(0, 0, 0), bvh_builder: Optional[BVHBuilder] = None) -> Mesh:
    """Closed axis-aligned box as 12 triangles."""
    return Mesh.from_triangles(box_triangles(size, center), bvh_builder)


def make_icosphere(R=0.5, center=(0, 0, 0), subdivisions=3, bvh_builder: Optional[BVHBuilder] = None) -> Mesh:
    t = (1.0 + math.sqrt(5.0)) / 2.0
    verts = np.array([
        [-1, t, 0], [1, t, 0], [-1, -t, 0], [1, -t, 0],
        [0, -1, t], [0, 1, t], [0, -1, -t], [0, 1, -t],
        [t, 0, -1], [t, 0, 1], [-t, 0, -1], [-t, 0, 1]
    ], float)
    faces = np.array([
        [0, 11, 5], [0, 5, 1], [0, 1, 7], [0, 7, 10], [0, 10, 11],
        [1, 5, 9], [5, 11, 4], [11, 10, 2], [10, 7, 6], [7, 1, 8],
        [3, 9, 4], [3, 4, 2], [3, 2, 6], [3, 6, 8], [3, 8, 9],
        [4, 9, 5], [2, 4, 11], [6, 2, 10], [8, 6, 7], [9, 8, 1]
    ], int)

    def normalize_rows(V):
        L = np.linalg.norm(V, axis=1).reshape(-1, 1) + 1e-18
        return V / L

    V = normalize_rows(verts)
    F = faces.copy()

    def midpoint(i, j, cache, V):
        key = (min(i, j), max(i, j))
        if key in cache:
            return cache[key], V
        p = (V[i] + V[j]) * 0.5
        V = np.vstack([V, p])
        idx = V.shape[0] - 1
        cache[key] = idx
        return idx, V

    for _ in range(subdivisions):
        cache = {}
        newF = []
        for (i, j, k) in F:
            a, V = midpoint(i, j, cache, V)
            b, V = midpoint(j, k, cache, V)
            c, V = midpoint(k, i, cache, V)
            newF += [[i, a, c], [a, j, b], [c, b, k], [a, b, c]]
        V = normalize_rows(V)
        F = np.array(newF, int)
    V = R * V + np.asarray(center, float)
    return Mesh.from_indexed(V, F, bvh_builder)
