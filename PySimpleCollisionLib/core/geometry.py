import numpy as np


def triangle_area(a, b, c):
    """Area of one triangle, or of each row when given ``(n,3)`` vertex arrays."""
    return 0.5 * np.linalg.norm(np.cross(b - a, c - a), axis=-1)


def triangle_centroids(triangles: np.ndarray) -> np.ndarray:
    return np.asarray(triangles, float).mean(axis=1)


def geometric_tolerance(*points, rel: float = 1e-10) -> float:
    """``rel`` times the largest coordinate magnitude among ``points``."""
    scale = max(float(np.max(np.abs(p))) for p in points)
    return rel * max(scale, np.finfo(float).tiny)
