from typing import List, Optional, Tuple
import numpy as np

from ..core.mesh import Mesh
from ..core.geometry import geometric_tolerance
from ..utils.transforms import RigidPlacement


def _clamp01(x: float) -> float:
    return min(1.0, max(0.0, x))


def closest_point_on_segment(p, a, b):
    ab = b - a
    denom = float(np.dot(ab, ab))
    if denom <= 0.0:
        return a.copy()
    t = _clamp01(float(np.dot(p - a, ab)) / denom)
    return a + t * ab


def closest_point_on_triangle(p, a, b, c):
    ab = b - a
    ac = c - a
    d00 = float(np.dot(ab, ab))
    d11 = float(np.dot(ac, ac))
    area2 = d00 * d11 - float(np.dot(ab, ac)) ** 2
    if area2 <= 1e-14 * d00 * d11:
        # zero-area triangle: nearest point lies on one of its edges
        cands = [closest_point_on_segment(p, a, b),
                 closest_point_on_segment(p, b, c),
                 closest_point_on_segment(p, c, a)]
        return min(cands, key=lambda q: float(np.dot(p - q, p - q)))
    ap = p - a
    d1 = float(np.dot(ab, ap))
    d2 = float(np.dot(ac, ap))
    if d1 <= 0 and d2 <= 0:
        return a.copy()
    bp = p - b
    d3 = float(np.dot(ab, bp))
    d4 = float(np.dot(ac, bp))
    if d3 >= 0 and d4 <= d3:
        return b.copy()
    vc = d1 * d4 - d3 * d2
    if vc <= 0 and d1 >= 0 and d3 <= 0:
        return a + (d1 / (d1 - d3)) * ab
    cp = p - c
    d5 = float(np.dot(ab, cp))
    d6 = float(np.dot(ac, cp))
    if d6 >= 0 and d5 <= d6:
        return c.copy()
    vb = d5 * d2 - d1 * d6
    if vb <= 0 and d2 >= 0 and d6 <= 0:
        return a + (d2 / (d2 - d6)) * ac
    va = d3 * d6 - d5 * d4
    if va <= 0 and (d4 - d3) >= 0 and (d5 - d6) >= 0:
        w = (d4 - d3) / ((d4 - d3) + (d5 - d6))
        return b + w * (c - b)
    denom = 1.0 / (va + vb + vc)
    v = vb * denom
    w = vc * denom
    return a + v * ab + w * ac


def closest_points_segments(p1, q1, p2, q2) -> Tuple[np.ndarray, np.ndarray]:
    d1 = q1 - p1
    d2 = q2 - p2
    r = p1 - p2
    a = float(np.dot(d1, d1))
    e = float(np.dot(d2, d2))
    f = float(np.dot(d2, r))
    if a <= 0.0 and e <= 0.0:
        return p1.copy(), p2.copy()
    if a <= 0.0:
        return p1.copy(), p2 + _clamp01(f / e) * d2
    c = float(np.dot(d1, r))
    if e <= 0.0:
        return p1 + _clamp01(-c / a) * d1, p2.copy()
    b = float(np.dot(d1, d2))
    denom = a * e - b * b
    s = _clamp01((b * f - c * e) / denom) if denom > 1e-14 * a * e else 0.0
    t = (b * s + f) / e
    if t < 0.0:
        t = 0.0
        s = _clamp01(-c / a)
    elif t > 1.0:
        t = 1.0
        s = _clamp01((b - c) / a)
    return p1 + s * d1, p2 + t * d2


def _feature_distance(ta: np.ndarray, tb: np.ndarray) -> Tuple[float, np.ndarray, np.ndarray]:
    """Minimum over the 9 edge pairs and the 6 vertex/face pairs."""
    best_d2 = np.inf
    best_a = ta[0]
    best_b = tb[0]
    for i in range(3):
        a0, a1 = ta[i], ta[(i + 1) % 3]
        for j in range(3):
            pa, pb = closest_points_segments(a0, a1, tb[j], tb[(j + 1) % 3])
            d2 = float(np.dot(pa - pb, pa - pb))
            if d2 < best_d2:
                best_d2, best_a, best_b = d2, pa, pb
    for k in range(3):
        q = closest_point_on_triangle(ta[k], tb[0], tb[1], tb[2])
        d2 = float(np.dot(ta[k] - q, ta[k] - q))
        if d2 < best_d2:
            best_d2, best_a, best_b = d2, ta[k].copy(), q
        q = closest_point_on_triangle(tb[k], ta[0], ta[1], ta[2])
        d2 = float(np.dot(tb[k] - q, tb[k] - q))
        if d2 < best_d2:
            best_d2, best_a, best_b = d2, q, tb[k].copy()
    return float(np.sqrt(best_d2)), best_a, best_b


def _unit_normal(tri: np.ndarray) -> Optional[np.ndarray]:
    e1 = tri[1] - tri[0]
    e2 = tri[2] - tri[0]
    n = np.cross(e1, e2)
    L = float(np.linalg.norm(n))
    if L <= 1e-10 * float(np.dot(e1, e1) + np.dot(e2, e2)):
        return None
    return n / L


def _plane_separates(tri: np.ndarray, other: np.ndarray, tol: float) -> bool:
    n = _unit_normal(tri)
    if n is None:
        return False
    d = (other - tri[0]) @ n
    return bool(np.all(d > tol) or np.all(d < -tol))


def _segment_crossing(p, q, tri: np.ndarray, tol: float) -> Optional[np.ndarray]:
    n = _unit_normal(tri)
    if n is None:
        return None
    dp = float(np.dot(n, p - tri[0]))
    dq = float(np.dot(n, q - tri[0]))
    if (dp > 0.0 and dq > 0.0) or (dp < 0.0 and dq < 0.0) or dp == dq:
        return None
    x = p + (dp / (dp - dq)) * (q - p)
    y = closest_point_on_triangle(x, tri[0], tri[1], tri[2])
    if float(np.linalg.norm(x - y)) <= tol:
        return x
    return None


def _edge_crossing(ta: np.ndarray, tb: np.ndarray, tol: float) -> Optional[np.ndarray]:
    for src, dst in ((ta, tb), (tb, ta)):
        for i in range(3):
            x = _segment_crossing(src[i], src[(i + 1) % 3], dst, tol)
            if x is not None:
                return x
    return None


def triangle_contact_point(ta, tb) -> Optional[np.ndarray]:
    """A point shared by both triangles, or None when they are disjoint.

    Touching configurations (shared vertex, shared edge, coplanar overlap) count.
    Zero-area triangles are handled as segments or points.
    """
    ta = np.asarray(ta, float)
    tb = np.asarray(tb, float)
    tol = geometric_tolerance(ta, tb)
    if _plane_separates(ta, tb, tol) or _plane_separates(tb, ta, tol):
        return None
    x = _edge_crossing(ta, tb, tol)
    if x is not None:
        return x
    d, pa, pb = _feature_distance(ta, tb)
    if d <= tol:
        return 0.5 * (pa + pb)
    return None


def triangles_intersect(ta, tb) -> bool:
    return triangle_contact_point(ta, tb) is not None


def triangle_distance(ta, tb) -> Tuple[float, np.ndarray, np.ndarray]:
    """Exact distance between two triangles with the realizing points (on ta, on tb).

    Intersecting triangles report 0 with both points at a common point.
    """
    ta = np.asarray(ta, float)
    tb = np.asarray(tb, float)
    tol = geometric_tolerance(ta, tb)
    d, pa, pb = _feature_distance(ta, tb)
    if d <= tol:
        x = 0.5 * (pa + pb)
        return 0.0, x, x.copy()
    if not (_plane_separates(ta, tb, tol) or _plane_separates(tb, ta, tol)):
        x = _edge_crossing(ta, tb, tol)
        if x is not None:
            return 0.0, x, x.copy()
    return d, pa, pb


def filter_intersecting_pairs(mesh_a: Mesh, placement_a: RigidPlacement,
                              mesh_b: Mesh, placement_b: RigidPlacement,
                              pairs: List[Tuple[int, int]]) -> List[Tuple[int, int]]:
    out = []
    for i, j in pairs:
        if triangles_intersect(mesh_a.world_triangle(i, placement_a), mesh_b.world_triangle(j, placement_b)):
            out.append((i, j))
    return out


class TriangleIntersectionDetector:
    def check_pairs(self, mesh_a: Mesh, placement_a: RigidPlacement,
                    mesh_b: Mesh, placement_b: RigidPlacement,
                    pairs: List[Tuple[int, int]]) -> List[Tuple[int, int]]:
        return filter_intersecting_pairs(mesh_a, placement_a, mesh_b, placement_b, pairs)
