from dataclasses import dataclass
import numpy as np

from ..utils.transforms import RigidPlacement


@dataclass
class OBB:
    """Oriented box: ``axes`` rows are orthonormal directions, ``half`` the extents along them."""
    center: np.ndarray
    axes: np.ndarray
    half: np.ndarray

    @classmethod
    def from_points(cls, points, margin: float = 0.0) -> "OBB":
        P = np.asarray(points, float).reshape(-1, 3)
        mean = P.mean(axis=0)
        C = P - mean[None, :]
        if P.shape[0] > 1:
            H = C.T @ C / float(P.shape[0])
            w, V = np.linalg.eigh(H)
            axes = V[:, np.argsort(w)[::-1]].T
        else:
            axes = np.eye(3)
        proj = C @ axes.T
        lo = proj.min(axis=0)
        hi = proj.max(axis=0)
        center = mean + (0.5 * (lo + hi)) @ axes
        half = 0.5 * (hi - lo)
        if margin > 0:
            half = half + margin * max(float(np.max(np.abs(P))), np.finfo(float).tiny)
        return cls(center, axes, half)

    @property
    def radius(self) -> float:
        return float(np.linalg.norm(self.half))

    def longest_axis(self) -> np.ndarray:
        return self.axes[int(np.argmax(self.half))]

    def transformed(self, placement: RigidPlacement) -> "OBB":
        return OBB(placement.apply(self.center), placement.apply_direction(self.axes), self.half)

    def corners(self) -> np.ndarray:
        signs = np.array([[sx, sy, sz] for sx in (-1, 1) for sy in (-1, 1) for sz in (-1, 1)], float)
        return self.center + (signs * self.half) @ self.axes

    def contains(self, points, tol: float = 0.0) -> bool:
        P = np.asarray(points, float).reshape(-1, 3)
        local = (P - self.center) @ self.axes.T
        return bool(np.all(np.abs(local) <= self.half + tol))


def _separating_axes(a: OBB, b: OBB) -> np.ndarray:
    cross = np.cross(a.axes[:, None, :], b.axes[None, :, :]).reshape(9, 3)
    norms = np.linalg.norm(cross, axis=1)
    # near-parallel edge pairs are already covered by the face axes
    keep = norms > 1e-9
    return np.vstack([a.axes, b.axes, cross[keep] / norms[keep, None]])


def separation(a: OBB, b: OBB) -> float:
    """Largest gap between the boxes' projections over the 15 separating-axis candidates.

    Positive means the boxes are disjoint and is a lower bound on their distance;
    zero or negative means they overlap or touch.
    """
    L = _separating_axes(a, b)
    ra = np.abs(L @ a.axes.T) @ a.half
    rb = np.abs(L @ b.axes.T) @ b.half
    gaps = np.abs(L @ (b.center - a.center)) - ra - rb
    return float(gaps.max())


def obb_overlap(a: OBB, b: OBB) -> bool:
    return separation(a, b) <= 0.0


def obb_distance_lower_bound(a: OBB, b: OBB) -> float:
    sphere_gap = float(np.linalg.norm(b.center - a.center)) - a.radius - b.radius
    return max(0.0, separation(a, b), sphere_gap)
