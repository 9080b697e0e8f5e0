import numpy as np
import pyvista as pv

from ..utils.validation import ensure_placement


def mesh_to_pyvista(mesh, placement=None):
    tris = ensure_placement(placement).apply(mesh.triangles).reshape(-1, 3)
    n_faces = tris.shape[0] // 3
    F = np.arange(3 * n_faces, dtype=np.int64).reshape(-1, 3)
    faces = np.hstack([np.full((n_faces, 1), 3, dtype=np.int64), F]).ravel()
    return pv.PolyData(tris, faces)


def visualize_distance(meshA, placementA, meshB, placementB, result, off_screen=False, screenshot=None):
    pl = pv.Plotter(off_screen=off_screen)
    pl.set_background("white")
    polyA = mesh_to_pyvista(meshA, placementA)
    polyB = mesh_to_pyvista(meshB, placementB)
    pl.add_mesh(polyA, color="lightgray", opacity=0.4, show_edges=True, label="Mesh A")
    pl.add_mesh(polyB, color="steelblue", opacity=0.6, show_edges=True, label="Mesh B")
    if result is not None and np.isfinite(result.distance):
        pts = np.vstack([result.nearest_point_a, result.nearest_point_b])
        pl.add_points(pts[:1], color="red", point_size=12, render_points_as_spheres=True, label="Nearest on A")
        pl.add_points(pts[1:], color="yellow", point_size=12, render_points_as_spheres=True, label="Nearest on B")
        if result.distance > 0:
            pl.add_mesh(pv.Line(pts[0], pts[1]), color="red", line_width=3,
                        label=f"distance {result.distance:.4g}")
    pl.add_axes(line_width=2)
    pl.add_legend(bcolor="white")
    if screenshot is not None:
        pl.show(screenshot=screenshot)
    else:
        pl.show()
    return pl
