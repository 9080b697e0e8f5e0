import unittest
import numpy as np

from PySimpleCollisionLib import MeanSplitBVHBuilder, make_box, make_icosphere
from PySimpleCollisionLib.core.geometry import triangle_area
from PySimpleCollisionLib.core.shapes import box_triangles


class ShapeTests(unittest.TestCase):
    def test_box_surface_area(self):
        T = box_triangles(size=(1, 2, 3))
        area = sum(triangle_area(*t) for t in T)
        self.assertAlmostEqual(area, 2 * (1 * 2 + 2 * 3 + 1 * 3))
        per_face = triangle_area(T[:, 0], T[:, 1], T[:, 2])
        self.assertEqual(per_face.shape, (12,))
        self.assertAlmostEqual(float(per_face.sum()), area)

    def test_box_faces_point_outward(self):
        T = box_triangles(center=(1, 1, 1))
        n = np.cross(T[:, 1] - T[:, 0], T[:, 2] - T[:, 0])
        out = T.mean(axis=1) - np.array([1.0, 1.0, 1.0])
        self.assertTrue(np.all(np.einsum("ij,ij->i", n, out) > 0))

    def test_make_box(self):
        mesh = make_box(size=(2, 2, 2), center=(0, 0, 5), bvh_builder=MeanSplitBVHBuilder(leaf_size=2))
        self.assertEqual(len(mesh), 12)
        self.assertAlmostEqual(float(mesh.triangles[..., 2].min()), 4.0)

    def test_icosphere(self):
        mesh = make_icosphere(R=2.0, center=(1, 0, 0), subdivisions=1)
        self.assertEqual(len(mesh), 80)
        r = np.linalg.norm(mesh.triangles.reshape(-1, 3) - [1, 0, 0], axis=1)
        np.testing.assert_allclose(r, 2.0, rtol=1e-9)


if __name__ == "__main__":
    unittest.main()
