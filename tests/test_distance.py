import math
import threading
import unittest
import numpy as np

from PySimpleCollisionLib import (
    DistanceOptions,
    Mesh,
    RigidPlacement,
    collide,
    distance,
    make_box,
    make_icosphere,
)

IDENTITY = RigidPlacement.identity()


def shifted(x, y=0.0, z=0.0):
    return RigidPlacement(np.eye(3), (x, y, z))


class BoxDistanceTests(unittest.TestCase):
    def setUp(self):
        self.a = make_box()
        self.b = make_box()

    def test_gap_along_x(self):
        res = distance(self.a, IDENTITY, self.b, shifted(3.0))
        self.assertTrue(res.success)
        self.assertAlmostEqual(res.distance, 2.0, places=9)
        self.assertAlmostEqual(float(res.nearest_point_a[0]), 0.5, places=9)
        self.assertAlmostEqual(float(res.nearest_point_b[0]), 2.5, places=9)
        self.assertAlmostEqual(float(np.linalg.norm(res.nearest_point_b - res.nearest_point_a)), res.distance, places=9)
        self.assertGreaterEqual(res.tri_a, 0)
        self.assertGreaterEqual(res.tri_b, 0)

    def test_rotated_box(self):
        res = distance(self.a, IDENTITY, self.b, RigidPlacement.from_euler(0, 0, math.pi / 4, (3, 0, 0)))
        self.assertAlmostEqual(res.distance, 2.5 - math.sqrt(0.5), places=9)
        self.assertAlmostEqual(float(res.nearest_point_b[1]), 0.0, places=9)

    def test_grows_with_separation(self):
        ds = [distance(self.a, IDENTITY, self.b, shifted(x)).distance for x in (1.5, 2.0, 3.0, 7.0)]
        np.testing.assert_allclose(ds, [0.5, 1.0, 2.0, 6.0], atol=1e-9)
        self.assertEqual(ds, sorted(ds))

    def test_overlap_reports_zero(self):
        res = distance(self.a, IDENTITY, self.b, shifted(0.5))
        self.assertEqual(res.distance, 0.0)
        self.assertFalse(res.success)
        np.testing.assert_allclose(res.nearest_point_a, res.nearest_point_b, atol=1e-9)

    def test_identical_copies(self):
        res = distance(self.a, IDENTITY, self.a, IDENTITY)
        self.assertEqual(res.distance, 0.0)
        self.assertFalse(res.success)

    def test_nested(self):
        outer = make_box(size=(3, 3, 3))
        res = distance(outer, IDENTITY, self.a, IDENTITY)
        self.assertTrue(res.success)
        self.assertAlmostEqual(res.distance, 1.0, places=9)

    def test_nearest_points_disabled(self):
        res = distance(self.a, IDENTITY, self.b, shifted(3.0), DistanceOptions(enable_nearest_points=False))
        self.assertAlmostEqual(res.distance, 2.0, places=9)
        np.testing.assert_array_equal(res.nearest_point_a, np.zeros(3))
        np.testing.assert_array_equal(res.nearest_point_b, np.zeros(3))

    def test_symmetric(self):
        pb = RigidPlacement.from_euler(0.3, 0.2, 0.1, (2.0, 1.0, -0.5))
        d1 = distance(self.a, IDENTITY, self.b, pb)
        d2 = distance(self.b, pb, self.a, IDENTITY)
        self.assertAlmostEqual(d1.distance, d2.distance, places=9)
        np.testing.assert_allclose(d1.nearest_point_a, d2.nearest_point_b, atol=1e-9)

    def test_common_placement_does_not_matter(self):
        rel = RigidPlacement.from_euler(0.3, 0.2, 0.1, (2.0, 1.0, -0.5))
        common = RigidPlacement.from_euler(-1.0, 0.5, 2.0, (100.0, -20.0, 7.0))
        pb = RigidPlacement(common.rotation @ rel.rotation, common.apply(rel.translation))
        d_local = distance(self.a, IDENTITY, self.b, rel).distance
        d_world = distance(self.a, common, self.b, pb).distance
        self.assertAlmostEqual(d_local, d_world, places=9)

    def test_identity_placement_is_neutral(self):
        T = self.b.triangles + [3.0, 0.0, 0.0]
        moved = Mesh.from_triangles(T)
        res = distance(self.a, IDENTITY, moved, IDENTITY)
        self.assertAlmostEqual(res.distance, distance(self.a, None, self.b, shifted(3.0)).distance, places=12)
        self.assertEqual(res.distance, distance(self.a, None, moved, None).distance)

    def test_invalid_options(self):
        with self.assertRaises(ValueError):
            distance(self.a, IDENTITY, self.b, shifted(3.0), DistanceOptions(relative_error=-0.1))
        with self.assertRaises(ValueError):
            distance(self.a, IDENTITY, self.b, shifted(3.0), DistanceOptions(absolute_error=float("nan")))


class SingleTriangleDistanceTests(unittest.TestCase):
    def test_thin_triangle_to_wall(self):
        a = Mesh.from_triangles([[[10.0, 0.0, 0.0], [0.0, 0.0, 1.0], [0.0, 0.0, -1.0]]])
        b = Mesh.from_triangles([[[5.0, 1.0, -10.0], [5.0, 1.0, 10.0], [5.0, 10.0, 0.0]]])
        res = distance(a, IDENTITY, b, IDENTITY)
        self.assertAlmostEqual(res.distance, 1.0, places=9)
        self.assertAlmostEqual(float(res.nearest_point_a[1]), 0.0, places=9)
        self.assertAlmostEqual(float(res.nearest_point_b[1]), 1.0, places=9)
        self.assertEqual(distance(a, RigidPlacement.from_euler(0, 0, math.pi / 6), b, IDENTITY).distance, 0.0)


class SphereDistanceTests(unittest.TestCase):
    def setUp(self):
        self.a = make_icosphere(R=0.5, subdivisions=2)
        self.b = make_icosphere(R=0.5, subdivisions=2)

    def test_close_to_analytic(self):
        res = distance(self.a, IDENTITY, self.b, shifted(3.0))
        # faces lie inside the sphere, so the tessellated gap is slightly larger
        self.assertGreaterEqual(res.distance, 2.0 - 1e-9)
        self.assertLess(res.distance, 2.05)

    def test_relative_error_bound(self):
        pb = RigidPlacement.from_euler(0.2, 0.4, 0.6, (2.0, 1.5, 0.5))
        exact = distance(self.a, IDENTITY, self.b, pb)
        rel = 0.5
        approx = distance(self.a, IDENTITY, self.b, pb, DistanceOptions(relative_error=rel))
        self.assertGreaterEqual(approx.distance, exact.distance - 1e-12)
        self.assertLessEqual(approx.distance * (1.0 - rel), exact.distance + 1e-12)

    def test_absolute_error_bound(self):
        pb = shifted(2.0, 0.3)
        exact = distance(self.a, IDENTITY, self.b, pb)
        approx = distance(self.a, IDENTITY, self.b, pb, DistanceOptions(absolute_error=0.25))
        self.assertGreaterEqual(approx.distance, exact.distance - 1e-12)
        self.assertLessEqual(approx.distance, exact.distance + 0.25 + 1e-12)

    def test_search_is_pruned(self):
        res = distance(self.a, IDENTITY, self.b, shifted(3.0))
        self.assertLess(res.stats["leaf_tests"], len(self.a) * len(self.b))


class SmallScaleTests(unittest.TestCase):
    def setUp(self):
        self.edge = 1e-9
        self.a = make_box(size=(self.edge,) * 3)
        self.b = make_box(size=(self.edge,) * 3)

    def test_gap_of_five_percent_is_kept(self):
        pb = shifted(self.edge + 5e-11)
        self.assertFalse(collide(self.a, IDENTITY, self.b, pb))
        res = distance(self.a, IDENTITY, self.b, pb)
        self.assertTrue(res.success)
        self.assertAlmostEqual(res.distance, 5e-11, delta=1e-18)
        self.assertAlmostEqual(float(res.nearest_point_a[0]), 0.5 * self.edge, delta=1e-18)

    def test_touching_faces(self):
        pb = shifted(self.edge)
        self.assertTrue(collide(self.a, IDENTITY, self.b, pb))
        self.assertEqual(distance(self.a, IDENTITY, self.b, pb).distance, 0.0)

    def test_scales_with_geometry(self):
        big_a = make_box()
        big_b = make_box()
        small = distance(self.a, IDENTITY, self.b, shifted(3 * self.edge)).distance
        big = distance(big_a, IDENTITY, big_b, shifted(3.0)).distance
        self.assertAlmostEqual(small / self.edge, big, places=9)


class ConcurrentQueryTests(unittest.TestCase):
    def test_shared_meshes_across_threads(self):
        a = make_icosphere(R=0.5, subdivisions=1)
        b = make_icosphere(R=0.5, subdivisions=1)
        poses = [RigidPlacement.from_euler(0.1 * k, 0.2, -0.3 * k, (0.4 + 0.15 * k, 0.1 * k, 0.0))
                 for k in range(8)]
        expected = [(collide(a, IDENTITY, b, pb), distance(a, IDENTITY, b, pb)) for pb in poses]
        results = [None] * len(poses)

        def work(k):
            for _ in range(3):
                hit = collide(a, IDENTITY, b, poses[k])
                res = distance(a, IDENTITY, b, poses[k])
                results[k] = (hit, res)

        threads = [threading.Thread(target=work, args=(k,)) for k in range(len(poses))]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        self.assertIn(True, [hit for hit, _ in expected])
        self.assertIn(False, [hit for hit, _ in expected])
        for (hit, res), (want_hit, want) in zip(results, expected):
            self.assertEqual(hit, want_hit)
            self.assertEqual(res.distance, want.distance)
            np.testing.assert_array_equal(res.nearest_point_a, want.nearest_point_a)
            np.testing.assert_array_equal(res.nearest_point_b, want.nearest_point_b)


if __name__ == "__main__":
    unittest.main()
