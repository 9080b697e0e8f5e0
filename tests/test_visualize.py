import os
import tempfile
import unittest

from PySimpleCollisionLib import RigidPlacement, distance, make_box, make_icosphere


@unittest.skipUnless(os.environ.get("PYSCL_VIZ") == "1", "set PYSCL_VIZ=1 to render")
class VisualizeTests(unittest.TestCase):
    def test_mesh_to_pyvista(self):
        from PySimpleCollisionLib.visualization.pyvista_backend import mesh_to_pyvista
        poly = mesh_to_pyvista(make_box(), RigidPlacement.from_euler(0, 0, 0, (1, 0, 0)))
        self.assertEqual(poly.n_cells, 12)
        self.assertAlmostEqual(poly.bounds[0], 0.5)

    def test_render_distance(self):
        from PySimpleCollisionLib.visualization.pyvista_backend import visualize_distance
        a = make_icosphere(R=0.5, subdivisions=2)
        b = make_box()
        pb = RigidPlacement.from_euler(0.2, 0.3, 0.4, (2.0, 0.5, 0.0))
        res = distance(a, None, b, pb)
        with tempfile.TemporaryDirectory() as tmp:
            shot = os.path.join(tmp, "distance.png")
            visualize_distance(a, None, b, pb, res, off_screen=True, screenshot=shot)
            self.assertTrue(os.path.isfile(shot))


if __name__ == "__main__":
    unittest.main()
