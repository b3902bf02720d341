import os
import sys
import unittest

REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from cryptoview.core.viewport import Viewport


class ViewportTests(unittest.TestCase):
    def test_starts_at_home(self):
        vp = Viewport(1000)
        self.assertEqual((vp.left, vp.right), (0.0, 1000.0))
        self.assertEqual(vp.floating_width, 1000.0)
        self.assertEqual(vp.right_bound, 800.0)
        self.assertTrue(vp.at_home)

    def test_pan_right_at_left_bound_is_noop(self):
        vp = Viewport(1000)
        self.assertFalse(vp.pan(50))
        self.assertEqual((vp.left, vp.right), (0.0, 1000.0))

    def test_pan_round_trip_restores_viewport(self):
        vp = Viewport(1000, left=-500.0, right=1500.0)
        self.assertTrue(vp.pan(-50))
        self.assertEqual((vp.left, vp.right), (-550.0, 1450.0))
        self.assertTrue(vp.pan(50))
        self.assertEqual((vp.left, vp.right), (-500.0, 1500.0))

    def test_pan_stops_at_bound_without_changing_span(self):
        vp = Viewport(1000)
        self.assertTrue(vp.pan(-1000))
        self.assertEqual((vp.left, vp.right), (-200.0, 800.0))
        self.assertEqual(vp.floating_width, 1000.0)
        self.assertFalse(vp.pan(-1000))
        self.assertEqual((vp.left, vp.right), (-200.0, 800.0))

    def test_repeated_pan_past_bound_does_not_drift(self):
        vp = Viewport(1000, left=-300.0, right=1200.0)
        for _ in range(20):
            vp.pan(-137.5)
        self.assertEqual(vp.right, vp.right_bound)
        self.assertEqual(vp.floating_width, 1500.0)
        for _ in range(20):
            vp.pan(91.0)
        self.assertEqual(vp.left, 0.0)
        self.assertEqual(vp.floating_width, 1500.0)

    def test_zoom_in_keeps_anchor_fixed(self):
        vp = Viewport(1000)
        self.assertTrue(vp.zoom(1, 500.0, 5.0))
        self.assertAlmostEqual(vp.left, -100.0)
        self.assertAlmostEqual(vp.right, 1100.0)
        self.assertAlmostEqual((500.0 - vp.left) / vp.floating_width, 0.5)

    def test_zoom_out_clamps_both_edges_and_is_idempotent(self):
        vp = Viewport(1000)
        for _ in range(10):
            vp.zoom(-1, 500.0, 5.0)
        self.assertEqual((vp.left, vp.right), (0.0, 800.0))
        self.assertFalse(vp.zoom(-1, 500.0, 5.0))
        self.assertEqual((vp.left, vp.right), (0.0, 800.0))

    def test_resize_rehomes_only_when_at_home(self):
        vp = Viewport(1000)
        vp.resize(600)
        self.assertEqual((vp.left, vp.right), (0.0, 600.0))

        vp = Viewport(1000, left=-400.0, right=1400.0)
        vp.resize(600)
        self.assertEqual((vp.left, vp.right), (-400.0, 1400.0))

    def test_copy_is_independent(self):
        vp = Viewport(1000)
        other = vp.copy()
        other.pan(-100)
        self.assertEqual((vp.left, vp.right), (0.0, 1000.0))


if __name__ == "__main__":
    unittest.main()
