import math
import os
import sys
import unittest

import numpy as np

REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from cryptoview.core.errors import DegenerateRangeError
from cryptoview.core.normalizer import (
    compress,
    expand,
    from_pixel_y,
    nearest_index,
    pixel_xs,
    to_pixel_y,
)
from cryptoview.core.viewport import Viewport


class PriceAxisMappingTests(unittest.TestCase):
    def test_extremes_land_on_canvas_edges(self):
        self.assertEqual(to_pixel_y(100.0, 100.0, 0.0, 500.0), 0.0)
        self.assertEqual(to_pixel_y(0.0, 100.0, 0.0, 500.0), 500.0)
        self.assertEqual(to_pixel_y(50.0, 100.0, 0.0, 500.0), 250.0)

    def test_prices_in_range_stay_on_canvas(self):
        prices = np.linspace(17.3, 91.8, 200)
        ys = compress(to_pixel_y(prices, 91.8, 17.3, 480.0), 240.0, 1.0)
        self.assertTrue(np.all(ys >= -1e-9))
        self.assertTrue(np.all(ys <= 480.0 + 1e-9))
        # Higher price, smaller Y.
        self.assertTrue(np.all(np.diff(ys) < 0))

    def test_equal_top_and_bottom_raise(self):
        with self.assertRaises(DegenerateRangeError) as ctx:
            to_pixel_y(5.0, 5.0, 5.0, 100.0)
        self.assertTrue(str(ctx.exception).startswith("CryptoView Error: "))
        with self.assertRaises(DegenerateRangeError):
            from_pixel_y(10.0, 5.0, 5.0, 100.0)

    def test_from_pixel_y_inverts_to_pixel_y(self):
        y = to_pixel_y(42.5, 80.0, 10.0, 300.0)
        self.assertAlmostEqual(from_pixel_y(y, 80.0, 10.0, 300.0), 42.5)

    def test_compress_squeezes_towards_mid(self):
        self.assertEqual(compress(0.0, 250.0, 2.0), 125.0)
        self.assertEqual(compress(500.0, 250.0, 2.0), 375.0)
        self.assertEqual(compress(250.0, 250.0, 7.0), 250.0)
        self.assertAlmostEqual(expand(compress(33.0, 250.0, 1.7), 250.0, 1.7), 33.0)


class TimeAxisMappingTests(unittest.TestCase):
    def test_pixel_x_is_strictly_increasing(self):
        xs = pixel_xs(50, Viewport(1000, left=-300.0, right=1700.0))
        self.assertEqual(xs[0], -300.0)
        self.assertTrue(np.all(np.diff(xs) > 0))

    def test_pixel_xs_empty_history(self):
        self.assertEqual(len(pixel_xs(0, Viewport(1000))), 0)


class NearestIndexTests(unittest.TestCase):
    def setUp(self):
        # 10 samples over 1000px: one every 100px.
        self.vp = Viewport(1000)

    def test_rounds_to_closest_sample(self):
        self.assertEqual(nearest_index(0.0, 0.0, self.vp, 10), 0)
        self.assertEqual(nearest_index(149.0, 0.0, self.vp, 10), 1)
        self.assertEqual(nearest_index(151.0, 0.0, self.vp, 10), 2)

    def test_half_rounds_up(self):
        self.assertEqual(nearest_index(150.0, 0.0, self.vp, 10), 2)

    def test_origin_is_subtracted(self):
        self.assertEqual(nearest_index(150.0, 50.0, self.vp, 10), 1)

    def test_far_outside_is_clamped(self):
        self.assertEqual(nearest_index(-1e9, 0.0, self.vp, 10), 0)
        self.assertEqual(nearest_index(1e9, 0.0, self.vp, 10), 9)
        self.assertEqual(nearest_index(math.inf, 0.0, self.vp, 10), 9)
        self.assertEqual(nearest_index(-math.inf, 0.0, self.vp, 10), 0)
        self.assertEqual(nearest_index(math.nan, 0.0, self.vp, 10), 0)

    def test_empty_history(self):
        self.assertEqual(nearest_index(500.0, 0.0, self.vp, 0), 0)


if __name__ == "__main__":
    unittest.main()
