import math
import numpy as np
import unittest
import sys
import os

# Add the repo root and the app folder to path; the analysis modules are
# imported from the app folder so the py4web app itself is not loaded
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'apps', 'contrast_site'))

from modules.contrast_analyzer.schemas import RGBColor
from modules.contrast_analyzer.wcag import (
    linearize, relative_luminance, contrast_ratio, severity_score, is_compliant
)
from modules.contrast_analyzer.clustering import cluster
from modules.contrast_analyzer.sampler import sample
from modules.contrast_analyzer.bitmap import Bitmap
from tests.utils import uniform_bitmap

WHITE = RGBColor(255, 255, 255)
BLACK = RGBColor(0, 0, 0)

class TestContrastEvaluator(unittest.TestCase):

    def test_analysis_modules_load_without_the_app(self):
        self.assertNotIn('apps.contrast_site.controllers', sys.modules)
        self.assertNotIn('apps.contrast_site.common', sys.modules)

    def test_linearize(self):
        self.assertEqual(linearize(0), 0.0)
        self.assertAlmostEqual(linearize(255), 1.0)
        # 10/255 is still on the linear segment, 11/255 is past the 0.03928 knee
        self.assertAlmostEqual(linearize(10), 10 / 255 / 12.92)
        self.assertAlmostEqual(linearize(11), ((11 / 255 + 0.055) / 1.055) ** 2.4)

    def test_relative_luminance(self):
        self.assertAlmostEqual(relative_luminance(255, 255, 255), 1.0)
        self.assertEqual(relative_luminance(0, 0, 0), 0.0)
        self.assertAlmostEqual(relative_luminance(0, 255, 0), 0.7152)

    def test_black_white(self):
        self.assertAlmostEqual(contrast_ratio(WHITE, BLACK), 21.0, places=6)

    def test_identical_colors(self):
        for c in [BLACK, WHITE, RGBColor(128, 64, 32)]:
            self.assertEqual(contrast_ratio(c, c), 21)

    def test_symmetric(self):
        pairs = [
            (RGBColor(128, 128, 128), RGBColor(100, 100, 100)),
            (RGBColor(255, 0, 0), RGBColor(0, 0, 255)),
            (RGBColor(12, 200, 99), WHITE),
        ]
        for a, b in pairs:
            self.assertEqual(contrast_ratio(a, b), contrast_ratio(b, a))

    def test_mid_gray_pair(self):
        ratio = contrast_ratio(RGBColor(128, 128, 128), RGBColor(100, 100, 100))
        self.assertGreater(ratio, 1.45)
        self.assertLess(ratio, 1.55)

    def test_severity_endpoints(self):
        self.assertEqual(severity_score(3.0), 0)
        self.assertEqual(severity_score(1.0), 1.0)
        self.assertEqual(severity_score(0.5), 1.0)
        self.assertEqual(severity_score(21.0), 0)
        self.assertAlmostEqual(severity_score(2.0), 0.5)

    def test_severity_monotonic(self):
        ratios = [1.0 + i * 0.05 for i in range(41)]
        scores = [severity_score(r) for r in ratios]
        for earlier, later in zip(scores, scores[1:]):
            self.assertGreaterEqual(earlier, later)

    def test_severity_cosine_shape(self):
        t = (1.5 - 1.0) / 2.0
        self.assertAlmostEqual(severity_score(1.5), 0.5 * (1 + math.cos(math.pi * t)))

    def test_is_compliant(self):
        self.assertTrue(is_compliant(3.0))
        self.assertFalse(is_compliant(2.99))
        self.assertTrue(is_compliant(4.5, minimum=4.5))

class TestClusterer(unittest.TestCase):

    def test_few_colors_returned_unchanged(self):
        colors = [RGBColor(1, 2, 3), RGBColor(4, 5, 6)]
        self.assertIs(cluster(colors, 2), colors)
        single = [RGBColor(9, 9, 9)]
        self.assertIs(cluster(single, 2), single)

    def test_two_tone(self):
        a = RGBColor(128, 128, 128)
        b = RGBColor(100, 100, 100)
        colors = [a, a, a, a, b, b, b, b]
        result = cluster(colors, 2)
        self.assertEqual(len(result), 2)
        self.assertEqual(set(result), {a, b})

    def test_deterministic(self):
        colors = [RGBColor((i * 37) % 256, (i * 91) % 256, (i * 13) % 256) for i in range(64)]
        self.assertEqual(cluster(colors, 2), cluster(colors, 2))

    def test_empty_cluster_keeps_centroid(self):
        # Every color ties to centroid 0, centroid 1 never gets a member
        c = RGBColor(5, 5, 5)
        self.assertEqual(cluster([c] * 5, 2), [c, c])

    def test_order_follows_initial_centroids(self):
        dark = RGBColor(10, 10, 10)
        light = RGBColor(240, 240, 240)
        self.assertEqual(cluster([light, dark, light, dark, light], 2), [light, dark])
        self.assertEqual(cluster([dark, light, dark, light, dark], 2), [dark, light])

    def test_rounds_half_up(self):
        colors = [RGBColor(0, 0, 0), RGBColor(200, 200, 200), RGBColor(1, 1, 1), RGBColor(201, 201, 201)]
        self.assertEqual(cluster(colors, 2), [RGBColor(1, 1, 1), RGBColor(201, 201, 201)])

class TestSampler(unittest.TestCase):

    def setUp(self):
        # 4x4 bitmap where every pixel has a unique red channel: r = y * 4 + x
        data = np.zeros((4, 4, 4), dtype=np.uint8)
        for y in range(4):
            for x in range(4):
                data[y, x] = (y * 4 + x, 0, 0, 0)
        self.bitmap = Bitmap(data)

    def test_stride_two_row_major(self):
        colors = sample(self.bitmap, 0, 0, 4, 4)
        self.assertEqual([c.r for c in colors], [0, 2, 8, 10])

    def test_alpha_ignored(self):
        bm = uniform_bitmap(4, 4, (10, 20, 30))
        bm.data[:, :, 3] = 0
        self.assertEqual(sample(bm, 0, 0, 4, 4), [RGBColor(10, 20, 30)] * 4)

    def test_empty_region(self):
        self.assertEqual(sample(self.bitmap, 0, 0, 0, 4), [])
        self.assertEqual(sample(self.bitmap, 0, 0, 4, 0), [])

    def test_out_of_bounds_pixels_skipped(self):
        colors = sample(self.bitmap, 2, 2, 4, 4)
        self.assertEqual([c.r for c in colors], [10])

if __name__ == '__main__':
    unittest.main()
