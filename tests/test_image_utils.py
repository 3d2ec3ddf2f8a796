import pathlib
import sys
import unittest

import numpy as np

# Ensure the repository root is on path for direct test execution
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from image_preparation.image_prep_utils.image_utils import build_image, compress, embed  # noqa: E402
from image_preparation.image_prep_utils.roi_utils import ROI, find_roi  # noqa: E402
from image_preparation.image_prep_utils.wire_store import WireSignalStore  # noqa: E402


class CompressTest(unittest.TestCase):
    def setUp(self):
        self.grid = np.arange(16, dtype=np.float32).reshape(2, 8)

    def test_sum(self):
        np.testing.assert_array_equal(
            compress(self.grid, 1, 2, mode="sum"),
            np.array([[0 + 1 + 2 + 3 + 8 + 9 + 10 + 11, 4 + 5 + 6 + 7 + 12 + 13 + 14 + 15]]),
        )

    def test_average(self):
        np.testing.assert_allclose(compress(self.grid, 2, 2, mode="average"),
                                   np.array([[1.5, 5.5], [9.5, 13.5]]))

    def test_max(self):
        np.testing.assert_array_equal(compress(self.grid, 2, 4, mode="max"),
                                      np.array([[1, 3, 5, 7], [9, 11, 13, 15]]))

    def test_invalid_shape(self):
        with self.assertRaises(ValueError):
            compress(self.grid, 2, 3)

    def test_invalid_mode(self):
        with self.assertRaises(ValueError):
            compress(self.grid, 1, 1, mode="median")


class EmbedTest(unittest.TestCase):
    def test_small_image_zero_padded(self):
        image = np.ones((3, 5), dtype=np.float32)

        canvas = embed(image)

        self.assertEqual(canvas.shape, (600, 600))
        self.assertEqual(canvas[:3, :5].sum(), 15)
        self.assertEqual(canvas.sum(), 15)

    def test_large_image_cropped(self):
        image = np.ones((620, 10), dtype=np.float32)

        canvas = embed(image)

        self.assertEqual(canvas.shape, (600, 600))
        np.testing.assert_array_equal(canvas[:, :10], np.ones((600, 10)))
        self.assertEqual(canvas[:, 10:].sum(), 0)


class BuildImageTest(unittest.TestCase):
    def test_single_hit_image(self):
        samples = np.zeros(200, dtype=np.float32)
        samples[100] = 50.0
        store = WireSignalStore()
        store.ingest(100, samples)
        roi = find_roi(store, apa=0, plane=0, adc_cut=10)

        image = build_image(store, roi)

        self.assertEqual(image.shape, (600, 600))
        self.assertEqual(image.dtype, np.float32)
        # wire 100 is row 10 of the ROI, tick 100 is column 43 -> pixel 10
        self.assertEqual(image[10, 10], 50.0)
        self.assertEqual(image.sum(), 50.0)

    def test_downsampled_image(self):
        store = WireSignalStore()
        for channel in range(1600, 1604):
            store.ingest(channel, np.ones(32, dtype=np.float32))
        roi = ROI(1600, 1603, 0, 31, 2)

        image = build_image(store, roi)

        # 2 x 8 blocks of ones, compressed to a 2 x 4 image
        np.testing.assert_array_equal(image[:2, :4], np.full((2, 4), 16.0))
        self.assertEqual(np.count_nonzero(image), 8)

    def test_outside_compressed_region_is_zero(self):
        rng = np.random.default_rng(3)
        store = WireSignalStore()
        for channel in range(900, 1100):
            store.ingest(channel, rng.uniform(20, 30, size=1500).astype(np.float32))
        roi = find_roi(store, apa=0, plane=1, adc_cut=10)

        image = build_image(store, roi, mode="average")

        width = roi.n_wires // roi.downsample
        height = roi.n_ticks // (4 * roi.downsample)
        self.assertEqual(image.shape, (600, 600))
        self.assertEqual(np.abs(image[width:, :]).sum(), 0)
        self.assertEqual(np.abs(image[:, height:]).sum(), 0)
        self.assertTrue(np.all(image[10:width - 10, 10:height - 10] > 0))


if __name__ == "__main__":
    unittest.main()
