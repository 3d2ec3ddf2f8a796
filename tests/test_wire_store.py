import pathlib
import sys
import unittest

import numpy as np

# Ensure the repository root is on path for direct test execution
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from image_preparation.image_prep_utils.wire_store import WireSignalStore  # noqa: E402


class WireSignalStoreTest(unittest.TestCase):
    def test_ingest_and_lookup(self):
        store = WireSignalStore()
        store.ingest(5, [1.0, 2.0, 3.0])

        self.assertIn(5, store)
        self.assertEqual(len(store), 1)
        np.testing.assert_array_equal(store.lookup(5), np.array([1, 2, 3], dtype=np.float32))
        self.assertIsNone(store.lookup(6))

    def test_ingest_overwrites(self):
        store = WireSignalStore()
        store.ingest(5, [1.0, 2.0])
        store.ingest(5, [7.0])

        np.testing.assert_array_equal(store.lookup(5), np.array([7.0], dtype=np.float32))
        self.assertEqual(len(store), 1)

    def test_sample_out_of_range_is_zero(self):
        store = WireSignalStore()
        store.ingest(5, [1.0, 2.0])

        self.assertEqual(store.sample(5, 1), 2.0)
        self.assertEqual(store.sample(5, 2), 0.0)
        self.assertEqual(store.sample(5, -1), 0.0)
        self.assertEqual(store.sample(6, 0), 0.0)

    def test_negative_channel_rejected(self):
        with self.assertRaises(ValueError):
            WireSignalStore().ingest(-1, [1.0])

    def test_clear(self):
        store = WireSignalStore()
        store.ingest(1, [1.0])
        store.clear()

        self.assertEqual(len(store), 0)
        self.assertEqual(store.active_apas(), [])

    def test_active_apas_in_first_seen_order(self):
        store = WireSignalStore()
        store.ingest(2 * 2560 + 3, [1.0])
        store.ingest(10, [1.0])
        store.ingest(2 * 2560 + 900, [1.0])
        store.ingest(2560, [])  # empty signal does not touch APA 1

        self.assertEqual(store.active_apas(), [2, 0])

    def test_window_zero_fills(self):
        store = WireSignalStore()
        store.ingest(10, [1.0, 2.0, 3.0])
        store.ingest(12, [4.0])

        block = store.window(10, 12, 1, 4)

        expected = np.array([
            [2.0, 3.0, 0.0, 0.0],
            [0.0, 0.0, 0.0, 0.0],
            [0.0, 0.0, 0.0, 0.0],
        ], dtype=np.float32)
        np.testing.assert_array_equal(block, expected)

    def test_window_matches_sample(self):
        store = WireSignalStore()
        rng = np.random.default_rng(0)
        for channel in range(20, 30):
            store.ingest(channel, rng.normal(size=int(rng.integers(0, 15))))

        block = store.window(18, 31, 2, 16)

        for row, channel in enumerate(range(18, 32)):
            for col, tick in enumerate(range(2, 17)):
                self.assertEqual(block[row, col], store.sample(channel, tick))


if __name__ == "__main__":
    unittest.main()
