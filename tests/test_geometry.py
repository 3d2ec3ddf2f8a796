import pathlib
import sys
import unittest

# Ensure the repository root is on path for direct test execution
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from image_preparation.image_prep_utils import geometry  # noqa: E402


class GeometryTest(unittest.TestCase):
    def test_apa_of(self):
        self.assertEqual(geometry.apa_of(0), 0)
        self.assertEqual(geometry.apa_of(2559), 0)
        self.assertEqual(geometry.apa_of(2560), 1)
        self.assertEqual(geometry.apa_of(3 * 2560 + 17), 3)

    def test_plane_of_clips_collection_plane(self):
        self.assertEqual(geometry.plane_of(0), 0)
        self.assertEqual(geometry.plane_of(799), 0)
        self.assertEqual(geometry.plane_of(800), 1)
        self.assertEqual(geometry.plane_of(1599), 1)
        self.assertEqual(geometry.plane_of(1600), 2)
        self.assertEqual(geometry.plane_of(2400), 2)
        self.assertEqual(geometry.plane_of(2559), 2)
        self.assertEqual(geometry.plane_of(2560 + 900), 1)

    def test_plane_channel_range(self):
        self.assertEqual(geometry.plane_channel_range(0, 0), (0, 799))
        self.assertEqual(geometry.plane_channel_range(1, 1), (3360, 4159))
        self.assertEqual(geometry.plane_channel_range(2, 2), (6720, 7679))

    def test_plane_ranges_cover_apa(self):
        widths = [last - first + 1 for first, last in
                  (geometry.plane_channel_range(0, p) for p in range(3))]
        self.assertEqual(sum(widths), geometry.nb_apa_channels)
        self.assertEqual(tuple(widths), geometry.nb_plane_channels)

    def test_invalid_plane(self):
        with self.assertRaises(ValueError):
            geometry.plane_channel_range(0, 3)

    def test_tick_windows_are_divisible(self):
        for downsample, (first, last) in geometry.tick_window.items():
            self.assertEqual((last - first + 1) % (geometry.time_compression * downsample), 0)


if __name__ == "__main__":
    unittest.main()
