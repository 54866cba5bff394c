import unittest
from pathlib import Path
import sys


# Allow flat-module imports when running from repo root.
APP_ROOT = Path(__file__).resolve().parents[1]
if str(APP_ROOT) not in sys.path:
    sys.path.insert(0, str(APP_ROOT))


from extractors.accessoires import count_accessories, local_window  # noqa: E402
from models import AccessorySet  # noqa: E402


class TestCountAccessories(unittest.TestCase):
    def test_max_not_sum(self) -> None:
        window = "pose via 3 jonctions côté rue, puis reprise avec 5 jonctions et une jonction"
        self.assertEqual(count_accessories(window).jonctions, 5)

    def test_default_count_is_one(self) -> None:
        acc = count_accessories("raccord par jonction puis remontée aéro-souterraine")
        self.assertEqual(acc.jonctions, 1)
        self.assertEqual(acc.remontees_aero_souterraines, 1)

    def test_remontees_accent_tolerant(self) -> None:
        acc = count_accessories("avec 2 remontees aero souterraines et 1 REMONTÉE AÉRO-SOUTERRAINE")
        self.assertEqual(acc.remontees_aero_souterraines, 2)

    def test_ras_flag(self) -> None:
        self.assertTrue(count_accessories("câble 30 m RAS").ras)
        self.assertFalse(count_accessories("câble 30 m TRAS").ras)

    def test_empty_window(self) -> None:
        self.assertEqual(count_accessories(""), AccessorySet())
        self.assertEqual(count_accessories(None).to_dict(),
                         {"jonctions": 0, "remontees_aero_souterraines": 0, "ras": False})


class TestLocalWindow(unittest.TestCase):
    def test_window_is_clipped_to_block(self) -> None:
        bloc = "a" * 1000
        self.assertEqual(len(local_window(bloc, (600, 610))), 900)
        self.assertEqual(len(local_window(bloc, (10, 20))), 620)


if __name__ == "__main__":
    unittest.main()
