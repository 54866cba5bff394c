import unittest
from pathlib import Path
import sys


# Allow flat-module imports when running from repo root.
APP_ROOT = Path(__file__).resolve().parents[1]
if str(APP_ROOT) not in sys.path:
    sys.path.insert(0, str(APP_ROOT))


from extractors.bt import detect_type_raccordement, extract_raccordement_bt, extract_reprises_bt  # noqa: E402
from extractors.hta import extract_extensions_hta  # noqa: E402
from models import AccessorySet  # noqa: E402


HTA_TWO_RUNS = (
    "Extension du réseau HTA\n"
    "Pose de câble souterrain 250 m en 3x150 AL via 2 jonctions\n"
    "puis câble 120 m en 3x240 AL avec 1 remontée aéro-souterraine\n"
    "jusqu'au poste source\n"
)


class TestExtensionsHta(unittest.TestCase):
    def test_anchored_block_with_two_runs(self) -> None:
        items = extract_extensions_hta(HTA_TWO_RUNS)

        self.assertEqual([(i.longueur_m, i.section) for i in items], [(250, "3x150 AL"), (120, "3x240 AL")])
        for item in items:
            self.assertEqual(item.accessoires, AccessorySet(jonctions=2, remontees_aero_souterraines=1, ras=False))
        self.assertEqual(items[0].to_dict()["liaison"], "RAS")

    def test_plus_1x_sections_are_excluded(self) -> None:
        text = "Extension du réseau HTA câble 50 m 3x150+1x70 AL poste source"
        self.assertEqual(extract_extensions_hta(text), [])

    def test_fallback_around_hta_mentions(self) -> None:
        text = "Réseau HTA : câble 300 m en 3x95 AI"
        items = extract_extensions_hta(text)
        self.assertEqual([(i.longueur_m, i.section) for i in items], [(300, "3x95 AL")])

    def test_fallback_deduplicates_length_and_section(self) -> None:
        text = "HTA aérien. câble 300 m en 3x95 AL. Rappel HTA : même tracé."
        self.assertEqual(len(extract_extensions_hta(text)), 1)

    def test_fallback_completes_a_single_anchored_run(self) -> None:
        text = (
            "Extension du réseau HTA câble 100 m 3x150 AL poste source. "
            "Plus loin en HTA : câble 200 m 3x240 AL"
        )
        items = extract_extensions_hta(text)
        self.assertEqual([(i.longueur_m, i.section) for i in items], [(100, "3x150 AL"), (200, "3x240 AL")])

    def test_no_hta(self) -> None:
        self.assertEqual(extract_extensions_hta(""), [])
        self.assertEqual(extract_extensions_hta("câble 20 m 3x150 AL"), [])


class TestReprisesBt(unittest.TestCase):
    def test_fuse_rating_attached_to_every_pair(self) -> None:
        text = (
            "Reprise du réseau BT existant\n"
            "Protection par fusibles 200 A\n"
            "Dépose câble 45 m en 3x150+1x70 AL avec 1 jonction\n"
            "puis câble 30 m en 3x95+1x50 AI\n"
            "Raccordement en départ direct\n"
            "câble 99 m 3x240 AL\n"
        )
        items = extract_reprises_bt(text)

        self.assertEqual([(i.longueur_m, i.section) for i in items], [(45, "3x150+1x70 AL"), (30, "3x95+1x50 AL")])
        self.assertTrue(all(i.protection_a == 200 for i in items))
        self.assertEqual(items[0].accessoires.jonctions, 1)
        self.assertEqual(list(items[0].to_dict()), ["longueur_m", "section", "protection_a", "liaison", "accessoires"])

    def test_fallback_window_without_end_anchor(self) -> None:
        items = extract_reprises_bt("Reprise du reseau BT existant câble 10 m 3x150 AL")
        self.assertEqual(len(items), 1)
        self.assertIsNone(items[0].protection_a)


class TestRaccordementBt(unittest.TestCase):
    def test_block_bounded_by_a_paren(self) -> None:
        text = (
            "Raccordement en dérivation sur câble 35 m en 3x35 AL via 1 jonction A) "
            "autre câble 99 m 3x240 AL 4 jonctions"
        )
        racc = extract_raccordement_bt(text)

        self.assertEqual(racc.type_raccordement, "derivation")
        self.assertEqual(racc.section, "3x35 AL")
        self.assertEqual(racc.longueur_m, 35)
        self.assertEqual(racc.accessoires.jonctions, 1)

    def test_secondary_anchor_is_excluded(self) -> None:
        racc = extract_raccordement_bt("Raccordement en départ direct 20 m LEGENDE câble 3x150 AL")
        self.assertEqual(racc.type_raccordement, "depart_direct")
        self.assertEqual(racc.longueur_m, 20)
        self.assertIsNone(racc.section)

    def test_nothing_informative_returns_none(self) -> None:
        self.assertIsNone(extract_raccordement_bt("Raccordement en attente"))
        self.assertIsNone(extract_raccordement_bt("pas de raccordement"))

    def test_detect_type(self) -> None:
        self.assertEqual(detect_type_raccordement("DÉPART DIRECT"), "depart_direct")
        self.assertEqual(detect_type_raccordement("en derivation"), "derivation")
        self.assertIsNone(detect_type_raccordement(None))


if __name__ == "__main__":
    unittest.main()
