import unittest
from pathlib import Path
import sys


# Allow flat-module imports when running from repo root.
APP_ROOT = Path(__file__).resolve().parents[1]
if str(APP_ROOT) not in sys.path:
    sys.path.insert(0, str(APP_ROOT))


from extractors.poste_dp import (  # noqa: E402
    build_type_power_pairs,
    derive_insee,
    extract_poste_dp_travaux,
    first_palier,
    normalize_type_poste,
    parse_poste_numero,
)


TWO_PAIRS = (
    "Déplacement du poste DP 09152P0001 et adaptation\n"
    "Poste existant H61 100 kVA\n"
    "Les travaux consistent à remplacer le poste existant par un nouveau poste.\n"
    "Nouveau poste PRCS 250 kVA\n"
    "prise 1\n"
    "Cabine haute 630 hors bloc\n"
)


class TestPosteNumero(unittest.TestCase):
    def test_numero_and_insee(self) -> None:
        self.assertEqual(parse_poste_numero("Poste 09152P0001 rue"), "09152P0001")
        self.assertEqual(derive_insee("09152P0001"), "09152")
        self.assertIsNone(parse_poste_numero("poste 9152P0001"))
        self.assertIsNone(derive_insee(None))


class TestTypeHelpers(unittest.TestCase):
    def test_normalize_type_poste(self) -> None:
        self.assertEqual(normalize_type_poste("cabine haute"), "CH")
        self.assertEqual(normalize_type_poste("Cabine Basse"), "CB")
        self.assertEqual(normalize_type_poste("prcs"), "PRCS")
        self.assertIsNone(normalize_type_poste("H6I"))
        self.assertIsNone(normalize_type_poste(None))

    def test_first_palier_only_accepts_standard_ratings(self) -> None:
        self.assertEqual(first_palier("puissance 120 puis 160 kVA"), 160)
        self.assertIsNone(first_palier("puissance 1600 kVA"))

    def test_close_duplicates_collapse(self) -> None:
        pairs = build_type_power_pairs("H61 H61 100 kVA")
        self.assertEqual([(p.code, p.puissance_kva) for p in pairs], [("H61", 100)])

    def test_collapse_keeps_the_detection_with_a_power(self) -> None:
        bloc = "CB CB " + "x" * 171 + " 400 kVA"
        pairs = build_type_power_pairs(bloc)

        self.assertEqual(len(pairs), 1)
        self.assertEqual((pairs[0].pos, pairs[0].code, pairs[0].puissance_kva), (3, "CB", 400))


class TestPosteDpTravaux(unittest.TestCase):
    def test_two_pairs(self) -> None:
        travaux = extract_poste_dp_travaux(TWO_PAIRS)

        self.assertEqual(travaux.to_dict(), {
            "operation_principale": "deplacement",
            "operation_secondaire": "adaptation",
            "type_avant": {"code": "H61", "puissance_kva": 100},
            "type_apres": {"code": "PRCS", "raw": None, "puissance_kva": 250},
        })

    def test_single_pair_with_power_phrase_and_adaptation_type(self) -> None:
        text = (
            "Adaptation du poste DP existant CH 100 kVA, adaptation en type CH "
            "d'une puissance de 630 kVA\nprise 1"
        )
        travaux = extract_poste_dp_travaux(text)

        self.assertEqual(travaux.operation_principale, "adaptation")
        self.assertIsNone(travaux.operation_secondaire)
        self.assertEqual((travaux.type_avant.code, travaux.type_avant.puissance_kva), ("CH", 100))
        self.assertEqual(
            (travaux.type_apres.code, travaux.type_apres.raw, travaux.type_apres.puissance_kva),
            ("CH", "CH", 630),
        )

    def test_single_pair_falls_back_to_max_palier(self) -> None:
        text = "Mutation du poste DP H61 50 kVA. Puissance retenue 630 kVA, ancien 160 kVA. prise 1"
        travaux = extract_poste_dp_travaux(text)

        self.assertEqual((travaux.type_avant.code, travaux.type_avant.puissance_kva), ("H61", 50))
        self.assertEqual(travaux.type_apres.puissance_kva, 630)
        self.assertIsNone(travaux.type_apres.code)

    def test_power_phrase_without_palier_does_not_use_block_max(self) -> None:
        text = (
            "Mutation du poste DP H61 100 kVA, d'une puissance de 36 kVA. "
            + "x" * 100 + " transformateur 630 kVA prise 1"
        )
        travaux = extract_poste_dp_travaux(text)

        self.assertEqual((travaux.type_avant.code, travaux.type_avant.puissance_kva), ("H61", 100))
        self.assertIsNone(travaux.type_apres.puissance_kva)

    def test_adaptation_type_raw_is_accent_folded(self) -> None:
        travaux = extract_poste_dp_travaux("Adaptation du poste DP, adaptation en type PRÉFA prise 1")

        self.assertEqual(travaux.type_apres.raw, "PREFA")
        self.assertIsNone(travaux.type_apres.code)

    def test_no_pair_uses_de_type_phrase(self) -> None:
        text = "Création du poste DP de type préfabriqué 250 kVA, d’une puissance de 400 kVA prise 1"
        travaux = extract_poste_dp_travaux(text)

        self.assertEqual(travaux.operation_principale, "creation")
        self.assertEqual((travaux.type_avant.code, travaux.type_avant.puissance_kva), (None, 250))
        self.assertEqual(travaux.type_apres.puissance_kva, 400)

    def test_operation_alone_is_informative(self) -> None:
        travaux = extract_poste_dp_travaux("Mutation du poste DP")
        self.assertEqual(travaux.operation_principale, "mutation")
        self.assertIsNone(travaux.type_avant.code)
        self.assertIsNone(travaux.type_apres.puissance_kva)

    def test_no_operation_keyword(self) -> None:
        self.assertIsNone(extract_poste_dp_travaux("Poste H61 100 kVA"))
        self.assertIsNone(extract_poste_dp_travaux(""))


if __name__ == "__main__":
    unittest.main()
