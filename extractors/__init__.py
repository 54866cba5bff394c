"""
Module extracteurs du texte OCR des APS

Chaque extracteur est pur : texte en entrée, valeur structurée (ou None / liste
vide) en sortie, sans état partagé.
"""
from extractors.poste_dp import parse_poste_numero, derive_insee, extract_poste_dp_travaux
from extractors.hta import extract_extensions_hta
from extractors.bt import extract_reprises_bt, extract_raccordement_bt
from extractors.pdl import extract_pdls, extract_affaire_num, extract_global_p_kva

__all__ = [
    "parse_poste_numero",
    "derive_insee",
    "extract_poste_dp_travaux",
    "extract_extensions_hta",
    "extract_reprises_bt",
    "extract_raccordement_bt",
    "extract_pdls",
    "extract_affaire_num",
    "extract_global_p_kva",
]
