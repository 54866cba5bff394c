"""
Normalisation du texte OCR

- Repliement des accents à longueur constante (les positions trouvées dans la
  copie repliée restent valables dans le texte d'origine)
- Nettoyage des sections de câble (mm? / mm² → mm2, AI / Al → AL)
- Conversion d'entiers tolérante
"""

import re
from typing import Optional


# ============ NORMALISATION ============

_ACCENTS = str.maketrans(
    "àâäáãéèêëíìîïóòôöõúùûüçÀÂÄÁÃÉÈÊËÍÌÎÏÓÒÔÖÕÚÙÛÜÇ",
    "aaaaaeeeeiiiiooooouuuucAAAAAEEEEIIIIOOOOOUUUUC",
)


def fold_accents(text: str) -> str:
    """Retire les accents caractère par caractère, sans changer la longueur"""
    return (text or "").translate(_ACCENTS)


def collapse_whitespace(text: str) -> str:
    """Réduit chaque suite d'espaces à un seul espace"""
    return re.sub(r"\s+", " ", (text or "").strip())


def normalize_section(raw: Optional[str]) -> str:
    """Section de câble canonique, ex: '3x150 mm² + 1x95mm? AI' → '3x150 mm2 + 1x95mm2 AL'"""
    if not raw:
        return ""
    section = collapse_whitespace(raw)
    section = re.sub(r"mm[?²]", "mm2", section, flags=re.I)
    # OCR fréquent : AI au lieu de AL
    section = re.sub(r"\bAI\b", "AL", section, flags=re.I)
    section = re.sub(r"\bAl\b", "AL", section)
    return section


def to_int(raw) -> Optional[int]:
    """Entier ou None si la chaîne n'est pas un nombre exploitable"""
    try:
        return int(str(raw).strip())
    except (TypeError, ValueError):
        return None
