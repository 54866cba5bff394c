"""
Pairage longueur + section de câble

Une section (3x150 AL, 3x240mm2+1x95mm2 AI, ...) n'est retenue que si le mot
"câble" apparaît dans les 320 caractères qui la précèdent ; la longueur
associée est la dernière mention "<n> m" de cette fenêtre.
"""
import re
import logging
from typing import List, Optional

from models import CableSpec
from normalization import fold_accents, normalize_section, to_int

logger = logging.getLogger(__name__)

LOOKBEHIND_CHARS = 320

SECTION_RE = re.compile(
    r"3x\s*\d+(?:\s*mm[²2?]?)?(?:\s*\+\s*1x\s*\d+(?:\s*mm[²2?]?)?)?\s*A[IL]",
    re.I,
)
LENGTH_RE = re.compile(r"(\d{1,4})\s*m\b", re.I)
CABLE_RE = re.compile(r"cable", re.I)
PLUS_1X_RE = re.compile(r"\+\s*1x", re.I)


def find_pairs(bloc: str) -> List[CableSpec]:
    """Toutes les paires (longueur, section) validées par la proximité de "câble" """
    pairs = []
    if not bloc:
        return pairs

    folded = fold_accents(bloc)

    for section_match in SECTION_RE.finditer(folded):
        start, end = section_match.span()
        context_before = folded[max(0, start - LOOKBEHIND_CHARS):start]

        if not CABLE_RE.search(context_before):
            continue

        lengths = list(LENGTH_RE.finditer(context_before))
        if not lengths:
            continue

        longueur = to_int(lengths[-1].group(1))
        if not longueur:
            continue

        section = normalize_section(bloc[start:end])
        pairs.append(CableSpec(
            longueur_m=longueur,
            section=section,
            has_plus_1x=bool(PLUS_1X_RE.search(section)),
            span=(start, end),
        ))

    logger.debug(f"{len(pairs)} paire(s) longueur/section")
    return pairs


def first_section(bloc: str) -> Optional[str]:
    """Première section du bloc, sans contrôle de proximité"""
    match = SECTION_RE.search(fold_accents(bloc))
    return normalize_section(bloc[match.start():match.end()]) if match else None


def first_length(bloc: str) -> Optional[int]:
    """Première longueur du bloc, sans contrôle de proximité"""
    match = LENGTH_RE.search(fold_accents(bloc))
    return to_int(match.group(1)) if match else None
