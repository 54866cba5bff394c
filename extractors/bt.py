"""
Réseau BT : reprises du réseau existant et raccordement du producteur
"""
import re
import logging
from typing import List, Optional

from models import BtReprise, BtRaccordement, DEPART_DIRECT, DERIVATION
from normalization import fold_accents, to_int
from extractors.blocks import compile_anchor, compile_anchors, extract_blocks, first_block
from extractors.cables import find_pairs, first_section, first_length
from extractors.accessoires import count_accessories, local_window

logger = logging.getLogger(__name__)

# ============ Reprise BT ============

REPRISE_FALLBACK_CHARS = 1600

REPRISE_START_RE = compile_anchor("Reprise du réseau BT existant")
REPRISE_END_RE = compile_anchors(
    "Raccordement en",
    "Déplacement du poste DP",
    "Extension du réseau HTA",
    "LEGENDE",
)
FUSIBLES_RE = re.compile(r"fusibles?\s*(?P<fusibles>\d{2,4})\s*A\b", re.I)


def _protection_a(bloc: str) -> Optional[int]:
    match = FUSIBLES_RE.search(fold_accents(bloc))
    return to_int(match.group("fusibles")) if match else None


def extract_reprises_bt(text: str) -> List[BtReprise]:
    """Une reprise par paire câble, avec le calibre fusible de son bloc"""
    items = []
    if not text:
        return items

    blocks = extract_blocks(
        text,
        REPRISE_START_RE,
        REPRISE_END_RE,
        include_end=False,
        fallback_length=REPRISE_FALLBACK_CHARS,
    )
    for block in blocks:
        protection = _protection_a(block.text)
        for cable in find_pairs(block.text):
            accessoires = count_accessories(local_window(block.text, cable.span))
            items.append(BtReprise.from_cable(cable, accessoires, protection_a=protection))

    logger.debug(f"BT: {len(items)} reprise(s)")
    return items


# ============ Raccordement BT ============

RACCORDEMENT_FALLBACK_CHARS = 1200

RACCORDEMENT_START_RE = re.compile(r"\bRaccordement\s+en\b", re.I)
RACCORDEMENT_END_RE = re.compile(r"\bA\)", re.I)
RACCORDEMENT_SECONDARY_END_RE = compile_anchors(
    "Protection",
    "Déplacement du poste DP",
    "Reprise du réseau BT existant",
    "Extension du réseau HTA",
    "LEGENDE",
)


def detect_type_raccordement(bloc: Optional[str]) -> Optional[str]:
    lowered = fold_accents(bloc).lower()
    if "depart direct" in lowered:
        return DEPART_DIRECT
    if "derivation" in lowered:
        return DERIVATION
    return None


def extract_raccordement_bt(text: str) -> Optional[BtRaccordement]:
    block = first_block(
        text,
        RACCORDEMENT_START_RE,
        end_anchors=(
            (RACCORDEMENT_END_RE, True),
            (RACCORDEMENT_SECONDARY_END_RE, False),
        ),
        fallback_length=RACCORDEMENT_FALLBACK_CHARS,
    )
    if block is None:
        return None

    type_raccordement = detect_type_raccordement(block.text)
    section = first_section(block.text)
    longueur = first_length(block.text)

    if type_raccordement is None and section is None and longueur is None:
        return None

    return BtRaccordement(
        type_raccordement=type_raccordement,
        section=section,
        longueur_m=longueur,
        accessoires=count_accessories(block.text),
    )
