"""
Extensions du réseau HTA

1. Blocs "Extension du réseau HTA" → "(du) poste source"
2. Si au plus un tronçon trouvé : fenêtres autour de chaque mention "HTA",
   en n'ajoutant que les couples (longueur, section) encore inconnus
"""
import re
import logging
from typing import List

from models import HtaExtension
from normalization import fold_accents
from extractors.blocks import compile_anchor, extract_blocks
from extractors.cables import find_pairs
from extractors.accessoires import count_accessories, local_window

logger = logging.getLogger(__name__)

HTA_START_RE = compile_anchor("Extension du réseau HTA")
HTA_END_RE = re.compile(r"(?:\bdu\s+)?poste[-\s]+source\b", re.I)
HTA_MENTION_RE = re.compile(r"\bHTA\b", re.I)

MENTION_BEFORE = 700
MENTION_AFTER = 1100


def _extensions_in(zone: str) -> List[HtaExtension]:
    items = []
    for cable in find_pairs(zone):
        # Les sections +1x (neutre séparé) ne concernent pas la HTA
        if cable.has_plus_1x:
            continue
        accessoires = count_accessories(local_window(zone, cable.span))
        items.append(HtaExtension.from_cable(cable, accessoires))
    return items


def _from_anchored_blocks(text: str) -> List[HtaExtension]:
    items = []
    for block in extract_blocks(text, HTA_START_RE, HTA_END_RE):
        items.extend(_extensions_in(block.text))
    return items


def _around_hta_mentions(text: str) -> List[HtaExtension]:
    items = []
    for mention in HTA_MENTION_RE.finditer(fold_accents(text)):
        idx = mention.start()
        zone = text[max(0, idx - MENTION_BEFORE):min(len(text), idx + MENTION_AFTER)]
        items.extend(_extensions_in(zone))
    return items


def extract_extensions_hta(text: str) -> List[HtaExtension]:
    if not text:
        return []

    items = _from_anchored_blocks(text)

    if len(items) <= 1:
        logger.debug(f"HTA: {len(items)} tronçon(s) bornés, recherche autour des mentions HTA")
        # Déduplication sur (longueur, section) uniquement, accessoires ignorés
        known = {(item.longueur_m, item.section) for item in items}
        for candidate in _around_hta_mentions(text):
            key = (candidate.longueur_m, candidate.section)
            if key not in known:
                known.add(key)
                items.append(candidate)

    logger.debug(f"HTA: {len(items)} extension(s)")
    return items
