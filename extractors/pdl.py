"""
PDL : extraction multiple par blocs RAC (affaires groupées)

Le bloc i va du code RAC i au code RAC i+1 (ou à la fin du texte) : les blocs
sont contigus et couvrent tout le texte à partir du premier code.
"""
import re
import logging
from typing import List, Optional

from models import Pdl, VENTE_SURPLUS, VENTE_TOTALE
from normalization import to_int
from extractors.blocks import Block
from extractors.bt import detect_type_raccordement

logger = logging.getLogger(__name__)

NOM_DOSSIER_MAX_LINES = 7

RAC_RE = re.compile(r"\bRAC-[A-Z]{3}-\d{2}-\d{6}\b")
P_KVA_RE = re.compile(r"\bP\s*=\s*(\d{1,4})\s*KVA\b", re.I)
SURPLUS_RE = re.compile(r"\bSURPLUS\b", re.I)
PRM14_RE = re.compile(r"\b\d{14}\b")
PCONSO_RE = re.compile(r"(?:P\s*conso|Pconso)\s*(?:=|:)?\s*(\d{1,4})\s*KVA\b", re.I)

NOISE_MARKERS = ("LEGENDE", "TAN", "PLATINE")


# ============ Affaire globale (repli) ============

def extract_affaire_num(text: str) -> Optional[str]:
    match = RAC_RE.search(text or "")
    return match.group(0) if match else None


def extract_global_p_kva(text: str) -> Optional[int]:
    match = P_KVA_RE.search(text or "")
    return to_int(match.group(1)) if match else None


# ============ Blocs RAC ============

def split_rac_blocks(text: str) -> List[Block]:
    if not text:
        return []
    starts = [m.start() for m in RAC_RE.finditer(text)]
    ends = starts[1:] + [len(text)]
    return [Block(start, end, text[start:end]) for start, end in zip(starts, ends)]


def _is_noise_line(line: str) -> bool:
    upper = (line or "").strip().upper()
    if not upper:
        return True
    if upper.startswith("P=") or upper.startswith("P ="):
        return True
    return any(marker in upper for marker in NOISE_MARKERS)


def extract_nom_dossier(block: str, rac: str) -> Optional[str]:
    """Première ligne utile sous le code RAC (7 lignes au plus)"""
    lines = [line.strip() for line in re.split(r"\r?\n", block or "")]
    idx = next((i for i, line in enumerate(lines) if rac in line), None)
    if idx is None:
        return None

    for line in lines[idx + 1:idx + 1 + NOM_DOSSIER_MAX_LINES]:
        if _is_noise_line(line) or RAC_RE.search(line):
            continue
        return line
    return None


def _first_int(pattern, block: str) -> Optional[int]:
    match = pattern.search(block or "")
    return to_int(match.group(1)) if match else None


def _extract_pdl(block: Block) -> Pdl:
    rac = RAC_RE.match(block.text).group(0)
    mode = VENTE_SURPLUS if SURPLUS_RE.search(block.text) else VENTE_TOTALE

    prm, p_conso = None, None
    if mode == VENTE_SURPLUS:
        prm_match = PRM14_RE.search(block.text)
        prm = prm_match.group(0) if prm_match else None
        p_conso = _first_int(PCONSO_RE, block.text)

    return Pdl(
        mode=mode,
        num_affaire=rac,
        nom_dossier=extract_nom_dossier(block.text, rac),
        p_prod_kva=_first_int(P_KVA_RE, block.text),
        type_raccordement=detect_type_raccordement(block.text),
        prm=prm,
        p_conso_kva=p_conso,
    )


def extract_pdls(text: str) -> List[Pdl]:
    pdls = [_extract_pdl(block) for block in split_rac_blocks(text)]
    logger.debug(f"{len(pdls)} PDL trouvé(s)")
    return pdls
