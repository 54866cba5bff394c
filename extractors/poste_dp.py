"""
Poste DP : numéro, INSEE et travaux (type et puissance avant / après)

Résolution des types en cascade :
1. au moins deux couples (type, palier) repérés → avant = 1er, après = 2e
2. un seul couple → avant = ce couple, puissance après par repli
3. aucun couple → avant lu après "de type", puissance après par repli

Puissance après par repli : palier suivant "d'une puissance de" (None si la
phrase est là sans palier), sinon plus grand palier cité dans le bloc.
"""
import re
import logging
from dataclasses import dataclass
from typing import List, NamedTuple, Optional, Tuple

from models import PosteDpTravaux, TypeAvant, TypeApres
from normalization import fold_accents, to_int
from extractors.blocks import first_block
from extractors.cascade import first_satisfying

logger = logging.getLogger(__name__)

# ============ Référentiels ============

POSTE_TYPES = ("H61", "PRCS", "RC", "PAC", "PUIE", "CH", "CB")
POSTE_PUISSANCES = frozenset({50, 100, 160, 250, 400, 630, 1000})

OPERATIONS = {
    "deplacement": "deplacement",
    "creation": "creation",
    "adaptation": "adaptation",
    "mutation": "mutation",
}

POSTE_BLOCK_FALLBACK_CHARS = 2200
PAIR_WINDOW_BEFORE = 60
PAIR_WINDOW_AFTER = 180
DUPLICATE_DISTANCE = 40
DE_TYPE_WINDOW = 260
PUISSANCE_DE_WINDOW = 90

# ============ Regex ============

POSTE_RE = re.compile(r"\b(\d{5})P(\d{4})\b")
POSTE_FULL_RE = re.compile(r"(\d{5})P\d{4}")

EVT_START_RE = re.compile(r"\b(Deplacement|Creation|Adaptation|Mutation)\s+du\s+poste\s+DP\b", re.I)
EVT_END_RE = re.compile(r"\bprise\s*1\b", re.I)
ET_ADAPTATION_RE = re.compile(r"\bet\s+adaptation\b", re.I)
TYPE_APRES_RE = re.compile(r"\badaptation\s+en\s+type\s+(?P<type>[A-Z0-9\-]{2,10})\b", re.I)
DE_TYPE_RE = re.compile(r"\bde\s+type\b", re.I)
PUISSANCE_DE_RE = re.compile(r"d['’]une\s+puissance\s+de", re.I)

PALIER_RE = re.compile(r"\b(50|100|160|250|400|630|1000)\b")
CABINE_RES = (
    ("CH", re.compile(r"\bCABINE\s+HAUTE\b", re.I)),
    ("CB", re.compile(r"\bCABINE\s+BASSE\b", re.I)),
)
CODE_RES = tuple((code, re.compile(rf"\b{code}\b", re.I)) for code in POSTE_TYPES)


# ============ Numéro de poste / INSEE ============

def parse_poste_numero(text: str) -> Optional[str]:
    """Ex: 09152P0001"""
    match = POSTE_RE.search(text or "")
    return match.group(0) if match else None


def derive_insee(poste: Optional[str]) -> Optional[str]:
    """INSEE = 5 premiers chiffres du numéro de poste, zéro initial compris"""
    match = POSTE_FULL_RE.fullmatch(poste or "")
    return match.group(1) if match else None


# ============ Types et paliers ============

@dataclass(frozen=True)
class TypePair:
    pos: int
    code: str
    puissance_kva: Optional[int]


class _Resolution(NamedTuple):
    avant_code: Optional[str]
    avant_kva: Optional[int]
    apres_code: Optional[str]
    apres_kva: Optional[int]


def normalize_type_poste(raw: Optional[str]) -> Optional[str]:
    if not raw:
        return None
    upper = fold_accents(raw).upper()
    for code, cabine_re in CABINE_RES:
        if cabine_re.search(upper):
            return code
    for code, code_re in CODE_RES:
        if code_re.search(upper):
            return code
    return None


def first_palier(window: Optional[str]) -> Optional[int]:
    match = PALIER_RE.search(window or "")
    if not match:
        return None
    value = to_int(match.group(1))
    return value if value in POSTE_PUISSANCES else None


def scan_type_occurrences(folded: str) -> List[Tuple[int, str]]:
    occurrences = []
    for code, cabine_re in CABINE_RES:
        occurrences.extend((m.start(), code) for m in cabine_re.finditer(folded))
    for code, code_re in CODE_RES:
        occurrences.extend((m.start(), code) for m in code_re.finditer(folded))
    occurrences.sort(key=lambda occ: occ[0])
    return occurrences


def build_type_power_pairs(bloc: str) -> List[TypePair]:
    """Couples (type, premier palier proche), doublons OCR rapprochés fusionnés"""
    folded = fold_accents(bloc)
    pairs = []
    for pos, code in scan_type_occurrences(folded):
        window = folded[max(0, pos - PAIR_WINDOW_BEFORE):min(len(folded), pos + PAIR_WINDOW_AFTER)]
        pairs.append(TypePair(pos, code, first_palier(window)))

    deduped = []
    for pair in pairs:
        if deduped:
            prev = deduped[-1]
            if pair.code == prev.code and abs(pair.pos - prev.pos) < DUPLICATE_DISTANCE:
                if prev.puissance_kva is None and pair.puissance_kva is not None:
                    deduped[-1] = pair
                continue
        deduped.append(pair)
    return deduped


# ============ Puissance après (repli) ============

def _power_after_phrase(folded: str) -> Optional[int]:
    match = PUISSANCE_DE_RE.search(folded)
    if not match:
        return None
    return first_palier(folded[match.end():match.end() + PUISSANCE_DE_WINDOW])


def _max_palier(folded: str) -> Optional[int]:
    values = [to_int(m.group(1)) for m in PALIER_RE.finditer(folded)]
    values = [v for v in values if v in POSTE_PUISSANCES]
    return max(values) if values else None


def type_apres_power(folded: str) -> Optional[int]:
    # Phrase présente : elle seule fait foi, même sans palier derrière
    if PUISSANCE_DE_RE.search(folded):
        return _power_after_phrase(folded)
    return _max_palier(folded)


# ============ Stratégies de résolution ============

def _from_two_pairs(folded: str, pairs: List[TypePair]) -> Optional[_Resolution]:
    if len(pairs) < 2:
        return None
    avant, apres = pairs[0], pairs[1]
    return _Resolution(avant.code, avant.puissance_kva, apres.code, apres.puissance_kva)


def _from_single_pair(folded: str, pairs: List[TypePair]) -> Optional[_Resolution]:
    if len(pairs) != 1:
        return None
    avant = pairs[0]
    return _Resolution(avant.code, avant.puissance_kva, None, type_apres_power(folded))


def _from_de_type_phrase(folded: str, pairs: List[TypePair]) -> _Resolution:
    avant_code, avant_kva = None, None
    match = DE_TYPE_RE.search(folded)
    if match:
        window = folded[match.end():match.end() + DE_TYPE_WINDOW]
        avant_code, avant_kva = normalize_type_poste(window), first_palier(window)
    return _Resolution(avant_code, avant_kva, None, type_apres_power(folded))


RESOLUTION_STRATEGIES = (_from_two_pairs, _from_single_pair, _from_de_type_phrase)


# ============ Travaux ============

def extract_first_poste_block(text: str) -> Optional[str]:
    block = first_block(
        text,
        EVT_START_RE,
        end_anchors=((EVT_END_RE, True),),
        fallback_length=POSTE_BLOCK_FALLBACK_CHARS,
    )
    return block.text if block else None


def extract_poste_dp_travaux(text: str) -> Optional[PosteDpTravaux]:
    bloc = extract_first_poste_block(text)
    if not bloc:
        return None

    folded = fold_accents(bloc)

    match_op = EVT_START_RE.search(folded)
    operation = OPERATIONS.get(match_op.group(1).lower()) if match_op else None
    operation_secondaire = (
        "adaptation"
        if operation == "deplacement" and ET_ADAPTATION_RE.search(folded)
        else None
    )

    match_apres = TYPE_APRES_RE.search(folded)
    type_apres_raw = (
        match_apres.group("type").strip().upper()
        if match_apres else None
    )

    pairs = build_type_power_pairs(bloc)
    logger.debug(f"Poste DP: {len(pairs)} couple(s) type/palier")
    resolution = first_satisfying(RESOLUTION_STRATEGIES, folded, pairs)

    apres_code = resolution.apres_code
    if apres_code is None and type_apres_raw:
        apres_code = normalize_type_poste(type_apres_raw)

    travaux = PosteDpTravaux(
        operation_principale=operation,
        operation_secondaire=operation_secondaire,
        type_avant=TypeAvant(code=resolution.avant_code, puissance_kva=resolution.avant_kva),
        type_apres=TypeApres(code=apres_code, raw=type_apres_raw, puissance_kva=resolution.apres_kva),
    )
    return None if travaux.is_empty() else travaux
