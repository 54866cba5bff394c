"""
Extraction de blocs bornés par des ancres

Un bloc commence sur une ancre de début et s'arrête sur la première ancre de
fin qui la suit. Les recherches se font sur une copie du texte sans accents
(même longueur), les découpes sur le texte d'origine.
"""
import re
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Pattern

from normalization import fold_accents

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Block:
    start: int
    end: int
    text: str


def anchor_regex(phrase: str) -> str:
    """'Extension du réseau HTA' → 'Extension\\s+du\\s+reseau\\s+HTA'"""
    return r"\s+".join(re.escape(word) for word in fold_accents(phrase).split())


def compile_anchor(phrase: str) -> Pattern:
    return re.compile(anchor_regex(phrase), re.I)


def compile_anchors(*phrases: str) -> Pattern:
    """Première occurrence de l'une des ancres, en mots entiers"""
    alternatives = "|".join(anchor_regex(p) for p in phrases)
    return re.compile(rf"\b(?:{alternatives})\b", re.I)


def extract_blocks(
    text: str,
    start_re: Pattern,
    end_re: Pattern,
    include_end: bool = True,
    fallback_length: Optional[int] = None,
) -> List[Block]:
    """
    Un bloc par occurrence de l'ancre de début, dans l'ordre du document.

    Sans ancre de fin : bloc de `fallback_length` caractères si fourni,
    sinon l'occurrence est ignorée.
    """
    if not text:
        return []

    folded = fold_accents(text)
    blocks = []

    for start_match in start_re.finditer(folded):
        start = start_match.start()
        end_match = end_re.search(folded, start_match.end())

        if end_match:
            end = end_match.end() if include_end else end_match.start()
        elif fallback_length:
            end = min(len(text), start + fallback_length)
        else:
            continue

        blocks.append(Block(start, end, text[start:end]))

    logger.debug(f"{len(blocks)} bloc(s) pour l'ancre {start_re.pattern!r}")
    return blocks


def first_block(
    text: str,
    start_re: Pattern,
    end_anchors: Sequence[Tuple[Pattern, bool]],
    fallback_length: int,
) -> Optional[Block]:
    """
    Bloc démarrant à la première occurrence de `start_re`.

    `end_anchors` est essayée dans l'ordre : (motif, fin incluse ?). La première
    ancre trouvée borne le bloc ; à défaut, `fallback_length` caractères.
    """
    if not text:
        return None

    folded = fold_accents(text)
    start_match = start_re.search(folded)
    if not start_match:
        return None

    start = start_match.start()
    end = min(len(text), start + fallback_length)

    for end_re, include_end in end_anchors:
        end_match = end_re.search(folded, start)
        if end_match:
            end = end_match.end() if include_end else end_match.start()
            break

    return Block(start, end, text[start:end])
