"""
Comptage des accessoires autour d'un câble
"""
import re
import logging
from typing import Optional, Pattern, Tuple

from models import AccessorySet
from normalization import fold_accents, to_int

logger = logging.getLogger(__name__)

WINDOW_BEFORE = 500
WINDOW_AFTER = 600

JONCTION_RE = re.compile(r"(?:via|par|avec)?\s*(?:(?P<n>\d+)\s+)?jonctions?\b", re.I)
REMONTEE_RE = re.compile(
    r"(?:via|par|avec)?\s*(?:(?P<n>\d+)\s+)?remontees?\s+aero[-\s]?souterraines?\b",
    re.I,
)
RAS_RE = re.compile(r"\bRAS\b", re.I)


def _max_count(pattern: Pattern, text: str) -> int:
    """Plus grand effectif cité (1 si absent) : les mentions se répètent, elles ne s'additionnent pas"""
    best = 0
    for match in pattern.finditer(text):
        count = to_int(match.group("n")) if match.group("n") else 1
        if count is not None:
            best = max(best, count)
    return best


def count_accessories(window: Optional[str]) -> AccessorySet:
    if not window:
        return AccessorySet()

    folded = fold_accents(window)
    return AccessorySet(
        jonctions=_max_count(JONCTION_RE, folded),
        remontees_aero_souterraines=_max_count(REMONTEE_RE, folded),
        ras=bool(RAS_RE.search(folded)),
    )


def local_window(bloc: str, span: Tuple[int, int],
                 before: int = WINDOW_BEFORE, after: int = WINDOW_AFTER) -> str:
    """Fenêtre [début - before, fin + after] autour d'un span, bornée au bloc"""
    if not bloc or not span:
        return bloc or ""
    start, end = span
    return bloc[max(0, start - before):min(len(bloc), end + after)]
