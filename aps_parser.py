"""
Parsing du texte OCR d'un APS (avant-projet sommaire) de raccordement

    record = parse(texte_ocr)
    record.to_dict()  # structure JSON

Chaque extracteur est indépendant : une absence (ou une erreur inattendue)
dans l'un n'empêche pas les autres de produire leur résultat.
"""
import logging
from typing import Any, Callable, Dict

from models import Affaire, PosteDp, ProjectRecord
from extractors import (
    parse_poste_numero,
    derive_insee,
    extract_poste_dp_travaux,
    extract_extensions_hta,
    extract_reprises_bt,
    extract_raccordement_bt,
    extract_pdls,
    extract_affaire_num,
    extract_global_p_kva,
)

logger = logging.getLogger(__name__)


def _guarded(extractor: Callable[[str], Any], text: str, default: Any) -> Any:
    """Exécute un extracteur ; en cas d'erreur inattendue, log et valeur vide"""
    try:
        return extractor(text)
    except Exception as e:
        name = getattr(extractor, "__name__", repr(extractor))
        logger.warning(f"Extracteur {name} en échec: {e}")
        return default


def parse(text) -> ProjectRecord:
    """Texte OCR → ProjectRecord (champs à None / listes vides si rien trouvé)"""
    text = "" if text is None else str(text)

    poste = _guarded(parse_poste_numero, text, None)
    travaux = _guarded(extract_poste_dp_travaux, text, None)
    hta = _guarded(extract_extensions_hta, text, [])
    reprises = _guarded(extract_reprises_bt, text, [])
    raccordement = _guarded(extract_raccordement_bt, text, None)
    pdls = _guarded(extract_pdls, text, [])

    # Affaire alignée sur le 1er PDL s'il existe
    if pdls:
        affaire = Affaire(num=pdls[0].num_affaire, p_kva=pdls[0].p_prod_kva)
    else:
        affaire = Affaire(
            num=_guarded(extract_affaire_num, text, None),
            p_kva=_guarded(extract_global_p_kva, text, None),
        )

    return ProjectRecord(
        affaire=affaire,
        poste_dp=PosteDp(
            numero=poste,
            insee=derive_insee(poste) if poste else None,
            travaux=travaux,
        ),
        hta_extensions=tuple(hta),
        bt_reprises=tuple(reprises),
        bt_raccordement=raccordement,
        pdls=tuple(pdls),
    )


def parse_to_dict(text) -> Dict[str, Any]:
    return parse(text).to_dict()
