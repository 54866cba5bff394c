"""
Modèles de données du projet

Objets valeur immuables produits par une extraction. Chaque modèle expose
`to_dict()` qui renvoie une structure JSON (str, int, bool, None, dict, list).
"""
from dataclasses import dataclass, field, asdict
from typing import Optional, Tuple, Dict, Any


LIAISON_RAS = "RAS"

VENTE_SURPLUS = "vente_surplus"
VENTE_TOTALE = "vente_totale"

DEPART_DIRECT = "depart_direct"
DERIVATION = "derivation"


def shape_single_or_many(key_singular: str, key_plural: str, items) -> Dict[str, Any]:
    """0 élément → {singulier: None}, 1 → {singulier: item}, 2+ → {pluriel: [items]}"""
    items = [item.to_dict() for item in (items or ())]
    if not items:
        return {key_singular: None}
    if len(items) == 1:
        return {key_singular: items[0]}
    return {key_plural: items}


@dataclass(frozen=True)
class AccessorySet:
    """Jonctions et remontées aéro-souterraines autour d'un câble"""
    jonctions: int = 0
    remontees_aero_souterraines: int = 0
    ras: bool = False

    def to_dict(self):
        return asdict(self)


@dataclass(frozen=True)
class CableSpec:
    """Couple longueur + section repéré dans un bloc"""
    longueur_m: int
    section: str
    liaison: str = LIAISON_RAS
    # Internes au pairage, jamais sérialisés
    has_plus_1x: bool = field(default=False, compare=False, repr=False)
    span: Tuple[int, int] = field(default=(0, 0), compare=False, repr=False)

    def to_dict(self):
        return {"longueur_m": self.longueur_m, "section": self.section, "liaison": self.liaison}


@dataclass(frozen=True)
class HtaExtension:
    """Tronçon d'extension du réseau HTA"""
    longueur_m: int
    section: str
    liaison: str = LIAISON_RAS
    accessoires: AccessorySet = field(default_factory=AccessorySet)

    @classmethod
    def from_cable(cls, cable: CableSpec, accessoires: AccessorySet) -> "HtaExtension":
        return cls(
            longueur_m=cable.longueur_m,
            section=cable.section,
            liaison=cable.liaison,
            accessoires=accessoires,
        )

    def to_dict(self):
        return asdict(self)


@dataclass(frozen=True)
class BtReprise:
    """Tronçon de reprise du réseau BT existant"""
    longueur_m: int
    section: str
    protection_a: Optional[int] = None
    liaison: str = LIAISON_RAS
    accessoires: AccessorySet = field(default_factory=AccessorySet)

    @classmethod
    def from_cable(cls, cable: CableSpec, accessoires: AccessorySet,
                   protection_a: Optional[int] = None) -> "BtReprise":
        return cls(
            longueur_m=cable.longueur_m,
            section=cable.section,
            protection_a=protection_a,
            liaison=cable.liaison,
            accessoires=accessoires,
        )

    def to_dict(self):
        return asdict(self)


@dataclass(frozen=True)
class BtRaccordement:
    """Raccordement BT du producteur"""
    type_raccordement: Optional[str] = None  # depart_direct, derivation
    section: Optional[str] = None
    longueur_m: Optional[int] = None
    accessoires: AccessorySet = field(default_factory=AccessorySet)

    def to_dict(self):
        return asdict(self)


@dataclass(frozen=True)
class TypeAvant:
    code: Optional[str] = None
    puissance_kva: Optional[int] = None


@dataclass(frozen=True)
class TypeApres:
    code: Optional[str] = None
    raw: Optional[str] = None
    puissance_kva: Optional[int] = None


@dataclass(frozen=True)
class PosteDpTravaux:
    """Travaux prévus sur le poste DP (type et puissance avant/après)"""
    operation_principale: Optional[str] = None  # deplacement, creation, adaptation, mutation
    operation_secondaire: Optional[str] = None  # adaptation
    type_avant: TypeAvant = field(default_factory=TypeAvant)
    type_apres: TypeApres = field(default_factory=TypeApres)

    def is_empty(self) -> bool:
        return (
            self.operation_principale is None
            and self.type_avant.code is None
            and self.type_apres.raw is None
            and self.type_avant.puissance_kva is None
            and self.type_apres.puissance_kva is None
        )

    def to_dict(self):
        return asdict(self)


@dataclass(frozen=True)
class PosteDp:
    numero: Optional[str] = None
    insee: Optional[str] = None
    travaux: Optional[PosteDpTravaux] = None

    def to_dict(self):
        return {
            "numero": self.numero,
            "insee": self.insee,
            "travaux": self.travaux.to_dict() if self.travaux else None,
        }


@dataclass(frozen=True)
class Pdl:
    """Point de livraison d'une affaire (dossiers groupés)"""
    mode: str  # vente_surplus, vente_totale
    num_affaire: str
    nom_dossier: Optional[str] = None
    p_prod_kva: Optional[int] = None
    type_raccordement: Optional[str] = None
    prm: Optional[str] = None
    p_conso_kva: Optional[int] = None

    def to_dict(self):
        data = {
            "mode": self.mode,
            "num_affaire": self.num_affaire,
            "nom_dossier": self.nom_dossier,
            "p_prod_kva": self.p_prod_kva,
            "type_raccordement": self.type_raccordement,
        }
        # PRM et puissance de consommation n'existent qu'en vente de surplus
        if self.mode == VENTE_SURPLUS:
            data["prm"] = self.prm
            data["p_conso_kva"] = self.p_conso_kva
        return data


@dataclass(frozen=True)
class Affaire:
    num: Optional[str] = None
    p_kva: Optional[int] = None

    def to_dict(self):
        return asdict(self)


@dataclass(frozen=True)
class ProjectRecord:
    """Résultat complet du parsing d'un APS"""
    affaire: Affaire = field(default_factory=Affaire)
    poste_dp: PosteDp = field(default_factory=PosteDp)
    hta_extensions: Tuple[HtaExtension, ...] = ()
    bt_reprises: Tuple[BtReprise, ...] = ()
    bt_raccordement: Optional[BtRaccordement] = None
    pdls: Tuple[Pdl, ...] = ()

    def to_dict(self):
        return {
            "affaire": self.affaire.to_dict(),
            "poste_dp": self.poste_dp.to_dict(),
            "hta": shape_single_or_many("extension", "extensions", self.hta_extensions),
            "bt": {
                **shape_single_or_many("reprise", "reprises", self.bt_reprises),
                "raccordement": self.bt_raccordement.to_dict() if self.bt_raccordement else None,
            },
            "pdls": [pdl.to_dict() for pdl in self.pdls],
        }

    def to_summary_row(self) -> Dict[str, Any]:
        """Ligne à plat pour la synthèse CSV"""
        travaux = self.poste_dp.travaux
        return {
            "affaire_num": self.affaire.num,
            "affaire_p_kva": self.affaire.p_kva,
            "poste_numero": self.poste_dp.numero,
            "insee": self.poste_dp.insee,
            "operation": travaux.operation_principale if travaux else None,
            "type_avant": travaux.type_avant.code if travaux else None,
            "puissance_avant_kva": travaux.type_avant.puissance_kva if travaux else None,
            "type_apres": travaux.type_apres.code if travaux else None,
            "puissance_apres_kva": travaux.type_apres.puissance_kva if travaux else None,
            "n_hta": len(self.hta_extensions),
            "n_bt_reprises": len(self.bt_reprises),
            "raccordement": self.bt_raccordement.type_raccordement if self.bt_raccordement else None,
            "n_pdls": len(self.pdls),
        }
