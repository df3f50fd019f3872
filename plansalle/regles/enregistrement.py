from __future__ import annotations

from typing import Any, Dict, Mapping

from .base import Metrique
from .binaires import DistanceMaximale, DistanceMinimale, PasAdjacents
from .globales import SeparationEtiquette
from .registre import enregistrer
from .types import TypeRegle
from .unaires import DoitEtreDansRangees, DoitEtreSurSieges, PrefereDevant, PrefereLoinDuBureau


def _options(code: Mapping[str, Any]) -> Dict[str, Any]:
    """Champs communs : nom, dureté et poids (1 par défaut, jamais < 1)."""
    poids_brut = code.get("weight")
    return {
        "nom": str(code.get("name") or code.get("type") or ""),
        "dure": bool(code.get("hard", False)),
        "poids": 1 if poids_brut is None else max(1, int(poids_brut)),
    }


def _metrique(code: Mapping[str, Any]) -> Metrique:
    return Metrique(str(code.get("metric") or Metrique.MANHATTAN.value).strip().lower())


@enregistrer(TypeRegle.DISTANCE_MIN)
def _fab_distance_min(code: Mapping[str, Any]):
    return DistanceMinimale(a=str(code["a"]), b=str(code["b"]), d=int(code["d"]),
                            metrique=_metrique(code), **_options(code))


@enregistrer(TypeRegle.DISTANCE_MAX)
def _fab_distance_max(code: Mapping[str, Any]):
    return DistanceMaximale(a=str(code["a"]), b=str(code["b"]), d=int(code["d"]),
                            metrique=_metrique(code), **_options(code))


@enregistrer(TypeRegle.PAS_ADJACENTS)
def _fab_pas_adjacents(code: Mapping[str, Any]):
    return PasAdjacents(a=str(code["a"]), b=str(code["b"]), **_options(code))


@enregistrer(TypeRegle.PREFERE_DEVANT)
def _fab_prefere_devant(code: Mapping[str, Any]):
    return PrefereDevant(eleve=str(code["pupil_id"]), k=int(code["k"]), **_options(code))


@enregistrer(TypeRegle.LOIN_DU_BUREAU)
def _fab_loin_du_bureau(code: Mapping[str, Any]):
    return PrefereLoinDuBureau(eleve=str(code["pupil_id"]), min_d=int(code["min_d"]),
                               metrique=_metrique(code), **_options(code))


@enregistrer(TypeRegle.DANS_RANGEES)
def _fab_dans_rangees(code: Mapping[str, Any]):
    return DoitEtreDansRangees(eleve=str(code["pupil_id"]), r_min=int(code["r_min"]),
                               r_max=int(code["r_max"]), **_options(code))


@enregistrer(TypeRegle.SUR_SIEGES)
def _fab_sur_sieges(code: Mapping[str, Any]):
    autorises = code.get("allowed_seat_ids") or []
    if not isinstance(autorises, (list, tuple)):
        raise TypeError("allowed_seat_ids doit être une liste")
    return DoitEtreSurSieges(eleve=str(code["pupil_id"]), sieges_autorises=autorises, **_options(code))


@enregistrer(TypeRegle.SEPARATION_ETIQUETTE)
def _fab_separation(code: Mapping[str, Any]):
    return SeparationEtiquette(etiquette=str(code["tag"]), min_d=int(code["min_d"]),
                               metrique=_metrique(code), **_options(code))
