from __future__ import annotations

from typing import Any, Callable, Dict, Mapping, Optional

from ..erreurs import ErreurEntree
from .base import Regle, RegleInconnue
from .types import TypeRegle

FabriqueRegle = Callable[[Mapping[str, Any]], Regle]

_REGISTRE: Dict[TypeRegle, FabriqueRegle] = {}


def enregistrer(type_r: TypeRegle):
    """Décorateur enregistrant une fabrique pour un `TypeRegle`."""

    def deco(fabrique: FabriqueRegle) -> FabriqueRegle:
        _REGISTRE[type_r] = fabrique
        return fabrique

    return deco


def fabrique_de(type_r: TypeRegle) -> Optional[FabriqueRegle]:
    """Retourne la fabrique enregistrée pour `type_r`, ou `None` si absente."""
    return _REGISTRE.get(type_r)


def regle_depuis_code(code: Mapping[str, Any]) -> Regle:
    """Reconstitue une règle à partir d'un dictionnaire « code_machine ».

    Un type inconnu (ou sans fabrique) donne une `RegleInconnue` de pénalité
    nulle, pour rester compatible avec des documents plus récents ou plus
    anciens. Une règle connue mal formée lève `ErreurEntree`.
    """
    type_valeur: str = str(code.get("type", ""))
    try:
        type_r: TypeRegle = TypeRegle(type_valeur)
    except ValueError:
        return RegleInconnue(code)

    fab: Optional[FabriqueRegle] = _REGISTRE.get(type_r)
    if fab is None:
        return RegleInconnue(code)
    try:
        return fab(code)
    except (KeyError, TypeError, ValueError) as exc:
        raise ErreurEntree(f"Règle {type_valeur} invalide ({code.get('name') or '?'}): {exc!r}") from exc
