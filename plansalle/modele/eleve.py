from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional, Union

from ..erreurs import ErreurEntree
from .position import Position


@dataclass(frozen=True)
class FixeSurSiege:
    """Placement imposé par identifiant de siège (ex. « S01_00 »)."""

    siege: str


@dataclass(frozen=True)
class FixeSurCase:
    """Placement imposé par case ; la case doit être un siège au moment du placement."""

    position: Position


PlacementFixe = Union[FixeSurSiege, FixeSurCase]


class Eleve:
    """Modélise un élève plaçable dans un plan de salle.


    Paramètres du constructeur
    --------------------------
    identifiant : str
    Identifiant unique et non vide (ex. « A », « dupont.alice »).
    etiquettes : Iterable[str]
    Étiquettes libres, sans ordre (ex. « talkative »).
    fixe : PlacementFixe | None
    Placement imposé, ou `None` pour un élève déplaçable.
    """

    def __init__(self, identifiant: str, etiquettes: Iterable[str] = (), fixe: Optional[PlacementFixe] = None) -> None:
        ident: str = str(identifiant).strip()
        if not ident:
            raise ErreurEntree("Identifiant d'élève vide")
        self._identifiant: str = ident
        self._etiquettes: FrozenSet[str] = frozenset(str(t) for t in etiquettes)
        self._fixe: Optional[PlacementFixe] = fixe

    def identifiant(self) -> str:
        """Retourne l'identifiant de l'élève."""
        return self._identifiant

    def etiquettes(self) -> FrozenSet[str]:
        """Retourne l'ensemble des étiquettes."""
        return self._etiquettes

    def porte(self, etiquette: str) -> bool:
        return etiquette in self._etiquettes

    def est_etiquete(self) -> bool:
        """Indique si l'élève porte au moins une étiquette."""
        return bool(self._etiquettes)

    def placement_fixe(self) -> Optional[PlacementFixe]:
        """Retourne le placement imposé ou `None`."""
        return self._fixe

    def est_fixe(self) -> bool:
        """Indique si l'élève est fixé (jamais déplacé par le solveur)."""
        return self._fixe is not None

    # --- Sérialisation -----------------------------------------------------

    def vers_dict(self) -> Dict[str, Any]:
        fixe: Optional[Dict[str, Any]] = None
        if isinstance(self._fixe, FixeSurSiege):
            fixe = {"seat": self._fixe.siege}
        elif isinstance(self._fixe, FixeSurCase):
            fixe = {"r": self._fixe.position.r, "c": self._fixe.position.c}
        return {"id": self._identifiant, "tags": sorted(self._etiquettes), "fixed": fixe}

    @classmethod
    def depuis_dict(cls, data: Mapping[str, Any]) -> "Eleve":
        """
        Construit un élève depuis sa forme JSON :
        {id, tags, fixed: null | {seat} | {r, c}} (ancienne clé `pupil_id` acceptée).
        """
        ident = str(data.get("id") or data.get("pupil_id") or "")
        tags_bruts = data.get("tags")
        tags: Iterable[str] = tags_bruts if isinstance(tags_bruts, (list, tuple)) else ()

        fixe: Optional[PlacementFixe] = None
        fixe_brut = data.get("fixed")
        if isinstance(fixe_brut, Mapping):
            if fixe_brut.get("seat"):
                fixe = FixeSurSiege(siege=str(fixe_brut["seat"]))
            elif "r" in fixe_brut and "c" in fixe_brut:
                try:
                    fixe = FixeSurCase(position=Position(int(fixe_brut["r"]), int(fixe_brut["c"])))
                except (TypeError, ValueError) as exc:
                    raise ErreurEntree(f"Placement fixe invalide pour {ident!r}: {fixe_brut!r}") from exc
        return cls(ident, tags, fixe)

    # --- Protocole de comparaison / hachage ---
    def __str__(self) -> str:  # pragma: no cover - représentation
        tags = ",".join(sorted(self._etiquettes))
        return f"{self._identifiant} [{tags}]" if tags else self._identifiant

    def __repr__(self) -> str:  # pragma: no cover - représentation
        return f"Eleve({self._identifiant!r})"

    def __hash__(self) -> int:
        # Hachage sur l'identifiant : unique dans un plan donné
        return hash(self._identifiant)

    def __eq__(self, autre: object) -> bool:
        return isinstance(autre, Eleve) and self._identifiant == autre._identifiant
