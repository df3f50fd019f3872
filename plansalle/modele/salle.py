from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from ..erreurs import ErreurEntree
from .position import Position
from .siege import INDICE_MAX, identifiant_siege, position_siege

logger = logging.getLogger(__name__)

DIMENSION_MAX: int = INDICE_MAX + 1
TAILLE_CASE_DEFAUT: int = 42
TAILLE_CASE_MIN: int = 28
TAILLE_CASE_MAX: int = 64


class TypeCase(str, Enum):
    """Classification exclusive d'une case de la grille."""

    VIDE = "empty"
    SIEGE = "seat"
    BUREAU = "teacher"
    BLOQUEE = "blocked"


class Salle:
    """
    Modélise une salle rectangulaire de `rangees × colonnes` cases.

    Chaque case est exactement d'un type : vide, siège, bureau (enseignant)
    ou bloquée. Les sièges portent un identifiant dérivé de leur case
    (voir `identifiant_siege`), ce qui rend la correspondance réversible
    sans table de correspondance.

    `taille_case` ne sert qu'à l'affichage ; le solveur l'ignore.

    Exemple :
        salle = Salle(2, 3)
        salle.classer_case(0, 1, TypeCase.BUREAU)
        salle.classer_case(1, 0, TypeCase.SIEGE)   # -> « S01_00 »
    """

    def __init__(self, rangees: int, colonnes: int, taille_case: int = TAILLE_CASE_DEFAUT) -> None:
        self._verifier_dimensions(rangees, colonnes)
        self._rangees: int = int(rangees)
        self._colonnes: int = int(colonnes)
        self.taille_case: int = int(taille_case)
        # dictionnaires utilisés comme ensembles ordonnés (ordre d'insertion stable)
        self._bloquees: Dict[Position, None] = {}
        self._bureau: Dict[Position, None] = {}
        self._sieges: Dict[Position, str] = {}

    # --- Accès de base -----------------------------------------------------

    @property
    def rangees(self) -> int:
        return self._rangees

    @property
    def colonnes(self) -> int:
        return self._colonnes

    def dans_la_grille(self, r: int, c: int) -> bool:
        """Indique si (r, c) appartient à [0, rangees) × [0, colonnes)."""
        return 0 <= r < self._rangees and 0 <= c < self._colonnes

    def type_case(self, r: int, c: int) -> TypeCase:
        """Retourne la classification de la case (r, c)."""
        p = Position(r, c)
        if p in self._sieges:
            return TypeCase.SIEGE
        if p in self._bureau:
            return TypeCase.BUREAU
        if p in self._bloquees:
            return TypeCase.BLOQUEE
        return TypeCase.VIDE

    def siege_en(self, r: int, c: int) -> Optional[str]:
        """Identifiant du siège en (r, c), ou `None` si la case n'est pas un siège."""
        return self._sieges.get(Position(r, c))

    def contient_siege(self, identifiant: str) -> bool:
        """Indique si `identifiant` désigne un siège existant de la salle."""
        pos: Optional[Position] = position_siege(identifiant)
        return pos is not None and self._sieges.get(pos) == identifiant

    def identifiants_sieges(self) -> List[str]:
        """Liste des identifiants de sièges, dans l'ordre de création."""
        return list(self._sieges.values())

    def nombre_sieges(self) -> int:
        return len(self._sieges)

    def positions_bureau(self) -> List[Position]:
        """Cases occupées par le bureau de l'enseignant."""
        return list(self._bureau)

    def positions_bloquees(self) -> List[Position]:
        return list(self._bloquees)

    # --- Édition -----------------------------------------------------------

    def classer_case(self, r: int, c: int, type_case: TypeCase) -> None:
        """
        Reclasse la case (r, c). Les classifications sont exclusives :
        la case est d'abord retirée de toutes les autres catégories.
        """
        if not self.dans_la_grille(r, c):
            raise ErreurEntree(f"Case ({r},{c}) hors de la salle {self._rangees}x{self._colonnes}")
        type_case = TypeCase(type_case)
        p = Position(r, c)

        if type_case is not TypeCase.SIEGE:
            self._sieges.pop(p, None)
        if type_case is not TypeCase.BUREAU:
            self._bureau.pop(p, None)
        if type_case is not TypeCase.BLOQUEE:
            self._bloquees.pop(p, None)

        if type_case is TypeCase.SIEGE:
            self._sieges[p] = self._sieges.get(p) or identifiant_siege(r, c)
        elif type_case is TypeCase.BUREAU:
            self._bureau[p] = None
        elif type_case is TypeCase.BLOQUEE:
            self._bloquees[p] = None

    def redimensionner(self, rangees: int, colonnes: int) -> None:
        """
        Change les dimensions et élague les cases sorties de la grille
        (bloquées, bureau et sièges). Les identifiants conservés ne sont
        jamais recalculés.
        """
        self._verifier_dimensions(rangees, colonnes)
        self._rangees = int(rangees)
        self._colonnes = int(colonnes)
        self._bloquees = {p: None for p in self._bloquees if self.dans_la_grille(p.r, p.c)}
        self._bureau = {p: None for p in self._bureau if self.dans_la_grille(p.r, p.c)}
        self._sieges = {p: sid for p, sid in self._sieges.items() if self.dans_la_grille(p.r, p.c)}

    def copie(self) -> "Salle":
        """Copie indépendante (instantané pour une résolution)."""
        autre = Salle(self._rangees, self._colonnes, self.taille_case)
        autre._bloquees = dict(self._bloquees)
        autre._bureau = dict(self._bureau)
        autre._sieges = dict(self._sieges)
        return autre

    # --- Sérialisation -----------------------------------------------------

    def vers_dict(self) -> Dict[str, Any]:
        """Forme JSON : {rows, cols, cellSize, blocked, teacher, seats}."""
        return {
            "rows": self._rangees,
            "cols": self._colonnes,
            "cellSize": self.taille_case,
            "blocked": [p.cle() for p in self._bloquees],
            "teacher": [p.cle() for p in self._bureau],
            "seats": [[p.cle(), sid] for p, sid in self._sieges.items()],
        }

    @classmethod
    def depuis_dict(cls, data: Mapping[str, Any]) -> "Salle":
        """
        Reconstruit une salle depuis sa forme JSON.

        - accepte l'ancienne clé `cell` pour la taille d'affichage ;
        - borne la taille d'affichage à [28, 64] ;
        - ignore (avec un avertissement) les cases hors de la grille ;
        - refuse un siège dont l'identifiant ne correspond pas à sa case.
        """
        if not isinstance(data, Mapping):
            raise ErreurEntree("« room » doit être un objet JSON")
        listes: Dict[str, List[Any]] = {}
        for cle in ("blocked", "teacher", "seats"):
            valeur = data.get(cle) or []
            if not isinstance(valeur, (list, tuple)):
                raise ErreurEntree(f"« room.{cle} » doit être une liste")
            listes[cle] = list(valeur)

        try:
            rangees = int(data.get("rows", 8))
            colonnes = int(data.get("cols", 10))
            taille_brute = int(data.get("cellSize", data.get("cell", TAILLE_CASE_DEFAUT)) or TAILLE_CASE_DEFAUT)
        except (TypeError, ValueError) as exc:
            raise ErreurEntree(f"Dimensions de salle invalides: {exc}") from exc
        taille = max(TAILLE_CASE_MIN, min(TAILLE_CASE_MAX, taille_brute))
        salle = cls(rangees, colonnes, taille)

        ignorees: int = 0
        for type_case, cles in ((TypeCase.BLOQUEE, listes["blocked"]),
                                (TypeCase.BUREAU, listes["teacher"])):
            for cle in cles:
                p = Position.depuis_cle(cle)
                if not salle.dans_la_grille(p.r, p.c):
                    ignorees += 1
                    continue
                salle.classer_case(p.r, p.c, type_case)

        for entree in listes["seats"]:
            try:
                cle, sid = entree
            except (TypeError, ValueError) as exc:
                raise ErreurEntree(f"Entrée de siège invalide: {entree!r}") from exc
            p = Position.depuis_cle(cle)
            if not salle.dans_la_grille(p.r, p.c):
                ignorees += 1
                continue
            if str(sid) != identifiant_siege(p.r, p.c):
                raise ErreurEntree(f"Identifiant de siège {sid!r} incohérent avec la case {cle!r}")
            salle.classer_case(p.r, p.c, TypeCase.SIEGE)

        if ignorees:
            logger.warning("%d case(s) hors de la grille %dx%d ignorée(s)", ignorees, rangees, colonnes)
        return salle

    @staticmethod
    def _verifier_dimensions(rangees: int, colonnes: int) -> None:
        if not (1 <= int(rangees) <= DIMENSION_MAX and 1 <= int(colonnes) <= DIMENSION_MAX):
            raise ErreurEntree(f"Dimensions {rangees}x{colonnes} hors de [1, {DIMENSION_MAX}]")

    def __str__(self) -> str:
        """
        Représentation texte simple, rangée par rangée.
        « # » bloquée, « T » bureau, « o » siège, « . » vide.
        """
        symboles = {TypeCase.BLOQUEE: "#", TypeCase.BUREAU: "T", TypeCase.SIEGE: "o", TypeCase.VIDE: "."}
        return "\n".join(
            "".join(symboles[self.type_case(r, c)] for c in range(self._colonnes))
            for r in range(self._rangees)
        )
