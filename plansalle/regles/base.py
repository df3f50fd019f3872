from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from ..modele.eleve import Eleve
from ..modele.position import Position
from ..modele.siege import position_siege
from .types import TypeRegle

# Une seule règle dure violée doit coûter plus que toutes les règles souples
# réunies (poids et distances restent de petits entiers).
MULTIPLICATEUR_DUR: int = 1_000_000

Affectation = Mapping[str, str]


class Metrique(str, Enum):
    """Distances disponibles entre deux cases."""

    MANHATTAN = "manhattan"
    CHEBYSHEV = "chebyshev"
    EUCLIDIENNE2 = "euclidean2"

    def distance(self, a: Position, b: Position) -> int:
        dr: int = abs(a.r - b.r)
        dc: int = abs(a.c - b.c)
        if self is Metrique.MANHATTAN:
            return dr + dc
        if self is Metrique.CHEBYSHEV:
            return max(dr, dc)
        return dr * dr + dc * dc


@dataclass(frozen=True)
class ContexteEvaluation:
    """Contexte statique d'une évaluation : élèves et cases du bureau."""

    eleves: Tuple[Eleve, ...]
    bureau: Tuple[Position, ...]

    @staticmethod
    def position(affectation: Affectation, identifiant: str) -> Optional[Position]:
        """Case occupée par l'élève, ou `None` s'il n'est pas placé."""
        sid: Optional[str] = affectation.get(identifiant)
        if not sid:
            return None
        return position_siege(sid)


class Regle(ABC):
    """Classe de base des règles de placement.

    Chaque règle est *dure* (violation pénalisée par `MULTIPLICATEUR_DUR`)
    ou *souple* (pénalité × `poids`).

    Méthodes à implémenter
    ----------------------
    - `type_regle()` : retourne un membre de `TypeRegle`.
    - `penalite(affectation, ctx)` : pénalité brute, entière et >= 0.
    - `texte_humain()` : texte lisible pour l'interface.
    - `_champs()` : champs spécifiques pour `code_machine()`.
    """

    def __init__(self, *, nom: str = "", dure: bool = False, poids: int = 1) -> None:
        self.nom: str = str(nom or "")
        self.dure: bool = bool(dure)
        self.poids: int = max(1, int(poids))

    @abstractmethod
    def type_regle(self) -> TypeRegle:
        """Retourne le type logique de la règle."""
        raise NotImplementedError

    @abstractmethod
    def penalite(self, affectation: Affectation, ctx: ContexteEvaluation) -> int:
        """Pénalité brute sous l'affectation (0 si un élève concerné n'est pas placé)."""
        raise NotImplementedError

    @abstractmethod
    def texte_humain(self) -> str:
        """Texte concis, lisible par un humain."""
        raise NotImplementedError

    @abstractmethod
    def _champs(self) -> Dict[str, Any]:
        raise NotImplementedError

    def contribution(self, affectation: Affectation, ctx: ContexteEvaluation) -> int:
        """Pénalité pondérée : 0, `p × MULTIPLICATEUR_DUR` (dure) ou `p × poids`."""
        p: int = self.penalite(affectation, ctx)
        if p <= 0:
            return 0
        return p * MULTIPLICATEUR_DUR if self.dure else p * self.poids

    def implique(self) -> Sequence[str]:
        """Identifiants des élèves nommés par la règle."""
        return []

    def code_machine(self) -> Dict[str, Any]:
        """Représentation sérialisable, stable et exploitable par des outils."""
        return {
            "type": self.type_regle().value,
            "name": self.nom or self.type_regle().value,
            "hard": self.dure,
            "weight": self.poids,
            **self._champs(),
        }

    def __repr__(self) -> str:  # pragma: no cover - représentation
        return f"{type(self).__name__}({self.code_machine()!r})"


class RegleInconnue(Regle):
    """Règle d'un type non reconnu : acceptée, conservée, pénalité toujours nulle."""

    def __init__(self, code: Mapping[str, Any]) -> None:
        super().__init__(nom=str(code.get("name") or ""), dure=bool(code.get("hard", False)), poids=1)
        self.code: Dict[str, Any] = dict(code)

    def type_regle(self) -> TypeRegle:
        return TypeRegle.INCONNUE

    def penalite(self, affectation: Affectation, ctx: ContexteEvaluation) -> int:
        return 0

    def texte_humain(self) -> str:
        return f"Règle ignorée (type inconnu {self.code.get('type')!r})"

    def _champs(self) -> Dict[str, Any]:
        return {}

    def code_machine(self) -> Dict[str, Any]:
        return dict(self.code)


def manque(seuil: int, valeur: int) -> int:
    """Écart positif `seuil - valeur`, ou 0 si le seuil est atteint."""
    return seuil - valeur if valeur < seuil else 0
