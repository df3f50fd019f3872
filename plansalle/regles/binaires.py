from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from .base import Affectation, ContexteEvaluation, Metrique, Regle, manque
from .types import TypeRegle
from ..modele.position import Position


class _RegleBinaire(Regle):
    """Règle portant sur une paire d'élèves (A, B)."""

    def __init__(self, a: str, b: str, **options: Any) -> None:
        super().__init__(**options)
        self.a: str = str(a)
        self.b: str = str(b)

    def implique(self) -> Sequence[str]:
        return [self.a, self.b]

    def _positions(self, affectation: Affectation) -> tuple[Optional[Position], Optional[Position]]:
        return ContexteEvaluation.position(affectation, self.a), ContexteEvaluation.position(affectation, self.b)


class DistanceMinimale(_RegleBinaire):
    """Exige que A et B soient séparés d'au moins `d` ; pénalité = d - distance."""

    def __init__(self, a: str, b: str, d: int, metrique: Metrique = Metrique.MANHATTAN, **options: Any) -> None:
        super().__init__(a, b, **options)
        self.d: int = int(d)
        self.metrique: Metrique = Metrique(metrique)

    def type_regle(self) -> TypeRegle:
        return TypeRegle.DISTANCE_MIN

    def penalite(self, affectation: Affectation, ctx: ContexteEvaluation) -> int:
        pa, pb = self._positions(affectation)
        if pa is None or pb is None:
            return 0
        return manque(self.d, self.metrique.distance(pa, pb))

    def texte_humain(self) -> str:
        return f"{self.a} et {self.b} doivent être éloignés d'au moins {self.d} ({self.metrique.value})"

    def _champs(self) -> Dict[str, Any]:
        return {"a": self.a, "b": self.b, "d": self.d, "metric": self.metrique.value}


class DistanceMaximale(_RegleBinaire):
    """Exige que A et B soient à au plus `d` ; pénalité = distance - d."""

    def __init__(self, a: str, b: str, d: int, metrique: Metrique = Metrique.MANHATTAN, **options: Any) -> None:
        super().__init__(a, b, **options)
        self.d: int = int(d)
        self.metrique: Metrique = Metrique(metrique)

    def type_regle(self) -> TypeRegle:
        return TypeRegle.DISTANCE_MAX

    def penalite(self, affectation: Affectation, ctx: ContexteEvaluation) -> int:
        pa, pb = self._positions(affectation)
        if pa is None or pb is None:
            return 0
        dist: int = self.metrique.distance(pa, pb)
        return dist - self.d if dist > self.d else 0

    def texte_humain(self) -> str:
        return f"{self.a} et {self.b} doivent être à au plus {self.d} ({self.metrique.value})"

    def _champs(self) -> Dict[str, Any]:
        return {"a": self.a, "b": self.b, "d": self.d, "metric": self.metrique.value}


class PasAdjacents(_RegleBinaire):
    """Interdit que A et B occupent des cases voisines, diagonales comprises (Chebyshev < 2)."""

    def type_regle(self) -> TypeRegle:
        return TypeRegle.PAS_ADJACENTS

    def penalite(self, affectation: Affectation, ctx: ContexteEvaluation) -> int:
        pa, pb = self._positions(affectation)
        if pa is None or pb is None:
            return 0
        return 0 if Metrique.CHEBYSHEV.distance(pa, pb) >= 2 else 1

    def texte_humain(self) -> str:
        return f"{self.a} et {self.b} ne doivent pas être voisins"

    def _champs(self) -> Dict[str, Any]:
        return {"a": self.a, "b": self.b}
