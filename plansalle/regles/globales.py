from __future__ import annotations

from itertools import combinations
from typing import Any, Dict, List

from .base import Affectation, ContexteEvaluation, Metrique, Regle, manque
from .types import TypeRegle
from ..modele.position import Position


class SeparationEtiquette(Regle):
    """Disperse les élèves portant `etiquette`.

    Pénalité = somme, sur chaque paire non ordonnée d'élèves placés portant
    l'étiquette, de `max(0, min_d - distance)`.
    """

    def __init__(self, etiquette: str, min_d: int, metrique: Metrique = Metrique.MANHATTAN, **options: Any) -> None:
        super().__init__(**options)
        self.etiquette: str = str(etiquette)
        self.min_d: int = int(min_d)
        self.metrique: Metrique = Metrique(metrique)

    def type_regle(self) -> TypeRegle:
        return TypeRegle.SEPARATION_ETIQUETTE

    def penalite(self, affectation: Affectation, ctx: ContexteEvaluation) -> int:
        places: List[Position] = []
        for e in ctx.eleves:
            if not e.porte(self.etiquette):
                continue
            pos = ctx.position(affectation, e.identifiant())
            if pos is not None:
                places.append(pos)
        return sum(manque(self.min_d, self.metrique.distance(pa, pb)) for pa, pb in combinations(places, 2))

    def texte_humain(self) -> str:
        return f"Élèves « {self.etiquette} » séparés d'au moins {self.min_d} ({self.metrique.value})"

    def _champs(self) -> Dict[str, Any]:
        return {"tag": self.etiquette, "min_d": self.min_d, "metric": self.metrique.value}
