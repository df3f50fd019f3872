from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from ..score import Score


@dataclass(frozen=True)
class Progression:
    """Point d'étape transmis au rappel de progression (sans effet sur la recherche)."""

    redemarrage: int
    redemarrages: int
    iteration: int
    iterations: int
    meilleur_score: int
    ruptures_dures: int

    def vers_dict(self) -> Dict[str, int]:
        return {
            "restart": self.redemarrage,
            "restarts": self.redemarrages,
            "i": self.iteration,
            "iters": self.iterations,
            "bestScore": self.meilleur_score,
            "bestHard": self.ruptures_dures,
        }


RappelProgression = Callable[[Progression], Any]
Arret = Callable[[], bool]


class ResultatResolution:
    """Résultat d'une résolution.

    Attributs
    ---------
    affectation : Dict[str, str]
        Meilleure affectation trouvée {élève: siège}.
    score : Score
        Score de cette affectation.
    redemarrages : int
        Nombre de passes de recuit effectuées.
    iterations : int
        Nombre total de mouvements proposés.
    acceptations : int
        Nombre de mouvements acceptés.
    interrompu : bool
        `True` si le prédicat d'arrêt a coupé la recherche.
    """

    def __init__(
        self,
        affectation: Dict[str, str],
        score: Score,
        redemarrages: int = 0,
        iterations: int = 0,
        acceptations: int = 0,
        interrompu: bool = False,
    ) -> None:
        self.affectation: Dict[str, str] = affectation
        self.score: Score = score
        self.redemarrages: int = redemarrages
        self.iterations: int = iterations
        self.acceptations: int = acceptations
        self.interrompu: bool = interrompu

    def vers_dict(self) -> Dict[str, Any]:
        return {
            "assignment": dict(self.affectation),
            "bestScore": self.score.total,
            "bestHard": self.score.ruptures_dures,
            "restarts_done": self.redemarrages,
            "iterations": self.iterations,
            "accepted": self.acceptations,
            "interrupted": self.interrompu,
        }


def demander_arret(arret: Optional[Arret]) -> bool:
    return arret is not None and bool(arret())
