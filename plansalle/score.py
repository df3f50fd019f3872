from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping

from .plan import PlanDeClasse
from .regles.base import MULTIPLICATEUR_DUR, ContexteEvaluation


@dataclass(frozen=True)
class Score:
    """Score d'une affectation.

    Attributs
    ---------
    total : int
        Somme des contributions de toutes les règles.
    ruptures_dures : int
        Nombre de règles dures *violées* (un compte de règles, pas une ampleur).
    """

    total: int
    ruptures_dures: int

    def vers_dict(self) -> Dict[str, int]:
        return {"total": self.total, "hardBreaks": self.ruptures_dures}


class Evaluateur:
    """Évalue des affectations pour un plan donné (contexte construit une seule fois)."""

    def __init__(self, plan: PlanDeClasse) -> None:
        self.plan: PlanDeClasse = plan
        self.contexte = ContexteEvaluation(
            eleves=plan.eleves,
            bureau=tuple(plan.salle.positions_bureau()),
        )

    def __call__(self, affectation: Mapping[str, str]) -> Score:
        total: int = 0
        ruptures: int = 0
        for regle in self.plan.regles:
            contribution: int = regle.contribution(affectation, self.contexte)
            total += contribution
            if regle.dure and contribution >= MULTIPLICATEUR_DUR:
                ruptures += 1
        return Score(total=total, ruptures_dures=ruptures)


def evaluer_affectation(plan: PlanDeClasse, affectation: Mapping[str, str]) -> Score:
    """Score d'une affectation sous les règles du plan."""
    return Evaluateur(plan)(affectation)
