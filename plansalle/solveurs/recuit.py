from __future__ import annotations

import logging
import math
from typing import Dict, List, Mapping, Optional, Sequence

from .base import Arret, Progression, RappelProgression, ResultatResolution, demander_arret
from ..affectation import construire_affectation_initiale, reparer_affectation, verifier_entrees
from ..alea import Mulberry32
from ..erreurs import ErreurEntree
from ..plan import PlanDeClasse
from ..score import Evaluateur, Score

logger = logging.getLogger(__name__)

# évite la division par zéro quand la température s'effondre
EPSILON_TEMPERATURE: float = 1e-9


class SolveurRecuit:
    """
    Recuit simulé avec redémarrages multiples.

    Caractéristiques
    ----------------
    - Unique mouvement : échange des sièges de deux élèves déplaçables
      distincts ; les élèves fixés ne bougent jamais.
    - Acceptation de Metropolis : toujours si delta <= 0, sinon avec la
      probabilité exp(-delta / max(ε, T)).
    - Température géométrique de `t0` à `t1` sur les itérations d'une passe.
    - Arrêt anticipé dès qu'une affectation de pénalité nulle est trouvée.
    - Entièrement reproductible pour une graine donnée.

    Le rappel de progression est appelé après chaque redémarrage et toutes les
    `intervalle_progression` itérations ; c'est aussi le point où un hôte
    événementiel peut rendre la main. Le prédicat `arret` permet d'annuler
    proprement entre deux itérations.
    """

    def __init__(self, t0: float = 6.0, t1: float = 0.05, *, intervalle_progression: int = 200) -> None:
        if not (t0 > 0 and t1 >= 0):
            raise ErreurEntree(f"Températures invalides (t0={t0}, t1={t1}) : il faut t0 > 0 et t1 >= 0.")
        self.t0: float = float(t0)
        self.t1: float = float(t1)
        self.intervalle_progression: int = max(0, int(intervalle_progression))

    # ------------------------------------------------------------------ API

    def resoudre(
        self,
        plan: PlanDeClasse,
        *,
        redemarrages: int,
        iterations: int,
        graine: int,
        rappel: Optional[RappelProgression] = None,
        arret: Optional[Arret] = None,
    ) -> ResultatResolution:
        """Enchaîne `redemarrages` passes indépendantes et garde la meilleure affectation."""
        verifier_entrees(plan)
        if redemarrages < 1:
            raise ErreurEntree("Il faut au moins un redémarrage.")
        if iterations < 0:
            raise ErreurEntree("Le nombre d'itérations doit être >= 0.")

        evaluer = Evaluateur(plan)
        deplacables: List[str] = plan.eleves_deplacables()
        maitre = Mulberry32(graine)

        meilleure: Optional[Dict[str, str]] = None
        meilleur_sc: Optional[Score] = None
        faits: int = 0
        total_iterations: int = 0
        total_acceptations: int = 0
        interrompu: bool = False

        for r in range(redemarrages):
            if demander_arret(arret):
                interrompu = True
                break
            graine_r: int = int(maitre.suivant() * 0xFFFFFFFF)
            depart = construire_affectation_initiale(plan, graine_r)
            passe = self._passe(
                evaluer,
                depart,
                deplacables,
                iterations=iterations,
                rng=Mulberry32(graine_r),
                redemarrage=r + 1,
                redemarrages=redemarrages,
                meilleur_anterieur=meilleur_sc,
                rappel=rappel,
                arret=arret,
            )
            faits += 1
            total_iterations += passe.iterations
            total_acceptations += passe.acceptations

            if meilleur_sc is None or passe.score.total < meilleur_sc.total:
                meilleure, meilleur_sc = passe.affectation, passe.score
            logger.debug(
                "redémarrage %d/%d (graine %d) : score=%d, meilleur=%d",
                r + 1, redemarrages, graine_r, passe.score.total, meilleur_sc.total,
            )
            if rappel is not None:
                rappel(Progression(r + 1, redemarrages, passe.iterations, iterations,
                                   meilleur_sc.total, meilleur_sc.ruptures_dures))
            if passe.interrompu:
                interrompu = True
                break
            if meilleur_sc.total == 0:
                break

        if meilleure is None or meilleur_sc is None:
            # annulé avant la première passe : on rend tout de même une affectation valide
            meilleure = construire_affectation_initiale(plan, graine)
            meilleur_sc = evaluer(meilleure)

        logger.info(
            "recuit terminé : score=%d, règles dures violées=%d, %d redémarrage(s), %d itération(s)%s",
            meilleur_sc.total, meilleur_sc.ruptures_dures, faits, total_iterations,
            " (interrompu)" if interrompu else "",
        )
        return ResultatResolution(meilleure, meilleur_sc, redemarrages=faits, iterations=total_iterations,
                                  acceptations=total_acceptations, interrompu=interrompu)

    def ameliorer(
        self,
        plan: PlanDeClasse,
        affectation: Optional[Mapping[str, str]] = None,
        *,
        iterations: int,
        graine: int,
        rappel: Optional[RappelProgression] = None,
        arret: Optional[Arret] = None,
    ) -> ResultatResolution:
        """
        Une seule passe à partir d'une affectation existante (réparée d'abord),
        ou d'une affectation construite si aucune n'est fournie.
        """
        verifier_entrees(plan)
        if iterations < 0:
            raise ErreurEntree("Le nombre d'itérations doit être >= 0.")

        depart: Dict[str, str] = dict(affectation or {})
        if not depart:
            depart = construire_affectation_initiale(plan, graine)
        depart = reparer_affectation(plan, depart, graine)

        passe = self._passe(
            Evaluateur(plan),
            depart,
            plan.eleves_deplacables(),
            iterations=iterations,
            rng=Mulberry32(graine),
            redemarrage=1,
            redemarrages=1,
            meilleur_anterieur=None,
            rappel=rappel,
            arret=arret,
        )
        logger.info("amélioration : score=%d après %d itération(s)", passe.score.total, passe.iterations)
        return passe

    # ------------------------------------------------------------ interne

    def _ratio(self, iterations: int) -> float:
        """Facteur multiplicatif de température ; 1 (constante t0) si iterations <= 1."""
        if iterations <= 1:
            return 1.0
        return (self.t1 / self.t0) ** (1.0 / (iterations - 1))

    def _passe(
        self,
        evaluer: Evaluateur,
        depart: Dict[str, str],
        deplacables: Sequence[str],
        *,
        iterations: int,
        rng: Mulberry32,
        redemarrage: int,
        redemarrages: int,
        meilleur_anterieur: Optional[Score],
        rappel: Optional[RappelProgression],
        arret: Optional[Arret],
    ) -> ResultatResolution:
        courante: Dict[str, str] = dict(depart)
        courant_sc: Score = evaluer(courante)
        meilleure, meilleur_sc = courante, courant_sc

        ratio: float = self._ratio(iterations)
        temperature: float = self.t0
        n: int = len(deplacables)
        faites: int = 0
        acceptations: int = 0
        interrompu: bool = False

        if n < 2 or meilleur_sc.total == 0:
            return ResultatResolution(meilleure, meilleur_sc, redemarrages=1)

        for i in range(iterations):
            if demander_arret(arret):
                interrompu = True
                break
            a: str = deplacables[rng.indice(n)]
            b: str = a
            while b == a:
                b = deplacables[rng.indice(n)]

            voisine: Dict[str, str] = dict(courante)
            voisine[a], voisine[b] = courante[b], courante[a]
            voisin_sc: Score = evaluer(voisine)
            delta: int = voisin_sc.total - courant_sc.total
            faites += 1

            if delta <= 0 or rng.suivant() < math.exp(-delta / max(EPSILON_TEMPERATURE, temperature)):
                courante, courant_sc = voisine, voisin_sc
                acceptations += 1
                if courant_sc.total < meilleur_sc.total:
                    meilleure, meilleur_sc = courante, courant_sc
                    if meilleur_sc.total == 0:
                        break
            temperature *= ratio

            if rappel is not None and self.intervalle_progression and i % self.intervalle_progression == 0:
                rapporte = meilleur_sc
                if meilleur_anterieur is not None and meilleur_anterieur.total < rapporte.total:
                    rapporte = meilleur_anterieur
                rappel(Progression(redemarrage, redemarrages, i, iterations,
                                   rapporte.total, rapporte.ruptures_dures))

        return ResultatResolution(meilleure, meilleur_sc, redemarrages=1, iterations=faites,
                                  acceptations=acceptations, interrompu=interrompu)
