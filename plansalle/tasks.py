from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from celery import shared_task
from django.conf import settings

from .erreurs import ErreurEntree, ErreurPlacement
from .plan import PlanDeClasse, lire_affectation
from .solveurs.base import Progression
from .solveurs.recuit import SolveurRecuit

logger = logging.getLogger(__name__)

# Bornes de l'éditeur ; surchargeables via settings.PLANSALLE
_DEFAUTS: Dict[str, Any] = {
    "RESTARTS": 25,
    "RESTARTS_MAX": 80,
    "ITERS": 25_000,
    "ITERS_MIN": 100,
    "ITERS_MAX": 300_000,
    "T0": 6.0,
    "T0_MIN": 0.05,
    "T1": 0.05,
    "T1_MIN": 0.001,
    "SEED": 12345,
    "IMPROVE_ITERS": 4000,
    "IMPROVE_T0": 2.5,
    "IMPROVE_T1": 0.05,
    "PROGRESS_EVERY": 200,
}


# --------------------------------------------------------------------------- helpers de conversion

def reglages() -> Dict[str, Any]:
    """Réglages du solveur : défauts + surcharge `settings.PLANSALLE`."""
    return {**_DEFAUTS, **(getattr(settings, "PLANSALLE", None) or {})}


def _entier(valeur: Any, defaut: int) -> int:
    try:
        return int(valeur)
    except (TypeError, ValueError):
        return defaut


def _flottant(valeur: Any, defaut: float) -> float:
    try:
        return float(valeur)
    except (TypeError, ValueError):
        return defaut


def _borner(x, bas, haut):
    return max(bas, min(haut, x))


def _options_objet(options: Any) -> Dict[str, Any]:
    if options is None:
        return {}
    if not isinstance(options, Mapping):
        raise ErreurEntree(f"« options » doit être un objet JSON, pas {type(options).__name__}")
    return dict(options)


def graine_depuis(options: Optional[Dict[str, Any]]) -> int:
    """Graine de l'appel (option `seed`), ou la graine par défaut des réglages."""
    r = reglages()
    return _entier(_options_objet(options).get("seed"), r["SEED"]) & 0xFFFFFFFF


def _parse_options(options: Optional[Dict[str, Any]], *, amelioration: bool = False) -> Dict[str, Any]:
    """
    Normalise les options et pose les défauts.

    Champs reconnus (tous facultatifs) :
      - restarts: int   (1..80, défaut 25 ; ignoré en amélioration)
      - iters: int      (100..300000, défaut 25000 ou 4000 en amélioration)
      - t0: float       (>= 0.05, défaut 6.0 ou 2.5 en amélioration)
      - t1: float       (>= 0.001, défaut 0.05)
      - seed: int       (défaut 12345)
    """
    r = reglages()
    o: Dict[str, Any] = _options_objet(options)
    iters_defaut = r["IMPROVE_ITERS"] if amelioration else r["ITERS"]
    t0_defaut = r["IMPROVE_T0"] if amelioration else r["T0"]
    t1_defaut = r["IMPROVE_T1"] if amelioration else r["T1"]
    return {
        "restarts": _borner(_entier(o.get("restarts"), r["RESTARTS"]), 1, r["RESTARTS_MAX"]),
        "iters": _borner(_entier(o.get("iters"), iters_defaut), r["ITERS_MIN"], r["ITERS_MAX"]),
        "t0": max(r["T0_MIN"], _flottant(o.get("t0"), t0_defaut)),
        "t1": max(r["T1_MIN"], _flottant(o.get("t1"), t1_defaut)),
        "seed": graine_depuis(o),
    }


def _charger(payload: Dict[str, Any]) -> Tuple[PlanDeClasse, Dict[str, str]]:
    """Traduit le document reçu en plan (instantané) + affectation courante."""
    document = payload.get("document", payload)
    return PlanDeClasse.depuis_document(document), lire_affectation(document)


def _rapporteur(task) -> Callable[[Progression], None]:
    """Publie la progression comme état Celery « PROGRESS » (lu par solve_status)."""

    def rapporter(p: Progression) -> None:
        if task.request.id and not task.request.called_directly:
            task.update_state(state="PROGRESS", meta=p.vers_dict())

    return rapporter


def _echec(exc: ErreurPlacement) -> Dict[str, Any]:
    logger.info("résolution refusée (%s) : %s", exc.categorie.value, exc)
    return {"status": "FAILURE", **exc.vers_dict()}


# --------------------------------------------------------------------------- tâches

@shared_task(bind=True)
def t_resoudre_plan(self, payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    Tâche asynchrone de résolution complète (recuit avec redémarrages) :
      - traduit le document en salle/élèves/règles,
      - normalise les options,
      - exécute la résolution en publiant la progression,
      - renvoie l'affectation et son score.
    """
    try:
        options = _parse_options(payload.get("options"))
        plan, _ = _charger(payload)
        solveur = SolveurRecuit(options["t0"], options["t1"],
                                intervalle_progression=reglages()["PROGRESS_EVERY"])
        res = solveur.resoudre(
            plan,
            redemarrages=options["restarts"],
            iterations=options["iters"],
            graine=options["seed"],
            rappel=_rapporteur(self),
        )
    except ErreurPlacement as exc:
        return _echec(exc)

    return {
        "status": "SUCCESS",
        "mode": "solve",
        **res.vers_dict(),
        "score": res.score.vers_dict(),
        "options": options,
    }


@shared_task(bind=True)
def t_ameliorer_plan(self, payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    Tâche asynchrone d'amélioration : une passe de recuit à partir de
    l'affectation du document (réparée au préalable).
    """
    try:
        options = _parse_options(payload.get("options"), amelioration=True)
        plan, affectation = _charger(payload)
        solveur = SolveurRecuit(options["t0"], options["t1"],
                                intervalle_progression=reglages()["PROGRESS_EVERY"])
        res = solveur.ameliorer(
            plan,
            affectation,
            iterations=options["iters"],
            graine=options["seed"],
            rappel=_rapporteur(self),
        )
    except ErreurPlacement as exc:
        return _echec(exc)

    options.pop("restarts", None)
    return {
        "status": "SUCCESS",
        "mode": "improve",
        **res.vers_dict(),
        "score": res.score.vers_dict(),
        "options": options,
    }
