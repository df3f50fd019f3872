from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from .modele.salle import Salle, TypeCase
from .plan import PlanDeClasse, VERSION_DOCUMENT
from .score import evaluer_affectation
from .solveurs.recuit import SolveurRecuit

GRAINE_DEFAUT: int = 12345


def salle_par_defaut(rangees: int = 8, colonnes: int = 10) -> Salle:
    """
    Salle de démonstration : bureau en haut au centre, allée en colonne 5,
    sièges sur les rangées 1 à 6, mur bloqué au fond (dernière rangée).
    """
    salle = Salle(rangees, colonnes)
    salle.classer_case(0, 4, TypeCase.BUREAU)
    salle.classer_case(0, 5, TypeCase.BUREAU)
    for r in range(1, min(7, rangees)):
        for c in range(colonnes):
            if c == 5:
                continue  # allée
            salle.classer_case(r, c, TypeCase.SIEGE)
    for c in range(colonnes):
        salle.classer_case(rangees - 1, c, TypeCase.BLOQUEE)
    return salle


def eleves_demo() -> List[Dict[str, Any]]:
    return [
        {"id": "A", "tags": ["needs_front"], "fixed": None},
        {"id": "B", "tags": ["talkative"], "fixed": None},
        {"id": "C", "tags": ["talkative"], "fixed": None},
        {"id": "D", "tags": [], "fixed": None},
        {"id": "E", "tags": [], "fixed": {"r": 1, "c": 0}},
        {"id": "F", "tags": [], "fixed": None},
        {"id": "G", "tags": [], "fixed": None},
        {"id": "H", "tags": [], "fixed": None},
    ]


def regles_demo() -> List[Dict[str, Any]]:
    return [
        {"type": "MinDistance", "name": "A far from B", "hard": True, "a": "A", "b": "B", "d": 3,
         "metric": "manhattan"},
        {"type": "NotAdjacent", "name": "B not adjacent C", "hard": True, "a": "B", "b": "C"},
        {"type": "TagSeparation", "name": "Spread talkative", "hard": False, "weight": 5, "tag": "talkative",
         "min_d": 4, "metric": "manhattan"},
        {"type": "PreferFront", "name": "A prefers front", "hard": False, "weight": 3, "pupil_id": "A", "k": 2},
        {"type": "PreferAwayFromTeacher", "name": "B away from teacher", "hard": False, "weight": 2,
         "pupil_id": "B", "min_d": 3, "metric": "manhattan"},
    ]


def document_demo() -> Dict[str, Any]:
    """Document complet (salle par défaut + élèves et règles de démonstration)."""
    return {
        "version": VERSION_DOCUMENT,
        "room": salle_par_defaut().vers_dict(),
        "pupils": eleves_demo(),
        "rules": regles_demo(),
        "assignment": {},
    }


def regle_modele(modele: str, a: str = "A", b: str = "B") -> Optional[Dict[str, Any]]:
    """Gabarit de règle prêt à éditer (`mindist`, `maxdist`, `notadj`, `preferfront`,
    `awayteacher`, `tagsep`, `mustrows`), ou `None` si le gabarit est inconnu."""
    gabarits: Dict[str, Dict[str, Any]] = {
        "mindist": {"type": "MinDistance", "name": "A far from B", "hard": True, "a": a, "b": b, "d": 3,
                    "metric": "manhattan"},
        "maxdist": {"type": "MaxDistance", "name": "A near B", "hard": False, "weight": 2, "a": a, "b": b,
                    "d": 3, "metric": "manhattan"},
        "notadj": {"type": "NotAdjacent", "name": "Not adjacent", "hard": True, "a": a, "b": b},
        "preferfront": {"type": "PreferFront", "name": "Prefer front", "hard": False, "weight": 3,
                        "pupil_id": a, "k": 2},
        "awayteacher": {"type": "PreferAwayFromTeacher", "name": "Away from teacher", "hard": False,
                        "weight": 2, "pupil_id": a, "min_d": 3, "metric": "manhattan"},
        "tagsep": {"type": "TagSeparation", "name": "Spread tag", "hard": False, "weight": 5,
                   "tag": "talkative", "min_d": 4, "metric": "manhattan"},
        "mustrows": {"type": "MustBeInRows", "name": "Must be in rows", "hard": True, "pupil_id": a,
                     "r_min": 0, "r_max": 1},
    }
    gabarit = gabarits.get(modele)
    return dict(gabarit) if gabarit is not None else None


def construire_exemple(graine: int = GRAINE_DEFAUT) -> None:
    """
    charge le document de démonstration, lance le solveur et affiche
    l'affectation, son score et le document exporté.
    """
    plan = PlanDeClasse.depuis_document(document_demo())
    # progression uniquement en fin de redémarrage
    solveur = SolveurRecuit(t0=6.0, t1=0.05, intervalle_progression=0)
    res = solveur.resoudre(
        plan,
        redemarrages=5,
        iterations=5000,
        graine=graine,
        rappel=lambda p: print(f"  redémarrage {p.redemarrage}/{p.redemarrages} · meilleur={p.meilleur_score}"),
    )

    print("=== salle ===")
    print(plan.salle)
    print("\n=== affectation trouvée ===")
    for e in plan.eleves:
        print(f" - {e.identifiant():4s} -> {res.affectation[e.identifiant()]}")
    score = evaluer_affectation(plan, res.affectation)
    print(f"\nscore={score.total} · règles dures violées={score.ruptures_dures}")

    print("\n=== export JSON ===")
    print(json.dumps(plan.vers_document(res.affectation), ensure_ascii=False, indent=2))
