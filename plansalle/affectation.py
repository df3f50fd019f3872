from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Set

from .alea import Mulberry32
from .erreurs import ErreurCapacite, ErreurEntree, ErreurPlacementFixe
from .modele.eleve import Eleve, FixeSurCase, FixeSurSiege
from .modele.siege import position_siege
from .plan import PlanDeClasse


def verifier_entrees(plan: PlanDeClasse) -> None:
    """Refuse les problèmes qu'il est inutile de tenter : sans élève, sans siège, trop d'élèves."""
    if not plan.eleves:
        raise ErreurEntree("Aucun élève à placer.")
    nb_sieges: int = plan.salle.nombre_sieges()
    if nb_sieges == 0:
        raise ErreurEntree("Aucun siège dans la salle.")
    if len(plan.eleves) > nb_sieges:
        raise ErreurCapacite(f"Pas assez de sièges ({nb_sieges}) pour les élèves ({len(plan.eleves)}).")


def siege_impose(plan: PlanDeClasse, eleve: Eleve) -> Optional[str]:
    """Siège imposé à `eleve` dans la salle courante, ou `None` s'il est déplaçable."""
    fixe = eleve.placement_fixe()
    if isinstance(fixe, FixeSurSiege):
        if not plan.salle.contient_siege(fixe.siege):
            raise ErreurPlacementFixe(f"Siège fixe {fixe.siege} absent de la salle ({eleve.identifiant()}).")
        return fixe.siege
    if isinstance(fixe, FixeSurCase):
        p = fixe.position
        sid: Optional[str] = plan.salle.siege_en(p.r, p.c) if plan.salle.dans_la_grille(p.r, p.c) else None
        if sid is None:
            raise ErreurPlacementFixe(f"La case fixe ({p.r},{p.c}) n'est pas un siège ({eleve.identifiant()}).")
        return sid
    return None


def sieges_fixes(plan: PlanDeClasse) -> Dict[str, str]:
    """Résout tous les placements imposés {élève: siège}, dans l'ordre de la liste.

    Lève `ErreurPlacementFixe` si deux élèves sont fixés sur le même siège.
    """
    fixes: Dict[str, str] = {}
    proprietaire: Dict[str, str] = {}
    for e in plan.eleves:
        sid = siege_impose(plan, e)
        if sid is None:
            continue
        if sid in proprietaire:
            raise ErreurPlacementFixe(
                f"Siège {sid} fixé deux fois ({proprietaire[sid]} et {e.identifiant()})."
            )
        proprietaire[sid] = e.identifiant()
        fixes[e.identifiant()] = sid
    return fixes


def _ordre_devant(identifiant: str) -> tuple[int, int]:
    pos = position_siege(identifiant)
    return (pos.r, pos.c) if pos is not None else (10 ** 6, 10 ** 6)


def _melanger_par_rangee(sieges: List[str], rng: Mulberry32) -> None:
    """Mélange chaque bloc contigu de sièges d'une même rangée (liste déjà triée)."""
    i0: int = 0
    while i0 < len(sieges):
        rangee = _ordre_devant(sieges[i0])[0]
        i1: int = i0 + 1
        while i1 < len(sieges) and _ordre_devant(sieges[i1])[0] == rangee:
            i1 += 1
        bloc = sieges[i0:i1]
        rng.melanger(bloc)
        sieges[i0:i1] = bloc
        i0 = i1


def construire_affectation_initiale(plan: PlanDeClasse, graine: int) -> Dict[str, str]:
    """
    Construit une affectation de départ, reproductible pour une graine donnée.

    1. les élèves fixés vont sur leur siège ;
    2. les élèves étiquetés prennent les premiers sièges libres après un
       mélange uniforme de toute la salle ;
    3. les autres remplissent la salle du premier rang vers le fond, avec un
       mélange à l'intérieur de chaque rangée.
    """
    verifier_entrees(plan)
    rng = Mulberry32(graine)

    affectation: Dict[str, str] = sieges_fixes(plan)
    utilises: Set[str] = set(affectation.values())
    libres: List[str] = [s for s in plan.salle.identifiants_sieges() if s not in utilises]

    restants: List[Eleve] = [e for e in plan.eleves if e.identifiant() not in affectation]
    etiquetes: List[str] = [e.identifiant() for e in restants if e.est_etiquete()]
    autres: List[str] = [e.identifiant() for e in restants if not e.est_etiquete()]

    if len(etiquetes) + len(autres) > len(libres):
        raise ErreurCapacite(
            f"Pas assez de sièges libres ({len(libres)}) pour les élèves restants ({len(restants)})."
        )

    rng.melanger(libres)
    for pid, sid in zip(etiquetes, libres):
        affectation[pid] = sid

    reste: List[str] = sorted(libres[len(etiquetes):], key=_ordre_devant)
    _melanger_par_rangee(reste, rng)
    for pid, sid in zip(autres, reste):
        affectation[pid] = sid
    return affectation


def reparer_affectation(plan: PlanDeClasse, affectation: Mapping[str, str], graine: int) -> Dict[str, str]:
    """
    Rend valide une affectation devenue obsolète (salle ou élèves modifiés).

    - les élèves fixés retrouvent leur siège imposé (réservé en premier) ;
    - les autres gardent leur siège s'il existe encore et n'est pas déjà pris
      (premier arrivé dans l'ordre de la liste) ;
    - les sièges restants sont mélangés puis distribués aux élèves sans siège.

    Idempotente sur une affectation déjà valide. Les élèves disparus sont
    oubliés.
    """
    rng = Mulberry32(graine)

    propre: Dict[str, str] = sieges_fixes(plan)
    utilises: Set[str] = set(propre.values())

    for e in plan.eleves:
        pid = e.identifiant()
        if pid in propre:
            continue
        sid: Optional[str] = affectation.get(pid)
        if sid and sid not in utilises and plan.salle.contient_siege(sid):
            propre[pid] = sid
            utilises.add(sid)

    libres: List[str] = [s for s in plan.salle.identifiants_sieges() if s not in utilises]
    sans_siege: List[str] = [e.identifiant() for e in plan.eleves if e.identifiant() not in propre]
    if len(sans_siege) > len(libres):
        raise ErreurCapacite(
            f"Pas assez de sièges ({plan.salle.nombre_sieges()}) pour réparer l'affectation "
            f"({len(plan.eleves)} élèves)."
        )

    rng.melanger(libres)
    for pid, sid in zip(sans_siege, libres):
        propre[pid] = sid

    # ordre des clés = ordre de la liste d'élèves
    return {e.identifiant(): propre[e.identifiant()] for e in plan.eleves}
