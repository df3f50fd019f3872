from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .erreurs import ErreurEntree
from .modele.eleve import Eleve
from .modele.salle import Salle
from .regles import enregistrement  # noqa: F401  (enregistre toutes les fabriques)
from .regles.base import Regle
from .regles.registre import regle_depuis_code

VERSION_DOCUMENT: int = 1


@dataclass(frozen=True)
class PlanDeClasse:
    """Instantané (salle, élèves, règles) passé explicitement à chaque opération.

    Le cœur ne garde aucun état entre deux appels ; l'appelant clone
    l'instantané (`copie()`) s'il doit le modifier pendant une résolution.
    """

    salle: Salle
    eleves: Tuple[Eleve, ...] = ()
    regles: Tuple[Regle, ...] = ()
    _index: Dict[str, Eleve] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "eleves", tuple(self.eleves))
        object.__setattr__(self, "regles", tuple(self.regles))
        for e in self.eleves:
            if e.identifiant() in self._index:
                raise ErreurEntree(f"Identifiant d'élève en double: {e.identifiant()!r}")
            self._index[e.identifiant()] = e

    def eleve(self, identifiant: str) -> Optional[Eleve]:
        return self._index.get(identifiant)

    def eleves_deplacables(self) -> List[str]:
        """Identifiants des élèves non fixés, dans l'ordre de la liste."""
        return [e.identifiant() for e in self.eleves if not e.est_fixe()]

    def copie(self) -> "PlanDeClasse":
        return PlanDeClasse(salle=self.salle.copie(), eleves=self.eleves, regles=self.regles)

    # --- Document JSON -----------------------------------------------------

    @classmethod
    def depuis_document(cls, doc: Mapping[str, Any]) -> "PlanDeClasse":
        """
        Construit le plan depuis le document {version, room, pupils, rules, assignment}.

        Les élèves sans identifiant et les règles sans type sont ignorés,
        comme dans l'éditeur ; un identifiant en double ou une version
        inconnue lèvent `ErreurEntree`.
        """
        if not isinstance(doc, Mapping):
            raise ErreurEntree("Document JSON invalide (objet attendu)")
        version = doc.get("version", VERSION_DOCUMENT)
        if version != VERSION_DOCUMENT:
            raise ErreurEntree(f"Version de document non prise en charge: {version!r}")

        salle = Salle.depuis_dict(doc.get("room") or {})

        pupils = doc.get("pupils") or []
        rules = doc.get("rules") or []
        if not isinstance(pupils, list) or not isinstance(rules, list):
            raise ErreurEntree("« pupils » et « rules » doivent être des listes")

        eleves: List[Eleve] = [
            Eleve.depuis_dict(p) for p in pupils
            if isinstance(p, Mapping) and str(p.get("id") or p.get("pupil_id") or "").strip()
        ]
        regles: List[Regle] = [
            regle_depuis_code(r) for r in rules
            if isinstance(r, Mapping) and str(r.get("type") or "")
        ]
        return cls(salle=salle, eleves=tuple(eleves), regles=tuple(regles))

    def vers_document(self, affectation: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
        return {
            "version": VERSION_DOCUMENT,
            "room": self.salle.vers_dict(),
            "pupils": [e.vers_dict() for e in self.eleves],
            "rules": [r.code_machine() for r in self.regles],
            "assignment": dict(affectation or {}),
        }


def lire_affectation(doc: Mapping[str, Any]) -> Dict[str, str]:
    """Extrait l'affectation {élève: siège} d'un document, en ignorant les entrées non textuelles."""
    brute = doc.get("assignment") if isinstance(doc, Mapping) else None
    if not isinstance(brute, Mapping):
        return {}
    return {str(pid): str(sid) for pid, sid in brute.items() if pid and isinstance(sid, str) and sid}
