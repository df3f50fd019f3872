from __future__ import annotations

from typing import Any, Dict, FrozenSet, Iterable, Optional, Sequence

from .base import Affectation, ContexteEvaluation, Metrique, Regle, manque
from .types import TypeRegle
from ..modele.position import Position


class _RegleUnaire(Regle):
    """Règle portant sur un seul élève."""

    def __init__(self, eleve: str, **options: Any) -> None:
        super().__init__(**options)
        self.eleve: str = str(eleve)

    def implique(self) -> Sequence[str]:
        return [self.eleve]


class PrefereDevant(_RegleUnaire):
    """Préfère l'élève dans les `k` premières rangées (r < k)."""

    def __init__(self, eleve: str, k: int, **options: Any) -> None:
        super().__init__(eleve, **options)
        self.k: int = int(k)

    def type_regle(self) -> TypeRegle:
        return TypeRegle.PREFERE_DEVANT

    def penalite(self, affectation: Affectation, ctx: ContexteEvaluation) -> int:
        pos: Optional[Position] = ctx.position(affectation, self.eleve)
        if pos is None:
            return 0
        return 0 if pos.r < self.k else 1

    def texte_humain(self) -> str:
        return f"{self.eleve} de préférence dans les {self.k} premières rangées"

    def _champs(self) -> Dict[str, Any]:
        return {"pupil_id": self.eleve, "k": self.k}


class PrefereLoinDuBureau(_RegleUnaire):
    """Éloigne l'élève d'au moins `min_d` de la case de bureau la plus proche."""

    def __init__(self, eleve: str, min_d: int, metrique: Metrique = Metrique.MANHATTAN, **options: Any) -> None:
        super().__init__(eleve, **options)
        self.min_d: int = int(min_d)
        self.metrique: Metrique = Metrique(metrique)

    def type_regle(self) -> TypeRegle:
        return TypeRegle.LOIN_DU_BUREAU

    def penalite(self, affectation: Affectation, ctx: ContexteEvaluation) -> int:
        pos: Optional[Position] = ctx.position(affectation, self.eleve)
        if pos is None or not ctx.bureau:
            return 0
        plus_proche: int = min(self.metrique.distance(pos, t) for t in ctx.bureau)
        return manque(self.min_d, plus_proche)

    def texte_humain(self) -> str:
        return f"{self.eleve} à au moins {self.min_d} du bureau ({self.metrique.value})"

    def _champs(self) -> Dict[str, Any]:
        return {"pupil_id": self.eleve, "min_d": self.min_d, "metric": self.metrique.value}


class DoitEtreDansRangees(_RegleUnaire):
    """Exige que l'élève soit entre les rangées `r_min` et `r_max` incluses."""

    def __init__(self, eleve: str, r_min: int, r_max: int, **options: Any) -> None:
        super().__init__(eleve, **options)
        self.r_min: int = int(r_min)
        self.r_max: int = int(r_max)

    def type_regle(self) -> TypeRegle:
        return TypeRegle.DANS_RANGEES

    def penalite(self, affectation: Affectation, ctx: ContexteEvaluation) -> int:
        pos: Optional[Position] = ctx.position(affectation, self.eleve)
        if pos is None:
            return 0
        return 0 if self.r_min <= pos.r <= self.r_max else 1

    def texte_humain(self) -> str:
        return f"{self.eleve} doit être entre les rangées {self.r_min} et {self.r_max}"

    def _champs(self) -> Dict[str, Any]:
        return {"pupil_id": self.eleve, "r_min": self.r_min, "r_max": self.r_max}


class DoitEtreSurSieges(_RegleUnaire):
    """Exige que l'élève occupe l'un des sièges autorisés."""

    def __init__(self, eleve: str, sieges_autorises: Iterable[str], **options: Any) -> None:
        super().__init__(eleve, **options)
        self._ordre: list[str] = [str(s) for s in sieges_autorises]
        self.sieges_autorises: FrozenSet[str] = frozenset(self._ordre)

    def type_regle(self) -> TypeRegle:
        return TypeRegle.SUR_SIEGES

    def penalite(self, affectation: Affectation, ctx: ContexteEvaluation) -> int:
        sid: Optional[str] = affectation.get(self.eleve)
        if not sid:
            return 0
        return 0 if sid in self.sieges_autorises else 1

    def texte_humain(self) -> str:
        return f"{self.eleve} doit être sur l'un des sièges {', '.join(self._ordre)}"

    def _champs(self) -> Dict[str, Any]:
        return {"pupil_id": self.eleve, "allowed_seat_ids": list(self._ordre)}
