from __future__ import annotations

import copy
import json
from pathlib import Path

import pytest

from plansalle.modele.salle import Salle, TypeCase
from plansalle.plan import PlanDeClasse

_DATA = Path(__file__).parent / "data"


def charger_document(nom: str) -> dict:
    return json.loads((_DATA / nom).read_text(encoding="utf-8"))


@pytest.fixture
def document_petit() -> dict:
    # copie profonde : certains tests modifient le document
    return copy.deepcopy(charger_document("document_petit.json"))


@pytest.fixture
def plan_petit(document_petit) -> PlanDeClasse:
    return PlanDeClasse.depuis_document(document_petit)


def salle_une_rangee(n: int) -> Salle:
    """Salle 1 × n entièrement composée de sièges."""
    salle = Salle(1, n)
    for c in range(n):
        salle.classer_case(0, c, TypeCase.SIEGE)
    return salle
