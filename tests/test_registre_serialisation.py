from __future__ import annotations

import json

import pytest

from plansalle.erreurs import ErreurEntree
from plansalle.regles.base import Metrique, RegleInconnue
from plansalle.regles.binaires import DistanceMaximale, DistanceMinimale, PasAdjacents
from plansalle.regles.globales import SeparationEtiquette
# important : enregistre toutes les fabriques dans le registre
from plansalle.regles import enregistrement  # noqa: F401
from plansalle.regles.registre import fabrique_de, regle_depuis_code
from plansalle.regles.types import TypeRegle
from plansalle.regles.unaires import DoitEtreDansRangees, DoitEtreSurSieges, PrefereDevant, PrefereLoinDuBureau


def test_toutes_les_fabriques_sont_enregistrees():
    for t in TypeRegle:
        if t is TypeRegle.INCONNUE:
            assert fabrique_de(t) is None
        else:
            assert fabrique_de(t) is not None, t


def test_serialisation_roundtrip():
    regles = [
        DistanceMinimale("A", "B", d=3, nom="A loin de B", dure=True),
        DistanceMaximale("A", "C", d=2, metrique=Metrique.CHEBYSHEV, poids=4),
        PasAdjacents("B", "C", dure=True),
        PrefereDevant("A", k=2, poids=3),
        PrefereLoinDuBureau("B", min_d=3, metrique=Metrique.EUCLIDIENNE2, poids=2),
        DoitEtreDansRangees("C", r_min=0, r_max=1, dure=True),
        DoitEtreSurSieges("A", ["S01_00", "S01_01"]),
        SeparationEtiquette("talkative", min_d=4, poids=5),
    ]

    # export JSON
    codes = [r.code_machine() for r in regles]
    data = json.dumps(codes, ensure_ascii=False)

    # reconstruction via registre/fabriques
    back = [regle_depuis_code(c) for c in json.loads(data)]

    assert [r.code_machine() for r in back] == codes
    assert [type(r) for r in back] == [type(r) for r in regles]


def test_code_machine_champs_communs():
    code = PrefereDevant("A", k=2).code_machine()
    assert code == {"type": "PreferFront", "name": "PreferFront", "hard": False, "weight": 1,
                    "pupil_id": "A", "k": 2}


def test_type_inconnu_conserve():
    code = {"type": "SitByWindow", "name": "fenêtre", "hard": True, "pupil_id": "A"}
    r = regle_depuis_code(code)
    assert isinstance(r, RegleInconnue)
    assert r.code_machine() == code


def test_defauts_de_lecture():
    r = regle_depuis_code({"type": "MinDistance", "a": "A", "b": "B", "d": 2, "weight": 0})
    assert r.dure is False
    assert r.poids == 1
    assert r.metrique is Metrique.MANHATTAN


@pytest.mark.parametrize(
    "code",
    [
        {"type": "MinDistance", "a": "A", "d": 2},  # champ manquant
        {"type": "PreferFront", "pupil_id": "A", "k": "beaucoup"},  # entier attendu
        {"type": "TagSeparation", "tag": "t", "min_d": 2, "metric": "taxi"},  # métrique inconnue
        {"type": "MustBeInSeats", "pupil_id": "A", "allowed_seat_ids": "S01_00"},  # liste attendue
    ],
)
def test_regle_mal_formee(code):
    with pytest.raises(ErreurEntree):
        regle_depuis_code(code)
