from __future__ import annotations

import pytest

from plansalle.__main__ import main
from plansalle.affectation import construire_affectation_initiale
from plansalle.exemples import document_demo, regle_modele, salle_par_defaut
from plansalle.modele.salle import TypeCase
from plansalle.plan import PlanDeClasse
from plansalle.regles.base import RegleInconnue
from plansalle.regles.registre import regle_depuis_code


def test_salle_par_defaut():
    salle = salle_par_defaut()
    assert (salle.rangees, salle.colonnes) == (8, 10)
    assert salle.nombre_sieges() == 6 * 9
    assert salle.type_case(0, 4) is TypeCase.BUREAU
    assert salle.type_case(3, 5) is TypeCase.VIDE
    assert salle.type_case(7, 0) is TypeCase.BLOQUEE


def test_document_demo_valide():
    plan = PlanDeClasse.depuis_document(document_demo())
    assert len(plan.eleves) == 8
    aff = construire_affectation_initiale(plan, 12345)
    assert aff["E"] == "S01_00"


@pytest.mark.parametrize("modele", ["mindist", "maxdist", "notadj", "preferfront", "awayteacher", "tagsep", "mustrows"])
def test_gabarits_de_regles(modele):
    code = regle_modele(modele, "A", "C")
    regle = regle_depuis_code(code)
    assert not isinstance(regle, RegleInconnue)


def test_gabarit_inconnu():
    assert regle_modele("nope") is None


def test_cli_exemple(capsys):
    assert main(["exemple", "--graine", "7"]) == 0
    out = capsys.readouterr().out
    assert "=== salle ===" in out
    assert "score=" in out
