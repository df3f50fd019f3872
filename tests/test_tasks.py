from __future__ import annotations

from plansalle.tasks import _parse_options, graine_depuis, reglages, t_ameliorer_plan, t_resoudre_plan


def test_options_par_defaut(settings):
    settings.PLANSALLE = {}
    o = _parse_options(None)
    assert o == {"restarts": 25, "iters": 25000, "t0": 6.0, "t1": 0.05, "seed": 12345}


def test_options_amelioration(settings):
    settings.PLANSALLE = {}
    o = _parse_options({}, amelioration=True)
    assert (o["iters"], o["t0"], o["t1"]) == (4000, 2.5, 0.05)


def test_options_bornees(settings):
    settings.PLANSALLE = {}
    o = _parse_options({"restarts": 500, "iters": 5, "t0": 0.0, "t1": -3, "seed": "abc"})
    assert o == {"restarts": 80, "iters": 100, "t0": 0.05, "t1": 0.001, "seed": 12345}
    assert _parse_options({"restarts": 0, "iters": 10 ** 9})["restarts"] == 1
    assert _parse_options({"iters": 10 ** 9})["iters"] == 300_000


def test_reglages_surcharges(settings):
    settings.PLANSALLE = {"ITERS": 777, "SEED": 4}
    assert reglages()["ITERS"] == 777
    assert reglages()["RESTARTS"] == 25
    assert graine_depuis(None) == 4
    assert graine_depuis({"seed": 9}) == 9


def test_tache_resolution_appel_direct(document_petit):
    res = t_resoudre_plan({"document": document_petit, "options": {"restarts": 2, "iters": 500, "seed": 1}})
    assert res["status"] == "SUCCESS"
    assert res["mode"] == "solve"
    assert res["assignment"]["D"] == "S02_03"
    assert res["bestHard"] == 0
    assert res["score"] == {"total": res["bestScore"], "hardBreaks": 0}
    assert res["options"]["restarts"] == 2


def test_tache_resolution_document_nu(document_petit):
    # le document peut être passé sans enveloppe
    res = t_resoudre_plan(document_petit)
    assert res["status"] == "SUCCESS"


def test_tache_echec_explicite(document_petit):
    document_petit["pupils"] = [{"id": f"P{i}"} for i in range(9)]
    res = t_resoudre_plan({"document": document_petit})
    assert res == {"status": "FAILURE", "error": res["error"], "category": "capacity"}


def test_tache_amelioration(document_petit):
    document_petit["assignment"] = {"A": "S01_00", "B": "S01_01", "C": "S02_02", "D": "S02_03"}
    res = t_ameliorer_plan({"document": document_petit, "options": {"iters": 1000, "seed": 2}})
    assert res["status"] == "SUCCESS"
    assert res["mode"] == "improve"
    assert res["bestHard"] == 0
    assert "restarts" not in res["options"]


def test_tache_amelioration_permute_les_sieges_tenus(document_petit):
    # aucune paire de ces sièges n'est à distance 3 : la règle dure reste violée
    depart = {"A": "S01_00", "B": "S01_01", "C": "S01_02", "D": "S02_03"}
    document_petit["assignment"] = depart
    res = t_ameliorer_plan({"document": document_petit, "options": {"iters": 500, "seed": 2}})
    assert res["status"] == "SUCCESS"
    assert sorted(res["assignment"].values()) == sorted(depart.values())
    assert res["assignment"]["D"] == "S02_03"
    assert res["bestHard"] == 1
    # départ : manque 2 (dure) + talkative 1 × 2
    assert res["bestScore"] <= 2_000_002


def test_tache_options_non_objet(document_petit):
    res = t_resoudre_plan({"document": document_petit, "options": "rapide"})
    assert res["status"] == "FAILURE"
    assert res["category"] == "input"
