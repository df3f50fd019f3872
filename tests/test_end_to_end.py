import json

import pytest
from django.test import Client

from plansalle.modele.siege import position_siege
from plansalle.regles.base import Metrique


def _post(client: Client, url: str, payload) -> dict:
    r = client.post(url, data=json.dumps(payload), content_type="application/json")
    assert r.status_code == 200, r.content
    return r.json()


def _post_start(client: Client, url: str, payload: dict) -> str:
    task_id = _post(client, url, payload)["task_id"]
    assert isinstance(task_id, str)
    return task_id


def _get_status(client: Client, task_id: str) -> dict:
    r = client.get(f"/plansalle/solve/status/{task_id}")
    assert r.status_code == 200
    return r.json()


def test_resolution_end_to_end(client, document_petit):
    task_id = _post_start(client, "/plansalle/solve/start",
                          {"document": document_petit, "options": {"restarts": 3, "iters": 1000}})
    data = _get_status(client, task_id)
    assert data.get("status") == "SUCCESS", data
    assignment = data["assignment"]
    assert set(assignment) == {"A", "B", "C", "D"}
    assert assignment["D"] == "S02_03"
    pa, pb = position_siege(assignment["A"]), position_siege(assignment["B"])
    assert Metrique.MANHATTAN.distance(pa, pb) >= 3
    assert data["bestHard"] == 0


def test_amelioration_end_to_end(client, document_petit):
    document_petit["assignment"] = {"A": "S01_00", "B": "S01_01", "C": "S02_02", "D": "S02_03"}
    task_id = _post_start(client, "/plansalle/improve/start", {"document": document_petit})
    data = _get_status(client, task_id)
    assert data.get("status") == "SUCCESS", data
    assert data["mode"] == "improve"
    assert data["bestHard"] == 0


def test_resolution_refusee_end_to_end(client, document_petit):
    document_petit["room"]["seats"] = []
    task_id = _post_start(client, "/plansalle/solve/start", {"document": document_petit})
    data = _get_status(client, task_id)
    assert data == {"status": "FAILURE", "error": data["error"], "category": "input"}


def test_statut_tache_inconnue(client):
    assert _get_status(client, "pas-une-tache")["status"] == "PENDING"


def test_score(client, document_petit):
    document_petit["assignment"] = {"A": "S01_00", "B": "S01_01", "C": "S02_00", "D": "S02_03"}
    data = _post(client, "/plansalle/score", document_petit)
    # A-B : manque 2 (dure) ; talkative : manque 1 × 2 ; C au rang 2 (k=2) : 1
    assert data == {"status": "SUCCESS", "total": 2_000_003, "hardBreaks": 1}


def test_initial_reproductible(client, document_petit):
    payload = {"document": document_petit, "options": {"seed": 42}}
    a = _post(client, "/plansalle/initial", payload)
    b = _post(client, "/plansalle/initial", payload)
    assert a == b
    assert a["assignment"]["D"] == "S02_03"
    assert set(a["score"]) == {"total", "hardBreaks"}


def test_reparer_repli_affectation_vide(client, document_petit):
    document_petit["room"]["seats"] = document_petit["room"]["seats"][:2]
    document_petit["pupils"] = [{"id": "A"}, {"id": "B"}, {"id": "C"}]
    data = _post(client, "/plansalle/reparer", document_petit)
    assert data["assignment"] == {}
    assert data["repair_error"]["category"] == "capacity"


def test_case_reclasse_et_repare(client, document_petit):
    document_petit["assignment"] = {"A": "S01_00", "B": "S01_03", "C": "S02_00", "D": "S02_03"}
    data = _post(client, "/plansalle/case", {"document": document_petit, "r": 1, "c": 0, "kind": "blocked"})
    doc = data["document"]
    assert "1,0" in doc["room"]["blocked"]
    assert doc["assignment"]["A"] != "S01_00"
    assert doc["assignment"]["B"] == "S01_03"
    assert data["repair_error"] is None


def test_case_hors_salle(client, document_petit):
    r = client.post("/plansalle/case", data=json.dumps({"document": document_petit, "r": 9, "c": 0}),
                    content_type="application/json")
    assert r.status_code == 400
    assert r.json()["category"] == "input"


def test_redimensionner(client, document_petit):
    document_petit["assignment"] = {"A": "S01_00", "B": "S01_03", "C": "S02_00", "D": "S02_03"}
    data = _post(client, "/plansalle/redimensionner", {"document": document_petit, "rows": 2, "cols": 4})
    doc = data["document"]
    assert (doc["room"]["rows"], doc["room"]["cols"]) == (2, 4)
    # le siège imposé de D a disparu : réparation impossible, affectation vidée
    assert doc["assignment"] == {}
    assert data["repair_error"]["category"] == "fixed_placement"


@pytest.mark.parametrize("corps", [b"{pas du json", b"[1, 2]"])
def test_json_invalide(client, corps):
    r = client.post("/plansalle/score", data=corps, content_type="application/json")
    assert r.status_code == 400
    assert r.json()["status"] == "FAILURE"


def test_methode_refusee(client):
    assert client.get("/plansalle/score").status_code == 405


def test_export_et_telechargement(client, document_petit):
    document_petit["assignment"] = {"A": "S01_00", "B": "S02_02", "C": "S01_01", "D": "S02_03"}
    data = _post(client, "/plansalle/export", {"document": document_petit})
    assert data["json"] == f"/plansalle/download/{data['token']}"

    r = client.get(data["json"])
    assert r.status_code == 200
    assert "attachment" in r["Content-Disposition"]
    doc = json.loads(r.content.decode("utf-8"))
    assert doc["assignment"] == document_petit["assignment"]
    assert [p["id"] for p in doc["pupils"]] == ["A", "B", "C", "D"]


def test_telechargement_expire(client):
    assert client.get("/plansalle/download/inconnu").status_code == 404


@pytest.mark.parametrize("url", ["/plansalle/initial", "/plansalle/reparer", "/plansalle/export"])
def test_options_non_objet(client, document_petit, url):
    r = client.post(url, data=json.dumps({"document": document_petit, "options": [1, 2]}),
                    content_type="application/json")
    assert r.status_code == 400
    assert r.json()["category"] == "input"


@pytest.mark.parametrize("champ, valeur", [("blocked", 5), ("teacher", "0,0"), ("seats", {"1,0": "S01_00"})])
def test_salle_mal_formee(client, document_petit, champ, valeur):
    document_petit["room"][champ] = valeur
    r = client.post("/plansalle/score", data=json.dumps(document_petit), content_type="application/json")
    assert r.status_code == 400
    assert r.json() == {"status": "FAILURE", "error": r.json()["error"], "category": "input"}
