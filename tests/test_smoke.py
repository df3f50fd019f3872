# comments in English
def test_healthz(client):
    r = client.get("/healthz")
    assert r.status_code == 200
    assert r.content == b"ok"


def test_sante(client):
    r = client.get("/plansalle/sante")
    assert r.status_code == 200
    assert r.json()["ok"] is True


def test_unknown_route(client):
    assert client.get("/plansalle/nope").status_code == 404
