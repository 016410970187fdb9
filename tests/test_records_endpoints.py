from __future__ import annotations

import json

from fastapi.testclient import TestClient


def _client(tmp_path):
    import app as app_module

    return TestClient(app_module.create_app(db_path=str(tmp_path / "httpDb")))


def test_records_crud_over_http(tmp_path):
    with _client(tmp_path) as client:
        r = client.put("/records/fe.fi.fo", json={"value": {"fum": "bar"}})
        assert r.status_code == 200
        assert r.json() == {"path": "fe.fi.fo", "value": {"fum": "bar"}}

        r = client.get("/records/fe.fi.fo.fum")
        assert r.json()["value"] == "bar"

        r = client.get("/records")
        assert r.json() == {"path": ".", "value": {"fe": {"fi": {"fo": {"fum": "bar"}}}}}

        r = client.delete("/records/fe.fi")
        assert r.status_code == 200
        assert client.get("/records/fe").json()["value"] == {}

        client.delete("/records")
        assert client.get("/records").json()["value"] == {}
        assert client.get("/records/missing").json()["value"] is None


def test_array_operations_over_http(tmp_path):
    with _client(tmp_path) as client:
        assert client.post("/records/q/push", json={"value": "bar"}).json()["value"] == ["bar"]
        assert client.post("/records/q/unshift", json={"value": "foo"}).json()["value"] == ["foo", "bar"]
        assert client.post("/records/q/pop").json()["value"] == "bar"
        assert client.post("/records/q/shift").json()["value"] == "foo"
        assert client.post("/records/q/pop").json()["value"] is None


def test_store_errors_map_to_statuses(tmp_path):
    with _client(tmp_path) as client:
        client.put("/records/s", json={"value": "scalar"})

        r = client.post("/records/s/pop")
        assert r.status_code == 409
        assert r.json()["error"] == "NotArraySemanticsError"

        r = client.put("/records/s.deeper", json={"value": 1})
        assert r.status_code == 409
        assert r.json()["error"] == "NotTraversableError"

        r = client.get("/records/a..b")
        assert r.status_code == 400
        assert r.json()["error"] == "InvalidPathError"


def test_database_is_flushed_on_shutdown(tmp_path):
    with _client(tmp_path) as client:
        client.put("/records/foo", json={"value": "bar"})
        assert client.post("/save").json() == {"written": False}

    on_disk = json.loads((tmp_path / "httpDb.ptsb").read_text(encoding="utf-8"))
    assert on_disk["records"] == {"foo": "bar"}

    # The lifespan released the path, so a second app can open it.
    with _client(tmp_path) as client:
        assert client.get("/records/foo").json()["value"] == "bar"
