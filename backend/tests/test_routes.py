"""API tests: stateless validate/layout endpoints and editor sessions."""
import pytest
from fastapi.testclient import TestClient

from app.engine.validator import CYCLE_MESSAGE, MIN_NODES_MESSAGE
from app.main import app


@pytest.fixture
def client():
    return TestClient(app)


def _graph(names, edges):
    return {
        "nodes": [{"id": n, "name": n} for n in names],
        "edges": [
            {"id": f"e{i}", "from": s, "to": t} for i, (s, t) in enumerate(edges, 1)
        ],
    }


class TestValidateEndpoint:
    def test_valid(self, client):
        resp = client.post("/api/validate", json=_graph("ABC", [("A", "B"), ("A", "C")]))
        assert resp.status_code == 200
        assert resp.json() == {"is_valid": True, "errors": []}

    def test_unconnected(self, client):
        resp = client.post("/api/validate", json=_graph("AB", []))
        assert resp.json() == {"is_valid": False, "errors": ["Unconnected nodes: A, B"]}

    def test_cycle(self, client):
        body = _graph("ABC", [("A", "B"), ("B", "C"), ("C", "A")])
        data = client.post("/api/validate", json=body).json()
        assert not data["is_valid"]
        assert CYCLE_MESSAGE in data["errors"]

    def test_single_node(self, client):
        data = client.post("/api/validate", json=_graph("A", [])).json()
        assert data["errors"][0] == MIN_NODES_MESSAGE

    def test_rejects_missing_fields(self, client):
        resp = client.post("/api/validate", json={"nodes": [{"id": "A"}], "edges": []})
        assert resp.status_code == 422


class TestLayoutEndpoint:
    def test_default_config(self, client):
        body = {"graph": _graph("ABC", [("A", "B"), ("A", "C")])}
        positions = client.post("/api/layout", json=body).json()["positions"]
        assert positions["A"] == {"layer": 0, "slot": 0, "x": 440.0, "y": 50.0}
        assert positions["B"] == {"layer": 1, "slot": 0, "x": 380.0, "y": 200.0}
        assert positions["C"] == {"layer": 1, "slot": 1, "x": 500.0, "y": 200.0}

    def test_partial_config_override(self, client):
        body = {"graph": _graph("A", []), "config": {"origin_y": 0, "layer_height": 10}}
        positions = client.post("/api/layout", json=body).json()["positions"]
        assert positions["A"]["y"] == 0.0
        assert positions["A"]["x"] == 440.0

    def test_empty_graph(self, client):
        resp = client.post("/api/layout", json={"graph": {"nodes": [], "edges": []}})
        assert resp.json() == {"positions": {}}


class TestEditorEndpoints:
    def _new(self, client) -> str:
        return client.post("/api/editors").json()["editor_id"]

    def _add(self, client, editor_id, name) -> str:
        state = client.post(f"/api/editors/{editor_id}/nodes", json={"name": name}).json()
        return next(n["id"] for n in state["nodes"] if n["name"] == name)

    def test_build_and_layout(self, client):
        eid = self._new(client)
        a = self._add(client, eid, "Ingest")
        b = self._add(client, eid, "Store")
        state = client.post(f"/api/editors/{eid}/edges", json={"from": a, "to": b}).json()
        assert state["validation"] == {"is_valid": True, "errors": []}
        assert state["edges"][0]["from"] == a

        positions = client.post(f"/api/editors/{eid}/layout").json()["positions"]
        assert positions[a]["layer"] == 0
        assert positions[b]["layer"] == 1

        nodes = client.get(f"/api/editors/{eid}").json()["nodes"]
        assert {n["id"]: n["y"] for n in nodes} == {a: 50.0, b: 200.0}

    def test_duplicate_connection_conflict(self, client):
        eid = self._new(client)
        a, b = self._add(client, eid, "a"), self._add(client, eid, "b")
        client.post(f"/api/editors/{eid}/edges", json={"from": a, "to": b})
        resp = client.post(f"/api/editors/{eid}/edges", json={"from": b, "to": a})
        assert resp.status_code == 409

    def test_self_connection_bad_request(self, client):
        eid = self._new(client)
        a = self._add(client, eid, "a")
        resp = client.post(f"/api/editors/{eid}/edges", json={"from": a, "to": a})
        assert resp.status_code == 400

    def test_blank_name_bad_request(self, client):
        eid = self._new(client)
        resp = client.post(f"/api/editors/{eid}/nodes", json={"name": "  "})
        assert resp.status_code == 400

    def test_remove_node_cascades(self, client):
        eid = self._new(client)
        a, b = self._add(client, eid, "a"), self._add(client, eid, "b")
        client.post(f"/api/editors/{eid}/edges", json={"from": a, "to": b})
        state = client.delete(f"/api/editors/{eid}/nodes/{a}").json()
        assert state["edges"] == []
        assert state["validation"]["errors"] == [
            MIN_NODES_MESSAGE, "Unconnected nodes: b",
        ]

    def test_move_node(self, client):
        eid = self._new(client)
        a = self._add(client, eid, "a")
        state = client.put(
            f"/api/editors/{eid}/nodes/{a}/position", json={"x": -5, "y": 12},
        ).json()
        assert (state["nodes"][0]["x"], state["nodes"][0]["y"]) == (0.0, 12.0)

    def test_unknown_editor_and_node(self, client):
        assert client.get("/api/editors/missing").status_code == 404
        eid = self._new(client)
        assert client.delete(f"/api/editors/{eid}/nodes/ghost").status_code == 404
        assert client.delete(f"/api/editors/{eid}/edges/ghost").status_code == 404

    def test_delete_editor(self, client):
        eid = self._new(client)
        assert client.delete(f"/api/editors/{eid}").status_code == 200
        assert client.get(f"/api/editors/{eid}/validation").status_code == 404

    def test_node_types(self, client):
        assert client.get("/api/node-types").json() == ["source", "transform", "sink"]
