"""HTTP surface"""

from unittest.mock import Mock

from app.ir.errors import StoreError

CHAIN = {
    "nodes": [
        {"id": "APP-1", "label": "Portal", "nodeType": "Application"},
        {"id": "API-2", "label": "Payment API", "nodeType": "API"},
        {"id": "COMP-3", "label": "Ledger", "nodeType": "Component"},
        {"id": "CAP-9", "label": "Payments", "nodeType": "BusinessFunction"},
    ],
    "edges": [
        {"source": "APP-1", "target": "API-2", "relationshipType": "CALLS"},
        {"source": "API-2", "target": "COMP-3", "relationshipType": "EXPOSES"},
        {"source": "CAP-9", "target": "API-2", "relationshipType": "INCLUDES"},
    ],
}


def _nodes(payload):
    return {n["id"]: n for n in payload["nodes"]}


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "database": "up"}


def test_classify_end_to_end(client):
    response = client.post("/classify", json={"relationships": [
        {"from": "APP-1", "to": "API-2", "type": "calls", "description": "Portal calls Payment API"},
        {"from": "APP-1", "to": "SRV-1", "type": "runs on"},
    ]})

    assert response.status_code == 200
    body = response.json()
    assert body["classified"] == [{
        "from": "APP-1",
        "to": "API-2",
        "canonical_type": "CALLS",
        "properties": {"description": "Portal calls Payment API", "mode": "pulls", "rw": "read-n-writes"},
    }]
    assert body["rejected"][0]["reason"] == "pair_not_allowed"
    assert body["stats"]["total"] == 2


def test_classify_with_entity_types(client):
    response = client.post("/classify", json={
        "relationships": [{"from": "portal", "to": "API-2", "type": "uses"}],
        "entity_types": {"portal": "Application"},
    })
    assert response.json()["stats"]["classified"] == 1


def test_classify_rejects_malformed_tuple(client):
    response = client.post("/classify", json={"relationships": [{"from": "APP-1"}]})
    assert response.status_code == 422


def test_parse_diagram(client):
    source = (
        "@startuml\n"
        'System(portal, "Customer Portal")\n'
        'Container(api, "Payment API", "Java")\n'
        'Rel(portal, api, "Calls payments")\n'
        'Rel(api, vault, "Reads secrets")\n'
        "@enduml"
    )

    response = client.post("/diagrams/parse", json={
        "source": source,
        "entity_types": {"portal": "Application", "api": "API"},
    })

    body = response.json()
    assert [e["alias"] for e in body["elements"]] == ["portal", "api"]
    assert body["relationships"][0]["type"] == "call"
    assert body["classification"]["classified"][0]["canonical_type"] == "CALLS"
    assert body["classification"]["rejected"][0]["reason"] == "unknown_entity"


def test_layout_levels_reverse_and_positions(client):
    response = client.post("/layout", json=CHAIN)

    assert response.status_code == 200
    body = response.json()
    nodes = _nodes(body)
    assert body["roots"] == ["APP-1"]
    assert {k: n["level"] for k, n in nodes.items()} == {"APP-1": 0, "API-2": 1, "COMP-3": 2, "CAP-9": 2}
    assert nodes["CAP-9"]["is_reverse"] is True
    assert nodes["CAP-9"]["collapsed"] is True
    assert nodes["API-2"]["collapsed"] is True
    assert nodes["COMP-3"]["hidden"] is True
    assert nodes["COMP-3"]["position"] == {"x": 700, "y": 0}
    assert nodes["CAP-9"]["position"] == {"x": 700, "y": 120}
    assert body["collapsed"] == ["API-2", "CAP-9"]


def test_layout_custom_geometry(client):
    body = client.post("/layout", json={**CHAIN, "column_width": 200, "row_height": 80}).json()
    assert _nodes(body)["CAP-9"]["position"] == {"x": 400, "y": 80}


def test_toggle_round_trip(client):
    layout = client.post("/layout", json=CHAIN).json()

    expanded = client.post("/layout/toggle", json={**layout, "node_id": "API-2"}).json()
    assert expanded["toggled"] is True
    assert _nodes(expanded)["COMP-3"]["hidden"] is False
    assert _nodes(expanded)["API-2"]["collapsed"] is False

    collapsed = client.post("/layout/toggle", json={**expanded, "node_id": "API-2"}).json()
    assert [n["hidden"] for n in collapsed["nodes"]] == [n["hidden"] for n in layout["nodes"]]


def test_toggle_unknown_node_is_noop(client):
    layout = client.post("/layout", json=CHAIN).json()

    response = client.post("/layout/toggle", json={**layout, "node_id": "NOPE"})

    assert response.status_code == 200
    assert response.json()["toggled"] is False
    assert response.json()["nodes"] == layout["nodes"]


def test_sync_then_graph(client):
    sync = client.post("/sync", json={
        "relationships": [
            {"from": "APP-1", "to": "API-2", "type": "calls"},
            {"from": "API-2", "to": "COMP-3", "type": "exposes"},
            {"from": "APP-1", "to": "SRV-1", "type": "runs"},
        ],
        "entities": [{"id": "APP-1", "type": "Application", "name": "Portal"}],
    }).json()
    assert sync["status"] == "completed"
    assert sync["records_synced"] == 2
    assert sync["rejected"] == 1

    graph = client.get("/graph", params={"root_id": "APP-1"}).json()
    nodes = _nodes(graph)
    assert set(nodes) == {"APP-1", "API-2", "COMP-3"}
    assert nodes["APP-1"]["label"] == "Portal"
    assert nodes["COMP-3"]["level"] == 2

    jobs = client.get("/sync/jobs").json()["jobs"]
    assert jobs[0]["status"] == "completed"
    assert jobs[0]["records_synced"] == 2


def test_graph_unknown_root_is_404(client):
    response = client.get("/graph", params={"root_id": "APP-404"})
    assert response.status_code == 404


def test_sync_store_failure_is_503(client, monkeypatch):
    monkeypatch.setattr(
        "app.api.routes.RelationshipSync.run",
        Mock(side_effect=StoreError("database unavailable")),
    )

    response = client.post("/sync", json={"relationships": []})

    assert response.status_code == 503
    assert response.json()["detail"] == "database unavailable"
