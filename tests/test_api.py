import pytest
from fastapi.testclient import TestClient

from quotetonic.api import app, get_workspace


@pytest.fixture
def client(workspace):
    app.dependency_overrides[get_workspace] = lambda: workspace
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def created(client):
    response = client.post("/quotes", json={"templateId": "modern", "clientName": "Globex"})
    assert response.status_code == 201
    return response.json()


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_totals(client):
    response = client.post("/totals", json=[{"quantity": 3, "unitPrice": 50, "taxRate": 10}])

    body = response.json()
    assert response.status_code == 200
    assert body["subtotal"] == pytest.approx(150)
    assert body["grandTotal"] == pytest.approx(165)
    assert body["hasDiscount"] is False


def test_create_returns_camel_case_draft(created):
    assert created["number"] == "QT-001001"
    assert created["status"] == "Draft"
    assert created["templateId"] == "modern"
    assert created["clientName"] == "Globex"
    assert created["items"][0]["taxRate"] == 8.875


def test_create_with_unknown_template(client):
    response = client.post("/quotes", json={"templateId": "glitter"})
    assert response.status_code == 422


def test_list_get_and_stats(client, created):
    listed = client.get("/quotes").json()
    assert [q["id"] for q in listed] == [created["id"]]

    assert client.get(f"/quotes/{created['number']}").json()["id"] == created["id"]
    assert client.get("/quotes/missing").status_code == 404
    assert client.get("/stats").json() == {"total": 1, "draft": 1, "finalized": 0, "won": 0, "lost": 0}
    assert client.get("/quotes", params={"status": "Won"}).json() == []


def test_update_quote(client, created):
    created["notes"] = "Thanks!"
    response = client.put(f"/quotes/{created['id']}", json=created)

    assert response.status_code == 200
    assert client.get(f"/quotes/{created['id']}").json()["notes"] == "Thanks!"
    assert client.put("/quotes/other", json=created).status_code == 422


def test_duplicate_and_status(client, created):
    client.patch(f"/quotes/{created['id']}/status", json={"status": "Won"})

    copy = client.post(f"/quotes/{created['id']}/duplicate")

    assert copy.status_code == 201
    assert copy.json()["number"] == "QT-001002"
    assert copy.json()["status"] == "Draft"
    assert client.get(f"/quotes/{created['id']}").json()["status"] == "Won"


def test_delete_needs_confirm(client, created):
    assert client.delete(f"/quotes/{created['id']}").status_code == 409
    assert client.delete(f"/quotes/{created['id']}", params={"confirm": True}).status_code == 204
    assert client.get("/quotes").json() == []


def test_quote_totals_and_pdf(client, created):
    totals = client.get(f"/quotes/{created['id']}/totals").json()
    assert totals["grandTotal"] == 0

    response = client.get(f"/quotes/{created['id']}/pdf")
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.content.startswith(b"%PDF")


def test_validate_endpoint(client, created):
    response = client.post("/validate", json=[created, created])
    summary = response.json()["summary"]

    assert summary["totalQuotes"] == 2
    assert summary["invalidQuotes"] == 1
    assert summary["errorCounts"] == {"anomaly: duplicate_number": 1}


def test_settings(client):
    body = client.get("/settings").json()
    assert body["docNumberPrefix"] == "QT-"
    assert body["nextDocNumber"] == 1001
