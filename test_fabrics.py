"""
Tests for fabric intake endpoints.
"""
import uuid


def fabric_payload(**overrides):
    payload = {
        "fabricType": "Cotton",
        "color": "Blue",
        "quality": "Premium",
        "length": 50,
        "width": 1.5,
        "supplier": "Arvind Mills",
        "purchasePrice": 12000,
    }
    payload.update(overrides)
    return payload


def test_create_fabric(client):
    response = client.post("/api/fabrics", json=fabric_payload())

    assert response.status_code == 201
    data = response.json()
    assert data["fabricId"] == "FAB0001"
    assert data["quantity"] == 75
    assert data["status"] == "In Stock"

    assert client.post("/api/fabrics", json=fabric_payload()).json()["fabricId"] == "FAB0002"


def test_stock_status_thresholds(client):
    low = client.post("/api/fabrics", json=fabric_payload(length=10, width=2)).json()
    empty = client.post("/api/fabrics", json=fabric_payload(quantity=0)).json()

    assert low["quantity"] == 20
    assert low["status"] == "Low Stock"
    assert empty["status"] == "Out of Stock"


def test_update_recomputes_quantity(client):
    fabric = client.post("/api/fabrics", json=fabric_payload()).json()

    response = client.put(f"/api/fabrics/{fabric['id']}", json={"length": 10})
    assert response.status_code == 200
    data = response.json()
    assert data["quantity"] == 15
    assert data["status"] == "Low Stock"


def test_stats_overview(client):
    client.post("/api/fabrics", json=fabric_payload())
    client.post("/api/fabrics", json=fabric_payload(fabricType="Linen", length=5, width=2))

    stats = client.get("/api/fabrics/stats/overview").json()
    assert stats["totalFabrics"] == 2
    assert stats["totalQuantity"] == 85
    assert stats["lowStock"] == 1
    assert stats["outOfStock"] == 0
    assert stats["byType"] == {"Cotton": 75, "Linen": 10}


def test_get_and_delete(client):
    fabric = client.post("/api/fabrics", json=fabric_payload()).json()

    assert client.get(f"/api/fabrics/{fabric['id']}").json()["supplier"] == "Arvind Mills"
    assert client.delete(f"/api/fabrics/{fabric['id']}").status_code == 200
    assert client.get(f"/api/fabrics/{fabric['id']}").status_code == 404
    assert client.delete(f"/api/fabrics/{uuid.uuid4()}").status_code == 404


def test_invalid_dimensions_rejected(client):
    assert client.post("/api/fabrics", json=fabric_payload(length=0)).status_code == 400
