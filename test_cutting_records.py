"""
Tests for cutting record endpoints.
"""
import uuid


def test_create_generates_cutting_id(make_cutting_record):
    first = make_cutting_record()
    second = make_cutting_record()

    assert first["cuttingId"] == "CUT0001"
    assert second["cuttingId"] == "CUT0002"
    assert [entry["size"] for entry in first["sizeBreakdown"]] == ["S", "M"]
    assert first["status"] == "Completed"


def test_create_accepts_client_id(make_cutting_record):
    record = make_cutting_record(id="CUT0100")
    assert record["cuttingId"] == "CUT0100"

    # generator continues after the highest existing counter
    assert make_cutting_record()["cuttingId"] == "CUT0101"


def test_duplicate_cutting_id_rejected(client, make_cutting_record):
    record = make_cutting_record(cuttingId="CUT0005")

    payload = {
        "cuttingId": record["cuttingId"],
        "fabricType": "Linen",
        "fabricColor": "White",
        "productName": "Kurta",
        "piecesCount": 10,
        "cuttingMaster": "Suresh",
        "date": "2024-03-02",
    }
    response = client.post("/api/cutting-records", json=payload)

    assert response.status_code == 400
    assert "already exists" in response.json()["message"]


def test_breakdown_must_add_up_to_pieces_count(client):
    payload = {
        "fabricType": "Cotton",
        "fabricColor": "Blue",
        "productName": "Shirt",
        "piecesCount": 100,
        "sizeBreakdown": [{"size": "S", "quantity": 40}, {"size": "M", "quantity": 50}],
        "cuttingMaster": "Ramesh",
        "date": "2024-03-01",
    }
    response = client.post("/api/cutting-records", json=payload)

    assert response.status_code == 400
    assert response.json()["message"].startswith("Validation error")


def test_breakdown_sizes_must_be_distinct(client):
    payload = {
        "fabricType": "Cotton",
        "fabricColor": "Blue",
        "productName": "Shirt",
        "piecesCount": 20,
        "sizeBreakdown": [{"size": "S", "quantity": 10}, {"size": "S", "quantity": 10}],
        "cuttingMaster": "Ramesh",
        "date": "2024-03-01",
    }
    assert client.post("/api/cutting-records", json=payload).status_code == 400


def test_missing_required_field(client):
    response = client.post("/api/cutting-records", json={"fabricType": "Cotton"})
    assert response.status_code == 400
    assert "message" in response.json()


def test_list_and_get(client, make_cutting_record):
    record = make_cutting_record()

    listed = client.get("/api/cutting-records").json()
    assert [r["cuttingId"] for r in listed] == ["CUT0001"]

    fetched = client.get(f"/api/cutting-records/{record['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["piecesCount"] == 100

    missing = client.get(f"/api/cutting-records/{uuid.uuid4()}")
    assert missing.status_code == 404
    assert missing.json() == {"message": "Cutting record not found"}


def test_update_descriptive_fields(client, make_cutting_record):
    record = make_cutting_record(status="In Progress")

    response = client.put(
        f"/api/cutting-records/{record['id']}",
        json={"notes": "Re-check the collar pieces", "status": "Completed"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["notes"] == "Re-check the collar pieces"
    assert data["status"] == "Completed"
    assert data["piecesCount"] == 100


def test_cancelled_record_cannot_be_reopened(client, make_cutting_record):
    record = make_cutting_record()
    client.put(f"/api/cutting-records/{record['id']}", json={"status": "Cancelled"})

    response = client.put(f"/api/cutting-records/{record['id']}", json={"status": "Completed"})
    assert response.status_code == 400
    assert "Invalid status transition" in response.json()["message"]
