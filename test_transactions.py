"""
Tests for the append-only transaction ledger.
"""
import re
import uuid

from garment_stock.crud.transactions import INSERT_ATTEMPTS
from garment_stock.services.id_generator import FrontendIDGenerator


def test_create_transaction(record_transaction):
    response = record_transaction("FAB0001", "ADD", 25, item_type="FABRIC", itemName="Cotton", previousStock=10, newStock=35)

    assert response.status_code == 201
    data = response.json()
    assert re.match(r"^TXNAF\d{9}$", data["transactionId"])
    assert data["itemType"] == "FABRIC"
    assert data["quantity"] == 25
    assert data["newStock"] == 35
    assert data["source"] == "MANUAL"


def test_defaults_for_item_type_and_source(client):
    response = client.post("/api/transactions", json={
        "itemId": "X1",
        "itemName": "Buttons",
        "action": "REMOVE",
        "quantity": 3,
        "previousStock": 10,
        "newStock": 7,
        "performedBy": "store keeper",
    })

    assert response.status_code == 201
    data = response.json()
    assert data["itemType"] == "UNKNOWN"
    assert data["source"] == "MANUAL"
    assert data["transactionId"].startswith("TXNRU")


def test_missing_field_rejected(client):
    response = client.post("/api/transactions", json={"itemId": "X1", "action": "ADD"})
    assert response.status_code == 400
    assert response.json()["message"].startswith("Validation error")


def test_invalid_enum_values_rejected(record_transaction):
    assert record_transaction("X1", "TRANSFER", 1).status_code == 400
    assert record_transaction("X1", "ADD", 1, item_type="TRIMS").status_code == 400
    assert record_transaction("X1", "ADD", 1, source="EMAIL").status_code == 400


def test_negative_quantity_rejected(record_transaction):
    assert record_transaction("X1", "ADD", -1).status_code == 400


def test_hundred_transactions_get_distinct_ids(record_transaction):
    ids = set()
    for _ in range(100):
        response = record_transaction("MFG0001", "STOCK_IN", 1)
        assert response.status_code == 201
        ids.add(response.json()["transactionId"])

    assert len(ids) == 100


def fix_transaction_ids(monkeypatch, *transaction_ids):
    """Make the insert listener hand out the given ids in order, the last one forever"""
    calls = []

    def generate(action, item_type, db):
        calls.append(action)
        return transaction_ids[min(len(calls), len(transaction_ids)) - 1]

    monkeypatch.setattr(FrontendIDGenerator, "generate_transaction_id", staticmethod(generate))
    return calls


def test_colliding_id_at_commit_is_retried(client, record_transaction, monkeypatch):
    taken = record_transaction("MFG0001", "STOCK_IN", 1).json()["transactionId"]
    calls = fix_transaction_ids(monkeypatch, taken, "TXNIM000000001")

    response = record_transaction("MFG0001", "STOCK_IN", 2)

    assert response.status_code == 201
    assert response.json()["transactionId"] == "TXNIM000000001"
    assert len(calls) == 2
    assert client.get("/api/transactions").json()["pagination"]["totalCount"] == 2


def test_duplicate_after_exhausting_insert_attempts(client, record_transaction, monkeypatch):
    taken = record_transaction("MFG0001", "STOCK_IN", 1).json()["transactionId"]
    calls = fix_transaction_ids(monkeypatch, taken)

    response = record_transaction("MFG0001", "STOCK_IN", 2)

    assert response.status_code == 400
    assert response.json() == {"message": "Transaction with this ID already exists"}
    assert len(calls) == INSERT_ATTEMPTS
    assert client.get("/api/transactions").json()["pagination"]["totalCount"] == 1


def test_list_with_pagination_and_filters(client, record_transaction):
    record_transaction("MFG0001", "STOCK_IN", 5, performedBy="Anita Shah")
    record_transaction("MFG0001", "STOCK_OUT", 2, performedBy="Ravi")
    record_transaction("FAB0001", "ADD", 9, item_type="FABRIC", performedBy="anita")

    page = client.get("/api/transactions", params={"limit": 2}).json()
    assert len(page["transactions"]) == 2
    assert page["pagination"] == {
        "currentPage": 1,
        "totalPages": 2,
        "totalCount": 3,
        "limit": 2,
        "hasNextPage": True,
        "hasPrevPage": False,
    }

    by_person = client.get("/api/transactions", params={"performedBy": "ANITA"}).json()
    assert by_person["pagination"]["totalCount"] == 2

    by_type = client.get("/api/transactions", params={"itemType": "FABRIC"}).json()
    assert [t["itemId"] for t in by_type["transactions"]] == ["FAB0001"]

    by_action = client.get("/api/transactions", params={"action": "STOCK_OUT"}).json()
    assert [t["quantity"] for t in by_action["transactions"]] == [2]


def test_item_history(client, record_transaction):
    record_transaction("MFG0001", "STOCK_IN", 5)
    record_transaction("MFG0002", "STOCK_IN", 5)

    history = client.get("/api/transactions/item/MFG0001").json()
    assert [t["itemId"] for t in history] == ["MFG0001"]


def test_stats_overview(client, record_transaction):
    record_transaction("MFG0001", "STOCK_IN", 5)
    record_transaction("MFG0001", "STOCK_OUT", 2, source="QR_SCANNER")
    record_transaction("FAB0001", "ADD", 9, item_type="FABRIC")

    stats = client.get("/api/transactions/stats/overview").json()
    assert stats["totalTransactions"] == 3
    assert stats["addTransactions"] == 2
    assert stats["removeTransactions"] == 1
    assert stats["recentTransactions"] == 3
    assert stats["typeStats"] == {"MANUFACTURING": 2, "FABRIC": 1}
    assert stats["sourceStats"] == {"MANUAL": 2, "QR_SCANNER": 1}


def test_reverse_appends_opposite_movement(client, record_transaction):
    original = record_transaction("FAB0001", "ADD", 5, item_type="FABRIC", previousStock=10, newStock=15).json()

    response = client.post(f"/api/transactions/{original['id']}/reverse", json={"performedBy": "supervisor"})
    assert response.status_code == 201
    reversed_entry = response.json()
    assert reversed_entry["action"] == "REMOVE"
    assert reversed_entry["previousStock"] == 15
    assert reversed_entry["newStock"] == 10
    assert reversed_entry["performedBy"] == "supervisor"
    assert reversed_entry["transactionId"] != original["transactionId"]

    assert client.get("/api/transactions").json()["pagination"]["totalCount"] == 2


def test_qr_generated_cannot_be_reversed(client, record_transaction):
    original = record_transaction("MFG0001", "QR_GENERATED", 1).json()

    response = client.post(f"/api/transactions/{original['id']}/reverse")
    assert response.status_code == 400
    assert "cannot be reversed" in response.json()["message"]


def test_ledger_has_no_update_endpoint(client, record_transaction):
    original = record_transaction("MFG0001", "STOCK_IN", 1).json()

    response = client.put(f"/api/transactions/{original['id']}", json={"quantity": 100})
    assert response.status_code == 405


def test_get_and_delete_by_id(client, record_transaction):
    original = record_transaction("MFG0001", "STOCK_IN", 1).json()

    assert client.get(f"/api/transactions/{original['id']}").status_code == 200
    assert client.delete(f"/api/transactions/{original['id']}").status_code == 200
    assert client.get(f"/api/transactions/{original['id']}").status_code == 404
    assert client.delete(f"/api/transactions/{uuid.uuid4()}").status_code == 404


def test_delete_all(client, record_transaction):
    for _ in range(3):
        record_transaction("MFG0001", "STOCK_IN", 1)

    response = client.delete("/api/transactions")
    assert response.status_code == 200
    assert response.json()["deletedCount"] == 3
    assert client.get("/api/transactions").json()["transactions"] == []
