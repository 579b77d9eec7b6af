"""
Tests for deleting a cutting record together with everything derived from it.
"""
import uuid

from garment_stock.crud.transactions import transaction as transaction_crud


def counts(client):
    return (
        len(client.get("/api/cutting-records").json()),
        len(client.get("/api/manufacturing-orders").json()),
        len(client.get("/api/qr-products").json()),
        client.get("/api/transactions").json()["pagination"]["totalCount"],
    )


def seed(client, make_cutting_record, assign, record_transaction):
    """Record A: 3 orders over 2 manufacturing ids, 2 QR products, 3 transactions. Record B: one of each."""
    record_a = make_cutting_record()
    cut_a = record_a["cuttingId"]
    s_first = assign(cut_a, "S", 10).json()
    assign(cut_a, "S", 10, tailor_name="TailorB")
    m_order = assign(cut_a, "M", 20).json()

    for manufacturing_id in (s_first["manufacturingId"], m_order["manufacturingId"]):
        client.post("/api/qr-products", json={"manufacturingId": manufacturing_id, "productName": "Shirt", "quantity": 10})

    record_transaction(cut_a, "REMOVE", 40, item_type="CUTTING")
    record_transaction(s_first["manufacturingId"], "STOCK_IN", 10)
    record_transaction(m_order["manufacturingId"], "STOCK_IN", 20)

    cut_b = make_cutting_record(productName="Kurta")["cuttingId"]
    b_order = assign(cut_b, "S", 5).json()
    client.post("/api/qr-products", json={"manufacturingId": b_order["manufacturingId"], "productName": "Kurta", "quantity": 5})
    record_transaction(b_order["manufacturingId"], "STOCK_IN", 5)

    return record_a, cut_b


def test_cascade_delete_counts(client, make_cutting_record, assign, record_transaction):
    record_a, cut_b = seed(client, make_cutting_record, assign, record_transaction)
    before = counts(client)

    response = client.delete(f"/api/cutting-records/{record_a['id']}")

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Cutting record and related data deleted successfully"
    assert body["details"] == {
        "cuttingId": record_a["cuttingId"],
        "deletedManufacturingOrders": 3,
        "deletedQRProducts": 2,
        "deletedTransactions": 3,
    }

    after = counts(client)
    assert [b - a for b, a in zip(before, after)] == [1, 3, 2, 3]

    remaining_orders = client.get("/api/manufacturing-orders").json()
    assert {o["cuttingId"] for o in remaining_orders} == {cut_b}


def test_cascade_delete_unknown_record(client):
    response = client.delete(f"/api/cutting-records/{uuid.uuid4()}")
    assert response.status_code == 404
    assert response.json() == {"message": "Cutting record not found"}


def test_cascade_delete_rolls_back_on_failure(client, make_cutting_record, assign, record_transaction, monkeypatch):
    record_a, _ = seed(client, make_cutting_record, assign, record_transaction)
    before = counts(client)

    def fail(*args, **kwargs):
        raise RuntimeError("ledger unavailable")

    monkeypatch.setattr(transaction_crud, "delete_for_items", fail)

    response = client.delete(f"/api/cutting-records/{record_a['id']}")

    assert response.status_code == 500
    assert counts(client) == before
    assert client.get(f"/api/cutting-records/{record_a['id']}").status_code == 200
