"""
Tests for the stock room view and stock movements.
"""
from types import SimpleNamespace

from garment_stock.services.stock_aggregator import aggregate_stock


def order(manufacturing_id, quantity, status="Completed", **fields):
    values = dict(
        manufacturing_id=manufacturing_id, product_name="Shirt", fabric_color="Blue",
        fabric_type="Cotton", size="M", quantity=quantity, tailor_name="TailorA", status=status,
    )
    values.update(fields)
    return SimpleNamespace(**values)


def qr(product_id, manufacturing_id, quantity, cutting_id="CUT0001", **fields):
    values = dict(
        product_id=product_id, manufacturing_id=manufacturing_id, cutting_id=cutting_id,
        product_name="Shirt", color="Blue", fabric_type="Cotton", size="M",
        quantity=quantity, tailor_name="TailorA",
    )
    values.update(fields)
    return SimpleNamespace(**values)


def txn(item_id, action, quantity, item_type="MANUFACTURING", item_name="Shirt"):
    return SimpleNamespace(item_id=item_id, action=action, quantity=quantity, item_type=item_type, item_name=item_name)


def test_only_completed_orders_count():
    stock = aggregate_stock([order("MFG0001", 10), order("MFG0002", 7, status="Pending")], [], [])
    assert list(stock) == ["MFG0001"]
    assert stock["MFG0001"]["quantity"] == 10


def test_orders_sharing_an_id_are_summed():
    stock = aggregate_stock([order("MFG0001", 10), order("MFG0001", 5)], [], [])
    assert stock["MFG0001"]["quantity"] == 15


def test_qr_product_of_completed_order_not_counted_twice():
    stock = aggregate_stock([order("MFG0001", 10)], [qr("MFG0001", "MFG0001", 10)], [])
    assert stock["MFG0001"]["quantity"] == 10


def test_qr_product_without_completed_order_is_stock():
    stock = aggregate_stock([], [qr("MFG0003", "MFG0003", 4)], [])
    assert stock["MFG0003"]["quantity"] == 4


def test_qr_product_keyed_by_product_id():
    stock = aggregate_stock([], [qr("QR-77", "MFG0009", 3)], [])
    assert list(stock) == ["QR-77"]


def test_manual_products_join_the_view():
    stock = aggregate_stock(
        [],
        [qr("MAN0001", "MAN0001", 6, cutting_id="MANUAL", color=None, size=None, tailor_name="Manual Entry")],
        [],
    )
    item = stock["MAN0001"]
    assert item["quantity"] == 6
    assert item["color"] == "N/A"
    assert item["size"] == "N/A"
    assert item["tailor_name"] == "Manual Entry"


def test_ledger_moves_stock():
    stock = aggregate_stock(
        [order("MFG0001", 10)],
        [],
        [
            txn("MFG0001", "STOCK_OUT", 4),
            txn("MFG0001", "STOCK_IN", 1),
            txn("MFG0001", "ADD", 100),
            txn("MFG0001", "STOCK_IN", 50, item_type="FABRIC"),
        ],
    )
    assert stock["MFG0001"]["quantity"] == 7


def test_ledger_only_item_starts_from_zero():
    stock = aggregate_stock([], [], [txn("MFG0042", "STOCK_IN", 10), txn("MFG0042", "STOCK_OUT", 3)])
    item = stock["MFG0042"]
    assert item["quantity"] == 7
    assert item["garment"] == "Shirt"
    assert item["fabric_type"] == "N/A"


def test_stock_in_then_out_through_api(client, record_transaction):
    record_transaction("MFG0042", "STOCK_IN", 10)
    record_transaction("MFG0042", "STOCK_OUT", 3)

    for _ in range(3):
        response = client.get("/api/stock-room/item/MFG0042")
        assert response.status_code == 200
        assert response.json()["quantity"] == 7


def test_single_stock_in_for_fresh_id(client, record_transaction):
    record_transaction("MFGAB123", "STOCK_IN", 5, itemName="Kurta")

    item = client.get("/api/stock-room/item/MFGAB123").json()
    assert item["quantity"] == 5
    assert item["manufacturingId"] == "MFGAB123"
    assert item["garment"] == "Kurta"
    assert item["color"] == "N/A"


def test_unknown_item(client):
    response = client.get("/api/stock-room/item/MFG0404")
    assert response.status_code == 404
    assert response.json() == {"message": "Item not found"}


def test_completed_orders_appear_in_stock_room(client, make_cutting_record, assign):
    cutting_id = make_cutting_record()["cuttingId"]
    done = assign(cutting_id, "S", 12).json()
    assign(cutting_id, "M", 20)
    client.put(f"/api/manufacturing-orders/{done['id']}", json={"status": "Completed"})

    data = client.get("/api/stock-room/data").json()
    assert [(i["manufacturingId"], i["quantity"], i["size"]) for i in data] == [(done["manufacturingId"], 12, "S")]
    assert data[0]["tailorName"] == "TailorA"


def test_stock_movements(client, make_cutting_record, assign):
    cutting_id = make_cutting_record()["cuttingId"]
    done = assign(cutting_id, "S", 10).json()
    client.put(f"/api/manufacturing-orders/{done['id']}", json={"status": "Completed"})
    manufacturing_id = done["manufacturingId"]

    response = client.post("/api/stock-room/movements", json={
        "manufacturingId": manufacturing_id, "action": "STOCK_OUT", "quantity": 4, "performedBy": "scanner-1",
    })
    assert response.status_code == 201
    entry = response.json()
    assert entry["previousStock"] == 10
    assert entry["newStock"] == 6
    assert entry["itemType"] == "MANUFACTURING"
    assert entry["source"] == "QR_SCANNER"
    assert entry["itemName"] == "Shirt"

    response = client.post("/api/stock-room/movements", json={
        "manufacturingId": manufacturing_id, "action": "STOCK_OUT", "quantity": 7, "performedBy": "scanner-1",
    })
    assert response.status_code == 400
    assert "Insufficient stock" in response.json()["message"]

    response = client.post("/api/stock-room/movements", json={
        "manufacturingId": manufacturing_id, "action": "STOCK_IN", "quantity": 2, "performedBy": "scanner-1",
    })
    assert response.json()["newStock"] == 8
    assert client.get(f"/api/stock-room/item/{manufacturing_id}").json()["quantity"] == 8


def test_stock_movement_only_in_or_out(client):
    response = client.post("/api/stock-room/movements", json={
        "manufacturingId": "MFG0001", "action": "ADD", "quantity": 1, "performedBy": "scanner-1",
    })
    assert response.status_code == 400


def test_movement_records_negative_on_hand_as_is(client, record_transaction):
    record_transaction("MFG0077", "STOCK_OUT", 5)
    assert client.get("/api/stock-room/item/MFG0077").json()["quantity"] == -5

    response = client.post("/api/stock-room/movements", json={
        "manufacturingId": "MFG0077", "action": "STOCK_IN", "quantity": 2, "performedBy": "scanner-1",
    })
    assert response.status_code == 201
    assert response.json()["previousStock"] == -5
    assert response.json()["newStock"] == -3

    response = client.post("/api/stock-room/movements", json={
        "manufacturingId": "MFG0077", "action": "STOCK_OUT", "quantity": 1, "performedBy": "scanner-1",
    })
    assert response.status_code == 400
