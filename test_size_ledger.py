"""
Tests for remaining-per-size computation.
"""
from types import SimpleNamespace

from garment_stock.services.size_ledger import compute_remaining, summarize


def entry(size, quantity):
    return SimpleNamespace(size=size, quantity=quantity)


def test_compute_remaining_subtracts_assigned_pieces():
    rows = compute_remaining(
        [entry("S", 40), entry("M", 60), entry("L", 10)],
        [entry("S", 15), entry("S", 5), entry("L", 10)],
    )

    assert rows == [
        {"size": "S", "quantity": 40, "assigned": 20, "remaining_quantity": 20},
        {"size": "M", "quantity": 60, "assigned": 0, "remaining_quantity": 60},
        {"size": "L", "quantity": 10, "assigned": 10, "remaining_quantity": 0},
    ]


def test_orders_for_unknown_sizes_are_ignored():
    rows = compute_remaining([entry("S", 5)], [entry("XL", 3)])
    assert rows[0]["remaining_quantity"] == 5


def test_summarize_excludes_exhausted_sizes():
    record = SimpleNamespace(
        cutting_id="CUT0001", pieces_count=100, size_breakdown=[entry("S", 40), entry("M", 60)]
    )
    summary = summarize(record, [entry("S", 40)])

    assert [row["size"] for row in summary["assignable"]] == ["M"]
    assert summary["total_remaining"] == 60
    assert summary["fully_assigned"] is False


def test_summarize_fully_assigned():
    record = SimpleNamespace(cutting_id="CUT0001", pieces_count=10, size_breakdown=[entry("S", 10)])
    summary = summarize(record, [entry("S", 6), entry("S", 4)])

    assert summary["assignable"] == []
    assert summary["fully_assigned"] is True


def test_summarize_without_breakdown_uses_pieces_count():
    record = SimpleNamespace(cutting_id="CUT0001", pieces_count=30, size_breakdown=[])
    summary = summarize(record, [entry("Free", 12)])

    assert summary["sizes"] == []
    assert summary["total_remaining"] == 18
    assert summary["fully_assigned"] is False


def test_remaining_plus_assigned_equals_cut_quantity(client, make_cutting_record, assign):
    record = make_cutting_record()
    cutting_id = record["cuttingId"]

    for size, quantity in [("S", 10), ("M", 25), ("S", 5), ("M", 35), ("S", 25)]:
        assert assign(cutting_id, size, quantity).status_code == 201

        sizes = client.get(f"/api/cutting-records/{cutting_id}/remaining-sizes").json()["sizes"]
        for row, original in zip(sizes, record["sizeBreakdown"]):
            assert row["remainingQuantity"] + row["assigned"] == original["quantity"]


def test_remaining_sizes_endpoint(client, make_cutting_record, assign):
    cutting_id = make_cutting_record()["cuttingId"]
    assign(cutting_id, "S", 40)

    response = client.get(f"/api/cutting-records/{cutting_id}/remaining-sizes")
    assert response.status_code == 200
    data = response.json()
    assert data["cuttingId"] == cutting_id
    assert [(r["size"], r["remainingQuantity"]) for r in data["sizes"]] == [("S", 0), ("M", 60)]
    assert [r["size"] for r in data["assignable"]] == ["M"]
    assert data["totalRemaining"] == 60


def test_remaining_sizes_unknown_record(client):
    response = client.get("/api/cutting-records/CUT9999/remaining-sizes")
    assert response.status_code == 404
    assert response.json()["message"] == "Cutting record not found"
