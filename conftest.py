"""
Shared fixtures: the API runs against an in-memory SQLite database that is
created fresh for every test.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from garment_stock import models  # noqa: F401 - registers tables on Base.metadata
from garment_stock.database import Base, get_db
from garment_stock.main import app

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_cutting_record(client):
    """POST a cutting record (S40/M60 shirts by default) and return the response body"""
    def _make(**overrides):
        payload = {
            "fabricType": "Cotton",
            "fabricColor": "Blue",
            "productName": "Shirt",
            "piecesCount": 100,
            "totalLengthUsed": 150.0,
            "sizeBreakdown": [{"size": "S", "quantity": 40}, {"size": "M", "quantity": 60}],
            "cuttingMaster": "Ramesh",
            "cuttingPricePerPiece": 5.0,
            "date": "2024-03-01",
        }
        payload.update(overrides)
        response = client.post("/api/cutting-records", json=payload)
        assert response.status_code == 201, response.text
        return response.json()
    return _make


@pytest.fixture
def assign(client):
    """POST a single-size assignment and return the response"""
    def _assign(cutting_id, size, quantity, tailor_name="TailorA", price_per_piece=20.0, **extra):
        payload = {
            "cuttingId": cutting_id,
            "size": size,
            "quantity": quantity,
            "tailorName": tailor_name,
            "pricePerPiece": price_per_piece,
        }
        payload.update(extra)
        return client.post("/api/manufacturing-orders", json=payload)
    return _assign


@pytest.fixture
def record_transaction(client):
    """POST a ledger entry and return the response"""
    def _record(item_id, action, quantity, item_type="MANUFACTURING", **extra):
        payload = {
            "itemType": item_type,
            "itemId": item_id,
            "itemName": extra.pop("itemName", "Shirt"),
            "action": action,
            "quantity": quantity,
            "previousStock": 0,
            "newStock": 0,
            "performedBy": "store keeper",
            "source": "MANUAL",
        }
        payload.update(extra)
        return client.post("/api/transactions", json=payload)
    return _record
