from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, Text, Boolean, Uuid, event
from sqlalchemy.orm import relationship
import uuid
from datetime import datetime
from .database import Base
from enum import Enum as PyEnum

# Marker stored in cutting_id for QR products that were entered by hand
MANUAL_CUTTING_ID = "MANUAL"


# Status Enums
class CuttingStatus(str, PyEnum):
    COMPLETED = "Completed"
    IN_PROGRESS = "In Progress"
    CANCELLED = "Cancelled"

class ManufacturingStatus(str, PyEnum):
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"
    QR_DELETED = "QR Deleted"

class PaymentStatus(str, PyEnum):
    PAID = "Paid"
    UNPAID = "Unpaid"

class FabricStatus(str, PyEnum):
    IN_STOCK = "In Stock"
    LOW_STOCK = "Low Stock"
    OUT_OF_STOCK = "Out of Stock"

class ItemType(str, PyEnum):
    FABRIC = "FABRIC"
    MANUFACTURING = "MANUFACTURING"
    CUTTING = "CUTTING"
    UNKNOWN = "UNKNOWN"

class TransactionAction(str, PyEnum):
    ADD = "ADD"
    REMOVE = "REMOVE"
    STOCK_IN = "STOCK_IN"
    STOCK_OUT = "STOCK_OUT"
    QR_GENERATED = "QR_GENERATED"

class TransactionSource(str, PyEnum):
    QR_SCANNER = "QR_SCANNER"
    MANUAL = "MANUAL"


# ============================================================================
# RAW MATERIAL
# ============================================================================

class Fabric(Base):
    __tablename__ = "fabric"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    fabric_id = Column(String(50), unique=True, nullable=True, index=True)  # FAB0001, FAB0002, etc.
    fabric_type = Column(String(255), nullable=False, index=True)
    color = Column(String(100), nullable=False)
    quality = Column(String(100), nullable=False)
    length = Column(Float, nullable=False)
    width = Column(Float, nullable=False)
    quantity = Column(Float, nullable=False, default=0.0)  # square meters on hand
    supplier = Column(String(255), nullable=False)
    purchase_price = Column(Float, nullable=True)
    location = Column(String(255), nullable=True)
    status = Column(String(50), default=FabricStatus.IN_STOCK.value, nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


# ============================================================================
# CUTTING -> MANUFACTURING -> QR PIPELINE
# Cross-table links are plain string ids compared by value, never foreign keys.
# ============================================================================

class CuttingRecord(Base):
    __tablename__ = "cutting_record"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    cutting_id = Column(String(50), unique=True, nullable=True, index=True)  # CUT0001, CUT0002, etc.
    fabric_type = Column(String(255), nullable=False)
    fabric_color = Column(String(100), nullable=False)
    product_name = Column(String(255), nullable=False, index=True)
    pieces_count = Column(Integer, nullable=False)
    total_length_used = Column(Float, nullable=False, default=0.0)
    cutting_master = Column(String(255), nullable=False)
    cutting_price_per_piece = Column(Float, nullable=False, default=0.0)
    date = Column(String(20), nullable=False)
    time = Column(String(20), nullable=True)
    status = Column(String(50), default=CuttingStatus.COMPLETED.value, nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    size_breakdown = relationship(
        "CuttingSizeBreakdown",
        back_populates="cutting_record",
        order_by="CuttingSizeBreakdown.position",
        cascade="all, delete-orphan",
    )


class CuttingSizeBreakdown(Base):
    """One size line of a cutting record, kept in entry order."""
    __tablename__ = "cutting_size_breakdown"

    id = Column(Integer, primary_key=True, autoincrement=True)
    cutting_record_id = Column(Uuid, ForeignKey("cutting_record.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    size = Column(String(20), nullable=False)
    quantity = Column(Integer, nullable=False)

    cutting_record = relationship("CuttingRecord", back_populates="size_breakdown")


class ManufacturingOrder(Base):
    """
    Pieces of one size from one cutting record assigned to a tailor.
    manufacturing_id is shared by every order for the same
    cutting + product + size + colour + fabric combination.
    """
    __tablename__ = "manufacturing_order"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    manufacturing_id = Column(String(50), nullable=False, index=True)  # MFG0001, not unique
    cutting_id = Column(String(50), nullable=False, index=True)
    fabric_type = Column(String(255), nullable=False)
    fabric_color = Column(String(100), nullable=False)
    product_name = Column(String(255), nullable=False)
    size = Column(String(20), nullable=False, index=True)
    quantity = Column(Integer, nullable=False)
    tailor_name = Column(String(255), nullable=False, index=True)
    price_per_piece = Column(Float, nullable=False, default=0.0)
    total_amount = Column(Float, nullable=False, default=0.0)
    status = Column(String(50), default=ManufacturingStatus.PENDING.value, nullable=False, index=True)
    payment_status = Column(String(20), default=PaymentStatus.UNPAID.value, nullable=False)
    qr_generated = Column(Boolean, default=False, nullable=False)
    completion_date = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class QRProduct(Base):
    __tablename__ = "qr_product"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    product_id = Column(String(50), unique=True, nullable=False, index=True)
    manufacturing_id = Column(String(50), nullable=False, index=True)
    cutting_id = Column(String(50), nullable=True, index=True)  # MANUAL for hand-entered stock
    product_name = Column(String(255), nullable=False)
    color = Column(String(100), nullable=True)
    size = Column(String(20), nullable=True)
    fabric_type = Column(String(255), nullable=True)
    quantity = Column(Integer, nullable=False, default=0)
    tailor_name = Column(String(255), nullable=True)
    qr_code_data = Column(Text, nullable=True)
    is_generated = Column(Boolean, default=True, nullable=False)
    generated_date = Column(String(20), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


# ============================================================================
# LEDGER - Append-only stock movements
# ============================================================================

class StockTransaction(Base):
    """
    Immutable stock movement. previous_stock/new_stock are what the writer saw;
    current stock is always re-derived by folding the ledger.
    """
    __tablename__ = "stock_transaction"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    transaction_id = Column(String(50), unique=True, nullable=True, index=True)
    timestamp = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    item_type = Column(String(20), default=ItemType.UNKNOWN.value, nullable=False, index=True)
    item_id = Column(String(50), nullable=False, index=True)
    item_name = Column(String(255), nullable=False)
    action = Column(String(20), nullable=False, index=True)
    quantity = Column(Float, nullable=False)
    previous_stock = Column(Float, nullable=False)
    new_stock = Column(Float, nullable=False)
    performed_by = Column(String(255), nullable=False, index=True)
    source = Column(String(20), default=TransactionSource.MANUAL.value, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


# ============================================================================
# ID GENERATION - Auto-generate human-readable IDs on record creation
# ============================================================================

def generate_frontend_id_on_insert(mapper, connection, target):
    """
    SQLAlchemy event handler to generate the human-readable id before insert.
    Only fills the column when the caller did not provide one.
    """
    from .services.id_generator import FrontendIDGenerator

    table_name = target.__tablename__
    column_name = FrontendIDGenerator.ID_PATTERNS[table_name]["column_name"]

    if getattr(target, column_name) is None:
        setattr(target, column_name, FrontendIDGenerator.generate_frontend_id(table_name, connection))


def generate_transaction_id_on_insert(mapper, connection, target):
    """Fill transaction_id using the timestamp + random strategy with duplicate retries."""
    from .services.id_generator import FrontendIDGenerator

    if target.transaction_id is None:
        target.transaction_id = FrontendIDGenerator.generate_transaction_id(
            action=target.action,
            item_type=target.item_type or ItemType.UNKNOWN.value,
            db=connection,
        )


# Register event listeners for all models that have a generated sequential id
models_with_frontend_id = [
    CuttingRecord,
    Fabric,
]

for model in models_with_frontend_id:
    event.listen(model, 'before_insert', generate_frontend_id_on_insert)

event.listen(StockTransaction, 'before_insert', generate_transaction_id_on_insert)
