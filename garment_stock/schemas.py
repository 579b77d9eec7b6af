from typing import List, Optional, Dict
from pydantic import BaseModel, ConfigDict, Field, AliasChoices, field_validator, model_validator
from pydantic.alias_generators import to_camel
from datetime import datetime
from enum import Enum
from uuid import UUID

# ============================================================================
# STATUS ENUMS - Validation for status fields
# ============================================================================

class CuttingStatus(str, Enum):
    COMPLETED = "Completed"
    IN_PROGRESS = "In Progress"
    CANCELLED = "Cancelled"

class ManufacturingStatus(str, Enum):
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"
    QR_DELETED = "QR Deleted"

class PaymentStatus(str, Enum):
    PAID = "Paid"
    UNPAID = "Unpaid"

class ItemType(str, Enum):
    FABRIC = "FABRIC"
    MANUFACTURING = "MANUFACTURING"
    CUTTING = "CUTTING"
    UNKNOWN = "UNKNOWN"

class TransactionAction(str, Enum):
    ADD = "ADD"
    REMOVE = "REMOVE"
    STOCK_IN = "STOCK_IN"
    STOCK_OUT = "STOCK_OUT"
    QR_GENERATED = "QR_GENERATED"

class TransactionSource(str, Enum):
    QR_SCANNER = "QR_SCANNER"
    MANUAL = "MANUAL"


class ApiModel(BaseModel):
    """JSON bodies use camelCase; python code uses snake_case."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class MessageResponse(ApiModel):
    message: str


# ============================================================================
# FABRIC SCHEMAS
# ============================================================================

class FabricBase(ApiModel):
    fabric_type: str = Field(..., min_length=1, max_length=255)
    color: str = Field(..., min_length=1, max_length=100)
    quality: str = Field(..., min_length=1, max_length=100)
    length: float = Field(..., gt=0)
    width: float = Field(..., gt=0)
    supplier: str = Field(..., min_length=1, max_length=255)
    purchase_price: Optional[float] = Field(None, ge=0)
    location: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = None

class FabricCreate(FabricBase):
    quantity: Optional[float] = Field(None, ge=0, description="Defaults to length x width")

class FabricUpdate(ApiModel):
    fabric_type: Optional[str] = Field(None, max_length=255)
    color: Optional[str] = Field(None, max_length=100)
    quality: Optional[str] = Field(None, max_length=100)
    length: Optional[float] = Field(None, gt=0)
    width: Optional[float] = Field(None, gt=0)
    supplier: Optional[str] = Field(None, max_length=255)
    purchase_price: Optional[float] = Field(None, ge=0)
    location: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = None

class Fabric(FabricBase):
    id: UUID
    fabric_id: Optional[str] = Field(None, description="Human-readable fabric ID (e.g., FAB0001)")
    quantity: float
    status: str
    created_at: datetime
    updated_at: Optional[datetime] = None

class FabricStats(ApiModel):
    total_fabrics: int
    total_quantity: float
    low_stock: int
    out_of_stock: int
    by_type: Dict[str, float]


# ============================================================================
# CUTTING RECORD SCHEMAS
# ============================================================================

class SizeBreakdownEntry(ApiModel):
    size: str = Field(..., min_length=1, max_length=20)
    quantity: int = Field(..., ge=0)

class CuttingRecordCreate(ApiModel):
    cutting_id: Optional[str] = Field(
        None,
        max_length=50,
        validation_alias=AliasChoices("cuttingId", "id", "cutting_id"),
        description="Human-readable id; generated (CUT0001...) when omitted",
    )
    fabric_type: str = Field(..., min_length=1, max_length=255)
    fabric_color: str = Field(..., min_length=1, max_length=100)
    product_name: str = Field(..., min_length=1, max_length=255)
    pieces_count: int = Field(..., gt=0)
    total_length_used: float = Field(0.0, ge=0)
    size_breakdown: List[SizeBreakdownEntry] = Field(default_factory=list)
    cutting_master: str = Field(..., min_length=1, max_length=255)
    cutting_price_per_piece: float = Field(0.0, ge=0)
    date: str = Field(..., min_length=1, max_length=20)
    time: Optional[str] = Field(None, max_length=20)
    status: CuttingStatus = Field(default=CuttingStatus.COMPLETED)
    notes: Optional[str] = None

    @model_validator(mode="after")
    def check_size_breakdown(self):
        """Sizes must be distinct and their quantities must add up to pieces_count"""
        if not self.size_breakdown:
            return self

        sizes = [entry.size for entry in self.size_breakdown]
        if len(set(sizes)) != len(sizes):
            raise ValueError("sizeBreakdown contains the same size more than once")

        total = sum(entry.quantity for entry in self.size_breakdown)
        if total != self.pieces_count:
            raise ValueError(
                f"sizeBreakdown quantities add up to {total} but piecesCount is {self.pieces_count}"
            )
        return self

class CuttingRecordUpdate(ApiModel):
    product_name: Optional[str] = Field(None, max_length=255)
    total_length_used: Optional[float] = Field(None, ge=0)
    cutting_master: Optional[str] = Field(None, max_length=255)
    cutting_price_per_piece: Optional[float] = Field(None, ge=0)
    date: Optional[str] = Field(None, max_length=20)
    time: Optional[str] = Field(None, max_length=20)
    status: Optional[CuttingStatus] = None
    notes: Optional[str] = None

class CuttingRecord(ApiModel):
    id: UUID
    cutting_id: str
    fabric_type: str
    fabric_color: str
    product_name: str
    pieces_count: int
    total_length_used: float
    size_breakdown: List[SizeBreakdownEntry] = []
    cutting_master: str
    cutting_price_per_piece: float
    date: str
    time: Optional[str] = None
    status: str
    notes: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

class SizeRemaining(ApiModel):
    size: str
    quantity: int
    assigned: int
    remaining_quantity: int

class RemainingSizes(ApiModel):
    cutting_id: str
    pieces_count: int
    sizes: List[SizeRemaining]
    assignable: List[SizeRemaining]
    total_remaining: int
    fully_assigned: bool

class CascadeDeleteDetails(ApiModel):
    cutting_id: str
    deleted_manufacturing_orders: int
    deleted_qr_products: int = Field(..., alias="deletedQRProducts")
    deleted_transactions: int

class CascadeDeleteResponse(ApiModel):
    message: str
    details: CascadeDeleteDetails


# ============================================================================
# MANUFACTURING ORDER SCHEMAS
# ============================================================================

class ManufacturingOrderCreate(ApiModel):
    cutting_id: str = Field(..., min_length=1, max_length=50)
    size: str = Field(..., min_length=1, max_length=20)
    quantity: int = Field(..., gt=0)
    tailor_name: str = Field(..., min_length=1, max_length=255)
    price_per_piece: float = Field(0.0, ge=0)
    manufacturing_id: Optional[str] = Field(None, max_length=50)
    product_name: Optional[str] = Field(None, max_length=255)
    fabric_type: Optional[str] = Field(None, max_length=255)
    fabric_color: Optional[str] = Field(None, max_length=100)
    status: ManufacturingStatus = Field(default=ManufacturingStatus.PENDING)

class AssignAllRequest(ApiModel):
    cutting_id: str = Field(..., min_length=1, max_length=50)
    tailor_name: str = Field(..., min_length=1, max_length=255)
    price_per_piece: float = Field(0.0, ge=0)

class ManufacturingOrderUpdate(ApiModel):
    fabric_type: Optional[str] = Field(None, max_length=255)
    fabric_color: Optional[str] = Field(None, max_length=100)
    product_name: Optional[str] = Field(None, max_length=255)
    quantity: Optional[int] = Field(None, gt=0)
    size: Optional[str] = Field(None, max_length=20)
    tailor_name: Optional[str] = Field(None, max_length=255)
    price_per_piece: Optional[float] = Field(None, ge=0)
    status: Optional[ManufacturingStatus] = None
    payment_status: Optional[PaymentStatus] = None

class ManufacturingOrder(ApiModel):
    id: UUID
    manufacturing_id: str
    cutting_id: str
    fabric_type: str
    fabric_color: str
    product_name: str
    size: str
    quantity: int
    tailor_name: str
    price_per_piece: float
    total_amount: float
    status: str
    payment_status: str
    qr_generated: bool
    completion_date: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

class AssignmentFailure(ApiModel):
    size: str
    message: str

class AssignAllResult(ApiModel):
    message: str
    cutting_id: str
    success_count: int
    total_sizes: int
    orders: List[ManufacturingOrder]
    failures: List[AssignmentFailure]

class BulkStatusUpdate(ApiModel):
    status: ManufacturingStatus

class BulkStatusResult(ApiModel):
    message: str
    updated_count: int
    manufacturing_id: str


# ============================================================================
# QR PRODUCT SCHEMAS
# ============================================================================

class QRProductCreate(ApiModel):
    product_id: Optional[str] = Field(None, max_length=50)
    manufacturing_id: Optional[str] = Field(None, max_length=50)
    cutting_id: Optional[str] = Field(None, max_length=50)
    product_name: str = Field(..., min_length=1, max_length=255)
    color: Optional[str] = Field(None, max_length=100)
    size: Optional[str] = Field(None, max_length=20)
    fabric_type: Optional[str] = Field(None, max_length=255)
    quantity: int = Field(..., ge=1)
    tailor_name: Optional[str] = Field(None, max_length=255)
    qr_code_data: Optional[str] = None
    generated_date: Optional[str] = Field(None, max_length=20)
    notes: Optional[str] = None

class QRProductQuantityUpdate(ApiModel):
    quantity: int = Field(..., ge=0)

class QRProductUpdate(ApiModel):
    product_name: Optional[str] = Field(None, max_length=255)
    color: Optional[str] = Field(None, max_length=100)
    size: Optional[str] = Field(None, max_length=20)
    fabric_type: Optional[str] = Field(None, max_length=255)
    quantity: Optional[int] = Field(None, ge=0)
    tailor_name: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = None

class QRProduct(ApiModel):
    id: UUID
    product_id: str
    manufacturing_id: str
    cutting_id: Optional[str] = None
    product_name: str
    color: Optional[str] = None
    size: Optional[str] = None
    fabric_type: Optional[str] = None
    quantity: int
    tailor_name: Optional[str] = None
    qr_code_data: Optional[str] = None
    is_generated: bool
    generated_date: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

class QRCodeImage(ApiModel):
    product_id: str
    qr_code_data: str
    qr_code: str = Field(..., description="Base64 encoded PNG")


# ============================================================================
# TRANSACTION SCHEMAS
# ============================================================================

class TransactionCreate(ApiModel):
    item_type: ItemType = Field(default=ItemType.UNKNOWN)
    item_id: str = Field(..., min_length=1, max_length=50)
    item_name: str = Field(..., min_length=1, max_length=255)
    action: TransactionAction
    quantity: float = Field(..., ge=0)
    previous_stock: float = Field(..., ge=0)
    new_stock: float = Field(..., ge=0)
    performed_by: str = Field(..., min_length=1, max_length=255)
    source: TransactionSource = Field(default=TransactionSource.MANUAL)
    timestamp: Optional[datetime] = None

    @field_validator("item_id", "item_name", "performed_by")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

class Transaction(ApiModel):
    id: UUID
    transaction_id: str
    timestamp: datetime
    item_type: str
    item_id: str
    item_name: str
    action: str
    quantity: float
    previous_stock: float
    new_stock: float
    performed_by: str
    source: str
    created_at: datetime

class Pagination(ApiModel):
    current_page: int
    total_pages: int
    total_count: int
    limit: int
    has_next_page: bool
    has_prev_page: bool

class TransactionPage(ApiModel):
    transactions: List[Transaction]
    pagination: Pagination

class TransactionStats(ApiModel):
    total_transactions: int
    add_transactions: int
    remove_transactions: int
    recent_transactions: int
    type_stats: Dict[str, int]
    source_stats: Dict[str, int]

class TransactionReverse(ApiModel):
    performed_by: Optional[str] = Field(None, max_length=255)

class BulkDeleteResult(ApiModel):
    message: str
    deleted_count: int


# ============================================================================
# STOCK ROOM SCHEMAS
# ============================================================================

class StockItem(ApiModel):
    manufacturing_id: str
    garment: str
    color: str
    fabric_type: str
    size: str
    quantity: float
    tailor_name: str

class StockMovementCreate(ApiModel):
    manufacturing_id: str = Field(..., min_length=1, max_length=50)
    action: TransactionAction
    quantity: float = Field(..., gt=0)
    performed_by: str = Field(..., min_length=1, max_length=255)
    source: TransactionSource = Field(default=TransactionSource.QR_SCANNER)
    item_name: Optional[str] = Field(None, max_length=255)

    @field_validator("action")
    @classmethod
    def only_stock_moves(cls, v: TransactionAction) -> TransactionAction:
        if v not in (TransactionAction.STOCK_IN, TransactionAction.STOCK_OUT):
            raise ValueError("action must be STOCK_IN or STOCK_OUT")
        return v
