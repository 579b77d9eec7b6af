"""
Tailor assignment of cut pieces.

Single-size assignments lock the cutting record row, re-derive what is left
for the size from existing orders and refuse to over-allocate. Edits to an
assigned quantity go through the same check with the edited order's own
pieces given back. Bulk assignment runs the single-size path once per
remaining size; each size is committed on its own, so a failure leaves the
earlier sizes assigned.
"""
from sqlalchemy.orm import Session
from typing import Any, Dict, List, Optional
from uuid import UUID
import logging

from .. import crud, models, schemas
from ..exceptions import InsufficientStockError, NotFoundError, StockError, ValidationError
from .id_generator import FrontendIDGenerator
from .size_ledger import summarize

logger = logging.getLogger(__name__)


def _lock_cutting_record(db: Session, cutting_id: str) -> models.CuttingRecord:
    # FOR UPDATE serializes concurrent assignments on databases that support it
    record = (
        db.query(models.CuttingRecord)
        .filter(models.CuttingRecord.cutting_id == cutting_id)
        .with_for_update()
        .first()
    )
    if not record:
        raise NotFoundError("Cutting record not found")
    return record


def _remaining_for_size(
    db: Session, record: models.CuttingRecord, size: str, exclude_order_id: Optional[UUID] = None
) -> int:
    orders = [
        order for order in crud.manufacturing_order.get_by_cutting_id(db, record.cutting_id)
        if order.id != exclude_order_id
    ]
    summary = summarize(record, orders)

    if not summary["sizes"]:
        return summary["total_remaining"]

    for row in summary["sizes"]:
        if row["size"] == size:
            return row["remaining_quantity"]
    raise ValidationError(f"Size {size} is not part of cutting record {record.cutting_id}")


def assign_size(db: Session, request: schemas.ManufacturingOrderCreate) -> models.ManufacturingOrder:
    """Create (or extend under a reused manufacturing id) one tailor assignment for one size"""
    try:
        record = _lock_cutting_record(db, request.cutting_id)

        remaining = _remaining_for_size(db, record, request.size)
        if request.quantity > remaining:
            raise InsufficientStockError(
                f"Cannot assign {request.quantity} pieces of size {request.size}: "
                f"only {max(remaining, 0)} remaining for {record.cutting_id}"
            )

        product_name = request.product_name or record.product_name
        fabric_type = request.fabric_type or record.fabric_type
        fabric_color = request.fabric_color or record.fabric_color

        manufacturing_id = request.manufacturing_id or FrontendIDGenerator.resolve_manufacturing_id(
            db,
            cutting_id=record.cutting_id,
            product_name=product_name,
            size=request.size,
            fabric_color=fabric_color,
            fabric_type=fabric_type,
        )

        order = models.ManufacturingOrder(
            manufacturing_id=manufacturing_id,
            cutting_id=record.cutting_id,
            fabric_type=fabric_type,
            fabric_color=fabric_color,
            product_name=product_name,
            size=request.size,
            quantity=request.quantity,
            tailor_name=request.tailor_name,
            price_per_piece=request.price_per_piece,
            total_amount=request.quantity * request.price_per_piece,
            status=request.status.value,
        )
        db.add(order)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(order)
    logger.info(
        f"Assigned {order.quantity} x {order.size} of {order.cutting_id} to {order.tailor_name} "
        f"as {order.manufacturing_id} (total {order.total_amount})"
    )
    return order


def update_assignment(
    db: Session, order: models.ManufacturingOrder, order_update: schemas.ManufacturingOrderUpdate
) -> models.ManufacturingOrder:
    """
    Edit an assigned order. The size is fixed once assigned, since the
    manufacturing id stands for it; a larger quantity must fit in what is left
    of the size with this order's current pieces given back.
    """
    try:
        if order_update.size is not None and order_update.size != order.size:
            raise ValidationError(
                f"Size of {order.manufacturing_id} cannot change from {order.size} to {order_update.size}; "
                f"delete the order and assign size {order_update.size} instead"
            )

        if order_update.quantity is not None and order_update.quantity > order.quantity:
            record = _lock_cutting_record(db, order.cutting_id)
            available = _remaining_for_size(db, record, order.size, exclude_order_id=order.id)
            if order_update.quantity > available:
                raise InsufficientStockError(
                    f"Cannot raise {order.manufacturing_id} to {order_update.quantity} pieces of size {order.size}: "
                    f"only {max(available, 0)} available for {record.cutting_id}"
                )
    except Exception:
        db.rollback()
        raise

    return crud.manufacturing_order.update_order(db=db, db_order=order, order_update=order_update)


def assign_all_remaining(db: Session, request: schemas.AssignAllRequest) -> Dict[str, Any]:
    """
    Assign every size that still has pieces left to one tailor at one price.

    Best effort: each size is its own write, failures are collected and the
    loop carries on.
    """
    record = crud.cutting_record.get_by_cutting_id(db, request.cutting_id)
    if not record:
        raise NotFoundError("Cutting record not found")

    summary = summarize(record, crud.manufacturing_order.get_by_cutting_id(db, record.cutting_id))
    available_sizes = summary["assignable"]

    created: List[models.ManufacturingOrder] = []
    failures: List[Dict[str, str]] = []

    for row in available_sizes:
        try:
            order = assign_size(db, schemas.ManufacturingOrderCreate(
                cutting_id=record.cutting_id,
                size=row["size"],
                quantity=row["remaining_quantity"],
                tailor_name=request.tailor_name,
                price_per_piece=request.price_per_piece,
            ))
            created.append(order)
        except StockError as e:
            logger.warning(f"Bulk assignment skipped size {row['size']} of {record.cutting_id}: {e.message}")
            failures.append({"size": row["size"], "message": e.message})
        except Exception as e:
            logger.error(f"Bulk assignment failed for size {row['size']} of {record.cutting_id}: {e}")
            failures.append({"size": row["size"], "message": str(e)})

    total_sizes = len(available_sizes)
    if not summary["sizes"]:
        message = f"Cutting record {record.cutting_id} has no size breakdown to bulk-assign"
    elif total_sizes == 0:
        message = f"All sizes of {record.cutting_id} are already fully assigned"
    else:
        message = f"Assigned {len(created)} of {total_sizes} sizes to {request.tailor_name}"

    logger.info(message)
    return {
        "message": message,
        "cutting_id": record.cutting_id,
        "success_count": len(created),
        "total_sizes": total_sizes,
        "orders": created,
        "failures": failures,
    }
