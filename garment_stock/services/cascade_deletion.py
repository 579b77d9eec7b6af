from sqlalchemy.orm import Session
from typing import Any, Dict
from uuid import UUID
import logging

from .. import models
from ..crud.transactions import transaction as transaction_crud
from ..exceptions import NotFoundError

logger = logging.getLogger(__name__)


def delete_cutting_record_cascade(db: Session, record_id: UUID) -> Dict[str, Any]:
    """
    Delete a cutting record together with everything that points at it by value:
    its manufacturing orders, the QR products of those manufacturing ids, and
    transactions on the cutting id or any of those manufacturing ids.

    All deletes share one database transaction; a failure rolls every step back.
    """
    record = db.query(models.CuttingRecord).filter(models.CuttingRecord.id == record_id).first()
    if not record:
        raise NotFoundError("Cutting record not found")

    cutting_id = record.cutting_id
    manufacturing_ids = sorted({
        row[0] for row in
        db.query(models.ManufacturingOrder.manufacturing_id)
        .filter(models.ManufacturingOrder.cutting_id == cutting_id)
        .all()
    })

    try:
        db.delete(record)

        deleted_orders = (
            db.query(models.ManufacturingOrder)
            .filter(models.ManufacturingOrder.cutting_id == cutting_id)
            .delete(synchronize_session=False)
        )

        deleted_qr_products = 0
        if manufacturing_ids:
            deleted_qr_products = (
                db.query(models.QRProduct)
                .filter(models.QRProduct.manufacturing_id.in_(manufacturing_ids))
                .delete(synchronize_session=False)
            )

        deleted_transactions = transaction_crud.delete_for_items(db, item_ids=[cutting_id] + manufacturing_ids)

        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Cascade delete of cutting record {cutting_id} failed, rolled back: {e}")
        raise

    logger.info(
        f"Deleted cutting record {cutting_id}: {deleted_orders} manufacturing orders, "
        f"{deleted_qr_products} QR products, {deleted_transactions} transactions"
    )
    return {
        "cutting_id": cutting_id,
        "deleted_manufacturing_orders": deleted_orders,
        "deleted_qr_products": deleted_qr_products,
        "deleted_transactions": deleted_transactions,
    }
