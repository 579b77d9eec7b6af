from sqlalchemy.orm import Session
from typing import List, Optional, Dict, Any
from datetime import datetime, date, time
import logging

from .base import CRUDBase, _plain
from .. import models, schemas

logger = logging.getLogger(__name__)

# Statuses that stamp completion_date
COMPLETION_STATUSES = (models.ManufacturingStatus.COMPLETED.value, models.ManufacturingStatus.QR_DELETED.value)


class CRUDManufacturingOrder(CRUDBase[models.ManufacturingOrder, schemas.ManufacturingOrderCreate, schemas.ManufacturingOrderUpdate]):
    def get_orders(
        self,
        db: Session,
        *,
        payment_status: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[models.ManufacturingOrder]:
        """Get manufacturing orders, newest first, optionally by payment status and creation date range"""
        query = db.query(models.ManufacturingOrder)

        if payment_status in (models.PaymentStatus.PAID.value, models.PaymentStatus.UNPAID.value):
            query = query.filter(models.ManufacturingOrder.payment_status == payment_status)
        if start_date:
            query = query.filter(models.ManufacturingOrder.created_at >= datetime.combine(start_date, time.min))
        if end_date:
            # End date is inclusive up to the end of that day
            query = query.filter(models.ManufacturingOrder.created_at <= datetime.combine(end_date, time.max))

        return query.order_by(models.ManufacturingOrder.created_at.desc()).all()

    def get_by_cutting_id(self, db: Session, cutting_id: str) -> List[models.ManufacturingOrder]:
        return (
            db.query(models.ManufacturingOrder)
            .filter(models.ManufacturingOrder.cutting_id == cutting_id)
            .order_by(models.ManufacturingOrder.created_at)
            .all()
        )

    def get_by_manufacturing_id(self, db: Session, manufacturing_id: str) -> List[models.ManufacturingOrder]:
        return (
            db.query(models.ManufacturingOrder)
            .filter(models.ManufacturingOrder.manufacturing_id == manufacturing_id)
            .all()
        )

    def update_order(
        self, db: Session, *, db_order: models.ManufacturingOrder, order_update: schemas.ManufacturingOrderUpdate
    ) -> models.ManufacturingOrder:
        """
        Update an order. Price or quantity edits recompute total_amount.
        Completed / QR Deleted stamp completion_date; QR Deleted also drops the
        QR products of this manufacturing id.
        """
        update_data = order_update.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            if value is not None:
                setattr(db_order, field, _plain(value))

        db_order.total_amount = db_order.quantity * db_order.price_per_piece

        new_status = update_data.get("status")
        if new_status is not None:
            new_status = _plain(new_status)
            if new_status in COMPLETION_STATUSES:
                db_order.completion_date = datetime.utcnow()
            if new_status == models.ManufacturingStatus.QR_DELETED.value:
                removed = self._delete_qr_products(db, db_order.manufacturing_id)
                db_order.qr_generated = False
                logger.info(f"Removed {removed} QR product(s) for {db_order.manufacturing_id}")

        db.commit()
        db.refresh(db_order)
        return db_order

    def bulk_update_status(self, db: Session, *, manufacturing_id: str, status: str) -> int:
        """Set status on every order sharing a manufacturing id; returns how many changed"""
        update_values: Dict[str, Any] = {"status": status}
        if status in COMPLETION_STATUSES:
            update_values["completion_date"] = datetime.utcnow()
        if status == models.ManufacturingStatus.QR_DELETED.value:
            update_values["qr_generated"] = False

        updated = (
            db.query(models.ManufacturingOrder)
            .filter(
                models.ManufacturingOrder.manufacturing_id == manufacturing_id,
                models.ManufacturingOrder.status != status,
            )
            .update(update_values, synchronize_session=False)
        )

        if status == models.ManufacturingStatus.QR_DELETED.value:
            self._delete_qr_products(db, manufacturing_id)

        db.commit()
        return updated

    def delete_order(self, db: Session, *, db_order: models.ManufacturingOrder) -> bool:
        """
        Delete one order. When it is the last order carrying its manufacturing id,
        the QR products and transactions of that id go with it.

        Returns True when the dependents were removed as well.
        """
        manufacturing_id = db_order.manufacturing_id
        remaining = (
            db.query(models.ManufacturingOrder)
            .filter(
                models.ManufacturingOrder.manufacturing_id == manufacturing_id,
                models.ManufacturingOrder.id != db_order.id,
            )
            .count()
        )

        db.delete(db_order)

        last_record = remaining == 0
        if last_record:
            self._delete_qr_products(db, manufacturing_id)
            db.query(models.StockTransaction).filter(
                models.StockTransaction.item_id == manufacturing_id
            ).delete(synchronize_session=False)

        db.commit()
        return last_record

    @staticmethod
    def _delete_qr_products(db: Session, manufacturing_id: str) -> int:
        return (
            db.query(models.QRProduct)
            .filter(models.QRProduct.manufacturing_id == manufacturing_id)
            .delete(synchronize_session=False)
        )


manufacturing_order = CRUDManufacturingOrder(models.ManufacturingOrder)
