from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from sqlalchemy import func
from typing import Optional, Dict, Any, List, Tuple
from datetime import datetime, timedelta
import math
import logging

from .. import models, schemas
from ..exceptions import DuplicateError, ValidationError

logger = logging.getLogger(__name__)

# Whole-insert retries when a generated transaction id still collides at commit time
INSERT_ATTEMPTS = 3

INCREASE_ACTIONS = (models.TransactionAction.ADD.value, models.TransactionAction.STOCK_IN.value)
DECREASE_ACTIONS = (models.TransactionAction.REMOVE.value, models.TransactionAction.STOCK_OUT.value)

REVERSED_ACTIONS = {
    models.TransactionAction.ADD.value: models.TransactionAction.REMOVE.value,
    models.TransactionAction.REMOVE.value: models.TransactionAction.ADD.value,
    models.TransactionAction.STOCK_IN.value: models.TransactionAction.STOCK_OUT.value,
    models.TransactionAction.STOCK_OUT.value: models.TransactionAction.STOCK_IN.value,
}


class CRUDTransaction:
    """Append-only ledger access. There is deliberately no update method."""

    def record(
        self,
        db: Session,
        *,
        item_type: str,
        item_id: str,
        item_name: str,
        action: str,
        quantity: float,
        previous_stock: float,
        new_stock: float,
        performed_by: str,
        source: str = models.TransactionSource.MANUAL.value,
        timestamp: Optional[datetime] = None,
    ) -> models.StockTransaction:
        """Append one immutable stock movement with a generated transaction id"""
        for attempt in range(1, INSERT_ATTEMPTS + 1):
            db_transaction = models.StockTransaction(
                item_type=item_type,
                item_id=item_id,
                item_name=item_name,
                action=action,
                quantity=quantity,
                previous_stock=previous_stock,
                new_stock=new_stock,
                performed_by=performed_by,
                source=source,
                timestamp=timestamp or datetime.utcnow(),
            )
            db.add(db_transaction)
            try:
                db.commit()
            except IntegrityError:
                db.rollback()
                logger.warning(f"Transaction id collision for {item_id}, retrying (attempt {attempt})")
                continue

            db.refresh(db_transaction)
            logger.info(
                f"Recorded {db_transaction.transaction_id}: {action} {quantity} of {item_type}/{item_id} "
                f"by {performed_by} ({source})"
            )
            return db_transaction

        raise DuplicateError("Transaction with this ID already exists")

    def create_transaction(self, db: Session, *, transaction: schemas.TransactionCreate) -> models.StockTransaction:
        return self.record(
            db,
            item_type=transaction.item_type.value,
            item_id=transaction.item_id,
            item_name=transaction.item_name,
            action=transaction.action.value,
            quantity=transaction.quantity,
            previous_stock=transaction.previous_stock,
            new_stock=transaction.new_stock,
            performed_by=transaction.performed_by,
            source=transaction.source.value,
            timestamp=transaction.timestamp,
        )

    def reverse_transaction(
        self, db: Session, *, original: models.StockTransaction, performed_by: Optional[str] = None
    ) -> models.StockTransaction:
        """Append the compensating entry for a movement; history itself is never edited"""
        reversed_action = REVERSED_ACTIONS.get(original.action)
        if reversed_action is None:
            raise ValidationError(f"{original.action} transactions cannot be reversed")

        delta = original.new_stock - original.previous_stock
        return self.record(
            db,
            item_type=original.item_type,
            item_id=original.item_id,
            item_name=original.item_name,
            action=reversed_action,
            quantity=original.quantity,
            previous_stock=original.new_stock,
            new_stock=max(original.new_stock - delta, 0),
            performed_by=performed_by or original.performed_by,
            source=models.TransactionSource.MANUAL.value,
        )

    def get(self, db: Session, id) -> Optional[models.StockTransaction]:
        return db.query(models.StockTransaction).filter(models.StockTransaction.id == id).first()

    def get_transactions(
        self,
        db: Session,
        *,
        page: int = 1,
        limit: int = 50,
        item_type: Optional[str] = None,
        action: Optional[str] = None,
        item_id: Optional[str] = None,
        performed_by: Optional[str] = None,
        source: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> Tuple[List[models.StockTransaction], Dict[str, Any]]:
        """Filtered, newest-first page of the ledger plus pagination info"""
        query = db.query(models.StockTransaction)

        if item_type:
            query = query.filter(models.StockTransaction.item_type == item_type)
        if action:
            query = query.filter(models.StockTransaction.action == action)
        if item_id:
            query = query.filter(models.StockTransaction.item_id == item_id)
        if performed_by:
            query = query.filter(models.StockTransaction.performed_by.ilike(f"%{performed_by}%"))
        if source:
            query = query.filter(models.StockTransaction.source == source)
        if start_date:
            query = query.filter(models.StockTransaction.timestamp >= start_date)
        if end_date:
            query = query.filter(models.StockTransaction.timestamp <= end_date)

        total_count = query.count()
        transactions = (
            query.order_by(models.StockTransaction.timestamp.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return transactions, paginate(page, limit, total_count)

    def get_all_for_items(self, db: Session, *, item_type: Optional[str] = None) -> List[models.StockTransaction]:
        """Full ledger in time order, optionally for one item type"""
        query = db.query(models.StockTransaction)
        if item_type:
            query = query.filter(models.StockTransaction.item_type == item_type)
        return query.order_by(models.StockTransaction.timestamp, models.StockTransaction.created_at).all()

    def get_stats(self, db: Session) -> Dict[str, Any]:
        total = db.query(func.count(models.StockTransaction.id)).scalar() or 0
        adds = (
            db.query(func.count(models.StockTransaction.id))
            .filter(models.StockTransaction.action.in_(INCREASE_ACTIONS))
            .scalar() or 0
        )
        removes = (
            db.query(func.count(models.StockTransaction.id))
            .filter(models.StockTransaction.action.in_(DECREASE_ACTIONS))
            .scalar() or 0
        )
        seven_days_ago = datetime.utcnow() - timedelta(days=7)
        recent = (
            db.query(func.count(models.StockTransaction.id))
            .filter(models.StockTransaction.timestamp >= seven_days_ago)
            .scalar() or 0
        )

        type_stats = dict(
            db.query(models.StockTransaction.item_type, func.count(models.StockTransaction.id))
            .group_by(models.StockTransaction.item_type)
            .all()
        )
        source_stats = dict(
            db.query(models.StockTransaction.source, func.count(models.StockTransaction.id))
            .group_by(models.StockTransaction.source)
            .all()
        )

        return {
            "total_transactions": total,
            "add_transactions": adds,
            "remove_transactions": removes,
            "recent_transactions": recent,
            "type_stats": type_stats,
            "source_stats": source_stats,
        }

    def delete_transaction(self, db: Session, *, db_transaction: models.StockTransaction) -> None:
        db.delete(db_transaction)
        db.commit()

    def delete_all(self, db: Session) -> int:
        deleted = db.query(models.StockTransaction).delete(synchronize_session=False)
        db.commit()
        return deleted

    def delete_for_items(self, db: Session, *, item_ids: List[str]) -> int:
        """Delete every transaction whose item id is in item_ids. Caller commits."""
        if not item_ids:
            return 0
        return (
            db.query(models.StockTransaction)
            .filter(models.StockTransaction.item_id.in_(item_ids))
            .delete(synchronize_session=False)
        )


def paginate(page: int, limit: int, total_count: int) -> Dict[str, Any]:
    total_pages = math.ceil(total_count / limit) if limit else 0
    return {
        "current_page": page,
        "total_pages": total_pages,
        "total_count": total_count,
        "limit": limit,
        "has_next_page": page < total_pages,
        "has_prev_page": page > 1,
    }


transaction = CRUDTransaction()
