from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import datetime
from uuid import UUID
import logging

from .base import get_db, http_error
from .. import crud, schemas
from ..exceptions import StockError

router = APIRouter()
logger = logging.getLogger(__name__)

# ============================================================================
# TRANSACTION LEDGER ENDPOINTS
# ============================================================================

@router.get("/transactions", response_model=schemas.TransactionPage, tags=["Transactions"])
def get_transactions(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=1000),
    item_type: Optional[schemas.ItemType] = Query(None, alias="itemType"),
    action: Optional[schemas.TransactionAction] = Query(None),
    item_id: Optional[str] = Query(None, alias="itemId"),
    performed_by: Optional[str] = Query(None, alias="performedBy"),
    source: Optional[schemas.TransactionSource] = Query(None),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    db: Session = Depends(get_db)
):
    """Filtered, paginated ledger, newest first"""
    try:
        transactions, pagination = crud.transaction.get_transactions(
            db,
            page=page,
            limit=limit,
            item_type=item_type.value if item_type else None,
            action=action.value if action else None,
            item_id=item_id,
            performed_by=performed_by,
            source=source.value if source else None,
            start_date=start_date,
            end_date=end_date,
        )
        return {"transactions": transactions, "pagination": pagination}
    except Exception as e:
        logger.error(f"Error getting transactions: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@router.get("/transactions/stats/overview", response_model=schemas.TransactionStats, tags=["Transactions"])
def get_transaction_stats(db: Session = Depends(get_db)):
    """Counts by direction, item type and source, plus the last 7 days"""
    try:
        return crud.transaction.get_stats(db)
    except Exception as e:
        logger.error(f"Error getting transaction stats: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@router.get("/transactions/item/{item_id}", response_model=List[schemas.Transaction], tags=["Transactions"])
def get_item_transactions(item_id: str, limit: int = Query(20, ge=1, le=1000), db: Session = Depends(get_db)):
    """Most recent transactions of one item"""
    try:
        transactions, _ = crud.transaction.get_transactions(db, page=1, limit=limit, item_id=item_id)
        return transactions
    except Exception as e:
        logger.error(f"Error getting transactions for item {item_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@router.get("/transactions/{transaction_id}", response_model=schemas.Transaction, tags=["Transactions"])
def get_transaction(transaction_id: UUID, db: Session = Depends(get_db)):
    transaction = crud.transaction.get(db, transaction_id)
    if not transaction:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return transaction

@router.post("/transactions", response_model=schemas.Transaction, status_code=201, tags=["Transactions"])
def create_transaction(transaction: schemas.TransactionCreate, db: Session = Depends(get_db)):
    """Append a stock movement to the ledger; the transaction ID is generated"""
    try:
        return crud.transaction.create_transaction(db, transaction=transaction)
    except StockError as e:
        raise http_error(e)
    except Exception as e:
        logger.error(f"Error creating transaction for {transaction.item_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@router.post("/transactions/{transaction_id}/reverse", response_model=schemas.Transaction, status_code=201, tags=["Transactions"])
def reverse_transaction(
    transaction_id: UUID,
    reverse: Optional[schemas.TransactionReverse] = None,
    db: Session = Depends(get_db)
):
    """Append the opposite movement of an existing transaction"""
    try:
        original = crud.transaction.get(db, transaction_id)
        if not original:
            raise HTTPException(status_code=404, detail="Transaction not found")

        return crud.transaction.reverse_transaction(
            db, original=original, performed_by=reverse.performed_by if reverse else None
        )
    except HTTPException:
        raise
    except StockError as e:
        raise http_error(e)
    except Exception as e:
        logger.error(f"Error reversing transaction {transaction_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@router.delete("/transactions/{transaction_id}", response_model=schemas.MessageResponse, tags=["Transactions"])
def delete_transaction(transaction_id: UUID, db: Session = Depends(get_db)):
    transaction = crud.transaction.get(db, transaction_id)
    if not transaction:
        raise HTTPException(status_code=404, detail="Transaction not found")

    crud.transaction.delete_transaction(db, db_transaction=transaction)
    logger.warning(f"Deleted transaction {transaction.transaction_id}")
    return {"message": "Transaction deleted successfully"}

@router.delete("/transactions", response_model=schemas.BulkDeleteResult, tags=["Transactions"])
def delete_all_transactions(db: Session = Depends(get_db)):
    """Wipe the whole ledger"""
    try:
        deleted = crud.transaction.delete_all(db)
        logger.warning(f"Deleted all {deleted} transactions")
        return {"message": f"Successfully deleted {deleted} transactions", "deleted_count": deleted}
    except Exception as e:
        db.rollback()
        logger.error(f"Error deleting transactions: {e}")
        raise HTTPException(status_code=500, detail=str(e))
