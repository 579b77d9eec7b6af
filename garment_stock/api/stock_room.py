from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List
import logging

from .base import get_db, http_error
from .. import schemas
from ..exceptions import StockError
from ..services import stock_aggregator

router = APIRouter()
logger = logging.getLogger(__name__)

# ============================================================================
# STOCK ROOM ENDPOINTS
# ============================================================================

@router.get("/stock-room/data", response_model=List[schemas.StockItem], tags=["Stock Room"])
def get_stock_room_data(db: Session = Depends(get_db)):
    """Current on-hand stock per manufacturing ID, rebuilt from orders, QR products and the ledger"""
    try:
        return stock_aggregator.get_stock_items(db)
    except Exception as e:
        logger.error(f"Error building stock room data: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@router.get("/stock-room/item/{manufacturing_id}", response_model=schemas.StockItem, tags=["Stock Room"])
def get_stock_room_item(manufacturing_id: str, db: Session = Depends(get_db)):
    try:
        return stock_aggregator.get_stock_item(db, manufacturing_id)
    except StockError as e:
        raise http_error(e)
    except Exception as e:
        logger.error(f"Error getting stock item {manufacturing_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@router.post("/stock-room/movements", response_model=schemas.Transaction, status_code=201, tags=["Stock Room"])
def record_stock_movement(movement: schemas.StockMovementCreate, db: Session = Depends(get_db)):
    """Stock a manufacturing ID in or out; previous and new stock come from the current view"""
    try:
        return stock_aggregator.record_stock_movement(db, movement)
    except StockError as e:
        raise http_error(e)
    except Exception as e:
        logger.error(f"Error recording stock movement for {movement.manufacturing_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))
