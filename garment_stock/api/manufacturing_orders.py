from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date
from uuid import UUID
import logging

from .base import get_db, http_error, validate_status_transition
from .. import crud, schemas
from ..exceptions import StockError
from ..services import assignment

router = APIRouter()
logger = logging.getLogger(__name__)

# ============================================================================
# MANUFACTURING ORDER ENDPOINTS
# ============================================================================

@router.get("/manufacturing-orders", response_model=List[schemas.ManufacturingOrder], tags=["Manufacturing Orders"])
def get_manufacturing_orders(
    payment_status: Optional[str] = Query(None, alias="paymentStatus"),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    db: Session = Depends(get_db)
):
    """Get manufacturing orders with optional payment status and date range filters"""
    try:
        return crud.manufacturing_order.get_orders(
            db=db, payment_status=payment_status, start_date=start_date, end_date=end_date
        )
    except Exception as e:
        logger.error(f"Error getting manufacturing orders: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@router.get("/manufacturing-orders/{order_id}", response_model=schemas.ManufacturingOrder, tags=["Manufacturing Orders"])
def get_manufacturing_order(order_id: UUID, db: Session = Depends(get_db)):
    """Get manufacturing order by database ID"""
    order = crud.manufacturing_order.get(db, order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Manufacturing order not found")
    return order

@router.post("/manufacturing-orders", response_model=schemas.ManufacturingOrder, status_code=201, tags=["Manufacturing Orders"])
def create_manufacturing_order(order: schemas.ManufacturingOrderCreate, db: Session = Depends(get_db)):
    """Assign pieces of one size from a cutting record to a tailor"""
    try:
        return assignment.assign_size(db, order)
    except StockError as e:
        raise http_error(e)
    except Exception as e:
        logger.error(f"Error creating manufacturing order for {order.cutting_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@router.post("/manufacturing-orders/assign-all", response_model=schemas.AssignAllResult, tags=["Manufacturing Orders"])
def assign_all_sizes(request: schemas.AssignAllRequest, db: Session = Depends(get_db)):
    """Assign every remaining size of a cutting record to one tailor (best effort, per size)"""
    try:
        return assignment.assign_all_remaining(db, request)
    except StockError as e:
        raise http_error(e)
    except Exception as e:
        logger.error(f"Error in bulk assignment for {request.cutting_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@router.put("/manufacturing-orders/bulk-status/{manufacturing_id}", response_model=schemas.BulkStatusResult, tags=["Manufacturing Orders"])
def bulk_update_status(
    manufacturing_id: str,
    status_update: schemas.BulkStatusUpdate,
    db: Session = Depends(get_db)
):
    """Set the status of every order sharing a manufacturing ID"""
    try:
        orders = crud.manufacturing_order.get_by_manufacturing_id(db, manufacturing_id)
        if not orders:
            raise HTTPException(status_code=404, detail="No manufacturing orders found with this ID")

        new_status = status_update.status.value
        for order in orders:
            if not validate_status_transition(order.status, new_status, "manufacturing_order"):
                raise HTTPException(
                    status_code=400,
                    detail=f"Invalid status transition from '{order.status}' to '{new_status}'"
                )

        updated = crud.manufacturing_order.bulk_update_status(db, manufacturing_id=manufacturing_id, status=new_status)
        return {
            "message": f"Successfully updated {updated} manufacturing order(s) to status: {new_status}",
            "updated_count": updated,
            "manufacturing_id": manufacturing_id,
        }
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error updating status for {manufacturing_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@router.put("/manufacturing-orders/{order_id}", response_model=schemas.ManufacturingOrder, tags=["Manufacturing Orders"])
def update_manufacturing_order(
    order_id: UUID,
    order_update: schemas.ManufacturingOrderUpdate,
    db: Session = Depends(get_db)
):
    """Update a manufacturing order; price and quantity edits recompute the total amount, the size is fixed"""
    try:
        order = crud.manufacturing_order.get(db, order_id)
        if not order:
            raise HTTPException(status_code=404, detail="Manufacturing order not found")

        if order_update.status and not validate_status_transition(
            order.status, order_update.status.value, "manufacturing_order"
        ):
            raise HTTPException(
                status_code=400,
                detail=f"Invalid status transition from '{order.status}' to '{order_update.status.value}'"
            )

        return assignment.update_assignment(db, order, order_update)
    except StockError as e:
        raise http_error(e)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error updating manufacturing order {order_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@router.delete("/manufacturing-orders/{order_id}", response_model=schemas.MessageResponse, tags=["Manufacturing Orders"])
def delete_manufacturing_order(order_id: UUID, db: Session = Depends(get_db)):
    """Delete a manufacturing order; the last order of a manufacturing ID takes its QR products and transactions along"""
    try:
        order = crud.manufacturing_order.get(db, order_id)
        if not order:
            raise HTTPException(status_code=404, detail="Manufacturing order not found")

        last_record = crud.manufacturing_order.delete_order(db=db, db_order=order)
        if last_record:
            return {"message": "Manufacturing order, QR codes, and transactions deleted successfully (last record)"}
        return {"message": "Manufacturing order deleted successfully (other records with same ID remain)"}
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error deleting manufacturing order {order_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))
