from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List
from uuid import UUID
import logging

from .base import get_db, http_error, validate_status_transition
from .. import crud, schemas
from ..exceptions import StockError
from ..services import cascade_deletion, size_ledger

router = APIRouter()
logger = logging.getLogger(__name__)

# ============================================================================
# CUTTING RECORD ENDPOINTS
# ============================================================================

@router.get("/cutting-records", response_model=List[schemas.CuttingRecord], tags=["Cutting Records"])
def get_cutting_records(skip: int = 0, limit: int = 1000, db: Session = Depends(get_db)):
    """Get all cutting records, newest first"""
    try:
        return crud.cutting_record.get_cutting_records(db=db, skip=skip, limit=limit)
    except Exception as e:
        logger.error(f"Error getting cutting records: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@router.get("/cutting-records/{record_id}", response_model=schemas.CuttingRecord, tags=["Cutting Records"])
def get_cutting_record(record_id: UUID, db: Session = Depends(get_db)):
    """Get cutting record by database ID"""
    record = crud.cutting_record.get(db, record_id)
    if not record:
        raise HTTPException(status_code=404, detail="Cutting record not found")
    return record

@router.post("/cutting-records", response_model=schemas.CuttingRecord, status_code=201, tags=["Cutting Records"])
def create_cutting_record(record: schemas.CuttingRecordCreate, db: Session = Depends(get_db)):
    """Create a cutting record with its size breakdown"""
    try:
        return crud.cutting_record.create_cutting_record(db=db, record=record)
    except StockError as e:
        raise http_error(e)
    except Exception as e:
        logger.error(f"Error creating cutting record: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@router.put("/cutting-records/{record_id}", response_model=schemas.CuttingRecord, tags=["Cutting Records"])
def update_cutting_record(
    record_id: UUID,
    record_update: schemas.CuttingRecordUpdate,
    db: Session = Depends(get_db)
):
    """Update descriptive fields of a cutting record"""
    try:
        record = crud.cutting_record.get(db, record_id)
        if not record:
            raise HTTPException(status_code=404, detail="Cutting record not found")

        if record_update.status and not validate_status_transition(
            record.status, record_update.status.value, "cutting_record"
        ):
            raise HTTPException(
                status_code=400,
                detail=f"Invalid status transition from '{record.status}' to '{record_update.status.value}'"
            )

        return crud.cutting_record.update_cutting_record(db=db, db_record=record, record_update=record_update)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error updating cutting record {record_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@router.delete("/cutting-records/{record_id}", response_model=schemas.CascadeDeleteResponse, tags=["Cutting Records"])
def delete_cutting_record(record_id: UUID, db: Session = Depends(get_db)):
    """Delete a cutting record and every manufacturing order, QR product and transaction derived from it"""
    try:
        details = cascade_deletion.delete_cutting_record_cascade(db, record_id)
        return {
            "message": "Cutting record and related data deleted successfully",
            "details": details,
        }
    except StockError as e:
        raise http_error(e)
    except Exception as e:
        logger.error(f"Error deleting cutting record {record_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@router.get("/cutting-records/{cutting_id}/remaining-sizes", response_model=schemas.RemainingSizes, tags=["Cutting Records"])
def get_remaining_sizes(cutting_id: str, db: Session = Depends(get_db)):
    """Pieces per size still free for tailor assignment, by human-readable cutting ID"""
    try:
        return size_ledger.get_remaining_sizes(db, cutting_id)
    except StockError as e:
        raise http_error(e)
    except Exception as e:
        logger.error(f"Error computing remaining sizes for {cutting_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))
