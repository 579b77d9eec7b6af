from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List
from uuid import UUID
import logging

from .base import get_db
from .. import crud, schemas

router = APIRouter()
logger = logging.getLogger(__name__)

# ============================================================================
# FABRIC ENDPOINTS
# ============================================================================

@router.get("/fabrics", response_model=List[schemas.Fabric], tags=["Fabrics"])
def get_fabrics(skip: int = 0, limit: int = 1000, db: Session = Depends(get_db)):
    try:
        return crud.fabric.get_multi(db=db, skip=skip, limit=limit)
    except Exception as e:
        logger.error(f"Error getting fabrics: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@router.get("/fabrics/stats/overview", response_model=schemas.FabricStats, tags=["Fabrics"])
def get_fabric_stats(db: Session = Depends(get_db)):
    """Totals, low/out of stock counts and quantity per fabric type"""
    try:
        return crud.fabric.get_stats(db)
    except Exception as e:
        logger.error(f"Error getting fabric stats: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@router.get("/fabrics/{fabric_id}", response_model=schemas.Fabric, tags=["Fabrics"])
def get_fabric(fabric_id: UUID, db: Session = Depends(get_db)):
    fabric = crud.fabric.get(db, fabric_id)
    if not fabric:
        raise HTTPException(status_code=404, detail="Fabric not found")
    return fabric

@router.post("/fabrics", response_model=schemas.Fabric, status_code=201, tags=["Fabrics"])
def create_fabric(fabric: schemas.FabricCreate, db: Session = Depends(get_db)):
    try:
        return crud.fabric.create_fabric(db=db, fabric=fabric)
    except Exception as e:
        logger.error(f"Error creating fabric: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@router.put("/fabrics/{fabric_id}", response_model=schemas.Fabric, tags=["Fabrics"])
def update_fabric(fabric_id: UUID, fabric_update: schemas.FabricUpdate, db: Session = Depends(get_db)):
    fabric = crud.fabric.get(db, fabric_id)
    if not fabric:
        raise HTTPException(status_code=404, detail="Fabric not found")

    try:
        return crud.fabric.update_fabric(db=db, db_fabric=fabric, fabric_update=fabric_update)
    except Exception as e:
        logger.error(f"Error updating fabric {fabric_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@router.delete("/fabrics/{fabric_id}", response_model=schemas.MessageResponse, tags=["Fabrics"])
def delete_fabric(fabric_id: UUID, db: Session = Depends(get_db)):
    fabric = crud.fabric.remove(db=db, id=fabric_id)
    if not fabric:
        raise HTTPException(status_code=404, detail="Fabric not found")
    return {"message": "Fabric deleted successfully"}
