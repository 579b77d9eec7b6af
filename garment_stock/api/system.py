from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
import logging

from .base import get_db
from ..services.id_generator import FrontendIDGenerator

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/id-status", tags=["System"])
def get_id_status(db: Session = Depends(get_db)):
    """Next human-readable id each table would receive"""
    try:
        return FrontendIDGenerator.get_id_status(db)
    except Exception as e:
        logger.error(f"Error getting id status: {e}")
        raise HTTPException(status_code=500, detail=str(e))
