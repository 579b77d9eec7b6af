from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session
from typing import List
from uuid import UUID
import logging

from .base import get_db, http_error
from .. import crud, schemas
from ..crud.qr_products import build_qr_payload
from ..exceptions import StockError
from ..services.qr_generator import render_qr_png_base64

router = APIRouter()
logger = logging.getLogger(__name__)

# ============================================================================
# QR PRODUCT ENDPOINTS
# ============================================================================

@router.get("/qr-products", response_model=List[schemas.QRProduct], tags=["QR Products"])
def get_qr_products(db: Session = Depends(get_db)):
    try:
        return crud.qr_product.get_products(db)
    except Exception as e:
        logger.error(f"Error getting QR products: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@router.get("/qr-products/available/manufacturing-ids", response_model=List[schemas.ManufacturingOrder], tags=["QR Products"])
def get_available_manufacturing_orders(db: Session = Depends(get_db)):
    """Manufacturing orders that have no QR product yet"""
    try:
        return crud.qr_product.get_available_orders(db)
    except Exception as e:
        logger.error(f"Error getting available manufacturing orders: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@router.get("/qr-products/{product_id}", response_model=schemas.QRProduct, tags=["QR Products"])
def get_qr_product(product_id: UUID, db: Session = Depends(get_db)):
    product = crud.qr_product.get(db, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="QR product not found")
    return product

@router.get("/qr-products/{product_id}/qr-code", response_model=schemas.QRCodeImage, tags=["QR Products"])
def get_qr_code_image(product_id: UUID, db: Session = Depends(get_db)):
    """QR label image (base64 PNG) for a product"""
    product = crud.qr_product.get(db, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="QR product not found")

    try:
        qr_data = product.qr_code_data or build_qr_payload(product)
        return {
            "product_id": product.product_id,
            "qr_code_data": qr_data,
            "qr_code": render_qr_png_base64(qr_data),
        }
    except Exception as e:
        logger.error(f"Error rendering QR code for {product.product_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to generate QR code: {str(e)}")

@router.post("/qr-products", response_model=schemas.QRProduct, status_code=201, tags=["QR Products"])
def create_qr_product(product: schemas.QRProductCreate, response: Response, db: Session = Depends(get_db)):
    """Create a QR product; posting an existing product ID refreshes its QR data instead"""
    try:
        db_product, created = crud.qr_product.create_product(db, product=product)
        if not created:
            response.status_code = 200
        return db_product
    except StockError as e:
        raise http_error(e)
    except Exception as e:
        logger.error(f"Error creating QR product: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@router.patch("/qr-products/{product_id}", response_model=schemas.QRProduct, tags=["QR Products"])
def update_qr_product_quantity(
    product_id: UUID,
    quantity_update: schemas.QRProductQuantityUpdate,
    db: Session = Depends(get_db)
):
    product = crud.qr_product.get(db, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="QR product not found")

    try:
        return crud.qr_product.update_quantity(db, db_product=product, quantity=quantity_update.quantity)
    except Exception as e:
        logger.error(f"Error updating quantity of {product.product_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@router.put("/qr-products/{product_id}", response_model=schemas.QRProduct, tags=["QR Products"])
def update_qr_product(
    product_id: UUID,
    product_update: schemas.QRProductUpdate,
    db: Session = Depends(get_db)
):
    product = crud.qr_product.get(db, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="QR product not found")

    try:
        return crud.qr_product.update(db, db_obj=product, obj_in=product_update)
    except Exception as e:
        logger.error(f"Error updating QR product {product.product_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@router.delete("/qr-products/{product_id}", response_model=schemas.MessageResponse, tags=["QR Products"])
def delete_qr_product(product_id: UUID, db: Session = Depends(get_db)):
    product = crud.qr_product.get(db, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="QR product not found")

    try:
        crud.qr_product.delete_product(db, db_product=product)
        return {"message": "QR product deleted successfully"}
    except Exception as e:
        db.rollback()
        logger.error(f"Error deleting QR product {product_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))
