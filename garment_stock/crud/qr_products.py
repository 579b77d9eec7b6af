from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from typing import List, Optional, Tuple
from datetime import datetime
import json
import logging

from .base import CRUDBase
from .. import models, schemas
from ..exceptions import DuplicateError
from ..services.id_generator import FrontendIDGenerator

logger = logging.getLogger(__name__)

MANUAL_TAILOR_NAME = "Manual Entry"


def build_qr_payload(product: models.QRProduct) -> str:
    """JSON text encoded into the printed QR label"""
    return json.dumps({
        "type": "CUSTOM_PRODUCT" if product.cutting_id == models.MANUAL_CUTTING_ID else "MANUFACTURED_PRODUCT",
        "productId": product.product_id,
        "manufacturingId": product.manufacturing_id,
        "productName": product.product_name,
        "color": product.color or "N/A",
        "size": product.size or "N/A",
        "quantity": product.quantity,
        "generatedDate": product.generated_date,
    })


class CRUDQRProduct(CRUDBase[models.QRProduct, schemas.QRProductCreate, schemas.QRProductUpdate]):
    def get_products(self, db: Session) -> List[models.QRProduct]:
        return db.query(models.QRProduct).order_by(models.QRProduct.created_at.desc()).all()

    def get_by_product_id(self, db: Session, product_id: str) -> Optional[models.QRProduct]:
        return db.query(models.QRProduct).filter(models.QRProduct.product_id == product_id).first()

    def create_product(self, db: Session, *, product: schemas.QRProductCreate) -> Tuple[models.QRProduct, bool]:
        """
        Create a QR product, or refresh the QR data of an existing one with the same product id.

        Products without a manufacturing id (or flagged MANUAL) are manual stock:
        they get a MAN#### id that doubles as their manufacturing id.

        Returns (product, created).
        """
        generated_date = product.generated_date or datetime.utcnow().date().isoformat()
        is_manual = product.cutting_id == models.MANUAL_CUTTING_ID or not product.manufacturing_id

        product_id = product.product_id or (None if is_manual else product.manufacturing_id)
        if product_id:
            existing = self.get_by_product_id(db, product_id)
            if existing:
                existing.generated_date = generated_date
                existing.qr_code_data = product.qr_code_data or build_qr_payload(existing)
                db.commit()
                db.refresh(existing)
                logger.info(f"Refreshed QR data for existing product {product_id}")
                return existing, False

        linked_order = None
        if is_manual:
            product_id = product_id or FrontendIDGenerator.generate_frontend_id("qr_product", db)
            manufacturing_id = product_id
            cutting_id = models.MANUAL_CUTTING_ID
        else:
            manufacturing_id = product.manufacturing_id
            linked_order = (
                db.query(models.ManufacturingOrder)
                .filter(models.ManufacturingOrder.manufacturing_id == manufacturing_id)
                .first()
            )
            cutting_id = product.cutting_id or (linked_order.cutting_id if linked_order else None)

        db_product = models.QRProduct(
            product_id=product_id,
            manufacturing_id=manufacturing_id,
            cutting_id=cutting_id,
            product_name=product.product_name,
            color=product.color or (linked_order.fabric_color if linked_order else None),
            size=product.size or (linked_order.size if linked_order else None),
            fabric_type=product.fabric_type or (linked_order.fabric_type if linked_order else None),
            quantity=product.quantity,
            tailor_name=product.tailor_name or (linked_order.tailor_name if linked_order else MANUAL_TAILOR_NAME),
            generated_date=generated_date,
            notes=product.notes,
            is_generated=True,
        )
        db_product.qr_code_data = product.qr_code_data or build_qr_payload(db_product)
        db.add(db_product)

        if linked_order is not None:
            db.query(models.ManufacturingOrder).filter(
                models.ManufacturingOrder.manufacturing_id == manufacturing_id
            ).update({"qr_generated": True}, synchronize_session=False)

        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise DuplicateError("QR product with this ID already exists")

        db.refresh(db_product)
        logger.info(f"Created QR product {db_product.product_id} for {db_product.manufacturing_id} (qty {db_product.quantity})")
        return db_product, True

    def update_quantity(self, db: Session, *, db_product: models.QRProduct, quantity: int) -> models.QRProduct:
        db_product.quantity = quantity
        db.commit()
        db.refresh(db_product)
        return db_product

    def delete_product(self, db: Session, *, db_product: models.QRProduct) -> None:
        """Delete a QR product and clear the qr_generated flag on its manufacturing orders"""
        if db_product.cutting_id != models.MANUAL_CUTTING_ID:
            db.query(models.ManufacturingOrder).filter(
                models.ManufacturingOrder.manufacturing_id == db_product.manufacturing_id
            ).update({"qr_generated": False}, synchronize_session=False)

        db.delete(db_product)
        db.commit()

    def get_available_orders(self, db: Session) -> List[models.ManufacturingOrder]:
        """Manufacturing orders whose manufacturing id has no QR product yet"""
        used_ids = {row[0] for row in db.query(models.QRProduct.manufacturing_id).all()}
        orders = db.query(models.ManufacturingOrder).order_by(models.ManufacturingOrder.created_at.desc()).all()
        return [order for order in orders if order.manufacturing_id not in used_ids]


qr_product = CRUDQRProduct(models.QRProduct)
