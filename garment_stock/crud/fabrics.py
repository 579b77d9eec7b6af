from sqlalchemy.orm import Session
from typing import Dict, Any
import logging

from .base import CRUDBase
from .. import models, schemas

logger = logging.getLogger(__name__)

LOW_STOCK_THRESHOLD = 20


def stock_status_for(quantity: float) -> str:
    if quantity <= 0:
        return models.FabricStatus.OUT_OF_STOCK.value
    if quantity <= LOW_STOCK_THRESHOLD:
        return models.FabricStatus.LOW_STOCK.value
    return models.FabricStatus.IN_STOCK.value


class CRUDFabric(CRUDBase[models.Fabric, schemas.FabricCreate, schemas.FabricUpdate]):
    def create_fabric(self, db: Session, *, fabric: schemas.FabricCreate) -> models.Fabric:
        """Register new fabric; quantity defaults to length x width"""
        quantity = fabric.quantity if fabric.quantity is not None else fabric.length * fabric.width
        db_fabric = models.Fabric(
            fabric_type=fabric.fabric_type,
            color=fabric.color,
            quality=fabric.quality,
            length=fabric.length,
            width=fabric.width,
            quantity=quantity,
            supplier=fabric.supplier,
            purchase_price=fabric.purchase_price,
            location=fabric.location,
            notes=fabric.notes,
            status=stock_status_for(quantity),
        )
        db.add(db_fabric)
        db.commit()
        db.refresh(db_fabric)
        logger.info(f"Registered fabric {db_fabric.fabric_id} ({db_fabric.fabric_type}, {quantity} sqm)")
        return db_fabric

    def update_fabric(self, db: Session, *, db_fabric: models.Fabric, fabric_update: schemas.FabricUpdate) -> models.Fabric:
        """Update fabric and recompute quantity and stock status from its dimensions"""
        for field, value in fabric_update.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(db_fabric, field, value)

        db_fabric.quantity = db_fabric.length * db_fabric.width
        db_fabric.status = stock_status_for(db_fabric.quantity)

        db.commit()
        db.refresh(db_fabric)
        return db_fabric

    def get_stats(self, db: Session) -> Dict[str, Any]:
        fabrics = db.query(models.Fabric).all()
        by_type: Dict[str, float] = {}
        for fabric in fabrics:
            by_type[fabric.fabric_type] = by_type.get(fabric.fabric_type, 0.0) + fabric.quantity

        return {
            "total_fabrics": len(fabrics),
            "total_quantity": sum(f.quantity for f in fabrics),
            "low_stock": sum(1 for f in fabrics if f.status == models.FabricStatus.LOW_STOCK.value),
            "out_of_stock": sum(1 for f in fabrics if f.status == models.FabricStatus.OUT_OF_STOCK.value),
            "by_type": by_type,
        }


fabric = CRUDFabric(models.Fabric)
