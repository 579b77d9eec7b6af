from sqlalchemy.orm import Session, selectinload
from sqlalchemy.exc import IntegrityError
from typing import List, Optional
import logging

from .base import CRUDBase
from .. import models, schemas
from ..exceptions import DuplicateError

logger = logging.getLogger(__name__)

# Generated ids can lose a race against a concurrent insert; try again with a fresh scan
GENERATED_ID_ATTEMPTS = 3


class CRUDCuttingRecord(CRUDBase[models.CuttingRecord, schemas.CuttingRecordCreate, schemas.CuttingRecordUpdate]):
    def get_cutting_records(self, db: Session, *, skip: int = 0, limit: int = 1000) -> List[models.CuttingRecord]:
        """Get cutting records, newest first"""
        return (
            db.query(models.CuttingRecord)
            .options(selectinload(models.CuttingRecord.size_breakdown))
            .order_by(models.CuttingRecord.created_at.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def get_by_cutting_id(self, db: Session, cutting_id: str) -> Optional[models.CuttingRecord]:
        return (
            db.query(models.CuttingRecord)
            .options(selectinload(models.CuttingRecord.size_breakdown))
            .filter(models.CuttingRecord.cutting_id == cutting_id)
            .first()
        )

    def create_cutting_record(self, db: Session, *, record: schemas.CuttingRecordCreate) -> models.CuttingRecord:
        """Create a cutting record with its ordered size breakdown"""
        attempts = 1 if record.cutting_id else GENERATED_ID_ATTEMPTS

        for attempt in range(1, attempts + 1):
            db_record = models.CuttingRecord(
                cutting_id=record.cutting_id,
                fabric_type=record.fabric_type,
                fabric_color=record.fabric_color,
                product_name=record.product_name,
                pieces_count=record.pieces_count,
                total_length_used=record.total_length_used,
                cutting_master=record.cutting_master,
                cutting_price_per_piece=record.cutting_price_per_piece,
                date=record.date,
                time=record.time,
                status=record.status.value,
                notes=record.notes,
                size_breakdown=[
                    models.CuttingSizeBreakdown(position=position, size=entry.size, quantity=entry.quantity)
                    for position, entry in enumerate(record.size_breakdown)
                ],
            )
            db.add(db_record)
            try:
                db.commit()
            except IntegrityError as e:
                db.rollback()
                if attempt == attempts:
                    logger.warning(f"Duplicate cutting id {record.cutting_id or '(generated)'}: {e.orig}")
                    raise DuplicateError("Cutting record with this ID already exists")
                logger.warning(f"Generated cutting id collided, retrying (attempt {attempt})")
                continue

            db.refresh(db_record)
            logger.info(
                f"Created cutting record {db_record.cutting_id}: {db_record.pieces_count} pieces of "
                f"{db_record.product_name} in {len(record.size_breakdown)} sizes"
            )
            return db_record

    def update_cutting_record(
        self, db: Session, *, db_record: models.CuttingRecord, record_update: schemas.CuttingRecordUpdate
    ) -> models.CuttingRecord:
        """Update descriptive fields; pieces and sizes stay fixed once orders may reference them"""
        return self.update(db, db_obj=db_record, obj_in=record_update)


cutting_record = CRUDCuttingRecord(models.CuttingRecord)
