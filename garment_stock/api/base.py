from fastapi import HTTPException

from .. import models
from ..database import get_db  # noqa: F401 - routers import get_db from here
from ..exceptions import StockError

# ============================================================================
# STATUS VALIDATION UTILITIES
# ============================================================================

VALID_TRANSITIONS = {
    "manufacturing_order": {
        models.ManufacturingStatus.PENDING.value: [
            models.ManufacturingStatus.IN_PROGRESS.value,
            models.ManufacturingStatus.COMPLETED.value,
            models.ManufacturingStatus.CANCELLED.value,
            models.ManufacturingStatus.QR_DELETED.value,
        ],
        models.ManufacturingStatus.IN_PROGRESS.value: [
            models.ManufacturingStatus.COMPLETED.value,
            models.ManufacturingStatus.CANCELLED.value,
            models.ManufacturingStatus.QR_DELETED.value,
        ],
        models.ManufacturingStatus.COMPLETED.value: [models.ManufacturingStatus.QR_DELETED.value],
        # A new QR label can be printed after the old one was removed
        models.ManufacturingStatus.QR_DELETED.value: [models.ManufacturingStatus.COMPLETED.value],
        models.ManufacturingStatus.CANCELLED.value: [],  # Terminal state
    },
    "cutting_record": {
        models.CuttingStatus.IN_PROGRESS.value: [models.CuttingStatus.COMPLETED.value, models.CuttingStatus.CANCELLED.value],
        models.CuttingStatus.COMPLETED.value: [models.CuttingStatus.CANCELLED.value],
        models.CuttingStatus.CANCELLED.value: [],  # Terminal state
    },
}


def validate_status_transition(current_status: str, new_status: str, entity_type: str) -> bool:
    """
    Validate if a status transition is allowed for a given entity type.
    Keeping the current status is always allowed.

    Args:
        current_status: Current status of the entity
        new_status: Desired new status
        entity_type: Type of entity (manufacturing_order, cutting_record)

    Returns:
        bool: True if transition is valid, False otherwise
    """
    if current_status == new_status:
        return True

    entity_transitions = VALID_TRANSITIONS.get(entity_type)
    if entity_transitions is None or current_status not in entity_transitions:
        return False

    return new_status in entity_transitions[current_status]


def http_error(error: StockError) -> HTTPException:
    """Translate a service-level error into the HTTP response it stands for"""
    return HTTPException(status_code=error.status_code, detail=error.message)
