from sqlalchemy.orm import Session
from typing import Any, Dict, Iterable, List
import logging

from .. import crud, models
from ..exceptions import NotFoundError

logger = logging.getLogger(__name__)


def compute_remaining(size_breakdown: Iterable[Any], orders: Iterable[Any]) -> List[Dict[str, Any]]:
    """
    Per size of a cutting record: cut quantity, pieces already assigned to
    manufacturing orders, and what is left. Sizes keep their breakdown order.

    Both arguments only need `size` and `quantity` attributes, so ORM rows and
    pydantic models work alike.
    """
    assigned_by_size: Dict[str, int] = {}
    for order in orders:
        assigned_by_size[order.size] = assigned_by_size.get(order.size, 0) + (order.quantity or 0)

    rows = []
    for entry in size_breakdown:
        assigned = assigned_by_size.get(entry.size, 0)
        rows.append({
            "size": entry.size,
            "quantity": entry.quantity,
            "assigned": assigned,
            "remaining_quantity": entry.quantity - assigned,
        })
    return rows


def summarize(record: models.CuttingRecord, orders: List[models.ManufacturingOrder]) -> Dict[str, Any]:
    """Remaining-size view of one cutting record given all of its orders"""
    sizes = compute_remaining(record.size_breakdown, orders)
    assignable = [row for row in sizes if row["remaining_quantity"] > 0]

    if sizes:
        total_remaining = sum(row["remaining_quantity"] for row in assignable)
    else:
        # No breakdown recorded: only the overall piece count limits assignment
        total_remaining = max(record.pieces_count - sum(o.quantity for o in orders), 0)

    return {
        "cutting_id": record.cutting_id,
        "pieces_count": record.pieces_count,
        "sizes": sizes,
        "assignable": assignable,
        "total_remaining": total_remaining,
        "fully_assigned": bool(sizes) and not assignable,
    }


def get_remaining_sizes(db: Session, cutting_id: str) -> Dict[str, Any]:
    """Load a cutting record by its human-readable id and report what is left per size"""
    record = crud.cutting_record.get_by_cutting_id(db, cutting_id)
    if not record:
        raise NotFoundError("Cutting record not found")

    summary = summarize(record, crud.manufacturing_order.get_by_cutting_id(db, cutting_id))

    if summary["fully_assigned"]:
        logger.info(f"Cutting record {cutting_id} is fully assigned")
    return summary
