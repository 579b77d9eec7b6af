"""
Stock room read model.

Nothing stored on an order or QR product is the current stock. On every read
the on-hand quantity per manufacturing id is rebuilt from completed
manufacturing orders, QR products and the full transaction ledger.
"""
from sqlalchemy.orm import Session
from typing import Any, Dict, Iterable, List
import logging

from .. import models, schemas
from ..crud.transactions import transaction as transaction_crud
from ..exceptions import InsufficientStockError, NotFoundError

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "N/A"
MANUAL_ID_PREFIX = "MAN"


def _stock_entry(manufacturing_id: str, garment: str, color, fabric_type, size, quantity, tailor_name) -> Dict[str, Any]:
    return {
        "manufacturing_id": manufacturing_id,
        "garment": garment,
        "color": color or NOT_AVAILABLE,
        "fabric_type": fabric_type or NOT_AVAILABLE,
        "size": size or NOT_AVAILABLE,
        "quantity": quantity or 0,
        "tailor_name": tailor_name or NOT_AVAILABLE,
    }


def aggregate_stock(
    orders: Iterable[Any],
    qr_products: Iterable[Any],
    transactions: Iterable[Any],
) -> Dict[str, Dict[str, Any]]:
    """
    Fold orders, QR products and ledger entries into stock per manufacturing id.

    1. Completed orders contribute under their manufacturing id.
    2. QR products contribute unless an order already claimed their id:
       manual products are checked by manufacturing id, the rest by both
       product id and manufacturing id. They are keyed by product id.
    3. Entries sharing a key are summed.
    4. MANUFACTURING ledger entries are applied: STOCK_IN adds, STOCK_OUT
       subtracts, ids unseen so far start from zero.
    """
    garments: List[Dict[str, Any]] = []

    for order in orders:
        if order.status != models.ManufacturingStatus.COMPLETED.value:
            continue
        garments.append(_stock_entry(
            order.manufacturing_id, order.product_name, order.fabric_color,
            order.fabric_type, order.size, order.quantity, order.tailor_name,
        ))

    claimed_ids = {g["manufacturing_id"] for g in garments}

    for product in qr_products:
        key = product.product_id or product.manufacturing_id
        is_manual = (
            product.cutting_id == models.MANUAL_CUTTING_ID
            and product.manufacturing_id
            and product.manufacturing_id.startswith(MANUAL_ID_PREFIX)
        )
        if is_manual:
            if product.manufacturing_id in claimed_ids:
                continue
        elif key in claimed_ids or product.manufacturing_id in claimed_ids:
            continue

        garments.append(_stock_entry(
            key, product.product_name, product.color, product.fabric_type,
            product.size, product.quantity, product.tailor_name,
        ))

    stock: Dict[str, Dict[str, Any]] = {}
    for garment in garments:
        existing = stock.get(garment["manufacturing_id"])
        if existing:
            existing["quantity"] += garment["quantity"]
        else:
            stock[garment["manufacturing_id"]] = garment

    for entry in transactions:
        if entry.item_type != models.ItemType.MANUFACTURING.value:
            continue

        item = stock.get(entry.item_id)
        if item is None:
            item = _stock_entry(entry.item_id, entry.item_name, None, None, None, 0, None)
            stock[entry.item_id] = item

        if entry.action == models.TransactionAction.STOCK_IN.value:
            item["quantity"] += entry.quantity
        elif entry.action == models.TransactionAction.STOCK_OUT.value:
            item["quantity"] -= entry.quantity

    return stock


def load_stock(db: Session) -> Dict[str, Dict[str, Any]]:
    """Full re-scan of orders, QR products and the ledger"""
    orders = (
        db.query(models.ManufacturingOrder)
        .filter(models.ManufacturingOrder.status == models.ManufacturingStatus.COMPLETED.value)
        .order_by(models.ManufacturingOrder.created_at)
        .all()
    )
    qr_products = db.query(models.QRProduct).order_by(models.QRProduct.created_at).all()
    transactions = transaction_crud.get_all_for_items(db, item_type=models.ItemType.MANUFACTURING.value)

    stock = aggregate_stock(orders, qr_products, transactions)
    logger.debug(
        f"Aggregated {len(stock)} stock items from {len(orders)} orders, "
        f"{len(qr_products)} QR products and {len(transactions)} transactions"
    )
    return stock


def get_stock_items(db: Session) -> List[Dict[str, Any]]:
    return list(load_stock(db).values())


def get_stock_item(db: Session, manufacturing_id: str) -> Dict[str, Any]:
    item = load_stock(db).get(manufacturing_id)
    if item is None:
        raise NotFoundError("Item not found")
    return item


def record_stock_movement(db: Session, movement: schemas.StockMovementCreate) -> models.StockTransaction:
    """
    Stock in/out against a manufacturing id, e.g. from the QR scanner.
    previous/new stock are taken as is from the aggregated view at write time,
    negative totals included.
    """
    current = load_stock(db).get(movement.manufacturing_id)
    on_hand = current["quantity"] if current else 0

    if movement.action == schemas.TransactionAction.STOCK_OUT:
        if movement.quantity > on_hand:
            raise InsufficientStockError(
                f"Insufficient stock for {movement.manufacturing_id}: {on_hand} on hand, {movement.quantity} requested"
            )
        new_stock = on_hand - movement.quantity
    else:
        new_stock = on_hand + movement.quantity

    item_name = movement.item_name or (current["garment"] if current else movement.manufacturing_id)

    return transaction_crud.record(
        db,
        item_type=models.ItemType.MANUFACTURING.value,
        item_id=movement.manufacturing_id,
        item_name=item_name,
        action=movement.action.value,
        quantity=movement.quantity,
        previous_stock=on_hand,
        new_stock=new_stock,
        performed_by=movement.performed_by,
        source=movement.source.value,
    )
