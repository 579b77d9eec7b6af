from sqlalchemy.orm import Session
from sqlalchemy import text
from typing import Callable, Dict, Iterable, Optional, Union
from sqlalchemy.engine import Connection
import random
import re
import time
import logging

from .. import models


logger = logging.getLogger(__name__)

# Sequential ids never use fewer digits than this
MIN_COUNTER_DIGITS = 4

# Random-suffix regenerations before falling back to a longer timestamp
MAX_TRANSACTION_ID_RETRIES = 10

ACTION_CODES: Dict[str, str] = {
    models.TransactionAction.ADD.value: "A",
    models.TransactionAction.REMOVE.value: "R",
    models.TransactionAction.STOCK_IN.value: "I",
    models.TransactionAction.STOCK_OUT.value: "O",
    models.TransactionAction.QR_GENERATED.value: "Q",
}


def next_sequential_id(prefix: str, existing_ids: Iterable[Optional[str]]) -> str:
    """
    Return the next id after the highest PREFIX<digits> value in existing_ids.

    Ids that do not match exactly ^PREFIX\\d+$ are ignored. The counter is
    zero-padded to four digits and simply grows wider past 9999.
    """
    pattern = re.compile(rf"^{re.escape(prefix)}(\d+)$")

    max_counter = 0
    for id_value in existing_ids:
        if not id_value:
            continue
        match = pattern.match(id_value)
        if match:
            max_counter = max(max_counter, int(match.group(1)))

    next_counter = max_counter + 1
    return f"{prefix}{next_counter:0{MIN_COUNTER_DIGITS}d}"


def build_transaction_id(
    action: str,
    item_type: str,
    exists: Callable[[str], bool],
    now_ms: Optional[int] = None,
    randint: Callable[[int, int], int] = random.randint,
) -> str:
    """
    TXN + action code + item type initial + last 6 digits of the ms clock + 3 random digits.

    While the candidate already exists the random part is redrawn; after
    MAX_TRANSACTION_ID_RETRIES redraws the id falls back to the last 8 digits
    of the clock with no random part.
    """
    action_code = ACTION_CODES.get(action, "T")
    type_code = (item_type or models.ItemType.UNKNOWN.value)[0]
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    timestamp = str(now_ms)[-6:]

    candidate = f"TXN{action_code}{type_code}{timestamp}{randint(1, 999):03d}"
    attempt = 0
    while exists(candidate):
        attempt += 1
        if attempt > MAX_TRANSACTION_ID_RETRIES:
            fallback = f"TXN{action_code}{type_code}{str(int(time.time() * 1000))[-8:]}"
            logger.warning(f"Transaction id retries exhausted, falling back to {fallback}")
            return fallback
        candidate = f"TXN{action_code}{type_code}{timestamp}{randint(1, 999):03d}"

    return candidate


class FrontendIDGenerator:
    """
    Service for generating human-readable ids for pipeline records.

    Format: PREFIX0001 (CUT0001, MFG0042, FAB10000).
    The next value is max(existing counter) + 1 found by scanning the column,
    so two concurrent writers can compute the same value; unique columns
    reject the loser with an integrity error.
    """

    # ID Patterns for each table
    ID_PATTERNS: Dict[str, Dict[str, str]] = {
        "cutting_record": {
            "prefix": "CUT",
            "column_name": "cutting_id",
            "description": "Cutting Record IDs (CUT0001, CUT0002, etc.)"
        },
        "manufacturing_order": {
            "prefix": "MFG",
            "column_name": "manufacturing_id",
            "description": "Manufacturing IDs (MFG0001, MFG0002, etc.), shared by repeated assignments"
        },
        "fabric": {
            "prefix": "FAB",
            "column_name": "fabric_id",
            "description": "Fabric IDs (FAB0001, FAB0002, etc.)"
        },
        "qr_product": {
            "prefix": "MAN",
            "column_name": "product_id",
            "description": "Manually entered QR product IDs (MAN0001, MAN0002, etc.)"
        },
    }

    @classmethod
    def generate_frontend_id(cls, table_name: str, db: Union[Session, Connection]) -> str:
        """
        Generate the next human-readable id for a table.

        Args:
            table_name: The database table name
            db: SQLAlchemy session, or the connection of an in-progress flush

        Returns:
            Generated id string (e.g., "CUT0001")

        Raises:
            ValueError: If table_name is not supported
        """
        if table_name not in cls.ID_PATTERNS:
            raise ValueError(f"Unsupported table name: {table_name}. Supported tables: {list(cls.ID_PATTERNS.keys())}")

        config = cls.ID_PATTERNS[table_name]
        prefix = config["prefix"]
        column_name = config["column_name"]

        try:
            query = text(f"""
                SELECT {column_name}
                FROM {table_name}
                WHERE {column_name} LIKE :pattern
            """)
            result = db.execute(query, {"pattern": f"{prefix}%"}).fetchall()

            generated_id = next_sequential_id(prefix, (row[0] for row in result))
            logger.debug(f"Generated ID for {table_name}: {generated_id} (scanned {len(result)} rows)")
            return generated_id

        except Exception as e:
            logger.error(f"Error generating frontend ID for {table_name}: {e}")
            raise

    @classmethod
    def generate_transaction_id(cls, action: str, item_type: str, db: Union[Session, Connection]) -> str:
        """Generate a transaction id, checking the ledger for duplicates."""
        query = text("SELECT 1 FROM stock_transaction WHERE transaction_id = :transaction_id")

        def exists(candidate: str) -> bool:
            return db.execute(query, {"transaction_id": candidate}).first() is not None

        return build_transaction_id(action, item_type, exists)

    @classmethod
    def resolve_manufacturing_id(
        cls,
        db: Session,
        *,
        cutting_id: str,
        product_name: str,
        size: str,
        fabric_color: str,
        fabric_type: str,
    ) -> str:
        """
        Reuse the manufacturing id of an existing order for the same
        cutting + product + size + colour + fabric, otherwise generate a new one.
        """
        existing = db.query(models.ManufacturingOrder.manufacturing_id).filter(
            models.ManufacturingOrder.cutting_id == cutting_id,
            models.ManufacturingOrder.product_name == product_name,
            models.ManufacturingOrder.size == size,
            models.ManufacturingOrder.fabric_color == fabric_color,
            models.ManufacturingOrder.fabric_type == fabric_type,
        ).order_by(models.ManufacturingOrder.created_at).first()

        if existing:
            logger.info(f"Reusing manufacturing ID {existing[0]} for {cutting_id}/{size}")
            return existing[0]

        return cls.generate_frontend_id("manufacturing_order", db)

    @classmethod
    def get_id_status(cls, db: Session) -> Dict[str, Dict]:
        """
        Get the current counter of every id pattern.
        Useful for debugging and monitoring.
        """
        status = {}
        for table_name, config in cls.ID_PATTERNS.items():
            try:
                next_id = cls.generate_frontend_id(table_name, db)
                status[table_name] = {
                    "prefix": config["prefix"],
                    "next_id_will_be": next_id,
                }
            except Exception as e:
                status[table_name] = {
                    "prefix": config["prefix"],
                    "error": str(e)
                }
        return status
