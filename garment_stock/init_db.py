"""
Initialize the database.
Creates missing tables and logs the id counters the generators will continue from.
"""
import logging
from . import models, database
from .services.id_generator import FrontendIDGenerator

# Set up logging
logger = logging.getLogger(__name__)


def create_tables():
    models.Base.metadata.create_all(bind=database.engine)
    logger.info("Database tables created successfully")


def init_db():
    """
    Initialize the database and report id counters.
    """
    if database.engine is None or database.SessionLocal is None:
        logger.error("Database connection not available")
        return

    create_tables()

    db = database.SessionLocal()
    try:
        for table_name, status in FrontendIDGenerator.get_id_status(db).items():
            if "error" in status:
                logger.warning(f"Could not read id counter for {table_name}: {status['error']}")
            else:
                logger.info(f"Next {table_name} id: {status['next_id_will_be']}")
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_db()
