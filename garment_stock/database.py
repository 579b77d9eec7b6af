import os
import logging
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.exc import SQLAlchemyError
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

# Get database URL from environment variable
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./garment_stock.db")

# Connection pool: at least DB_POOL_SIZE, at most DB_POOL_SIZE + DB_MAX_OVERFLOW
DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "5"))
DB_MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", "5"))
DB_POOL_TIMEOUT = int(os.getenv("DB_POOL_TIMEOUT", "5"))
DB_CONNECT_TIMEOUT = int(os.getenv("DB_CONNECT_TIMEOUT", "45"))

logger.info(f"Using database URL: {DATABASE_URL}")

Base = declarative_base()


def build_engine(url: str):
    """Create an engine for the given URL, applying pool settings where the driver supports them."""
    if url.startswith("sqlite"):
        # SQLite has no server and no useful pool; only allow cross-thread use for the app server
        return create_engine(url, connect_args={"check_same_thread": False})

    return create_engine(
        url,
        pool_size=DB_POOL_SIZE,
        max_overflow=DB_MAX_OVERFLOW,
        pool_timeout=DB_POOL_TIMEOUT,
        pool_pre_ping=True,
        pool_recycle=1800,
        connect_args={"connect_timeout": DB_CONNECT_TIMEOUT},
    )


try:
    engine = build_engine(DATABASE_URL)
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
except SQLAlchemyError as e:
    logger.error(f"Database connection error: {e}")
    logger.error("The application will continue but database operations will fail")
    engine = None
    SessionLocal = None


# Dependency to get DB session
def get_db():
    if SessionLocal is None:
        raise SQLAlchemyError("Database connection not available")

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
