"""Initialize database tables"""
import logging

from app.db.base import Base
from app.db.session import engine
import app.models  # noqa: F401  (register models on Base.metadata)

logger = logging.getLogger(__name__)


def init_db(bind=None) -> None:
    """Create all database tables"""
    try:
        Base.metadata.create_all(bind=bind or engine)
        logger.info("Database tables created successfully")
    except Exception as e:
        logger.error(f"Error creating database tables: {str(e)}")
        raise
