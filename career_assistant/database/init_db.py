"""
Database Initialization - Create the session and message tables.
"""
from typing import Optional

from career_assistant.core.logging_config import get_logger
from career_assistant.database.connection import DatabaseConnection, get_database
from career_assistant.database.models import Base

logger = get_logger(__name__)


def init_conversation_tables(db: Optional[DatabaseConnection] = None) -> bool:
    """
    Create chat tables if they don't exist.

    Called once during application startup.

    Returns:
        True if tables were created successfully
    """
    try:
        db = db or get_database()
        Base.metadata.create_all(db.engine)
        logger.info("Chat tables initialized successfully")
        return True

    except Exception as e:
        logger.error(f"Failed to initialize chat tables: {e}")
        raise


def drop_conversation_tables(db: Optional[DatabaseConnection] = None) -> bool:
    """
    Drop chat tables (use with caution!).

    This is mainly for testing/development purposes.
    """
    try:
        db = db or get_database()
        Base.metadata.drop_all(db.engine)
        logger.warning("Chat tables dropped")
        return True

    except Exception as e:
        logger.error(f"Failed to drop chat tables: {e}")
        raise


if __name__ == "__main__":
    print("Initializing chat tables...")
    init_conversation_tables()
    print("Done!")
