# app/db/init_db.py
import logging

from sqlalchemy import Engine

from app.db.models import Base

logger = logging.getLogger(__name__)


def init_db(engine: Engine) -> None:
    """Create any missing tables. Existing tables and rows are left alone."""
    Base.metadata.create_all(engine)
    logger.debug(f"Tables ready on {engine.url}")
