from sqlalchemy import TIMESTAMP, Column, Text
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.sql import func


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class KeyValueTable(Base):
    """Local key-value store. One row per key, overwritten on every write."""

    __tablename__ = "KeyValueTable"

    key = Column(Text, primary_key=True)
    value = Column(Text, nullable=False)

    # Timestamps
    updated_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
