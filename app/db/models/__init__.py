# app/db/models/__init__.py
# This ensures that all models are imported when app.db.models is imported,
# allowing SQLAlchemy's Base to discover them for table creation.

from .key_value import Base, KeyValueTable

__all__ = ["Base", "KeyValueTable"]
