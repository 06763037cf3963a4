# app/safety_plan/crud.py
import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.db.models import KeyValueTable
from app.safety_plan.schemas import PlanSnapshot

logger = logging.getLogger(__name__)


def get_plan_snapshot(db: Session, key: str) -> Optional[PlanSnapshot]:
    """
    Retrieves the snapshot stored under `key`, or None if nothing was saved yet.
    """
    result = db.execute(select(KeyValueTable).filter(KeyValueTable.key == key))
    row = result.scalars().first()
    if row is None:
        return None
    return PlanSnapshot.from_json(row.value)


def save_plan_snapshot(db: Session, key: str, snapshot: PlanSnapshot) -> KeyValueTable:
    """
    Stores the snapshot under `key`, replacing whatever was there before.
    Only the latest snapshot is kept.
    """
    payload = snapshot.to_json()
    row = db.get(KeyValueTable, key)
    if row is None:
        row = KeyValueTable(key=key, value=payload)
        db.add(row)
        logger.info(f"Saving first snapshot under key '{key}'")
    else:
        row.value = payload
        logger.info(f"Overwriting snapshot under key '{key}'")
    db.commit()
    db.refresh(row)
    return row
