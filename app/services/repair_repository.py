"""
Repository layer for repairs.
SQLAlchemy implementation of the record store for the repairs table.
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from sqlalchemy import func
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from app.models.repair import Repair
from app.schemas.repair import RepairCreate, RepairImport
from app.services.record_store import RecordStore, StoreError

logger = logging.getLogger(__name__)

_UPSERT_DIALECTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


def _store_message(e: SQLAlchemyError) -> str:
    """Driver message when there is one, SQLAlchemy's otherwise"""
    orig = getattr(e, "orig", None)
    return str(orig) if orig is not None else str(e)


class RepairRepository(RecordStore):
    """Repository for repair operations"""

    def __init__(self, db: Session):
        self.db = db

    def list_repairs(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[Repair]:
        """Get repairs newest first, optionally bounded on date_sold (both ends inclusive)"""
        query = self.db.query(Repair)

        if start is not None:
            query = query.filter(Repair.date_sold >= start)

        if end is not None:
            query = query.filter(Repair.date_sold <= end)

        try:
            return query.order_by(Repair.date_sold.desc().nulls_last(), Repair.id.desc()).all()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError(_store_message(e))

    def insert_repair(self, repair: RepairCreate) -> Repair:
        """Insert a single repair"""
        try:
            db_repair = Repair(**repair.model_dump())
            self.db.add(db_repair)
            self.db.commit()
            self.db.refresh(db_repair)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError(_store_message(e))

        logger.info(f"Inserted repair {db_repair.listing_id} ({db_repair.source})")
        return db_repair

    def upsert_repairs(self, repairs: Sequence[RepairImport], conflict_key: str = "listing_id") -> int:
        """
        Bulk upsert repairs in a single INSERT ... ON CONFLICT DO UPDATE.

        Rows repeating a conflict key inside the batch collapse into one
        carrying the last row's values, since a single statement cannot touch
        the same row twice. Only the columns present in the batch are
        overwritten, so notes on an existing repair survive a re-import.
        """
        if not repairs:
            return 0

        rows_by_key: Dict[str, dict] = {}
        for repair in repairs:
            row = repair.model_dump()
            rows_by_key[row[conflict_key]] = row
        rows = list(rows_by_key.values())

        dialect = self.db.get_bind().dialect.name
        insert = _UPSERT_DIALECTS.get(dialect)
        if insert is None:
            raise StoreError(f"Upsert is not supported on {dialect}")

        stmt = insert(Repair.__table__).values(rows)
        updates = {
            name: stmt.excluded[name]
            for name in rows[0]
            if name != conflict_key
        }
        updates["updated_at"] = func.now()
        stmt = stmt.on_conflict_do_update(index_elements=[conflict_key], set_=updates)

        try:
            self.db.execute(stmt)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError(_store_message(e))

        logger.info(f"Upserted {len(rows)} repairs on {conflict_key}")
        return len(rows)
