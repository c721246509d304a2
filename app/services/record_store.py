"""
Record store interface.
The operations the repair log needs from whatever holds the repairs table.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Sequence

from app.models.repair import Repair
from app.schemas.repair import RepairCreate, RepairImport


class StoreError(Exception):
    """A read or write rejected by the record store. The message is shown to the user as is."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class RecordStore(ABC):
    """Repairs persistence. Every failure is raised as StoreError."""

    @abstractmethod
    def list_repairs(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[Repair]:
        """Select repairs ordered by date_sold descending, optionally within [start, end]"""

    @abstractmethod
    def insert_repair(self, repair: RepairCreate) -> Repair:
        """Insert one repair. No conflict handling: a taken listing_id fails."""

    @abstractmethod
    def upsert_repairs(self, repairs: Sequence[RepairImport], conflict_key: str = "listing_id") -> int:
        """
        Insert or overwrite repairs in one batch, matching existing rows on conflict_key.

        Returns the number of rows written.
        """
