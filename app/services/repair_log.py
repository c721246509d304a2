"""
Repair log controller.

Holds the state of the repair log view (the table, the manual entry form, the
loading flag and pending alerts) and the handlers that change it. Storage and
identity come in through a RecordStore and a SessionProvider, so the handlers
run the same against the database or against in-memory fakes.
"""

import logging
from datetime import datetime
from typing import Callable, List, Optional

from pydantic import ValidationError

from app.models.repair import Repair
from app.schemas.repair import RepairCreate, RepairForm
from app.services.csv_import import CSVImportError, normalize_csv, parse_sale_date, to_number
from app.services.periods import PERIODS, current_time, period_bounds
from app.services.record_store import RecordStore, StoreError
from app.services.session_provider import SessionProvider

logger = logging.getLogger(__name__)

CSV_IMPORT_SUCCESS = "CSV imported successfully!"


def format_validation_error(exc: ValidationError) -> str:
    """One line per failing field, "field: message" """
    messages = []
    for error in exc.errors():
        field = " -> ".join(str(x) for x in error["loc"])
        messages.append(f"{field}: {error['msg']}")
    return "; ".join(messages)


class RepairLogController:
    """State and handlers of the repair log view"""

    def __init__(
        self,
        session_provider: SessionProvider,
        store: RecordStore,
        clock: Callable[[], datetime] = current_time,
    ):
        self.session_provider = session_provider
        self.store = store
        self.clock = clock

        self.loading = True
        self.login_required = False
        self.session: Optional[dict] = None
        self.repairs: List[Repair] = []
        self.form = RepairForm()
        self.period: Optional[str] = None
        self.imported_count = 0
        self.alerts: List[str] = []

    def alert(self, message: str) -> None:
        self.alerts.append(message)

    # ------------------------------------------------------------------
    # Session guard
    # ------------------------------------------------------------------

    def guard(self) -> bool:
        """Check for a session; without one the view must go to login and do nothing else"""
        self.session = self.session_provider.get_session()
        if self.session is None:
            self.login_required = True
            return False
        return True

    def init(self) -> bool:
        """Guard, then load every repair newest first"""
        if not self.guard():
            return False

        try:
            self.repairs = self.store.list_repairs()
        except StoreError as e:
            logger.error(f"Record store error while loading repairs: {e.message}")
            self.repairs = []

        self.loading = False
        return True

    def sign_out(self) -> None:
        self.session_provider.sign_out()
        self.session = None
        self.repairs = []
        self.login_required = True

    # ------------------------------------------------------------------
    # Table
    # ------------------------------------------------------------------

    def refresh(self) -> None:
        """Reload the full table after a write; on failure the current table stays"""
        try:
            self.repairs = self.store.list_repairs()
        except StoreError as e:
            logger.warning(f"Could not refresh repairs: {e.message}")
            return
        self.period = None

    def filter(self, period: str) -> None:
        """Replace the table with the repairs sold in a period (unknown periods show everything)"""
        start, end = period_bounds(period, self.clock())
        self.period = period if period in PERIODS else None

        try:
            self.repairs = self.store.list_repairs(start=start, end=end)
        except StoreError as e:
            logger.error(f"Record store error while filtering repairs by {period}: {e.message}")
            self.repairs = []

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def submit(self, form: Optional[RepairForm] = None) -> bool:
        """
        Save the manual entry form as a new repair.

        On success the form is reset and the table reloaded. On failure an
        alert is raised and the form is left as it was.
        """
        if form is not None:
            self.form = form
        form = self.form

        try:
            repair = RepairCreate(
                item_name=form.item_name,
                listing_id=form.listing_id,
                price=to_number(form.price),
                date_sold=parse_sale_date(form.date_sold),
                quantity=form.quantity,
                notes=form.notes,
                source="manual",
            )
        except ValidationError as e:
            self.alert(format_validation_error(e))
            return False

        try:
            self.store.insert_repair(repair)
        except StoreError as e:
            self.alert(e.message)
            return False

        self.form = RepairForm()
        self.refresh()
        return True

    def import_csv(self, text: str) -> bool:
        """
        Import an eBay order CSV, overwriting repairs that share an order number.

        The whole batch is written at once; on a store error nothing is
        reloaded.
        """
        try:
            repairs = normalize_csv(text)
        except CSVImportError as e:
            self.alert(str(e))
            return False

        try:
            self.imported_count = self.store.upsert_repairs(repairs, conflict_key="listing_id")
        except StoreError as e:
            self.alert(e.message)
            return False

        self.alert(CSV_IMPORT_SUCCESS)
        self.refresh()
        return True
