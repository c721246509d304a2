"""
API Router for the repair log.
List and filter repairs, save a manual entry, import an eBay order CSV.
"""

import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query, File, UploadFile
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.schemas.repair import (
    RepairForm,
    RepairResponse,
    RepairListResponse,
    RepairSubmitResponse,
    CSVImportResponse,
)
from app.services.csv_import import decode_upload
from app.services.repair_log import RepairLogController
from app.services.repair_repository import RepairRepository
from app.services.session_provider import JwtSessionProvider

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/repairs", tags=["Repairs"])
security = HTTPBearer(auto_error=False)


# ============================================================================
# Controller / Session Guard
# ============================================================================

def get_repair_log(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> RepairLogController:
    """Repair log controller for this request, bound to the caller's bearer token"""
    token = credentials.credentials if credentials else None
    return RepairLogController(JwtSessionProvider(db, token), RepairRepository(db))


def login_required() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
        headers={"WWW-Authenticate": "Bearer", "Location": settings.LOGIN_PATH},
    )


def table(controller: RepairLogController) -> List[RepairResponse]:
    return [RepairResponse.model_validate(r) for r in controller.repairs]


# ============================================================================
# READ ENDPOINTS
# ============================================================================

@router.get("/", response_model=RepairListResponse)
def list_repairs(
    period: Optional[str] = Query(None, description="thisMonth, lastMonth or thisYear"),
    controller: RepairLogController = Depends(get_repair_log),
):
    """
    Get the repair table, newest sale first.

    **Query Parameters:**
    - period: thisMonth, lastMonth or thisYear. Any other value returns every repair.
    """
    if period is None:
        if not controller.init():
            raise login_required()
    else:
        if not controller.guard():
            raise login_required()
        controller.filter(period)

    items = table(controller)
    return RepairListResponse(items=items, total=len(items), period=controller.period)


# ============================================================================
# CREATE ENDPOINTS
# ============================================================================

@router.post("/", response_model=RepairSubmitResponse, status_code=status.HTTP_201_CREATED)
def create_repair(
    form: RepairForm,
    controller: RepairLogController = Depends(get_repair_log),
):
    """
    Save a manually entered repair.

    **Form fields:** item_name, listing_id, price (text), date_sold, quantity, notes.
    The listing_id must not exist yet. Returns the reset form and the refreshed table.
    """
    if not controller.guard():
        raise login_required()

    if not controller.submit(form):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=controller.alerts[-1]
        )

    return RepairSubmitResponse(form=controller.form, items=table(controller))


@router.post("/import-csv", response_model=CSVImportResponse)
async def import_repairs_csv(
    file: UploadFile = File(..., description="eBay order history CSV"),
    controller: RepairLogController = Depends(get_repair_log),
):
    """
    Import an eBay order history CSV.

    **Columns used:** Order number, Item title, Total price, Sale date, Quantity

    **Example CSV:**
    ```csv
    Order number,Item title,Total price,Sale date,Quantity
    1001,Widget,$10.00,2024-01-05,2
    1002,Gadget,$20.00,2024-02-01,
    ```

    Rows without an order number, item title or total price are skipped.
    Orders already in the log are overwritten.
    """
    if not controller.guard():
        raise login_required()

    if not file.filename or not file.filename.lower().endswith('.csv'):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="File must be a CSV file (.csv extension)"
        )

    content = await file.read()
    logger.info(f"Importing {file.filename} ({len(content)} bytes)")

    if not controller.import_csv(decode_upload(content)):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=controller.alerts[-1]
        )

    return CSVImportResponse(
        message=controller.alerts[-1],
        imported_count=controller.imported_count,
        items=table(controller),
    )
