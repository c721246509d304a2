"""
Pydantic schemas for repairs.
Request and response models for the repair log API and the record store.
"""

import math
from datetime import datetime
from typing import Optional, List, Literal
from pydantic import BaseModel, Field, field_serializer


RepairSource = Literal["manual", "csv"]


# ============================================================================
# Repair Schemas
# ============================================================================

class RepairBase(BaseModel):
    """Fields shared by every repair written to the store"""
    item_name: str = Field(..., description="Item label")
    listing_id: str = Field(..., max_length=255, description="Listing / order number (unique)")
    price: float = Field(..., description="Sale price, NaN when the source text was not a number")
    date_sold: Optional[datetime] = Field(None, description="Sale timestamp, None when unparseable")
    quantity: int = Field(1, description="Units sold")
    source: RepairSource = Field(..., description="Where the record came from")


class RepairCreate(RepairBase):
    """Schema for a manually entered repair"""
    item_name: str = Field(..., min_length=1, description="Item label")
    date_sold: datetime = Field(..., description="Sale timestamp")
    notes: Optional[str] = Field(None, description="Free text notes")
    source: RepairSource = "manual"


class RepairImport(RepairBase):
    """Schema for a repair normalized from an eBay CSV row"""
    source: RepairSource = "csv"


class RepairForm(BaseModel):
    """
    Manual entry form state.

    Text fields hold exactly what was typed; price is converted on submit.
    The defaults are the state the form is reset to after a successful save.
    """
    item_name: str = ""
    listing_id: str = ""
    price: str = ""
    date_sold: str = ""
    quantity: int = 1
    notes: str = ""


class RepairResponse(BaseModel):
    """Schema for repair response"""
    id: int
    item_name: str
    listing_id: str
    price: Optional[float] = None
    date_sold: Optional[datetime] = None
    quantity: int
    notes: Optional[str] = None
    source: RepairSource

    class Config:
        from_attributes = True

    @field_serializer("price")
    def serialize_price(self, price: Optional[float]) -> Optional[float]:
        # JSON has no NaN or Infinity
        if price is None or not math.isfinite(price):
            return None
        return price


# ============================================================================
# List / Action Responses
# ============================================================================

class RepairListResponse(BaseModel):
    """Schema for the repair table"""
    items: List[RepairResponse]
    total: int
    period: Optional[str] = None


class RepairSubmitResponse(BaseModel):
    """Response for a saved manual entry: the reset form and the refreshed table"""
    success: bool = True
    form: RepairForm
    items: List[RepairResponse]


class CSVImportResponse(BaseModel):
    """Response for an eBay CSV import"""
    success: bool = True
    message: str
    imported_count: int = 0
    items: List[RepairResponse]
