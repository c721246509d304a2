"""
Repair model.
A single sale of a repaired item, entered by hand or imported from an eBay order CSV.
"""

from sqlalchemy import Column, Integer, String, Text, Float, DateTime, CheckConstraint
from sqlalchemy.sql import func
from app.core.database import Base


class Repair(Base):
    """
    Repair model - one sold repair.

    Table: repairs
    listing_id is unique and is the conflict key when importing.
    date_sold is NULL for imported rows whose sale date could not be parsed.
    """
    __tablename__ = "repairs"
    __table_args__ = (
        CheckConstraint("source IN ('manual', 'csv')", name="ck_repairs_source"),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    item_name = Column(Text, nullable=False)
    listing_id = Column(String(255), nullable=False, unique=True, index=True)
    price = Column(Float)
    date_sold = Column(DateTime(timezone=True), index=True)
    quantity = Column(Integer, nullable=False, default=1, server_default="1")
    notes = Column(Text)
    source = Column(String(16), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<Repair(id={self.id}, listing_id='{self.listing_id}', source='{self.source}')>"
