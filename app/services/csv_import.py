"""
eBay order CSV normalizer.

Turns the rows of an eBay "Orders" report into repairs ready to be upserted.
Rows without an order number, item title or total price are dropped; a price
or sale date that cannot be read is kept as a degraded value (NaN / None)
rather than rejected.
"""

import logging
import math
import re
import warnings
from datetime import datetime
from enum import Enum
from io import StringIO
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

import pandas as pd
from pandas.errors import EmptyDataError, ParserError, ParserWarning
from pydantic import BaseModel

from app.schemas.repair import RepairImport

logger = logging.getLogger(__name__)

# eBay report headers
ORDER_NUMBER = "Order number"
ITEM_TITLE = "Item title"
TOTAL_PRICE = "Total price"
SALE_DATE = "Sale date"
QUANTITY = "Quantity"


class CSVImportError(Exception):
    """The upload could not be read as CSV at all"""


class DropReason(str, Enum):
    MISSING_ORDER_NUMBER = "missing_order_number"
    MISSING_ITEM_TITLE = "missing_item_title"
    MISSING_TOTAL_PRICE = "missing_total_price"


class KeptRow(BaseModel):
    """A row that became a repair"""
    row_number: int
    repair: RepairImport


class DroppedRow(BaseModel):
    """A row left out of the import"""
    row_number: int
    reason: DropReason


RowOutcome = Union[KeptRow, DroppedRow]

_REQUIRED = (
    (ORDER_NUMBER, DropReason.MISSING_ORDER_NUMBER),
    (ITEM_TITLE, DropReason.MISSING_ITEM_TITLE),
    (TOTAL_PRICE, DropReason.MISSING_TOTAL_PRICE),
)


# ============================================================================
# Parsing
# ============================================================================

def decode_upload(content: bytes) -> str:
    """Decode an uploaded file, UTF-8 (BOM tolerated) first, Latin-1 otherwise"""
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError:
        return content.decode("latin-1")


def read_csv_rows(text: str) -> List[Dict[str, str]]:
    """
    Parse CSV text into one dict per data row, keyed by the header row.

    Every cell is read as text; blank lines are skipped and missing cells
    become empty strings. Cells beyond the header's width are ignored, so a
    trailing comma or a stray extra field never shifts the columns of a row.
    Header-only or empty input gives no rows.
    """
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always", ParserWarning)
        try:
            df = pd.read_csv(
                StringIO(text),
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
                engine="python",
                index_col=False,
            )
        except EmptyDataError:
            return []
        except ParserError as e:
            raise CSVImportError(f"Could not parse CSV: {e}")

    for warning in caught:
        if issubclass(warning.category, ParserWarning):
            logger.debug(f"Ignored extra CSV fields: {warning.message}")

    return df.fillna("").to_dict(orient="records")


# ============================================================================
# Coercion
# ============================================================================

# Number literals accepted for prices and quantities
_DECIMAL = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?")
_INFINITY = re.compile(r"[+-]?Infinity")
_RADIX = re.compile(r"0[xX][0-9a-fA-F]+|0[oO][0-7]+|0[bB][01]+")


def to_number(value: Any) -> float:
    """
    Read text as a number: blank is 0, anything unreadable is NaN.

    Accepts plain decimals with an optional exponent, "Infinity" and
    0x/0o/0b integers. Digit separators ("1,000", "1_000") and spellings
    such as "inf" or "nan" are unreadable.
    """
    if value is None:
        return math.nan
    text = str(value).strip()
    if not text:
        return 0.0
    if _DECIMAL.fullmatch(text):
        return float(text)
    if _INFINITY.fullmatch(text):
        return -math.inf if text.startswith("-") else math.inf
    if _RADIX.fullmatch(text):
        return float(int(text, 0))
    return math.nan


def parse_price(value: Any) -> float:
    """Total price without its dollar sign, e.g. "$42.50" -> 42.5"""
    return to_number(str(value).replace("$", "", 1))


def parse_sale_date(value: Any) -> Optional[datetime]:
    """
    Parse a sale date into an aware UTC datetime.

    Values without a zone are taken as UTC. None means the date could not be
    read.
    """
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None

    ts = pd.to_datetime(text, errors="coerce")
    if pd.isna(ts):
        return None

    if ts.tzinfo is None:
        ts = ts.tz_localize("UTC")
    else:
        ts = ts.tz_convert("UTC")
    return ts.to_pydatetime()


def parse_quantity(value: Any) -> int:
    """Units sold, 1 when the cell is empty or unreadable"""
    if value is None:
        return 1
    text = str(value).strip()
    if not text:
        return 1
    quantity = to_number(text)
    if not math.isfinite(quantity):
        return 1
    return int(quantity)


# ============================================================================
# Normalization
# ============================================================================

def normalize_row(raw: Mapping[str, Any], row_number: int = 0) -> RowOutcome:
    """Map one eBay CSV row onto a repair, or say why it was dropped"""
    for column, reason in _REQUIRED:
        if not raw.get(column):
            return DroppedRow(row_number=row_number, reason=reason)

    repair = RepairImport(
        listing_id=str(raw[ORDER_NUMBER]),
        item_name=str(raw[ITEM_TITLE]),
        price=parse_price(raw[TOTAL_PRICE]),
        date_sold=parse_sale_date(raw.get(SALE_DATE)),
        quantity=parse_quantity(raw.get(QUANTITY)),
        source="csv",
    )
    return KeptRow(row_number=row_number, repair=repair)


def normalize_rows(rows: Iterable[Mapping[str, Any]]) -> List[RepairImport]:
    """Normalize every row, keeping input order and leaving dropped rows out"""
    repairs = []
    dropped = 0

    # Row 1 is the header
    for row_number, raw in enumerate(rows, start=2):
        outcome = normalize_row(raw, row_number)
        if isinstance(outcome, KeptRow):
            repairs.append(outcome.repair)
        else:
            dropped += 1
            logger.debug(f"Dropped CSV row {outcome.row_number}: {outcome.reason.value}")

    logger.info(f"Normalized {len(repairs)} repairs from CSV ({dropped} rows dropped)")
    return repairs


def normalize_csv(text: str) -> List[RepairImport]:
    """Parse and normalize a whole eBay CSV export"""
    return normalize_rows(read_csv_rows(text))
