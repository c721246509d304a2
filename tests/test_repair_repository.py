# tests/test_repair_repository.py
from datetime import datetime, timezone

import pytest

from app.models import Repair
from app.schemas.repair import RepairCreate, RepairImport
from app.services.record_store import StoreError
from app.services.repair_log import RepairLogController
from app.services.repair_repository import RepairRepository
from conftest import FakeSessionProvider


def _imported(listing_id, item_name="Widget", price=10.0, day=5, quantity=1):
    return RepairImport(
        listing_id=listing_id,
        item_name=item_name,
        price=price,
        date_sold=datetime(2024, 1, day, tzinfo=timezone.utc),
        quantity=quantity,
    )


def test_upsert_and_list(db):
    repo = RepairRepository(db)

    written = repo.upsert_repairs([_imported("1001", day=5), _imported("1002", day=20)])

    assert written == 2
    assert [r.listing_id for r in repo.list_repairs()] == ["1002", "1001"]
    assert all(r.source == "csv" for r in repo.list_repairs())


def test_duplicate_listing_in_batch_keeps_later_row(db):
    repo = RepairRepository(db)

    repo.upsert_repairs([
        _imported("1001", item_name="First", price=5.0),
        _imported("1001", item_name="Second", price=7.5, quantity=3),
    ])

    rows = db.query(Repair).filter(Repair.listing_id == "1001").all()
    assert len(rows) == 1
    assert rows[0].item_name == "Second"
    assert rows[0].price == 7.5
    assert rows[0].quantity == 3


def test_upsert_overwrites_existing_but_keeps_notes(db):
    repo = RepairRepository(db)
    repo.insert_repair(RepairCreate(
        item_name="Widget",
        listing_id="1001",
        price=9.0,
        date_sold=datetime(2024, 1, 5, tzinfo=timezone.utc),
        notes="battery swapped",
    ))

    repo.upsert_repairs([_imported("1001", item_name="Widget v2", price=11.0)])

    db.expire_all()
    rows = db.query(Repair).all()
    assert len(rows) == 1
    assert rows[0].item_name == "Widget v2"
    assert rows[0].price == 11.0
    assert rows[0].source == "csv"
    assert rows[0].notes == "battery swapped"


def test_empty_batch_is_a_no_op(db):
    assert RepairRepository(db).upsert_repairs([]) == 0
    assert db.query(Repair).count() == 0


def test_insert_duplicate_listing_raises_store_error(db):
    repo = RepairRepository(db)
    repair = RepairCreate(
        item_name="Widget",
        listing_id="L-1",
        price=1.0,
        date_sold=datetime(2024, 1, 5, tzinfo=timezone.utc),
    )
    repo.insert_repair(repair)

    with pytest.raises(StoreError) as exc:
        repo.insert_repair(repair)

    assert "UNIQUE" in exc.value.message
    assert db.query(Repair).count() == 1


def test_list_range_is_inclusive(db):
    repo = RepairRepository(db)
    repo.upsert_repairs([_imported(str(day), day=day) for day in (1, 10, 20, 31)])

    rows = repo.list_repairs(
        start=datetime(2024, 1, 10, tzinfo=timezone.utc),
        end=datetime(2024, 1, 20, tzinfo=timezone.utc),
    )

    assert [r.listing_id for r in rows] == ["20", "10"]


def test_repairs_without_sale_date_sort_last(db):
    repo = RepairRepository(db)
    undated = _imported("undated")
    undated.date_sold = None
    repo.upsert_repairs([undated, _imported("dated")])

    assert [r.listing_id for r in repo.list_repairs()] == ["dated", "undated"]

    bounded = repo.list_repairs(start=datetime(2000, 1, 1, tzinfo=timezone.utc))
    assert [r.listing_id for r in bounded] == ["dated"]


def test_period_filters_against_the_database(db):
    repo = RepairRepository(db)
    repo.upsert_repairs([
        RepairImport(listing_id=listing_id, item_name=listing_id, price=1.0, date_sold=sold)
        for listing_id, sold in [
            ("last-year", datetime(2023, 12, 31, 23, 0, tzinfo=timezone.utc)),
            ("january", datetime(2024, 1, 15, tzinfo=timezone.utc)),
            ("feb-first", datetime(2024, 2, 1, tzinfo=timezone.utc)),
            ("feb-last-evening", datetime(2024, 2, 29, 18, 0, tzinfo=timezone.utc)),
            ("march-first", datetime(2024, 3, 1, tzinfo=timezone.utc)),
            ("march", datetime(2024, 3, 14, 12, 0, tzinfo=timezone.utc)),
        ]
    ])
    controller = RepairLogController(
        FakeSessionProvider({"email": "sam@example.com", "jti": "abc"}),
        repo,
        clock=lambda: datetime(2024, 3, 15, 9, 0, tzinfo=timezone.utc),
    )

    controller.filter("thisMonth")
    assert [r.listing_id for r in controller.repairs] == ["march", "march-first"]

    controller.filter("lastMonth")
    assert [r.listing_id for r in controller.repairs] == ["feb-first"]

    controller.filter("thisYear")
    assert [r.listing_id for r in controller.repairs] == [
        "march", "march-first", "feb-last-evening", "feb-first", "january",
    ]
