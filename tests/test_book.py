import datetime as dt

import pytest

from loancalc_core.domain.errors import InvalidFieldError
from loancalc_core.domain.models import CompoundingConfig, EntryKind, Frequency, LedgerEntry
from loancalc_core.services.book import EntryBook

TODAY = dt.date(2024, 6, 30)


@pytest.fixture
def book():
    return EntryBook(today=lambda: TODAY)


def test_ids_are_unique_and_never_reused(book):
    first = book.add(dt.date(2023, 1, 1), 100, EntryKind.BORROWED)
    second = book.add(dt.date(2023, 2, 1), 50, EntryKind.PAID)
    book.delete(second.id)
    third = book.add(dt.date(2023, 3, 1), 25, EntryKind.PAID)

    assert (first.id, second.id, third.id) == (1, 2, 3)
    assert [e.id for e in book] == [1, 3]


def test_entries_are_listed_by_date(book):
    book.add(dt.date(2023, 5, 1), 10, EntryKind.PAID)
    book.add(dt.date(2023, 1, 1), 100, EntryKind.BORROWED)
    assert [e.date for e in book.entries()] == [dt.date(2023, 1, 1), dt.date(2023, 5, 1)]
    assert book.earliest_date() == dt.date(2023, 1, 1)


def test_add_normalizes_amount_and_description(book):
    entry = book.add(dt.datetime(2023, 1, 1, 15, 30), 12.3456, EntryKind.BORROWED, "  car loan  ")
    assert entry.date == dt.date(2023, 1, 1)
    assert entry.amount == 12.35
    assert entry.description == "car loan"

    blank = book.add(dt.date(2023, 1, 2), 1, EntryKind.PAID, "   ")
    assert blank.description is None


def test_add_rejects_future_dates_and_negative_amounts(book):
    with pytest.raises(InvalidFieldError) as exc:
        book.add(TODAY + dt.timedelta(days=1), 10, EntryKind.BORROWED)
    assert exc.value.field == "date"

    with pytest.raises(InvalidFieldError) as exc:
        book.add(TODAY, -1, EntryKind.BORROWED)
    assert exc.value.field == "amount"
    assert len(book) == 0


def test_edit_replaces_entry_in_place(book):
    entry = book.add(dt.date(2023, 1, 1), 100, EntryKind.BORROWED, "original")
    updated = book.edit(entry.id, amount=150, kind=EntryKind.PAID)

    assert updated.id == entry.id
    assert updated.amount == 150
    assert updated.kind == EntryKind.PAID
    assert updated.description == "original"
    assert book.get(entry.id) is updated
    # the old record is untouched
    assert entry.amount == 100


def test_unknown_ids_raise_key_error(book):
    with pytest.raises(KeyError):
        book.get(42)
    with pytest.raises(KeyError):
        book.edit(42, amount=1)
    with pytest.raises(KeyError):
        book.delete(42)


def test_changes_clear_cached_evaluation(book):
    entry = book.add(dt.date(2023, 1, 1), 10000, EntryKind.BORROWED)
    config = CompoundingConfig(dt.date(2024, 1, 1), 0.10, Frequency.MONTHLY)

    evaluation = book.calculate(config)
    assert book.last_evaluation is evaluation
    assert evaluation.balance.net_balance > 10000

    book.add(dt.date(2023, 6, 1), 5000, EntryKind.PAID)
    assert book.last_evaluation is None

    book.calculate(config)
    book.edit(entry.id, amount=9000)
    assert book.last_evaluation is None

    book.calculate(config)
    book.delete(entry.id)
    assert book.last_evaluation is None


def test_snapshot_is_detached_from_later_changes(book):
    book.add(dt.date(2023, 1, 1), 100, EntryKind.BORROWED)
    snap = book.snapshot()
    book.add(dt.date(2023, 2, 1), 100, EntryKind.BORROWED)
    assert len(snap) == 1
    assert len(book) == 2


def test_load_reassigns_ids(book):
    book.add(dt.date(2023, 1, 1), 1, EntryKind.PAID)
    imported = [
        LedgerEntry(id=7, date=dt.date(2022, 1, 1), amount=500.0, kind=EntryKind.BORROWED, description="imported"),
    ]
    book.load(imported)
    assert [(e.id, e.description) for e in book] == [(2, "imported"), (1, None)]
