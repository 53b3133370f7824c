from datetime import date, timedelta

import pytest

import reports
from book import Book
from config import settings
from library import Library
from patron import Patron
from seed import build_sample_library


def _days_ago(as_of, n):
    return as_of - timedelta(days=n)


def test_availability_sample(lib, as_of):
    rows = reports.availability(lib, as_of)
    assert [r.title for r in rows] == ["1984", "Dune", "Educated", "The Alchemist", "The Hobbit", "The Martian"]
    by_title = {r.title: r for r in rows}
    assert (by_title["Dune"].checked_out_copies, by_title["Dune"].available_copies) == (1, 2)
    assert (by_title["The Hobbit"].checked_out_copies, by_title["The Hobbit"].available_copies) == (0, 3)
    assert (by_title["The Alchemist"].checked_out_copies, by_title["The Alchemist"].available_copies) == (1, 0)


def test_availability_matches_open_loans(lib, as_of):
    for row in reports.availability(lib, as_of):
        open_count = len(lib.ledger.open_loans_for(row.book_id))
        assert row.checked_out_copies == open_count
        assert row.available_copies == row.total_copies - open_count


def test_availability_goes_negative_when_over_lent(lib, as_of):
    # The Alchemist has one copy and is already out
    lib.ledger.record_borrow(4, 1, as_of)
    row = next(r for r in reports.availability(lib, as_of) if r.title == "The Alchemist")
    assert row.checked_out_copies == 2
    assert row.available_copies == -1


def test_return_decreases_checked_out_by_one(lib, as_of):
    dune_loan = lib.ledger.open_loans_for(6)[0]
    before = next(r for r in reports.availability(lib, as_of) if r.book_id == 6)
    lib.ledger.record_return(dune_loan.id, as_of)
    after = next(r for r in reports.availability(lib, as_of) if r.book_id == 6)
    assert after.checked_out_copies == before.checked_out_copies - 1
    assert after.available_copies == before.available_copies + 1


def test_overdue_sample(lib, as_of):
    rows = reports.overdue(lib, as_of)
    assert [(r.title, r.days_out) for r in rows] == [("Educated", 25), ("Dune", 18)]
    dune = rows[1]
    assert (dune.first_name, dune.last_name) == ("Brianna", "Camacho")
    assert dune.borrow_date == _days_ago(as_of, 18)


def test_overdue_threshold_is_exclusive():
    as_of = date(2024, 3, 20)
    lib = Library([Book(1, "Dune", "Frank Herbert", "Science Fiction", 3)], [Patron(1, "Alex", "Nguyen")])
    lib.ledger.record_borrow(1, 1, _days_ago(as_of, 14))
    lib.ledger.record_borrow(1, 1, _days_ago(as_of, 15))
    rows = reports.overdue(lib, as_of)
    assert [r.days_out for r in rows] == [15]


def test_overdue_custom_threshold(lib, as_of):
    rows = reports.overdue(lib, as_of, threshold_days=5)
    assert [r.days_out for r in rows] == [25, 18, 8]


def test_overdue_ties_broken_by_loan_id():
    as_of = date(2024, 3, 20)
    lib = Library([Book(1, "Dune", "Frank Herbert", "Science Fiction", 3)],
                  [Patron(1, "Alex", "Nguyen"), Patron(2, "Sofia", "Garcia")])
    lib.ledger.record_borrow(1, 2, _days_ago(as_of, 20))
    lib.ledger.record_borrow(1, 1, _days_ago(as_of, 20))
    assert [r.loan_id for r in reports.overdue(lib, as_of)] == [1, 2]


def test_overdue_ignores_returned_loans(lib, as_of):
    # The Hobbit loan was 30 days ago but has been returned
    assert "The Hobbit" not in [r.title for r in reports.overdue(lib, as_of)]


def test_overdue_threshold_constant():
    assert reports.OVERDUE_THRESHOLD_DAYS == 14


def test_genre_popularity_sample(lib, as_of):
    rows = reports.genre_popularity(lib, as_of)
    assert [(r.genre, r.times_borrowed) for r in rows] == [
        ("Science Fiction", 2),
        ("Dystopian", 1),
        ("Fantasy", 1),
        ("Fiction", 1),
        ("Memoir", 1),
    ]


def test_genre_counts_sum_to_total_loans(lib, as_of):
    lib.ledger.record_borrow(3, 4, as_of)
    rows = reports.genre_popularity(lib, as_of)
    assert sum(r.times_borrowed for r in rows) == len(lib.ledger.all_loans()) == 7


def test_active_loans_sample(lib, as_of):
    rows = reports.active_loans(lib, as_of)
    assert [(r.first_name, r.title) for r in rows] == [
        ("Alex", "The Martian"),
        ("Sofia", "The Alchemist"),
        ("Brianna", "Dune"),
        ("John", "Educated"),
    ]
    assert rows[0].patron_id == 3
    assert rows[0].book_id == 3
    assert rows[0].borrow_date == _days_ago(as_of, 3)


def test_active_loans_exclude_closed(lib, as_of):
    open_ids = {(l.patron_id, l.book_id) for l in lib.ledger.all_open_loans()}
    rows = reports.active_loans(lib, as_of)
    assert {(r.patron_id, r.book_id) for r in rows} == open_ids
    assert "The Hobbit" not in [r.title for r in rows]
    assert "1984" not in [r.title for r in rows]


def test_active_loans_same_day_most_recent_loan_first():
    day = date(2024, 3, 1)
    lib = Library([Book(1, "Dune", "Frank Herbert", "Science Fiction", 3)],
                  [Patron(1, "Alex", "Nguyen"), Patron(2, "Sofia", "Garcia")])
    lib.ledger.record_borrow(1, 1, day)
    lib.ledger.record_borrow(1, 2, day)
    assert [r.patron_id for r in reports.active_loans(lib, day)] == [2, 1]


def test_dune_scenario():
    as_of = date(2024, 3, 20)
    lib = Library(
        [Book(1, "Dune", "Frank Herbert", "Science Fiction", 3),
         Book(2, "The Martian", "Andy Weir", "Science Fiction", 2)],
        [Patron(1, "Alex", "Nguyen")],
    )
    dune = lib.ledger.record_borrow(1, 1, _days_ago(as_of, 18))
    lib.ledger.record_borrow(2, 1, _days_ago(as_of, 3))

    row = next(r for r in reports.availability(lib, as_of) if r.title == "Dune")
    assert (row.checked_out_copies, row.available_copies) == (1, 2)
    overdue_rows = reports.overdue(lib, as_of)
    assert [(r.loan_id, r.days_out) for r in overdue_rows] == [(dune.id, 18)]
    assert (1, "Dune") in [(r.book_id, r.title) for r in reports.active_loans(lib, as_of)]
    genres = reports.genre_popularity(lib, as_of)
    assert [(r.genre, r.times_borrowed) for r in genres] == [("Science Fiction", 2)]


def test_empty_library_reports():
    lib = Library()
    as_of = date(2024, 3, 20)
    assert reports.availability(lib, as_of) == []
    assert reports.overdue(lib, as_of) == []
    assert reports.genre_popularity(lib, as_of) == []
    assert reports.active_loans(lib, as_of) == []


def test_books_without_loans_still_listed():
    lib = Library([Book(1, "Dune", "Frank Herbert", "Science Fiction", 3)])
    rows = reports.availability(lib, date(2024, 3, 20))
    assert len(rows) == 1
    assert rows[0].available_copies == 3


@pytest.mark.parametrize("report", [
    reports.availability, reports.overdue, reports.genre_popularity, reports.active_loans,
])
def test_reports_are_idempotent(lib, as_of, report):
    snapshot = [l.to_dict() for l in lib.ledger.all_loans()]
    assert report(lib, as_of) == report(lib, as_of)
    assert [l.to_dict() for l in lib.ledger.all_loans()] == snapshot


def test_row_to_dict_serialises_dates(lib, as_of):
    row = reports.overdue(lib, as_of)[0].to_dict()
    assert row["borrow_date"] == _days_ago(as_of, 25).isoformat()
    assert set(row) == {"loan_id", "title", "first_name", "last_name", "borrow_date", "days_out"}


def test_overdue_defaults_to_today():
    lib = build_sample_library(date.today())
    assert [r.days_out for r in reports.overdue(lib)] == [25, 18]


def test_overdue_threshold_follows_settings(lib, as_of, monkeypatch):
    monkeypatch.setattr(settings, "overdue_threshold_days", 20)
    assert [r.title for r in reports.overdue(lib, as_of)] == ["Educated"]


def test_title_and_genre_order_ignores_case():
    as_of = date(2024, 3, 20)
    lib = Library(
        [Book(1, "Zebra Stories", "A", "poetry", 1),
         Book(2, "apple orchards", "B", "Nature", 1)],
        [Patron(1, "Alex", "Nguyen")],
    )
    lib.ledger.record_borrow(1, 1, as_of)
    lib.ledger.record_borrow(2, 1, as_of)
    assert [r.title for r in reports.availability(lib, as_of)] == ["apple orchards", "Zebra Stories"]
    assert [r.genre for r in reports.genre_popularity(lib, as_of)] == ["Nature", "poetry"]
