"""The four lending reports.

Every report is a pure function of the library snapshot and an explicit
``as_of`` date. Nothing here changes state, so calling a report twice on the
same data and date gives the same rows. When ``as_of`` is left out it falls
back to ``date.today()``; pass it explicitly for reproducible output.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import asdict, dataclass
from datetime import date
from typing import List, Optional

from config import DEFAULT_OVERDUE_THRESHOLD_DAYS, settings
from library import Library

OVERDUE_THRESHOLD_DAYS = DEFAULT_OVERDUE_THRESHOLD_DAYS


@dataclass(frozen=True)
class AvailabilityRow:
    book_id: int
    title: str
    author: str
    genre: str
    total_copies: int
    checked_out_copies: int
    available_copies: int

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class OverdueRow:
    loan_id: int
    title: str
    first_name: str
    last_name: str
    borrow_date: date
    days_out: int

    def to_dict(self) -> dict:
        d = asdict(self)
        d["borrow_date"] = self.borrow_date.isoformat()
        return d


@dataclass(frozen=True)
class GenreRow:
    genre: str
    times_borrowed: int

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class ActiveLoanRow:
    patron_id: int
    first_name: str
    last_name: str
    book_id: int
    title: str
    borrow_date: date

    def to_dict(self) -> dict:
        d = asdict(self)
        d["borrow_date"] = self.borrow_date.isoformat()
        return d


def availability(library: Library, as_of: Optional[date] = None) -> List[AvailabilityRow]:
    """Copies checked out and still on the shelf for every book, by title.

    ``available_copies`` is not clamped at zero, so an over-lent book shows up
    negative. ``as_of`` is accepted for symmetry; open/closed state is
    whatever the snapshot holds.
    """
    out = Counter(l.book_id for l in library.ledger.all_open_loans())
    rows = [
        AvailabilityRow(
            book_id=b.id,
            title=b.title,
            author=b.author,
            genre=b.genre,
            total_copies=b.total_copies,
            checked_out_copies=out[b.id],
            available_copies=b.total_copies - out[b.id],
        )
        for b in library.catalog.all()
    ]
    rows.sort(key=lambda r: (r.title.casefold(), r.title, r.book_id))
    return rows


def overdue(library: Library, as_of: Optional[date] = None,
            threshold_days: Optional[int] = None) -> List[OverdueRow]:
    """Open loans out for more than ``threshold_days`` whole days, longest first.

    ``threshold_days`` defaults to ``settings.overdue_threshold_days``
    (``OVERDUE_THRESHOLD_DAYS`` unless the environment overrides it).
    """
    if as_of is None:
        as_of = date.today()
    if threshold_days is None:
        threshold_days = settings.overdue_threshold_days
    rows = []
    for loan in library.ledger.all_open_loans():
        days_out = loan.days_out(as_of)
        if days_out <= threshold_days:
            continue
        book = library.catalog.get(loan.book_id)
        patron = library.patrons.get(loan.patron_id)
        rows.append(OverdueRow(
            loan_id=loan.id,
            title=book.title,
            first_name=patron.first_name,
            last_name=patron.last_name,
            borrow_date=loan.borrow_date,
            days_out=days_out,
        ))
    rows.sort(key=lambda r: (-r.days_out, r.loan_id))
    return rows


def genre_popularity(library: Library, as_of: Optional[date] = None) -> List[GenreRow]:
    """Borrow counts per genre. Returned loans count too."""
    counts = Counter(library.catalog.get(l.book_id).genre for l in library.ledger.all_loans())
    rows = [GenreRow(genre=g, times_borrowed=n) for g, n in counts.items()]
    rows.sort(key=lambda r: (-r.times_borrowed, r.genre.casefold(), r.genre))
    return rows


def active_loans(library: Library, as_of: Optional[date] = None) -> List[ActiveLoanRow]:
    """Who has what right now, most recent borrow first."""
    loans = sorted(library.ledger.all_open_loans(), key=lambda l: (l.borrow_date, l.id), reverse=True)
    rows = []
    for loan in loans:
        book = library.catalog.get(loan.book_id)
        patron = library.patrons.get(loan.patron_id)
        rows.append(ActiveLoanRow(
            patron_id=patron.id,
            first_name=patron.first_name,
            last_name=patron.last_name,
            book_id=book.id,
            title=book.title,
            borrow_date=loan.borrow_date,
        ))
    return rows
