"""Sample records for demos and tests.

Six books, four patrons and six loans. Loan dates are relative to ``as_of``
so the same mix always comes out: two returned, two current and two
overdue (Educated at 25 days, Dune at 18).
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Optional

from book import Book
from library import Library
from patron import Patron

SAMPLE_BOOKS = [
    Book(1, "The Hobbit", "J.R.R. Tolkien", "Fantasy", 3),
    Book(2, "1984", "George Orwell", "Dystopian", 2),
    Book(3, "The Martian", "Andy Weir", "Science Fiction", 2),
    Book(4, "The Alchemist", "Paulo Coelho", "Fiction", 1),
    Book(5, "Educated", "Tara Westover", "Memoir", 2),
    Book(6, "Dune", "Frank Herbert", "Science Fiction", 3),
]

SAMPLE_PATRONS = [
    Patron(1, "John", "Camacho", "john@example.com", "555-0101"),
    Patron(2, "Brianna", "Camacho", "brianna@example.com", "555-0102"),
    Patron(3, "Alex", "Nguyen", "alex@example.com", "555-0103"),
    Patron(4, "Sofia", "Garcia", "sofia@example.com", "555-0104"),
]

# (book_id, patron_id, days ago borrowed, days ago returned or None)
SAMPLE_LOANS = [
    (1, 1, 30, 20),
    (2, 2, 10, 5),
    (3, 3, 3, None),
    (4, 4, 8, None),
    (5, 1, 25, None),
    (6, 2, 18, None),
]


def build_sample_library(as_of: Optional[date] = None) -> Library:
    as_of = as_of or date.today()
    library = Library(
        [Book.from_dict(b.to_dict()) for b in SAMPLE_BOOKS],
        [Patron.from_dict(p.to_dict()) for p in SAMPLE_PATRONS],
    )
    for book_id, patron_id, borrowed_ago, returned_ago in SAMPLE_LOANS:
        loan = library.ledger.record_borrow(book_id, patron_id, as_of - timedelta(days=borrowed_ago))
        if returned_ago is not None:
            library.ledger.record_return(loan.id, as_of - timedelta(days=returned_ago))
    return library
