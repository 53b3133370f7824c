from __future__ import annotations

import logging
from datetime import date
from typing import Dict, Iterable, List

from book import Book
from catalog import Catalog, Patrons
from errors import InvalidReturn, NotFound, UnknownReference
from loan import Loan
from patron import Patron

logger = logging.getLogger(__name__)


class LoanLedger:
    """Owns every loan and is the only place loan state changes.

    Borrowing does not check ``total_copies``: over-lending is allowed and
    simply shows up as negative availability in the reports.
    """

    def __init__(self, catalog: Catalog, patrons: Patrons) -> None:
        self.catalog = catalog
        self.patrons = patrons
        self._loans: Dict[int, Loan] = {}

    # ------------------------- Queries ------------------------- #
    def get(self, loan_id: int) -> Loan:
        try:
            return self._loans[loan_id]
        except KeyError:
            raise NotFound(f"Loan {loan_id} not found.") from None

    def all_loans(self) -> List[Loan]:
        return sorted(self._loans.values(), key=lambda l: l.id)

    def all_open_loans(self) -> List[Loan]:
        return [l for l in self.all_loans() if l.is_open]

    def open_loans_for(self, book_id: int) -> List[Loan]:
        return [l for l in self.all_open_loans() if l.book_id == book_id]

    def __len__(self) -> int:
        return len(self._loans)

    # ------------------------- Writes ------------------------- #
    def record_borrow(self, book_id: int, patron_id: int, borrow_date: date) -> Loan:
        """Open a new loan. Raises UnknownReference if the book or patron is missing."""
        self.check_borrow(book_id, patron_id)
        loan = Loan(self._next_id(), book_id, patron_id, borrow_date)
        self._loans[loan.id] = loan
        logger.info(f"Loan {loan.id} opened: book={book_id} patron={patron_id} on {borrow_date}")
        return loan

    def record_return(self, loan_id: int, return_date: date) -> Loan:
        """Close an open loan. A loan can only be returned once."""
        loan = self.get(loan_id)
        if not loan.is_open:
            logger.warning(f"Rejected return of loan {loan_id}: already returned on {loan.return_date}")
            raise InvalidReturn(f"Loan {loan_id} was already returned on {loan.return_date}.")
        if return_date < loan.borrow_date:
            logger.warning(f"Rejected return of loan {loan_id}: {return_date} is before {loan.borrow_date}")
            raise InvalidReturn(
                f"Return date {return_date} is before borrow date {loan.borrow_date} for loan {loan_id}."
            )
        loan.return_date = return_date
        logger.info(f"Loan {loan_id} returned on {return_date}")
        return loan

    def load(self, loans: Iterable[Loan]) -> None:
        """Load existing history, applying the same checks as live writes."""
        for loan in loans:
            if loan.id in self._loans:
                raise ValueError(f"Loan with id {loan.id} already exists.")
            self.check_borrow(loan.book_id, loan.patron_id)
            if loan.return_date is not None and loan.return_date < loan.borrow_date:
                raise InvalidReturn(
                    f"Return date {loan.return_date} is before borrow date {loan.borrow_date} for loan {loan.id}."
                )
            self._loans[loan.id] = loan

    # ------------------------- Helpers ------------------------- #
    def check_borrow(self, book_id: int, patron_id: int) -> None:
        """Raise UnknownReference unless both the book and the patron exist."""
        if book_id not in self.catalog:
            logger.warning(f"Rejected borrow: unknown book {book_id}")
            raise UnknownReference(f"Book {book_id} does not exist.")
        if patron_id not in self.patrons:
            logger.warning(f"Rejected borrow: unknown patron {patron_id}")
            raise UnknownReference(f"Patron {patron_id} does not exist.")

    def _next_id(self) -> int:
        return max(self._loans, default=0) + 1


class Library:
    """Bundles the catalog, patrons and loan ledger of one snapshot."""

    def __init__(self, books: Iterable[Book] = (), patrons: Iterable[Patron] = (),
                 loans: Iterable[Loan] = ()) -> None:
        self.catalog = Catalog(books)
        self.patrons = Patrons(patrons)
        self.ledger = LoanLedger(self.catalog, self.patrons)
        self.ledger.load(loans)

    def get_statistics(self) -> dict:
        return {
            "total_books": len(self.catalog),
            "total_copies": sum(b.total_copies for b in self.catalog.all()),
            "total_patrons": len(self.patrons),
            "total_loans": len(self.ledger),
            "open_loans": len(self.ledger.all_open_loans()),
        }
