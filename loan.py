from __future__ import annotations

from datetime import date


def _as_date(value) -> date | None:
    # SQLite hands dates back as ISO strings
    if value is None or isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


class Loan:
    """One borrowing transaction. ``return_date`` stays ``None`` while the book is out."""

    def __init__(self, id: int, book_id: int, patron_id: int, borrow_date: date,
                 return_date: date | None = None) -> None:
        self.id = int(id)
        self.book_id = int(book_id)
        self.patron_id = int(patron_id)
        self.borrow_date = _as_date(borrow_date)
        self.return_date = _as_date(return_date)

    def __repr__(self) -> str:  # pragma: no cover
        return (f"Loan(id={self.id!r}, book_id={self.book_id!r}, patron_id={self.patron_id!r}, "
                f"borrow_date={self.borrow_date!r}, return_date={self.return_date!r})")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Loan):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    @property
    def is_open(self) -> bool:
        return self.return_date is None

    def days_out(self, as_of: date) -> int:
        """Whole days between the borrow date and ``as_of``."""
        return (as_of - self.borrow_date).days

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "book_id": self.book_id,
            "patron_id": self.patron_id,
            "borrow_date": self.borrow_date.isoformat(),
            "return_date": self.return_date.isoformat() if self.return_date else None,
        }

    @staticmethod
    def from_dict(data: dict) -> "Loan":
        return Loan(
            id=data["id"],
            book_id=data["book_id"],
            patron_id=data["patron_id"],
            borrow_date=data["borrow_date"],
            return_date=data.get("return_date"),
        )
