import logging
import sqlite3
from datetime import date

from book import Book
from config import settings
from library import Library
from loan import Loan
from patron import Patron

logger = logging.getLogger(__name__)

# Tests (and callers) may point this somewhere else before connecting.
DATABASE_FILE = settings.data_file


def get_db_connection() -> sqlite3.Connection:
    """Open a connection to the SQLite file with foreign keys enforced."""
    conn = sqlite3.connect(DATABASE_FILE)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON;")
    return conn


def create_tables() -> None:
    """Create the books, patrons and loans tables if they don't exist."""
    conn = get_db_connection()
    try:
        cursor = conn.cursor()
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS books (
                id INTEGER PRIMARY KEY,
                title TEXT NOT NULL,
                author TEXT NOT NULL,
                genre TEXT NOT NULL,
                total_copies INTEGER NOT NULL CHECK (total_copies >= 0)
            )
        """)
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS patrons (
                id INTEGER PRIMARY KEY,
                first_name TEXT NOT NULL,
                last_name TEXT NOT NULL,
                email TEXT,
                phone TEXT
            )
        """)
        # return_date stays NULL until the book comes back
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS loans (
                id INTEGER PRIMARY KEY,
                book_id INTEGER NOT NULL REFERENCES books(id),
                patron_id INTEGER NOT NULL REFERENCES patrons(id),
                borrow_date DATE NOT NULL,
                return_date DATE,
                CHECK (return_date IS NULL OR return_date >= borrow_date)
            )
        """)
        conn.commit()
    finally:
        conn.close()


def initialize_database() -> None:
    create_tables()


def reset_database() -> None:
    """Drop all tables and recreate them empty."""
    conn = get_db_connection()
    try:
        conn.execute("DROP TABLE IF EXISTS loans")
        conn.execute("DROP TABLE IF EXISTS patrons")
        conn.execute("DROP TABLE IF EXISTS books")
        conn.commit()
    finally:
        conn.close()
    create_tables()
    logger.info(f"Database {DATABASE_FILE} reset")


def save_library(library: Library) -> None:
    """Replace the stored snapshot with the contents of ``library``."""
    initialize_database()
    conn = get_db_connection()
    try:
        with conn:
            conn.execute("DELETE FROM loans")
            conn.execute("DELETE FROM patrons")
            conn.execute("DELETE FROM books")
            conn.executemany(
                "INSERT INTO books (id, title, author, genre, total_copies) "
                "VALUES (:id, :title, :author, :genre, :total_copies)",
                [b.to_dict() for b in library.catalog.all()],
            )
            conn.executemany(
                "INSERT INTO patrons (id, first_name, last_name, email, phone) "
                "VALUES (:id, :first_name, :last_name, :email, :phone)",
                [p.to_dict() for p in library.patrons.all()],
            )
            conn.executemany(
                "INSERT INTO loans (id, book_id, patron_id, borrow_date, return_date) "
                "VALUES (:id, :book_id, :patron_id, :borrow_date, :return_date)",
                [l.to_dict() for l in library.ledger.all_loans()],
            )
    finally:
        conn.close()
    logger.info(
        f"Saved {len(library.catalog)} books, {len(library.patrons)} patrons "
        f"and {len(library.ledger)} loans to {DATABASE_FILE}"
    )


def insert_loan(book_id: int, patron_id: int, borrow_date: date) -> Loan:
    """Store a new open loan in one INSERT; SQLite assigns the id."""
    conn = get_db_connection()
    try:
        cursor = conn.execute(
            "INSERT INTO loans (book_id, patron_id, borrow_date) VALUES (?, ?, ?)",
            (book_id, patron_id, borrow_date.isoformat()),
        )
        conn.commit()
        loan_id = cursor.lastrowid
    finally:
        conn.close()
    logger.info(f"Stored loan {loan_id}: book={book_id} patron={patron_id} on {borrow_date}")
    return Loan(loan_id, book_id, patron_id, borrow_date)


def close_loan(loan_id: int, return_date: date) -> bool:
    """Set the return date of a loan that is still open.

    Returns False when no open loan with that id was updated.
    """
    conn = get_db_connection()
    try:
        cursor = conn.execute(
            "UPDATE loans SET return_date = ? WHERE id = ? AND return_date IS NULL",
            (return_date.isoformat(), loan_id),
        )
        conn.commit()
        updated = cursor.rowcount == 1
    finally:
        conn.close()
    if updated:
        logger.info(f"Stored return of loan {loan_id} on {return_date}")
    return updated


def load_library() -> Library:
    """Read the stored snapshot back into a Library."""
    initialize_database()
    conn = get_db_connection()
    try:
        books = [Book.from_dict(dict(row)) for row in conn.execute("SELECT * FROM books ORDER BY id")]
        patrons = [Patron.from_dict(dict(row)) for row in conn.execute("SELECT * FROM patrons ORDER BY id")]
        loans = [Loan.from_dict(dict(row)) for row in conn.execute("SELECT * FROM loans ORDER BY id")]
    finally:
        conn.close()
    return Library(books, patrons, loans)
