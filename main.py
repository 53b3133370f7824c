import subprocess
import sys
from datetime import date, datetime
from typing import Optional

import typer

import database
import reports
from config import configure_logging, settings
from errors import InvalidReturn, LedgerError
from seed import build_sample_library
from utils.ui_helpers import set_output_mode, print_report, print_stats_result

app = typer.Typer(help=settings.app_name)

DATE_FORMATS = ["%Y-%m-%d"]

AVAILABILITY_COLUMNS = ["book_id", "title", "author", "genre", "total_copies",
                        "checked_out_copies", "available_copies"]
OVERDUE_COLUMNS = ["loan_id", "title", "first_name", "last_name", "borrow_date", "days_out"]
GENRE_COLUMNS = ["genre", "times_borrowed"]
ACTIVE_COLUMNS = ["patron_id", "first_name", "last_name", "book_id", "title", "borrow_date"]


def _to_date(value: Optional[datetime]) -> date:
    return value.date() if value else date.today()


@app.callback()
def _global_options(
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    )
):
    """Global options for the CLI (e.g. output mode)."""
    configure_logging()
    if output:
        set_output_mode(output)


@app.command("seed")
def cli_seed(
    as_of: Optional[datetime] = typer.Option(None, "--as-of", formats=DATE_FORMATS,
                                             help="Date the sample loans are relative to."),
):
    """Reset the database and load the sample books, patrons and loans."""
    library = build_sample_library(_to_date(as_of))
    database.reset_database()
    database.save_library(library)
    print(f"Seeded {len(library.catalog)} books, {len(library.patrons)} patrons "
          f"and {len(library.ledger)} loans.")


@app.command("availability")
def cli_availability(
    as_of: Optional[datetime] = typer.Option(None, "--as-of", formats=DATE_FORMATS),
):
    """Checked-out and available copies for every book."""
    rows = reports.availability(database.load_library(), _to_date(as_of))
    print_report("Book Availability", rows, AVAILABILITY_COLUMNS, "No books in library.")


@app.command("overdue")
def cli_overdue(
    as_of: Optional[datetime] = typer.Option(None, "--as-of", formats=DATE_FORMATS),
    threshold: int = typer.Option(settings.overdue_threshold_days, "--threshold",
                                  help="Days out after which a loan is overdue."),
):
    """Open loans that have been out longer than the threshold."""
    rows = reports.overdue(database.load_library(), _to_date(as_of), threshold_days=threshold)
    print_report("Overdue Loans", rows, OVERDUE_COLUMNS, "No overdue loans.")


@app.command("genres")
def cli_genres(
    as_of: Optional[datetime] = typer.Option(None, "--as-of", formats=DATE_FORMATS),
):
    """How often each genre has been borrowed."""
    rows = reports.genre_popularity(database.load_library(), _to_date(as_of))
    print_report("Popular Genres", rows, GENRE_COLUMNS, "No loans recorded.")


@app.command("active")
def cli_active(
    as_of: Optional[datetime] = typer.Option(None, "--as-of", formats=DATE_FORMATS),
):
    """Patrons and the books they currently have out."""
    rows = reports.active_loans(database.load_library(), _to_date(as_of))
    print_report("Active Loans", rows, ACTIVE_COLUMNS, "No active loans.")


@app.command("report")
def cli_report(
    as_of: Optional[datetime] = typer.Option(None, "--as-of", formats=DATE_FORMATS),
):
    """Run all four reports against one snapshot."""
    library = database.load_library()
    day = _to_date(as_of)
    print_report("Book Availability", reports.availability(library, day), AVAILABILITY_COLUMNS,
                 "No books in library.")
    print_report("Overdue Loans",
                 reports.overdue(library, day, threshold_days=settings.overdue_threshold_days),
                 OVERDUE_COLUMNS, "No overdue loans.")
    print_report("Popular Genres", reports.genre_popularity(library, day), GENRE_COLUMNS,
                 "No loans recorded.")
    print_report("Active Loans", reports.active_loans(library, day), ACTIVE_COLUMNS,
                 "No active loans.")


@app.command("stats")
def cli_stats():
    """Totals for books, patrons and loans."""
    print_stats_result(database.load_library().get_statistics())


@app.command("borrow")
def cli_borrow(
    book_id: int,
    patron_id: int,
    on: Optional[datetime] = typer.Option(None, "--date", formats=DATE_FORMATS, help="Borrow date."),
):
    """Record a patron borrowing a book."""
    library = database.load_library()
    try:
        library.ledger.check_borrow(book_id, patron_id)
    except LedgerError as e:
        print(f"Error: {e}")
        raise typer.Exit(code=1)
    loan = database.insert_loan(book_id, patron_id, _to_date(on))
    print(f"Loan {loan.id} recorded: book {book_id} to patron {patron_id} on {loan.borrow_date}.")


@app.command("return")
def cli_return(
    loan_id: int,
    on: Optional[datetime] = typer.Option(None, "--date", formats=DATE_FORMATS, help="Return date."),
):
    """Record a loan coming back."""
    library = database.load_library()
    return_date = _to_date(on)
    try:
        loan = library.ledger.record_return(loan_id, return_date)
        if not database.close_loan(loan_id, return_date):
            raise InvalidReturn(f"Loan {loan_id} was already returned.")
    except LedgerError as e:
        print(f"Error: {e}")
        raise typer.Exit(code=1)
    print(f"Loan {loan.id} returned on {loan.return_date}.")


@app.command("serve")
def cli_serve(
    host: str = typer.Option(settings.api_host, "--host"),
    port: int = typer.Option(settings.api_port, "--port"),
):
    """Start the reporting API with uvicorn."""
    print(f"Starting API on http://{host}:{port}")
    subprocess.run([sys.executable, "-m", "uvicorn", "api:app", "--host", host, "--port", str(port)])


if __name__ == "__main__":
    app()
