from datetime import date, datetime, timezone
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

import database
import reports
from config import configure_logging, settings
from errors import InvalidReturn, NotFound, UnknownReference
from library import Library

configure_logging()

app = FastAPI(title=settings.app_name, version=settings.app_version)

# --- CORS ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_library() -> Library:
    """Dependency: load one consistent snapshot for the request."""
    return database.load_library()


# --- Models ---
class BookModel(BaseModel):
    id: int
    title: str
    author: str
    genre: str
    total_copies: int


class PatronModel(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: Optional[str] = None
    phone: Optional[str] = None


class LoanModel(BaseModel):
    id: int
    book_id: int
    patron_id: int
    borrow_date: date
    return_date: Optional[date] = None


class BorrowModel(BaseModel):
    book_id: int
    patron_id: int
    borrow_date: Optional[date] = None


class ReturnModel(BaseModel):
    return_date: Optional[date] = None


class AvailabilityModel(BaseModel):
    book_id: int
    title: str
    author: str
    genre: str
    total_copies: int
    checked_out_copies: int
    available_copies: int


class OverdueModel(BaseModel):
    loan_id: int
    title: str
    first_name: str
    last_name: str
    borrow_date: date
    days_out: int


class GenreModel(BaseModel):
    genre: str
    times_borrowed: int


class ActiveLoanModel(BaseModel):
    patron_id: int
    first_name: str
    last_name: str
    book_id: int
    title: str
    borrow_date: date


def _as_of(value: Optional[date]) -> date:
    return value or date.today()


# --- Health ---
@app.get("/health")
def health(library: Library = Depends(get_library)):
    """Lightweight health endpoint with record counts."""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": settings.app_version,
        **library.get_statistics(),
    }


# --- Reports ---
@app.get("/reports/availability", response_model=List[AvailabilityModel])
def availability_report(as_of: Optional[date] = Query(None), library: Library = Depends(get_library)):
    return [r.to_dict() for r in reports.availability(library, _as_of(as_of))]


@app.get("/reports/overdue", response_model=List[OverdueModel])
def overdue_report(
    as_of: Optional[date] = Query(None),
    threshold_days: int = Query(settings.overdue_threshold_days, ge=0),
    library: Library = Depends(get_library),
):
    return [r.to_dict() for r in reports.overdue(library, _as_of(as_of), threshold_days=threshold_days)]


@app.get("/reports/genres", response_model=List[GenreModel])
def genre_report(as_of: Optional[date] = Query(None), library: Library = Depends(get_library)):
    return [r.to_dict() for r in reports.genre_popularity(library, _as_of(as_of))]


@app.get("/reports/active-loans", response_model=List[ActiveLoanModel])
def active_loans_report(as_of: Optional[date] = Query(None), library: Library = Depends(get_library)):
    return [r.to_dict() for r in reports.active_loans(library, _as_of(as_of))]


# --- Reference data ---
@app.get("/books", response_model=List[BookModel])
def get_books(library: Library = Depends(get_library)):
    books = sorted(library.catalog.all(), key=lambda b: (b.title.casefold(), b.title, b.id))
    return [b.to_dict() for b in books]


@app.get("/books/{book_id}", response_model=BookModel)
def get_book(book_id: int, library: Library = Depends(get_library)):
    try:
        return library.catalog.get(book_id).to_dict()
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@app.get("/patrons/{patron_id}", response_model=PatronModel)
def get_patron(patron_id: int, library: Library = Depends(get_library)):
    try:
        return library.patrons.get(patron_id).to_dict()
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


# --- Loans ---
@app.get("/loans/{loan_id}", response_model=LoanModel)
def get_loan(loan_id: int, library: Library = Depends(get_library)):
    try:
        return library.ledger.get(loan_id).to_dict()
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@app.post("/loans", response_model=LoanModel, status_code=201)
def borrow(payload: BorrowModel, library: Library = Depends(get_library)):
    try:
        library.ledger.check_borrow(payload.book_id, payload.patron_id)
    except UnknownReference as e:
        raise HTTPException(status_code=422, detail=str(e))
    return database.insert_loan(payload.book_id, payload.patron_id, _as_of(payload.borrow_date)).to_dict()


@app.post("/loans/{loan_id}/return", response_model=LoanModel)
def return_loan(loan_id: int, payload: Optional[ReturnModel] = None, library: Library = Depends(get_library)):
    return_date = _as_of(payload.return_date if payload else None)
    try:
        loan = library.ledger.record_return(loan_id, return_date)
        if not database.close_loan(loan_id, return_date):
            raise InvalidReturn(f"Loan {loan_id} was already returned.")
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidReturn as e:
        raise HTTPException(status_code=409, detail=str(e))
    return loan.to_dict()
