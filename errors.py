class LedgerError(Exception):
    """Base class for lending record errors."""


class NotFound(LedgerError, LookupError):
    """A book, patron or loan id does not exist."""


class UnknownReference(LedgerError):
    """A borrow refers to a book or patron that does not exist."""


class InvalidReturn(LedgerError, ValueError):
    """A return that would break the loan's date or lifecycle rules."""
