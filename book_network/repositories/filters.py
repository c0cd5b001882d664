"""
Composable visibility filters for books and transaction histories.

Each function returns a SQLAlchemy boolean clause, so repositories combine
them with :func:`all_of` and hand the result to ``Query.filter``. Nothing
here touches the session.
"""
from sqlalchemy import and_, true

from book_network.models.book import Book
from book_network.models.history import BookTransactionHistory
from book_network.utils.identity import PrincipalId


def all_of(*clauses):
    clauses = [c for c in clauses if c is not None]
    if not clauses:
        return true()
    return and_(*clauses)


# --- books ---

def owned_by(principal: PrincipalId):
    return Book.owner_id == str(principal)


def not_owned_by(principal: PrincipalId):
    return Book.owner_id != str(principal)


def lendable():
    return and_(Book.archived.is_(False), Book.shareable.is_(True))


def displayable_to(principal: PrincipalId):
    """Books other users have put up for lending."""
    return all_of(lendable(), not_owned_by(principal))


# --- histories ---

def borrowed_by(principal: PrincipalId):
    return BookTransactionHistory.user_id == str(principal)


def returned_by(principal: PrincipalId):
    return all_of(borrowed_by(principal), BookTransactionHistory.returned.is_(True))


def for_book(book_id: int):
    return BookTransactionHistory.book_id == book_id


def active():
    return BookTransactionHistory.return_approved.is_(False)


def awaiting_return():
    return all_of(active(), BookTransactionHistory.returned.is_(False))


def awaiting_approval():
    return all_of(active(), BookTransactionHistory.returned.is_(True))


def book_owned_by(principal: PrincipalId):
    return BookTransactionHistory.book.has(owned_by(principal))
