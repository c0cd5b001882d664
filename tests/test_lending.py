import pytest

from book_network.errors import NotFoundError, OperationNotPermittedError
from book_network.extensions import db
from book_network.models.history import BookTransactionHistory
from book_network.services.book_service import BookService


def _history(history_id):
    return db.session.get(BookTransactionHistory, history_id)


def test_full_lending_cycle(make_book, u1, u2, u3):
    b1 = make_book(u1)

    h1 = BookService.borrow_book(b1, u2)
    assert _history(h1).returned is False
    assert _history(h1).return_approved is False

    with pytest.raises(OperationNotPermittedError, match="You already borrowed this book"):
        BookService.borrow_book(b1, u2)

    with pytest.raises(OperationNotPermittedError, match="The requested book is already borrowed"):
        BookService.borrow_book(b1, u3)

    assert BookService.return_borrowed_book(b1, u2) == h1
    assert _history(h1).returned is True
    assert _history(h1).return_approved is False

    assert BookService.approve_return_borrowed_book(b1, u1) == h1
    assert _history(h1).return_approved is True

    h2 = BookService.borrow_book(b1, u2)
    assert h2 != h1
    assert _history(h1).return_approved is True
    assert _history(h2).returned is False


def test_borrow_missing_book(app, u2):
    with pytest.raises(NotFoundError, match="No book found with ID:: 999"):
        BookService.borrow_book(999, u2)


def test_borrow_archived_book(make_book, u1, u2):
    b1 = make_book(u1)
    BookService.update_archived_status(b1, u1)

    with pytest.raises(OperationNotPermittedError, match="archived or not shareable"):
        BookService.borrow_book(b1, u2)


def test_borrow_unshareable_book(make_book, u1, u2):
    b1 = make_book(u1, shareable=False)
    with pytest.raises(OperationNotPermittedError, match="archived or not shareable"):
        BookService.borrow_book(b1, u2)


def test_archived_check_comes_before_owner_check(make_book, u1):
    b1 = make_book(u1, archived=True)
    with pytest.raises(OperationNotPermittedError, match="archived or not shareable"):
        BookService.borrow_book(b1, u1)


def test_cannot_borrow_own_book(make_book, u1):
    b1 = make_book(u1)
    with pytest.raises(OperationNotPermittedError, match="You cannot borrow your own book"):
        BookService.borrow_book(b1, u1)


def test_still_active_until_approved(make_book, u1, u2, u3):
    b1 = make_book(u1)
    BookService.borrow_book(b1, u2)
    BookService.return_borrowed_book(b1, u2)

    # returned but not approved is still an open borrow
    with pytest.raises(OperationNotPermittedError, match="You already borrowed this book"):
        BookService.borrow_book(b1, u2)
    with pytest.raises(OperationNotPermittedError, match="already borrowed"):
        BookService.borrow_book(b1, u3)


def test_return_requires_a_borrow(make_book, u1, u2):
    b1 = make_book(u1)
    with pytest.raises(OperationNotPermittedError, match="You did not borrow this book"):
        BookService.return_borrowed_book(b1, u2)


def test_return_twice_is_rejected(make_book, u1, u2):
    b1 = make_book(u1)
    BookService.borrow_book(b1, u2)
    BookService.return_borrowed_book(b1, u2)
    with pytest.raises(OperationNotPermittedError, match="You did not borrow this book"):
        BookService.return_borrowed_book(b1, u2)


def test_other_user_cannot_return(make_book, u1, u2, u3):
    b1 = make_book(u1)
    BookService.borrow_book(b1, u2)
    with pytest.raises(OperationNotPermittedError, match="You did not borrow this book"):
        BookService.return_borrowed_book(b1, u3)


def test_owner_cannot_return_own_book(make_book, u1, u2):
    b1 = make_book(u1)
    BookService.borrow_book(b1, u2)
    with pytest.raises(OperationNotPermittedError, match="You cannot borrow or return your own book"):
        BookService.return_borrowed_book(b1, u1)


def test_return_of_archived_book_rejected(make_book, u1, u2):
    b1 = make_book(u1)
    BookService.borrow_book(b1, u2)
    BookService.update_archived_status(b1, u1)
    with pytest.raises(OperationNotPermittedError, match="archived or not shareable"):
        BookService.return_borrowed_book(b1, u2)


def test_approve_requires_prior_return(make_book, u1, u2):
    b1 = make_book(u1)
    h1 = BookService.borrow_book(b1, u2)
    with pytest.raises(OperationNotPermittedError, match="not returned yet"):
        BookService.approve_return_borrowed_book(b1, u1)
    assert _history(h1).return_approved is False


def test_approve_without_any_borrow(make_book, u1):
    b1 = make_book(u1)
    with pytest.raises(OperationNotPermittedError, match="not returned yet"):
        BookService.approve_return_borrowed_book(b1, u1)


def test_only_owner_can_approve(make_book, u1, u2, u3):
    b1 = make_book(u1)
    BookService.borrow_book(b1, u2)
    BookService.return_borrowed_book(b1, u2)

    for intruder in (u2, u3):
        with pytest.raises(OperationNotPermittedError, match="you do not own"):
            BookService.approve_return_borrowed_book(b1, intruder)


def test_approve_twice_is_rejected(make_book, u1, u2):
    b1 = make_book(u1)
    BookService.borrow_book(b1, u2)
    BookService.return_borrowed_book(b1, u2)
    BookService.approve_return_borrowed_book(b1, u1)
    with pytest.raises(OperationNotPermittedError, match="not returned yet"):
        BookService.approve_return_borrowed_book(b1, u1)


def test_another_user_can_borrow_after_close(make_book, u1, u2, u3):
    b1 = make_book(u1)
    BookService.borrow_book(b1, u2)
    BookService.return_borrowed_book(b1, u2)
    BookService.approve_return_borrowed_book(b1, u1)

    h = BookService.borrow_book(b1, u3)
    assert _history(h).user_id == "u3"


def test_failed_borrow_writes_nothing(make_book, u1, u2, u3):
    b1 = make_book(u1)
    BookService.borrow_book(b1, u2)
    with pytest.raises(OperationNotPermittedError):
        BookService.borrow_book(b1, u3)
    assert BookTransactionHistory.query.count() == 1


def test_return_missing_book(app, u2):
    with pytest.raises(NotFoundError, match="No book found with ID:: 999"):
        BookService.return_borrowed_book(999, u2)


def test_approve_missing_book(app, u1):
    with pytest.raises(NotFoundError, match="No book found with ID:: 999"):
        BookService.approve_return_borrowed_book(999, u1)


@pytest.mark.parametrize("hide", [
    BookService.update_archived_status,
    BookService.update_shareable_status,
])
def test_approve_of_hidden_book_rejected(make_book, u1, u2, hide):
    b1 = make_book(u1)
    h1 = BookService.borrow_book(b1, u2)
    BookService.return_borrowed_book(b1, u2)
    hide(b1, u1)

    with pytest.raises(OperationNotPermittedError, match="archived or not shareable"):
        BookService.approve_return_borrowed_book(b1, u1)
    assert _history(h1).returned is True
    assert _history(h1).return_approved is False
