from flask import current_app

from book_network.errors import NotFoundError, OperationNotPermittedError
from book_network.models.book import Book
from book_network.models.history import BookTransactionHistory
from book_network.repositories.book_repo import BookRepo
from book_network.repositories.history_repo import HistoryRepo
from book_network.services.file_storage_service import FileStorageService
from book_network.utils.decorators import transactional
from book_network.utils.identity import PrincipalId


class BookService:
    """
    Lending engine: book registration, visibility, borrow / return / approve.

    Every public method runs as one unit of work (see ``transactional``).
    Requesters are passed in as ``PrincipalId``; controllers resolve them
    from the JWT. Store errors are never caught here.
    """

    @staticmethod
    def _get_book_or_404(book_id: int, lock: bool = False) -> Book:
        book = BookRepo.get(book_id, lock=lock)
        if not book:
            raise NotFoundError(f"No book found with ID:: {book_id}")
        return book

    @staticmethod
    def _deny(message: str, book_id: int, requester: PrincipalId):
        current_app.logger.info(f"[lending] denied book={book_id} user={requester}: {message}")
        raise OperationNotPermittedError(message)

    # -----------------------------
    # Catalog
    # -----------------------------
    @staticmethod
    @transactional
    def save(data: dict, requester: PrincipalId) -> int:
        title = str(data.get("title") or "").strip()
        author_name = str(data.get("author_name") or "").strip()
        if not title or not author_name:
            raise ValueError("title and author_name are required")
        shareable = data.get("shareable")
        if shareable is None:
            shareable = False
        if not isinstance(shareable, bool):
            raise ValueError("shareable must be true or false")

        book = Book(
            title=title,
            author_name=author_name,
            isbn=(data.get("isbn") or None),
            synopsis=data.get("synopsis"),
            shareable=shareable,
            archived=False,
            owner_id=str(requester),
        )
        BookRepo.save(book)
        current_app.logger.info(f"[books] created book={book.id} owner={requester}")
        return book.id

    @staticmethod
    def find_by_id(book_id: int) -> Book:
        return BookService._get_book_or_404(book_id)

    @staticmethod
    def find_all_books(page: int, size: int, requester: PrincipalId):
        return BookRepo.page_displayable(page, size, requester)

    @staticmethod
    def find_all_books_by_owner(page: int, size: int, requester: PrincipalId):
        return BookRepo.page_by_owner(page, size, requester)

    @staticmethod
    def find_all_borrowed_books(page: int, size: int, requester: PrincipalId):
        return HistoryRepo.page_borrowed_by_user(page, size, requester)

    @staticmethod
    def find_all_returned_books(page: int, size: int, requester: PrincipalId):
        return HistoryRepo.page_returned_by_user(page, size, requester)

    # -----------------------------
    # Owner toggles
    # -----------------------------
    @staticmethod
    @transactional
    def update_shareable_status(book_id: int, requester: PrincipalId) -> int:
        book = BookService._get_book_or_404(book_id)
        if not book.is_owned_by(requester):
            BookService._deny("You cannot update others books shareable status", book_id, requester)

        book.shareable = not book.shareable
        BookRepo.save(book)
        current_app.logger.info(f"[books] book={book_id} shareable={book.shareable}")
        return book_id

    @staticmethod
    @transactional
    def update_archived_status(book_id: int, requester: PrincipalId) -> int:
        book = BookService._get_book_or_404(book_id)
        if not book.is_owned_by(requester):
            BookService._deny("You cannot update others books archived status", book_id, requester)

        book.archived = not book.archived
        BookRepo.save(book)
        current_app.logger.info(f"[books] book={book_id} archived={book.archived}")
        return book_id

    @staticmethod
    def upload_book_cover_picture(file, requester: PrincipalId, book_id: int) -> str:
        stored = []

        def store():
            reference = FileStorageService.store(file, requester)
            stored.append(reference)
            return reference

        try:
            return BookService._assign_cover(book_id, requester, store)
        except Exception:
            # the row change was rolled back, so the file must not outlive it
            for reference in stored:
                FileStorageService.delete(reference)
            raise

    @staticmethod
    @transactional
    def _assign_cover(book_id: int, requester: PrincipalId, store) -> str:
        book = BookService._get_book_or_404(book_id)
        if not book.is_owned_by(requester):
            BookService._deny("You cannot update others books cover", book_id, requester)

        book.book_cover = store()
        BookRepo.save(book)
        return book.book_cover

    # -----------------------------
    # Lending
    # -----------------------------
    @staticmethod
    @transactional
    def borrow_book(book_id: int, requester: PrincipalId) -> int:
        # the row lock serialises concurrent borrows of the same book
        book = BookService._get_book_or_404(book_id, lock=True)

        # order of these checks decides which message a caller sees
        if not book.lendable:
            BookService._deny(
                "The requested book cannot be borrowed since it is archived or not shareable",
                book_id, requester,
            )
        if book.is_owned_by(requester):
            BookService._deny("You cannot borrow your own book", book_id, requester)
        if HistoryRepo.exists_active_for_user(book_id, requester):
            BookService._deny(
                "You already borrowed this book and it is still not returned "
                "or the return is not approved by the owner",
                book_id, requester,
            )
        if HistoryRepo.exists_active_any(book_id):
            BookService._deny("The requested book is already borrowed", book_id, requester)

        history = BookTransactionHistory(
            book_id=book.id,
            user_id=str(requester),
            returned=False,
            return_approved=False,
        )
        HistoryRepo.save(history)
        current_app.logger.info(f"[lending] borrowed book={book_id} user={requester} history={history.id}")
        return history.id

    @staticmethod
    @transactional
    def return_borrowed_book(book_id: int, requester: PrincipalId) -> int:
        book = BookService._get_book_or_404(book_id)
        if not book.lendable:
            BookService._deny("The requested book is archived or not shareable", book_id, requester)
        if book.is_owned_by(requester):
            BookService._deny("You cannot borrow or return your own book", book_id, requester)

        history = HistoryRepo.find_active_by_book_and_user(book_id, requester)
        if not history:
            BookService._deny("You did not borrow this book", book_id, requester)

        history.returned = True
        HistoryRepo.save(history)
        current_app.logger.info(f"[lending] returned book={book_id} user={requester} history={history.id}")
        return history.id

    @staticmethod
    @transactional
    def approve_return_borrowed_book(book_id: int, requester: PrincipalId) -> int:
        book = BookService._get_book_or_404(book_id)
        if not book.lendable:
            BookService._deny("The requested book is archived or not shareable", book_id, requester)
        if not book.is_owned_by(requester):
            BookService._deny(
                "You cannot approve the return of a book you do not own", book_id, requester
            )

        history = HistoryRepo.find_returned_unapproved_by_book_and_owner(book_id, requester)
        if not history:
            BookService._deny(
                "The book is not returned yet. You cannot approve its return", book_id, requester
            )

        history.return_approved = True
        HistoryRepo.save(history)
        current_app.logger.info(f"[lending] return approved book={book_id} history={history.id}")
        return history.id
