from book_network.models.book import Book
from book_network.extensions import db
from book_network.repositories import filters
from book_network.utils.pagination import paginate


class BookRepo:
    @staticmethod
    def get(book_id: int, lock: bool = False):
        # lock=True issues SELECT ... FOR UPDATE where the backend supports it
        return db.session.get(Book, book_id, with_for_update=lock or None)

    @staticmethod
    def save(book: Book):
        db.session.add(book)
        db.session.flush()
        return book

    @staticmethod
    def _newest_first(query):
        return query.order_by(Book.created_at.desc(), Book.id.desc())

    @staticmethod
    def page_displayable(page: int, size: int, requester):
        q = Book.query.filter(filters.displayable_to(requester))
        return paginate(BookRepo._newest_first(q), page, size)

    @staticmethod
    def page_by_owner(page: int, size: int, owner):
        q = Book.query.filter(filters.owned_by(owner))
        return paginate(BookRepo._newest_first(q), page, size)
