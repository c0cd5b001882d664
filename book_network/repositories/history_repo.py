from book_network.models.history import BookTransactionHistory
from book_network.extensions import db
from book_network.repositories import filters
from book_network.utils.pagination import paginate


class HistoryRepo:
    @staticmethod
    def save(history: BookTransactionHistory):
        db.session.add(history)
        db.session.flush()
        return history

    @staticmethod
    def _exists(*clauses) -> bool:
        q = BookTransactionHistory.query.filter(filters.all_of(*clauses))
        return db.session.query(q.exists()).scalar()

    @staticmethod
    def exists_active_for_user(book_id: int, user) -> bool:
        return HistoryRepo._exists(filters.for_book(book_id), filters.borrowed_by(user), filters.active())

    @staticmethod
    def exists_active_any(book_id: int) -> bool:
        return HistoryRepo._exists(filters.for_book(book_id), filters.active())

    @staticmethod
    def find_active_by_book_and_user(book_id: int, user):
        """Open borrow of ``book_id`` by ``user`` that has not been handed back yet."""
        return BookTransactionHistory.query.filter(
            filters.for_book(book_id),
            filters.borrowed_by(user),
            filters.awaiting_return(),
        ).first()

    @staticmethod
    def find_returned_unapproved_by_book_and_owner(book_id: int, owner):
        return BookTransactionHistory.query.filter(
            filters.for_book(book_id),
            filters.book_owned_by(owner),
            filters.awaiting_approval(),
        ).first()

    @staticmethod
    def _newest_first(query):
        return query.order_by(
            BookTransactionHistory.created_at.desc(),
            BookTransactionHistory.id.desc(),
        )

    @staticmethod
    def page_borrowed_by_user(page: int, size: int, user):
        q = BookTransactionHistory.query.filter(filters.borrowed_by(user))
        return paginate(HistoryRepo._newest_first(q), page, size)

    @staticmethod
    def page_returned_by_user(page: int, size: int, user):
        q = BookTransactionHistory.query.filter(filters.returned_by(user))
        return paginate(HistoryRepo._newest_first(q), page, size)
