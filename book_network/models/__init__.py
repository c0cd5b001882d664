from book_network.models.book import Book
from book_network.models.history import BookTransactionHistory
from book_network.models.user import User

__all__ = ["Book", "BookTransactionHistory", "User"]
