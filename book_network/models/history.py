from datetime import datetime

from sqlalchemy import column, false, or_, true

from book_network.extensions import db

# rendered per dialect: "= 1"/"= 0" on SQL Server and SQLite, "= true"/"= false" on PostgreSQL
_OPEN = column("return_approved") == false()
_APPROVED_AFTER_RETURNED = or_(column("returned") == true(), _OPEN)


class BookTransactionHistory(db.Model):
    """
    One borrow of one book by one user.

    Lifecycle: active (returned=False) -> returned, awaiting approval
    (returned=True, return_approved=False) -> closed (return_approved=True).
    Closed rows are never reopened; a new borrow inserts a new row.
    """
    __tablename__ = "book_transaction_histories"
    __table_args__ = (
        # at most one open history per book (partial index, skipped where unsupported)
        db.Index(
            "uq_history_open_book",
            "book_id",
            unique=True,
            sqlite_where=_OPEN,
            postgresql_where=_OPEN,
            mssql_where=_OPEN,
        ).ddl_if(dialect=("sqlite", "postgresql", "mssql")),
        db.CheckConstraint(
            _APPROVED_AFTER_RETURNED,
            name="ck_history_approved_after_returned",
        ),
    )

    id = db.Column(db.Integer, primary_key=True)

    book_id = db.Column(db.Integer, db.ForeignKey("books.id"), nullable=False, index=True)
    user_id = db.Column(db.String(255), nullable=False, index=True)

    returned = db.Column(db.Boolean, nullable=False, default=False)
    return_approved = db.Column(db.Boolean, nullable=False, default=False)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, nullable=True, onupdate=datetime.utcnow)

    book = db.relationship("Book")
