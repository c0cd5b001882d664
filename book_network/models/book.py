from datetime import datetime
from book_network.extensions import db
from book_network.utils.identity import PrincipalId


class Book(db.Model):
    __tablename__ = "books"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False, index=True)
    author_name = db.Column(db.String(200), nullable=False, index=True)
    isbn = db.Column(db.String(32), nullable=True, index=True)
    synopsis = db.Column(db.Text, nullable=True)

    # opaque reference returned by FileStorageService.store
    book_cover = db.Column(db.String(500), nullable=True)

    archived = db.Column(db.Boolean, nullable=False, default=False)
    shareable = db.Column(db.Boolean, nullable=False, default=False)

    # principal that created the book; never reassigned
    owner_id = db.Column(db.String(255), nullable=False, index=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, nullable=True, onupdate=datetime.utcnow)

    def is_owned_by(self, principal) -> bool:
        return PrincipalId.of(self.owner_id) == PrincipalId.of(principal)

    @property
    def lendable(self) -> bool:
        return self.shareable and not self.archived
