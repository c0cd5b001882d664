from functools import wraps

from book_network.extensions import db


def transactional(fn):
    """
    Run ``fn`` as a single unit of work.

    Commits once when ``fn`` returns; on any exception the session is rolled
    back and the exception is re-raised unchanged, so a failed check never
    leaves a half-applied write behind.
    """
    @wraps(fn)
    def wrapper(*args, **kwargs):
        try:
            result = fn(*args, **kwargs)
            db.session.commit()
            return result
        except Exception:
            db.session.rollback()
            raise
    return wrapper
