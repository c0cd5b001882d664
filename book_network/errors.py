from flask import jsonify


class BookNetworkError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(BookNetworkError):
    """Referenced book or history does not exist."""
    status_code = 404


class OperationNotPermittedError(BookNetworkError):
    """A business rule or ownership check failed."""
    status_code = 400


def register_error_handlers(app):
    @app.errorhandler(BookNetworkError)
    def _handle_book_network_error(e: BookNetworkError):
        return jsonify({"success": False, "message": e.message}), e.status_code

    @app.errorhandler(404)
    def _handle_not_found(_e):
        return jsonify({"success": False, "message": "Not found"}), 404

    @app.errorhandler(413)
    def _handle_too_large(_e):
        return jsonify({"success": False, "message": "File too large"}), 413
