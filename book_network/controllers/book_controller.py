# book_network/controllers/book_controller.py

import base64

from flask import Blueprint, current_app, request, jsonify
from flask_jwt_extended import jwt_required

from book_network.services.book_service import BookService
from book_network.services.file_storage_service import FileStorageService
from book_network.utils.identity import current_principal_id

book_bp = Blueprint("books", __name__)


def _book_json(b):
    cover = FileStorageService.read(b.book_cover)
    return {
        "id": b.id,
        "title": b.title,
        "author_name": b.author_name,
        "isbn": b.isbn,
        "synopsis": b.synopsis,
        "owner": b.owner_id,
        "cover": base64.b64encode(cover).decode("ascii") if cover else None,
        "archived": b.archived,
        "shareable": b.shareable,
    }


def _borrowed_json(h):
    return {
        "id": h.book_id,
        "history_id": h.id,
        "title": h.book.title if h.book else None,
        "author_name": h.book.author_name if h.book else None,
        "isbn": h.book.isbn if h.book else None,
        "returned": h.returned,
        "return_approved": h.return_approved,
    }


def _page_args():
    page = int(request.args.get("page", 0))
    size = int(request.args.get("size", current_app.config["DEFAULT_PAGE_SIZE"]))
    if page < 0 or size < 1:
        raise ValueError("page must be >= 0 and size must be >= 1")
    return page, size


def _bad_request(e):
    return jsonify({"success": False, "message": str(e)}), 400


@book_bp.post("")
@jwt_required()
def save_book():
    data = request.get_json(silent=True) or {}
    try:
        book_id = BookService.save(data, current_principal_id())
        return jsonify(book_id), 201
    except ValueError as e:
        return _bad_request(e)


@book_bp.get("/<int:book_id>")
@jwt_required()
def find_book_by_id(book_id: int):
    return jsonify(_book_json(BookService.find_by_id(book_id)))


@book_bp.get("")
@jwt_required()
def find_all_books():
    try:
        page, size = _page_args()
    except ValueError as e:
        return _bad_request(e)
    result = BookService.find_all_books(page, size, current_principal_id())
    return jsonify(result.to_dict(_book_json))


@book_bp.get("/owner")
@jwt_required()
def find_all_books_by_owner():
    try:
        page, size = _page_args()
    except ValueError as e:
        return _bad_request(e)
    result = BookService.find_all_books_by_owner(page, size, current_principal_id())
    return jsonify(result.to_dict(_book_json))


@book_bp.get("/borrowed")
@jwt_required()
def find_all_borrowed_books():
    try:
        page, size = _page_args()
    except ValueError as e:
        return _bad_request(e)
    result = BookService.find_all_borrowed_books(page, size, current_principal_id())
    return jsonify(result.to_dict(_borrowed_json))


@book_bp.get("/returned")
@jwt_required()
def find_all_returned_books():
    try:
        page, size = _page_args()
    except ValueError as e:
        return _bad_request(e)
    result = BookService.find_all_returned_books(page, size, current_principal_id())
    return jsonify(result.to_dict(_borrowed_json))


@book_bp.patch("/shareable/<int:book_id>")
@jwt_required()
def update_shareable_status(book_id: int):
    return jsonify(BookService.update_shareable_status(book_id, current_principal_id()))


@book_bp.patch("/archived/<int:book_id>")
@jwt_required()
def update_archived_status(book_id: int):
    return jsonify(BookService.update_archived_status(book_id, current_principal_id()))


@book_bp.post("/borrow/<int:book_id>")
@jwt_required()
def borrow_book(book_id: int):
    return jsonify(BookService.borrow_book(book_id, current_principal_id()))


@book_bp.patch("/borrow/return/<int:book_id>")
@jwt_required()
def return_borrowed_book(book_id: int):
    return jsonify(BookService.return_borrowed_book(book_id, current_principal_id()))


@book_bp.patch("/borrow/return/approve/<int:book_id>")
@jwt_required()
def approve_return_borrowed_book(book_id: int):
    return jsonify(BookService.approve_return_borrowed_book(book_id, current_principal_id()))


@book_bp.post("/cover/<int:book_id>")
@jwt_required()
def upload_book_cover_picture(book_id: int):
    file = request.files.get("file")
    if file is None or not file.filename:
        return _bad_request("file is required")
    BookService.upload_book_cover_picture(file, current_principal_id(), book_id)
    return "", 202
