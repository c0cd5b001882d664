import pytest

from book_network import create_app
from book_network.config import TestConfig
from book_network.extensions import db
from book_network.services.book_service import BookService
from book_network.utils.identity import PrincipalId


@pytest.fixture
def app(tmp_path):
    app = create_app(TestConfig)
    app.config["UPLOAD_FOLDER"] = str(tmp_path / "uploads")
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def u1():
    return PrincipalId("u1")


@pytest.fixture
def u2():
    return PrincipalId("u2")


@pytest.fixture
def u3():
    return PrincipalId("u3")


@pytest.fixture
def make_book(app):
    def _make(owner, title="Dune", shareable=True, archived=False):
        book_id = BookService.save(
            {"title": title, "author_name": "Frank Herbert", "shareable": shareable},
            owner,
        )
        if archived:
            BookService.update_archived_status(book_id, owner)
        return book_id
    return _make


@pytest.fixture
def auth_header(client):
    def _login(username):
        client.post("/auth/register", json={
            "username": username,
            "email": f"{username}@example.com",
            "password": "secret",
        })
        r = client.post("/auth/login", json={"username": username, "password": "secret"})
        assert r.status_code == 200
        return {"Authorization": f"Bearer {r.get_json()['access_token']}"}
    return _login
