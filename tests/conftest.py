"""
Shared fixtures.

Every test gets a fresh application backed by an in-memory SQLite database
and a temporary image folder.
"""
import io

import pytest
from werkzeug.datastructures import FileStorage

from app import create_app
from app.extensions import db
from app.models.user import User
from app.utils.feed_service import FeedService
from app.utils.tokens import issue_token


@pytest.fixture
def app(tmp_path):
    app = create_app("testing", {"UPLOAD_FOLDER": str(tmp_path / "images")})
    yield app
    app.extensions["broadcaster"].close()


@pytest.fixture
def ctx(app):
    with app.app_context():
        yield
        db.session.remove()


@pytest.fixture
def client(app):
    return app.test_client()


def make_user(name: str, email: str, password: str = "secret-pw") -> int:
    user = User(name=name, email=email)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    return user.id


@pytest.fixture
def alice(app):
    with app.app_context():
        return make_user("Alice", "alice@feedmail.com")


@pytest.fixture
def bob(app):
    with app.app_context():
        return make_user("Bob", "bob@feedmail.com")


@pytest.fixture
def service(app):
    return FeedService(app.extensions["broadcaster"], app.extensions["image_store"])


@pytest.fixture
def events(app):
    """Subscribe to the broadcaster; call the fixture value to drain received events."""
    broadcaster = app.extensions["broadcaster"]
    _, q = broadcaster.subscribe()

    def drain():
        out = []
        while not q.empty():
            out.append(q.get_nowait())
        return out

    return drain


@pytest.fixture
def auth_header(app):
    def _header(user_id: int) -> dict:
        with app.app_context():
            return {"Authorization": f"Bearer {issue_token(user_id)}"}
    return _header


@pytest.fixture
def image():
    """Factory for in-memory uploads."""
    def _image(filename: str = "pic.png", payload: bytes = b"\x89PNG fake") -> FileStorage:
        return FileStorage(stream=io.BytesIO(payload), filename=filename, content_type="image/png")
    return _image
