"""
Tests for the accounts blueprint and bearer-token resolution.
"""
from app.extensions import db
from app.models.user import User, DEFAULT_STATUS
from app.utils.tokens import issue_token, verify_token


def _signup(client, **overrides):
    data = {"name": "Carol", "email": "carol@feedmail.com", "password": "hunter22"}
    data.update(overrides)
    return client.put("/auth/signup", json=data)


class TestSignup:

    def test_creates_user(self, app, client):
        resp = _signup(client)
        assert resp.status_code == 201
        uid = resp.get_json()["userId"]
        with app.app_context():
            user = db.session.get(User, uid)
            assert user.email == "carol@feedmail.com"
            assert user.status == DEFAULT_STATUS
            assert user.password_hash != "hunter22"
            assert user.check_password("hunter22")

    def test_duplicate_email(self, client):
        _signup(client)
        resp = _signup(client, email="CAROL@feedmail.com")
        assert resp.status_code == 422
        assert "email" in resp.get_json()["data"]

    def test_invalid_fields(self, client):
        resp = _signup(client, email="not-an-email", password="123")
        body = resp.get_json()
        assert resp.status_code == 422
        assert set(body["data"]) == {"email", "password"}


class TestLogin:

    def test_token_resolves_to_user(self, client):
        _signup(client)
        resp = client.post("/auth/login", json={"email": "carol@feedmail.com", "password": "hunter22"})
        assert resp.status_code == 200
        token = resp.get_json()["token"]

        resp = client.get("/auth/status", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 200
        assert resp.get_json() == {"status": DEFAULT_STATUS}

    def test_wrong_password(self, client):
        _signup(client)
        resp = client.post("/auth/login", json={"email": "carol@feedmail.com", "password": "nope-nope"})
        assert resp.status_code == 401
        assert resp.get_json()["message"] == "Wrong email or password."

    def test_unknown_email(self, client):
        resp = client.post("/auth/login", json={"email": "ghost@feedmail.com", "password": "whatever"})
        assert resp.status_code == 401


class TestStatus:

    def test_update(self, client, alice, auth_header):
        resp = client.patch("/auth/status", json={"status": "Busy coding"}, headers=auth_header(alice))
        assert resp.status_code == 200
        assert client.get("/auth/status", headers=auth_header(alice)).get_json() == {"status": "Busy coding"}

    def test_empty_status(self, client, alice, auth_header):
        resp = client.patch("/auth/status", json={"status": "  "}, headers=auth_header(alice))
        assert resp.status_code == 422


class TestTokens:

    def test_round_trip(self, app):
        with app.app_context():
            assert verify_token(issue_token(7)) == 7

    def test_tampered(self, app):
        with app.app_context():
            token = issue_token(7)
            assert verify_token(token[:-2] + "xx") is None

    def test_expired(self, app):
        app.config["TOKEN_MAX_AGE"] = -1
        with app.app_context():
            assert verify_token(issue_token(7)) is None

    def test_bad_scheme(self, client, alice, app):
        with app.app_context():
            token = issue_token(alice)
        resp = client.get("/auth/status", headers={"Authorization": f"Basic {token}"})
        assert resp.status_code == 401
