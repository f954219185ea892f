"""
Bearer tokens: signed, time-limited user ids.

Tokens are issued by /auth/login and resolved on every request by the
Flask-Login request_loader registered in create_app().
"""
from flask import current_app
from itsdangerous import URLSafeTimedSerializer, BadSignature, SignatureExpired

_SALT = "feed-auth-token"


def _serializer() -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(current_app.config["SECRET_KEY"], salt=_SALT)


def issue_token(user_id: int) -> str:
    return _serializer().dumps({"uid": user_id})


def verify_token(token: str) -> int | None:
    """Return the user id inside token, or None if it is forged, malformed or expired."""
    max_age = current_app.config.get("TOKEN_MAX_AGE")
    try:
        payload = _serializer().loads(token, max_age=max_age)
    except (SignatureExpired, BadSignature):
        return None
    uid = payload.get("uid") if isinstance(payload, dict) else None
    return uid if isinstance(uid, int) else None


def user_from_authorization(header: str | None):
    """Resolve an 'Authorization: Bearer <token>' header to a User, or None."""
    if not header:
        return None
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    uid = verify_token(token.strip())
    if uid is None:
        return None
    from app.extensions import db
    from app.models.user import User
    return db.session.get(User, uid)
