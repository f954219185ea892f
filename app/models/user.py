from datetime import datetime, timezone
from flask_login import UserMixin
from argon2 import PasswordHasher
from argon2.exceptions import VerifyMismatchError, InvalidHashError, VerificationError
from app.extensions import db

_ph = PasswordHasher()

DEFAULT_STATUS = "I am new!"


class User(db.Model, UserMixin):
    __tablename__ = "users"

    id            = db.Column(db.Integer, primary_key=True)
    name          = db.Column(db.String(64),  nullable=False)
    email         = db.Column(db.String(120), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(512), nullable=False)
    status        = db.Column(db.String(200), default=DEFAULT_STATUS, nullable=False)
    created_at    = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))

    posts    = db.relationship("Post", back_populates="creator", lazy="dynamic",
                               foreign_keys="Post.creator_id")
    likes    = db.relationship("Post", secondary="post_likes", back_populates="likes",
                               order_by="Post.id")
    comments = db.relationship("Comment", back_populates="author", lazy="dynamic",
                               foreign_keys="Comment.user_id")

    # ── Password helpers ────────────────────────────────────────────────────
    def set_password(self, password: str) -> None:
        self.password_hash = _ph.hash(password)

    def check_password(self, password: str) -> bool:
        try:
            return _ph.verify(self.password_hash, password)
        except (VerifyMismatchError, InvalidHashError, VerificationError):
            return False

    # ── Feed helpers ────────────────────────────────────────────────────────
    @property
    def liked_post_ids(self) -> list[int]:
        return [p.id for p in self.likes]

    def projection(self) -> dict:
        """Minimal public identity: {id, name}."""
        return {"id": self.id, "name": self.name}

    def __repr__(self) -> str:
        return f"<User {self.email}>"
