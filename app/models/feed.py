"""Social feed models — Post, Comment and the post_likes association."""
from datetime import datetime, timezone
from app.extensions import db


def _utcnow():
    return datetime.now(timezone.utc)


# A like is one row here, so Post.likes and User.likes can never disagree and
# the composite primary key rejects a second like by the same user.
post_likes = db.Table(
    "post_likes",
    db.Column("post_id", db.Integer, db.ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True),
    db.Column("user_id", db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)


class Post(db.Model):
    __tablename__ = "posts"

    id         = db.Column(db.Integer, primary_key=True)
    title      = db.Column(db.String(200), nullable=False)
    content    = db.Column(db.Text, nullable=False)
    image_url  = db.Column(db.String(500), nullable=False)
    creator_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=_utcnow, nullable=False, index=True)
    updated_at = db.Column(db.DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)

    creator  = db.relationship("User", back_populates="posts", foreign_keys=[creator_id])
    likes    = db.relationship("User", secondary=post_likes, back_populates="likes",
                               order_by="User.id")
    comments = db.relationship("Comment", back_populates="post", cascade="all, delete-orphan",
                               order_by="Comment.id")

    def is_liked_by(self, user) -> bool:
        return any(u.id == user.id for u in self.likes)

    def to_dict(self) -> dict:
        return {
            "id":        self.id,
            "title":     self.title,
            "content":   self.content,
            "imageUrl":  self.image_url,
            "creator":   self.creator.projection(),
            "likes":     [u.id for u in self.likes],
            "comments":  [c.id for c in self.comments],
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }

    def __repr__(self) -> str:
        return f"<Post {self.id} by={self.creator_id}>"


class Comment(db.Model):
    """A comment on a post.

    user_name is a snapshot of the author's name at creation time; it is not
    refreshed when the author later renames themselves.
    """
    __tablename__ = "comments"

    id         = db.Column(db.Integer, primary_key=True)
    body       = db.Column(db.String(1000), nullable=False)
    user_id    = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    user_name  = db.Column(db.String(64), nullable=False)
    post_id    = db.Column(db.Integer, db.ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=_utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)

    post   = db.relationship("Post", back_populates="comments")
    author = db.relationship("User", back_populates="comments", foreign_keys=[user_id])

    def to_dict(self) -> dict:
        return {
            "id":        self.id,
            "comment":   self.body,
            "user":      {"id": self.user_id, "name": self.user_name},
            "post":      self.post_id,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }

    def __repr__(self) -> str:
        return f"<Comment {self.id} post={self.post_id}>"
