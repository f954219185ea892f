# Import all models so SQLAlchemy can discover them for db.create_all()
# Order matters: association tables and FK targets must be imported before dependents.
from app.models.user import User, DEFAULT_STATUS
from app.models.feed import Post, Comment, post_likes

__all__ = [
    "User", "DEFAULT_STATUS",
    "Post", "Comment", "post_likes",
]
