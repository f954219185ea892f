"""
Feed service — the post / like / comment lifecycle.

Every mutating operation:
  1. validates its input and checks existence and ownership,
  2. writes all affected rows in ONE db.session transaction,
  3. commits, and only then
  4. broadcasts the change through the injected Broadcaster.

A failure in steps 1-3 rolls the session back and broadcasts nothing.
Broadcast and image-deletion failures are logged and swallowed.

Operations return plain dicts in the API's wire format so blueprints can
jsonify them directly.
"""
import logging

from flask import current_app

from app.errors import (
    ValidationError,
    MissingResourceError,
    NotFoundError,
    ForbiddenError,
)
from app.extensions import db
from app.models.feed import Post, Comment
from app.models.user import User
from app.utils.broadcast import TOPIC_POSTS, TOPIC_POST, TOPIC_COMMENTS

log = logging.getLogger(__name__)

TITLE_MIN_LENGTH   = 5
CONTENT_MIN_LENGTH = 5

LIKE   = "like"
UNLIKE = "unlike"


# ── Input helpers ─────────────────────────────────────────────────────────────

def normalize_page(raw) -> int:
    """Return raw as a positive int page number, falling back to 1."""
    try:
        page = int(raw)
    except (TypeError, ValueError):
        return 1
    return page if page >= 1 else 1


def _validate_post_fields(title: str, content: str) -> tuple[str, str]:
    title   = (title or "").strip()
    content = (content or "").strip()
    errors = {}
    if len(title) < TITLE_MIN_LENGTH:
        errors["title"] = [f"Title must be at least {TITLE_MIN_LENGTH} characters."]
    if len(content) < CONTENT_MIN_LENGTH:
        errors["content"] = [f"Content must be at least {CONTENT_MIN_LENGTH} characters."]
    if errors:
        raise ValidationError(data=errors)
    return title, content


def _validate_comment(text: str) -> str:
    text = (text or "").strip()
    if not text:
        raise ValidationError(data={"comment": ["Comment cannot be empty."]})
    return text


def _likers(post: Post) -> list[dict]:
    return [u.projection() for u in post.likes]


# ── Service ───────────────────────────────────────────────────────────────────

class FeedService:

    def __init__(self, broadcaster, images):
        self.broadcaster = broadcaster
        self.images = images

    # ── Lookups ───────────────────────────────────────────────────────────────

    def _get_user(self, user_id: int) -> User:
        user = db.session.get(User, user_id)
        if user is None:
            raise NotFoundError("Could not find user.")
        return user

    def _get_post(self, post_id: int) -> Post:
        post = db.session.get(Post, post_id)
        if post is None:
            raise NotFoundError("Could not find post.")
        return post

    def _get_comment(self, comment_id: int) -> Comment:
        comment = db.session.get(Comment, comment_id)
        if comment is None:
            raise NotFoundError("Could not find comment.")
        return comment

    def _commit(self) -> None:
        try:
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

    def _broadcast(self, topic: str, data: dict) -> None:
        try:
            self.broadcaster.emit(topic, data)
        except Exception:
            log.exception("Broadcast of %s/%s failed", topic, data.get("action"))

    def _discard_image(self, image_url: str) -> None:
        try:
            self.images.delete(image_url)
        except Exception:
            log.exception("Image cleanup failed for %s", image_url)

    # ── 4.1 Listing ───────────────────────────────────────────────────────────

    def list_posts(self, user_id: int, page=1, page_size: int = None) -> dict:
        """One page of the feed, newest first, plus the viewer's liked post ids.

        page_size defaults to the ITEMS_PER_PAGE setting.
        """
        page = normalize_page(page)
        if page_size is None:
            page_size = current_app.config["ITEMS_PER_PAGE"]
        user = self._get_user(user_id)

        total  = Post.query.count()
        offset = (page - 1) * page_size
        # pages past the end never reach the database (huge offsets overflow SQLite)
        posts = []
        if offset < total:
            posts = (
                Post.query
                .order_by(Post.created_at.desc(), Post.id.desc())
                .offset(offset)
                .limit(page_size)
                .all()
            )
        return {
            "posts":      [p.to_dict() for p in posts],
            "totalItems": total,
            "likedPosts": user.liked_post_ids,
        }

    # ── 4.2 Create ────────────────────────────────────────────────────────────

    def create_post(self, user_id: int, title: str, content: str, image) -> dict:
        title, content = _validate_post_fields(title, content)
        if not self.images.is_allowed(image):
            raise MissingResourceError("No image provided.")
        creator = self._get_user(user_id)

        image_url = self.images.save(image)
        try:
            post = Post(title=title, content=content, image_url=image_url, creator=creator)
            db.session.add(post)
            self._commit()
        except Exception:
            self._discard_image(image_url)
            raise

        data = post.to_dict()
        self._broadcast(TOPIC_POSTS, {"action": "create", "post": data})
        return {"post": data, "creator": creator.projection()}

    # ── 4.3 Detail ────────────────────────────────────────────────────────────

    def get_post(self, post_id: int) -> dict:
        post = self._get_post(post_id)
        comments = (
            Comment.query
            .filter_by(post_id=post.id)
            .order_by(Comment.created_at.desc(), Comment.id.desc())
            .all()
        )
        return {
            "post":     post.to_dict(),
            "likers":   _likers(post),
            "comments": [c.to_dict() for c in comments],
        }

    # ── 4.4 Update ────────────────────────────────────────────────────────────

    def update_post(self, user_id: int, post_id: int, title: str, content: str,
                    image=None, image_url: str = None) -> dict:
        """Replace title/content and, optionally, the image.

        Either a new upload (image) or the post's current reference
        (image_url) must be supplied; a post cannot adopt another stored image.
        """
        title, content = _validate_post_fields(title, content)
        has_upload = self.images.is_allowed(image)
        if not has_upload and not image_url:
            raise MissingResourceError("No file picked.")

        post = self._get_post(post_id)
        if post.creator_id != user_id:
            raise ForbiddenError()

        old_url = post.image_url
        if not has_upload and image_url != old_url:
            raise ValidationError(data={"image": ["Image does not belong to this post."]})
        new_url = self.images.save(image) if has_upload else image_url

        try:
            post.title     = title
            post.content   = content
            post.image_url = new_url
            self._commit()
        except Exception:
            if has_upload:
                self._discard_image(new_url)
            raise

        if new_url != old_url:
            self._discard_image(old_url)

        data = post.to_dict()
        self._broadcast(TOPIC_POSTS, {"action": "update", "post": data})
        self._broadcast(TOPIC_POST,  {"action": "update", "post": data})
        return {"post": data}

    # ── 4.5 Delete ────────────────────────────────────────────────────────────

    def delete_post(self, user_id: int, post_id: int) -> dict:
        """Delete a post together with its likes and comments."""
        post = self._get_post(post_id)
        if post.creator_id != user_id:
            raise ForbiddenError()

        image_url = post.image_url
        db.session.delete(post)
        self._commit()
        self._discard_image(image_url)

        self._broadcast(TOPIC_POSTS, {"action": "delete", "post": post_id})
        return {"post": post_id}

    # ── 4.6 Like / unlike ─────────────────────────────────────────────────────

    def toggle_like(self, user_id: int, post_id: int, flag: str) -> dict:
        """Apply flag ("like" | "unlike") for user_id on post_id.

        Liking twice or unliking a post that was never liked leaves the
        stored likes unchanged. Any other flag is accepted and ignored.
        """
        post = self._get_post(post_id)
        user = self._get_user(user_id)
        already = post.is_liked_by(user)

        if flag not in (LIKE, UNLIKE):
            log.warning("Ignoring unknown like flag %r from user %s on post %s",
                        flag, user_id, post_id)
            return {
                "post":      post.to_dict(),
                "likers":    _likers(post),
                "userLikes": user.liked_post_ids,
                "liked":     already,
            }

        if flag == LIKE and not already:
            post.likes.append(user)
        elif flag == UNLIKE and already:
            post.likes.remove(user)
        self._commit()

        data       = post.to_dict()
        likers     = _likers(post)
        user_likes = user.liked_post_ids
        self._broadcast(TOPIC_POSTS, {
            "action":    "like",
            "post":      data,
            "userId":    user_id,
            "userLikes": user_likes,
        })
        self._broadcast(TOPIC_POST, {"action": "like", "likers": likers})
        return {
            "post":      data,
            "likers":    likers,
            "userLikes": user_likes,
            "liked":     flag == LIKE,
        }

    # ── 4.7 Comment create ────────────────────────────────────────────────────

    def create_comment(self, user_id: int, post_id: int, text: str) -> dict:
        text = _validate_comment(text)
        post = self._get_post(post_id)
        user = self._get_user(user_id)

        comment = Comment(body=text, author=user, user_name=user.name, post=post)
        db.session.add(comment)
        self._commit()

        data = comment.to_dict()
        self._broadcast(TOPIC_COMMENTS, {"action": "create", "comment": data})
        return {"comment": data}

    # ── 4.8 Comment edit ──────────────────────────────────────────────────────

    def edit_comment(self, user_id: int, comment_id: int, text: str) -> dict:
        text = _validate_comment(text)
        comment = self._get_comment(comment_id)
        if comment.user_id != user_id:
            raise ForbiddenError()

        comment.body = text
        self._commit()

        data = comment.to_dict()
        self._broadcast(TOPIC_COMMENTS, {"action": "update", "comment": data})
        return {"comment": data}

    # ── 4.9 Comment delete ────────────────────────────────────────────────────

    def delete_comment(self, user_id: int, comment_id: int) -> dict:
        comment = self._get_comment(comment_id)
        if comment.user_id != user_id:
            raise ForbiddenError()

        db.session.delete(comment)
        self._commit()

        self._broadcast(TOPIC_COMMENTS, {"action": "delete", "comment": comment_id})
        return {"comment": comment_id}
