"""
Social feed blueprint.

GET    /posts?page=N                   – paginated feed, newest first
POST   /post                           – create post (multipart: title, content, image)
GET    /post/<id>                      – post detail with likers and comments
PUT    /post/<id>                      – update own post
DELETE /post/<id>                      – delete own post
POST   /post/like/<id>?flag=like|unlike – like / unlike
POST   /post/comments/<post_id>        – add a comment
PUT    /post/comments/<comment_id>     – edit own comment
DELETE /post/comments/<comment_id>     – delete own comment
GET    /images/<filename>              – stored post image
"""
from flask import Blueprint, current_app, jsonify, request, send_from_directory
from flask_login import login_required, current_user

from app.utils.helpers import validate_form
from app.utils.feed_service import FeedService

feed_bp = Blueprint("feed", __name__)

# ── helpers ───────────────────────────────────────────────────────────────────

def _service() -> FeedService:
    return FeedService(
        broadcaster=current_app.extensions["broadcaster"],
        images=current_app.extensions["image_store"],
    )


# ── Posts ─────────────────────────────────────────────────────────────────────

@feed_bp.route("/posts")
@login_required
def get_posts():
    result = _service().list_posts(
        current_user.id,
        page=request.args.get("page", 1),
        page_size=current_app.config["ITEMS_PER_PAGE"],
    )
    return jsonify(message="Fetched posts successfully", **result)


@feed_bp.route("/post", methods=["POST"])
@login_required
def create_post():
    from app.forms.feed import PostForm

    form = validate_form(PostForm)
    result = _service().create_post(
        current_user.id,
        form.title.data,
        form.content.data,
        request.files.get("image"),
    )
    return jsonify(message="Post created successfully", **result), 201


@feed_bp.route("/post/<int:post_id>")
@login_required
def get_post(post_id):
    result = _service().get_post(post_id)
    return jsonify(message="Post fetched", **result)


@feed_bp.route("/post/<int:post_id>", methods=["PUT"])
@login_required
def update_post(post_id):
    from app.forms.feed import PostForm

    form = validate_form(PostForm)
    # "image" is either a new upload or the post's current image_url
    existing = request.form.get("image")
    if existing is None and request.is_json:
        existing = (request.get_json(silent=True) or {}).get("image")
    result = _service().update_post(
        current_user.id,
        post_id,
        form.title.data,
        form.content.data,
        image=request.files.get("image"),
        image_url=existing,
    )
    return jsonify(message="Post updated!", **result)


@feed_bp.route("/post/<int:post_id>", methods=["DELETE"])
@login_required
def delete_post(post_id):
    _service().delete_post(current_user.id, post_id)
    return jsonify(message="Deleted post")


# ── Likes ─────────────────────────────────────────────────────────────────────

@feed_bp.route("/post/like/<int:post_id>", methods=["POST"])
@login_required
def toggle_like(post_id):
    result = _service().toggle_like(current_user.id, post_id, request.args.get("flag"))
    return jsonify(message="Likes updated", **result)


# ── Comments ──────────────────────────────────────────────────────────────────

@feed_bp.route("/post/comments/<int:post_id>", methods=["POST"])
@login_required
def add_comment(post_id):
    from app.forms.feed import CommentForm

    form = validate_form(CommentForm)
    result = _service().create_comment(current_user.id, post_id, form.comment.data)
    return jsonify(message="Comment created successfully", **result), 201


@feed_bp.route("/post/comments/<int:comment_id>", methods=["PUT"])
@login_required
def edit_comment(comment_id):
    from app.forms.feed import CommentForm

    form = validate_form(CommentForm)
    result = _service().edit_comment(current_user.id, comment_id, form.comment.data)
    return jsonify(message="Comment updated!", **result)


@feed_bp.route("/post/comments/<int:comment_id>", methods=["DELETE"])
@login_required
def delete_comment(comment_id):
    _service().delete_comment(current_user.id, comment_id)
    return jsonify(message="Deleted comment")


# ── Images ────────────────────────────────────────────────────────────────────

@feed_bp.route("/images/<path:filename>")
def image(filename):
    return send_from_directory(current_app.extensions["image_store"].folder, filename)
