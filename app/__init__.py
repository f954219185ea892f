"""
Feed backend – Flask application factory.
Posts, likes and comments with real-time fan-out to connected clients.
"""
import logging
import os
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException
from app.config import config
from app.errors import FeedError, InternalError, UnauthorizedError
from app.extensions import db, login_manager, limiter, migrate
from app.utils.broadcast import Broadcaster
from app.utils.images import ImageStore

log = logging.getLogger(__name__)


def create_app(config_name: str = "default", overrides: dict = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config[config_name])
    if overrides:
        app.config.update(overrides)

    _configure_logging(app)

    # Ensure instance directory exists (SQLite lives here)
    os.makedirs(app.instance_path, exist_ok=True)

    # ── Initialise extensions ────────────────────────────────────────────────
    db.init_app(app)
    login_manager.init_app(app)
    limiter.init_app(app)
    migrate.init_app(app, db)

    if app.config.get("TALISMAN_ENABLED"):
        from flask_talisman import Talisman
        Talisman(app, **app.config.get("TALISMAN_CONFIG", {}))

    # ── Feed collaborators (injected into FeedService per request) ───────────
    app.extensions["broadcaster"] = Broadcaster(queue_size=app.config["BROADCAST_QUEUE_SIZE"])
    app.extensions["image_store"] = ImageStore(
        app.config["UPLOAD_FOLDER"],
        app.config["ALLOWED_IMAGE_EXTENSIONS"],
    )

    # ── Register blueprints ──────────────────────────────────────────────────
    from app.blueprints.auth import auth_bp
    from app.blueprints.feed import feed_bp
    from app.blueprints.events import events_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(feed_bp)
    app.register_blueprint(events_bp)

    _register_auth()
    _register_error_handlers(app)

    # ── Database ─────────────────────────────────────────────────────────────
    with app.app_context():
        # Register all models with SQLAlchemy before create_all().
        # Using importlib avoids the "import app.models" pattern which would
        # silently shadow the local 'app' Flask-instance variable with the module.
        import importlib
        importlib.import_module("app.models")
        db.create_all()

    return app


# ── Logging ──────────────────────────────────────────────────────────────────
def _configure_logging(app: Flask) -> None:
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    if not logging.getLogger().handlers:
        logging.basicConfig(format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    logging.getLogger("app").setLevel(level)


# ── Identity resolution ──────────────────────────────────────────────────────
def _register_auth() -> None:
    """Resolve 'Authorization: Bearer <token>' to the current user on every request."""
    from app.models.user import User
    from app.utils.tokens import user_from_authorization

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    @login_manager.request_loader
    def load_user_from_request(req):
        return user_from_authorization(req.headers.get("Authorization"))

    @login_manager.unauthorized_handler
    def unauthorized():
        err = UnauthorizedError()
        return jsonify(err.to_dict()), err.status_code


# ── Error handlers ───────────────────────────────────────────────────────────
def _register_error_handlers(app: Flask) -> None:
    """Render every failure as {"message", "statusCode"}."""

    @app.errorhandler(FeedError)
    def feed_error(e):
        db.session.rollback()
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(HTTPException)
    def http_error(e):
        return jsonify(message=e.description, statusCode=e.code), e.code

    @app.errorhandler(Exception)
    def internal_error(e):
        db.session.rollback()
        log.exception("Unhandled error")
        err = InternalError()
        return jsonify(err.to_dict()), err.status_code
