"""
Application configuration.

Values are read from the environment; a local .env file is loaded first so
developers can keep DATABASE_URI / SECRET_KEY out of their shell profile.
"""
import os

from dotenv import load_dotenv

load_dotenv()

_BASE_DIR   = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
_DEFAULT_DB = "sqlite:///" + os.path.join(_BASE_DIR, "instance", "feed.db")


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.environ.get(name, default))
    except (TypeError, ValueError):
        return default


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-change-me")

    SQLALCHEMY_DATABASE_URI        = os.environ.get("DATABASE_URI", _DEFAULT_DB)
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # ── Feed ─────────────────────────────────────────────────────────────────
    ITEMS_PER_PAGE = _env_int("ITEMS_PER_PAGE", 2)

    # ── Images ───────────────────────────────────────────────────────────────
    UPLOAD_FOLDER            = os.environ.get("UPLOAD_FOLDER", os.path.join(_BASE_DIR, "images"))
    ALLOWED_IMAGE_EXTENSIONS = {"png", "jpg", "jpeg"}
    MAX_CONTENT_LENGTH       = _env_int("MAX_CONTENT_LENGTH", 8 * 1024 * 1024)

    # ── Auth tokens (seconds) ────────────────────────────────────────────────
    TOKEN_MAX_AGE = _env_int("TOKEN_MAX_AGE", 3600)

    # ── Real-time fan-out ────────────────────────────────────────────────────
    BROADCAST_QUEUE_SIZE = _env_int("BROADCAST_QUEUE_SIZE", 100)
    BROADCAST_KEEPALIVE  = _env_int("BROADCAST_KEEPALIVE", 15)

    # ── Rate limiting (Flask-Limiter) ────────────────────────────────────────
    RATELIMIT_ENABLED     = True
    RATELIMIT_STORAGE_URI = os.environ.get("RATELIMIT_STORAGE_URI", "memory://")
    LOGIN_RATE_LIMIT      = os.environ.get("LOGIN_RATE_LIMIT", "10 per minute")

    LOG_LEVEL        = os.environ.get("LOG_LEVEL", "INFO")
    TALISMAN_ENABLED = False


class DevelopmentConfig(Config):
    DEBUG     = True
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "DEBUG")


class TestingConfig(Config):
    TESTING                 = True
    SECRET_KEY              = "testing-secret"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    RATELIMIT_ENABLED       = False
    ITEMS_PER_PAGE          = 2
    BROADCAST_KEEPALIVE     = 1


class ProductionConfig(Config):
    TALISMAN_ENABLED = True
    TALISMAN_CONFIG  = {
        "force_https": True,
        "content_security_policy": None,
    }


config = {
    "development": DevelopmentConfig,
    "testing":     TestingConfig,
    "production":  ProductionConfig,
    "default":     DevelopmentConfig,
}
