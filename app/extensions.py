"""Flask extension singletons, initialised in create_app()."""
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_login import LoginManager
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy

db            = SQLAlchemy()
login_manager = LoginManager()
limiter       = Limiter(key_func=get_remote_address)
migrate       = Migrate()
