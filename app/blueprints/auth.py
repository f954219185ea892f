"""
Accounts blueprint.

PUT   /auth/signup  – create an account
POST  /auth/login   – exchange email + password for a bearer token
GET   /auth/status  – current user's status text
PATCH /auth/status  – replace current user's status text
"""
import logging

from flask import Blueprint, current_app, jsonify
from flask_login import login_required, current_user

from app.errors import ValidationError, UnauthorizedError
from app.extensions import db, limiter
from app.models.user import User
from app.utils.helpers import validate_form
from app.utils.tokens import issue_token

log = logging.getLogger(__name__)
auth_bp = Blueprint("auth", __name__, url_prefix="/auth")


@auth_bp.route("/signup", methods=["PUT"])
def signup():
    from app.forms.auth import SignupForm

    form  = validate_form(SignupForm)
    email = form.email.data.lower()
    if User.query.filter_by(email=email).first():
        raise ValidationError(data={"email": ["E-mail address already exists."]})

    user = User(name=form.name.data, email=email)
    user.set_password(form.password.data)
    db.session.add(user)
    db.session.commit()
    log.info("New account %s created", user.id)

    return jsonify(message="User created!", userId=user.id), 201


@auth_bp.route("/login", methods=["POST"])
@limiter.limit(lambda: current_app.config["LOGIN_RATE_LIMIT"])
def login():
    from app.forms.auth import LoginForm

    form = validate_form(LoginForm)
    user = User.query.filter_by(email=form.email.data.lower()).first()
    if user is None or not user.check_password(form.password.data):
        raise UnauthorizedError("Wrong email or password.")

    return jsonify(token=issue_token(user.id), userId=user.id)


@auth_bp.route("/status")
@login_required
def get_status():
    return jsonify(status=current_user.status)


@auth_bp.route("/status", methods=["PATCH"])
@login_required
def update_status():
    from app.forms.auth import StatusForm

    form = validate_form(StatusForm)
    current_user.status = form.status.data
    db.session.commit()
    return jsonify(message="User updated.", status=current_user.status)
