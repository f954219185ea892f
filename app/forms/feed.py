from flask_wtf import FlaskForm
from wtforms import StringField, TextAreaField
from wtforms.validators import DataRequired, Length

from app.utils.feed_service import TITLE_MIN_LENGTH, CONTENT_MIN_LENGTH


def strip_whitespace(value):
    return value.strip() if isinstance(value, str) else value


class ApiForm(FlaskForm):
    """Base for API forms. Requests carry a bearer token, so there is no CSRF field."""
    class Meta:
        csrf = False


class PostForm(ApiForm):
    title = StringField(
        "Title",
        filters=[strip_whitespace],
        validators=[DataRequired(), Length(min=TITLE_MIN_LENGTH, max=200)],
    )
    content = TextAreaField(
        "Content",
        filters=[strip_whitespace],
        validators=[DataRequired(), Length(min=CONTENT_MIN_LENGTH)],
    )


class CommentForm(ApiForm):
    comment = TextAreaField(
        "Comment",
        filters=[strip_whitespace],
        validators=[DataRequired(message="Comment cannot be empty."), Length(max=1000)],
    )
