from wtforms import StringField, PasswordField, EmailField
from wtforms.validators import DataRequired, Length, Email

from app.forms.feed import ApiForm, strip_whitespace


class SignupForm(ApiForm):
    name = StringField(
        "Name",
        filters=[strip_whitespace],
        validators=[DataRequired(), Length(1, 64)],
    )
    email = EmailField(
        "Email Address",
        filters=[strip_whitespace],
        validators=[DataRequired(), Email(), Length(5, 120)],
    )
    password = PasswordField(
        "Password",
        validators=[
            DataRequired(),
            Length(5, 128, message="Password must be at least 5 characters."),
        ],
    )


class LoginForm(ApiForm):
    email = EmailField("Email Address", filters=[strip_whitespace], validators=[DataRequired(), Email()])
    password = PasswordField("Password", validators=[DataRequired()])


class StatusForm(ApiForm):
    status = StringField(
        "Status",
        filters=[strip_whitespace],
        validators=[DataRequired(message="Status cannot be empty."), Length(max=200)],
    )
