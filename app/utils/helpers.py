"""
Miscellaneous helpers used across blueprints.
"""
from app.errors import ValidationError


def validate_form(form_cls):
    """
    Build form_cls from the current request and validate it.
    Raises ValidationError carrying the per-field messages on failure.
    """
    form = form_cls()
    if not form.validate():
        raise ValidationError(data=form.errors)
    return form
