"""
Error taxonomy for the feed API.

Every error carries the HTTP status it maps to; the handlers registered in
create_app() render them as {"message": ..., "statusCode": ...}.
"""


class FeedError(Exception):
    """Base class for all errors surfaced to API clients."""
    status_code = 500
    default_message = "An internal error occurred."

    def __init__(self, message: str = None, status_code: int = None, data=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        self.data = data

    def to_dict(self) -> dict:
        body = {"message": self.message, "statusCode": self.status_code}
        if self.data:
            body["data"] = self.data
        return body


class ValidationError(FeedError):
    status_code = 422
    default_message = "Validation failed, entered data is incorrect."


class MissingResourceError(FeedError):
    """A required attachment (the post image) was not supplied."""
    status_code = 422
    default_message = "No image provided."


class NotFoundError(FeedError):
    status_code = 404
    default_message = "Resource not found."


class ForbiddenError(FeedError):
    status_code = 403
    default_message = "Not authorized."


class UnauthorizedError(FeedError):
    status_code = 401
    default_message = "Not authenticated."


class InternalError(FeedError):
    status_code = 500
