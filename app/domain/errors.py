"""
Domain errors raised by the service layer.

Each error carries the HTTP status it maps to; the mapping itself happens at
the request boundary (route handlers and the error handlers registered in
``create_app``).
"""

from typing import Dict, List, Optional


class GramAppError(Exception):
    """Base class for errors the request layer knows how to render."""
    status_code = 500
    default_message = "Something went wrong"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class NotAuthenticated(GramAppError):
    """No signed-in user; the request layer redirects to the sign-in page."""
    status_code = 401
    default_message = "Please log in to access this page."


class NotFound(GramAppError):
    status_code = 404
    default_message = "The requested gram could not be found."


class Forbidden(GramAppError):
    """The signed-in user does not own the gram."""
    status_code = 403
    default_message = "You are not allowed to change this gram."


class ValidationError(GramAppError):
    status_code = 422
    default_message = "The gram could not be saved."

    def __init__(self, errors: Dict[str, List[str]], message: Optional[str] = None):
        super().__init__(message)
        self.errors = errors

    def full_messages(self) -> List[str]:
        return [msg for messages in self.errors.values() for msg in messages]


class StorageError(GramAppError):
    """The database did not store the record (for example its author is gone)."""
    status_code = 500
    default_message = "The record could not be saved."
