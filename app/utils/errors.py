"""
Application errors and their HTTP mapping.

Route handlers raise these; the handlers registered in ``main.py`` turn
them into the ``{"success": false, "message": ...}`` envelope.
"""

from typing import Any, Dict, Optional


class TaskboardError(Exception):
    """Base error carrying the message and HTTP status sent to the client."""

    status_code: int = 500

    def __init__(self, message: str = "Internal server error", status_code: Optional[int] = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"success": False, "message": self.message}


class ValidationError(TaskboardError):
    """Missing or malformed input."""

    status_code = 400

    def __init__(self, message: str = "Invalid input"):
        super().__init__(message)


class DuplicateEmail(TaskboardError):
    status_code = 400

    def __init__(self, message: str = "User already exists with this email"):
        super().__init__(message)


class InvalidCredentials(TaskboardError):
    """Wrong email or password. The message never says which one."""

    status_code = 400

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message)


class Unauthenticated(TaskboardError):
    status_code = 401

    def __init__(self, message: str = "Access token required"):
        super().__init__(message)


class InvalidToken(TaskboardError):
    status_code = 403

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message)


class ExpiredToken(InvalidToken):
    pass


class NotFound(TaskboardError):
    status_code = 404

    def __init__(self, message: str = "Not found"):
        super().__init__(message)


class InternalError(TaskboardError):
    status_code = 500
