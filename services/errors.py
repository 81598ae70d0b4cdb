"""
Errors raised by the API layer
"""
from typing import Optional

import requests


class ApiError(Exception):
    """A failed backend call, carrying a user-facing message"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class SessionExpiredError(ApiError):
    """The session check endpoint answered 401; tokens were cleared"""


class AuthenticationError(Exception):
    """Login rejected by panel rules (role or account status)"""


def extract_error_message(response: Optional[requests.Response]) -> str:
    """
    Best-effort message from an error response body.
    Handles:
      • {"message": "..."} bodies
      • FastAPI style {"detail": "..."} bodies
      • non-JSON bodies
    """
    if response is None:
        return "Network error"

    try:
        body = response.json()
    except ValueError:
        return "An error occurred"

    if isinstance(body, dict):
        message = body.get("message") or body.get("detail")
        if isinstance(message, list):
            # Validation errors come as a list of messages
            message = "; ".join(str(m.get("msg", m)) if isinstance(m, dict) else str(m) for m in message)
        if message:
            return str(message)
    return "An error occurred"
