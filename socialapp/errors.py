"""
Domain errors raised by the services.

Every error carries a single human readable message; the HTTP layer turns
them into ``400 {"error": message}`` responses.
"""

from typing import Optional


class AppError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    """Malformed or out of range input"""


class ConflictError(AppError):
    """State already satisfies the request, or a uniqueness violation"""


class NotFoundError(AppError):
    """Referenced entity does not exist"""


class SelfTargetError(AppError):
    """Actor targets themselves where that is not allowed"""


class FriendNotFoundError(AppError):
    """No accepted friendship between the two users"""


MAX_ID = 2147483647


def parse_id(value, error=ValidationError, missing: Optional[AppError] = None) -> int:
    """Parse a numeric path parameter.

    Only plain ASCII digits with an optional leading minus are numbers;
    anything else raises ``error``. Ids outside 1..MAX_ID cannot match a row,
    so they raise ``missing`` (the caller's not found error) when given.
    """
    text = str(value).strip()
    digits = text[1:] if text.startswith('-') else text
    if not (digits.isascii() and digits.isdecimal()):
        raise error('Parameter must be a number.')
    number = int(text)
    if missing is not None and not 1 <= number <= MAX_ID:
        raise missing
    return number
