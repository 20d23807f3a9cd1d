"""
Form validation for the account pages.

Every validator is pure and returns a dict of field name -> error message.
An empty dict means the input is valid.
"""

from typing import Dict

from padel_app.config import MIN_PASSWORD_LENGTH
from padel_app.utils import looks_like_email

NAME_REQUIRED = "Name is required."
NAME_HAS_SPACES = "Name cannot contain spaces."
INVALID_EMAIL = "The e-mail address is not valid."
PASSWORD_TOO_SHORT = f"Password must be at least {MIN_PASSWORD_LENGTH} characters."
PASSWORDS_DONT_MATCH = "Passwords do not match."


def _check_email(email: str, errors: Dict[str, str]) -> None:
    if not looks_like_email(email):
        errors["email"] = INVALID_EMAIL


def _check_password(password: str, errors: Dict[str, str]) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        errors["password"] = PASSWORD_TOO_SHORT


def validate_name(name: str) -> str | None:
    """Return the error for a player name, or None if it is acceptable."""
    if name.strip() == "":
        return NAME_REQUIRED
    if any(ch.isspace() for ch in name):
        return NAME_HAS_SPACES
    return None


def validate_sign_up(name: str, email: str, password: str, confirm_password: str) -> Dict[str, str]:
    errors = {}

    name_error = validate_name(name)
    if name_error:
        errors["name"] = name_error

    _check_email(email, errors)
    _check_password(password, errors)

    if password != confirm_password:
        errors["confirm_password"] = PASSWORDS_DONT_MATCH

    return errors


def validate_sign_in(email: str, password: str) -> Dict[str, str]:
    errors = {}
    _check_email(email, errors)
    _check_password(password, errors)
    return errors


def validate_reset_email(email: str) -> Dict[str, str]:
    errors = {}
    _check_email(email, errors)
    return errors
