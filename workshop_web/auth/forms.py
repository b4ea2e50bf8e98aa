"""Field checks for the login, registration and profile forms.

Each validator returns ``{field: message}`` with at most one message per
field; an empty dict means the form can be submitted.
"""
import re

_EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")
_PHONE_PATTERN = re.compile(r"^[\d\s\-+()]+$")

MIN_PASSWORD_LENGTH = 8
MIN_NAME_LENGTH = 2


def _check_email(email: str) -> str | None:
    if not email.strip():
        return "Email is required"
    if not _EMAIL_PATTERN.search(email):
        return "Please enter a valid email address"
    return None


def _check_password_length(password: str) -> str | None:
    if not password:
        return "Password is required"
    if len(password) < MIN_PASSWORD_LENGTH:
        return f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
    return None


def validate_login_form(email: str, password: str) -> dict[str, str]:
    errors: dict[str, str] = {}
    if message := _check_email(email):
        errors["email"] = message
    if message := _check_password_length(password):
        errors["password"] = message
    return errors


def validate_register_form(
    name: str,
    email: str,
    phone: str,
    password: str,
    confirm_password: str,
) -> dict[str, str]:
    errors: dict[str, str] = {}

    if not name.strip():
        errors["name"] = "Full name is required"
    elif len(name.strip()) < MIN_NAME_LENGTH:
        errors["name"] = f"Name must be at least {MIN_NAME_LENGTH} characters long"

    if message := _check_email(email):
        errors["email"] = message

    if not phone.strip():
        errors["phone"] = "Phone number is required"
    elif not _PHONE_PATTERN.match(phone):
        errors["phone"] = "Please enter a valid phone number"

    if message := _check_password_length(password):
        errors["password"] = message
    elif not (any(c.islower() for c in password) and any(c.isupper() for c in password)):
        errors["password"] = "Password must contain both uppercase and lowercase letters"

    if not confirm_password:
        errors["confirm_password"] = "Please confirm your password"
    elif password != confirm_password:
        errors["confirm_password"] = "Passwords do not match"

    return errors


def validate_profile_form(password: str, confirm_password: str) -> str | None:
    """Profile edits only fail locally on a mismatched new password."""
    if password and password != confirm_password:
        return "Passwords do not match"
    return None
