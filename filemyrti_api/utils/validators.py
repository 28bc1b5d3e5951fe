import re
from typing import Optional

from pydantic import EmailStr, TypeAdapter, ValidationError

PHONE_MIN_DIGITS = 10
PHONE_MAX_DIGITS = 13

# Same rules as the EmailStr fields on the request schemas
_email_adapter = TypeAdapter(EmailStr)


def is_valid_email(email: str) -> bool:
    try:
        _email_adapter.validate_python(email)
    except ValidationError:
        return False
    return True


def clean_phone(phone: str) -> Optional[str]:
    """
    Strip everything but digits.

    Returns:
        The digits, or None when there are not 10-13 of them
    """
    digits = re.sub(r"\D", "", phone)
    if len(digits) < PHONE_MIN_DIGITS or len(digits) > PHONE_MAX_DIGITS:
        return None
    return digits


def normalize_slug(slug: Optional[str]) -> str:
    return slug.strip().lower() if slug else ""
