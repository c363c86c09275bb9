"""Clean free-text fields before they are stored."""

import bleach

from app.core.exceptions import ValidationError

# Matches users.full_name
NAME_MAX_LENGTH = 150


def sanitize_name(value: str) -> str:
    """
    Strip markup and collapse whitespace in a display name.

    Names are shown on receipts and in the staff list, so HTML is dropped
    rather than escaped. Raises ValidationError if nothing printable is left.
    """
    cleaned = bleach.clean(value or "", tags=[], strip=True)
    cleaned = " ".join(cleaned.split())[:NAME_MAX_LENGTH]
    if not cleaned:
        raise ValidationError("Full name must not be empty", errors=[
            {"field": "full_name", "message": "Full name must not be empty"}
        ])
    return cleaned
