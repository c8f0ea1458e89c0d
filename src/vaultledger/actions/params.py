"""Parameter extraction for named actions.

Every helper raises ValidationError, so a malformed parameter bag reaches the
caller as a failed ActionResult instead of an exception.
"""

from datetime import date
from typing import Any, Optional

from vaultledger.domain.errors import ValidationError
from vaultledger.utils.amount_parser import to_cents
from vaultledger.utils.date_parser import parse_date


def _missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def require(params: dict[str, Any], *names: str) -> None:
    """Check that each named parameter is present and non-empty."""
    for name in names:
        if _missing(params.get(name)):
            raise ValidationError(f"Missing required parameter: {name}.")


def optional_text(params: dict[str, Any], name: str) -> Optional[str]:
    value = params.get(name)
    if _missing(value):
        return None
    return str(value).strip()


def optional_amount(params: dict[str, Any], name: str) -> Optional[int]:
    """Convert a major-unit amount parameter to cents, or None if absent."""
    value = params.get(name)
    if _missing(value):
        return None
    try:
        return to_cents(value)
    except ValueError:
        raise ValidationError(f"Invalid amount for {name}: '{value}'.")


def require_amount(params: dict[str, Any], name: str) -> int:
    require(params, name)
    return optional_amount(params, name)


def optional_date(params: dict[str, Any], name: str) -> Optional[date]:
    value = params.get(name)
    if _missing(value):
        return None
    try:
        return parse_date(value)
    except ValueError:
        raise ValidationError(f"Invalid date for {name}: '{value}'.")


def optional_enum(params: dict[str, Any], name: str, enum_type):
    """Match a parameter against an enum's values, ignoring case."""
    text = optional_text(params, name)
    if text is None:
        return None
    for member in enum_type:
        if member.value.lower() == text.lower():
            return member
    allowed = ", ".join(member.value for member in enum_type)
    raise ValidationError(f"Invalid {name} '{text}'. Expected one of: {allowed}.")
