import re
from typing import Any, Optional

from esign.core.exceptions import ValidationError

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

# Leading integer, surrounding whitespace ignored
_LEADING_INT_PATTERN = re.compile(r"\s*([+-]?\d+)")


def _label(operation: Optional[str]) -> str:
    return f"[{operation}] " if operation else ""


def require(
    value: Any,
    field_name: str,
    operation: Optional[str] = None,
    message: Optional[str] = None,
) -> Any:
    """
    Ensure a value is present.

    Empty strings, empty collections, None and zero all count as missing.

    Returns:
        The value unchanged

    Raises:
        ValidationError: If the value is missing
    """
    if not value:
        raise ValidationError(
            message or f"{_label(operation)}The {field_name} is required",
            operation=operation,
            field=field_name,
        )
    return value


def require_text(
    value: Any, field_name: str, operation: Optional[str] = None
) -> str:
    """
    Validate a required text field and return it stripped.

    Raises:
        ValidationError: If the value is missing, not a string or blank
    """
    require(value, field_name, operation)

    if not isinstance(value, str):
        raise ValidationError(
            f"{_label(operation)}The {field_name} must be a string",
            operation=operation,
            field=field_name,
        )

    value = value.strip()
    return require(value, field_name, operation)


def is_valid_email(email: Any) -> bool:
    """Check an email against the accepted address pattern."""
    return isinstance(email, str) and EMAIL_PATTERN.fullmatch(email) is not None


def validate_email(
    email: Any, operation: Optional[str] = None, field_name: str = "email"
) -> str:
    """
    Validate a required email address.

    The address is returned as given; no case folding is applied.

    Raises:
        ValidationError: If the email is missing or malformed
    """
    require(email, field_name, operation)

    if not is_valid_email(email):
        raise ValidationError(
            f"{_label(operation)}The {field_name} is not valid",
            operation=operation,
            field=field_name,
        )

    return email


def coerce_int(value: Any) -> Optional[int]:
    """
    Parse the leading integer of a value.

    Integers pass through, floats are truncated toward zero and strings
    contribute their leading run of digits (``"12abc"`` gives 12).
    Returns None when no integer can be read.
    """
    if isinstance(value, bool):
        return None

    if isinstance(value, int):
        return value

    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return None
        return int(value)

    if isinstance(value, str):
        match = _LEADING_INT_PATTERN.match(value)
        if match:
            return int(match.group(1))

    return None


def validate_id(
    value: Any, field_name: str = "ID", operation: Optional[str] = None
) -> int:
    """
    Validate an identifier and convert it to a non-zero integer.

    Args:
        value: Raw identifier (int or numeric string)
        field_name: Name of the field for error messages
        operation: Operation name used as message prefix

    Returns:
        Integer identifier

    Raises:
        ValidationError: If the identifier is missing, not numeric or zero
    """
    require(value, field_name, operation)

    coerced = coerce_int(value)
    if not coerced:
        raise ValidationError(
            f"{_label(operation)}The {field_name} must be a number",
            operation=operation,
            field=field_name,
        )

    return coerced
